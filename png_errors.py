class PngError(Exception):
    kind = "png_error"
    exit_code = 1

    def __init__(self, message, offset=None, chunk_type=None):
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.chunk_type = chunk_type

    def __str__(self):
        text = self.message
        if self.chunk_type is not None:
            text += f" [type {self.chunk_type!r}]"
        if self.offset is not None:
            text += f" [offset {self.offset}]"
        return text


class InvalidSignature(PngError):
    kind = "invalid_signature"
    exit_code = 2


class UnexpectedEof(PngError):
    kind = "unexpected_eof"
    exit_code = 3


class CrcMismatch(PngError):
    kind = "crc_mismatch"
    exit_code = 4


class InvalidChunkType(PngError):
    kind = "invalid_chunk_type"
    exit_code = 5


class TrailingBytes(PngError):
    kind = "trailing_bytes"
    exit_code = 6


class ChunkNotFound(PngError):
    kind = "chunk_not_found"
    exit_code = 7


class InvalidUtf8(PngError):
    kind = "invalid_utf8"
    exit_code = 8


class ConfigError(PngError):
    kind = "config"
    exit_code = 9
