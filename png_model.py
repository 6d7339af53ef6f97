from chunk_model import HEADER_SIZE, Chunk, ChunkType
from png_errors import ChunkNotFound, InvalidSignature, TrailingBytes
from png_logging import get_logger

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

logger = get_logger("png_model")


def type_code(chunk_type):
    """Raw 4 byte code for lookups; accepts ChunkType, bytes or str."""
    if isinstance(chunk_type, ChunkType):
        return chunk_type.as_bytes()
    if isinstance(chunk_type, str):
        return chunk_type.encode("utf-8")
    return bytes(chunk_type)


class Png:
    """Ordered chunk sequence of a whole PNG file.

    IHDR first and IEND last is expected but not enforced here.
    """

    signature = PNG_SIGNATURE

    def __init__(self, chunks=None):
        self._chunks = list(chunks) if chunks is not None else []

    @classmethod
    def parse(cls, buffer):
        if bytes(buffer[: len(PNG_SIGNATURE)]) != PNG_SIGNATURE:
            raise InvalidSignature("Not a valid PNG file", offset=0)

        chunks = []
        offset = len(PNG_SIGNATURE)
        while offset < len(buffer):
            remaining = len(buffer) - offset
            # too short for a length + type header
            if remaining < HEADER_SIZE:
                raise TrailingBytes(
                    f"{remaining} bytes left after the last chunk", offset=offset
                )
            # chunk errors carry the file offset of the failing chunk
            chunk, next_offset = Chunk.parse_from(buffer, offset)
            logger.debug(
                "chunk %s length %d at offset %d",
                chunk.chunk_type(),
                chunk.length(),
                offset,
            )
            chunks.append(chunk)
            offset = next_offset

        return cls(chunks)

    def as_bytes(self):
        return PNG_SIGNATURE + b"".join(chunk.as_bytes() for chunk in self._chunks)

    def append_chunk(self, chunk):
        self._chunks.append(chunk)

    def insert_chunk_before_end(self, chunk):
        if not self._chunks:
            self._chunks.append(chunk)
        else:
            self._chunks.insert(len(self._chunks) - 1, chunk)

    def remove_chunk(self, chunk_type):
        code = type_code(chunk_type)
        for i, chunk in enumerate(self._chunks):
            if chunk.chunk_type().as_bytes() == code:
                return self._chunks.pop(i)
        raise ChunkNotFound(
            f"no chunk of type {code.decode('latin-1')}", chunk_type=code
        )

    def chunk_by_type(self, chunk_type):
        code = type_code(chunk_type)
        return next(
            (c for c in self._chunks if c.chunk_type().as_bytes() == code), None
        )

    def chunks(self):
        return tuple(self._chunks)

    def __len__(self):
        return len(self._chunks)

    def __eq__(self, other):
        if isinstance(other, Png):
            return self._chunks == other._chunks
        return NotImplemented

    def __str__(self):
        return "\n".join(str(chunk) for chunk in self._chunks)
