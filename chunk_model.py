import struct
import zlib

from png_errors import CrcMismatch, InvalidChunkType, InvalidUtf8, UnexpectedEof

# CC - critical chunk | AC - ancillary chunk
standard_chunk_types = {
    b"IHDR": "image header",  # CC
    b"PLTE": "palette",  # CC
    b"IDAT": "image data",  # CC
    b"IEND": "image trailer",  # CC
    b"sRGB": "standard RGB colour space",  # AC
    b"gAMA": "image gamma",  # AC
    b"pHYs": "physical pixel dimensions",  # AC
    b"sBIT": "significant bits",  # AC
    b"sPLT": "suggested palette",  # AC
    b"tIME": "last-modification time",  # AC
    b"cHRM": "primary chromaticities",  # AC
    b"tEXt": "textual data",  # AC
    b"zTXt": "compressed textual data",  # AC
    b"iTXt": "international textual data",  # AC
    b"bKGD": "background colour",  # AC
    b"hIST": "palette histogram",  # AC
    b"tRNS": "transparency",  # AC
    b"iCCP": "embedded ICC profile",  # AC
}

PROPERTY_BIT = 0b00100000

# length, type | crc
_HEADER = struct.Struct(">I4s")
_CRC = struct.Struct(">I")
HEADER_SIZE = _HEADER.size
# smallest possible chunk: empty data
MIN_CHUNK_SIZE = HEADER_SIZE + _CRC.size


class ChunkType:
    """Four byte PNG chunk type code.

    Bit 5 of every byte is a property flag, see
    http://www.libpng.org/pub/png/spec/1.2/PNG-Structure.html
    """

    def __init__(self, code):
        code = bytes(code)
        if len(code) != 4:
            raise InvalidChunkType(f"expected 4 bytes but found {len(code)}")
        self.code = code

    @classmethod
    def from_bytes(cls, raw):
        # any 4 byte pattern is stored, validity is queried separately
        return cls(raw)

    @classmethod
    def from_string(cls, text):
        raw = text.encode("utf-8")
        if len(raw) != 4:
            raise InvalidChunkType(f"expected 4 bytes but found {len(raw)}")
        if not all(cls.is_valid_byte(b) for b in raw):
            raise InvalidChunkType("contains non alphabetic characters", chunk_type=raw)
        return cls(raw)

    @staticmethod
    def is_valid_byte(byte):
        return 65 <= byte <= 90 or 97 <= byte <= 122

    def as_bytes(self):
        return self.code

    def is_critical(self):
        return self.code[0] & PROPERTY_BIT == 0

    def is_public(self):
        return self.code[1] & PROPERTY_BIT == 0

    def is_reserved_bit_valid(self):
        return self.code[2] & PROPERTY_BIT == 0

    def is_safe_to_copy(self):
        return self.code[3] & PROPERTY_BIT != 0

    def is_valid(self):
        return self.is_reserved_bit_valid() and all(
            self.is_valid_byte(b) for b in self.code
        )

    def __eq__(self, other):
        if isinstance(other, ChunkType):
            return self.code == other.code
        return NotImplemented

    def __hash__(self):
        return hash(self.code)

    def __str__(self):
        return self.code.decode("latin-1")

    def __repr__(self):
        return f"ChunkType({self.code!r})"


class Chunk:
    def __init__(self, chunk_type, data):
        self._chunk_type = chunk_type
        self._data = bytes(data)
        self._crc = zlib.crc32(self._data, zlib.crc32(chunk_type.as_bytes()))

    @classmethod
    def parse(cls, buffer):
        chunk, _ = cls.parse_from(buffer, 0)
        return chunk

    @classmethod
    def parse_from(cls, buffer, offset):
        """Parse the chunk starting at ``offset``.

        Returns the chunk and the offset just past its CRC. Checks run in
        wire order: framing, then CRC over type + data, then type validity,
        so a flipped bit anywhere in type or data reports ``CrcMismatch``.
        """
        available = len(buffer) - offset
        if available < MIN_CHUNK_SIZE:
            raise UnexpectedEof(
                f"at least {MIN_CHUNK_SIZE} bytes needed to read a chunk, "
                f"{available} available",
                offset=offset,
            )

        length, type_bytes = _HEADER.unpack_from(buffer, offset)
        data_start = offset + _HEADER.size
        data_end = data_start + length
        if data_end + _CRC.size > len(buffer):
            raise UnexpectedEof(
                f"chunk declares {length} data bytes, "
                f"only {len(buffer) - data_start - _CRC.size} available",
                offset=offset,
                chunk_type=type_bytes,
            )

        data = bytes(buffer[data_start:data_end])
        (stored_crc,) = _CRC.unpack_from(buffer, data_end)

        chunk = cls(ChunkType(type_bytes), data)
        if chunk.crc() != stored_crc:
            raise CrcMismatch(
                f"stored CRC {stored_crc:08x} does not match "
                f"calculated CRC {chunk.crc():08x}",
                offset=offset,
                chunk_type=type_bytes,
            )
        if not chunk.chunk_type().is_valid():
            raise InvalidChunkType(
                "invalid chunk type", offset=offset, chunk_type=type_bytes
            )
        return chunk, data_end + _CRC.size

    def length(self):
        return len(self._data)

    def chunk_type(self):
        return self._chunk_type

    def data(self):
        return self._data

    def crc(self):
        return self._crc

    def data_as_string(self):
        try:
            return self._data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidUtf8(
                f"chunk data is not valid UTF-8: {e.reason}",
                chunk_type=self._chunk_type.as_bytes(),
            ) from e

    def as_bytes(self):
        return b"".join(
            (
                _HEADER.pack(self.length(), self._chunk_type.as_bytes()),
                self._data,
                _CRC.pack(self._crc),
            )
        )

    def __eq__(self, other):
        if isinstance(other, Chunk):
            return self._chunk_type == other._chunk_type and self._data == other._data
        return NotImplemented

    def __str__(self):
        return (
            "Chunk {\n"
            f"  Length: {self.length()}\n"
            f"  Type: {self._chunk_type}\n"
            f"  Data: {len(self._data)} bytes\n"
            f"  Crc: {self._crc}\n"
            "}"
        )

    def __repr__(self):
        return f"Chunk({self._chunk_type!r}, length={self.length()})"
