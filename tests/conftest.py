import logging
import struct
import zlib

import pytest

SIGNATURE = b"\x89PNG\r\n\x1a\n"


def raw_chunk(chunk_type, data, crc=None):
    if crc is None:
        crc = zlib.crc32(chunk_type + data)
    return struct.pack(">I", len(data)) + chunk_type + data + struct.pack(">I", crc)


def minimal_png():
    # 1x1 RGBA, one filter byte + one pixel
    ihdr = struct.pack(">IIBBBBB", 1, 1, 8, 6, 0, 0, 0)
    idat = zlib.compress(b"\x00\xff\x00\x00\xff")
    return (
        SIGNATURE
        + raw_chunk(b"IHDR", ihdr)
        + raw_chunk(b"IDAT", idat)
        + raw_chunk(b"IEND", b"")
    )


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("pngmsg")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def png_bytes():
    return minimal_png()


@pytest.fixture
def png_path(tmp_path, png_bytes):
    path = tmp_path / "cover.png"
    path.write_bytes(png_bytes)
    return path
