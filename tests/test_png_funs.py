import types

import pytest

from chunk_model import Chunk, ChunkType
from png_errors import ChunkNotFound, InvalidChunkType, InvalidUtf8
from png_funs import (
    decode,
    decode_file,
    encode,
    encode_file,
    print_chunks,
    remove,
    remove_file,
    summarize_chunk,
)
from png_model import Png


def test_encode_decode(png_bytes):
    png = Png.parse(png_bytes)
    data = encode(png, "ruSt", "hello")
    assert decode(Png.parse(data), "ruSt") == "hello"
    assert decode(png, "ruSt") == "hello"


def test_encode_places_chunk_before_last(png_bytes):
    png = Png.parse(png_bytes)
    n = len(png)
    encode(png, "ruSt", "hello")
    assert len(png) == n + 1
    assert png.chunks()[n - 1].chunk_type().as_bytes() == b"ruSt"
    assert png.chunks()[-1].chunk_type().as_bytes() == b"IEND"


def test_encode_accepts_bytes(png_bytes):
    png = Png.parse(png_bytes)
    encode(png, b"ruSt", b"\x01\x02")
    assert png.chunk_by_type("ruSt").data() == b"\x01\x02"


@pytest.mark.parametrize("chunk_type", ["Ru1t", "Ru St", "Rust", "ru"])
def test_encode_invalid_type(png_bytes, chunk_type):
    png = Png.parse(png_bytes)
    with pytest.raises(InvalidChunkType):
        encode(png, chunk_type, "hello")
    assert len(png) == 3


def test_encode_twice_decode_first(png_bytes):
    png = Png.parse(png_bytes)
    encode(png, "ruSt", "first")
    encode(png, "ruSt", "second")
    assert decode(png, "ruSt") == "first"
    remove(png, "ruSt")
    assert decode(png, "ruSt") == "second"


def test_remove_then_decode(png_bytes):
    data = encode(Png.parse(png_bytes), "ruSt", "hello")
    data = remove(Png.parse(data), "ruSt")
    assert data == png_bytes
    with pytest.raises(ChunkNotFound):
        decode(Png.parse(data), "ruSt")


def test_remove_not_found(png_bytes):
    png = Png.parse(png_bytes)
    before = png.chunks()
    with pytest.raises(ChunkNotFound):
        remove(png, "zzZz")
    assert png.chunks() == before


def test_decode_not_found(png_bytes):
    with pytest.raises(ChunkNotFound):
        decode(Png.parse(png_bytes), "ruSt")


def test_decode_binary_payload(png_bytes):
    png = Png.parse(png_bytes)
    encode(png, "ruSt", b"\xff\xfe\xfd")
    with pytest.raises(InvalidUtf8):
        decode(png, "ruSt")


def test_print_chunks_is_lazy(png_bytes):
    png = Png.parse(png_bytes)
    encode(png, "ruSt", "hello")
    summaries = print_chunks(png)
    assert isinstance(summaries, types.GeneratorType)

    summaries = list(summaries)
    assert len(summaries) == 4
    assert summaries[0].startswith("Type:IHDR Length:13 critical public")
    assert "(image header)" in summaries[0]
    assert "binary data" in summaries[1]
    assert "Type:ruSt Length:5 ancillary private safe-to-copy (custom)" in summaries[2]
    assert "Data: 'hello'" in summaries[2]
    assert "<no data>" in summaries[3]


def test_summary_truncates_long_text():
    chunk = Chunk(ChunkType.from_string("ruSt"), b"a" * 100)
    summary = summarize_chunk(chunk, preview_chars=10)
    assert "'aaaaaaaaaa...'" in summary


def test_summary_binary_without_detection():
    chunk = Chunk(ChunkType.from_string("ruSt"), b"\x00\x01\x02")
    summary = summarize_chunk(chunk, detect_encoding=False)
    assert "Data: <binary data, 3 bytes>" in summary


def test_encode_file_in_place(png_path):
    encode_file(png_path, "ruSt", "hello")
    assert decode_file(png_path, "ruSt") == "hello"


def test_encode_file_to_output(tmp_path, png_path, png_bytes):
    output = tmp_path / "out.png"
    encode_file(png_path, "ruSt", "hello", output)
    assert png_path.read_bytes() == png_bytes
    assert decode_file(output, "ruSt") == "hello"


def test_remove_file(png_path, png_bytes):
    encode_file(png_path, "ruSt", "hello")
    removed = remove_file(png_path, "ruSt")
    assert removed.data_as_string() == "hello"
    assert png_path.read_bytes() == png_bytes


def test_remove_file_not_found_keeps_file(png_path, png_bytes):
    with pytest.raises(ChunkNotFound):
        remove_file(png_path, "ruSt")
    assert png_path.read_bytes() == png_bytes
