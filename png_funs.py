import chardet

from chunk_model import Chunk, ChunkType, standard_chunk_types
from png_errors import ChunkNotFound, InvalidChunkType, InvalidUtf8
from png_logging import get_logger
from png_model import Png, type_code

logger = get_logger("png_funs")


def _valid_chunk_type(chunk_type):
    if isinstance(chunk_type, ChunkType):
        candidate = chunk_type
    elif isinstance(chunk_type, str):
        candidate = ChunkType.from_string(chunk_type)
    else:
        candidate = ChunkType.from_bytes(bytes(chunk_type))
    if not candidate.is_valid():
        raise InvalidChunkType(
            "chunk type must be 4 ASCII letters with the third one uppercase",
            chunk_type=candidate.as_bytes(),
        )
    return candidate


def encode(png, chunk_type, message):
    """Hide ``message`` in a new chunk placed just before the last chunk.

    Returns the serialized file.
    """
    if isinstance(message, str):
        message = message.encode("utf-8")
    chunk = Chunk(_valid_chunk_type(chunk_type), message)
    png.insert_chunk_before_end(chunk)
    logger.info("inserted %s chunk, %d bytes", chunk.chunk_type(), chunk.length())
    return png.as_bytes()


def decode(png, chunk_type):
    code = type_code(chunk_type)
    chunk = png.chunk_by_type(code)
    if chunk is None:
        raise ChunkNotFound(
            f"no chunk of type {code.decode('latin-1')}", chunk_type=code
        )
    return chunk.data_as_string()


def remove(png, chunk_type):
    """Drop the first chunk of ``chunk_type``; returns the serialized file."""
    removed = png.remove_chunk(chunk_type)
    logger.info("removed %s chunk, %d bytes", removed.chunk_type(), removed.length())
    return png.as_bytes()


def _printable(text):
    return all(ch.isprintable() or ch in "\r\n\t" for ch in text)


def _render_data(chunk, preview_chars, detect_encoding):
    data = chunk.data()
    if not data:
        return "<no data>"
    try:
        text = chunk.data_as_string()
    except InvalidUtf8:
        text = None
    if text is not None and _printable(text):
        if len(text) > preview_chars:
            text = text[:preview_chars] + "..."
        return repr(text)

    notice = f"<binary data, {len(data)} bytes"
    if detect_encoding:
        guess = chardet.detect(data)
        if guess["encoding"]:
            notice += f", chardet guess: {guess['encoding']} ({guess['confidence']:.2f})"
    return notice + ">"


def summarize_chunk(chunk, preview_chars=64, detect_encoding=True):
    chunk_type = chunk.chunk_type()
    flags = " ".join(
        (
            "critical" if chunk_type.is_critical() else "ancillary",
            "public" if chunk_type.is_public() else "private",
            "safe-to-copy" if chunk_type.is_safe_to_copy() else "unsafe-to-copy",
        )
    )
    name = standard_chunk_types.get(chunk_type.as_bytes(), "custom")
    return (
        f"Type:{chunk_type} Length:{chunk.length()} {flags} ({name})\n"
        f"  Data: {_render_data(chunk, preview_chars, detect_encoding)}"
    )


def print_chunks(png, preview_chars=64, detect_encoding=True):
    """Lazily yield one human readable summary per chunk, in file order."""
    for chunk in png.chunks():
        yield summarize_chunk(chunk, preview_chars, detect_encoding)


def read_png(path):
    with open(path, "rb") as file:
        return Png.parse(file.read())


def write_png(path, data):
    with open(path, "wb") as file:
        file.write(data)
    logger.info("wrote %d bytes to %s", len(data), path)


def encode_file(path, chunk_type, message, output=None):
    png = read_png(path)
    data = encode(png, chunk_type, message)
    write_png(output or path, data)
    return png


def decode_file(path, chunk_type):
    return decode(read_png(path), chunk_type)


def remove_file(path, chunk_type):
    png = read_png(path)
    removed = png.chunk_by_type(type_code(chunk_type))
    data = remove(png, chunk_type)
    write_png(path, data)
    return removed


def print_file(path, cfg):
    png = read_png(path)
    return print_chunks(
        png,
        preview_chars=cfg["print"]["preview_chars"],
        detect_encoding=cfg["print"]["detect_encoding"],
    )
