# GLTFKit Container Codec: binary glTF (GLB) framing
#
# Layout (little-endian):
# - 12-byte header: magic 0x46546C67 ("glTF"), version 2, total length
# - chunks: 8-byte chunk header (payload length, type tag) followed by the payload
# - first chunk is JSON (padded with 0x20), optional second chunk is BIN (padded with 0x00)
#
# Notes:
# - Streams are binary file-like objects. read() is required; seek() is used only when
#   seekable() reports True, to skip over the JSON payload in locate_bin().
# - Nothing is buffered ahead of the caller: every read consumes exactly the bytes named.
# - Stream errors (OSError) propagate untouched.
#
# Public API:
# - is_container(stream) -> bool
# - locate_json(stream, origin=ChunkOrigin.START) -> int
# - locate_bin(stream, origin=ChunkOrigin.START) -> int | None
# - pack(document, blob=b"") -> bytes / pack_to(stream, document, blob=b"") -> int
# - unpack(stream) -> (Document, bytes) / unpack_bytes(data) -> (Document, bytes)

from __future__ import annotations

import io
import logging
import struct
from enum import Enum
from typing import BinaryIO, Optional, Tuple

from .document import Document
from .transcoder import decode, encode

logger = logging.getLogger(__name__)

MAGIC = 0x46546C67
VERSION = 2
CHUNK_JSON = 0x4E4F534A
CHUNK_BIN = 0x004E4942

HEADER = struct.Struct("<III")
CHUNK_HEADER = struct.Struct("<II")

JSON_PAD = b"\x20"
BIN_PAD = b"\x00"

MAX_LENGTH = 0xFFFFFFFF
DISCARD_STEP = 64 * 1024


class MalformedContainerError(Exception):
    """Raised when a GLB container violates the binary framing."""
    pass


class ChunkOrigin(Enum):
    """Where a locate_* call starts reading from."""
    START = "start"  # unread container, header first
    CURRENT = "current"  # positioned at the chunk header


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read up to size bytes, looping over short reads. Returns fewer bytes only at end of stream."""
    parts = []
    remaining = size
    while remaining > 0:
        data = stream.read(remaining)
        if not data:
            break
        parts.append(data)
        remaining -= len(data)
    return b"".join(parts)


def _read_chunk_header(stream: BinaryIO) -> Optional[Tuple[int, int]]:
    raw = _read_exact(stream, CHUNK_HEADER.size)
    if not raw:
        return None
    if len(raw) != CHUNK_HEADER.size:
        raise MalformedContainerError(f"Truncated chunk header ({len(raw)} of {CHUNK_HEADER.size} bytes)")
    return CHUNK_HEADER.unpack(raw)


def _skip(stream: BinaryIO, size: int) -> None:
    seekable = getattr(stream, "seekable", None)
    if seekable is not None and seekable():
        pos = stream.tell()
        end = stream.seek(0, io.SEEK_END)
        if pos + size > end:
            raise MalformedContainerError(f"Truncated JSON chunk ({pos + size - end} bytes missing)")
        stream.seek(pos + size, io.SEEK_SET)
        return
    remaining = size
    while remaining > 0:
        data = stream.read(min(remaining, DISCARD_STEP))
        if not data:
            raise MalformedContainerError(f"Truncated JSON chunk ({remaining} bytes missing)")
        remaining -= len(data)


def _padding(length: int) -> int:
    return (4 - length % 4) % 4


def is_container(stream: BinaryIO) -> bool:
    """
    Read the 12-byte header and report whether it is a version 2 GLB header.
    Never reads past the header; a short read returns False.
    """
    raw = _read_exact(stream, HEADER.size)
    if len(raw) != HEADER.size:
        return False
    magic, version, _length = HEADER.unpack(raw)
    return magic == MAGIC and version == VERSION


def locate_json(stream: BinaryIO, origin: ChunkOrigin = ChunkOrigin.START) -> int:
    """
    Position stream at the start of the JSON payload and return its (padded) length.

    With ChunkOrigin.START the container header is read and checked first; with
    ChunkOrigin.CURRENT the stream must already sit at the JSON chunk header.
    """
    if origin is ChunkOrigin.START:
        if not is_container(stream):
            raise MalformedContainerError("Not a GLB container (bad magic or version)")
    elif origin is not ChunkOrigin.CURRENT:
        raise ValueError(f"Invalid chunk origin: {origin!r}")
    header = _read_chunk_header(stream)
    if header is None:
        raise MalformedContainerError("Missing JSON chunk")
    length, tag = header
    if tag != CHUNK_JSON:
        raise MalformedContainerError(f"Expected JSON chunk, found type 0x{tag:08X}")
    if length == 0:
        raise MalformedContainerError("JSON chunk is empty")
    logger.debug(f"JSON chunk located: {length} bytes")
    return length


def locate_bin(stream: BinaryIO, origin: ChunkOrigin = ChunkOrigin.START) -> Optional[int]:
    """
    Position stream at the start of the BIN payload and return its (padded) length.

    With ChunkOrigin.START the header and JSON chunk are read and skipped first; with
    ChunkOrigin.CURRENT the stream must sit right after the JSON payload.
    Returns None when the stream ends cleanly where the BIN chunk header would be.
    A zero return is a present but empty BIN chunk.
    """
    if origin is ChunkOrigin.START:
        _skip(stream, locate_json(stream, ChunkOrigin.START))
    elif origin is not ChunkOrigin.CURRENT:
        raise ValueError(f"Invalid chunk origin: {origin!r}")
    header = _read_chunk_header(stream)
    if header is None:
        logger.debug("No BIN chunk present")
        return None
    length, tag = header
    if tag != CHUNK_BIN:
        raise MalformedContainerError(f"Expected BIN chunk, found type 0x{tag:08X}")
    logger.debug(f"BIN chunk located: {length} bytes")
    return length


def pack_to(stream: BinaryIO, document: Document, blob: bytes = b"") -> int:
    """
    Write document (and blob, if non-empty) to stream as a GLB container.
    Returns the total number of bytes written.
    """
    text = encode(document).encode("utf-8")
    json_pad = _padding(len(text))
    json_len = len(text) + json_pad
    total = HEADER.size + CHUNK_HEADER.size + json_len
    bin_len = 0
    if blob:
        bin_len = len(blob) + _padding(len(blob))
        total += CHUNK_HEADER.size + bin_len
    if total > MAX_LENGTH:
        raise MalformedContainerError(f"GLB length overflow ({total} bytes)")

    stream.write(HEADER.pack(MAGIC, VERSION, total))
    stream.write(CHUNK_HEADER.pack(json_len, CHUNK_JSON))
    stream.write(text)
    stream.write(JSON_PAD * json_pad)
    if blob:
        stream.write(CHUNK_HEADER.pack(bin_len, CHUNK_BIN))
        stream.write(blob)
        stream.write(BIN_PAD * (bin_len - len(blob)))
    logger.debug(f"Packed GLB: {total} bytes (json={json_len}, bin={bin_len})")
    return total


def pack(document: Document, blob: bytes = b"") -> bytes:
    """Return document (and blob, if non-empty) framed as a GLB container."""
    out = io.BytesIO()
    pack_to(out, document, blob)
    return out.getvalue()


def _embedded_length(document: Document) -> Optional[int]:
    """Declared non-negative byteLength of the GLB-stored buffer (buffer 0 without uri), if any."""
    buffers = document.buffers
    if not buffers:
        return None
    first = buffers[0]
    if first.uri is not None:
        return None
    length = first.byte_length
    if isinstance(length, bool) or not isinstance(length, int) or length < 0:
        return None
    return length


def unpack(stream: BinaryIO) -> Tuple[Document, bytes]:
    """
    Read a GLB container and return (document, blob).

    The blob is empty when there is no BIN chunk. When buffer 0 is the GLB-stored
    buffer, the padded chunk payload is cut back to its declared byteLength; a
    declared length larger than the chunk is an error. Otherwise the payload is
    returned as stored.
    """
    json_len = locate_json(stream, ChunkOrigin.START)
    text = _read_exact(stream, json_len)
    if len(text) != json_len:
        raise MalformedContainerError(f"Truncated JSON chunk ({len(text)} of {json_len} bytes)")
    document = decode(text)

    bin_len = locate_bin(stream, ChunkOrigin.CURRENT)
    if bin_len is None:
        return document, b""
    blob = _read_exact(stream, bin_len)
    if len(blob) != bin_len:
        raise MalformedContainerError(f"Truncated BIN chunk ({len(blob)} of {bin_len} bytes)")

    declared = _embedded_length(document)
    if declared is not None:
        if declared > bin_len:
            raise MalformedContainerError(
                f"buffers[0].byteLength ({declared}) exceeds BIN chunk length ({bin_len})"
            )
        if declared < bin_len:
            blob = blob[:declared]
    return document, blob


def unpack_bytes(data: bytes) -> Tuple[Document, bytes]:
    """unpack() over an in-memory container."""
    return unpack(io.BytesIO(data))


__all__ = [
    "MalformedContainerError",
    "ChunkOrigin",
    "MAGIC",
    "CHUNK_JSON",
    "CHUNK_BIN",
    "is_container",
    "locate_json",
    "locate_bin",
    "pack",
    "pack_to",
    "unpack",
    "unpack_bytes",
]
