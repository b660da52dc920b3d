import io
import struct

import pytest

from gltfkit.core import container
from gltfkit.core.container import (
    CHUNK_BIN,
    CHUNK_JSON,
    MAGIC,
    ChunkOrigin,
    MalformedContainerError,
    is_container,
    locate_bin,
    locate_json,
    pack,
    pack_to,
    unpack,
    unpack_bytes,
)
from gltfkit.core.document import Asset, Buffer, Document
from gltfkit.core.transcoder import decode, encode


class NonSeekable(io.RawIOBase):
    """Forward-only stream that never returns more than `step` bytes per read."""

    def __init__(self, data, step=3):
        self._inner = io.BytesIO(data)
        self._step = step

    def readable(self):
        return True

    def seekable(self):
        return False

    def readinto(self, b):
        chunk = self._inner.read(min(len(b), self._step))
        b[: len(chunk)] = chunk
        return len(chunk)


STREAMS = [io.BytesIO, NonSeekable]


def make_document(blob_length=0, uri=None):
    doc = Document(asset=Asset(version="2.0"))
    if blob_length:
        doc.buffers = [Buffer(byte_length=blob_length, uri=uri)]
    return doc


def test_minimal_document_layout():
    data = pack(make_document())
    text = encode(make_document()).encode("utf-8")
    magic, version, length = struct.unpack_from("<III", data, 0)
    assert (magic, version, length) == (MAGIC, 2, len(data))
    json_len, tag = struct.unpack_from("<II", data, 12)
    assert tag == CHUNK_JSON
    assert json_len % 4 == 0
    assert data[20:20 + json_len] == text + b" " * (json_len - len(text))
    assert len(data) == 20 + json_len


@pytest.mark.parametrize("blob_length", range(0, 10))
def test_pack_unpack_round_trip(blob_length):
    blob = bytes(range(1, blob_length + 1))
    doc = make_document(blob_length)
    data = pack(doc, blob)
    assert len(data) % 4 == 0
    assert struct.unpack_from("<I", data, 8)[0] == len(data)

    out_doc, out_blob = unpack_bytes(data)
    assert out_doc == doc
    assert out_blob == blob


def test_pack_to_returns_total_length():
    out = io.BytesIO()
    total = pack_to(out, make_document(5), b"abcde")
    assert total == len(out.getvalue())
    assert out.getvalue() == pack(make_document(5), b"abcde")


def test_is_container():
    assert is_container(io.BytesIO(pack(make_document()))) is True
    assert is_container(io.BytesIO(encode(make_document()).encode("utf-8"))) is False
    assert is_container(io.BytesIO(b"glTF")) is False
    assert is_container(io.BytesIO(struct.pack("<III", MAGIC, 1, 12))) is False


def test_is_container_reads_only_the_header():
    stream = io.BytesIO(pack(make_document()))
    assert is_container(stream)
    assert stream.tell() == 12


@pytest.mark.parametrize("stream_type", STREAMS)
def test_locate_chunks_consume_stream_exactly(stream_type):
    blob = b"\x01\x02\x03\x04\x05"
    doc = make_document(len(blob))
    stream = stream_type(pack(doc, blob))

    json_len = locate_json(stream, ChunkOrigin.START)
    text = stream.read(json_len)
    while len(text) < json_len:
        text += stream.read(json_len - len(text))
    assert decode(text) == doc

    bin_len = locate_bin(stream, ChunkOrigin.CURRENT)
    assert bin_len == 8
    payload = b""
    while len(payload) < bin_len:
        payload += stream.read(bin_len - len(payload))
    assert payload == blob + b"\x00\x00\x00"
    assert stream.read(1) == b""


@pytest.mark.parametrize("stream_type", STREAMS)
def test_locate_bin_from_start_skips_json(stream_type):
    blob = b"x" * 13
    stream = stream_type(pack(make_document(len(blob)), blob))
    assert locate_bin(stream, ChunkOrigin.START) == 16


@pytest.mark.parametrize("stream_type", STREAMS)
def test_locate_bin_without_bin_chunk(stream_type):
    stream = stream_type(pack(make_document()))
    assert locate_bin(stream) is None


def test_locate_json_from_current():
    stream = io.BytesIO(pack(make_document()))
    stream.read(12)
    assert locate_json(stream, ChunkOrigin.CURRENT) == 28


def test_locate_rejects_unknown_origin():
    stream = io.BytesIO(pack(make_document()))
    with pytest.raises(ValueError):
        locate_json(stream, "start")
    with pytest.raises(ValueError):
        locate_bin(stream, 0)


def test_empty_bin_chunk_is_reported_as_zero():
    data = pack(make_document()) + struct.pack("<II", 0, CHUNK_BIN)
    assert locate_bin(io.BytesIO(data)) == 0


def test_bad_magic_rejected():
    data = bytearray(pack(make_document()))
    data[0:4] = b"GLTF"
    with pytest.raises(MalformedContainerError):
        locate_json(io.BytesIO(bytes(data)))
    with pytest.raises(MalformedContainerError):
        unpack_bytes(bytes(data))


def test_wrong_chunk_types_rejected():
    data = bytearray(pack(make_document(4), b"abcd"))
    json_len = struct.unpack_from("<I", data, 12)[0]
    struct.pack_into("<I", data, 16, CHUNK_BIN)
    with pytest.raises(MalformedContainerError):
        locate_json(io.BytesIO(bytes(data)))

    data = bytearray(pack(make_document(4), b"abcd"))
    struct.pack_into("<I", data, 20 + json_len + 4, CHUNK_JSON)
    with pytest.raises(MalformedContainerError):
        locate_bin(io.BytesIO(bytes(data)))


def test_zero_length_json_chunk_rejected():
    data = struct.pack("<III", MAGIC, 2, 20) + struct.pack("<II", 0, CHUNK_JSON)
    with pytest.raises(MalformedContainerError):
        locate_json(io.BytesIO(data))


def test_missing_json_chunk_rejected():
    with pytest.raises(MalformedContainerError):
        locate_json(io.BytesIO(struct.pack("<III", MAGIC, 2, 12)))


def test_truncated_chunk_header_rejected():
    data = pack(make_document()) + b"\x08\x00"
    with pytest.raises(MalformedContainerError):
        locate_bin(io.BytesIO(data))


@pytest.mark.parametrize("cut", [4, 1])
def test_truncated_payloads_rejected(cut):
    data = pack(make_document(8), b"12345678")
    with pytest.raises(MalformedContainerError):
        unpack_bytes(data[:-cut])


@pytest.mark.parametrize("stream_type", STREAMS)
def test_truncated_json_rejected_when_skipping(stream_type):
    data = pack(make_document(4), b"ABCD")
    with pytest.raises(MalformedContainerError):
        locate_bin(stream_type(data[:24]))
    with pytest.raises(MalformedContainerError):
        locate_bin(stream_type(pack(make_document())[:-4]))


def test_declared_buffer_longer_than_chunk_rejected():
    data = pack(make_document(100), b"abcd")
    with pytest.raises(MalformedContainerError):
        unpack_bytes(data)


def test_buffer_with_uri_keeps_padded_payload():
    doc, blob = unpack_bytes(pack(make_document(3, uri="external.bin"), b"abc"))
    assert doc.buffers[0].uri == "external.bin"
    assert blob == b"abc\x00"


def test_unpack_without_bin_chunk_returns_empty_blob():
    doc, blob = unpack(io.BytesIO(pack(make_document())))
    assert doc == make_document()
    assert blob == b""


def test_pack_length_overflow(monkeypatch):
    monkeypatch.setattr(container, "MAX_LENGTH", 64)
    with pytest.raises(MalformedContainerError):
        pack(make_document(64), b"\x00" * 64)


def test_stream_errors_propagate():
    class Broken(io.RawIOBase):
        def readable(self):
            return True

        def readinto(self, b):
            raise OSError("device gone")

    with pytest.raises(OSError):
        unpack(Broken())


def test_negative_declared_buffer_length_keeps_payload():
    doc = Document(asset=Asset(version="2.0"), buffers=[Buffer(byte_length=-3)])
    _, blob = unpack_bytes(pack(doc, b"ABCDEFGH"))
    assert blob == b"ABCDEFGH"
