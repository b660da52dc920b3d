import pytest

from gltfkit.core.document import (
    Asset,
    Document,
    Light,
    Material,
    Node,
    value_or_default,
)
from gltfkit.core.transcoder import (
    TranscodingError,
    decode,
    encode,
    from_dict,
    punctual_lights,
    to_dict,
)

from builders import make_valid_document


MINIMAL = '{"asset":{"version":"2.0"}}'


def test_minimal_document_reencodes_byte_for_byte():
    doc = decode(MINIMAL)
    assert doc == Document(asset=Asset(version="2.0"))
    assert doc.nodes is None
    assert encode(doc) == MINIMAL


def test_decode_accepts_utf8_bytes():
    assert decode(MINIMAL.encode("utf-8")) == decode(MINIMAL)


def test_valid_document_round_trip():
    data = make_valid_document()
    doc = from_dict(data)
    assert to_dict(doc) == data
    assert decode(encode(doc)) == doc


def test_encode_puts_asset_first():
    doc = from_dict(make_valid_document())
    assert encode(doc).startswith('{"asset":')


def test_absent_and_default_stay_distinct():
    doc = decode('{"asset":{"version":"2.0"},"materials":[{},{"alphaMode":"OPAQUE"}]}')
    assert doc.materials[0].alpha_mode is None
    assert doc.materials[1].alpha_mode == "OPAQUE"
    assert encode(doc) == '{"asset":{"version":"2.0"},"materials":[{},{"alphaMode":"OPAQUE"}]}'


def test_unknown_keys_are_dropped_and_extras_kept():
    doc = decode('{"asset":{"version":"2.0","future":1},"nodes":[{"extras":{"tag":"x"},"bogus":true}]}')
    assert doc.nodes == [Node(extras={"tag": "x"})]
    assert encode(doc) == '{"asset":{"version":"2.0"},"nodes":[{"extras":{"tag":"x"}}]}'


def test_non_ascii_text_is_preserved():
    doc = decode('{"asset":{"version":"2.0"},"nodes":[{"name":"Würfel"}]}')
    assert doc.nodes[0].name == "Würfel"
    assert "Würfel" in encode(doc)


@pytest.mark.parametrize(
    "text",
    [
        b"\xff\xfe",
        "{",
        "[1, 2]",
        '{"asset":{"version":"2.0"},"nodes":{}}',
        '{"asset":{"version":"2.0"},"nodes":[1]}',
        '{"asset":"2.0"}',
    ],
)
def test_decode_errors(text):
    with pytest.raises(TranscodingError):
        decode(text)


def test_decode_error_names_the_path():
    with pytest.raises(TranscodingError) as exc:
        decode('{"asset":{"version":"2.0"},"meshes":[{"primitives":[{}, 3]}]}')
    assert "$.meshes[0].primitives[1]" in str(exc.value)


def test_encode_rejects_non_finite_numbers():
    doc = Document(asset=Asset(version="2.0"), nodes=[Node(translation=[float("nan"), 0.0, 0.0])])
    with pytest.raises(TranscodingError):
        encode(doc)


def test_value_or_default():
    mat = Material()
    assert value_or_default(mat, "alpha_mode") == "OPAQUE"
    assert value_or_default(mat, "alpha_cutoff") == 0.5
    assert value_or_default(Material(alpha_mode="BLEND"), "alpha_mode") == "BLEND"
    assert value_or_default(mat, "name") is None

    first = value_or_default(Node(), "scale")
    first.append(9.0)
    assert value_or_default(Node(), "scale") == [1.0, 1.0, 1.0]


def test_punctual_lights():
    assert punctual_lights(decode(MINIMAL)) is None

    lights = punctual_lights(from_dict(make_valid_document()))
    assert len(lights) == 1
    assert isinstance(lights[0], Light)
    assert lights[0].type == "spot"
    assert lights[0].spot.outer_cone_angle == 0.6


def test_punctual_lights_malformed():
    doc = decode('{"asset":{"version":"2.0"},"extensions":{"KHR_lights_punctual":{"lights":[7]}}}')
    with pytest.raises(TranscodingError):
        punctual_lights(doc)
