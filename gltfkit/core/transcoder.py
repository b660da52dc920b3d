# GLTFKit Transcoder: Document <-> JSON text
#
# Notes:
# - Driven by the dataclass field metadata in document.py ("key" and optional "item").
# - Absent fields (None) are omitted on encode; keys not modelled by the dataclasses are dropped on decode.
# - No semantic checks happen here. A syntactically valid document always decodes; call
#   utils.document_validation.check_document() for consistency.
#
# Public API:
# - decode(text: str | bytes) -> Document        (raises TranscodingError)
# - encode(document: Document) -> str            (compact JSON)
# - from_dict(data: dict) -> Document / to_dict(document: Document) -> dict
# - punctual_lights(document: Document) -> list[Light] | None

from __future__ import annotations

import json
from dataclasses import fields
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from .document import KHR_LIGHTS_PUNCTUAL, Document, Light


T = TypeVar("T")


class TranscodingError(Exception):
    """Raised when JSON text cannot be turned into a Document (or back)."""
    pass


def _type_of(value: Any) -> str:
    return type(value).__name__


def _decode_object(raw: Any, cls: Type[T], path: str) -> T:
    if not isinstance(raw, dict):
        raise TranscodingError(f"{path}: expected object, got {_type_of(raw)}")
    kwargs: Dict[str, Any] = {}
    for f in fields(cls):
        key = f.metadata["key"]
        if key not in raw:
            continue
        item = f.metadata.get("item")
        value = raw[key]
        if item is None:
            kwargs[f.name] = value
        elif f.metadata["many"]:
            if not isinstance(value, list):
                raise TranscodingError(f"{path}.{key}: expected array, got {_type_of(value)}")
            kwargs[f.name] = [_decode_object(v, item, f"{path}.{key}[{i}]") for i, v in enumerate(value)]
        else:
            kwargs[f.name] = _decode_object(value, item, f"{path}.{key}")
    return cls(**kwargs)


def _encode_value(value: Any) -> Any:
    if isinstance(value, list):
        return [_encode_value(v) for v in value]
    if hasattr(value, "__dataclass_fields__"):
        return _encode_object(value)
    return value


def _encode_object(obj: Any) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        out[f.metadata["key"]] = _encode_value(value)
    return out


def from_dict(data: Dict[str, Any]) -> Document:
    """Build a Document from an already parsed JSON object."""
    return _decode_object(data, Document, "$")


def to_dict(document: Document) -> Dict[str, Any]:
    """Return the JSON object for document; the asset descriptor comes first."""
    out = _encode_object(document)
    if "asset" in out:
        out = {"asset": out.pop("asset"), **out}
    return out


def decode(text: Union[str, bytes, bytearray, memoryview]) -> Document:
    """Parse JSON text (str or UTF-8 bytes) into a Document."""
    if isinstance(text, (bytes, bytearray, memoryview)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as ex:
            raise TranscodingError(f"JSON text is not valid UTF-8: {ex}") from ex
    try:
        data = json.loads(text)
    except json.JSONDecodeError as ex:
        raise TranscodingError(f"JSON syntax error: {ex}") from ex
    return from_dict(data)


def encode(document: Document) -> str:
    """Serialize document as compact JSON text (no trailing newline)."""
    try:
        return json.dumps(to_dict(document), separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as ex:
        raise TranscodingError(f"Document is not JSON serializable: {ex}") from ex


def punctual_lights(document: Document) -> Optional[List[Light]]:
    """
    Decode the document-level KHR_lights_punctual light list.
    Returns None when the extension is absent.
    """
    ext = document.extensions
    if not isinstance(ext, dict) or KHR_LIGHTS_PUNCTUAL not in ext:
        return None
    block = ext[KHR_LIGHTS_PUNCTUAL]
    path = f"$.extensions.{KHR_LIGHTS_PUNCTUAL}"
    if not isinstance(block, dict):
        raise TranscodingError(f"{path}: expected object, got {_type_of(block)}")
    lights = block.get("lights")
    if not isinstance(lights, list):
        raise TranscodingError(f"{path}.lights: expected array, got {_type_of(lights)}")
    return [_decode_object(raw, Light, f"{path}.lights[{i}]") for i, raw in enumerate(lights)]


__all__ = [
    "TranscodingError",
    "decode",
    "encode",
    "from_dict",
    "to_dict",
    "punctual_lights",
]
