# GLTFKit Document Model: in-memory shape of a glTF 2.0 document
#
# Notes:
# - One dataclass per entity kind. Every field defaults to None, which means "absent on the wire".
#   Values present on the wire are stored as given; defaults are never filled in here.
# - Cross-entity references are plain integer indices into the Document collections.
# - Wire (JSON) names live in field metadata under "key"; "item" names the dataclass used for
#   nested objects, and "many" marks arrays of them. The transcoder is driven by this metadata.
#
# Public API:
# - Document and the entity dataclasses
# - enum constants (COMPONENT_TYPES, ACCESSOR_TYPES, ...)
# - value_or_default(entity, name) -> Any

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def wire(key: str, item: Optional[type] = None, many: bool = False) -> Any:
    """Declare an optional field serialized under `key`; `many` marks a list of `item` objects."""
    meta: Dict[str, Any] = {"key": key, "many": many}
    if item is not None:
        meta["item"] = item
    return field(default=None, metadata=meta)


# accessor.componentType values
BYTE = 5120
UNSIGNED_BYTE = 5121
SHORT = 5122
UNSIGNED_SHORT = 5123
UNSIGNED_INT = 5125
FLOAT = 5126

COMPONENT_TYPES = {BYTE, UNSIGNED_BYTE, SHORT, UNSIGNED_SHORT, UNSIGNED_INT, FLOAT}
SPARSE_INDEX_TYPES = {UNSIGNED_BYTE, UNSIGNED_SHORT, UNSIGNED_INT}

# accessor.type values, with component counts
ACCESSOR_TYPES = {
    "SCALAR": 1,
    "VEC2": 2,
    "VEC3": 3,
    "VEC4": 4,
    "MAT2": 4,
    "MAT3": 9,
    "MAT4": 16,
}

# animation values
TARGET_PATHS = {"translation", "rotation", "scale", "weights"}
INTERPOLATIONS = {"LINEAR", "STEP", "CUBICSPLINE"}

# bufferView.target values (0 means no hint)
ARRAY_BUFFER = 34962
ELEMENT_ARRAY_BUFFER = 34963
BUFFER_VIEW_TARGETS = {0, ARRAY_BUFFER, ELEMENT_ARRAY_BUFFER}

# camera.type values
ORTHOGRAPHIC = "orthographic"
PERSPECTIVE = "perspective"

# image.mimeType values
IMAGE_MIME_TYPES = {"image/jpeg", "image/png"}

# material.alphaMode values ("" is accepted as unset)
ALPHA_MODES = {"", "OPAQUE", "MASK", "BLEND"}

# mesh.primitive.mode values: POINTS .. TRIANGLE_FAN
PRIMITIVE_MODES = set(range(7))
POSITION = "POSITION"

# sampler values (0 means unset)
NEAREST = 9728
LINEAR = 9729
MAG_FILTERS = {0, NEAREST, LINEAR}
MIN_FILTERS = {0, NEAREST, LINEAR, 9984, 9985, 9986, 9987}
CLAMP_TO_EDGE = 33071
MIRRORED_REPEAT = 33648
REPEAT = 10497
WRAP_MODES = {0, CLAMP_TO_EDGE, MIRRORED_REPEAT, REPEAT}

# KHR_lights_punctual
KHR_LIGHTS_PUNCTUAL = "KHR_lights_punctual"
LIGHT_TYPES = {"directional", "point", "spot"}


@dataclass
class Asset:
    copyright: Optional[str] = wire("copyright")
    generator: Optional[str] = wire("generator")
    version: Optional[str] = wire("version")
    min_version: Optional[str] = wire("minVersion")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class SparseIndices:
    buffer_view: Optional[int] = wire("bufferView")
    byte_offset: Optional[int] = wire("byteOffset")
    component_type: Optional[int] = wire("componentType")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class SparseValues:
    buffer_view: Optional[int] = wire("bufferView")
    byte_offset: Optional[int] = wire("byteOffset")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Sparse:
    count: Optional[int] = wire("count")
    indices: Optional[SparseIndices] = wire("indices", SparseIndices)
    values: Optional[SparseValues] = wire("values", SparseValues)
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Accessor:
    buffer_view: Optional[int] = wire("bufferView")
    byte_offset: Optional[int] = wire("byteOffset")
    component_type: Optional[int] = wire("componentType")
    normalized: Optional[bool] = wire("normalized")
    count: Optional[int] = wire("count")
    type: Optional[str] = wire("type")
    max: Optional[List[float]] = wire("max")
    min: Optional[List[float]] = wire("min")
    sparse: Optional[Sparse] = wire("sparse", Sparse)
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class AnimationTarget:
    node: Optional[int] = wire("node")
    path: Optional[str] = wire("path")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class AnimationChannel:
    sampler: Optional[int] = wire("sampler")
    target: Optional[AnimationTarget] = wire("target", AnimationTarget)
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class AnimationSampler:
    input: Optional[int] = wire("input")
    interpolation: Optional[str] = wire("interpolation")
    output: Optional[int] = wire("output")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Animation:
    channels: Optional[List[AnimationChannel]] = wire("channels", AnimationChannel, many=True)
    samplers: Optional[List[AnimationSampler]] = wire("samplers", AnimationSampler, many=True)
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Buffer:
    uri: Optional[str] = wire("uri")
    byte_length: Optional[int] = wire("byteLength")
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class BufferView:
    buffer: Optional[int] = wire("buffer")
    byte_offset: Optional[int] = wire("byteOffset")
    byte_length: Optional[int] = wire("byteLength")
    byte_stride: Optional[int] = wire("byteStride")
    target: Optional[int] = wire("target")
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Orthographic:
    xmag: Optional[float] = wire("xmag")
    ymag: Optional[float] = wire("ymag")
    zfar: Optional[float] = wire("zfar")
    znear: Optional[float] = wire("znear")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Perspective:
    aspect_ratio: Optional[float] = wire("aspectRatio")
    yfov: Optional[float] = wire("yfov")
    zfar: Optional[float] = wire("zfar")  # absent or 0 for infinite projection
    znear: Optional[float] = wire("znear")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Camera:
    orthographic: Optional[Orthographic] = wire("orthographic", Orthographic)
    perspective: Optional[Perspective] = wire("perspective", Perspective)
    type: Optional[str] = wire("type")
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Image:
    uri: Optional[str] = wire("uri")
    mime_type: Optional[str] = wire("mimeType")
    buffer_view: Optional[int] = wire("bufferView")
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class TextureInfo:
    index: Optional[int] = wire("index")
    tex_coord: Optional[int] = wire("texCoord")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class NormalTextureInfo:
    index: Optional[int] = wire("index")
    tex_coord: Optional[int] = wire("texCoord")
    scale: Optional[float] = wire("scale")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class OcclusionTextureInfo:
    index: Optional[int] = wire("index")
    tex_coord: Optional[int] = wire("texCoord")
    strength: Optional[float] = wire("strength")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class PBRMetallicRoughness:
    base_color_factor: Optional[List[float]] = wire("baseColorFactor")
    base_color_texture: Optional[TextureInfo] = wire("baseColorTexture", TextureInfo)
    metallic_factor: Optional[float] = wire("metallicFactor")
    roughness_factor: Optional[float] = wire("roughnessFactor")
    metallic_roughness_texture: Optional[TextureInfo] = wire("metallicRoughnessTexture", TextureInfo)
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Material:
    pbr_metallic_roughness: Optional[PBRMetallicRoughness] = wire("pbrMetallicRoughness", PBRMetallicRoughness)
    normal_texture: Optional[NormalTextureInfo] = wire("normalTexture", NormalTextureInfo)
    occlusion_texture: Optional[OcclusionTextureInfo] = wire("occlusionTexture", OcclusionTextureInfo)
    emissive_texture: Optional[TextureInfo] = wire("emissiveTexture", TextureInfo)
    emissive_factor: Optional[List[float]] = wire("emissiveFactor")
    alpha_mode: Optional[str] = wire("alphaMode")
    alpha_cutoff: Optional[float] = wire("alphaCutoff")
    double_sided: Optional[bool] = wire("doubleSided")
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Primitive:
    attributes: Optional[Dict[str, int]] = wire("attributes")
    indices: Optional[int] = wire("indices")
    material: Optional[int] = wire("material")
    mode: Optional[int] = wire("mode")
    targets: Optional[List[Dict[str, int]]] = wire("targets")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Mesh:
    primitives: Optional[List[Primitive]] = wire("primitives", Primitive, many=True)
    weights: Optional[List[float]] = wire("weights")
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Node:
    camera: Optional[int] = wire("camera")
    children: Optional[List[int]] = wire("children")
    skin: Optional[int] = wire("skin")
    matrix: Optional[List[float]] = wire("matrix")
    mesh: Optional[int] = wire("mesh")
    rotation: Optional[List[float]] = wire("rotation")
    scale: Optional[List[float]] = wire("scale")
    translation: Optional[List[float]] = wire("translation")
    weights: Optional[List[float]] = wire("weights")
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Sampler:
    mag_filter: Optional[int] = wire("magFilter")
    min_filter: Optional[int] = wire("minFilter")
    wrap_s: Optional[int] = wire("wrapS")
    wrap_t: Optional[int] = wire("wrapT")
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Scene:
    nodes: Optional[List[int]] = wire("nodes")
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Skin:
    inverse_bind_matrices: Optional[int] = wire("inverseBindMatrices")
    skeleton: Optional[int] = wire("skeleton")
    joints: Optional[List[int]] = wire("joints")
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Texture:
    sampler: Optional[int] = wire("sampler")
    source: Optional[int] = wire("source")
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Spot:
    inner_cone_angle: Optional[float] = wire("innerConeAngle")
    outer_cone_angle: Optional[float] = wire("outerConeAngle")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Light:
    """Element of extensions.KHR_lights_punctual.lights on the document."""
    color: Optional[List[float]] = wire("color")
    intensity: Optional[float] = wire("intensity")
    spot: Optional[Spot] = wire("spot", Spot)
    range: Optional[float] = wire("range")
    type: Optional[str] = wire("type")
    name: Optional[str] = wire("name")
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


@dataclass
class Document:
    """Root glTF object. Collections keep wire order; indices into them are the only links."""
    extensions_used: Optional[List[str]] = wire("extensionsUsed")
    extensions_required: Optional[List[str]] = wire("extensionsRequired")
    asset: Optional[Asset] = wire("asset", Asset)
    accessors: Optional[List[Accessor]] = wire("accessors", Accessor, many=True)
    animations: Optional[List[Animation]] = wire("animations", Animation, many=True)
    buffers: Optional[List[Buffer]] = wire("buffers", Buffer, many=True)
    buffer_views: Optional[List[BufferView]] = wire("bufferViews", BufferView, many=True)
    cameras: Optional[List[Camera]] = wire("cameras", Camera, many=True)
    images: Optional[List[Image]] = wire("images", Image, many=True)
    materials: Optional[List[Material]] = wire("materials", Material, many=True)
    meshes: Optional[List[Mesh]] = wire("meshes", Mesh, many=True)
    nodes: Optional[List[Node]] = wire("nodes", Node, many=True)
    samplers: Optional[List[Sampler]] = wire("samplers", Sampler, many=True)
    scene: Optional[int] = wire("scene")
    scenes: Optional[List[Scene]] = wire("scenes", Scene, many=True)
    skins: Optional[List[Skin]] = wire("skins", Skin, many=True)
    textures: Optional[List[Texture]] = wire("textures", Texture, many=True)
    extensions: Optional[Dict[str, Any]] = wire("extensions")
    extras: Any = wire("extras")


# Values a consumer should assume when a field is absent. Looked up by (class name, field name).
DEFAULTS: Dict[tuple, Any] = {
    ("Accessor", "byte_offset"): 0,
    ("Accessor", "normalized"): False,
    ("SparseIndices", "byte_offset"): 0,
    ("SparseValues", "byte_offset"): 0,
    ("AnimationSampler", "interpolation"): "LINEAR",
    ("BufferView", "byte_offset"): 0,
    ("TextureInfo", "tex_coord"): 0,
    ("NormalTextureInfo", "tex_coord"): 0,
    ("NormalTextureInfo", "scale"): 1.0,
    ("OcclusionTextureInfo", "tex_coord"): 0,
    ("OcclusionTextureInfo", "strength"): 1.0,
    ("PBRMetallicRoughness", "base_color_factor"): [1.0, 1.0, 1.0, 1.0],
    ("PBRMetallicRoughness", "metallic_factor"): 1.0,
    ("PBRMetallicRoughness", "roughness_factor"): 1.0,
    ("Material", "emissive_factor"): [0.0, 0.0, 0.0],
    ("Material", "alpha_mode"): "OPAQUE",
    ("Material", "alpha_cutoff"): 0.5,
    ("Material", "double_sided"): False,
    ("Primitive", "mode"): 4,
    ("Node", "matrix"): [1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0, 1.0],
    ("Node", "rotation"): [0.0, 0.0, 0.0, 1.0],
    ("Node", "scale"): [1.0, 1.0, 1.0],
    ("Node", "translation"): [0.0, 0.0, 0.0],
    ("Sampler", "wrap_s"): REPEAT,
    ("Sampler", "wrap_t"): REPEAT,
    ("Light", "color"): [1.0, 1.0, 1.0],
    ("Light", "intensity"): 1.0,
    ("Spot", "inner_cone_angle"): 0.0,
    ("Spot", "outer_cone_angle"): 0.7853981633974483,
}


def value_or_default(entity: Any, name: str) -> Any:
    """
    Return entity.<name>, or the glTF default when the field is absent.
    Mutable defaults are returned as fresh copies.
    """
    value = getattr(entity, name)
    if value is not None:
        return value
    default = DEFAULTS.get((type(entity).__name__, name))
    if isinstance(default, list):
        return list(default)
    return default


__all__ = [
    "Accessor",
    "Animation",
    "AnimationChannel",
    "AnimationSampler",
    "AnimationTarget",
    "Asset",
    "Buffer",
    "BufferView",
    "Camera",
    "Document",
    "Image",
    "Light",
    "Material",
    "Mesh",
    "Node",
    "NormalTextureInfo",
    "OcclusionTextureInfo",
    "Orthographic",
    "PBRMetallicRoughness",
    "Perspective",
    "Primitive",
    "Sampler",
    "Scene",
    "Skin",
    "Sparse",
    "SparseIndices",
    "SparseValues",
    "Spot",
    "Texture",
    "TextureInfo",
    "DEFAULTS",
    "value_or_default",
]
