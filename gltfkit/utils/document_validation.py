# GLTFKit Document Validator (glTF 2.0)
# Proves referential and semantic consistency of a decoded Document before anything consumes it.
#
# Contract highlights:
# - Fail-fast: check_document() reports the first violation only, in a fixed traversal order:
#   document level, then accessors, animations, buffers, bufferViews, cameras, images, materials,
#   meshes, nodes, samplers, scenes, skins, then node hierarchy, textures and KHR_lights_punctual.
# - Every index bound is strict: 0 <= index < len(collection).
# - Pure: no I/O, no mutation, no defaults applied. Absent fields are None and are judged as absent.
# - Wrong JSON types (bool/str where an integer is expected) are violations, not Python exceptions.
#
# Public API:
# - check_document(document, options=None) -> None  (raises MalformedDocumentError)
# - first_issue(document, options=None) -> Optional[ValidationIssue]
# - iter_issues(document, options=None) -> Iterator[ValidationIssue]  (lazy, in traversal order)
# - CheckOptions (config; CheckOptions.from_env() reads GLTFKIT_* overrides)

from __future__ import annotations

import logging
import math
import os
import re
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

from ..core.document import (
    ACCESSOR_TYPES,
    ALPHA_MODES,
    BUFFER_VIEW_TARGETS,
    COMPONENT_TYPES,
    IMAGE_MIME_TYPES,
    INTERPOLATIONS,
    KHR_LIGHTS_PUNCTUAL,
    LIGHT_TYPES,
    MAG_FILTERS,
    MIN_FILTERS,
    ORTHOGRAPHIC,
    PERSPECTIVE,
    POSITION,
    PRIMITIVE_MODES,
    SPARSE_INDEX_TYPES,
    TARGET_PATHS,
    WRAP_MODES,
    Document,
    value_or_default,
)
from ..core.transcoder import TranscodingError, punctual_lights
from .node_graph import find_cycle, find_shared_child

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"[0-9]+\.[0-9]+")
ROOT = "document"
LIGHTS_ENTITY = f"extensions.{KHR_LIGHTS_PUNCTUAL}.lights"


class MalformedDocumentError(Exception):
    """Raised when a document fails validation; carries the first ValidationIssue."""

    def __init__(self, issue: ValidationIssue) -> None:
        super().__init__(f"Document validation failed: {issue}")
        self.issue = issue


@dataclass(frozen=True)
class ValidationIssue:
    entity: str
    index: Optional[int]
    field: str
    reason: str
    code: str = "invalid"

    @property
    def path(self) -> str:
        out = "$"
        if self.entity != ROOT:
            out += f".{self.entity}"
        if self.index is not None:
            out += f"[{self.index}]"
        if self.field:
            out += f".{self.field}"
        return out

    def __str__(self) -> str:
        return f"{self.path}: {self.reason} ({self.code})"


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class CheckOptions:
    max_tex_coord_sets: int = 2  # texCoord must be < this (sets 0 and 1)
    check_hierarchy: bool = True
    check_extensions: bool = True

    @classmethod
    def from_env(cls) -> CheckOptions:
        """Defaults overridden by GLTFKIT_MAX_TEXCOORD_SETS / _CHECK_HIERARCHY / _CHECK_EXTENSIONS."""
        opts = cls()
        raw = os.environ.get("GLTFKIT_MAX_TEXCOORD_SETS")
        if raw:
            try:
                value = int(raw)
                if value < 1:
                    raise ValueError("must be >= 1")
                opts.max_tex_coord_sets = value
            except ValueError as ex:
                logger.warning(f"Ignoring GLTFKIT_MAX_TEXCOORD_SETS={raw!r}: {ex}")
        for name, attr in (
            ("GLTFKIT_CHECK_HIERARCHY", "check_hierarchy"),
            ("GLTFKIT_CHECK_EXTENSIONS", "check_extensions"),
        ):
            raw = os.environ.get(name)
            if not raw:
                continue
            flag = raw.strip().lower()
            if flag in _TRUE:
                setattr(opts, attr, True)
            elif flag in _FALSE:
                setattr(opts, attr, False)
            else:
                logger.warning(f"Ignoring {name}={raw!r}: expected a boolean")
        return opts


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _type_of(value: Any) -> str:
    return type(value).__name__


def _length(items: Any) -> int:
    return len(items) if isinstance(items, list) else 0


def _parse_version(value: Any) -> Optional[float]:
    if isinstance(value, str) and VERSION_PATTERN.fullmatch(value):
        return float(value)
    return None


@dataclass(frozen=True)
class _Site:
    """Entity kind and position that issues are reported against."""
    entity: str
    index: Optional[int]

    def issue(self, field: str, reason: str, code: str) -> ValidationIssue:
        return ValidationIssue(self.entity, self.index, field, reason, code)

    def index_ref(
        self, field: str, value: Any, bound: int, target: str, required: bool = False
    ) -> Iterator[ValidationIssue]:
        if value is None:
            if required:
                yield self.issue(field, f"{field} is required", "required")
            return
        if not _is_int(value):
            yield self.issue(field, f"{field} must be integer, got: {_type_of(value)}", "type")
            return
        if not 0 <= value < bound:
            yield self.issue(field, f"{field} {value} out of range for {target} (length {bound})", "index")

    def enum(self, field: str, value: Any, allowed: set, required: bool = False) -> Iterator[ValidationIssue]:
        if value is None:
            if required:
                yield self.issue(field, f"{field} is required", "required")
            return
        # bool and float compare equal to int codes; lists and dicts are unhashable
        if isinstance(value, (bool, float, list, dict)) or value not in allowed:
            yield self.issue(field, f"{field} must be one of {sorted(allowed)}, got: {value!r}", "enum")

    def integer(self, field: str, value: Any, minimum: int, required: bool = False) -> Iterator[ValidationIssue]:
        if value is None:
            if required:
                yield self.issue(field, f"{field} is required", "required")
            return
        if not _is_int(value):
            yield self.issue(field, f"{field} must be integer, got: {_type_of(value)}", "type")
        elif value < minimum:
            yield self.issue(field, f"{field} must be >= {minimum}, got: {value}", "range")

    def unit(self, field: str, value: Any) -> Iterator[ValidationIssue]:
        if value is None:
            return
        if not _is_number(value):
            yield self.issue(field, f"{field} must be number, got: {_type_of(value)}", "type")
        elif not 0.0 <= value <= 1.0:
            yield self.issue(field, f"{field} must be in [0, 1], got: {value}", "range")

    def vector(self, field: str, value: Any, size: int) -> Iterator[ValidationIssue]:
        if not isinstance(value, list) or len(value) != size:
            yield self.issue(field, f"{field} must be an array of {size} numbers", "shape")
        elif not all(_is_number(x) for x in value):
            yield self.issue(field, f"{field} must contain only numbers", "type")

    def unit_vector(self, field: str, value: Any, size: int) -> Iterator[ValidationIssue]:
        if value is None:
            return
        found = list(self.vector(field, value, size))
        if found:
            yield from found
        elif not all(0.0 <= x <= 1.0 for x in value):
            yield self.issue(field, f"{field} components must be in [0, 1]", "range")

    def unique(self, field: str, values: List[Any]) -> Iterator[ValidationIssue]:
        seen = set()
        for v in values:
            if not _is_int(v):
                continue
            if v in seen:
                yield self.issue(field, f"{field} contains duplicate index {v}", "unique")
                return
            seen.add(v)


class DocumentValidator:
    """Referential-integrity and semantic checks over a glTF Document."""

    # Fixed traversal order: (document attribute, wire name, checker)
    COLLECTIONS = (
        ("accessors", "accessors", "_check_accessor"),
        ("animations", "animations", "_check_animation"),
        ("buffers", "buffers", "_check_buffer"),
        ("buffer_views", "bufferViews", "_check_buffer_view"),
        ("cameras", "cameras", "_check_camera"),
        ("images", "images", "_check_image"),
        ("materials", "materials", "_check_material"),
        ("meshes", "meshes", "_check_mesh"),
        ("nodes", "nodes", "_check_node"),
        ("samplers", "samplers", "_check_sampler"),
        ("scenes", "scenes", "_check_scene"),
        ("skins", "skins", "_check_skin"),
    )

    def __init__(self, options: Optional[CheckOptions] = None) -> None:
        self.options = options or CheckOptions()

    def iter_issues(self, doc: Document) -> Iterator[ValidationIssue]:
        yield from self._check_document_level(doc)
        for attr, name, checker in self.COLLECTIONS:
            items = getattr(doc, attr)
            if items is None:
                continue
            if not isinstance(items, list):
                yield _Site(ROOT, None).issue(name, f"{name} must be array, got: {_type_of(items)}", "type")
                continue
            check = getattr(self, checker)
            for i, item in enumerate(items):
                yield from check(doc, _Site(name, i), item)
        if self.options.check_hierarchy:
            yield from self._check_hierarchy(doc)
        if isinstance(doc.textures, list):
            for i, tex in enumerate(doc.textures):
                yield from self._check_texture(doc, _Site("textures", i), tex)
        if self.options.check_extensions:
            yield from self._check_punctual_lights(doc)

    def first_issue(self, doc: Document) -> Optional[ValidationIssue]:
        return next(self.iter_issues(doc), None)

    # -----------------
    # Document level
    # -----------------
    def _check_document_level(self, doc: Document) -> Iterator[ValidationIssue]:
        root = _Site(ROOT, None)
        asset = doc.asset
        if asset is None:
            yield root.issue("asset", "asset is required", "required")
        else:
            site = _Site("asset", None)
            version = _parse_version(asset.version)
            if asset.version is None:
                yield site.issue("version", "version is required", "required")
            elif version is None:
                yield site.issue("version", f"version must match N.N, got: {asset.version!r}", "format")
            elif not 2.0 <= version < 3.0:
                yield site.issue("version", f"unsupported version {asset.version}", "version")
            if asset.min_version is not None:
                min_version = _parse_version(asset.min_version)
                if min_version is None:
                    yield site.issue("minVersion", f"minVersion must match N.N, got: {asset.min_version!r}", "format")
                elif min_version >= 3.0:
                    yield site.issue("minVersion", f"unsupported minVersion {asset.min_version}", "version")

        yield from root.index_ref("scene", doc.scene, _length(doc.scenes), "scenes")

        required = doc.extensions_required
        if isinstance(required, list):
            used = doc.extensions_used if isinstance(doc.extensions_used, list) else []
            for k, ext in enumerate(required):
                if ext not in used:
                    yield root.issue(f"extensionsRequired[{k}]", f"{ext!r} is required but not listed in extensionsUsed", "required")

    # -----------------
    # Collections
    # -----------------
    def _check_accessor(self, doc: Document, site: _Site, acc: Any) -> Iterator[ValidationIssue]:
        n_views = _length(doc.buffer_views)
        yield from site.index_ref("bufferView", acc.buffer_view, n_views, "bufferViews")
        yield from site.integer("byteOffset", acc.byte_offset, 0)
        yield from site.enum("componentType", acc.component_type, COMPONENT_TYPES, required=True)
        yield from site.integer("count", acc.count, 1, required=True)
        yield from site.enum("type", acc.type, set(ACCESSOR_TYPES), required=True)

        components = ACCESSOR_TYPES.get(acc.type) if isinstance(acc.type, str) else None
        if components is not None:
            for fld, bounds in (("min", acc.min), ("max", acc.max)):
                if bounds is not None:
                    yield from site.vector(fld, bounds, components)

        sparse = acc.sparse
        if sparse is None:
            return
        if _is_int(sparse.count) and _is_int(acc.count):
            if not 1 <= sparse.count <= acc.count:
                yield site.issue("sparse.count", f"sparse.count must be in [1, {acc.count}], got: {sparse.count}", "range")
        else:
            yield from site.integer("sparse.count", sparse.count, 1, required=True)

        if sparse.indices is None:
            yield site.issue("sparse.indices", "sparse.indices is required", "required")
        else:
            ind = sparse.indices
            yield from site.index_ref("sparse.indices.bufferView", ind.buffer_view, n_views, "bufferViews", required=True)
            yield from site.integer("sparse.indices.byteOffset", ind.byte_offset, 0)
            yield from site.enum("sparse.indices.componentType", ind.component_type, SPARSE_INDEX_TYPES, required=True)
        if sparse.values is None:
            yield site.issue("sparse.values", "sparse.values is required", "required")
        else:
            val = sparse.values
            yield from site.index_ref("sparse.values.bufferView", val.buffer_view, n_views, "bufferViews", required=True)
            yield from site.integer("sparse.values.byteOffset", val.byte_offset, 0)

    def _check_animation(self, doc: Document, site: _Site, anim: Any) -> Iterator[ValidationIssue]:
        if not anim.channels:
            yield site.issue("channels", "animation must have at least one channel", "required")
        if not anim.samplers:
            yield site.issue("samplers", "animation must have at least one sampler", "required")

        n_samplers = _length(anim.samplers)
        n_nodes = _length(doc.nodes)
        for k, ch in enumerate(anim.channels or ()):
            p = f"channels[{k}]"
            yield from site.index_ref(f"{p}.sampler", ch.sampler, n_samplers, "animation samplers", required=True)
            if ch.target is None:
                yield site.issue(f"{p}.target", f"{p}.target is required", "required")
                continue
            yield from site.index_ref(f"{p}.target.node", ch.target.node, n_nodes, "nodes")
            yield from site.enum(f"{p}.target.path", ch.target.path, TARGET_PATHS, required=True)

        n_accessors = _length(doc.accessors)
        for k, smp in enumerate(anim.samplers or ()):
            p = f"samplers[{k}]"
            yield from site.index_ref(f"{p}.input", smp.input, n_accessors, "accessors", required=True)
            yield from site.enum(f"{p}.interpolation", smp.interpolation, INTERPOLATIONS)
            yield from site.index_ref(f"{p}.output", smp.output, n_accessors, "accessors", required=True)

    def _check_buffer(self, doc: Document, site: _Site, buf: Any) -> Iterator[ValidationIssue]:
        yield from site.integer("byteLength", buf.byte_length, 1, required=True)

    def _check_buffer_view(self, doc: Document, site: _Site, view: Any) -> Iterator[ValidationIssue]:
        buffers = doc.buffers if isinstance(doc.buffers, list) else []
        found = list(site.index_ref("buffer", view.buffer, len(buffers), "buffers", required=True))
        yield from found
        yield from site.integer("byteOffset", view.byte_offset, 0)
        yield from site.integer("byteLength", view.byte_length, 1, required=True)

        if not found and _is_int(view.byte_length) and view.byte_length >= 1:
            offset = view.byte_offset if _is_int(view.byte_offset) else 0
            capacity = buffers[view.buffer].byte_length
            if _is_int(capacity) and offset + view.byte_length > capacity:
                yield site.issue(
                    "byteLength",
                    f"byteOffset + byteLength ({offset + view.byte_length}) exceeds buffer {view.buffer} byteLength ({capacity})",
                    "range",
                )

        stride = view.byte_stride
        if stride is not None:
            if not _is_int(stride):
                yield site.issue("byteStride", f"byteStride must be integer, got: {_type_of(stride)}", "type")
            elif stride != 0 and not 4 <= stride <= 252:
                yield site.issue("byteStride", f"byteStride must be 0 or in [4, 252], got: {stride}", "range")
        yield from site.enum("target", view.target, BUFFER_VIEW_TARGETS)

    def _check_camera(self, doc: Document, site: _Site, cam: Any) -> Iterator[ValidationIssue]:
        if cam.type is None:
            yield site.issue("type", "type is required", "required")
            return
        if cam.type == ORTHOGRAPHIC:
            if cam.orthographic is None or cam.perspective is not None:
                yield site.issue("orthographic", "orthographic camera must define orthographic and only orthographic", "exclusive")
                return
            yield from self._check_orthographic(site, cam.orthographic)
        elif cam.type == PERSPECTIVE:
            if cam.perspective is None or cam.orthographic is not None:
                yield site.issue("perspective", "perspective camera must define perspective and only perspective", "exclusive")
                return
            yield from self._check_perspective(site, cam.perspective)
        else:
            yield site.issue("type", f"type must be one of {sorted((ORTHOGRAPHIC, PERSPECTIVE))}, got: {cam.type!r}", "enum")

    def _check_orthographic(self, site: _Site, ortho: Any) -> Iterator[ValidationIssue]:
        values = {}
        for fld in ("xmag", "ymag", "zfar", "znear"):
            value = getattr(ortho, fld)
            if not _is_number(value):
                yield site.issue(f"orthographic.{fld}", f"orthographic.{fld} must be number", "required" if value is None else "type")
            else:
                values[fld] = value
        for fld in ("xmag", "ymag"):
            if fld in values and values[fld] <= 0:
                yield site.issue(f"orthographic.{fld}", f"orthographic.{fld} must be > 0, got: {values[fld]}", "range")
        if "znear" in values and values["znear"] < 0:
            yield site.issue("orthographic.znear", f"orthographic.znear must be >= 0, got: {values['znear']}", "range")
        if "zfar" in values and "znear" in values:
            if values["zfar"] == 0 or values["zfar"] <= values["znear"]:
                yield site.issue("orthographic.zfar", "orthographic.zfar must be non-zero and greater than znear", "range")

    def _check_perspective(self, site: _Site, persp: Any) -> Iterator[ValidationIssue]:
        aspect = persp.aspect_ratio
        if aspect is not None:
            if not _is_number(aspect):
                yield site.issue("perspective.aspectRatio", f"perspective.aspectRatio must be number, got: {_type_of(aspect)}", "type")
            elif aspect <= 0:
                yield site.issue("perspective.aspectRatio", f"perspective.aspectRatio must be > 0, got: {aspect}", "range")

        yfov = persp.yfov
        if not _is_number(yfov):
            yield site.issue("perspective.yfov", "perspective.yfov must be number", "required" if yfov is None else "type")
        elif not 0 < yfov < math.pi:
            yield site.issue("perspective.yfov", f"perspective.yfov must be in (0, pi), got: {yfov}", "range")

        znear = persp.znear
        if not _is_number(znear):
            yield site.issue("perspective.znear", "perspective.znear must be number", "required" if znear is None else "type")
        elif znear <= 0:
            yield site.issue("perspective.znear", f"perspective.znear must be > 0, got: {znear}", "range")

        zfar = persp.zfar
        if zfar is not None:
            if not _is_number(zfar):
                yield site.issue("perspective.zfar", f"perspective.zfar must be number, got: {_type_of(zfar)}", "type")
            elif zfar != 0 and _is_number(znear) and zfar <= znear:
                yield site.issue("perspective.zfar", "perspective.zfar must be 0 (infinite) or greater than znear", "range")

    def _check_image(self, doc: Document, site: _Site, img: Any) -> Iterator[ValidationIssue]:
        has_uri = img.uri is not None and img.uri != ""
        has_view = img.buffer_view is not None
        if has_uri and has_view:
            yield site.issue("uri", "image must define either uri or bufferView, not both", "exclusive")
        elif not has_uri and not has_view:
            yield site.issue("uri", "image must define either uri or bufferView", "required")
        elif has_view:
            yield from site.index_ref("bufferView", img.buffer_view, _length(doc.buffer_views), "bufferViews")
            yield from site.enum("mimeType", img.mime_type, IMAGE_MIME_TYPES, required=True)

    def _check_texture_info(self, doc: Document, site: _Site, field: str, info: Any) -> Iterator[ValidationIssue]:
        yield from site.index_ref(f"{field}.index", info.index, _length(doc.textures), "textures", required=True)
        tex_coord = info.tex_coord
        if tex_coord is None:
            return
        cap = self.options.max_tex_coord_sets
        if not _is_int(tex_coord):
            yield site.issue(f"{field}.texCoord", f"{field}.texCoord must be integer, got: {_type_of(tex_coord)}", "type")
        elif tex_coord < 0:
            yield site.issue(f"{field}.texCoord", f"{field}.texCoord must be >= 0, got: {tex_coord}", "range")
        elif tex_coord >= cap:
            yield site.issue(f"{field}.texCoord", f"{field}.texCoord set {tex_coord} unsupported (max {cap - 1})", "range")

    def _check_material(self, doc: Document, site: _Site, mat: Any) -> Iterator[ValidationIssue]:
        pbr = mat.pbr_metallic_roughness
        if pbr is not None:
            yield from site.unit_vector("pbrMetallicRoughness.baseColorFactor", pbr.base_color_factor, 4)
            if pbr.base_color_texture is not None:
                yield from self._check_texture_info(doc, site, "pbrMetallicRoughness.baseColorTexture", pbr.base_color_texture)
            yield from site.unit("pbrMetallicRoughness.metallicFactor", pbr.metallic_factor)
            yield from site.unit("pbrMetallicRoughness.roughnessFactor", pbr.roughness_factor)
            if pbr.metallic_roughness_texture is not None:
                yield from self._check_texture_info(
                    doc, site, "pbrMetallicRoughness.metallicRoughnessTexture", pbr.metallic_roughness_texture
                )

        if mat.normal_texture is not None:
            yield from self._check_texture_info(doc, site, "normalTexture", mat.normal_texture)
        if mat.occlusion_texture is not None:
            yield from self._check_texture_info(doc, site, "occlusionTexture", mat.occlusion_texture)
            yield from site.unit("occlusionTexture.strength", mat.occlusion_texture.strength)
        if mat.emissive_texture is not None:
            yield from self._check_texture_info(doc, site, "emissiveTexture", mat.emissive_texture)
        yield from site.unit_vector("emissiveFactor", mat.emissive_factor, 3)

        yield from site.enum("alphaMode", mat.alpha_mode, ALPHA_MODES)
        cutoff = mat.alpha_cutoff
        if cutoff is not None:
            if not mat.alpha_mode:
                yield site.issue("alphaCutoff", "alphaCutoff requires alphaMode to be set", "required")
            elif not _is_number(cutoff):
                yield site.issue("alphaCutoff", f"alphaCutoff must be number, got: {_type_of(cutoff)}", "type")
            elif cutoff < 0:
                yield site.issue("alphaCutoff", f"alphaCutoff must be >= 0, got: {cutoff}", "range")

    def _check_mesh(self, doc: Document, site: _Site, mesh: Any) -> Iterator[ValidationIssue]:
        if not mesh.primitives:
            yield site.issue("primitives", "mesh must have at least one primitive", "required")
            return
        n_accessors = _length(doc.accessors)
        n_materials = _length(doc.materials)
        n_weights = len(mesh.weights) if isinstance(mesh.weights, list) else None
        for k, prim in enumerate(mesh.primitives):
            p = f"primitives[{k}]"
            attrs = prim.attributes
            if not isinstance(attrs, dict):
                yield site.issue(f"{p}.attributes", f"{p}.attributes must be object", "required" if attrs is None else "type")
            else:
                if POSITION not in attrs:
                    yield site.issue(f"{p}.attributes", f"{p}.attributes must include {POSITION}", "required")
                for semantic, idx in attrs.items():
                    yield from site.index_ref(f"{p}.attributes.{semantic}", idx, n_accessors, "accessors", required=True)
            yield from site.index_ref(f"{p}.indices", prim.indices, n_accessors, "accessors")
            yield from site.index_ref(f"{p}.material", prim.material, n_materials, "materials")
            yield from site.enum(f"{p}.mode", prim.mode, PRIMITIVE_MODES)

            targets = prim.targets
            if targets is not None:
                if not isinstance(targets, list):
                    yield site.issue(f"{p}.targets", f"{p}.targets must be array, got: {_type_of(targets)}", "type")
                    continue
                for t, target in enumerate(targets):
                    if not isinstance(target, dict):
                        yield site.issue(f"{p}.targets[{t}]", f"{p}.targets[{t}] must be object", "type")
                        continue
                    for semantic, idx in target.items():
                        yield from site.index_ref(f"{p}.targets[{t}].{semantic}", idx, n_accessors, "accessors", required=True)
            if n_weights is not None and _length(targets) != n_weights:
                yield site.issue(f"{p}.targets", f"{p} has {_length(targets)} morph targets but mesh.weights has {n_weights}", "shape")

    def _check_node(self, doc: Document, site: _Site, node: Any) -> Iterator[ValidationIssue]:
        yield from site.index_ref("camera", node.camera, _length(doc.cameras), "cameras")
        yield from site.index_ref("skin", node.skin, _length(doc.skins), "skins")
        yield from site.index_ref("mesh", node.mesh, _length(doc.meshes), "meshes")

        trs = [fld for fld in ("translation", "rotation", "scale") if getattr(node, fld) is not None]
        if node.matrix is not None:
            if trs:
                yield site.issue("matrix", f"matrix cannot be combined with {', '.join(trs)}", "exclusive")
            else:
                yield from site.vector("matrix", node.matrix, 16)
        for fld, size in (("translation", 3), ("rotation", 4), ("scale", 3)):
            if fld in trs:
                yield from site.vector(fld, getattr(node, fld), size)

        children = node.children
        if children is None:
            return
        if not isinstance(children, list):
            yield site.issue("children", f"children must be array, got: {_type_of(children)}", "type")
            return
        n_nodes = _length(doc.nodes)
        for k, child in enumerate(children):
            yield from site.index_ref(f"children[{k}]", child, n_nodes, "nodes", required=True)
            if child == site.index and _is_int(child):
                yield site.issue(f"children[{k}]", "node cannot be its own child", "hierarchy")
        yield from site.unique("children", children)

    def _check_sampler(self, doc: Document, site: _Site, smp: Any) -> Iterator[ValidationIssue]:
        yield from site.enum("magFilter", smp.mag_filter, MAG_FILTERS)
        yield from site.enum("minFilter", smp.min_filter, MIN_FILTERS)
        yield from site.enum("wrapS", smp.wrap_s, WRAP_MODES)
        yield from site.enum("wrapT", smp.wrap_t, WRAP_MODES)

    def _check_scene(self, doc: Document, site: _Site, scene: Any) -> Iterator[ValidationIssue]:
        roots = scene.nodes
        if roots is None:
            return
        if not isinstance(roots, list):
            yield site.issue("nodes", f"nodes must be array, got: {_type_of(roots)}", "type")
            return
        n_nodes = _length(doc.nodes)
        for k, idx in enumerate(roots):
            yield from site.index_ref(f"nodes[{k}]", idx, n_nodes, "nodes", required=True)
        yield from site.unique("nodes", roots)

    def _check_skin(self, doc: Document, site: _Site, skin: Any) -> Iterator[ValidationIssue]:
        joints = skin.joints if isinstance(skin.joints, list) else []
        accessors = doc.accessors if isinstance(doc.accessors, list) else []
        found = list(site.index_ref("inverseBindMatrices", skin.inverse_bind_matrices, len(accessors), "accessors"))
        yield from found
        if not found and skin.inverse_bind_matrices is not None:
            acc = accessors[skin.inverse_bind_matrices]
            if not _is_int(acc.count) or acc.count < len(joints):
                yield site.issue(
                    "inverseBindMatrices",
                    f"accessor {skin.inverse_bind_matrices} count ({acc.count}) is less than joint count ({len(joints)})",
                    "range",
                )
            elif acc.type != "MAT4":
                yield site.issue("inverseBindMatrices", f"accessor {skin.inverse_bind_matrices} type must be MAT4, got: {acc.type!r}", "shape")

        n_nodes = _length(doc.nodes)
        yield from site.index_ref("skeleton", skin.skeleton, n_nodes, "nodes")
        if skin.joints is not None and not isinstance(skin.joints, list):
            yield site.issue("joints", f"joints must be array, got: {_type_of(skin.joints)}", "type")
            return
        if not joints:
            yield site.issue("joints", "skin must have at least one joint", "required")
            return
        for k, idx in enumerate(joints):
            yield from site.index_ref(f"joints[{k}]", idx, n_nodes, "nodes", required=True)
        yield from site.unique("joints", joints)

    def _check_texture(self, doc: Document, site: _Site, tex: Any) -> Iterator[ValidationIssue]:
        yield from site.index_ref("sampler", tex.sampler, _length(doc.samplers), "samplers")
        yield from site.index_ref("source", tex.source, _length(doc.images), "images")

    # -----------------
    # Cross-entity
    # -----------------
    def _check_hierarchy(self, doc: Document) -> Iterator[ValidationIssue]:
        nodes = doc.nodes if isinstance(doc.nodes, list) else []
        n_nodes = len(nodes)
        # Only well-formed edges; malformed ones were already reported per node.
        children = []
        for node in nodes:
            kids = node.children if isinstance(node.children, list) else []
            children.append(list(dict.fromkeys(c for c in kids if _is_int(c) and 0 <= c < n_nodes)))

        shared = find_shared_child(children)
        if shared is not None:
            yield _Site("nodes", shared.second_parent).issue(
                "children",
                f"node {shared.child} is already a child of node {shared.first_parent}",
                "hierarchy",
            )
            return
        cycle = find_cycle(children)
        if cycle is not None:
            yield _Site("nodes", cycle[0]).issue(
                "children", "cycle in node hierarchy: " + " -> ".join(str(n) for n in cycle), "hierarchy"
            )

    def _check_punctual_lights(self, doc: Document) -> Iterator[ValidationIssue]:
        try:
            lights = punctual_lights(doc)
        except TranscodingError as ex:
            yield _Site(ROOT, None).issue(f"extensions.{KHR_LIGHTS_PUNCTUAL}", str(ex), "type")
            return

        for i, light in enumerate(lights or ()):
            site = _Site(LIGHTS_ENTITY, i)
            yield from site.enum("type", light.type, LIGHT_TYPES, required=True)
            if light.type == "spot" and light.spot is None:
                yield site.issue("spot", "spot light must define spot", "required")
            elif light.type != "spot" and light.spot is not None:
                yield site.issue("spot", "only spot lights may define spot", "exclusive")
            yield from site.unit_vector("color", light.color, 3)
            if light.intensity is not None:
                if not _is_number(light.intensity):
                    yield site.issue("intensity", f"intensity must be number, got: {_type_of(light.intensity)}", "type")
                elif light.intensity < 0:
                    yield site.issue("intensity", f"intensity must be >= 0, got: {light.intensity}", "range")
            if light.range is not None:
                if not _is_number(light.range):
                    yield site.issue("range", f"range must be number, got: {_type_of(light.range)}", "type")
                elif light.range <= 0:
                    yield site.issue("range", f"range must be > 0, got: {light.range}", "range")
            if light.spot is not None:
                inner = value_or_default(light.spot, "inner_cone_angle")
                outer = value_or_default(light.spot, "outer_cone_angle")
                if not (_is_number(inner) and _is_number(outer)):
                    yield site.issue("spot", "spot cone angles must be numbers", "type")
                elif not 0 <= inner < outer <= math.pi / 2:
                    yield site.issue("spot", "spot cone angles must satisfy 0 <= inner < outer <= pi/2", "range")

        n_lights = len(lights or ())
        for i, node in enumerate(doc.nodes if isinstance(doc.nodes, list) else ()):
            ext = node.extensions
            if not isinstance(ext, dict) or KHR_LIGHTS_PUNCTUAL not in ext:
                continue
            ref = ext[KHR_LIGHTS_PUNCTUAL]
            field = f"extensions.{KHR_LIGHTS_PUNCTUAL}.light"
            if not isinstance(ref, dict):
                yield _Site("nodes", i).issue(field, f"extensions.{KHR_LIGHTS_PUNCTUAL} must be object", "type")
                continue
            yield from _Site("nodes", i).index_ref(field, ref.get("light"), n_lights, "lights", required=True)


# -----------------
# Public API
# -----------------
def iter_issues(document: Document, options: Optional[CheckOptions] = None) -> Iterator[ValidationIssue]:
    """Lazily yield every violation in traversal order."""
    return DocumentValidator(options).iter_issues(document)


def first_issue(document: Document, options: Optional[CheckOptions] = None) -> Optional[ValidationIssue]:
    """Return the first violation, or None when the document is consistent."""
    return DocumentValidator(options).first_issue(document)


def check_document(document: Document, options: Optional[CheckOptions] = None) -> None:
    """
    Validate document and raise MalformedDocumentError on the first violation.
    """
    issue = first_issue(document, options)
    if issue is not None:
        logger.debug(f"Document rejected: {issue}")
        raise MalformedDocumentError(issue)


__all__ = [
    "MalformedDocumentError",
    "ValidationIssue",
    "CheckOptions",
    "DocumentValidator",
    "iter_issues",
    "first_issue",
    "check_document",
]
