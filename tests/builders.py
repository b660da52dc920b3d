"""Document builders shared by the test modules."""


def make_valid_document():
    return {
        "asset": {"version": "2.0", "generator": "gltfkit-tests"},
        "extensionsUsed": ["KHR_lights_punctual"],
        "scene": 0,
        "scenes": [{"nodes": [0]}],
        "nodes": [
            {"name": "root", "children": [1, 2], "translation": [0.0, 1.0, 0.0]},
            {"name": "body", "mesh": 0, "skin": 0},
            {"name": "head", "camera": 0, "extensions": {"KHR_lights_punctual": {"light": 0}}},
        ],
        "meshes": [
            {"primitives": [{"attributes": {"POSITION": 0}, "indices": 1, "material": 0, "mode": 4}]},
        ],
        "accessors": [
            {"bufferView": 0, "componentType": 5126, "count": 24, "type": "VEC3",
             "min": [-1.0, -1.0, -1.0], "max": [1.0, 1.0, 1.0]},
            {"bufferView": 1, "componentType": 5123, "count": 36, "type": "SCALAR"},
            {"bufferView": 2, "componentType": 5126, "count": 1, "type": "MAT4"},
            {"bufferView": 4, "componentType": 5126, "count": 2, "type": "SCALAR"},
            {"bufferView": 5, "componentType": 5126, "count": 2, "type": "VEC3"},
        ],
        "bufferViews": [
            {"buffer": 0, "byteOffset": 0, "byteLength": 288, "byteStride": 12, "target": 34962},
            {"buffer": 0, "byteOffset": 288, "byteLength": 72, "target": 34963},
            {"buffer": 0, "byteOffset": 360, "byteLength": 64},
            {"buffer": 0, "byteOffset": 424, "byteLength": 100},
            {"buffer": 0, "byteOffset": 524, "byteLength": 8},
            {"buffer": 0, "byteOffset": 532, "byteLength": 24},
        ],
        "buffers": [{"byteLength": 556}],
        "cameras": [
            {"type": "perspective",
             "perspective": {"aspectRatio": 1.5, "yfov": 0.8, "znear": 0.01, "zfar": 100.0}},
        ],
        "images": [{"bufferView": 3, "mimeType": "image/png"}],
        "samplers": [{"magFilter": 9729, "minFilter": 9987, "wrapS": 10497, "wrapT": 10497}],
        "textures": [{"sampler": 0, "source": 0}],
        "materials": [
            {
                "pbrMetallicRoughness": {
                    "baseColorFactor": [1.0, 1.0, 1.0, 1.0],
                    "baseColorTexture": {"index": 0, "texCoord": 0},
                    "metallicFactor": 0.0,
                    "roughnessFactor": 0.5,
                },
                "emissiveFactor": [0.0, 0.0, 0.0],
                "alphaMode": "MASK",
                "alphaCutoff": 0.5,
            }
        ],
        "animations": [
            {
                "channels": [{"sampler": 0, "target": {"node": 0, "path": "translation"}}],
                "samplers": [{"input": 3, "interpolation": "LINEAR", "output": 4}],
            }
        ],
        "skins": [{"inverseBindMatrices": 2, "joints": [2], "skeleton": 2}],
        "extensions": {
            "KHR_lights_punctual": {
                "lights": [
                    {"type": "spot", "color": [1.0, 0.9, 0.8], "intensity": 5.0, "range": 20.0,
                     "spot": {"innerConeAngle": 0.2, "outerConeAngle": 0.6}},
                ]
            }
        },
    }
