# GLTFKit: glTF 2.0 document model, binary container codec and consistency validator
#
# Reads and writes glTF JSON and GLB containers, and proves a decoded document
# is internally consistent before a renderer consumes it.
#
# Public API (re-exported here):
# - decode / encode                      (core.transcoder)
# - is_container / locate_json / locate_bin / pack / pack_to / unpack / unpack_bytes  (core.container)
# - check_document / first_issue / iter_issues / CheckOptions  (utils.document_validation)

import logging
import os

__version__ = "0.1.0"

# Package logger
logger = logging.getLogger(__name__)
logger.setLevel(getattr(logging, os.environ.get("GLTFKIT_LOG_LEVEL", "WARNING").upper(), logging.WARNING))

# Handler to stderr; added once even if the package is reloaded
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)

from .core.container import (  # noqa: E402
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
from .core.document import Document, value_or_default  # noqa: E402
from .core.transcoder import TranscodingError, decode, encode  # noqa: E402
from .utils.document_validation import (  # noqa: E402
    CheckOptions,
    MalformedDocumentError,
    ValidationIssue,
    check_document,
    first_issue,
    iter_issues,
)

__all__ = [
    "ChunkOrigin",
    "CheckOptions",
    "Document",
    "MalformedContainerError",
    "MalformedDocumentError",
    "TranscodingError",
    "ValidationIssue",
    "check_document",
    "decode",
    "encode",
    "first_issue",
    "is_container",
    "iter_issues",
    "locate_bin",
    "locate_json",
    "pack",
    "pack_to",
    "unpack",
    "unpack_bytes",
    "value_or_default",
]
