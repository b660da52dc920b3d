# GLTFKit Core module: document model, JSON transcoder, GLB container codec

from . import container, document, transcoder

__all__ = ["container", "document", "transcoder"]
