# GLTFKit Utils module: document checks

from . import document_validation, node_graph

__all__ = ["document_validation", "node_graph"]
