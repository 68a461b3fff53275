"""PDF infrastructure utilities."""

from .document_embedder import DocumentEmbedder

__all__ = ["DocumentEmbedder"]
