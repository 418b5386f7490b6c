"""Pipeline contracts."""

from content_engine.ai.pipeline.contracts import FaqBatch, GeneratedArticle, GeneratedFaq, normalize_slug

__all__ = ["FaqBatch", "GeneratedArticle", "GeneratedFaq", "normalize_slug"]
