"""Record search with local prefiltering, PII sanitization and a local fallback ranker."""

from .pipeline import SearchOutcome, SearchPath, SearchPipeline

__all__ = ["SearchOutcome", "SearchPath", "SearchPipeline"]
