# extractor
from .errors import ExtractionError, ExtractorNotReady
from .extractor import FAILED, LOADED, LOADING, NOT_LOADED, FeatureExtractor

__all__ = [
    "ExtractionError", "ExtractorNotReady", "FeatureExtractor",
    "NOT_LOADED", "LOADING", "LOADED", "FAILED",
]
