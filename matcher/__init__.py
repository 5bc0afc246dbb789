# matcher
from .types import CatalogEntry, Match, NoMatch
from .similarity import cosine_similarity
from .matcher import match
from .service import RecognitionService

__all__ = ["CatalogEntry", "Match", "NoMatch", "cosine_similarity", "match", "RecognitionService"]
