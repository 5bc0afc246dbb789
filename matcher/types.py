# matcher/types.py
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Union


@dataclass(frozen=True)
class CatalogEntry:
    """A known painting: stable id, optional feature vector, opaque metadata."""
    id: int
    features: Optional[Sequence[float]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_features(self):
        return self.features is not None


@dataclass(frozen=True)
class Match:
    entry: CatalogEntry
    score: float


@dataclass(frozen=True)
class NoMatch:
    # Best score seen, 0.0 when nothing was eligible.
    score: float = 0.0


MatchResult = Union[Match, NoMatch]
