# catalog
from .catalog import PaintingCatalog
from .errors import CatalogError, PaintingNotFound
from .migrations import LATEST_VERSION, apply_migrations

__all__ = [
    "PaintingCatalog", "CatalogError", "PaintingNotFound",
    "apply_migrations", "LATEST_VERSION",
]
