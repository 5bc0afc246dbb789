# catalog/errors.py


class CatalogError(Exception):
    """The painting catalog could not be read or written."""


class PaintingNotFound(CatalogError):
    def __init__(self, painting_id):
        super().__init__(f"Painting {painting_id} not found")
        self.painting_id = painting_id
