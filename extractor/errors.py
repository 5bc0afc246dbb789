# extractor/errors.py


class ExtractionError(Exception):
    """The image could not be turned into a feature vector."""


class ExtractorNotReady(ExtractionError):
    """The model has not finished loading, or failed to load."""
