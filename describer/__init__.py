# describer
from .describer import (
    DescriptionError,
    enhance_text,
    generate_description,
    improve_description,
    template_description,
)

__all__ = [
    "DescriptionError", "enhance_text", "generate_description",
    "improve_description", "template_description",
]
