# extractor/preprocessing.py
from io import BytesIO

import cv2
import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import ExtractionError

MIN_FRAME_SIDE = 50


def load_image(image_bytes):
    if not image_bytes:
        raise ExtractionError("Empty image payload")
    try:
        image = Image.open(BytesIO(image_bytes))
        return image.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ExtractionError(f"Could not decode image: {e}") from e


def detect_frame(image):
    """Crop to the largest edge-bounded region, e.g. a framed painting in a gallery photo."""
    open_cv_image = np.array(image)
    gray = cv2.cvtColor(open_cv_image, cv2.COLOR_RGB2GRAY)
    edged = cv2.Canny(gray, 30, 200)

    contours, _ = cv2.findContours(edged.copy(), cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
    contours = sorted(contours, key=cv2.contourArea, reverse=True)

    for c in contours:
        x, y, w, h = cv2.boundingRect(c)
        if w > MIN_FRAME_SIDE and h > MIN_FRAME_SIDE:
            cropped = open_cv_image[y:y+h, x:x+w]
            return Image.fromarray(cropped)

    return image


def to_batch(image, size):
    """Fit to ``size`` x ``size`` and scale to a [0, 1] float32 batch of one."""
    try:
        fitted = ImageOps.fit(image, (size, size), Image.LANCZOS)
    except (ValueError, OSError) as e:
        raise ExtractionError(f"Could not resize image: {e}") from e
    np_image = np.asarray(fitted, dtype=np.float32) / 255.0
    return np.expand_dims(np_image, axis=0)
