import io
import base64
import binascii
import logging
from typing import Union

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from answer_analyzer.config import MAX_IMAGE_SIZE
from answer_analyzer.exceptions import OcrFailureError

logger = logging.getLogger(__name__)


def decode_image_data(image_data: Union[bytes, str], max_size: int = MAX_IMAGE_SIZE) -> bytes:
    """
    Recover raw image bytes from an uploaded answer image.

    Args:
        image_data: Raw bytes, a bare base64 string, or a data URI
            such as "data:image/png;base64,iVBOR..."
        max_size: Largest accepted decoded image, in bytes

    Returns:
        bytes: The decoded image

    Raises:
        OcrFailureError: If the payload is empty, not valid base64, or too large
    """
    if isinstance(image_data, (bytes, bytearray)):
        image_bytes = bytes(image_data)
    else:
        payload = (image_data or "").strip()
        # Drop the "data:<mime>;base64," header if present
        if payload.startswith("data:"):
            payload = payload.split(",", 1)[1] if "," in payload else ""
        payload = "".join(payload.split())
        if not payload:
            raise OcrFailureError("No image data was provided.")
        try:
            image_bytes = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error(f"Invalid base64 image payload: {str(e)}")
            raise OcrFailureError("Image data is not valid base64.") from e

    if not image_bytes:
        raise OcrFailureError("No image data was provided.")
    if len(image_bytes) > max_size:
        raise OcrFailureError(f"Image exceeds maximum allowed size of {max_size / (1024 * 1024)}MB")

    return image_bytes


def load_image(image_bytes: bytes) -> np.ndarray:
    """Load encoded image bytes into an RGB numpy array."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            return np.array(img.convert("RGB"))
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Could not load image: {str(e)}") from e


def preprocess_image(image: np.ndarray) -> np.ndarray:
    """
    Preprocess a photographed answer for OCR by converting to grayscale,
    enhancing contrast, and applying Otsu thresholding.

    Args:
        image: RGB image array

    Returns:
        Thresholded single-channel image (dark text on white)
    """
    gray = cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)

    # Apply CLAHE to enhance contrast
    clahe = cv2.createCLAHE(clipLimit=2.0, tileGridSize=(8, 8))
    gray = clahe.apply(gray)

    # Apply bilateral filter to reduce noise while preserving edges
    gray = cv2.bilateralFilter(gray, 9, 75, 75)

    _, thresh = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)

    logger.debug(f"Preprocessed image of shape {thresh.shape}")
    return thresh
