"""
Image service for card image processing.
"""
import base64
import io
import logging

from PIL import Image as PILImage, ImageOps, UnidentifiedImageError

from vocabdeck.core.config import settings
from vocabdeck.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/jpeg;base64,"


def crop_to_square_and_resize(img: PILImage.Image, target_size: int = 300) -> PILImage.Image:
    """
    Crop image to square (center crop, equally from both sides) and resize to target size.

    Args:
        img: PIL Image to process
        target_size: Target size for the final square image (default: 300)

    Returns:
        Processed square image at target_size x target_size
    """
    width, height = img.size

    # Determine the size of the square crop (use the smaller dimension)
    crop_size = min(width, height)

    # Calculate crop coordinates (center crop, equally from both sides)
    left = (width - crop_size) // 2
    top = (height - crop_size) // 2
    right = left + crop_size
    bottom = top + crop_size

    img = img.crop((left, top, right, bottom))
    img = img.resize((target_size, target_size), PILImage.Resampling.LANCZOS)

    return img


def to_jpeg_bytes(img: PILImage.Image) -> bytes:
    """Encode an image as JPEG, converting to RGB first if necessary."""
    if img.mode != 'RGB':
        img = img.convert('RGB')
    output = io.BytesIO()
    img.save(output, format="JPEG", quality=95)
    return output.getvalue()


def to_data_url(image_bytes: bytes) -> str:
    """Wrap JPEG bytes in a data URL that can be stored on a card."""
    return DATA_URL_PREFIX + base64.b64encode(image_bytes).decode("ascii")


def process_image_bytes(file_content: bytes) -> str:
    """
    Turn raw image bytes into a square JPEG data URL.

    Applies EXIF orientation correction, center-crops to a square and resizes
    to settings.image_size.

    Args:
        file_content: Raw image file bytes (any format Pillow can read)

    Returns:
        JPEG data URL

    Raises:
        ValidationError: If the bytes are not a readable image
    """
    try:
        img = PILImage.open(io.BytesIO(file_content))
        # Apply EXIF orientation correction to preserve original orientation
        img = ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError(f"Invalid image file: {str(e)}")

    img = crop_to_square_and_resize(img, target_size=settings.image_size)
    image_bytes = to_jpeg_bytes(img)
    logger.info(f"Processed image: {len(file_content)} bytes in, {len(image_bytes)} bytes out")
    return to_data_url(image_bytes)
