import logging
import os

import pytesseract
from PIL import Image, UnidentifiedImageError

from .config import TESSERACT_CMD

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif"}


def file_extension(file_name: str) -> str:
    return (file_name.rsplit(".", 1)[-1] if "." in file_name else "").lower()


def extract_text_from_file(file_path: str) -> str:
    """
    Extracts text from an uploaded report.

    Plain text files are read as-is and images go through Tesseract OCR.
    Other formats (pdf, doc) yield an empty string.

    Args:
        file_path (str): The path to the stored file.

    Returns:
        str: The extracted text.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Report file not found at '{file_path}'")

    ext = file_extension(file_path)
    if ext == "txt":
        with open(file_path, encoding="utf-8", errors="replace") as fh:
            return fh.read().strip()
    if ext not in IMAGE_EXTENSIONS:
        logger.info("No text extraction for .%s files", ext)
        return ""

    if TESSERACT_CMD:
        pytesseract.pytesseract.tesseract_cmd = TESSERACT_CMD
    try:
        with Image.open(file_path) as image:
            return pytesseract.image_to_string(image).strip()
    except pytesseract.TesseractNotFoundError:
        logger.warning("Tesseract is not installed or not in PATH; skipping OCR")
        return ""
    except UnidentifiedImageError:
        logger.warning("Could not read image %s", file_path)
        return ""
