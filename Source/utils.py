#!/usr/bin/env python3
"""
Utility functions for Tabshare
"""

import logging
import math
import mimetypes
import re
import time
from pathlib import Path
from typing import List, Optional

from config import MAX_IMAGE_SIZE_BYTES
from constants import IMAGE_EXTENSIONS

logger = logging.getLogger(__name__)


def validate_image_path(image_path: str) -> bool:
    """Image path validation with basic security checks"""
    if not isinstance(image_path, str):
        logger.warning("Image path must be a string")
        return False

    path = Path(image_path)

    if '..' in path.parts:
        logger.warning("Invalid path pattern: %s", image_path)
        return False

    if not path.is_file():
        logger.warning("File not found: %s", image_path)
        return False

    size = path.stat().st_size
    if size > MAX_IMAGE_SIZE_BYTES:
        logger.warning("File too large: %d bytes (max: %d)", size, MAX_IMAGE_SIZE_BYTES)
        return False

    if path.suffix.lower() not in IMAGE_EXTENSIONS:
        logger.warning("Unsupported file extension: %s", path.suffix)
        return False

    mime_type, _ = mimetypes.guess_type(str(path))
    if mime_type and not mime_type.startswith('image/'):
        logger.warning("Invalid MIME type: %s", mime_type)
        return False

    return True


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe file operations"""
    if not isinstance(filename, str):
        return "unnamed_file"

    filename = re.sub(r'[<>:"/\\|?*\x00-\x1f]', '', filename)
    filename = filename.replace(' ', '_')

    if len(filename) > 200:
        filename = filename[:200]

    if not filename.strip():
        filename = "unnamed_file"

    return filename


def parse_names(text: str) -> List[str]:
    """Split a comma-separated list of names, dropping blanks and repeats"""
    if not isinstance(text, str):
        return []

    names = []
    for part in text.split(','):
        name = ' '.join(part.split())
        if name and name not in names:
            names.append(name)
    return names


def try_parse_float(value: str) -> Optional[float]:
    """Safely parse float from string"""
    try:
        number = float(value.strip().replace(',', '.'))
    except (AttributeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def validate_menu_choice(choice: str, valid_choices: list[str]) -> Optional[str]:
    """Validate a menu choice against allowed options"""
    if not isinstance(choice, str):
        return None
    choice = choice.strip()
    return choice if choice in set(valid_choices) else None


def clean_text_for_display(text: str, max_length: int = 100) -> str:
    """Clean text for safe display in UI"""
    if not isinstance(text, str):
        return ""

    text = re.sub(r'[\x00-\x1f\x7f-\x9f]', '', text)
    text = ' '.join(text.split())

    if len(text) > max_length:
        text = text[:max_length-3] + "..."

    return text


class PerformanceTimer:
    """Context manager for timing operations"""

    def __init__(self, operation_name: str, log_result: bool = True):
        self.operation_name = operation_name
        self.log_result = log_result
        self.start_time = None
        self.end_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.end_time = time.perf_counter()
        if self.log_result:
            logger.info("%s completed in %.3fs", self.operation_name, self.end_time - self.start_time)
        return False

    @property
    def elapsed_time(self) -> Optional[float]:
        """Get elapsed time if timing is complete"""
        if self.start_time is not None and self.end_time is not None:
            return self.end_time - self.start_time
        return None
