"""
Centralized configuration for Tabshare with environment
"""

import os
from decimal import Decimal

# Vision service
GEMINI_API_KEY = os.getenv("TABSHARE_GEMINI_API_KEY", os.getenv("GEMINI_API_KEY", ""))
GEMINI_MODEL = os.getenv("TABSHARE_GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_API_URL = os.getenv(
    "TABSHARE_GEMINI_API_URL",
    "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent",
)
REQUEST_TIMEOUT = float(os.getenv("TABSHARE_REQUEST_TIMEOUT", "60"))
GENERATION_TEMPERATURE = float(os.getenv("TABSHARE_TEMPERATURE", "0.1"))

# Runtime settings
CURRENCY_DEFAULT = os.getenv("TABSHARE_DEFAULT_CURRENCY", "USD")
LOG_LEVEL = os.getenv("TABSHARE_LOG_LEVEL", "WARNING")

# Thresholds
SPLIT_TOLERANCE = Decimal(os.getenv("TABSHARE_SPLIT_TOLERANCE", "0.02"))
OVERPRICED_THRESHOLD = Decimal(os.getenv("TABSHARE_OVERPRICED_THRESHOLD", "20"))

# Largest amount and line quantity accepted from a model response
MAX_AMOUNT = Decimal(os.getenv("TABSHARE_MAX_AMOUNT", "1000000000"))
MAX_QUANTITY = int(os.getenv("TABSHARE_MAX_QUANTITY", "10000"))

# Images
MAX_IMAGE_SIZE_BYTES = int(os.getenv("TABSHARE_MAX_IMAGE_SIZE_BYTES", str(20 * 1024 * 1024)))
MAX_IMAGE_DIMENSION = int(os.getenv("TABSHARE_MAX_IMAGE_DIMENSION", "2048"))
JPEG_QUALITY = int(os.getenv("TABSHARE_JPEG_QUALITY", "85"))

# Diagnostics
RESPONSE_EXCERPT_CHARS = int(os.getenv("TABSHARE_RESPONSE_EXCERPT_CHARS", "200"))
