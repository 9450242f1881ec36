"""
Vision client module for Tabshare
Sends a receipt image and splitting instructions to the Gemini vision model
"""

import base64
import io
import logging
from typing import Optional, Tuple

import requests
from PIL import Image, ImageOps

from bill_splitter import BillSplitter
from config import (
    GEMINI_API_KEY, GEMINI_API_URL, GEMINI_MODEL, GENERATION_TEMPERATURE,
    JPEG_QUALITY, MAX_IMAGE_DIMENSION, REQUEST_TIMEOUT,
)
from constants import SPLIT_SYSTEM_PROMPT
from data_models import RequestMetrics, SplitResult
from errors import (
    ConfigurationError, ExtractionServiceError, InvalidImageError, MalformedResponseError,
    RateLimitError,
)
from utils import PerformanceTimer, validate_image_path

logger = logging.getLogger(__name__)


class VisionSplitClient:
    """Asks the vision model for a draft split of a receipt.

    One HTTP request per call and no retries: when the model fails, the
    caller decides whether to ask again.
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.api_key = api_key if api_key is not None else GEMINI_API_KEY
        self.model = model or GEMINI_MODEL
        self.timeout = timeout or REQUEST_TIMEOUT
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.metrics = RequestMetrics()

    def close(self):
        """Close the HTTP session if this client created it"""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def encode_image(self, image_path: str) -> str:
        """Load a receipt image, shrink it if needed and return base64 JPEG"""
        if not validate_image_path(image_path):
            raise InvalidImageError(f"Invalid or unsupported image: {image_path}")

        try:
            with Image.open(image_path) as image:
                image = ImageOps.exif_transpose(image)
                if image.mode != 'RGB':
                    image = image.convert('RGB')
                image.thumbnail((MAX_IMAGE_DIMENSION, MAX_IMAGE_DIMENSION))

                buffer = io.BytesIO()
                image.save(buffer, format='JPEG', quality=JPEG_QUALITY)
        except (OSError, Image.DecompressionBombError) as exc:
            # UnidentifiedImageError and truncated files are both OSError
            raise InvalidImageError(f"Could not read image: {image_path}") from exc

        data = buffer.getvalue()
        self.metrics.image_bytes = len(data)
        logger.debug("Encoded %s as %d byte JPEG", image_path, len(data))
        return base64.b64encode(data).decode('utf-8')

    def build_prompts(self, instructions: str, tip_percentage: float = 0) -> Tuple[str, str]:
        if tip_percentage and tip_percentage > 0:
            tip_line = f"Add a {tip_percentage:g}% tip, shared in proportion to each person's subtotal."
        else:
            tip_line = "Do not add a tip."

        user_prompt = (
            f'Split this bill following these instructions: "{instructions}"\n\n'
            f"{tip_line}\n\n"
            "Each person's \"owed\" must equal their subtotal + taxShare + tipShare. "
            "Round every amount to 2 decimal places. "
            "Return only the JSON object, without markdown code fences."
        )
        return SPLIT_SYSTEM_PROMPT, user_prompt

    def request_split(self, image_base64: str, instructions: str, tip_percentage: float = 0) -> str:
        """Send one generateContent request and return the model's text"""
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set")

        system_prompt, user_prompt = self.build_prompts(instructions, tip_percentage)
        body = {
            'contents': [
                {
                    'parts': [
                        {'inline_data': {'mime_type': 'image/jpeg', 'data': image_base64}},
                        {'text': f"{system_prompt}\n\n{user_prompt}"},
                    ],
                },
            ],
            'generationConfig': {
                'responseMimeType': 'application/json',
                'temperature': GENERATION_TEMPERATURE,
            },
        }
        url = GEMINI_API_URL.format(model=self.model)

        self.metrics = RequestMetrics(attempts=1, image_bytes=self.metrics.image_bytes)
        with PerformanceTimer("Gemini split request") as timer:
            try:
                response = self.session.post(
                    url,
                    params={'key': self.api_key},
                    json=body,
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                logger.error("Gemini request failed: %s", exc)
                raise ExtractionServiceError(f"Could not reach split service: {exc}") from exc
        self.metrics.latency_seconds = timer.elapsed_time or 0.0
        self.metrics.status_code = response.status_code

        logger.info("Gemini responded with status %s in %.2fs", response.status_code, self.metrics.latency_seconds)

        if response.status_code == 429:
            raise RateLimitError("Split service rate limit exceeded", status_code=429)
        if not response.ok:
            logger.error("Gemini API error %s: %s", response.status_code, response.text[:500])
            raise ExtractionServiceError(
                f"Split service error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise MalformedResponseError("split service returned a non-JSON envelope",
                                         excerpt=response.text[:200]) from exc

        text = self._candidate_text(data)
        self.metrics.response_chars = len(text)
        return text

    def split_receipt(self, image_path: str, instructions: str, tip_percentage: float = 0,
                      splitter: Optional[BillSplitter] = None) -> SplitResult:
        """Encode the image, ask for a split and run it through the pipeline"""
        splitter = splitter or BillSplitter()
        image_base64 = self.encode_image(image_path)
        text = self.request_split(image_base64, instructions, tip_percentage)
        return splitter.split_text(text, tip_percentage=tip_percentage)

    @staticmethod
    def _candidate_text(data) -> str:
        try:
            text = data['candidates'][0]['content']['parts'][0]['text']
        except (KeyError, IndexError, TypeError) as exc:
            raise MalformedResponseError("split service returned no candidates",
                                         field='candidates') from exc
        if not isinstance(text, str):
            raise MalformedResponseError("candidate text is not a string", field='candidates')
        return text
