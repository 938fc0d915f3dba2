# app/services/ocr.py
"""Receipt OCR providers.

Callers await ``provider.extract_text(image)`` and hand the text to the
categorizer. Failures are raised as OcrError subclasses and never retried here.
"""
import base64
import binascii
import io
import logging
from typing import Optional, Protocol, Union

import httpx
import pytesseract
from PIL import Image, ImageFilter, ImageOps
from starlette.concurrency import run_in_threadpool

from app.core.config import settings

logger = logging.getLogger(__name__)

GOOGLE_VISION_URL = "https://vision.googleapis.com/v1/images:annotate"

ImageInput = Union[bytes, str]


class OcrError(Exception):
    """Base class for failures while turning a receipt image into text."""


class OcrConfigurationError(OcrError):
    """Provider unknown or missing credentials."""


class NoTextFoundError(OcrError):
    def __init__(self, message: str = "No text found in image"):
        super().__init__(message)


class OcrProviderError(OcrError):
    def __init__(self, status_code: int, provider_message: str):
        self.status_code = status_code
        self.provider_message = provider_message
        super().__init__(f"API Error: {status_code} - {provider_message}")


class OcrProvider(Protocol):
    async def extract_text(self, image: ImageInput) -> str: ...


def strip_data_url(image_base64: str) -> str:
    """'data:image/png;base64,AAAA' -> 'AAAA'; plain base64 is returned unchanged."""
    if "," in image_base64:
        return image_base64.split(",", 1)[1]
    return image_base64


def to_base64(image: ImageInput) -> str:
    if isinstance(image, bytes):
        return base64.b64encode(image).decode("ascii")
    return strip_data_url(image.strip())


def to_bytes(image: ImageInput) -> bytes:
    if isinstance(image, bytes):
        return image
    try:
        return base64.b64decode(strip_data_url(image.strip()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise OcrError(f"Invalid base64 image data: {exc}") from exc


class GoogleVisionOcr:
    """TEXT_DETECTION through the Google Cloud Vision REST API."""

    def __init__(
        self,
        api_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        url: str = GOOGLE_VISION_URL,
    ):
        if not api_key:
            raise OcrConfigurationError("GOOGLE_VISION_API_KEY is not configured")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport
        self.url = url

    def _request_body(self, content: str) -> dict:
        return {
            "requests": [
                {
                    "image": {"content": content},
                    "features": [{"type": "TEXT_DETECTION", "maxResults": 1}],
                }
            ]
        }

    async def extract_text(self, image: ImageInput) -> str:
        body = self._request_body(to_base64(image))
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(self.url, params={"key": self.api_key}, json=body)
        except httpx.RequestError as exc:
            logger.warning("Google Vision request failed: %s", exc)
            raise OcrProviderError(503, f"Could not reach OCR provider: {exc}") from exc

        if resp.is_error:
            try:
                error = resp.json().get("error") or {}
                message = error.get("message") or "Unknown error"
            except (ValueError, AttributeError):
                message = "Unknown error"
            logger.error("Google Vision API error %s: %s", resp.status_code, message)
            raise OcrProviderError(resp.status_code, message)

        try:
            data = resp.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            logger.error("Google Vision returned an unreadable body (status %s)", resp.status_code)
            raise OcrProviderError(resp.status_code, "Invalid response body")
        responses = data.get("responses") or []
        annotations = responses[0].get("textAnnotations") if responses else None
        if not annotations:
            raise NoTextFoundError()
        text = annotations[0].get("description") or ""
        logger.debug("Google Vision returned %d characters", len(text))
        return text


def preprocess_image_for_ocr(img: "Image.Image") -> "Image.Image":
    """
    Preprocess a PIL image in-memory to improve OCR accuracy:
      - auto-orient (if EXIF)
      - convert to L (grayscale)
      - upscale small images
      - mild denoise and autocontrast
    """
    img = ImageOps.exif_transpose(img)
    if img.mode not in ("RGB", "RGBA", "L"):
        img = img.convert("RGB")
    gray = img.convert("L")

    w, h = gray.size
    # upscale very small images to improve OCR accuracy
    if w < 600:
        scale = max(1, int(600 / max(1, w)))
        gray = gray.resize((w * scale, h * scale), Image.Resampling.LANCZOS)

    # small median filter to remove salt/pepper
    gray = gray.filter(ImageFilter.MedianFilter(size=3))
    return ImageOps.autocontrast(gray)


class TesseractOcr:
    """Local OCR using the Tesseract binary (pytesseract + Pillow)."""

    def __init__(self, tesseract_cmd: Optional[str] = None, lang: str = "eng"):
        self.lang = lang
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
            logger.debug("Configured pytesseract command: %s", tesseract_cmd)

    def _run(self, data: bytes) -> str:
        try:
            with Image.open(io.BytesIO(data)) as img:
                processed = preprocess_image_for_ocr(img.copy())
        except OSError as exc:
            raise OcrError(f"Unreadable image: {exc}") from exc

        try:
            raw = pytesseract.image_to_string(processed, lang=self.lang) or ""
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
            logger.exception("Tesseract failed")
            raise OcrProviderError(500, str(exc)) from exc

        # normalize lines: trim and remove blank lines
        lines = [ln.rstrip() for ln in raw.splitlines() if ln.strip()]
        return "\n".join(lines).strip()

    async def extract_text(self, image: ImageInput) -> str:
        text = await run_in_threadpool(self._run, to_bytes(image))
        if not text:
            raise NoTextFoundError()
        return text


def get_ocr_provider() -> OcrProvider:
    """Return the configured OCR provider."""
    provider = settings.OCR_PROVIDER
    if provider == "google_vision":
        return GoogleVisionOcr(settings.GOOGLE_VISION_API_KEY, timeout=settings.OCR_TIMEOUT_SECONDS)
    if provider == "tesseract":
        return TesseractOcr(settings.TESSERACT_CMD or None)
    raise OcrConfigurationError(f"Unknown OCR provider: {provider}")
