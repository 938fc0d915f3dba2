"""Tests for the OCR providers (Vision API mocked with httpx.MockTransport)."""
import base64
import io
import json

import httpx
import pytest
from PIL import Image

from app.core.config import settings
from app.services import ocr
from app.services.ocr import (
    GoogleVisionOcr,
    NoTextFoundError,
    OcrConfigurationError,
    OcrError,
    OcrProviderError,
    TesseractOcr,
    get_ocr_provider,
    preprocess_image_for_ocr,
    strip_data_url,
)

RECEIPT_TEXT = "Milk 2% Gallon        $4.50\nTotal:                $4.50"


def vision_provider(handler) -> GoogleVisionOcr:
    return GoogleVisionOcr("test-key", transport=httpx.MockTransport(handler))


def png_bytes(size=(40, 20)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color="white").save(buf, format="PNG")
    return buf.getvalue()


class TestGoogleVisionOcr:
    @pytest.mark.asyncio
    async def test_returns_first_annotation(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["key"] = request.url.params["key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "responses": [{"textAnnotations": [{"description": RECEIPT_TEXT}, {"description": "Milk"}]}]
            })

        text = await vision_provider(handler).extract_text("data:image/png;base64,QUJD")

        assert text == RECEIPT_TEXT
        assert seen["key"] == "test-key"
        req = seen["body"]["requests"][0]
        assert req["image"]["content"] == "QUJD"
        assert req["features"] == [{"type": "TEXT_DETECTION", "maxResults": 1}]

    @pytest.mark.asyncio
    async def test_bytes_are_base64_encoded(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["content"] = json.loads(request.content)["requests"][0]["image"]["content"]
            return httpx.Response(200, json={"responses": [{"textAnnotations": [{"description": "x"}]}]})

        await vision_provider(handler).extract_text(b"ABC")
        assert seen["content"] == base64.b64encode(b"ABC").decode()

    @pytest.mark.asyncio
    async def test_error_status_raises_provider_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"error": {"code": 403, "message": "API key not valid"}})

        with pytest.raises(OcrProviderError) as excinfo:
            await vision_provider(handler).extract_text("QUJD")

        assert excinfo.value.status_code == 403
        assert excinfo.value.provider_message == "API key not valid"
        assert "403" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_error_without_json_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="<html>oops</html>")

        with pytest.raises(OcrProviderError) as excinfo:
            await vision_provider(handler).extract_text("QUJD")
        assert excinfo.value.provider_message == "Unknown error"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="<html>proxy</html>"),
        httpx.Response(200, json=["not", "an", "object"]),
    ])
    async def test_unreadable_success_body_raises_provider_error(self, response):
        def handler(request: httpx.Request) -> httpx.Response:
            return response

        with pytest.raises(OcrProviderError) as excinfo:
            await vision_provider(handler).extract_text("QUJD")
        assert excinfo.value.status_code == 200
        assert excinfo.value.provider_message == "Invalid response body"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"responses": []}, {"responses": [{}]}, {"responses": [{"textAnnotations": []}]}])
    async def test_missing_annotations_means_no_text(self, payload):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=payload)

        with pytest.raises(NoTextFoundError):
            await vision_provider(handler).extract_text("QUJD")

    @pytest.mark.asyncio
    async def test_transport_failure_is_a_provider_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(OcrProviderError) as excinfo:
            await vision_provider(handler).extract_text("QUJD")
        assert excinfo.value.status_code == 503

    def test_missing_api_key(self):
        with pytest.raises(OcrConfigurationError):
            GoogleVisionOcr("")


def test_strip_data_url():
    assert strip_data_url("data:image/jpeg;base64,AAAA") == "AAAA"
    assert strip_data_url("AAAA") == "AAAA"


def test_error_hierarchy():
    assert issubclass(NoTextFoundError, OcrError)
    assert issubclass(OcrProviderError, OcrError)
    assert issubclass(OcrConfigurationError, OcrError)


class TestTesseractOcr:
    @pytest.mark.asyncio
    async def test_normalizes_lines(self, monkeypatch):
        monkeypatch.setattr(ocr.pytesseract, "image_to_string", lambda img, lang: "Milk   $4.50  \n\n   \nBread  $2.99\n")

        text = await TesseractOcr().extract_text(png_bytes())
        assert text == "Milk   $4.50\nBread  $2.99"

    @pytest.mark.asyncio
    async def test_blank_output_means_no_text(self, monkeypatch):
        monkeypatch.setattr(ocr.pytesseract, "image_to_string", lambda img, lang: "  \n")

        encoded = "data:image/png;base64," + base64.b64encode(png_bytes()).decode()
        with pytest.raises(NoTextFoundError):
            await TesseractOcr().extract_text(encoded)

    @pytest.mark.asyncio
    async def test_invalid_base64(self):
        with pytest.raises(OcrError):
            await TesseractOcr().extract_text("not base64 at all!!")

    @pytest.mark.asyncio
    async def test_unreadable_image(self):
        with pytest.raises(OcrError):
            await TesseractOcr().extract_text(b"definitely not an image")

    def test_preprocess_upscales_small_grayscale(self):
        img = Image.new("RGB", (100, 50), color="white")
        out = preprocess_image_for_ocr(img)
        assert out.mode == "L"
        assert out.size == (600, 300)


class TestFactory:
    def test_google_vision_is_default(self, monkeypatch):
        monkeypatch.setattr(settings, "OCR_PROVIDER", "google_vision")
        monkeypatch.setattr(settings, "GOOGLE_VISION_API_KEY", "abc")
        provider = get_ocr_provider()
        assert isinstance(provider, GoogleVisionOcr)
        assert provider.api_key == "abc"

    def test_tesseract(self, monkeypatch):
        monkeypatch.setattr(settings, "OCR_PROVIDER", "tesseract")
        monkeypatch.setattr(settings, "TESSERACT_CMD", "")
        assert isinstance(get_ocr_provider(), TesseractOcr)

    def test_unknown_provider(self, monkeypatch):
        monkeypatch.setattr(settings, "OCR_PROVIDER", "carrier-pigeon")
        with pytest.raises(OcrConfigurationError, match="Unknown OCR provider"):
            get_ocr_provider()
