"""Gemini API vision backend."""

from __future__ import annotations

from ..models import ScanRequest
from . import VisionBackend


class GeminiVisionBackend(VisionBackend):
    """Send the fridge photo to Google Gemini's vision capability."""

    def __init__(self, api_key: str = "", model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model = model

    async def complete(self, request: ScanRequest) -> str:
        if not self._api_key:
            raise ValueError(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)

        parts: list = [
            {"mime_type": request.image.mime_type, "data": request.image.data},
            request.instructions,
        ]

        response = await model.generate_content_async(
            parts,
            generation_config={"max_output_tokens": request.max_tokens},
        )
        return response.text
