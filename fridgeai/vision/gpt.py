"""OpenAI chat-completions vision backend."""

from __future__ import annotations

import logging

from ..models import ScanRequest
from . import VisionBackend

logger = logging.getLogger(__name__)


class OpenAIVisionBackend(VisionBackend):
    """Send the fridge photo to an OpenAI vision model."""

    def __init__(
        self, api_key: str = "", model: str = "gpt-4o-mini", detail: str = "low"
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._detail = detail

    async def complete(self, request: ScanRequest) -> str:
        if not self._api_key:
            raise ValueError(
                "OpenAI API key is not set. "
                "Check the config file or the OPENAI_API_KEY environment variable."
            )

        try:
            import openai
        except ImportError:
            raise ImportError("openai SDK is required: pip install openai") from None

        client = openai.AsyncOpenAI(api_key=self._api_key)
        response = await client.chat.completions.create(
            model=self._model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": request.instructions},
                        {
                            "type": "image_url",
                            "image_url": {
                                "url": request.image.data_uri,
                                "detail": self._detail,
                            },
                        },
                    ],
                }
            ],
            max_tokens=request.max_tokens,
        )

        if not response.choices:
            return ""
        choice = response.choices[0]
        if choice.finish_reason == "length":
            logger.warning("reply was cut off at %d tokens", request.max_tokens)
        return choice.message.content or ""
