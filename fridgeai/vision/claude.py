"""Claude API vision backend."""

from __future__ import annotations

from ..models import ScanRequest
from . import VisionBackend


class ClaudeVisionBackend(VisionBackend):
    """Send the fridge photo to Claude's vision capability."""

    def __init__(self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929") -> None:
        self._api_key = api_key
        self._model = model

    async def complete(self, request: ScanRequest) -> str:
        if not self._api_key:
            raise ValueError(
                "Anthropic API key is not set. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        content: list[dict] = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": request.image.mime_type,
                    "data": request.image.base64,
                },
            },
            {"type": "text", "text": request.instructions},
        ]

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        response = await client.messages.create(
            model=self._model,
            max_tokens=request.max_tokens,
            messages=[{"role": "user", "content": content}],
        )

        # Only text blocks carry the reply
        return "".join(
            getattr(block, "text", "") or "" for block in response.content
        )
