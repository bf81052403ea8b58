"""Vision backend base class and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import FridgeAIConfig
    from ..models import ScanRequest


class VisionBackend(ABC):
    """Abstract base for a multimodal inference endpoint."""

    @abstractmethod
    async def complete(self, request: ScanRequest) -> str:
        """Send the instructions and image in one call and return the reply text.

        Transport and API errors propagate to the caller unchanged.
        """
        ...


def create_backend(config: FridgeAIConfig) -> VisionBackend:
    """Create a vision backend based on configuration."""
    backend_name = config.vision.backend

    match backend_name:
        case "openai":
            from .gpt import OpenAIVisionBackend

            return OpenAIVisionBackend(
                api_key=config.vision.openai.api_key,
                model=config.vision.openai.model,
                detail=config.vision.openai.detail,
            )
        case "claude":
            from .claude import ClaudeVisionBackend

            return ClaudeVisionBackend(
                api_key=config.vision.claude.api_key,
                model=config.vision.claude.model,
            )
        case "gemini":
            from .gemini import GeminiVisionBackend

            return GeminiVisionBackend(
                api_key=config.vision.gemini.api_key,
                model=config.vision.gemini.model,
            )
        case _:
            raise ValueError(
                f"unknown vision backend: {backend_name!r} "
                f"(choose one of openai / claude / gemini)"
            )
