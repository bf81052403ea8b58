"""Analysis pipeline: one inference call per image, then a deterministic parse."""

from __future__ import annotations

import asyncio
import logging

from .models import EncodedImage, ScanRequest, ScanResult
from .parser import parse_response
from .prompt import INSTRUCTION_TEMPLATE
from .vision import VisionBackend

logger = logging.getLogger(__name__)


class AnalysisError(RuntimeError):
    """The inference call failed or returned no text.

    The underlying exception, if any, is chained as ``__cause__``.
    """


class AnalysisPipeline:
    """Send a fridge photo to the vision backend and parse the reply.

    Exactly one backend call is made per ``analyze``; there are no retries.
    Malformed reply text never raises, it degrades to empty fields.
    """

    def __init__(
        self,
        backend: VisionBackend,
        *,
        max_tokens: int = 500,
        timeout: float | None = 60.0,
        instructions: str = INSTRUCTION_TEMPLATE,
    ) -> None:
        self._backend = backend
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._instructions = instructions

    async def analyze(self, image: EncodedImage) -> ScanResult:
        """Analyze one image.

        Raises:
            AnalysisError: on timeout, transport/API failure, or an empty reply.
            asyncio.CancelledError: if the calling task is cancelled.
        """
        request = ScanRequest(
            image=image,
            instructions=self._instructions,
            max_tokens=self._max_tokens,
        )

        try:
            raw = await asyncio.wait_for(
                self._backend.complete(request), timeout=self._timeout
            )
        except asyncio.TimeoutError as e:
            logger.error("vision request timed out after %ss", self._timeout)
            raise AnalysisError(
                f"vision request timed out after {self._timeout}s"
            ) from e
        except Exception as e:
            logger.error("vision request failed: %r", e)
            raise AnalysisError(f"vision request failed: {e}") from e

        if not raw or not raw.strip():
            raise AnalysisError("vision backend returned no content")

        logger.debug("raw model reply:\n%s", raw)
        result = parse_response(raw)
        logger.info(
            "parsed %d ingredients and %d recipes",
            len(result.found_ingredients),
            len(result.recipes),
        )
        return result
