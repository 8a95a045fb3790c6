"""
DevHelper Backend — Google Gemini Text Generation
===================================================

What:  TextGenerator implementation on the Google Generative AI SDK.
How:   Sends the user's prompt as-is to the configured model and returns
       `response.text`. One attempt per request: a failure is logged with
       its traceback and surfaced as GenerationError (HTTP 500).
Who:   Created by the app factory and stored on `app.state.generator`.
"""

import logging
import time
import uuid

import google.generativeai as genai
from starlette.concurrency import run_in_threadpool

from devhelper.config import Settings
from devhelper.exceptions import GenerationError
from devhelper.services.llm_base import TextGenerator

logger = logging.getLogger(__name__)


class GeminiService(TextGenerator):
    """
    Gemini-backed snippet generator.

    The SDK keeps the API key in module-level state, so it is configured once
    here; the model object is reused for every call.
    """

    def __init__(self, settings: Settings):
        if settings.gemini_api_key:
            genai.configure(api_key=settings.gemini_api_key)

        self.model_name = settings.gemini_model
        self.model = genai.GenerativeModel(self.model_name)

        logger.info("GeminiService initialized with model=%s", self.model_name)

    async def generate(self, prompt: str) -> str:
        """
        Forward the prompt to Gemini and return the generated text.

        Flow:
            1. Tag the call with a short id for log correlation
            2. generate_content_async(prompt)
            3. Log latency and response size, return response.text

        Raises:
            GenerationError: On any SDK, network or quota failure.
        """
        call_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        logger.info("[%s] Gemini generate: prompt of %d chars", call_id, len(prompt))

        try:
            response = await self.model.generate_content_async(prompt)
            text = response.text or ""
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "[%s] Gemini error after %.0fms: %s",
                call_id,
                duration_ms,
                str(e),
                exc_info=True,
            )
            raise GenerationError(
                context={"call_id": call_id, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "[%s] Gemini generate completed in %.0fms, returned %d chars",
            call_id,
            duration_ms,
            len(text),
        )
        return text

    async def health_check(self) -> bool:
        """
        Check that Gemini is reachable by listing models.

        list_models consumes no tokens. The SDK call is blocking, so it runs
        in the threadpool.
        """
        try:
            names = await run_in_threadpool(lambda: [m.name for m in genai.list_models()])
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False

        target = f"models/{self.model_name}"
        if target not in names:
            logger.warning("Configured model %s not found in available models", target)
        return True
