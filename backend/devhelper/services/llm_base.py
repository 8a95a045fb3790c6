"""
DevHelper Backend — Abstract Text Generation Interface
========================================================

What:  Contract for the external provider that turns a prompt into text.
How:   GeminiService implements it for production; tests pass an AsyncMock
       built with `spec=TextGenerator` through the app factory.
Who:   Called by the POST /generate route and the health endpoint.
"""

from abc import ABC, abstractmethod


class TextGenerator(ABC):
    """
    Abstract prompt-to-text provider.

    Contract:
        - generate() forwards the prompt unchanged and returns the text
        - every provider-specific failure is raised as GenerationError
        - no retries: one call per user request
    """

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: The user's prompt, already checked to be non-blank.

        Returns:
            The generated text. Empty string if the provider returned nothing.

        Raises:
            GenerationError: The provider call failed for any reason.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True when the provider is reachable and the key is accepted."""
        ...
