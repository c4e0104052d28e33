from typing import Protocol

from swasthya.application.schemas import GenerationOptions


class TextGenerationPort(Protocol):
    async def complete(self, prompt: str, options: GenerationOptions) -> str:
        """
        Sends a single prompt to the text-generation provider and returns the raw text.
        May raise on transport/auth/quota errors, or never return at all.
        """
        ...
