import logging

from mistralai import Mistral

from swasthya.application.ports import TextGenerationPort
from swasthya.application.schemas import GenerationOptions
from swasthya.infrastructure.config import ProviderConfig


logger = logging.getLogger(__name__)


class MistralLLMAdapter(TextGenerationPort):
    def __init__(self, config: ProviderConfig):
        self.config = config
        self._client = None
        self._model = config.model
        self._init_client()

    def _init_client(self):
        api_key = self.config.api_key
        if not api_key:
            logger.error("Mistral API key is missing.")
            self._client = None
            return
        try:
            self._client = Mistral(api_key=api_key)
        except Exception as e:
            logger.exception("Failed to initialize Mistral client: %s", e)
            self._client = None

    @property
    def ready(self) -> bool:
        return self._client is not None

    async def complete(self, prompt: str, options: GenerationOptions) -> str:
        if not self._client:
            raise RuntimeError("Mistral client not initialized (missing API key or client error)")
        try:
            response = await self._client.chat.complete_async(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                temperature=options.temperature,
                max_tokens=options.max_output_tokens,
                safe_prompt=options.safety_filters,
            )
        except Exception as e:
            logger.exception("Mistral chat call failed: %s", e)
            raise

        if not response or not response.choices:
            raise RuntimeError("Mistral returned no choices")
        content = response.choices[0].message.content
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        # Chunked content: keep the text parts only
        return "".join(getattr(chunk, "text", "") or "" for chunk in content)
