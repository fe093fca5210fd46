from typing import Any, Dict, List, Optional, Protocol
import logging

from openai import OpenAI

from sprintpilot.platform.config import settings

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Turns a prompt into free text. The only AI seam the services depend on."""

    def generate(self, prompt: str, json_output: bool = False) -> str:
        ...


class OpenAIProvider:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self.model = model or settings.OPENAI_MODEL
        self.temperature = temperature if temperature is not None else settings.OPENAI_TEMPERATURE
        self._client: Optional[OpenAI] = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def chat_completion(self,
                        messages: List[Dict[str, Any]],
                        model: str,
                        **kwargs) -> Any:
        completion_args = {
            "model": model,
            "messages": messages,
            **kwargs
        }
        return self.client.chat.completions.create(**completion_args)

    def generate(self, prompt: str, json_output: bool = False) -> str:
        kwargs: Dict[str, Any] = {"temperature": self.temperature}
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}

        response = self.chat_completion(
            messages=[{"role": "user", "content": prompt}],
            model=self.model,
            **kwargs
        )
        content = response.choices[0].message.content or ""
        logger.debug(f"Generated {len(content)} characters with {self.model}")
        return content
