import logging
from typing import Any, Dict, List, Optional

from anyio import to_thread
from openai import OpenAI

logger = logging.getLogger(__name__)


class LLMClient:
    """
    Thin wrapper over OpenAI chat completions.
    Built once in create_app and shared through app.state.
    """

    def __init__(self, api_key: Optional[str], model: str = "gpt-4.1-mini"):
        self.model = model
        self._client = OpenAI(api_key=api_key) if api_key else None

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def chat_completion(
        self,
        messages: List[Dict[str, Any]],
        temperature: float = 0.3,
        json_mode: bool = False,
    ) -> str:
        """
        Returns the content of the first choice (empty string if none).
        The openai v1 client is synchronous, so the call runs in a worker thread.
        """
        if self._client is None:
            raise RuntimeError("OpenAI API key is not configured")

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        def _call():
            return self._client.chat.completions.create(**kwargs)

        response = await to_thread.run_sync(_call)
        return response.choices[0].message.content or ""
