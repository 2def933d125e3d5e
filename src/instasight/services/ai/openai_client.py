"""OpenAI chat completion client wrapper."""

from typing import Optional

import openai
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from instasight.config import Settings, get_settings


class AnalysisError(Exception):
    """Error while producing an AI analysis."""

    pass


class OpenAIClient:
    """Wrapper for the OpenAI chat completions API."""

    DEFAULT_TEMPERATURE = 0.4

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        settings: Optional[Settings] = None,
        client: Optional[openai.OpenAI] = None,
    ):
        self.settings = settings or get_settings()
        self.api_key = api_key or self.settings.openai_api_key
        self.model = model or self.settings.openai_model

        if client is None and not self.api_key:
            raise AnalysisError(
                "OPENAI_API_KEY is not configured. "
                "Add it to your environment before requesting analysis."
            )

        self.client = client or openai.OpenAI(api_key=self.api_key)

    @retry(
        retry=retry_if_exception_type((openai.APIConnectionError, openai.RateLimitError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _create_completion(self, messages: list[dict[str, str]], temperature: float):
        return self.client.chat.completions.create(
            model=self.model,
            temperature=temperature,
            messages=messages,
        )

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """Generate text with a single chat completion.

        Args:
            prompt: The user prompt
            system_prompt: Optional system prompt for context
            temperature: Sampling temperature

        Returns:
            The stripped message content
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            completion = self._create_completion(messages, temperature)
        except openai.APIStatusError as e:
            raise AnalysisError(f"OpenAI API error ({e.status_code}): {e.message}") from e
        except openai.APIError as e:
            raise AnalysisError(f"OpenAI API error: {e}") from e

        content = None
        if completion.choices:
            content = completion.choices[0].message.content
        content = (content or "").strip()

        if not content:
            raise AnalysisError("OpenAI did not return any content.")
        return content
