"""
Google Gemini provider implementation.

Uses the google-genai SDK; JSON mode maps to the response MIME type.
"""

from google import genai
from google.genai import types

from .base import LLMProvider, LLMResponse


class GoogleProvider(LLMProvider):
    """Google Gemini provider."""

    MODEL_ALIASES = {
        "flash": "gemini-2.5-flash",
        "pro": "gemini-2.5-pro",
    }

    def __init__(
        self,
        api_key: str,
        default_model: str = "gemini-2.5-flash",
    ):
        self.client = genai.Client(api_key=api_key)
        self._default_model = self._resolve_model(default_model)

    def _resolve_model(self, model: str) -> str:
        return self.MODEL_ALIASES.get(model, model)

    @property
    def name(self) -> str:
        return "google"

    @property
    def default_model(self) -> str:
        return self._default_model

    def complete(
        self,
        user_prompt: str,
        system_prompt: str | None = None,
        model: str | None = None,
        max_tokens: int = 500,
        temperature: float = 0.0,
        json_mode: bool = False,
    ) -> LLMResponse:
        resolved_model = self._resolve_model(model) if model else self._default_model

        config_kwargs = {
            "max_output_tokens": max_tokens,
            "temperature": temperature,
        }
        if system_prompt:
            config_kwargs["system_instruction"] = system_prompt
        if json_mode:
            config_kwargs["response_mime_type"] = "application/json"

        response = self.client.models.generate_content(
            model=resolved_model,
            contents=user_prompt,
            config=types.GenerateContentConfig(**config_kwargs),
        )

        input_tokens = 0
        output_tokens = 0
        if response.usage_metadata:
            input_tokens = response.usage_metadata.prompt_token_count or 0
            output_tokens = response.usage_metadata.candidates_token_count or 0

        return LLMResponse(
            # .text is None when the candidate was blocked or empty
            text=response.text or "",
            model=resolved_model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            metadata={"provider": "google"},
        )
