"""
Anthropic Claude provider implementation.

Claude has no native JSON mode; JSON output is requested through the
system prompt instead.
"""

import anthropic

from .base import JSON_INSTRUCTION, LLMProvider, LLMResponse


class AnthropicProvider(LLMProvider):
    """Anthropic Messages API provider."""

    MODEL_ALIASES = {
        "haiku": "claude-haiku-4-5",
        "sonnet": "claude-sonnet-4-5",
        "opus": "claude-opus-4-1",
    }

    def __init__(
        self,
        api_key: str,
        default_model: str = "claude-haiku-4-5",
    ):
        self.client = anthropic.Anthropic(api_key=api_key)
        self._default_model = self._resolve_model(default_model)

    def _resolve_model(self, model: str) -> str:
        return self.MODEL_ALIASES.get(model, model)

    @property
    def name(self) -> str:
        return "anthropic"

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

        system = system_prompt or ""
        if json_mode:
            system = f"{system}\n\n{JSON_INSTRUCTION}".strip()

        kwargs = {
            "model": resolved_model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": user_prompt}],
            "temperature": temperature,
        }
        if system:
            kwargs["system"] = system

        response = self.client.messages.create(**kwargs)

        text = "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )
        usage = response.usage
        return LLMResponse(
            text=text,
            model=resolved_model,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            metadata={
                "stop_reason": response.stop_reason,
                "provider": "anthropic",
            }
        )
