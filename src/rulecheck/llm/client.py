"""
Provider-agnostic async LLM client used by the rule oracle.

Supports: OpenAI (GPT), Anthropic (Claude), Google (Gemini).

    client = LLMClient(provider="openai")
    response = await client.call(
        CacheablePrompt(system="You judge rules...", user_message="Rule: ..."),
        role="judge",
        temperature=0.1,
        max_tokens=150,
        json_mode=True,
    )
    response.content  # str

Failures raise OracleError. There is no retry: a failed call is terminal for
the rule that made it, and sibling rules carry on.
"""

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any

from ..errors import OracleError
from ..security.prompt_guard import sanitize_for_prompt

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
DEFAULT_MAX_PROMPT_LENGTH = 60_000

PROVIDER_KEY_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google": "GOOGLE_API_KEY",
}
DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-haiku-latest",
    "google": "gemini-2.0-flash",
}


# =============================================================================
# DATA MODELS
# =============================================================================


@dataclass
class CacheablePrompt:
    """
    Prompt split into a stable instruction prefix and the per-call request.

      - system: Instructions (identical for every rule)
      - context: Optional shared context
      - user_message: The rule (and document excerpt) being judged
    """

    system: str = ""
    context: str = ""
    user_message: str = ""

    def to_flat_prompt(self) -> str:
        """Flatten to a single string (for providers without a system slot)."""
        return "\n\n".join(p for p in (self.system, self.context, self.user_message) if p)


@dataclass
class TokenUsage:
    """Token usage for a single LLM call."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self):
        self.total_tokens = self.input_tokens + self.output_tokens


@dataclass
class LLMResponse:
    """Response from an LLM call."""

    content: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    model: str = ""
    provider: str = ""
    latency_ms: float = 0.0


# =============================================================================
# LLM CLIENT
# =============================================================================


class LLMClient:
    """Thin async wrapper over the provider SDKs with usage tracking."""

    def __init__(
        self,
        provider: str = "openai",
        model: str | None = None,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_prompt_length: int = DEFAULT_MAX_PROMPT_LENGTH,
    ):
        self._provider = provider.lower()
        if self._provider not in PROVIDER_KEY_VARS:
            raise ValueError(f"Unsupported provider: {provider}")
        self._model = model or DEFAULT_MODELS[self._provider]
        self._api_key = api_key or self._load_api_key()
        self._timeout = timeout
        self._max_prompt_length = max_prompt_length
        self._client: Any = None
        self._total_usage = TokenUsage()

        self._init_client()
        logger.info(
            f"[LLM] Initialized {self._provider} client "
            f"(model={self._model}, timeout={self._timeout}s)"
        )

    def _load_api_key(self) -> str:
        env_var = PROVIDER_KEY_VARS[self._provider]
        key = os.environ.get(env_var, "")
        if not key:
            logger.warning(f"[LLM] {env_var} not set -- calls will fail")
        return key

    def _init_client(self) -> None:
        """Initialize the provider-specific SDK client."""
        try:
            if self._provider == "openai":
                import openai

                self._client = openai.AsyncOpenAI(
                    api_key=self._api_key, timeout=self._timeout, max_retries=0
                )
            elif self._provider == "anthropic":
                import anthropic

                self._client = anthropic.AsyncAnthropic(
                    api_key=self._api_key, timeout=self._timeout, max_retries=0
                )
            else:
                import google.generativeai as genai

                genai.configure(api_key=self._api_key)
                self._client = genai.GenerativeModel(self._model)
        except ImportError:
            logger.error(
                f"[LLM] {self._provider} SDK not installed. "
                f"Install rulecheck[{self._provider}]."
            )
            self._client = None

    async def call(
        self,
        prompt: str | CacheablePrompt,
        role: str = "assistant",
        temperature: float = 0.2,
        max_tokens: int = 256,
        json_mode: bool = False,
    ) -> LLMResponse:
        """
        Make one LLM call.

        Args:
            prompt: String or CacheablePrompt. Strings become the user message.
            role: Semantic role hint for logs ("interpret", "judge"); not sent.
            temperature: Sampling temperature.
            max_tokens: Maximum output tokens.
            json_mode: Ask the provider for a JSON object where supported.

        Raises:
            OracleError: SDK missing, or the provider call failed.
        """
        if isinstance(prompt, str):
            prompt = CacheablePrompt(user_message=prompt)
        prompt = self._sanitize_prompt(prompt)

        if self._client is None:
            raise OracleError(f"{self._provider} client not initialized")

        start = time.time()
        try:
            response = await self._call_provider(prompt, temperature, max_tokens, json_mode)
        except Exception as e:
            logger.error(f"[LLM] {self._provider}/{role} call failed: {type(e).__name__}")
            raise OracleError(f"{self._provider} call failed: {type(e).__name__}") from e

        response.latency_ms = (time.time() - start) * 1000
        self._track_usage(response.usage)
        logger.debug(
            f"[LLM] {self._provider}/{role}: "
            f"{response.usage.input_tokens}in + {response.usage.output_tokens}out "
            f"({response.latency_ms:.0f}ms)"
        )
        return response

    def _sanitize_prompt(self, prompt: CacheablePrompt) -> CacheablePrompt:
        """Enforce size limits and strip null bytes."""
        limit = self._max_prompt_length // 3
        return CacheablePrompt(
            system=sanitize_for_prompt(prompt.system, max_length=limit),
            context=sanitize_for_prompt(prompt.context, max_length=limit),
            user_message=sanitize_for_prompt(prompt.user_message, max_length=limit),
        )

    async def _call_provider(
        self,
        prompt: CacheablePrompt,
        temperature: float,
        max_tokens: int,
        json_mode: bool,
    ) -> LLMResponse:
        """Dispatch to provider-specific implementation."""
        if self._provider == "openai":
            return await self._call_openai(prompt, temperature, max_tokens, json_mode)
        if self._provider == "anthropic":
            return await self._call_anthropic(prompt, temperature, max_tokens)
        return await self._call_google(prompt, temperature, max_tokens, json_mode)

    async def _call_openai(
        self, prompt: CacheablePrompt, temperature: float, max_tokens: int, json_mode: bool
    ) -> LLMResponse:
        messages = []
        if prompt.system:
            messages.append({"role": "system", "content": prompt.system})
        if prompt.context:
            messages.append({"role": "system", "content": prompt.context})
        messages.append({"role": "user", "content": prompt.user_message})

        kwargs: dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self._client.chat.completions.create(
            model=self._model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )

        usage_data = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            usage=TokenUsage(
                input_tokens=usage_data.prompt_tokens if usage_data else 0,
                output_tokens=usage_data.completion_tokens if usage_data else 0,
            ),
            model=self._model,
            provider="openai",
        )

    async def _call_anthropic(
        self, prompt: CacheablePrompt, temperature: float, max_tokens: int
    ) -> LLMResponse:
        system = "\n\n".join(p for p in (prompt.system, prompt.context) if p)
        kwargs: dict[str, Any] = {}
        if system:
            kwargs["system"] = system

        response = await self._client.messages.create(
            model=self._model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt.user_message}],
            **kwargs,
        )

        usage_data = response.usage
        text = "".join(
            getattr(block, "text", "") for block in response.content
        )
        return LLMResponse(
            content=text,
            usage=TokenUsage(
                input_tokens=getattr(usage_data, "input_tokens", 0),
                output_tokens=getattr(usage_data, "output_tokens", 0),
            ),
            model=self._model,
            provider="anthropic",
        )

    async def _call_google(
        self, prompt: CacheablePrompt, temperature: float, max_tokens: int, json_mode: bool
    ) -> LLMResponse:
        """Google Gemini (sync SDK, run in a worker thread)."""
        generation_config: dict[str, Any] = {
            "temperature": temperature,
            "max_output_tokens": max_tokens,
        }
        if json_mode:
            generation_config["response_mime_type"] = "application/json"

        response = await asyncio.to_thread(
            self._client.generate_content,
            prompt.to_flat_prompt(),
            generation_config=generation_config,
        )

        input_tok = 0
        output_tok = 0
        if hasattr(response, "usage_metadata"):
            input_tok = getattr(response.usage_metadata, "prompt_token_count", 0)
            output_tok = getattr(response.usage_metadata, "candidates_token_count", 0)

        return LLMResponse(
            content=response.text,
            usage=TokenUsage(input_tokens=input_tok, output_tokens=output_tok),
            model=self._model,
            provider="google",
        )

    def _track_usage(self, usage: TokenUsage) -> None:
        self._total_usage.input_tokens += usage.input_tokens
        self._total_usage.output_tokens += usage.output_tokens
        self._total_usage.total_tokens += usage.total_tokens

    @property
    def total_usage(self) -> TokenUsage:
        """Cumulative token usage across all calls in this client's lifetime."""
        return self._total_usage

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def model(self) -> str:
        return self._model


# =============================================================================
# FACTORY
# =============================================================================


def detect_provider() -> str | None:
    """Return the first provider whose API key is set: openai, anthropic, google."""
    for provider, env_var in PROVIDER_KEY_VARS.items():
        if os.environ.get(env_var):
            return provider
    return None


def create_client(
    provider: str | None = None,
    model: str | None = None,
    api_key: str | None = None,
    **kwargs,
) -> LLMClient:
    """
    Create an LLM client, auto-detecting provider from environment if not specified.

    Detection order:
      1. Explicit provider argument
      2. OPENAI_API_KEY set -> openai
      3. ANTHROPIC_API_KEY set -> anthropic
      4. GOOGLE_API_KEY set -> google
      5. Default: openai
    """
    if provider is None:
        provider = detect_provider()
        if provider is None:
            provider = "openai"
            logger.warning("[LLM] No API key found. Defaulting to openai.")

    return LLMClient(provider=provider, model=model, api_key=api_key, **kwargs)
