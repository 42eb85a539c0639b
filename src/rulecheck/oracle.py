"""
Text oracle -- the pluggable LLM capability behind rule interpretation and judging.

The engine depends only on the TextOracle protocol. LLMOracle implements it on
top of the provider-agnostic LLMClient; tests and other providers can supply
any object with the same two coroutines.
"""

import logging
from typing import Protocol, runtime_checkable

from .llm import CacheablePrompt, LLMClient, create_client, detect_provider
from .security.prompt_guard import detect_injection_attempt, wrap_user_content

logger = logging.getLogger(__name__)

INTERPRET_SYSTEM = (
    "You are an assistant that helps understand document validation rules. "
    "Concisely rephrase the user's rule into its primary validation intent. "
    "If a rule is too vague or seems unrelated to document content validation, "
    'state that it\'s "Ambiguous or not directly verifiable as a document content rule."'
)

JUDGE_SYSTEM = (
    "You are a precise document validation engine. Analyze the document text against "
    'the provided rule. Respond ONLY with a JSON object containing two keys: "passed" '
    '(boolean) and "details" (a brief explanation, max 2 sentences). For rules like '
    '"must contain [X]" or "must have [X]", the rule passes if X is found in the '
    "document, regardless of surrounding context like negation, unless the rule "
    'explicitly states negation (e.g., "must NOT contain [X]"). If "passed" is true, '
    '"details" should confirm adherence. If "passed" is false, "details" should explain '
    'why. If a rule is too ambiguous, set "passed" to false and explain in "details". '
    'Ensure "details" is always a string.'
)

INTERPRET_MAX_TOKENS = 60
INTERPRET_TEMPERATURE = 0.2
JUDGE_MAX_TOKENS = 150
JUDGE_TEMPERATURE = 0.1


@runtime_checkable
class TextOracle(Protocol):
    """Interface the engine uses for LLM-backed interpretation and judging.

    Both methods raise OracleError on transport failure.
    """

    async def summarize_intent(self, rule: str) -> str:
        """Restate the validation intent of a rule in a sentence."""
        ...

    async def judge_rule(self, rule: str, document_text: str) -> str:
        """Return the raw (expected JSON) verdict for a rule against document text."""
        ...


class LLMOracle:
    """TextOracle backed by an LLMClient.

    Usage:
        oracle = LLMOracle(create_client())
        text = await oracle.summarize_intent("Document must contain the word DRAFT")
    """

    def __init__(self, client: LLMClient):
        self._client = client

    async def summarize_intent(self, rule: str) -> str:
        prompt = CacheablePrompt(
            system=INTERPRET_SYSTEM,
            user_message=f'User rule: "{rule}"',
        )
        response = await self._client.call(
            prompt,
            role="interpret",
            temperature=INTERPRET_TEMPERATURE,
            max_tokens=INTERPRET_MAX_TOKENS,
        )
        return response.content

    async def judge_rule(self, rule: str, document_text: str) -> str:
        if detect_injection_attempt(document_text):
            logger.warning("[Oracle] Document contains possible prompt injection; judging anyway")

        prompt = CacheablePrompt(
            system=JUDGE_SYSTEM,
            user_message=(
                f"{wrap_user_content(document_text, label='DOCUMENT_TEXT')}\n\n"
                f'Rule: "{rule}"\n\n'
                f"Does the document text pass this rule? Respond with JSON."
            ),
        )
        response = await self._client.call(
            prompt,
            role="judge",
            temperature=JUDGE_TEMPERATURE,
            max_tokens=JUDGE_MAX_TOKENS,
            json_mode=True,
        )
        return response.content


def create_oracle(provider: str | None = None, **kwargs) -> LLMOracle | None:
    """Build an LLMOracle if a provider is given or an API key is present, else None."""
    provider = provider or detect_provider()
    if provider is None:
        logger.info("[Oracle] No LLM API key found; oracle disabled")
        return None
    return LLMOracle(create_client(provider=provider, **kwargs))
