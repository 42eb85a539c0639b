"""
LLM Client -- provider-agnostic async wrapper backing the rule oracle.

Supports OpenAI (GPT), Anthropic (Claude), and Google (Gemini).

Usage:
    from .llm import create_client

    client = create_client()  # Auto-detects provider from env
    response = await client.call(prompt="Restate this rule", role="interpret")
    print(response.content)
"""

from .client import CacheablePrompt, LLMClient, LLMResponse, create_client, detect_provider
