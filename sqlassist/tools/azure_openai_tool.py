"""sqlassist.tools.azure_openai_tool

Azure OpenAI tool supporting **MSI or API key** authentication.

Pattern:
  msi = ManagedIdentityCredential(client_id=AZURE_MSI_CLIENT_ID)
  token_provider = get_bearer_token_provider(msi, "https://cognitiveservices.azure.com/.default")
  client = AzureOpenAI(azure_endpoint=..., api_version=..., azure_ad_token_provider=token_provider)

Two uses:
- `explain_sql`: plain-English explanation of a query (ExplanationProvider).
- `chat`: one tool-calling completion step for the chat assistant.

Calls are bounded by `timeout_seconds` and never retried by the client;
callers decide on fallbacks.
"""

from __future__ import annotations
from typing import Any, Optional

from openai import AzureOpenAI

from sqlassist.auth import get_aoai_client_kwargs
from sqlassist.contracts.tool_base import ExplanationProvider
from sqlassist.errors import LLMOutputError

_EXPLAIN_SYSTEM = (
    "You explain SQL queries in plain English for a non-technical user.\n"
    "Keep it concise (2-4 short paragraphs). Call out which tables are used, what filters apply, "
    "and whether the result is aggregated or raw rows. If any potential PII might be included, mention that as well.\n"
    "Return plain text only."
)


class AzureOpenAITool(ExplanationProvider):
    """LLM client wrapper for SQL explanations and tool-calling chat."""

    def __init__(self, endpoint: str, chat_deployment: str, logger, api_version: str = "2024-12-01-preview", timeout_seconds: float = 10.0):
        self.endpoint = endpoint
        self.chat_deployment = chat_deployment
        self.logger = logger
        self.timeout_seconds = timeout_seconds

        self.client = AzureOpenAI(
            api_version=api_version,
            azure_endpoint=self.endpoint,
            timeout=timeout_seconds,
            max_retries=0,
            **get_aoai_client_kwargs(),
        )

    def explain_sql(self, sql: str) -> str:
        resp = self.client.chat.completions.create(
            model=self.chat_deployment,
            messages=[
                {"role": "system", "content": _EXPLAIN_SYSTEM},
                {"role": "user", "content": f"SQL:\n```\n{sql}\n```"},
            ],
            temperature=0.2,
            max_tokens=240,
        )
        text = (resp.choices[0].message.content or "").strip()
        if not text:
            raise LLMOutputError("Empty explanation from model")
        return text

    def chat(self, messages: list[dict[str, Any]], tools: Optional[list[dict[str, Any]]] = None) -> dict[str, Any]:
        """Run one completion step.

        Returns `{"content": str | None, "tool_calls": [{"id", "name", "arguments"}]}`
        where `arguments` is the raw JSON string produced by the model.
        """
        kwargs: dict[str, Any] = {}
        if tools:
            kwargs["tools"] = tools
        resp = self.client.chat.completions.create(
            model=self.chat_deployment,
            messages=messages,
            temperature=0.1,
            **kwargs,
        )
        msg = resp.choices[0].message
        calls = [
            {"id": tc.id, "name": tc.function.name, "arguments": tc.function.arguments or "{}"}
            for tc in (msg.tool_calls or [])
        ]
        return {"content": msg.content, "tool_calls": calls}
