"""sqlassist.explain.service

Plain-English explanations with a deterministic fallback.

The provider (an LLM) is optional. Any failure, timeout, empty answer or
missing configuration falls back to `heuristic_explain`.
"""

from __future__ import annotations
from typing import Optional

from sqlassist.contracts.tool_base import ExplanationProvider
from sqlassist.explain.heuristic import heuristic_explain


class ExplanationService:
    """Explains SQL via the provider when possible, otherwise heuristically."""

    def __init__(self, provider: Optional[ExplanationProvider], logger):
        self.provider = provider
        self.logger = logger

    def explain(self, sql: str) -> str:
        if self.provider is None:
            return heuristic_explain(sql)

        try:
            text = (self.provider.explain_sql(sql) or "").strip()
        except Exception as e:
            self.logger.warning("LLM explain failed, using heuristic explanation: %s", e)
            return heuristic_explain(sql)

        if not text:
            self.logger.warning("LLM explain returned empty text, using heuristic explanation")
            return heuristic_explain(sql)
        return text
