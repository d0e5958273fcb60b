"""sqlassist.assistant.chat

Non-streaming tool-calling loop: the model may call the assistant tools for a
bounded number of steps, then must answer in text.
"""

from __future__ import annotations
import json
from datetime import datetime, timezone
from typing import Any, Optional

from sqlassist.assistant.tools import AssistantTools
from sqlassist.contracts.models import ChatTurn, ToolCallRecord
from sqlassist.errors import LLMOutputError

SYSTEM_PROMPT = """You are an SQL assistant that helps non-technical users query a database using natural language.
Current date/time: {now} UTC

Tools:
- schema: get the database schema. Call it before writing queries when unsure about tables or columns.
- db: run a SQL SELECT. Use dryRun=true to validate and store a preview; pass previewId to run a confirmed preview.
- preview: create a preview id plus explanation for the user to confirm.
- explain: explain a SQL statement in plain English.

Rules:
- SELECT queries only. Never attempt INSERT, UPDATE, DELETE, DROP, TRUNCATE, ALTER, REPLACE or MERGE.
- For complex queries, preview first and wait for the user's confirmation before executing.
- If a tool returns an error, explain it simply and suggest an alternative.
- Summarize results briefly and do not reveal masked personal data.
"""


def _parse_arguments(raw: Any) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    try:
        obj = json.loads(raw or "{}")
    except (TypeError, ValueError):
        return {}
    return obj if isinstance(obj, dict) else {}


class ChatAssistant:
    """Runs up to `max_steps` model steps, executing requested tools between them."""

    def __init__(self, llm_tool, tools: AssistantTools, logger, max_steps: int = 5):
        self.llm = llm_tool
        self.tools = tools
        self.logger = logger
        self.max_steps = max_steps

    def _system_message(self) -> dict[str, str]:
        now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        return {"role": "system", "content": SYSTEM_PROMPT.format(now=now)}

    def reply(self, messages: list[dict[str, Any]], user_id: Optional[str] = None, user_role: Optional[str] = None) -> ChatTurn:
        convo: list[dict[str, Any]] = [self._system_message()] + [
            {"role": m["role"], "content": m.get("content", "")} for m in messages
        ]
        records: list[ToolCallRecord] = []

        for step in range(self.max_steps):
            out = self.llm.chat(convo, tools=self.tools.specs())
            calls = out.get("tool_calls") or []
            if not calls:
                answer = (out.get("content") or "").strip()
                if not answer:
                    raise LLMOutputError("Model returned neither text nor tool calls")
                return ChatTurn(answer=answer, tool_calls=records)

            convo.append({
                "role": "assistant",
                "content": out.get("content"),
                "tool_calls": [
                    {"id": c["id"], "type": "function", "function": {"name": c["name"], "arguments": c["arguments"]}}
                    for c in calls
                ],
            })
            for c in calls:
                args = _parse_arguments(c.get("arguments"))
                result = self.tools.dispatch(c["name"], args, user_id=user_id, user_role=user_role)
                self.logger.info("chat step %d: tool %s -> %s", step + 1, c["name"], "error" if "error" in result else "ok")
                records.append(ToolCallRecord(name=c["name"], arguments=args, result=result))
                convo.append({"role": "tool", "tool_call_id": c["id"], "content": json.dumps(result, default=str)})

        self.logger.warning("Chat stopped after %d steps without a final answer", self.max_steps)
        return ChatTurn(
            answer="I could not finish this request within the allowed number of steps. Please try a narrower question.",
            tool_calls=records,
        )
