"""sqlassist.main

Wiring for tools + policies + preview store + orchestrator.

`build_services()` is the single place that reads Settings; everything below
it receives its collaborators explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from sqlassist.env_loader import load_env
from sqlassist.config import Settings
from sqlassist.logging_utils import build_logger

from sqlassist.orchestrator import QueryOrchestrator
from sqlassist.assistant.tools import AssistantTools
from sqlassist.assistant.chat import ChatAssistant

from sqlassist.policy.sql_policy import SqlPolicy
from sqlassist.policy.access_policy import AccessPolicy
from sqlassist.policy.table_extractor import HeuristicTableExtractor

from sqlassist.preview.store import InMemoryPreviewStore
from sqlassist.preview.sweeper import PreviewSweeper

from sqlassist.explain.service import ExplanationService
from sqlassist.tools.azure_openai_tool import AzureOpenAITool
from sqlassist.tools.sql_formatter import SqlparseFormatter
from sqlassist.tools.db_sqlite_tool import SqliteDatabaseTool
from sqlassist.tools.audit_log import QueryLogAuditSink
from sqlassist.contracts.tool_base import DataStore


@dataclass
class Services:
    settings: Settings
    logger: Any
    orchestrator: QueryOrchestrator
    previews: InMemoryPreviewStore
    sweeper: PreviewSweeper
    tools: AssistantTools
    chat: Optional[ChatAssistant]


def build_db_tool(settings: Settings, logger) -> DataStore:
    if settings.db_backend == "sqlite":
        return SqliteDatabaseTool(settings.sqlite_path, logger=logger, timeout_seconds=settings.db_timeout_seconds)

    # pyodbc needs the ODBC driver manager; only import it when SQL Server is used
    from sqlassist.tools.db_sqlserver_tool import SqlServerDatabaseTool

    return SqlServerDatabaseTool(
        server=settings.azure_sql_server,
        database=settings.azure_sql_database,
        conn_str=settings.azure_sql_conn_str,
        logger=logger,
        timeout_seconds=settings.db_timeout_seconds,
    )


def build_services(settings: Optional[Settings] = None, llm_tool: Any = None, db_tool: Optional[DataStore] = None) -> Services:
    if settings is None:
        load_env()  # load .env if present
        settings = Settings.load()
    logger = build_logger(settings.log_dir)

    extractor = HeuristicTableExtractor()
    if settings.rbac_policy_file:
        access_policy = AccessPolicy.from_json_file(settings.rbac_policy_file, extractor)
    else:
        access_policy = AccessPolicy.default(extractor)

    db = db_tool or build_db_tool(settings, logger)

    if llm_tool is None and settings.llm_configured:
        llm_tool = AzureOpenAITool(
            endpoint=settings.azure_openai_endpoint,
            chat_deployment=settings.azure_openai_chat_deployment,
            logger=logger,
            api_version=settings.azure_openai_api_version,
            timeout_seconds=settings.explain_timeout_seconds,
        )
    if llm_tool is None:
        logger.info("Azure OpenAI not configured; explanations use the heuristic explainer and /chat is disabled")

    previews = InMemoryPreviewStore(ttl_seconds=settings.preview_ttl_seconds)
    sweeper = PreviewSweeper(previews, settings.preview_sweep_interval_seconds, logger)

    orchestrator = QueryOrchestrator(
        sql_policy=SqlPolicy(),
        access_policy=access_policy,
        formatter=SqlparseFormatter(),
        previews=previews,
        db=db,
        explainer=ExplanationService(llm_tool, logger),
        audit=QueryLogAuditSink(db, logger) if settings.audit_enabled else None,
        logger=logger,
    )
    tools = AssistantTools(orchestrator, logger)
    chat = ChatAssistant(llm_tool, tools, logger, max_steps=settings.chat_max_steps) if llm_tool is not None else None

    return Services(
        settings=settings,
        logger=logger,
        orchestrator=orchestrator,
        previews=previews,
        sweeper=sweeper,
        tools=tools,
        chat=chat,
    )
