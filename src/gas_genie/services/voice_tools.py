"""Handlers for voice assistant tool calls."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from gas_genie.domain.voice import ToolCall, ToolCallResult
from gas_genie.services.regulations import RegulationSearchService, format_matches

logger = logging.getLogger(__name__)

SEARCH_UNAVAILABLE = "Regulation search is not available at this time."

_LOG_TABLES: dict[str, str] = {
    "log_job": "jobs",
    "log_hours": "work_hours",
    "log_mileage": "mileage_logs",
}


class WorkLogRepository(Protocol):
    """Persistence interface for records logged by voice."""

    def insert(self, table: str, payload: dict[str, object]) -> None:
        """Insert a row into a work log table."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class VoiceToolService:
    """Executes a single tool call and returns the text spoken back."""

    regulation_search: RegulationSearchService
    repository: WorkLogRepository
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def handle(self, call: ToolCall) -> ToolCallResult:
        """Dispatch a tool call by function name."""
        name = call.function.name if call.function else None
        arguments = _parse_arguments(call.function.arguments if call.function else None)
        if name == "search_regulations":
            text = await self._search_regulations(str(arguments.get("query") or ""))
        elif name in _LOG_TABLES:
            text = self._log(name, arguments)
        else:
            text = f"Unknown tool: {name}"
        return ToolCallResult(tool_call_id=call.id, result=text)

    async def _search_regulations(self, query: str) -> str:
        if not query.strip():
            return SEARCH_UNAVAILABLE
        try:
            result = await self.regulation_search.search(query, limit=3)
        except Exception:
            logger.exception("Regulation search failed for voice tool call")
            return SEARCH_UNAVAILABLE
        return format_matches(result) or SEARCH_UNAVAILABLE

    def _log(self, name: str, arguments: dict[str, object]) -> str:
        payload = {**arguments, "created_at": self.clock().isoformat()}
        self.repository.insert(_LOG_TABLES[name], payload)
        if name == "log_job":
            return f"Job logged: {arguments.get('description') or 'New job'}"
        if name == "log_hours":
            return f"Logged {arguments.get('hours') or 0} hours"
        return f"Logged {arguments.get('miles') or 0} miles"


def _parse_arguments(raw: str | dict[str, object] | None) -> dict[str, object]:
    """Decode tool arguments, which arrive as a JSON string or an object."""
    if raw is None or raw == "":
        return {}
    if isinstance(raw, dict):
        return dict(raw)
    parsed = json.loads(raw)
    if not isinstance(parsed, dict):
        raise ValueError("Tool arguments must be a JSON object")
    return parsed
