"""HTTP client for the EazyLiens API — the grid's only way to reach storage.

Uses httpx for both plain JSON calls and the SSE change stream. Every
failure, HTTP or transport, surfaces as a RemoteOperationError so callers
have a single thing to catch.
"""

import json
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import httpx

from eazyliens.domain.coloring import ColorRule, ColorRuleTable
from eazyliens.domain.entities import (
    DropdownOptionRow,
    Record,
    RecordPage,
    Role,
    parse_color_map,
)
from eazyliens.domain.exceptions import RemoteOperationError

logger = logging.getLogger(__name__)


@dataclass
class ServerEvent:
    """One event from an SSE stream."""

    event: str
    data: dict[str, Any] = field(default_factory=dict)


async def parse_sse(lines: AsyncIterator[str]) -> AsyncIterator[ServerEvent]:
    """Turn raw SSE lines into events; comments and malformed payloads are skipped."""
    event_type = "message"
    data_lines: list[str] = []

    async for line in lines:
        line = line.rstrip("\r")
        if line == "":
            if data_lines:
                event = _build_event(event_type, data_lines)
                if event is not None:
                    yield event
            event_type = "message"
            data_lines = []
        elif line.startswith(":"):
            continue
        elif line.startswith("event:"):
            event_type = line[len("event:"):].strip()
        elif line.startswith("data:"):
            data_lines.append(line[len("data:"):].strip())

    # Stream closed without a trailing blank line
    if data_lines:
        event = _build_event(event_type, data_lines)
        if event is not None:
            yield event


def _build_event(event_type: str, data_lines: list[str]) -> ServerEvent | None:
    raw = "\n".join(data_lines)
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Skipping malformed SSE payload: %r", raw[:200])
        return None
    return ServerEvent(event=event_type, data=payload if isinstance(payload, dict) else {})


def record_from_json(data: dict[str, Any]) -> Record:
    return Record(
        id=data["id"],
        values=dict(data.get("values") or {}),
        bg_color=parse_color_map(data.get("bg_color")),
    )


class EazyLiensApiClient:
    """Infrastructure adapter for the grid — talks to the EazyLiens REST API.

    The caller is identified by the X-Username header on every request.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self._base_url = base_url.rstrip("/")
        self._username = username
        self._http_client = http_client
        self._timeout = timeout

    def _get_headers(self) -> dict[str, str]:
        return {
            "X-Username": self._username,
            "Accept": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    @staticmethod
    def _raise_remote_error(operation: str, response: httpx.Response) -> None:
        try:
            detail = response.json().get("detail", response.text)
        except (ValueError, AttributeError):
            detail = response.text
        raise RemoteOperationError(operation, response.status_code, str(detail)[:500])

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        expected: tuple[int, ...] = (200,),
        **kwargs: Any,
    ) -> httpx.Response:
        client = await self._get_client()
        should_close = self._http_client is None
        try:
            response = await client.request(
                method, f"{self._base_url}{path}", headers=self._get_headers(), **kwargs
            )
        except httpx.HTTPError as e:
            raise RemoteOperationError(operation, 0, str(e)) from e
        finally:
            if should_close:
                await client.aclose()

        if response.status_code not in expected:
            self._raise_remote_error(operation, response)
        return response

    # ── Records ──────────────────────────────────────────────────────

    async def fetch_records(self, *, search: str = "", page: int = 0, page_size: int = 50) -> RecordPage:
        response = await self._request(
            "fetch_records",
            "GET",
            "/records",
            params={"search": search, "page": page, "page_size": page_size},
        )
        data = response.json()
        return RecordPage(
            items=[record_from_json(item) for item in data.get("items", [])],
            total=int(data.get("total", 0)),
            page=int(data.get("page", page)),
            page_size=int(data.get("page_size", page_size)),
        )

    async def create_record(self) -> Record:
        response = await self._request("create_record", "POST", "/records", expected=(201,))
        return record_from_json(response.json())

    async def update_field(self, record_id: int, column: str, value: str | None) -> Record:
        response = await self._request(
            "update_field",
            "PATCH",
            f"/records/{record_id}/fields",
            json={"column": column, "value": value},
        )
        return record_from_json(response.json())

    async def update_colors(self, record_id: int, colors: dict[str, str]) -> Record:
        response = await self._request(
            "update_colors",
            "PUT",
            f"/records/{record_id}/colors",
            json={"colors": colors},
        )
        return record_from_json(response.json())

    async def delete_record(self, record_id: int) -> None:
        await self._request("delete_record", "DELETE", f"/records/{record_id}", expected=(204,))

    # ── Options & identity ───────────────────────────────────────────

    async def fetch_dropdown_rows(self) -> list[DropdownOptionRow]:
        response = await self._request("fetch_dropdown_rows", "GET", "/dropdown-options")
        return [
            DropdownOptionRow(id=row["id"], values=dict(row.get("values") or {}))
            for row in response.json()
        ]

    async def fetch_color_rules(self) -> ColorRuleTable:
        response = await self._request("fetch_color_rules", "GET", "/color-rules")
        return ColorRuleTable(
            ColorRule(rule["column"], rule["value"], rule["background"], rule["text"])
            for rule in response.json()
        )

    async def fetch_role(self) -> Role:
        response = await self._request("fetch_role", "GET", "/users/me")
        return Role.parse(response.json().get("role"))

    # ── Change stream ────────────────────────────────────────────────

    async def stream_changes(self) -> AsyncIterator[ServerEvent]:
        """Yield events from the change stream until it ends or fails."""
        client = await self._get_client()
        should_close = self._http_client is None
        url = f"{self._base_url}/changes/stream"

        try:
            async with client.stream(
                "GET",
                url,
                headers={**self._get_headers(), "Accept": "text/event-stream"},
                timeout=httpx.Timeout(self._timeout, read=None),
            ) as response:
                if response.status_code != 200:
                    await response.aread()
                    self._raise_remote_error("stream_changes", response)
                async for event in parse_sse(response.aiter_lines()):
                    yield event
        except httpx.HTTPError as e:
            raise RemoteOperationError("stream_changes", 0, str(e)) from e
        finally:
            if should_close:
                await client.aclose()
