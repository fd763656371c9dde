"""Read-only client for the NocoDB records API.

Only one endpoint is used: ``GET {base}/tables/{table_id}/records`` with the
``where``, ``viewId`` and ``limit`` query parameters. Authentication is a static
``xc-token`` header.
"""

import re
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import httpx

from tool_directory.config import ConfigurationError
from tool_directory.diagnostics import RECORDS_FETCHED
from tool_directory.diagnostics import REQUEST_HEADERS
from tool_directory.diagnostics import Reporter
from tool_directory.diagnostics import default_reporter

TOKEN_HEADER = "xc-token"
REDACTED = "***"

# Characters with meaning inside a NocoDB where clause
_FILTER_METACHARACTERS = re.compile(r"[(),~]|[\x00-\x1f\x7f]")


class RecordStoreError(RuntimeError):
    """The record store could not be reached or returned an unusable response."""


class FilterExpressionError(ValueError):
    """A value cannot be placed in a where clause without changing its meaning."""


def build_where(field: str, value: str, op: str = "eq") -> str:
    """Build a ``(field,op,value)`` filter, refusing values that would alter the clause.

    Examples:
        >>> build_where("slug", "acme")
        '(slug,eq,acme)'
    """
    for part in (field, op, value):
        if not part or _FILTER_METACHARACTERS.search(part):
            raise FilterExpressionError(f"Unsafe filter component: {part!r}")
    return f"({field},{op},{value})"


class RecordClient:
    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        log_request_headers: bool = False,
        reporter: Optional[Reporter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        if not base_url or not token:
            raise ConfigurationError(
                f"Incomplete NocoDB configuration (api_url set: {bool(base_url)}, token set: {bool(token)})"
            )
        self.base_url = base_url.rstrip("/")
        self.reporter = reporter or default_reporter()
        self._headers = {TOKEN_HEADER: token, "Accept": "application/json"}
        self._log_request_headers = log_request_headers
        self._transport = transport
        self._timeout = timeout

    def _client_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"base_url": self.base_url, "headers": self._headers}
        if self._transport is not None:
            options["transport"] = self._transport
        if self._timeout is not None:
            options["timeout"] = self._timeout
        if self._log_request_headers:
            options["event_hooks"] = {"request": [self._report_headers]}
        return options

    async def _report_headers(self, request: httpx.Request) -> None:
        headers = {
            name: (REDACTED if name.lower() == TOKEN_HEADER else value) for name, value in request.headers.items()
        }
        self.reporter.debug(REQUEST_HEADERS, f"{request.method} {request.url.path}", headers=headers)

    async def fetch_records(
        self,
        table_id: str,
        view_id: str,
        *,
        where: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch the raw record list for a table view.

        Raises:
            RecordStoreError: on any transport failure, non-2xx status or malformed body.
        """
        params: Dict[str, Any] = {"viewId": view_id}
        if where is not None:
            params["where"] = where
        if limit is not None:
            params["limit"] = limit

        path = f"/tables/{table_id}/records"
        try:
            async with httpx.AsyncClient(**self._client_options()) as client:
                response = await client.get(path, params=params)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as exc:
            raise RecordStoreError(f"Request to {path} failed: {exc}") from exc
        except ValueError as exc:
            raise RecordStoreError(f"Response from {path} is not valid JSON: {exc}") from exc

        records = body.get("list") if isinstance(body, dict) else None
        if not isinstance(records, list):
            raise RecordStoreError(f"Response from {path} has no record list")

        self.reporter.debug(RECORDS_FETCHED, f"Fetched {len(records)} records", table=table_id, view=view_id)
        return records
