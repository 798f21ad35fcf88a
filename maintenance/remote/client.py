"""
Hotel Maintenance Remote — REST Client
=========================================
Thin async client for a PostgREST-style table API plus the raw
request path the identity provider uses.

    GET    /rest/v1/<table>?select=*&col=eq.v&order=col.asc
    POST   /rest/v1/<table>                  (insert, returns the row)
    PATCH  /rest/v1/<table>?col=eq.v         (update, returns the row)
    DELETE /rest/v1/<table>?col=eq.v

Every request carries the access key as `apikey` and either the signed-in
user's access token or the key itself as the bearer token.

Transport failures and HTTP errors raise RemoteError; callers on write
paths decide whether to roll back.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import httpx
from django.core.serializers.json import DjangoJSONEncoder

from maintenance.conf import RemoteSettings
from maintenance.errors import RemoteError, RemoteNotConfigured

logger = logging.getLogger("maintenance.remote")

REST_PREFIX = "/rest/v1"
SINGLE_OBJECT = "application/vnd.pgrst.object+json"


def _error_details(response: httpx.Response) -> Tuple[str, Optional[str]]:
    """Best-effort (message, code) from a PostgREST / auth error body."""
    try:
        body = response.json()
    except ValueError:
        return (response.text or f"HTTP {response.status_code}", None)
    if not isinstance(body, dict):
        return (str(body), None)
    message = (
        body.get("msg")
        or body.get("message")
        or body.get("error_description")
        or body.get("error")
        or f"HTTP {response.status_code}"
    )
    code = body.get("error_code") or body.get("code") or body.get("error")
    return (str(message), None if code is None else str(code))


class RemoteClient:
    """Async REST client for the remote backend."""

    def __init__(
        self,
        url: str,
        key: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not url or not key:
            raise RemoteNotConfigured()
        self._key = key
        self._access_token: Optional[str] = None
        self._http = httpx.AsyncClient(
            base_url=url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        remote: Optional[RemoteSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "RemoteClient":
        remote = remote or RemoteSettings.from_django()
        if not remote.is_configured:
            raise RemoteNotConfigured()
        return cls(remote.url, remote.key, timeout=remote.timeout_seconds, transport=transport)

    def set_access_token(self, token: Optional[str]) -> None:
        self._access_token = token

    def _headers(self, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self._key,
            "Authorization": f"Bearer {self._access_token or self._key}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    async def send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Sequence[Tuple[str, str]]] = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        allow_empty: bool = False,
    ) -> Any:
        """
        Issue one request and return the decoded JSON body (None when empty).

        With allow_empty=True a 406 from a single-object request means
        "no row matched" and returns None instead of raising.
        """
        content = None if body is None else json.dumps(body, cls=DjangoJSONEncoder)
        try:
            response = await self._http.request(
                method,
                path,
                params=list(params or ()),
                content=content,
                headers=self._headers(headers),
            )
        except httpx.HTTPError as exc:
            raise RemoteError(f"{method} {path} failed: {exc}", retryable=True) from exc

        if allow_empty and response.status_code == 406:
            return None
        if response.status_code >= 400:
            message, code = _error_details(response)
            raise RemoteError(
                message,
                status_code=response.status_code,
                retryable=response.status_code >= 500,
                code=code,
            )
        if not response.content:
            return None
        return response.json()

    # ── table operations ──────────────────────────────────────

    @staticmethod
    def _filters(filters: Optional[Mapping[str, Any]]) -> List[Tuple[str, str]]:
        return [(column, f"eq.{value}") for column, value in (filters or {}).items()]

    async def select(
        self,
        table: str,
        *,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[str] = None,
        descending: bool = False,
        single: bool = False,
    ) -> Any:
        params = [("select", "*")] + self._filters(filters)
        if order:
            params.append(("order", f"{order}.{'desc' if descending else 'asc'}"))
        if single:
            return await self.send(
                "GET", f"{REST_PREFIX}/{table}",
                params=params,
                headers={"Accept": SINGLE_OBJECT},
                allow_empty=True,
            )
        rows = await self.send("GET", f"{REST_PREFIX}/{table}", params=params)
        return rows or []

    async def insert(self, table: str, row: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        return await self.send(
            "POST", f"{REST_PREFIX}/{table}",
            params=[("select", "*")],
            body=dict(row),
            headers={"Prefer": "return=representation", "Accept": SINGLE_OBJECT},
        )

    async def update(
        self,
        table: str,
        row: Mapping[str, Any],
        *,
        filters: Mapping[str, Any],
    ) -> Optional[Dict[str, Any]]:
        return await self.send(
            "PATCH", f"{REST_PREFIX}/{table}",
            params=[("select", "*")] + self._filters(filters),
            body=dict(row),
            headers={"Prefer": "return=representation", "Accept": SINGLE_OBJECT},
            allow_empty=True,
        )

    async def delete(self, table: str, *, filters: Mapping[str, Any]) -> None:
        await self.send(
            "DELETE", f"{REST_PREFIX}/{table}",
            params=self._filters(filters),
        )

    async def aclose(self) -> None:
        await self._http.aclose()
