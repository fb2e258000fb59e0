from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import quote

import httpx

from ..config.settings import Settings

FETCH_CONTEXT = "PIKAMC_FETCH"
LOGS_CONTEXT = "PIKAMC_LOGS"

DEFAULT_LOG_LINES = 100
MAX_ERROR_LINES = 5

SEVERITY_KEYWORDS = ("Exception", "Error", "Failed", "Crash", "Warning")

# Case-sensitive: the keyword as written, or shouted the way log4j prints levels ("ERROR").
_SEVERITY_RE = re.compile(
    "|".join(re.escape(k) for k in SEVERITY_KEYWORDS + tuple(k.upper() for k in SEVERITY_KEYWORDS))
)


class PanelResponseError(Exception):
    """2xx response whose body doesn't match what the panel is supposed to return."""


class Reporter(Protocol):
    async def report(self, context: str, error: BaseException) -> None: ...


# Everything that counts as "panel unavailable" for a single call.
_PANEL_FAILURES = (httpx.HTTPError, httpx.InvalidURL, ValueError, PanelResponseError)


# -----------------------------
# Helpers
# -----------------------------

def _to_int(v: Any) -> Optional[int]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, str) and v.strip() == "":
        return None
    try:
        return int(float(v))
    except Exception:
        return None


def _to_float(v: Any) -> Optional[float]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, str) and v.strip() == "":
        return None
    try:
        return float(v)
    except Exception:
        return None


def _dig(obj: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _headers(settings: Settings) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {settings.pikamc_api_key}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }


def _server_path(settings: Settings, suffix: str = "") -> str:
    return f"/servers/{quote(settings.pikamc_server_id, safe='')}{suffix}"


async def _panel_get(
    settings: Settings,
    path: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> httpx.Response:
    """
    Single GET against the panel client API. Raises on transport errors and non-2xx.
    No retry; timeout is the transport default.
    """
    url = f"{settings.pikamc_base_url}{path}"

    own_client = None
    if client is None:
        own_client = httpx.AsyncClient()
        client = own_client

    try:
        r = await client.get(url, params=params, headers=_headers(settings))
        r.raise_for_status()
        return r
    finally:
        if own_client is not None:
            await own_client.aclose()


def _log_text(r: httpx.Response) -> str:
    """
    The logs endpoint is loosely specified: accept plain text, or a JSON object
    carrying the log under `data` (string or list of lines).
    """
    try:
        payload = r.json()
    except ValueError:
        return r.text

    data = payload.get("data") if isinstance(payload, dict) else None
    if isinstance(data, str):
        return data
    if isinstance(data, list) and all(isinstance(line, str) for line in data):
        return "\n".join(data)
    return r.text


# -----------------------------
# Public API
# -----------------------------

async def fetch_server_data(
    settings: Settings,
    reporter: Reporter,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[Dict[str, Any]]:
    """
    GET /servers/{id} and return its `attributes` object.

    Never raises for upstream problems: any failure is handed to the reporter
    (context PIKAMC_FETCH) and None is returned.
    """
    try:
        r = await _panel_get(settings, _server_path(settings), client=client)
        attributes = _dig(r.json(), "attributes")
        if not isinstance(attributes, dict):
            raise PanelResponseError("Panel response is missing the `attributes` object.")
        return attributes
    except _PANEL_FAILURES as exc:
        await reporter.report(FETCH_CONTEXT, exc)
        return None


async def retrieve_logs(
    settings: Settings,
    reporter: Reporter,
    lines: int = DEFAULT_LOG_LINES,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[str]:
    """
    GET /servers/{id}/logs?size=N and return the raw log text.

    Same failure contract as fetch_server_data (context PIKAMC_LOGS).
    """
    try:
        r = await _panel_get(
            settings,
            _server_path(settings, "/logs"),
            params={"size": int(lines)},
            client=client,
        )
        return _log_text(r)
    except _PANEL_FAILURES as exc:
        await reporter.report(LOGS_CONTEXT, exc)
        return None


def filter_error_lines(text: str, limit: int = MAX_ERROR_LINES) -> List[str]:
    """Lines mentioning a severity keyword, in original order, at most `limit`."""
    matches: List[str] = []
    for line in (text or "").split("\n"):
        line = line.rstrip("\r")
        if _SEVERITY_RE.search(line):
            matches.append(line)
            if len(matches) >= limit:
                break
    return matches


@dataclass(frozen=True)
class ServerStatus:
    """
    Display-ready snapshot of the panel `attributes` for one !status call.
    Missing data falls back to "N/A" / 0 field by field.
    """

    name: str = "N/A"
    running: bool = False
    version: str = "N/A"
    players: int = 0
    player_limit: int = 0
    cpu: float = 0
    memory_bytes: Optional[float] = None

    @classmethod
    def from_attributes(cls, attributes: Optional[Dict[str, Any]]) -> "ServerStatus":
        if not attributes:
            return cls()

        name = attributes.get("name")
        version = _dig(attributes, "features", "minecraft_version")
        return cls(
            name=str(name) if name else "N/A",
            running=attributes.get("status") == "running",
            version=str(version) if version else "N/A",
            players=_to_int(_dig(attributes, "resources", "players")) or 0,
            player_limit=_to_int(_dig(attributes, "limits", "players")) or 0,
            cpu=_to_float(_dig(attributes, "resources", "cpu_absolute")) or 0,
            memory_bytes=_to_float(_dig(attributes, "resources", "memory_bytes")),
        )

    @property
    def memory_mb(self) -> int:
        if not self.memory_bytes or self.memory_bytes < 0:
            return 0
        return int(self.memory_bytes / 1024 / 1024 + 0.5)

    @property
    def cpu_display(self) -> str:
        cpu = float(self.cpu)
        return str(int(cpu)) if cpu.is_integer() else repr(cpu)


__all__ = [
    "FETCH_CONTEXT",
    "LOGS_CONTEXT",
    "DEFAULT_LOG_LINES",
    "MAX_ERROR_LINES",
    "SEVERITY_KEYWORDS",
    "PanelResponseError",
    "ServerStatus",
    "fetch_server_data",
    "retrieve_logs",
    "filter_error_lines",
]
