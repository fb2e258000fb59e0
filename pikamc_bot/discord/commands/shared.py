from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

import httpx

# NOTE:
# Keep this module dependency-light (no discord import).
# Shared by the command modules and the error reporter.

# Embed colours
COLOR_ONLINE = 0x00FF00
COLOR_OFFLINE = 0xFF0000
COLOR_LOGS = 0xFFA500
COLOR_AI = 0x7289DA

# Display limits (characters)
LOGS_DISPLAY_LIMIT = 1000
FIX_INPUT_LIMIT = 500
FIX_ANSWER_LIMIT = 1000


# -----------------------------
# Typing helpers (no discord import)
# -----------------------------

@runtime_checkable
class _HasApi(Protocol):
    api: Optional[httpx.AsyncClient]


def get_api_client(bot: Any) -> Optional[httpx.AsyncClient]:
    """
    Returns the bot's shared httpx client, or None if setup_hook hasn't run yet
    (the panel service then opens a short-lived client of its own).
    """
    if isinstance(bot, _HasApi) and isinstance(bot.api, httpx.AsyncClient):
        return bot.api
    return None


# -----------------------------
# Small primitives
# -----------------------------

def clip(s: Optional[str], limit: int) -> str:
    """Hard cut to at most `limit` characters (no ellipsis)."""
    if not s:
        return ""
    return s[: max(0, limit)]


def code_block(s: str) -> str:
    return f"```{s}```"


def command_argument(content: str) -> Optional[str]:
    """
    First space-separated token after the trigger, e.g. "!logs 30" -> "30".
    Splits on single spaces, so "!logs  30" yields "" (treated as missing).
    """
    parts = (content or "").split(" ")
    if len(parts) < 2:
        return None
    return parts[1]


__all__ = [
    "COLOR_ONLINE",
    "COLOR_OFFLINE",
    "COLOR_LOGS",
    "COLOR_AI",
    "LOGS_DISPLAY_LIMIT",
    "FIX_INPUT_LIMIT",
    "FIX_ANSWER_LIMIT",
    "get_api_client",
    "clip",
    "code_block",
    "command_argument",
]
