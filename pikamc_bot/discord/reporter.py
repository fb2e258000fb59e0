from __future__ import annotations

import logging
from typing import Any, Optional

import discord
import httpx

from .commands.shared import clip, code_block

logger = logging.getLogger(__name__)

ALERT_COLOR = 0xFF0000
ALERT_BODY_LIMIT = 1000


def _api_error_detail(response: httpx.Response) -> Optional[str]:
    """
    Panel errors look like: {"errors": [{"code": ..., "status": ..., "detail": "..."}]}
    """
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    errors = payload.get("errors")
    if not isinstance(errors, list) or not errors or not isinstance(errors[0], dict):
        return None
    detail = errors[0].get("detail")
    if detail is None or str(detail).strip() == "":
        return None
    return str(detail)


def describe_error(error: BaseException) -> str:
    """
    Short, human-readable message for an upstream failure.
    Prefers the API's own error detail, else the exception text.
    """
    if isinstance(error, httpx.HTTPStatusError):
        detail = _api_error_detail(error.response)
        if detail:
            return detail
    return str(error) or error.__class__.__name__


class ErrorReporter:
    """
    Best-effort alerting to the admin channel.

    The channel is resolved from the connected client's cache on every report,
    so alerts raised before the cache is warm (or with a wrong id / no access)
    are skipped rather than queued.
    """

    def __init__(self, bot: "discord.Client", channel_id: Optional[int]) -> None:
        self.bot = bot
        self.channel_id = channel_id

    def _resolve_channel(self) -> Optional[Any]:
        if self.channel_id is None:
            return None
        return self.bot.get_channel(self.channel_id)

    async def report(self, context: str, error: BaseException) -> None:
        message = describe_error(error)
        logger.error("%s_ERROR: %s", context, message)

        channel = self._resolve_channel()
        if channel is None:
            return
        # Category/forum channels resolve by id but can't take messages.
        if not callable(getattr(channel, "send", None)):
            logger.warning("Admin channel=%s cannot receive messages; %s alert skipped", self.channel_id, context)
            return

        embed = discord.Embed(
            title=f"⚠️ {context} Error",
            description=code_block(clip(message, ALERT_BODY_LIMIT)),
            color=ALERT_COLOR,
            timestamp=discord.utils.utcnow(),
        )
        try:
            await channel.send(embed=embed)
        except Exception:
            # Alerting is best-effort; the caller still has a reply to send.
            logger.warning("Could not deliver %s alert to channel=%s", context, self.channel_id, exc_info=True)


__all__ = ["ErrorReporter", "describe_error", "ALERT_COLOR"]
