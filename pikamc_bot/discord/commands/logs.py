from __future__ import annotations

import re
from typing import TYPE_CHECKING, List, Optional

import discord

from ...services.panel import filter_error_lines, retrieve_logs
from .shared import COLOR_LOGS, LOGS_DISPLAY_LIMIT, clip, code_block, command_argument, get_api_client

if TYPE_CHECKING:
    from . import TriggerTable

TRIGGER = "!logs"
DEFAULT_LINES = 50
MAX_LINES = 200
FAILURE_REPLY = "❌ Lỗi khi lấy nhật ký"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def clamp_log_lines(raw: Optional[str], default: int = DEFAULT_LINES) -> int:
    """
    "!logs 30" -> 30, "!logs 999" -> 200, "!logs abc" / "!logs" / "!logs 0" -> default.
    Leading digits count ("25abc" -> 25); negatives clamp up to 1.
    """
    m = _LEADING_INT.match(raw or "")
    if not m:
        return default
    n = int(m.group(1))
    if n == 0:
        return default
    return max(1, min(n, MAX_LINES))


def build_logs_embed(lines: int, error_lines: List[str]) -> discord.Embed:
    embed = discord.Embed(
        title=f"📜 Logs ({lines} dòng gần nhất)",
        description=code_block(clip("\n".join(error_lines), LOGS_DISPLAY_LIMIT)),
        color=COLOR_LOGS,
    )
    embed.set_footer(text="Dùng !fix <lỗi> để phân tích chi tiết")
    return embed


def register(bot: "discord.Client", triggers: "TriggerTable") -> None:
    """
    !logs [lines]: recent panel logs, filtered down to the first few error-ish lines.
    """

    async def logs_cmd(message: "discord.Message") -> None:
        lines = clamp_log_lines(command_argument(message.content))
        logs = await retrieve_logs(bot.settings, bot.reporter, lines, client=get_api_client(bot))
        if not logs:
            await message.reply(FAILURE_REPLY)
            return

        await message.reply(embed=build_logs_embed(lines, filter_error_lines(logs)))

    triggers.add(TRIGGER, logs_cmd)
