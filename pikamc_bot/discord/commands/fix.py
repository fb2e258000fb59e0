from __future__ import annotations

from typing import TYPE_CHECKING

import discord

from ...services.ai import diagnose_issue
from .shared import COLOR_AI, FIX_ANSWER_LIMIT, FIX_INPUT_LIMIT, clip, code_block

if TYPE_CHECKING:
    from . import TriggerTable

TRIGGER = "!fix"
EMPTY_INPUT_REPLY = "Vui lòng nhập nội dung lỗi để phân tích"


def error_text_from(content: str) -> str:
    return (content or "")[len(TRIGGER):].strip()


def build_fix_embed(error_text: str, analysis: str) -> discord.Embed:
    embed = discord.Embed(
        title="🔍 Phân tích lỗi bằng AI",
        description=code_block(clip(error_text, FIX_INPUT_LIMIT)),
        color=COLOR_AI,
    )
    embed.add_field(name="💡 Giải pháp", value=clip(analysis, FIX_ANSWER_LIMIT), inline=False)
    embed.set_footer(text="Powered by DeepSeek AI")
    return embed


def register(bot: "discord.Client", triggers: "TriggerTable") -> None:
    """
    !fix <error text>: forward the text to the AI and reply with its suggestions.
    """

    async def fix_cmd(message: "discord.Message") -> None:
        error_text = error_text_from(message.content)
        if not error_text:
            await message.reply(EMPTY_INPUT_REPLY)
            return

        analysis = await diagnose_issue(bot.settings, error_text, client=getattr(bot, "ai", None))
        await message.reply(embed=build_fix_embed(error_text, analysis))

    triggers.add(TRIGGER, fix_cmd)
