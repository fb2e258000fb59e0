from __future__ import annotations

from typing import TYPE_CHECKING

import discord

from ...services.panel import ServerStatus, fetch_server_data
from .shared import COLOR_OFFLINE, COLOR_ONLINE, get_api_client

if TYPE_CHECKING:
    from . import TriggerTable

TRIGGER = "!status"


def build_status_embed(status: ServerStatus) -> discord.Embed:
    embed = discord.Embed(
        title="🖥️ Trạng thái Server",
        color=COLOR_ONLINE if status.running else COLOR_OFFLINE,
    )
    embed.add_field(name="Tên Server", value=status.name, inline=True)
    embed.add_field(name="Trạng thái", value="🟢 Online" if status.running else "🔴 Offline", inline=True)
    embed.add_field(name="Phiên bản", value=status.version, inline=True)
    embed.add_field(name="Người chơi", value=f"{status.players}/{status.player_limit}", inline=True)
    embed.add_field(
        name="Hiệu suất",
        value=f"CPU: {status.cpu_display}%\nRAM: {status.memory_mb}MB",
        inline=True,
    )
    embed.set_footer(text="PikaMC.vn • Cập nhật")
    return embed


def register(bot: "discord.Client", triggers: "TriggerTable") -> None:
    """
    !status: one panel fetch, one embed.

    A failed fetch still gets a reply (all fields N/A, red); the failure
    itself has already been reported to the admin channel by the panel client.
    """

    async def status_cmd(message: "discord.Message") -> None:
        attributes = await fetch_server_data(bot.settings, bot.reporter, client=get_api_client(bot))
        await message.reply(embed=build_status_embed(ServerStatus.from_attributes(attributes)))

    triggers.add(TRIGGER, status_cmd, exact=True)
