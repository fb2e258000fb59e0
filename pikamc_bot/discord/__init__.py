"""
Discord integration package.

Design goals:
- Keep pikamc_bot.discord.bot as the stable entrypoint (PanelBot + run_bot).
- One module per text command under pikamc_bot.discord.commands.
"""

from .bot import PanelBot, run_bot  # re-export for convenience

__all__ = [
    "PanelBot",
    "run_bot",
]
