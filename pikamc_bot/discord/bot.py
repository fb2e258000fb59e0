from __future__ import annotations

import logging
from typing import Optional

import discord
import httpx
from openai import AsyncOpenAI

from ..config.settings import Settings
from ..config.settings import settings as default_settings
from ..services.ai import build_client as build_ai_client
from .commands import TriggerTable, register_all
from .reporter import ErrorReporter

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class PanelBot(discord.Client):
    """
    Discord bot for the PikaMC server: !status, !logs, !fix.

    Notes:
    - discord.Client uses its own internal HTTP client for Discord.
    - self.api is a separate httpx.AsyncClient for panel calls (auth headers are per request).
    - self.ai is the OpenAI-compatible client pointed at DeepSeek.
    - Each message is handled independently; no per-user or per-channel state.
    """

    def __init__(self, settings: Settings) -> None:
        intents = discord.Intents.default()
        # Text triggers need to read message content
        intents.message_content = True

        super().__init__(intents=intents)

        self.settings = settings
        self.api: Optional[httpx.AsyncClient] = None
        self.ai: Optional[AsyncOpenAI] = None
        self.reporter = ErrorReporter(self, settings.error_channel_id)
        self.triggers = TriggerTable()

    async def setup_hook(self) -> None:
        if self.api is None:
            # Transport-default timeout; no retries anywhere.
            self.api = httpx.AsyncClient(
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        if self.ai is None:
            self.ai = build_ai_client(self.settings)

        if not len(self.triggers):
            register_all(self, self.triggers)

    async def close(self) -> None:
        # Close our own http clients first
        if self.api is not None:
            try:
                await self.api.aclose()
            except Exception:
                logger.debug("panel http client close failed", exc_info=True)
            self.api = None
        if self.ai is not None:
            try:
                await self.ai.close()
            except Exception:
                logger.debug("AI client close failed", exc_info=True)
            self.ai = None
        await super().close()

    async def on_ready(self) -> None:
        logger.info("PanelBot ready as %s", str(self.user))
        logger.info("Managing server: %s", self.settings.panel_server_url)

    async def on_message(self, message: discord.Message) -> None:
        # Never answer bots (ourselves included) to avoid reply loops.
        if message.author.bot:
            return

        trigger = self.triggers.match(message.content)
        if trigger is None:
            return

        try:
            await trigger.handler(message)
        except Exception:
            # One broken reply must not take the bot down.
            logger.exception("Command %s failed (message=%s)", trigger.text, getattr(message, "id", None))


# ---------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------

def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def run_bot(settings: Optional[Settings] = None) -> None:
    settings = settings or default_settings
    configure_logging(settings.log_level)
    bot = PanelBot(settings)
    bot.run(settings.discord_token, log_handler=None)


if __name__ == "__main__":
    run_bot()
