from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    import discord

logger = logging.getLogger(__name__)

Handler = Callable[["discord.Message"], Awaitable[None]]

# Single registry of text-command modules for the bot.
# Deterministic order; every module is required (a half-working bot is worse than none).
MODULES: Sequence[str] = (
    "status",  # !status
    "logs",    # !logs [lines]
    "fix",     # !fix <error text>
)

__all__ = ["Handler", "Trigger", "TriggerTable", "register_all", "MODULES"]


@dataclass(frozen=True)
class Trigger:
    text: str
    handler: Handler
    exact: bool = False

    def matches(self, content: str) -> bool:
        # Case-sensitive on purpose: "!Status" is not a command.
        if self.exact:
            return content == self.text
        return content.startswith(self.text)


@dataclass
class TriggerTable:
    """
    Ordered table of text triggers. First match wins.
    """

    triggers: List[Trigger] = field(default_factory=list)

    def add(self, text: str, handler: Handler, *, exact: bool = False) -> None:
        if any(t.text == text for t in self.triggers):
            raise ValueError(f"Trigger already registered: {text}")
        self.triggers.append(Trigger(text=text, handler=handler, exact=exact))

    def match(self, content: Optional[str]) -> Optional[Trigger]:
        if not content:
            return None
        for trigger in self.triggers:
            if trigger.matches(content):
                return trigger
        return None

    def __len__(self) -> int:
        return len(self.triggers)


def _import_module(mod_path: str) -> Tuple[Optional[object], Optional[str]]:
    """
    Import a command module safely.

    Returns: (module_or_none, error_string_or_none)
    """
    try:
        return importlib.import_module(mod_path), None
    except ModuleNotFoundError as e:
        missing_name = getattr(e, "name", "") or ""
        if missing_name and (missing_name == mod_path or missing_name.startswith(mod_path + ".")):
            return None, f"missing module: {missing_name}"
        return None, f"import error (dependency missing): {missing_name or str(e)}"
    except Exception as e:
        return None, f"import error: {e}"


def register_all(bot: "discord.Client", triggers: TriggerTable) -> None:
    """
    Register every command module with the shared TriggerTable.

    Each module must expose:
        def register(bot, triggers) -> None

    Fail-closed: any module that can't be imported or registered aborts startup.
    """
    pkg = __name__
    results: Dict[str, str] = {}
    fatal: List[str] = []

    for name in MODULES:
        mod_path = f"{pkg}.{name}"
        mod, err = _import_module(mod_path)
        if mod is None:
            results[name] = f"not loaded ({err})"
            fatal.append(f"{name}: {err}")
            continue

        reg = getattr(mod, "register", None)
        if not callable(reg):
            results[name] = "loaded but missing register()"
            fatal.append(f"{name}: missing register()")
            continue

        try:
            reg(bot, triggers)
            results[name] = "registered"
        except Exception as e:
            logger.exception("commands module register failed: %s", mod_path)
            results[name] = f"register failed: {e}"
            fatal.append(f"{name}: register failed")

    summary = ", ".join([f"{k}={results.get(k, 'unknown')}" for k in MODULES])
    logger.info("text commands registration summary: %s", summary)

    if fatal:
        msg = "Command modules failed to load/register: " + "; ".join(fatal)
        logger.error(msg)
        raise RuntimeError(msg)
