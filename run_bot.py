"""
Bot entrypoint.

Operator notes:
- This file should remain extremely small and boring.
- Settings are loaded from the environment / .env when pikamc_bot.config is imported.
- If this file crashes, the error should be immediately obvious to the operator.
"""

import logging
import sys

from pikamc_bot.discord.bot import run_bot


def main() -> None:
    try:
        run_bot()
    except Exception:
        # Fail loud and early with a clear signal for operators.
        logging.basicConfig(level=logging.ERROR)
        logging.exception("Discord bot failed to start.")
        print("\n❌ Discord bot failed to start.")
        print("   See error above. Most common causes:")
        print("   - DISCORD_TOKEN missing or not loaded into the environment")
        print("   - Message Content intent not enabled for the bot in the Discord developer portal\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
