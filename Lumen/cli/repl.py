"""Interactive REPL for Lumen."""

from __future__ import annotations

from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..config.logging_config import setup_logging_from_config
from ..config.settings import get_config
from ..core.handler import IntentHandler
from .commands import handle_command


def run_repl(handler: Optional[IntentHandler] = None) -> None:
    if handler is None:
        handler = IntentHandler(get_config())

    print("\nCommands:")
    print("  classify <query>   → interpret a photo query (bare text works too)")
    print("  entities <query>   → extract keywords, dates, locations and albums")
    print("  explain <query>    → show per-intent scores and matched rules")
    print("  actions [intent]   → list registered actions, or those an intent suggests")
    print("  json on|off        → toggle raw JSON output")
    print("  exit")

    options: Dict[str, Any] = {"json": False}
    while True:
        try:
            cmd = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            break

        try:
            should_continue, _debug = handle_command(handler, cmd, options)
            if not should_continue:
                break
        except Exception as e:
            print(f"[LUMEN] Command failed: {e}")


def main() -> None:
    """Console entry point."""
    load_dotenv()
    config = get_config()
    setup_logging_from_config(config.logging)
    run_repl(IntentHandler(config))


if __name__ == "__main__":
    main()
