"""Entry point for Lumen."""

from __future__ import annotations


def main() -> None:
    from Lumen.cli.repl import main as repl_main

    repl_main()


if __name__ == "__main__":
    main()
