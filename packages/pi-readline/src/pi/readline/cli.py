"""Entry point for the pi-readline demo CLI."""

from __future__ import annotations

import argparse
import logging

from pi.readline.completion import WordCompletionSource
from pi.readline.console import ProcessConsole
from pi.readline.reader import LineReader
from pi.readline.settings import ReadLineSettings, load_settings


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="pi-readline: Emacs-style line editing demo")
    parser.add_argument("--prompt", default="> ", help="Prompt to show (default: '> ')")
    parser.add_argument("--settings", default=None, help="JSON settings file")
    parser.add_argument("--history", action="store_true", help="Record entered lines in history")
    parser.add_argument("--word", action="append", default=[], help="Completion candidate (repeatable)")
    parser.add_argument("--password", action="store_true", help="Read a single password instead")
    parser.add_argument("--mask", default="", help="Mask character for --password")
    parser.add_argument("--log-level", default="warning", choices=["debug", "info", "warning", "error"])
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    settings = load_settings(args.settings) if args.settings else ReadLineSettings()
    if args.history:
        settings = settings.merged({"historyEnabled": True})

    completion = WordCompletionSource(args.word) if args.word else None
    console = ProcessConsole()
    reader = LineReader(console, settings=settings, completion=completion)

    try:
        if args.password:
            secret = reader.read_password("Password: ", mask=args.mask)
            console.write_raw(f"<< {len(secret)} characters\n")
            return 0

        console.write_raw("Type 'exit' to quit.\n")
        while True:
            line = reader.read(args.prompt)
            if line == "exit":
                return 0
            console.write_raw(f"<< {line}\n")
    except (EOFError, KeyboardInterrupt):
        console.write_raw("\n")
        return 1
    finally:
        console.close()


if __name__ == "__main__":
    raise SystemExit(main())
