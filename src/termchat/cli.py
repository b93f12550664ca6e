from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from termchat.config import ChatConfig, ConfigError
from termchat.runtime.repl import ChatREPL
from termchat.runtime.runtime import ChatRuntime


def main() -> int:
    load_dotenv()
    return _main(sys.argv[1:])


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termchat",
        description="Multi-turn terminal chat against an OpenRouter chat-completion endpoint",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _main(argv: list[str]) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        config = ChatConfig.from_env()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    repl = ChatREPL(ChatRuntime(config))
    repl.run()
    return 0
