from __future__ import annotations

import argparse


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Announce the time every minute with your Personal Voice."
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to .env file (default: .env). Use empty to disable.",
    )
    parser.add_argument(
        "--list-voices",
        action="store_true",
        help="Print installed voices (Personal Voices are marked) and exit.",
    )
    return parser.parse_args(argv)
