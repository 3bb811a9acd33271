"""
Expert Radius Search — Interactive CLI
======================================
Thin wrapper around the rfmsearch library.

Usage:
    rfmsearch                            # interactive mode
    rfmsearch Odense 25 [category]       # single search
    rfmsearch --diagnose Odense          # explain a search

Database paths are read from environment variables (or a .env file):
    RFM_EXPERTS_DB          Path to the experts database
    RFM_POSTAL_DB           Path to the postal code database
    RFM_DEFAULT_RADIUS_KM   Radius used when none is given (default 25)
    RFM_LOG_LEVEL           Logging level (default WARNING)

If not set, looks for experts.db and postal_codes.db in the current
working directory.
"""

import json
import logging
import sys

from rfmsearch.client import ExpertSearch
from rfmsearch.config import get_settings
from rfmsearch.exceptions import DatabaseInvalid, DatabaseNotFound, RFMSearchError
from rfmsearch.models import SearchResult
from rfmsearch.query import PARAM_CATEGORY, PARAM_LOCATION, PARAM_RADIUS

_BANNER = """\
╔══════════════════════════════════════╗
║        Expert Radius Search          ║
║   Postal code / city → experts       ║
╚══════════════════════════════════════╝
Type 'q' to quit.
"""


def _print_result(result: SearchResult) -> None:
    if result.strategy == "text":
        print("  (location not found as postal code or city; matched city text)")
    if not result.experts:
        print("  ✗ No experts found.")
        return

    print(f"  ✓ {len(result)} expert(s) found")
    print()
    for expert in result.experts:
        distance = result.distances.get(expert.id)
        where = f"{expert.postal_code} {expert.city}".strip()
        shown = f"{distance:6.1f} km" if distance is not None else "         "
        print(f"  {shown}  {expert.title:<30} {where:<20} {expert.average_rating:.1f}★")


def _run_interactive(client: ExpertSearch) -> None:
    print(_BANNER)

    while True:
        # -- Location ---------------------------------------------------
        try:
            location = input("\nPostal code / city:  ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        if location.lower() in ("q", "quit", "exit"):
            print("Bye!")
            break
        if not location:
            print("  ✗ A location is required.")
            continue

        # -- Radius -----------------------------------------------------
        try:
            radius = input("Radius km [default]: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        # -- Search -----------------------------------------------------
        try:
            result = client.search({PARAM_LOCATION: location, PARAM_RADIUS: radius})
        except RFMSearchError as exc:
            print(f"  ✗ Error: {exc}")
            continue

        _print_result(result)


def main() -> None:
    """Entry point — supports both CLI args and interactive mode."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        client = ExpertSearch.from_settings(settings)
    except (DatabaseNotFound, DatabaseInvalid) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(
            "Set RFM_EXPERTS_DB and RFM_POSTAL_DB environment variables, "
            "or run from the directory containing the databases.",
            file=sys.stderr,
        )
        sys.exit(2)

    args = sys.argv[1:]
    try:
        if len(args) == 2 and args[0] == "--diagnose":
            print(json.dumps(client.diagnose(args[1]), indent=2, ensure_ascii=False))
        elif 1 <= len(args) <= 3 and not args[0].startswith("-"):
            # Single-shot mode
            params = {PARAM_LOCATION: args[0]}
            if len(args) >= 2:
                params[PARAM_RADIUS] = args[1]
            if len(args) == 3:
                params[PARAM_CATEGORY] = args[2]
            result = client.search(params)
            if not result.experts:
                print("No experts found.", file=sys.stderr)
                sys.exit(1)
            _print_result(result)
        elif args:
            print(__doc__, file=sys.stderr)
            sys.exit(2)
        else:
            _run_interactive(client)
    finally:
        client.close()


if __name__ == "__main__":
    main()
