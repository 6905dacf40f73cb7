"""Check that the configured chat model answers before serving outfit requests."""

from __future__ import annotations

import argparse
import asyncio
import sys

from wardrobe_api.config.settings import get_settings
from wardrobe_api.integrations import IntegrationCheckResult, run_all_checks


def describe(result: IntegrationCheckResult, base_url: str) -> str:
    verdict = "reachable" if result.success else "UNAVAILABLE"
    return f"{result.name} at {base_url}: {verdict} ({result.message})"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Print nothing; only set the exit status",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    if not settings.openai_api_key:
        if not args.quiet:
            print("OPENAI_API_KEY is not set; outfit recommendations will fail with 502.")
        return 2

    results = asyncio.run(run_all_checks())
    if not args.quiet:
        for result in results:
            print(describe(result, settings.openai_base_url))
    return 0 if all(result.success for result in results) else 1


if __name__ == "__main__":
    sys.exit(main())
