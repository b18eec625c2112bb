from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(SCRIPT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


def load_env_file(env_path: str) -> None:
    if not os.path.exists(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as env_file:
        for line in env_file:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key, value)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print a rents revenue report as JSON.")
    parser.add_argument(
        "--env-file",
        default=os.path.join(PROJECT_ROOT, ".env"),
        help="Path to .env file.",
    )
    parser.add_argument(
        "mode",
        choices=["mtd", "range", "from", "recent", "station"],
        help="Report window.",
    )
    parser.add_argument("--from", dest="from_date", help="Start date (YYYY-MM-DD).")
    parser.add_argument("--to", dest="to_date", help="End date (YYYY-MM-DD), range mode only.")
    parser.add_argument("--limit", default=None, help="Entry count for recent mode.")
    parser.add_argument("--station", help="Station id, or dot-separated ids, for station mode.")
    return parser.parse_args()


async def build_report(args: argparse.Namespace):
    from src.api.dependencies import get_rents_service
    from src.shared.time import clamp_recent_limit, parse_civil_date

    service = get_rents_service()
    if args.mode == "mtd":
        return await service.get_mtd_report()
    if args.mode == "range":
        return await service.get_range_report(
            parse_civil_date(args.from_date, "from"), parse_civil_date(args.to_date, "to")
        )
    if args.mode == "from":
        return await service.get_from_report(parse_civil_date(args.from_date, "from"))
    if args.mode == "recent":
        return await service.get_recent_report(clamp_recent_limit(args.limit))
    return await service.get_station_mtd_report(args.station or "")


def main() -> None:
    args = parse_args()
    load_env_file(os.path.abspath(args.env_file))

    from src.core.errors import AppError
    from src.core.logging import configure_logging

    configure_logging(os.environ.get("LOG_LEVEL"))
    try:
        report = asyncio.run(build_report(args))
    except AppError as exc:
        print(json.dumps({"success": False, "error": exc.message, "code": exc.code}, indent=2))
        sys.exit(1)
    print(json.dumps(report.model_dump(by_alias=True, exclude_none=True), indent=2, default=str))


if __name__ == "__main__":
    main()
