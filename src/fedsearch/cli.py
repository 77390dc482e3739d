from __future__ import annotations

import argparse
import asyncio
import inspect
import json
import logging
import sys

from .search.base import CATEGORIES
from .search.errors import NoResultsFound, QueryRequired
from .service import SearchService
from .settings import get_settings


async def cmd_search(args: argparse.Namespace) -> int:
    settings = get_settings()
    if args.instances_file:
        settings.instances_path = args.instances_file  # type: ignore[attr-defined]
    if args.batch_size:
        settings.batch_size = args.batch_size  # type: ignore[attr-defined]

    async with SearchService(settings) as service:
        try:
            resp = await service.search(args.query, args.category, args.safe)
        except QueryRequired as e:
            print(str(e), file=sys.stderr)
            return 2
        except NoResultsFound as e:
            print(str(e), file=sys.stderr)
            return 1
    print(json.dumps(resp.to_dict(), ensure_ascii=False, indent=2 if args.pretty else None))
    return 0


async def cmd_instances(args: argparse.Namespace) -> int:
    settings = get_settings()
    if args.instances_file:
        settings.instances_path = args.instances_file  # type: ignore[attr-defined]
    async with SearchService(settings) as service:
        for inst in service.registry:
            print(json.dumps({"instance": inst.base_url, "eligible": service.tracker.is_eligible(inst)}))
        print(json.dumps(service.health()), file=sys.stderr)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "fedsearch.webapp.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=False,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fedsearch", description="Federated search across public SearXNG-style instances")
    parser.add_argument("--log-level", help="Logging level (default: FEDSEARCH_LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command")

    p_search = sub.add_parser("search", help="Run one aggregated search and print the response as JSON")
    p_search.add_argument("query")
    p_search.add_argument("--category", choices=list(CATEGORIES), default="general")
    p_search.add_argument("--safe", action="store_true", help="Ask instances for safe search")
    p_search.add_argument("--instances-file", help="YAML file with an 'instances:' list")
    p_search.add_argument("--batch-size", type=int)
    p_search.add_argument("--pretty", action="store_true")
    p_search.set_defaults(func=cmd_search)

    p_inst = sub.add_parser("instances", help="List the instance registry as JSON lines")
    p_inst.add_argument("--instances-file", help="YAML file with an 'instances:' list")
    p_inst.set_defaults(func=cmd_instances)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host")
    p_serve.add_argument("--port", type=int)
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 2
    logging.basicConfig(
        level=(args.log_level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if inspect.iscoroutinefunction(args.func):
        return asyncio.run(args.func(args))
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
