from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

import uvicorn

from codemap.aggregate import aggregate, report_json
from codemap.config import load_settings
from codemap.errors import AnalyzerError
from codemap.fetch import fetch_repository, release_repository
from codemap.strategy import generate_merge_strategy


def cmd_analyze(args: argparse.Namespace) -> None:
	settings = load_settings()
	ignore_dirs = args.ignore_dir if args.ignore_dir is not None else settings.ignore_dirs
	report = aggregate(args.path, ignore_dirs=ignore_dirs, workers=args.workers or settings.workers)
	print(report_json(report))


def cmd_plan(args: argparse.Namespace) -> None:
	settings = load_settings()
	reports = []
	for location, branch in ((args.source, args.source_branch), (args.target, args.target_branch)):
		path = fetch_repository(location, branch, settings=settings)
		try:
			reports.append(aggregate(path, ignore_dirs=settings.ignore_dirs, workers=settings.workers))
		finally:
			release_repository(location, path)
	print(generate_merge_strategy(reports[0], reports[1], settings=settings))


def cmd_serve(args: argparse.Namespace) -> None:
	settings = load_settings()
	host = args.host or settings.host
	port = args.port or settings.port
	logging.getLogger(__name__).info("codemap server running on %s:%d", host, port)
	uvicorn.run("api:app", host=host, port=port, reload=args.reload)


def main(argv: Optional[List[str]] = None) -> None:
	parser = argparse.ArgumentParser(prog="codemap")
	parser.add_argument("--log-level", default=None, help="Logging level (default from CODEMAP_LOG_LEVEL)")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pa = sub.add_parser("analyze", help="Analyze a source tree and print the report JSON")
	pa.add_argument("path", help="Path to the source tree root")
	pa.add_argument("--workers", type=int, default=None, help="Worker threads for per-file analysis")
	pa.add_argument(
		"--ignore-dir",
		action="append",
		default=None,
		help="Directory name to skip (repeatable; default from CODEMAP_IGNORE_DIRS)",
	)
	pa.set_defaults(func=cmd_analyze)

	pp = sub.add_parser("plan", help="Analyze two repositories and print a merge strategy")
	pp.add_argument("source", help="Source repository URL or local path")
	pp.add_argument("target", help="Target repository URL or local path")
	pp.add_argument("--source-branch", default=None)
	pp.add_argument("--target-branch", default=None)
	pp.set_defaults(func=cmd_plan)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default=None)
	ps.add_argument("--port", type=int, default=None)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)

	args = parser.parse_args(argv)
	logging.basicConfig(
		level=(args.log_level or load_settings().log_level).upper(),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	try:
		args.func(args)
	except AnalyzerError as e:
		print(json.dumps({"error": e.to_dict()}), file=sys.stderr)
		sys.exit(1)


if __name__ == "__main__":
	main()
