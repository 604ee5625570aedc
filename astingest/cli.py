#!/usr/bin/env python3
"""
astingest CLI

Runs one ingestion pass (or a polling watch loop) and prints a JSON summary.

Usage:
    astingest [DIRECTORY ...] [--manifest PATH] [--watch] [--clear-cache] [--debug]
    astingest --init-config [--config PATH]
"""

import argparse
import json
import time
from pathlib import Path
from typing import Optional

from astingest.ast.models import IngestResult
from astingest.configs import MANIFEST_FILENAME, create_default_config, get_config_path, get_logger, setup_logging
from astingest.exceptions import AstIngestError
from astingest.ingest import DurableCache, WatchSession, find_manifest, ingest
from astingest.options import IngestOptions
from astingest.version import __version__

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="astingest",
        description="Parse a project's source files, reusing cached ASTs when still valid.",
    )
    parser.add_argument("directories", nargs="*", help="Directories or files to ingest (default: from the manifest)")
    parser.add_argument("--manifest", type=Path, help=f"Path to {MANIFEST_FILENAME} (default: search upwards)")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--watch", action="store_true", help="Re-ingest periodically, reusing the session cache")
    parser.add_argument("--interval", type=float, default=1.0, help="Seconds between watch passes")
    parser.add_argument("--no-cache", action="store_true", help="Do not read or write the durable cache")
    parser.add_argument("--clear-cache", action="store_true", help="Delete the durable cache before ingesting")
    parser.add_argument("--init-config", action="store_true", help="Write a default config.yaml and exit")
    parser.add_argument("--cache-root", type=Path, help="Directory for the durable cache")
    parser.add_argument("--workers", type=int, help="Maximum parser workers")
    parser.add_argument("--pool", choices=["process", "thread"], help="Parser pool kind")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def options_from_args(args: argparse.Namespace) -> IngestOptions:
    manifest_path = args.manifest or find_manifest() or Path.cwd() / MANIFEST_FILENAME
    overrides = {
        "manifest_path_was_specified": args.manifest is not None,
        "directories_to_analyze": list(args.directories),
        "watch": args.watch,
    }
    if args.no_cache:
        overrides["use_durable_cache"] = False
    if args.cache_root:
        overrides["cache_root"] = args.cache_root
    if args.workers:
        overrides["max_workers"] = args.workers
    if args.pool:
        overrides["pool_kind"] = args.pool
    return IngestOptions.from_config(manifest_path, config_path=args.config, **overrides)


def summarize(result: IngestResult) -> dict:
    return {
        "type": "ingest",
        "source_directories": result.source_directories,
        "files": [{"path": f.path, "language": f.language, "ok": f.ok} for f in result.files],
        "errors": [failure.to_dict() for failure in result.errors],
        "stats": result.stats.to_dict(),
    }


def init_config(config_path: Optional[Path]) -> dict:
    path = config_path or get_config_path()
    created = create_default_config(path)
    logger.debug(f"{'Created' if created else 'Kept existing'} config at {path}")
    return {"type": "config", "path": str(path), "created": created}


def clear_cache(options: IngestOptions) -> None:
    cache_dir = options.file_cache_path()
    DurableCache(cache_dir).clear()
    logger.info(f"Cleared durable cache at {cache_dir}")


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.debug or None)

    if args.init_config:
        print(json.dumps(init_config(args.config)))
        return 0

    try:
        options = options_from_args(args)
        if args.clear_cache:
            clear_cache(options)
        if not options.watch:
            print(json.dumps(summarize(ingest(options))))
            return 0

        session = WatchSession(options)
        while True:
            # A failed pass is reported and the session keeps watching
            try:
                print(json.dumps(summarize(session.run_pass())), flush=True)
            except AstIngestError as e:
                print(json.dumps(e.to_dict()), flush=True)
            time.sleep(args.interval)
    except AstIngestError as e:
        logger.debug(f"Ingestion failed: {e}")
        print(json.dumps(e.to_dict()))
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
