#!/usr/bin/env python3
"""
keysample command-line entry point.

Samples one or more redis instances concurrently, merges the per-instance
statistics by bucket, and prints a report per bucket.

Examples:
  keysample localhost:6379 -n 1000
  keysample localhost:6379 localhost:6380 -n 500 --prefix :
  keysample redis.internal:6379 -n 10000 --json --log-dir ./logs
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

import setproctitle

from keysample.errors import SamplingError
from keysample.pipeline.logger import configure_logging
from keysample.pipeline.orchestrate import sample_instances
from keysample.pipeline.report import print_run_summary, render_text
from keysample.sampling.aggregate import Aggregator, AnyKey, KeyPrefix
from keysample.types import Options

logger = logging.getLogger(__name__)


def parse_address(value: str) -> Tuple[str, int]:
    """Split ``host:port`` (port defaults to 6379); IPv6 hosts use ``[::1]:6379``."""
    host, sep, port = value.rpartition(":")
    if not sep:
        return value, 6379
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    if not host:
        raise argparse.ArgumentTypeError(f"Missing host in address: {value!r}")
    try:
        return host, int(port)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid port in address: {value!r}") from None


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="keysample",
        description="Estimate the shape of redis data sets by sampling random keys.",
    )
    p.add_argument("addresses", nargs="+", type=parse_address, metavar="HOST:PORT",
                   help="Redis instance(s) to sample")
    p.add_argument("-n", "--num-keys", type=int, default=1000,
                   help="Keys to sample per instance (default: 1000)")
    p.add_argument("--db", type=int, default=0, help="Database index (default: 0)")
    p.add_argument("--password", default=None, help="Redis password (optional)")
    p.add_argument("--timeout", type=float, default=None,
                   help="Socket timeout in seconds (default: wait forever)")
    p.add_argument("--prefix", default=None, metavar="DELIM",
                   help="Bucket keys by their first DELIM-separated segment "
                        "(default: one bucket for all keys)")
    p.add_argument("--prefix-depth", type=int, default=1,
                   help="Segments kept in a prefix bucket name (default: 1)")
    p.add_argument("--workers", type=int, default=None,
                   help="Concurrent sampling threads (default: one per instance, max 32)")
    p.add_argument("--keep-going", action="store_true",
                   help="Skip instances that fail instead of aborting")
    p.add_argument("--top", type=int, default=10, help="Top keys/members to list (default: 10)")
    p.add_argument("--json", dest="json_out", action="store_true",
                   help="Emit JSON instead of human-readable text")
    p.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    p.add_argument("--log-dir", type=Path, default=None,
                   help="Write a timestamped log file to this directory")
    p.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return p.parse_args(argv)


def build_aggregator(args: argparse.Namespace) -> Aggregator:
    if args.prefix:
        return KeyPrefix(args.prefix, depth=args.prefix_depth)
    return AnyKey()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setproctitle.setproctitle("keysample")

    try:
        instances = [
            Options(
                host=host,
                port=port,
                num_keys=args.num_keys,
                db=args.db,
                password=args.password,
                socket_timeout=args.timeout,
            )
            for host, port in args.addresses
        ]
        aggregator = build_aggregator(args)
        if args.workers is not None and args.workers < 1:
            raise ValueError(f"--workers must be >= 1, got {args.workers}")
        if args.top < 0:
            raise ValueError(f"--top must be >= 0, got {args.top}")
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    configure_logging(
        log_dir=args.log_dir,
        addresses=[o.address for o in instances],
        verbose=args.verbose,
    )

    workers = args.workers or min(32, len(instances))
    if not args.json_out:
        print_run_summary(
            instances=instances,
            aggregator=aggregator,
            workers=workers,
            start_time=datetime.now(),
            fail_fast=not args.keep_going,
            color=not args.no_color,
        )

    try:
        session = sample_instances(
            instances,
            aggregator,
            workers=workers,
            fail_fast=not args.keep_going,
        )
    except SamplingError as exc:
        logger.error("Sampling aborted: %s", exc)
        print(f"ERROR: sampling aborted, no report generated: {exc}", file=sys.stderr)
        return 1

    for opts, exc in session.failures:
        print(f"WARNING: skipped {opts.address}: {exc}", file=sys.stderr)
    if session.failures and len(session.failures) == len(instances):
        print("ERROR: every instance failed, no report generated", file=sys.stderr)
        return 1

    if args.json_out:
        doc = {
            "key_count": session.key_count,
            "instances": [o.address for o in instances],
            "failed": [o.address for o, _ in session.failures],
            "buckets": {name: r.to_dict() for name, r in sorted(session.totals.items())},
        }
        json.dump(doc, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    print(f"\nTotal keys across instances: {session.key_count:,}")
    for name in sorted(session.totals):
        print()
        render_text(session.totals[name], sys.stdout, top=args.top)
    return 0


if __name__ == "__main__":
    sys.exit(main())
