"""
Driver for the Update Check pipeline
------------------------------------
This script runs one update check and exits with the outcome's exit code
(0 = success or no update, 2 = update failed, 1 = error). Meant to be run
periodically by an external scheduler.

Usage:
  python -m update_watch.graph.drivers.run_update_check
  python -m update_watch.graph.drivers.run_update_check --env-file /etc/update_watch.env --json
  python -m update_watch.graph.drivers.run_update_check --server APP-01 --logs-dir D:/ezvit/logs
  python -m update_watch.graph.drivers.run_update_check --show-audit 20
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from update_watch.core import load_config, write_json
from update_watch.graph.update_check.graph import run_update_check
from update_watch.integrations.audit import JsonlAuditSink

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="update-watch",
        description="Check whether the last software update on this server succeeded.",
    )
    parser.add_argument("--env-file", help="Path to a .env file with settings", default=None)
    parser.add_argument("--server", help="Override UPDATE_WATCH_SERVER_NAME", default=None)
    parser.add_argument("--logs-dir", help="Override UPDATE_WATCH_LOGS_DIR", default=None)
    parser.add_argument("--state-dir", help="Override UPDATE_WATCH_STATE_DIR", default=None)
    parser.add_argument("--json", action="store_true", help="Print the machine-readable payload to stdout")
    parser.add_argument("--payload-out", help="Also write the payload JSON to this file", default=None)
    parser.add_argument(
        "--show-audit",
        type=int,
        metavar="N",
        default=None,
        help="Print the last N audit records as JSON lines and exit without checking",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    config = load_config(dotenv_path=args.env_file)
    overrides = {}
    if args.server:
        overrides["server_name"] = args.server
    if args.logs_dir:
        overrides["logs_dir"] = Path(args.logs_dir)
    if args.state_dir:
        overrides["state_dir"] = Path(args.state_dir)
    if overrides:
        config = dataclasses.replace(config, **overrides)

    if args.show_audit is not None:
        for record in JsonlAuditSink(config.audit_path).read(limit=args.show_audit):
            print(json.dumps(record, ensure_ascii=False))
        return 0

    logger.info("🚀 Starting update check...")
    report = run_update_check(config)

    payload = report.to_payload()
    if args.payload_out:
        write_json(payload, Path(args.payload_out))
    if args.json:
        print(json.dumps(payload, indent=2, ensure_ascii=False))

    logger.info(
        f"🏁 Finished: outcome={report.outcome.value}, exit={report.exit_code}, "
        f"notification sent={report.notification_sent}"
    )
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
