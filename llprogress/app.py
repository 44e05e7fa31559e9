import argparse
import json
from dataclasses import asdict
from pathlib import Path
from typing import List

from . import __version__
from .client import LockerClient
from .env import load_env
from .errors import LLProgressError
from .schema import ProgressSummary

DEFAULT_CONFIG = "config/locker.yaml"
DEFAULT_MODULES = "config/modules.json"


def format_summary(summary: ProgressSummary) -> str:
    return (
        f"{summary.module_id}  {summary.module_name}  "
        f"{summary.checkpoints_completed}/{summary.total_checkpoints}"
    )


def print_summaries(summaries: List[ProgressSummary], indent: str = "") -> None:
    if not summaries:
        print(f"{indent}No modules.")
        return
    for s in summaries:
        print(f"{indent}{format_summary(s)}")


def build_client(args: argparse.Namespace) -> LockerClient:
    config_path = Path(args.config)
    modules_path = Path(args.modules)
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    if not modules_path.exists():
        raise SystemExit(f"Modules file not found: {modules_path}")
    try:
        return LockerClient.from_files(config_path, modules_path)
    except LLProgressError as e:
        raise SystemExit(str(e))


def cmd_progress(args: argparse.Namespace) -> None:
    with build_client(args) as client:
        try:
            summaries = client.progress(args.username)
        except LLProgressError as e:
            raise SystemExit(str(e))
        finally:
            client.logger.log_metrics_summary()

    if args.json:
        print(json.dumps([asdict(s) for s in summaries], indent=2))
        return
    print(f"Learner: {args.username}")
    print_summaries(summaries, indent="  ")


def cmd_mentor(args: argparse.Namespace) -> None:
    with build_client(args) as client:
        try:
            reports = client.mentor()
        except LLProgressError as e:
            raise SystemExit(str(e))
        finally:
            client.logger.log_metrics_summary()

    if args.json:
        print(json.dumps({u: asdict(r) for u, r in reports.items()}, indent=2))
        return
    if not reports:
        print("No learners found.")
        return
    print(f"Found {len(reports)} learners:\n")
    for username, report in reports.items():
        print(f"Learner: {username}")
        print_summaries(report.progress, indent="  ")
        print()


def cmd_urls(args: argparse.Namespace) -> None:
    with build_client(args) as client:
        if args.username:
            print(f"Progress: {client.progress_url(args.username)}")
        print(f"Mentor:   {client.mentor_url()}")


def _add_paths(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("--config", default=DEFAULT_CONFIG, help=f"Path to Learning Locker YAML config (default: {DEFAULT_CONFIG})")
    sub.add_argument("--modules", default=DEFAULT_MODULES, help=f"Path to module catalog JSON (default: {DEFAULT_MODULES})")


def main(argv=None):
    # Load .env if present (LL_API_KEY, LL_API_SECRET)
    load_env()
    parser = argparse.ArgumentParser(prog="llprogress", description="Learner progress from Learning Locker")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    prg = subparsers.add_parser("progress", help="Show one learner's progress per module")
    prg.add_argument("--username", required=True, help="Learner username (mailbox local part)")
    prg.add_argument("--json", action="store_true", help="Print JSON instead of text")
    _add_paths(prg)
    prg.set_defaults(func=cmd_progress)

    mnt = subparsers.add_parser("mentor", help="Show progress for every learner in the statement store")
    mnt.add_argument("--json", action="store_true", help="Print JSON instead of text")
    _add_paths(mnt)
    mnt.set_defaults(func=cmd_mentor)

    url = subparsers.add_parser("urls", help="Print the request URLs built from the config")
    url.add_argument("--username", help="Learner username for the progress URL")
    _add_paths(url)
    url.set_defaults(func=cmd_urls)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
