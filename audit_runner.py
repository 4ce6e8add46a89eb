import sys
import json
import asyncio
import logging
import argparse

from colorama import Fore, init

from post_auditor.auditor import PostAuditor
from post_auditor.checks import CHECKS
from post_auditor.config.controller import load_settings
from post_auditor.config.shared_constants import SEVERITIES
from post_auditor.errors import PostAuditError
from post_auditor.publisher import PostPublisher
from post_auditor.reporting import REPORT_FORMATS, print_report, render_markdown, summary_line, write_report
from post_auditor.watcher import watch

init(autoreset=True)

logger = logging.getLogger("post_auditor")

FILE_HANDLER = "post_audit_file"
CONSOLE_HANDLER = "post_audit_console"


def setup_logging(level: str, log_file=None) -> None:
    """Install the run's file and console handlers, replacing any from an earlier run."""
    level = getattr(logging, str(level).upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        if handler.get_name() in (FILE_HANDLER, CONSOLE_HANDLER):
            root.removeHandler(handler)
            handler.close()

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.set_name(FILE_HANDLER)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        root.addHandler(file_handler)

    console = logging.StreamHandler()
    console.set_name(CONSOLE_HANDLER)
    console.setLevel(logging.WARNING if not log_file else level)
    console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root.addHandler(console)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="post-audit", description="Hygiene checks for Jekyll-style blog posts")
    parser.add_argument("--config", default=None, help="Path to a JSON5 config file (default: post_audit.json)")
    parser.add_argument("--log-level", default=None, help="Logging level, e.g. DEBUG or INFO")
    subparsers = parser.add_subparsers(dest="command", required=True)

    audit = subparsers.add_parser("audit", help="Check posts and report findings")
    audit.add_argument("paths", nargs="*", help="Post files or directories (default: posts_dir)")
    audit.add_argument("--bundle", action="append", default=[], help="Concatenated corpus export to split and check")
    audit.add_argument("--format", choices=REPORT_FORMATS, default="text", help="Report format")
    audit.add_argument("--output", default=None, help="Write the report to this file")
    audit.add_argument("--fail-on", choices=SEVERITIES, default=None, help="Lowest severity that fails the run")
    audit.add_argument("--disable", action="append", default=[], choices=list(CHECKS), help="Skip a check")

    watch_cmd = subparsers.add_parser("watch", help="Re-check posts as they change")
    watch_cmd.add_argument("path", nargs="?", default=None, help="Posts directory (default: posts_dir)")

    new = subparsers.add_parser("new", help="Create a post with a complete front-matter block")
    new.add_argument("title", help="Post title")
    new.add_argument("--topic", default=None, help="First directory under the posts root, e.g. apk")
    new.add_argument("--subtopic", default=None, help="Second directory, e.g. android")
    new.add_argument("--categories", default=None, help="Front-matter categories (default: topic)")
    new.add_argument("--tag", action="append", default=[], dest="tags", help="Tag, repeatable")
    new.add_argument("--layout", default="post", help="Layout name")
    new.add_argument("--root", default=None, help="Posts root (default: posts_dir)")

    return parser


def run_audit(args, settings) -> int:
    auditor = PostAuditor(settings)
    report = asyncio.run(auditor.run(paths=args.paths, bundles=args.bundle))

    if args.output:
        asyncio.run(write_report(report, args.format, args.output))
        print(Fore.CYAN + f"Report written to {args.output}")
        print((Fore.GREEN if report["passed"] else Fore.RED) + summary_line(report))
    elif args.format == "text":
        print_report(report)
    elif args.format == "json":
        print(json.dumps(report, indent=2, ensure_ascii=False, default=str))
    else:
        print(render_markdown(report), end="")

    return 0 if report["passed"] else 1


def run_new(args, settings) -> int:
    publisher = PostPublisher(args.root or settings["posts_dir"], layout=args.layout)
    try:
        path = publisher.new_post(
            args.title,
            topic=args.topic,
            subtopic=args.subtopic,
            categories=args.categories,
            tags=args.tags,
        )
    except ValueError as e:
        raise PostAuditError(str(e)) from e
    print(Fore.GREEN + f"✓ Created {path}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        overrides = {"log_level": args.log_level}
        if args.command == "audit":
            overrides["fail_on"] = args.fail_on
        settings = load_settings(args.config, overrides=overrides)
        if args.command == "audit" and args.disable:
            settings["disabled_checks"] = sorted(set(settings["disabled_checks"]) | set(args.disable))

        setup_logging(settings["log_level"], settings.get("log_file"))

        if args.command == "audit":
            return run_audit(args, settings)
        if args.command == "watch":
            watch(args.path or settings["posts_dir"], settings)
            return 0
        return run_new(args, settings)

    except PostAuditError as e:
        print(Fore.RED + f"✗ {e}")
        logger.debug("Run aborted", exc_info=True)
        return 2


if __name__ == "__main__":
    sys.exit(main())
