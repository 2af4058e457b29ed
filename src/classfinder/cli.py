"""Command line entrypoint for duplicate class scans."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import TextIO

from classfinder.classpath import DependencyResolutionRequiredError, DiagnosticSink, EntryDiagnostic
from classfinder.config import CliOverrides, load_effective_config
from classfinder.finder import Scope, format_report, report_to_dict, run_finder
from classfinder.logging import SCOPE_STARTED, JsonlScanLogger, fan_out, jsonl_sink

EXIT_OK = 0
EXIT_FAILED = 2


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for a finder run."""
    parser = argparse.ArgumentParser(prog="classfinder")
    parser.add_argument("--project-root", required=False, default=".")
    parser.add_argument("--config", required=False, default=None)
    parser.add_argument("--class-name", required=False, default=None)
    parser.add_argument("--compile-classpath", required=False, default=None)
    parser.add_argument("--runtime-classpath", required=False, default=None)
    parser.add_argument("--test-classpath", required=False, default=None)
    parser.add_argument("--ignore", action="append", default=[], metavar="PATTERN")
    parser.add_argument("--ignore-dependency", action="append", default=[], metavar="COORDS")
    parser.add_argument("--no-default-ignore-list", action="store_true")
    parser.add_argument(
        "--scope",
        action="append",
        choices=[scope.value for scope in Scope],
        default=None,
    )
    parser.add_argument("--skip", action="store_true")
    parser.add_argument("--duplicates", action="store_true")
    parser.add_argument("--log-file", required=False, default=None)
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--print-config", action="store_true")
    return parser


def overrides_from_args(args: argparse.Namespace) -> CliOverrides:
    """Translate parsed arguments into config overrides."""
    return CliOverrides(
        class_name=args.class_name,
        use_default_ignore_list=False if args.no_default_ignore_list else None,
        extra_ignored_resources=tuple(args.ignore),
        extra_ignored_dependencies=tuple(args.ignore_dependency),
        skip=True if args.skip else None,
        report_all_duplicates=True if args.duplicates else None,
        scopes=tuple(Scope(value) for value in args.scope) if args.scope else None,
        compile_classpath=_split_classpath(args.compile_classpath),
        runtime_classpath=_split_classpath(args.runtime_classpath),
        test_classpath=_split_classpath(args.test_classpath),
    )


def main(
    argv: list[str] | None = None,
    out_stream: TextIO | None = None,
    err_stream: TextIO | None = None,
) -> int:
    """Entrypoint for the classfinder process."""
    out = out_stream or sys.stdout
    err = err_stream or sys.stderr
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        config = load_effective_config(
            project_root=Path(args.project_root),
            config_path=Path(args.config) if args.config is not None else None,
            overrides=overrides_from_args(args),
        )
    except ValueError as exc:
        err.write(f"Invalid configuration: {exc}\n")
        return EXIT_FAILED

    if args.print_config:
        out.write(f"{json.dumps(config.to_public_dict(), sort_keys=True, indent=2)}\n")
        return EXIT_OK

    logger = JsonlScanLogger(Path(args.log_file)) if args.log_file is not None else None
    stderr_sink = _stream_sink(err)

    def sink_for(scope: Scope) -> DiagnosticSink:
        if logger is None:
            return stderr_sink
        logger.record(scope, SCOPE_STARTED, True)
        return fan_out(stderr_sink, jsonl_sink(logger, scope))

    try:
        reports = run_finder(config.project, config.settings, sink_factory=sink_for)
    except DependencyResolutionRequiredError as exc:
        err.write(f"Could not resolve dependencies: {exc.coordinates}\n")
        return EXIT_FAILED

    if logger is not None:
        for report in reports:
            logger.record_report(report)

    if args.json:
        payload = {"reports": [report_to_dict(report) for report in reports]}
        out.write(f"{json.dumps(payload, sort_keys=True)}\n")
        return EXIT_OK
    for report in reports:
        for line in format_report(report, include_skipped=False):
            out.write(f"{line}\n")
    return EXIT_OK


def _split_classpath(raw: str | None) -> tuple[Path, ...] | None:
    if raw is None:
        return None
    return tuple(Path(part) for part in raw.split(os.pathsep) if part)


def _stream_sink(stream: TextIO) -> DiagnosticSink:
    def sink(diagnostic: EntryDiagnostic) -> None:
        stream.write(f"warning [{diagnostic.kind}]: {diagnostic.path} ({diagnostic.reason})\n")

    return sink


if __name__ == "__main__":
    raise SystemExit(main())
