"""Biotrace CLI entry points.
This module exposes the interpretation and unique key minting jobs.
It maps argparse commands onto pipeline calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import BiotraceConfig
from core.constants import ERROR_POLICY_SKIP, SUPPORTED_ERROR_POLICIES
from core.errors import BiotraceConfigError, BiotraceError
from core.records import RecordAspect
from interpreters.vocabulary import UnmatchedPolicy
from pipeline.interpretation_runner import InterpretationOptions
from pipeline.jobs import run_interpretation_job, run_unique_key_job


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="biotrace",
        description="Interpret verbatim biodiversity records",
    )
    parser.add_argument("--vocabulary-path", help="Override BIOTRACE_VOCABULARY_PATH")
    parser.add_argument("--metadata-path", help="Override BIOTRACE_METADATA_PATH")
    parser.add_argument("--workers", type=int, help="Override BIOTRACE_WORKERS")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_interpret_command(subparsers)
    _add_unique_keys_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Biotrace CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
        if args.command == "interpret":
            return _run_interpret_command(config, args)
        if args.command == "unique-keys":
            return _run_unique_keys_command(config, args)
    except BiotraceError as error:
        parser.exit(1, f"biotrace: error: {error}\n")
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(args: argparse.Namespace) -> BiotraceConfig:
    """Build config from the environment with CLI overrides applied."""
    config = BiotraceConfig.from_env()
    if args.vocabulary_path:
        config = replace(config, vocabulary_path=Path(args.vocabulary_path).expanduser())
    if args.metadata_path:
        config = replace(config, metadata_path=Path(args.metadata_path).expanduser())
    if args.workers is not None:
        if args.workers < 1:
            raise BiotraceConfigError(f"--workers must be at least 1, got {args.workers}.")
        config = replace(config, worker_count=args.workers)
    return config


def _run_interpret_command(config: BiotraceConfig, args: argparse.Namespace) -> int:
    """Handle interpret command.

    Args:
        config: Runtime configuration.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    aspects = tuple(RecordAspect)
    if args.aspect:
        aspects = tuple(dict.fromkeys(RecordAspect(name) for name in args.aspect))
    options = InterpretationOptions(
        dataset_id=args.dataset,
        aspects=aspects,
        error_policy=args.error_policy,
        unmatched_policy=(
            UnmatchedPolicy.RECORD_ISSUE if args.record_unmatched else UnmatchedPolicy.SILENT
        ),
        with_unique_keys=args.unique_keys,
    )
    result = run_interpretation_job(
        Path(args.source).expanduser(),
        Path(args.output_dir).expanduser(),
        options,
        config,
    )
    for aspect, output_path in result.output_paths.items():
        print(f"{aspect.value}={output_path}")
    if result.unique_keys_path is not None:
        print(f"unique_keys={result.unique_keys_path}")
    print(f"records={result.record_count}")
    for issue_name, count in result.issue_counts.items():
        print(f"issue.{issue_name}={count}")
    return 0


def _run_unique_keys_command(config: BiotraceConfig, args: argparse.Namespace) -> int:
    """Handle unique-keys command."""
    if args.lenient:
        config = replace(config, strict_unique_keys=False)
    identifiers_path = run_unique_key_job(
        Path(args.source).expanduser(),
        Path(args.output_dir).expanduser(),
        args.dataset,
        config,
        identifiers_path=Path(args.identifiers).expanduser() if args.identifiers else None,
    )
    print(identifiers_path)
    return 0


def _add_interpret_command(subparsers: Any) -> None:
    """Register interpret subcommand."""
    parser = subparsers.add_parser("interpret", help="Interpret verbatim JSONL records")
    parser.add_argument("source", help="Verbatim JSONL file or directory")
    parser.add_argument("--dataset", required=True, help="Dataset identifier")
    parser.add_argument("--output-dir", required=True, help="Interpreted output directory")
    parser.add_argument(
        "--aspect",
        action="append",
        choices=[aspect.value for aspect in RecordAspect],
        help="Aspect to interpret; repeat for several (default: all)",
    )
    parser.add_argument(
        "--error-policy",
        default=ERROR_POLICY_SKIP,
        choices=SUPPORTED_ERROR_POLICIES,
        help="Skip failed records or fail the run",
    )
    parser.add_argument(
        "--record-unmatched",
        action="store_true",
        help="Record an issue for values without vocabulary match",
    )
    parser.add_argument(
        "--unique-keys",
        action="store_true",
        help="Also write unique keys (needs dataset metadata)",
    )


def _add_unique_keys_command(subparsers: Any) -> None:
    """Register unique-keys subcommand."""
    parser = subparsers.add_parser("unique-keys", help="Mint identifiers from unique keys")
    parser.add_argument("source", help="Verbatim JSONL file or directory")
    parser.add_argument("--dataset", required=True, help="Dataset identifier")
    parser.add_argument("--output-dir", required=True, help="Output directory")
    parser.add_argument("--identifiers", help="Known identifier CSV to reuse and update")
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Skip records whose unique terms are all empty",
    )
