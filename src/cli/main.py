"""BIND terminology CLI entry points.
This module exposes the reconcile workflow and code derivation helpers.
It maps argparse commands onto pipeline calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from cli.reconcile_command import add_reconcile_command, run_reconcile_command
from core.config import BindConfig
from core.errors import BindError
from core.reconcile_rules import load_reconcile_rules
from transforms.code_derivation import derive_code


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="bind-terminology",
        description="BIND terminology reconciliation CLI",
    )
    parser.add_argument("--project-root", help="Override BIND_PROJECT_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_reconcile_command(subparsers)
    _add_derive_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the BIND terminology CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config = _build_config(args)
    if args.command == "reconcile":
        return run_reconcile_command(config, args)
    if args.command == "derive":
        return _run_derive_command(config, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(args: argparse.Namespace) -> BindConfig:
    """Build config with optional command-line overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Configured runtime config.
    """
    config = BindConfig.from_env()
    if args.project_root:
        config = replace(config, project_root=_resolve(args.project_root))
    source_root = getattr(args, "source_root", None)
    if source_root:
        config = config.with_source_root(_resolve(source_root))
    code_lists_dir = getattr(args, "code_lists_dir", None)
    if code_lists_dir:
        config = replace(config, code_lists_dir=_resolve(code_lists_dir))
    rules_path = getattr(args, "rules", None)
    if rules_path:
        config = replace(config, rules_path=_resolve(rules_path))
    return config


def _run_derive_command(config: BindConfig, args: argparse.Namespace) -> int:
    """Handle derive command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    try:
        rules = load_reconcile_rules(config.rules_path)
    except BindError as error:
        print(f"derive_error={error}")
        return 1
    print(derive_code(args.code, args.display, rules.namespace_prefixes))
    return 0


def _add_derive_command(subparsers: Any) -> None:
    """Register derive subcommand."""
    parser = subparsers.add_parser("derive", help="Print the derived code for one upstream code")
    parser.add_argument("code", help="Upstream code, e.g. csio:AUTO or 047")
    parser.add_argument("--display", help="Upstream display text used for numeric codes")


def _resolve(raw_path: str) -> Path:
    return Path(raw_path).expanduser().resolve()
