"""Command-line interface: snow link / unlink / list / prune."""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import get_registry_path, resolve_target_dir
from .errors import PreconditionError, RegistryCorruptError
from .linker import link_packages
from .logger import setup_logging
from .packages import expand_packages
from .registry import load
from .unlinker import prune, unlink_packages

if TYPE_CHECKING:
    from .types import LinkOutcome, UnlinkOutcome

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

_LINK_STYLES = {"linked": ("green", "Symlinked"), "skipped": ("yellow", "Skipped"), "error": ("red", "Failed")}
_UNLINK_STYLES = {
    "unlinked": ("red", "Unlinked"),
    "stale": ("yellow", "Dropped"),
    "refused": ("magenta", "Refused"),
    "error": ("red", "Failed"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="snow", description="Link package directories into a target dir.")
    parser.add_argument(
        "-t",
        "--target",
        metavar="DIR",
        default="~",
        help="The dir to link the packages to (default: ~)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every filesystem change")
    subparsers = parser.add_subparsers(dest="command")

    link_parser = subparsers.add_parser("link", help="Link packages to the target dir")
    link_parser.add_argument("packages", nargs="*", help="Package dirs to link ('*' for all)")
    link_parser.add_argument("-f", "--force", action="store_true", help="Overwrite existing symbolic links")

    unlink_parser = subparsers.add_parser("unlink", help="Unlink the specified packages")
    unlink_parser.add_argument("packages", nargs="*", help="Linked packages to remove")
    unlink_parser.add_argument("-f", "--force", action="store_true", help="Force deletion of symbolic links")

    subparsers.add_parser("list", help="List the linked packages")
    subparsers.add_parser("prune", help="Delete all symlinks from target dir")
    return parser


def _print_link_outcomes(outcomes: list[LinkOutcome]) -> None:
    for outcome in outcomes:
        style, label = _LINK_STYLES[outcome.status]
        line = f"[{style}]{label}[/{style}] {escape(outcome.symlink)}"
        if outcome.status == "linked":
            console.print(line)
        elif outcome.status == "skipped":
            console.print(f"{line} ({escape(outcome.reason or '')})")
        else:
            err_console.print(f"{line}: {escape(outcome.reason or '')}")


def _print_unlink_outcomes(outcomes: list[UnlinkOutcome]) -> None:
    for outcome in outcomes:
        style, label = _UNLINK_STYLES[outcome.status]
        subject = escape(outcome.symlink or outcome.package)
        if outcome.status == "unlinked":
            console.print(f"[{style}]{label}[/{style}] {subject}")
        else:
            err_console.print(f"[{style}]{label}[/{style}] {subject}: {escape(outcome.reason or '')}")


def cmd_link(args: argparse.Namespace) -> None:
    packages = expand_packages(args.packages)
    target_dir = resolve_target_dir(args.target)
    outcomes = link_packages(target_dir, packages, args.force)
    _print_link_outcomes(outcomes)

    linked = sum(1 for o in outcomes if o.status == "linked")
    console.print(f"\n[bold]{linked}[/bold] symlinks created in {escape(str(target_dir))}.")


def cmd_unlink(args: argparse.Namespace) -> None:
    _print_unlink_outcomes(unlink_packages(args.packages, args.force))


def cmd_list(_args: argparse.Namespace) -> None:
    records = load().list_links()
    if not records:
        console.print("[yellow]No linked packages.[/yellow]")
        return

    table = Table(title=f"Linked Packages ({len(records)} symlinks)")
    table.add_column("Package", style="cyan", no_wrap=True)
    table.add_column("Symlink", style="green")
    table.add_column("Origin", style="white")
    for record in records:
        table.add_row(escape(record.package), escape(record.symlink), escape(record.origin))
    console.print(table)


def cmd_prune(_args: argparse.Namespace) -> None:
    outcomes = prune()
    _print_unlink_outcomes(outcomes)
    registry_file = str(get_registry_path())
    if not any(o.status == "error" and o.symlink == registry_file for o in outcomes):
        console.print(f"Removed link registry {escape(registry_file)}")


COMMANDS = {
    "link": cmd_link,
    "unlink": cmd_unlink,
    "list": cmd_list,
    "prune": cmd_prune,
}


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    if args.verbose:
        setup_logging("INFO")

    try:
        COMMANDS[args.command](args)
    except (PreconditionError, RegistryCorruptError) as err:
        err_console.print(f"[red]Error:[/red] {escape(str(err))}")
        sys.exit(1)
