"""CLI entry point: dirgo.

Subcommands:
    dirgo tree -d path          # Directory tree (default command)
    dirgo context -d path       # Tree plus project header, deps and config
    dirgo deps -d path          # Project header and dependencies only
    dirgo serve                 # MCP server on stdio

``dirgo -d path`` is shorthand for ``dirgo tree -d path``.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import click

from dirgo import __version__
from dirgo.context import build_context, build_deps, build_tree
from dirgo.core.logging import setup_logging
from dirgo.exceptions import DirgoError
from dirgo.models import OUTPUT_FORMATS, ContextResult, ScanOptions
from dirgo.utils.clipboard import copy_to_clipboard, format_copy_status

_DEFAULT_COMMAND = "tree"
_GROUP_FLAGS = ("-v", "--verbose")


class _DefaultCommandGroup(click.Group):
    """Group that falls back to ``tree`` when no subcommand is named."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        args = list(args)
        index = 0
        while index < len(args) and args[index] in _GROUP_FLAGS:
            index += 1
        if index == len(args):
            args.append(_DEFAULT_COMMAND)
        elif args[index] not in self.commands and args[index] not in ("--help", "--version"):
            args.insert(index, _DEFAULT_COMMAND)
        return super().parse_args(ctx, args)


def _output_options(func: Callable) -> Callable:
    func = click.option(
        "--format",
        "fmt",
        type=click.Choice(OUTPUT_FORMATS),
        default="tree",
        show_default=True,
        help="Output format",
    )(func)
    func = click.option("--copy/--no-copy", default=True, help="Copy the output to the clipboard")(func)
    func = click.option("-o", "--output", default=None, help="Write to file instead of stdout")(func)
    func = click.option("-d", "--dir", "directory", default=".", show_default=True, help="Target directory")(func)
    return func


def _scan_options(func: Callable) -> Callable:
    func = click.option(
        "-i", "--ignore", multiple=True, help="Extra gitignore-style pattern to exclude (repeatable)"
    )(func)
    func = click.option("--include-all", is_flag=True, help="Include normally excluded directories")(func)
    func = click.option("--focus", default=None, help="Only expand this subtree")(func)
    func = click.option("--depth", type=click.IntRange(min=0), default=None, help="Limit tree depth")(func)
    func = click.option("-e", "--emoji", is_flag=True, help="Prefix entries with file-type glyphs")(func)
    return _output_options(func)


def _emit(builder: Callable[[], ContextResult], output: str | None, copy: bool) -> None:
    """Run *builder*, deliver its text, then report size on stderr."""
    try:
        result = builder()
    except DirgoError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output:
        Path(output).write_text(result.text, encoding="utf-8")
        click.echo(f"Written to {output}")
    else:
        click.echo(result.text)

    copied = copy_to_clipboard(result.text) if copy else False
    click.echo(format_copy_status(result.bytes, result.tokens, copied), err=True)


@click.group(cls=_DefaultCommandGroup)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.version_option(__version__, prog_name="dirgo")
def main(verbose: bool) -> None:
    """Fast directory structure generator with LLM context support."""
    setup_logging("DEBUG" if verbose else None)


@main.command("tree")
@_scan_options
def tree(
    directory: str,
    output: str | None,
    copy: bool,
    fmt: str,
    emoji: bool,
    depth: int | None,
    focus: str | None,
    include_all: bool,
    ignore: tuple[str, ...],
) -> None:
    """Generate directory tree."""
    options = ScanOptions(dir=directory, ignore=ignore, include_all=include_all, depth=depth, focus=focus)
    _emit(lambda: build_tree(options, fmt, emoji), output, copy)


@main.command("context")
@_scan_options
def context(
    directory: str,
    output: str | None,
    copy: bool,
    fmt: str,
    emoji: bool,
    depth: int | None,
    focus: str | None,
    include_all: bool,
    ignore: tuple[str, ...],
) -> None:
    """Generate full LLM context."""
    options = ScanOptions(dir=directory, ignore=ignore, include_all=include_all, depth=depth, focus=focus)
    _emit(lambda: build_context(options, fmt, emoji), output, copy)


@main.command("deps")
@_output_options
def deps(directory: str, output: str | None, copy: bool, fmt: str) -> None:
    """Show project dependencies."""
    options = ScanOptions(dir=directory)
    _emit(lambda: build_deps(options, fmt), output, copy)


@main.command("serve")
def serve() -> None:
    """Start MCP server on stdio."""
    from dirgo.mcp_server import serve as serve_stdio

    serve_stdio()


if __name__ == "__main__":
    main()
