# repodeps/modules/cli.py
"""
Central CLI for repodeps.
- Uses rich for colored output, tables and a spinner while walking the graph.
- One verb per command: init, config, clone, update, list (with short aliases).
- The exit code is the command's ReturnCode (0 on success).

Usage examples:
  repodeps init --build-script "make package"
  repodeps clone
  repodeps --dir ../app update
  repodeps --dry-run up
  repodeps ls
"""

from __future__ import annotations
import argparse
import sys
import traceback
from typing import List, Optional

from rich.console import Console

from repodeps import __version__
from repodeps.modules import logger as _logger
from repodeps.modules.commands import (
    Command,
    InitCommand,
    ShowConfigCommand,
    CloneCommand,
    UpdateCommand,
    ListCommand,
)
from repodeps.modules.config import config
from repodeps.modules.returncode import ReturnCode

ALIASES = {
    "init": InitCommand,
    "config": ShowConfigCommand,
    "cfg": ShowConfigCommand,
    "clone": CloneCommand,
    "cl": CloneCommand,
    "update": UpdateCommand,
    "up": UpdateCommand,
    "list": ListCommand,
    "ls": ListCommand,
}


# Create console with color toggles
def make_console(no_color: bool = False, quiet: bool = False) -> Console:
    if no_color:
        return Console(color_system=None, force_terminal=False, quiet=quiet)
    return Console(quiet=quiet)


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="repodeps", description="Build graphs of dependent git repositories")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("--no-color", action="store_true", help="Disable color output")
    ap.add_argument("--quiet", action="store_true", help="Quiet mode; less output")
    ap.add_argument("--dir", dest="directory", help="Project directory (defaults to the current one)")
    ap.add_argument("--dry-run", action="store_true", help="Log git/build commands instead of running them")
    ap.add_argument("-v", "--verbose", action="store_true", help="Show info-level log messages")
    sub = ap.add_subparsers(dest="command", required=True)

    p_init = sub.add_parser("init", help="Create a repodeps.yaml in the project directory")
    p_init.add_argument("--build-script", default="", help="Command that builds the project")
    p_init.add_argument("--packages-dir", default="artifacts", help="Where the build leaves its packages")

    sub.add_parser("config", aliases=["cfg"], help="Show the project manifest")
    sub.add_parser("clone", aliases=["cl"], help="Clone every missing dependency")
    sub.add_parser("update", aliases=["up"], help="Checkout dependency branches, build and update packages")
    sub.add_parser("list", aliases=["ls"], help="List projects in build order")
    return ap


def get_command(argv: List[str], console: Optional[Console] = None) -> Optional[Command]:
    """Parse argv into a ready-to-run command; None when the verb is unknown."""
    parser = build_argparser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # --help and --version exit cleanly; anything else is a bad verb or flag
        if e.code == 0:
            raise
        return None

    cls = ALIASES.get(args.command)
    if cls is None:
        return None

    kwargs = {
        "directory": args.directory,
        "console": console or make_console(args.no_color, args.quiet),
        "dry_run": args.dry_run,
    }
    if cls is InitCommand:
        kwargs["build_script"] = args.build_script
        kwargs["packages_dir"] = args.packages_dir
    return cls(**kwargs)


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    # pre-parse flags that must be applied before any Logger is created
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--no-color", action="store_true")
    pre.add_argument("--quiet", action="store_true")
    pre.add_argument("-v", "--verbose", action="store_true")
    known, _ = pre.parse_known_args(argv)
    if known.verbose:
        config.update("logging", level="info")
    if known.no_color:
        config.update("logging", color_output=False)

    console = make_console(known.no_color, known.quiet)
    log = _logger.Logger("cli")

    command = get_command(argv, console)
    if command is None:
        return int(ReturnCode.INVALID_COMMAND)

    try:
        with console.status(f"[blue]repodeps {command.name}...[/blue]"):
            code = command.execute()
    except Exception as e:
        console.print(f"[red]Unhandled error: {e}[/red]")
        log.error(traceback.format_exc())
        raise
    return int(code)


if __name__ == "__main__":
    raise SystemExit(main())
