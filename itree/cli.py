"""Command-line front door for itree.

Parses CLI options, walks and builds the tree, then either prints it (plain
or summary only) or hands it to the interactive session.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import config
from .errors import TreeBuildError
from .file_tree_model import STDIN_PATH, WalkOptions
from .log import configure_logging
from .render import render_plain
from .runtime import BuildProgress, run_session
from .tree_model import FileTree
from .ui_theme import available_color_names, resolve_theme


def _nonnegative_int(value: str) -> int:
    """argparse type for non-negative integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="itree",
        description="An interactive version of the `tree` utility.",
    )
    parser.add_argument("root", nargs="?", default=None, help="The directory at which to start the tree.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--no-interact",
        action="store_true",
        help="Do not enter interactive mode - just print the tree and summary information.",
    )
    mode.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Do not render the tree - just build it and print summary information.",
    )
    parser.add_argument("--only-dirs", action="store_true", help="List directories only.")
    parser.add_argument("-L", "--max-level", type=_nonnegative_int, default=None, help="Max recursion level.")
    parser.add_argument("-l", "--follow-links", action="store_true", help="Follow links.")
    parser.add_argument(
        "--max-filesize",
        type=_nonnegative_int,
        default=None,
        metavar="BYTES",
        help="Max file size to include.",
    )
    parser.add_argument("--hidden", action="store_true", default=None, help="Include hidden files.")
    parser.add_argument("--no-ignore", action="store_true", help="Do not respect `.[git]ignore` files.")
    parser.add_argument(
        "--no-exclude",
        action="store_true",
        help="Do not respect `.git/info/exclude` and global git exclude files.",
    )
    parser.add_argument(
        "-I",
        "--ignore",
        action="append",
        default=[],
        metavar="GLOB",
        help="Specify an additional path to ignore (repeatable).",
    )
    parser.add_argument(
        "-c",
        "--bg-color",
        choices=available_color_names(),
        default=None,
        help="The background color to highlight the focused file. Blue by default.",
    )
    parser.add_argument(
        "-f",
        "--fg-color",
        choices=available_color_names(),
        default=None,
        help="The foreground color to use to draw the tree. White by default.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--save-defaults",
        action="store_true",
        help="Remember the given --fg-color, --bg-color and --hidden as defaults.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log walk details to stderr.")
    return parser


def walk_options_from_args(args: argparse.Namespace) -> WalkOptions:
    """Translate parsed flags into walker options, consulting saved defaults."""
    hidden = args.hidden if args.hidden is not None else config.load_show_hidden()
    options = WalkOptions(
        max_depth=args.max_level,
        follow_links=args.follow_links,
        max_filesize=args.max_filesize,
        hidden=hidden,
        only_dirs=args.only_dirs,
        no_ignore=args.no_ignore,
        no_git_exclude=args.no_exclude,
    )
    for pattern in args.ignore:
        options.add_custom_ignore(pattern)
    return options


def save_defaults_from_args(args: argparse.Namespace) -> None:
    """Persist explicitly given color and hidden-file flags."""
    if args.fg_color is not None or args.bg_color is not None:
        config.save_colors(
            args.fg_color or config.load_fg_color(),
            args.bg_color or config.load_bg_color(),
        )
    if args.hidden is not None:
        config.save_show_hidden(args.hidden)


def _is_interactive_terminal() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and show the tree rooted at the requested path.

    ``default_path`` is primarily for tests; when omitted the current
    directory (``.``) is used. A build failure exits with a message on stderr.
    """
    args = build_parser().parse_args()
    configure_logging(args.verbose)

    if args.root is not None:
        root: Path | str = args.root if args.root == STDIN_PATH else Path(args.root)
    else:
        root = default_path if default_path is not None else Path(".")
    if root != STDIN_PATH and not Path(root).exists() and not Path(root).is_symlink():
        raise SystemExit(f"Path not found: {root}")

    if args.save_defaults:
        save_defaults_from_args(args)

    options = walk_options_from_args(args)
    interactive = not args.quiet and not args.no_interact and _is_interactive_terminal()

    try:
        if interactive and sys.stderr.isatty():
            with BuildProgress():
                tree = FileTree.from_directory(root, options)
        else:
            tree = FileTree.from_directory(root, options)
    except TreeBuildError as exc:
        raise SystemExit(f"itree: {exc}") from exc

    if args.quiet:
        sys.stdout.write(tree.summary() + "\n")
        return
    if not interactive:
        sys.stdout.write(render_plain(tree))
        return

    fg_color = args.fg_color or config.load_fg_color()
    bg_color = args.bg_color or config.load_bg_color()
    theme = resolve_theme(fg_color, bg_color, no_color=args.no_color)
    run_session(tree, theme, sys.stdin.fileno(), sys.stdout.fileno())


if __name__ == "__main__":
    main()
