# src/sitecompile/cli.py
import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

# Module imports
from sitecompile.config import DEFAULT_DIST, DEFAULT_SRC, ESBUILD_COMMAND, ESBUILD_ENV_VAR
from sitecompile.core.runner import Runner
from sitecompile.models import BuildOptions
from sitecompile.utils.console import Console


def create_arg_parser():
    parser = argparse.ArgumentParser(
        prog="sitecompile",
        description="Static site compiler: mirrors a source tree into an output tree, minifying JS, CSS and HTML.",
        epilog=(
            "examples:\n"
            "  sitecompile --src my-site\n"
            '  sitecompile --src "C:/path with spaces" --dist public --clean\n'
            "  sitecompile --src app --bundle --external jquery --external lodash"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-s", "--src", type=str, default=DEFAULT_SRC, help=f"Source directory (default: {DEFAULT_SRC})")
    parser.add_argument("-d", "--dist", type=str, default=DEFAULT_DIST, help=f"Output directory (default: {DEFAULT_DIST})")
    parser.add_argument("-w", "--watch", action="store_true", help="Watch for changes and rebuild")
    parser.add_argument("-c", "--clean", action="store_true", help="Remove the output directory before building")
    parser.add_argument("-b", "--bundle", action="store_true", help="Bundle JS modules (missing dependencies fail the build)")
    parser.add_argument(
        "-e", "--external",
        action="append",
        default=[],
        metavar="PKG",
        help="Mark a module as external to the bundle (repeatable)",
    )
    parser.add_argument(
        "-x", "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Skip source paths matching a gitignore-style pattern (repeatable)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print detailed progress")
    return parser


def resolve_options(args: argparse.Namespace) -> BuildOptions:
    """Freezes parsed arguments into the run's BuildOptions."""
    return BuildOptions(
        src=Path(args.src),
        dist=Path(args.dist),
        bundle=args.bundle,
        external=tuple(args.external),
        clean=args.clean,
        watch=args.watch,
        verbose=args.verbose,
        exclude=tuple(args.exclude),
        esbuild=os.environ.get(ESBUILD_ENV_VAR) or ESBUILD_COMMAND,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_arg_parser()
    args = parser.parse_args(argv)
    options = resolve_options(args)
    console = Console(verbose=options.verbose)

    try:
        return Runner(options, console).run()

    except KeyboardInterrupt:
        print("\nCancelled.")
        return 1

    except Exception as e:
        console.error(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
