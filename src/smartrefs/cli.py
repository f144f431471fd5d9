"""
smartrefs.cli - Command-line interface.

Main entry point for the smartrefs CLI tool.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from smartrefs import __version__
from smartrefs.commands import completion, config_cmd, fix_cmd, init_cmd


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="smartrefs",
        description="Smart project references for MSBuild project files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  smartrefs fix --project App/App.csproj --library Lib/bin/Debug/Lib.dll \\
                --source-project Lib/Lib.csproj
  smartrefs fix --selection refs.toml     # Fix every reference in a manifest
  smartrefs fix --selection refs.toml -n  # Dry run, nothing is written

Configuration:
  smartrefs init                # Create .smartrefs.toml in current directory
  smartrefs config path         # Show config file location
  smartrefs config show         # View all settings

For detailed command help: smartrefs <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"smartrefs {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # fix command
    fix_parser = subparsers.add_parser(
        "fix",
        help="Turn project references into inside/outside IDE references",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Inside Visual Studio the project reference is kept (incremental builds,
debugging). Outside it, a binary reference with a relative HintPath is
used, with Debug/Release directories replaced by $(Configuration).

Selection manifest format:
  [[reference]]
  project = "App/App.csproj"
  library = "Lib/bin/Debug/Lib.dll"
  source_project = "Lib/Lib.csproj"
""",
    )
    fix_parser.add_argument(
        "--selection",
        type=Path,
        help="TOML manifest listing the references to fix",
        metavar="FILE",
    )
    fix_parser.add_argument(
        "--project",
        help="Project file containing the reference (rewritten in place)",
        metavar="PATH",
    )
    fix_parser.add_argument(
        "--library",
        help="Library file built by the referenced project",
        metavar="PATH",
    )
    fix_parser.add_argument(
        "--source-project",
        help="Project file that builds the library",
        metavar="PATH",
    )
    fix_parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Show what would change without writing project files",
    )
    fix_parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop at the first project reference that is not found",
    )
    fix_parser.add_argument(
        "--dedupe",
        action="store_true",
        help="Do not add a binary reference that is already present",
    )

    # init command
    init_parser = subparsers.add_parser(
        "init",
        help="Create .smartrefs.toml configuration",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing configuration",
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Inspect configuration",
    )
    config_subparsers = config_parser.add_subparsers(dest="config_action")
    config_subparsers.add_parser("path", help="Show config file location")
    config_subparsers.add_parser("show", help="Show effective configuration")

    # completion command
    completion_parser = subparsers.add_parser(
        "completion",
        help="Shell tab-completion setup",
    )
    completion_parser.add_argument(
        "--shell",
        choices=["bash", "zsh", "fish", "tcsh"],
        help="Target shell (default: detected from $SHELL)",
    )
    completion_parser.add_argument(
        "--install",
        action="store_true",
        help="Append the activation line to the shell rc file",
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        if args.command == "fix":
            return fix_cmd.run(args)
        elif args.command == "init":
            return init_cmd.run(args)
        elif args.command == "config":
            return config_cmd.run(args)
        elif args.command == "completion":
            return completion.run(args)
        elif args.command == "version":
            print(f"smartrefs {__version__}")
            return 0
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
