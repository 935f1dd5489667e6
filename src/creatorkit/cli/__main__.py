"""Entry point for running the CLI as a module."""

import argparse
import asyncio
import sys

from .runner import main


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="creatorkit",
        description="Command-line client for the creatorkit tools API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  creatorkit list\n"
            '  creatorkit run headlines headline="How to improve your writing skills"\n'
            "  creatorkit run content_calendar niche=fitness platforms=instagram,tiktok --json"
        ),
    )

    parser.add_argument(
        "--host",
        type=str,
        default="localhost",
        help="Server host (default: localhost)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Server port (default: 8080)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (shows requests and status codes)",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="List available tools")

    run = commands.add_parser("run", help="Run one tool")
    run.add_argument("tool", help="Tool name, as shown by 'list'")
    run.add_argument(
        "assignments",
        nargs="*",
        metavar="key=value",
        help="Tool inputs; values are parsed as JSON when possible",
    )
    run.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print the normalized result as JSON instead of export lines",
    )

    return parser.parse_args(argv)


def cli_entry() -> None:
    """CLI entry point."""
    args = parse_args()

    try:
        code = asyncio.run(
            main(
                command=args.command,
                host=args.host,
                port=args.port,
                tool=getattr(args, "tool", None),
                assignments=getattr(args, "assignments", None),
                as_json=getattr(args, "as_json", False),
                debug=args.debug,
            )
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        sys.exit(0)
    sys.exit(code)


if __name__ == "__main__":
    cli_entry()
