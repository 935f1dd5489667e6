"""CLI commands: list tools, run one tool."""

import json
import logging
import sys
from typing import Any, TextIO

from .client import APIError, ToolsAPIClient
from .config import CLIConfig
from .formatter import ResultFormatter

logger = logging.getLogger(__name__)


def parse_value(text: str) -> Any:
    """JSON when it parses (numbers, lists, objects), the plain string otherwise."""
    try:
        return json.loads(text)
    except ValueError:
        return text


def parse_assignments(pairs: list[str]) -> dict[str, Any]:
    """Turn ``key=value`` arguments into a request body.

    Comma lists such as ``platforms=instagram,tiktok`` are sent as one
    string; the API splits them.

    Raises
    ------
    ValueError
        An argument has no ``=`` or an empty key.
    """
    payload: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {pair!r}")
        payload[key] = parse_value(value)
    return payload


class ToolsCLI:
    """Runs one CLI command against the tools API."""

    def __init__(
        self,
        config: CLIConfig,
        output_stream: TextIO = sys.stdout,
        client: ToolsAPIClient | None = None,
    ):
        self.config = config
        self.client = client or ToolsAPIClient(config)
        self.formatter = ResultFormatter(output_stream)

    async def list_tools(self) -> int:
        try:
            tools = await self.client.list_tools()
        except APIError as e:
            self.formatter.print_error(e.code, str(e))
            return 1
        finally:
            await self.client.close()
        self.formatter.print_tools(tools)
        return 0

    async def run_tool(self, name: str, payload: dict[str, Any], as_json: bool = False) -> int:
        try:
            response = await self.client.run_tool(name, payload)
        except APIError as e:
            self.formatter.print_error(e.code, str(e))
            return 1
        finally:
            await self.client.close()
        self.formatter.print_run(response, as_json=as_json)
        return 0


async def main(
    command: str,
    host: str = "localhost",
    port: int = 8080,
    tool: str | None = None,
    assignments: list[str] | None = None,
    as_json: bool = False,
    debug: bool = False,
) -> int:
    """Main entry point for the CLI; returns the process exit code."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    payload = parse_assignments(assignments or [])
    cli = ToolsCLI(CLIConfig(host=host, port=port))
    if command == "list":
        return await cli.list_tools()
    return await cli.run_tool(tool or "", payload, as_json)
