"""Output formatting for tool listings and run results."""

import json
from typing import Any, TextIO


class ResultFormatter:
    """Writes API responses to a text stream."""

    def __init__(self, output: TextIO):
        self.output = output

    def print_tools(self, tools: list[dict[str, Any]]) -> None:
        """One line per tool, followed by its input names."""
        width = max((len(tool["name"]) for tool in tools), default=0)
        for tool in tools:
            self._print(f"{tool['name']:<{width}}  {tool['title']}: {tool['description']}\n")
            names = ", ".join(self._input_label(i) for i in tool.get("inputs", []))
            if names:
                self._print(f"{'':<{width}}  inputs: {names}\n")

    def print_run(self, response: dict[str, Any], as_json: bool = False) -> None:
        """Print the export lines, or the raw result as JSON."""
        if as_json:
            self._print(json.dumps(response["result"], indent=2, ensure_ascii=False) + "\n")
            return
        export = response["export"]
        self._print(f"{export['title']}\n\n")
        for line in export["lines"]:
            self._print(f"{line}\n")

    def print_error(self, code: str, message: str) -> None:
        self._print(f"Error [{code}]: {message}\n")

    @staticmethod
    def _input_label(declared: dict[str, Any]) -> str:
        return f"{declared['name']}*" if declared.get("required") else declared["name"]

    def _print(self, text: str) -> None:
        self.output.write(text)
        self.output.flush()
