"""Configuration management for the CLI tool."""

from pydantic import BaseModel, Field


class CLIConfig(BaseModel):
    """CLI configuration settings."""

    host: str = Field(
        default="localhost",
        description="Server host",
    )
    port: int = Field(
        default=8080,
        description="Server port",
    )
    api_prefix: str = Field(
        default="/api/v1",
        description="Route prefix of the tools API",
    )
    timeout: float = Field(
        default=120.0,
        description="Request timeout in seconds",
    )

    @property
    def base_url(self) -> str:
        """Get the base URL for the API."""
        return f"http://{self.host}:{self.port}"

    @property
    def tools_url(self) -> str:
        """Get the URL of the tool listing."""
        return f"{self.base_url}{self.api_prefix}/tools"

    def tool_url(self, name: str) -> str:
        """Get the URL that runs tool *name*."""
        return f"{self.tools_url}/{name}"
