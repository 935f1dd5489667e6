from datetime import timedelta

from pydantic import BaseModel, Field, SecretStr

# Google AI Studio serves Gemini models behind an OpenAI-compatible API.
GEMINI_OPENAI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/openai/"


class LLMConfig(BaseModel):
    """Generation model client configuration."""

    endpoint: str = Field(
        default=GEMINI_OPENAI_ENDPOINT,
        description="OpenAI-compatible base URL of the generation service",
    )
    api_key: SecretStr = Field(
        default=SecretStr(""), description="API key for the generation service"
    )
    model_name: str = Field(default="gemini-2.0-flash", description="Model name")
    temperature: float = Field(
        default=0.8, description="Sampling temperature for model responses"
    )
    max_tokens: int = Field(
        default=4096, description="Maximum tokens in a single response"
    )
    top_p: float = Field(
        default=0.95, description="Top-p sampling parameter for model responses"
    )
    model_timeout: timedelta = Field(
        default=timedelta(seconds=60),
        description="Request timeout propagated to the outbound call",
    )
    json_mode: bool = Field(
        default=True,
        description="Request response_format=json_object from the model",
    )


class APIConfig(BaseModel):
    """API configuration settings."""

    prefix: str = Field(default="/api/v1", description="Route prefix for tools")
    max_input_chars: int = Field(
        default=4000,
        description="Free-text input values are clipped to this many characters",
    )


class LoggingConfig(BaseModel):
    """Root logger configuration."""

    level: str = Field(default="INFO", description="Root log level")
    json_output: bool = Field(
        default=True, description="JSON lines (True) or coloured dev output"
    )


class TracingConfig(BaseModel):
    """OpenTelemetry tracing configuration."""

    enabled: bool = Field(default=False, description="Enable OTLP trace export")
    endpoint: str = Field(default="", description="OTLP/HTTP traces endpoint")
    username: str = Field(default="", description="Basic-auth user for the collector")
    password: str = Field(default="", description="Basic-auth password")
    service_name: str = Field(default="creatorkit", description="service.name")
    sample_rate: float = Field(
        default=1.0, ge=0.0, le=1.0, description="Root span sampling ratio"
    )
    excluded_urls: list[str] = Field(
        default_factory=lambda: ["/healthz", "/metrics"],
        description="Routes excluded from tracing and HTTP metrics",
    )
