"""Configuration schema using Pydantic."""

from pydantic import BaseModel, Field, ConfigDict
from pydantic_settings import BaseSettings


class ServerConfig(BaseModel):
    """Server process policy."""
    allow_modules: list[str] = Field(default_factory=list)  # Empty means any importable module
    deny_modules: list[str] = Field(default_factory=list)  # Checked before allow_modules
    expose_private: bool = False  # Allow calling _private members
    redact_errors: bool = True  # Strip credential-looking text from error responses
    max_depth: int = 64  # Maximum container nesting on the wire


class ClientConfig(BaseModel):
    """How the client spawns and talks to a server process."""
    python_executable: str = ""  # Empty means the running interpreter
    server_module: str = "bifrost.server"
    call_timeout_seconds: float | None = None  # None blocks until the server answers
    extra_path: list[str] = Field(default_factory=list)  # Prepended to the server's PYTHONPATH
    env: dict[str, str] = Field(default_factory=dict)  # Extra environment for the server process


class LoggingConfig(BaseModel):
    """Logging sinks."""
    level: str = "INFO"
    file: str = ""  # Rotating log file; empty disables it


class BridgeConfig(BaseSettings):
    """Root configuration for bifrost."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        env_prefix="BIFROST_",
        env_nested_delimiter="__"
    )
