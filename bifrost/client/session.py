"""Helpers that wire a gateway to a freshly spawned server process."""

from __future__ import annotations

import json
import sys
from pathlib import Path

from bifrost.client.gateway import CallGateway
from bifrost.client.transport import SubprocessTransport, child_environment
from bifrost.config.schema import BridgeConfig


def server_command(config: BridgeConfig) -> list[str]:
    python = config.client.python_executable.strip() or sys.executable
    return [python, "-m", config.client.server_module]


def server_environment(config: BridgeConfig) -> dict[str, str]:
    """Forward the server and logging sections to the child as BIFROST_* variables."""
    server = config.server
    env = {
        "BIFROST_SERVER__ALLOW_MODULES": json.dumps(server.allow_modules),
        "BIFROST_SERVER__DENY_MODULES": json.dumps(server.deny_modules),
        "BIFROST_SERVER__EXPOSE_PRIVATE": json.dumps(server.expose_private),
        "BIFROST_SERVER__REDACT_ERRORS": json.dumps(server.redact_errors),
        "BIFROST_SERVER__MAX_DEPTH": str(server.max_depth),
        "BIFROST_LOGGING__LEVEL": config.logging.level,
        "BIFROST_LOGGING__FILE": config.logging.file,
    }
    env.update(config.client.env)
    # the child must import this same bifrost, installed or not
    package_root = str(Path(__file__).resolve().parents[2])
    return child_environment([*config.client.extra_path, package_root], env)


def open_bridge(config: BridgeConfig | None = None) -> CallGateway:
    """Spawn a server process and return a gateway bound to it.

    The process starts lazily on the first call; close the gateway (or use it
    as a context manager) to stop it.
    """
    cfg = config or BridgeConfig()
    transport = SubprocessTransport(server_command(cfg), env=server_environment(cfg))
    return CallGateway(
        transport,
        timeout=cfg.client.call_timeout_seconds,
        max_depth=cfg.server.max_depth,
    )
