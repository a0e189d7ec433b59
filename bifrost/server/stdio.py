"""Stdio server loop: one JSON request per stdin line, one response per stdout line."""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager, redirect_stdout
from typing import Iterator, TextIO

from loguru import logger

from bifrost.config.schema import BridgeConfig
from bifrost.server.dispatcher import Dispatcher
from bifrost.server.host import PythonHostRuntime


def build_dispatcher(config: BridgeConfig) -> Dispatcher:
    server = config.server
    host = PythonHostRuntime(
        allow_modules=server.allow_modules,
        deny_modules=server.deny_modules,
        expose_private=server.expose_private,
    )
    return Dispatcher(host, redact_errors=server.redact_errors, max_depth=server.max_depth)


def serve(dispatcher: Dispatcher, reader: TextIO, writer: TextIO) -> int:
    """Answer every request line until the reader is exhausted; returns the count."""
    handled = 0
    for line in reader:
        text = line.strip()
        if not text:
            continue
        writer.write(dispatcher.handle_line(text) + "\n")
        writer.flush()
        handled += 1
    return handled


@contextmanager
def record_channel() -> Iterator[tuple[TextIO, TextIO]]:
    """Take the process's stdin/stdout file descriptors for wire records.

    The records travel over private duplicates of fd 0 and fd 1. While the
    block runs, fd 1 points at stderr and fd 0 at the null device, so child
    processes, C extensions, ``print`` and ``input`` in bridged libraries
    never touch the record channel. Both ends are UTF-8 whatever the locale.
    """
    sys.stdout.flush()
    saved_stdin, saved_stdout = sys.stdin, sys.stdout
    reader = os.fdopen(os.dup(0), "r", encoding="utf-8")
    writer = os.fdopen(os.dup(1), "w", encoding="utf-8", newline="\n")
    null_fd = os.open(os.devnull, os.O_RDONLY)
    try:
        os.dup2(2, 1)
        os.dup2(null_fd, 0)
    finally:
        os.close(null_fd)
    sys.stdout = sys.stderr
    sys.stdin = open(os.devnull, encoding="utf-8")
    try:
        yield reader, writer
    finally:
        sys.stdin.close()
        sys.stdin, sys.stdout = saved_stdin, saved_stdout
        writer.flush()
        os.dup2(writer.fileno(), 1)
        os.dup2(reader.fileno(), 0)
        writer.close()
        reader.close()


def run_stdio_server(
    config: BridgeConfig,
    reader: TextIO | None = None,
    writer: TextIO | None = None,
) -> int:
    """Serve until the request stream ends; returns the number of requests answered.

    Without explicit streams the process's own stdin/stdout carry the records
    (see ``record_channel``). With explicit streams only ``sys.stdout`` is
    redirected, which suits embedding in a process that owns its descriptors.
    """
    dispatcher = build_dispatcher(config)
    if reader is not None and writer is not None:
        with redirect_stdout(sys.stderr):
            handled = _serve_logged(dispatcher, reader, writer)
    else:
        with record_channel() as (channel_in, channel_out):
            handled = _serve_logged(dispatcher, channel_in, channel_out)
    logger.info("bifrost server stopping after {} requests, {} objects registered", handled, len(dispatcher.table))
    return handled


def _serve_logged(dispatcher: Dispatcher, reader: TextIO, writer: TextIO) -> int:
    logger.info("bifrost server ready")
    return serve(dispatcher, reader, writer)
