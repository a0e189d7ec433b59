"""Transports carrying newline-framed records between client and server."""

from __future__ import annotations

import collections
import os
import queue
import subprocess
import threading
from typing import Any

from loguru import logger

from bifrost.server.dispatcher import Dispatcher
from bifrost.utils.exceptions import TransportClosed, TransportTimeout

_EOF = object()


class SubprocessTransport:
    """Line-delimited records over the stdio pipes of a spawned server process."""

    def __init__(
        self,
        command: list[str],
        *,
        env: dict[str, str] | None = None,
        cwd: str | None = None,
    ):
        self.command = list(command)
        self.env = env
        self.cwd = cwd
        self._proc: subprocess.Popen[str] | None = None
        self._inbox: queue.Queue[Any] = queue.Queue()
        self._lock = threading.RLock()

    @property
    def pid(self) -> int | None:
        return self._proc.pid if self._proc else None

    def _spawn(self) -> subprocess.Popen[str]:
        if self._proc is not None:
            if self._proc.poll() is not None:
                raise TransportClosed(f"bridge server exited with code {self._proc.returncode}")
            return self._proc
        try:
            self._proc = subprocess.Popen(
                self.command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                cwd=self.cwd,
                env=self.env,
                bufsize=1,
            )
        except OSError as exc:
            raise TransportClosed(f"cannot start bridge server {self.command[0]!r}: {exc}") from exc
        logger.debug("Started bridge server pid={} command={}", self._proc.pid, self.command)
        threading.Thread(target=self._reader_loop, args=(self._proc,), daemon=True).start()
        threading.Thread(target=self._stderr_loop, args=(self._proc,), daemon=True).start()
        return self._proc

    def _stderr_loop(self, proc: subprocess.Popen[str]) -> None:
        if not proc.stderr:
            return
        for line in proc.stderr:
            text = line.rstrip()
            if text:
                logger.debug("[bifrost-server] {}", text)

    def _reader_loop(self, proc: subprocess.Popen[str]) -> None:
        if proc.stdout:
            for line in proc.stdout:
                text = line.strip()
                if text:
                    self._inbox.put(text)
        self._inbox.put(_EOF)

    def send(self, line: str) -> None:
        with self._lock:
            proc = self._spawn()
            assert proc.stdin is not None
            try:
                proc.stdin.write(line + "\n")
                proc.stdin.flush()
            except (BrokenPipeError, OSError, ValueError) as exc:
                raise TransportClosed(f"bridge server pipe closed: {exc}") from exc

    def receive(self, timeout: float | None = None) -> str:
        try:
            item = self._inbox.get(timeout=timeout)
        except queue.Empty as exc:
            raise TransportTimeout(timeout or 0.0) from exc
        if item is _EOF:
            # later receives must keep failing
            self._inbox.put(_EOF)
            raise TransportClosed("bridge server closed its output")
        return item

    def close(self) -> None:
        with self._lock:
            proc = self._proc
            if not proc:
                return
            try:
                if proc.stdin:
                    proc.stdin.close()
                proc.wait(timeout=2.0)
            except (OSError, subprocess.TimeoutExpired):
                proc.terminate()
                try:
                    proc.wait(timeout=2.0)
                except subprocess.TimeoutExpired:
                    proc.kill()
            logger.debug("Bridge server pid={} exited with {}", proc.pid, proc.returncode)


class LoopbackTransport:
    """In-process transport that feeds records straight into a dispatcher."""

    def __init__(self, dispatcher: Dispatcher):
        self.dispatcher = dispatcher
        self.sent: list[str] = []
        self._replies: collections.deque[str] = collections.deque()
        self._closed = False

    def send(self, line: str) -> None:
        if self._closed:
            raise TransportClosed()
        self.sent.append(line)
        self._replies.append(self.dispatcher.handle_line(line))

    def receive(self, timeout: float | None = None) -> str:
        if not self._replies:
            raise TransportClosed("no reply pending on loopback transport")
        return self._replies.popleft()

    def close(self) -> None:
        self._closed = True


def child_environment(extra_path: list[str] | None = None, extra_env: dict[str, str] | None = None) -> dict[str, str]:
    """Environment for a spawned server: current env plus PYTHONPATH additions."""
    env = os.environ.copy()
    if extra_path:
        current = env.get("PYTHONPATH", "")
        parts = [*extra_path, *([current] if current else [])]
        env["PYTHONPATH"] = os.pathsep.join(parts)
    if extra_env:
        env.update(extra_env)
    env.setdefault("PYTHONUNBUFFERED", "1")
    return env
