"""
Inference Service Manager

Makes sure a local Ollama-compatible backend is reachable before generation:
probes the base URL, spawns `ollama serve` as a detached process when needed,
and polls until it answers or a deadline passes.

State machine:
    UNKNOWN -> REACHABLE                        (probe succeeded)
    UNKNOWN -> UNREACHABLE -> SPAWNING -> READY (spawned and came up)
                                       -> FAILED (launch failed or deadline passed)

The spawned process is owned by one manager instance, which is passed through
the pipeline. probe-then-spawn runs under a lock so concurrent callers in the
same process never start two backends.
"""

import os
import subprocess
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Sequence

import httpx

from scribe.contexts.inference.exceptions import BackendStartTimeout, BackendUnavailable
from scribe.contexts.inference.logger import _log_debug, _log_info, _log_success, _log_warning
from scribe.utils.config import Settings

BACKEND_LOG_NAME = "inference_backend.log"
STDERR_TAIL_CHARS = 500


class ServiceState(Enum):
    """Lifecycle state of the inference backend as seen by this manager."""

    UNKNOWN = "unknown"
    REACHABLE = "reachable"
    UNREACHABLE = "unreachable"
    SPAWNING = "spawning"
    READY = "ready"
    FAILED = "failed"


@dataclass
class ServiceHandle:
    """
    A backend process started by this manager.

    Attributes:
        process: Popen-like object (poll/terminate/kill/wait)
        command: Command line used to start it
        log_path: File receiving the process stdout/stderr
        started_at: time.time() at launch
    """

    process: subprocess.Popen
    command: Sequence[str]
    log_path: Optional[Path] = None
    started_at: float = field(default_factory=time.time)

    def is_alive(self) -> bool:
        return self.process.poll() is None

    def output_tail(self, limit: int = STDERR_TAIL_CHARS) -> str:
        """Last characters of the process output, or "" if unavailable."""
        if self.log_path is None or not self.log_path.exists():
            return ""
        try:
            return self.log_path.read_text(encoding="utf-8", errors="replace")[-limit:].strip()
        except OSError:
            return ""


@dataclass(frozen=True)
class EnsureResult:
    """Outcome of ensure_running()."""

    started_by_us: bool


def launch_detached(command: Sequence[str], log_path: Path) -> subprocess.Popen:
    """
    Start command detached from this process group, output appended to log_path.

    Raises:
        OSError: If the executable cannot be started (e.g., not on PATH)
    """
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with open(log_path, "ab") as log_handle:
        return subprocess.Popen(
            list(command),
            stdin=subprocess.DEVNULL,
            stdout=log_handle,
            stderr=subprocess.STDOUT,
            start_new_session=os.name != "nt",
        )


Launcher = Callable[[Sequence[str], Path], subprocess.Popen]


class InferenceServiceManager:
    """
    Owns the (at most one) backend process for a run.

    Args:
        settings: Pipeline settings (base URL, command, timeouts, teardown flag)
        http_client: Injected httpx.Client for probing
        launcher: Callable starting the backend (default: launch_detached)
        clock: Monotonic clock (tests pass a fake)
        sleep: Sleep function (tests pass a fake)

    Example:
        >>> with InferenceServiceManager(settings) as manager:
        ...     manager.ensure_running(spawn_if_needed=True)
        ...     # generate ...
    """

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.Client] = None,
        launcher: Launcher = launch_detached,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings
        self.base_url = settings.base_url
        self.state = ServiceState.UNKNOWN
        self.handle: Optional[ServiceHandle] = None
        self._launcher = launcher
        self._clock = clock
        self._sleep = sleep
        self._result: Optional[EnsureResult] = None
        self._lock = threading.Lock()
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client()

    def probe(self) -> bool:
        """
        Single bounded GET to the base URL.

        Any status below 500 counts as reachable; connection errors and
        timeouts count as unreachable.
        """
        try:
            response = self._http.get(self.base_url, timeout=self.settings.probe_timeout_s)
        except httpx.HTTPError as e:
            _log_debug(f"Probe {self.base_url} failed: {type(e).__name__}")
            return False
        return response.status_code < 500

    def ensure_running(self, spawn_if_needed: bool = True) -> EnsureResult:
        """
        Make sure the backend answers, starting it if allowed.

        Repeated calls after success return the first result without probing.

        Args:
            spawn_if_needed: Start the backend when the probe fails

        Returns:
            EnsureResult(started_by_us=...)

        Raises:
            BackendUnavailable: Probe failed and spawning is disallowed or the launch failed
            BackendStartTimeout: Spawned backend did not become ready in time
        """
        with self._lock:
            if self._result is not None:
                return self._result

            if self.probe():
                self.state = ServiceState.REACHABLE
                self._result = EnsureResult(started_by_us=False)
                return self._result

            self.state = ServiceState.UNREACHABLE
            if not spawn_if_needed:
                raise BackendUnavailable(
                    self.base_url,
                    f"Start it with `{' '.join(self.settings.backend_command)}` "
                    "or run without --no-spawn.",
                )

            self._spawn()
            self._wait_until_ready()

            self.state = ServiceState.READY
            self._result = EnsureResult(started_by_us=True)
            return self._result

    def _spawn(self) -> None:
        # A previous attempt may have launched a process that is still warming up
        if self.handle is not None and self.handle.is_alive():
            _log_debug("Reusing backend process from an earlier attempt")
            self.state = ServiceState.SPAWNING
            return

        command = self.settings.backend_command
        log_path = self.settings.logs_path / BACKEND_LOG_NAME
        _log_info(f"Inference backend not detected; starting `{' '.join(command)}`...")
        self.state = ServiceState.SPAWNING
        try:
            process = self._launcher(command, log_path)
        except OSError as e:
            self.state = ServiceState.FAILED
            raise BackendUnavailable(
                self.base_url,
                f"Failed to start `{' '.join(command)}`: {e}. Is Ollama installed and on PATH?",
            ) from e
        self.handle = ServiceHandle(process=process, command=tuple(command), log_path=log_path)
        _log_debug(f"Backend process started (pid {getattr(process, 'pid', '?')}), output: {log_path}")

    def _wait_until_ready(self) -> None:
        timeout_s = self.settings.ready_timeout_s
        deadline = self._clock() + timeout_s

        while True:
            if self.probe():
                _log_success("Inference backend is ready.")
                return

            if not self.handle.is_alive():
                self.state = ServiceState.FAILED
                tail = self.handle.output_tail() or f"exit code {self.handle.process.poll()}"
                self.handle = None
                raise BackendStartTimeout(self.base_url, timeout_s, stderr_tail=tail)

            if self._clock() >= deadline:
                self.state = ServiceState.FAILED
                raise BackendStartTimeout(self.base_url, timeout_s)

            self._sleep(self.settings.poll_interval_s)

    def cleanup(self) -> None:
        """
        Stop the backend if this manager started it and teardown is requested.

        Otherwise the backend is left running for later runs. Safe to call
        repeatedly and after failures; errors are logged, never raised.
        """
        with self._lock:
            handle = self.handle
            if handle is None:
                return
            if not self.settings.stop_backend_on_exit:
                _log_debug("Leaving inference backend running for reuse")
                return

            self.handle = None
            self._result = None
            self.state = ServiceState.UNKNOWN
            try:
                if handle.is_alive():
                    handle.process.terminate()
                    try:
                        handle.process.wait(timeout=self.settings.terminate_grace_s)
                    except subprocess.TimeoutExpired:
                        handle.process.kill()
                        handle.process.wait(timeout=self.settings.terminate_grace_s)
                _log_info("Inference backend stopped (COVER_LETTER_STOP_OLLAMA=1).")
            except Exception as e:
                _log_warning(f"Failed to stop inference backend: {e}")

    def close(self) -> None:
        self.cleanup()
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "InferenceServiceManager":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
