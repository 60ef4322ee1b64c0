"""
Shell command runner — execute an external command and capture its output.

This is the SINGLE PLACE where brewdeck spawns processes.  Commands are
always passed as an argv list (never through a shell), stdout and stderr
are drained together with ``selectors`` so neither pipe can fill up and
stall the child, and an optional sink sees every chunk as it arrives.
"""

from __future__ import annotations

import codecs
import logging
import os
import selectors
import shutil
import subprocess
import time

from brewdeck.adapters.base import CommandRunner, OutputSink
from brewdeck.core.errors import (
    ExternalCommandFailed,
    ExternalCommandUnavailable,
    OutputLimitExceeded,
)
from brewdeck.core.models.command import CommandResult, ExternalCommand

logger = logging.getLogger(__name__)

DEFAULT_MAX_OUTPUT_BYTES = 1024 * 5000
_CHUNK_SIZE = 4096

# brew prints colours and hints when it thinks it's talking to a human
_DEFAULT_ENV = {
    "LC_ALL": "C.UTF-8",
    "LANG": "C.UTF-8",
    "HOMEBREW_NO_COLOR": "1",
    "HOMEBREW_NO_ENV_HINTS": "1",
}


class ShellCommandRunner(CommandRunner):
    """Run commands as child processes.

    Args:
        max_output_bytes: Cap on combined stdout+stderr bytes. Going past
            it kills the child and raises ``OutputLimitExceeded``.
        env_overrides: Extra environment variables for every child.
    """

    def __init__(
        self,
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
        env_overrides: dict[str, str] | None = None,
    ) -> None:
        self._max_output_bytes = max_output_bytes
        self._env_overrides = dict(env_overrides or {})

    @property
    def name(self) -> str:
        return "shell"

    @property
    def max_output_bytes(self) -> int:
        return self._max_output_bytes

    def is_available(self, executable: str) -> bool:
        return shutil.which(executable) is not None

    def run(
        self,
        command: ExternalCommand,
        *,
        sink: OutputSink | None = None,
    ) -> CommandResult:
        logger.debug("Executing: %s", command.display)
        start = time.monotonic()

        try:
            proc = subprocess.Popen(
                command.argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self._build_env(),
            )
        except OSError as e:
            logger.warning("Cannot start %s: %s", command.display, e)
            raise ExternalCommandUnavailable(command.display, e.strerror or str(e)) from e

        with proc:
            stdout, stderr = self._collect(proc, command, sink)
            exit_code = proc.wait()

        elapsed_ms = int((time.monotonic() - start) * 1000)

        if exit_code != 0:
            logger.warning(
                "Command failed (exit %d, %dms): %s", exit_code, elapsed_ms, command.display,
            )
            raise ExternalCommandFailed(
                command.display,
                exit_code,
                stdout=stdout.strip(),
                stderr=stderr.strip(),
            )

        logger.debug("Command ok (%dms): %s", elapsed_ms, command.display)
        return CommandResult(
            command=command.display,
            stdout=stdout.strip(),
            stderr=stderr.strip(),
            exit_code=exit_code,
            duration_ms=elapsed_ms,
        )

    # ── Internals ────────────────────────────────────────────────

    def _build_env(self) -> dict[str, str]:
        env = os.environ.copy()
        for key, value in _DEFAULT_ENV.items():
            env.setdefault(key, value)
        env.update(self._env_overrides)
        return env

    def _collect(
        self,
        proc: subprocess.Popen,
        command: ExternalCommand,
        sink: OutputSink | None,
    ) -> tuple[str, str]:
        """Drain both pipes until EOF, enforcing the output cap."""
        buffers: dict[str, list[str]] = {"stdout": [], "stderr": []}
        decoders = {
            name: codecs.getincrementaldecoder("utf-8")(errors="replace")
            for name in buffers
        }
        total = 0

        def _emit(stream_name: str, text: str) -> None:
            if not text:
                return
            buffers[stream_name].append(text)
            if sink is not None:
                sink(stream_name, text)

        with selectors.DefaultSelector() as sel:
            sel.register(proc.stdout, selectors.EVENT_READ, "stdout")
            sel.register(proc.stderr, selectors.EVENT_READ, "stderr")

            while sel.get_map():
                for key, _ in sel.select():
                    stream_name = key.data
                    data = os.read(key.fd, _CHUNK_SIZE)
                    if not data:
                        sel.unregister(key.fileobj)
                        _emit(stream_name, decoders[stream_name].decode(b"", final=True))
                        continue

                    total += len(data)
                    _emit(stream_name, decoders[stream_name].decode(data))

                    if total > self._max_output_bytes:
                        proc.kill()
                        exit_code = proc.wait()
                        logger.error(
                            "Output limit (%d bytes) exceeded, killed: %s",
                            self._max_output_bytes,
                            command.display,
                        )
                        raise OutputLimitExceeded(
                            command.display,
                            self._max_output_bytes,
                            stdout="".join(buffers["stdout"]).strip(),
                            stderr="".join(buffers["stderr"]).strip(),
                            exit_code=exit_code,
                        )

        return "".join(buffers["stdout"]), "".join(buffers["stderr"])
