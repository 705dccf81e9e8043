"""Optional hook that runs the submitted script in a batch-mode editor process.

Not part of the tool exchange itself: the server only schedules it after a
successful submission when SCENE_DESIGNER_EXECUTE_ON_SUBMIT is set.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from .config import cfg
from .scaffold import SCAFFOLD_CLASS, SCAFFOLD_ENTRY_POINT

logger = logging.getLogger(__name__)

DEFAULT_METHOD = f"{SCAFFOLD_CLASS}.{SCAFFOLD_ENTRY_POINT}"
# How long to keep reading pipes once the process is gone.
READ_GRACE_SECONDS = 5.0


@dataclass
class ExecutionResult:
    exit_code: int | None
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return not self.timed_out and self.exit_code == 0


class UnityBatchExecutor:
    """Runs `<executable> -batchmode -nographics -projectPath P -executeMethod M -quit`."""

    def __init__(self, executable: str | None = None, timeout: float | None = None):
        self.executable = executable or cfg.unity_executable
        self.timeout = timeout if timeout is not None else cfg.execution_timeout

    def build_command(self, project_path: str | Path, method: str = DEFAULT_METHOD) -> list[str]:
        return [
            self.executable,
            "-batchmode",
            "-nographics",
            "-projectPath", str(project_path),
            "-executeMethod", method,
            "-quit",
        ]

    async def run_command(self, command: list[str]) -> ExecutionResult:
        """Run `command`, capturing output. The process is killed on timeout or cancellation.

        On timeout the result carries whatever the process wrote before it was killed.
        """
        logger.info("Starting editor process: %s", " ".join(command))
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = bytearray(), bytearray()
        readers = [
            asyncio.ensure_future(self._drain(proc.stdout, stdout)),
            asyncio.ensure_future(self._drain(proc.stderr, stderr)),
        ]
        timed_out = False
        try:
            await asyncio.wait_for(proc.wait(), timeout=self.timeout)
        except asyncio.TimeoutError:
            timed_out = True
            await self._kill(proc)
            logger.warning("Editor process timed out after %.1fs", self.timeout)
        except asyncio.CancelledError:
            for reader in readers:
                reader.cancel()
            await self._kill(proc)
            raise

        # Pipes can outlive the process if it spawned children that inherited them.
        _, pending = await asyncio.wait(readers, timeout=READ_GRACE_SECONDS)
        for reader in pending:
            reader.cancel()

        result = ExecutionResult(
            exit_code=proc.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            timed_out=timed_out,
        )
        if not timed_out:
            logger.info("Editor process exited with code %s", result.exit_code)
        return result

    async def run(self, project_path: str | Path, method: str = DEFAULT_METHOD) -> ExecutionResult:
        return await self.run_command(self.build_command(project_path, method))

    @staticmethod
    async def _drain(stream: asyncio.StreamReader, buffer: bytearray) -> None:
        while True:
            chunk = await stream.read(65536)
            if not chunk:
                return
            buffer.extend(chunk)

    @staticmethod
    async def _kill(proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            await proc.wait()
