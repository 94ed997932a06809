"""Child-process execution for assembled argument lists.

One `run()` call spawns exactly one child, waits for it (racing the
optional timeout) and returns a complete `CommandOutput` or raises one of
the `dockwrap.errors` kinds. `run_streaming()` does the same while handing
each output line to a callback as it arrives.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import shlex
import signal
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Literal, TypeVar

from ..errors import CommandFailed, CommandTimeout, InvalidConfiguration, SpawnFailed
from ..logging import log_event
from .environment import InvocationEnvironment
from .output import SIGNAL_EXIT_CODE, CommandOutput, OutputLine

_POSIX = os.name == "posix"

# Upper bound for one streamed line; docker build progress lines stay far below it.
STREAM_LINE_LIMIT = 16 * 1024 * 1024
# Time allowed for the pipes to reach EOF once the process group is dead.
DRAIN_SECONDS = 1.0

LineHandler = Callable[[OutputLine], None]
R = TypeVar("R")


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


def _exit_code(returncode: int | None) -> int:
    if returncode is None or returncode < 0:
        return SIGNAL_EXIT_CODE
    return returncode


def _kill(proc: asyncio.subprocess.Process) -> None:
    if _POSIX:
        # the group outlives its leader while descendants still hold the pipes
        with contextlib.suppress(ProcessLookupError):
            os.killpg(proc.pid, signal.SIGKILL)
        return
    if proc.returncode is None:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    _kill(proc)
    await proc.wait()
    readers = [stream.read() for stream in (proc.stdout, proc.stderr) if stream is not None]
    try:
        await asyncio.wait_for(asyncio.gather(*readers), DRAIN_SECONDS)
    except asyncio.TimeoutError:
        # a process that left the group still holds a pipe; its output is discarded anyway
        return


async def _pump(stream: asyncio.StreamReader | None, name: Literal["stdout", "stderr"], on_line: LineHandler, sink: list[str]) -> None:
    if stream is None:
        return
    while True:
        raw = await stream.readline()
        if not raw:
            return
        text = _decode(raw)
        sink.append(text)
        on_line(OutputLine(stream=name, text=text.rstrip("\r\n")))


class Executor:
    def __init__(self, environment: InvocationEnvironment | None = None) -> None:
        if environment is None:
            from .environment import default_environment

            environment = default_environment()
        self.environment = environment

    def build_argv(self, subcommand: str, args: Sequence[str] = ()) -> list[str]:
        if not subcommand:
            raise InvalidConfiguration("subcommand name must not be empty")
        argv = [self.environment.binary, subcommand, *(str(a) for a in args)]
        for value in argv:
            if "\x00" in value:
                raise InvalidConfiguration(f"argument contains a NUL byte: {value!r}")
        return argv

    def _log(self, level: str, action: str, **fields: object) -> None:
        env = self.environment
        if env.log_events:
            log_event(level, "executor", action, env.run_id, json_output=env.log_json, **fields)

    async def _spawn(self, argv: list[str], command: str) -> asyncio.subprocess.Process:
        env = self.environment
        self._log("debug", "spawn", command=command, timeout_seconds=env.timeout_seconds)
        try:
            return await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env.child_env(),
                cwd=env.cwd,
                start_new_session=_POSIX,
                limit=STREAM_LINE_LIMIT,
            )
        except OSError as exc:
            self._log("error", "spawn-failed", command=command, reason=str(exc))
            raise SpawnFailed(env.binary, exc) from exc

    async def _race(self, proc: asyncio.subprocess.Process, pending: Awaitable[R], command: str) -> R:
        timeout = self.environment.timeout_seconds
        try:
            if timeout is None:
                return await pending
            return await asyncio.wait_for(pending, timeout)
        except asyncio.TimeoutError:
            await _terminate(proc)
            self._log("warn", "timeout", command=command, timeout_seconds=timeout)
            raise CommandTimeout(timeout, command) from None
        except (asyncio.CancelledError, Exception):
            # cancelled by the caller or a failing line handler
            await asyncio.shield(_terminate(proc))
            raise
        except BaseException:
            _kill(proc)
            raise

    def _finish(self, argv: list[str], command: str, stdout: str, stderr: str, returncode: int | None, started: float) -> CommandOutput:
        output = CommandOutput(
            stdout=stdout,
            stderr=stderr,
            exit_code=_exit_code(returncode),
            argv=tuple(argv),
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        if not output.success:
            self._log("info", "command-failed", command=command, code=output.exit_code, duration_ms=output.duration_ms)
            raise CommandFailed(command, output.exit_code, output.stdout, output.stderr)
        self._log("debug", "complete", command=command, code=output.exit_code, duration_ms=output.duration_ms)
        return output

    async def run(self, subcommand: str, args: Sequence[str] = ()) -> CommandOutput:
        argv = self.build_argv(subcommand, args)
        command = shlex.join(argv)
        started = time.monotonic()
        proc = await self._spawn(argv, command)
        raw_stdout, raw_stderr = await self._race(proc, proc.communicate(), command)
        return self._finish(argv, command, _decode(raw_stdout), _decode(raw_stderr), proc.returncode, started)

    async def run_streaming(self, subcommand: str, args: Sequence[str], on_line: LineHandler) -> CommandOutput:
        """Like `run`, but `on_line` sees every stdout/stderr line as it is read.

        Lines keep their order within one stream; the interleaving of the two
        streams follows arrival. The returned (or raised) output still holds
        the complete text of both streams.
        """
        argv = self.build_argv(subcommand, args)
        command = shlex.join(argv)
        started = time.monotonic()
        stdout: list[str] = []
        stderr: list[str] = []
        proc = await self._spawn(argv, command)

        async def _collect() -> int:
            pumps = [
                asyncio.ensure_future(_pump(proc.stdout, "stdout", on_line, stdout)),
                asyncio.ensure_future(_pump(proc.stderr, "stderr", on_line, stderr)),
            ]
            try:
                await asyncio.gather(*pumps)
            except BaseException:
                # a failing handler must not leave the sibling reader attached to its pipe
                for pump in pumps:
                    pump.cancel()
                await asyncio.gather(*pumps, return_exceptions=True)
                raise
            return await proc.wait()

        returncode = await self._race(proc, _collect(), command)
        return self._finish(argv, command, "".join(stdout), "".join(stderr), returncode, started)

    def run_sync(self, subcommand: str, args: Sequence[str] = ()) -> CommandOutput:
        return asyncio.run(self.run(subcommand, args))


__all__ = ["Executor", "LineHandler"]
