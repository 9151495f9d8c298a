"""Running external commands with captured output and helpful errors."""

from __future__ import annotations

import codecs
import os
import shlex
import subprocess
import sys
import threading
from collections.abc import Callable
from typing import Any, BinaryIO

from kindkit.errors import KindError, aggregate_concurrent

_CHUNK = 64 * 1024


class RunError(KindError):
    """A command failed to start, exited unsuccessfully, or its output could not be written."""

    def __init__(self, command: list[str], output: bytes | bytearray, inner: BaseException | None) -> None:
        super().__init__(None, inner)
        self.command = list(command)
        self.output = bytes(output)
        self.inner = inner

    def __str__(self) -> str:
        inner = "<nil>" if self.inner is None else str(self.inner)
        return f'command "{self.pretty_command()}" failed with error: {inner}'

    def pretty_command(self) -> str:
        """Return the command quoted so it could be pasted into a shell."""
        return pretty_command(self.command[0], *self.command[1:])


class _Sink:
    """Forwards raw bytes to a binary or text writer."""

    def __init__(self, writer: Any) -> None:
        self.writer = writer
        self.decoder: codecs.IncrementalDecoder | None = None
        self.broken = False

    def write(self, chunk: bytes) -> None:
        if self.decoder is None:
            try:
                self.writer.write(chunk)
            except TypeError:
                self.decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
            else:
                self._flush()
                return
        self.writer.write(self.decoder.decode(chunk))
        self._flush()

    def _flush(self) -> None:
        flush = getattr(self.writer, "flush", None)
        if callable(flush):
            flush()


class Cmd:
    """A command to run on the local host."""

    def __init__(self, name: str, *args: str) -> None:
        self.args = [name, *args]
        self._env: list[str] | None = None
        self._stdin: Any = None
        self._stdout: Any = None
        self._stderr: Any = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({pretty_command(*self.args)!r})"

    def set_env(self, *args: str) -> Cmd:
        """Replace the environment with entries of the form "key=value".

        With no entries the current process environment is inherited.
        """
        self._env = list(args) or None
        return self

    def set_stdin(self, reader: Any) -> Cmd:
        """Read standard input from a file-like object, bytes or str."""
        self._stdin = reader
        return self

    def set_stdout(self, writer: Any) -> Cmd:
        """Copy standard output to ``writer``."""
        self._stdout = writer
        return self

    def set_stderr(self, writer: Any) -> Cmd:
        """Copy standard error to ``writer``."""
        self._stderr = writer
        return self

    def _environment(self) -> dict[str, str] | None:
        if self._env is None:
            return None
        environ: dict[str, str] = {}
        for entry in self._env:
            key, _, value = entry.partition("=")
            environ[key] = value
        return environ

    def _stdin_source(self) -> tuple[Any, Callable[[BinaryIO], None] | None]:
        source = self._stdin
        if source is None:
            return subprocess.DEVNULL, None
        if isinstance(source, str):
            source = source.encode()
        if isinstance(source, (bytes, bytearray, memoryview)):
            data = bytes(source)

            def feed_bytes(pipe: BinaryIO) -> None:
                pipe.write(data)

            return subprocess.PIPE, feed_bytes
        try:
            source.fileno()
        except (AttributeError, OSError, ValueError):
            pass
        else:
            return source, None

        def feed_reader(pipe: BinaryIO) -> None:
            for chunk in iter(lambda: source.read(_CHUNK), b""):
                if not chunk:
                    break
                pipe.write(chunk.encode() if isinstance(chunk, str) else chunk)

        return subprocess.PIPE, feed_reader

    def run(self) -> None:
        """Run the command, raising RunError if it fails.

        Standard output and standard error are also collected together and
        kept on the raised error as ``output``.
        """
        combined = bytearray()
        lock = threading.Lock()
        failures: list[BaseException] = []
        stdin_arg, feeder = self._stdin_source()
        merged = self._stdout is self._stderr
        try:
            proc = subprocess.Popen(
                self.args,
                stdin=stdin_arg,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merged else subprocess.PIPE,
                env=self._environment(),
            )
        except OSError as exc:
            raise RunError(self.args, combined, exc)

        def pump(pipe: BinaryIO, sink: _Sink | None) -> None:
            with pipe:
                for chunk in iter(lambda: pipe.read1(_CHUNK), b""):
                    with lock:
                        combined.extend(chunk)
                        if sink is None or sink.broken:
                            continue
                        try:
                            sink.write(chunk)
                        except (OSError, ValueError) as exc:
                            sink.broken = True
                            failures.append(exc)

        def feed(pipe: BinaryIO, writer: Callable[[BinaryIO], None]) -> None:
            try:
                writer(pipe)
            except BrokenPipeError:
                pass
            except (OSError, ValueError) as exc:
                with lock:
                    failures.append(exc)
            finally:
                try:
                    pipe.close()
                except BrokenPipeError:
                    pass

        workers = [
            threading.Thread(
                target=pump,
                args=(proc.stdout, _Sink(self._stdout) if self._stdout is not None else None),
                daemon=True,
            )
        ]
        if not merged:
            workers.append(
                threading.Thread(
                    target=pump,
                    args=(proc.stderr, _Sink(self._stderr) if self._stderr is not None else None),
                    daemon=True,
                )
            )
        if feeder is not None:
            workers.append(threading.Thread(target=feed, args=(proc.stdin, feeder), daemon=True))
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()
        returncode = proc.wait()

        if returncode != 0:
            raise RunError(self.args, combined, subprocess.CalledProcessError(returncode, self.args))
        if failures:
            raise RunError(self.args, combined, failures[0])


class LocalCmder:
    """Creates commands that run on the local host."""

    def command(self, name: str, *args: str) -> Cmd:
        return Cmd(name, *args)


DEFAULT_CMDER = LocalCmder()


def command(name: str, *args: str) -> Cmd:
    """Create a command with the default cmder."""
    return DEFAULT_CMDER.command(name, *args)


def pretty_command(name: str, *args: str) -> str:
    """Return the command quoted so it could be pasted into a shell."""
    return " ".join(shlex.quote(part) for part in (name, *args))


def run_error_for_error(err: BaseException | None) -> RunError | None:
    """Return the deepest RunError in the cause chain of ``err``, if any."""
    found: RunError | None = None
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        if isinstance(err, RunError):
            found = err
        err = getattr(err, "cause", None)
    return found


def _split_lines(data: bytes) -> list[str]:
    if not data:
        return []
    lines = data.split(b"\n")
    if lines[-1] == b"":
        lines.pop()
    return [
        (line[:-1] if line.endswith(b"\r") else line).decode("utf-8", errors="replace")
        for line in lines
    ]


def output(cmd: Cmd) -> bytes:
    """Run ``cmd`` and return its standard output."""
    buffer = bytearray()

    class _Collect:
        def write(self, chunk: bytes) -> int:
            buffer.extend(chunk)
            return len(chunk)

    cmd.set_stdout(_Collect())
    cmd.run()
    return bytes(buffer)


def output_lines(cmd: Cmd) -> list[str]:
    """Run ``cmd`` and return its standard output split into lines."""
    return _split_lines(output(cmd))


def combined_output_lines(cmd: Cmd) -> list[str]:
    """Run ``cmd`` and return its standard output and error split into lines."""
    buffer = bytearray()

    class _Collect:
        def write(self, chunk: bytes) -> int:
            buffer.extend(chunk)
            return len(chunk)

    sink = _Collect()
    cmd.set_stdout(sink)
    cmd.set_stderr(sink)
    cmd.run()
    return _split_lines(bytes(buffer))


def inherit_output(cmd: Cmd) -> Cmd:
    """Send ``cmd``'s output to this process's standard output and error."""
    cmd.set_stderr(sys.stderr)
    cmd.set_stdout(sys.stdout)
    return cmd


def run_with_stdout_reader(cmd: Cmd, reader_func: Callable[[BinaryIO], Any]) -> None:
    """Run ``cmd`` with its standard output piped to ``reader_func``."""
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "rb")
    writer = os.fdopen(write_fd, "wb", buffering=0)
    cmd.set_stdout(writer)

    def read_side() -> None:
        with reader:
            reader_func(reader)

    def run_side() -> None:
        with writer:
            cmd.run()

    aggregate_concurrent([read_side, run_side])


def run_with_stdin_writer(cmd: Cmd, writer_func: Callable[[BinaryIO], Any]) -> None:
    """Run ``cmd`` with ``writer_func``'s output piped to its standard input."""
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "rb")
    writer = os.fdopen(write_fd, "wb")
    cmd.set_stdin(reader)

    def write_side() -> None:
        with writer:
            writer_func(writer)

    def run_side() -> None:
        with reader:
            cmd.run()

    aggregate_concurrent([write_side, run_side])