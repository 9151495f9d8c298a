"""Error values with captured stacks, aggregation and concurrent helpers."""

from __future__ import annotations

import json
import queue
import re
import threading
import traceback
from collections.abc import Callable, Iterable, Iterator
from typing import Any


class KindError(Exception):
    """An error with an optional message, an optional cause and a stack trace."""

    def __init__(
        self,
        message: str | None = None,
        cause: BaseException | None = None,
        *,
        capture_stack: bool = True,
    ) -> None:
        super().__init__()
        self.message = message
        self.cause = cause
        self.stack: traceback.StackSummary | None = None
        if capture_stack:
            stack = traceback.extract_stack()
            while stack and stack[-1].filename == __file__:
                stack.pop()
            self.stack = stack
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message or ""
        if self.message is None:
            return str(self.cause)
        return f"{self.message}: {self.cause}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class Aggregate(Exception):
    """Several errors reported together."""

    def __init__(self, errors: Iterable[BaseException]) -> None:
        super().__init__()
        self.errors = list(errors)

    def _visit(self) -> Iterator[BaseException]:
        for err in self.errors:
            if isinstance(err, Aggregate):
                yield from err._visit()
            else:
                yield err

    def __str__(self) -> str:
        if not self.errors:
            return ""
        if len(self.errors) == 1:
            return str(self.errors[0])
        seen: list[str] = []
        for err in self._visit():
            msg = str(err)
            if msg not in seen:
                seen.append(msg)
        if len(seen) == 1:
            return seen[0]
        return "[" + ", ".join(seen) + "]"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.errors!r})"


# --- Go-style message formatting -------------------------------------------

_VERB_RE = re.compile(r"%([-+# 0]*)(\d*)(?:\.(\d+))?([a-zA-Z%])")


def _gostr(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_gostr(v) for v in value) + "]"
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        return "map[" + " ".join(f"{_gostr(k)}:{_gostr(v)}" for k, v in items) + "]"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _goquote(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_goquote(v) for v in value) + "]"
    return json.dumps(_gostr(value), ensure_ascii=False)


def _pad(text: str, flags: str, width: str) -> str:
    if not width:
        return text
    size = int(width)
    return text.ljust(size) if "-" in flags else text.rjust(size)


def _bad_verb(verb: str, arg: Any) -> str:
    return f"%!{verb}({type(arg).__name__}={_gostr(arg)})"


def _format_one(arg: Any, flags: str, width: str, prec: str | None, verb: str) -> str:
    if verb in ("v", "s"):
        text = _gostr(arg)
        if prec is not None and verb == "s":
            text = text[: int(prec)]
        return _pad(text, flags, width)
    if verb == "q":
        return _pad(_goquote(arg), flags, width)
    if verb == "t":
        if isinstance(arg, bool):
            return _pad(_gostr(arg), flags, width)
        return _bad_verb(verb, arg)
    if verb in ("x", "X") and isinstance(arg, (str, bytes, bytearray)):
        raw = arg.encode() if isinstance(arg, str) else bytes(arg)
        text = raw.hex()
        return _pad(text.upper() if verb == "X" else text, flags, width)
    if verb == "b":
        if isinstance(arg, int) and not isinstance(arg, bool):
            return _pad(format(arg, "b"), flags, width)
        return _bad_verb(verb, arg)
    if verb in "dcoxXeEfFgG":
        if verb in "dcoxX" and (isinstance(arg, bool) or not isinstance(arg, int)):
            return _bad_verb(verb, arg)
        spec = "%" + flags + width + (f".{prec}" if prec is not None else "") + verb
        try:
            return spec % arg
        except (TypeError, ValueError, OverflowError):
            return _bad_verb(verb, arg)
    return _bad_verb(verb, arg)


def _sprintf(fmt: str, *args: Any) -> str:
    """Format ``fmt`` with printf-style verbs (%v %s %q %d %t %x ...)."""
    remaining = iter(args)
    missing = object()

    def replace(match: re.Match[str]) -> str:
        flags, width, prec, verb = match.groups()
        if verb == "%":
            return "%"
        arg = next(remaining, missing)
        if arg is missing:
            return f"%!{verb}(MISSING)"
        return _format_one(arg, flags, width, prec, verb)

    out = _VERB_RE.sub(replace, fmt)
    extra = list(remaining)
    if extra:
        out += "%!(EXTRA " + ", ".join(f"{type(a).__name__}={_gostr(a)}" for a in extra) + ")"
    return out


# --- constructors -----------------------------------------------------------


def new(message: str) -> KindError:
    """Return an error with ``message`` and the current stack."""
    return KindError(message)


def new_without_stack(message: str) -> KindError:
    """Return an error with ``message`` but no stack trace."""
    return KindError(message, capture_stack=False)


def errorf(format: str, *args: Any) -> KindError:
    """Return an error with a formatted message and the current stack."""
    return KindError(_sprintf(format, *args))


def wrap(err: BaseException | None, message: str) -> KindError | None:
    """Annotate ``err`` with ``message`` and a stack; None stays None."""
    if err is None:
        return None
    return KindError(message, err)


def wrapf(err: BaseException | None, format: str, *args: Any) -> KindError | None:
    """Annotate ``err`` with a formatted message and a stack; None stays None."""
    if err is None:
        return None
    return KindError(_sprintf(format, *args), err)


def with_stack(err: BaseException | None) -> KindError | None:
    """Annotate ``err`` with the current stack; None stays None."""
    if err is None:
        return None
    return KindError(None, err)


def _cause_chain(err: Any) -> Iterator[Any]:
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        err = getattr(err, "cause", None)


def stack_trace(err: BaseException | None) -> traceback.StackSummary | None:
    """Return the deepest stack trace found in the cause chain of ``err``."""
    found = None
    for item in _cause_chain(err):
        stack = getattr(item, "stack", None)
        if stack is not None:
            found = stack
    return found


# --- aggregates -------------------------------------------------------------


def _flatten(errs: Iterable[BaseException]) -> Iterator[BaseException]:
    for err in errs:
        if isinstance(err, Aggregate):
            yield from _flatten(err.errors)
        else:
            yield err


def new_aggregate(errlist: Iterable[BaseException | None]) -> KindError | None:
    """Combine errors into one, flattened and reduced, with a stack trace."""
    errs = [e for e in errlist if e is not None]
    flat = list(_flatten(errs))
    if not flat:
        return None
    if len(flat) == 1:
        return with_stack(flat[0])
    return with_stack(Aggregate(flat))


def aggregate_errors(err: BaseException | None) -> list[BaseException] | None:
    """Return the errors of the deepest Aggregate in the cause chain, or None."""
    found: Aggregate | None = None
    for item in _cause_chain(err):
        if isinstance(item, Aggregate):
            found = item
    return list(found.errors) if found is not None else None


# --- concurrency ------------------------------------------------------------


def _start(funcs: list[Callable[[], Any]], results: queue.Queue) -> list[threading.Thread]:
    def runner(func: Callable[[], Any]) -> None:
        try:
            func()
        except Exception as exc:  # noqa: BLE001 - reported to the caller
            results.put(exc)
        else:
            results.put(None)

    threads = [threading.Thread(target=runner, args=(f,), daemon=True) for f in funcs]
    for thread in threads:
        thread.start()
    return threads


def until_error_concurrent(funcs: Iterable[Callable[[], Any]]) -> None:
    """Run ``funcs`` concurrently and raise the first exception any of them raises.

    Returns as soon as an exception arrives, without waiting for the rest.
    """
    funcs = list(funcs)
    results: queue.Queue = queue.Queue()
    _start(funcs, results)
    for _ in funcs:
        err = results.get()
        if err is not None:
            raise err


def aggregate_concurrent(funcs: Iterable[Callable[[], Any]]) -> None:
    """Run ``funcs`` concurrently, wait for all, and raise what they raised.

    A single failure is raised as is; several are raised as one aggregate.
    """
    funcs = list(funcs)
    results: queue.Queue = queue.Queue()
    for thread in _start(funcs, results):
        thread.join()
    errs = [e for e in (results.get() for _ in funcs) if e is not None]
    if len(errs) > 1:
        raise new_aggregate(errs)  # type: ignore[misc]
    if errs:
        raise errs[0]