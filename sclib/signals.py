"""Shutdown and crash signal handling with a minimal, self-contained formatter."""

from __future__ import annotations

import faulthandler
import operator
import os
import re
import signal
import traceback
from collections.abc import Callable
from types import FrameType
from typing import Any

__all__ = ["FormatError", "SignalHandler", "format_safe", "log"]

DEFAULT_SIZE = 4096

_SPEC_PATTERN = re.compile(
    r"%(?P<spec>%|s|p|(?P<length>l{0,2})(?P<conv>[du]))|(?P<text>[^%]+)"
)

_HEX_DIGITS = "0123456789abcdef"

_SHUTDOWN_NAMES = {
    signal.SIGINT: "SIGINT",
    signal.SIGTERM: "SIGTERM",
}

_FATAL_NAMES = {
    getattr(signal, name): name
    for name in ("SIGSEGV", "SIGABRT", "SIGBUS", "SIGFPE", "SIGILL")
    if hasattr(signal, name)
}


class FormatError(ValueError):
    """Raised for an unsupported conversion or a missing or unusable argument."""


def _next_arg(args: Any) -> Any:
    try:
        return next(args)
    except StopIteration:
        raise FormatError("not enough arguments for format string") from None


def _as_int(value: Any) -> int:
    try:
        return operator.index(value)
    except TypeError:
        raise FormatError(f"integer argument expected, got {type(value).__name__}") from None


def _to_hex(value: int) -> str:
    digits = []
    while True:
        value, rem = divmod(value, 16)
        digits.append(_HEX_DIGITS[rem])
        if value == 0:
            break
    return "0x" + "".join(reversed(digits))


def _convert(match: re.Match[str], args: Any) -> str:
    spec = match.group("spec")
    if spec == "%":
        return "%"
    if spec == "s":
        value = _next_arg(args)
        return "(null)" if value is None else str(value)
    if spec == "p":
        return _to_hex(_as_int(_next_arg(args)) & ((1 << 64) - 1))

    bits = 32 if match.group("length") == "" else 64
    value = _as_int(_next_arg(args)) & ((1 << bits) - 1)
    if match.group("conv") == "d" and value >= 1 << (bits - 1):
        value -= 1 << bits
    return str(value)


def format_safe(fmt: str, *args: Any, size: int = DEFAULT_SIZE) -> str:
    """Format ``fmt`` supporting only %s, %d, %u, %ld, %lu, %lld, %llu, %p and %%.

    The result holds at most ``size - 1`` characters (nothing when ``size`` is
    0). An unsupported conversion raises :class:`FormatError`.
    """
    if size < 0:
        raise ValueError("size must not be negative")

    remaining = iter(args)
    parts = []
    pos = 0
    while pos < len(fmt):
        match = _SPEC_PATTERN.match(fmt, pos)
        if match is None:
            raise FormatError(f"unsupported conversion at position {pos} in {fmt!r}")
        text = match.group("text")
        parts.append(text if text is not None else _convert(match, remaining))
        pos = match.end()

    capacity = size - 1 if size > 0 else 0
    return "".join(parts)[:capacity]


def log(fd: int, fmt: str, *args: Any, size: int = DEFAULT_SIZE) -> None:
    """Format with :func:`format_safe` and write the result to ``fd``.

    Write failures are ignored, as they would be in a signal handler.
    """
    text = format_safe(fmt, *args, size=size)
    try:
        os.write(fd, text.encode("utf-8", errors="replace"))
    except OSError:
        pass


class SignalHandler:
    """Handles shutdown signals and reports fatal ones.

    On the first shutdown signal (SIGINT, SIGTERM) one byte is written to
    ``shutdown_fd`` so that the application can shut down in an orderly way;
    without a shutdown fd the process exits at once. A second shutdown signal
    forces an immediate exit.
    """

    def __init__(
        self,
        log_fd: int | None = None,
        shutdown_fd: int | None = None,
        exit_func: Callable[[int], Any] = os._exit,
    ) -> None:
        self.log_fd = log_fd
        self.shutdown_fd = shutdown_fd
        self.exit_func = exit_func
        self.will_shutdown = False

    def install(self) -> None:
        """Hook shutdown signals and fatal signals; must run in the main thread."""
        for name in ("SIGHUP", "SIGPIPE"):
            signum = getattr(signal, name, None)
            if signum is not None:
                signal.signal(signum, signal.SIG_IGN)

        signal.signal(signal.SIGTERM, self.on_shutdown)
        signal.signal(signal.SIGINT, self.on_shutdown)

        # Faults in native code cannot return to Python; let faulthandler
        # dump the stacks for those, and handle abort requests ourselves.
        faulthandler.enable(file=self._fatal_fd, all_threads=True)
        signal.signal(signal.SIGABRT, self.on_fatal)

    @property
    def _shutdown_log_fd(self) -> int:
        return self.log_fd if self.log_fd is not None else 1

    @property
    def _fatal_fd(self) -> int:
        return self.log_fd if self.log_fd is not None else 2

    def on_shutdown(self, signum: int, frame: FrameType | None) -> None:
        """React to a shutdown signal."""
        fd = self._shutdown_log_fd
        name = _SHUTDOWN_NAMES.get(signum, "Shutdown signal")

        log(fd, "Recv : %s, (%d) \n", name, int(signum))

        if self.will_shutdown:
            log(fd, "Forcing shut down! \n")
            self.exit_func(1)
            return

        self.will_shutdown = True

        if self.shutdown_fd is None:
            log(fd, "No shutdown handler, shutting down! \n")
            self.exit_func(0)
            return

        log(fd, "Sending shutdown command. \n")
        try:
            written = os.write(self.shutdown_fd, b"\x01")
        except OSError:
            written = 0
        if written != 1:
            log(fd, "Failed to send shutdown command, shutting down immediately! \n")
            self.exit_func(1)

    def on_fatal(self, signum: int, frame: FrameType | None) -> None:
        """Write a crash report, restore the default action and re-raise."""
        fd = self._fatal_fd
        name = _FATAL_NAMES.get(signum, "unknown signal")

        log(fd, "\nSignal : [%d][%s] \n", int(signum), name)
        log(fd, "\n----------------- CRASH REPORT ---------------- \n")

        if frame is not None:
            log(fd, "\n Caller [%s] \n\n", frame.f_code.co_name)
            for entry in traceback.format_stack(frame):
                log(fd, "%s", entry, size=len(entry) + 1)

        log(fd, "\n--------------- CRASH REPORT END -------------- \n")
        log(fd, "\nSignal handler completed! \n")

        signal.signal(signum, signal.SIG_DFL)
        signal.raise_signal(signum)