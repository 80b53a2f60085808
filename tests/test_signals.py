import faulthandler
import os
import signal
import sys

import pytest

from sclib.signals import FormatError, SignalHandler, format_safe, log


@pytest.fixture
def pipe():
    r, w = os.pipe()
    yield r, w
    for fd in (r, w):
        try:
            os.close(fd)
        except OSError:
            pass


def _read_all(r):
    return os.read(r, 65536).decode()


@pytest.mark.parametrize(
    "fmt, args, expected",
    [
        ("%s", ("test",), "test"),
        ("%s", (None,), "(null)"),
        ("%d", (-3,), "-3"),
        ("%u", (3,), "3"),
        ("%ld", (-1000000000,), "-1000000000"),
        ("%lld", (-100000000000,), "-100000000000"),
        ("%lu", (1000000000,), "1000000000"),
        ("%llu", (100000000000,), "100000000000"),
        ("%p", (0xABCDEF,), "0xabcdef"),
        ("%%p", (0xABCDEF,), "%p"),
        ("a %s b %d c", ("x", 7), "a x b 7 c"),
    ],
)
def test_format_safe_values(fmt, args, expected):
    assert format_safe(fmt, *args, size=128) == expected


def test_format_safe_zero_size_gives_empty():
    assert format_safe("%s", "test", size=0) == ""


def test_format_safe_truncates_to_size_minus_one():
    assert format_safe("%s", "abcdef", size=4) == "abc"


def test_format_safe_unsigned_wraps_by_width():
    assert format_safe("%u", -1) == "4294967295"
    assert format_safe("%lu", -1) == "18446744073709551615"


@pytest.mark.parametrize("fmt", ["%c", "%llx", "%lx", "%", "%ls"])
def test_format_safe_unsupported(fmt):
    with pytest.raises(FormatError):
        format_safe(fmt, 3, size=128)


def test_format_safe_missing_argument():
    with pytest.raises(FormatError):
        format_safe("%d %d", 1)


def test_format_safe_non_integer_argument():
    with pytest.raises(FormatError):
        format_safe("%d", "three")


def test_log_writes_formatted_text(pipe):
    r, w = pipe
    log(w, "%s-%d", "test", 1, size=128)
    written = os.read(r, 100)
    assert written == b"test-1"
    assert written.decode() == format_safe("%s-%d", "test", 1, size=128)


def test_log_truncates_to_size(pipe):
    r, w = pipe
    log(w, "%s", "abcdef", size=4)
    written = os.read(r, 100)
    assert written == b"abc"
    assert written.decode() == format_safe("%s", "abcdef", size=4)


def test_shutdown_sends_command_then_forces(pipe):
    log_r, log_w = pipe
    cmd_r, cmd_w = os.pipe()
    exits = []
    try:
        handler = SignalHandler(log_fd=log_w, shutdown_fd=cmd_w, exit_func=exits.append)
        handler.on_shutdown(signal.SIGINT, None)
        assert exits == []
        assert os.read(cmd_r, 10) == b"\x01"
        out = _read_all(log_r)
        assert f"Recv : SIGINT, ({int(signal.SIGINT)})" in out
        assert "Sending shutdown command." in out

        handler.on_shutdown(signal.SIGINT, None)
        assert exits == [1]
        assert "Forcing shut down!" in _read_all(log_r)
    finally:
        os.close(cmd_r)
        os.close(cmd_w)


def test_shutdown_without_shutdown_fd_exits_zero(pipe):
    log_r, log_w = pipe
    exits = []
    handler = SignalHandler(log_fd=log_w, exit_func=exits.append)
    handler.on_shutdown(signal.SIGTERM, None)
    assert exits == [0]
    out = _read_all(log_r)
    assert "Recv : SIGTERM" in out
    assert "No shutdown handler, shutting down!" in out


def test_shutdown_write_failure_exits_one(pipe):
    log_r, log_w = pipe
    cmd_r, cmd_w = os.pipe()
    exits = []
    try:
        handler = SignalHandler(log_fd=log_w, shutdown_fd=cmd_r, exit_func=exits.append)
        handler.on_shutdown(signal.SIGINT, None)
        assert exits == [1]
        assert "Failed to send shutdown command" in _read_all(log_r)
    finally:
        os.close(cmd_r)
        os.close(cmd_w)


def test_shutdown_unknown_signal_name(pipe):
    log_r, log_w = pipe
    exits = []
    handler = SignalHandler(log_fd=log_w, exit_func=exits.append)
    handler.on_shutdown(signal.SIGUSR2, None)
    assert f"Recv : Shutdown signal, ({int(signal.SIGUSR2)})" in _read_all(log_r)
    assert handler.will_shutdown is True


def test_on_fatal_writes_crash_report(pipe):
    log_r, log_w = pipe
    previous = signal.getsignal(signal.SIGURG)
    try:
        handler = SignalHandler(log_fd=log_w)
        handler.on_fatal(signal.SIGURG, sys._getframe())
        out = _read_all(log_r)
    finally:
        signal.signal(signal.SIGURG, previous)
    assert f"Signal : [{int(signal.SIGURG)}][unknown signal]" in out
    assert "CRASH REPORT" in out
    assert "test_on_fatal_writes_crash_report" in out
    assert "Signal handler completed!" in out


@pytest.fixture
def saved_handlers():
    names = ("SIGINT", "SIGTERM", "SIGABRT", "SIGHUP", "SIGPIPE")
    signums = [getattr(signal, n) for n in names if hasattr(signal, n)]
    saved = {s: signal.getsignal(s) for s in signums}
    was_enabled = faulthandler.is_enabled()
    yield
    faulthandler.disable()
    if was_enabled:
        faulthandler.enable()
    for s, h in saved.items():
        signal.signal(s, h)


def test_install_registers_handlers(saved_handlers, pipe):
    _, log_w = pipe
    handler = SignalHandler(log_fd=log_w, exit_func=lambda code: None)
    handler.install()
    assert signal.getsignal(signal.SIGINT) == handler.on_shutdown
    assert signal.getsignal(signal.SIGTERM) == handler.on_shutdown
    assert signal.getsignal(signal.SIGABRT) == handler.on_fatal
    assert signal.getsignal(signal.SIGHUP) == signal.SIG_IGN
    assert faulthandler.is_enabled() is True