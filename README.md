# sclib

A handful of small utilities with no dependencies outside the standard library.

## Modules

### `sclib.sc`

Helpers for numbers and byte sizes.

- `is_pow2(num)`: `True` if `num` is a power of two. `0` is not.
- `to_pow2(size)`: the smallest power of two not less than `size`. `to_pow2(0)` is `1`. It raises `ValueError` if `size` does not fit in an unsigned 64-bit integer.
- `bytes_to_size(val)`: a byte count as text. Values below 1024 give `"313 B"`; larger values give two decimals and a unit from `KB` to `EB`, e.g. `"2.00 KB"`.
- `size_to_bytes(text)`: parses `"313"`, `"1b"`, `"4k"`, `"4kb"`, `"2GB"` and so on, with units `b`, `k`, `m`, `g`, `t`, `p` and `e` in either case, into a number of bytes. It raises `ValueError` on malformed input or when the result would not fit in a signed 64-bit integer.
- `Rand(seed)`: a deterministic RC4 byte stream. The seed must be exactly 256 bytes, otherwise `ValueError` is raised. `read(size)` returns the next `size` bytes, or `b""` when `size <= 0`.

### `sclib.option`

Matches single command-line arguments against known options.

- `OptionItem(letter, name=None)` describes an option with a one-letter short form and an optional long name.
- `option_at(options, arg)` returns `(letter, value)`:
  - `-k` and `-k=value` match by letter.
  - `--key` and `--key=value` match by name.
  - `value` is the text after `=`, or `""` if there is none.
  - An argument that matches no option, such as `-j`, `-sx` or `key=value`, gives `("?", None)`.

### `sclib.ringqueue`

`RingQueue(max_capacity=None)` is a double-ended queue kept in a ring buffer.

- The buffer starts with 8 slots and doubles when it is full. One slot is always left free.
- It supports `add_last`, `add_first`, `del_last`, `del_first`, `peek_first`, `peek_last`, `clear`, `empty`, `len()`, iteration, and indexing (negative indexes too).
- Removing or peeking on an empty queue raises `IndexError`.
- With `max_capacity` set, the buffer stops growing once its capacity exceeds half of that limit. An add that would need more room raises `QueueFullError` and leaves the queue unchanged.

### `sclib.signals`

- `format_safe(fmt, *args, size=4096)` is a small printf-style formatter.
  - It supports `%s`, `%d`, `%u`, `%ld`, `%lu`, `%lld`, `%llu`, `%p` and `%%`.
  - `%s` of `None` gives `"(null)"`.
  - Integers wrap to 32 bits without `l` and to 64 bits with it.
  - `%p` gives lowercase hex with a `0x` prefix.
  - The result is cut to `size - 1` characters, or to nothing when `size` is 0.
  - Any other conversion, too few arguments, or a non-integer given to an integer conversion raises `FormatError`.
- `log(fd, fmt, *args, size=4096)` formats with `format_safe` and writes the result to a file descriptor. Write errors are ignored.
- `SignalHandler(log_fd=None, shutdown_fd=None, exit_func=os._exit)` handles shutdown and fatal signals.
  - `install()` must be called from the main thread. It:
    - ignores SIGHUP and SIGPIPE where they exist;
    - routes SIGINT and SIGTERM to `on_shutdown`;
    - enables `faulthandler` on the log descriptor;
    - routes SIGABRT to `on_fatal`.
  - On the first shutdown signal, `on_shutdown` writes one byte to `shutdown_fd`, so that the application can stop cleanly.
    - If there is no `shutdown_fd`, it calls `exit_func(0)`.
    - If the write fails, it calls `exit_func(1)`.
    - A second shutdown signal calls `exit_func(1)`.
  - `on_fatal` writes a crash report with the Python stack, restores the default action and raises the signal again.
  - Messages go to `log_fd` if it is set. Otherwise shutdown messages go to stdout and crash reports go to stderr.

## Example

```python
from sclib.sc import bytes_to_size, size_to_bytes
from sclib.option import OptionItem, option_at
from sclib.ringqueue import RingQueue

assert size_to_bytes("1kb") == 1024
assert bytes_to_size(2 * 1024) == "2.00 KB"

options = [OptionItem("k", "key"), OptionItem("h", "help")]
assert option_at(options, "--key=value") == ("k", "value")
assert option_at(options, "-j") == ("?", None)

q = RingQueue()
q.add_last(2)
q.add_first(1)
assert list(q) == [1, 2]
```

## What it does not do

This is a library only.

- It installs no command-line program.
- It has no hardware performance counters.
- `sclib.option` matches one argument at a time. It does not build help text or collect positional arguments.

## Running the tests

```
pip install .[test]
pytest
```