# ranacore

Shared building blocks for remote desktop services. The package uses only the
Python standard library.

## Installation

```
pip install ranacore
```

## What is inside

- `ranacore.concurrent_queue.ConcurrentQueue` is a FIFO protected by a lock. It
  never blocks. `pop`, `front` and `back` return a default value when the queue
  is empty. `len()` gives the number of items held.
- `ranacore.index_queue.IndexQueue(minimum, maximum)` is a pool of the integers
  from `minimum` to `maximum`, both included.
  - `capture()` hands out free indices in round-robin order. It raises
    `IndexQueueExhausted` when every index is taken.
  - `capture_index`, `is_captured`, `release` and `release_all` manage
    individual indices.
- `ranacore.converter` converts UTF-16 code units to UTF-8 bytes and back.
  - The converters are `utf16_to_utf8` and `utf8_to_utf16`. Each takes an
    optional `max_len`.
  - The size helpers are `utf8_size_of_utf16` and `utf16_size_of_utf8`.
  - Invalid sequences become U+FFFD instead of raising an error.
- `ranacore.timer`:
  - `Timer` measures elapsed milliseconds. It also works as a context manager.
  - `set_interval` calls a function repeatedly on a daemon thread. It returns
    an event; set the event to stop the calls.
  - `set_delay` calls a function once after a delay. It returns a cancellable
    `threading.Timer`.
- `ranacore.utils` holds general helpers:
  - shell output: `system_output`
  - strings: `trim`, `split`, `is_white_space`
  - files: `file_exists`, `write_bin_to_file`, `read_bin_from_file`
  - identity and time: `generate_uuid`, `get_mac_address` (read from
    `/sys/class/net`), `get_current_time` (UTC with nanoseconds)
  - host and environment: `sleep_milli`, `get_number_of_cores`, `set_env`,
    `get_desktop_dir`, `get_cacert_path`, `open_url`
- `ranacore.screen_dim.ScreenDim` is a 12-byte record of three little-endian
  int32 fields. Use `pack` and `unpack` to convert it.
- `ranacore.update`:
  - `Version.parse` reads `major.minor.revision` into a value that can be
    ordered.
  - `get_str_from_website` and `download_from_website` fetch remote data. Both
    raise `DownloadError` on failure.
  - `Updater` does two jobs. It compares a published version with the running
    one. It also downloads, unpacks and runs an `install.sh` release archive.
- `ranacore.elastic.ElasticSearchClient` POSTs JSON payloads. Basic
  authentication is optional. The methods return the HTTP status. Transport
  failures raise `ElasticSearchError`.
- `ranacore.structured_log.Logger` builds JSON log records. Each record carries
  a timestamp, the caller's location, the system name and the trace and uuid
  tags. When the logger has a client, it posts each record.
- `ranacore.kcontext.KContext` holds per-process identity, the resource
  directory, the screen dimensions and a `Logger`.
  - `initialize_connection` returns a `ConnectionStatus`.
  - It raises `KContextError` for an unsupported core system.
- `ranacore.scancodes.Scancode` lists the USB HID key positions.
  `scancode_to_keycode` turns a scancode into a keycode.
- `ranacore.mouse` and `ranacore.keyboard` contain:
  - the input event records `MouseEvent` and `KeyboardEvent`, each with its
    packed wire format
  - the translation of those events onto a backend you supply, which subclasses
    `MouseBackend` or `KeyBackend`

## Example

```python
from ranacore.index_queue import IndexQueue
from ranacore.converter import utf8_to_utf16

pool = IndexQueue(4460, 4463)
port = pool.capture()
pool.release(port)

units = utf8_to_utf16("héllo".encode())
```

## What this package does not do

- It has no command-line program and no server.
- It does not convert between colour spaces (BGRA and YUV frames).
- It ships no concrete display backend. `MouseBackend` and `KeyBackend` are
  abstract, and you must write an implementation that injects input into a real
  display.

## Running the tests

```
pip install -e .[test]
pytest
```