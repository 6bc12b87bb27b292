"""General helpers: shell output, string handling, files, time and host details."""

from __future__ import annotations

import os
import re
import subprocess
import sys
import time
import uuid
from pathlib import Path
from typing import List

OCTETS_IN_MAC_ADDRESS = 6
MAC_ADDRESS_RETRY = 5
MAC_ADDRESS_RETRY_SLEEP = 1000  # milliseconds
MAC_ADDRESS_UNKNOWN = "FATAL"
SYS_CLASS_NET = Path("/sys/class/net")
DEFAULT_CORE_COUNT = 8

_IFF_LOOPBACK = 0x8
_IFF_RUNNING = 0x40
_C_WHITESPACE = " \t\n\v\f\r"
_OCTET = re.compile(r"[0-9a-f]{2}")


def system_output(cmd: str) -> str:
    """Run ``cmd`` through the shell and return its stdout and stderr combined."""
    completed = subprocess.run(
        cmd, shell=True, stdout=subprocess.PIPE, stderr=subprocess.STDOUT
    )
    return completed.stdout.decode("utf-8", errors="replace")


def trim(text: str) -> str:
    """Strip leading and trailing whitespace."""
    return text.strip(_C_WHITESPACE)


def split(text: str, delim: str) -> List[str]:
    """Split ``text`` on ``delim``, dropping empty tokens."""
    if not delim:
        raise ValueError("delimiter must not be empty")
    return [token for token in text.split(delim) if token]


def file_exists(path: str | os.PathLike) -> bool:
    """Return True if ``path`` names an existing file system entry."""
    try:
        os.stat(path)
    except OSError:
        return False
    return True


def generate_uuid() -> str:
    """Return a new random UUID in its canonical 36-character form."""
    return str(uuid.uuid4())


def _mac_from_text(address: str) -> str | None:
    parts = address.strip().lower().split(":")
    if len(parts) < OCTETS_IN_MAC_ADDRESS:
        return None
    octets = parts[:OCTETS_IN_MAC_ADDRESS]
    if not all(_OCTET.fullmatch(octet) for octet in octets):
        return None
    return ":".join(octets)


def _interfaces() -> list[tuple[int, str]]:
    try:
        entries = sorted(Path(SYS_CLASS_NET).iterdir())
    except OSError:
        return []
    found = []
    for entry in entries:
        try:
            flags = int((entry / "flags").read_text().strip(), 16)
            address = (entry / "address").read_text()
        except (OSError, ValueError):
            continue
        found.append((flags, address))
    return found


def get_mac_address() -> str:
    """Return the hardware address of the first usable network interface.

    Running, non-loopback interfaces are preferred; on the final attempt any
    non-loopback interface is accepted. Returns ``"FATAL"`` when none is found.
    """
    retry = MAC_ADDRESS_RETRY
    while retry > 0:
        for flags, address in _interfaces():
            if flags & _IFF_LOOPBACK:
                continue
            if flags & _IFF_RUNNING or retry <= 1:
                mac = _mac_from_text(address)
                if mac is not None:
                    return mac
        retry -= 1
        if retry > 0:
            time.sleep(MAC_ADDRESS_RETRY_SLEEP / 1000.0)
    return MAC_ADDRESS_UNKNOWN


def get_current_time() -> str:
    """Return the current UTC time as ``YYYY-MM-DDTHH:MM:SS.nnnnnnnnnZ``."""
    seconds, nanos = divmod(time.time_ns(), 1_000_000_000)
    stamp = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(seconds))
    return f"{stamp}.{nanos:09d}Z"


def sleep_milli(milli: float) -> None:
    """Sleep for ``milli`` milliseconds."""
    time.sleep(milli / 1000.0)


def write_bin_to_file(path: str | os.PathLike, data: bytes) -> None:
    """Write ``data`` to ``path``, replacing any existing content."""
    with open(path, "wb") as handle:
        handle.write(data)


def read_bin_from_file(path: str | os.PathLike, size: int) -> bytes:
    """Read at most ``size`` bytes from the start of ``path``."""
    with open(path, "rb") as handle:
        return handle.read(size)


def is_white_space(text: str) -> bool:
    """Return True if ``text`` consists only of whitespace (or is empty)."""
    return all(char in _C_WHITESPACE for char in text)


def get_number_of_cores() -> int:
    """Return the number of processors, or 8 when it cannot be determined."""
    return os.cpu_count() or DEFAULT_CORE_COUNT


def set_env(name: str, value: str, overwrite: bool = True) -> None:
    """Set an environment variable, keeping an existing value unless ``overwrite``."""
    if not overwrite and name in os.environ:
        return
    os.environ[name] = value


def get_desktop_dir() -> str:
    """Return the path of the user's desktop directory."""
    if sys.platform == "win32":
        return str(Path.home() / "Desktop")
    return os.environ["HOME"] + "/Desktop"


def get_cacert_path() -> str:
    """Return the path of the bundled CA certificate file."""
    if sys.platform == "win32":
        return "./res/resources/cacert.pem"
    return "resources/cacert.pem"


def open_url(url: str) -> int:
    """Open ``url`` with the desktop's default handler; return the exit status."""
    if sys.platform == "win32":
        command = ["cmd", "/c", "start", "", url]
    elif sys.platform == "darwin":
        command = ["open", url]
    else:
        command = ["xdg-open", url]
    return subprocess.run(command).returncode