"""Self-update support: version comparison, downloads and install."""

from __future__ import annotations

import logging
import re
import subprocess
import tarfile
import urllib.error
import urllib.request
from dataclasses import dataclass

log = logging.getLogger(__name__)

_VERSION_PATTERN = re.compile(
    r"\s*([+-]?\d+)\.\s*([+-]?\d+)\.\s*([+-]?\d+)"
)
_CHUNK = 64 * 1024


class DownloadError(Exception):
    """Raised when a remote resource cannot be fetched."""


@dataclass(frozen=True, order=True)
class Version:
    """A ``major.minor.revision`` version number."""

    major: int
    minor: int
    revision: int

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse the leading ``major.minor.revision`` of ``text``."""
        match = _VERSION_PATTERN.match(text)
        if match is None:
            raise ValueError(f"not a version string: {text!r}")
        return cls(*(int(part) for part in match.groups()))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.revision}"


def get_str_from_website(address: str) -> str:
    """Fetch ``address`` and return the body as text."""
    try:
        with urllib.request.urlopen(address) as response:
            return response.read().decode("utf-8", errors="replace")
    except (urllib.error.URLError, OSError, ValueError) as exc:
        raise DownloadError(f"could not fetch {address}: {exc}") from exc


def download_from_website(address: str, place: str) -> int:
    """Download ``address`` into the file ``place``; return the bytes written."""
    written = 0
    try:
        with open(place, "wb") as target, urllib.request.urlopen(address) as response:
            while chunk := response.read(_CHUNK):
                target.write(chunk)
                written += len(chunk)
    except (urllib.error.URLError, ValueError) as exc:
        raise DownloadError(f"could not download {address}: {exc}") from exc
    except OSError as exc:
        raise DownloadError(f"could not download {address} to {place}: {exc}") from exc
    return written


def _extract(archive: str, destination: str) -> None:
    with tarfile.open(archive, "r:gz") as bundle:
        data_filter = getattr(tarfile, "data_filter", None)
        if data_filter is not None:
            bundle.extractall(destination, filter=data_filter)
        else:
            bundle.extractall(destination)


class Updater:
    """Checks a remote site for a newer release and installs it."""

    def __init__(
        self,
        base_url: str,
        version_path: str,
        archive_name: str,
        archive_path: str,
        root_dir: str,
    ) -> None:
        self.latest_version_site = base_url + version_path
        self.archive_name = archive_name
        self.latest_version_remote_site = base_url + archive_path
        self.root_dir = root_dir
        self.local_archive_path = root_dir + archive_name
        self.install_script_path = root_dir + "install.sh"

    def is_up_to_date(self, current_version: str) -> bool:
        """Return True when the published version equals ``current_version``."""
        log.info("Grabbing latest version")
        latest = get_str_from_website(self.latest_version_site)
        log.info("Latest version grabbed: %s", latest)
        log.info("Current version:        %s", current_version)
        return Version.parse(latest) == Version.parse(current_version)

    def update(self, concurrent: bool = True) -> subprocess.Popen:
        """Download and unpack the release archive, then run its install script.

        With ``concurrent`` the script keeps running in the background;
        otherwise this waits for it to finish.
        """
        log.info("downloading")
        download_from_website(self.latest_version_remote_site, self.local_archive_path)
        log.info("extracting")
        _extract(self.local_archive_path, self.root_dir)
        log.info("installing")
        process = subprocess.Popen(["bash", self.install_script_path])
        if not concurrent:
            process.wait()
        return process