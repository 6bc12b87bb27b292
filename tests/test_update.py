import functools
import http.server
import io
import tarfile
import threading

import pytest

from ranacore.update import (
    DownloadError,
    Updater,
    Version,
    download_from_website,
    get_str_from_website,
)


class _QuietHandler(http.server.SimpleHTTPRequestHandler):
    def log_message(self, format, *args):
        pass


@pytest.fixture
def site(tmp_path):
    root = tmp_path / "site"
    root.mkdir()
    handler = functools.partial(_QuietHandler, directory=str(root))
    httpd = http.server.ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield root, f"http://127.0.0.1:{httpd.server_address[1]}"
    finally:
        httpd.shutdown()
        httpd.server_close()


def test_version_parse():
    assert Version.parse("1.2.3") == Version(1, 2, 3)


def test_version_parse_ignores_trailing_text():
    assert Version.parse(" 4.5.6-rc1\n") == Version(4, 5, 6)


def test_version_parse_rejects_incomplete():
    with pytest.raises(ValueError):
        Version.parse("1.2")


def test_version_ordering():
    assert Version.parse("1.2.3") < Version.parse("1.10.0")
    assert Version.parse("2.0.0") > Version.parse("1.99.99")
    assert Version.parse("1.2.3") <= Version.parse("1.2.3")


def test_version_str_round_trip():
    version = Version(7, 0, 12)
    assert Version.parse(str(version)) == version


def test_get_str_from_website(site):
    root, base = site
    (root / "version.html").write_text("3.1.4\n")
    assert get_str_from_website(base + "/version.html") == "3.1.4\n"


def test_get_str_missing_raises(site):
    _, base = site
    with pytest.raises(DownloadError):
        get_str_from_website(base + "/missing.html")


def test_download_from_website(site, tmp_path):
    root, base = site
    payload = bytes(range(256)) * 100
    (root / "blob.bin").write_bytes(payload)
    target = tmp_path / "out.bin"
    written = download_from_website(base + "/blob.bin", str(target))
    assert written == len(payload)
    assert target.read_bytes() == payload


def test_download_missing_raises(site, tmp_path):
    _, base = site
    with pytest.raises(DownloadError):
        download_from_website(base + "/missing.bin", str(tmp_path / "out.bin"))


def test_updater_paths():
    updater = Updater("http://localhost", "/v.html", "pkg.tar.gz", "/pkg.tar.gz", "/opt/app/")
    assert updater.latest_version_site == "http://localhost/v.html"
    assert updater.latest_version_remote_site == "http://localhost/pkg.tar.gz"
    assert updater.local_archive_path == "/opt/app/pkg.tar.gz"
    assert updater.install_script_path == "/opt/app/install.sh"


def test_is_up_to_date(site, tmp_path):
    root, base = site
    (root / "version.html").write_text("2.4.1\n")
    updater = Updater(base, "/version.html", "pkg.tar.gz", "/pkg.tar.gz", str(tmp_path) + "/")
    assert updater.is_up_to_date("2.4.1") is True
    assert updater.is_up_to_date("2.4.0") is False


def _add_file(bundle, name, content):
    info = tarfile.TarInfo(name)
    info.size = len(content)
    info.mode = 0o755
    bundle.addfile(info, io.BytesIO(content))


def test_update_downloads_extracts_and_installs(site, tmp_path):
    root, base = site
    script = b'echo installed > "$(dirname "$0")/marker"\n'
    with tarfile.open(root / "pkg.tar.gz", "w:gz") as bundle:
        _add_file(bundle, "install.sh", script)
        _add_file(bundle, "payload.txt", b"payload")

    install_dir = tmp_path / "install"
    install_dir.mkdir()
    updater = Updater(base, "/version.html", "pkg.tar.gz", "/pkg.tar.gz", str(install_dir) + "/")
    process = updater.update(concurrent=False)

    assert process.returncode == 0
    assert (install_dir / "pkg.tar.gz").exists()
    assert (install_dir / "payload.txt").read_text() == "payload"
    assert (install_dir / "marker").read_text() == "installed\n"


def test_update_missing_archive_raises(site, tmp_path):
    _, base = site
    updater = Updater(base, "/version.html", "pkg.tar.gz", "/absent.tar.gz", str(tmp_path) + "/")
    with pytest.raises(DownloadError):
        updater.update(concurrent=False)