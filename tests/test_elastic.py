import base64
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from ranacore.elastic import ELK_TIMEOUT, ElasticSearchClient, ElasticSearchError


class _Recorder:
    def __init__(self):
        self.requests = []
        self.status = 201


def _make_handler(recorder):
    class Handler(BaseHTTPRequestHandler):
        def do_POST(self):
            length = int(self.headers.get("Content-Length", 0))
            body = self.rfile.read(length)
            recorder.requests.append((self.path, dict(self.headers), body))
            self.send_response(recorder.status)
            self.send_header("Content-Length", "2")
            self.end_headers()
            self.wfile.write(b"{}")

        def log_message(self, *args):
            pass

    return Handler


@pytest.fixture
def server():
    recorder = _Recorder()
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _make_handler(recorder))
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    base = f"http://127.0.0.1:{httpd.server_address[1]}"
    yield base, recorder
    httpd.shutdown()
    httpd.server_close()


def _header(headers, name):
    lowered = {key.lower(): value for key, value in headers.items()}
    return lowered[name.lower()]


def test_post_sends_json_body(server):
    base, recorder = server
    client = ElasticSearchClient(base + "/logs/_doc/")
    status = client.post('{"message": "hi"}')
    assert status == 201
    path, headers, body = recorder.requests[0]
    assert path == "/logs/_doc/"
    assert body == b'{"message": "hi"}'
    assert _header(headers, "Content-Type") == "application/json"


def test_post_uses_basic_auth(server):
    base, recorder = server
    password = "password"
    client = ElasticSearchClient(base + "/doc", username="user", password=password)
    assert client.post(b"{}") == 201
    _, headers, _ = recorder.requests[0]
    scheme, encoded = _header(headers, "Authorization").split(" ", 1)
    assert scheme == "Basic"
    assert base64.b64decode(encoded).decode() == "user:password"


def test_no_auth_header_without_username(server):
    base, recorder = server
    assert ElasticSearchClient(base + "/doc").post("{}") == 201
    _, headers, _ = recorder.requests[0]
    assert "authorization" not in {key.lower() for key in headers}


def test_post_to_other_url(server):
    base, recorder = server
    client = ElasticSearchClient(base + "/default")
    assert client.post_to("[1]", base + "/custom") == 201
    assert recorder.requests[0][0] == "/custom"
    assert recorder.requests[0][2] == b"[1]"


def test_http_error_status_is_returned(server):
    base, recorder = server
    recorder.status = 500
    client = ElasticSearchClient(base + "/doc")
    assert client.post("{}") == 500
    assert client.recent_error == ""


def test_connection_failure_raises_and_records_error(server):
    base, _ = server
    client = ElasticSearchClient("http://127.0.0.1:1/doc", timeout=5)
    with pytest.raises(ElasticSearchError):
        client.post("{}")
    assert client.recent_error


def test_closed_client_refuses_posts(server):
    base, recorder = server
    with ElasticSearchClient(base + "/doc") as client:
        client.post("{}")
    with pytest.raises(ElasticSearchError):
        client.post("{}")
    assert len(recorder.requests) == 1


def test_default_timeout():
    client = ElasticSearchClient("http://localhost/doc")
    assert client.timeout == ELK_TIMEOUT