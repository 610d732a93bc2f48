# tests/probe/test_probe_controller.py
import asyncio
import logging

import pytest

from deepping.errors import DecodeError
from probe.controllers.probe_controller import ProbeController
from probe.errors import BodyReadError, FetchError, ProbeOutcomeError
from probe.model import FetchResult, ProbeSettings

GOOD_DOC = b"""<PingResponse>
  <application short-name="opus">
    <success>true</success>
    <responsetime>0.2</responsetime>
    <dependencies>
      <infrastructure name="db" type="oracle"><success>true</success><responsetime>0.01</responsetime></infrastructure>
    </dependencies>
  </application>
</PingResponse>"""

FAILING_DOC = GOOD_DOC.replace(
    b"<success>true</success><responsetime>0.01</responsetime>",
    b"<success>false</success><responsetime>0.01</responsetime>",
)


class FakeHttpService:
    """Stand-in for HttpRequestService that never touches the network."""

    def __init__(self, result=None, exc=None, delay=0.0):
        self.result = result
        self.exc = exc
        self.delay = delay
        self.requested = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    async def fetch(self, url):
        self.requested.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc:
            raise self.exc
        return self.result


def _settings(**kw):
    base = dict(url="http://dp.example.com:80/dp", path="/dp", warning=10.0, critical=15.0, timeout=5.0)
    base.update(kw)
    return ProbeSettings(**base)


def _run(settings, http):
    return asyncio.run(ProbeController(settings, http_service=http).run())


def test_ok_result():
    http = FakeHttpService(FetchResult(status=200, body=GOOD_DOC))
    result = _run(_settings(), http)

    assert http.requested == ["http://dp.example.com:80/dp"]
    assert result.status == "OK"
    assert result.exit_code == 0
    assert result.message == "Looking good"
    assert result.path == "/dp"
    assert result.warning == 10.0 and result.critical == 15.0
    assert result.response.http_code == 200
    assert result.response.url == "http://dp.example.com:80/dp"
    assert result.response.application[0].short_name == "opus"
    assert result.response_time >= 0.0


def test_unsuccessful_tree_is_critical(caplog):
    http = FakeHttpService(FetchResult(status=200, body=FAILING_DOC))
    with caplog.at_level(logging.DEBUG, logger="probe.controllers.probe_controller"):
        result = _run(_settings(), http)

    assert result.status == "CRITICAL"
    assert result.exit_code == 2
    assert result.message == "Response tagged as unsuccessful, see long output for details"
    assert "Application[opus]/Dependencies#1/Infrastructure[db]" in caplog.text
    assert '"Success": false' in caplog.text


def test_unexpected_http_code_is_critical_and_not_decoded():
    http = FakeHttpService(FetchResult(status=503, body=b"not xml at all"))
    result = _run(_settings(), http)

    assert result.status == "CRITICAL"
    assert result.message == "Unexpected HTTP response code: 503"
    assert result.response.application == []
    assert result.response.error is None


def test_fetch_failure_is_critical():
    http = FakeHttpService(exc=FetchError("connection refused"))
    result = _run(_settings(), http)

    assert result.status == "CRITICAL"
    assert result.message == 'Unable to fetch URL: "http://dp.example.com:80/dp"'
    assert result.path == ""
    assert result.warning == 0.0 and result.critical == 0.0
    assert result.response.error == "connection refused"


def test_body_read_failure_is_reported_separately():
    http = FakeHttpService(exc=BodyReadError("payload truncated", status=200))
    result = _run(_settings(), http)

    assert result.status == "CRITICAL"
    assert result.message == 'Error reading response body from "http://dp.example.com:80/dp"'
    assert result.path == ""
    assert result.warning == 0.0 and result.critical == 0.0
    assert result.response.http_code == 200
    assert result.response.error == "payload truncated"


def test_decode_failure_is_unknown():
    http = FakeHttpService(FetchResult(status=200, body=b"<PingResponse><application>"))
    result = _run(_settings(), http)

    assert result.status == "UNKNOWN"
    assert result.exit_code == 3
    assert result.message == 'Unable to parse returned (XML) content from "http://dp.example.com:80/dp"'
    assert result.response.http_code == 200
    assert result.response.error.startswith("Malformed XML document")


def test_timeout_is_critical():
    """Een trage fetch wordt na de timeout afgebroken en niet meer geëvalueerd."""
    http = FakeHttpService(FetchResult(status=200, body=GOOD_DOC), delay=2.0)
    result = _run(_settings(timeout=0.05), http)

    assert result.status == "CRITICAL"
    assert result.timed_out is True
    assert result.response is None
    assert result.message == 'DP "http://dp.example.com:80/dp" timed out after 0 seconds.'


@pytest.mark.parametrize("warning, critical, status, message", [
    (0.0, 100.0, "WARNING", "Response time above warning [ 0s ] limit"),
    (0.0, 0.0, "CRITICAL", "Response time above critical [ 0s ] limit"),
    (100.0, 200.0, "OK", "Looking good"),
])
def test_response_time_thresholds(warning, critical, status, message):
    http = FakeHttpService(FetchResult(status=200, body=GOOD_DOC))
    result = _run(_settings(warning=warning, critical=critical), http)
    assert result.status == status
    assert result.message == message


def test_indent_setting_is_applied_to_response():
    http = FakeHttpService(FetchResult(status=200, body=GOOD_DOC))
    result = _run(_settings(indent="\t"), http)
    assert result.response.indent_unit == "\t"


def test_scrape_raises_decode_error_cause():
    controller = ProbeController(_settings(), http_service=FakeHttpService(FetchResult(status=200, body=b"<a>")))
    with pytest.raises(ProbeOutcomeError) as exc:
        asyncio.run(controller.scrape())
    assert isinstance(exc.value.cause, DecodeError)
