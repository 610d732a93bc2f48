# src/probe/controllers/probe_controller.py
import asyncio
import logging
import time
from typing import Optional

from deepping.errors import DecodeError
from deepping.model import PingResponse
from deepping.services.evaluate_service import failed_nodes, overall_success
from deepping.services.render_service import dump_json
from deepping.services.xml_decode_service import XmlDecodeService
from probe.errors import BodyReadError, FetchError, ProbeOutcomeError
from probe.model import (
    CheckResult,
    ProbeSettings,
    S_CRITICAL,
    S_OK,
    S_UNKNOWN,
    S_WARNING,
)
from probe.services.http_request_service import HttpRequestService
from probe.services.nagios_result_service import quote

logger = logging.getLogger(__name__)

HTTP_OK = 200


class ProbeController:
    """
    Runs one deep ping check: fetch with timeout, decode, evaluate, and map
    the outcome to a monitoring status.
    """

    def __init__(self, settings: ProbeSettings, http_service: Optional[HttpRequestService] = None,
                 decoder: Optional[XmlDecodeService] = None):
        self.settings = settings
        self.http_service = http_service or HttpRequestService(user_agent=settings.user_agent)
        self.decoder = decoder or XmlDecodeService()

    async def scrape(self) -> PingResponse:
        """
        Fetches and decodes the status document.
        A non-200 response is returned undecoded; fetch and decode failures
        are raised as ProbeOutcomeError wrapping FetchError/DecodeError.
        """
        url = self.settings.url
        t_start = time.perf_counter()
        try:
            async with self.http_service as http:
                fetched = await http.fetch(url)
        except FetchError as e:
            elapsed = time.perf_counter() - t_start
            logger.error("%s", e)
            status = e.status if isinstance(e, BodyReadError) else 0
            pr = PingResponse(url=url, http_code=status, response_time=elapsed, error=str(e),
                              indent=self.settings.indent)
            raise ProbeOutcomeError(pr, e) from e
        elapsed = time.perf_counter() - t_start

        if fetched.status != HTTP_OK:
            return PingResponse(url=url, http_code=fetched.status, response_time=elapsed,
                                indent=self.settings.indent)

        try:
            pr = self.decoder.decode(fetched.body, url=url, http_code=fetched.status, response_time=elapsed)
        except DecodeError as e:
            logger.error("%s", e)
            logger.debug("Response body:\n%s", fetched.body.decode("utf-8", errors="replace"))
            pr = PingResponse(url=url, http_code=fetched.status, response_time=elapsed, error=str(e),
                              indent=self.settings.indent)
            raise ProbeOutcomeError(pr, e) from e
        pr.indent = self.settings.indent
        return pr

    def _result(self, status: str, message: str, response: PingResponse,
                path: Optional[str] = None, thresholds: bool = True) -> CheckResult:
        s = self.settings
        return CheckResult(
            status=status,
            message=message,
            path=s.path if path is None else path,
            response_time=response.response_time,
            warning=s.warning if thresholds else 0.0,
            critical=s.critical if thresholds else 0.0,
            response=response,
        )

    def evaluate(self, response: PingResponse) -> CheckResult:
        """Maps a fetched response to a status, in order of severity checks."""
        s = self.settings
        if response.http_code != HTTP_OK:
            return self._result(S_CRITICAL, f"Unexpected HTTP response code: {response.http_code}", response)

        if not overall_success(response):
            if logger.isEnabledFor(logging.DEBUG):
                payload = dump_json(response, indent=True)
                logger.debug("XML as JSON (%d bytes):\n%s", len(payload.encode("utf-8")), payload)
                logger.debug("Failing nodes: %s", ", ".join(failed_nodes(response)))
            return self._result(S_CRITICAL, "Response tagged as unsuccessful, see long output for details",
                                response)

        if response.response_time >= s.critical:
            return self._result(S_CRITICAL, f"Response time above critical [ {int(s.critical)}s ] limit", response)
        if response.response_time >= s.warning:
            return self._result(S_WARNING, f"Response time above warning [ {int(s.warning)}s ] limit", response)

        return self._result(S_OK, "Looking good", response)

    async def run(self) -> CheckResult:
        """
        Races the scrape against the configured timeout. After a timeout the
        pending scrape is cancelled and its result is never evaluated.
        """
        url = self.settings.url
        try:
            response = await asyncio.wait_for(self.scrape(), timeout=self.settings.timeout)
        except asyncio.TimeoutError:
            logger.debug("Probe of %s abandoned after %.1fs", url, self.settings.timeout)
            return CheckResult(
                status=S_CRITICAL,
                message=f"DP {quote(url)} timed out after {int(self.settings.timeout)} seconds.",
                timed_out=True,
            )
        except ProbeOutcomeError as e:
            if isinstance(e.cause, BodyReadError):
                return self._result(S_CRITICAL, f"Error reading response body from {quote(url)}", e.response,
                                    path="", thresholds=False)
            if isinstance(e.cause, FetchError):
                return self._result(S_CRITICAL, f"Unable to fetch URL: {quote(url)}", e.response,
                                    path="", thresholds=False)
            return self._result(S_UNKNOWN, f"Unable to parse returned (XML) content from {quote(url)}",
                                e.response, path="", thresholds=False)

        return self.evaluate(response)
