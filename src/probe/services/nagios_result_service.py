# src/probe/services/nagios_result_service.py
import json

from deepping.services.render_service import dump_text
from probe.model import CheckResult


def quote(value: str) -> str:
    """Double-quotes a string with backslash escapes, as used in status messages."""
    return json.dumps(value, ensure_ascii=False)


def format_status_line(result: CheckResult) -> str:
    """
    Builds the monitoring plugin line, including performance data:
        OK: Looking good, Path: "/dp", Response time: 0.120000|time=0.120000s;10.000000;15.000000
    A timed out probe has no measured time, so only the status and message are given.
    """
    if result.timed_out:
        return f"{result.status}: {result.message}"
    rt = result.response_time
    return (
        f"{result.status}: {result.message}, Path: {quote(result.path)}, "
        f"Response time: {rt:f}|time={rt:f}s;{result.warning:f};{result.critical:f}"
    )


def format_result(result: CheckResult, verbose: bool = False) -> str:
    """Status line, optionally followed by the long output (text dump of the response)."""
    line = format_status_line(result)
    if verbose and result.response is not None:
        return f"{line}\n{dump_text(result.response).rstrip()}"
    return line
