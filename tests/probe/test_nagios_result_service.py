# tests/probe/test_nagios_result_service.py
from deepping.model import Application, PingResponse
from probe.model import CheckResult
from probe.services.nagios_result_service import format_result, format_status_line, quote


def test_status_line_with_perfdata():
    result = CheckResult(status="OK", message="Looking good", path="/dp",
                         response_time=0.12, warning=10, critical=15)
    assert format_status_line(result) == (
        'OK: Looking good, Path: "/dp", Response time: 0.120000|time=0.120000s;10.000000;15.000000'
    )


def test_timed_out_line_has_no_perfdata():
    result = CheckResult(status="CRITICAL", message='DP "http://h/dp" timed out after 30 seconds.',
                         timed_out=True)
    assert format_status_line(result) == 'CRITICAL: DP "http://h/dp" timed out after 30 seconds.'
    assert result.exit_code == 2


def test_quote_escapes():
    assert quote('a"b') == '"a\\"b"'
    assert quote("") == '""'


def test_verbose_appends_text_dump():
    pr = PingResponse(url="http://h/dp", http_code=200, application=[Application(success=True)])
    result = CheckResult(status="OK", message="Looking good", path="/dp", response=pr)

    out = format_result(result, verbose=True).splitlines()
    assert out[0].startswith("OK: Looking good")
    assert out[1] == "===== BEGIN: PingResponse ====="
    assert out[-1] == "===== END: PingResponse ====="
    assert "Application (#1/1) =>" in out


def test_non_verbose_is_single_line():
    pr = PingResponse(url="http://h/dp")
    result = CheckResult(status="OK", message="Looking good", response=pr)
    assert "\n" not in format_result(result, verbose=False)


def test_unknown_status_maps_to_exit_3():
    assert CheckResult(status="WHATEVER", message="?").exit_code == 3
    assert CheckResult(status="WARNING", message="slow").exit_code == 1
