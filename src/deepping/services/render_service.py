# src/deepping/services/render_service.py
"""
Diagnostic dumps of a report tree.

Each node kind contributes an ordered list of (label, value) pairs built from
the instance itself. Absent values are dropped before the key column width is
computed, so colons only line up within a single block.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

from deepping.errors import RenderError
from deepping.model import (
    Application,
    Dependencies,
    Infrastructure,
    PingResponse,
    ReportNode,
    REPORT_NAME,
    T_AP, T_DE, T_EP, T_ER, T_FR, T_HC, T_IS, T_LN, T_NA,
    T_RT, T_SK, T_SN, T_SU, T_TY, T_URL, T_VS,
)

Fields = List[Tuple[str, Optional[str]]]


def _fmt_bool(v: bool) -> str:
    return "true" if v else "false"


def _fmt_float(v: float) -> str:
    return f"{v:f}"


# -------- Per-node field lists --------

def _response_fields(r: PingResponse) -> Fields:
    return [
        (T_URL, r.url or None),
        (T_HC, str(r.http_code)),
        (T_RT, _fmt_float(r.response_time)),
        (T_ER, r.error),
    ]


def _application_fields(a: Application) -> Fields:
    return [
        (T_LN, a.long_name),
        (T_SN, a.short_name),
        (T_VS, a.version),
        (T_FR, a.failure_reason),
        (T_EP, a.endpoint),
        (T_SU, _fmt_bool(a.success)),
        (T_SK, _fmt_bool(a.skipped)),
        (T_RT, _fmt_float(a.response_time)),
    ]


def _infrastructure_fields(i: Infrastructure) -> Fields:
    return [
        (T_NA, i.name),
        (T_TY, i.type),
        (T_SU, _fmt_bool(i.success)),
        (T_RT, _fmt_float(i.response_time)),
    ]


# -------- Text dump --------

def _field_lines(fields: Fields, prefix: str, level: int) -> List[str]:
    present = [(k, v) for k, v in fields if v is not None]
    if not present:
        return []
    width = max(len(k) for k, _ in present)
    pad = prefix * level
    return [f"{pad}{k.ljust(width)} : {v}" for k, v in present]


def _header(kind: str, idx: int, total: int, prefix: str, level: int) -> str:
    return f"{prefix * level}{kind} (#{idx}/{total}) =>"


def _infrastructure_lines(infra: Infrastructure, prefix: str, level: int) -> List[str]:
    return _field_lines(_infrastructure_fields(infra), prefix, level)


def _dependencies_lines(deps: Dependencies, prefix: str, level: int) -> List[str]:
    lines: List[str] = []
    total = len(deps.infrastructure)
    for idx, infra in enumerate(deps.infrastructure, start=1):
        lines.append(_header(T_IS, idx, total, prefix, level))
        lines.extend(_infrastructure_lines(infra, prefix, level + 1))
    total = len(deps.application)
    for idx, app in enumerate(deps.application, start=1):
        lines.append(_header(T_AP, idx, total, prefix, level))
        lines.extend(_application_lines(app, prefix, level + 1))
    return lines


def _application_lines(app: Application, prefix: str, level: int) -> List[str]:
    lines = _field_lines(_application_fields(app), prefix, level)
    total = len(app.dependencies)
    for idx, deps in enumerate(app.dependencies, start=1):
        lines.append(_header(T_DE, idx, total, prefix, level))
        lines.extend(_dependencies_lines(deps, prefix, level + 1))
    return lines


def render_lines(response: PingResponse) -> List[str]:
    """
    Renders the framed, line-oriented dump of a response, e.g.:

        ===== BEGIN: PingResponse =====
        URL          : http://host/dp
        HTTPCode     : 200
        ResponseTime : 0.120000
        Application (#1/1) =>
          Success      : true
          ...
        ===== END: PingResponse =====
    """
    prefix = response.indent_unit
    lines = [f"===== BEGIN: {REPORT_NAME} ====="]
    lines.extend(_field_lines(_response_fields(response), prefix, 0))
    total = len(response.application)
    for idx, app in enumerate(response.application, start=1):
        lines.append(_header(T_AP, idx, total, prefix, 0))
        lines.extend(_application_lines(app, prefix, 1))
    lines.append(f"===== END: {REPORT_NAME} =====")
    return lines


def dump_text(response: PingResponse) -> str:
    return "\n".join(render_lines(response)) + "\n"


# -------- Structured dump --------

def _put(out: Dict[str, Any], key: str, value: Any) -> None:
    if value is None or value == "" or value is False or value == [] or value == {}:
        return
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0:
        return
    out[key] = value


def _infrastructure_dict(i: Infrastructure) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    _put(out, T_NA, i.name)
    _put(out, T_TY, i.type)
    out[T_SU] = i.success
    _put(out, T_RT, i.response_time)
    return out


def _dependencies_dict(d: Dependencies) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    _put(out, T_IS, [_infrastructure_dict(i) for i in d.infrastructure])
    _put(out, T_AP, [_application_dict(a) for a in d.application])
    return out


def _application_dict(a: Application) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    _put(out, T_LN, a.long_name)
    _put(out, T_SN, a.short_name)
    _put(out, T_VS, a.version)
    _put(out, T_FR, a.failure_reason)
    _put(out, T_EP, a.endpoint)
    out[T_SU] = a.success
    _put(out, T_SK, a.skipped)
    _put(out, T_RT, a.response_time)
    _put(out, T_DE, [_dependencies_dict(d) for d in a.dependencies])
    return out


def _response_dict(r: PingResponse) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    _put(out, T_URL, r.url)
    _put(out, T_HC, r.http_code)
    _put(out, T_RT, r.response_time)
    _put(out, T_ER, r.error)
    _put(out, T_AP, [_application_dict(a) for a in r.application])
    return out


def to_dict(node: ReportNode) -> Dict[str, Any]:
    """Nested key/value form of any report node, keyed by display label."""
    if isinstance(node, PingResponse):
        return _response_dict(node)
    if isinstance(node, Application):
        return _application_dict(node)
    if isinstance(node, Dependencies):
        return _dependencies_dict(node)
    if isinstance(node, Infrastructure):
        return _infrastructure_dict(node)
    raise TypeError(f"Not a report node: {type(node).__name__}")


def dump_json(response: PingResponse, indent: bool = False) -> str:
    """
    Serializes the response as JSON. The indented form repeats the
    response's indent unit once per nesting level.
    """
    data = to_dict(response)
    try:
        if indent:
            return json.dumps(data, ensure_ascii=False, indent=response.indent_unit)
        return json.dumps(data, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise RenderError(f"Could not serialize {REPORT_NAME}: {e}") from e

