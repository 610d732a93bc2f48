# src/deepping/services/evaluate_service.py
"""
Strict AND-reduction of every success flag in a report tree.

A single failing leaf at any depth makes the whole response unsuccessful.
The `skipped` flag on an application does not exempt it: evaluation always
uses the reported `success` value.
"""
from __future__ import annotations

from typing import List

from deepping.model import (
    Application,
    Dependencies,
    Infrastructure,
    PingResponse,
    ReportNode,
    T_AP,
    T_DE,
    T_IS,
)


def infrastructure_ok(infra: Infrastructure) -> bool:
    return infra.success


def dependencies_ok(deps: Dependencies) -> bool:
    return (
        all(infrastructure_ok(i) for i in deps.infrastructure)
        and all(application_ok(a) for a in deps.application)
    )


def application_ok(app: Application) -> bool:
    if not app.success:
        return False
    return all(dependencies_ok(d) for d in app.dependencies)


def response_ok(response: PingResponse) -> bool:
    return all(application_ok(a) for a in response.application)


def overall_success(node: ReportNode) -> bool:
    """Returns the success verdict for any node kind of the report tree."""
    if isinstance(node, PingResponse):
        return response_ok(node)
    if isinstance(node, Application):
        return application_ok(node)
    if isinstance(node, Dependencies):
        return dependencies_ok(node)
    if isinstance(node, Infrastructure):
        return infrastructure_ok(node)
    raise TypeError(f"Not a report node: {type(node).__name__}")


# -------- Failure paths (diagnostics) --------

def _app_label(app: Application, idx: int) -> str:
    name = app.short_name or app.long_name or f"#{idx}"
    return f"{T_AP}[{name}]"


def _infra_label(infra: Infrastructure, idx: int) -> str:
    name = infra.name or f"#{idx}"
    return f"{T_IS}[{name}]"


def _collect_app(app: Application, path: str, out: List[str]) -> None:
    if not app.success:
        out.append(path)
    for d_idx, deps in enumerate(app.dependencies, start=1):
        deps_path = f"{path}/{T_DE}#{d_idx}"
        for i_idx, infra in enumerate(deps.infrastructure, start=1):
            if not infra.success:
                out.append(f"{deps_path}/{_infra_label(infra, i_idx)}")
        for a_idx, child in enumerate(deps.application, start=1):
            _collect_app(child, f"{deps_path}/{_app_label(child, a_idx)}", out)


def failed_nodes(response: PingResponse) -> List[str]:
    """
    Lists the path of every application or infrastructure node reporting
    success=false, in document order. Empty iff `response_ok(response)`.
    """
    out: List[str] = []
    for idx, app in enumerate(response.application, start=1):
        _collect_app(app, _app_label(app, idx), out)
    return out
