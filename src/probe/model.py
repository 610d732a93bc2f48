# src/probe/model.py (Probe Layer)
from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field

from deepping.model import DEFAULT_INDENT, PingResponse

DEFAULT_USER_AGENT = "VGT Deep Pings/3.0"

S_OK = "OK"
S_WARNING = "WARNING"
S_CRITICAL = "CRITICAL"
S_UNKNOWN = "UNKNOWN"

EXIT_CODES: Dict[str, int] = {S_OK: 0, S_WARNING: 1, S_CRITICAL: 2, S_UNKNOWN: 3}


class ProbeSettings(BaseModel):
    url: str
    path: str = Field(default="", description="Path part of the url, reported in the status line.")
    warning: float = Field(default=10.0, description="Response time (s) resulting in WARNING.")
    critical: float = Field(default=15.0, description="Response time (s) resulting in CRITICAL.")
    timeout: float = Field(default=30.0, description="Seconds before the probe is abandoned.")
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    verbose: bool = Field(default=False, description="Append the full text dump to the output.")
    indent: str = Field(default=DEFAULT_INDENT)


class FetchResult(BaseModel):
    status: int
    body: bytes = b""


class CheckResult(BaseModel):
    status: str
    message: str
    path: str = ""
    response_time: float = 0.0
    warning: float = 0.0
    critical: float = 0.0
    timed_out: bool = False
    response: Optional[PingResponse] = None

    @property
    def exit_code(self) -> int:
        return EXIT_CODES.get(self.status, EXIT_CODES[S_UNKNOWN])
