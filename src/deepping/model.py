# src/deepping/model.py (Report Layer)
from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

REPORT_NAME = "PingResponse"
DEFAULT_INDENT = "  "

# Display labels shared by the text and structured dumps
T_AP = "Application"
T_DE = "Dependencies"
T_IS = "Infrastructure"
T_LN = "LongName"
T_SN = "ShortName"
T_VS = "Version"
T_FR = "FailureReason"
T_EP = "EndPoint"
T_SU = "Success"
T_SK = "Skipped"
T_RT = "ResponseTime"
T_NA = "Name"
T_TY = "Type"
T_URL = "URL"
T_HC = "HTTPCode"
T_ER = "Error"


def _blank_to_none(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


_TRUE_FLAGS = {"1", "t", "true"}
_FALSE_FLAGS = {"0", "f", "false"}


def _require(v: Any) -> Any:
    if v is None:
        raise ValueError("required value is missing")
    return v


def _parse_flag(v: Any) -> Any:
    # Only the literal boolean spellings; "yes", "on" and friends are rejected
    if not isinstance(_require(v), str):
        return v
    s = v.strip().lower()
    if s in _TRUE_FLAGS:
        return True
    if s in _FALSE_FLAGS:
        return False
    raise ValueError(f"invalid boolean value {v!r}, expected one of 1/0/t/f/true/false")


class Infrastructure(BaseModel):
    """A terminal dependency (database, queue, ...) reported by an application."""
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    type: Optional[str] = None
    success: bool
    response_time: float = 0.0

    @field_validator("name", "type", mode="before")
    @classmethod
    def _normalize_text(cls, v: Any) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("success", mode="before")
    @classmethod
    def _strict_flag(cls, v: Any) -> Any:
        return _parse_flag(v)

    @field_validator("response_time", mode="before")
    @classmethod
    def _required_time(cls, v: Any) -> Any:
        return _require(v)


class Application(BaseModel):
    """
    One service's self-reported health. Its dependencies may contain further
    applications, so the tree has no fixed depth.
    """
    model_config = ConfigDict(frozen=True)

    long_name: Optional[str] = None
    short_name: Optional[str] = None
    version: Optional[str] = None
    failure_reason: Optional[str] = None
    endpoint: Optional[str] = None
    success: bool
    # Informational only, evaluation still uses `success`
    skipped: bool = False
    response_time: float = 0.0
    dependencies: List[Dependencies] = Field(default_factory=list)

    @field_validator("long_name", "short_name", "version", "failure_reason", "endpoint", mode="before")
    @classmethod
    def _normalize_text(cls, v: Any) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("success", "skipped", mode="before")
    @classmethod
    def _strict_flag(cls, v: Any) -> Any:
        return _parse_flag(v)

    @field_validator("response_time", mode="before")
    @classmethod
    def _required_time(cls, v: Any) -> Any:
        return _require(v)


class Dependencies(BaseModel):
    """Grouping node mirroring a <dependencies> element. Has no status of its own."""
    model_config = ConfigDict(frozen=True)

    infrastructure: List[Infrastructure] = Field(default_factory=list)
    application: List[Application] = Field(default_factory=list)


class PingResponse(BaseModel):
    """
    Top-level probe result. `error` and `indent` may be set by the driver
    after the tree has been decoded.
    """
    url: str = ""
    http_code: int = 0
    response_time: float = 0.0
    error: Optional[str] = None
    application: List[Application] = Field(default_factory=list)
    indent: str = Field(default="", description="Indent unit for dumps, empty means two spaces.")

    @property
    def indent_unit(self) -> str:
        return self.indent or DEFAULT_INDENT


Application.model_rebuild()
Dependencies.model_rebuild()

ReportNode = Union[PingResponse, Application, Dependencies, Infrastructure]
