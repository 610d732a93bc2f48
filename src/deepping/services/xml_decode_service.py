# src/deepping/services/xml_decode_service.py
from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from deepping.errors import DecodeError
from deepping.model import Application, PingResponse

_APPLICATIONS = TypeAdapter(List[Application])


class XmlDecodeService:
    """
    Turns a deep ping status document into a PingResponse tree.

    The element tree is first mapped onto plain dicts and then validated in
    one go, so a document either decodes completely or raises DecodeError.
    Note: This is a stateless service; the driver owns timing and HTTP
    metadata and passes them in.
    """

    # -------- Element helpers --------

    @staticmethod
    def _local(tag: Any) -> str:
        """Strips an XML namespace ('{uri}name' -> 'name')."""
        if not isinstance(tag, str):
            return ""
        return tag.rsplit("}", 1)[-1]

    @classmethod
    def _children(cls, el: ET.Element, name: str) -> List[ET.Element]:
        return [c for c in el if cls._local(c.tag) == name]

    @classmethod
    def _child_text(cls, el: ET.Element, name: str) -> Optional[str]:
        """Text of the first child named `name`, stripped. None if the child is missing."""
        for c in el:
            if cls._local(c.tag) == name:
                return (c.text or "").strip()
        return None

    # -------- Element -> dict --------

    def _infrastructure(self, el: ET.Element) -> Dict[str, Any]:
        return {
            "name": el.get("name"),
            "type": el.get("type"),
            # None when missing, rejected as a required value on validation
            "success": self._child_text(el, "success"),
            "response_time": self._child_text(el, "responsetime"),
        }

    def _dependencies(self, el: ET.Element) -> Dict[str, Any]:
        return {
            "infrastructure": [self._infrastructure(c) for c in self._children(el, "infrastructure")],
            "application": [self._application(c) for c in self._children(el, "application")],
        }

    def _application(self, el: ET.Element) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "long_name": el.get("long-name"),
            "short_name": el.get("short-name"),
            "version": el.get("version"),
            "failure_reason": self._child_text(el, "failureReason"),
            "endpoint": self._child_text(el, "endpoint"),
            "success": self._child_text(el, "success"),
            "response_time": self._child_text(el, "responsetime"),
        }
        skipped = self._child_text(el, "skipped")
        if skipped:
            out["skipped"] = skipped
        out["dependencies"] = [self._dependencies(c) for c in self._children(el, "dependencies")]
        return out

    # -------- Public API --------

    @staticmethod
    def _error_path(err: ValidationError) -> Optional[str]:
        """Formats the first pydantic error location as application[0]/dependencies[0]/..."""
        errors = err.errors()
        if not errors:
            return None
        path = "application"
        for part in errors[0].get("loc", ()):
            path += f"[{part}]" if isinstance(part, int) else f"/{part}"
        return path

    def decode(
            self,
            raw: Union[str, bytes],
            *,
            url: str = "",
            http_code: int = 0,
            response_time: float = 0.0,
    ) -> PingResponse:
        """
        Parses `raw` and returns a fully built PingResponse.

        Raises:
            DecodeError: if the document is not well-formed XML, or a
                success/responsetime/skipped value is missing or cannot be
                parsed at any node.
        """
        if raw is None or (isinstance(raw, (str, bytes)) and not raw.strip()):
            raise DecodeError("Empty document")
        try:
            root = ET.fromstring(raw)
        except ET.ParseError as e:
            raise DecodeError(f"Malformed XML document: {e}") from e

        payload = [self._application(c) for c in self._children(root, "application")]
        try:
            applications = _APPLICATIONS.validate_python(payload)
        except ValidationError as e:
            path = self._error_path(e)
            msg = e.errors()[0].get("msg") if e.errors() else str(e)
            raise DecodeError(f"Invalid value at {path}: {msg}", path=path) from e

        return PingResponse(
            url=url,
            http_code=http_code,
            response_time=response_time,
            application=applications,
        )


def decode(
        raw: Union[str, bytes],
        *,
        url: str = "",
        http_code: int = 0,
        response_time: float = 0.0,
) -> PingResponse:
    """Module-level shortcut for XmlDecodeService().decode()."""
    return XmlDecodeService().decode(raw, url=url, http_code=http_code, response_time=response_time)
