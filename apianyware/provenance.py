"""Where a declaration came from and how to find its documentation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class DeclarationSource(str, Enum):
    """Which extractor produced a declaration."""

    OBJC_HEADER = "objc_header"
    SWIFT_INTERFACE = "swift_interface"


@dataclass
class Availability:
    """Platform availability: introduced and deprecated macOS versions."""

    introduced: str | None = None
    deprecated: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.introduced is not None:
            out["introduced"] = self.introduced
        if self.deprecated is not None:
            out["deprecated"] = self.deprecated
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Availability:
        return cls(introduced=data.get("introduced"), deprecated=data.get("deprecated"))


@dataclass
class SourceProvenance:
    """Source header, line number and availability of a declaration."""

    header: str | None = None
    line: int | None = None
    availability: Availability | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.header is not None:
            out["header"] = self.header
        if self.line is not None:
            out["line"] = self.line
        if self.availability is not None:
            out["availability"] = self.availability.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SourceProvenance:
        line = data.get("line")
        if line is not None and (isinstance(line, bool) or not isinstance(line, int) or line < 0):
            raise ValueError(f"invalid line number: {line!r}")
        availability = data.get("availability")
        return cls(
            header=data.get("header"),
            line=line,
            availability=Availability.from_dict(availability) if availability is not None else None,
        )


@dataclass
class DocRefs:
    """Header comment, documentation URL and USR of a declaration."""

    header_comment: str | None = None
    apple_doc_url: str | None = None
    usr: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.header_comment is not None:
            out["header_comment"] = self.header_comment
        if self.apple_doc_url is not None:
            out["apple_doc_url"] = self.apple_doc_url
        if self.usr is not None:
            out["usr"] = self.usr
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DocRefs:
        return cls(
            header_comment=data.get("header_comment"),
            apple_doc_url=data.get("apple_doc_url"),
            usr=data.get("usr"),
        )