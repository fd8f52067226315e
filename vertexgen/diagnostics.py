from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Where a record or one of its fields was declared."""

    file: Optional[str] = None
    line: Optional[int] = None
    record: Optional[str] = None
    field: Optional[str] = None

    def __str__(self) -> str:
        where = self.file or "<unknown>"
        if self.line is not None:
            where = f"{where}:{self.line}"

        target = self.record or ""
        if self.field:
            target = f"{target}.{self.field}" if target else self.field

        return f"{where} ({target})" if target else where

    def for_field(self, name: str) -> SourceLocation:
        return SourceLocation(
            file=self.file, line=self.line, record=self.record, field=name
        )


@dataclass(frozen=True, slots=True)
class Diagnostic:
    severity: Severity
    location: Optional[SourceLocation]
    message: str

    def __str__(self) -> str:
        where = f"{self.location}: " if self.location else ""
        return f"{where}{self.severity.value}: {self.message}"


class DiagnosticSink(Protocol):
    """Receives diagnostics. Owned by the caller; derivation only writes."""

    def emit(
        self,
        severity: Severity,
        location: Optional[SourceLocation],
        message: str,
    ) -> None: ...


@dataclass(slots=True)
class DiagnosticCollector:
    """Sink that keeps every diagnostic in emission order."""

    diagnostics: List[Diagnostic] = field(default_factory=list)

    def emit(
        self,
        severity: Severity,
        location: Optional[SourceLocation],
        message: str,
    ) -> None:
        self.diagnostics.append(Diagnostic(severity, location, message))

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.WARNING]

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity is Severity.ERROR]

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def clear(self) -> None:
        self.diagnostics.clear()


class LoggingSink:
    """Forwards diagnostics to a logger."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger

    def emit(
        self,
        severity: Severity,
        location: Optional[SourceLocation],
        message: str,
    ) -> None:
        level = logging.ERROR if severity is Severity.ERROR else logging.WARNING
        self._log.log(level, "%s", Diagnostic(severity, location, message))


class Reporter:
    """
    Write-only front for a sink that remembers whether an error went
    through it, so a derivation can compute its success flag without
    reading the sink back.
    """

    __slots__ = ("_sink", "error_count", "warning_count")

    def __init__(self, sink: DiagnosticSink) -> None:
        self._sink = sink
        self.error_count = 0
        self.warning_count = 0

    def warn(self, location: Optional[SourceLocation], message: str) -> None:
        self.warning_count += 1
        self._sink.emit(Severity.WARNING, location, message)

    def error(self, location: Optional[SourceLocation], message: str) -> None:
        self.error_count += 1
        self._sink.emit(Severity.ERROR, location, message)

    @property
    def failed(self) -> bool:
        return self.error_count > 0
