"""Application-level exception types for termfolio."""

from __future__ import annotations

from typing import Any, Dict


class TermfolioError(RuntimeError):
    """Base exception for termfolio."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self._details: Dict[str, Any] = {}
        for key, value in details.items():
            if value is None:
                continue
            self._details[str(key)] = value

    @property
    def details(self) -> Dict[str, Any]:
        return dict(self._details)


class ProjectConfigError(TermfolioError):
    """Raised when project configuration is unreadable or invalid."""


class UnknownThemeError(TermfolioError, ValueError):
    """Raised when a theme id is outside the preset set."""


class CellFetchError(TermfolioError):
    """Raised by fetchers when a background request cannot produce a payload."""


def error_summary(exc: TermfolioError) -> str:
    segments = [str(exc)]
    for key, value in sorted(exc.details.items()):
        if value in ("", None):
            continue
        segments.append("{0}={1}".format(key, value))
    return " | ".join(segments)
