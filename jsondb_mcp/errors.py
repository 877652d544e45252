"""Upstream failures and the per-operation error decision tables.

Every tool owns an ErrorTable: an ordered list of status rules tried in
order, with a generic fallback code when none match. The resulting
(code, message, suggestion) triple is what agents see.
"""

from dataclasses import dataclass
from string import Template
from typing import Optional


class UpstreamError(Exception):
    """Raised when the jsondb.cloud API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str, path: str):
        self.status_code = status_code
        self.message = message
        self.path = path
        super().__init__(f"jsondb.cloud API {status_code} on {path}: {message}")


def _render(template: str, context: dict) -> str:
    return Template(template).safe_substitute({k: str(v) for k, v in context.items()})


def status_of(exc: BaseException) -> Optional[int]:
    if isinstance(exc, UpstreamError):
        return exc.status_code
    return None


def message_of(exc: BaseException) -> str:
    """Upstream-provided message, or the exception text for network errors."""
    if isinstance(exc, UpstreamError):
        return exc.message
    return str(exc)


@dataclass(frozen=True)
class ErrorRule:
    """One row of a decision table.

    ``message`` and ``suggestion`` are ``$name`` templates filled from the
    call's context. With ``prefer_upstream`` the upstream message wins over
    the template whenever the API sent one.
    """

    status: int
    code: str
    message: str
    suggestion: str
    prefer_upstream: bool = False

    def matches(self, status: Optional[int]) -> bool:
        return status == self.status


@dataclass(frozen=True)
class ErrorTable:
    """Ordered rules plus the fallback used when no rule matches."""

    code: str
    message: str
    suggestion: str
    rules: tuple = ()

    def classify(self, exc: BaseException, **context) -> tuple[str, str, str]:
        status = status_of(exc)
        upstream = message_of(exc)
        for rule in self.rules:
            if rule.matches(status):
                if rule.prefer_upstream and upstream:
                    message = upstream
                else:
                    message = _render(rule.message, context)
                return rule.code, message, _render(rule.suggestion, context)
        return (
            self.code,
            upstream or _render(self.message, context),
            _render(self.suggestion, context),
        )
