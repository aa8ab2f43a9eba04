# src/todo_manager/backend/errors.py

from __future__ import annotations

from typing import Any

import httpx


class BackendError(RuntimeError):
    """
    Failure reported by the hosted backend (auth or table API).

    `message` is human-readable and safe to show to the user.
    `details`, `hint` and `code` are passed through from PostgREST/GoTrue when present.
    """

    def __init__(
            self,
            message: str,
            *,
            details: str | None = None,
            hint: str | None = None,
            code: str | None = None,
            status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.hint = hint
        self.code = code
        self.status = status

    @classmethod
    def from_response(cls, response: httpx.Response) -> BackendError:
        body: Any
        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            text = response.text.strip()
            return cls(
                text or f"HTTP {response.status_code}",
                status=response.status_code,
            )

        message = (
            body.get("message")
            or body.get("msg")
            or body.get("error_description")
            or body.get("error")
            or f"HTTP {response.status_code}"
        )
        code = body.get("code") if body.get("code") is not None else body.get("error_code")
        return cls(
            str(message),
            details=_opt_str(body.get("details")),
            hint=_opt_str(body.get("hint")),
            code=_opt_str(code),
            status=response.status_code,
        )

    def __repr__(self) -> str:
        return (
            f"BackendError(message={self.message!r}, status={self.status}, "
            f"code={self.code!r}, details={self.details!r})"
        )


def _opt_str(v: Any) -> str | None:
    return None if v is None else str(v)
