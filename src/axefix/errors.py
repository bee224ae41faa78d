"""Audit error hierarchy.

Every fatal failure carries the audit phase it happened in and, where one
exists, the underlying exception, so the CLI can tell the user what broke
and what to do about it.
"""

from __future__ import annotations


class AuditError(Exception):
    """Base class for fatal audit failures."""

    def __init__(
        self,
        message: str,
        *,
        phase: str = "",
        cause: BaseException | None = None,
        recovery_suggestions: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.phase = phase
        self.cause = cause
        self.recovery_suggestions = recovery_suggestions or []

    def get_actionable_message(self) -> str:
        out = f"[{self.phase}] {self.message}" if self.phase else self.message
        if self.cause is not None:
            out += f"\nCause: {type(self.cause).__name__}: {self.cause}"
        if self.recovery_suggestions:
            suggestions = "\n".join(f"  - {s}" for s in self.recovery_suggestions)
            out += f"\n\nRecovery suggestions:\n{suggestions}"
        return out

    def __str__(self) -> str:
        return self.get_actionable_message()


class BrowserLaunchError(AuditError):
    """The automation driver is missing or the browser failed to start."""

    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__(
            "Could not launch the browser",
            phase="launch",
            cause=cause,
            recovery_suggestions=[
                "Install the browser binaries: playwright install chromium",
                "On Linux CI images also run: playwright install-deps chromium",
            ],
        )


class AuditPhaseError(AuditError):
    """Navigation or evaluation failed; the session was still released."""


class AuditTimeoutError(AuditPhaseError):
    """The overall audit budget ran out."""

    def __init__(self, phase: str, timeout_ms: int) -> None:
        super().__init__(
            f"Audit exceeded its {timeout_ms} ms budget",
            phase=phase,
            recovery_suggestions=[
                "Raise overall_timeout_ms (or --timeout-ms)",
                "Lower keyboard_step_budget or skip the keyboard walk with --no-keyboard",
            ],
        )


class BrowserInteractionError(Exception):
    """A single browser call failed (navigation, script evaluation, key press).

    Raised by ``BrowserSession``; the orchestrator turns it into an
    ``AuditPhaseError`` and the focus walker into an aborted walk.
    """
