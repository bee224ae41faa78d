"""Keyboard focus walker: Tab through a live page and record what gets focus."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from pydantic import ValidationError

from axefix.errors import BrowserInteractionError
from axefix.schemas.keyboard import FocusStep, KeyboardWalkResult, WalkState

logger = logging.getLogger(__name__)

DEFAULT_STEP_BUDGET = 30

# Snapshot of document.activeElement. Elements without an id are stamped with a
# data attribute so the same element keeps the same identity across steps.
ACTIVE_ELEMENT_SCRIPT = """() => {
    const el = document.activeElement;
    if (!el || el === document.body || el === document.documentElement) return null;

    if (!el.id && !el.dataset.axefixFocusKey) {
        window.__axefixFocusSeq = (window.__axefixFocusSeq || 0) + 1;
        el.dataset.axefixFocusKey = 'axefix-' + window.__axefixFocusSeq;
    }

    const styles = window.getComputedStyle(el);
    const hasOutline = styles.outlineStyle !== 'none' && parseFloat(styles.outlineWidth) > 0;
    const hasShadow = styles.boxShadow !== 'none' && styles.boxShadow !== '';
    return {
        tagName: el.tagName,
        id: el.id || '',
        className: typeof el.className === 'string' ? el.className : '',
        text: (el.textContent || '').trim().substring(0, 50),
        hasFocusIndicator: hasOutline || hasShadow,
        identity: el.id || el.dataset.axefixFocusKey
    };
}"""


class KeyboardSession(Protocol):
    async def dispatch_key(self, key: str) -> None: ...

    async def evaluate(self, script: str, arg: Any = None) -> Any: ...


class FocusWalker:
    """Steps focus forward with Tab and watches for traps and missing indicators.

    States move ``idle → stepping → trapped | exhausted | aborted``:

    - **trapped**: the element focused after a Tab is the same (non-empty
      identity) as the one focused by the press immediately before it. The
      walk stops at once.
    - **exhausted**: the step budget ran out, or with ``stop_on_wrap`` focus
      came back around to the first element.
    - **aborted**: the session failed mid-walk. The steps gathered so far
      are still returned.

    Tab presses that leave focus on ``<body>`` count against the budget but
    record no step, so ``sequence_index`` stays gapless.
    """

    def __init__(
        self,
        session: KeyboardSession,
        *,
        step_budget: int = DEFAULT_STEP_BUDGET,
        stop_on_wrap: bool = False,
    ) -> None:
        if step_budget <= 0:
            raise ValueError("step_budget must be positive")
        self._session = session
        self.step_budget = step_budget
        self.stop_on_wrap = stop_on_wrap
        self.state = WalkState.IDLE
        self._steps: list[FocusStep] = []
        self._missing: list[FocusStep] = []
        self._traps: list[FocusStep] = []
        self._presses = 0
        self._abort_reason = ""
        # Identity focused by the previous Tab press; empty after a press lands on <body>
        self._last_identity = ""

    async def walk(self) -> KeyboardWalkResult:
        """Run the walk to a terminal state and return the result."""
        if self.state is not WalkState.IDLE:
            raise RuntimeError("FocusWalker instances walk only once")
        self.state = WalkState.STEPPING

        while self.state is WalkState.STEPPING:
            if self._presses >= self.step_budget:
                self.state = WalkState.EXHAUSTED
                break
            try:
                snapshot = await self._press_tab()
            except BrowserInteractionError as exc:
                logger.warning("Keyboard walk aborted after %d step(s): %s", len(self._steps), exc)
                self._abort_reason = str(exc)
                self.state = WalkState.ABORTED
                break
            if snapshot is None:
                self._last_identity = ""
            else:
                self._record(snapshot)

        logger.info(
            "Keyboard walk %s: %d step(s), %d missing indicator(s), %d trap(s)",
            self.state.value, len(self._steps), len(self._missing), len(self._traps),
        )
        return KeyboardWalkResult(
            state=self.state,
            steps_taken=self._presses,
            tab_order=list(self._steps),
            missing_focus_indicators=list(self._missing),
            focus_traps=list(self._traps),
            abort_reason=self._abort_reason,
        )

    async def _press_tab(self) -> dict[str, Any] | None:
        await self._session.dispatch_key("Tab")
        self._presses += 1
        snapshot = await self._session.evaluate(ACTIVE_ELEMENT_SCRIPT)
        return snapshot if isinstance(snapshot, dict) else None

    def _record(self, snapshot: dict[str, Any]) -> None:
        try:
            step = FocusStep.model_validate({**snapshot, "sequence_index": len(self._steps)})
        except ValidationError as exc:
            logger.debug("Ignoring unreadable focus snapshot: %s", exc)
            self._last_identity = ""
            return
        if not step.identity:
            step = step.model_copy(update={"identity": step.element_id})

        previous_identity = self._last_identity
        self._last_identity = step.identity
        first = self._steps[0] if self._steps else None
        self._steps.append(step)
        if not step.has_focus_indicator:
            self._missing.append(step)

        if step.identity and step.identity == previous_identity:
            logger.debug("Focus trap at %s (step %d)", step.label, step.sequence_index)
            self._traps.append(step)
            self.state = WalkState.TRAPPED
        elif self.stop_on_wrap and first is not None and step.identity and step.identity == first.identity:
            logger.debug("Focus wrapped back to %s", step.label)
            self.state = WalkState.EXHAUSTED
