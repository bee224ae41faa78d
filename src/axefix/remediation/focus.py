"""Focus indicator remediation for elements the keyboard walk flagged."""

from __future__ import annotations

from typing import Iterable

from axefix.schemas.keyboard import FocusStep


def focus_selector(step: FocusStep) -> str:
    """CSS selector for a focus step: its first class, else its tag name."""
    classes = step.class_name.split()
    if classes:
        return f".{classes[0]}"
    return step.tag_name.lower() or "*"


def generate_focus_indicator_fix(step: FocusStep) -> str:
    """Return CSS restoring a visible focus indicator for ``step``'s element."""
    selector = focus_selector(step)
    return f"""\
/* Fix: Missing visible focus indicator on {step.label} */
/* WCAG: 2.4.7 Focus Visible Level AA */
/* WCAG: 2.4.13 Focus Appearance Level AAA */

/* Global focus styles */
*:focus {{
  outline: 2px solid #005fcc;
  outline-offset: 2px;
}}

/* Or use focus-visible for keyboard-only focus */
*:focus-visible {{
  outline: 2px solid #005fcc;
  outline-offset: 2px;
}}

/* Hide outline on mouse click but keep it for keyboard users */
*:focus:not(:focus-visible) {{
  outline: none;
}}

/* Specific element fix */
{selector}:focus,
{selector}:focus-visible {{
  outline: 2px solid #005fcc;
  outline-offset: 2px;
  /* Alternative for rounded elements */
  box-shadow: 0 0 0 3px rgba(0, 95, 204, 0.5);
}}

/* Forced colors / high contrast mode */
@media (forced-colors: active) {{
  {selector}:focus {{
    outline: 3px solid CanvasText;
  }}
}}
"""


def focus_fixes(steps: Iterable[FocusStep]) -> list[str]:
    """One fix per distinct selector, in first-seen order."""
    seen: set[str] = set()
    out: list[str] = []
    for step in steps:
        selector = focus_selector(step)
        if selector in seen:
            continue
        seen.add(selector)
        out.append(generate_focus_indicator_fix(step))
    return out
