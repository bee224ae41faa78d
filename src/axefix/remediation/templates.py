"""Rule-driven fix generation: turns an axe violation into copy-paste remediation.

Each registered template is a pure function of the violation's first affected
node (markup, canonical selector, rule data). Rules without a template fall
back to a generic "manual fix" block built from the violation itself.
Nothing here touches the browser, so these functions are safe to call from
any thread.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, NamedTuple

from axefix.schemas.violations import Fix, Violation

PLACEHOLDER = "unknown"

# Shared CSS for the "visually hidden text" remediation pattern.
VISUALLY_HIDDEN_CSS = """\
.visually-hidden {
  position: absolute;
  width: 1px;
  height: 1px;
  padding: 0;
  margin: -1px;
  overflow: hidden;
  clip: rect(0, 0, 0, 0);
  white-space: nowrap;
  border: 0;
}"""

_CRITERION_TAG = re.compile(r"^wcag(\d)(\d)(\d+)$")
_LEVEL_TAG = re.compile(r"^wcag2\d?(a{1,3})$")
_ID_ATTR = re.compile(r'\bid="([^"]+)"')
_HREF_ATTR = re.compile(r'\bhref="([^"]*)"')
_TYPE_ATTR = re.compile(r'\btype="([^"]+)"')


class _Node(NamedTuple):
    html: str
    selector: str
    data: Mapping[str, Any]


def _first_node(violation: Violation) -> _Node:
    if not violation.nodes:
        return _Node(html="", selector="", data={})
    node = violation.nodes[0]
    return _Node(html=node.html, selector=node.selector, data=node.data)


def _text(value: object) -> str:
    """Render a possibly-missing value, degrading to the placeholder."""
    if value is None or value == "":
        return PLACEHOLDER
    return str(value)


def _data(node: _Node, *keys: str) -> str:
    for key in keys:
        value = node.data.get(key)
        if value not in (None, ""):
            return str(value)
    return PLACEHOLDER


def _selector(node: _Node) -> str:
    return node.selector or PLACEHOLDER


def _markup(node: _Node) -> str:
    return node.html or f"<!-- markup {PLACEHOLDER} -->"


def _attr(pattern: re.Pattern[str], html: str, default: str) -> str:
    match = pattern.search(html)
    return match.group(1) if match and match.group(1) else default


def criteria_from_tags(tags: Iterable[str]) -> list[str]:
    """Turn axe tags into human criterion citations.

    ``["wcag2aa", "wcag143"]`` → ``["1.4.3 (Level AA)"]``.
    """
    tags = list(tags)
    level = ""
    for tag in tags:
        match = _LEVEL_TAG.match(tag)
        if match:
            level = match.group(1).upper()
            break
    out: list[str] = []
    for tag in tags:
        match = _CRITERION_TAG.match(tag)
        if match:
            number = ".".join(match.groups())
            out.append(f"{number} (Level {level})" if level else number)
    return out


# ---------------------------------------------------------------------------
# Contrast
# ---------------------------------------------------------------------------


def _contrast_fix(node: _Node, *, criterion: str, normal: str, large: str) -> str:
    selector = _selector(node)
    ratio = _data(node, "ratio", "contrastRatio")
    fg = _data(node, "fgColor")
    bg = _data(node, "bgColor")
    return f"""\
/* Fix: Insufficient color contrast */
/* Current ratio: {ratio} (required: {normal} for normal text, {large} for large text) */
/* Measured colors: foreground {fg}, background {bg} */
/* WCAG: {criterion} */
/* Element: {selector} */
/* The right choice depends on the design; any one option below can meet the ratio. */

/* Option 1: Darken text color */
{selector} {{
  color: #1a1a1a;
}}

/* Option 2: Lighten background */
{selector} {{
  background-color: #ffffff;
}}

/* Option 3: Adjust both */
{selector} {{
  color: #333333;
  background-color: #fafafa;
}}
"""


def _color_contrast(node: _Node) -> str:
    return _contrast_fix(
        node, criterion="1.4.3 Contrast (Minimum) Level AA", normal="4.5:1", large="3:1",
    )


def _color_contrast_enhanced(node: _Node) -> str:
    return _contrast_fix(
        node, criterion="1.4.6 Contrast (Enhanced) Level AAA", normal="7:1", large="4.5:1",
    )


# ---------------------------------------------------------------------------
# Missing accessible names
# ---------------------------------------------------------------------------


def _label(node: _Node) -> str:
    input_id = _attr(_ID_ATTR, node.html, "input-id")
    input_type = _attr(_TYPE_ATTR, node.html, "text")
    return f"""\
<!-- Fix: Form input missing label -->
<!-- WCAG: 1.3.1 Info and Relationships Level A, 4.1.2 Name, Role, Value Level A -->
<!-- Element: {_selector(node)} -->
<!-- Before: -->
{_markup(node)}

<!-- Option 1: Explicit label association -->
<label for="{input_id}">Descriptive Label Text</label>
<input type="{input_type}" id="{input_id}" name="field-name" />

<!-- Option 2: ARIA labelling (no visible label) -->
<input type="{input_type}" id="{input_id}" aria-label="Descriptive label for screen readers" />

<!-- Option 2b: Point at existing visible text -->
<span id="{input_id}-label">Descriptive Label Text</span>
<input type="{input_type}" id="{input_id}" aria-labelledby="{input_id}-label" />

<!-- Option 3: Visually hidden label text -->
<label for="{input_id}"><span class="visually-hidden">Descriptive Label Text</span></label>
<input type="{input_type}" id="{input_id}" />

<style>
{VISUALLY_HIDDEN_CSS}
</style>
"""


def _select_name(node: _Node) -> str:
    select_id = _attr(_ID_ATTR, node.html, "select-id")
    return f"""\
<!-- Fix: Select element has no accessible name -->
<!-- WCAG: 1.3.1 Info and Relationships Level A, 4.1.2 Name, Role, Value Level A -->
<!-- Element: {_selector(node)} -->
<!-- Before: -->
{_markup(node)}

<!-- Option 1: Explicit label association -->
<label for="{select_id}">Choose an option</label>
<select id="{select_id}">...</select>

<!-- Option 2: ARIA labelling -->
<select id="{select_id}" aria-label="Choose an option">...</select>

<!-- Option 3: Visually hidden label text -->
<label for="{select_id}" class="visually-hidden">Choose an option</label>
<select id="{select_id}">...</select>

<style>
{VISUALLY_HIDDEN_CSS}
</style>
"""


def _button_name(node: _Node) -> str:
    return f"""\
<!-- Fix: Button has no accessible name -->
<!-- WCAG: 4.1.2 Name, Role, Value Level A -->
<!-- Element: {_selector(node)} -->
<!-- Before: -->
{_markup(node)}

<!-- Option 1: Add visible text -->
<button type="button">
  Submit form
</button>

<!-- Option 2: Add aria-label (icon-only buttons) -->
<button type="button" aria-label="Submit form">
  <svg aria-hidden="true" focusable="false"><!-- icon --></svg>
</button>

<!-- Option 3: Use aria-labelledby -->
<button type="button" aria-labelledby="btn-label">
  <span id="btn-label" hidden>Submit form</span>
  <svg aria-hidden="true" focusable="false"><!-- icon --></svg>
</button>

<!-- Option 4: Visually hidden text -->
<button type="button">
  <span class="visually-hidden">Submit form</span>
  <svg aria-hidden="true" focusable="false"><!-- icon --></svg>
</button>

<style>
{VISUALLY_HIDDEN_CSS}
</style>
"""


def _input_button_name(node: _Node) -> str:
    input_type = _attr(_TYPE_ATTR, node.html, "submit")
    return f"""\
<!-- Fix: Input button has no discernible text -->
<!-- WCAG: 4.1.2 Name, Role, Value Level A -->
<!-- Element: {_selector(node)} -->
<!-- Before: -->
{_markup(node)}

<!-- Option 1: Give the button a value -->
<input type="{input_type}" value="Send message" />

<!-- Option 2: ARIA labelling -->
<input type="{input_type}" aria-label="Send message" />

<!-- Option 3: Replace with a <button> carrying visually hidden text -->
<button type="{input_type}">
  <span class="visually-hidden">Send message</span>
  <svg aria-hidden="true" focusable="false"><!-- icon --></svg>
</button>

<style>
{VISUALLY_HIDDEN_CSS}
</style>
"""


def _link_name(node: _Node) -> str:
    href = _attr(_HREF_ATTR, node.html, "/destination")
    return f"""\
<!-- Fix: Link has no accessible name -->
<!-- WCAG: 2.4.4 Link Purpose (In Context) Level A, 4.1.2 Name, Role, Value Level A -->
<!-- Element: {_selector(node)} -->
<!-- Before: -->
{_markup(node)}

<!-- Option 1: Add descriptive visible text -->
<a href="{href}">
  Descriptive link text
</a>

<!-- Option 2: aria-label (icon links) -->
<a href="{href}" aria-label="View user profile">
  <svg aria-hidden="true" focusable="false"><!-- icon --></svg>
</a>

<!-- Option 3: Visually hidden text -->
<a href="{href}">
  <svg aria-hidden="true" focusable="false"><!-- icon --></svg>
  <span class="visually-hidden">View user profile</span>
</a>

<style>
{VISUALLY_HIDDEN_CSS}
</style>
"""


# ---------------------------------------------------------------------------
# Text alternatives and language
# ---------------------------------------------------------------------------


def _image_alt(node: _Node) -> str:
    html = node.html or f'<img src="{PLACEHOLDER}">'
    described = re.sub(r"\s*/?>", ' alt="[Describe the image content and purpose]" />', html, count=1)
    decorative = re.sub(r"\s*/?>", ' alt="" role="presentation" />', html, count=1)
    return f"""\
<!-- Fix: Image missing alternative text -->
<!-- WCAG: 1.1.1 Non-text Content Level A -->
<!-- Element: {_selector(node)} -->
<!-- Before: -->
{html}

<!-- After: Add descriptive alt text -->
{described}

<!-- For decorative images only: -->
{decorative}
"""


def _html_lang(node: _Node) -> str:
    return f"""\
<!-- Fix: Page language missing or invalid -->
<!-- WCAG: 3.1.1 Language of Page Level A -->
<!-- Before: -->
{_markup(node)}

<!-- After: Add a valid lang attribute -->
<html lang="en">
<!-- Use the primary language code of the page: en, es, fr, de, zh, ... -->
"""


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------


def _landmark_one_main(node: _Node) -> str:
    return """\
<!-- Fix: Page should have one main landmark -->
<!-- WCAG: 1.3.1 Info and Relationships Level A -->

<!-- Before (incorrect): primary content in a generic container -->
<body>
  <div class="header">...</div>
  <div class="content">
    <!-- Primary page content -->
  </div>
</body>

<!-- After (correct): exactly one <main> -->
<body>
  <header>...</header>
  <nav>...</nav>

  <main id="main-content">
    <!-- Primary page content -->
  </main>

  <footer>...</footer>
</body>
"""


def _region(node: _Node) -> str:
    return f"""\
<!-- Fix: Content not contained in a landmark region -->
<!-- WCAG: 1.3.1 Info and Relationships Level A -->
<!-- Element: {_selector(node)} -->

<!-- Before (incorrect): content outside any landmark -->
{_markup(node)}

<!-- After (correct): wrap content in landmarks -->
<header>
  <!-- Site header content -->
</header>

<nav aria-label="Main">
  <!-- Navigation links -->
</nav>

<main>
  <!-- Primary content -->
</main>

<aside>
  <!-- Secondary content -->
</aside>

<footer>
  <!-- Footer content -->
</footer>
"""


def _heading_order(node: _Node) -> str:
    return f"""\
<!-- Fix: Heading levels should only increase by one -->
<!-- WCAG: 1.3.1 Info and Relationships Level A -->
<!-- Element: {_selector(node)} -->
<!-- Offending heading: -->
{_markup(node)}

<!-- Before (incorrect): -->
<h1>Page Title</h1>
<h3>Subsection</h3>  <!-- Skipped h2 -->

<!-- After (correct): -->
<h1>Page Title</h1>
<h2>Section</h2>
<h3>Subsection</h3>

/* Style headings with classes, not by picking a smaller level */
"""


def _focus_order_semantics(node: _Node) -> str:
    return f"""\
<!-- Fix: Focus order should follow the logical reading order -->
<!-- WCAG: 2.4.3 Focus Order Level A -->
<!-- Element: {_selector(node)} -->

<!-- Before (incorrect): positive tabindex reorders focus -->
<button tabindex="3">Third</button>
<button tabindex="1">First</button>
<button tabindex="2">Second</button>

<!-- After (correct): rely on DOM order -->
<button>First</button>
<button>Second</button>
<button>Third</button>

<!-- Custom focusable elements need a role and tabindex="0" -->
<div role="button" tabindex="0">Custom Button</div>

<!-- tabindex="-1" for programmatic focus only -->
<div tabindex="-1" id="error-message">Error!</div>
"""


def _tabindex(node: _Node) -> str:
    html = node.html or f'<div tabindex="1">{PLACEHOLDER}</div>'
    fixed = re.sub(r'tabindex="\d+"', 'tabindex="0"', html)
    return f"""\
<!-- Fix: Element has a tabindex greater than zero -->
<!-- WCAG: 2.4.3 Focus Order Level A -->
<!-- Element: {_selector(node)} -->

<!-- Before (incorrect): -->
{html}

<!-- After (correct): join the natural tab order -->
{fixed}

<!-- If the element should not be reachable by Tab, use tabindex="-1" instead -->
"""


# ---------------------------------------------------------------------------
# Size / target
# ---------------------------------------------------------------------------


def _target_size(node: _Node) -> str:
    selector = _selector(node)
    minimum = _data(node, "minSize")
    if minimum == PLACEHOLDER:
        minimum = "24"
    width = _data(node, "width")
    height = _data(node, "height")
    return f"""\
/* Fix: Target size too small */
/* WCAG: 2.5.8 Target Size (Minimum) Level AA, minimum {minimum}x{minimum} CSS pixels */
/* WCAG: 2.5.5 Target Size (Enhanced) Level AAA, 44x44 CSS pixels */
/* Measured size: {width}x{height} */

/* Before: */
{selector} {{
  width: 16px;
  height: 16px;
}}

/* After: meet the {minimum}x{minimum}px minimum */
{selector} {{
  min-width: {minimum}px;
  min-height: {minimum}px;
}}

/* Better: 44x44px for comfortable touch */
{selector} {{
  min-width: 44px;
  min-height: 44px;
}}

/* Alternative: keep the visual size, grow the hit area with padding */
{selector} {{
  padding: 4px;
}}
"""


TemplateFn = Callable[[_Node], str]

TEMPLATES: Mapping[str, TemplateFn] = MappingProxyType({
    "color-contrast": _color_contrast,
    "color-contrast-enhanced": _color_contrast_enhanced,
    "label": _label,
    "select-name": _select_name,
    "button-name": _button_name,
    "input-button-name": _input_button_name,
    "link-name": _link_name,
    "image-alt": _image_alt,
    "html-has-lang": _html_lang,
    "html-lang-valid": _html_lang,
    "landmark-one-main": _landmark_one_main,
    "region": _region,
    "heading-order": _heading_order,
    "focus-order-semantics": _focus_order_semantics,
    "tabindex": _tabindex,
    "target-size": _target_size,
})


def _generic_fix(violation: Violation, node: _Node) -> str:
    criteria = criteria_from_tags(violation.tags)
    cited = ", ".join(criteria) if criteria else f"{PLACEHOLDER} (see help link)"
    return f"""\
/* Manual fix required for: {violation.rule_id} */
/* Description: {_text(violation.description)} */
/* Help: {_text(violation.help_url)} */
/* Impact: {_text(violation.impact)} */
/* WCAG: {cited} */

/* Affected element ({_selector(node)}): */
{_markup(node)}

/* Recommendation: */
/* {_text(violation.help)} */
"""


def generate_fix(violation: Violation) -> str:
    """Return copy-paste remediation text for ``violation``.

    Deterministic: the same violation always renders the same text. Unknown
    rule ids get the generic template; missing node data renders as
    ``unknown`` rather than raising.
    """
    node = _first_node(violation)
    template = TEMPLATES.get(violation.rule_id)
    if template is None:
        return _generic_fix(violation, node)
    return template(node)


def build_fix(violation: Violation) -> Fix:
    """Wrap ``generate_fix`` output with the violation's report metadata."""
    return Fix(
        rule_id=violation.rule_id,
        issue=violation.description or violation.help or violation.rule_id,
        impact=violation.impact or PLACEHOLDER,
        wcag_criteria=violation.wcag_tags,
        affected_element_count=len(violation.nodes),
        help_url=violation.help_url,
        fix_text=generate_fix(violation),
    )


def build_fixes(violations: Iterable[Violation]) -> list[Fix]:
    """Build fixes for every violation, most severe first (stable within a level)."""
    ordered = sorted(violations, key=lambda v: v.severity_rank)
    return [build_fix(v) for v in ordered]
