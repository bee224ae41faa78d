"""Conformance level → axe-core rule tag resolution."""

from __future__ import annotations

from types import MappingProxyType

from axefix.schemas.config import ConformanceLevel

# Tags added at each level; a level includes every tag of the levels below it.
_LEVEL_TAGS = MappingProxyType({
    ConformanceLevel.A: ("wcag2a", "wcag21a"),
    ConformanceLevel.AA: ("wcag2aa", "wcag21aa", "wcag22aa"),
    ConformanceLevel.AAA: ("wcag2aaa", "wcag21aaa"),
})

_LEVEL_ORDER = (ConformanceLevel.A, ConformanceLevel.AA, ConformanceLevel.AAA)


def resolve_tags(level: ConformanceLevel | str) -> list[str]:
    """Return the ordered axe tag list to evaluate for ``level``.

    Levels are cumulative: AA conformance requires passing the A criteria
    too, so ``resolve_tags("AA")`` starts with everything ``"A"`` returns.

    Raises ``ValueError`` for anything other than A, AA or AAA.
    """
    level = ConformanceLevel(level)
    tags: list[str] = []
    for current in _LEVEL_ORDER:
        tags.extend(_LEVEL_TAGS[current])
        if current is level:
            break
    return tags
