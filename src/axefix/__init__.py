"""axefix: WCAG audits of live pages with copy-paste fixes.

Example::

    import asyncio
    from axefix import quick_scan

    report = asyncio.run(quick_scan("https://example.com", level="AA"))
    for fix in report.copy_paste_fixes:
        print(fix.fix_text)
"""

from axefix.keyboard.walker import FocusWalker
from axefix.orchestrator import AuditOrchestrator, quick_scan
from axefix.remediation.captions import analyze_captions, generate_caption_fix
from axefix.remediation.focus import generate_focus_indicator_fix
from axefix.remediation.tags import resolve_tags
from axefix.remediation.templates import build_fix, generate_fix
from axefix.schemas.config import AuditConfig, ConformanceLevel
from axefix.shared.browser import check_browser_available, install_instructions

__all__ = [
    "AuditConfig",
    "AuditOrchestrator",
    "ConformanceLevel",
    "FocusWalker",
    "analyze_captions",
    "build_fix",
    "check_browser_available",
    "generate_caption_fix",
    "generate_fix",
    "generate_focus_indicator_fix",
    "install_instructions",
    "quick_scan",
    "resolve_tags",
]
