"""Text Transform — Chinese script conversion (zhconv) and BBCode rendering (bbcode).

Invariants:
    - convert_script: zh_CN → Simplified, zh_TW → Traditional, None → identity
    - render_markup returns Ok(html) or ContentFormatFailure(detail); it never raises
      for bad user markup
    - A tag is accepted only if the renderer knows it; non-standalone tags must be
      closed in LIFO order

Design Decisions:
    - The bbcode renderer is lenient (unknown or unclosed tags pass through as text),
      so tag structure is checked here first against the renderer's own tag registry
    - Tags that the renderer closes implicitly (standalone, newline_closes,
      same_tag_closes, e.g. [*] and [hr]) are exempt from the closing rule
"""

import logging
import re

import bbcode
import zhconv

from comic_site.core.domain_types import Locale
from comic_site.core.outcomes import ContentFormatFailure, Ok

logger = logging.getLogger(__name__)

_ZHCONV_TARGETS: dict[Locale, str] = {
    Locale.ZH_CN: "zh-cn",
    Locale.ZH_TW: "zh-tw",
}

_TAG_PATTERN = re.compile(r"\[(/?)([A-Za-z*][A-Za-z0-9*]*)(?:[= ][^\[\]]*)?\]")
_CODE_CLOSE = re.compile(r"\[/code\]", re.IGNORECASE)


class ChineseBBCodeTransformer:
    """TextTransformer backed by zhconv and the bbcode package."""

    def __init__(self, parser: bbcode.Parser | None = None):
        self.parser = parser or bbcode.Parser()

    def convert_script(self, text: str, locale: Locale | None) -> str:
        if locale is None or not text:
            return text
        return zhconv.convert(text, _ZHCONV_TARGETS[locale])

    def render_markup(
        self, source: str, locale: Locale | None,
    ) -> Ok[str] | ContentFormatFailure:
        problem = self.check_structure(source)
        if problem is not None:
            return ContentFormatFailure(problem)
        return Ok(self.parser.format(source))

    def _closes_implicitly(self, tag: str) -> bool:
        options = self.parser.recognized_tags[tag][1]
        return any(
            getattr(options, flag, False)
            for flag in ("standalone", "newline_closes", "same_tag_closes")
        )

    def check_structure(self, source: str) -> str | None:
        """Return a description of the first structural problem, or None."""
        known = self.parser.recognized_tags
        stack: list[str] = []
        pos = 0
        while (match := _TAG_PATTERN.search(source, pos)) is not None:
            pos = match.end()
            closing, tag = match.group(1) == "/", match.group(2).lower()
            if tag not in known:
                return f"Unknown tag [{'/' if closing else ''}{tag}]"
            if self._closes_implicitly(tag):
                continue
            if not closing:
                if tag == "code":
                    # body is literal text up to the first [/code]
                    end = _CODE_CLOSE.search(source, pos)
                    if end is None:
                        return "Unclosed tag [code]"
                    pos = end.end()
                    continue
                stack.append(tag)
            elif not stack:
                return f"Unexpected closing tag [/{tag}]"
            elif stack[-1] != tag:
                return f"Tag [{stack[-1]}] closed by [/{tag}]"
            else:
                stack.pop()
        if stack:
            return f"Unclosed tag [{stack[-1]}]"
        return None
