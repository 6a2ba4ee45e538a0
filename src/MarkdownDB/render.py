"""Markdown body rendering for parsed documents.

Bodies are rendered with ``markdown-it-py`` using the JavaScript-compatible
preset: raw HTML pass-through is disabled, bare URLs are linkified, and soft
line breaks become ``<br>`` tags. Fenced code blocks are highlighted with
Pygments when the fence names a language Pygments knows. Anything else (no
language, an unknown language, or a lexer failure) falls back to the plain
source text so a single odd code block never fails a build.
"""

from __future__ import annotations

from typing import Optional

from markdown_it import MarkdownIt
from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .logging import StructuredLogger, get_logger, log_event

__all__ = [
    "ContentRenderer",
    "highlight_code",
    "render_markdown",
]


def highlight_code(source: str, lang: str) -> Optional[str]:
    """Return Pygments HTML for ``source`` or ``None`` when ``lang`` is unsupported.

    Args:
        source: Raw text of the fenced code block.
        lang: Language tag from the fence info string (may be empty).

    Returns:
        Highlighted HTML spans without a ``<pre>`` wrapper, or ``None`` when the
        language is empty or unknown to Pygments.

    Raises:
        Exception: Whatever the lexer or formatter raise while highlighting;
        :class:`ContentRenderer` turns these into the plain-text fallback.
    """

    if not lang:
        return None
    try:
        lexer = get_lexer_by_name(lang)
    except ClassNotFound:
        return None
    return pygments_highlight(source, lexer, HtmlFormatter(nowrap=True))


class ContentRenderer:
    """Render markdown bodies to HTML with code highlighting and safe fallbacks."""

    def __init__(self, logger: Optional[StructuredLogger] = None) -> None:
        self._logger = logger or get_logger().child(stage="render")
        self._md = MarkdownIt(
            "js-default",
            {
                "html": False,
                "linkify": True,
                "breaks": True,
                "highlight": self._highlight,
            },
        )

    def _highlight(self, source: str, lang: str, attrs: str) -> str:
        """Highlight one fenced block; an empty string selects the plain fallback."""

        try:
            highlighted = highlight_code(source, lang)
        except Exception as exc:
            log_event(
                self._logger,
                "debug",
                "Code block highlighting failed; emitting plain source",
                lang=lang,
                error=str(exc),
            )
            return ""
        if highlighted is None:
            if lang:
                log_event(
                    self._logger,
                    "debug",
                    "Unsupported code block language; emitting plain source",
                    lang=lang,
                )
            return ""
        return highlighted

    def render(self, text: str) -> str:
        """Return the HTML rendering of ``text``."""

        return self._md.render(text)

    __call__ = render


_DEFAULT_RENDERER: Optional[ContentRenderer] = None


def render_markdown(text: str) -> str:
    """Render ``text`` with a lazily constructed shared :class:`ContentRenderer`."""

    global _DEFAULT_RENDERER
    if _DEFAULT_RENDERER is None:
        _DEFAULT_RENDERER = ContentRenderer()
    return _DEFAULT_RENDERER.render(text)
