# engine/markup/highlighter.py
"""
Code block highlighting for protected ``[code]`` and fenced regions.

Language resolution:
1. An explicit language tag always wins
2. Directory-tree listings are forced to plain text
3. A keyword heuristic guesses the language, falling back to plain text

Highlighting is delegated to a highlighter object exposing
``async highlight(code, language) -> str``. The default implementation uses
Pygments; its output is reduced to ``<span class>`` markup with bleach.
"""

import asyncio
import html
import logging
import re
from typing import Optional

import bleach
from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from .utils import escape_code, escape_html

logger = logging.getLogger(__name__)

PLAIN_LANGUAGES = {"plain", "plaintext", "text", "txt"}

LANGUAGE_LABELS = {
    # Classic languages
    "cs": "C#",
    "csharp": "C#",
    "cpp": "C++",
    "c": "C",
    "js": "JavaScript",
    "javascript": "JavaScript",
    "ts": "TypeScript",
    "typescript": "TypeScript",
    "py": "Python",
    "python": "Python",
    "rs": "Rust",
    "rust": "Rust",
    "go": "Go",
    "java": "Java",
    "php": "PHP",
    # Web
    "html": "HTML",
    "xml": "XML",
    "css": "CSS",
    "json": "JSON",
    "sql": "SQL",
    "tsx": "React (TSX)",
    "jsx": "React (JSX)",
    # Scripts and configs
    "sh": "Bash",
    "bash": "Bash",
    "zsh": "Bash",
    "shell": "Shell",
    "yml": "YAML",
    "yaml": "YAML",
    "md": "Markdown",
    "markdown": "Markdown",
    # Others
    "rb": "Ruby",
    "ruby": "Ruby",
    "kt": "Kotlin",
    "kotlin": "Kotlin",
    "swift": "Swift",
    "plaintext": "Text / Structure",
    "text": "Plain Text",
    "txt": "Plain Text",
    "plain": "Plain Text",
}

# Names produced by the heuristic that Pygments knows under another alias
LEXER_ALIASES = {
    "markup": "html",
    "shell": "bash",
}

_TREE_GLYPHS_RE = re.compile(r"[├└│]")
_TREE_ASCII_RE = re.compile(r"^\s*[+|`\\]--", re.MULTILINE)
_TREE_PATH_RE = re.compile(r"^\s*[./].*/$", re.MULTILINE)

_HTML_OPEN_RE = re.compile(r"<\w+[^>]*>")
_HTML_CLOSE_RE = re.compile(r"</\w+>")
_JSON_START_RE = re.compile(r"^\s*[{\[]")
_JSON_END_RE = re.compile(r"[}\]]\s*$")
_SQL_RE = re.compile(r"\b(SELECT|FROM|WHERE|INSERT|UPDATE|DELETE|CREATE|TABLE)\b", re.IGNORECASE)
_CSS_RULE_RE = re.compile(r"\{[^}]*:[^}]*\}")
_SHELL_PROMPT_RE = re.compile(r"^\$\s")


def looks_like_tree(code: str) -> bool:
    """Detect directory-tree listings (box drawing, ASCII markers, bare paths)."""
    return bool(
        _TREE_GLYPHS_RE.search(code)
        or _TREE_ASCII_RE.search(code)
        or _TREE_PATH_RE.search(code)
    )


def detect_language(code: str) -> str:
    """
    Guess the language of an untagged code block.

    Checks run in a fixed priority order; the first match wins.
    """
    # Rust
    if any(token in code for token in ("fn main()", "let mut ", "impl ", "#[derive", "println!")):
        return "rust"
    # Go
    if (
        any(token in code for token in ("package main", "func main()", "fmt.Println"))
        or ("func " in code and ":=" in code)
    ):
        return "go"
    # Python
    if "def __init__" in code or "if __name__ ==" in code or ("def " in code and "self" in code):
        return "python"
    # JavaScript / TypeScript
    if any(token in code for token in ("const ", "let ", "function ", "=>", "console.log")):
        return "javascript"
    # HTML / XML
    if _HTML_OPEN_RE.search(code) and _HTML_CLOSE_RE.search(code):
        return "markup"
    # JSON
    if _JSON_START_RE.search(code) and _JSON_END_RE.search(code):
        return "json"
    # SQL
    if _SQL_RE.search(code):
        return "sql"
    # CSS
    if _CSS_RULE_RE.search(code):
        return "css"
    # Bash
    if "#!/bin/bash" in code or "echo " in code or _SHELL_PROMPT_RE.search(code):
        return "bash"

    return "plain"


def resolve_language(code: str, language: Optional[str] = None) -> str:
    """Pick the language for a code block: explicit tag, tree check, heuristic."""
    if language and language.strip():
        return language.strip().lower()
    if looks_like_tree(code):
        return "plain"
    return detect_language(code)


def language_label(language: str) -> str:
    if language in LANGUAGE_LABELS:
        return LANGUAGE_LABELS[language]
    return language[:1].upper() + language[1:]


class PygmentsHighlighter:
    """Default code highlighter backed by Pygments."""

    allowed_tags = {"span", "br"}
    allowed_attributes = {"span": ["class"]}

    def __init__(self, formatter: Optional[HtmlFormatter] = None):
        self.formatter = formatter or HtmlFormatter(nowrap=True)

    def get_lexer(self, language: str):
        name = LEXER_ALIASES.get(language, language)
        try:
            return get_lexer_by_name(name, stripnl=False)
        except ClassNotFound:
            logger.debug(f"No Pygments lexer for '{language}', using plain text")
            return TextLexer()

    def highlight_sync(self, code: str, language: str) -> str:
        highlighted = pygments_highlight(code, self.get_lexer(language), self.formatter)
        # Only class-carrying spans survive, as in the formatter's own output
        return bleach.clean(
            highlighted.rstrip("\n"),
            tags=self.allowed_tags,
            attributes=self.allowed_attributes,
            strip=True,
        )

    async def highlight(self, code: str, language: str) -> str:
        # Pygments and bleach run in a worker thread
        return await asyncio.to_thread(self.highlight_sync, code, language)


async def highlight_code_block(code: str, language: Optional[str], highlighter) -> str:
    """
    Render one protected code region to HTML.

    Never raises: a failing highlighter degrades the block to escaped plain
    text in a minimal wrapper.
    """
    trimmed = code.strip()
    if not trimmed:
        return ""

    try:
        detected = resolve_language(trimmed, language)

        if detected in PLAIN_LANGUAGES:
            highlighted = escape_code(trimmed)
            detected = "plain"
        else:
            # Highlighters escape their input themselves
            highlighted = await highlighter.highlight(html.unescape(trimmed), detected)

        label = language_label(detected)
        return (
            '<div class="code-wrapper">'
            f'<div class="mv-code-lang-label">{escape_html(label)}</div>'
            f'<code class="language-{escape_html(detected)}">{highlighted}</code>'
            "</div>"
        )
    except Exception as e:
        logger.warning(f"Code highlighting failed, falling back to plain text: {e}", exc_info=True)
        return plain_code_block(trimmed)


def plain_code_block(code: str) -> str:
    """Minimal code container used when highlighting is unavailable."""
    return f'<div class="code-wrapper"><code>{escape_code(code.strip())}</code></div>'
