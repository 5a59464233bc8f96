"""Render Markdown to HTML styled for the chat interface."""

from __future__ import annotations

import re
from typing import Iterable

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock
from markdown_it.rules_core import StateCore
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token

_FOOTNOTES_KEY = "footnote_labels"
_TASK_MARKER = re.compile(r"\[[ xX]\][ \t]+(?=\S)")
_DASHES = re.compile(r"-{2,}")
_EM = "\u2014"
_EN = "\u2013"

_PARAGRAPH_OPEN = '<p class="mb-4 leading-relaxed text-left">'
_CODE_CLOSE = "</code></pre></div>"
_HEADING_CLASSES = {
    1: "text-2xl font-bold mb-4 mt-6 text-gray-900 dark:text-gray-100",
    2: "text-xl font-semibold mb-3 mt-5 text-gray-900 dark:text-gray-100",
    3: "text-lg font-medium mb-2 mt-4 text-gray-900 dark:text-gray-100",
}
_HEADING_DEFAULT = "text-base font-medium mb-2 mt-3 text-gray-900 dark:text-gray-100"
_CELL_OPEN = (
    '<td class="border border-gray-300 dark:border-teal-600 px-3 py-2 '
    'text-gray-800 dark:text-gray-200">'
)

_FIXED = {
    "strong_open": '<strong class="font-semibold text-gray-900 dark:text-gray-100">',
    "strong_close": "</strong>",
    "em_open": '<em class="italic text-gray-800 dark:text-gray-200">',
    "em_close": "</em>",
    "link_close": "</a>",
    "bullet_list_open": '<ul class="list-disc list-inside mb-4 ml-4 space-y-1 text-left">',
    "bullet_list_close": "</ul>",
    "ordered_list_open": '<ol class="list-decimal list-inside mb-4 ml-4 space-y-1 text-left">',
    "ordered_list_close": "</ol>",
    "list_item_open": '<li class="text-gray-800 dark:text-gray-200">',
    "list_item_close": "</li>",
    "blockquote_open": (
        '<blockquote class="border-l-4 border-gray-300 dark:border-teal-600 pl-4 py-2 '
        'my-4 italic text-gray-700 dark:text-gray-300 bg-gray-50 dark:bg-teal-800/50 '
        'rounded-r-lg text-left">'
    ),
    "blockquote_close": "</blockquote>",
    "table_open": (
        '<div class="overflow-x-auto my-4 w-full max-w-full"><table class="min-w-full '
        'border border-gray-300 dark:border-teal-600 bg-white dark:bg-teal-800 w-full '
        'max-w-full">'
    ),
    "table_close": "</table></div>",
    "th_open": _CELL_OPEN,
    "td_open": _CELL_OPEN,
    "th_close": "</td>",
    "td_close": "</td>",
    "s_open": '<del class="line-through text-gray-600 dark:text-gray-400">',
    "s_close": "</del>",
}


def html_escape(text: str) -> str:
    """Escape the five HTML-significant characters."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
    )


def _fence_open(info: str) -> str:
    display = html_escape(info) if info else "text"
    lang_class = html_escape(info)
    lines = [
        '<div class="relative my-4 min-w-0 max-w-full">',
        '                        <div class="flex items-center justify-between bg-gray-200 '
        "dark:bg-teal-900 px-4 py-2 text-xs text-gray-600 dark:text-gray-400 rounded-t-lg "
        'border-b border-gray-300 dark:border-teal-700">',
        f'                            <span class="font-medium">{display}</span>',
        '                            <button onclick="navigator.clipboard.writeText('
        'this.parentElement.nextElementSibling.textContent)" ',
        '                                    class="hover:text-gray-800 '
        'dark:hover:text-gray-200 transition-colors">',
        "                                Copy",
        "                            </button>",
        "                        </div>",
        '                        <pre class="bg-gray-100 dark:bg-teal-900 rounded-b-lg p-4 '
        'overflow-x-auto text-left min-w-0 max-w-full"><code class="language-'
        f"{lang_class} text-sm font-mono block whitespace-pre text-left min-w-0 "
        'max-w-full">',
    ]
    return "\n".join(lines)


def _dash_run(match: re.Match) -> str:
    count = len(match.group(0))
    if count % 3 == 0:
        return _EM * (count // 3)
    if count % 2 == 0:
        return _EN * (count // 2)
    if count % 3 == 2:
        return _EM * (count // 3) + _EN
    return _EM * ((count - 4) // 3) + _EN * 2


def _punctuate(tokens: Iterable[Token]) -> None:
    for token in tokens:
        if token.type == "text":
            token.content = _DASHES.sub(_dash_run, token.content.replace("...", "\u2026"))
        elif token.children:
            _punctuate(token.children)


def _dashes_and_ellipses(state: StateCore) -> None:
    for token in state.tokens:
        if token.type == "inline" and token.children:
            _punctuate(token.children)


def _task_markers(state: StateCore) -> None:
    tokens = state.tokens
    for item, para, inline in zip(tokens, tokens[1:], tokens[2:]):
        if (
            item.type == "list_item_open"
            and para.type == "paragraph_open"
            and inline.type == "inline"
        ):
            match = _TASK_MARKER.match(inline.content)
            if match:
                inline.content = inline.content[match.end():]


def _footnote_definition(state: StateBlock, start_line: int, end_line: int, silent: bool) -> bool:
    start = state.bMarks[start_line] + state.tShift[start_line]
    maximum = state.eMarks[start_line]
    src = state.src
    if start + 4 > maximum or not src.startswith("[^", start):
        return False
    pos = start + 2
    while pos < maximum:
        if src[pos] == " ":
            return False
        if src[pos] == "]":
            break
        pos += 1
    if pos == start + 2 or pos + 1 >= maximum or src[pos + 1] != ":":
        return False
    if silent:
        return True

    label = src[start + 2:pos]
    state.env.setdefault(_FOOTNOTES_KEY, set()).add(label)
    pos += 2
    state.push("footnote_definition_open", "", 1)

    old_bmark = state.bMarks[start_line]
    old_tshift = state.tShift[start_line]
    old_scount = state.sCount[start_line]
    old_parent = state.parentType
    after_colon = pos
    initial = offset = state.sCount[start_line] + pos - (
        state.bMarks[start_line] + state.tShift[start_line]
    )
    while pos < maximum:
        char = src[pos]
        if char == "\t":
            offset += 4 - offset % 4
        elif char == " ":
            offset += 1
        else:
            break
        pos += 1

    state.tShift[start_line] = pos - after_colon
    state.sCount[start_line] = offset - initial
    state.bMarks[start_line] = after_colon
    state.blkIndent += 4
    state.parentType = "footnote"
    if state.sCount[start_line] < state.blkIndent:
        state.sCount[start_line] += state.blkIndent

    state.md.block.tokenize(state, start_line, end_line)

    state.parentType = old_parent
    state.blkIndent -= 4
    state.tShift[start_line] = old_tshift
    state.sCount[start_line] = old_scount
    state.bMarks[start_line] = old_bmark
    state.push("footnote_definition_close", "", -1)
    return True


def _footnote_reference(state: StateInline, silent: bool) -> bool:
    src = state.src
    pos = state.pos
    if not src.startswith("[^", pos):
        return False
    end = src.find("]", pos + 2, state.posMax)
    if end <= pos + 2:
        return False
    label = src[pos + 2:end]
    if any(char.isspace() for char in label):
        return False
    if label not in state.env.get(_FOOTNOTES_KEY, ()):
        return False
    if not silent:
        state.push("footnote_reference", "", 0)
    state.pos = end + 1
    return True


def _build_parser() -> MarkdownIt:
    parser = MarkdownIt("commonmark", {"typographer": True})
    parser.enable(["table", "strikethrough", "smartquotes"])
    parser.validateLink = lambda url: True
    parser.normalizeLink = lambda url: url
    parser.block.ruler.before(
        "reference",
        "footnote_definition",
        _footnote_definition,
        {"alt": ["paragraph", "reference"]},
    )
    parser.inline.ruler.before("link", "footnote_reference", _footnote_reference)
    parser.core.ruler.before("inline", "task_markers", _task_markers)
    parser.core.ruler.after("smartquotes", "dashes_and_ellipses", _dashes_and_ellipses)
    return parser


_PARSER = _build_parser()


class _Renderer:
    def __init__(self) -> None:
        self._parts: list[str] = []
        self._in_head = False

    def render(self, tokens: Iterable[Token]) -> str:
        self._walk(tokens)
        return "".join(self._parts)

    def _walk(self, tokens: Iterable[Token]) -> None:
        for token in tokens:
            self._emit(token)

    def _emit(self, token: Token) -> None:
        out = self._parts.append
        kind = token.type
        fixed = _FIXED.get(kind)
        if fixed is not None:
            out(fixed)
        elif kind in ("inline", "image"):
            self._walk(token.children or [])
        elif kind in ("text", "text_special"):
            out(html_escape(token.content))
        elif kind == "softbreak":
            out(" ")
        elif kind == "hardbreak":
            out("<br>")
        elif kind == "code_inline":
            out(
                '<code class="bg-gray-200 dark:bg-teal-700 px-1.5 py-0.5 rounded text-sm '
                'font-mono text-gray-800 dark:text-gray-200">'
                f"{html_escape(token.content)}</code>"
            )
        elif kind == "paragraph_open":
            if not token.hidden:
                out(_PARAGRAPH_OPEN)
        elif kind == "paragraph_close":
            if not token.hidden:
                out("</p>")
        elif kind == "heading_open":
            level = int(token.tag[1:])
            out(f'<h{level} class="{_HEADING_CLASSES.get(level, _HEADING_DEFAULT)}">')
        elif kind == "heading_close":
            out(f"</{token.tag}>")
        elif kind == "fence":
            out(_fence_open(token.info))
            out(html_escape(token.content))
            out(_CODE_CLOSE)
        elif kind == "code_block":
            # Indented blocks get no opening wrapper, only the closing tags.
            out(html_escape(token.content))
            out(_CODE_CLOSE)
        elif kind == "link_open":
            href = html_escape(str(token.attrGet("href") or ""))
            title = html_escape(str(token.attrGet("title") or ""))
            out(
                f'<a href="{href}" title="{title}" class="text-seafoam-600 '
                "dark:text-seafoam-400 hover:text-seafoam-700 dark:hover:text-seafoam-300 "
                'underline" target="_blank" rel="noopener noreferrer">'
            )
        elif kind == "thead_open":
            self._in_head = True
            out('<thead class="bg-gray-100 dark:bg-teal-700">')
        elif kind == "thead_close":
            self._in_head = False
            out("</thead>")
        elif kind == "tr_open":
            if not self._in_head:
                out("<tr>")
        elif kind == "tr_close":
            if not self._in_head:
                out("</tr>")


def markdown_to_html(markdown: str) -> str:
    """Convert Markdown text to styled HTML; raw HTML in the input is dropped."""
    env: dict = {}
    tokens = _PARSER.parse(markdown, env)
    return _Renderer().render(tokens)