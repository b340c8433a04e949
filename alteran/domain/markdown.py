"""Lightweight markdown-to-HTML converter for project content.

Handles headings, bold, italic, inline code, fenced code blocks, links,
unordered lists, paragraphs and horizontal rules. Project content is written
by the admin or imported from a README; raw HTML in it is escaped.
"""

import html
import re

_FENCED_CODE = re.compile(r"```(\w*)\n([\s\S]*?)```")
_HEADING = re.compile(r"^(#{1,6})\s+(.+)$")
_RULE = re.compile(r"^[-*_]{3,}\s*$")
_LIST_ITEM = re.compile(r"^\s*[-*+]\s+")

_INLINE_CODE = re.compile(r"`([^`]+)`")
_BOLD_ITALIC = re.compile(r"\*\*\*(.+?)\*\*\*")
_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"\*(.+?)\*")
_LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

HEADING_CLASSES = {
    1: "md-h1",
    2: "md-h2",
    3: "md-h3",
    4: "md-h4",
    5: "md-h5",
    6: "md-h6",
}


def _escape(text: str) -> str:
    return html.escape(text, quote=True).replace("&#x27;", "'")


_PLACEHOLDER = re.compile(r"^\x00(\d+)\x00$")


def render_inline(text: str) -> str:
    """Escape raw HTML, then process inline markdown: code, bold/italic, links."""
    result = _INLINE_CODE.sub(r'<code class="md-code">\1</code>', _escape(text))
    result = _BOLD_ITALIC.sub(r"<strong><em>\1</em></strong>", result)
    result = _BOLD.sub(r'<strong class="md-strong">\1</strong>', result)
    result = _ITALIC.sub(r"<em>\1</em>", result)
    return _LINK.sub(
        r'<a href="\2" class="md-link" target="_blank" rel="noopener noreferrer">\1</a>',
        result,
    )


def render_markdown(md: str | None) -> str:
    if not md:
        return ""

    md = md.replace("\r\n", "\n").replace("\r", "\n")

    # Fenced blocks span lines, so swap each for a one-line placeholder first
    blocks: list[str] = []

    def _stash(match: re.Match) -> str:
        blocks.append(f'<pre class="md-pre"><code>{_escape(match.group(2).strip())}</code></pre>')
        return f"\n\x00{len(blocks) - 1}\x00\n"

    source = _FENCED_CODE.sub(_stash, md)

    result: list[str] = []
    in_list = False

    for line in source.split("\n"):
        heading = _HEADING.match(line)
        if heading:
            if in_list:
                result.append("</ul>")
                in_list = False
            level = len(heading.group(1))
            result.append(
                f'<h{level} class="{HEADING_CLASSES[level]}">{render_inline(heading.group(2))}</h{level}>'
            )
            continue

        if _RULE.match(line):
            if in_list:
                result.append("</ul>")
                in_list = False
            result.append('<hr class="md-hr" />')
            continue

        if _LIST_ITEM.match(line):
            if not in_list:
                result.append('<ul class="md-list">')
                in_list = True
            result.append(f"<li>{render_inline(_LIST_ITEM.sub('', line, count=1))}</li>")
            continue

        if in_list:
            result.append("</ul>")
            in_list = False

        if not line.strip():
            continue

        placeholder = _PLACEHOLDER.match(line)
        if placeholder:
            result.append(blocks[int(placeholder.group(1))])
            continue

        result.append(f'<p class="md-p">{render_inline(line)}</p>')

    if in_list:
        result.append("</ul>")

    return "\n".join(result)
