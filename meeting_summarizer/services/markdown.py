"""
Minimal Markdown -> HTML conversion for meeting summaries.

Handles only the subset the summarizer produces: #/##/### headers, **bold**,
pipe tables, "- " bullets and line breaks. Every rule is a regex substitution
on the evolving string, so rule order matters: headers and bold run before the
block rules that wrap rows and list items.

One rule pipeline is shared by two themes. `PLAIN` is used for the in-app
preview, `EMAIL` inlines presentational CSS on every element for mail clients.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List

_H3 = re.compile(r"^### (.*)$", re.MULTILINE)
_H2 = re.compile(r"^## (.*)$", re.MULTILINE)
_H1 = re.compile(r"^# (.*)$", re.MULTILINE)
_BOLD = re.compile(r"\*\*(.*?)\*\*", re.DOTALL)
_TABLE_BLOCK = re.compile(r"(?:^\|.+\|$\n?)+", re.MULTILINE)
_TABLE_ROW = re.compile(r"^\|(.+)\|$")
_BULLET_BLOCK = re.compile(r"(?:^- .*$\n?)+", re.MULTILINE)

_HEADER_ROW_WORDS = ("Owner", "Task")


@dataclass(frozen=True)
class Theme:
    name: str
    styles: Dict[str, str] = field(default_factory=dict)
    paragraph_breaks: bool = False

    def open(self, tag: str) -> str:
        style = self.styles.get(tag)
        if style:
            return f'<{tag} style="{style}">'
        return f"<{tag}>"


PLAIN = Theme(name="plain")

EMAIL = Theme(
    name="email",
    paragraph_breaks=True,
    styles={
        "h1": "color: #2c3e50; margin-top: 30px; margin-bottom: 15px; font-size: 1.8rem; "
              "border-bottom: 3px solid #3498db; padding-bottom: 8px;",
        "h2": "color: #2c3e50; margin-top: 25px; margin-bottom: 15px; font-size: 1.5rem; "
              "border-bottom: 2px solid #3498db; padding-bottom: 6px;",
        "h3": "color: #2c3e50; margin-top: 20px; margin-bottom: 15px; font-size: 1.3rem;",
        "strong": "color: #2c3e50; font-weight: 700;",
        "table": "width: 100%; border-collapse: collapse; margin: 15px 0; background-color: white; "
                 "border-radius: 4px; overflow: hidden; box-shadow: 0 1px 3px rgba(0,0,0,0.1);",
        "th": "background-color: #3498db; color: white; padding: 12px 15px; text-align: left; font-weight: 600;",
        "td": "padding: 12px 15px; border-bottom: 1px solid #e9ecef;",
        "ul": "margin: 15px 0; padding-left: 25px;",
        "li": "margin-bottom: 8px; line-height: 1.6;",
        "p": "margin-bottom: 15px; line-height: 1.6;",
    },
)


def split_cells(row_content: str) -> List[str]:
    return [cell.strip() for cell in row_content.split("|")]


def is_separator_row(cells: List[str]) -> bool:
    return all("---" in cell or not cell for cell in cells)


def is_header_row(line: str, cells: List[str]) -> bool:
    # Bold is rendered before tables, so look for both the raw and rendered form.
    if any("**" in cell or "<strong" in cell for cell in cells):
        return True
    return any(word in line for word in _HEADER_ROW_WORDS)


class MarkdownRenderer:
    def __init__(self, theme: Theme = PLAIN):
        self.theme = theme

    def render(self, text: str) -> str:
        html = (text or "").replace("\r\n", "\n")
        html = self._headers(html)
        html = _BOLD.sub(lambda m: f"{self.theme.open('strong')}{m.group(1)}</strong>", html)
        html = _TABLE_BLOCK.sub(lambda m: self._table(m.group(0)), html)
        html = _BULLET_BLOCK.sub(lambda m: self._bullets(m.group(0)), html)
        return self._breaks(html)

    def _headers(self, text: str) -> str:
        for pattern, tag in ((_H3, "h3"), (_H2, "h2"), (_H1, "h1")):
            text = pattern.sub(lambda m, tag=tag: f"{self.theme.open(tag)}{m.group(1)}</{tag}>", text)
        return text

    def _table(self, block: str) -> str:
        trailing = "\n" if block.endswith("\n") else ""
        rows: List[str] = []

        for line in block.rstrip("\n").split("\n"):
            cells = split_cells(_TABLE_ROW.match(line).group(1))
            if is_separator_row(cells):
                continue
            tag = "th" if is_header_row(line, cells) else "td"
            row = "".join(f"{self.theme.open(tag)}{cell}</{tag}>" for cell in cells)
            rows.append(f"<tr>{row}</tr>")

        if not rows:
            return ""
        return f"{self.theme.open('table')}{''.join(rows)}</table>{trailing}"

    def _bullets(self, block: str) -> str:
        trailing = "\n" if block.endswith("\n") else ""
        items = "".join(
            f"{self.theme.open('li')}{line[2:]}</li>"
            for line in block.rstrip("\n").split("\n")
        )
        return f"{self.theme.open('ul')}{items}</ul>{trailing}"

    def _breaks(self, text: str) -> str:
        if self.theme.paragraph_breaks:
            text = text.replace("\n\n", f"</p>{self.theme.open('p')}")
        return text.replace("\n", "<br/>")


plain_renderer = MarkdownRenderer(PLAIN)
email_renderer = MarkdownRenderer(EMAIL)


def render_markdown(text: str) -> str:
    """HTML fragment for the in-app preview."""
    return plain_renderer.render(text)


def render_email_markdown(text: str) -> str:
    """HTML fragment with inline styles, meant to sit inside the email shell."""
    return email_renderer.render(text)
