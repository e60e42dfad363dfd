"""Helpers for building HTML snippets rendered through st.markdown."""
import html
from textwrap import dedent
from typing import Any


def html_block(template: str) -> str:
    """
    Flatten multi-line HTML for Streamlit's Markdown renderer.

    Lines indented by 4+ spaces would be rendered as code blocks, so every
    line is dedented and left-stripped.
    """
    lines = dedent(template).splitlines()
    return "\n".join(line.lstrip() for line in lines).strip()


def html_text(value: Any) -> str:
    """Escape a value for interpolation into HTML markup."""
    return html.escape(str(value), quote=True)
