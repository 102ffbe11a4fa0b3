"""Helpers for HTML snippets rendered through st.markdown."""
from html import escape
from textwrap import dedent


def html_block(template: str) -> str:
    """
    Flatten multi-line HTML for st.markdown.

    Lines indented by four or more spaces would otherwise render as Markdown
    code blocks, so every line is dedented and left-stripped.
    """
    lines = dedent(template).splitlines()
    return "\n".join(line.lstrip() for line in lines).strip()


def notice_html(message: str, css_class: str) -> str:
    """Bold notice paragraph inside a styled div; message is escaped."""
    return html_block(
        f"""
        <div class="{escape(css_class, quote=True)}">
            <p><strong>{escape(message)}</strong></p>
        </div>
        """
    )
