"""Standalone HTML rendering of an exported conversation."""

from __future__ import annotations

import html

import markdown
from bs4 import BeautifulSoup
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from .assembler import strip_title_prefix


PYGMENTS_STYLE = "monokai"
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists"]

PAGE_STYLE = """
:root { color-scheme: light; }
* { box-sizing: border-box; }
body {
  margin: 0 auto;
  padding: 32px 20px 48px;
  max-width: 900px;
  font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif;
  line-height: 1.6;
  color: #0f172a;
  background: #f8fafc;
}
h1, h2, h3, h4, h5, h6 { color: #0f172a; line-height: 1.25; margin: 1.2em 0 0.4em; }
p { margin: 0 0 1em; }
a { color: #2563eb; text-decoration: none; }
a:hover { text-decoration: underline; }
code, pre {
  font-family: SFMono-Regular, Menlo, Monaco, Consolas, "Liberation Mono", "Courier New", monospace;
}
code { background: #e2e8f0; padding: 0.15em 0.35em; border-radius: 6px; font-size: 0.95em; }
.highlight { border-radius: 10px; border: 1px solid #1f2937; overflow: auto; }
.highlight pre { margin: 0; padding: 16px; }
pre code { background: none; padding: 0; color: inherit; }
blockquote {
  margin: 1em 0;
  padding: 0.6em 1em;
  border-left: 4px solid #cbd5e1;
  background: #f1f5f9;
  border-radius: 6px;
}
table { border-collapse: collapse; margin: 1em 0; width: 100%; }
th, td { padding: 8px 10px; border: 1px solid #e2e8f0; }
th { background: #f8fafc; text-align: left; }
ul, ol { padding-left: 1.4em; }
hr { border: 0; border-top: 1px solid #e2e8f0; margin: 2em 0; }
.article {
  background: white;
  padding: 28px;
  border-radius: 14px;
  border: 1px solid #e2e8f0;
  box-shadow: 0 12px 30px rgba(15, 23, 42, 0.06);
}
.meta { color: #475569; font-size: 0.95em; margin-bottom: 1em; }
""".strip()


def _lexer_for(language: str | None):  # type: ignore[no-untyped-def]
    if not language:
        return TextLexer(stripall=False)
    try:
        return get_lexer_by_name(language, stripall=False)
    except ClassNotFound:
        return TextLexer(stripall=False)


def highlight_code_blocks(body: str, formatter: HtmlFormatter) -> str:
    soup = BeautifulSoup(body, "html.parser")
    for code_block in soup.find_all("code"):
        if not code_block.parent or code_block.parent.name != "pre":
            continue
        language = None
        for cls in code_block.get("class", []):
            if cls.startswith("language-"):
                language = cls[len("language-"):]
                break
        highlighted = highlight(code_block.get_text(), _lexer_for(language), formatter)
        code_block.parent.replace_with(BeautifulSoup(highlighted, "html.parser"))
    return str(soup)


def render_markdown(text: str) -> str:
    formatter = HtmlFormatter(style=PYGMENTS_STYLE, cssclass="highlight")
    body = markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)
    return highlight_code_blocks(body, formatter)


def render_html_document(markdown_text: str, title: str, source: str, retrieved: str) -> str:
    body = render_markdown(markdown_text)
    pygments_css = HtmlFormatter(style=PYGMENTS_STYLE, cssclass="highlight").get_style_defs(".highlight")
    safe_title = html.escape(strip_title_prefix(title))
    safe_source = html.escape(source)
    safe_retrieved = html.escape(retrieved)
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{safe_title}</title>
  <style>{PAGE_STYLE}
{pygments_css}</style>
</head>
<body>
  <article class="article">
    <h1>{safe_title}</h1>
    <div class="meta">Source: <a href="{safe_source}" rel="noreferrer noopener">{safe_source}</a><br/>Retrieved: {safe_retrieved}</div>
    {body}
  </article>
</body>
</html>"""


__all__ = ["render_html_document", "render_markdown"]
