from conversation_converter.render import render_html_document, render_markdown


def test_render_document_escapes_metadata() -> None:
    page = render_html_document(
        "# Heading\n\nBody text",
        "ChatGPT - Tags <b>&</b>",
        "https://chatgpt.com/share/a?b=1&c=2",
        "2025-01-02T03:04:05.000Z",
    )
    assert page.startswith("<!doctype html>")
    assert "<title>Tags &lt;b&gt;&amp;&lt;/b&gt;</title>" in page
    assert 'href="https://chatgpt.com/share/a?b=1&amp;c=2"' in page
    assert "Retrieved: 2025-01-02T03:04:05.000Z" in page
    assert "<p>Body text</p>" in page


def test_render_highlights_known_language() -> None:
    body = render_markdown("```python\nprint('hi')\n```\n")
    assert 'class="highlight"' in body
    assert "print" in body


def test_render_unknown_language_falls_back_to_plain_text() -> None:
    body = render_markdown("```notalanguage\n<tag>\n```\n")
    assert 'class="highlight"' in body
    assert "&lt;tag&gt;" in body
