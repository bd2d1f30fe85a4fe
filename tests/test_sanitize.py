from conversation_converter.sanitize import clean_html


def test_removes_citation_pill_span_with_content() -> None:
    html = '<p>Fact<span class="ms-1" data-testid="webpage-citation-pill"><a href="#">site</a></span>.</p>'
    assert clean_html(html) == "<p>Fact.</p>"


def test_removes_citation_pill_link() -> None:
    html = '<p>See <a data-testid="webpage-citation-pill" href="https://example.com">example\n.com</a> now</p>'
    assert clean_html(html) == "<p>See  now</p>"


def test_pill_match_is_case_insensitive() -> None:
    assert clean_html('<SPAN data-testid="webpage-citation-pill">x</SPAN>') == ""


def test_removes_positional_attributes() -> None:
    html = '<p data-start="0" data-end="12">Hello <strong data-start="6" data-end="11">world</strong></p>'
    assert clean_html(html) == "<p>Hello <strong>world</strong></p>"


def test_keeps_non_numeric_positional_attributes() -> None:
    html = '<p data-start="x">Hi</p>'
    assert clean_html(html) == html


def test_noop_without_noise() -> None:
    html = '<div><span class="pill">ok</span><a href="/x">link</a></div>'
    assert clean_html(html) == html
