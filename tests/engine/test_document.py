# tests/engine/test_document.py
from analyzer.dom.document import HTMLDocument, collapse_whitespace

HTML = "\ufeff" + """<!DOCTYPE html>
<html lang="en">
<head>
  <title>  Spaced   title </title>
  <meta name="description" content="   ">
  <style>body { color: red; }</style>
</head>
<body>
  <!-- a comment -->
  <h1>Main heading</h1>
  <p>First   paragraph.</p>
  <script>var hidden = "not visible";</script>
  <noscript>Enable scripts</noscript>
  <p></p>
  <p>Second paragraph.</p>
  <div class="tags"><a rel="nofollow noopener" href="/x">x</a></div>
</body>
</html>"""


def test_bom_is_stripped_and_document_not_empty():
    doc = HTMLDocument(HTML, "https://example.com/")
    assert not doc.is_empty
    assert doc.text("title") == "Spaced title"


def test_empty_document():
    assert HTMLDocument("   ").is_empty
    assert HTMLDocument(None).is_empty


def test_attr_returns_none_for_blank_values():
    doc = HTMLDocument(HTML)
    assert doc.attr('meta[name="description"]', "content") is None
    assert doc.attr("html", "lang") == "en"
    assert doc.attr("img", "src") is None


def test_multi_valued_attributes_are_joined():
    doc = HTMLDocument(HTML)
    assert doc.attr("a", "rel") == "nofollow noopener"
    assert doc.attrs("a", "href") == ["/x"]


def test_visible_text_skips_scripts_styles_and_comments():
    doc = HTMLDocument(HTML)
    text = doc.visible_text()
    assert "Main heading" in text
    assert "First paragraph." in text
    assert "not visible" not in text
    assert "Enable scripts" not in text
    assert "color" not in text
    assert "comment" not in text


def test_visible_text_does_not_mutate_the_tree():
    doc = HTMLDocument(HTML)
    first = doc.visible_text()
    assert doc.count("script") == 1
    assert doc.visible_text() == first


def test_paragraph_texts_drop_empty_paragraphs():
    doc = HTMLDocument(HTML)
    assert doc.count("p") == 3
    assert doc.paragraph_texts() == ["First paragraph.", "Second paragraph."]


def test_scripts_by_type():
    doc = HTMLDocument('<script type="application/ld+json">{"a": 1}</script><script type="application/ld+json"></script>')
    assert doc.scripts_by_type("application/ld+json") == ['{"a": 1}', ""]


def test_collapse_whitespace():
    assert collapse_whitespace("  a \n\t b  ") == "a b"
    assert collapse_whitespace(None) == ""
