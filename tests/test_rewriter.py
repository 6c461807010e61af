"""Tests for app.services.rewriter.DocumentTransformer."""

from app.services.personalizer import personalize, silent_rules
from app.services.rewriter import CHUNK_SIZE, DocumentTransformer, Rule

_DOC = """<!DOCTYPE html>
<html>
<head><meta name="user-os" content="unknown"><title>Doc</title></head>
<body>
  <div class="outer" id="outer"><p class="inner" id="inner">Nested</p></div>
  <span class="badge tag" data-os="mac" id="badge">macOS</span>
  <p id="plain">Untouched</p>
</body>
</html>
"""


def _render(transformer: DocumentTransformer, document: str) -> str:
    return "".join(transformer.apply(document))


def _hide(el):
    el.set_attribute("style", "display: none;")


# ---------------------------------------------------------------------------
# Verbatim output
# ---------------------------------------------------------------------------

class TestVerbatim:
    def test_no_rules_returns_document_unchanged(self):
        assert _render(DocumentTransformer(), _DOC) == _DOC

    def test_unmatched_selector_returns_document_unchanged(self):
        transformer = DocumentTransformer().register_rule(".missing", lambda el: el.remove())
        assert _render(transformer, _DOC) == _DOC

    def test_read_only_callback_returns_document_unchanged(self):
        seen = []
        transformer = DocumentTransformer().register_rule(
            "[data-os]", lambda el: seen.append(el.get_attribute("data-os"))
        )
        assert _render(transformer, _DOC) == _DOC
        assert seen == ["mac"]

    def test_setting_the_same_value_is_not_a_change(self):
        transformer = DocumentTransformer().register_rule(
            'meta[name="user-os"]', lambda el: el.set_attribute("content", "unknown")
        )
        assert _render(transformer, _DOC) == _DOC

    def test_markup_around_an_edit_is_kept_as_written(self):
        doc = '<p>a&nbsp;b &copy; <br> <img src=x></p><div class="os-mac">m</div>'
        html = "".join(personalize(doc, silent_rules("windows")))
        assert html == (
            '<p>a&nbsp;b &copy; <br> <img src=x></p>'
            '<div class="os-mac" style="display: none;">m</div>'
        )

    def test_fragment_is_not_wrapped_in_html_and_body(self):
        transformer = DocumentTransformer().register_rule(".os-mac", _hide)
        assert _render(transformer, '<div class="os-mac">m</div>') == (
            '<div class="os-mac" style="display: none;">m</div>'
        )

    def test_comments_doctype_and_whitespace_survive_an_edit(self):
        doc = (
            "<!doctype html>\n<!-- build 42 -->\n"
            "<body>\n\t<P ID=plain>x &lt; y</P>\n"
            "\t<div class='os-linux'>l</div>\n</body>"
        )
        transformer = DocumentTransformer().register_rule(".os-linux", _hide)
        assert _render(transformer, doc) == doc.replace(
            "<div class='os-linux'>", '<div class="os-linux" style="display: none;">'
        )

    def test_edited_start_tag_keeps_attribute_order(self):
        doc = '<div id="a" class=os-mac data-x=1>m</div>'
        transformer = DocumentTransformer().register_rule(".os-mac", _hide)
        assert _render(transformer, doc) == (
            '<div id="a" class="os-mac" data-x="1" style="display: none;">m</div>'
        )

    def test_edited_self_closing_tag_stays_self_closing(self):
        doc = '<p><img src="a.png" class="os-mac"/> <br/></p>'
        transformer = DocumentTransformer().register_rule(".os-mac", _hide)
        assert _render(transformer, doc) == (
            '<p><img src="a.png" class="os-mac" style="display: none;" /> <br/></p>'
        )

    def test_script_content_is_untouched(self):
        doc = (
            '<script>if (a < b && c > d) { x = "<div class=os-mac>"; }</script>'
            '<div class="os-mac">m</div>'
        )
        transformer = DocumentTransformer().register_rule(".os-mac", _hide)
        assert _render(transformer, doc) == doc.replace(
            '<div class="os-mac">m', '<div class="os-mac" style="display: none;">m'
        )

    def test_large_document_is_yielded_in_chunks(self):
        doc = "<html><body>" + "<p>filler</p>" * (CHUNK_SIZE // 5) + "</body></html>"
        chunks = list(DocumentTransformer().apply(doc))
        assert len(chunks) > 1
        assert all(len(chunk) <= CHUNK_SIZE for chunk in chunks)
        assert "".join(chunks) == doc

    def test_edits_across_chunk_boundaries(self):
        filler = "<p>filler &amp; more</p>\n" * (CHUNK_SIZE // 12)
        doc = filler + '<div class="os-mac">m</div>\n' + filler + '<span class="os-mac">s</span>'
        transformer = DocumentTransformer().register_rule(".os-mac", _hide)
        chunks = list(transformer.apply(doc))
        assert len(chunks) > 1
        assert "".join(chunks) == doc.replace(
            'class="os-mac">', 'class="os-mac" style="display: none;">'
        )


# ---------------------------------------------------------------------------
# Element mutations
# ---------------------------------------------------------------------------

class TestMutations:
    def test_set_attribute(self):
        transformer = DocumentTransformer().register_rule(
            'meta[name="user-os"]', lambda el: el.set_attribute("content", "linux")
        )
        assert _render(transformer, _DOC) == _DOC.replace('content="unknown"', 'content="linux"')

    def test_set_attribute_escapes_the_value(self):
        transformer = DocumentTransformer().register_rule(
            'meta[name="user-os"]', lambda el: el.set_attribute("content", 'a "b" & <c>')
        )
        assert """<meta name="user-os" content='a "b" &amp; &lt;c&gt;'>""" in _render(transformer, _DOC)

    def test_remove_cuts_exactly_the_element(self):
        transformer = DocumentTransformer().register_rule(".outer", lambda el: el.remove())
        html = _render(transformer, _DOC)
        assert "Nested" not in html
        assert html == _DOC.replace(
            '<div class="outer" id="outer"><p class="inner" id="inner">Nested</p></div>', ""
        )

    def test_remove_void_element(self):
        doc = '<p>a<br class="gone">b<img class="gone" src=x />c</p>'
        transformer = DocumentTransformer().register_rule(".gone", lambda el: el.remove())
        assert _render(transformer, doc) == "<p>abc</p>"

    def test_remove_element_closed_by_its_parent(self):
        doc = '<div><p class="gone">a</div><p>b</p>'
        transformer = DocumentTransformer().register_rule(".gone", lambda el: el.remove())
        assert _render(transformer, doc) == "<div></div><p>b</p>"

    def test_add_class_keeps_existing_classes(self):
        transformer = DocumentTransformer().register_rule(".badge", lambda el: el.add_class("active"))
        assert '<span class="badge tag active" data-os="mac" id="badge">macOS</span>' in _render(
            transformer, _DOC
        )

    def test_add_class_twice_adds_once(self):
        def callback(el):
            el.add_class("active")
            el.add_class("active")

        transformer = DocumentTransformer().register_rule(".badge", callback)
        assert 'class="badge tag active"' in _render(transformer, _DOC)

    def test_add_existing_class_is_not_a_change(self):
        transformer = DocumentTransformer().register_rule(".badge", lambda el: el.add_class("tag"))
        assert _render(transformer, _DOC) == _DOC

    def test_element_accessors(self):
        captured = {}

        def callback(el):
            captured["class"] = el.get_attribute("class")
            captured["has_class"] = el.has_class("tag")
            captured["has_other_class"] = el.has_class("ta")
            captured["missing"] = el.get_attribute("missing")

        _render(DocumentTransformer().register_rule("#badge", callback), _DOC)
        assert captured == {
            "class": "badge tag",
            "has_class": True,
            "has_other_class": False,
            "missing": None,
        }


# ---------------------------------------------------------------------------
# Rule ordering
# ---------------------------------------------------------------------------

class TestRuleOrdering:
    def test_last_registered_rule_wins(self):
        transformer = (
            DocumentTransformer()
            .register_rule("#plain", lambda el: el.set_attribute("style", "color: red;"))
            .register_rule("p", lambda el: el.set_attribute("style", "color: blue;"))
        )
        assert '<p id="plain" style="color: blue;">Untouched</p>' in _render(transformer, _DOC)

    def test_removed_element_is_not_visited_by_later_rules(self):
        visits = []
        transformer = (
            DocumentTransformer()
            .register_rule(".outer", lambda el: el.remove())
            .register_rule(".inner", lambda el: visits.append(el.get_attribute("id")))
        )
        _render(transformer, _DOC)
        assert visits == []

    def test_edit_inside_a_later_removed_element_is_dropped(self):
        transformer = (
            DocumentTransformer()
            .register_rule(".inner", _hide)
            .register_rule(".outer", lambda el: el.remove())
        )
        html = _render(transformer, _DOC)
        assert "inner" not in html
        assert "display: none;" not in html

    def test_descendant_of_removed_match_is_skipped_within_a_rule(self):
        visits = []

        def callback(el):
            visits.append(el.get_attribute("id"))
            el.remove()

        _render(DocumentTransformer().register_rule("#outer, #inner", callback), _DOC)
        assert visits == ["outer"]

    def test_rules_passed_to_constructor(self):
        transformer = DocumentTransformer([Rule("#plain", _hide)])
        assert '<p id="plain" style="display: none;">' in _render(transformer, _DOC)

    def test_apply_does_not_mutate_the_source_string(self):
        doc = str(_DOC)
        _render(DocumentTransformer().register_rule(".outer", lambda el: el.remove()), doc)
        assert doc == _DOC
