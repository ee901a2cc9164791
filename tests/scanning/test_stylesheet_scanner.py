"""Tests for the stylesheet scanner (CSS, SCSS, Sass, Less)."""

import pytest

from messmeter.scanning.stylesheet import selector_chain

SCSS_SAMPLE = """\
.nav {
  .list {
    .item {
      &:hover {
        color: red;
      }
    }
  }
}
@media (max-width: 600px) {
  .nav { display: none; }
}
@keyframes spin {
  from { opacity: 0; }
  to { opacity: 1; }
}
"""


class TestSelectorChain:
    """Compound selectors joined by combinators."""

    @pytest.mark.parametrize(
        "prelude, parent, expected",
        [
            (".a", 0, 1),
            (".a .b > .c", 0, 3),
            (".a>.b+.c~.d", 0, 4),
            (".a, .b .c", 0, 2),
            ("a[href='x y']", 0, 1),
            (".child", 2, 3),
            ("&:hover", 2, 2),
            ("& .child", 2, 3),
        ],
    )
    def test_chain_length(self, prelude, parent, expected):
        assert selector_chain(prelude, parent) == expected


class TestRuleBlocks:
    """Rules, at-rules and nesting."""

    def test_nested_rules(self, scan):
        stream = scan(SCSS_SAMPLE, "scss")
        rules = [(b.start_line, b.size, b.label) for b in stream.blocks if b.kind == "rule"]
        assert rules == [
            (1, 1, ".nav"),
            (2, 2, ".list"),
            (3, 3, ".item"),
            (4, 3, "&:hover"),
            (11, 1, ".nav"),
        ]

    def test_peak_counts_rule_nesting(self, scan):
        stream = scan(SCSS_SAMPLE, "scss")
        assert stream.nesting_peak.depth == 4
        assert stream.nesting_peak.line == 4

    def test_flat_css_chain(self, scan):
        stream = scan(".a .b .c .d .e { color: red; }\n", "css")
        assert stream.nesting_peak.depth == 5
        assert stream.blocks[0].end_line == 1

    def test_rule_spans_lines(self, scan):
        stream = scan(".card {\n  color: red;\n}\n", "css")
        block = stream.blocks[0]
        assert (block.start_line, block.end_line) == (1, 3)

    def test_keyframe_steps_are_not_rules(self, scan):
        stream = scan("@keyframes fade {\n  from { opacity: 0; }\n}\n", "css")
        assert stream.blocks == []
        assert stream.nesting_peak.depth == 0

    def test_interpolation_is_not_a_block(self, scan):
        stream = scan(".icon-#{$name} {\n  width: 1px;\n}\n", "scss")
        assert [b.size for b in stream.blocks] == [1]

    def test_unbalanced_input_does_not_raise(self, scan):
        stream = scan(".a { .b { color: red;\n", "scss")
        assert [b.kind for b in stream.blocks] == ["rule", "rule"]


class TestStylesheetIdentifiers:
    """Class and id selectors, mixins and variables."""

    def test_selector_identifiers(self, scan):
        stream = scan("#main .card__title--active, .btnPrimary { color: red; }\n", "css")
        found = {(h.name, h.category) for h in stream.identifiers}
        assert found == {
            ("main", "html-id"),
            ("card__title--active", "css-class"),
            ("btnPrimary", "css-class"),
        }

    def test_color_values_are_not_ids(self, scan):
        stream = scan(".a {\n  color: #fff;\n}\n", "css")
        assert [h.name for h in stream.identifiers] == ["a"]

    def test_mixin_is_a_function(self, scan):
        stream = scan("@mixin button-style($size, $color) {\n  padding: $size;\n}\n", "scss")
        assert [fn.name for fn in stream.functions] == ["button-style"]
        assert stream.functions[0].param_count == 2

    def test_scss_variable(self, scan):
        stream = scan("$primary-color: #333;\n", "scss")
        assert [(h.name, h.category) for h in stream.identifiers] == [("primary-color", "variable")]

    def test_scss_control_flow_is_decisions(self, scan):
        text = "@mixin theme($dark) {\n  @if $dark {\n    color: white;\n  }\n  @each $c in $list {\n  }\n}\n"
        stream = scan(text, "scss")
        assert sorted(d.kind for d in stream.decisions) == ["if", "loop"]
