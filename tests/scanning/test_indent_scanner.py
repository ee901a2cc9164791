"""Tests for the indentation scanner (Python)."""

PY_SAMPLE = """\
def handler(request, retries=3):
    if request:
        for item in request:
            if item and retries:
                pass
    return None


def other():
    return 1
"""


class TestIndentScanner:
    """Depth from indentation, functions end where the indentation does."""

    def test_function_spans(self, scan):
        stream = scan(PY_SAMPLE, "python")
        spans = [(fn.name, fn.start_line, fn.end_line) for fn in stream.functions]
        assert spans == [("handler", 1, 6), ("other", 9, 10)]

    def test_param_count_and_depth(self, scan):
        handler = scan(PY_SAMPLE, "python").functions[0]
        assert handler.param_count == 2
        assert handler.max_depth == 4
        assert handler.deepest_line == 5

    def test_decisions_belong_to_handler(self, scan):
        stream = scan(PY_SAMPLE, "python")
        kinds = sorted(d.kind for d in stream.decisions)
        assert kinds == ["bool", "if", "if", "loop"]
        assert {d.function for d in stream.decisions} == {0}

    def test_bracket_continuation_keeps_depth(self, scan):
        text = "def f(a,\n      b):\n    return (a +\n            b)\n"
        stream = scan(text, "python")
        fn = stream.functions[0]
        assert (fn.start_line, fn.end_line) == (1, 4)
        assert fn.param_count == 2
        assert stream.line_depths == [0, 0, 1, 1]

    def test_method_ignores_self(self, scan):
        text = "class Greeter:\n    def greet(self, name):\n        return name\n"
        fn = scan(text, "python").functions[0]
        assert fn.name == "greet"
        assert fn.param_count == 1
        assert fn.entry_depth == 1

    def test_nested_function(self, scan):
        text = "def outer():\n    def inner():\n        return 1\n    return inner\n"
        stream = scan(text, "python")
        spans = [(fn.name, fn.start_line, fn.end_line) for fn in stream.functions]
        assert spans == [("outer", 1, 4), ("inner", 2, 3)]

    def test_docstring_lines_do_not_end_function(self, scan):
        text = 'def f():\n    """Doc.\n\nMore."""\n    return 1\n'
        fn = scan(text, "python").functions[0]
        assert fn.end_line == 5

    def test_module_level_globals(self, scan):
        text = "counter = 0\n__all__ = ['f']\nMAX = 3\n\ndef f():\n    global counter\n    counter += 1\n"
        stream = scan(text, "python")
        found = {(d.name, d.kind, d.line) for d in stream.declarations}
        assert found == {("counter", "global", 1), ("counter", "global", 6)}

    def test_identifier_categories(self, scan):
        text = "MAX_SIZE = 10\n\nclass Store:\n    def load_all(self):\n        total = 0\n"
        stream = scan(text, "python")
        found = {(h.name, h.category) for h in stream.identifiers}
        assert ("MAX_SIZE", "constant") in found
        assert ("Store", "class") in found
        assert ("load_all", "function") in found
        assert ("total", "variable") in found

    def test_loose_peak_counts_module_level_blocks(self, scan):
        text = "def f():\n    return 1\n\nfor x in range(3):\n    if x:\n        print(x)\n"
        peak = scan(text, "python").loose_peak
        assert (peak.depth, peak.line) == (2, 6)

    def test_loose_peak_measured_from_class_body(self, scan):
        text = "class Settings:\n    if DEBUG:\n        level = 1\n\n    def reset(self):\n        return None\n"
        peak = scan(text, "python").loose_peak
        assert (peak.depth, peak.line) == (1, 3)
