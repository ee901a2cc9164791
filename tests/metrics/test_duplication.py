"""Tests for the duplication metric and its shared index."""

import threading

import pytest

from messmeter.metrics import DuplicationIndex, DuplicationMetric, MetricContext, Occurrence
from messmeter.metrics.duplication import name_families, rolling_hashes, tokenize, winnow
from messmeter.models import Severity

ORIGINAL = """\
def compute_totals(items, rate):
    subtotal = 0
    for item in items:
        subtotal += item.price * item.quantity
    discount = subtotal * 0.1 if subtotal > 100 else 0
    taxed = (subtotal - discount) * (1 + rate)
    rounded = round(taxed, 2)
    return rounded
"""

RENAMED = """\
def sum_prices(entries, tax):
    total = 0
    for entry in entries:
        total += entry.cost * entry.count
    rebate = total * 0.1 if total > 100 else 0
    gross = (total - rebate) * (1 + tax)
    final = round(gross, 2)
    return final
"""

UNRELATED = """\
def describe(user):
    parts = []
    if user.name:
        parts.append("name=" + user.name)
    while len(parts) < 3:
        parts.append("-")
    text = ", ".join(parts)
    print(text)
    return {"text": text, "size": len(text)}
"""


def _run(scan, files):
    """Collect every file into one index, then finalize each."""
    index = DuplicationIndex()
    ctx = MetricContext(index=index)
    metric = DuplicationMetric()
    collected = {path: metric.collect(scan(text, "python", path), index, ctx) for path, text in files.items()}
    return {path: metric.finalize(c, index, ctx) for path, c in collected.items()}


class TestTokenize:
    """Token normalization for fingerprints."""

    def test_exact_and_shingle_tokens(self):
        exact, shingle = tokenize("a = b + 1", frozenset())
        assert exact == ["$0", "=", "$1", "+", "NUM"]
        assert shingle == ["ID", "=", "ID", "+", "NUM"]

    def test_keywords_survive(self):
        exact, _ = tokenize("return x", frozenset({"return"}))
        assert exact == ["return", "$0"]

    def test_renaming_is_positional(self):
        assert tokenize("x = y(x)", frozenset())[0] == tokenize("p = q(p)", frozenset())[0]

    def test_literals_collapse(self):
        exact, _ = tokenize('s = "hi" + \'there\'', frozenset())
        assert exact == ["$0", "=", "STR", "+", "STR"]


class TestHashing:
    """Rolling hashes and winnowing are deterministic."""

    def test_window_count(self):
        assert len(rolling_hashes(list("abcdefgh"), 3)) == 6

    def test_short_input_is_one_window(self):
        assert len(rolling_hashes(["a", "b"], 5)) == 1

    def test_repeatable(self):
        tokens = ["ID", "=", "ID", "+", "NUM"] * 4
        assert rolling_hashes(tokens, 4) == rolling_hashes(list(tokens), 4)

    def test_equal_windows_hash_equal(self):
        hashes = rolling_hashes(["a", "b", "a", "b"], 2)
        assert hashes[0] == hashes[2]

    def test_winnow_picks_minimums(self):
        assert winnow([5, 3, 9, 1, 7], 2) == frozenset({3, 1})
        assert winnow([4, 2], 4) == frozenset({2})
        assert winnow([], 4) == frozenset()


class TestNameFamilies:
    """Numbered and suffixed copies of one name."""

    def test_family(self):
        names = [("parse", 1), ("parse2", 5), ("parse_old", 9), ("other", 12)]
        assert name_families(names, 3) == [("parse", ["parse", "parse2", "parse_old"], 1)]

    def test_below_minimum(self):
        assert name_families([("load", 1), ("load_v2", 4)], 3) == []

    def test_family_finding(self, scan, ctx):
        text = "".join(f"def {n}():\n    return 1\n" for n in ("parse", "parse2", "parse_old"))
        result = DuplicationMetric().compute(scan(text, "python"), ctx)
        assert [(f.severity, f.message) for f in result.findings] == [
            (Severity.INFO, "functions parse, parse2, parse_old look like copies of 'parse'")
        ]
        assert result.score == 0.0


class TestDuplicationIndex:
    """Sharded fingerprint index."""

    def test_insert_and_check(self):
        index = DuplicationIndex(shards=4)
        first = Occurrence("a.py", "f", 1, 8)
        second = Occurrence("b.py", "g", 3, 10)
        assert index.insert_and_check("fp", first) == ()
        assert index.insert_and_check("fp", second) == (first,)
        assert index.occurrences("fp") == (first, second)
        assert len(index) == 1

    def test_invalid_shards(self):
        with pytest.raises(ValueError):
            DuplicationIndex(shards=0)

    def test_concurrent_inserts(self):
        index = DuplicationIndex(shards=2)

        def insert(worker):
            for i in range(200):
                index.insert_and_check(f"fp{i % 10}", Occurrence(f"w{worker}.py", "f", i, i))

        threads = [threading.Thread(target=insert, args=(w,)) for w in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(index) == 10
        assert sum(len(index.occurrences(f"fp{i}")) for i in range(10)) == 800

    def test_overlap(self):
        a = Occurrence("a.py", "f", 1, 10)
        assert a.overlaps(Occurrence("a.py", "g", 10, 20))
        assert not a.overlaps(Occurrence("a.py", "g", 11, 20))
        assert not a.overlaps(Occurrence("b.py", "f", 1, 10))


class TestDuplicationMetric:
    """Cross-file exact and near duplicates."""

    def test_exact_duplicate_under_renaming(self, scan):
        results = _run(scan, {"a.py": ORIGINAL, "b.py": RENAMED})
        assert [(f.severity, f.message) for f in results["a.py"].findings] == [
            (Severity.WARNING, "'compute_totals' duplicates b.py:1-8")
        ]
        assert [f.message for f in results["b.py"].findings] == ["'sum_prices' duplicates a.py:1-8"]
        assert results["a.py"].score == 100.0

    def test_unique_file(self, scan):
        results = _run(scan, {"a.py": ORIGINAL, "c.py": UNRELATED})
        assert results["c.py"].findings == ()
        assert results["c.py"].score == 0.0

    def test_near_duplicate(self, scan):
        extended = ORIGINAL + "    print(rounded)\n"
        results = _run(scan, {"a.py": ORIGINAL, "b.py": extended})
        assert [(f.severity, f.message) for f in results["a.py"].findings] == [
            (Severity.INFO, "'compute_totals' is a near duplicate of b.py:1-9")
        ]

    def test_small_fragments_ignored(self, scan):
        text = "def f(x):\n    return x + 1\n"
        results = _run(scan, {"a.py": text, "b.py": text})
        assert results["a.py"].findings == ()

    def test_single_file_compute_uses_private_index(self, scan, ctx):
        result = DuplicationMetric().compute(scan(ORIGINAL, "python"), ctx)
        assert result.score == 0.0
        assert result.findings == ()
