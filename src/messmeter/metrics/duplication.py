"""Code duplication via fragment fingerprints.

Duplication is the only metric with cross-file state. It runs in two passes:

1. ``collect`` (inside workers): every function with enough code becomes a
   fragment (the whole file when it has no functions). Each fragment gets an
   exact fingerprint, a hash of its token sequence with identifiers renamed
   to positional placeholders, and a set of winnowed shingle hashes. All of
   them go into the shared ``DuplicationIndex``.
2. ``finalize`` (after every file is indexed, read only): a fragment is an
   exact duplicate when its exact fingerprint has another occurrence, and a
   near duplicate when enough of its shingles occur in one other fragment.

Hashes are blake2b based so results do not depend on the interpreter's
hash seed.
"""

import re
import threading
import zlib
from collections import defaultdict
from dataclasses import dataclass, field
from functools import lru_cache
from hashlib import blake2b
from typing import Dict, FrozenSet, Iterable, List, Sequence, Tuple

from ..logging_config import get_logger
from ..models import Finding, MetricResult, Severity
from ..scanning.languages import LANGUAGES
from ..scanning.tokens import TokenStream
from .base import Metric, MetricContext, saturating_scale

logger = get_logger(__name__)

_MODULUS = (1 << 61) - 1
_BASE = 1_000_003

_TOKEN = re.compile(
    r"""
      (?P<ident>[A-Za-z_$][\w$]*)
    | (?P<number>\d[\w.]*|\.\d\w*)
    | (?P<string>"[^"\n]*"|'[^'\n]*'|`[^`]*`)
    | (?P<op>===|!==|\*\*=|<<=|>>=|>>>|\.\.\.|::|->|=>|&&|\|\||\+\+|--|<<|>>|[-+*/%&|^!<>=]=)
    | (?P<punct>[^\s\w])
    """,
    re.X,
)

_NUMBERED_NAME = re.compile(
    r"^(?P<base>.+?)(?:[_-]?(?:v?\d+|copy|new|old|tmp|temp|backup|bak|orig|final))+$",
    re.I,
)

_MAX_LISTED = 3
WHOLE_FILE = "<file>"


@dataclass(frozen=True)
class Occurrence:
    """Where a fingerprint was seen."""

    path: str
    name: str
    start_line: int
    end_line: int

    def overlaps(self, other: "Occurrence") -> bool:
        return (
            self.path == other.path
            and self.start_line <= other.end_line
            and other.start_line <= self.end_line
        )

    def describe(self) -> str:
        return f"{self.path}:{self.start_line}-{self.end_line}"


@dataclass(frozen=True)
class Fragment:
    occurrence: Occurrence
    exact: str
    shingles: FrozenSet[int]
    code_lines: Tuple[int, ...]


@dataclass
class FileFragments:
    """Pass-one output for one file, carried to pass two."""

    path: str
    code_line_count: int
    fragments: List[Fragment] = field(default_factory=list)
    family_findings: List[Finding] = field(default_factory=list)


class DuplicationIndex:
    """Fingerprint -> occurrences, sharded with one lock per shard.

    Append only. Insertions from concurrent workers into the same shard are
    serialized; different shards proceed in parallel.
    """

    def __init__(self, shards: int = 16):
        if shards < 1:
            raise ValueError("shards must be >= 1")
        self._buckets: List[Dict[str, List[Occurrence]]] = [{} for _ in range(shards)]
        self._locks = [threading.Lock() for _ in range(shards)]

    def _shard(self, fingerprint: str) -> int:
        return zlib.crc32(fingerprint.encode("utf-8")) % len(self._buckets)

    def insert_and_check(self, fingerprint: str, occurrence: Occurrence) -> Tuple[Occurrence, ...]:
        """Record ``occurrence`` and return the occurrences that were already there."""
        i = self._shard(fingerprint)
        with self._locks[i]:
            bucket = self._buckets[i].setdefault(fingerprint, [])
            existing = tuple(bucket)
            bucket.append(occurrence)
        return existing

    def occurrences(self, fingerprint: str) -> Tuple[Occurrence, ...]:
        i = self._shard(fingerprint)
        with self._locks[i]:
            return tuple(self._buckets[i].get(fingerprint, ()))

    def __len__(self) -> int:
        total = 0
        for bucket, lock in zip(self._buckets, self._locks):
            with lock:
                total += len(bucket)
        return total


# ── fingerprinting ──


def tokenize(code: str, keywords: FrozenSet[str]) -> Tuple[List[str], List[str]]:
    """Return (exact tokens, shingle tokens) for comment-free code.

    Exact tokens keep keywords and operators, rename other identifiers to
    ``$0``, ``$1``... by first appearance and collapse literals to NUM/STR.
    Shingle tokens map every non-keyword identifier to ID.
    """
    exact: List[str] = []
    shingle: List[str] = []
    names: Dict[str, str] = {}
    for m in _TOKEN.finditer(code):
        kind = m.lastgroup
        text = m.group()
        if kind == "ident":
            if text in keywords:
                exact.append(text)
                shingle.append(text)
            else:
                if text not in names:
                    names[text] = f"${len(names)}"
                exact.append(names[text])
                shingle.append("ID")
        elif kind == "number":
            exact.append("NUM")
            shingle.append("NUM")
        elif kind == "string":
            exact.append("STR")
            shingle.append("STR")
        else:
            exact.append(text)
            shingle.append(text)
    return exact, shingle


def exact_fingerprint(tokens: Sequence[str]) -> str:
    return blake2b("\x1f".join(tokens).encode("utf-8"), digest_size=16).hexdigest()


@lru_cache(maxsize=4096)
def _token_hash(token: str) -> int:
    return int.from_bytes(blake2b(token.encode("utf-8"), digest_size=8).digest(), "big") % _MODULUS


def rolling_hashes(tokens: Sequence[str], k: int) -> List[int]:
    """Rabin-Karp hashes of every window of ``k`` tokens."""
    if not tokens:
        return []
    k = min(k, len(tokens))
    high = pow(_BASE, k - 1, _MODULUS)
    values = [_token_hash(t) for t in tokens]

    h = 0
    for v in values[:k]:
        h = (h * _BASE + v) % _MODULUS
    hashes = [h]
    for i in range(k, len(values)):
        h = ((h - values[i - k] * high) * _BASE + values[i]) % _MODULUS
        hashes.append(h)
    return hashes


def winnow(hashes: Sequence[int], window: int) -> FrozenSet[int]:
    """Keep the minimum of every ``window`` consecutive hashes (rightmost on ties)."""
    if not hashes:
        return frozenset()
    if len(hashes) <= window:
        return frozenset({min(hashes)})
    selected = set()
    for start in range(len(hashes) - window + 1):
        best = start
        for i in range(start + 1, start + window):
            if hashes[i] <= hashes[best]:
                best = i
        selected.add(hashes[best])
    return frozenset(selected)


def name_families(names: Iterable[Tuple[str, int]], minimum: int) -> List[Tuple[str, List[str], int]]:
    """Group names like ``parse``, ``parse2``, ``parse_old`` by their base.

    Returns (base, sorted member names, first line) for families of at
    least ``minimum`` distinct names.
    """
    plain: Dict[str, int] = {}
    for name, line in names:
        if name not in plain or line < plain[name]:
            plain[name] = line

    families: Dict[str, Dict[str, int]] = defaultdict(dict)
    for name, line in plain.items():
        m = _NUMBERED_NAME.match(name)
        if m:
            families[m.group("base").lower()][name] = line
    for name, line in plain.items():
        if name.lower() in families:
            families[name.lower()][name] = line

    result = []
    for base, members in sorted(families.items()):
        if len(members) >= minimum:
            result.append((base, sorted(members), min(members.values())))
    return result


class DuplicationMetric(Metric):
    name = "duplication"
    display_name = "Duplication"
    description = "Code lines inside exact or near-duplicate fragments"

    def compute(self, stream: TokenStream, ctx: MetricContext) -> MetricResult:
        """Both passes against ``ctx.index`` (a private index when none is given)."""
        index = ctx.index if ctx.index is not None else DuplicationIndex(ctx.thresholds.dup_index_shards)
        collected = self.collect(stream, index, ctx)
        return self.finalize(collected, index, ctx)

    # ── pass 1 ──

    def collect(self, stream: TokenStream, index: DuplicationIndex, ctx: MetricContext) -> FileFragments:
        t = ctx.thresholds
        collected = FileFragments(path=stream.path, code_line_count=stream.code_line_count)

        spans = [(fn.name, fn.start_line, fn.end_line, fn.language) for fn in stream.functions]
        if not spans and stream.total_lines:
            spans = [(WHOLE_FILE, 1, stream.total_lines, stream.profile.name)]

        for name, start, end, language in spans:
            code_lines = stream.code_line_numbers(start, end)
            if len(code_lines) < t.dup_min_fragment_lines:
                continue
            profile = LANGUAGES.get(language, stream.profile)
            exact, shingle = tokenize(stream.code_text(start, end), profile.keywords)
            if len(exact) < t.dup_min_fragment_tokens:
                continue

            fragment = Fragment(
                occurrence=Occurrence(stream.path, name, start, end),
                exact=f"x:{exact_fingerprint(exact)}",
                shingles=winnow(rolling_hashes(shingle, t.dup_shingle_size), t.dup_winnow_window),
                code_lines=tuple(code_lines),
            )
            index.insert_and_check(fragment.exact, fragment.occurrence)
            for value in fragment.shingles:
                index.insert_and_check(f"s:{value:x}", fragment.occurrence)
            collected.fragments.append(fragment)

        own_functions = [(fn.name, fn.start_line) for fn in stream.functions if fn.language == stream.profile.name]
        for base, members, line in name_families(own_functions, t.dup_name_family_min):
            collected.family_findings.append(
                self.finding(
                    line,
                    Severity.INFO,
                    f"functions {', '.join(members)} look like copies of '{base}'",
                )
            )
        logger.debug(f"{stream.path}: indexed {len(collected.fragments)} fragments")
        return collected

    # ── pass 2 ──

    def finalize(self, collected: FileFragments, index: DuplicationIndex, ctx: MetricContext) -> MetricResult:
        t = ctx.thresholds
        findings: List[Finding] = list(collected.family_findings)
        covered = set()

        for fragment in collected.fragments:
            me = fragment.occurrence
            exact = [o for o in index.occurrences(fragment.exact) if not o.overlaps(me)]
            if exact:
                covered.update(fragment.code_lines)
                findings.append(self._duplicate_finding(me, exact, near=False))
                continue

            near = self._near_duplicates(fragment, index, t.dup_near_ratio)
            if near:
                covered.update(fragment.code_lines)
                findings.append(self._duplicate_finding(me, near, near=True))

        if collected.code_line_count == 0:
            return self.result(0.0, findings)
        share = len(covered) / collected.code_line_count
        return self.result(saturating_scale(share, t.dup_saturation_ratio), findings)

    @staticmethod
    def _near_duplicates(fragment: Fragment, index: DuplicationIndex, ratio: float) -> List[Occurrence]:
        if not fragment.shingles:
            return []
        me = fragment.occurrence
        shared: Dict[Occurrence, int] = defaultdict(int)
        for value in fragment.shingles:
            # Count each other fragment once per shingle.
            for other in set(index.occurrences(f"s:{value:x}")):
                if not other.overlaps(me):
                    shared[other] += 1
        needed = ratio * len(fragment.shingles)
        return [o for o, count in shared.items() if count >= needed]

    def _duplicate_finding(self, me: Occurrence, others: List[Occurrence], near: bool) -> Finding:
        places = sorted({o.describe() for o in others})
        listed = ", ".join(places[:_MAX_LISTED])
        if len(places) > _MAX_LISTED:
            listed += f" and {len(places) - _MAX_LISTED} more"
        subject = "file" if me.name == WHOLE_FILE else f"'{me.name}'"
        if near:
            return self.finding(me.start_line, Severity.INFO, f"{subject} is a near duplicate of {listed}")
        return self.finding(me.start_line, Severity.WARNING, f"{subject} duplicates {listed}")

