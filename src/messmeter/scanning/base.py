"""Base scanner: shared, table-driven event extraction.

Subclasses differ only in how they measure nesting and find function
bodies (braces, indentation, tags, stylesheet rules). Decision points,
state declarations and identifiers are extracted here from the profile's
pattern tables.
"""

import re
from abc import ABC, abstractmethod
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .languages import LanguageProfile
from .lexer import LexResult, lex
from .tokens import (
    DeclarationHit,
    DecisionHit,
    FunctionSpan,
    IdentifierHit,
    LineKind,
    NestingPeak,
    TokenStream,
)

# Words that may precede ``name(...)`` without the match being a declaration.
_NOT_A_DECLARATION = frozenset(
    {"new", "return", "throw", "else", "case", "await", "yield", "delete", "typeof",
     "sizeof", "goto", "in", "of", "do", "echo", "print", "not", "and", "or"}
)

_IGNORED_PARAMS = frozenset({"", "void", "self", "cls", "this", "*", "/", "...", "&self", "&mut self", "mut self"})

_WORD = re.compile(r"[A-Za-z_]\w*")


@dataclass(frozen=True)
class Container:
    """A class or namespace body: lines [start_line, end_line] sit below ``body_depth``."""

    start_line: int
    end_line: int
    body_depth: int


@dataclass
class Layout:
    """Per-line nesting facts computed by a concrete scanner (0-based lists)."""

    start_depths: List[int]
    max_depths: List[int]
    statement_starts: List[bool]
    line_offsets: List[int] = field(default_factory=list)
    code_text: str = ""
    # Brace families only: offset of each `{` -> offset of its `}`, and the
    # depth just outside each `{`.
    matches: Dict[int, int] = field(default_factory=dict)
    open_depths: Dict[int, int] = field(default_factory=dict)

    def line_of(self, offset: int) -> int:
        """1-based line number of a character offset in ``code_text``."""
        return bisect_right(self.line_offsets, offset)


def count_params(params: Optional[str], single: Optional[str] = None) -> int:
    """Count top-level comma separated parameters, ignoring receivers and markers."""
    if single:
        return 1
    if not params or not params.strip():
        return 0

    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for ch in params:
        if ch in "([{<":
            depth += 1
        elif ch in ")]}>" and depth > 0:
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))

    count = 0
    for part in parts:
        cleaned = " ".join(part.split())
        if cleaned in _IGNORED_PARAMS:
            continue
        if cleaned.startswith(("self:", "self ", "this:", "this ")):
            continue
        count += 1
    return count


def compute_line_offsets(code_lines: List[str]) -> List[int]:
    offsets = []
    pos = 0
    for line in code_lines:
        offsets.append(pos)
        pos += len(line) + 1
    return offsets


class BaseScanner(ABC):
    """Turns source text into a ``TokenStream`` for one language profile.

    Scanners hold no per-file state and are shared between worker threads.
    """

    family: str = ""

    def __init__(self, profile: LanguageProfile):
        self.profile = profile

    def scan(self, text: str, path: str = "") -> TokenStream:
        lexed = lex(text, self.profile)
        stream = TokenStream(
            path=path,
            profile=self.profile,
            lines=lexed.lines,
            code_lines=lexed.code_lines,
            kinds=lexed.kinds,
            comments=lexed.comments,
        )
        self._build(stream, lexed)
        return stream

    def _build(self, stream: TokenStream, lexed: LexResult) -> None:
        layout = self._layout(stream, lexed)
        stream.line_depths = list(layout.start_depths)
        stream.functions = self._find_functions(stream, layout)
        self._measure_functions(stream, layout)
        owners = stream.function_owners()
        self._collect_decisions(stream, owners)
        self._collect_declarations(stream, owners, layout)
        self._collect_identifiers(stream, layout)
        stream.nesting_peak = self._file_peak(layout)
        stream.loose_peak = self._loose_peak(stream, layout, owners, self._find_containers(stream, layout))

    # ── family specific ──

    @abstractmethod
    def _layout(self, stream: TokenStream, lexed: LexResult) -> Layout:
        """Compute per-line nesting depths."""

    @abstractmethod
    def _find_functions(self, stream: TokenStream, layout: Layout) -> List[FunctionSpan]:
        """Detect function spans."""

    def _find_containers(self, stream: TokenStream, layout: Layout) -> List[Container]:
        """Class and namespace bodies. Families without them return nothing."""
        return []

    # ── shared extraction ──

    def is_declaration_name(self, code_text: str, match: "re.Match[str]") -> bool:
        name = match.group("name")
        bare = name.split("::")[-1].lstrip("~")
        if not bare or bare in self.profile.keywords:
            return False
        preceding = _WORD.findall(code_text[match.start() : match.start("name")])
        if preceding and preceding[-1] in _NOT_A_DECLARATION:
            return False
        return True

    def _measure_functions(self, stream: TokenStream, layout: Layout) -> None:
        last = len(layout.max_depths)
        for fn in stream.functions:
            best, best_line = 1, fn.start_line
            for idx in range(fn.start_line - 1, min(fn.end_line, last)):
                if stream.kinds[idx] is not LineKind.CODE:
                    continue
                rel = layout.max_depths[idx] - fn.entry_depth
                if rel > best:
                    best, best_line = rel, idx + 1
            fn.max_depth = best
            fn.deepest_line = best_line

    def _collect_decisions(self, stream: TokenStream, owners: List[Optional[int]]) -> None:
        compiled = self.profile.compiled
        hits: List[DecisionHit] = []
        for idx, code in enumerate(stream.code_lines):
            if stream.kinds[idx] is not LineKind.CODE or not code.strip():
                continue
            line = idx + 1
            owner = owners[idx]
            for kind, pattern in compiled.decisions:
                for _ in pattern.finditer(code):
                    hits.append(DecisionHit(kind, line, owner))
            if compiled.boolean_operators and not any(
                p.search(code) for p in compiled.declaration_lines
            ):
                for pattern in compiled.boolean_operators:
                    for _ in pattern.finditer(code):
                        hits.append(DecisionHit("bool", line, owner))
            for pattern in compiled.ternaries:
                for _ in pattern.finditer(code):
                    hits.append(DecisionHit("ternary", line, owner))
        stream.decisions.extend(hits)

    def _collect_declarations(
        self, stream: TokenStream, owners: List[Optional[int]], layout: Layout
    ) -> None:
        compiled = self.profile.compiled
        seen = {(d.line, d.name, d.kind) for d in stream.declarations}

        def add(match: "re.Match[str]", line: int, kind: str) -> None:
            name = match.groupdict().get("name") or match.group().strip()
            if kind == "global" and name.startswith("__") and name.endswith("__"):
                return
            key = (line, name, kind)
            if key in seen:
                return
            seen.add(key)
            stream.declarations.append(DeclarationHit(name=name, line=line, kind=kind))

        for idx, code in enumerate(stream.code_lines):
            if stream.kinds[idx] is not LineKind.CODE or not code.strip():
                continue
            line = idx + 1
            module_level = owners[idx] is None and layout.start_depths[idx] == 0
            if module_level and layout.statement_starts[idx]:
                for pattern in compiled.global_state:
                    m = pattern.search(code)
                    if m:
                        add(m, line, "global")
            for pattern in compiled.global_statements:
                for m in pattern.finditer(code):
                    add(m, line, "global")
            for pattern in compiled.static_state:
                for m in pattern.finditer(code):
                    add(m, line, "static")
            for pattern in compiled.dom_state:
                for m in pattern.finditer(code):
                    add(m, line, "dom")

    def _collect_identifiers(self, stream: TokenStream, layout: Layout) -> None:
        compiled = self.profile.compiled
        language = self.profile.name
        keywords = self.profile.keywords
        seen = {(h.name, h.line) for h in stream.identifiers}

        def add(name: str, line: int, category: str, lang: str = language) -> None:
            if not name or name in keywords or (name, line) in seen:
                return
            seen.add((name, line))
            stream.identifiers.append(IdentifierHit(name, line, category, lang))

        for fn in stream.functions:
            if fn.language != language:
                continue
            bare = fn.name.split("::")[-1]
            if bare.startswith("~") or bare.startswith("operator"):
                continue
            add(bare, fn.start_line, "function")

        for idx, code in enumerate(stream.code_lines):
            if stream.kinds[idx] is not LineKind.CODE or not layout.statement_starts[idx]:
                continue
            line = idx + 1
            for category, patterns in (
                ("class", compiled.classes),
                ("constant", compiled.constants),
                ("variable", compiled.variables),
            ):
                for pattern in patterns:
                    for m in pattern.finditer(code):
                        add(m.group("name"), line, category)

    @staticmethod
    def _file_peak(layout: Layout) -> NestingPeak:
        best, best_line = 0, 0
        for idx, depth in enumerate(layout.max_depths):
            if depth > best:
                best, best_line = depth, idx + 1
        return NestingPeak(best, best_line)

    @staticmethod
    def _loose_peak(
        stream: TokenStream, layout: Layout, owners: List[Optional[int]], containers: List[Container]
    ) -> NestingPeak:
        """Deepest code line outside every function.

        Depth counts from the innermost class or namespace body around the
        line, so member declarations sit at 0 like module-level statements.
        """
        baselines = [0] * len(owners)
        for c in containers:
            for idx in range(c.start_line - 1, min(c.end_line, len(baselines))):
                baselines[idx] = max(baselines[idx], c.body_depth)

        best, best_line = 0, 0
        for idx, depth in enumerate(layout.max_depths[: len(owners)]):
            if owners[idx] is not None or stream.kinds[idx] is not LineKind.CODE:
                continue
            rel = depth - baselines[idx]
            if rel > best:
                best, best_line = rel, idx + 1
        return NestingPeak(best, best_line)
