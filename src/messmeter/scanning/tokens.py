"""Token stream: the per-file lexical event record shared by all metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..models import FileRecord
from .languages import LanguageProfile


class LineKind(str, Enum):
    CODE = "code"
    COMMENT = "comment"
    DOC = "doc"
    BLANK = "blank"


@dataclass(frozen=True)
class CommentSpan:
    start_line: int
    end_line: int
    is_doc: bool = False


@dataclass
class FunctionSpan:
    """A detected function. Lines are 1-based and inclusive.

    ``max_depth`` is relative to ``entry_depth``: the body itself is 1.
    ``language`` differs from the stream's language for functions found in
    embedded blocks (``<script>`` inside HTML).
    """

    name: str
    start_line: int
    end_line: int
    entry_depth: int
    param_count: int
    language: str
    max_depth: int = 1
    deepest_line: int = 0

    @property
    def length(self) -> int:
        return self.end_line - self.start_line + 1

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


@dataclass(frozen=True)
class DecisionHit:
    """A decision point. ``function`` indexes ``TokenStream.functions`` (None = top level)."""

    kind: str
    line: int
    function: Optional[int]


@dataclass(frozen=True)
class DeclarationHit:
    name: str
    line: int
    kind: str  # "global" | "static" | "dom"


@dataclass(frozen=True)
class IdentifierHit:
    name: str
    line: int
    category: str
    language: str


@dataclass(frozen=True)
class NestingPeak:
    depth: int = 0
    line: int = 0


@dataclass(frozen=True)
class BlockSpan:
    """A markup form (``size`` = field count) or a CSS rule (``size`` = selector chain)."""

    kind: str
    start_line: int
    end_line: int
    size: int
    label: str = ""


@dataclass
class TokenStream:
    """Everything scanning learned about one file.

    ``code_lines`` holds each source line with comments removed and string
    contents blanked; it is index-aligned with ``lines`` and ``kinds``.
    ``line_depths`` holds the nesting depth at the start of each line.
    ``loose_peak`` is the deepest code line owned by no function, measured
    from the body of its innermost class or namespace (absolute when none).
    """

    path: str
    profile: LanguageProfile
    lines: List[str]
    code_lines: List[str]
    kinds: List[LineKind]
    comments: List[CommentSpan] = field(default_factory=list)
    functions: List[FunctionSpan] = field(default_factory=list)
    decisions: List[DecisionHit] = field(default_factory=list)
    declarations: List[DeclarationHit] = field(default_factory=list)
    identifiers: List[IdentifierHit] = field(default_factory=list)
    blocks: List[BlockSpan] = field(default_factory=list)
    line_depths: List[int] = field(default_factory=list)
    nesting_peak: NestingPeak = field(default_factory=NestingPeak)
    loose_peak: NestingPeak = field(default_factory=NestingPeak)

    @property
    def total_lines(self) -> int:
        return len(self.lines)

    @property
    def code_line_count(self) -> int:
        return sum(1 for k in self.kinds if k is LineKind.CODE)

    @property
    def doc_line_count(self) -> int:
        return sum(1 for k in self.kinds if k is LineKind.DOC)

    @property
    def comment_line_count(self) -> int:
        """Comment-only lines, documentation included."""
        return sum(1 for k in self.kinds if k is LineKind.COMMENT or k is LineKind.DOC)

    @property
    def blank_line_count(self) -> int:
        return sum(1 for k in self.kinds if k is LineKind.BLANK)

    def kind_at(self, line: int) -> LineKind:
        """Line kind for a 1-based line number."""
        return self.kinds[line - 1]

    def code_line_numbers(self, start: int, end: int) -> List[int]:
        """1-based numbers of code lines within [start, end]."""
        lo = max(start, 1)
        hi = min(end, len(self.kinds))
        return [n for n in range(lo, hi + 1) if self.kinds[n - 1] is LineKind.CODE]

    def code_text(self, start: int, end: int) -> str:
        """Comment-free code of lines [start, end] joined with newlines."""
        return "\n".join(self.code_lines[max(start, 1) - 1 : min(end, len(self.code_lines))])

    def function_owners(self) -> List[Optional[int]]:
        """Innermost enclosing function index for every line (None = top level)."""
        owners: List[Optional[int]] = [None] * len(self.lines)
        order = sorted(
            range(len(self.functions)),
            key=lambda i: (self.functions[i].start_line, -self.functions[i].end_line),
        )
        for i in order:
            fn = self.functions[i]
            for idx in range(fn.start_line - 1, min(fn.end_line, len(owners))):
                owners[idx] = i
        return owners

    def record(self) -> FileRecord:
        return FileRecord(
            path=self.path,
            language=self.profile.name,
            total_lines=self.total_lines,
            code_lines=self.code_line_count,
            comment_lines=self.comment_line_count,
            blank_lines=self.blank_line_count,
            doc_comment_lines=self.doc_line_count,
        )
