"""Stylesheets: CSS, SCSS, Sass and Less.

Rules are tracked with a brace stack. Each selector rule records its
selector chain length: the number of compound selectors joined by
descendant, child or sibling combinators, accumulated through SCSS/Less
nesting (``&`` continues the parent compound instead of adding one).
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from .base import Layout, compute_line_offsets
from .brace import BraceScanner
from .lexer import LexResult
from .tokens import BlockSpan, IdentifierHit, NestingPeak, TokenStream

_CONTAINER_AT_RULES = frozenset(
    {"media", "supports", "document", "container", "layer", "at-root", "scope", "include"}
)
_OPAQUE_AT_RULES = frozenset({"keyframes", "font-face", "page", "counter-style", "font-feature-values"})

_COMBINATOR = re.compile(r"\s*[>+~]\s*")
_BRACKETED = re.compile(r"\([^)]*\)|\[[^\]]*\]")
_AT_NAME = re.compile(r"@(?:-[a-z]+-)?([a-z-]+)")
_CLASS_SELECTOR = re.compile(r"(?<![\w-])\.(-?[A-Za-z_][\w-]*)")
_ID_SELECTOR = re.compile(r"#(-?[A-Za-z_][\w-]*)")

_MAX_LABEL = 60


@dataclass
class _Frame:
    kind: str  # "rule" | "container" | "opaque" | "control"
    chain: int
    start_line: int
    label: str = ""
    rule_depth: int = 0


def selector_chain(prelude: str, parent: int = 0) -> int:
    """Longest compound-selector chain in a (possibly comma separated) prelude."""
    best = 0
    for selector in prelude.split(","):
        selector = selector.strip()
        if not selector:
            continue
        flat = _BRACKETED.sub("", _COMBINATOR.sub(" ", selector))
        length = len(flat.split())
        if parent:
            if "&" in selector:
                length = parent + max(length - 1, 0)
            else:
                length = parent + length
        best = max(best, length)
    return best


class StylesheetScanner(BraceScanner):
    """Brace layout plus selector rules, selector identifiers and mixins."""

    family = "stylesheet"

    def _build(self, stream: TokenStream, lexed: LexResult) -> None:
        super()._build(stream, lexed)
        layout_text = "\n".join(stream.code_lines)
        peak = self._collect_rules(stream, layout_text)
        stream.nesting_peak = peak

    def _collect_rules(self, stream: TokenStream, text: str) -> NestingPeak:
        layout = Layout(
            start_depths=[],
            max_depths=[],
            statement_starts=[],
            line_offsets=compute_line_offsets(stream.code_lines),
        )

        stack: List[_Frame] = []
        prelude_start = 0
        best = NestingPeak()
        i = 0
        length = len(text)

        while i < length:
            ch = text[i]
            if ch == "#" and text.startswith("#{", i):
                close = text.find("}", i)
                i = length if close == -1 else close + 1
                continue
            if ch == "{":
                raw = text[prelude_start:i]
                prelude = raw.strip()
                start_line = layout.line_of(prelude_start + len(raw) - len(raw.lstrip()))
                frame = self._open_frame(prelude, stack, start_line)
                if frame.kind == "rule":
                    self._selector_identifiers(stream, prelude_start, raw, layout)
                    score = max(frame.chain, frame.rule_depth)
                    if score > best.depth:
                        best = NestingPeak(score, start_line)
                stack.append(frame)
                prelude_start = i + 1
            elif ch == "}":
                if stack:
                    self._close_frame(stream, stack.pop(), layout.line_of(i))
                prelude_start = i + 1
            elif ch == ";":
                prelude_start = i + 1
            i += 1

        last = len(stream.lines)
        while stack:
            self._close_frame(stream, stack.pop(), last)

        stream.blocks.sort(key=lambda b: (b.start_line, b.end_line))
        return best

    @staticmethod
    def _open_frame(prelude: str, stack: List[_Frame], start_line: int) -> _Frame:
        parent: Optional[_Frame] = stack[-1] if stack else None
        parent_chain = parent.chain if parent else 0
        parent_rules = parent.rule_depth if parent else 0

        if parent is not None and parent.kind == "opaque":
            return _Frame("opaque", parent_chain, start_line, rule_depth=parent_rules)

        if prelude.startswith("@"):
            m = _AT_NAME.match(prelude)
            name = m.group(1) if m else ""
            if name in _OPAQUE_AT_RULES:
                kind = "opaque"
            elif name in _CONTAINER_AT_RULES:
                kind = "container"
            else:
                kind = "control"
            return _Frame(kind, parent_chain, start_line, rule_depth=parent_rules)

        chain = selector_chain(prelude, parent_chain)
        label = " ".join(prelude.split())
        if len(label) > _MAX_LABEL:
            label = label[: _MAX_LABEL - 3] + "..."
        return _Frame("rule", chain, start_line, label=label, rule_depth=parent_rules + 1)

    @staticmethod
    def _close_frame(stream: TokenStream, frame: _Frame, end_line: int) -> None:
        if frame.kind != "rule":
            return
        stream.blocks.append(
            BlockSpan("rule", frame.start_line, max(end_line, frame.start_line), frame.chain, frame.label)
        )

    def _selector_identifiers(self, stream: TokenStream, base: int, prelude: str, layout: Layout) -> None:
        language = self.profile.name
        seen = {(h.name, h.line) for h in stream.identifiers}
        for pattern, category in ((_CLASS_SELECTOR, "css-class"), (_ID_SELECTOR, "html-id")):
            for m in pattern.finditer(prelude):
                line = layout.line_of(base + m.start())
                name = m.group(1)
                if (name, line) in seen:
                    continue
                seen.add((name, line))
                stream.identifiers.append(IdentifierHit(name, line, category, language))
