"""Brace-delimited languages: C family, Go, Rust, JavaScript/TypeScript, Java, C#, PHP."""

import re
from typing import Dict, List, Tuple

from .base import BaseScanner, Container, Layout, compute_line_offsets, count_params
from .lexer import LexResult
from .tokens import FunctionSpan, TokenStream

_BODY_START = re.compile(r"[{};]")
_NON_SPACE = re.compile(r"\S")

# Declaration blocks besides classes; their bodies hold members, not statements.
_NAMESPACE = re.compile(r"^[ \t]*(?:export[ \t]+|pub(?:\([^)]*\))?[ \t]+|inline[ \t]+)?(?:namespace|mod|impl)\b")

# Signature tails longer than this (return types, throws, where clauses) are
# treated as a failed match rather than searched further.
_MAX_SIGNATURE_TAIL = 400


def brace_layout(code_lines: List[str]) -> Layout:
    """Track ``{``/``}`` depth over comment-free, string-blanked code."""
    n = len(code_lines)
    start_depths = [0] * n
    max_depths = [0] * n
    matches: Dict[int, int] = {}
    open_depths: Dict[int, int] = {}
    stack: List[int] = []

    offset = 0
    for idx, line in enumerate(code_lines):
        depth = len(stack)
        start_depths[idx] = depth
        peak = depth
        for col, ch in enumerate(line):
            if ch == "{":
                open_depths[offset + col] = len(stack)
                stack.append(offset + col)
                if len(stack) > peak:
                    peak = len(stack)
            elif ch == "}" and stack:
                matches[stack.pop()] = offset + col
        max_depths[idx] = peak
        offset += len(line) + 1

    return Layout(
        start_depths=start_depths,
        max_depths=max_depths,
        statement_starts=[True] * n,
        line_offsets=compute_line_offsets(code_lines),
        code_text="\n".join(code_lines),
        matches=matches,
        open_depths=open_depths,
    )


class BraceScanner(BaseScanner):
    """Depth from a brace counter; functions from signature patterns."""

    family = "brace"

    def _layout(self, stream: TokenStream, lexed: LexResult) -> Layout:
        return brace_layout(stream.code_lines)

    def _find_functions(self, stream: TokenStream, layout: Layout) -> List[FunctionSpan]:
        """Match signature patterns and attach each to the body its ``{`` opens.

        A match becomes a function only when a ``{`` follows before any ``;``
        or ``}``. Arrow functions without a block body span their own line.
        """
        text = layout.code_text
        total = len(stream.lines)
        language = self.profile.name
        functions: List[FunctionSpan] = []
        seen: set = set()

        for pattern in self.profile.compiled.functions:
            for m in pattern.finditer(text):
                if not self.is_declaration_name(text, m):
                    continue
                groups = m.groupdict()
                name = groups["name"]
                start_line = layout.line_of(m.start("name"))
                params = count_params(groups.get("params"), groups.get("single"))

                if groups.get("arrow"):
                    nxt = _NON_SPACE.search(text, m.end())
                    if nxt is None or nxt.group() != "{":
                        key: Tuple = ("expr", start_line, name)
                        if key not in seen:
                            seen.add(key)
                            functions.append(
                                FunctionSpan(
                                    name=name,
                                    start_line=start_line,
                                    end_line=layout.line_of(m.end() - 1),
                                    entry_depth=layout.start_depths[start_line - 1],
                                    param_count=params,
                                    language=language,
                                )
                            )
                        continue
                    body = nxt.start()
                else:
                    # Some patterns consume the opening brace themselves.
                    search_from = m.end() - 1 if text[m.end() - 1 : m.end()] == "{" else m.end()
                    found = _BODY_START.search(text, search_from)
                    if found is None or found.group() != "{":
                        continue
                    if found.start() - m.end() > _MAX_SIGNATURE_TAIL:
                        continue
                    body = found.start()

                if body in seen:
                    continue
                seen.add(body)
                close = layout.matches.get(body)
                end_line = layout.line_of(close) if close is not None else total
                functions.append(
                    FunctionSpan(
                        name=name,
                        start_line=start_line,
                        end_line=max(end_line, start_line),
                        entry_depth=layout.open_depths.get(body, layout.start_depths[start_line - 1]),
                        param_count=params,
                        language=language,
                    )
                )

        functions.sort(key=lambda f: (f.start_line, -f.end_line, f.name))
        return functions

    def _find_containers(self, stream: TokenStream, layout: Layout) -> List[Container]:
        text = layout.code_text
        patterns = self.profile.compiled.classes + (_NAMESPACE,)
        containers: List[Container] = []
        seen: set = set()

        for idx, code in enumerate(stream.code_lines):
            base = layout.line_offsets[idx]
            for pattern in patterns:
                for m in pattern.finditer(code):
                    end = base + m.end()
                    search_from = end - 1 if text[end - 1 : end] == "{" else end
                    found = _BODY_START.search(text, search_from)
                    if found is None or found.group() != "{" or found.start() - end > _MAX_SIGNATURE_TAIL:
                        continue
                    body = found.start()
                    close = layout.matches.get(body)
                    if close is None or body in seen:
                        continue
                    seen.add(body)
                    containers.append(
                        Container(idx + 1, layout.line_of(close), layout.open_depths[body] + 1)
                    )
        return containers
