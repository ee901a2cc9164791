"""Indentation-delimited languages (Python)."""

from typing import List

from .base import BaseScanner, Container, Layout, compute_line_offsets, count_params
from .lexer import LexResult
from .tokens import FunctionSpan, LineKind, TokenStream

_OPENERS = "([{"
_CLOSERS = ")]}"
_TAB_SIZE = 8


def _indent_width(line: str) -> int:
    expanded = line.expandtabs(_TAB_SIZE)
    return len(expanded) - len(expanded.lstrip())


def _block_end(stream: TokenStream, layout: Layout, start_idx: int) -> int:
    """Index of the last code line indented deeper than the statement at ``start_idx``."""
    entry = layout.start_depths[start_idx]
    end_idx = start_idx
    for idx in range(start_idx + 1, len(stream.code_lines)):
        if stream.kinds[idx] is not LineKind.CODE:
            continue
        if not layout.statement_starts[idx] or layout.start_depths[idx] > entry:
            end_idx = idx
        else:
            break
    return end_idx


class IndentScanner(BaseScanner):
    """Depth from an indentation stack, like the Python tokenizer.

    Lines inside open brackets, after a backslash continuation or inside a
    multi-line string continue the statement above and inherit its depth.
    """

    family = "indent"

    def _layout(self, stream: TokenStream, lexed: LexResult) -> Layout:
        n = len(stream.code_lines)
        start_depths = [0] * n
        statement_starts = [False] * n
        in_string = lexed.in_string or [False] * n

        stack = [0]
        depth = 0
        brackets = 0
        continued = False

        for idx, code in enumerate(stream.code_lines):
            if stream.kinds[idx] is not LineKind.CODE:
                start_depths[idx] = depth
                continue

            if brackets > 0 or continued or in_string[idx]:
                start_depths[idx] = depth
            else:
                width = _indent_width(code)
                while len(stack) > 1 and width < stack[-1]:
                    stack.pop()
                if width > stack[-1]:
                    stack.append(width)
                depth = len(stack) - 1
                start_depths[idx] = depth
                statement_starts[idx] = True

            for ch in code:
                if ch in _OPENERS:
                    brackets += 1
                elif ch in _CLOSERS and brackets > 0:
                    brackets -= 1
            continued = code.rstrip().endswith("\\")

        return Layout(
            start_depths=start_depths,
            max_depths=list(start_depths),
            statement_starts=statement_starts,
            line_offsets=compute_line_offsets(stream.code_lines),
            code_text="\n".join(stream.code_lines),
        )

    def _find_functions(self, stream: TokenStream, layout: Layout) -> List[FunctionSpan]:
        """A function ends at the last code line indented deeper than its ``def``."""
        text = layout.code_text
        functions: List[FunctionSpan] = []
        seen = set()

        for pattern in self.profile.compiled.functions:
            for m in pattern.finditer(text):
                if not self.is_declaration_name(text, m):
                    continue
                start_line = layout.line_of(m.start("name"))
                start_idx = start_line - 1
                if start_idx in seen or not layout.statement_starts[start_idx]:
                    continue
                seen.add(start_idx)

                entry = layout.start_depths[start_idx]
                end_idx = _block_end(stream, layout, start_idx)

                groups = m.groupdict()
                functions.append(
                    FunctionSpan(
                        name=groups["name"],
                        start_line=start_line,
                        end_line=end_idx + 1,
                        entry_depth=entry,
                        param_count=count_params(groups.get("params")),
                        language=self.profile.name,
                    )
                )

        functions.sort(key=lambda f: (f.start_line, -f.end_line, f.name))
        return functions

    def _find_containers(self, stream: TokenStream, layout: Layout) -> List[Container]:
        containers = []
        for idx, code in enumerate(stream.code_lines):
            if stream.kinds[idx] is not LineKind.CODE or not layout.statement_starts[idx]:
                continue
            if any(p.match(code) for p in self.profile.compiled.classes):
                containers.append(
                    Container(idx + 1, _block_end(stream, layout, idx) + 1, layout.start_depths[idx] + 1)
                )
        return containers
