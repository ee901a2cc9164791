"""Markup documents (HTML).

Nesting is DOM depth from a tag stack. ``<script>`` and ``<style>`` bodies
are scanned again with the JavaScript/TypeScript and CSS/SCSS profiles and
their events merged back at the right line numbers, so a page with inline
scripts is measured like the script files it contains.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from .base import BaseScanner, Layout, compute_line_offsets
from .brace import BraceScanner
from .languages import LANGUAGES, LanguageProfile
from .lexer import LexResult
from .stylesheet import StylesheetScanner
from .tokens import (
    BlockSpan,
    CommentSpan,
    DeclarationHit,
    DecisionHit,
    FunctionSpan,
    IdentifierHit,
    LineKind,
    NestingPeak,
    TokenStream,
)

_TAG = re.compile(r"""<(/?)([A-Za-z][\w:-]*)((?:[^>"']|"[^"]*"|'[^']*')*?)(/?)>""")
_ATTRIBUTE = re.compile(r"""(?<![\w-])(id|class)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>"']+))""", re.I)
_TEMPLATE_EXPR = re.compile(r"\{\{.*?\}\}|\{%.*?%\}|<%.*?%>|\$\{[^}]*\}")
_TEMPLATE_SYNTAX = re.compile(r"[{}<>%$]")
_SCRIPT_TYPE = re.compile(r"""\btype\s*=\s*["']?([^"'\s>]+)""", re.I)
_LANG_ATTR = re.compile(r"""\blang\s*=\s*["']?([^"'\s>]+)""", re.I)

_VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta",
     "param", "source", "track", "wbr", "keygen", "command"}
)
_SELF_CLOSING_SIBLINGS = frozenset({"li", "p", "td", "th", "tr", "option", "dt", "dd"})
_RAW_TEXT_TAGS = frozenset({"script", "style", "textarea", "title"})
_FORM_FIELDS = frozenset({"input", "select", "textarea", "button"})
_SCRIPT_TYPES = frozenset(
    {"text/javascript", "application/javascript", "module", "text/ecmascript", "text/babel", "text/jsx"}
)

_EMBEDDED_SCANNERS = {"brace": BraceScanner, "stylesheet": StylesheetScanner}


@dataclass
class _Embedded:
    profile: LanguageProfile
    start: int
    end: int


@dataclass
class _MarkupLayout(Layout):
    embedded: List[_Embedded] = field(default_factory=list)


@dataclass
class _Form:
    start_line: int
    label: str
    fields: int = 0


def _embedded_profile(tag: str, attrs: str) -> Optional[LanguageProfile]:
    lang = _LANG_ATTR.search(attrs)
    if tag == "script":
        kind = _SCRIPT_TYPE.search(attrs)
        if kind and kind.group(1).lower() not in _SCRIPT_TYPES:
            return None
        if lang and lang.group(1).lower() in ("ts", "typescript", "tsx"):
            return LANGUAGES.get("typescript")
        return LANGUAGES.get("javascript")
    if tag == "style":
        if lang and lang.group(1).lower() in ("scss", "sass", "less"):
            return LANGUAGES.get("scss")
        return LANGUAGES.get("css")
    return None


class MarkupScanner(BaseScanner):
    """Tag-stack depth, forms, id/class identifiers and embedded code."""

    family = "markup"

    def _build(self, stream: TokenStream, lexed: LexResult) -> None:
        layout = self._layout(stream, lexed)
        stream.line_depths = list(layout.start_depths)
        original = "\n".join(stream.lines)
        for block in layout.embedded:
            self._merge(stream, layout, block, original)

        functions = stream.functions
        order = sorted(range(len(functions)), key=lambda i: (functions[i].start_line, -functions[i].end_line))
        position = {old: new for new, old in enumerate(order)}
        stream.functions = [functions[i] for i in order]
        stream.decisions = [
            d if d.function is None else DecisionHit(d.kind, d.line, position[d.function])
            for d in stream.decisions
        ]
        stream.blocks.sort(key=lambda b: (b.start_line, b.end_line, b.kind))

    def _find_functions(self, stream: TokenStream, layout: Layout) -> List[FunctionSpan]:
        # Markup has no functions of its own; embedded ones arrive via _merge.
        return []

    def _layout(self, stream: TokenStream, lexed: LexResult) -> _MarkupLayout:
        """Walk the tags once, recording depths, forms, identifiers and embedded code."""
        code_lines = stream.code_lines
        n = len(code_lines)
        text = "\n".join(code_lines)
        offsets = compute_line_offsets(code_lines)
        layout = _MarkupLayout(
            start_depths=[0] * n,
            max_depths=[0] * n,
            statement_starts=[True] * n,
            line_offsets=offsets,
            code_text=text,
        )

        stack: List[str] = []
        forms: List[_Form] = []
        peak = NestingPeak()
        line_idx = 0
        pos = 0

        def advance_to(idx: int) -> None:
            nonlocal line_idx
            while line_idx < idx and line_idx + 1 < n:
                line_idx += 1
                layout.start_depths[line_idx] = len(stack)
                layout.max_depths[line_idx] = len(stack)

        while True:
            m = _TAG.search(text, pos)
            if m is None:
                break
            pos = m.end()
            closing, name, attrs, self_closing = m.group(1), m.group(2).lower(), m.group(3), m.group(4)
            line = layout.line_of(m.start())
            advance_to(line - 1)

            if closing:
                if name in stack:
                    while stack:
                        top = stack.pop()
                        if top == name:
                            break
                if name == "form" and forms:
                    form = forms.pop()
                    stream.blocks.append(BlockSpan("form", form.start_line, line, form.fields, form.label))
                continue

            self._attribute_identifiers(stream, layout, m.start(3), attrs)

            if forms and name in _FORM_FIELDS:
                forms[-1].fields += 1
            if name == "form":
                label = _form_label(attrs)
                forms.append(_Form(line, label))

            if name in _VOID_TAGS or self_closing:
                continue
            if name in _SELF_CLOSING_SIBLINGS and stack and stack[-1] == name:
                stack.pop()
            stack.append(name)
            if n:
                layout.max_depths[line_idx] = max(layout.max_depths[line_idx], len(stack))
            if len(stack) > peak.depth:
                peak = NestingPeak(len(stack), line)

            if name in _RAW_TEXT_TAGS:
                close = re.compile(r"</\s*" + name + r"\b", re.I).search(text, pos)
                end = close.start() if close else len(text)
                profile = _embedded_profile(name, attrs)
                if profile is not None and text[pos:end].strip():
                    layout.embedded.append(_Embedded(profile, pos, end))
                pos = end

        advance_to(n - 1)
        last = max(n, 1)
        while forms:
            form = forms.pop()
            stream.blocks.append(BlockSpan("form", form.start_line, last, form.fields, form.label))
        stream.nesting_peak = peak
        return layout

    @staticmethod
    def _attribute_identifiers(stream: TokenStream, layout: Layout, base: int, attrs: str) -> None:
        seen = {(h.name, h.line) for h in stream.identifiers}
        for m in _ATTRIBUTE.finditer(attrs):
            value = m.group(2) if m.group(2) is not None else m.group(3) or m.group(4) or ""
            value = _TEMPLATE_EXPR.sub(" ", value)
            category = "html-id" if m.group(1).lower() == "id" else "css-class"
            line = layout.line_of(base + m.start())
            names = value.split() if category == "css-class" else [value.strip()]
            for name in names:
                if not name or _TEMPLATE_SYNTAX.search(name) or (name, line) in seen:
                    continue
                seen.add((name, line))
                stream.identifiers.append(IdentifierHit(name, line, category, "html"))

    # ── embedded code ──

    def _merge(self, stream: TokenStream, layout: _MarkupLayout, block: _Embedded, original: str) -> None:
        scanner = _EMBEDDED_SCANNERS[block.profile.family](block.profile)
        sub = scanner.scan(original[block.start : block.end], stream.path)
        shift = layout.line_of(block.start) - 1
        base_fn = len(stream.functions)

        for i, sub_code in enumerate(sub.code_lines):
            idx = shift + i
            if idx >= len(stream.code_lines):
                break
            line_start = layout.line_offsets[idx]
            html_code = stream.code_lines[idx]
            lo = max(block.start - line_start, 0)
            hi = min(block.end - line_start, len(html_code))
            outside = html_code[:lo] + html_code[hi:]
            stream.code_lines[idx] = html_code[:lo] + sub_code + html_code[hi:]
            if not outside.strip():
                stream.kinds[idx] = sub.kinds[i]
            elif sub.kinds[i] is LineKind.CODE:
                stream.kinds[idx] = LineKind.CODE
            if i < len(sub.line_depths):
                stream.line_depths[idx] = layout.start_depths[idx] + sub.line_depths[i]

        stream.comments.extend(
            CommentSpan(c.start_line + shift, c.end_line + shift, c.is_doc) for c in sub.comments
        )
        stream.comments.sort(key=lambda c: (c.start_line, c.end_line))
        for fn in sub.functions:
            fn.start_line += shift
            fn.end_line += shift
            if fn.deepest_line:
                fn.deepest_line += shift
            stream.functions.append(fn)
        stream.decisions.extend(
            DecisionHit(d.kind, d.line + shift, None if d.function is None else d.function + base_fn)
            for d in sub.decisions
        )
        stream.declarations.extend(
            DeclarationHit(name=d.name, line=d.line + shift, kind=d.kind) for d in sub.declarations
        )
        stream.identifiers.extend(
            IdentifierHit(h.name, h.line + shift, h.category, h.language) for h in sub.identifiers
        )
        stream.blocks.extend(
            BlockSpan(b.kind, b.start_line + shift, b.end_line + shift, b.size, b.label) for b in sub.blocks
        )


def _form_label(attrs: str) -> str:
    for attr in ("name", "id", "action"):
        m = re.search(attr + r"""\s*=\s*["']?([^"'\s>]+)""", attrs, re.I)
        if m:
            return m.group(1)
    return ""
