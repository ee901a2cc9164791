"""Character-level lexer: separates code from comments and string literals.

The lexer is a small state machine (code, line comment, block comment,
string, char) driven entirely by the ``LanguageProfile``. It never raises:
unterminated literals end at the end of the line (single-line strings) or
at the end of the input, and anything unrecognised stays code.

Its output keeps the line structure of the source intact, so every later
stage can work line by line on ``code_lines`` without re-lexing.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, List, Optional, Pattern, Tuple

from .languages import LanguageProfile
from .tokens import CommentSpan, LineKind

_BLANK = re.compile(r"[^\n]")
_IDENT_CHAR = re.compile(r"[\w$]")

# Accepted char literals: 'a', '\n', '\x41', '\u{1F600}', '\0'. Anything else
# (Rust lifetimes, apostrophes) stays code.
_CHAR_LITERAL = re.compile(
    r"'(?:\\(?:x[0-9a-fA-F]{1,2}|u\{?[0-9a-fA-F]{1,6}\}?|[0-7]{1,3}|.)|[^'\\\n])'"
)

_LINE, _BLOCK, _RAW, _DOCSTRING, _MSTRING, _STRING, _CHAR = (
    "line", "block", "raw", "docstring", "mstring", "string", "char",
)


@dataclass
class LexResult:
    lines: List[str]
    code_lines: List[str]
    kinds: List[LineKind]
    comments: List[CommentSpan] = field(default_factory=list)
    # Lines that begin inside a multi-line string literal.
    in_string: List[bool] = field(default_factory=list)

    @property
    def code_text(self) -> str:
        return "\n".join(self.code_lines)


@dataclass(frozen=True)
class _LexTable:
    opener: Optional[Pattern[str]]
    actions: Dict[str, Tuple[str, Optional[str]]]
    doc_prefixes: Tuple[str, ...]
    escape: str


@lru_cache(maxsize=None)
def _table_for(profile: LanguageProfile) -> _LexTable:
    actions: Dict[str, Tuple[str, Optional[str]]] = {}

    def add(token: str, action: str, closer: Optional[str]) -> None:
        if token and token not in actions:
            actions[token] = (action, closer)

    for opener, closer in profile.block_comments:
        add(opener, _BLOCK, closer)
    for marker in profile.line_comments:
        add(marker, _LINE, None)
    for opener, closer in profile.raw_string_delimiters:
        add(opener, _RAW, closer)
    for delim in profile.docstring_delimiters:
        add(delim, _DOCSTRING, delim)
    for delim in profile.multiline_string_delimiters:
        add(delim, _MSTRING, delim)
    for delim in profile.string_delimiters:
        add(delim, _STRING, delim)
    if profile.char_delimiter:
        add(profile.char_delimiter, _CHAR, profile.char_delimiter)

    opener = None
    if actions:
        alternatives = sorted(actions, key=len, reverse=True)
        opener = re.compile("|".join(re.escape(t) for t in alternatives))

    return _LexTable(
        opener=opener,
        actions=actions,
        doc_prefixes=tuple(profile.doc_comment_prefixes),
        escape=profile.escape_char,
    )


@lru_cache(maxsize=256)
def _string_end_pattern(closer: str, escape: str, multiline: bool) -> Pattern[str]:
    parts = []
    if escape:
        parts.append(re.escape(escape) + ".")
    parts.append(re.escape(closer))
    if not multiline:
        parts.append("\n")
    return re.compile("|".join(parts), re.DOTALL)


class _Lexer:
    def __init__(self, text: str, table: _LexTable):
        self.text = text
        self.table = table
        self.pos = 0
        self.line = 0
        self.out: List[str] = []
        n = text.count("\n") + 1
        self.has_code = [False] * n
        self.has_comment = [False] * n
        self.has_doc = [False] * n
        self.in_string = [False] * n
        self.comments: List[CommentSpan] = []

    # ── emission helpers ──

    def _mark(self, segment: str, flags: List[bool]) -> None:
        line = self.line
        for part in segment.split("\n"):
            if part.strip():
                flags[line] = True
            line += 1

    def _emit_code(self, segment: str) -> None:
        if not segment:
            return
        self._mark(segment, self.has_code)
        self.out.append(segment)
        self.line += segment.count("\n")

    def _emit_comment(self, segment: str, is_doc: bool, visible: str = "") -> None:
        start = self.line
        self._mark(segment, self.has_doc if is_doc else self.has_comment)
        # Lines carrying only comment delimiters still count as comment lines.
        self.has_comment[start] = True
        self.out.append(visible if visible else _BLANK.sub(" ", segment))
        self.line += segment.count("\n")
        self.comments.append(CommentSpan(start + 1, self.line + 1, is_doc))

    # ── main loop ──

    def run(self) -> None:
        text = self.text
        opener = self.table.opener
        while self.pos < len(text):
            m = opener.search(text, self.pos) if opener is not None else None
            if m is None:
                self._emit_code(text[self.pos :])
                self.pos = len(text)
                break
            self._emit_code(text[self.pos : m.start()])
            self.pos = m.start()
            token = m.group()
            action, closer = self.table.actions[token]

            if action == _LINE:
                self._line_comment(token)
            elif action == _BLOCK:
                self._block_comment(token, closer)
            elif action == _CHAR:
                self._char_literal(token)
            elif action == _RAW:
                self._raw_string(token, closer)
            elif action == _DOCSTRING and not self.has_code[self.line]:
                self._docstring(token)
            else:
                multiline = action in (_MSTRING, _DOCSTRING)
                self._string(token, closer, multiline=multiline, escapes=True)

    def _is_doc(self, start: int) -> bool:
        return any(self.text.startswith(p, start) for p in self.table.doc_prefixes)

    def _line_comment(self, token: str) -> None:
        end = self.text.find("\n", self.pos)
        if end == -1:
            end = len(self.text)
        segment = self.text[self.pos : end]
        self._emit_comment(segment, self._is_doc(self.pos), visible=" ")
        self.pos = end

    def _block_comment(self, token: str, closer: str) -> None:
        close_at = self.text.find(closer, self.pos + len(token))
        end = len(self.text) if close_at == -1 else close_at + len(closer)
        segment = self.text[self.pos : end]
        is_doc = self._is_doc(self.pos) and segment != token + closer
        self._emit_comment(segment, is_doc)
        self.pos = end

    def _docstring(self, token: str) -> None:
        end = self._string_end(self.pos + len(token), token, multiline=True, escapes=True)
        self._emit_comment(self.text[self.pos : end], is_doc=True)
        self.pos = end

    def _char_literal(self, token: str) -> None:
        m = _CHAR_LITERAL.match(self.text, self.pos)
        if m is None:
            self._emit_code(token)
            self.pos += len(token)
            return
        literal = m.group()
        self._emit_code("'" + " " * (len(literal) - 2) + "'")
        self.pos = m.end()

    def _raw_string(self, token: str, closer: str) -> None:
        if token[0].isalpha() and self.pos > 0:
            prev = self.text[self.pos - 1]
            before = self.text[self.pos - 2] if self.pos > 1 else ""
            prefixed = prev in "bB" and not _IDENT_CHAR.match(before or " ")
            if _IDENT_CHAR.match(prev) and not prefixed:
                self._emit_code(token[0])
                self.pos += 1
                return
        self._string(token, closer, multiline=True, escapes=False)

    def _string(self, token: str, closer: str, multiline: bool, escapes: bool) -> None:
        body_start = self.pos + len(token)
        end = self._string_end(body_start, closer, multiline, escapes)
        body_end = end
        if self.text.startswith(closer, end - len(closer)) and end - len(closer) >= body_start:
            body_end = end - len(closer)
        body = self.text[body_start:body_end]
        tail = self.text[body_end:end]

        start_line = self.line
        self._mark(self.text[self.pos : end], self.has_code)
        self.has_code[start_line] = True
        self.out.append(token + _BLANK.sub(" ", body) + tail)
        inner = body.count("\n")
        for k in range(1, inner + 1):
            self.in_string[start_line + k] = True
        self.line += inner + tail.count("\n")
        self.pos = end

    def _string_end(self, start: int, closer: str, multiline: bool, escapes: bool) -> int:
        """Index just past the closing delimiter (or where recovery stops)."""
        pattern = _string_end_pattern(closer, self.table.escape if escapes else "", multiline)
        i = start
        while True:
            m = pattern.search(self.text, i)
            if m is None:
                return len(self.text)
            found = m.group()
            if found == "\n":
                return m.start()
            if found == closer:
                return m.end()
            i = m.end()

    # ── result ──

    def result(self) -> LexResult:
        code_text = "".join(self.out)
        raw_lines = self.text.split("\n")
        code_lines = code_text.split("\n")
        if self.text.endswith("\n"):
            raw_lines.pop()
            code_lines.pop()
        if not self.text:
            raw_lines, code_lines = [], []

        lines = [_strip_cr(line) for line in raw_lines]
        code_lines = [_strip_cr(line) for line in code_lines]
        kinds = []
        for i in range(len(lines)):
            if self.has_code[i]:
                kinds.append(LineKind.CODE)
            elif self.has_doc[i]:
                kinds.append(LineKind.DOC)
            elif self.has_comment[i]:
                kinds.append(LineKind.COMMENT)
            else:
                kinds.append(LineKind.BLANK)

        last = len(lines)
        comments = [
            CommentSpan(c.start_line, min(c.end_line, last), c.is_doc)
            for c in self.comments
            if c.start_line <= last
        ]
        return LexResult(
            lines=lines,
            code_lines=code_lines,
            kinds=kinds,
            comments=comments,
            in_string=self.in_string[: len(lines)],
        )


def _strip_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


def lex(text: str, profile: LanguageProfile) -> LexResult:
    """Split ``text`` into code and comments according to ``profile``.

    Never raises on any input.
    """
    lexer = _Lexer(text, _table_for(profile))
    lexer.run()
    return lexer.result()
