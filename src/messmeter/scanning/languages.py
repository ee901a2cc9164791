"""Language profiles: the single source of truth for all language patterns.

Every scanner and metric is table driven. Language differences live here and
nowhere else, so supporting a new language means adding one
``LanguageProfile`` entry to ``_PROFILES``.

Pattern conventions:
  - ``function_patterns`` are matched against the whole comment-free code
    text (``re.M``) and must define a ``name`` group and usually ``params``.
    An ``arrow`` group marks arrow functions whose body may be an expression;
    a ``single`` group holds a lone unparenthesised parameter.
  - Every other pattern is matched line by line against comment-free code.
  - Name-producing patterns (class, variable, constant and state patterns)
    define a ``name`` group.
"""

import re as _re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Pattern

from ..exceptions import EmptyRegistryError

Family = str  # "brace" | "indent" | "markup" | "stylesheet"

FAMILIES = ("brace", "indent", "markup", "stylesheet")
CONVENTIONS = ("camel", "pascal", "snake", "upper_snake", "kebab", "lower")
IDENTIFIER_CATEGORIES = ("function", "variable", "class", "constant", "css-class", "html-id")


def _compile_all(patterns, flags: int = 0) -> tuple[Pattern[str], ...]:
    return tuple(_re.compile(p, flags) for p in patterns)


@dataclass(frozen=True)
class CompiledPatterns:
    """Precompiled regexes of one profile, built once at import."""

    decisions: tuple[tuple[str, Pattern[str]], ...]
    boolean_operators: tuple[Pattern[str], ...]
    ternaries: tuple[Pattern[str], ...]
    functions: tuple[Pattern[str], ...]
    classes: tuple[Pattern[str], ...]
    variables: tuple[Pattern[str], ...]
    constants: tuple[Pattern[str], ...]
    global_state: tuple[Pattern[str], ...]
    global_statements: tuple[Pattern[str], ...]
    static_state: tuple[Pattern[str], ...]
    dom_state: tuple[Pattern[str], ...]
    declaration_lines: tuple[Pattern[str], ...]
    risks: tuple[Pattern[str], ...]
    handlers: tuple[Pattern[str], ...]
    swallows: tuple[Pattern[str], ...]


@dataclass(frozen=True)
class LanguageProfile:
    """Everything the scanners and metrics need to know about a language."""

    name: str
    display_name: str
    extensions: tuple[str, ...]
    family: Family

    # === Lexical facts ===
    line_comments: tuple[str, ...] = ()
    block_comments: tuple[tuple[str, str], ...] = ()
    doc_comment_prefixes: tuple[str, ...] = ()
    docstring_delimiters: tuple[str, ...] = ()
    string_delimiters: tuple[str, ...] = ()
    multiline_string_delimiters: tuple[str, ...] = ()
    raw_string_delimiters: tuple[tuple[str, str], ...] = ()
    char_delimiter: Optional[str] = None
    escape_char: str = "\\"

    # === Control flow ===
    # (kind, regex); kinds: if, loop, case, catch
    decision_patterns: tuple[tuple[str, str], ...] = ()
    boolean_operator_patterns: tuple[str, ...] = ()
    ternary_patterns: tuple[str, ...] = ()

    # === Declarations ===
    function_patterns: tuple[str, ...] = ()
    class_patterns: tuple[str, ...] = ()
    variable_patterns: tuple[str, ...] = ()
    constant_patterns: tuple[str, ...] = ()

    # === State ===
    global_state_patterns: tuple[str, ...] = ()  # module level only
    global_statement_patterns: tuple[str, ...] = ()  # any level, kind "global"
    static_state_patterns: tuple[str, ...] = ()  # any level, kind "static"
    dom_state_patterns: tuple[str, ...] = ()  # any level, kind "dom"
    declaration_line_patterns: tuple[str, ...] = ()

    # === Error handling ===
    risk_patterns: tuple[str, ...] = ()
    handling_patterns: tuple[str, ...] = ()
    swallow_patterns: tuple[str, ...] = ()

    # === Naming ===
    naming: tuple[tuple[str, tuple[str, ...]], ...] = ()
    keywords: frozenset = frozenset()

    nesting_threshold: int = 4

    compiled: CompiledPatterns = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.family not in FAMILIES:
            raise ValueError(f"{self.name}: unknown family {self.family!r}")
        if not self.extensions:
            raise ValueError(f"{self.name}: at least one extension is required")
        for category, conventions in self.naming:
            if category not in IDENTIFIER_CATEGORIES:
                raise ValueError(f"{self.name}: unknown identifier category {category!r}")
            unknown = set(conventions) - set(CONVENTIONS)
            if unknown:
                raise ValueError(f"{self.name}: unknown conventions {sorted(unknown)}")

        compiled = CompiledPatterns(
            decisions=tuple((kind, _re.compile(p)) for kind, p in self.decision_patterns),
            boolean_operators=_compile_all(self.boolean_operator_patterns),
            ternaries=_compile_all(self.ternary_patterns),
            functions=_compile_all(self.function_patterns, _re.M),
            classes=_compile_all(self.class_patterns),
            variables=_compile_all(self.variable_patterns),
            constants=_compile_all(self.constant_patterns),
            global_state=_compile_all(self.global_state_patterns),
            global_statements=_compile_all(self.global_statement_patterns),
            static_state=_compile_all(self.static_state_patterns),
            dom_state=_compile_all(self.dom_state_patterns),
            declaration_lines=_compile_all(self.declaration_line_patterns),
            risks=_compile_all(self.risk_patterns, _re.M),
            handlers=_compile_all(self.handling_patterns, _re.M),
            swallows=_compile_all(self.swallow_patterns, _re.M),
        )
        object.__setattr__(self, "compiled", compiled)

    def conventions_for(self, category: str) -> tuple[str, ...]:
        """Allowed naming conventions for an identifier category (empty = unchecked)."""
        for cat, conventions in self.naming:
            if cat == category:
                return conventions
        return ()


# ── Re-usable building blocks ──────────────────────────────────────

_C_LINE = ("//",)
_C_BLOCK = (("/*", "*/"),)
_C_DOC = ("///", "//!", "/**", "/*!")

_C_STYLE_BOOL = (r"&&", r"\|\|")
_SPACED_TERNARY = (r"\s\?\s",)

_C_DECISIONS = (
    ("if", r"\bif\b"),
    ("loop", r"\bfor\b"),
    ("loop", r"\bwhile\b"),
    ("case", r"\bcase\b"),
    ("catch", r"\bcatch\b"),
)

# C and C++ reserved words plus preprocessor directives; never checked as names.
_C_CONTROL_KEYWORDS = frozenset(
    {
        "if", "else", "for", "while", "do", "switch", "case", "default", "break",
        "continue", "return", "goto", "sizeof", "typeof", "new", "delete", "throw",
        "catch", "try", "finally", "using", "namespace", "typedef", "struct", "union",
        "enum", "class", "static", "const", "void", "int", "char", "float", "double",
        "long", "short", "signed", "unsigned", "bool", "true", "false", "null",
        "nullptr", "this", "public", "private", "protected", "virtual", "override",
        "extern", "inline", "volatile", "register", "auto", "template", "typename",
        "operator", "friend", "explicit", "mutable", "constexpr", "noexcept",
        "static_assert", "decltype", "alignof", "defined", "include", "define",
        "ifdef", "ifndef", "endif", "pragma", "undef", "elif",
    }
)

_JAVA_KEYWORDS = frozenset(
    {
        "abstract", "assert", "boolean", "break", "byte", "case", "catch", "char",
        "class", "const", "continue", "default", "do", "double", "else", "enum",
        "extends", "final", "finally", "float", "for", "goto", "if", "implements",
        "import", "instanceof", "int", "interface", "long", "native", "new",
        "package", "private", "protected", "public", "return", "short", "static",
        "strictfp", "super", "switch", "synchronized", "this", "throw", "throws",
        "transient", "try", "void", "volatile", "while", "var", "record", "yield",
        "true", "false", "null",
    }
)

_CSHARP_KEYWORDS = frozenset(
    {
        "abstract", "as", "base", "bool", "break", "byte", "case", "catch", "char",
        "checked", "class", "const", "continue", "decimal", "default", "delegate",
        "do", "double", "else", "enum", "event", "explicit", "extern", "false",
        "finally", "fixed", "float", "for", "foreach", "goto", "if", "implicit", "in",
        "int", "interface", "internal", "is", "lock", "long", "namespace", "new",
        "null", "object", "operator", "out", "override", "params", "private",
        "protected", "public", "readonly", "ref", "return", "sbyte", "sealed",
        "short", "sizeof", "stackalloc", "static", "string", "struct", "switch",
        "this", "throw", "true", "try", "typeof", "uint", "ulong", "unchecked",
        "unsafe", "ushort", "using", "virtual", "void", "volatile", "while", "var",
        "async", "await", "get", "set", "value", "yield", "nameof", "when", "record",
    }
)

_JS_KEYWORDS = frozenset(
    {
        "break", "case", "catch", "class", "const", "continue", "debugger", "default",
        "delete", "do", "else", "export", "extends", "finally", "for", "function",
        "if", "import", "in", "instanceof", "let", "new", "return", "super", "switch",
        "this", "throw", "try", "typeof", "var", "void", "while", "with", "yield",
        "async", "await", "of", "static", "get", "set", "true", "false", "null",
        "undefined", "from", "as",
    }
)

_TS_KEYWORDS = _JS_KEYWORDS | frozenset(
    {
        "interface", "type", "enum", "implements", "private", "protected", "public",
        "readonly", "abstract", "declare", "namespace", "module", "keyof", "infer",
        "is", "any", "unknown", "never", "string", "number", "boolean", "override",
    }
)

_PYTHON_KEYWORDS = frozenset(
    {
        "False", "None", "True", "and", "as", "assert", "async", "await", "break",
        "class", "continue", "def", "del", "elif", "else", "except", "finally", "for",
        "from", "global", "if", "import", "in", "is", "lambda", "nonlocal", "not", "or",
        "pass", "raise", "return", "try", "while", "with", "yield", "match", "case",
        "self", "cls", "print",
    }
)

_GO_KEYWORDS = frozenset(
    {
        "break", "case", "chan", "const", "continue", "default", "defer", "else",
        "fallthrough", "for", "func", "go", "goto", "if", "import", "interface", "map",
        "package", "range", "return", "select", "struct", "switch", "type", "var",
        "nil", "true", "false", "err", "ok",
    }
)

_RUST_KEYWORDS = frozenset(
    {
        "as", "async", "await", "break", "const", "continue", "crate", "dyn", "else",
        "enum", "extern", "false", "fn", "for", "if", "impl", "in", "let", "loop",
        "match", "mod", "move", "mut", "pub", "ref", "return", "self", "Self",
        "static", "struct", "super", "trait", "true", "type", "unsafe", "use",
        "where", "while", "Some", "None", "Ok", "Err",
    }
)

_PHP_KEYWORDS = frozenset(
    {
        "abstract", "and", "array", "as", "break", "callable", "case", "catch",
        "class", "clone", "const", "continue", "declare", "default", "do", "echo",
        "else", "elseif", "empty", "enddeclare", "endfor", "endforeach", "endif",
        "endswitch", "endwhile", "extends", "final", "finally", "fn", "for",
        "foreach", "function", "global", "goto", "if", "implements", "include",
        "instanceof", "insteadof", "interface", "isset", "list", "match",
        "namespace", "new", "or", "print", "private", "protected", "public",
        "readonly", "require", "return", "static", "switch", "this", "throw",
        "trait", "try", "unset", "use", "var", "while", "xor", "yield", "true",
        "false", "null",
    }
)

_CSS_KEYWORDS = frozenset({"important", "media", "import", "include", "extend", "if", "else"})

_C_TYPE = r"[\w:<>,\[\]~]+"

_C_FUNCTION = (
    r"^[ \t]*(?:" + _C_TYPE + r"[\s*&]+)+?(?P<name>~?[A-Za-z_]\w*(?:::~?[A-Za-z_]\w*)*)"
    r"\s*\((?P<params>[^;{}]*?)\)"
)

_JAVA_MODIFIERS = (
    r"(?:(?:public|private|protected|internal|static|final|abstract|synchronized|native|"
    r"virtual|override|async|sealed|extern|unsafe|partial|new|default|strictfp|readonly)\s+)*"
)

_JAVA_FUNCTION = (
    r"^[ \t]*(?:@\w+(?:\([^)]*\))?\s+)*" + _JAVA_MODIFIERS + r"(?:<[^>]*>\s*)?"
    r"(?:[\w.?\[\]]+(?:\s*<[^>]*>)?[\[\]]*\s+)?(?P<name>[A-Za-z_]\w*)\s*\((?P<params>[^;{}]*?)\)"
)

_TYPED_VARIABLE = (
    r"^[ \t]*(?:(?:private|public|protected|internal|static|final|readonly|volatile|"
    r"transient|const|register|auto|unsigned|signed|mutable)\s+)*"
    r"(?!return\b|throw\b|else\b|new\b|case\b|goto\b|delete\b|using\b|namespace\b|package\b|import\b)"
    r"[A-Za-z_][\w.:]*(?:<[^;=()]*>)?[\[\]]*[\s*&]+(?P<name>[A-Za-z_]\w*)\s*(?:\[[^\]]*\]\s*)?(?:=(?!=)|;)"
)

_TYPED_DECLARATION_LINE = (
    r"^\s*(?:(?:final|const|static|readonly|var|auto)\s+)*[\w.:<>\[\]]+[\s*&]+\w+\s*=(?!=)",
)

_C_NAMING = (
    ("function", ("snake", "camel", "lower")),
    ("variable", ("snake", "camel", "lower")),
    ("class", ("pascal", "snake", "lower")),
    ("constant", ("upper_snake",)),
)

_CPP_NAMING = (
    ("function", ("snake", "camel", "pascal", "lower")),
    ("variable", ("snake", "camel", "lower")),
    ("class", ("pascal", "snake", "lower")),
    ("constant", ("upper_snake", "pascal", "camel")),
)

_C_RISKS = (
    r"\b(?:fopen|fread|fwrite|fgets|fscanf|fclose|open|read|write|close)\s*\(",
    r"\b(?:malloc|calloc|realloc|strdup)\s*\(",
    r"\b(?:socket|connect|bind|listen|accept|recv|send)\s*\(",
    r"\b(?:system|popen|fork|exec[lv]p?e?)\s*\(",
    r"\b(?:atoi|atol|strtol|strtoul|strtod|sscanf)\s*\(",
    r"\bnew\s+\w",
    r"\bstd::(?:ifstream|ofstream|fstream|stoi|stol|stod)\b",
)

_C_HANDLERS = (
    r"==\s*NULL\b",
    r"!=\s*NULL\b",
    r"==\s*nullptr\b",
    r"!=\s*nullptr\b",
    r"\bif\s*\(\s*!\s*\w+\s*\)",
    r"<\s*0\b",
    r"==\s*-1\b",
    r"\berrno\b",
    r"\bperror\s*\(",
    r"\bferror\s*\(",
    r"\btry\b",
    r"\bcatch\b",
    r"\.is_open\s*\(",
    r"\bassert\s*\(",
)

_C_SWALLOW = (r"\bcatch\s*\([^)]*\)\s*\{\s*\}",)

_JS_RISKS = (
    r"\bfetch\s*\(",
    r"\baxios\b",
    r"\bXMLHttpRequest\b",
    r"\bJSON\.parse\s*\(",
    r"\bfs\.\w+",
    r"\brequire\s*\(\s*['\"`]\s*['\"`]\s*\)\.",
    r"\bawait\b",
    r"\bnew\s+Promise\b",
    r"\bchild_process\b",
    r"\blocalStorage\.(?:getItem|setItem)\b",
    r"\bWebSocket\b",
)

_JS_HANDLERS = (
    r"\btry\b",
    r"\bcatch\b",
    r"\.catch\s*\(",
    r"\.then\s*\([^)]*,",
    r"\.finally\s*\(",
    r"\bonerror\b",
    r"\bif\s*\(\s*!?\s*(?:err|error)\b",
    r"\bres(?:ponse)?\.ok\b",
)

_JS_SWALLOW = (r"\bcatch\s*(?:\([^)]*\))?\s*\{\s*\}", r"\.catch\s*\(\s*\(\s*\)\s*=>\s*\{\s*\}\s*\)")

_JS_DOM = (
    r"\b(?P<name>localStorage|sessionStorage)\b",
    r"\bdocument\.(?P<name>getElementById|querySelector(?:All)?|getElementsBy\w+)\b",
)

_JS_GLOBAL_STATEMENTS = (
    r"\bwindow\.(?P<name>[A-Za-z_$][\w$]*)\s*=(?!=)",
    r"\bglobalThis\.(?P<name>[A-Za-z_$][\w$]*)\s*=(?!=)",
)

_JS_FUNCTIONS = (
    r"^[ \t]*(?:export\s+)?(?:default\s+)?(?:async\s+)?function\s*\*?\s*(?P<name>[A-Za-z_$][\w$]*)"
    r"\s*(?:<[^>(]*>)?\s*\((?P<params>[^)]*)\)",
    r"^[ \t]*(?:export\s+)?(?:const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)\s*(?::[^=\n]+)?=\s*"
    r"(?:async\s+)?(?:\((?P<params>[^)]*)\)|(?P<single>[A-Za-z_$][\w$]*))\s*(?::\s*[^=\n]+)?(?P<arrow>=>)",
    r"^[ \t]*(?:export\s+)?(?:const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)\s*=\s*(?:async\s+)?"
    r"function\b\s*\*?\s*\w*\s*\((?P<params>[^)]*)\)",
    r"^[ \t]*(?:(?:public|private|protected|static|async|readonly|override|abstract|get|set)\s+)*"
    r"\*?(?P<name>[A-Za-z_$][\w$]*)\s*(?:<[^>(]*>)?\s*\((?P<params>[^()]*)\)\s*(?::\s*[^{;=]+)?\{",
)

_JS_NAMING = (
    ("function", ("camel", "pascal")),
    ("variable", ("camel", "upper_snake", "pascal")),
    ("class", ("pascal",)),
    ("constant", ("upper_snake", "camel", "pascal")),
)


_PROFILES = (
    LanguageProfile(
        name="rust",
        display_name="Rust",
        extensions=(".rs",),
        family="brace",
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        doc_comment_prefixes=_C_DOC,
        string_delimiters=(),
        multiline_string_delimiters=('"',),
        raw_string_delimiters=(('r##"', '"##'), ('r#"', '"#'), ('r"', '"')),
        char_delimiter="'",
        decision_patterns=(
            ("if", r"\bif\b"),
            ("loop", r"\bfor\b"),
            ("loop", r"\bwhile\b"),
            ("loop", r"\bloop\b"),
            ("case", r"=>"),
        ),
        boolean_operator_patterns=_C_STYLE_BOOL,
        function_patterns=(
            r"^[ \t]*(?:pub(?:\([^)]*\))?\s+)?(?:(?:const|async|unsafe|default)\s+)*"
            r"(?:extern\s+\"[^\"]*\"\s+)?fn\s+(?P<name>[A-Za-z_]\w*)\s*(?:<[^{(]*>)?\s*\((?P<params>[^)]*)\)",
        ),
        class_patterns=(r"\b(?:struct|enum|trait|union|type)\s+(?P<name>[A-Za-z_]\w*)",),
        variable_patterns=(r"\blet\s+(?:mut\s+)?(?P<name>[A-Za-z_]\w*)",),
        constant_patterns=(
            r"^\s*(?:pub(?:\([^)]*\))?\s+)?(?:const|static)\s+(?:mut\s+)?(?P<name>[A-Za-z_]\w*)\s*:",
        ),
        static_state_patterns=(
            r"\bstatic\s+mut\s+(?P<name>[A-Za-z_]\w*)",
            r"\b(?P<name>thread_local|lazy_static)!",
        ),
        declaration_line_patterns=(r"^\s*let\s",),
        risk_patterns=(
            r"\.unwrap\s*\(\s*\)",
            r"\.expect\s*\(",
            r"\bFile::(?:open|create)\b",
            r"\bfs::\w+",
            r"\.parse\s*(?:::<[^>]*>)?\s*\(",
            r"\bTcpStream\b",
            r"\bCommand::new\b",
            r"\bpanic!",
            r"\bunsafe\b",
        ),
        handling_patterns=(
            r"\?\s*[;.)]",
            r"\bResult\s*<",
            r"\bmatch\b[^{]*\{",
            r"\bif\s+let\s+(?:Ok|Err|Some)\b",
            r"\.(?:unwrap_or|unwrap_or_else|unwrap_or_default|ok_or|ok_or_else|map_err|and_then)\s*\(",
            r"\bErr\s*\(",
        ),
        naming=(
            ("function", ("snake",)),
            ("variable", ("snake",)),
            ("class", ("pascal",)),
            ("constant", ("upper_snake",)),
        ),
        keywords=_RUST_KEYWORDS,
    ),
    LanguageProfile(
        name="go",
        display_name="Go",
        extensions=(".go",),
        family="brace",
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        string_delimiters=('"',),
        raw_string_delimiters=(("`", "`"),),
        char_delimiter="'",
        decision_patterns=(
            ("if", r"\bif\b"),
            ("loop", r"\bfor\b"),
            ("case", r"\bcase\b"),
        ),
        boolean_operator_patterns=_C_STYLE_BOOL,
        function_patterns=(
            r"^[ \t]*func\s*(?:\([^)]*\)\s*)?(?P<name>[A-Za-z_]\w*)\s*(?:\[[^\]]*\])?\s*\((?P<params>[^)]*)\)",
        ),
        class_patterns=(r"^\s*type\s+(?P<name>[A-Za-z_]\w*)\s+(?:struct|interface)\b",),
        variable_patterns=(
            r"^\s*(?P<name>[A-Za-z_]\w*)\s*(?:,\s*[A-Za-z_]\w*\s*)*:=",
            r"^\s*var\s+(?P<name>[A-Za-z_]\w*)",
        ),
        constant_patterns=(r"^\s*const\s+(?P<name>[A-Za-z_]\w*)",),
        global_state_patterns=(r"^var\s+(?P<name>[A-Za-z_]\w*)",),
        declaration_line_patterns=(r"^\s*\w+(?:\s*,\s*\w+)*\s*:=", r"^\s*var\s"),
        risk_patterns=(
            r"\bos\.(?:Open|Create|ReadFile|WriteFile|Remove|Mkdir\w*)\s*\(",
            r"\bioutil\.\w+\s*\(",
            r"\bhttp\.(?:Get|Post|NewRequest|ListenAndServe)\w*\s*\(",
            r"\bjson\.(?:Unmarshal|Marshal|NewDecoder)\b",
            r"\bstrconv\.(?:Atoi|Parse\w+)\s*\(",
            r"\bsql\.Open\s*\(",
            r"\bexec\.Command\s*\(",
            r"\.(?:Query|Exec|Scan|Do)\s*\(",
        ),
        handling_patterns=(
            r"\bif\s+err\s*!=\s*nil\b",
            r"\berr\s*!=\s*nil\b",
            r"\breturn\s+[^\n]*\berr\b",
            r"\berrors\.(?:Is|As|New|Wrap)\b",
            r"\bfmt\.Errorf\s*\(",
            r"\brecover\s*\(\s*\)",
        ),
        swallow_patterns=(r"\bif\s+err\s*!=\s*nil\s*\{\s*\}", r"^\s*_\s*(?:,\s*_\s*)?=\s*\w"),
        naming=(
            ("function", ("camel", "pascal")),
            ("variable", ("camel", "pascal")),
            ("class", ("pascal", "camel")),
            ("constant", ("camel", "pascal")),
        ),
        keywords=_GO_KEYWORDS,
    ),
    LanguageProfile(
        name="javascript",
        display_name="JavaScript",
        extensions=(".js", ".mjs", ".cjs"),
        family="brace",
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        doc_comment_prefixes=("/**",),
        string_delimiters=('"', "'"),
        multiline_string_delimiters=("`",),
        decision_patterns=_C_DECISIONS,
        boolean_operator_patterns=_C_STYLE_BOOL + (r"\?\?",),
        ternary_patterns=_SPACED_TERNARY,
        function_patterns=_JS_FUNCTIONS,
        class_patterns=(r"\bclass\s+(?P<name>[A-Za-z_$][\w$]*)",),
        variable_patterns=(r"\b(?:let|var|const)\s+(?P<name>[A-Za-z_$][\w$]*)",),
        global_state_patterns=(r"^\s*(?:export\s+)?(?:let|var)\s+(?P<name>[A-Za-z_$][\w$]*)",),
        global_statement_patterns=_JS_GLOBAL_STATEMENTS,
        dom_state_patterns=_JS_DOM,
        declaration_line_patterns=(r"^\s*(?:export\s+)?(?:const|let|var)\s",),
        risk_patterns=_JS_RISKS,
        handling_patterns=_JS_HANDLERS,
        swallow_patterns=_JS_SWALLOW,
        naming=_JS_NAMING,
        keywords=_JS_KEYWORDS,
    ),
    LanguageProfile(
        name="typescript",
        display_name="TypeScript",
        extensions=(".ts", ".tsx", ".jsx"),
        family="brace",
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        doc_comment_prefixes=("/**",),
        string_delimiters=('"', "'"),
        multiline_string_delimiters=("`",),
        decision_patterns=_C_DECISIONS,
        boolean_operator_patterns=_C_STYLE_BOOL + (r"\?\?",),
        ternary_patterns=_SPACED_TERNARY,
        function_patterns=_JS_FUNCTIONS,
        class_patterns=(
            r"\b(?:class|interface|enum)\s+(?P<name>[A-Za-z_$][\w$]*)",
            r"^\s*(?:export\s+)?type\s+(?P<name>[A-Za-z_$][\w$]*)\s*(?:<[^>]*>)?\s*=",
        ),
        variable_patterns=(r"\b(?:let|var|const)\s+(?P<name>[A-Za-z_$][\w$]*)",),
        global_state_patterns=(r"^\s*(?:export\s+)?(?:let|var)\s+(?P<name>[A-Za-z_$][\w$]*)",),
        global_statement_patterns=_JS_GLOBAL_STATEMENTS,
        dom_state_patterns=_JS_DOM,
        declaration_line_patterns=(r"^\s*(?:export\s+)?(?:const|let|var)\s",),
        risk_patterns=_JS_RISKS,
        handling_patterns=_JS_HANDLERS,
        swallow_patterns=_JS_SWALLOW,
        naming=_JS_NAMING,
        keywords=_TS_KEYWORDS,
    ),
    LanguageProfile(
        name="python",
        display_name="Python",
        extensions=(".py", ".pyw"),
        family="indent",
        line_comments=("#",),
        docstring_delimiters=('"""', "'''"),
        string_delimiters=('"', "'"),
        multiline_string_delimiters=('"""', "'''"),
        decision_patterns=(
            ("if", r"\bif\b"),
            ("if", r"\belif\b"),
            ("loop", r"\bfor\b"),
            ("loop", r"\bwhile\b"),
            ("case", r"^\s*case\b"),
            ("catch", r"\bexcept\b"),
        ),
        boolean_operator_patterns=(r"\band\b", r"\bor\b"),
        function_patterns=(
            r"^[ \t]*(?:async[ \t]+)?def[ \t]+(?P<name>[A-Za-z_]\w*)\s*\((?P<params>[^)]*)\)",
        ),
        class_patterns=(r"^\s*class\s+(?P<name>[A-Za-z_]\w*)",),
        variable_patterns=(r"^\s*(?P<name>[A-Za-z_]\w*)\s*(?::[^=\n]+)?=(?!=)",),
        constant_patterns=(r"^(?P<name>[A-Z][A-Z0-9_]*)\s*(?::[^=\n]+)?=(?!=)",),
        global_state_patterns=(r"^(?P<name>[a-z_][a-z0-9_]*)\s*(?::[^=\n]+)?=(?!=)",),
        global_statement_patterns=(r"^\s*global\s+(?P<name>[A-Za-z_]\w*)",),
        declaration_line_patterns=(r"^\s*[A-Za-z_][\w.]*\s*(?::[^=\n]+)?=(?!=)",),
        risk_patterns=(
            r"\bopen\s*\(",
            r"\bjson\.loads?\s*\(",
            r"\b(?:requests|httpx|urllib\.request)\.\w+\s*\(",
            r"\burlopen\s*\(",
            r"\bsubprocess\.\w+\s*\(",
            r"\bos\.(?:remove|rename|replace|makedirs|mkdir|rmdir|unlink|system|listdir)\s*\(",
            r"\bshutil\.\w+\s*\(",
            r"\bsocket\.\w+\s*\(",
            r"\.(?:read_text|write_text|read_bytes|write_bytes)\s*\(",
            r"\b(?:pickle|yaml)\.(?:load|loads)\s*\(",
            r"\bsqlite3\.connect\s*\(",
        ),
        handling_patterns=(
            r"^\s*try\s*:",
            r"^\s*except\b",
            r"\bwith\s+(?:contextlib\.)?suppress\s*\(",
            r"^\s*raise\b",
            r"@\w*retry\w*",
        ),
        swallow_patterns=(
            r"^\s*except[^:\n]*:\s*(?:\n\s*)?pass\b",
            r"^\s*except[^:\n]*:\s*(?:\n\s*)?\.\.\.",
        ),
        naming=(
            ("function", ("snake",)),
            ("variable", ("snake", "upper_snake")),
            ("class", ("pascal",)),
            ("constant", ("upper_snake",)),
        ),
        keywords=_PYTHON_KEYWORDS,
    ),
    LanguageProfile(
        name="java",
        display_name="Java",
        extensions=(".java",),
        family="brace",
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        doc_comment_prefixes=("/**",),
        string_delimiters=('"',),
        multiline_string_delimiters=('"""',),
        char_delimiter="'",
        decision_patterns=_C_DECISIONS,
        boolean_operator_patterns=_C_STYLE_BOOL,
        ternary_patterns=_SPACED_TERNARY,
        function_patterns=(_JAVA_FUNCTION,),
        class_patterns=(r"\b(?:class|interface|enum|record)\s+(?P<name>[A-Za-z_]\w*)",),
        variable_patterns=(_TYPED_VARIABLE,),
        constant_patterns=(r"\bstatic\s+final\s+[\w.<>\[\],?]+\s+(?P<name>[A-Za-z_]\w*)\s*=",),
        static_state_patterns=(
            r"\bstatic\s+(?!final\b)(?:(?:volatile|transient|public|private|protected)\s+)*"
            r"[\w.<>\[\],?]+\s+(?P<name>[A-Za-z_]\w*)\s*(?:=(?!=)|;)",
        ),
        declaration_line_patterns=_TYPED_DECLARATION_LINE,
        risk_patterns=(
            r"\bnew\s+(?:File\w*|Buffered\w+|Socket|URL|Scanner)\s*\(",
            r"\bFiles\.\w+\s*\(",
            r"\b(?:Integer|Long|Double|Float)\.(?:parseInt|parseLong|parseDouble|parseFloat|valueOf)\s*\(",
            r"\bClass\.forName\s*\(",
            r"\.(?:openConnection|executeQuery|executeUpdate|getConnection)\s*\(",
            r"\bRuntime\.getRuntime\s*\(\s*\)\.exec\b",
            r"\bThread\.sleep\s*\(",
        ),
        handling_patterns=(r"\btry\b", r"\bcatch\b", r"\bthrows\b", r"\bOptional\b"),
        swallow_patterns=_C_SWALLOW,
        naming=(
            ("function", ("camel",)),
            ("variable", ("camel",)),
            ("class", ("pascal",)),
            ("constant", ("upper_snake",)),
        ),
        keywords=_JAVA_KEYWORDS,
    ),
    LanguageProfile(
        name="cpp",
        display_name="C++",
        extensions=(".cpp", ".cc", ".cxx", ".hpp", ".hh", ".hxx", ".h++"),
        family="brace",
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        doc_comment_prefixes=_C_DOC,
        string_delimiters=('"',),
        raw_string_delimiters=(('R"(', ')"'),),
        char_delimiter="'",
        decision_patterns=_C_DECISIONS,
        boolean_operator_patterns=_C_STYLE_BOOL + (r"\band\b", r"\bor\b"),
        ternary_patterns=_SPACED_TERNARY,
        function_patterns=(_C_FUNCTION,),
        class_patterns=(r"\b(?:class|struct|union|enum(?:\s+class)?)\s+(?P<name>[A-Za-z_]\w*)\s*(?:[:{]|$)",),
        variable_patterns=(_TYPED_VARIABLE,),
        constant_patterns=(
            r"^\s*#\s*define\s+(?P<name>[A-Za-z_]\w*)",
            r"\b(?:constexpr|const)\s+[\w:<>]+\s+(?P<name>[A-Za-z_]\w*)\s*=",
        ),
        global_state_patterns=(
            r"^(?!\s*(?:static|const|constexpr|typedef|using|return|extern\s+\"C\")\b)"
            r"(?:extern\s+)?(?:(?:unsigned|signed|long|short|volatile)\s+)*[A-Za-z_][\w:<>]*[\s*&]+"
            r"(?P<name>[A-Za-z_]\w*)\s*(?:\[[^\]]*\]\s*)?(?:=[^=]|;)",
        ),
        static_state_patterns=(
            r"\bstatic\s+(?!const\b|constexpr\b|inline\b)(?:(?:volatile|unsigned|signed|long|short|struct)\s+)*"
            r"[A-Za-z_][\w:<>]*[\s*&]+(?P<name>[A-Za-z_]\w*)\s*(?:\[[^\]]*\]\s*)?(?:=[^=]|;)",
        ),
        declaration_line_patterns=_TYPED_DECLARATION_LINE,
        risk_patterns=_C_RISKS,
        handling_patterns=_C_HANDLERS,
        swallow_patterns=_C_SWALLOW,
        naming=_CPP_NAMING,
        keywords=_C_CONTROL_KEYWORDS,
    ),
    LanguageProfile(
        name="c",
        display_name="C",
        extensions=(".c", ".h"),
        family="brace",
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        doc_comment_prefixes=_C_DOC,
        string_delimiters=('"',),
        char_delimiter="'",
        decision_patterns=_C_DECISIONS,
        boolean_operator_patterns=_C_STYLE_BOOL,
        ternary_patterns=_SPACED_TERNARY,
        function_patterns=(_C_FUNCTION,),
        class_patterns=(r"\b(?:struct|union|enum)\s+(?P<name>[A-Za-z_]\w*)\s*(?:\{|$)",),
        variable_patterns=(_TYPED_VARIABLE,),
        constant_patterns=(r"^\s*#\s*define\s+(?P<name>[A-Za-z_]\w*)",),
        global_state_patterns=(
            r"^(?!\s*(?:static|const|typedef|return|extern)\b)"
            r"(?:(?:unsigned|signed|long|short|volatile)\s+)*[A-Za-z_]\w*[\s*]+"
            r"(?P<name>[A-Za-z_]\w*)\s*(?:\[[^\]]*\]\s*)?(?:=[^=]|;)",
        ),
        static_state_patterns=(
            r"\bstatic\s+(?!const\b|inline\b)(?:(?:volatile|unsigned|signed|long|short|struct)\s+)*"
            r"[A-Za-z_]\w*[\s*]+(?P<name>[A-Za-z_]\w*)\s*(?:\[[^\]]*\]\s*)?(?:=[^=]|;)",
        ),
        declaration_line_patterns=_TYPED_DECLARATION_LINE,
        risk_patterns=_C_RISKS,
        handling_patterns=_C_HANDLERS,
        naming=_C_NAMING,
        keywords=_C_CONTROL_KEYWORDS,
    ),
    LanguageProfile(
        name="csharp",
        display_name="C#",
        extensions=(".cs", ".razor"),
        family="brace",
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        doc_comment_prefixes=("///", "/**"),
        string_delimiters=('"',),
        multiline_string_delimiters=('"""',),
        raw_string_delimiters=(('@"', '"'),),
        char_delimiter="'",
        decision_patterns=_C_DECISIONS + (("loop", r"\bforeach\b"),),
        boolean_operator_patterns=_C_STYLE_BOOL + (r"\?\?",),
        ternary_patterns=_SPACED_TERNARY,
        function_patterns=(_JAVA_FUNCTION,),
        class_patterns=(r"\b(?:class|interface|enum|struct|record)\s+(?P<name>[A-Za-z_]\w*)",),
        variable_patterns=(_TYPED_VARIABLE,),
        constant_patterns=(r"\bconst\s+[\w.<>\[\]?]+\s+(?P<name>[A-Za-z_]\w*)\s*=",),
        static_state_patterns=(
            r"\bstatic\s+(?!readonly\b|class\b|void\b)(?:(?:volatile|public|private|protected|internal)\s+)*"
            r"[\w.<>\[\],?]+\s+(?P<name>[A-Za-z_]\w*)\s*(?:=(?!=)|;)",
        ),
        declaration_line_patterns=_TYPED_DECLARATION_LINE,
        risk_patterns=(
            r"\bFile\.\w+\s*\(",
            r"\bnew\s+(?:StreamReader|StreamWriter|FileStream|HttpClient|SqlConnection)\s*\(",
            r"\b(?:int|long|double|decimal|DateTime|Guid)\.Parse\s*\(",
            r"\bJsonSerializer\.Deserialize\b",
            r"\bProcess\.Start\s*\(",
            r"\.(?:GetAsync|PostAsync|SendAsync|ExecuteReader|ExecuteNonQuery)\s*\(",
        ),
        handling_patterns=(r"\btry\b", r"\bcatch\b", r"\.TryParse\s*\(", r"\busing\s*\(", r"\?\."),
        swallow_patterns=_C_SWALLOW,
        naming=(
            ("function", ("pascal",)),
            ("variable", ("camel", "pascal")),
            ("class", ("pascal",)),
            ("constant", ("pascal", "upper_snake")),
        ),
        keywords=_CSHARP_KEYWORDS,
    ),
    LanguageProfile(
        name="php",
        display_name="PHP",
        extensions=(".php", ".php3", ".php4", ".php5", ".php7", ".php8", ".phtml"),
        family="brace",
        line_comments=("//", "#"),
        block_comments=_C_BLOCK,
        doc_comment_prefixes=("/**",),
        string_delimiters=('"', "'"),
        decision_patterns=_C_DECISIONS
        + (("if", r"\belseif\b"), ("loop", r"\bforeach\b"), ("case", r"\bmatch\b")),
        boolean_operator_patterns=_C_STYLE_BOOL + (r"\band\b", r"\bor\b", r"\?\?"),
        ternary_patterns=_SPACED_TERNARY,
        function_patterns=(
            r"^[ \t]*(?:(?:public|private|protected|static|final|abstract)\s+)*function\s+&?"
            r"(?P<name>[A-Za-z_]\w*)\s*\((?P<params>[^)]*)\)",
        ),
        class_patterns=(r"\b(?:class|interface|trait|enum)\s+(?P<name>[A-Za-z_]\w*)",),
        variable_patterns=(r"\$(?P<name>[A-Za-z_]\w*)\s*=(?!=|>)",),
        constant_patterns=(r"\bconst\s+(?P<name>[A-Za-z_]\w*)\s*=",),
        global_state_patterns=(r"^\s*\$(?P<name>[A-Za-z_]\w*)\s*=(?!=|>)",),
        global_statement_patterns=(
            r"\bglobal\s+\$(?P<name>[A-Za-z_]\w*)",
            r"\$(?P<name>GLOBALS)\s*\[",
        ),
        static_state_patterns=(r"\bstatic\s+\$(?P<name>[A-Za-z_]\w*)",),
        declaration_line_patterns=(r"^\s*\$\w+\s*=(?!=)",),
        risk_patterns=(
            r"\b(?:fopen|file_get_contents|file_put_contents|fwrite|unlink|mkdir)\s*\(",
            r"\b(?:mysqli_query|mysql_query|pg_query)\s*\(",
            r"\bnew\s+PDO\s*\(",
            r"->(?:query|prepare|execute)\s*\(",
            r"\bjson_decode\s*\(",
            r"\b(?:curl_exec|exec|shell_exec|system|passthru)\s*\(",
            r"\bunserialize\s*\(",
        ),
        handling_patterns=(
            r"\btry\b",
            r"\bcatch\b",
            r"===?\s*false\b",
            r"!==?\s*false\b",
            r"\bor\s+die\b",
            r"\bjson_last_error\s*\(",
            r"\bthrow\s+new\b",
        ),
        swallow_patterns=(r"\bcatch\s*\([^)]*\)\s*\{\s*\}", r"@\s*(?:fopen|file_get_contents|unlink)\b"),
        naming=(
            ("function", ("camel", "snake")),
            ("variable", ("camel", "snake")),
            ("class", ("pascal",)),
            ("constant", ("upper_snake",)),
        ),
        keywords=_PHP_KEYWORDS,
    ),
    LanguageProfile(
        name="html",
        display_name="HTML",
        extensions=(".html", ".htm", ".xhtml"),
        family="markup",
        block_comments=(("<!--", "-->"),),
        naming=(
            ("css-class", ("kebab", "camel", "snake")),
            ("html-id", ("kebab", "camel", "snake")),
        ),
        nesting_threshold=12,
    ),
    LanguageProfile(
        name="css",
        display_name="CSS",
        extensions=(".css",),
        family="stylesheet",
        block_comments=_C_BLOCK,
        doc_comment_prefixes=("/**",),
        string_delimiters=('"', "'"),
        naming=(
            ("css-class", ("kebab", "camel", "snake")),
            ("html-id", ("kebab", "camel", "snake")),
        ),
        keywords=_CSS_KEYWORDS,
        nesting_threshold=3,
    ),
    LanguageProfile(
        name="scss",
        display_name="SCSS/Sass/Less",
        extensions=(".scss", ".sass", ".less"),
        family="stylesheet",
        line_comments=_C_LINE,
        block_comments=_C_BLOCK,
        doc_comment_prefixes=("///", "/**"),
        string_delimiters=('"', "'"),
        decision_patterns=(
            ("if", r"@if\b"),
            ("if", r"@else\s+if\b"),
            ("loop", r"@each\b"),
            ("loop", r"@for\b"),
            ("loop", r"@while\b"),
            ("if", r"\bwhen\s*\("),
        ),
        boolean_operator_patterns=(r"\band\b", r"\bor\b"),
        function_patterns=(
            r"^[ \t]*@(?:mixin|function)\s+(?P<name>[A-Za-z_][\w-]*)\s*(?:\((?P<params>[^)]*)\))?",
        ),
        variable_patterns=(r"^\s*[$@](?P<name>[A-Za-z_][\w-]*)\s*:",),
        global_statement_patterns=(r"\$(?P<name>[A-Za-z_][\w-]*)\s*:[^;]*!global\b",),
        naming=(
            ("function", ("kebab", "camel", "snake")),
            ("variable", ("kebab", "camel", "snake")),
            ("css-class", ("kebab", "camel", "snake")),
            ("html-id", ("kebab", "camel", "snake")),
        ),
        keywords=_CSS_KEYWORDS,
        nesting_threshold=3,
    ),
)


def _build_registry(profiles) -> Mapping[str, LanguageProfile]:
    if not profiles:
        raise EmptyRegistryError()
    table = {}
    for profile in profiles:
        if profile.name in table:
            raise ValueError(f"duplicate language profile: {profile.name}")
        table[profile.name] = profile
    return MappingProxyType(table)


def _build_extension_map(profiles) -> Mapping[str, str]:
    ext_map = {}
    for profile in profiles:
        for ext in profile.extensions:
            ext_map[ext.lower()] = profile.name
    return MappingProxyType(ext_map)


LANGUAGES: Mapping[str, LanguageProfile] = _build_registry(_PROFILES)
EXTENSION_MAP: Mapping[str, str] = _build_extension_map(_PROFILES)


def get_profile(name: str) -> LanguageProfile:
    """Look up a profile by language name.

    Raises:
        KeyError: If the language is not registered
    """
    return LANGUAGES[name]


def detect_language(path) -> Optional[LanguageProfile]:
    """Return the profile for a file path by extension, or None if unsupported."""
    suffix = Path(path).suffix.lower()
    if not suffix:
        return None
    name = EXTENSION_MAP.get(suffix)
    if name is None:
        return None
    return LANGUAGES[name]


def supported_extensions() -> list[str]:
    return sorted(EXTENSION_MAP)
