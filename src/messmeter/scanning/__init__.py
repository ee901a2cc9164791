"""Language profiles and lexical scanning."""

from .base import BaseScanner
from .factory import scan_source, scanner_for
from .languages import (
    EXTENSION_MAP,
    LANGUAGES,
    LanguageProfile,
    detect_language,
    get_profile,
    supported_extensions,
)
from .lexer import lex
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

__all__ = [
    "BaseScanner",
    "BlockSpan",
    "CommentSpan",
    "DeclarationHit",
    "DecisionHit",
    "EXTENSION_MAP",
    "FunctionSpan",
    "IdentifierHit",
    "LANGUAGES",
    "LanguageProfile",
    "LineKind",
    "NestingPeak",
    "TokenStream",
    "detect_language",
    "get_profile",
    "lex",
    "scan_source",
    "scanner_for",
    "supported_extensions",
]
