"""Scanner factory: resolves a language profile to its scanner instance."""

from functools import lru_cache

from ..logging_config import get_logger
from .base import BaseScanner
from .brace import BraceScanner
from .indent import IndentScanner
from .languages import LanguageProfile
from .markup import MarkupScanner
from .stylesheet import StylesheetScanner
from .tokens import TokenStream

logger = get_logger(__name__)

_SCANNERS = {
    "brace": BraceScanner,
    "indent": IndentScanner,
    "markup": MarkupScanner,
    "stylesheet": StylesheetScanner,
}


@lru_cache(maxsize=None)
def scanner_for(profile: LanguageProfile) -> BaseScanner:
    """Return the shared scanner for a profile (scanners are stateless)."""
    try:
        cls = _SCANNERS[profile.family]
    except KeyError:
        raise ValueError(f"no scanner for family {profile.family!r} ({profile.name})") from None
    logger.debug(f"Created {cls.__name__} for {profile.name}")
    return cls(profile)


def scan_source(text: str, profile: LanguageProfile, path: str = "") -> TokenStream:
    """Scan source text into a ``TokenStream``. Never raises on malformed input."""
    return scanner_for(profile).scan(text, path)
