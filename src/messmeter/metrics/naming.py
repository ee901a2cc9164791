"""Identifier naming conventions per language and category."""

import re

from ..models import MetricResult, Severity
from ..scanning.languages import LANGUAGES
from ..scanning.tokens import TokenStream
from .base import Metric, MetricContext, saturating_scale

CONVENTION_PATTERNS = {
    "camel": re.compile(r"^[a-z][a-zA-Z0-9]*$"),
    "pascal": re.compile(r"^[A-Z][a-zA-Z0-9]*$"),
    "snake": re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)*$"),
    "upper_snake": re.compile(r"^[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*$"),
    # BEM separators (block__element--modifier) are accepted as kebab.
    "kebab": re.compile(r"^[a-z][a-z0-9]*(?:(?:--?|__)[a-z0-9]+)*$"),
    "lower": re.compile(r"^[a-z][a-z0-9]*$"),
}

PLACEHOLDER_NAMES = frozenset({"tmp", "temp", "foo", "bar", "baz", "xxx", "dummy"})


def normalize_identifier(name: str) -> str:
    """Drop the decoration that conventions ignore: leading ``_``/``$``, trailing ``_``."""
    return name.lstrip("_$").rstrip("_")


def matches_convention(name: str, convention: str) -> bool:
    return bool(CONVENTION_PATTERNS[convention].match(name))


class NamingMetric(Metric):
    name = "naming"
    display_name = "Naming"
    description = "Identifiers that break their language's naming conventions"

    def compute(self, stream: TokenStream, ctx: MetricContext) -> MetricResult:
        t = ctx.thresholds
        checked = 0
        findings = []
        seen = set()

        for hit in stream.identifiers:
            key = (hit.name, hit.category, hit.language)
            if key in seen:
                continue
            seen.add(key)

            profile = LANGUAGES.get(hit.language, stream.profile)
            conventions = profile.conventions_for(hit.category)
            name = normalize_identifier(hit.name)
            if not conventions or len(name) < t.naming_min_length:
                continue
            checked += 1

            if name.lower() in PLACEHOLDER_NAMES:
                findings.append(
                    self.finding(hit.line, Severity.WARNING, f"placeholder {hit.category} name '{hit.name}'")
                )
            elif not any(matches_convention(name, c) for c in conventions):
                expected = " or ".join(conventions)
                findings.append(
                    self.finding(hit.line, Severity.INFO, f"{hit.category} '{hit.name}' is not {expected} case")
                )

        if checked == 0:
            return self.result(0.0)
        return self.result(saturating_scale(len(findings) / checked, t.naming_saturation), findings)
