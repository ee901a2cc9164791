"""Tests for the language profile registry and scanner factory."""

import pytest

from messmeter.scanning import (
    EXTENSION_MAP,
    LANGUAGES,
    BaseScanner,
    LanguageProfile,
    TokenStream,
    detect_language,
    get_profile,
    scan_source,
    scanner_for,
    supported_extensions,
)
from messmeter.scanning.brace import BraceScanner
from messmeter.scanning.indent import IndentScanner
from messmeter.scanning.languages import FAMILIES
from messmeter.scanning.markup import MarkupScanner
from messmeter.scanning.stylesheet import StylesheetScanner


class TestRegistry:
    """The registry is the single source of language facts."""

    def test_expected_languages(self):
        expected = {
            "rust", "go", "javascript", "typescript", "python", "java", "cpp", "c",
            "csharp", "php", "html", "css", "scss",
        }
        assert set(LANGUAGES) == expected

    def test_every_profile_has_a_known_family(self):
        for profile in LANGUAGES.values():
            assert profile.family in FAMILIES

    def test_extensions_are_unique(self):
        seen = {}
        for profile in LANGUAGES.values():
            for ext in profile.extensions:
                assert ext not in seen, f"{ext} claimed by {seen.get(ext)} and {profile.name}"
                seen[ext] = profile.name

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            LANGUAGES["cobol"] = LANGUAGES["c"]

    def test_nesting_thresholds(self):
        assert LANGUAGES["html"].nesting_threshold == 12
        assert LANGUAGES["css"].nesting_threshold == 3
        assert LANGUAGES["python"].nesting_threshold == 4

    def test_get_profile_unknown(self):
        with pytest.raises(KeyError):
            get_profile("cobol")

    def test_conventions_for(self):
        python = get_profile("python")
        assert python.conventions_for("class") == ("pascal",)
        assert python.conventions_for("css-class") == ()


class TestDetectLanguage:
    """Extension based detection."""

    @pytest.mark.parametrize(
        "path, language",
        [
            ("app.py", "python"),
            ("Main.JAVA", "java"),
            ("lib/util.h", "c"),
            ("engine.hpp", "cpp"),
            ("view.tsx", "typescript"),
            ("theme.less", "scss"),
            ("index.htm", "html"),
            ("Program.cs", "csharp"),
        ],
    )
    def test_known_extensions(self, path, language):
        assert detect_language(path).name == language

    @pytest.mark.parametrize("path", ["Makefile", "notes.txt", "README.md", "archive.tar.gz"])
    def test_unknown_extensions(self, path):
        assert detect_language(path) is None

    def test_supported_extensions_sorted(self):
        extensions = supported_extensions()
        assert extensions == sorted(extensions)
        assert ".rs" in extensions
        assert set(extensions) == set(EXTENSION_MAP)


class TestProfileValidation:
    """Profiles reject inconsistent definitions."""

    def test_unknown_family(self):
        with pytest.raises(ValueError):
            LanguageProfile(name="x", display_name="X", extensions=(".x",), family="lisp")

    def test_missing_extensions(self):
        with pytest.raises(ValueError):
            LanguageProfile(name="x", display_name="X", extensions=(), family="brace")

    def test_unknown_convention(self):
        with pytest.raises(ValueError):
            LanguageProfile(
                name="x",
                display_name="X",
                extensions=(".x",),
                family="brace",
                naming=(("function", ("screaming",)),),
            )

    def test_patterns_are_precompiled(self):
        profile = LanguageProfile(
            name="x",
            display_name="X",
            extensions=(".x",),
            family="brace",
            decision_patterns=(("if", r"\bwhen\b"),),
        )
        kind, pattern = profile.compiled.decisions[0]
        assert kind == "if"
        assert pattern.search("when ready")


class TestScannerFactory:
    """Each family maps to one shared scanner."""

    @pytest.mark.parametrize(
        "language, cls",
        [
            ("javascript", BraceScanner),
            ("python", IndentScanner),
            ("html", MarkupScanner),
            ("scss", StylesheetScanner),
        ],
    )
    def test_scanner_class(self, language, cls):
        assert type(scanner_for(get_profile(language))) is cls

    def test_scanner_is_shared(self):
        profile = get_profile("go")
        assert scanner_for(profile) is scanner_for(profile)
        assert isinstance(scanner_for(profile), BaseScanner)

    def test_custom_profile_gets_family_scanner(self):
        profile = LanguageProfile(name="toy", display_name="Toy", extensions=(".toy",), family="indent")
        assert isinstance(scanner_for(profile), IndentScanner)

    @pytest.mark.parametrize("language", sorted(LANGUAGES))
    def test_malformed_input_never_raises(self, language):
        text = "}}} {{{ ((( \"unterminated\n'\n/* open\n<div <script>\n#{ @media {\n\tdef (:\n"
        stream = scan_source(text, get_profile(language), "broken")
        assert isinstance(stream, TokenStream)
        assert len(stream.kinds) == len(stream.lines) == len(stream.code_lines)

    @pytest.mark.parametrize("language", sorted(LANGUAGES))
    def test_empty_input(self, language):
        stream = scan_source("", get_profile(language))
        assert stream.total_lines == 0
        assert stream.functions == []
        assert stream.code_line_count == 0
