"""Configuration loading and management for messmeter.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.messmeter.toml)
    3. Project config (./messmeter.toml)
    4. Explicit config file
    5. Environment variables (MESSMETER_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(top_files=10)
    >>> config.top_files
    10
    >>> config.weights.total
    113.0
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError, InvalidWeightsError

Verbosity = Literal["quiet", "normal", "verbose"]

# Order matters: it is the order metrics appear in reports.
METRIC_NAMES = (
    "complexity",
    "state",
    "comments",
    "duplication",
    "structure",
    "error_handling",
    "naming",
)


@dataclass(frozen=True)
class MetricWeights:
    """Relative weight of each metric in the composite score.

    The documented table is 30/20/15/15/15/10/8, which sums to 113 rather
    than 100. Weights are treated as relative priorities: composite scores
    divide by ``total`` so the result stays on the 0-100 scale.
    """

    complexity: float = 30.0
    state: float = 20.0
    comments: float = 15.0
    duplication: float = 15.0
    structure: float = 15.0
    error_handling: float = 10.0
    naming: float = 8.0

    def __post_init__(self) -> None:
        table = self.as_dict()
        for name, value in table.items():
            if value < 0:
                raise InvalidWeightsError(table, f"weight '{name}' is negative")
        if self.total <= 0:
            raise InvalidWeightsError(table, "weights must not all be zero")

    @property
    def total(self) -> float:
        """Normalizer used when combining sub-scores."""
        return float(sum(self.as_dict().values()))

    def as_dict(self) -> dict[str, float]:
        return {name: float(getattr(self, name)) for name in METRIC_NAMES}

    def normalized(self) -> dict[str, float]:
        """Weights scaled so they sum to 1.0."""
        total = self.total
        return {name: value / total for name, value in self.as_dict().items()}


@dataclass(frozen=True)
class ThresholdConfig:
    """Metric thresholds and tuning parameters.

    Lower thresholds produce more findings and higher sub-scores; higher
    thresholds are more forgiving.

    Attributes:
        Complexity:
            complexity_low: Complexity at or below this scores 0
            complexity_high: Complexity at or above this scores 100
            complexity_max_share: Share of the worst function in the score
                (the file average takes the rest)
            complexity_warn / complexity_critical: Per-function finding levels

        State:
            state_saturation_density: Weighted declarations per 100 code
                lines that saturate the score
            dom_state_weight: Weight of a DOM/global-state proxy hit

        Comments:
            comment_target_ratio: Comment ratio that scores 0
            doc_comment_bonus: Multiplier for documentation comment lines
            large_function_lines: Functions this long need a comment
            comment_lookbehind_lines: Lines above a function searched for one

        Duplication:
            dup_min_fragment_lines / dup_min_fragment_tokens: Fragment size floor
            dup_shingle_size: Tokens per rolling-hash window
            dup_winnow_window: Winnowing window over shingle hashes
            dup_near_ratio: Shared shingle share that marks a near duplicate
            dup_saturation_ratio: Duplicated code share that saturates the score
            dup_name_family_min: Members of a numbered-name family to report
            dup_index_shards: Lock shards in the duplication index

        Structure:
            nesting_step: Score added per level beyond the profile threshold
            form_field_limit / form_field_step: Markup form size penalty
            long_function_lines / very_long_function_lines: Length findings
            max_params / max_params_critical: Parameter count findings

        Naming:
            naming_min_length: Shorter identifiers are exempt
            naming_saturation: Violation share that saturates the score

        Ranking:
            issue_composite_share: Share of the composite in the issue score
            issue_findings_cap: Maximum contribution of findings
    """

    # === Complexity ===
    complexity_low: float = 5.0
    complexity_high: float = 30.0
    complexity_max_share: float = 0.6
    complexity_warn: int = 10
    complexity_critical: int = 15

    # === State ===
    state_saturation_density: float = 5.0
    dom_state_weight: float = 0.5

    # === Comments ===
    comment_target_ratio: float = 0.2
    doc_comment_bonus: float = 1.5
    large_function_lines: int = 30
    comment_lookbehind_lines: int = 2

    # === Duplication ===
    dup_min_fragment_lines: int = 6
    dup_min_fragment_tokens: int = 40
    dup_shingle_size: int = 20
    dup_winnow_window: int = 4
    dup_near_ratio: float = 0.8
    dup_saturation_ratio: float = 0.5
    dup_name_family_min: int = 3
    dup_index_shards: int = 16

    # === Structure ===
    nesting_step: float = 20.0
    form_field_limit: int = 15
    form_field_step: float = 5.0
    long_function_lines: int = 70
    very_long_function_lines: int = 120
    max_params: int = 6
    max_params_critical: int = 8

    # === Naming ===
    naming_min_length: int = 2
    naming_saturation: float = 0.5

    # === Ranking ===
    issue_composite_share: float = 0.8
    issue_findings_cap: float = 20.0

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        if self.complexity_high <= self.complexity_low:
            raise InvalidConfigError(
                "complexity_high", self.complexity_high, "must exceed complexity_low"
            )

        ratio_fields = [
            "complexity_max_share",
            "dom_state_weight",
            "dup_near_ratio",
            "dup_saturation_ratio",
            "naming_saturation",
            "issue_composite_share",
        ]
        for field_name in ratio_fields:
            value = getattr(self, field_name)
            if not 0.0 <= value <= 1.0:
                raise InvalidConfigError(field_name, value, "must be between 0.0 and 1.0")

        positive_fields = [
            "state_saturation_density",
            "comment_target_ratio",
            "dup_shingle_size",
            "dup_winnow_window",
            "dup_index_shards",
            "nesting_step",
        ]
        for field_name in positive_fields:
            value = getattr(self, field_name)
            if value <= 0:
                raise InvalidConfigError(field_name, value, "must be positive")

        if self.dup_saturation_ratio == 0 or self.naming_saturation == 0:
            raise InvalidConfigError(
                "saturation", 0, "saturation ratios must be greater than zero"
            )
        if self.dup_min_fragment_lines < 1:
            raise InvalidConfigError(
                "dup_min_fragment_lines", self.dup_min_fragment_lines, "must be at least 1"
            )


DEFAULT_THRESHOLDS = ThresholdConfig()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for an analysis run.

    Attributes:
        Performance:
            workers: Number of parallel workers (None = auto-detect)

        File intake:
            max_file_size_mb: Larger files are recorded as unanalyzed
            sniff_bytes: Bytes inspected by the binary content heuristic
            binary_ratio_threshold: Non-text byte share that marks a file binary
            exclude_patterns: Glob patterns skipped by directory discovery
            follow_symlinks: Follow symbolic links during discovery
            allow_hidden_files: Include dot files and dot directories

        Output:
            top_files: Number of ranked files in the report
            max_findings_per_file: Findings kept per ranked file
            verbosity: Logging verbosity level

        Scoring:
            weights: Metric weight table
            thresholds: Metric thresholds
    """

    workers: Optional[int] = None

    max_file_size_mb: float = 10.0
    sniff_bytes: int = 8192
    binary_ratio_threshold: float = 0.3
    exclude_patterns: list[str] = field(
        default_factory=lambda: [
            ".git/*",
            "node_modules/*",
            "vendor/*",
            "dist/*",
            "build/*",
            "target/*",
            "venv/*",
            ".venv/*",
            "__pycache__/*",
            ".tox/*",
            ".mypy_cache/*",
            ".pytest_cache/*",
            "*.egg-info/*",
            "*.min.js",
            "*.min.css",
            "*.bundle.js",
        ]
    )
    follow_symlinks: bool = False
    allow_hidden_files: bool = False

    top_files: int = 5
    max_findings_per_file: int = 5
    verbosity: Verbosity = "normal"

    weights: MetricWeights = field(default_factory=MetricWeights)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")
        if self.sniff_bytes < 1:
            raise InvalidConfigError("sniff_bytes", self.sniff_bytes, "must be at least 1")
        if not 0.0 < self.binary_ratio_threshold <= 1.0:
            raise InvalidConfigError(
                "binary_ratio_threshold", self.binary_ratio_threshold, "must be in (0.0, 1.0]"
            )
        if self.top_files < 1:
            raise InvalidConfigError("top_files", self.top_files, "must be at least 1")
        if self.max_findings_per_file < 1:
            raise InvalidConfigError(
                "max_findings_per_file", self.max_findings_per_file, "must be at least 1"
            )

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".messmeter.toml"
    if global_config.exists():
        merged.update(_load_toml_checked(global_config, "global config"))

    project_config = Path.cwd() / "messmeter.toml"
    if project_config.exists():
        merged.update(_load_toml_checked(project_config, "project config"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_checked(config_file, "config file"))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    merged["weights"] = _nested(merged.pop("weights", None), MetricWeights, "weights")
    merged["thresholds"] = _nested(merged.pop("thresholds", None), ThresholdConfig, "thresholds")

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _nested(value: Any, cls: type, section: str) -> Any:
    """Build a nested config dataclass from a TOML table (or pass one through)."""
    if value is None:
        return cls()
    if isinstance(value, cls):
        return value
    if isinstance(value, dict):
        try:
            return cls(**value)
        except TypeError as e:
            raise ConfigurationError(f"Invalid [{section}] config: {e}")
    raise ConfigurationError(f"[{section}] must be a table, got {type(value).__name__}")


def _load_toml_checked(path: Path, label: str) -> dict:
    try:
        return _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from MESSMETER_* environment variables.

    Only scalar fields are supported (e.g. MESSMETER_WORKERS,
    MESSMETER_TOP_FILES, MESSMETER_MAX_FILE_SIZE_MB, MESSMETER_VERBOSITY).

    Returns:
        Dict of field_name -> parsed_value for any MESSMETER_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for config_field in fields(AnalysisConfig):
        field_name = config_field.name
        env_key = f"MESSMETER_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Raises:
        ValueError: If value can't be parsed to the expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file and return the parsed dict."""
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            # Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or the 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
