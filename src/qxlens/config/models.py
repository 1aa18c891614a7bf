"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (QXLENS__SECTION__KEY)
3. Project YAML (<project root>/.qxlens/config.yaml)
4. Global YAML (~/.config/qxlens/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    QXLENS__<SECTION>__<KEY>=<VALUE>

Examples:
    QXLENS__LOGGING__LEVEL=DEBUG
    QXLENS__WATCH__ENABLED=false
    QXLENS__METADATA__COMPILED_GLOB=compiled/source/transpiled/**/*.json
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        QXLENS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every resolver decision.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class MetadataConfig(BaseModel):
    """Where compiled class metadata and class sources live.

    Env vars:
        QXLENS__METADATA__COMPILED_GLOB: Glob (relative to project root) of metadata files
        QXLENS__METADATA__IMPLICIT_ROOT_CLASSES: Superclasses never merged
    """

    compiled_glob: str = Field(
        default="compiled/*/transpiled/**/*.json",
        description="Glob, relative to the project root, matching one JSON record per class.",
    )
    source_dirs: list[str] = Field(
        default_factory=lambda: ["source/class"],
        description="Directories (relative to the project root) holding class sources "
        "laid out as a/b/C.js for class a.b.C.",
    )
    implicit_root_classes: list[str] = Field(
        default_factory=lambda: ["Object"],
        description="Superclass names treated as the implicit root object type. "
        "Their members are never merged into subclasses.",
    )

    @field_validator("compiled_glob")
    @classmethod
    def validate_compiled_glob(cls, v: str) -> str:
        if Path(v).is_absolute():
            raise ValueError(f"compiled_glob must be relative to the project root: {v}")
        if not v.endswith(".json"):
            raise ValueError(f"compiled_glob must match .json files: {v}")
        return v


class WatchConfig(BaseModel):
    """Metadata watcher configuration.

    Env vars:
        QXLENS__WATCH__ENABLED: Patch the database when metadata files change
        QXLENS__WATCH__DEBOUNCE_MS: Change debounce window
    """

    enabled: bool = Field(
        default=True,
        description="Re-ingest metadata records when the compiler rewrites them.",
    )
    debounce_ms: int = Field(
        default=300,
        description="Debounce window before applying a batch of changed records.",
    )

    @field_validator("debounce_ms")
    @classmethod
    def validate_debounce(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"debounce_ms must be >= 0, got {v}")
        return v


class AnalysisConfig(BaseModel):
    """Expression analysis tuning.

    Env vars:
        QXLENS__ANALYSIS__PATTERN_WINDOW: Characters searched by backward regex matchers
    """

    pattern_window: int = Field(
        default=512,
        description="Maximum number of characters a backward regex matcher inspects "
        "before the cursor.",
    )

    @field_validator("pattern_window")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"pattern_window must be positive, got {v}")
        return v


class QxLensConfig(BaseModel):
    """Root configuration model (for type hints)."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
