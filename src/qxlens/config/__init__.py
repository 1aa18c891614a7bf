"""Config module exports."""

from qxlens.config.loader import QxLensSettings, load_config
from qxlens.config.models import (
    AnalysisConfig,
    LoggingConfig,
    MetadataConfig,
    QxLensConfig,
    WatchConfig,
)

__all__ = [
    "load_config",
    "AnalysisConfig",
    "LoggingConfig",
    "MetadataConfig",
    "QxLensConfig",
    "QxLensSettings",
    "WatchConfig",
]
