"""Vigor core algorithms: recovery score, baselines, generosity transform, samples."""

from app.vigor.baseline import BaselineConfig, BaselineTracker
from app.vigor.errors import (
    ConfigurationError,
    InsufficientDataError,
    InvalidInputError,
    VigorError,
)
from app.vigor.generosity import (
    PRESETS,
    GenerosityConfig,
    GenerosityPreset,
    GenerosityTransformer,
    get_preset,
    transform,
)
from app.vigor.recovery import RecoveryConfig, score
from app.vigor.samples import SynthesisConfig, synthesize, totals

__all__ = [
    "BaselineConfig",
    "BaselineTracker",
    "ConfigurationError",
    "InsufficientDataError",
    "InvalidInputError",
    "VigorError",
    "PRESETS",
    "GenerosityConfig",
    "GenerosityPreset",
    "GenerosityTransformer",
    "get_preset",
    "transform",
    "RecoveryConfig",
    "score",
    "SynthesisConfig",
    "synthesize",
    "totals",
]
