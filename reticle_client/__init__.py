from .reticle_renderer import (
    BAR_NAMES,
    STATE_IDLE,
    STATE_SPINNING,
    BarGeometry,
    CircleGeometry,
    ReticleGeometry,
    ReticleRenderer,
    ReticleSurface,
    compute_geometry,
    parse_period,
)
from .app_config import AppConfig, load_app_config

__all__ = [
    "AppConfig",
    "BAR_NAMES",
    "BarGeometry",
    "CircleGeometry",
    "ReticleGeometry",
    "ReticleRenderer",
    "ReticleSurface",
    "STATE_IDLE",
    "STATE_SPINNING",
    "compute_geometry",
    "load_app_config",
    "parse_period",
]
