"""Built-in default snapshots applied by "reset to defaults"."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Tuple

DEFAULT_RETICLE_SETTINGS: Dict[str, Any] = {
    "circleEnabled": True,
    "circleRadius": "20",
    "circleColor": "#00ff00",
    "circleThickness": "2",
    "dotEnabled": True,
    "dotRadius": "2",
    "dotColor": "#ff0000",
    "crossEnabled": True,
    "crossColor": "#00ff00",
    "crossLength": "10",
    "crossSpread": "5",
    "crossThickness": "2",
    "crossSpinPeriod": "0",
}

DEFAULT_GENERAL_SETTINGS: Dict[str, Any] = {
    "startHidden": True,
    "hotkeysEnabled": True,
}

DEFAULT_WINDOW_SETTINGS: Dict[str, Any] = {
    "overlayOpacity": "100",
    "clickThrough": True,
}

# Applied in this order; a later layer wins for any shared key.
DEFAULT_LAYERS: Tuple[Mapping[str, Any], ...] = (
    DEFAULT_RETICLE_SETTINGS,
    DEFAULT_GENERAL_SETTINGS,
    DEFAULT_WINDOW_SETTINGS,
)


def merged_defaults() -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    for layer in DEFAULT_LAYERS:
        merged.update(layer)
    return merged
