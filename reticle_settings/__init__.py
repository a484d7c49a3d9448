from .defaults import DEFAULT_GENERAL_SETTINGS, DEFAULT_LAYERS, DEFAULT_RETICLE_SETTINGS, DEFAULT_WINDOW_SETTINGS
from .field_binder import FieldAdapter, FieldBinder, FieldSet, coerce_field_value, get_field
from .profile_manager import PROFILE_PREFIX, QUICK_SLOT_COUNT, ProfileManager, ProfileSelector, quick_slot_names
from .settings_controller import HotkeyRegistry, SettingsController, TransferField

__all__ = [
    "DEFAULT_GENERAL_SETTINGS",
    "DEFAULT_LAYERS",
    "DEFAULT_RETICLE_SETTINGS",
    "DEFAULT_WINDOW_SETTINGS",
    "FieldAdapter",
    "FieldBinder",
    "FieldSet",
    "HotkeyRegistry",
    "PROFILE_PREFIX",
    "ProfileManager",
    "ProfileSelector",
    "QUICK_SLOT_COUNT",
    "SettingsController",
    "TransferField",
    "coerce_field_value",
    "get_field",
    "quick_slot_names",
]
