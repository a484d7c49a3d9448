from .json_medium import JsonFileMedium, MemoryMedium, StorageMedium
from .settings_store import ChangeEvent, ChangeListener, SettingsStore, StoreWriteError
from .change_bridge import StoreChangeBridge

__all__ = [
    "ChangeEvent",
    "ChangeListener",
    "JsonFileMedium",
    "MemoryMedium",
    "SettingsStore",
    "StorageMedium",
    "StoreChangeBridge",
    "StoreWriteError",
]
