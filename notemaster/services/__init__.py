# Services package
from notemaster.services.lock import LockController, LockState, UnlockPurpose
from notemaster.services.notebook import DEFAULT_SETTINGS, Notebook, get_notebook

__all__ = [
    "DEFAULT_SETTINGS",
    "LockController",
    "LockState",
    "Notebook",
    "UnlockPurpose",
    "get_notebook",
]
