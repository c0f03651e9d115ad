"""Upload strategies: how a new resource is reconciled with the repository."""

from .add_new import AddNewStrategy
from .add_then_delete import AddThenDeleteStrategy
from .add_then_hide_old import AddThenHideOldStrategy
from .asset_only_replacement import AssetOnlyReplacementStrategy
from .base import BaseStrategy, UploadStrategy
from .visibility_cache import VisibilityCache

STRATEGIES = {
    "add_new": AddNewStrategy,
    "replace": AssetOnlyReplacementStrategy,
    "add_then_delete": AddThenDeleteStrategy,
    "add_then_hide_old": AddThenHideOldStrategy,
}

__all__ = [
    "STRATEGIES",
    "AddNewStrategy",
    "AddThenDeleteStrategy",
    "AddThenHideOldStrategy",
    "AssetOnlyReplacementStrategy",
    "BaseStrategy",
    "UploadStrategy",
    "VisibilityCache",
]
