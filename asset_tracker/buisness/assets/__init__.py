"""Asset lifecycle - business logic layer"""

from asset_tracker.buisness.assets.asset_lifecycle_manager import AssetLifecycleManager
from asset_tracker.buisness.assets.asset_status_validator import AssetStatusValidator
from asset_tracker.buisness.assets.knox_assignment_rule import KnoxAssignmentRule

__all__ = [
    'AssetLifecycleManager',
    'AssetStatusValidator',
    'KnoxAssignmentRule'
]
