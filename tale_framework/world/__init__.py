"""
World module - scene graph navigation.
"""

from tale_framework.world.navigator import (
    SceneNavigator,
    ItemPickup,
    resolve_pickup,
)

__all__ = [
    "SceneNavigator",
    "ItemPickup",
    "resolve_pickup",
]
