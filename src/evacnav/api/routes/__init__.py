"""Route group exports."""

from . import evacuation, health, navigation, obstacles, shelters, walks

__all__ = ["evacuation", "health", "navigation", "obstacles", "shelters", "walks"]
