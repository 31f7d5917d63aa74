"""Engine-agnostic helpers shared by the game modules."""
from .events import EventBus
from .rng import RNG

__all__ = ["EventBus", "RNG"]
