"""Engine layer: phase machine, presentation queue, player input."""

from pestilence.engine.animation_queue import Animation, AnimationQueue
from pestilence.engine.player_input import PlayerController
from pestilence.engine.turn_loop import LevelTransition, TurnLoop, evaluate_outcome

__all__ = [
    "Animation",
    "AnimationQueue",
    "LevelTransition",
    "PlayerController",
    "TurnLoop",
    "evaluate_outcome",
]
