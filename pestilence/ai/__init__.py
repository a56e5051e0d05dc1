"""AI layer: pathfinding, host targeting and the demo player."""

from pestilence.ai.pathfinding import Pathfinder, PathResult
from pestilence.ai.targeting import choose_attack_facings, plan_host_moves

__all__ = ["PathResult", "Pathfinder", "choose_attack_facings", "plan_host_moves"]
