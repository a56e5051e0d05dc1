"""Shared context handed to every state-mutating action."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pestilence.utils.event_log import SimEvent

if TYPE_CHECKING:
    from pestilence.core.battle_state import BattleState
    from pestilence.engine.animation_queue import AnimationQueue


@dataclass(slots=True)
class ActionContext:
    """Battle state, presentation queue and the event sink for one step.

    Actions mutate ``state`` directly, push intents to ``animations`` and
    record what happened through ``emit``.
    """

    state: BattleState
    animations: AnimationQueue
    events: list[SimEvent] = field(default_factory=list)

    def emit(self, category: str, message: str, entity_ids: tuple[int, ...] = ()) -> None:
        self.events.append(SimEvent(
            tick=self.state.tick,
            category=category,
            message=message,
            entity_ids=entity_ids,
        ))

    def drain_events(self) -> list[SimEvent]:
        events, self.events = self.events, []
        return events
