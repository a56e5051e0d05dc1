"""Simulation configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable configuration for a battle run."""

    # Levels
    start_level: int = 0
    levels_file: str | None = None          # JSON level pack; built-in levels when unset

    # AI
    pathfinding_heuristic: str = "euclidean"   # "euclidean" | "admissible"

    # Timing
    max_rounds: int = 200                   # Headless runs stop after this many rounds
    tick_rate: float = 0.25                 # Seconds between engine steps when served

    # Presentation
    auto_complete_animations: bool = False  # Acknowledge animations as they are queued

    # Logging
    log_level: str = "INFO"
    replay_file: str = "replay.json"
