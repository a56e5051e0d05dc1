"""FastAPI dependency injection — hands route handlers the running EngineManager."""

from __future__ import annotations

from pestilence.api.engine_manager import EngineManager

_engine_manager: EngineManager | None = None


def set_engine_manager(manager: EngineManager | None) -> None:
    """Install the manager built by the app lifespan; None on shutdown."""
    global _engine_manager
    _engine_manager = manager


def get_engine_manager() -> EngineManager:
    manager = _engine_manager
    if manager is None:
        raise RuntimeError("No EngineManager installed; the battle is only available while the app is running.")
    return manager
