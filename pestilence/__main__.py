"""Entry point: ``python -m pestilence``.

  - ``python -m pestilence [serve]``  → FastAPI server driving a battle
  - ``python -m pestilence cli``      → headless battle played by the demo player
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING"]
HEURISTIC_NAMES = ["euclidean", "admissible"]


def _add_battle_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--level", type=int, default=0, help="Level to start on")
    parser.add_argument("--levels-file", type=str, default=None, help="JSON level pack")
    parser.add_argument("--heuristic", type=str, default="euclidean", choices=HEURISTIC_NAMES)
    parser.add_argument("--log-level", type=str, default="INFO", choices=LOG_LEVELS)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pestilence turn-based tactics rules engine")
    sub = parser.add_subparsers(dest="command")

    srv = sub.add_parser("serve", help="Drive a battle behind the HTTP API (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--auto-animations", action="store_true",
                     help="Acknowledge animations immediately instead of waiting for a client")
    _add_battle_options(srv)

    cli = sub.add_parser("cli", help="Play a headless battle with the demo player")
    cli.add_argument("--rounds", type=int, default=50, help="Rounds to play, level changes included")
    cli.add_argument("--replay", type=str, default="replay.json", help="Where to write the replay")
    _add_battle_options(cli)

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from pestilence.api.app import create_app
    from pestilence.config import SimulationConfig

    app = create_app(SimulationConfig(
        start_level=args.level,
        levels_file=args.levels_file,
        pathfinding_heuristic=args.heuristic,
        auto_complete_animations=args.auto_animations,
        log_level=args.log_level,
    ))
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from pestilence.ai.autoplayer import AutoPlayer
    from pestilence.config import SimulationConfig
    from pestilence.core.battle_state import BattleState
    from pestilence.core.levels import LEVELS, load_levels
    from pestilence.engine.animation_queue import AnimationQueue
    from pestilence.engine.turn_loop import TurnLoop
    from pestilence.utils.logging import setup_logging
    from pestilence.utils.replay import ReplayRecorder

    config = SimulationConfig(
        start_level=args.level,
        levels_file=args.levels_file,
        pathfinding_heuristic=args.heuristic,
        max_rounds=args.rounds,
        auto_complete_animations=True,
        replay_file=args.replay,
        log_level=args.log_level,
    )
    setup_logging(config.log_level)

    levels = load_levels(config.levels_file) if config.levels_file else LEVELS
    state = BattleState.from_level(levels[config.start_level % len(levels)])
    recorder = ReplayRecorder(config.replay_file, config.start_level)
    animations = AnimationQueue(auto_complete=config.auto_complete_animations)
    loop = TurnLoop(config, state, animations, levels, recorder=recorder)

    try:
        transitions = loop.run(AutoPlayer(loop))
    finally:
        recorder.flush()

    for t in transitions:
        logger.info("Level %s -> level %d", t.reason, t.level_id)
    logger.info("Replay of %d steps written to %s", len(recorder.steps), config.replay_file)


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args(["serve"])

    if args.command == "cli":
        _run_cli(args)
    else:
        _run_server(args)


if __name__ == "__main__":
    main()
