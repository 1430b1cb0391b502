"""Entry point: ``python -m idlerpg``.

Supports two modes:
  - ``python -m idlerpg``        → Launch the FastAPI server (real-time ticks)
  - ``python -m idlerpg cli``    → Headless grinding run on a virtual clock
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)

# Upper bound on exchanges per fight in headless mode
_MAX_TICKS_PER_FIGHT = 10_000


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Idle RPG combat and progression engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=None)
    srv.add_argument("--save", type=str, default="savegame.json")
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run fights headlessly on a virtual clock")
    cli.add_argument("--monster", type=str, default="young_flem")
    cli.add_argument("--fights", type=int, default=10)
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--name", type=str, default="Hero")
    cli.add_argument("--class", dest="char_class", type=str, default="warrior",
                     choices=["warrior", "ranger", "spiritualist", "specialist"])
    cli.add_argument("--race", type=str, default="bellato", choices=["bellato", "cora", "accretia"])
    cli.add_argument("--save", type=str, default=None, help="Load and update this save file")
    cli.add_argument("--log-file", type=str, default=None)
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from idlerpg.api.app import create_app
    from idlerpg.config import GameConfig

    config = GameConfig(
        rng_seed=args.seed,
        save_path=args.save,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from idlerpg.config import GameConfig
    from idlerpg.core.enums import CharacterClass, CharacterRace, CombatPhase
    from idlerpg.engine.scheduler import ManualScheduler
    from idlerpg.engine.session import GameSession
    from idlerpg.persistence.store import JsonFileStore, MemoryStore
    from idlerpg.utils.logging import setup_logging

    config = GameConfig(rng_seed=args.seed, log_level=args.log_level, save_path=args.save or "")
    setup_logging(config.log_level, args.log_file)

    scheduler = ManualScheduler()
    store = JsonFileStore(args.save) if args.save else MemoryStore()
    session = GameSession(config, scheduler, store)

    if session.snapshot().character is None:
        created = session.create_character(args.name, CharacterClass(args.char_class), CharacterRace(args.race))
        if not created.success:
            logger.error("Cannot create character: %s", created.message)
            return

    wins = losses = 0
    try:
        for fight in range(args.fights):
            started = session.start_encounter(args.monster) if fight == 0 else session.fight_again()
            if not started.success:
                logger.error("Fight %d did not start: %s", fight + 1, started.message)
                break
            for _ in range(_MAX_TICKS_PER_FIGHT):
                if session.combat_phase != CombatPhase.ENGAGING or not scheduler.run_next():
                    break
            match session.combat_phase:
                case CombatPhase.VICTORY:
                    wins += 1
                case CombatPhase.DEFEAT:
                    losses += 1
                case _:
                    logger.warning("Fight %d ended without a result", fight + 1)
                    break
    finally:
        state = session.snapshot()
        session.shutdown()

    character = state.character
    logger.info(
        "Done. %d wins, %d losses — %s is level %d (%.1f%%) with %d gold, elapsed %.1fs of game time",
        wins, losses, character.name, character.level, character.status_info.exp_points * 100,
        character.gold, scheduler.now_ms / 1000.0,
    )


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            # Re-parse with serve defaults
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
