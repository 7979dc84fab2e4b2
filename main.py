#!/usr/bin/env python3
"""Run a headless whack-a-mole session in the terminal.

An optional auto-player strikes moles after a reaction delay so the whole
event stream (spawns, hits, timeouts, countdown, game over) can be watched.
"""

import argparse

import numpy as np

from whackamole.core.config_loader import load_game_config
from whackamole.core.difficulty import DifficultyLevel
from whackamole.core.events import EventType, MoleSpawned
from whackamole.core.metrics import format_metrics_summary
from whackamole.game.log_manager import LogLevel, LogManager
from whackamole.game.metrics_recorder import MetricsRecorder


def render_board(engine) -> str:
    snapshot = engine.get_state()
    grid = snapshot.occupancy_grid()
    rows = [" ".join("M" if cell else "." for cell in row) for row in grid]
    header = f"score {snapshot.score:>4}  time {snapshot.time_remaining_sec:>3}s  [{snapshot.difficulty.value}]"
    return "\n".join([header, *rows])


def attach_autoplayer(engine, hit_rate: float, reaction_ms: int, seed=None) -> None:
    rng = np.random.default_rng(seed)

    def on_spawn(event):
        if isinstance(event, MoleSpawned) and rng.random() < hit_rate:
            delay = int(rng.integers(reaction_ms // 2, reaction_ms + 1))
            engine.scheduler.call_later(delay, lambda: engine.register_hit(event.mole_id), name="autoplay")

    engine.get_event_bus().subscribe(EventType.MOLE_SPAWNED, on_spawn)


def main():
    parser = argparse.ArgumentParser(description="Headless whack-a-mole session")
    parser.add_argument("--config", help="Path to a game YAML config")
    parser.add_argument("--difficulty", choices=["easy", "medium", "hard"])
    parser.add_argument("--seconds", type=int, help="Session length in seconds")
    parser.add_argument("--hit-rate", type=float, default=0.6,
                        help="Chance the auto-player goes for each mole (0 disables)")
    parser.add_argument("--reaction-ms", type=int, default=900)
    parser.add_argument("--debug", action="store_true", help="Show spawn/timer/debug log lines")
    parser.add_argument("--save-log", action="store_true", help="Write the session log to logs/")
    args = parser.parse_args()

    config = load_game_config(args.config)
    if args.difficulty:
        config.difficulty = DifficultyLevel(args.difficulty)
    if args.seconds:
        config.session_seconds = args.seconds

    engine = config.create_engine()
    log = LogManager.attach(engine, default_level=LogLevel.DEBUG if args.debug else LogLevel.INFO)
    recorder = MetricsRecorder(engine, lambda metrics: print("\n" + format_metrics_summary(metrics)))

    if args.hit_rate > 0:
        attach_autoplayer(engine, args.hit_rate, args.reaction_ms, config.seed)

    engine.get_event_bus().subscribe(EventType.TIME_TICK, lambda event: print(render_board(engine) + "\n"))

    engine.start()
    try:
        engine.scheduler.run_realtime(lambda: recorder.last is not None)
    except KeyboardInterrupt:
        print("\n\nGame interrupted by user")
        engine.reset()
    finally:
        for message in log.get_messages():
            print(message.format())
        if args.save_log:
            log.save_log_to_file()
        engine.dispose()


if __name__ == "__main__":
    main()
