import argparse
import logging

from pyglet.clock import Clock

from forest.config import GameConfig, load_game_config
from forest.constants import TICKS_PER_SECOND
from forest.debug.profiler import RuntimeProfiler
from forest.game.session import GameSession, SimulatedTime
from forest.net.bridge import NetworkBridge


def run(
    config: GameConfig,
    seconds: float = 5.0,
    keys: tuple[str, ...] = (),
    hz: float = TICKS_PER_SECOND,
    profile: bool = False,
) -> GameSession:
    profiler = RuntimeProfiler(enabled=profile)
    time_source = SimulatedTime()
    clock = Clock(time_function=time_source)
    session = GameSession(config, bridge=NetworkBridge(), profiler=profiler)
    for key in keys:
        session.key_down(key)

    session.schedule(clock, hz)
    step = 1.0 / hz
    for _ in range(int(seconds * hz)):
        time_source.advance(step)
        clock.tick()
    session.unschedule(clock)

    if profile:
        paths = profiler.write_report()
        if paths:
            print(f"Tick report: {paths[0]}")
    return session


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Forest Explorer headless session")
    parser.add_argument("--config", help="key = value settings file")
    parser.add_argument("--seconds", type=float, default=5.0, help="Simulated seconds to run")
    parser.add_argument(
        "--keys",
        nargs="*",
        default=[],
        help="Keys held for the whole run, e.g. ArrowRight w",
    )
    parser.add_argument("--hz", type=float, default=TICKS_PER_SECOND, help="Tick rate")
    parser.add_argument("--profile", action="store_true", help="Write a tick report under profiling/")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_game_config(args.config) if args.config else GameConfig()
    session = run(config, args.seconds, tuple(args.keys), args.hz, args.profile)

    state = session.state
    counts = session.index.snapshot().counts()
    print(f"Position: ({state.rendered_position.x:.1f}, {state.rendered_position.y:.1f}) facing {state.direction.value}")
    print(f"Loaded chunks: {len(session.chunks)}")
    print(f"Elements: {counts['trees']} trees, {counts['bushes']} bushes, {counts['flowers']} flowers")
    print(f"Visible: {len(session.visible_elements())}")
    print(f"Time of day: {session.day.formatted()} ({session.day.phase})")
