"""
breathpulse command-line host.

Runs a breathing session in the terminal: status lines from ConsolePresenter,
haptic events to the log (no actuator attached).

    breathpulse                     # run until Ctrl+C
    breathpulse --cycles 4 --locale ja
    breathpulse --simulate --cycles 40   # virtual time, returns at once
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

from .clock import AsyncioClock, ManualClock
from .config import SUPPORTED_LOCALES, BreathConfig, ConfigError, set_config
from .console import ConsolePresenter
from .haptics import HapticKind, LoggingHapticDevice, MockHapticDevice
from .phases import CYCLE_DURATION_S
from .session import BreathingSession, SessionSnapshot

logger = logging.getLogger("breathpulse")


def create_live_session(config: BreathConfig, stream: Optional[TextIO] = None) -> BreathingSession:
    """Real-time session with a console presenter attached (not started)."""
    session = BreathingSession(AsyncioClock(), LoggingHapticDevice(), config)
    session.subscribe(ConsolePresenter.from_config(config, stream))
    return session


async def run_live_session(
    session: BreathingSession,
    cycles: Optional[int] = None,
) -> SessionSnapshot:
    """Run in real time until ``cycles`` complete (or forever if None)."""
    finished = asyncio.Event()

    def watch(snapshot: SessionSnapshot) -> None:
        if cycles is not None and snapshot.active and snapshot.cycle_count >= cycles:
            finished.set()

    session.subscribe(watch)
    session.start()

    try:
        await finished.wait()
    finally:
        session.stop()

    return session.snapshot()


def run_simulated_session(
    config: BreathConfig,
    cycles: int,
    stream: Optional[TextIO] = None,
) -> Tuple[SessionSnapshot, MockHapticDevice]:
    """Run ``cycles`` full cycles in virtual time."""
    clock = ManualClock()
    device = MockHapticDevice(time_source=clock.now)
    session = BreathingSession(clock, device, config)

    session.subscribe(ConsolePresenter.from_config(config, stream))
    session.start()
    clock.run_until(
        lambda: session.cycle_count >= cycles,
        step=1.0,
        limit=cycles * CYCLE_DURATION_S + 1,
    )
    session.stop()

    logger.info(
        f"Simulated {cycles} cycles: {device.count(HapticKind.RHYTHM_CLICK)} clicks, "
        f"{device.count(HapticKind.PHASE_CHANGE)} phase cues, "
        f"{device.count(HapticKind.CYCLE_COMPLETE)} cycle cues"
    )
    return session.snapshot(), device


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="breathpulse",
        description="4-8-7 breathing session with fading haptic pulses",
        epilog="""
Phases:
  Inhale 4s, Hold 8s, Exhale 7s, Pause 2s

Pulses fade from 5 to 1 per burst, one step every ten cycles.
Press Ctrl+C to stop.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--cycles', '-n',
        type=_positive_int,
        default=None,
        help="Stop after this many completed cycles (default: run until Ctrl+C)"
    )
    parser.add_argument(
        '--locale', '-l',
        choices=list(SUPPORTED_LOCALES),
        default=None,
        help="Label language (default: from config, else en)"
    )
    parser.add_argument(
        '--config', '-c',
        type=Path,
        default=None,
        help="YAML config file"
    )
    parser.add_argument(
        '--log-level',
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ...)"
    )
    parser.add_argument(
        '--no-haptics',
        action='store_true',
        help="Run without issuing haptic events"
    )
    parser.add_argument(
        '--simulate',
        action='store_true',
        help="Run in virtual time (requires --cycles)"
    )

    return parser


def load_config(args: argparse.Namespace) -> BreathConfig:
    """Config from file (or environment), then command-line overrides."""
    if args.config is not None:
        config = BreathConfig.from_file(args.config)
    else:
        config = BreathConfig.from_env()

    if args.locale:
        config.display.locale = args.locale
    if args.log_level:
        config.log_level = args.log_level.upper()
    if args.no_haptics:
        config.haptics.enabled = False

    config.validate()
    return config


def main(argv: Optional[List[str]] = None, stream: Optional[TextIO] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.simulate and args.cycles is None:
        parser.error("--simulate requires --cycles")

    try:
        config = load_config(args)
    except ConfigError as e:
        parser.error(str(e))

    set_config(config)
    logging.basicConfig(
        level=config.effective_log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    out = stream or sys.stdout
    presenter = ConsolePresenter.from_config(config)
    out.write(f"{presenter.title}\n")

    if args.simulate:
        final, _ = run_simulated_session(config, args.cycles, out)
    else:
        session = create_live_session(config, out)
        try:
            final = asyncio.run(run_live_session(session, args.cycles))
        except KeyboardInterrupt:
            session.stop()
            final = session.snapshot()
            out.write("\nSession stopped. Take your time returning to normal breathing.\n")

    out.write(f"Cycles: {final.cycle_count}\n")
    out.write(f"Final intensity: {final.intensity}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
