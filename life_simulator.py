from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Protocol
import argparse
import curses
import logging
import sys
import time

from game_of_life import BoardError, RectangularWorld

logger = logging.getLogger(__name__)

HEADER = "Running Game of Life simulation on {path} - press <ctrl> + c to stop"


class Display(Protocol):
    """Terminal-Ausgabe, wird dem Simulator von aussen übergeben."""

    def clear(self) -> None: ...

    def move(self, row: int, column: int) -> None: ...

    def write(self, text: str) -> None: ...

    def refresh(self) -> None: ...


class CursesDisplay:
    def __init__(self, window):
        self._window = window

    def clear(self) -> None:
        self._window.clear()

    def move(self, row: int, column: int) -> None:
        self._window.move(row, column)

    def write(self, text: str) -> None:
        try:
            self._window.addstr(text)
        except curses.error:
            # Feld grösser als das Terminal, Rest wird abgeschnitten
            logger.warning("Ausgabe passt nicht ins Terminal, wird abgeschnitten.")

    def refresh(self) -> None:
        self._window.refresh()


@dataclass
class SimulatorConfig:
    path: Path
    sleep_time: float = 0.4
    generations: Optional[int] = None   # None = bis Ctrl+C


def run(config: SimulatorConfig, display: Display,
        sleep: Callable[[float], None] = time.sleep) -> RectangularWorld:
    """
    Liest das Startfeld und zeigt Generation für Generation an.
    Dateifehler und BoardError werden nicht abgefangen.
    """
    world = RectangularWorld(Path(config.path).read_text())
    logger.info("Starte Simulation von %s (%dx%d)", config.path, world.height, world.width)
    header = HEADER.format(path=config.path)

    while config.generations is None or world.generation < config.generations:
        display.clear()
        display.move(1, 0)
        display.write(header)
        display.move(2, 0)
        display.write(world.to_text())
        display.refresh()
        world.evolve()
        sleep(config.sleep_time)
    return world


def non_negative_float(value: str) -> float:
    seconds = float(value)
    if seconds < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="life-simulate",
        description="Conway's Game of Life im Terminal.",
        epilog="eg: life-simulate --simulate sample_worlds/oscillator-blinking.gol --sleep 0.4",
    )
    parser.add_argument("--simulate", metavar="FILE", type=Path, required=True,
                        help="Datei mit dem Startzustand ('x' = lebend)")
    parser.add_argument("--sleep", metavar="SECONDS", type=non_negative_float, default=0.4,
                        help="Pause zwischen zwei Generationen (default: 0.4)")
    parser.add_argument("--generations", metavar="N", type=int, default=None,
                        help="nach N Generationen beenden (default: endlos)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", metavar="FILE", default=None,
                        help="Logausgabe in Datei statt stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        filename=args.log_file,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = SimulatorConfig(path=args.simulate, sleep_time=args.sleep,
                             generations=args.generations)
    try:
        curses.wrapper(lambda window: run(config, CursesDisplay(window)))
    except KeyboardInterrupt:
        return 0
    except (OSError, BoardError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
