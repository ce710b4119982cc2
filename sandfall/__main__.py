"""Entry point for ``python -m sandfall``.

Loads the default YAML config, builds a simulation engine, and opens a
Pygame window to draw and watch materials interact.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from sandfall.simulation.config import SimulationConfig
from sandfall.simulation.engine import SimulationEngine
from sandfall.ui.pygame_client import PygameRenderer

_DEFAULT_CONFIG = pathlib.Path(__file__).resolve().parent / "config" / "default.yaml"


def main() -> None:
    """Parse CLI args, create engine, launch renderer."""
    parser = argparse.ArgumentParser(
        prog="sandfall",
        description="Sandfall - falling sand cellular automaton",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: sandfall/config/default.yaml)",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=4,
        help="Pixel size per grid cell (default: 4)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=60,
        help="Target frames per second (default: 60)",
    )
    parser.add_argument(
        "--screenshot-dir",
        type=pathlib.Path,
        default=None,
        help="Directory for PNG screenshots (default: current directory)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    engine = SimulationEngine(config=config)

    renderer = PygameRenderer(
        engine=engine,
        cell_size=args.cell_size,
        screenshot_dir=args.screenshot_dir,
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
