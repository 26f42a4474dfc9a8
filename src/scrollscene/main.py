"""
Application Initialization
==========================
Loads the scene description, builds the main window and starts the Qt event
loop. This is the dependency-injection root: the engine and its controllers
are created here (through the window) and nowhere else.
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from scrollscene.app.application import create_app
from scrollscene.logging_config import setup_logging
from scrollscene.model.easing import get_easing
from scrollscene.model.io import IOManager
from scrollscene.model.scene import SceneConfigError
from scrollscene.view.main_window import MainWindow

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="scrollscene", description="Scroll-driven parallax scene.")
    parser.add_argument("--scene", help="Path to a scene description (JSON). Defaults to the bundled scene.")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", help="Also write the log to this file.")
    parser.add_argument("--trace-frames", action="store_true", help="Log per-frame trigger and target events at DEBUG.")
    parser.add_argument("--plot-easing", metavar="NAME", help="Plot an easing curve (e.g. power2.out) and exit.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)

    # 1. Logging
    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file, trace_frames=args.trace_frames)

    if args.plot_easing:
        try:
            get_easing(args.plot_easing).plot()
        except ValueError as e:
            logger.error(str(e))
            sys.exit(2)
        return

    # 2. Scene description (the only fatal error path, before anything is shown)
    try:
        scene = IOManager.load_scene(args.scene)
    except SceneConfigError as e:
        logger.error(f"Invalid scene: {e}")
        sys.exit(2)

    # 3. Qt application and window
    app = create_app()
    window = MainWindow(scene)
    window.show()

    # 4. Event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
