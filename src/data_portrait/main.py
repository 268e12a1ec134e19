"""Main entry point for the Data Portrait sketch."""

from __future__ import annotations

import argparse
import asyncio
import sys

from data_portrait.core.config import Settings, get_settings
from data_portrait.core.exceptions import AssetLoadError, DataPortraitError
from data_portrait.core.logging import get_logger, setup_logging
from data_portrait.pipeline.app import PortraitApp

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Data Portrait - layered images that follow your head via webcam"
    )
    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Webcam device index (default: CAMERA_DEVICE or 0)",
    )
    parser.add_argument(
        "--layers",
        nargs="+",
        default=None,
        metavar="FILE",
        help="Image layers in draw order, relative to the asset directory",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def apply_args(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with command-line overrides applied."""
    updates: dict[str, object] = {}
    if args.camera is not None:
        updates["camera"] = settings.camera.model_copy(update={"device": args.camera})
    if args.layers:
        updates["compositor"] = settings.compositor.model_copy(update={"layers": args.layers})
    if args.debug:
        updates["logging"] = settings.logging.model_copy(update={"level": "DEBUG"})
    return settings.model_copy(update=updates)


def run(settings: Settings) -> int:
    """Run the sketch.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    setup_logging(settings.logging.level, settings.logging.file)
    logger.info("Starting Data Portrait")

    try:
        asyncio.run(PortraitApp(settings).run())
        return 0

    except AssetLoadError as e:
        logger.error("Could not load image layers: %s", e)
        return 1

    except DataPortraitError as e:
        logger.error("Data portrait error: %s", e)
        return 2

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 0

    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        return 3


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    settings = apply_args(get_settings(), args)
    sys.exit(run(settings))


if __name__ == "__main__":
    main()
