"""Command-line entry point for describing a single camera frame."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from config import ConfigController
from core.logging import enable_file_logging, logger, set_level
from vision.engine import PerceptionEngine
from vision.recognizers import RecognizerError, RecordedRecognizer
from vision.settings import load_perception_settings


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Raw command-line arguments.

    Returns:
        Parsed arguments namespace.
    """

    parser = argparse.ArgumentParser(
        description="Describe what a camera frame shows in one spoken sentence."
    )
    parser.add_argument("image", nargs="?", type=Path, help="Image file to describe.")
    parser.add_argument(
        "--recording",
        type=Path,
        help="YAML file with recorded detections and classifications to replay.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Also print each perceived entity with its confidence.",
    )
    parser.add_argument(
        "--diagnostics",
        action="store_true",
        help="Run diagnostics probes and exit.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Application entry point.

    Args:
        argv: Optional list of command-line arguments.

    Returns:
        Process exit code.
    """

    if argv is None:
        argv = sys.argv[1:]

    args = parse_args(argv)
    config = ConfigController.get_instance().get_config()
    set_level(config.get("logging_level", "INFO"))
    if config.get("file_logging_enabled"):
        log_file_path = Path(config["log_file_path"])
        enable_file_logging(log_file_path)
        logger.info("Writing logs to %s", log_file_path)

    if args.diagnostics:
        from diagnostics.run import build_probes
        from diagnostics.runner import format_results, has_failures, run_diagnostics

        results = run_diagnostics(build_probes())
        print(format_results(results))
        return 1 if has_failures(results) else 0

    if args.image is None:
        logger.error("An image path is required unless --diagnostics is given")
        return 2

    recognizer = None
    if args.recording is not None:
        try:
            recognizer = RecordedRecognizer.from_file(args.recording)
        except RecognizerError as exc:
            logger.warning("Recording unavailable: %s", exc)

    with PerceptionEngine(
        detector=recognizer,
        classifier=recognizer,
        settings=load_perception_settings(),
    ) as engine:
        snapshot = engine.perceive(args.image)
        print(engine.describe(snapshot))
        if args.verbose:
            for entity in snapshot:
                print(
                    f"  {entity.label}: {entity.confidence_percent}% "
                    f"{entity.sector.value} ({entity.source.value})"
                )

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
