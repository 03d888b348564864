"""Command-line entry point for running diagnostics."""

from __future__ import annotations

import argparse
from pathlib import Path
import tempfile

from config.diagnostics import probe as config_probe
from core.diagnostics import probe as core_probe
from diagnostics.runner import Probe, format_results, has_failures, run_diagnostics
from vision.diagnostics import probe as vision_probe


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""

    parser = argparse.ArgumentParser(description="Run diagnostics probes.")
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Run probes against a temporary offline directory.",
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        default=None,
        help="Optional base directory for config diagnostics.",
    )
    return parser.parse_args(argv)


def build_probes(base_dir: Path | None = None) -> list[Probe]:
    """Return the probes for every subsystem."""

    def config_probe_with_base():
        return config_probe(base_dir=base_dir)

    return [config_probe_with_base, core_probe, vision_probe]


def main(argv: list[str] | None = None) -> int:
    """Run diagnostics and return an exit code."""

    args = parse_args(argv)

    if args.offline and args.base_dir is None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            tmp_base = Path(tmp_dir)
            config_dir = tmp_base / "config"
            config_dir.mkdir(parents=True, exist_ok=True)
            (config_dir / "default.yaml").write_text("perception: {}\n", encoding="utf-8")
            results = run_diagnostics(build_probes(tmp_base))
    else:
        results = run_diagnostics(build_probes(args.base_dir))

    print(format_results(results))
    return 1 if has_failures(results) else 0


if __name__ == "__main__":
    raise SystemExit(main())
