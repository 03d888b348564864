"""Diagnostics routines for the perception pipeline."""

from __future__ import annotations

import importlib.util

from diagnostics.models import DiagnosticResult, DiagnosticStatus


REQUIRED_MODULES = ("numpy", "PIL")


def probe(available_modules: set[str] | None = None) -> DiagnosticResult:
    """Check imaging dependencies and run a quick scan over a blank frame.

    Args:
        available_modules: Optional override set for offline testing.

    Returns:
        Diagnostic result indicating perception readiness.
    """

    name = "vision"
    missing: list[str] = []
    for module_name in REQUIRED_MODULES:
        if available_modules is not None:
            is_available = module_name in available_modules
        else:
            is_available = importlib.util.find_spec(module_name) is not None
        if not is_available:
            missing.append(module_name)

    if missing:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details=f"Missing imaging deps: {', '.join(missing)}",
        )

    from PIL import Image

    from vision.description import NO_OBJECTS_SENTENCE
    from vision.engine import PerceptionEngine

    with PerceptionEngine() as engine:
        sentence = engine.quick_scan(Image.new("RGB", (8, 8)))

    if sentence != NO_OBJECTS_SENTENCE:
        return DiagnosticResult(
            name=name,
            status=DiagnosticStatus.FAIL,
            details=f"Unexpected blank-frame description: {sentence!r}",
        )
    return DiagnosticResult(
        name=name,
        status=DiagnosticStatus.PASS,
        details="Blank-frame quick scan produced the fallback description",
    )
