"""Tests for recognizer adapters and payload coercion."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

from PIL import Image
import pytest

from vision.detections import FULL_FRAME_REGION, RawResult, RecognizerSource
from vision.frames import decode_frame
from vision.recognizers import (
    CallableClassifier,
    CallableDetector,
    RecognizerError,
    RecordedRecognizer,
    coerce_raw_result,
    coerce_raw_results,
)


def test_mapping_payload_with_score_and_bbox() -> None:
    result = coerce_raw_result(
        {"name": "person", "score": 0.87, "bbox": [0.1, 0.2, 0.3, 0.4], "instance_id": "3"},
        RecognizerSource.DETECTOR,
    )

    assert result == RawResult("person", 0.87, (0.1, 0.2, 0.3, 0.4), RecognizerSource.DETECTOR, 3)


def test_region_and_confidence_are_clamped() -> None:
    result = coerce_raw_result(
        {"label": "cup", "confidence": 1.7, "region": (0.8, -0.2, 0.5, 0.5)},
        RecognizerSource.DETECTOR,
    )

    assert result is not None
    assert result.confidence == 1.0
    assert result.region == pytest.approx((0.8, 0.0, 0.2, 0.5))


def test_detector_payload_without_region_is_skipped() -> None:
    payloads = [{"label": "cup", "confidence": 0.9}, {"label": "dog", "confidence": 0.9, "bbox": [0, 0, 1, "x"]}]

    assert coerce_raw_results(payloads, RecognizerSource.DETECTOR) == []


def test_classifier_payload_gets_full_frame_region() -> None:
    result = coerce_raw_result({"identifier": "seashore", "confidence": 0.4}, RecognizerSource.CLASSIFIER)

    assert result is not None
    assert result.region == FULL_FRAME_REGION
    assert result.label == "seashore"


def test_attribute_payload_with_nan_confidence_is_dropped() -> None:
    payload = SimpleNamespace(class_name="bus", confidence="nan", box=(0.0, 0.0, 0.5, 0.5))

    result = coerce_raw_result(payload, RecognizerSource.DETECTOR)

    assert result is None


def test_unusable_payload_is_skipped() -> None:
    assert coerce_raw_result(object(), RecognizerSource.CLASSIFIER) is None


def test_raw_result_is_retagged_with_branch_source() -> None:
    raw = RawResult("tree", 0.6, FULL_FRAME_REGION, RecognizerSource.DETECTOR)

    assert coerce_raw_result(raw, RecognizerSource.CLASSIFIER).source is RecognizerSource.CLASSIFIER
    assert coerce_raw_result(raw, RecognizerSource.DETECTOR) == raw


def test_callable_adapters() -> None:
    frame = decode_frame(Image.new("RGB", (2, 2)))
    detector = CallableDetector(lambda _: [{"label": "cat", "confidence": 0.9, "bbox": (0, 0, 1, 1)}])
    classifier = CallableClassifier(lambda _: [{"label": "indoor", "confidence": 0.5}])

    assert detector.detect(frame)[0].source is RecognizerSource.DETECTOR
    assert classifier.classify(frame)[0].label == "indoor"


def test_recorded_recognizer_replays_yaml(tmp_path: Path) -> None:
    recording = tmp_path / "scene.yaml"
    recording.write_text(
        "\n".join(
            [
                "detections:",
                "  - {label: dog, confidence: 0.9, bbox: [0.1, 0.4, 0.2, 0.2]}",
                "classifications:",
                "  - {label: living_room, confidence: 0.6}",
            ]
        ),
        encoding="utf-8",
    )
    frame = decode_frame(Image.new("RGB", (2, 2)))

    recognizer = RecordedRecognizer.from_file(recording)

    assert [result.label for result in recognizer.detect(frame)] == ["dog"]
    assert [result.label for result in recognizer.classify(frame)] == ["living_room"]


def test_recorded_recognizer_rejects_bad_files(tmp_path: Path) -> None:
    not_mapping = tmp_path / "list.yaml"
    not_mapping.write_text("- 1\n- 2\n", encoding="utf-8")

    with pytest.raises(RecognizerError):
        RecordedRecognizer.from_file(not_mapping)
    with pytest.raises(RecognizerError):
        RecordedRecognizer.from_file(tmp_path / "missing.yaml")
