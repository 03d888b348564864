"""Label cleanup for speech output."""

from __future__ import annotations


def normalize_label(raw_identifier: str) -> str:
    """Turn a machine identifier such as ``golden_retriever`` into ``Golden Retriever``."""

    text = raw_identifier.replace("_", " ").replace("-", " ").lower()
    return " ".join(word[:1].title() + word[1:] for word in text.split(" "))
