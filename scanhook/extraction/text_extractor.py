"""Best-effort plain text from the provider's crawled-document payloads.

The provider has delivered the crawled version in several shapes over time,
so extraction is an ordered list of probes. The first probe returning a value
wins. None is a normal outcome that callers log and move on from.
"""

from collections.abc import Callable
from typing import Any

from scanhook.extraction.payload import dig

Probe = Callable[[Any], Any]


def _probe_string(payload: Any) -> Any:
    return payload if isinstance(payload, str) else None


def _probe_text(payload: Any) -> Any:
    text = dig(payload, "text")
    if not text:
        return None
    if isinstance(text, str):
        return text
    return dig(text, "value")


def _path_probe(*path: str) -> Probe:
    def probe(payload: Any) -> Any:
        return dig(payload, *path)

    probe.__name__ = f"_probe_{'_'.join(path)}"
    return probe


PROBES: tuple[Probe, ...] = (
    _probe_string,
    _probe_text,
    _path_probe("value"),
    _path_probe("content"),
    _path_probe("document", "text"),
    _path_probe("html", "text"),
    _path_probe("result", "text"),
)


def extract_text(payload: Any) -> str | None:
    """Return the document text carried by `payload`, or None if none is found."""
    if not payload:
        return None
    for probe in PROBES:
        match = probe(payload)
        if match:
            return match
    return None
