"""Value objects that flow from the station report to the broker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

RawReading = Mapping[str, str]
"""Query parameters of a single station report, keyed by station field name."""


@dataclass(frozen=True, slots=True)
class PublishedSample:
    """A formatted reading ready to be handed to the publisher."""

    topic: str
    payload: str
    retained: bool = False
