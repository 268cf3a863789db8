"""
External quality response parsing and cavity mapping.

Response format: `<id>.<serial>,<STATUS>;<id>.<serial>,<STATUS>;...`
Anything before the first "1." is preamble. Only entries whose status is
OK (any case) count as OK; malformed fragments are skipped.
"""

# Standard library imports
import logging
from typing import Iterable, Optional

# Local application imports
from ...domain.models.external_status import ExternalStatusReport

logger = logging.getLogger(__name__)

# The controller status word is 16 bits wide
MAX_WORD_BITS = 16


def parse_status_response(raw: Optional[str]) -> ExternalStatusReport:
    report = ExternalStatusReport()
    if not raw:
        return report

    start = raw.find("1.")
    if start > 0:
        raw = raw[start:]

    for fragment in raw.split(";"):
        if not fragment.strip():
            continue
        segments = fragment.split(",")
        if len(segments) < 2:
            logger.debug(f"Skipping malformed status fragment: {fragment!r}")
            continue
        id_part = segments[0].strip()
        dot = id_part.find(".")
        if dot <= 0:
            logger.debug(f"Skipping status fragment without id: {fragment!r}")
            continue
        try:
            cavity_id = int(id_part[:dot])
        except ValueError:
            logger.debug(f"Skipping status fragment with non-numeric id: {fragment!r}")
            continue
        report.serials[cavity_id] = id_part[dot + 1:]
        if segments[1].strip().upper() == "OK":
            report.ok_ids.add(cavity_id)
    return report


def map_ok_to_sequence(
    ok_ids: Iterable[int],
    station_order: list[int],
    total_items: int,
) -> tuple[list[bool], int]:
    """
    Translate physical OK ids into per-step quarantine flags and a status word.

    Step i is cleared (not quarantined, bit i set) when the physical station
    visited at step i is in the OK list. Steps beyond the station order stay
    quarantined; bits beyond the word width are not representable.
    """
    ok = set(ok_ids)
    quarantine = [True] * total_items
    word = 0
    for step in range(min(total_items, len(station_order))):
        if station_order[step] in ok:
            quarantine[step] = False
            if step < MAX_WORD_BITS:
                word |= 1 << step
    return quarantine, word


def all_ok_word(total_items: int) -> int:
    return (1 << min(total_items, MAX_WORD_BITS)) - 1
