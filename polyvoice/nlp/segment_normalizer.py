"""
polyvoice/nlp/segment_normalizer.py
====================================
Segment Normalizer — PolyVoice

Responsibility:
    - Trim whitespace from each transcript segment's text
    - Drop segments whose text is missing or empty after trimming
    - Preserve order and timestamps of the remaining segments

Dropped segments contribute nothing downstream, including their timing.
There are no error conditions: empty input yields empty output.
"""

import logging
from collections.abc import Iterable

from polyvoice.schemas import TranscriptSegment

logger = logging.getLogger("polyvoice.nlp.segment_normalizer")


def normalize_segments(
    segments: Iterable[TranscriptSegment],
) -> list[TranscriptSegment]:
    """
    Return trimmed, non-empty segments in their original order.

    Args:
        segments: Raw segments from the transcription service.

    Returns:
        New list of TranscriptSegment with stripped text.
    """
    normalized: list[TranscriptSegment] = []
    dropped = 0

    for seg in segments:
        text = (seg.text or "").strip()
        if not text:
            dropped += 1
            continue
        normalized.append(TranscriptSegment(text=text, start=seg.start, end=seg.end))

    if dropped:
        logger.info("Dropped %d empty segment(s).", dropped)
    logger.debug("Segment normalization complete: %d segments kept.", len(normalized))
    return normalized
