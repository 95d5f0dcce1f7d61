"""
polyvoice/nlp/speaker_attribution.py
=====================================
Speaker Attribution Engine — PolyVoice

Responsibility:
    - Group normalized transcript segments into alternating speaker turns
    - Detect likely speaker changes from timing and lexical cues
    - Emit SpeakerTurn records in time order

Speaker change heuristic (evaluated per segment i):
    pause_before = segment[i].start - segment[i-1].end   (0 for i == 0)
    change if pause_before > 1.0s
           or (i > 0 and ("?" in text or any filler marker in text))

Filler markers are matched as case-sensitive substrings, not words, so
"album" counts as containing "um".

Only two speakers exist. Each change toggles between Speaker 1 and
Speaker 2; the first turn is always Speaker 1.

This module does NOT:
    - Perform acoustic diarization
    - Call any LLM or external API
    - Clean or trim text (see segment_normalizer.py)
"""

import logging
from collections.abc import Sequence

from polyvoice.schemas import Speaker, SpeakerTurn, TranscriptSegment

logger = logging.getLogger("polyvoice.nlp.speaker_attribution")


# ---------------------------------------------------------------------------
# Heuristic constants
# ---------------------------------------------------------------------------

PAUSE_THRESHOLD_SECONDS: float = 1.0
QUESTION_MARKER: str = "?"
FILLER_MARKERS: tuple[str, ...] = ("uh", "um", "well")


# ---------------------------------------------------------------------------
# Run-local accumulator
# ---------------------------------------------------------------------------


class _TurnAccumulator:
    """Fold state for one attribution pass. Never shared between calls."""

    def __init__(self):
        self.speaker = Speaker.SPEAKER_1
        self.text = ""
        self.turn_start = 0.0
        self.turn_end = 0.0
        self.turns: list[SpeakerTurn] = []

    def append(self, text: str) -> None:
        self.text = f"{self.text} {text}" if self.text else text

    def flush(self) -> None:
        """Emit the accumulated turn if it has any text."""
        text = self.text.strip()
        if text:
            self.turns.append(
                SpeakerTurn(
                    speaker=self.speaker,
                    text=text,
                    start_time=self.turn_start,
                    end_time=self.turn_end,
                )
            )

    def switch(self, segment: TranscriptSegment) -> None:
        """Close the current turn and open a new one for the other speaker."""
        self.flush()
        self.speaker = self.speaker.other()
        self.text = segment.text
        self.turn_start = segment.start


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def is_speaker_change(
    segment: TranscriptSegment,
    previous: TranscriptSegment | None,
    index: int,
) -> bool:
    """Return True if ``segment`` should start a new speaker turn."""
    pause_before = segment.start - previous.end if index > 0 and previous else 0.0
    is_long_pause = pause_before > PAUSE_THRESHOLD_SECONDS

    text = segment.text or ""
    has_question = QUESTION_MARKER in text
    has_filler = any(marker in text for marker in FILLER_MARKERS)

    return is_long_pause or (index > 0 and (has_question or has_filler))


def attribute_speakers(
    segments: Sequence[TranscriptSegment],
) -> list[SpeakerTurn]:
    """
    Partition normalized segments into alternating speaker turns.

    Args:
        segments: Output of ``normalize_segments`` (trimmed, non-empty,
            chronological).

    Returns:
        List of SpeakerTurn. Empty input gives an empty list; a single
        segment gives exactly one Speaker 1 turn.
    """
    acc = _TurnAccumulator()

    for i, segment in enumerate(segments):
        previous = segments[i - 1] if i > 0 else None

        if is_speaker_change(segment, previous, i):
            acc.switch(segment)
        else:
            acc.append(segment.text)

        acc.turn_end = segment.end

    acc.flush()

    logger.info(
        "Speaker attribution complete: %d segments → %d turns.",
        len(segments), len(acc.turns),
    )
    return acc.turns
