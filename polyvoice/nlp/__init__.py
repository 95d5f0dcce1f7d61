# polyvoice/nlp/__init__.py
# ==========================
# Text Layer — PolyVoice
#
#   - segment_normalizer.py   trim and drop empty transcript segments
#   - speaker_attribution.py  group segments into alternating speaker turns
#   - translator.py           translation collaborator (OpenAI chat)

import logging

from polyvoice.nlp.segment_normalizer import normalize_segments
from polyvoice.nlp.speaker_attribution import attribute_speakers
from polyvoice.schemas import SpeakerTurn, TranscriptSegment

logger = logging.getLogger("polyvoice.nlp")


def segments_to_turns(
    segments: list[TranscriptSegment],
) -> list[SpeakerTurn]:
    """
    Normalize raw transcript segments then attribute speakers.

    Args:
        segments: Raw segments as returned by the transcription service.

    Returns:
        Ordered, alternating SpeakerTurn list.
    """
    normalized = normalize_segments(segments)
    turns = attribute_speakers(normalized)

    logger.info(
        "Segments to turns: %d raw → %d normalized → %d turns.",
        len(segments), len(normalized), len(turns),
    )
    return turns
