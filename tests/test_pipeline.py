"""
tests/test_pipeline.py
=======================
Pipeline Orchestrator Tests

Tests verify:
    1. Aggregation helpers (audio concatenation, text joining, word count)
    2. Empty turn list → empty combined text, zero audio, zero words
    3. Full pipeline with transcription, translation and synthesis mocked
    4. Turns processed strictly in order
    5. Atomicity — a failure on turn 2 of 3 returns no result
    6. InputError raised before any collaborator call
    7. Serialized response shape

All tests are OFFLINE — no API calls.
"""

import base64
import os
import sys
import unittest
from unittest.mock import AsyncMock, patch

# Ensure project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from polyvoice.errors import CollaboratorError, InputError
from polyvoice.pipeline import (
    assemble_result,
    combine_audio,
    combine_text,
    count_words,
    run_pipeline,
)
from polyvoice.schemas import (
    ConversionRequest,
    ProcessedTurn,
    Speaker,
    SpeakerTurn,
    TranscriptionResult,
    TranscriptSegment,
    Voice,
)


# ===================================================================
# Test fixtures
# ===================================================================


def _request(**overrides):
    fields = {
        "media_bytes": b"\x00\x00\x00\x18ftypmp42",
        "file_name": "interview.mp4",
        "mime_type": "video/mp4",
        "target_language": "Spanish",
        "voice_type": "male",
    }
    fields.update(overrides)
    return ConversionRequest(**fields)


def _transcription():
    """Three turns: pause split, then question split."""
    return TranscriptionResult(
        segments=(
            TranscriptSegment(text=" Hello", start=0.0, end=1.0),
            TranscriptSegment(text="there ", start=1.2, end=2.0),
            TranscriptSegment(text="", start=2.0, end=2.5),
            TranscriptSegment(text="Hi", start=4.0, end=5.0),
            TranscriptSegment(text="How are you?", start=5.1, end=6.0),
        ),
        language="english",
        duration=6.0,
        text="Hello there Hi How are you?",
    )


def _processed(speaker, text, translated, audio, fallback=False):
    voice = Voice.ONYX if speaker is Speaker.SPEAKER_1 else Voice.ECHO
    return ProcessedTurn(
        turn=SpeakerTurn(speaker=speaker, text=text, start_time=0.0, end_time=1.0),
        translated_text=translated,
        voice=voice,
        audio_bytes=audio,
        translation_fallback=fallback,
    )


_TRANSLATIONS = {
    "Hello there": "Hola allí",
    "Hi": "Hola",
    "How are you?": "¿Cómo estás?",
}


async def _fake_translate(text, target_language):
    return _TRANSLATIONS[text]


async def _fake_synthesize(text, voice, audio_format=None):
    return f"<{voice.value}:{text}>".encode("utf-8")


# ===================================================================
# Aggregation helpers
# ===================================================================


class TestAggregationHelpers(unittest.TestCase):

    def setUp(self):
        self.turns = [
            _processed(Speaker.SPEAKER_1, "Hello", "Hola", b"\x01\x02"),
            _processed(Speaker.SPEAKER_2, "World", "Mundo", b"\x03"),
        ]

    def test_combine_audio_is_byte_concatenation(self):
        self.assertEqual(combine_audio(self.turns), b"\x01\x02\x03")

    def test_combine_translated_text(self):
        self.assertEqual(
            combine_text(self.turns), "Speaker 1: Hola\n\nSpeaker 2: Mundo",
        )

    def test_combine_original_text(self):
        self.assertEqual(
            combine_text(self.turns, translated=False),
            "Speaker 1: Hello\n\nSpeaker 2: World",
        )

    def test_count_words(self):
        self.assertEqual(count_words("Speaker 1: Hola\n\nSpeaker 2: Mundo"), 6)
        self.assertEqual(count_words("   "), 0)
        self.assertEqual(count_words(""), 0)

    def test_empty_turns_give_empty_result(self):
        result = assemble_result([], TranscriptionResult(segments=()), "French")
        self.assertEqual(result.text, "")
        self.assertEqual(result.original_text, "")
        self.assertEqual(result.word_count, 0)
        self.assertEqual(result.audio_bytes, b"")
        self.assertEqual(result.audio_byte_length, 0)
        self.assertEqual(result.turns, ())
        self.assertEqual(result.source_language, "auto-detected")

    def test_fallback_turns_are_reported_as_warnings(self):
        turns = [_processed(Speaker.SPEAKER_1, "Hello", "Hello", b"x", fallback=True)]
        result = assemble_result(turns, TranscriptionResult(segments=()), "French")
        self.assertEqual(len(result.warnings), 1)
        self.assertIn("Speaker 1", result.warnings[0])


# ===================================================================
# Full pipeline with mocked collaborators
# ===================================================================


@patch("polyvoice.turn_processor.synthesize_speech", new_callable=AsyncMock)
@patch("polyvoice.turn_processor.translate_text", new_callable=AsyncMock)
@patch("polyvoice.pipeline.transcribe", new_callable=AsyncMock)
class TestRunPipeline(unittest.IsolatedAsyncioTestCase):

    async def test_end_to_end(self, mock_transcribe, mock_translate, mock_synth):
        mock_transcribe.return_value = _transcription()
        mock_translate.side_effect = _fake_translate
        mock_synth.side_effect = _fake_synthesize

        result = await run_pipeline(_request())

        self.assertEqual(
            [(t.speaker, t.turn.text, t.voice) for t in result.turns],
            [
                (Speaker.SPEAKER_1, "Hello there", Voice.ONYX),
                (Speaker.SPEAKER_2, "Hi", Voice.ECHO),
                (Speaker.SPEAKER_1, "How are you?", Voice.ONYX),
            ],
        )
        self.assertEqual(
            result.text,
            "Speaker 1: Hola allí\n\nSpeaker 2: Hola\n\nSpeaker 1: ¿Cómo estás?",
        )
        self.assertEqual(
            result.original_text,
            "Speaker 1: Hello there\n\nSpeaker 2: Hi\n\nSpeaker 1: How are you?",
        )
        self.assertEqual(result.word_count, 11)
        self.assertEqual(
            result.audio_bytes,
            "<onyx:Hola allí><echo:Hola><onyx:¿Cómo estás?>".encode("utf-8"),
        )
        self.assertEqual(result.source_language, "english")
        self.assertEqual(result.target_language, "Spanish")
        self.assertEqual(result.duration, 6.0)
        self.assertEqual(result.file_name, "interview.mp4")
        self.assertEqual(result.file_size, len(_request().media_bytes))
        self.assertEqual(result.audio_format, "mp3")
        self.assertEqual(result.warnings, ())

        mock_transcribe.assert_awaited_once_with(
            _request().media_bytes, "interview.mp4", "video/mp4",
        )

    async def test_turns_processed_in_order(self, mock_transcribe, mock_translate, mock_synth):
        events = []

        async def translate(text, target_language):
            events.append(("translate", text))
            return _TRANSLATIONS[text]

        async def synthesize(text, voice, audio_format=None):
            events.append(("synthesize", text))
            return b"a"

        mock_transcribe.return_value = _transcription()
        mock_translate.side_effect = translate
        mock_synth.side_effect = synthesize

        await run_pipeline(_request())

        self.assertEqual(events, [
            ("translate", "Hello there"),
            ("synthesize", "Hola allí"),
            ("translate", "Hi"),
            ("synthesize", "Hola"),
            ("translate", "How are you?"),
            ("synthesize", "¿Cómo estás?"),
        ])

    async def test_female_voices(self, mock_transcribe, mock_translate, mock_synth):
        mock_transcribe.return_value = _transcription()
        mock_translate.side_effect = _fake_translate
        mock_synth.side_effect = _fake_synthesize

        result = await run_pipeline(_request(voice_type="female"))

        self.assertEqual(
            [t.voice for t in result.turns], [Voice.NOVA, Voice.SHIMMER, Voice.NOVA],
        )

    async def test_voice_mapping_is_reproducible(self, mock_transcribe, mock_translate, mock_synth):
        mock_transcribe.return_value = _transcription()
        mock_translate.side_effect = _fake_translate
        mock_synth.side_effect = _fake_synthesize

        first = await run_pipeline(_request())
        second = await run_pipeline(_request())

        self.assertEqual(
            [t.voice for t in first.turns], [t.voice for t in second.turns],
        )
        self.assertEqual(first.audio_bytes, second.audio_bytes)

    async def test_empty_transcript(self, mock_transcribe, mock_translate, mock_synth):
        mock_transcribe.return_value = TranscriptionResult(
            segments=(TranscriptSegment(text="  ", start=0.0, end=1.0),),
        )

        result = await run_pipeline(_request())

        self.assertEqual(result.turns, ())
        self.assertEqual(result.text, "")
        self.assertEqual(result.word_count, 0)
        self.assertEqual(result.audio_bytes, b"")
        mock_translate.assert_not_awaited()
        mock_synth.assert_not_awaited()

    async def test_empty_translation_substitutes_original(self, mock_transcribe, mock_translate, mock_synth):
        mock_transcribe.return_value = _transcription()
        mock_translate.return_value = ""
        mock_synth.side_effect = _fake_synthesize

        with self.assertWarns(Warning):
            result = await run_pipeline(_request())

        self.assertEqual(
            [t.translated_text for t in result.turns],
            ["Hello there", "Hi", "How are you?"],
        )
        self.assertEqual(len(result.warnings), 3)

    async def test_synthesis_failure_on_turn_two_is_atomic(self, mock_transcribe, mock_translate, mock_synth):
        mock_transcribe.return_value = _transcription()
        mock_translate.side_effect = _fake_translate
        mock_synth.side_effect = [
            b"first",
            CollaboratorError("synthesis", "OpenAI synthesis failed: 500"),
            b"third",
        ]

        result = None
        with self.assertRaises(CollaboratorError) as ctx:
            result = await run_pipeline(_request())

        self.assertIsNone(result)
        self.assertEqual(ctx.exception.stage, "synthesis")
        self.assertEqual(mock_translate.await_count, 2)
        self.assertEqual(mock_synth.await_count, 2)

    async def test_transcription_failure_aborts(self, mock_transcribe, mock_translate, mock_synth):
        mock_transcribe.side_effect = CollaboratorError(
            "transcription", "Invalid file format", reason="invalid_media",
        )

        with self.assertRaises(CollaboratorError) as ctx:
            await run_pipeline(_request())

        self.assertEqual(ctx.exception.reason, "invalid_media")
        mock_translate.assert_not_awaited()

    async def test_input_error_before_any_collaborator(self, mock_transcribe, mock_translate, mock_synth):
        with self.assertRaises(InputError) as ctx:
            await run_pipeline(_request(target_language="  "))

        self.assertEqual(ctx.exception.field, "targetLanguage")
        mock_transcribe.assert_not_awaited()
        mock_translate.assert_not_awaited()
        mock_synth.assert_not_awaited()


# ===================================================================
# Serialized response
# ===================================================================


class TestConversionResultDict(unittest.TestCase):

    def test_response_shape(self):
        turns = [
            _processed(Speaker.SPEAKER_1, "Hello", "Hola", b"\x01\x02"),
            _processed(Speaker.SPEAKER_2, "World", "Mundo", b"\x03"),
        ]
        result = assemble_result(
            turns,
            TranscriptionResult(segments=(), language="english", duration=2.0),
            "Spanish",
            file_name="clip.mp4",
            file_size=42,
        )

        data = result.to_dict()

        self.assertEqual(data["text"], "Speaker 1: Hola\n\nSpeaker 2: Mundo")
        self.assertEqual(data["language"], "Spanish")
        self.assertEqual(data["originalLanguage"], "english")
        self.assertEqual(data["wordCount"], 6)
        self.assertEqual(data["fileSize"], 42)
        self.assertEqual(data["audioFormat"], "mp3")
        self.assertEqual(base64.b64decode(data["audioData"]), b"\x01\x02\x03")
        self.assertEqual(len(data["speakerSegments"]), 2)

        segment = data["speakerSegments"][1]
        self.assertEqual(segment["speaker"], "Speaker 2")
        self.assertEqual(segment["translatedText"], "Mundo")
        self.assertEqual(segment["voice"], "echo")
        self.assertEqual(segment["audioSize"], 1)
        self.assertEqual(base64.b64decode(segment["audioData"]), b"\x03")
        self.assertEqual(segment["duration"], 1.0)
        self.assertIsInstance(data["processingSteps"], list)
        self.assertIn("timestamp", data)


if __name__ == "__main__":
    unittest.main()
