# polyvoice/tts/__init__.py
# ==========================
# Speech Synthesis Layer — PolyVoice
#
# Speech-synthesis collaborator: translated text + voice → encoded audio.
#
# Public API:
#   synthesize_speech(text, voice, audio_format) → bytes

from polyvoice.tts.speech_client import synthesize_speech  # noqa: F401

__all__ = ["synthesize_speech"]
