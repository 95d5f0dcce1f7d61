# polyvoice/api/__init__.py
# ==========================
# API Layer — PolyVoice
#
#   POST /api/v1/convert-video   video + targetLanguage + voiceType → result
#   GET  /api/v1/convert-video   status and configuration presence
#   GET  /api/v1/debug           environment check (names only)
