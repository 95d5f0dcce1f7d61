# polyvoice/__init__.py
# ======================
# PolyVoice — multi-speaker video speech translation
#
# Pipeline:
#   transcribe → normalize segments → attribute speakers
#   → per turn: translate → pick voice → synthesize
#   → concatenate audio, join text → ConversionResult
#
# Entry points:
#   polyvoice.pipeline.run_pipeline(request)   (async)
#   polyvoice.api.upload.app                   (FastAPI)
