"""
Transcription service with pluggable providers
"""

from .languages import LanguageTable, parse_file_name
from .providers import OpenAITranscriptionProvider, SpeechServiceProvider
from .service import TranscriptionService

__all__ = [
    "TranscriptionService",
    "LanguageTable",
    "parse_file_name",
    "OpenAITranscriptionProvider",
    "SpeechServiceProvider",
]
