"""
Transcription provider implementations
"""

from .openai import OpenAITranscriptionProvider
from .speech import SpeechServiceProvider

__all__ = [
    "OpenAITranscriptionProvider",
    "SpeechServiceProvider",
]
