"""
OpenAI Whisper implementation of TranscriptionProvider
"""

import asyncio
import io
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from ...core.exceptions import AuthenticationError, TranscriptionError
from ...core.interfaces import TranscriptionProvider
from ...core.logging import get_logger

logger = get_logger(__name__)

# Thread pool for blocking I/O operations
executor = ThreadPoolExecutor(max_workers=3)

# Table codes whose primary subtag is not the ISO-639-1 code Whisper expects
WHISPER_LANGUAGES = {"pr-br": "pt"}


class OpenAITranscriptionProvider(TranscriptionProvider):
    """
    OpenAI Whisper implementation of transcription provider
    """

    # OpenAI limits
    MAX_FILE_SIZE = 25 * 1024 * 1024  # 25 MB

    def __init__(self, api_key: Optional[str] = None, model: str = "whisper-1"):
        """
        Initialize OpenAI transcription provider

        Args:
            api_key: OpenAI API key
            model: Whisper model name
        """
        self.api_key = api_key
        self.model = model

        if not self.api_key:
            raise AuthenticationError("OpenAI API key required")

        self._initialize_client()

        logger.info(f"Initialized OpenAITranscriptionProvider with model {self.model}")

    def _initialize_client(self):
        """Initialize OpenAI client"""
        try:
            from openai import OpenAI

            self.client = OpenAI(api_key=self.api_key)
        except Exception as e:
            raise AuthenticationError(f"Failed to initialize OpenAI client: {str(e)}")

    async def transcribe(self, audio: bytes, language_code: str) -> str:
        language = whisper_language(language_code)

        def _transcribe():
            audio_file = io.BytesIO(audio)
            audio_file.name = "audio.wav"
            return self.client.audio.transcriptions.create(
                file=audio_file,
                model=self.model,
                language=language,
                response_format="json",
            )

        logger.info(f"Transcribing {len(audio)} bytes with {self.model} ({language})")

        try:
            loop = asyncio.get_running_loop()
            transcript = await loop.run_in_executor(executor, _transcribe)
        except Exception as e:
            logger.error(f"Transcription failed: {str(e)}")
            raise TranscriptionError(f"Transcription failed: {str(e)}")

        text = getattr(transcript, "text", None)
        if text is None:
            raise TranscriptionError("Transcription response missing text")
        return text

    async def get_max_file_size(self) -> int:
        return self.MAX_FILE_SIZE


def whisper_language(language_code: Optional[str]) -> Optional[str]:
    """
    Map a table language code to the ISO-639-1 code Whisper takes

    "en-US" becomes "en"; codes listed in WHISPER_LANGUAGES are mapped explicitly.
    """
    if not language_code:
        return None

    code = language_code.lower()
    return WHISPER_LANGUAGES.get(code, code.split("-")[0])
