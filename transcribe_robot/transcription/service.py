"""
High-level transcription service that works with any transcription provider
"""

from ..core.exceptions import TranscriptionError
from ..core.interfaces import TranscriptionProvider
from ..core.logging import get_logger

logger = get_logger(__name__)


class TranscriptionService:
    """
    Wraps a TranscriptionProvider, rejecting audio the provider cannot accept
    """

    def __init__(self, transcription_provider: TranscriptionProvider):
        self.transcription = transcription_provider

        logger.info(
            f"Initialized TranscriptionService with {transcription_provider.__class__.__name__}"
        )

    async def transcribe(self, audio: bytes, language_code: str) -> str:
        """
        Transcribe raw audio

        Args:
            audio: Audio file contents
            language_code: Language code from the file name

        Returns:
            Transcript text
        """
        if not audio:
            raise TranscriptionError("No audio content to transcribe")

        max_size = await self.transcription.get_max_file_size()
        if len(audio) > max_size:
            raise TranscriptionError(
                f"Audio too large for provider: {len(audio) / (1024 * 1024):.1f}MB > "
                f"{max_size / (1024 * 1024):.1f}MB"
            )

        transcript = await self.transcription.transcribe(audio, language_code)
        logger.debug(f"Transcribed {len(audio)} bytes into {len(transcript)} characters")
        return transcript
