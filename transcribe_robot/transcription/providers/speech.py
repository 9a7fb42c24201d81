"""
Cognitive Services speech-to-text implementation of TranscriptionProvider
"""

from typing import Optional

import httpx

from ...core.exceptions import AuthenticationError, TranscriptionError
from ...core.interfaces import TranscriptionProvider
from ...core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TOKEN_URL = "https://westus.api.cognitive.microsoft.com/sts/v1.0/issueToken"
DEFAULT_RECOGNITION_URL = (
    "https://westus.stt.speech.microsoft.com/speech/recognition/dictation/cognitiveservices/v1"
)


class SpeechServiceProvider(TranscriptionProvider):
    """
    Speech REST API for short audio

    A bearer token is issued from the subscription key for each request, and
    the raw WAV bytes are posted with the language code as a query parameter.
    """

    MAX_FILE_SIZE = 4 * 1024 * 1024

    def __init__(
        self,
        subscription_key: Optional[str] = None,
        token_url: str = DEFAULT_TOKEN_URL,
        recognition_url: str = DEFAULT_RECOGNITION_URL,
        timeout: float = 60.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize speech provider

        Args:
            subscription_key: Speech resource key
            token_url: Token issuing endpoint
            recognition_url: Recognition endpoint
            timeout: Request timeout in seconds
            http_client: Optional preconfigured httpx client
        """
        self.subscription_key = subscription_key

        if not self.subscription_key:
            raise AuthenticationError("Speech API key required")

        self.token_url = token_url
        self.recognition_url = recognition_url
        self.timeout = timeout
        self._http_client = http_client

        logger.info("Initialized SpeechServiceProvider")

    def _client(self) -> httpx.AsyncClient:
        return self._http_client or httpx.AsyncClient(timeout=self.timeout)

    async def _fetch_token(self, client: httpx.AsyncClient) -> str:
        try:
            response = await client.post(
                self.token_url, headers={"Ocp-Apim-Subscription-Key": self.subscription_key}
            )
        except httpx.HTTPError as e:
            raise TranscriptionError(f"Speech token request failed: {str(e)}")

        if response.status_code != 200:
            raise TranscriptionError(f"Speech token request failed: HTTP {response.status_code}")
        return response.text.strip()

    async def transcribe(self, audio: bytes, language_code: str) -> str:
        client = self._client()
        try:
            token = await self._fetch_token(client)

            logger.info(f"Transcribing {len(audio)} bytes of audio as {language_code}")
            try:
                response = await client.post(
                    self.recognition_url,
                    params={"language": language_code},
                    content=audio,
                    headers={
                        "Authorization": f"Bearer {token}",
                        "Content-Type": "audio/wav",
                        "Accept": "application/json",
                    },
                )
            except httpx.HTTPError as e:
                raise TranscriptionError(f"Speech request failed: {str(e)}")
        finally:
            if self._http_client is None:
                await client.aclose()

        if not response.is_success:
            raise TranscriptionError(f"Speech service returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            raise TranscriptionError("Speech service returned a non-JSON response")

        transcript = data.get("DisplayText") if isinstance(data, dict) else None
        if transcript is None:
            status = data.get("RecognitionStatus") if isinstance(data, dict) else None
            raise TranscriptionError(f"Speech response missing DisplayText (status: {status})")

        logger.info(f"Transcription completed: {len(transcript.split())} words")
        return transcript

    async def get_max_file_size(self) -> int:
        return self.MAX_FILE_SIZE
