"""
File processing pipeline: transcribe one audio item and write the result back
"""

from typing import Optional

from ..core.interfaces import DriveClient
from ..core.logging import get_logger
from ..core.models import CandidateItem, FailureReason, ProcessingOutcome, SkipReason
from ..transcription.languages import LanguageTable, parse_file_name
from ..transcription.service import TranscriptionService

logger = get_logger(__name__)

DEFAULT_MAX_FILE_SIZE = 4 * 1024 * 1024
LANGUAGE_FIELD = "Language"
TRANSCRIPT_FIELD = "Transcription"


class FileProcessor:
    """
    Processes a single candidate item.

    Each step returns early with a Skipped or Failed outcome; no exception
    raised by a collaborator escapes process().
    """

    def __init__(
        self,
        drive_client: DriveClient,
        transcription_service: TranscriptionService,
        languages: Optional[LanguageTable] = None,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        language_field: str = LANGUAGE_FIELD,
        transcript_field: str = TRANSCRIPT_FIELD,
    ):
        self.drive = drive_client
        self.transcription = transcription_service
        self.languages = languages or LanguageTable()
        self.max_file_size = max_file_size
        self.language_field = language_field
        self.transcript_field = transcript_field

    async def process(
        self, item: CandidateItem, default_container_id: Optional[str] = None
    ) -> ProcessingOutcome:
        """
        Run the pipeline for one item

        Args:
            item: Candidate that passed the feed filter
            default_container_id: Drive to use when the item carries no parent reference

        Returns:
            ProcessingOutcome
        """
        name = item.name
        container_id = item.parent_container_id or default_container_id

        parsed = parse_file_name(name)
        if parsed is None:
            logger.info(f"Filename {name} didn't match the expected format, skipping")
            return ProcessingOutcome.skipped(SkipReason.BAD_FORMAT, name)

        # Always a fresh read: another instance may have written it meanwhile
        try:
            fields = await self.drive.get_item_fields(container_id, item.item_id)
        except Exception as e:
            logger.error(f"Could not read metadata for {name}: {str(e)}")
            return ProcessingOutcome.failed(FailureReason.FETCH_ERROR, str(e), name)

        existing = fields.get(self.language_field)
        if existing is not None and str(existing) != "":
            logger.info(f"{name} already has transcription metadata, skipping")
            return ProcessingOutcome.skipped(SkipReason.ALREADY_PROCESSED, name)

        if item.size > self.max_file_size:
            logger.info(
                f"{name} is {item.size} bytes, over the {self.max_file_size} byte limit, skipping"
            )
            return ProcessingOutcome.skipped(SkipReason.TOO_LARGE, name)

        language_name = self.languages.resolve(parsed.language_code)
        if language_name is None:
            logger.info(f"Language code {parsed.language_code!r} of {name} is not supported, skipping")
            return ProcessingOutcome.skipped(SkipReason.UNKNOWN_LANGUAGE, name)
        language_code = self.languages.canonical_code(parsed.language_code)

        logger.info(f"Downloading audio file contents of {name}")
        try:
            audio = await self.drive.download_content(container_id, item.item_id)
        except Exception as e:
            logger.error(f"Download failed for {name}: {str(e)}")
            return ProcessingOutcome.failed(FailureReason.FETCH_ERROR, str(e), name)

        logger.info(f"Transcribing {name} as {language_code}")
        try:
            transcript = await self.transcription.transcribe(audio, language_code)
        except Exception as e:
            logger.error(f"Transcription failed for {name}: {str(e)}")
            return ProcessingOutcome.failed(FailureReason.TRANSCRIPTION_ERROR, str(e), name)

        logger.info(f"Patching metadata on {name}")
        try:
            await self.drive.update_item_fields(
                container_id,
                item.item_id,
                {self.language_field: language_name, self.transcript_field: transcript},
            )
        except Exception as e:
            logger.error(f"Metadata patch failed for {name}: {str(e)}")
            return ProcessingOutcome.failed(FailureReason.PATCH_ERROR, str(e), name)

        logger.info(f"Updated {name} with transcription")
        return ProcessingOutcome.succeeded(language_code, transcript, language_name, name)
