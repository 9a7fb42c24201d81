"""
Candidate filtering for change feed entries
"""

from ..core.models import CandidateItem

DEFAULT_AUDIO_EXTENSION = ".wav"


def is_candidate(item: CandidateItem, audio_extension: str = DEFAULT_AUDIO_EXTENSION) -> bool:
    """
    Check whether a feed entry is a live audio file worth processing

    Directories and deleted entries never qualify. A file qualifies when its
    name carries the accepted extension or the service reports an audio facet.
    """
    if not item.is_file or item.is_deleted or not item.name:
        return False
    return item.name.endswith(audio_extension) or item.has_audio_property


def filter_candidates(
    items: list[CandidateItem], audio_extension: str = DEFAULT_AUDIO_EXTENSION
) -> list[CandidateItem]:
    """Filter a page of items, preserving feed order"""
    return [item for item in items if is_candidate(item, audio_extension)]
