"""
Data models for the transcription robot
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, Optional


@dataclass
class SubscriptionRecord:
    """Durable state for one remote webhook subscription"""

    subscription_id: str
    owner_identity: str
    resource_id: str
    cursor: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for persistence"""
        return {
            "subscription_id": self.subscription_id,
            "owner_identity": self.owner_identity,
            "resource_id": self.resource_id,
            "cursor": self.cursor,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SubscriptionRecord":
        return cls(
            subscription_id=data["subscription_id"],
            owner_identity=data["owner_identity"],
            resource_id=data["resource_id"],
            cursor=data.get("cursor"),
            updated_at=data.get("updated_at"),
        )


@dataclass
class CandidateItem:
    """A file-like entry read from the change feed"""

    item_id: str
    name: Optional[str]
    size: int = 0
    is_file: bool = False
    is_deleted: bool = False
    has_audio_property: bool = False
    parent_container_id: Optional[str] = None

    @property
    def extension(self) -> str:
        """Get file extension"""
        return PurePosixPath(self.name or "").suffix.lower()

    @classmethod
    def from_graph(cls, data: dict[str, Any]) -> "CandidateItem":
        """
        Build a candidate from a Microsoft Graph driveItem resource

        Facets (file, audio, deleted) are present as objects when they apply
        and absent otherwise.
        """
        parent = data.get("parentReference") or {}
        return cls(
            item_id=data.get("id", ""),
            name=data.get("name"),
            size=data.get("size") or 0,
            is_file=data.get("file") is not None,
            is_deleted=data.get("deleted") is not None,
            has_audio_property=data.get("audio") is not None,
            parent_container_id=parent.get("driveId"),
        )


@dataclass
class ChangeFeedPage:
    """One page of the remote delta feed"""

    items: list[CandidateItem] = field(default_factory=list)
    next_link: Optional[str] = None
    delta_link: Optional[str] = None


class SkipReason(Enum):
    """Deliberate no-op outcomes of the processing pipeline"""

    BAD_FORMAT = "bad-format"
    ALREADY_PROCESSED = "already-processed"
    TOO_LARGE = "too-large"
    UNKNOWN_LANGUAGE = "unknown-language"


class FailureReason(Enum):
    """Isolated per-item failures"""

    FETCH_ERROR = "fetch-error"
    TRANSCRIPTION_ERROR = "transcription-error"
    PATCH_ERROR = "patch-error"


class OutcomeKind(Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class ProcessingOutcome:
    """Tagged result of processing one candidate item"""

    kind: OutcomeKind
    item_name: Optional[str] = None
    reason: Optional[SkipReason] = None
    failure: Optional[FailureReason] = None
    error: Optional[str] = None
    language_code: Optional[str] = None
    language_name: Optional[str] = None
    transcript: Optional[str] = None

    @classmethod
    def skipped(cls, reason: SkipReason, item_name: Optional[str] = None) -> "ProcessingOutcome":
        return cls(kind=OutcomeKind.SKIPPED, item_name=item_name, reason=reason)

    @classmethod
    def succeeded(
        cls,
        language_code: str,
        transcript: str,
        language_name: Optional[str] = None,
        item_name: Optional[str] = None,
    ) -> "ProcessingOutcome":
        return cls(
            kind=OutcomeKind.SUCCEEDED,
            item_name=item_name,
            language_code=language_code,
            language_name=language_name,
            transcript=transcript,
        )

    @classmethod
    def failed(
        cls, failure: FailureReason, error: str, item_name: Optional[str] = None
    ) -> "ProcessingOutcome":
        return cls(kind=OutcomeKind.FAILED, item_name=item_name, failure=failure, error=error)

    @property
    def is_skipped(self) -> bool:
        return self.kind == OutcomeKind.SKIPPED

    @property
    def is_succeeded(self) -> bool:
        return self.kind == OutcomeKind.SUCCEEDED

    @property
    def is_failed(self) -> bool:
        return self.kind == OutcomeKind.FAILED

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization"""
        result: dict[str, Any] = {"kind": self.kind.value, "item_name": self.item_name}
        if self.reason:
            result["reason"] = self.reason.value
        if self.failure:
            result["failure"] = self.failure.value
            result["error"] = self.error
        if self.is_succeeded:
            result["language_code"] = self.language_code
            result["language_name"] = self.language_name
        return result


class WalkState(Enum):
    """States of one pass over the delta feed"""

    PAGING = "paging"
    END_OF_FEED = "end_of_feed"
    CEILING_REACHED = "ceiling_reached"
    CURSOR_INVALID = "cursor_invalid"
    FAILED = "failed"


@dataclass
class WalkResult:
    """Terminal result of a feed walk"""

    state: WalkState
    items: list[CandidateItem] = field(default_factory=list)
    cursor: Optional[str] = None
    pages_read: int = 0
    error: Optional[str] = None

    @property
    def should_persist(self) -> bool:
        """Whether the cursor may be written back to the state store"""
        return self.state in (
            WalkState.END_OF_FEED,
            WalkState.CEILING_REACHED,
            WalkState.CURSOR_INVALID,
        )

    @property
    def was_reset(self) -> bool:
        return self.state in (WalkState.CEILING_REACHED, WalkState.CURSOR_INVALID)


@dataclass
class NotificationEntry:
    """One notification inside a webhook delivery"""

    subscription_id: str
    resource: Optional[str] = None
    client_state: Optional[str] = None


class Disposition(Enum):
    """Response signal for the remote service"""

    PROCESSED = 204
    GONE = 410
    BAD_REQUEST = 400


@dataclass
class DispatchResult:
    """Result of handling one webhook delivery"""

    disposition: Disposition = Disposition.PROCESSED
    outcomes: dict[str, list[ProcessingOutcome]] = field(default_factory=dict)
    unknown_subscriptions: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    processed_at: datetime = field(default_factory=datetime.now)

    @property
    def status_code(self) -> int:
        return self.disposition.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "disposition": self.disposition.name.lower(),
            "status_code": self.status_code,
            "outcomes": {
                sub_id: [o.to_dict() for o in outcomes]
                for sub_id, outcomes in self.outcomes.items()
            },
            "unknown_subscriptions": self.unknown_subscriptions,
            "errors": self.errors,
            "processed_at": self.processed_at.isoformat(),
        }
