"""
Document models for campaigns, leads and sync runs.

Models are built from already-decoded Instantly records and converted to
Firestore document bodies with to_firestore().
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from common.exceptions import ValidationException


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _first(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the first present, non-None value among keys."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


class CampaignMetrics(BaseModel):
    """Delivery counters for a campaign."""

    sent: int = 0
    delivered: int = 0
    opened: int = 0
    clicked: int = 0
    bounced: int = 0
    unsubscribed: int = 0

    model_config = ConfigDict(extra="ignore")


class Campaign(BaseModel):
    """An Instantly campaign as stored in the campaigns collection."""

    id: Optional[str] = None
    name: str = ""
    status: str = "unknown"
    created_at: Optional[Any] = None
    updated_at: Optional[Any] = None
    scheduled_at: Optional[Any] = None
    completed_at: Optional[Any] = None
    subject: str = ""
    from_email: str = ""
    from_name: str = ""
    reply_to: str = ""
    template_id: Optional[str] = None
    list_id: Optional[str] = None
    metrics: CampaignMetrics = Field(default_factory=CampaignMetrics)
    settings: Dict[str, Any] = Field(default_factory=dict)
    tags: List[Any] = Field(default_factory=list)
    last_synced_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_api(cls, data: Optional[dict] = None) -> "Campaign":
        """Build a campaign from a decoded Instantly record."""
        data = data or {}
        fields = {
            "id": _first(data, "id"),
            "name": _first(data, "name", default=""),
            "status": _first(data, "status", default="unknown"),
            "created_at": _first(data, "created_at", "timestamp_created"),
            "updated_at": _first(data, "updated_at", "timestamp_updated"),
            "scheduled_at": _first(data, "scheduled_at"),
            "completed_at": _first(data, "completed_at"),
            "subject": _first(data, "subject", default=""),
            "from_email": _first(data, "from_email", default=""),
            "from_name": _first(data, "from_name", default=""),
            "reply_to": _first(data, "reply_to", default=""),
            "template_id": _first(data, "template_id"),
            "list_id": _first(data, "list_id"),
            "settings": _first(data, "settings", default={}),
            "tags": _first(data, "tags", "email_tag_list", default=[]),
        }
        if isinstance(data.get("metrics"), dict):
            fields["metrics"] = CampaignMetrics(**data["metrics"])
        if fields["id"] is not None:
            fields["id"] = str(fields["id"])
        return cls(**fields)

    @classmethod
    def from_firestore(cls, doc) -> "Campaign":
        """Rebuild a campaign from a Firestore document snapshot."""
        return cls(id=doc.id, **(doc.to_dict() or {}))

    def to_firestore(self) -> dict:
        """Document body, keyed externally by id."""
        return self.model_dump(exclude={"id"})


class Lead(BaseModel):
    """An Instantly lead as stored in the leads collection."""

    id: str
    campaign_id: Optional[str] = None
    email: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    company_name: str = ""
    company_domain: str = ""
    phone: str = ""
    website: str = ""
    job_title: str = ""
    status: str = ""
    interest_status: str = ""
    verification_status: str = ""
    enrichment_status: str = ""
    esp_provider: str = ""
    upload_method: str = ""
    email_open_count: int = 0
    email_reply_count: int = 0
    email_click_count: int = 0
    payload: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[Any] = None
    updated_at: Optional[Any] = None
    last_synced_at: datetime = Field(default_factory=_utcnow)

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_api(cls, data: dict) -> "Lead":
        """
        Build a lead from a decoded Instantly record.

        The document id falls back to the email address.

        Raises:
            ValidationException: If the record has neither id nor email
        """
        lead_id = _first(data, "id", "email")
        if not lead_id:
            raise ValidationException("Lead has neither id nor email", details=data)

        return cls(
            id=str(lead_id),
            campaign_id=_first(data, "campaign", "campaign_id", "campaignId"),
            email=data.get("email"),
            first_name=_first(data, "first_name", default=""),
            last_name=_first(data, "last_name", default=""),
            company_name=_first(data, "company_name", "company", default=""),
            company_domain=_first(data, "company_domain", default=""),
            phone=_first(data, "phone", default=""),
            website=_first(data, "website", default=""),
            job_title=_first(data, "job_title", "title", default=""),
            status=_first(data, "status", default=""),
            interest_status=_first(data, "interest_status", default=""),
            verification_status=_first(data, "verification_status", default=""),
            enrichment_status=_first(data, "enrichment_status", default=""),
            esp_provider=_first(data, "esp_provider", default=""),
            upload_method=_first(data, "upload_method", default=""),
            email_open_count=_first(data, "email_open_count", default=0),
            email_reply_count=_first(data, "email_reply_count", default=0),
            email_click_count=_first(data, "email_click_count", default=0),
            payload=_first(data, "payload", default={}),
            created_at=_first(data, "created_at", "timestamp_created"),
            updated_at=_first(data, "updated_at", "timestamp_updated"),
        )

    @classmethod
    def from_firestore(cls, doc) -> "Lead":
        """Rebuild a lead from a Firestore document snapshot."""
        return cls(id=doc.id, **(doc.to_dict() or {}))

    def to_firestore(self) -> dict:
        """Document body, keyed externally by id."""
        return self.model_dump(exclude={"id"})


class SyncState(str, Enum):
    """Lifecycle of one sync run."""

    START = "START"
    FETCHING = "FETCHING"
    DECODING = "DECODING"
    WRITING = "WRITING"
    DONE = "DONE"
    FAILED = "FAILED"


class SyncTrigger(str, Enum):
    """What started a sync run."""

    HTTP = "http"
    SCHEDULE = "schedule"
    CALLABLE = "callable"


class SyncRun(BaseModel):
    """Progress and outcome of one sync run, persisted to sync_runs."""

    run_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    trigger: SyncTrigger = SyncTrigger.HTTP
    state: SyncState = SyncState.START
    campaigns_fetched: int = 0
    campaigns_written: int = 0
    leads_fetched: int = 0
    leads_written: int = 0
    records_skipped: int = 0
    batches_committed: int = 0
    started_at: datetime = Field(default_factory=_utcnow)
    finished_at: Optional[datetime] = None
    error: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    def transition(self, state: SyncState) -> None:
        """Move to a new state; DONE and FAILED are terminal."""
        if self.state in (SyncState.DONE.value, SyncState.FAILED.value):
            raise ValueError(f"Sync run {self.run_id} already finished ({self.state})")
        self.state = state

    def fail(self, error: Exception) -> None:
        """Record the triggering error and enter FAILED."""
        self.error = str(error) or type(error).__name__
        self.transition(SyncState.FAILED)
        self.finished_at = _utcnow()

    def finish(self) -> None:
        self.transition(SyncState.DONE)
        self.finished_at = _utcnow()

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
