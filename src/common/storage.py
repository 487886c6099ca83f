"""
Firestore repositories for campaigns, leads, sync runs and the sync run lock.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from google.api_core.exceptions import AlreadyExists, FailedPrecondition, NotFound
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from common.constants import (
    CAMPAIGNS_COLLECTION,
    LEADS_COLLECTION,
    SYNC_LOCKS_COLLECTION,
    SYNC_RUNS_COLLECTION,
)
from common.exceptions import SyncInProgressException
from common.models import Campaign, Lead, SyncRun

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TTL_SECONDS = 540


class CampaignRepository:
    """Campaign documents keyed by Instantly campaign ID."""

    def __init__(self, db):
        self.db = db
        self.collection = db.collection(CAMPAIGNS_COLLECTION)

    def get(self, campaign_id: str) -> Optional[Campaign]:
        doc = self.collection.document(campaign_id).get()
        if not doc.exists:
            return None
        return Campaign.from_firestore(doc)

    def list(
        self, status: Optional[str] = None, limit: int = 50, page: int = 1
    ) -> List[Campaign]:
        """List campaigns newest-synced first, optionally filtered by status label."""
        query = self.collection
        if status:
            query = query.where(filter=FieldFilter("status", "==", status))
        query = query.order_by("last_synced_at", direction=firestore.Query.DESCENDING)
        if page > 1:
            query = query.offset((page - 1) * limit)

        return [Campaign.from_firestore(doc) for doc in query.limit(limit).stream()]

    def upsert(self, campaign: Campaign) -> Campaign:
        self.collection.document(campaign.id).set(campaign.to_firestore())
        logger.info("Campaign saved: %s (%s)", campaign.name, campaign.id)
        return campaign

    def stats(self) -> dict:
        """Total campaign count and count per status label."""
        stats = {"total": 0, "byStatus": {}}
        for doc in self.collection.stream():
            status = (doc.to_dict() or {}).get("status") or "unknown"
            stats["total"] += 1
            stats["byStatus"][status] = stats["byStatus"].get(status, 0) + 1
        return stats


class LeadRepository:
    """Lead documents keyed by lead ID (or email)."""

    def __init__(self, db):
        self.db = db
        self.collection = db.collection(LEADS_COLLECTION)

    def get(self, lead_id: str) -> Optional[Lead]:
        doc = self.collection.document(lead_id).get()
        if not doc.exists:
            return None
        return Lead.from_firestore(doc)

    def stats(self, campaign_id: Optional[str] = None) -> dict:
        """Lead totals, by status and by interest status."""
        query = self.collection
        if campaign_id:
            query = query.where(filter=FieldFilter("campaign_id", "==", campaign_id))

        stats = {"total": 0, "byStatus": {}, "byInterestStatus": {}}
        for doc in query.stream():
            lead = doc.to_dict() or {}
            stats["total"] += 1
            status = lead.get("status") or "unknown"
            stats["byStatus"][status] = stats["byStatus"].get(status, 0) + 1
            interest = lead.get("interest_status") or "unknown"
            stats["byInterestStatus"][interest] = (
                stats["byInterestStatus"].get(interest, 0) + 1
            )
        return stats


class SyncRunRepository:
    """Outcome records of past sync runs."""

    def __init__(self, db):
        self.db = db
        self.collection = db.collection(SYNC_RUNS_COLLECTION)

    def save(self, run: SyncRun) -> None:
        self.collection.document(run.run_id).set(run.to_dict())

    def latest(self) -> Optional[dict]:
        query = self.collection.order_by(
            "started_at", direction=firestore.Query.DESCENDING
        ).limit(1)
        for doc in query.stream():
            return doc.to_dict()
        return None


class SyncLock:
    """
    Run lock keeping two sync runs from writing at the same time.

    The lock document is created atomically; a lock older than ttl_seconds is
    considered abandoned (the holder hit the function timeout) and is taken over.
    Takeover and release are conditioned on the snapshot's update_time, so of two
    runs racing for the same expired lock only one wins.
    """

    def __init__(self, db, name: str = "full_sync", ttl_seconds: int = DEFAULT_LOCK_TTL_SECONDS):
        self.db = db
        self.ref = db.collection(SYNC_LOCKS_COLLECTION).document(name)
        self.ttl_seconds = ttl_seconds
        self.owner = None

    def acquire(self, owner: str) -> None:
        """
        Raises:
            SyncInProgressException: If a live lock is held by another run, or
                another run took over the expired lock first
        """
        now = datetime.now(timezone.utc)
        body = {
            "owner": owner,
            "acquired_at": now,
            "expires_at": now + timedelta(seconds=self.ttl_seconds),
        }
        try:
            self.ref.create(body)
        except AlreadyExists:
            self._take_over_expired(body, now)

        self.owner = owner
        logger.info("Sync lock acquired by %s", owner)

    def _take_over_expired(self, body: dict, now: datetime) -> None:
        snapshot = self.ref.get()
        if not snapshot.exists:
            # Released between create() and get().
            try:
                self.ref.create(body)
            except AlreadyExists:
                raise SyncInProgressException("A sync run is already in progress")
            return

        current = snapshot.to_dict() or {}
        expires_at = current.get("expires_at")
        if expires_at and expires_at > now:
            raise SyncInProgressException(
                "A sync run is already in progress",
                details={"owner": current.get("owner")},
            )

        logger.warning("Taking over expired sync lock held by %s", current.get("owner"))
        option = self.db.write_option(last_update_time=snapshot.update_time)
        try:
            self.ref.update(body, option=option)
        except (FailedPrecondition, NotFound):
            raise SyncInProgressException(
                "Another sync run took over the expired lock first",
                details={"owner": current.get("owner")},
            )

    def release(self) -> None:
        """Delete the lock if this run still holds it."""
        if self.owner is None:
            return

        owner, self.owner = self.owner, None
        snapshot = self.ref.get()
        current = snapshot.to_dict() if snapshot.exists else None
        if not current or current.get("owner") != owner:
            logger.warning(
                "Sync lock no longer held by %s (now %s); leaving it in place",
                owner,
                (current or {}).get("owner"),
            )
            return

        option = self.db.write_option(last_update_time=snapshot.update_time)
        try:
            self.ref.delete(option=option)
        except (FailedPrecondition, NotFound):
            logger.warning("Sync lock changed while %s was releasing it", owner)
            return
        logger.info("Sync lock released by %s", owner)
