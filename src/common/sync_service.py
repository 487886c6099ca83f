"""
Sync orchestration service mirroring Instantly campaigns and leads into Firestore.

One run walks START -> FETCHING -> DECODING -> WRITING -> DONE. Any fetch or
write failure moves the run to FAILED with the error kept for reporting.
Records that fail to decode are logged and skipped without failing the run.
"""

import logging
from typing import Callable, List, Optional, Tuple

from common.batch_writer import BatchWriter
from common.config import InstantlyConfig
from common.constants import CAMPAIGNS_COLLECTION, LEADS_COLLECTION
from common.decoders import decode_campaign, decode_lead
from common.exceptions import StorageException, SyncException
from common.models import Campaign, Lead, SyncRun, SyncState, SyncTrigger
from common.pagination import fetch_all
from common.storage import CampaignRepository, SyncLock, SyncRunRepository

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """
    Orchestrates synchronization from the Instantly API into Firestore.

    Args:
        client: InstantlyClient (or compatible) used for all API calls
        db: Firestore client
        config: Immutable sync configuration
        writer: Optional BatchWriter; built from config.batch_size by default
        lock: Optional run lock; None disables mutual exclusion
    """

    def __init__(
        self,
        client,
        db,
        config: InstantlyConfig,
        writer: Optional[BatchWriter] = None,
        lock: Optional[SyncLock] = None,
    ):
        self.client = client
        self.db = db
        self.config = config
        self.writer = writer or BatchWriter(db, batch_size=config.batch_size)
        self.lock = lock
        self.campaigns = CampaignRepository(db)
        self.runs = SyncRunRepository(db)
        self.logger = logger

    # ------------------------------------------------------------------
    # Full sync
    # ------------------------------------------------------------------

    def run_full_sync(
        self, trigger: SyncTrigger = SyncTrigger.HTTP, include_leads: bool = True
    ) -> SyncRun:
        """
        Sync every campaign and, optionally, every lead.

        The finished run is persisted to sync_runs whether it succeeded or not.

        Raises:
            SyncInProgressException: If another run holds the lock
            SyncException: The error that moved the run to FAILED
        """
        run = SyncRun(trigger=trigger)
        if self.lock is not None:
            self.lock.acquire(run.run_id)

        self.logger.info("Starting full sync %s (trigger=%s)", run.run_id, run.trigger)
        try:
            self.sync_all_campaigns(run)
            if include_leads:
                self.sync_all_leads(run)
            run.finish()
            self.logger.info(
                "Full sync %s completed: %d campaigns, %d leads written",
                run.run_id,
                run.campaigns_written,
                run.leads_written,
            )
        except Exception as e:
            run.fail(e)
            self.logger.error("Full sync %s failed: %s", run.run_id, e, exc_info=True)
            raise
        finally:
            self._save_run(run)
            if self.lock is not None:
                self.lock.release()

        return run

    def sync_all_campaigns(self, run: SyncRun) -> SyncRun:
        """Fetch, decode and write every campaign."""
        raw = self._fetch(run, self.client.list_campaigns_page)
        run.campaigns_fetched = len(raw)

        documents = self._decode(run, raw, decode_campaign, Campaign.from_api)
        run.campaigns_written += self._write(run, CAMPAIGNS_COLLECTION, documents)
        return run

    def sync_all_leads(self, run: SyncRun, campaign_id: Optional[str] = None) -> SyncRun:
        """Fetch, decode and write every lead, optionally for one campaign."""

        def fetch_page(cursor):
            return self.client.list_leads_page(
                starting_after=cursor, campaign_id=campaign_id
            )

        raw = self._fetch(run, fetch_page)
        run.leads_fetched = len(raw)

        documents = self._decode(run, raw, decode_lead, Lead.from_api)
        run.leads_written += self._write(run, LEADS_COLLECTION, documents)
        return run

    # ------------------------------------------------------------------
    # Single campaign
    # ------------------------------------------------------------------

    def sync_campaign_by_id(self, campaign_id: str) -> Campaign:
        """
        Fetch one campaign with its metrics and upsert it.

        A metrics failure only logs a warning; the campaign is saved with
        whatever metrics its details carried.
        """
        self.logger.info("Syncing campaign %s", campaign_id)
        details = self.client.get_campaign(campaign_id)

        data = dict(details)
        try:
            response = self.client.get_campaign_metrics(campaign_id)
            metrics = response.get("metrics", response) if isinstance(response, dict) else None
            if isinstance(metrics, dict) and metrics:
                data["metrics"] = metrics
        except SyncException as e:
            self.logger.warning(
                "Could not fetch metrics for campaign %s: %s", campaign_id, e
            )

        campaign = Campaign.from_api(decode_campaign(data))
        if not campaign.id:
            campaign.id = campaign_id
        self.campaigns.upsert(campaign)
        return campaign

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _fetch(self, run: SyncRun, fetch_page: Callable) -> list:
        run.transition(SyncState.FETCHING)
        return fetch_all(fetch_page)

    def _decode(
        self,
        run: SyncRun,
        raw_records: list,
        decoder: Callable[[dict], dict],
        build: Callable[[dict], object],
    ) -> List[Tuple[str, dict]]:
        run.transition(SyncState.DECODING)
        documents = []
        for raw in raw_records:
            try:
                model = build(decoder(raw))
                if not model.id:
                    raise ValueError("record has no id")
                documents.append((model.id, model.to_firestore()))
            except Exception as e:
                run.records_skipped += 1
                record_id = raw.get("id") if isinstance(raw, dict) else None
                self.logger.warning("Skipping record %s: %s", record_id, e)
        return documents

    def _write(self, run: SyncRun, collection: str, documents: list) -> int:
        run.transition(SyncState.WRITING)
        try:
            sizes = self.writer.write(collection, documents)
        except StorageException as e:
            run.batches_committed += e.committed_batches
            raise
        run.batches_committed += len(sizes)
        return sum(sizes)

    def _save_run(self, run: SyncRun) -> None:
        try:
            self.runs.save(run)
        except Exception as e:
            self.logger.error(
                "Could not persist sync run %s: %s", run.run_id, e, exc_info=True
            )
