"""
Tests for SyncOrchestrator service.
"""

import pytest
from unittest.mock import MagicMock, patch

from common.exceptions import (
    InstantlyAPIException,
    NotFoundException,
    StorageException,
    SyncException,
    SyncInProgressException,
)
from common.models import SyncRun, SyncTrigger
from common.pagination import fetch_all
from common.sync_service import SyncOrchestrator


@pytest.fixture
def mock_client():
    """Mock Instantly client serving one campaign page and one lead page"""
    client = MagicMock()
    client.list_campaigns_page.return_value = (
        [
            {"id": "c1", "name": "Launch", "status": 1},
            {"id": "c2", "name": "Follow-up", "status": -2},
        ],
        None,
    )
    client.list_leads_page.return_value = (
        [
            {"email": "ana@example.com", "campaign": "c1", "status": 1, "lt_interest_status": 1},
            {"id": "l2", "email": "bo@example.com", "status": 999, "esp_code": 1},
        ],
        None,
    )
    return client


@pytest.fixture
def mock_writer():
    """Mock batch writer reporting one batch per call"""
    writer = MagicMock()
    writer.write.side_effect = lambda collection, docs: [len(docs)] if docs else []
    return writer


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def orchestrator(mock_client, mock_db, config, mock_writer):
    return SyncOrchestrator(mock_client, mock_db, config, writer=mock_writer)


def written(mock_writer, collection):
    for c in mock_writer.write.call_args_list:
        if c.args[0] == collection:
            return dict(c.args[1])
    return {}


def test_run_full_sync_success(orchestrator, mock_writer, mock_db):
    run = orchestrator.run_full_sync()

    assert run.state == "DONE"
    assert run.error is None
    assert run.campaigns_fetched == 2
    assert run.campaigns_written == 2
    assert run.leads_fetched == 2
    assert run.leads_written == 2
    assert run.batches_committed == 2

    campaigns = written(mock_writer, "campaigns")
    assert campaigns["c1"]["status"] == "Active"
    assert campaigns["c2"]["status"] == "Bounce Protect"
    assert "id" not in campaigns["c1"]

    leads = written(mock_writer, "leads")
    assert leads["ana@example.com"]["interest_status"] == "Interested"
    assert leads["ana@example.com"]["campaign_id"] == "c1"
    assert leads["l2"]["status"] == ""
    assert leads["l2"]["esp_provider"] == "Google"

    # Run outcome persisted to sync_runs
    mock_db.collection.assert_any_call("sync_runs")


def test_run_full_sync_without_leads(orchestrator, mock_client):
    run = orchestrator.run_full_sync(trigger=SyncTrigger.SCHEDULE, include_leads=False)

    assert run.state == "DONE"
    assert run.trigger == "schedule"
    mock_client.list_leads_page.assert_not_called()


def test_pagination_follows_cursor(orchestrator, mock_client):
    mock_client.list_campaigns_page.side_effect = [
        ([{"id": "c1", "status": 1}], "c1"),
        ([{"id": "c2", "status": 2}], None),
    ]

    run = SyncRun()
    orchestrator.sync_all_campaigns(run)

    assert run.campaigns_fetched == 2
    assert [c.args for c in mock_client.list_campaigns_page.call_args_list] == [
        (None,),
        ("c1",),
    ]


def test_bad_records_are_skipped(orchestrator, mock_client, mock_writer):
    mock_client.list_leads_page.return_value = (
        [{"email": "ok@example.com"}, {"first_name": "no id"}, "not-a-dict"],
        None,
    )

    run = SyncRun()
    orchestrator.sync_all_leads(run)

    assert run.leads_fetched == 3
    assert run.leads_written == 1
    assert run.records_skipped == 2
    assert list(written(mock_writer, "leads")) == ["ok@example.com"]


def test_fetch_failure_fails_run_and_writes_nothing(orchestrator, mock_client, mock_writer):
    mock_client.list_campaigns_page.side_effect = InstantlyAPIException(
        "Instantly API error 500", status_code=500
    )

    with pytest.raises(InstantlyAPIException):
        orchestrator.run_full_sync()

    mock_writer.write.assert_not_called()
    saved = orchestrator.runs.collection.document.return_value.set.call_args.args[0]
    assert saved["state"] == "FAILED"
    assert "500" in saved["error"]


def test_write_failure_fails_run(orchestrator, mock_writer):
    mock_writer.write.side_effect = StorageException("commit failed", committed_batches=1)

    with pytest.raises(StorageException):
        orchestrator.run_full_sync()

    saved = orchestrator.runs.collection.document.return_value.set.call_args.args[0]
    assert saved["state"] == "FAILED"
    assert saved["batches_committed"] == 1


def test_lock_is_acquired_and_released(mock_client, mock_db, config, mock_writer):
    lock = MagicMock()
    orchestrator = SyncOrchestrator(mock_client, mock_db, config, writer=mock_writer, lock=lock)

    run = orchestrator.run_full_sync()

    lock.acquire.assert_called_once_with(run.run_id)
    lock.release.assert_called_once()


def test_lock_released_after_failure(mock_client, mock_db, config, mock_writer):
    lock = MagicMock()
    mock_client.list_campaigns_page.side_effect = RuntimeError("boom")
    orchestrator = SyncOrchestrator(mock_client, mock_db, config, writer=mock_writer, lock=lock)

    with pytest.raises(RuntimeError):
        orchestrator.run_full_sync()

    lock.release.assert_called_once()


def test_concurrent_run_is_rejected(mock_client, mock_db, config, mock_writer):
    lock = MagicMock()
    lock.acquire.side_effect = SyncInProgressException("A sync run is already in progress")
    orchestrator = SyncOrchestrator(mock_client, mock_db, config, writer=mock_writer, lock=lock)

    with pytest.raises(SyncInProgressException):
        orchestrator.run_full_sync()

    mock_client.list_campaigns_page.assert_not_called()
    lock.release.assert_not_called()


def test_sync_campaign_by_id(orchestrator, mock_client):
    mock_client.get_campaign.return_value = {"id": "c1", "name": "Launch", "status": 3}
    mock_client.get_campaign_metrics.return_value = {"metrics": {"sent": 40, "opened": 12}}

    campaign = orchestrator.sync_campaign_by_id("c1")

    assert campaign.status == "Completed"
    assert campaign.metrics.sent == 40
    body = orchestrator.campaigns.collection.document.return_value.set.call_args.args[0]
    assert body["metrics"]["opened"] == 12


def test_sync_campaign_by_id_metrics_failure_is_tolerated(orchestrator, mock_client):
    mock_client.get_campaign.return_value = {"id": "c1", "status": 1, "metrics": {"sent": 3}}
    mock_client.get_campaign_metrics.side_effect = InstantlyAPIException("boom", status_code=500)

    campaign = orchestrator.sync_campaign_by_id("c1")

    assert campaign.status == "Active"
    assert campaign.metrics.sent == 3


def test_sync_campaign_by_id_not_found(orchestrator, mock_client):
    mock_client.get_campaign.side_effect = NotFoundException("Resource not found")

    with pytest.raises(NotFoundException):
        orchestrator.sync_campaign_by_id("missing")


def test_endless_cursor_fails_run_instead_of_writing_partial_data(orchestrator, mock_client, mock_writer):
    mock_client.list_campaigns_page.return_value = ([{"id": "c1", "status": 1}], "again")

    with patch(
        "common.sync_service.fetch_all",
        side_effect=lambda fetch_page: fetch_all(fetch_page, max_pages=3),
    ):
        with pytest.raises(SyncException, match="exceeded 3 pages"):
            orchestrator.run_full_sync()

    assert mock_client.list_campaigns_page.call_count == 3
    mock_writer.write.assert_not_called()
    saved = orchestrator.runs.collection.document.return_value.set.call_args.args[0]
    assert saved["state"] == "FAILED"
