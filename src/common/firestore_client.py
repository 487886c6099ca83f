"""
Google Cloud Firestore client factory.
Uses service account credentials when GOOGLE_APPLICATION_CREDENTIALS is set,
otherwise falls back to application default credentials.
"""

import os
import logging
from typing import Optional

from google.cloud import firestore
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

FIRESTORE_SCOPES = ["https://www.googleapis.com/auth/datastore"]


def get_firestore_credentials(service_account_key_path: Optional[str] = None):
    """
    Load service account credentials for Firestore access.

    Args:
        service_account_key_path: Path to service account JSON key file.
            If not provided, uses GOOGLE_APPLICATION_CREDENTIALS env var.

    Returns:
        Service account credentials, or None to use application defaults
    """
    key_path = service_account_key_path or os.environ.get(
        "GOOGLE_APPLICATION_CREDENTIALS"
    )
    if not key_path:
        return None

    logger.info(f"Loading Firestore credentials from: {key_path}")
    return service_account.Credentials.from_service_account_file(
        key_path, scopes=FIRESTORE_SCOPES
    )


def get_firestore_client(
    project_id: Optional[str] = None, service_account_key_path: Optional[str] = None
) -> firestore.Client:
    """
    Return a Firestore client for the configured project.

    Args:
        project_id: GCP project; defaults to FIRESTORE_PROJECT_ID, then to the
            project embedded in the credentials
        service_account_key_path: Optional path to service account JSON key file
    """
    credentials = get_firestore_credentials(service_account_key_path)
    project = project_id or os.environ.get("FIRESTORE_PROJECT_ID")

    if credentials is not None:
        project = project or credentials.project_id
        client = firestore.Client(project=project, credentials=credentials)
    else:
        client = firestore.Client(project=project)

    logger.info("Firestore client created for project %s", client.project)
    return client
