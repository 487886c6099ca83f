"""
Common modules package initialization.
Ensures proper import paths without sys.path manipulation.
"""

import sys
import os

# Add parent directory to path if running in Lambda
if os.getenv("AWS_LAMBDA_FUNCTION_NAME"):
    sys.path.insert(0, "/var/task")

__all__ = [
    "base_handler",
    "batch_writer",
    "config",
    "constants",
    "decoders",
    "exceptions",
    "firestore_client",
    "instantly_client",
    "models",
    "pagination",
    "response_shapes",
    "storage",
    "sync_handler",
    "sync_service",
]
