"""
School user migration

A one-time, resumable bulk migration of user records from Firestore into
the Hygraph content API.

Supports:
- Firestore collections or JSON exports as the source
- Enum normalization with custom-value fallbacks
- A crash-safe JSON checkpoint for idempotent re-runs
- A bounded worker pool with a fixed per-record throttle
- Dry runs
"""

__version__ = "0.1.0"
