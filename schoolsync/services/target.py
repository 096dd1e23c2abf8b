"""Existence check and record creation against the target service."""

import logging
from typing import Optional

from ..errors import CreationError
from ..loaders.base import BaseLoader
from ..models.hygraph import AppUser
from ..models.record import AppUserPayload

logger = logging.getLogger(__name__)


class ExistenceChecker:
    """Looks up records that already exist on the target."""

    def __init__(self, loader: BaseLoader):
        self.loader = loader

    def find_by_key(self, uid: str) -> Optional[AppUser]:
        """Return the existing target record for ``uid``, or None."""
        existing = self.loader.find_by_uid(uid)
        if existing is not None:
            logger.debug(f"{uid} already exists on {self.loader.target_service} as {existing.id}")
        return existing


class RecordCreator:
    """Creates one target record per payload."""

    def __init__(self, loader: BaseLoader):
        self.loader = loader

    def create(self, payload: AppUserPayload) -> AppUser:
        """
        Create a record from a mapped payload.

        Raises:
            CreationError: with a human-readable message only
        """
        try:
            return self.loader.create_app_user(payload.to_input())
        except Exception as e:
            message = str(e) or type(e).__name__
            raise CreationError(f"Hygraph createAppUser failed: {message}") from e
