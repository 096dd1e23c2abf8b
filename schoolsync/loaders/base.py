"""Base loader interface for the target service."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import logging

from ..models.hygraph import AppUser

logger = logging.getLogger(__name__)


class BaseLoader(ABC):
    """
    Base class for target-service clients.

    The migration consumes exactly two remote operations: a lookup by
    unique key and a create.
    """

    def __init__(self, target_service: str):
        """
        Initialize the loader.

        Args:
            target_service: Name of the target service
        """
        self.target_service = target_service

    @abstractmethod
    def find_by_uid(self, uid: str) -> Optional[AppUser]:
        """
        Look up an existing user by uid.

        Args:
            uid: Unique key of the user

        Returns:
            The existing user, or None
        """
        pass

    @abstractmethod
    def create_app_user(self, data: Dict[str, Any]) -> AppUser:
        """
        Create a user from an ``AppUserCreateInput`` dictionary.

        Args:
            data: Create input with unset fields already removed

        Returns:
            The created user
        """
        pass

    def validate_connection(self) -> bool:
        """Validate the connection to the target service."""
        return True
