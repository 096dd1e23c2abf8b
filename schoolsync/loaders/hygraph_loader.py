"""Hygraph GraphQL loader for AppUser records."""

import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .base import BaseLoader
from ..errors import HygraphError
from ..models.hygraph import AppUser, GraphQLResponse

logger = logging.getLogger(__name__)


# Keep the model name in one place so it is easy to switch
CREATE_APP_USER_MUTATION = """
mutation CreateAppUser($data: AppUserCreateInput!) {
  createAppUser(data: $data) {
    id
    uid
    email
    displayName
    role
    isActive
  }
}
"""

GET_APP_USER_BY_UID = """
query GetAppUserByUid($uid: String!) {
  appUsers(where: { uid: $uid }) {
    id
    uid
    email
    displayName
  }
}
"""

PING_QUERY = "query Ping { __typename }"


def _parse_body(payload: Any) -> GraphQLResponse:
    if not isinstance(payload, dict):
        raise ValueError("GraphQL response is not an object")
    return GraphQLResponse(**payload)


class HygraphLoader(BaseLoader):
    """
    Loader for the Hygraph content API.

    Requests are POSTed as GraphQL over a pooled ``requests`` session with
    bearer-token auth. urllib3 does not retry POST on read errors or error
    statuses, so only connection setup is retried and a mutation is never
    sent twice.
    """

    def __init__(
        self,
        endpoint: str,
        token: str,
        timeout: float = 30.0,
        max_retries: int = 2,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the Hygraph loader.

        Args:
            endpoint: Hygraph content API endpoint
            token: Permanent auth token with create permissions
            timeout: Per-request timeout in seconds
            max_retries: Connection retries per request
            session: Custom requests session
        """
        super().__init__("hygraph")
        self.endpoint = endpoint
        self.timeout = timeout
        self.max_retries = max_retries
        self._session = session or self._create_session()
        self._session.headers["Authorization"] = f"Bearer {token}"
        self._session.headers["Content-Type"] = "application/json"

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry logic."""
        session = requests.Session()

        retries = Retry(
            total=self.max_retries,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
        )

        adapter = HTTPAdapter(max_retries=retries)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

        return session

    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a GraphQL document.

        Returns:
            The ``data`` object of the response

        Raises:
            HygraphError: on transport failure, non-2xx status or GraphQL errors
        """
        try:
            response = self._session.post(
                self.endpoint,
                json={"query": query, "variables": variables or {}},
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = _parse_body(response.json())

        except requests.exceptions.HTTPError as e:
            error_msg = f"HTTP {e.response.status_code}"
            try:
                error_data = _parse_body(e.response.json())
                if error_data.errors:
                    error_msg = f"{error_msg}: {error_data.errors[0].message}"
            except ValueError:
                pass
            raise HygraphError(error_msg) from e

        except requests.exceptions.RequestException as e:
            raise HygraphError(f"Request failed: {e}") from e

        except ValueError as e:
            raise HygraphError("Invalid JSON response from Hygraph") from e

        if body.errors:
            logger.debug(f"GraphQL errors: {[err.message for err in body.errors]}")
            raise HygraphError(body.errors[0].message)

        if body.data is None:
            raise HygraphError("No data returned from GraphQL query")

        return body.data

    def find_by_uid(self, uid: str) -> Optional[AppUser]:
        """Find an AppUser by uid."""
        data = self.execute(GET_APP_USER_BY_UID, {"uid": uid})
        users = data.get("appUsers") or []
        if not users:
            return None
        return AppUser(**users[0])

    def create_app_user(self, data: Dict[str, Any]) -> AppUser:
        """Create an AppUser."""
        result = self.execute(CREATE_APP_USER_MUTATION, {"data": data})
        created = result.get("createAppUser")
        if not created:
            raise HygraphError("createAppUser returned no record")
        return AppUser(**created)

    def validate_connection(self) -> bool:
        """Validate connection to Hygraph."""
        try:
            self.execute(PING_QUERY)
            return True
        except HygraphError as e:
            logger.error(f"Hygraph connection validation failed: {e}")
            return False
