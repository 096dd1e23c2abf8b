from unittest.mock import MagicMock

import pytest
import requests

from schoolsync.errors import HygraphError
from schoolsync.loaders.hygraph_loader import (
    CREATE_APP_USER_MUTATION,
    GET_APP_USER_BY_UID,
    HygraphLoader,
)

ENDPOINT = "https://api.example.test/v2/project/master"


def _response(body, status=200):
    response = MagicMock()
    response.status_code = status
    response.json.return_value = body
    if status >= 400:
        error = requests.exceptions.HTTPError(f"{status} Error", response=response)
        response.raise_for_status.side_effect = error
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def session():
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def loader(session):
    return HygraphLoader(ENDPOINT, "secret-token", timeout=5, session=session)


def test_auth_headers(loader, session):
    assert session.headers["Authorization"] == "Bearer secret-token"
    assert session.headers["Content-Type"] == "application/json"


def test_default_session_mounts_retry_adapter():
    loader = HygraphLoader(ENDPOINT, "secret-token", max_retries=4)
    adapter = loader._session.get_adapter(ENDPOINT)
    assert adapter.max_retries.total == 4
    assert 503 in adapter.max_retries.status_forcelist


def test_find_by_uid(loader, session):
    session.post.return_value = _response({
        "data": {"appUsers": [{"id": "c1", "uid": "u1", "email": "a@x.test", "displayName": "Ana"}]}
    })

    user = loader.find_by_uid("u1")

    assert user.id == "c1"
    assert user.display_name == "Ana"
    session.post.assert_called_once_with(
        ENDPOINT,
        json={"query": GET_APP_USER_BY_UID, "variables": {"uid": "u1"}},
        timeout=5,
    )


def test_find_by_uid_not_found(loader, session):
    session.post.return_value = _response({"data": {"appUsers": []}})
    assert loader.find_by_uid("missing") is None


def test_create_app_user(loader, session):
    session.post.return_value = _response({
        "data": {"createAppUser": {"id": "c2", "uid": "u2", "email": "b@x.test", "role": "teacher", "isActive": True}}
    })

    user = loader.create_app_user({"uid": "u2", "email": "b@x.test"})

    assert user.uid == "u2"
    assert user.is_active is True
    sent = session.post.call_args.kwargs["json"]
    assert sent["query"] == CREATE_APP_USER_MUTATION
    assert sent["variables"] == {"data": {"uid": "u2", "email": "b@x.test"}}


def test_create_returning_nothing(loader, session):
    session.post.return_value = _response({"data": {"createAppUser": None}})
    with pytest.raises(HygraphError, match="returned no record"):
        loader.create_app_user({"uid": "u3"})


def test_graphql_errors(loader, session):
    session.post.return_value = _response({
        "data": None,
        "errors": [{"message": "value is not unique for the field \"uid\""}, {"message": "second"}],
    })
    with pytest.raises(HygraphError, match="value is not unique"):
        loader.create_app_user({"uid": "u4"})


def test_http_error_with_graphql_body(loader, session):
    session.post.return_value = _response({"errors": [{"message": "Unauthorized"}]}, status=401)
    with pytest.raises(HygraphError, match="HTTP 401: Unauthorized"):
        loader.find_by_uid("u1")


def test_http_error_without_json(loader, session):
    response = _response(None, status=502)
    response.json.side_effect = ValueError("no json")
    session.post.return_value = response

    with pytest.raises(HygraphError) as exc_info:
        loader.find_by_uid("u1")
    assert str(exc_info.value) == "HTTP 502"


def test_transport_error(loader, session):
    session.post.side_effect = requests.exceptions.ConnectionError("connection refused")
    with pytest.raises(HygraphError, match="Request failed: connection refused"):
        loader.find_by_uid("u1")


def test_invalid_json(loader, session):
    session.post.return_value = _response(["not", "an", "object"])
    with pytest.raises(HygraphError, match="Invalid JSON"):
        loader.find_by_uid("u1")


def test_missing_data(loader, session):
    session.post.return_value = _response({})
    with pytest.raises(HygraphError, match="No data returned"):
        loader.find_by_uid("u1")


def test_validate_connection(loader, session):
    session.post.return_value = _response({"data": {"__typename": "Query"}})
    assert loader.validate_connection() is True

    session.post.side_effect = requests.exceptions.Timeout("timed out")
    assert loader.validate_connection() is False
