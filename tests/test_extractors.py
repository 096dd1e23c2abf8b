import json
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from schoolsync.errors import ConfigurationError
from schoolsync.extractors.firestore_extractor import FirestoreExtractor
from schoolsync.extractors.json_extractor import JSONExtractor


def _write(tmp_path, content):
    path = tmp_path / "export.json"
    path.write_text(json.dumps(content))
    return path


def test_json_list_layout(tmp_path):
    path = _write(tmp_path, [{"id": "a", "email": "a@x.test"}, {"uid": "b"}, "junk"])

    result = JSONExtractor(path).extract()

    assert [r.id for r in result.records] == ["a", None]
    assert result.records[1].unique_key == "b"
    assert result.records[0].source_service == "json"
    assert len(result.warnings) == 1


def test_json_document_map_layout(tmp_path):
    path = _write(tmp_path, {"doc1": {"email": "a@x.test"}, "doc2": {"uid": "u2"}})

    records = JSONExtractor(path).extract().records

    assert [r.unique_key for r in records] == ["doc1", "u2"]


def test_json_collection_is_unwrapped(tmp_path):
    path = _write(tmp_path, {"teachers": [{"uid": "t1"}], "students": [{"uid": "s1"}, {"uid": "s2"}]})

    result = JSONExtractor(path, collection="students").extract()

    assert result.collection == "students"
    assert [r.unique_key for r in result.records] == ["s1", "s2"]


def test_json_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="Cannot read source export"):
        JSONExtractor(tmp_path / "missing.json").extract()


def test_json_unsupported_layout(tmp_path):
    with pytest.raises(ConfigurationError, match="Unsupported export layout"):
        JSONExtractor(_write(tmp_path, "just a string")).extract()


def _document(doc_id, data):
    doc = MagicMock()
    doc.id = doc_id
    doc.to_dict.return_value = data
    return doc


def test_firestore_streams_collection():
    client = MagicMock()
    client.collection.return_value.stream.return_value = [
        _document("d1", {"uid": "u1", "createdAt": datetime(2024, 1, 2, 3, 4, 5)}),
        _document("d2", None),
    ]

    result = FirestoreExtractor("students", client=client).extract()

    client.collection.assert_called_once_with("students")
    assert [r.id for r in result.records] == ["d1", "d2"]
    assert result.records[0].data["createdAt"] == "2024-01-02T03:04:05"
    assert result.records[1].data == {}
    assert result.records[1].unique_key == "d2"


def test_firestore_read_failure_is_configuration_error():
    client = MagicMock()
    client.collection.return_value.stream.side_effect = RuntimeError("permission denied")

    with pytest.raises(ConfigurationError, match="permission denied"):
        FirestoreExtractor("students", client=client).extract()


def test_firestore_requires_collection():
    with pytest.raises(ConfigurationError, match="collection name is required"):
        FirestoreExtractor("", client=MagicMock()).extract()


def test_extraction_result_to_dict(tmp_path):
    path = _write(tmp_path, [{"uid": "a"}, 7])

    summary = JSONExtractor(path).extract().to_dict()

    assert summary["collection"] == "students"
    assert summary["total_extracted"] == 1
    assert summary["warnings"] == ["Skipping non-object entry at position 1"]
    assert summary["started_at"].endswith("+00:00")
    assert summary["duration_seconds"] >= 0
