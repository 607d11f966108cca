"""Tests for the record store, file store, identity and quote adapters."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from studydesk.adapters.identity import AuthenticationError, ConfigIdentityProvider
from studydesk.adapters.json_store import JsonRecordStore
from studydesk.adapters.local_files import LocalFileStore
from studydesk.adapters.quotable_api import QuotableAdapter
from studydesk.config import Config
from studydesk.core.errors import CollaboratorError
from studydesk.core.records import Quote


class TestJsonRecordStore:
    def test_create_and_list(self, tmp_path):
        store = JsonRecordStore(tmp_path)
        record_id = store.create("tasks", {"title": "Essay", "userId": "u1"})
        assert store.list("tasks", "u1") == [{"id": record_id, "title": "Essay", "userId": "u1"}]

    def test_list_scoped_by_owner(self, tmp_path):
        store = JsonRecordStore(tmp_path)
        store.create("tasks", {"title": "Mine", "userId": "u1"})
        store.create("tasks", {"title": "Theirs", "userId": "u2"})
        assert [r["title"] for r in store.list("tasks", "u1")] == ["Mine"]

    def test_missing_collection_is_empty(self, tmp_path):
        assert JsonRecordStore(tmp_path).list("notes", "u1") == []

    def test_update_merges_fields(self, tmp_path):
        store = JsonRecordStore(tmp_path)
        record_id = store.create("attendance", {"name": "Math", "attended": 0, "total": 0, "userId": "u1"})
        store.update("attendance", record_id, {"attended": 1, "total": 1})
        record = store.list("attendance", "u1")[0]
        assert (record["name"], record["attended"], record["total"]) == ("Math", 1, 1)

    def test_delete(self, tmp_path):
        store = JsonRecordStore(tmp_path)
        record_id = store.create("notes", {"title": "T", "userId": "u1"})
        store.delete("notes", record_id)
        assert store.list("notes", "u1") == []

    def test_unknown_id_raises(self, tmp_path):
        store = JsonRecordStore(tmp_path)
        with pytest.raises(CollaboratorError):
            store.update("notes", "nope", {"title": "T"})
        with pytest.raises(CollaboratorError):
            store.delete("notes", "nope")

    def test_persisted_as_json_file(self, tmp_path):
        store = JsonRecordStore(tmp_path)
        record_id = store.create("expenses", {"amount": "12.50", "userId": "u1"})
        data = json.loads((tmp_path / "expenses.json").read_text())
        assert data == {record_id: {"amount": "12.50", "userId": "u1"}}
        assert not (tmp_path / "expenses.json.tmp").exists()

    def test_corrupt_file_raises(self, tmp_path):
        (tmp_path / "tasks.json").write_text("{not json")
        with pytest.raises(CollaboratorError):
            JsonRecordStore(tmp_path).list("tasks", "u1")


class TestLocalFileStore:
    def test_upload_returns_file_url(self, tmp_path):
        files = LocalFileStore(tmp_path)
        url = files.upload("notes/u1/1_a.pdf", b"%PDF")
        assert url.startswith("file://")
        assert (tmp_path / "notes" / "u1" / "1_a.pdf").read_bytes() == b"%PDF"

    def test_delete(self, tmp_path):
        files = LocalFileStore(tmp_path)
        files.upload("notes/u1/1_a.pdf", b"x")
        files.delete("notes/u1/1_a.pdf")
        assert not (tmp_path / "notes" / "u1" / "1_a.pdf").exists()

    def test_delete_missing_is_a_no_op(self, tmp_path, caplog):
        LocalFileStore(tmp_path).delete("notes/u1/missing.pdf")
        assert "already missing" in caplog.text

    def test_path_escaping_root_rejected(self, tmp_path):
        files = LocalFileStore(tmp_path / "root")
        with pytest.raises(CollaboratorError):
            files.upload("../outside.txt", b"x")
        assert not (tmp_path / "outside.txt").exists()


class TestConfigIdentityProvider:
    def test_returns_owner(self):
        assert ConfigIdentityProvider(Config(owner_id="u1")).current_owner() == "u1"

    def test_no_owner_raises(self):
        with pytest.raises(AuthenticationError):
            ConfigIdentityProvider(Config()).current_owner()

    def test_authentication_error_is_collaborator_error(self):
        assert issubclass(AuthenticationError, CollaboratorError)


def _response(status_code, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.text = text
    return resp


class TestQuotableAdapter:
    def test_fetch_random(self):
        session = MagicMock()
        session.get.return_value = _response(200, {"content": "Keep going.", "author": "Someone"})
        adapter = QuotableAdapter("https://quotes.example/random", timeout=2.0, session=session)

        quote = adapter.fetch_random(("education", "wisdom"))

        assert quote == Quote("Keep going.", "Someone")
        session.get.assert_called_once_with(
            "https://quotes.example/random",
            params={"tags": "education,wisdom"},
            timeout=2.0,
        )

    def test_list_payload(self):
        session = MagicMock()
        session.get.return_value = _response(200, [{"content": "First", "author": "A"}])
        assert QuotableAdapter(session=session).fetch_random(()) == Quote("First", "A")

    def test_missing_author(self):
        session = MagicMock()
        session.get.return_value = _response(200, {"content": "Anon", "author": ""})
        assert QuotableAdapter(session=session).fetch_random(()).author == "Unknown"

    def test_http_error_raises(self):
        session = MagicMock()
        session.get.return_value = _response(503, text="Service Unavailable")
        with pytest.raises(CollaboratorError, match="503"):
            QuotableAdapter(session=session).fetch_random(("wisdom",))

    def test_network_error_raises(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("no route")
        with pytest.raises(CollaboratorError):
            QuotableAdapter(session=session).fetch_random(("wisdom",))

    def test_malformed_payload_raises(self):
        session = MagicMock()
        session.get.return_value = _response(200, {"quote": "wrong shape"})
        with pytest.raises(CollaboratorError):
            QuotableAdapter(session=session).fetch_random(("wisdom",))
