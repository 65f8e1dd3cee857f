"""Unit tests for the token file credential store."""

import json
import os
import shutil
import tempfile

import pytest

from workspace_facade.auth.credential_store import TokenFileStore


class TestTokenFileStore:
    """Tests for TokenFileStore."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = os.path.join(self.temp_dir, "nested", "token.json")
        self.store = TokenFileStore(self.path)

    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_exists_false_before_first_save(self):
        assert not self.store.exists()

    def test_save_creates_parent_directory(self):
        self.store.save({"token": "abc"})
        assert self.store.exists()
        assert self.store.load() == {"token": "abc"}

    def test_save_replaces_previous_blob(self):
        self.store.save({"token": "old", "refresh_token": "r1"})
        self.store.save({"token": "new", "refresh_token": "r1"})

        assert self.store.load()["token"] == "new"

    def test_save_leaves_no_temporary_files(self):
        self.store.save({"token": "abc"})
        assert os.listdir(os.path.dirname(self.path)) == ["token.json"]

    def test_failed_save_keeps_previous_blob(self):
        """A blob that cannot be serialized must not corrupt the stored one."""
        self.store.save({"token": "good"})

        with pytest.raises(TypeError):
            self.store.save({"token": object()})

        assert self.store.load() == {"token": "good"}
        assert os.listdir(os.path.dirname(self.path)) == ["token.json"]

    def test_last_modified(self):
        assert self.store.last_modified() is None
        self.store.save({"token": "abc"})
        assert self.store.last_modified() == os.path.getmtime(self.path)

    def test_load_malformed_file_propagates(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w") as f:
            f.write("{not json")

        with pytest.raises(json.JSONDecodeError):
            self.store.load()

    def test_path_is_user_expanded(self):
        store = TokenFileStore("~/token.json")
        assert store.path == os.path.expanduser("~/token.json")
