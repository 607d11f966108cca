"""Tests for configuration loading."""

from pathlib import Path

import pytest

from studydesk.config import Config, load_config
from studydesk.core.expenses import EXPENSE_CATEGORIES


@pytest.fixture(autouse=True)
def no_owner_env(monkeypatch):
    monkeypatch.delenv("STUDYDESK_OWNER", raising=False)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.conf")
        assert config.owner_id == ""
        assert config.quote_tags == ["education", "wisdom", "success"]
        assert config.quote_timeout == 5.0
        assert config.default_min_attendance == 75
        assert config.expense_categories == EXPENSE_CATEGORIES

    def test_parses_values(self, tmp_path):
        config_file = tmp_path / "studydesk.conf"
        config_file.write_text(
            "# Studydesk settings\n"
            'OWNER_ID="student-42"\n'
            "DATA_DIR=~/desk/data  # records\n"
            "QUOTE_TAGS=wisdom, success\n"
            "QUOTE_TIMEOUT=2.5\n"
            "DEFAULT_MIN_ATTENDANCE=80\n"
            "EXPENSE_CATEGORIES=Food,Rent\n"
        )
        config = load_config(config_file)
        assert config.owner_id == "student-42"
        assert config.data_dir == "~/desk/data"
        assert config.data_path == Path("~/desk/data").expanduser()
        assert config.quote_tags == ["wisdom", "success"]
        assert config.quote_timeout == 2.5
        assert config.default_min_attendance == 80
        assert config.expense_categories == ["Food", "Rent"]

    def test_quoted_value_keeps_hash(self, tmp_path):
        config_file = tmp_path / "studydesk.conf"
        config_file.write_text("QUOTE_API_URL='https://quotes.example/random#frag'\n")
        assert load_config(config_file).quote_api_url == "https://quotes.example/random#frag"

    def test_invalid_numbers_keep_defaults(self, tmp_path, caplog):
        config_file = tmp_path / "studydesk.conf"
        config_file.write_text("QUOTE_TIMEOUT=soon\nDEFAULT_MIN_ATTENDANCE=150\n")
        config = load_config(config_file)
        assert config.quote_timeout == 5.0
        assert config.default_min_attendance == 75
        assert "QUOTE_TIMEOUT" in caplog.text
        assert "DEFAULT_MIN_ATTENDANCE" in caplog.text

    def test_ignores_malformed_lines(self, tmp_path):
        config_file = tmp_path / "studydesk.conf"
        config_file.write_text("just some text\nUNKNOWN_KEY=1\nOWNER_ID=u1\n")
        assert load_config(config_file).owner_id == "u1"

    def test_env_overrides_owner(self, tmp_path, monkeypatch):
        config_file = tmp_path / "studydesk.conf"
        config_file.write_text("OWNER_ID=from-file\n")
        monkeypatch.setenv("STUDYDESK_OWNER", "from-env")
        assert load_config(config_file).owner_id == "from-env"


class TestConfigPaths:
    def test_explicit_dirs(self, tmp_path):
        config = Config(data_dir=str(tmp_path / "d"), attachments_dir=str(tmp_path / "a"))
        assert config.data_path == tmp_path / "d"
        assert config.attachments_path == tmp_path / "a"
