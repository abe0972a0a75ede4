from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from fileshelf.config import AppConfig, default_config, load_config
from fileshelf.schemas import DEFAULT_MIME, LoadResult, PersistedFile

ROOT = Path(__file__).resolve().parents[1]


def test_persisted_file_is_immutable() -> None:
    persisted = PersistedFile(id=1, name="a.txt", mime="text/plain", data=b"abc")

    with pytest.raises(ValidationError):
        persisted.name = "b.txt"  # type: ignore[misc]
    assert persisted.size == 3


def test_persisted_file_keeps_mime_as_given() -> None:
    mime = "Text/Plain; charset=UTF-8"

    assert PersistedFile(id=1, name="a", mime=mime).mime == mime
    assert PersistedFile(id=1, name="a").mime == DEFAULT_MIME


def test_persisted_file_requires_positive_id() -> None:
    with pytest.raises(ValidationError):
        PersistedFile(id=0, name="a")


def test_load_result_builders() -> None:
    persisted = PersistedFile(id=3, name="a.txt", mime="text/plain", data=b"abcd")

    found = LoadResult.from_file(persisted)
    missing = LoadResult.missing(9)

    assert found.found is True
    assert (found.id, found.name, found.mime, found.size) == (3, "a.txt", "text/plain", 4)
    assert missing.found is False
    assert missing.name is None


def test_config_example_load_and_validate() -> None:
    config = load_config(ROOT / "config" / "config.example.yaml")

    assert isinstance(config, AppConfig)
    assert config.storage.timeout_seconds == 5.0
    assert config.caching.enabled is True
    assert config.caching.max_entries is None
    assert config.logging.level == "INFO"


def test_config_accepts_json_and_fills_defaults(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"caching": {"max_entries": 128}, "logging": {"level": "debug"}}))

    config = load_config(path)

    assert config.caching.max_entries == 128
    assert config.logging.level == "DEBUG"
    assert config.storage == default_config().storage


def test_config_rejects_unknown_and_invalid_fields(tmp_path) -> None:
    unknown = tmp_path / "unknown.yaml"
    unknown.write_text("caching:\n  ttl_minutes: 5\n", encoding="utf-8")
    invalid = tmp_path / "invalid.yaml"
    invalid.write_text("caching:\n  max_entries: 0\n", encoding="utf-8")
    not_object = tmp_path / "list.yaml"
    not_object.write_text("- a\n- b\n", encoding="utf-8")

    for path in (unknown, invalid):
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)
    with pytest.raises(ValueError, match="root must be an object"):
        load_config(not_object)


def test_empty_config_file_uses_defaults(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == default_config()
