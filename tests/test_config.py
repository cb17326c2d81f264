"""Tests for settings loading."""

import pytest

from TMCDButils.config import IngestSettings, load_settings
from TMCDButils.exceptions import ConfigError
from TMCDButils.ingest import IngestContext

from .conftest import FakeBackend


def test_defaults():
    settings = load_settings(environ={})
    assert settings == IngestSettings()
    assert settings.database == "OneMonitorPointPerDayPerDocument"
    assert settings.existence_capacity == 250000
    assert settings.hour_offset == 3
    assert settings.connection_string is None


def test_yaml_then_env_then_overrides(tmp_path):
    path = tmp_path / "tmcdb.yaml"
    path.write_text(
        "connection_string: mongodb://yaml-host/db\n"
        "num_workers: 8\n"
        "queue_size: 50\n"
        "shard_collections: true\n"
    )
    env = {"TMCDB_URL": "mongodb://env-host/db", "TMCDB_WORKERS": "12"}

    settings = load_settings(path, environ=env, queue_size=75, num_workers=None)

    assert settings.connection_string == "mongodb://env-host/db"
    assert settings.num_workers == 12
    assert settings.queue_size == 75
    assert settings.shard_collections is True


def test_empty_yaml(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_settings(path, environ={}) == IngestSettings()


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "nope.yaml", environ={})


def test_non_mapping_yaml(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_settings(path, environ={})


def test_invalid_values(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(environ={}, num_workers=0)
    with pytest.raises(ConfigError):
        load_settings(environ={"TMCDB_QUEUE_SIZE": "many"})


def test_context_from_settings():
    settings = IngestSettings(
        existence_capacity=10,
        existence_stripes=2,
        preallocate=False,
        shard_collections=True,
        hour_offset=0,
        sample_time=60,
        progress_every=5,
    )
    context = IngestContext.create(FakeBackend(), settings)
    assert context.existence.capacity == 10
    assert context.router.shard is True
    assert context.preallocate is False
    assert context.hour_offset == 0
    assert context.sample_time == 60
    assert context.stats.progress_every == 5
