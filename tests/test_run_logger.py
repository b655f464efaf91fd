"""Tests for RunLogger and serialization helpers."""

import json
from pathlib import Path

from builders import NOW, make_news_item
from news_curation.data import Country, PublicationTier
from news_curation.pipeline import ClassificationSummary
from news_curation.run_logger import RunLogger, _serialize

# -- _serialize tests --


def test_serialize_none() -> None:
    assert _serialize(None) is None


def test_serialize_primitive() -> None:
    assert _serialize(42) == 42
    assert _serialize("hello") == "hello"
    assert _serialize(True) is True


def test_serialize_enum_and_datetime() -> None:
    assert _serialize(PublicationTier.NICHE) == "NICHE"
    assert _serialize(Country.US) == "us"
    assert _serialize(NOW) == "2026-03-10T15:30:00+00:00"


def test_serialize_dataclass() -> None:
    result = _serialize(ClassificationSummary(classified=2, failed=1))
    assert result == {"classified": 2, "failed": 1}


def test_serialize_nested_dataclass() -> None:
    result = _serialize(make_news_item(refs=("a", "b")))
    assert result["coverage"] == 2
    assert result["published_at"] == NOW.isoformat()
    assert [a["id"] for a in result["articles"]] == ["a", "b"]


def test_serialize_dict_and_tuple() -> None:
    assert _serialize({"us/en": (1, 2)}) == {"us/en": [1, 2]}


def test_serialize_path() -> None:
    assert _serialize(Path("/some/path")) == "/some/path"


def test_serialize_exception() -> None:
    assert _serialize(RuntimeError("boom")) == "RuntimeError: boom"


# -- RunLogger disabled tests --


def test_run_logger_disabled_is_noop(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path, enabled=False)
    assert not logger.enabled

    run_id = logger.start_run("story-digest")
    logger.log_stage(run_id, "digest", "DigestStories", None, {"us/en": 1}, 1.0)
    result = logger.finish_run(run_id)

    assert run_id is None
    assert result is None
    assert logger.last_log_path is None
    assert list(tmp_path.iterdir()) == []


# -- RunLogger enabled tests --


def test_run_logger_writes_stages(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path)

    run_id = logger.start_run("story-digest")
    logger.log_stage(
        run_id,
        stage="digest",
        component="DigestStories",
        input_data=["us/en", "fr/fr"],
        output_data={"us/en": 3, "fr/fr": "RuntimeError('boom')"},
        duration_seconds=0.123456,
    )
    logger.log_stage(
        run_id,
        stage="classify_stories",
        component="ClassifyStories",
        input_data=None,
        output_data=ClassificationSummary(classified=3),
        duration_seconds=0.5,
    )
    path = logger.finish_run(run_id, failed_targets=1)

    assert path is not None
    assert logger.last_log_path == path
    data = json.loads(path.read_text())
    assert data["run_id"] == run_id
    assert data["task"] == "story-digest"
    assert data["failed_targets"] == 1
    assert data["completed_at"] is not None
    assert len(data["stages"]) == 2
    assert data["stages"][0]["input"] == ["us/en", "fr/fr"]
    assert data["stages"][0]["duration_seconds"] == 0.1235
    assert data["stages"][1]["output"] == {"classified": 3, "failed": 0}


def test_run_logger_filename_format(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path / "nested" / "logs")

    run_id = logger.start_run("article-generation")
    path = logger.finish_run(run_id)

    assert run_id is not None
    assert path is not None
    assert path.parent.exists()
    assert path.name.startswith("run_")
    assert path.name.endswith(f"_article-generation_{run_id[:8]}.json")
    assert ":" not in path.name


def test_run_logger_overlapping_runs_keep_separate_records(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path)

    first = logger.start_run("story-digest")
    logger.log_stage(first, "digest", "A", None, None, 0.1)
    second = logger.start_run("story-digest")
    logger.log_stage(second, "digest", "B", None, None, 0.1)
    logger.log_stage(first, "compose", "A", None, None, 0.1)
    first_path = logger.finish_run(first)
    logger.log_stage(second, "compose", "B", None, None, 0.1)
    second_path = logger.finish_run(second, failed_targets=2)

    assert first_path is not None
    assert second_path is not None
    assert first_path != second_path
    first_data = json.loads(first_path.read_text())
    second_data = json.loads(second_path.read_text())
    assert [s["component"] for s in first_data["stages"]] == ["A", "A"]
    assert [s["component"] for s in second_data["stages"]] == ["B", "B"]
    assert (first_data["failed_targets"], second_data["failed_targets"]) == (0, 2)


def test_run_logger_finish_closes_run(tmp_path: Path) -> None:
    logger = RunLogger(log_dir=tmp_path)

    run_id = logger.start_run("story-digest")
    assert logger.finish_run(run_id) is not None
    assert logger.finish_run(run_id) is None
    logger.log_stage(run_id, "digest", "DigestStories", None, None, 1.0)
    assert len(list(tmp_path.iterdir())) == 1


def test_run_logger_unknown_run_is_noop(tmp_path: Path) -> None:
    """Stages for a run that was never started are dropped."""
    logger = RunLogger(log_dir=tmp_path)
    logger.log_stage("missing", "digest", "DigestStories", None, None, 1.0)
    logger.log_stage(None, "digest", "DigestStories", None, None, 1.0)
    assert logger.finish_run("missing") is None
    assert logger.finish_run(None) is None
