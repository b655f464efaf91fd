"""Run logger for recording task stage results to JSON files."""

import dataclasses
import uuid
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel


class StageRecord(BaseModel):
    """Record of a single stage execution within a task run."""

    stage: str
    component: str
    input: Any = None
    output: Any = None
    timestamp: str = ""
    duration_seconds: float = 0.0


class RunRecord(BaseModel):
    """Record of a complete task run."""

    run_id: str
    task: str
    started_at: str
    completed_at: str | None = None
    stages: list[StageRecord] = []
    failed_targets: int = 0


def _serialize(obj: Any) -> Any:
    """Serialize an object to JSON-compatible format.

    Handles dataclasses, Pydantic models, enums, datetimes, sequences, dicts,
    and primitives.
    """
    if obj is None:
        return None
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _serialize(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, list | tuple):
        return [_serialize(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): _serialize(v) for k, v in obj.items()}
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, BaseException):
        return f"{type(obj).__name__}: {obj}"
    return obj


class RunLogger:
    """Accumulates stage records per task run and writes a JSON log file per run.

    ``start_run`` returns a run id that the caller passes back to ``log_stage``
    and ``finish_run``, so overlapping runs of the same task keep separate
    records. When ``enabled=False``, all methods are no-ops.

    Args:
        log_dir: Directory to write JSON log files.
        enabled: If False, all methods become no-ops.
    """

    def __init__(self, log_dir: Path, *, enabled: bool = True) -> None:
        self._log_dir = log_dir
        self._enabled = enabled
        self._records: dict[str, RunRecord] = {}
        self._last_log_path: Path | None = None

    @property
    def enabled(self) -> bool:
        """Whether logging is active."""
        return self._enabled

    @property
    def last_log_path(self) -> Path | None:
        """Path to the last written log file, or None."""
        return self._last_log_path

    def start_run(self, task: str) -> str | None:
        """Open a new run record.

        Args:
            task: Name of the task being run (e.g. "story-digest").

        Returns:
            The run id, or None if logging is disabled.
        """
        if not self._enabled:
            return None

        record = RunRecord(
            run_id=str(uuid.uuid4()),
            task=task,
            started_at=datetime.now(tz=UTC).isoformat(),
        )
        self._records[record.run_id] = record
        return record.run_id

    def log_stage(
        self,
        run_id: str | None,
        stage: str,
        component: str,
        input_data: Any,
        output_data: Any,
        duration_seconds: float,
    ) -> None:
        """Append a stage record to an open run.

        Args:
            run_id: Id returned by ``start_run``.
            stage: Stage name (e.g. "digest", "classify_stories").
            component: Component class name.
            input_data: Stage input (will be serialized).
            output_data: Stage output (will be serialized).
            duration_seconds: Wall-clock time for this stage.
        """
        record = self._records.get(run_id) if run_id else None
        if not self._enabled or record is None:
            return

        record.stages.append(
            StageRecord(
                stage=stage,
                component=component,
                input=_serialize(input_data),
                output=_serialize(output_data),
                timestamp=datetime.now(tz=UTC).isoformat(),
                duration_seconds=round(duration_seconds, 4),
            )
        )

    def finish_run(self, run_id: str | None, *, failed_targets: int = 0) -> Path | None:
        """Close a run and write its record to a JSON file.

        Args:
            run_id: Id returned by ``start_run``.
            failed_targets: Number of target branches that raised.

        Returns:
            Path to the written JSON file, or None if there is no open run.
        """
        record = self._records.pop(run_id, None) if run_id else None
        if not self._enabled or record is None:
            return None

        record.completed_at = datetime.now(tz=UTC).isoformat()
        record.failed_targets = failed_targets

        self._log_dir.mkdir(parents=True, exist_ok=True)

        # run_2026-02-12T14-30-00_story-digest_1a2b3c4d.json
        ts = record.started_at.replace(":", "-")
        ts = ts.split(".")[0].split("+")[0]
        filepath = self._log_dir / f"run_{ts}_{record.task}_{record.run_id[:8]}.json"

        filepath.write_text(record.model_dump_json(indent=2))
        self._last_log_path = filepath
        return filepath
