"""Abstract interfaces for puzzle dataset generation and metadata auditing."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar, Union

PathLike = Union[str, Path]
RecordT = TypeVar("RecordT")
ResultT = TypeVar("ResultT")


def read_record_list(path: Path) -> List[Dict[str, Any]]:
    """Load a JSON list of puzzle records."""

    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"Puzzle metadata in {path} must be a list of records")
    return raw


class AbstractPuzzleGenerator(ABC, Generic[RecordT]):
    """Base class for dataset builders that emit puzzle records."""

    def __init__(self, output_dir: PathLike) -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    @abstractmethod
    def create_puzzle(self, *args, **kwargs) -> RecordT:
        """Create one puzzle record, writing any assets it refers to."""

    @abstractmethod
    def create_random_puzzle(self) -> RecordT:
        """Create a single randomized puzzle instance."""

    def generate_dataset(
        self,
        count: int,
        *,
        metadata_path: Optional[PathLike] = None,
        append: bool = True,
    ) -> List[RecordT]:
        """Generate ``count`` puzzles and optionally persist their metadata."""

        if count < 0:
            raise ValueError("count must be non-negative")
        records = [self.create_random_puzzle() for _ in range(count)]
        if metadata_path is not None:
            self.write_metadata(records, metadata_path, append=append)
        return records

    def write_metadata(
        self,
        records: Iterable[RecordT],
        metadata_path: PathLike,
        *,
        append: bool = True,
    ) -> None:
        """Write records as a JSON list.

        With ``append`` the existing file is kept and entries sharing an id
        with a new record are replaced by it.
        """

        path = Path(metadata_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = [self.record_to_dict(record) for record in records]
        new_ids = {str(item.get("id")) for item in payload}
        existing: List[Dict[str, Any]] = []
        if append and path.exists():
            existing = [
                item for item in read_record_list(path) if str(item.get("id")) not in new_ids
            ]
        path.write_text(json.dumps(existing + payload, indent=2), encoding="utf-8")

    def record_to_dict(self, record: RecordT) -> Dict[str, Any]:
        to_dict = getattr(record, "to_dict", None)
        if not callable(to_dict):
            raise TypeError(
                f"{type(record).__name__} has no to_dict(); override record_to_dict() to serialize it"
            )
        return to_dict()

    def relativize_path(self, path: Path) -> str:
        """Posix path of an asset, relative to ``output_dir`` when it lives inside it."""

        resolved = path.resolve()
        root = self.output_dir.resolve()
        if resolved == root or root in resolved.parents:
            return resolved.relative_to(root).as_posix()
        return path.as_posix()


class AbstractPuzzleAuditor(ABC, Generic[ResultT]):
    """Reads a generator's metadata file and re-checks its records."""

    def __init__(
        self,
        metadata_path: PathLike,
        *,
        base_dir: Optional[PathLike] = None,
    ) -> None:
        path = Path(metadata_path)
        if not path.is_file():
            raise FileNotFoundError(f"Puzzle metadata not found: {path}")
        self.metadata_path = path
        # Asset paths in the records are relative to this directory.
        self.base_dir = path.parent if base_dir is None else Path(base_dir)
        self._records = self._index_records(read_record_list(self.metadata_path))

    @property
    def records(self) -> Dict[str, Dict[str, Any]]:
        """Loaded metadata keyed by puzzle id, in file order."""

        return self._records

    @property
    def puzzle_ids(self) -> List[str]:
        return list(self._records)

    @staticmethod
    def _index_records(raw: Iterable[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
        records: Dict[str, Dict[str, Any]] = {}
        for record in raw:
            puzzle_id = record.get("id")
            if not puzzle_id:
                raise ValueError("Each puzzle record must include an 'id'")
            records[str(puzzle_id)] = record
        return records

    def get_record(self, puzzle_id: str) -> Dict[str, Any]:
        record = self._records.get(puzzle_id)
        if record is None:
            raise KeyError(f"No puzzle '{puzzle_id}' in {self.metadata_path}")
        return record

    def resolve_path(self, path_value: object) -> Path:
        """Resolve a recorded asset path against ``base_dir``."""

        path = Path(str(path_value))
        return path if path.is_absolute() else self.base_dir / path

    @abstractmethod
    def evaluate(self, puzzle_id: str) -> ResultT:
        """Check the stored puzzle with the given id."""

    def evaluate_all(self) -> List[ResultT]:
        return [self.evaluate(puzzle_id) for puzzle_id in self.puzzle_ids]


__all__ = [
    "AbstractPuzzleGenerator",
    "AbstractPuzzleAuditor",
    "PathLike",
    "read_record_list",
]
