"""Algorithm X exact-cover search over an index arena.

Columns are integers ``0..columns-1`` and rows are registered sparsely with
an arbitrary hashable label. The search keeps two maps, column -> set of
live row ids and row id -> column list, and removes/restores entries while
backtracking, which gives the same cover/uncover behaviour as dancing links
without the pointer structure.
"""

from __future__ import annotations

from typing import Dict, Hashable, Iterator, List, Sequence, Set

from .errors import ExactCoverError


class ExactCoverSolver:
    """Collects rows for an exact-cover problem and enumerates solutions."""

    def __init__(self, columns: int) -> None:
        if columns < 0:
            raise ExactCoverError(f"Column count must be non-negative, got {columns}")
        self._column_count = columns
        self._labels: List[Hashable] = []
        self._row_columns: List[List[int]] = []
        self._seen_labels: Set[Hashable] = set()

    @property
    def columns(self) -> int:
        return self._column_count

    @property
    def rows(self) -> int:
        return len(self._row_columns)

    def add_constraint(self, row_label: Hashable, column_indices: Sequence[int]) -> None:
        """Register a row covering ``column_indices``."""

        if row_label in self._seen_labels:
            raise ExactCoverError(f"Row {row_label!r} registered twice")
        columns = sorted(set(int(index) for index in column_indices))
        if not columns:
            raise ExactCoverError(f"Row {row_label!r} covers no columns")
        for index in columns:
            if not 0 <= index < self._column_count:
                raise ExactCoverError(
                    f"Row {row_label!r} references unknown column {index} "
                    f"(problem has {self._column_count} columns)"
                )
        self._seen_labels.add(row_label)
        self._labels.append(row_label)
        self._row_columns.append(columns)

    def find(self, limit: int) -> List[List[Hashable]]:
        """Return up to ``limit`` solutions, each a list of row labels."""

        if limit < 1:
            raise ValueError("limit must be at least 1")
        solutions: List[List[Hashable]] = []
        for solution in self._search():
            solutions.append([self._labels[row] for row in solution])
            if len(solutions) >= limit:
                break
        return solutions

    def count(self, limit: int) -> int:
        return len(self.find(limit))

    # ------------------------------------------------------------------

    def _search(self) -> Iterator[List[int]]:
        column_rows: Dict[int, Set[int]] = {column: set() for column in range(self._column_count)}
        for row, columns in enumerate(self._row_columns):
            for column in columns:
                column_rows[column].add(row)
        partial: List[int] = []
        yield from self._solve(column_rows, partial)

    def _solve(self, column_rows: Dict[int, Set[int]], partial: List[int]) -> Iterator[List[int]]:
        if not column_rows:
            yield list(partial)
            return

        column = self._choose_column(column_rows)
        for row in list(column_rows[column]):
            partial.append(row)
            removed = self._cover(column_rows, row)
            yield from self._solve(column_rows, partial)
            self._uncover(column_rows, row, removed)
            partial.pop()

    @staticmethod
    def _choose_column(column_rows: Dict[int, Set[int]]) -> int:
        # Fewest candidates first; ties go to the lowest index.
        return min(column_rows, key=lambda column: (len(column_rows[column]), column))

    def _cover(self, column_rows: Dict[int, Set[int]], row: int) -> List[Set[int]]:
        removed: List[Set[int]] = []
        for column in self._row_columns[row]:
            for other in column_rows[column]:
                for other_column in self._row_columns[other]:
                    if other_column != column:
                        column_rows[other_column].discard(other)
            removed.append(column_rows.pop(column))
        return removed

    def _uncover(self, column_rows: Dict[int, Set[int]], row: int, removed: List[Set[int]]) -> None:
        for column in reversed(self._row_columns[row]):
            rows = removed.pop()
            column_rows[column] = rows
            for other in rows:
                for other_column in self._row_columns[other]:
                    if other_column != column:
                        column_rows[other_column].add(other)


__all__ = ["ExactCoverSolver"]
