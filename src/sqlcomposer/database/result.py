from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass
class QueryResult:
    """Fully fetched result of a SELECT statement.

    Rows are plain dictionaries keyed by column label, fetched before the
    database connection is returned to the pool.
    """

    columns: List[str] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def fetch_all(self) -> List[Dict[str, Any]]:
        return list(self.rows)

    def fetch_one(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None

    def fetch_first_column(self) -> List[Any]:
        if not self.columns:
            return []
        first = self.columns[0]
        return [row[first] for row in self.rows]

    def scalar(self) -> Any:
        """Value of the first column of the first row, ``None`` for an empty result."""
        row = self.fetch_one()
        if row is None or not self.columns:
            return None
        return row[self.columns[0]]

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)
