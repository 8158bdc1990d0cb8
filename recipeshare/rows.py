"""
Editable row collections for the recipe authoring form.

A RowCollection is an ordered list of form rows that can grow, shrink and be
edited in place. Two flavours are used:

- ingredients: IngredientRow(name, amount), order is presentational only
- instructions: InstructionRow(step, description), renumbered 1..N after every
  insert or removal so step always equals the row's position

A collection never drops below one row: the form always shows at least one
input line, and removing the last one is a no-op.
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Callable, Generic, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)


@dataclass
class IngredientRow:
    """One ingredient line: free-text name and amount (e.g. "Salt", "1 tsp")."""
    name: str = ""
    amount: str = ""

    def is_complete(self) -> bool:
        return bool(self.name.strip() and self.amount.strip())


@dataclass
class InstructionRow:
    """One numbered instruction step."""
    step: int = 1
    description: str = ""

    def is_complete(self) -> bool:
        return bool(self.description.strip())


T = TypeVar("T", IngredientRow, InstructionRow)


class RowCollection(Generic[T]):
    """
    Ordered, never-empty list of form rows.

    Args:
        row_factory: Builds a blank row for insert()
        renumber: Keep each row's `step` equal to its 1-based position
        rows: Initial rows (a single blank row when omitted or empty)
    """

    def __init__(self, row_factory: Callable[[], T], renumber: bool = False, rows: Optional[List[T]] = None):
        self._row_factory = row_factory
        self.renumber = renumber
        self._rows: List[T] = [replace(row) for row in rows] if rows else [row_factory()]
        self._renumber()

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self):
        return iter(self._rows)

    def __getitem__(self, index: int) -> T:
        return self._rows[index]

    @property
    def rows(self) -> Tuple[T, ...]:
        """Snapshot of the rows; mutate through insert/remove_at/update_field."""
        return tuple(self._rows)

    def _renumber(self) -> None:
        if not self.renumber:
            return
        for position, row in enumerate(self._rows, start=1):
            row.step = position

    def insert(self, row: Optional[T] = None) -> T:
        """
        Append a row (a blank one by default) and return it.

        For renumbered collections the row's step is overwritten with its position.
        """
        new_row = replace(row) if row is not None else self._row_factory()
        self._rows.append(new_row)
        self._renumber()
        return new_row

    def remove_at(self, index: int) -> bool:
        """
        Remove the row at `index`.

        Returns:
            False when the collection has a single row (nothing is removed), True otherwise

        Raises:
            IndexError: If index is out of range
        """
        if len(self._rows) == 1:
            logger.debug("Keeping last %s row", type(self._rows[0]).__name__)
            return False
        del self._rows[index]
        self._renumber()
        return True

    def update_field(self, index: int, field_name: str, value: str) -> None:
        """
        Replace one field of the row at `index`.

        Raises:
            IndexError: If index is out of range
            ValueError: If the field does not exist, or is the managed `step` field
        """
        row = self._rows[index]
        names = {f.name for f in fields(row)}
        if field_name not in names:
            raise ValueError(f"{type(row).__name__} has no field {field_name!r}")
        if self.renumber and field_name == "step":
            raise ValueError("step is assigned from the row position and cannot be edited")
        setattr(row, field_name, value)

    def complete_rows(self) -> List[T]:
        """Rows the user actually filled in, in order."""
        return [replace(row) for row in self._rows if row.is_complete()]


def ingredient_rows(rows: Optional[List[IngredientRow]] = None) -> RowCollection[IngredientRow]:
    """New ingredient collection (unordered, no renumbering)."""
    return RowCollection(IngredientRow, renumber=False, rows=rows)


def instruction_rows(rows: Optional[List[InstructionRow]] = None) -> RowCollection[InstructionRow]:
    """New instruction collection, renumbered 1..N."""
    return RowCollection(InstructionRow, renumber=True, rows=rows)
