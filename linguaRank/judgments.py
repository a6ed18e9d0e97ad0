from __future__ import annotations
import copy
import numpy as np
from typing import Iterator, List, Literal, Optional, Sequence, Tuple


JudgmentKind = Literal["crisp", "within", "at_least", "at_most", "unfilled"]


class JudgmentCell:
    """
    A qualitative judgment of one alternative against one criterion.

    Both bounds are optional short-name references into the term registry:
    - from_term == to_term: a single term ("High").
    - both set, unequal: a closed range ("within Low and High").
    - only from_term: open above ("at least Medium").
    - only to_term: open below ("at most Medium").
    - neither: unfilled.
    """

    def __init__(self, from_term: Optional[str] = None, to_term: Optional[str] = None):
        # Empty strings from form fields mean "not set"
        self.from_term = from_term or None
        self.to_term = to_term or None

    def __repr__(self) -> str:
        return f"JudgmentCell(from_term={self.from_term!r}, to_term={self.to_term!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, JudgmentCell):
            return self.from_term == other.from_term and self.to_term == other.to_term
        return False

    @property
    def kind(self) -> JudgmentKind:
        if self.from_term and self.to_term:
            return "crisp" if self.from_term == self.to_term else "within"
        if self.from_term:
            return "at_least"
        if self.to_term:
            return "at_most"
        return "unfilled"

    @property
    def is_filled(self) -> bool:
        return self.kind != "unfilled"

    def references(self) -> List[str]:
        """The short names this judgment points at."""
        return [ref for ref in dict.fromkeys((self.from_term, self.to_term)) if ref]

    def describe(self) -> str:
        """Human readable text, as shown in the judgment table."""
        kind = self.kind
        if kind == "crisp":
            return self.from_term
        if kind == "within":
            return f"within {self.from_term} and {self.to_term}"
        if kind == "at_least":
            return f"over {self.from_term}"
        if kind == "at_most":
            return f"less {self.to_term}"
        return ""


class JudgmentMatrix:
    """
    The alternatives x criteria grid of judgments, with fixed dimensions.

    Cells are stored in a NumPy object array so rows can be sliced the same
    way as the derived trapezoid matrices.
    """

    def __init__(
        self,
        num_alternatives: int,
        num_criteria: int,
        alternatives: Optional[Sequence[str]] = None,
        criteria: Optional[Sequence[str]] = None
    ):
        if num_alternatives < 1:
            raise ValueError("A judgment matrix needs at least one alternative.")
        if num_criteria < 1:
            raise ValueError("A judgment matrix needs at least one criterion.")

        self.alternatives = list(alternatives) if alternatives is not None else [f"A{i + 1}" for i in range(num_alternatives)]
        self.criteria = list(criteria) if criteria is not None else [f"C{j + 1}" for j in range(num_criteria)]
        if len(self.alternatives) != num_alternatives:
            raise ValueError(f"Expected {num_alternatives} alternative names, got {len(self.alternatives)}.")
        if len(self.criteria) != num_criteria:
            raise ValueError(f"Expected {num_criteria} criterion names, got {len(self.criteria)}.")

        self.cells = np.empty((num_alternatives, num_criteria), dtype=object)
        for i in range(num_alternatives):
            for j in range(num_criteria):
                self.cells[i, j] = JudgmentCell()

    def __repr__(self) -> str:
        return f"JudgmentMatrix(shape={self.shape}, filled={self.filled_count()}/{self.cells.size})"

    def __deepcopy__(self, memo):
        new_matrix = JudgmentMatrix(*self.shape, alternatives=self.alternatives, criteria=self.criteria)
        memo[id(self)] = new_matrix
        for i, j in self.positions():
            cell = self.cells[i, j]
            new_matrix.cells[i, j] = JudgmentCell(cell.from_term, cell.to_term)
        return new_matrix

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[Tuple[Optional[str], Optional[str]]]],
        alternatives: Optional[Sequence[str]] = None,
        criteria: Optional[Sequence[str]] = None
    ) -> 'JudgmentMatrix':
        """
        Builds a matrix from nested (from_term, to_term) pairs.

        Example:
        >>> JudgmentMatrix.from_rows([[("L", "H"), ("M", None)], [(None, "M"), ("H", "H")]])
        """
        if not rows or not rows[0]:
            raise ValueError("Rows must describe at least one alternative and one criterion.")
        n_criteria = len(rows[0])
        if any(len(row) != n_criteria for row in rows):
            raise ValueError("All rows must have the same number of criteria.")
        matrix = cls(len(rows), n_criteria, alternatives, criteria)
        for i, row in enumerate(rows):
            for j, (from_term, to_term) in enumerate(row):
                matrix.set(i, j, from_term, to_term)
        return matrix

    @property
    def shape(self) -> Tuple[int, int]:
        return self.cells.shape

    def positions(self) -> Iterator[Tuple[int, int]]:
        rows, cols = self.shape
        for i in range(rows):
            for j in range(cols):
                yield i, j

    def get(self, row: int, col: int) -> JudgmentCell:
        self._check_position(row, col)
        return self.cells[row, col]

    def set(self, row: int, col: int, from_term: Optional[str] = None, to_term: Optional[str] = None) -> JudgmentCell:
        self._check_position(row, col)
        cell = JudgmentCell(from_term, to_term)
        self.cells[row, col] = cell
        return cell

    def _check_position(self, row: int, col: int):
        rows, cols = self.shape
        if not (0 <= row < rows and 0 <= col < cols):
            raise IndexError(f"Cell ({row},{col}) is outside the {rows}x{cols} judgment matrix.")

    def filled_count(self) -> int:
        return sum(1 for i, j in self.positions() if self.cells[i, j].is_filled)

    def all_filled(self) -> bool:
        return all(self.cells[i, j].is_filled for i, j in self.positions())

    def copy(self) -> 'JudgmentMatrix':
        return copy.deepcopy(self)
