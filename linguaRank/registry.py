from __future__ import annotations
from typing import Dict, Iterator, List, Optional, Tuple
from .config import configure_parameters
from .types import TFN, LinguisticTerm


class TermRegistry:
    """
    The ordered linguistic scale used by the experts.

    Order is significant: it defines adjacency for range judgments such as
    "within Low and High". Terms are appended up to `target_count`, amended in
    place by position and never reordered or removed.

    The registry also keeps the position of the term currently being edited,
    so a form can step through the scale with `next()` / `previous()`, and a
    `revision` counter that lets holders of derived results detect edits.
    """

    def __init__(self, target_count: int | None = None, terms: List[LinguisticTerm] | None = None):
        if target_count is None:
            target_count = configure_parameters.DEFAULT_NUM_TERMS
        if target_count < 0:
            raise ValueError("Target term count cannot be negative.")
        self.target_count = int(target_count)
        self._terms: List[LinguisticTerm] = []
        self._revision = 0
        self.current_index = 0
        for term in terms or []:
            self.append(term)
        self.current_index = 0

    def __repr__(self) -> str:
        return f"TermRegistry(terms={len(self._terms)}/{self.target_count}, short_names={self.short_names})"

    def __len__(self) -> int:
        return len(self._terms)

    def __iter__(self) -> Iterator[LinguisticTerm]:
        return iter(list(self._terms))

    def __getitem__(self, index: int) -> LinguisticTerm:
        return self._terms[index]

    @classmethod
    def from_definitions(cls, definitions: List[Tuple[str, str, Tuple[float, float, float]]], target_count: int | None = None) -> 'TermRegistry':
        """
        Builds a full registry from (name, short_name, (left, middle, right)) tuples.
        The target count defaults to the number of definitions.
        """
        count = len(definitions) if target_count is None else target_count
        return cls(count, [LinguisticTerm(name, short, values) for name, short, values in definitions])

    # --------------------------------------------------------------------------
    # Read access
    # --------------------------------------------------------------------------

    @property
    def terms(self) -> Tuple[LinguisticTerm, ...]:
        return tuple(self._terms)

    @property
    def short_names(self) -> List[str]:
        return [t.short_name for t in self._terms]

    @property
    def revision(self) -> int:
        """Counter bumped by every change to the stored terms."""
        return self._revision

    @property
    def is_full(self) -> bool:
        return len(self._terms) >= self.target_count

    @property
    def current(self) -> LinguisticTerm:
        """The term under edit, or a blank incomplete term if none exists yet."""
        if 0 <= self.current_index < len(self._terms):
            return self._terms[self.current_index]
        return LinguisticTerm()

    def _position_map(self) -> Dict[str, int]:
        positions: Dict[str, int] = {}
        for index, term in enumerate(self._terms):
            # Duplicates are a validation error; the first occurrence wins meanwhile
            positions.setdefault(term.short_name, index)
        return positions

    def index_of(self, short_name: str | None) -> Optional[int]:
        """Registry position of `short_name`, or None if it does not resolve."""
        if not short_name:
            return None
        return self._position_map().get(short_name)

    def resolve(self, short_name: str | None) -> Optional[TFN]:
        """Canonical TFN behind `short_name`, or None if unknown or incomplete."""
        index = self.index_of(short_name)
        if index is None or not self._terms[index].is_complete:
            return None
        return self._terms[index].tri

    def slice(self, start: int, stop: int) -> List[str]:
        """Short names from position `start` to `stop`, both inclusive."""
        return self.short_names[start:stop + 1]

    # --------------------------------------------------------------------------
    # Mutation
    # --------------------------------------------------------------------------

    def _placeholder(self) -> LinguisticTerm:
        return LinguisticTerm("", "", configure_parameters.PLACEHOLDER_TRIANGLE)

    def _touch(self):
        self._revision += 1

    def _push(self, term: LinguisticTerm) -> int:
        if self.is_full:
            raise ValueError(f"Registry already holds its target of {self.target_count} terms.")
        self._terms.append(term)
        self._touch()
        return len(self._terms) - 1

    @staticmethod
    def _merge(term: LinguisticTerm, partial: dict) -> LinguisticTerm:
        # Single components stay where they were typed; a full triple is ordered
        updated = term.replace(**partial)
        return updated.canonical() if "values" in partial else updated

    def append(self, term: LinguisticTerm) -> int:
        """Appends a term at the end of the scale and returns its position."""
        return self._push(term.canonical())

    def replace(self, index: int, **partial) -> LinguisticTerm:
        """
        Merges a partial update into the term at `index`.

        `left`, `middle` and `right` are stored as entered, so a triangle can
        be typed one component at a time; `tri` and `resolve` order them on
        use. A full `values` triple is stored in canonical order.

        Example:
        >>> registry.replace(0, name="Very low", right=-0.5)
        """
        if not 0 <= index < len(self._terms):
            raise IndexError(f"No term at position {index}; registry holds {len(self._terms)}.")
        updated = self._merge(self._terms[index], partial)
        self._terms[index] = updated
        self._touch()
        return updated

    def upsert_current(self, **partial) -> LinguisticTerm:
        """
        Applies a partial update to the term under edit, creating it from the
        placeholder shape when the current position is not populated yet.
        """
        if not self._terms and self.target_count > 0:
            self.current_index = 0
            self._push(self._merge(self._placeholder(), partial))
            return self._terms[0]
        if self.current_index >= len(self._terms) and not self.is_full:
            self.current_index = self._push(self._merge(self._placeholder(), partial))
            return self._terms[-1]
        return self.replace(self.current_index, **partial)

    def canonicalize_all(self):
        """Stores every complete term in canonical order, e.g. when the scale is finished."""
        for index, term in enumerate(self._terms):
            canonical = term.canonical()
            if canonical != term:
                self._terms[index] = canonical
                self._touch()

    def normalize(self, index: int | None = None, divisor: float | None = None) -> LinguisticTerm:
        """
        Divides a term's triangle by `divisor` (100 by default) and
        re-canonicalizes it, moving a 0-100 user scale into the 0-1 domain.
        """
        index = self.current_index if index is None else index
        if not 0 <= index < len(self._terms):
            raise IndexError(f"No term at position {index}; registry holds {len(self._terms)}.")
        term = self._terms[index]
        if not term.is_complete:
            raise ValueError(f"Term at position {index} is incomplete and cannot be normalized.")
        final_divisor = divisor if divisor is not None else configure_parameters.NORMALIZATION_DIVISOR
        return self.replace(index, values=term.tri.scale(final_divisor))

    def set_target_count(self, target_count: int):
        if target_count < len(self._terms):
            raise ValueError(f"Cannot shrink the target below the {len(self._terms)} terms already defined.")
        self.target_count = int(target_count)

    # --------------------------------------------------------------------------
    # Navigation
    # --------------------------------------------------------------------------

    def _seed_if_empty(self) -> bool:
        if self._terms:
            return False
        if self.target_count > 0:
            self._push(self._placeholder())
            self.current_index = 0
        return True

    def next(self) -> int:
        """
        Moves to the next term, cycling over populated positions. On the last
        term of an incomplete scale a new placeholder term is appended instead.
        """
        if self._seed_if_empty():
            return self.current_index
        if self.current_index == len(self._terms) - 1 and not self.is_full:
            self._push(self._placeholder())
            self.current_index += 1
            return self.current_index
        self.current_index = (self.current_index + 1) % len(self._terms)
        return self.current_index

    def previous(self) -> int:
        """Moves to the previous term, cycling over populated positions."""
        if self._seed_if_empty():
            return self.current_index
        n = len(self._terms)
        self.current_index = (self.current_index - 1 + n) % n
        return self.current_index

    def select(self, index: int) -> int:
        if not 0 <= index < len(self._terms):
            raise IndexError(f"No term at position {index}; registry holds {len(self._terms)}.")
        self.current_index = index
        return index
