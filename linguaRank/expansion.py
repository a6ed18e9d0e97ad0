from __future__ import annotations
import warnings
import numpy as np
from typing import Callable, Dict, List, Tuple, TYPE_CHECKING
from .outcomes import Refused

if TYPE_CHECKING:
    from .judgments import JudgmentCell, JudgmentMatrix
    from .registry import TermRegistry


# A rule maps one judgment to (covered short names, unresolved references)
ExpansionRule = Callable[['JudgmentCell', 'TermRegistry'], Tuple[List[str], List[str]]]

EXPANSION_REGISTRY: Dict[str, ExpansionRule] = {}

def register_expansion_rule(kind: str):
    """A decorator to register how a judgment kind expands into terms."""
    def decorator(func: ExpansionRule) -> ExpansionRule:
        if kind in EXPANSION_REGISTRY:
            print(f"Warning: Overwriting expansion rule '{kind}'")
        EXPANSION_REGISTRY[kind] = func
        return func
    return decorator


class ExpansionResult:
    """
    The expanded term sets of a judgment matrix.

    `term_sets[i, j]` is a tuple of short names: a contiguous slice of the
    registry order covering everything the judgment of cell (i, j) admits.
    `unresolved` lists (row, col, short_name) for references that were not
    found in the registry and were left out.
    """

    def __init__(self, term_sets: np.ndarray, unresolved: List[Tuple[int, int, str]],
                 alternatives: List[str], criteria: List[str]):
        self.term_sets = term_sets
        self.unresolved = unresolved
        self.alternatives = list(alternatives)
        self.criteria = list(criteria)

    def __repr__(self) -> str:
        return f"ExpansionResult(shape={self.shape}, unresolved={len(self.unresolved)})"

    def __getitem__(self, position: Tuple[int, int]) -> Tuple[str, ...]:
        return self.term_sets[position]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ExpansionResult):
            return self.to_lists() == other.to_lists() and self.unresolved == other.unresolved
        return False

    @property
    def shape(self) -> Tuple[int, int]:
        return self.term_sets.shape

    @property
    def is_degraded(self) -> bool:
        return bool(self.unresolved)

    def to_lists(self) -> List[List[List[str]]]:
        rows, cols = self.shape
        return [[list(self.term_sets[i, j]) for j in range(cols)] for i in range(rows)]


# ==============================================================================
# EXPANSION RULES
# ==============================================================================

def _unresolved(registry: TermRegistry, *refs: str) -> List[str]:
    return [ref for ref in refs if registry.index_of(ref) is None]

@register_expansion_rule("crisp")
def _expand_crisp(cell: JudgmentCell, registry: TermRegistry) -> Tuple[List[str], List[str]]:
    missing = _unresolved(registry, cell.from_term)
    return ([] if missing else [cell.from_term]), missing

@register_expansion_rule("within")
def _expand_within(cell: JudgmentCell, registry: TermRegistry) -> Tuple[List[str], List[str]]:
    missing = _unresolved(registry, cell.from_term, cell.to_term)
    if missing:
        return [], missing
    start = registry.index_of(cell.from_term)
    end = registry.index_of(cell.to_term)
    # Order in the judgment does not matter, only registry position
    return registry.slice(min(start, end), max(start, end)), []

@register_expansion_rule("at_least")
def _expand_at_least(cell: JudgmentCell, registry: TermRegistry) -> Tuple[List[str], List[str]]:
    start = registry.index_of(cell.from_term)
    if start is None:
        return [], [cell.from_term]
    return registry.slice(start, len(registry) - 1), []

@register_expansion_rule("at_most")
def _expand_at_most(cell: JudgmentCell, registry: TermRegistry) -> Tuple[List[str], List[str]]:
    end = registry.index_of(cell.to_term)
    if end is None:
        return [], [cell.to_term]
    return registry.slice(0, end), []

@register_expansion_rule("unfilled")
def _expand_unfilled(cell: JudgmentCell, registry: TermRegistry) -> Tuple[List[str], List[str]]:
    return [], []


def expand_cell(cell: JudgmentCell, registry: TermRegistry) -> Tuple[List[str], List[str]]:
    """Expands a single judgment into the short names it covers."""
    rule = EXPANSION_REGISTRY.get(cell.kind)
    if rule is None:
        raise ValueError(f"No expansion rule for judgment kind '{cell.kind}'. Available: {list(EXPANSION_REGISTRY.keys())}")
    return rule(cell, registry)


def expand_to_intervals(matrix: JudgmentMatrix, registry: TermRegistry) -> ExpansionResult | Refused:
    """
    Maps every judgment cell to the ordered subsequence of the scale it covers.

    - crisp ("H"): [H]
    - within ("L" .. "H"): the registry slice between both, inclusive
    - at least ("M"): from M to the end of the scale
    - at most ("M"): from the start of the scale to M

    The operation is refused, without touching its inputs, when a cell is
    unfilled or no terms are defined. References that do not resolve produce
    an empty term set and are reported in `ExpansionResult.unresolved`.

    Args:
        matrix: The judgment matrix.
        registry: The linguistic scale giving the term order.

    Returns:
        An ExpansionResult, or a Refused outcome.
    """
    if not matrix.all_filled():
        return Refused("not_all_cells_filled")
    if len(registry) == 0:
        return Refused("terms_not_defined")

    term_sets = np.empty(matrix.shape, dtype=object)
    unresolved: List[Tuple[int, int, str]] = []

    for i, j in matrix.positions():
        covered, missing = expand_cell(matrix.get(i, j), registry)
        term_sets[i, j] = tuple(covered)
        unresolved.extend((i, j, ref) for ref in missing)

    if unresolved:
        refs = sorted({ref for _, _, ref in unresolved})
        warnings.warn(
            f"{len(unresolved)} judgment reference(s) could not be resolved and were left out of the expanded term sets: {refs}",
            UserWarning
        )

    return ExpansionResult(term_sets, unresolved, matrix.alternatives, matrix.criteria)
