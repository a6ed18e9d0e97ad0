from __future__ import annotations
import warnings
import numpy as np
from typing import Callable, Dict, List, Sequence, Tuple, Union, TYPE_CHECKING
from .config import configure_parameters
from .types import TrFN, Interval, available_methods

if TYPE_CHECKING:
    from .expansion import ExpansionResult
    from .registry import TermRegistry


AGGREGATION_REGISTRY: Dict[Tuple[str, str], Callable[[List[TrFN], float], Interval]] = {}

def register_aggregation_method(method_name: str, strategy: str = "default"):
    """
    A decorator to register how one alternative's row of trapezoids is
    combined into a single alpha-cut interval.
    """
    def decorator(func: Callable) -> Callable:
        if (method_name, strategy) in AGGREGATION_REGISTRY:
            print(f"Warning: Overwriting aggregation method '{method_name}' ({strategy})")
        AGGREGATION_REGISTRY[(method_name, strategy)] = func
        return func
    return decorator

def available_strategies(method_name: str) -> List[str]:
    return [strategy for (method, strategy) in AGGREGATION_REGISTRY if method == method_name]


def envelope(trapezoids: Sequence[TrFN]) -> TrFN:
    """
    The enclosing trapezoid of several fuzzy numbers:
    a = min(a), b = min(b), c = max(c), d = max(d).
    """
    if not trapezoids:
        raise ValueError("Cannot build the envelope of an empty list of trapezoids.")
    return TrFN(
        min(t.a for t in trapezoids),
        min(t.b for t in trapezoids),
        max(t.c for t in trapezoids),
        max(t.d for t in trapezoids),
    )


# ==============================================================================
# 1. TERM SETS TO TRAPEZOIDS
# ==============================================================================

class TrapezoidResult:
    """
    One trapezoidal fuzzy number per judgment cell.

    `neutral_cells` lists the (row, col) positions where no covered term
    resolved and the zero trapezoid was used instead; `dropped` lists
    (row, col, short_name) for every covered name that did not resolve.
    """

    def __init__(self, matrix: np.ndarray, neutral_cells: List[Tuple[int, int]],
                 dropped: List[Tuple[int, int, str]], alternatives: List[str], criteria: List[str]):
        self.matrix = matrix
        self.neutral_cells = neutral_cells
        self.dropped = dropped
        self.alternatives = list(alternatives)
        self.criteria = list(criteria)

    def __repr__(self) -> str:
        return f"TrapezoidResult(shape={self.shape}, neutral_cells={len(self.neutral_cells)})"

    def __getitem__(self, position: Tuple[int, int]) -> TrFN:
        return self.matrix[position]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TrapezoidResult):
            return self.shape == other.shape and self.rows() == other.rows()
        return False

    @property
    def shape(self) -> Tuple[int, int]:
        return self.matrix.shape

    @property
    def is_degraded(self) -> bool:
        return bool(self.neutral_cells or self.dropped)

    def row(self, index: int) -> List[TrFN]:
        return list(self.matrix[index, :])

    def rows(self) -> List[List[TrFN]]:
        return [self.row(i) for i in range(self.shape[0])]


def trapezoid_from_terms(short_names: Sequence[str], registry: TermRegistry) -> Tuple[TrFN | None, List[str]]:
    """
    Folds a set of covered terms into one enclosing trapezoid.

    The canonical triangles (l, m, u) of all resolvable terms give
    a = min(l), b = min(m), c = max(m), d = max(u).

    Returns:
        (trapezoid, dropped_names). The trapezoid is None when nothing resolved.
    """
    triangles, dropped = [], []
    for name in short_names:
        tri = registry.resolve(name)
        if tri is None:
            dropped.append(name)
        else:
            triangles.append(tri)
    if not triangles:
        return None, dropped
    return envelope([TrFN.from_tfn(t) for t in triangles]), dropped


def aggregate_to_trapezoids(
    interval_sets: Union[ExpansionResult, Sequence[Sequence[Sequence[str]]]],
    registry: TermRegistry
) -> TrapezoidResult:
    """
    Converts every expanded term set into a trapezoidal fuzzy number.

    Cells whose term set is empty, or whose terms all fail to resolve, get the
    zero trapezoid (0, 0, 0, 0). They are listed in `neutral_cells` and a
    UserWarning is emitted, since they pull scores towards the zero threshold.

    Args:
        interval_sets: An ExpansionResult, or nested rows of short-name lists.
        registry: The linguistic scale used to resolve short names.

    Returns:
        A TrapezoidResult with the same shape as the input.
    """
    from .expansion import ExpansionResult

    if isinstance(interval_sets, ExpansionResult):
        term_sets = interval_sets.term_sets
        alternatives, criteria = interval_sets.alternatives, interval_sets.criteria
    else:
        rows = [list(row) for row in interval_sets]
        if not rows or any(len(row) != len(rows[0]) for row in rows):
            raise ValueError("Interval term sets must form a non-empty rectangular matrix.")
        term_sets = np.empty((len(rows), len(rows[0])), dtype=object)
        for i, row in enumerate(rows):
            for j, names in enumerate(row):
                term_sets[i, j] = tuple(names)
        alternatives = [f"A{i + 1}" for i in range(term_sets.shape[0])]
        criteria = [f"C{j + 1}" for j in range(term_sets.shape[1])]

    n_rows, n_cols = term_sets.shape
    matrix = np.empty((n_rows, n_cols), dtype=object)
    neutral_cells: List[Tuple[int, int]] = []
    dropped: List[Tuple[int, int, str]] = []

    for i in range(n_rows):
        for j in range(n_cols):
            trapezoid, missing = trapezoid_from_terms(term_sets[i, j], registry)
            dropped.extend((i, j, name) for name in missing)
            if trapezoid is None:
                neutral_cells.append((i, j))
                trapezoid = TrFN.neutral_element()
            matrix[i, j] = trapezoid

    if neutral_cells:
        warnings.warn(
            f"{len(neutral_cells)} cell(s) had no resolvable terms and were replaced by the zero trapezoid: {neutral_cells}",
            UserWarning
        )

    return TrapezoidResult(matrix, neutral_cells, dropped, alternatives, criteria)


# ==============================================================================
# 2. PER-ALTERNATIVE AGGREGATION
# ==============================================================================

def aggregate_alternative(
    trapezoids: Sequence[TrFN],
    method: str,
    alpha: float,
    generalized_strategy: str | None = None
) -> Interval | None:
    """
    Combines one alternative's per-criterion trapezoids into a single interval.

    .. note::
        **On the generalized method:** two variants exist. 'envelope' (the
        default) alpha-cuts the min/min/max/max envelope of the row. 'average'
        alpha-cuts the component-wise mean trapezoid, which is the same as
        averaging the per-criterion alpha-cuts because the cut is linear.
        Pick the default through `DEFAULT_GENERALIZED_STRATEGY`.

    Args:
        trapezoids: The row of trapezoids (one per criterion).
        method: 'generalized', 'pessimistic' or 'optimistic'.
        alpha: Confidence level in [0, 1].
        generalized_strategy: 'envelope' or 'average'; ignored by the other methods.

    Returns:
        The final interval, or None if the row is empty.
    """
    if method not in available_methods():
        raise ValueError(f"Unknown aggregation method: '{method}'. Available methods: {list(available_methods())}")
    if not (0 <= alpha <= 1):
        raise ValueError("Alpha must be between 0 and 1.")
    if len(trapezoids) == 0:
        return None

    strategy = "default"
    if method == "generalized":
        strategy = generalized_strategy or configure_parameters.DEFAULT_GENERALIZED_STRATEGY

    aggregation_func = AGGREGATION_REGISTRY.get((method, strategy))
    if aggregation_func is None:
        raise ValueError(
            f"Unknown strategy '{strategy}' for method '{method}'. Available: {available_strategies(method)}"
        )
    return aggregation_func(list(trapezoids), alpha)


@register_aggregation_method("generalized", "envelope")
def _aggregate_generalized_envelope(trapezoids: List[TrFN], alpha: float) -> Interval:
    return envelope(trapezoids).alpha_cut(alpha)

@register_aggregation_method("generalized", "average")
def _aggregate_generalized_average(trapezoids: List[TrFN], alpha: float) -> Interval:
    components = np.array([t.to_tuple() for t in trapezoids], dtype=float)
    mean_trapezoid = TrFN(*components.mean(axis=0))
    return mean_trapezoid.alpha_cut(alpha)

@register_aggregation_method("pessimistic")
def _aggregate_pessimistic(trapezoids: List[TrFN], alpha: float) -> Interval:
    cuts = [t.alpha_cut(alpha) for t in trapezoids]
    return Interval(min(c.l for c in cuts), min(c.r for c in cuts))

@register_aggregation_method("optimistic")
def _aggregate_optimistic(trapezoids: List[TrFN], alpha: float) -> Interval:
    cuts = [t.alpha_cut(alpha) for t in trapezoids]
    return Interval(max(c.l for c in cuts), max(c.r for c in cuts))
