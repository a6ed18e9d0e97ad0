from __future__ import annotations
import math
import numpy as np
from typing import Iterable, Iterator, Literal, Sequence, Tuple, Union, get_args


AggregationMethod = Literal["generalized", "pessimistic", "optimistic"]

Triple = Tuple[float, float, float]


def available_methods() -> Tuple[str, ...]:
    """Returns the names of the per-alternative aggregation methods."""
    return get_args(AggregationMethod)


def is_complete(values: Iterable[float]) -> bool:
    """True when every component is a finite number."""
    try:
        return all(math.isfinite(float(v)) for v in values)
    except (TypeError, ValueError):
        return False


# ==============================================================================
# 1. CANONICALIZATION
# ==============================================================================

def canonicalize(triple: Union[TFN, Sequence[float]]) -> TFN:
    """
    Orders an arbitrary (left, middle, right) triple into a valid TFN.

    The smallest value becomes the left bound, the largest the right bound and
    the remaining one the peak. The result is a permutation of the input, so
    canonicalizing twice gives the same number.

    Args:
        triple: Three finite numbers in any order, or an existing TFN.

    Returns:
        A TFN with l <= m <= u.

    Raises:
        ValueError: If the triple does not have three finite components.
    """
    values = triple.to_tuple() if isinstance(triple, TFN) else tuple(triple)
    if len(values) != 3:
        raise ValueError(f"A triangular number needs exactly 3 values, got {len(values)}.")
    if not is_complete(values):
        raise ValueError(f"Cannot canonicalize an incomplete triple: {values}")
    l, m, u = sorted(float(v) for v in values)
    return TFN(l, m, u)


# ==============================================================================
# 2. FUZZY NUMBERS
# ==============================================================================

class TFN:
    """
    Triangular Fuzzy Number (TFN) class.
    A TFN is represented as (l, m, u) where l ≤ m ≤ u.
    l: lower bound, m: middle value, u: upper bound
    """

    def __init__(self, l, m, u):
        """Initialize a triangular fuzzy number."""
        if not (l <= m <= u):
            raise ValueError("TFN values must satisfy l <= m <= u")
        self.l = float(l)
        self.m = float(m)
        self.u = float(u)

    def __repr__(self):
        """String representation of the TFN."""
        return f"TFN({self.l:.4f}, {self.m:.4f}, {self.u:.4f})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TFN):
            return self.l == other.l and self.m == other.m and self.u == other.u
        return False

    def __iter__(self) -> Iterator[float]:
        return iter(self.to_tuple())

    @classmethod
    def from_unordered(cls, left: float, middle: float, right: float) -> TFN:
        """Builds a TFN from three values that are not required to be sorted."""
        return canonicalize((left, middle, right))

    @staticmethod
    def neutral_element() -> TFN:
        return TFN(0.0, 0.0, 0.0)

    @property
    def is_degenerate(self) -> bool:
        """A TFN with l == m == u carries no fuzziness."""
        return self.l == self.m == self.u

    def to_tuple(self) -> Triple:
        return (self.l, self.m, self.u)

    def to_array(self):
        """Convert to NumPy array."""
        return np.array([self.l, self.m, self.u])

    def scale(self, divisor: float) -> TFN:
        """Divides every component by `divisor` and re-canonicalizes."""
        if divisor == 0:
            raise ZeroDivisionError("Cannot scale a TFN by zero.")
        return canonicalize((self.l / divisor, self.m / divisor, self.u / divisor))

    def membership(self, x: float) -> float:
        """
        Membership degree of `x`. A vertical side (l == m or m == u) keeps
        full membership at the peak.
        """
        if x < self.l or x > self.u:
            return 0.0
        if x == self.m:
            return 1.0
        if x < self.m:
            return (x - self.l) / ((self.m - self.l) or 1.0)
        return (self.u - x) / ((self.u - self.m) or 1.0)

    def alpha_cut(self, alpha: float) -> Interval:
        return TrFN.from_tfn(self).alpha_cut(alpha)


class TrFN:
    """
    Implementation of a Trapezoidal Fuzzy Number (a, b, c, d).
    """

    def __init__(self, a: float, b: float, c: float, d: float):
        if not a <= b <= c <= d:
            raise ValueError(f"TrFN values must be in order a<=b<=c<=d, but got a={a}, b={b}, c={c}, d={d}")
        self.a, self.b, self.c, self.d = float(a), float(b), float(c), float(d)

    def __repr__(self) -> str:
        return f"TrFN({self.a:.4f}, {self.b:.4f}, {self.c:.4f}, {self.d:.4f})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TrFN):
            return self.a == other.a and self.b == other.b and self.c == other.c and self.d == other.d
        return False

    def __iter__(self) -> Iterator[float]:
        return iter(self.to_tuple())

    @staticmethod
    def neutral_element() -> TrFN:
        return TrFN(0.0, 0.0, 0.0, 0.0)

    @staticmethod
    def from_tfn(tfn: TFN) -> TrFN:
        """Converts a TFN to a degenerate TrFN."""
        return TrFN(tfn.l, tfn.m, tfn.m, tfn.u)

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.a, self.b, self.c, self.d)

    def format(self, decimals: int = 2) -> str:
        """Renders the trapezoid as 'a; b; c; d' for table cells."""
        return "; ".join(f"{v:.{decimals}f}" for v in self.to_tuple())

    def alpha_cut(self, alpha: float) -> Interval:
        """
        Returns the crisp interval [l, r] of values with membership >= alpha.
        At alpha=0 this is the support [a, d], at alpha=1 the core [b, c].
        """
        if not (0 <= alpha <= 1): raise ValueError("Alpha must be between 0 and 1.")
        lower = alpha * self.b + (1 - alpha) * self.a
        upper = alpha * self.c + (1 - alpha) * self.d
        return Interval(lower, upper)


class Interval:
    """A crisp alpha-cut interval [l, r]."""

    def __init__(self, l: float, r: float):
        self.l = float(l)
        self.r = float(r)

    def __repr__(self) -> str:
        return f"Interval({self.l:.4f}, {self.r:.4f})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Interval):
            return self.l == other.l and self.r == other.r
        return False

    def __iter__(self) -> Iterator[float]:
        return iter((self.l, self.r))

    @property
    def width(self) -> float:
        return self.r - self.l

    @property
    def midpoint(self) -> float:
        return (self.l + self.r) / 2.0


# ==============================================================================
# 3. LINGUISTIC TERMS
# ==============================================================================

class LinguisticTerm:
    """
    A named qualitative value (e.g. "High") backed by a triangular fuzzy number.

    `values` holds the (left, middle, right) entry as typed. While a term is
    being edited the entry may be incomplete (NaN components); `tri` is only
    available once all three components are finite.
    """

    def __init__(self, name: str = "", short_name: str = "", values: Union[TFN, Sequence[float], None] = None):
        self.name = name or ""
        self.short_name = short_name or ""
        if values is None:
            values = (math.nan, math.nan, math.nan)
        elif isinstance(values, TFN):
            values = values.to_tuple()
        values = tuple(float(v) for v in values)
        if len(values) != 3:
            raise ValueError(f"A linguistic term needs exactly 3 values, got {len(values)}.")
        self.values: Triple = values

    def __repr__(self) -> str:
        l, m, u = self.values
        return f"LinguisticTerm(name='{self.name}', short_name='{self.short_name}', values=({l}, {m}, {u}))"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinguisticTerm):
            return False
        # NaN != NaN, so incomplete entries compare by their string form
        return (self.name == other.name and self.short_name == other.short_name
                and [repr(v) for v in self.values] == [repr(v) for v in other.values])

    @property
    def is_complete(self) -> bool:
        return is_complete(self.values)

    @property
    def is_degenerate(self) -> bool:
        l, m, u = self.values
        return self.is_complete and l == m == u

    @property
    def tri(self) -> TFN:
        """The canonical triangular number behind this term."""
        return canonicalize(self.values)

    def replace(self, **changes) -> LinguisticTerm:
        """
        Returns a copy with the given fields changed.

        Accepts `name`, `short_name`, `values` and the single components
        `left`, `middle`, `right`.
        """
        unknown = set(changes) - {"name", "short_name", "values", "left", "middle", "right"}
        if unknown:
            raise TypeError(f"Unknown linguistic term field(s): {sorted(unknown)}")
        values = list(changes.get("values", self.values))
        for position, key in enumerate(("left", "middle", "right")):
            if key in changes:
                values[position] = changes[key]
        return LinguisticTerm(
            name=changes.get("name", self.name),
            short_name=changes.get("short_name", self.short_name),
            values=values,
        )

    def canonical(self) -> LinguisticTerm:
        """Returns the term with its values sorted, when they are complete."""
        if not self.is_complete:
            return self
        return LinguisticTerm(self.name, self.short_name, self.tri)
