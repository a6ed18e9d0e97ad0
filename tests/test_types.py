"""
===================================================================
Tests for the Types Module
===================================================================

Unit tests for canonicalization, the triangular and trapezoidal fuzzy
numbers, alpha-cut intervals and linguistic terms.
"""

import itertools
import math
import pytest
import numpy as np

from linguaRank.types import (
    TFN, TrFN, Interval, LinguisticTerm, canonicalize, is_complete, available_methods
)

# ==============================================================================
# Tests for canonicalize
# ==============================================================================

def test_canonicalize_sorts_components():
    assert canonicalize((0.5, -1.0, 0.0)) == TFN(-1.0, 0.0, 0.5)

def test_canonicalize_is_idempotent():
    once = canonicalize((3, 1, 2))
    assert canonicalize(once) == once

@pytest.mark.parametrize("triple", list(itertools.permutations((-0.2, 0.4, 0.9))))
def test_canonicalize_result_is_a_permutation(triple):
    result = canonicalize(triple)
    assert sorted(result.to_tuple()) == sorted(triple)
    assert result.l <= result.m <= result.u

def test_canonicalize_rejects_incomplete_triples():
    with pytest.raises(ValueError):
        canonicalize((0.0, math.nan, 1.0))
    with pytest.raises(ValueError, match="exactly 3 values"):
        canonicalize((0.0, 1.0))

def test_is_complete():
    assert is_complete((1, 2, 3))
    assert not is_complete((1, math.inf, 3))
    assert not is_complete((1, None, 3))

def test_available_methods():
    assert available_methods() == ("generalized", "pessimistic", "optimistic")

# ==============================================================================
# Tests for TFN Class
# ==============================================================================

def test_tfn_initialization():
    """Test that invalid TFN values raise an error."""
    with pytest.raises(ValueError, match="TFN values must satisfy l <= m <= u"):
        TFN(5, 2, 3)

def test_tfn_from_unordered():
    assert TFN.from_unordered(1, 0, -1) == TFN(-1, 0, 1)

def test_tfn_scale_divides_and_recanonicalizes():
    assert TFN(10, 50, 100).scale(100) == TFN(0.1, 0.5, 1.0)
    assert TFN(-100, 0, 50).scale(-100) == TFN(-0.5, 0.0, 1.0)
    with pytest.raises(ZeroDivisionError):
        TFN(0, 1, 2).scale(0)

def test_tfn_membership():
    tfn = TFN(0, 0.5, 1)
    assert tfn.membership(-0.1) == 0.0
    assert tfn.membership(0.5) == 1.0
    assert tfn.membership(0.25) == pytest.approx(0.5)
    assert tfn.membership(0.75) == pytest.approx(0.5)
    assert tfn.membership(1.5) == 0.0

def test_tfn_membership_with_vertical_side():
    """A shoulder term keeps full membership at its peak."""
    tfn = TFN(-1, -1, -0.5)
    assert tfn.membership(-1) == 1.0
    assert tfn.membership(-0.75) == pytest.approx(0.5)

def test_tfn_to_array_and_iteration():
    tfn = TFN(1, 2, 3)
    np.testing.assert_array_equal(tfn.to_array(), np.array([1.0, 2.0, 3.0]))
    assert list(tfn) == [1.0, 2.0, 3.0]
    assert TFN.neutral_element().is_degenerate

# ==============================================================================
# Tests for TrFN Class
# ==============================================================================

def test_trfn_initialization():
    with pytest.raises(ValueError):
        TrFN(1, 0, 2, 3)

def test_trfn_from_tfn():
    assert TrFN.from_tfn(TFN(-1, 0, 1)) == TrFN(-1, 0, 0, 1)

def test_trfn_format():
    assert TrFN(-1, -0.5, 0.5, 1).format() == "-1.00; -0.50; 0.50; 1.00"
    assert TrFN(0, 1/3, 2/3, 1).format(3) == "0.000; 0.333; 0.667; 1.000"

def test_alpha_cut_boundaries():
    """At alpha=0 the cut is the support, at alpha=1 the core."""
    trapezoid = TrFN(-1, -0.5, 0.5, 1)
    assert trapezoid.alpha_cut(0) == Interval(-1, 1)
    assert trapezoid.alpha_cut(1) == Interval(-0.5, 0.5)
    assert trapezoid.alpha_cut(0.5) == Interval(-0.75, 0.75)

def test_alpha_cut_rejects_out_of_range_alpha():
    with pytest.raises(ValueError, match="Alpha must be between 0 and 1."):
        TrFN(0, 0, 0, 0).alpha_cut(1.5)

def test_tfn_alpha_cut_goes_through_trapezoid():
    assert TFN(0, 0.5, 1).alpha_cut(0.5) == Interval(0.25, 0.75)

def test_interval_properties():
    interval = Interval(-0.75, 0.25)
    assert interval.width == pytest.approx(1.0)
    assert interval.midpoint == pytest.approx(-0.25)

# ==============================================================================
# Tests for LinguisticTerm Class
# ==============================================================================

def test_blank_term_is_incomplete():
    term = LinguisticTerm()
    assert not term.is_complete
    assert term == LinguisticTerm()
    with pytest.raises(ValueError):
        term.tri

def test_term_tri_is_canonical():
    term = LinguisticTerm("High", "H", (1.0, 0.0, 0.5))
    assert term.values == (1.0, 0.0, 0.5)
    assert term.tri == TFN(0.0, 0.5, 1.0)
    assert term.canonical().values == (0.0, 0.5, 1.0)

def test_term_replace_merges_components():
    term = LinguisticTerm("Medium", "M", (-0.5, 0.0, 0.5))
    updated = term.replace(name="Middle", right=0.75)
    assert updated.name == "Middle"
    assert updated.short_name == "M"
    assert updated.values == (-0.5, 0.0, 0.75)
    assert term.values == (-0.5, 0.0, 0.5)

def test_term_replace_rejects_unknown_fields():
    with pytest.raises(TypeError):
        LinguisticTerm().replace(colour="red")

def test_term_is_degenerate():
    assert LinguisticTerm("Zero", "Z", (0, 0, 0)).is_degenerate
    assert not LinguisticTerm().is_degenerate
