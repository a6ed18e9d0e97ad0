import pytest

from linguaRank.config import ConfigurationContextManager
from linguaRank.registry import TermRegistry
from linguaRank.types import TFN, LinguisticTerm


def test_from_definitions_preserves_order(scale):
    assert scale.short_names == ["VL", "L", "M", "H", "VH"]
    assert len(scale) == 5
    assert scale.is_full

def test_terms_are_stored_canonically():
    registry = TermRegistry(1, [LinguisticTerm("High", "H", (1, 0, 0.5))])
    assert registry[0].values == (0.0, 0.5, 1.0)

def test_index_of_and_resolve(scale):
    assert scale.index_of("M") == 2
    assert scale.index_of("X") is None
    assert scale.index_of("") is None
    assert scale.resolve("H") == TFN(0, 0.5, 1)
    assert scale.resolve("X") is None

def test_resolve_ignores_incomplete_terms():
    registry = TermRegistry(2)
    registry.append(LinguisticTerm("Draft", "D"))
    assert registry.index_of("D") == 0
    assert registry.resolve("D") is None

def test_duplicate_short_names_resolve_to_first_occurrence():
    registry = TermRegistry(2, [LinguisticTerm("Low", "X", (-1, -0.5, 0)), LinguisticTerm("High", "X", (0, 0.5, 1))])
    assert registry.index_of("X") == 0

def test_slice_is_inclusive(scale):
    assert scale.slice(1, 3) == ["L", "M", "H"]
    assert scale.slice(4, 4) == ["VH"]

def test_append_beyond_target_raises(scale):
    with pytest.raises(ValueError):
        scale.append(LinguisticTerm("Extreme", "EX", (1, 1, 2)))

def test_negative_target_is_rejected():
    with pytest.raises(ValueError):
        TermRegistry(-1)

def test_default_target_comes_from_configuration():
    with ConfigurationContextManager(DEFAULT_NUM_TERMS=7):
        assert TermRegistry().target_count == 7

def test_replace_merges_partial_update(scale):
    updated = scale.replace(2, name="Neutral", right=0.25)
    assert updated.name == "Neutral"
    assert scale[2].values == (-0.5, 0.0, 0.25)
    assert scale.short_names[2] == "M"

def test_replace_keeps_single_components_as_entered(scale):
    scale.replace(3, left=2.0)
    assert scale[3].values == (2.0, 0.5, 1.0)
    assert scale[3].tri == TFN(0.5, 1.0, 2.0)
    assert scale.resolve("H") == TFN(0.5, 1.0, 2.0)

def test_components_typed_one_at_a_time():
    registry = TermRegistry(1)
    registry.upsert_current(name="Very High", short_name="VH")
    registry.upsert_current(left=0.6)
    registry.upsert_current(middle=0.8)
    registry.upsert_current(right=1.0)
    assert registry[0].values == (0.6, 0.8, 1.0)

def test_replace_with_full_triple_is_ordered(scale):
    scale.replace(3, values=(1.0, 0.0, 0.5))
    assert scale[3].values == (0.0, 0.5, 1.0)

def test_canonicalize_all_orders_raw_terms(scale):
    scale.replace(3, left=2.0)
    scale.canonicalize_all()
    assert scale[3].values == (0.5, 1.0, 2.0)
    assert scale[0].values == (-1.0, -1.0, -0.5)

def test_revision_counts_changes():
    registry = TermRegistry(2)
    assert registry.revision == 0
    registry.append(LinguisticTerm("Low", "L", (-1, -0.5, 0)))
    registry.replace(0, name="Lower")
    assert registry.revision == 2
    registry.canonicalize_all()
    assert registry.revision == 2
    registry.select(0)
    assert registry.revision == 2

def test_replace_out_of_range_raises(scale):
    with pytest.raises(IndexError):
        scale.replace(5, name="Nope")

def test_upsert_current_seeds_placeholder():
    registry = TermRegistry(3)
    term = registry.upsert_current(name="Low")
    assert len(registry) == 1
    assert term.name == "Low"
    assert term.values == (-0.5, 0.0, 0.5)

def test_upsert_current_updates_existing_term(scale):
    scale.select(1)
    scale.upsert_current(short_name="Lo")
    assert scale.short_names[1] == "Lo"
    assert len(scale) == 5

def test_normalize_divides_by_hundred():
    registry = TermRegistry(1, [LinguisticTerm("High", "H", (50, 75, 100))])
    registry.normalize(0)
    assert registry[0].values == (0.5, 0.75, 1.0)

def test_normalize_incomplete_term_raises():
    registry = TermRegistry(1, [LinguisticTerm("Draft", "D")])
    with pytest.raises(ValueError):
        registry.normalize(0)

def test_next_appends_until_target_then_cycles():
    registry = TermRegistry(2)
    assert registry.next() == 0
    assert len(registry) == 1
    assert registry.next() == 1
    assert len(registry) == 2
    assert registry.next() == 0
    assert len(registry) == 2

def test_previous_cycles(scale):
    assert scale.current_index == 0
    assert scale.previous() == 4
    assert scale.previous() == 3

def test_current_on_empty_registry_is_blank():
    registry = TermRegistry(3)
    assert registry.current == LinguisticTerm()

def test_select_out_of_range_raises(scale):
    with pytest.raises(IndexError):
        scale.select(9)

def test_set_target_count_cannot_shrink_below_terms(scale):
    with pytest.raises(ValueError):
        scale.set_target_count(3)
    scale.set_target_count(6)
    assert not scale.is_full
