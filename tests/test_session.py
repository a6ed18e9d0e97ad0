"""
===================================================================
Tests for the Evaluation Session
===================================================================

Covers the stage machine: setup gating, matrix freezing, cache
invalidation when parameters change and idempotent reruns.
"""

import pytest

from linguaRank.config import ConfigurationContextManager
from linguaRank.outcomes import Refused
from linguaRank.registry import TermRegistry
from linguaRank.session import EvaluationSession, Stage
from linguaRank.types import LinguisticTerm, TrFN, Interval


def test_new_session_is_in_setup(scale):
    session = EvaluationSession(scale)
    assert session.stage == Stage.SETUP
    assert session.matrix is None
    assert session.alpha == 0.5
    assert session.method == "generalized"

def test_alpha_default_from_configuration(scale):
    with ConfigurationContextManager(DEFAULT_ALPHA=0.8):
        assert EvaluationSession(scale).alpha == 0.8

def test_invalid_constructor_arguments(scale):
    with pytest.raises(ValueError):
        EvaluationSession(scale, alpha=1.5)
    with pytest.raises(ValueError):
        EvaluationSession(scale, method="median")
    with pytest.raises(ValueError):
        EvaluationSession(scale, formula="coin_flip")
    with pytest.raises(ValueError):
        EvaluationSession(scale, generalized_strategy="median")

# --- Setup stage ---

def test_set_cell_refused_during_setup(scale):
    session = EvaluationSession(scale)
    assert session.set_cell(0, 0, "L", "H") == Refused("setup_not_finished")
    assert session.transform_to_intervals() == Refused("setup_not_finished")

def test_finish_setup_refused_with_invalid_terms():
    registry = TermRegistry(2, [LinguisticTerm("Low", "L", (-1, -0.5, 0)), LinguisticTerm("Lo", "", (0, 0, 0))])
    session = EvaluationSession(registry)
    outcome = session.finish_setup(2, 2)
    assert outcome == Refused("terms_invalid")
    assert "Term 2" in outcome.message
    assert session.stage == Stage.SETUP

def test_finish_setup_refused_without_terms():
    session = EvaluationSession(TermRegistry(3))
    assert session.finish_setup(2, 2) == Refused("terms_invalid")

def test_finish_setup_uses_defaults(scale):
    session = EvaluationSession(scale)
    matrix = session.finish_setup()
    assert matrix.shape == (3, 3)
    assert session.stage == Stage.AWAITING_JUDGMENTS
    assert session.finish_setup() == Refused("setup_already_finished")

def test_finish_setup_takes_dimensions_from_names(scale):
    session = EvaluationSession(scale)
    matrix = session.finish_setup(alternatives=["X", "Y"], criteria=["Only"])
    assert matrix.shape == (2, 1)

# --- Pipeline ---

def test_refusals_before_prerequisites(scale):
    session = EvaluationSession(scale)
    session.finish_setup(1, 2)
    session.set_cell(0, 0, "L", "H")
    assert session.transform_to_intervals() == Refused("not_all_cells_filled")
    assert session.transform_to_trapezoids() == Refused("intervals_not_ready")
    assert session.calculate() == Refused("trapezoid_stage_not_reached")
    assert session.stage == Stage.AWAITING_JUDGMENTS

def test_full_run(session):
    result = session.run()
    assert session.stage == Stage.SCORED
    assert [w.alternative for w in result.winners] == ["Gamma"]
    assert session.best_probability == pytest.approx(0.8)
    assert session.get_rankings()[0][0] == "Gamma"
    assert len(session.results) == 3

def test_step_by_step(session):
    intervals = session.transform_to_intervals()
    assert session.stage == Stage.INTERVALS_EXPANDED
    assert intervals[0, 0] == ("L", "M", "H")

    trapezoids = session.transform_to_trapezoids()
    assert session.stage == Stage.TRAPEZOIDS_AGGREGATED
    assert trapezoids[0, 0] == TrFN(-1, -0.5, 0.5, 1)

    result = session.calculate()
    assert session.stage == Stage.SCORED
    assert result.get("Alpha").interval == Interval(-0.75, 1.0)

def test_matrix_is_frozen_after_expansion(session):
    session.transform_to_intervals()
    assert session.set_cell(0, 0, "M", "M") == Refused("matrix_frozen")
    assert session.matrix.get(0, 0).from_term == "L"

def test_rerun_keeps_downstream_results(session):
    session.run()
    scoring = session.scoring
    trapezoids = session.trapezoids
    session.transform_to_intervals()
    assert session.stage == Stage.SCORED
    assert session.scoring is scoring
    session.transform_to_trapezoids()
    assert session.trapezoids is trapezoids
    assert session.scoring is scoring

def test_set_method_clears_scores_only(session):
    session.run()
    session.set_method("optimistic")
    assert session.scoring is None
    assert session.trapezoids is not None
    assert session.stage == Stage.SCORED
    with pytest.raises(RuntimeError):
        session.get_rankings()
    result = session.calculate()
    assert [w.alternative for w in result.winners] == ["Alpha", "Gamma"]

def test_set_method_before_scoring_keeps_stage(session):
    session.set_method("pessimistic")
    assert session.stage == Stage.AWAITING_JUDGMENTS

def test_set_alpha(session):
    session.run()
    session.set_alpha(1.0)
    assert session.scoring is None
    assert session.calculate().alpha == 1.0
    with pytest.raises(ValueError):
        session.set_alpha(1.2)
    session.set_alpha(1.2, clamp=True)
    assert session.alpha == 1.0
    session.set_alpha(-3, clamp=True)
    assert session.alpha == 0.0

def test_set_formula_and_strategy(session):
    session.run()
    session.set_formula("unit_reference")
    assert session.scoring is None
    assert session.calculate().formula == "unit_reference"
    session.set_generalized_strategy("average")
    assert session.calculate().generalized_strategy == "average"

def test_set_registry_unfreezes_matrix(session, scale):
    session.run()
    session.set_registry(scale)
    assert session.stage == Stage.AWAITING_JUDGMENTS
    assert session.intervals is None
    assert session.trapezoids is None
    assert session.scoring is None
    assert session.set_cell(0, 0, "M", "M").kind == "crisp"

def test_reset(session):
    session.run()
    session.reset()
    assert session.stage == Stage.SETUP
    assert session.matrix is None
    assert len(session.registry) == 0
    assert session.method == "generalized"

def test_get_rankings_before_scoring_raises(session):
    with pytest.raises(RuntimeError):
        session.get_rankings()

# --- Display ---

def test_cell_text_follows_stage(session):
    assert session.cell_text(0, 0) == "within L and H"
    assert session.cell_text(0, 2) == "over M"
    assert session.cell_text(1, 0) == "less L"
    session.transform_to_intervals()
    assert session.cell_text(0, 0) == "L, M, H"
    session.transform_to_trapezoids()
    assert session.cell_text(0, 0) == "-1.00; -0.50; 0.50; 1.00"

def test_cell_text_without_matrix(scale):
    assert EvaluationSession(scale).cell_text(0, 0) == ""

def test_degraded_judgment_flows_through(scale):
    session = EvaluationSession(scale)
    session.finish_setup(1, 2)
    session.set_cell(0, 0, "H", "H")
    session.set_cell(0, 1, "Q", "Q")
    with pytest.warns(UserWarning):
        session.run()
    assert session.intervals.unresolved == [(0, 1, "Q")]
    assert session.trapezoids.neutral_cells == [(0, 1)]
    assert session.trapezoids[0, 1] == TrFN(0, 0, 0, 0)

# --- Scale edits after setup ---

def test_finish_setup_orders_raw_terms(scale):
    scale.replace(3, left=2.0)
    session = EvaluationSession(scale)
    session.finish_setup(1, 1)
    assert session.registry[3].values == (0.5, 1.0, 2.0)

def test_in_place_term_edit_drops_derived_results(session):
    session.run()
    session.registry.replace(4, values=(-1.0, -0.9, -0.8))
    assert session.trapezoids is None
    assert session.scoring is None
    assert session.stage == Stage.AWAITING_JUDGMENTS
    assert session.calculate() == Refused("trapezoid_stage_not_reached")

    session.run()
    assert session.trapezoids[2, 0] == TrFN(-1.0, -0.9, -0.9, -0.8)
    assert session.scoring.get("Gamma").probability != pytest.approx(0.8)

def test_in_place_edit_unfreezes_matrix(session):
    session.run()
    session.registry.replace(0, name="Lowest")
    assert session.set_cell(0, 0, "M", "M").kind == "crisp"

def test_invalid_in_place_edit_is_refused(session):
    session.run()
    session.registry.replace(1, short_name="")
    outcome = session.transform_to_intervals()
    assert outcome == Refused("terms_invalid")
    assert "Term 2" in outcome.message
    assert session.intervals is None

def test_set_registry_rejects_invalid_scale_after_setup(session, scale):
    result = session.run()
    outcome = session.set_registry(TermRegistry(2))
    assert outcome == Refused("terms_invalid")
    assert session.registry is scale
    assert session.scoring is result
    assert session.stage == Stage.SCORED

def test_set_registry_accepts_any_scale_during_setup(scale):
    session = EvaluationSession(scale)
    empty = TermRegistry(2)
    assert session.set_registry(empty) is empty
    assert session.stage == Stage.SETUP
