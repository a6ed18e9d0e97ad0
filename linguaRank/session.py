from __future__ import annotations
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING
from .aggregation import TrapezoidResult, aggregate_to_trapezoids, available_strategies
from .config import configure_parameters
from .expansion import ExpansionResult, expand_to_intervals
from .judgments import JudgmentCell, JudgmentMatrix
from .outcomes import Refused
from .registry import TermRegistry
from .scoring import ScoringResult, available_formulas, score
from .types import available_methods
from .validation import Validation

if TYPE_CHECKING:
    import pandas as pd
    import matplotlib.pyplot as plt


class Stage(IntEnum):
    SETUP = 0
    AWAITING_JUDGMENTS = 1
    INTERVALS_EXPANDED = 2
    TRAPEZOIDS_AGGREGATED = 3
    SCORED = 4


class EvaluationSession:
    """
    One decision analysis from scale definition to ranked alternatives.

    The session owns the linguistic scale, the judgment matrix, the chosen
    alpha level and aggregation method, and every artifact derived from them.
    It moves forward through the stages

        SETUP -> AWAITING_JUDGMENTS -> INTERVALS_EXPANDED
              -> TRAPEZOIDS_AGGREGATED -> SCORED

    Each step clears everything downstream of it before storing its own
    result, so stale derived data is never observable. Steps whose
    preconditions are not met return a `Refused` outcome and change nothing.

    Example:
    >>> session = EvaluationSession(TermRegistry.from_definitions(scale))
    >>> session.finish_setup(3, 2)
    >>> session.set_cell(0, 0, "L", "H")
    >>> ...
    >>> result = session.run()
    """

    def __init__(
        self,
        registry: Optional[TermRegistry] = None,
        alpha: float | None = None,
        method: str = "generalized",
        formula: str | None = None,
        generalized_strategy: str | None = None
    ):
        self._configure(registry, alpha, method, formula, generalized_strategy)

    def _configure(self, registry, alpha, method, formula, generalized_strategy):
        self.registry = registry if registry is not None else TermRegistry()
        self.alpha = self._check_alpha(alpha if alpha is not None else configure_parameters.DEFAULT_ALPHA)
        self.method = self._check_method(method)
        self.formula = self._check_formula(formula)
        self.generalized_strategy = self._check_strategy(generalized_strategy)
        self.stage = Stage.SETUP
        self.matrix: Optional[JudgmentMatrix] = None
        self._intervals: Optional[ExpansionResult] = None
        self._trapezoids: Optional[TrapezoidResult] = None
        self._scoring: Optional[ScoringResult] = None
        self._registry_revision = self.registry.revision

    def __repr__(self) -> str:
        shape = self.matrix.shape if self.matrix is not None else None
        return (f"EvaluationSession(stage={self.stage.name}, terms={len(self.registry)}, "
                f"matrix={shape}, method='{self.method}', alpha={self.alpha})")

    # --------------------------------------------------------------------------
    # Argument checks
    # --------------------------------------------------------------------------

    @staticmethod
    def _check_alpha(alpha: float) -> float:
        alpha = float(alpha)
        if not (0 <= alpha <= 1):
            raise ValueError("Alpha must be between 0 and 1.")
        return alpha

    @staticmethod
    def _check_method(method: str) -> str:
        if method not in available_methods():
            raise ValueError(f"Unknown aggregation method: '{method}'. Available methods: {list(available_methods())}")
        return method

    @staticmethod
    def _check_formula(formula: str | None) -> str | None:
        if formula is not None and formula not in available_formulas():
            raise ValueError(f"Unknown probability formula: '{formula}'. Available: {available_formulas()}")
        return formula

    @staticmethod
    def _check_strategy(strategy: str | None) -> str | None:
        if strategy is not None and strategy not in available_strategies("generalized"):
            raise ValueError(f"Unknown generalized strategy: '{strategy}'. Available: {available_strategies('generalized')}")
        return strategy

    # --------------------------------------------------------------------------
    # Cache invalidation
    # --------------------------------------------------------------------------

    def _clear_from(self, stage: Stage):
        """Drops every artifact produced at `stage` or later."""
        if stage <= Stage.INTERVALS_EXPANDED:
            self._intervals = None
        if stage <= Stage.TRAPEZOIDS_AGGREGATED:
            self._trapezoids = None
        if stage <= Stage.SCORED:
            self._scoring = None
        if self.stage >= stage:
            self.stage = Stage(max(Stage.AWAITING_JUDGMENTS if self.matrix is not None else Stage.SETUP, stage - 1))

    def _sync_registry(self):
        """
        Drops everything derived from the scale once its terms were edited
        in place (e.g. `session.registry.replace(...)`).
        """
        if self.registry.revision != self._registry_revision:
            self._registry_revision = self.registry.revision
            self._clear_from(Stage.INTERVALS_EXPANDED)

    def _invalidate_scores(self):
        """Drops the results but keeps the stage; `calculate()` fills them again."""
        self._scoring = None

    @property
    def intervals(self) -> Optional[ExpansionResult]:
        self._sync_registry()
        return self._intervals

    @property
    def trapezoids(self) -> Optional[TrapezoidResult]:
        self._sync_registry()
        return self._trapezoids

    @property
    def scoring(self) -> Optional[ScoringResult]:
        self._sync_registry()
        return self._scoring

    def _terms_refusal(self) -> Refused | None:
        if Validation.has_any_error(self.registry):
            return Refused("terms_invalid", "; ".join(Validation.validate_registry(self.registry)))
        return None

    # --------------------------------------------------------------------------
    # Setup
    # --------------------------------------------------------------------------

    def finish_setup(
        self,
        num_alternatives: int | None = None,
        num_criteria: int | None = None,
        alternatives: Sequence[str] | None = None,
        criteria: Sequence[str] | None = None
    ) -> JudgmentMatrix | Refused:
        """
        Leaves the setup stage and creates an empty judgment matrix.

        Refused with 'terms_invalid' while any linguistic term fails
        validation. The finished scale is stored in canonical order.
        Dimensions default to the given name lists, then to the configured
        defaults.
        """
        if self.stage != Stage.SETUP:
            return Refused("setup_already_finished")
        refusal = self._terms_refusal()
        if refusal is not None:
            return refusal

        if num_alternatives is None:
            num_alternatives = len(alternatives) if alternatives is not None else configure_parameters.DEFAULT_NUM_ALTERNATIVES
        if num_criteria is None:
            num_criteria = len(criteria) if criteria is not None else configure_parameters.DEFAULT_NUM_CRITERIA

        self.matrix = JudgmentMatrix(num_alternatives, num_criteria, alternatives, criteria)
        self.registry.canonicalize_all()
        self._registry_revision = self.registry.revision
        self.stage = Stage.AWAITING_JUDGMENTS
        return self.matrix

    def set_registry(self, registry: TermRegistry) -> TermRegistry | Refused:
        """
        Replaces the linguistic scale. Every derived artifact is dropped and a
        session past the judgment stage returns to AWAITING_JUDGMENTS.

        Once setup is finished the new scale must pass validation, otherwise
        the call is refused with 'terms_invalid' and nothing changes.
        """
        if self.stage != Stage.SETUP and Validation.has_any_error(registry):
            return Refused("terms_invalid", "; ".join(Validation.validate_registry(registry)))
        self.registry = registry
        self._registry_revision = registry.revision
        self._clear_from(Stage.INTERVALS_EXPANDED)
        return registry

    # --------------------------------------------------------------------------
    # Judgments
    # --------------------------------------------------------------------------

    def set_cell(self, row: int, col: int, from_term: str | None = None, to_term: str | None = None) -> JudgmentCell | Refused:
        """Records a judgment. Only allowed before the matrix is expanded."""
        self._sync_registry()
        if self.stage == Stage.SETUP:
            return Refused("setup_not_finished")
        if self.stage >= Stage.INTERVALS_EXPANDED:
            return Refused("matrix_frozen")
        return self.matrix.set(row, col, from_term, to_term)

    def clear_cell(self, row: int, col: int) -> JudgmentCell | Refused:
        return self.set_cell(row, col, None, None)

    def all_cells_filled(self) -> bool:
        return self.matrix is not None and Validation.all_cells_filled(self.matrix)

    # --------------------------------------------------------------------------
    # Pipeline stages
    # --------------------------------------------------------------------------

    def transform_to_intervals(self) -> ExpansionResult | Refused:
        """
        Expands every judgment into its covered terms and freezes the matrix.
        Running it again on unchanged inputs keeps all later results.

        Refused with 'terms_invalid' when the scale was edited into an
        invalid state after setup.
        """
        self._sync_registry()
        if self.stage == Stage.SETUP:
            return Refused("setup_not_finished")
        refusal = self._terms_refusal()
        if refusal is not None:
            return refusal
        expansion = expand_to_intervals(self.matrix, self.registry)
        if isinstance(expansion, Refused):
            return expansion
        if self._intervals is not None and expansion == self._intervals:
            return self._intervals
        self._clear_from(Stage.INTERVALS_EXPANDED)
        self._intervals = expansion
        self.stage = Stage.INTERVALS_EXPANDED
        return expansion

    def transform_to_trapezoids(self) -> TrapezoidResult | Refused:
        """Aggregates every expanded term set into a trapezoidal fuzzy number."""
        if self.intervals is None:
            return Refused("intervals_not_ready")
        trapezoids = aggregate_to_trapezoids(self._intervals, self.registry)
        if self._trapezoids is not None and trapezoids == self._trapezoids:
            return self._trapezoids
        self._clear_from(Stage.TRAPEZOIDS_AGGREGATED)
        self._trapezoids = trapezoids
        self.stage = Stage.TRAPEZOIDS_AGGREGATED
        return trapezoids

    def calculate(self) -> ScoringResult | Refused:
        """Scores every alternative with the current method and alpha."""
        if self.trapezoids is None:
            return Refused("trapezoid_stage_not_reached")
        result = score(
            self._trapezoids,
            self.method,
            self.alpha,
            formula=self.formula,
            generalized_strategy=self.generalized_strategy,
        )
        self._scoring = result
        self.stage = Stage.SCORED
        return result

    def run(self) -> ScoringResult | Refused:
        """Runs every remaining stage up to scoring; stops at the first refusal."""
        for step in (self.transform_to_intervals, self.transform_to_trapezoids, self.calculate):
            outcome = step()
            if isinstance(outcome, Refused):
                return outcome
        return outcome

    # --------------------------------------------------------------------------
    # Scoring parameters
    # --------------------------------------------------------------------------

    def set_method(self, method: str):
        """Selects the aggregation method; previous scores are cleared."""
        self.method = self._check_method(method)
        self._invalidate_scores()

    def set_alpha(self, alpha: float, clamp: bool = False):
        """
        Sets the confidence level; previous scores are cleared.
        With `clamp=True` values outside [0, 1] are clipped instead of rejected.
        """
        if clamp:
            alpha = min(1.0, max(0.0, float(alpha)))
        self.alpha = self._check_alpha(alpha)
        self._invalidate_scores()

    def set_formula(self, formula: str | None):
        self.formula = self._check_formula(formula)
        self._invalidate_scores()

    def set_generalized_strategy(self, strategy: str | None):
        self.generalized_strategy = self._check_strategy(strategy)
        self._invalidate_scores()

    def reset(self):
        """Starts over with an empty scale and configured defaults."""
        self._configure(None, None, "generalized", None, None)

    # --------------------------------------------------------------------------
    # Results and display
    # --------------------------------------------------------------------------

    @property
    def results(self) -> List:
        return self.scoring.results if self.scoring is not None else []

    @property
    def best_probability(self) -> float | None:
        return self.scoring.best_probability if self.scoring is not None else None

    def get_rankings(self) -> List[Tuple[str, float]]:
        """Sorted (alternative, probability) pairs from the last calculation."""
        if self.scoring is None:
            raise RuntimeError("Scores not calculated. Run `calculate()` first.")
        return self.scoring.rankings()

    def cell_text(self, row: int, col: int) -> str:
        """
        What a results table shows for one cell at the current stage: the
        trapezoid once aggregated, the covered terms once expanded, else the
        judgment itself.
        """
        if self.matrix is None:
            return ""
        if self.trapezoids is not None:
            return self.trapezoids[row, col].format(configure_parameters.DISPLAY_DECIMALS)
        if self.intervals is not None:
            return ", ".join(self.intervals[row, col])
        return self.matrix.get(row, col).describe()

    def to_dataframe(self) -> 'pd.DataFrame':
        """The evaluation table: cell texts plus interval, probability and best marker."""
        from .visualization import format_results_table
        return format_results_table(self)

    def plot_membership_functions(self, figsize=(10, 5)) -> 'plt.Figure':
        from .visualization import plot_membership_functions
        return plot_membership_functions(self.registry, highlight=self.registry.current_index, figsize=figsize)

    def plot_probabilities(self, figsize=(10, 6)) -> 'plt.Figure':
        if self.scoring is None:
            raise RuntimeError("Scores not calculated. Run `calculate()` first.")
        from .visualization import plot_probabilities
        return plot_probabilities(self.scoring, figsize=figsize)
