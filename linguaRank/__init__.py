__version__ = "0.1.0"

from .config import configure_parameters, ConfigurationContextManager
from .types import canonicalize, TFN, TrFN, Interval, LinguisticTerm
from .outcomes import Refused, is_refused
from .registry import TermRegistry
from .judgments import JudgmentCell, JudgmentMatrix
from .validation import Validation
from .expansion import expand_to_intervals, ExpansionResult
from .aggregation import aggregate_to_trapezoids, TrapezoidResult
from .scoring import alpha_cut, dominance_probability, score, select_best, ScoringResult
from .session import EvaluationSession, Stage

from .expansion import register_expansion_rule
from .aggregation import register_aggregation_method
from .scoring import register_probability_formula
