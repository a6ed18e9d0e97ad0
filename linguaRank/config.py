from typing import Dict, Tuple


class Configuration:
    """
    A singleton-like class to hold all configurable parameters for the linguaRank library.

    Users can modify these attributes directly to customize the defaults used by
    the term registry, the evaluation session and the scoring engine.

    Example:
    >>> from linguaRank.config import configure_parameters
    >>> # Score straddling intervals with the later closed-form formula
    >>> configure_parameters.DEFAULT_PROBABILITY_FORMULA = "unit_reference"
    >>> # Experts use a 0-10 scale instead of 0-100
    >>> configure_parameters.NORMALIZATION_DIVISOR = 10.0
    """

    def __init__(self):
        self.reset_to_defaults()

    def reset_to_defaults(self):
        """Resets all configuration parameters to their original default values."""

        # --- Session Setup Defaults ---

        self.DEFAULT_NUM_ALTERNATIVES: int = 3
        self.DEFAULT_NUM_CRITERIA: int = 3
        self.DEFAULT_NUM_TERMS: int = 5

        # Confidence level used for the alpha-cut of every trapezoid
        self.DEFAULT_ALPHA: float = 0.5

        # --- Linguistic Term Parameters ---

        # Trimmed term names shorter than this are rejected by validation
        self.MIN_TERM_NAME_LENGTH: int = 3

        # Shape seeded for a new, still unnamed term
        self.PLACEHOLDER_TRIANGLE: Tuple[float, float, float] = (-0.5, 0.0, 0.5)

        # Divisor used to bring a 0-100 user scale into the 0-1 working domain
        self.NORMALIZATION_DIVISOR: float = 100.0

        # --- Scoring Parameters ---

        # 'positive_share': r / (r - l) on intervals straddling zero
        # 'unit_reference': max(1 - max((1 - l) / (r - l + 1), 0), 0)
        self.DEFAULT_PROBABILITY_FORMULA: str = "positive_share"

        # 'envelope': min/min/max/max of the row's trapezoids
        # 'average': component-wise mean of the row's trapezoids
        self.DEFAULT_GENERALIZED_STRATEGY: str = "envelope"

        # --- General Numerical Parameters ---

        # Number of segments used to sample membership functions for charts
        self.MEMBERSHIP_CURVE_STEPS: int = 300

        # Decimals shown when a trapezoid is rendered as cell text
        self.DISPLAY_DECIMALS: int = 2

    def as_dict(self) -> Dict[str, object]:
        """Returns the current parameters as a plain dictionary."""
        return {key: value for key, value in vars(self).items() if key.isupper()}

configure_parameters = Configuration()



class ConfigurationContextManager:
    """
    A context manager to temporarily change configuration parameters.

    Usage:
    >>> with ConfigurationContextManager(DEFAULT_ALPHA=0.8):
    >>>     # Code block runs with alpha set to 0.8
    >>>     ...
    >>> # alpha reverts to its original value outside the block
    """
    def __init__(self, **kwargs):
        self.changes = kwargs
        self.original_values = {}

    def __enter__(self):
        for key, value in self.changes.items():
            if not hasattr(configure_parameters, key):
                raise AttributeError(f"Configuration object has no attribute '{key}'")
            self.original_values[key] = getattr(configure_parameters, key)
            setattr(configure_parameters, key, value)
        return configure_parameters

    def __exit__(self, exc_type, exc_val, exc_tb):
        for key, value in self.original_values.items():
            setattr(configure_parameters, key, value)
