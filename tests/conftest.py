import pytest
from linguaRank.config import configure_parameters
from linguaRank.registry import TermRegistry
from linguaRank.session import EvaluationSession

FIVE_TERM_SCALE = [
    ("Very Low", "VL", (-1.0, -1.0, -0.5)),
    ("Low", "L", (-1.0, -0.5, 0.0)),
    ("Medium", "M", (-0.5, 0.0, 0.5)),
    ("High", "H", (0.0, 0.5, 1.0)),
    ("Very High", "VH", (0.5, 1.0, 1.0)),
]

JUDGMENTS = [
    [("L", "H"), ("H", "H"), ("M", None)],
    [(None, "L"), ("VL", "L"), ("M", "M")],
    [("VH", "VH"), ("H", None), ("M", "VH")],
]


@pytest.fixture(autouse=True)
def fresh_configuration():
    """Every test starts from the default configuration."""
    configure_parameters.reset_to_defaults()
    yield
    configure_parameters.reset_to_defaults()

@pytest.fixture
def scale() -> TermRegistry:
    """The five-term VeryLow..VeryHigh scale over [-1, 1]."""
    return TermRegistry.from_definitions(FIVE_TERM_SCALE)

@pytest.fixture
def session(scale) -> EvaluationSession:
    """A 3x3 session past setup with every cell judged."""
    session = EvaluationSession(scale)
    session.finish_setup(3, 3, alternatives=["Alpha", "Beta", "Gamma"], criteria=["Cost", "Quality", "Risk"])
    for i, row in enumerate(JUDGMENTS):
        for j, (from_term, to_term) in enumerate(row):
            session.set_cell(i, j, from_term, to_term)
    return session
