import pytest

from linguaRank.config import ConfigurationContextManager, configure_parameters
from linguaRank.outcomes import Refused, is_refused


def test_defaults():
    assert configure_parameters.DEFAULT_ALPHA == 0.5
    assert configure_parameters.PLACEHOLDER_TRIANGLE == (-0.5, 0.0, 0.5)
    assert configure_parameters.NORMALIZATION_DIVISOR == 100.0
    assert configure_parameters.DEFAULT_PROBABILITY_FORMULA == "positive_share"
    assert configure_parameters.DEFAULT_GENERALIZED_STRATEGY == "envelope"

def test_as_dict_lists_parameters_only():
    params = configure_parameters.as_dict()
    assert params["MEMBERSHIP_CURVE_STEPS"] == 300
    assert all(key.isupper() for key in params)

def test_context_manager_restores_values():
    with ConfigurationContextManager(DEFAULT_ALPHA=0.9, DISPLAY_DECIMALS=4) as config:
        assert config.DEFAULT_ALPHA == 0.9
        assert configure_parameters.DISPLAY_DECIMALS == 4
    assert configure_parameters.DEFAULT_ALPHA == 0.5
    assert configure_parameters.DISPLAY_DECIMALS == 2

def test_context_manager_rejects_unknown_keys():
    with pytest.raises(AttributeError):
        with ConfigurationContextManager(NOT_A_SETTING=1):
            pass

def test_reset_to_defaults():
    configure_parameters.MIN_TERM_NAME_LENGTH = 10
    configure_parameters.reset_to_defaults()
    assert configure_parameters.MIN_TERM_NAME_LENGTH == 3

def test_refused_outcome():
    outcome = Refused("matrix_frozen")
    assert not outcome
    assert is_refused(outcome)
    assert outcome.message == "The judgment matrix can no longer be edited."
    assert Refused("terms_invalid", "Term 1 (name): too short").message == "Term 1 (name): too short"
    assert not is_refused(None)
    with pytest.raises(ValueError):
        Refused("no_such_reason")
