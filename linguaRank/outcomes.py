from __future__ import annotations
from typing import Literal, get_args


RefusalReason = Literal[
    "not_all_cells_filled",
    "terms_not_defined",
    "terms_invalid",
    "setup_not_finished",
    "setup_already_finished",
    "matrix_frozen",
    "intervals_not_ready",
    "trapezoid_stage_not_reached",
]

_DEFAULT_MESSAGES = {
    "not_all_cells_filled": "Not all cells of the judgment matrix are filled.",
    "terms_not_defined": "No linguistic terms are defined.",
    "terms_invalid": "At least one linguistic term is invalid.",
    "setup_not_finished": "The setup stage has not been finished.",
    "setup_already_finished": "The judgment matrix already exists. Reset the session to start over.",
    "matrix_frozen": "The judgment matrix can no longer be edited.",
    "intervals_not_ready": "Must transform to intervals first.",
    "trapezoid_stage_not_reached": "Trapezoid matrix is not ready. Run the transformation first.",
}


class Refused:
    """
    Outcome of a pipeline operation whose preconditions were not met.

    Nothing was mutated. A `Refused` is falsy, so callers can write
    ``if not (result := session.calculate()): ...``.
    """

    def __init__(self, reason: RefusalReason, message: str | None = None):
        if reason not in get_args(RefusalReason):
            raise ValueError(f"Unknown refusal reason '{reason}'. Choose from: {get_args(RefusalReason)}")
        self.reason = reason
        self.message = message or _DEFAULT_MESSAGES[reason]

    def __repr__(self) -> str:
        return f"Refused(reason='{self.reason}')"

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Refused) and self.reason == other.reason


def is_refused(outcome: object) -> bool:
    return isinstance(outcome, Refused)
