from __future__ import annotations
from typing import List, Dict, TYPE_CHECKING
from .config import configure_parameters

if TYPE_CHECKING:
    from linguaRank.registry import TermRegistry
    from linguaRank.judgments import JudgmentMatrix
    from linguaRank.types import LinguisticTerm

class Validation:
    """
    A class containing static methods to validate the linguistic scale and the
    judgment matrix before they enter the computation pipeline.

    Per-term checks return a single message (an empty string means valid) so a
    form can show them next to the field being edited. Registry-wide checks
    return lists of messages.
    """

    @staticmethod
    def validate_term_name(term: LinguisticTerm, registry: TermRegistry, index: int | None = None) -> str:
        """
        Checks the minimum trimmed length and uniqueness of a term's name.

        Args:
            term: The term to check.
            registry: The scale the term belongs to (or will be added to).
            index: Position of `term` in the registry, excluded from the
                   uniqueness check. None for a term not yet in the registry.
        """
        min_length = configure_parameters.MIN_TERM_NAME_LENGTH
        name = (term.name or "").strip()
        if len(name) < min_length:
            return f"Name must be at least {min_length} characters"
        duplicate = any(i != index and other.name.strip() == name for i, other in enumerate(registry))
        return "Name must be unique" if duplicate else ""

    @staticmethod
    def validate_short_name(term: LinguisticTerm, registry: TermRegistry, index: int | None = None) -> str:
        """Checks that the short name is present and unique."""
        short_name = (term.short_name or "").strip()
        if not short_name:
            return "Short name is required"
        duplicate = any(i != index and other.short_name.strip() == short_name for i, other in enumerate(registry))
        return "Short name must be unique" if duplicate else ""

    @staticmethod
    def validate_shape(term: LinguisticTerm) -> str:
        """Checks that the triangle is complete and carries some fuzziness."""
        if not term.is_complete:
            return "Fill all fields"
        if term.is_degenerate:
            return "Require left < middle or middle < right"
        return ""

    @staticmethod
    def validate_term(term: LinguisticTerm, registry: TermRegistry, index: int | None = None) -> Dict[str, str]:
        """
        Runs all per-field checks on one term.

        Returns:
            A dictionary with the keys 'name', 'short_name' and 'shape'.
            An empty string means the field is valid.
        """
        return {
            "name": Validation.validate_term_name(term, registry, index),
            "short_name": Validation.validate_short_name(term, registry, index),
            "shape": Validation.validate_shape(term),
        }

    @staticmethod
    def validate_current_term(registry: TermRegistry) -> Dict[str, str]:
        """Live feedback for the term under edit; all fields valid if there is none."""
        index = registry.current_index
        if not 0 <= index < len(registry):
            return {"name": "", "short_name": "", "shape": ""}
        return Validation.validate_term(registry[index], registry, index)

    @staticmethod
    def validate_registry(registry: TermRegistry) -> List[str]:
        """
        Validates every term of the scale.

        Returns:
            A list of error strings, each prefixed with the term position.
            An empty registry is reported as an error.
        """
        if len(registry) == 0:
            return ["No linguistic terms are defined."]
        errors = []
        for index, term in enumerate(registry):
            for field, message in Validation.validate_term(term, registry, index).items():
                if message:
                    errors.append(f"Term {index + 1} ({field}): {message}")
        return errors

    @staticmethod
    def has_any_error(registry: TermRegistry) -> bool:
        """True when the scale is empty or any term is invalid."""
        return bool(Validation.validate_registry(registry))

    @staticmethod
    def all_cells_filled(matrix: JudgmentMatrix) -> bool:
        """True when every cell carries at least one bound."""
        return matrix.all_filled()

    @staticmethod
    def validate_judgment_references(matrix: JudgmentMatrix, registry: TermRegistry) -> List[str]:
        """
        Lists judgments pointing at short names that are not in the registry.
        Such references are later dropped from the expanded term sets.
        """
        errors = []
        for i, j in matrix.positions():
            for ref in matrix.get(i, j).references():
                if registry.index_of(ref) is None:
                    errors.append(f"Cell ({i},{j}) [{matrix.alternatives[i]} / {matrix.criteria[j]}] "
                                  f"references unknown term '{ref}'.")
        return errors

    @staticmethod
    def validate_matrix_completeness(matrix: JudgmentMatrix) -> List[str]:
        """Lists every unfilled cell."""
        return [
            f"Cell ({i},{j}) [{matrix.alternatives[i]} / {matrix.criteria[j]}] has no judgment."
            for i, j in matrix.positions() if not matrix.get(i, j).is_filled
        ]

    @staticmethod
    def run_all_validations(registry: TermRegistry, matrix: JudgmentMatrix | None = None) -> Dict[str, List[str]]:
        """
        Runs a complete suite of validations on the scale and, if given, the matrix.

        Returns:
            A dictionary containing lists of errors for each validation category.
        """
        all_errors = {
            "terms": [],
            "matrix_completeness": [],
            "judgment_references": []
        }

        all_errors["terms"] = Validation.validate_registry(registry)

        if matrix is not None:
            all_errors["matrix_completeness"] = Validation.validate_matrix_completeness(matrix)
            all_errors["judgment_references"] = Validation.validate_judgment_references(matrix, registry)

        return all_errors
