from __future__ import annotations
from typing import TYPE_CHECKING, Any, Dict, List, Union
import numpy as np
from .config import configure_parameters

try:
    import matplotlib.pyplot as plt
    import seaborn as sns
    _PLOT_AVAILABLE = True
except ImportError:
    _PLOT_AVAILABLE = False

try:
    import pandas as pd
    _PANDAS_AVAILABLE = True
except ImportError:
    _PANDAS_AVAILABLE = False

if TYPE_CHECKING:
    from .aggregation import TrapezoidResult
    from .registry import TermRegistry
    from .scoring import ScoringResult
    from .session import EvaluationSession
    from .types import TFN


def _check_pandas_availability():
    """Helper function to raise an error if pandas is not installed."""
    if not _PANDAS_AVAILABLE:
        raise ImportError("Table export functionality requires the 'pandas' library. "
                          "Please install it using: pip install pandas")

def _check_plotting_availability():
    """Helper function to raise an error if plotting libraries are not installed."""
    if not _PLOT_AVAILABLE:
        raise ImportError("Plotting functionality requires matplotlib and seaborn. "
                          "Please install them using: pip install matplotlib seaborn")

# ==============================================================================
# 1. MEMBERSHIP FUNCTION DATA
# ==============================================================================

def membership_curve(tfn: TFN, xs: np.ndarray) -> np.ndarray:
    """Membership degree of the TFN at every point of `xs`."""
    return np.array([tfn.membership(float(x)) for x in xs])

def membership_chart_data(registry: TermRegistry, steps: int | None = None) -> Dict[str, Any]:
    """
    Samples the membership functions of every complete term of the scale.

    The x-range spans from the smallest left bound to the largest right bound
    of the complete terms ([0, 1] when there are none).

    Returns:
        A dictionary with the sample points under 'x' and one entry per term
        under 'curves' ({'index', 'short_name', 'label', 'y'}).
    """
    final_steps = steps if steps is not None else configure_parameters.MEMBERSHIP_CURVE_STEPS
    complete = [(index, term) for index, term in enumerate(registry) if term.is_complete]

    if complete:
        min_left = min(term.tri.l for _, term in complete)
        max_right = max(term.tri.u for _, term in complete)
    else:
        min_left, max_right = 0.0, 1.0
    span = max(1e-6, max_right - min_left)
    xs = min_left + np.arange(final_steps + 1) * span / final_steps

    curves = [
        {
            "index": index,
            "short_name": term.short_name,
            "label": f"{term.short_name} ({term.name})",
            "y": membership_curve(term.tri, xs),
        }
        for index, term in complete
    ]
    return {"x": xs, "curves": curves, "x_min": min_left, "x_max": max_right}

# ==============================================================================
# 2. MATPLOTLIB PLOTTING FUNCTIONS
# ==============================================================================

def plot_membership_functions(registry: TermRegistry, highlight: int | None = None, figsize=(10, 5)) -> 'plt.Figure':
    """
    Plots the triangular membership function of every complete term.

    Args:
        registry: The linguistic scale.
        highlight: Position of a term drawn in red (e.g. the one under edit).
        figsize: The size of the figure.

    Returns:
        The matplotlib Figure object.
    """
    _check_plotting_availability()

    data = membership_chart_data(registry)
    fig, ax = plt.subplots(figsize=figsize)

    for curve in data["curves"]:
        is_current = curve["index"] == highlight
        color = "tab:red" if is_current else "tab:blue"
        ax.plot(data["x"], curve["y"], color=color, label=curve["label"])
        ax.fill_between(data["x"], curve["y"], color=color, alpha=0.2 if is_current else 0.15)

    ax.axvline(0, color="black", linestyle="--", linewidth=1, alpha=0.5)
    ax.set_xlim(data["x_min"], data["x_max"])
    ax.set_ylim(0, 1.05)
    ax.set_xlabel("Value")
    ax.set_ylabel("Membership")
    ax.set_title("Linguistic Scale Membership Functions")
    if data["curves"]:
        ax.legend()

    fig.tight_layout()
    return fig

def plot_probabilities(scoring: ScoringResult, figsize=(10, 6)) -> 'plt.Figure':
    """
    Plots the dominance probability of every alternative, winners highlighted.

    Args:
        scoring: The result of a scoring run.
        figsize: The size of the figure.

    Returns:
        The matplotlib Figure object.
    """
    _check_plotting_availability()

    names = [r.alternative for r in scoring.results]
    probabilities = [r.probability for r in scoring.results]
    colors = ["tab:green" if r.is_best else "tab:gray" for r in scoring.results]

    fig, ax = plt.subplots(figsize=figsize)
    bars = ax.barh(names, probabilities, color=colors)

    ax.set_xlabel('Probability of Dominance')
    ax.set_ylabel('Alternative')
    ax.set_title(f'Alternative Probabilities ({scoring.method}, α={scoring.alpha:g})')
    ax.set_xlim(0, 1.1)
    ax.grid(axis='x', linestyle='--', alpha=0.6)
    ax.invert_yaxis()

    for i, bar in enumerate(bars):
        ax.text(bar.get_width() + 0.005, bar.get_y() + bar.get_height()/2,
                f'{probabilities[i]:.4f}', va='center')

    fig.tight_layout()
    return fig

def plot_interval_heatmap(trapezoids: TrapezoidResult, alpha: float, figsize=(8, 6)) -> 'plt.Figure':
    """
    Heatmap of the alpha-cut midpoint of every judgment cell, annotated with
    the interval bounds.
    """
    _check_plotting_availability()

    rows, cols = trapezoids.shape
    cuts = [[trapezoids[i, j].alpha_cut(alpha) for j in range(cols)] for i in range(rows)]
    midpoints = np.array([[cut.midpoint for cut in row] for row in cuts])
    labels = np.array([[f"[{cut.l:.2f}, {cut.r:.2f}]" for cut in row] for row in cuts])

    sns.set_theme(style="white")
    fig, ax = plt.subplots(figsize=figsize)
    sns.heatmap(
        midpoints,
        annot=labels,
        fmt="",
        cmap="RdYlGn",
        center=0,
        xticklabels=trapezoids.criteria,
        yticklabels=trapezoids.alternatives,
        ax=ax
    )
    ax.set_title(f"Alpha-Cut Intervals per Judgment (α={alpha:g})")
    ax.set_xlabel("Criterion")
    ax.set_ylabel("Alternative")

    fig.tight_layout()
    return fig

# ==============================================================================
# 3. TABLES
# ==============================================================================

def format_judgment_table(session: EvaluationSession) -> 'pd.DataFrame':
    """
    The judgment matrix as an alternatives x criteria table, showing what
    each cell holds at the session's current stage.
    """
    _check_pandas_availability()
    if session.matrix is None:
        raise RuntimeError("The session has no judgment matrix. Call `finish_setup()` first.")

    matrix = session.matrix
    rows, cols = matrix.shape
    table_data = [[session.cell_text(i, j) for j in range(cols)] for i in range(rows)]
    return pd.DataFrame(table_data, index=matrix.alternatives, columns=matrix.criteria)

def format_results_table(source: Union[EvaluationSession, ScoringResult]) -> 'pd.DataFrame':
    """
    The evaluation table: one row per alternative with its final interval,
    probability and a best marker holding the best probability for winners.

    Given a session, the judgment columns are included in front.
    """
    _check_pandas_availability()
    from .scoring import ScoringResult

    if isinstance(source, ScoringResult):
        scoring, table = source, None
    else:
        scoring = source.scoring
        table = format_judgment_table(source)

    if scoring is None:
        return table

    method = scoring.method.capitalize()
    records: List[Dict[str, Any]] = []
    for result in scoring.results:
        records.append({
            "Alternative": result.alternative,
            f"Interval {method}": f"[{result.interval.l:.4f}, {result.interval.r:.4f}]",
            f"Probability {method}": result.probability,
            "Best": scoring.best_probability if result.is_best else None,
        })
    results_df = pd.DataFrame(records).set_index("Alternative")

    if table is None:
        return results_df
    return table.join(results_df)
