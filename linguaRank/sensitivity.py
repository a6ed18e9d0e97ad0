from __future__ import annotations
from typing import List, Sequence, Union
import numpy as np
import pandas as pd
from .aggregation import TrapezoidResult
from .scoring import score
from .types import TrFN, available_methods


class AlphaSensitivityAnalyzer:
    """
    Sweeps the confidence level alpha over [0, 1] and records, for every
    aggregation method, how each alternative's interval and dominance
    probability react.
    """
    def __init__(self, trapezoids: Union[TrapezoidResult, Sequence[Sequence[TrFN]]],
                 alternatives: Sequence[str] | None = None, formula: str | None = None,
                 generalized_strategy: str | None = None):
        self.trapezoids = trapezoids
        self.alternatives = list(alternatives) if alternatives is not None else None
        self.formula = formula
        self.generalized_strategy = generalized_strategy
        self.results_df = pd.DataFrame()

    def analyze(self, methods: Sequence[str] | None = None, steps: int = 21) -> pd.DataFrame:
        """
        Scores the alternatives at `steps` evenly spaced alpha levels.

        Returns:
            A DataFrame with columns method, alpha, alternative, l, r,
            probability and is_best.
        """
        final_methods = list(methods) if methods is not None else list(available_methods())
        for method in final_methods:
            if method not in available_methods():
                raise ValueError(f"Unknown aggregation method: '{method}'. Available methods: {list(available_methods())}")
        if steps < 2:
            raise ValueError("At least two alpha steps are required.")

        analysis_data: List[dict] = []
        for method in final_methods:
            for alpha in np.linspace(0.0, 1.0, steps):
                result = score(self.trapezoids, method, float(alpha),
                               formula=self.formula, alternatives=self.alternatives,
                               generalized_strategy=self.generalized_strategy)
                for alt in result.results:
                    analysis_data.append({
                        "method": method,
                        "alpha": float(alpha),
                        "alternative": alt.alternative,
                        "l": alt.interval.l,
                        "r": alt.interval.r,
                        "probability": alt.probability,
                        "is_best": alt.is_best,
                    })

        self.results_df = pd.DataFrame(analysis_data)
        return self.results_df

    def winners_by_alpha(self) -> pd.DataFrame:
        """The winning alternatives at every (method, alpha), joined by ', '."""
        if self.results_df.empty:
            raise RuntimeError("No analysis results. Run .analyze() first.")
        best = self.results_df[self.results_df["is_best"]]
        return (best.groupby(["method", "alpha"])["alternative"]
                .agg(", ".join)
                .reset_index(name="winners"))

    def plot(self):
        """
        Plots probability against alpha, one panel per method.
        Requires the `analyze` method to have been run first.
        """
        if not hasattr(self, 'results_df') or self.results_df.empty:
            raise RuntimeError("No analysis results to plot. Run .analyze() first.")

        try:
            import matplotlib.pyplot as plt
            import seaborn as sns
            sns.set_theme(style="whitegrid")
        except ImportError:
            raise ImportError("Plotting requires matplotlib and seaborn. Install them with: pip install matplotlib seaborn")

        methods = self.results_df['method'].unique()
        num_plots = len(methods)

        fig, axes = plt.subplots(num_plots, 1, figsize=(10, 4 * num_plots), sharex=True)
        if num_plots == 1: axes = [axes]

        for ax, method in zip(axes, methods):
            subset_df = self.results_df[self.results_df['method'] == method]

            sns.lineplot(
                data=subset_df,
                x='alpha',
                y='probability',
                hue='alternative',
                ax=ax,
                marker='o',
                markersize=4
            )
            ax.set_title(f"Sensitivity of Dominance Probability to Alpha ({method})")
            ax.set_ylabel("Probability")
            ax.set_ylim(-0.05, 1.05)
            ax.legend(title="Alternative")

        axes[-1].set_xlabel("Alpha")
        fig.tight_layout()
        return fig
