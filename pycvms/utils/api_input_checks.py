from collections.abc import Callable, Sequence
from dataclasses import dataclass
from numbers import Real
from typing import Any, Optional

import numpy as np
import pandas as pd

DATASET_COL = "dataset"


@dataclass
class DensityPlotInputs:
    results: Optional[pd.DataFrame]
    baseline: Optional[pd.DataFrame]
    metric: str
    fill: Sequence[str]
    alpha: float
    theme_fn: Optional[Callable[[], Any]]
    xlim: Optional[Sequence[float]]
    figsize: Optional[tuple[int, int]]
    plot_backend: str

    "Dataclass to store and check the arguments of plot_metric_density."

    def validate(self):

        "Validate the arguments of the DensityPlotInputs class."

        # Step 1: Check types
        if self.results is None and self.baseline is None:
            raise ValueError(
                "Either 'results' or 'baseline' must be a DataFrame. Both were None."
            )
        _check_type(self.results, (pd.DataFrame, type(None)), "results")
        _check_type(self.baseline, (pd.DataFrame, type(None)), "baseline")
        _check_type(self.metric, str, "metric")
        _check_type(self.fill, (list, tuple), "fill")
        _check_type(self.alpha, Real, "alpha")
        _check_type(self.xlim, (list, tuple, np.ndarray, type(None)), "xlim")
        _check_type(self.figsize, (tuple, type(None)), "figsize")
        _check_type(self.plot_backend, str, "plot_backend")
        if isinstance(self.alpha, bool):
            raise TypeError("Argument 'alpha' must be a number, got bool")
        if self.theme_fn is not None and not callable(self.theme_fn):
            raise TypeError(
                f"Argument 'theme_fn' must be callable, got {type(self.theme_fn).__name__}"
            )

        # Step 2: Check values
        for name, df in (("results", self.results), ("baseline", self.baseline)):
            if df is not None and not df.columns.is_unique:
                duplicated = df.columns[df.columns.duplicated()].tolist()
                raise ValueError(
                    f"Column names of '{name}' must be unique, found duplicates: {duplicated}"
                )
        if not self.metric:
            raise ValueError("Argument 'metric' must be a non-empty column name.")
        if self.metric == DATASET_COL:
            raise ValueError(
                f"Argument 'metric' cannot be '{DATASET_COL}': the column name is used to "
                "label Results and Baseline. Rename the metric column first."
            )
        if len(self.fill) != 2 or not all(isinstance(c, str) for c in self.fill):
            raise ValueError(
                f"Argument 'fill' must be two colors (baseline, results), got {self.fill!r}"
            )
        if not (0 <= self.alpha <= 1):
            raise ValueError("alpha must be in [0, 1].")
        if self.xlim is not None and (
            len(self.xlim) != 2 or not all(_is_number(x) for x in self.xlim)
        ):
            raise ValueError(
                f"Argument 'xlim' must be None or two numbers, got {self.xlim!r}"
            )
        if self.figsize is not None and len(self.figsize) != 2:
            raise ValueError(
                f"Argument 'figsize' must be a (width, height) tuple, got {self.figsize!r}"
            )
        _check_value(self.plot_backend, ["lets_plot", "matplotlib"], "plot_backend")

        # Step 3: Check that the metric column exists
        for name, df in (("results", self.results), ("baseline", self.baseline)):
            if df is not None:
                _check_value(self.metric, df.columns, f"metric (columns of '{name}')")


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _check_type(value, expected_type, name):
    if not isinstance(value, expected_type):
        if isinstance(expected_type, tuple):
            expected = " or ".join(t.__name__ for t in expected_type)
        else:
            expected = expected_type.__name__
        raise TypeError(
            f"Argument '{name}' must be {expected}, got {type(value).__name__}"
        )


def _check_value(value, valid_values, name):
    if value not in valid_values:
        raise ValueError(
            f"Argument '{name}' must be one of {list(valid_values)}, got {value!r}"
        )
