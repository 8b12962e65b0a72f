import warnings
from collections.abc import Callable, Sequence
from typing import Any, Optional

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
import seaborn.objects as so
from lets_plot import (
    LetsPlot,
    aes,
    coord_cartesian,
    element_text,
    geom_density,
    ggplot,
    ggsize,
    labs,
    scale_fill_manual,
    theme,
    theme_minimal,
)

from pycvms.options import get_option
from pycvms.utils._exceptions import find_stack_level
from pycvms.utils.api_input_checks import DATASET_COL as _DATASET_COL
from pycvms.utils.api_input_checks import DensityPlotInputs

LetsPlot.setup_html()


def set_figsize(
    figsize: Optional[tuple[int, int]], plot_backend: str
) -> tuple[int, int]:
    """
    Set the figure size based on the plot backend.

    Parameters
    ----------
    figsize: tuple[int, int], optional
        The size of the figure. Default is None.
    plot_backend: str
        The plot backend. Must be one of 'matplotlib' or 'lets_plot'.

    Returns
    -------
    tuple[int, int]
        The size of the figure.
    """
    if figsize is not None:
        return figsize

    if plot_backend == "matplotlib":
        return (10, 6)
    elif plot_backend == "lets_plot":
        return (500, 300)
    else:
        raise ValueError("plot_backend must be either 'lets_plot' or 'matplotlib'.")


def plot_metric_density(
    results: Optional[pd.DataFrame] = None,
    baseline: Optional[pd.DataFrame] = None,
    metric: str = "",
    fill: Optional[Sequence[str]] = None,
    alpha: Optional[float] = None,
    theme_fn: Optional[Callable[[], Any]] = None,
    xlim: Optional[Sequence[float]] = None,
    figsize: Optional[tuple[int, int]] = None,
    plot_backend: Optional[str] = None,
):
    """
    Density plot for an evaluation metric.

    Plots the distribution of one metric column, possibly split in `Results`
    and `Baseline`. Mainly intended as a quick way to compare the results of
    cross-validations with a baseline of random evaluations.

    Parameters
    ----------
    results : pandas.DataFrame, optional
        Data frame with a column for the `metric`. Set to None to only plot
        the baseline.
    baseline : pandas.DataFrame, optional
        Data frame with the random evaluations, with a column for the
        `metric`. Set to None to only plot the results.
    metric : str
        Name of the metric column to plot. Cannot be "dataset", which labels
        the Results and Baseline rows.
    fill : sequence of str, optional
        Colors of the distributions. The first color is for the baseline,
        the second for the results. Defaults to the `density_fill` option.
    alpha : float, optional
        Transparency of the distributions, in [0, 1]. Defaults to the
        `density_alpha` option.
    theme_fn : callable, optional
        Zero-argument function returning the theme. For "lets_plot", a
        lets-plot theme such as `theme_minimal` (the default). For
        "matplotlib", a dict of rc parameters; defaults to
        `seaborn.axes_style("whitegrid")`.
    xlim : sequence of float, optional
        Limits of the x-axis, e.g. (0, 1).
    figsize : tuple, optional
        The size of the figure. If None, the backend default is used.
    plot_backend : str, optional
        "lets_plot" or "matplotlib". Defaults to the `plot_backend` option.

    Returns
    -------
    object
        A lets-plot figure or a seaborn Plot object.

    Examples
    --------
    ```{python}
    import pycvms as pc

    results, baseline = pc.get_evaluation_data()
    pc.plot_metric_density(
        results=results, baseline=baseline, metric="Accuracy", xlim=(0, 1)
    )
    ```
    """
    fill = fill if fill is not None else get_option("density_fill")
    alpha = alpha if alpha is not None else get_option("density_alpha")
    plot_backend = (
        plot_backend if plot_backend is not None else get_option("plot_backend")
    )

    DensityPlotInputs(
        results=results,
        baseline=baseline,
        metric=metric,
        fill=fill,
        alpha=alpha,
        theme_fn=theme_fn,
        xlim=xlim,
        figsize=figsize,
        plot_backend=plot_backend,
    ).validate()

    df = _density_plot_data(results=results, baseline=baseline, metric=metric)
    breaks, values = _fill_palette(
        fill, has_results=results is not None, has_baseline=baseline is not None
    )

    return _density_plot(
        plot_backend=plot_backend,
        df=df,
        metric=metric,
        breaks=breaks,
        values=values,
        alpha=alpha,
        theme_fn=theme_fn,
        xlim=xlim,
        figsize=figsize,
    )


def _density_plot_data(
    results: Optional[pd.DataFrame],
    baseline: Optional[pd.DataFrame],
    metric: str,
) -> pd.DataFrame:
    """Stack the metric column of results and baseline with a `dataset` label."""
    frames = []
    if results is not None:
        frames.append(results[[metric]].assign(**{_DATASET_COL: "Results"}))
    if baseline is not None:
        frames.append(baseline[[metric]].assign(**{_DATASET_COL: "Baseline"}))
    df = pd.concat(frames, axis=0, ignore_index=True)

    n_missing = int(df[metric].isna().sum())
    if n_missing > 0:
        warnings.warn(
            f"{n_missing} rows with a missing value in '{metric}' are dropped before plotting.",
            UserWarning,
            stacklevel=find_stack_level(),
        )
        df = df.dropna(subset=[metric]).reset_index(drop=True)
    if df.empty:
        raise ValueError(f"The metric column '{metric}' has no non-missing values.")

    return df


def _fill_palette(
    fill: Sequence[str], has_results: bool, has_baseline: bool
) -> tuple[list[str], list[str]]:
    palette = {"Baseline": fill[0], "Results": fill[1]}
    breaks = [
        name
        for name, present in (("Baseline", has_baseline), ("Results", has_results))
        if present
    ]
    return breaks, [palette[name] for name in breaks]


def _density_plot(plot_backend, *, figsize, **plot_kwargs):
    """Density plot function that dispatches to the correct plotting backend."""
    figsize = set_figsize(figsize, plot_backend)
    if plot_backend == "lets_plot":
        return _density_plot_lets_plot(figsize=figsize, **plot_kwargs)
    elif plot_backend == "matplotlib":
        return _density_plot_matplotlib(figsize=figsize, **plot_kwargs)
    else:
        raise ValueError("plot_backend must be either 'lets_plot' or 'matplotlib'.")


def _density_plot_lets_plot(
    df: pd.DataFrame,
    metric: str,
    breaks: list[str],
    values: list[str],
    alpha: float,
    figsize: tuple[int, int],
    theme_fn: Optional[Callable[[], Any]] = None,
    xlim: Optional[Sequence[float]] = None,
):
    """
    Plot the metric densities with lets-plot.

    Parameters
    ----------
    df : pandas.DataFrame
        The stacked metric values with a `dataset` column.
    metric : str
        Name of the metric column.
    breaks : list of str
        The datasets present, in legend order.
    values : list of str
        The fill color for each entry of `breaks`.
    alpha : float
        Transparency of the distributions.
    figsize : tuple
        The size of the figure.
    theme_fn : callable, optional
        Function returning a lets-plot theme. Default is `theme_minimal`.
    xlim : sequence of float, optional
        Limits of the x-axis.

    Returns
    -------
    object
        A lets-plot figure.
    """
    theme_fn = theme_fn if theme_fn is not None else theme_minimal

    plot = (
        ggplot(df, aes(x=metric, fill=_DATASET_COL))
        + geom_density(alpha=alpha)
        + scale_fill_manual(values=values, breaks=breaks)
        + coord_cartesian(xlim=[float(x) for x in xlim] if xlim is not None else None)
        + theme_fn()
        + labs(y="Density")
        + theme(
            axis_title_y=element_text(margin=[0, 6, 0, 0]),
            axis_title_x=element_text(margin=[6, 0, 0, 0]),
        )
    )
    if figsize is not None:
        plot += ggsize(figsize[0], figsize[1])

    return plot


def _density_plot_matplotlib(
    df: pd.DataFrame,
    metric: str,
    breaks: list[str],
    values: list[str],
    alpha: float,
    figsize: tuple[int, int],
    theme_fn: Optional[Callable[[], Any]] = None,
    xlim: Optional[Sequence[float]] = None,
) -> so.Plot:
    """
    Plot the metric densities with the seaborn objects interface.

    Parameters are as in `_density_plot_lets_plot`, except that `theme_fn`
    returns a dict of matplotlib rc parameters.

    Returns
    -------
    object
        A seaborn Plot object.
    """
    theme_fn = theme_fn if theme_fn is not None else _seaborn_theme

    _, ax = plt.subplots(figsize=figsize)

    plot = (
        so.Plot(df, x=metric, color=_DATASET_COL)
        .add(so.Area(alpha=alpha), so.KDE())
        .scale(color=so.Nominal(values, order=breaks))
        .label(x=metric, y="Density", color=_DATASET_COL)
        .theme(theme_fn())
    )
    if xlim is not None:
        plot = plot.limit(x=tuple(float(x) for x in xlim))
    plot = plot.on(ax)

    plt.close()
    return plot


def _seaborn_theme() -> dict:
    return dict(sns.axes_style("whitegrid"))
