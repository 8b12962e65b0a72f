import numpy as np
import pandas as pd


def get_evaluation_data(
    n_results=30,
    n_baseline=100,
    seed=1234,
    metrics=("Accuracy", "Balanced Accuracy", "F1"),
    missing_share=0.0,
):
    """
    Create random example evaluation results and a matching random baseline.

    The results mimic repeated cross-validation of a few classifiers, the
    baseline mimics random evaluations of the same targets, so the results are
    on average clearly better than the baseline.

    Parameters
    ----------
    n_results : int, optional
        Number of result rows. Default is 30.
    n_baseline : int, optional
        Number of random evaluations in the baseline. Default is 100.
    seed : int, optional
        Seed for the random number generator. Default is 1234.
    metrics : tuple of str, optional
        Names of the metric columns. All metrics are in [0, 1].
    missing_share : float, optional
        Share of metric values in the results that are set to missing. Must be
        in [0, 1). Default is 0.

    Returns
    -------
    tuple[pandas.DataFrame, pandas.DataFrame]
        The results and the baseline.

    Raises
    ------
    ValueError
        If n_results or n_baseline is not positive, if metrics is empty, or
        if missing_share is not in [0, 1).
    """
    if n_results < 1 or n_baseline < 1:
        raise ValueError("n_results and n_baseline need to be positive.")
    if len(metrics) == 0:
        raise ValueError("metrics needs to contain at least one metric name.")
    if not (0 <= missing_share < 1):
        raise ValueError("missing_share needs to be in [0, 1).")

    rng = np.random.default_rng(seed)

    results = pd.DataFrame(
        {
            "Classifier": rng.choice(["svm", "nnet", "rf"], n_results, True),
            "Fold Column": [f".folds_{i % 5 + 1}" for i in range(n_results)],
        }
    )
    baseline = pd.DataFrame({"Repetition": np.arange(1, n_baseline + 1)})

    for metric in metrics:
        results[metric] = rng.beta(8, 3, n_results)
        baseline[metric] = rng.beta(3, 3, n_baseline)

    if missing_share > 0:
        n_missing = int(np.floor(missing_share * n_results))
        rows = rng.choice(n_results, n_missing, replace=False)
        results.loc[rows, list(metrics)] = np.nan

    return results, baseline
