import re
import warnings
from collections.abc import Iterable, Mapping, Set
from dataclasses import dataclass, field
from typing import Optional, Union

import pandas as pd

from pycvms.errors import MalformedFormulaError, UsageError
from pycvms.options import get_option
from pycvms.utils._exceptions import find_stack_level
from pycvms.utils.api_input_checks import _check_type

_COLUMNS = ["Model", "Dependent", "Fixed", "Random"]


@dataclass(kw_only=False, frozen=True)
class ModelEffects:
    """
    The structural parts of a single model formula.

    Attributes
    ----------
    model: str
        The formula exactly as it was passed in.
    dependent: str
        Everything left of the first `~`.
    fixed: str
        The fixed effect terms, separated by '+', without a trailing '+'.
    random: Optional[str]
        The random effect terms with all parentheses removed, or None if the
        formula has no `(`.
    """

    model: str
    dependent: str
    fixed: str
    random: str | None = None

    @property
    def has_random(self) -> bool:
        """

        Returns
        -------
        bool
        """
        return self.random is not None


@dataclass(kw_only=True, frozen=True)
class ModelEffectsBatch:
    """
    The parsed formulas of one call, in input order.

    Attributes
    ----------
    effects: list[ModelEffects]
        One entry per input formula.
    """

    effects: list[ModelEffects] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.effects)

    def __iter__(self):
        return iter(self.effects)

    @property
    def has_random(self) -> bool:
        """
        Whether at least one formula in the batch has a random effect term.

        Returns
        -------
        bool
        """
        return any(effect.has_random for effect in self.effects)

    def to_frame(self, drop_empty_random: bool = True) -> pd.DataFrame:
        """
        Collect the parsed formulas in a DataFrame.

        Parameters
        ----------
        drop_empty_random: bool, optional
            Drop the `Random` column when no formula in the batch has a random
            effect term. Defaults to True.

        Returns
        -------
        pandas.DataFrame
            Columns `Model`, `Dependent`, `Fixed` and, unless dropped, `Random`.
            Row i corresponds to formula i.
        """
        _check_type(drop_empty_random, bool, "drop_empty_random")
        df = pd.DataFrame(
            [
                [effect.model, effect.dependent, effect.fixed, effect.random]
                for effect in self.effects
            ],
            columns=_COLUMNS,
            dtype=object,
        )
        if drop_empty_random and not self.has_random:
            df = df.drop(columns="Random")
        return df


@dataclass(frozen=True)
class _Pattern:
    whitespace: re.Pattern = re.compile(r"\s+")
    trailing_plus: re.Pattern = re.compile(r"\+$")
    parentheses: re.Pattern = re.compile(r"[()]")


def _describe_row(index: int | None) -> str:
    return "" if index is None else f" (row {index})"


def _parse_dependent_predictors(
    formula: str, stripped: str, index: int | None
) -> tuple[str, str]:
    if "~" not in stripped:
        raise MalformedFormulaError(
            f"Expect formula of form `dependent ~ predictors`, received{_describe_row(index)}: {formula!r}",
            formula=formula,
            index=index,
        )
    dependent, predictors = stripped.split("~", 1)
    if "~" in predictors:
        warnings.warn(
            f"Formula{_describe_row(index)} {formula!r} contains more than one `~`. "
            f"Only the first one separates the dependent variable; "
            f"`{predictors}` is kept as the predictors.",
            UserWarning,
            stacklevel=find_stack_level(),
        )
    return dependent, predictors


def _parse_fixed_random(predictors: str) -> tuple[str, str | None]:
    # Split at the first "(" only: nested groupings stay in the random part.
    fixed, paren, random = predictors.partition("(")
    fixed = re.sub(_Pattern.trailing_plus, "", fixed)
    if not paren:
        return fixed, None
    return fixed, re.sub(_Pattern.parentheses, "", random)


def _split_formula(formula: str, index: int | None = None) -> ModelEffects:
    stripped = re.sub(_Pattern.whitespace, "", formula)
    dependent, predictors = _parse_dependent_predictors(formula, stripped, index)
    fixed, random = _parse_fixed_random(predictors)
    return ModelEffects(
        model=formula, dependent=dependent, fixed=fixed, random=random
    )


def _check_formulas(formulas) -> list[str]:
    if formulas is None:
        raise UsageError(
            "Argument 'formulas' must be a string or an ordered collection of strings, got None."
        )
    if isinstance(formulas, str):
        return [formulas]
    if isinstance(formulas, pd.DataFrame):
        raise UsageError(
            "Argument 'formulas' must be a single column of formulas, got a DataFrame. "
            "Select the column holding the formulas first."
        )
    if isinstance(formulas, (Mapping, Set)) or not isinstance(formulas, Iterable):
        raise UsageError(
            f"Argument 'formulas' must be an ordered collection of strings, got {type(formulas).__name__}."
        )

    formulas = list(formulas)
    if not formulas:
        raise UsageError("Argument 'formulas' must contain at least one formula.")
    for i, formula in enumerate(formulas):
        if not isinstance(formula, str):
            raise UsageError(
                f"All formulas must be strings, but element {i} is {type(formula).__name__}: {formula!r}"
            )
    return formulas


def split_formula(formula: str) -> ModelEffects:
    """
    Split a single model formula into its dependent, fixed and random parts.

    All whitespace is removed first. The formula is then split at the first
    `~` into the dependent variable and the predictors, and the predictors are
    split at the first `(` into fixed and random effect terms. A trailing '+'
    is removed from the fixed part, and all parentheses are removed from the
    random part.

    Parameters
    ----------
    formula : str
        A formula such as "y ~ x1 + x2 + (1 | subject)".

    Returns
    -------
    ModelEffects

    Raises
    ------
    UsageError
        If `formula` is not a string.
    MalformedFormulaError
        If `formula` contains no `~`.
    """
    if not isinstance(formula, str):
        raise UsageError(
            f"Argument 'formula' must be str, got {type(formula).__name__}"
        )
    return _split_formula(formula)


def parse_model_effects(
    formulas: Union[str, Iterable[str]],
) -> ModelEffectsBatch:
    """
    Split a batch of model formulas.

    Parameters
    ----------
    formulas : str or iterable of str
        The formulas to split. A single string is treated as a batch of one.

    Returns
    -------
    ModelEffectsBatch
        The parsed formulas in input order. `has_random` tells whether any of
        them has a random effect term.

    Raises
    ------
    UsageError
        If `formulas` is None, empty, unordered, or contains non-strings.
    MalformedFormulaError
        If any formula contains no `~`. The whole batch fails.
    """
    checked = _check_formulas(formulas)
    return ModelEffectsBatch(
        effects=[_split_formula(formula, i) for i, formula in enumerate(checked)]
    )


def extract_model_effects(
    formulas: Union[str, Iterable[str]],
    drop_empty_random: Optional[bool] = None,
) -> pd.DataFrame:
    """
    Split model formulas into dependent variable, fixed and random effects.

    Models with and without random effects can be mixed. Models without random
    effects get a missing value in the `Random` column. If none of the models
    has random effects, the `Random` column is dropped.

    Parameters
    ----------
    formulas : str or iterable of str
        The formulas to split, e.g. ["y ~ x1 + x2 + (1|subject)", "y ~ x1"].
    drop_empty_random : bool, optional
        Whether to drop the `Random` column when no model has random effects.
        Defaults to the `drop_empty_random` option (True).

    Returns
    -------
    pandas.DataFrame
        Columns `Model` (the formula as passed), `Dependent`, `Fixed` and,
        conditionally, `Random`, with one row per formula in input order.

    Raises
    ------
    UsageError
        If `formulas` is None, empty, unordered, or contains non-strings.
    TypeError
        If `drop_empty_random` is not a bool.
    MalformedFormulaError
        If any formula contains no `~`.

    Examples
    --------
    ```{python}
    import pycvms as pc

    pc.extract_model_effects(["y ~ x1 + x2 + (1|subject)", "y ~ x1"])
    ```
    """
    if drop_empty_random is None:
        drop_empty_random = get_option("drop_empty_random")
    return parse_model_effects(formulas).to_frame(drop_empty_random=drop_empty_random)
