"""
Tests for the formula splitting in pycvms/formula/parse.py.

This module contains:
- Part 1: Unit tests for splitting single formulas
- Part 2: Batch tests for extract_model_effects()
- Part 3: Edge case tests
"""

import pandas as pd
import pytest

import pycvms as pc
from pycvms.formula.parse import (
    ModelEffects,
    ModelEffectsBatch,
    _parse_fixed_random,
    extract_model_effects,
    parse_model_effects,
    split_formula,
)

# =============================================================================
# Part 1: Unit tests for split_formula()
# =============================================================================


class TestSplitFormula:
    """Tests for split_formula()."""

    @pytest.mark.parametrize(
        "formula,expected_dependent,expected_fixed,expected_random",
        [
            ("y ~ x1 + x2 + (1|subject)", "y", "x1+x2", "1|subject"),
            ("y ~ x1 + x2", "y", "x1+x2", None),
            ("D~F", "D", "F", None),
            ("y~x1+(1|g1)+(1|g2)", "y", "x1", "1|g1+1|g2"),
            ("y ~ x1 + (1 + x1 | g1/g2)", "y", "x1", "1+x1|g1/g2"),
            ("y ~ (1 | subject)", "y", "", "1|subject"),
            ("score ~ diagnosis * age + (1 | session:subject)", "score", "diagnosis*age", "1|session:subject"),
        ],
        ids=[
            "fixed_and_random",
            "fixed_only",
            "single_letters",
            "two_random_terms",
            "nested_grouping",
            "random_only",
            "interaction",
        ],
    )
    def test_split_formula(
        self, formula, expected_dependent, expected_fixed, expected_random
    ):
        effects = split_formula(formula)

        assert effects == ModelEffects(
            model=formula,
            dependent=expected_dependent,
            fixed=expected_fixed,
            random=expected_random,
        )
        assert effects.has_random is (expected_random is not None)

    def test_model_is_verbatim(self):
        formula = "  y ~ x1 +  (1 | g) "
        assert split_formula(formula).model == formula

    def test_whitespace_insensitive(self):
        spaced = split_formula("y ~ x1 + (1 | g)")
        compact = split_formula("y~x1+(1|g)")
        assert (spaced.dependent, spaced.fixed, spaced.random) == (
            compact.dependent,
            compact.fixed,
            compact.random,
        )

    def test_all_whitespace_characters_removed(self):
        effects = split_formula("y\t~\nx1 +\r\n x2 + ( 1 |\tg )")
        assert effects.dependent == "y"
        assert effects.fixed == "x1+x2"
        assert effects.random == "1|g"


class TestParseFixedRandom:
    """Tests for _parse_fixed_random()."""

    @pytest.mark.parametrize(
        "predictors,expected",
        [
            ("x1+x2", ("x1+x2", None)),
            ("x1+x2+(1|g)", ("x1+x2", "1|g")),
            ("x1+(1|g1)+(1|g2)", ("x1", "1|g1+1|g2")),
            ("x1+((1|g))", ("x1", "1|g")),
            ("(1|g)", ("", "1|g")),
            ("x1+", ("x1", None)),
            ("x1++", ("x1+", None)),
            ("x1++x2", ("x1++x2", None)),
            ("x1+(", ("x1", "")),
        ],
    )
    def test_parse_fixed_random(self, predictors, expected):
        assert _parse_fixed_random(predictors) == expected


# =============================================================================
# Part 2: Batch tests
# =============================================================================


class TestExtractModelEffects:
    """Tests for extract_model_effects()."""

    def test_random_column_present_when_any_row_has_random(self):
        df = extract_model_effects(["y~x1+(1|g)", "y~x1"])

        assert list(df.columns) == ["Model", "Dependent", "Fixed", "Random"]
        assert df.loc[0, "Random"] == "1|g"
        assert pd.isna(df.loc[1, "Random"])
        assert df.loc[1, "Fixed"] == "x1"

    def test_random_column_dropped_when_no_row_has_random(self):
        df = extract_model_effects(["y ~ x1 + x2", "z ~ x1", "y ~ x3"])

        assert list(df.columns) == ["Model", "Dependent", "Fixed"]
        assert df["Dependent"].tolist() == ["y", "z", "y"]
        assert df["Fixed"].tolist() == ["x1+x2", "x1", "x3"]

    def test_single_fixed_formula(self):
        df = extract_model_effects(["D~F"])

        assert "Random" not in df.columns
        assert df.loc[0, "Dependent"] == "D"
        assert df.loc[0, "Fixed"] == "F"

    def test_row_order_preserved(self):
        formulas = [f"y{i} ~ x{i} + (1 | g{i})" if i % 2 else f"y{i} ~ x{i}" for i in range(10)]
        df = extract_model_effects(formulas)

        assert df["Model"].tolist() == formulas
        assert df["Dependent"].tolist() == [f"y{i}" for i in range(10)]
        assert list(df.index) == list(range(10))

    def test_duplicates_allowed(self):
        df = extract_model_effects(["y ~ x + (1|g)"] * 3)
        assert len(df) == 3
        assert df["Random"].tolist() == ["1|g"] * 3

    def test_rerun_on_model_column_is_idempotent(self):
        formulas = ["y ~ x1 + x2 + (1|subject)", "y ~ x1", "y~(1|g1)+(1|g2)"]
        first = extract_model_effects(formulas)
        second = extract_model_effects(first["Model"])

        pd.testing.assert_frame_equal(first, second)

    def test_no_whitespace_in_parsed_fields(self):
        df = extract_model_effects(
            [" y ~ x1 +   x2 + ( 1 | subject ) ", "y ~ x1 * x2"]
        )
        for column in ["Dependent", "Fixed", "Random"]:
            for value in df[column].dropna():
                assert not any(c.isspace() for c in value)

    def test_single_string_is_a_batch_of_one(self):
        df = extract_model_effects("y ~ x1 + (1|g)")
        assert len(df) == 1
        assert df.loc[0, "Random"] == "1|g"

    @pytest.mark.parametrize(
        "container",
        [list, tuple, pd.Series, iter],
        ids=["list", "tuple", "series", "iterator"],
    )
    def test_accepted_containers(self, container):
        formulas = ["y ~ x1 + (1|g)", "y ~ x2"]
        df = extract_model_effects(container(formulas))
        assert df["Model"].tolist() == formulas

    def test_keep_empty_random(self):
        df = extract_model_effects(["y ~ x1"], drop_empty_random=False)
        assert list(df.columns) == ["Model", "Dependent", "Fixed", "Random"]
        assert df["Random"].isna().all()

    def test_drop_empty_random_option(self):
        with pc.option_context(drop_empty_random=False):
            df = extract_model_effects(["y ~ x1"])
        assert "Random" in df.columns

        df = extract_model_effects(["y ~ x1"])
        assert "Random" not in df.columns


class TestParseModelEffects:
    """Tests for parse_model_effects() and ModelEffectsBatch."""

    def test_has_random_flag(self):
        assert parse_model_effects(["y ~ x1", "y ~ x1 + (1|g)"]).has_random
        assert not parse_model_effects(["y ~ x1", "y ~ x2"]).has_random

    def test_batch_keeps_random_per_row(self):
        batch = parse_model_effects(["y ~ x1", "y ~ x1 + (1|g)"])

        assert isinstance(batch, ModelEffectsBatch)
        assert len(batch) == 2
        assert [effect.random for effect in batch] == [None, "1|g"]

    def test_to_frame_drops_only_on_request(self):
        batch = parse_model_effects(["y ~ x1"])
        assert "Random" not in batch.to_frame().columns
        assert "Random" in batch.to_frame(drop_empty_random=False).columns


# =============================================================================
# Part 3: Edge cases
# =============================================================================


class TestEdgeCases:
    def test_empty_fixed_part(self):
        df = extract_model_effects(["y~(1|subject)"])
        assert df.loc[0, "Fixed"] == ""
        assert df.loc[0, "Random"] == "1|subject"

    def test_only_single_trailing_plus_removed(self):
        df = extract_model_effects(["y ~ x1 + + (1|g)"])
        assert df.loc[0, "Fixed"] == "x1+"

    def test_leading_plus_kept(self):
        df = extract_model_effects(["y ~ + x1"])
        assert df.loc[0, "Fixed"] == "+x1"

    def test_additional_tilde_warns_and_stays_in_predictors(self):
        with pytest.warns(UserWarning, match="more than one `~`"):
            effects = split_formula("y ~ x ~ z")
        assert effects.dependent == "y"
        assert effects.fixed == "x~z"
        assert effects.random is None

    def test_empty_dependent(self):
        effects = split_formula("~ x1")
        assert effects.dependent == ""
        assert effects.fixed == "x1"
