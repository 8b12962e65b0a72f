"""
Formula splitting submodule for pycvms.

Splits model formulas such as "y ~ x1 + x2 + (1|subject)" into the dependent
variable, the fixed effects and the random effects.

Examples
--------
>>> from pycvms.formula import extract_model_effects
>>> extract_model_effects("y ~ x1 + x2 + (1 | subject)")["Random"][0]
'1|subject'
"""

from .parse import (
    ModelEffects,
    ModelEffectsBatch,
    extract_model_effects,
    parse_model_effects,
    split_formula,
)

__all__ = [
    "ModelEffects",
    "ModelEffectsBatch",
    "extract_model_effects",
    "parse_model_effects",
    "split_formula",
]
