# Import modules
from pycvms import (
    errors,
    formula,
    report,
    utils,
)

# Import frequently used functions and classes
from pycvms.formula import (
    ModelEffects,
    ModelEffectsBatch,
    extract_model_effects,
    parse_model_effects,
    split_formula,
)
from pycvms.options import get_option, option_context, options, set_option
from pycvms.report import plot_metric_density
from pycvms.utils import get_evaluation_data

__all__ = [
    "ModelEffects",
    "ModelEffectsBatch",
    "errors",
    "extract_model_effects",
    "formula",
    "get_evaluation_data",
    "get_option",
    "option_context",
    "options",
    "parse_model_effects",
    "plot_metric_density",
    "report",
    "set_option",
    "split_formula",
    "utils",
]

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pycvms")
except PackageNotFoundError:
    __version__ = "unknown"
