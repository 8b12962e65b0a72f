import pytest

import pycvms as pc
from pycvms.options import get_option, option_context, options, set_option


def test_default_options():
    """Test the documented defaults."""
    assert get_option("plot_backend") == "lets_plot"
    assert get_option("density_fill") == ("darkblue", "lightblue")
    assert get_option("density_alpha") == 0.6
    assert get_option("drop_empty_random") is True


def test_set_option():
    set_option(density_alpha=0.2, plot_backend="matplotlib")

    assert get_option("density_alpha") == 0.2
    assert get_option("plot_backend") == "matplotlib"
    assert options.to_dict()["density_alpha"] == 0.2


def test_option_context_restores_previous_values():
    set_option(density_alpha=0.4)
    with option_context(density_alpha=0.9, drop_empty_random=False):
        assert get_option("density_alpha") == 0.9
        assert get_option("drop_empty_random") is False

    assert get_option("density_alpha") == 0.4
    assert get_option("drop_empty_random") is True


def test_option_context_restores_after_error():
    with pytest.raises(RuntimeError):
        with option_context(plot_backend="matplotlib"):
            raise RuntimeError("boom")

    assert get_option("plot_backend") == "lets_plot"


def test_unknown_option_in_context():
    with pytest.raises(KeyError, match="Unknown option 'color'"):
        with option_context(color="red"):
            pass


def test_density_fill_option_is_validated():
    results, _ = pc.get_evaluation_data(n_results=10, n_baseline=10)
    with option_context(density_fill=("red",)):
        with pytest.raises(ValueError, match="fill"):
            pc.plot_metric_density(results=results, metric="Accuracy")
