"Pytest configuration for pycvms tests."

import matplotlib

# Render seaborn/matplotlib plots without a display.
matplotlib.use("Agg")

import pytest  # noqa: E402

from pycvms.options import options  # noqa: E402


@pytest.fixture(autouse=True)
def reset_options():
    "Restore the global options after every test."
    old = options.to_dict()
    yield
    options.__dict__.update(old)
