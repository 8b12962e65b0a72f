from pycvms.report.visualize import (
    plot_metric_density,
)

__all__ = [
    "plot_metric_density",
]
