from pycvms.utils.utils import get_evaluation_data

__all__ = [
    "get_evaluation_data",
]
