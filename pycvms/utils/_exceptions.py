import inspect
import os


def find_stack_level() -> int:
    """
    Count the frames between here and the first caller outside of pycvms.

    Used as `stacklevel` for `warnings.warn`, so that a warning about a
    formula or a metric column points at the user's call site.
    """
    import pycvms

    pkg_dir = os.path.dirname(pycvms.__file__)

    frame = inspect.currentframe()
    level = 0
    while frame is not None and inspect.getfile(frame).startswith(pkg_dir):
        frame = frame.f_back
        level += 1
    return level
