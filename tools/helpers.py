from typing import get_origin, get_args
import yaml
from contextlib import contextmanager

def _coerce_value(val_str: str, typ):
    # Support Optional[...] and unions with None
    origin = get_origin(typ)
    args_ = get_args(typ)
    is_optional = False
    if origin is None:
        target_types = (typ,)
    elif origin is list or origin is tuple or origin is dict:
        # Collections (sizes, regimes) are written as YAML flow sequences on the command line
        return yaml.safe_load(val_str)
    elif origin is type(None):
        # Only NoneType
        is_optional = True
        target_types = (type(None),)
    else:
        # Assume Union
        target_types = args_
        if type(None) in target_types:
            is_optional = True
    # None coercion
    if val_str.lower() in ("none", "null"):
        if is_optional:
            return None
        # If not optional but asked for None, keep as string 'None'
        return val_str
    # Try booleans explicitly
    if bool in target_types or typ is bool:
        if val_str.lower() in ("1", "true", "t", "yes", "y", "on"):
            return True
        if val_str.lower() in ("0", "false", "f", "no", "n", "off"):
            return False
        # Fall through to attempt other conversions
    # Numeric conversions
    if int in target_types or typ is int:
        try:
            return int(val_str)
        except ValueError:
            pass
    if float in target_types or typ is float:
        try:
            return float(val_str)
        except ValueError:
            pass
    # Format names and paths stay strings even when they look like YAML literals
    if str in target_types:
        return val_str
    #noinspection PyBroadException
    try:
        parsed = yaml.safe_load(val_str)
        return parsed
    except Exception:
        return val_str


@contextmanager
def measure_time():
    """
    Measure wall-clock time for a code block.

    Usage:
        with measure_time() as elapsed:
            do_work()
        print(elapsed())  # seconds as float

    Yields:
        Callable[[], float]: A zero-arg function that returns the elapsed
        seconds. Inside the block it reads the clock; once the block exits
        the value is frozen at the exit timestamp.
    """
    import time

    t0 = time.perf_counter()
    t1 = None

    def elapsed() -> float:
        end = t1 if t1 is not None else time.perf_counter()
        return end - t0

    try:
        yield elapsed
    finally:
        t1 = time.perf_counter()


__all__ = ["_coerce_value", "measure_time"]
