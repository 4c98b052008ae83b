import time
from typing import List, Optional, Tuple

import pytest

from tools.helpers import _coerce_value, measure_time


def test_measure_time_freezes_on_exit():
    with measure_time() as elapsed:
        time.sleep(0.01)
        inside = elapsed()
    after = elapsed()
    time.sleep(0.01)
    assert inside > 0.0
    assert after >= inside
    assert elapsed() == after


@pytest.mark.parametrize("val,typ,expected", [
    ("3", int, 3),
    ("2.5", float, 2.5),
    ("off", bool, False),
    ("yes", bool, True),
    ("posit16", str, "posit16"),
    ("123", str, "123"),
    ("none", Optional[str], None),
    ("out/run", Optional[str], "out/run"),
    ("[4, [8, 8]]", List[Tuple[int, int]], [4, [8, 8]]),
])
def test_coerce_value(val, typ, expected):
    assert _coerce_value(val, typ) == expected
