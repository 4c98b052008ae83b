import math
import time

import pytest
import torch

from positbench.formats import TorchFormat, make_format
from positbench.harness import Sink, benchmark

F16 = make_format("float16")
BF16 = make_format("bfloat16")
F32 = make_format("float32")
F64 = make_format("float64")


def run(rows, repetitions, a, b, narrow=BF16, native=F32, reference=F64, **kw):
    return benchmark(rows, rows, repetitions, a, b, narrow=narrow, native=native, reference=reference, **kw)


@pytest.mark.parametrize("fmt", [F32, F64, BF16], ids=lambda f: f.name)
@pytest.mark.parametrize("n", [1, 3, 10])
def test_product_of_filled_matrices_is_constant(fmt, n):
    a, b = 1.5, 2.0
    prod = fmt.full(n, n, a) @ fmt.full(n, n, b)
    # every entry is a sum of n equal products a*b
    expected = torch.full((n, n), a * b * n, dtype=torch.float64)
    torch.testing.assert_close(fmt.to_reference(prod), expected, rtol=0.0, atol=0.0)


@pytest.mark.parametrize("n", [10, 20, 30, 40, 50])
def test_exactly_representable_workload_has_zero_error(n):
    res = run(n, 2, 1.0, 2.0)
    assert res is not None
    assert res.narrow_mae == 0.0
    assert res.native_mae == 0.0


@pytest.mark.parametrize("a,b", [(1.0, 2.0), (1.00001, 0.99999), (1e-5, 2e-5), (1e4, 1e4)])
def test_errors_are_non_negative(a, b):
    res = run(10, 1, a, b, narrow=F16)
    assert res is not None
    assert res.narrow_mae >= 0.0
    assert res.native_mae >= 0.0


def test_error_grows_with_size_when_sum_hits_format_range():
    # 40*40 = 1600 per term: n*1600 stays exact in float16 up to n=40 and overflows at n=50
    errors = []
    for n in (10, 20, 30, 40, 50):
        res = run(n, 1, 40.0, 40.0, narrow=F16)
        assert res is not None
        errors.append(res.narrow_mae)
        assert res.native_mae == 0.0
    assert errors == sorted(errors)
    assert errors[0] == 0.0
    assert math.isinf(errors[-1])


def test_repetitions_average_deterministic_error_and_positive_time():
    single = run(12, 1, 1.00001, 0.99999, narrow=F16)
    many = run(12, 4, 1.00001, 0.99999, narrow=F16)
    assert single is not None and many is not None
    assert many.narrow_mae == pytest.approx(single.narrow_mae, rel=1e-12)
    assert many.native_mae == pytest.approx(single.native_mae, rel=1e-12)
    for r in (single, many):
        assert r.narrow_time_us > 0.0
        assert r.native_time_us > 0.0
    assert many.repetitions == 4


def test_sum_and_difference_are_consumed_every_repetition():
    sink = Sink()
    res = run(5, 3, 1.0, 2.0, sink=sink)
    assert res is not None
    # 3 repetitions x 2 formats x (sum, difference)
    assert sink.consumed == 12


class SlowReference(TorchFormat):
    def to_reference(self, matrix):
        time.sleep(0.2)
        return super().to_reference(matrix)


def test_reference_and_error_pass_are_not_timed():
    res = run(4, 2, 1.0, 2.0, narrow=F16, reference=SlowReference("float64", torch.float64))
    assert res is not None
    # the 0.2 s conversion must not show up in either mean time
    assert res.narrow_time_us < 100_000
    assert res.native_time_us < 100_000


@pytest.mark.parametrize("reps", [0, -1])
def test_non_positive_repetitions_rejected(reps):
    with pytest.raises(ValueError, match="repetitions"):
        run(4, reps, 1.0, 2.0)


def test_invalid_shapes_rejected():
    with pytest.raises(ValueError):
        benchmark(0, 0, 1, 1.0, 2.0, narrow=BF16, native=F32, reference=F64)
    with pytest.raises(ValueError, match="square"):
        benchmark(3, 4, 1, 1.0, 2.0, narrow=BF16, native=F32, reference=F64)


def test_non_finite_native_result_aborts_call(log):
    res = run(10, 2, float("nan"), 1.0)
    assert res is None
    errors = log.messages("error")
    assert len(errors) == 1
    assert "float32 result has NaN or Inf" in errors[0]
    assert "10x10" in errors[0]


def test_non_finite_narrow_input_aborts_call(log):
    # 1e5 overflows float16 to inf but is fine in float32
    res = run(10, 2, 1e5, 1.0, narrow=F16)
    assert res is None
    errors = log.messages("error")
    assert len(errors) == 1
    assert "float16 input matrices are invalid at size 10x10" in errors[0]


def test_abort_does_not_affect_next_call(log):
    assert run(6, 1, 1e5, 1.0, narrow=F16) is None
    res = run(6, 1, 1.0, 2.0, narrow=F16)
    assert res is not None
    assert res.narrow_mae == 0.0
