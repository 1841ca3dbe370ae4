# backend/tests/test_results.py
from market_sum.results import Degraded, Failed, Ok, combine, map_result
from market_sum.schemas.api import ApiResponse


def test_flags():
    assert Ok(1).degraded is False and Ok(1).reason is None
    assert Degraded(1, "why").degraded is True
    assert Failed("why").data is None


def test_map_result_keeps_status():
    assert map_result(Ok(2), lambda x: x * 2) == Ok(4)
    assert map_result(Degraded(2, "mock"), lambda x: x * 2) == Degraded(4, "mock")
    assert map_result(Failed("down"), lambda x: x * 2) == Failed("down")


def test_combine_all_ok():
    assert combine([Ok(1), Ok(2)]) == Ok([1, 2])


def test_combine_collects_reasons_and_drops_failures():
    result = combine([Ok(1), Degraded(2, "b mocked"), Failed("c down")])
    assert result == Degraded([1, 2], "b mocked; c down")


def test_combine_empty():
    assert combine([]) == Ok([])


def test_envelope_from_results():
    ok = ApiResponse.from_result(Ok([1]))
    assert ok.success and ok.data == [1] and not ok.degraded

    degraded = ApiResponse.from_result(Degraded([2], "mock"))
    assert degraded.success and degraded.degraded and degraded.reason == "mock"

    failed = ApiResponse.from_result(Failed("down"))
    assert failed.success is False
    assert failed.error == "down"
    assert failed.data is None
