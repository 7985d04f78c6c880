"""Tests for ecs_runtask.core.result module."""

import pytest

from ecs_runtask.core.errors import ParseError, RegistrationError
from ecs_runtask.core.result import Err, Ok, Result, partition_results, try_result_with


class TestOk:
    """Test Ok class."""

    def test_create_ok(self):
        result = Ok(42)
        assert result.value == 42
        assert result.is_ok() is True
        assert result.is_err() is False

    def test_unwrap(self):
        assert Ok("hello").unwrap() == "hello"
        assert Ok(10).unwrap_or(99) == 10

    def test_map_chaining(self):
        result = Ok(3).map(lambda x: x * 2).map(lambda x: x + 1)
        assert result.unwrap() == 7

    def test_flat_map(self):
        def double_if_even(x: int) -> Result[int]:
            if x % 2 == 0:
                return Ok(x * 2)
            return Err(ValueError("Odd number"))

        assert Ok(4).flat_map(double_if_even).unwrap() == 8
        assert Ok(3).flat_map(double_if_even).is_err()

    def test_inspect(self):
        seen = []
        result = Ok(42).inspect(seen.append)
        assert seen == [42]
        assert result.unwrap() == 42

    def test_err_side_no_ops(self):
        result = Ok(42).map_err(lambda e: ValueError("new")).or_else(lambda e: Ok(0))
        assert result.unwrap() == 42
        seen = []
        Ok(1).inspect_err(seen.append)
        assert seen == []

    def test_to_dict(self):
        assert Ok("arn").to_dict() == {"ok": True, "value": "arn"}


class TestErr:
    """Test Err class."""

    def test_create_err(self):
        error = ValueError("bad")
        result = Err(error)
        assert result.error is error
        assert result.is_err() is True

    def test_unwrap_raises(self):
        with pytest.raises(ParseError, match="bad file"):
            Err(ParseError("bad file")).unwrap()

    def test_unwrap_or(self):
        assert Err(ValueError("x")).unwrap_or("default") == "default"

    def test_short_circuits_chain(self):
        calls = []
        result = (
            Err(RegistrationError("rejected"))
            .map(lambda v: calls.append("map"))
            .flat_map(lambda v: calls.append("flat_map") or Ok(v))
            .inspect(lambda v: calls.append("inspect"))
        )
        assert calls == []
        assert isinstance(result.error, RegistrationError)

    def test_map_err_and_or_else(self):
        wrapped = Err(ValueError("raw")).map_err(lambda e: ParseError(f"wrapped: {e}"))
        assert wrapped.error.message == "wrapped: raw"
        assert Err(ValueError("x")).or_else(lambda e: Ok("backup")).unwrap() == "backup"

    def test_inspect_err(self):
        seen = []
        Err(ValueError("x")).inspect_err(seen.append)
        assert len(seen) == 1

    def test_to_dict_with_run_task_error(self):
        d = Err(ParseError("bad")).to_dict()
        assert d["ok"] is False
        assert d["error"]["category"] == "PARSE"

    def test_to_dict_with_plain_exception(self):
        d = Err(KeyError("k")).to_dict()
        assert d["error"]["error_type"] == "KeyError"


class TestPatternMatching:
    def test_match(self):
        match Ok(5):
            case Ok(value):
                assert value == 5
            case Err(_):
                pytest.fail("expected Ok")


class TestTryResultWith:
    def test_success(self):
        assert try_result_with(lambda: int("7")).unwrap() == 7

    def test_maps_caught_exception(self):
        result = try_result_with(
            lambda: int("x"),
            lambda e: ParseError(str(e), cause=e),
            catch=(ValueError,),
        )
        assert isinstance(result.error, ParseError)
        assert isinstance(result.error.cause, ValueError)

    def test_without_mapper_keeps_exception(self):
        result = try_result_with(lambda: 1 / 0)
        assert isinstance(result.error, ZeroDivisionError)

    def test_uncaught_exception_propagates(self):
        with pytest.raises(KeyError):
            try_result_with(lambda: {}["missing"], catch=(ValueError,))


class TestPartitionResults:
    def test_partition(self):
        values, errors = partition_results([Ok(1), Err(ValueError("a")), Ok(2), Err(ValueError("b"))])
        assert values == [1, 2]
        assert [str(e) for e in errors] == ["a", "b"]

    def test_empty(self):
        assert partition_results([]) == ([], [])
