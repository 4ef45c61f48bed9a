"""Tests for the Result core.

Validates:
- Construction and accessor contracts
- Canonical defaults for empty constructors
- Rendering, equality and hashing
- Immutability and the closed variant set
"""

from __future__ import annotations

import copy
import pickle

import pytest

from fallible import (
    DEFAULT_SUCCESS,
    Fail,
    Result,
    ResultException,
    Success,
    empty_fail,
    empty_success,
    fail,
    success,
)


# ═════════════════════════════════════════════════════════════════════════════
# Construction & Accessors
# ═════════════════════════════════════════════════════════════════════════════


def test_success_construction() -> None:
    """Test Success holds result, title and message and no error."""
    result: Result[int] = success(42, title="Answer", message="computed")

    assert result.is_success
    assert not result.is_fail
    assert result.result == 42
    assert result.title == "Answer"
    assert result.message == "computed"
    assert result.error is None


def test_fail_construction() -> None:
    """Test Fail holds error, stack trace, title and message."""
    result = fail("boom", stack_trace="trace", title="Oops", message="details")

    assert result.is_fail
    assert not result.is_success
    assert result.error == "boom"
    assert isinstance(result, Fail)
    assert result.stack_trace == "trace"
    assert result.title == "Oops"
    assert result.message == "details"


def test_static_constructors_match_module_functions() -> None:
    """Test Result.success/fail build the same variants as the module functions."""
    assert Result.success(1, title="t") == success(1, title="t")
    assert Result.fail("e", message="m") == fail("e", message="m")
    assert Result.empty_success() == empty_success()
    assert Result.empty_fail() == empty_fail()


def test_optional_fields_stay_absent() -> None:
    """Test absent title/message are None, distinct from empty strings."""
    absent = success(1)
    empty = success(1, title="", message="")

    assert absent.title is None
    assert absent.message is None
    assert empty.title == ""
    assert empty.message == ""
    assert absent != empty


def test_success_accepts_none_result() -> None:
    """Test None is a legitimate success value."""
    assert success(None).result is None


def test_fail_requires_error() -> None:
    """Test Fail rejects a missing error."""
    with pytest.raises(TypeError, match="requires an error"):
        fail(None)


def test_result_accessor_raises_on_fail() -> None:
    """Test reading result on Fail raises a ResultException built from its fields."""
    result = fail("boom", stack_trace="trace", title="Oops", message="details")

    with pytest.raises(ResultException) as info:
        _ = result.result

    assert info.value.error == "boom"
    assert info.value.title == "Oops"
    assert info.value.message == "details"
    assert info.value.stack_trace == "trace"


def test_result_accessor_chains_exception_errors() -> None:
    """Test an exception error becomes the ResultException's cause."""
    cause = KeyError("missing")

    with pytest.raises(ResultException) as info:
        _ = fail(cause).result

    assert info.value.error is cause
    assert info.value.__cause__ is cause


def test_as_success_and_as_fail() -> None:
    """Test narrowing returns the variant or None."""
    ok = success("value")
    err = fail("error")

    assert ok.as_success is ok
    assert ok.as_fail is None
    assert err.as_fail is err
    assert err.as_success is None


# ═════════════════════════════════════════════════════════════════════════════
# throw_when_fail
# ═════════════════════════════════════════════════════════════════════════════


def test_throw_when_fail_raises_with_all_fields() -> None:
    """Test throw_when_fail raises ResultException carrying every field."""
    result = fail("error", stack_trace="trace", title="Title", message="Message")

    with pytest.raises(ResultException) as info:
        result.throw_when_fail()

    assert info.value == ResultException("error", title="Title", message="Message")
    assert info.value.stack_trace == "trace"


def test_throw_when_fail_minimal() -> None:
    """Test throw_when_fail with only an error."""
    with pytest.raises(ResultException) as info:
        fail("error").throw_when_fail()

    assert info.value.error == "error"
    assert not info.value.has_title
    assert not info.value.has_message


def test_throw_when_fail_noop_on_success() -> None:
    """Test throw_when_fail does nothing for Success."""
    assert success(1).throw_when_fail() is None


# ═════════════════════════════════════════════════════════════════════════════
# Canonical Defaults
# ═════════════════════════════════════════════════════════════════════════════


def test_empty_success_default_payload() -> None:
    """Test empty_success holds the 'Operation succeeded' marker."""
    result = empty_success()

    assert result.is_success
    assert result.result is DEFAULT_SUCCESS
    assert str(result.result) == "Operation succeeded"
    assert result.title is None
    assert result.message is None


def test_default_success_only_equals_itself() -> None:
    """Test the default marker never equals other values."""
    value = empty_success().result

    assert value == empty_success().result
    assert value != True  # noqa: E712
    assert value != False  # noqa: E712
    assert value != "true"
    assert value != 1
    assert value is not None
    assert value != None  # noqa: E711


def test_empty_fail_default_payload() -> None:
    """Test empty_fail holds a ResultException wrapping 'Operation failed'."""
    result = empty_fail()

    assert result.is_fail
    assert isinstance(result.error, ResultException)
    assert result.error.error == "Operation failed"
    assert str(result.error) == "ResultException: Operation failed"
    assert result.title is None
    assert result.message is None


def test_empty_states_are_equal() -> None:
    """Test two empty instances of each variant are equal with equal hashes."""
    assert empty_success() == empty_success()
    assert empty_fail() == empty_fail()
    assert hash(empty_success()) == hash(empty_success())
    assert hash(empty_fail()) == hash(empty_fail())


def test_empty_constructors_accept_context() -> None:
    """Test empty constructors keep title and message."""
    ok = Success.empty(title="Saved", message="Operation completed")
    err = Fail.empty(title="Error", message="Operation failed")

    assert (ok.title, ok.message) == ("Saved", "Operation completed")
    assert (err.title, err.message) == ("Error", "Operation failed")
    with pytest.raises(ResultException):
        _ = err.result


def test_default_success_survives_pickle() -> None:
    """Test the default marker stays a singleton across pickling."""
    assert pickle.loads(pickle.dumps(DEFAULT_SUCCESS)) is DEFAULT_SUCCESS


# ═════════════════════════════════════════════════════════════════════════════
# Rendering
# ═════════════════════════════════════════════════════════════════════════════


def test_success_rendering() -> None:
    """Test Success string format."""
    result = success("test", title="Title", message="Message")
    assert str(result) == "Success(result: test, title: Title, message: Message)"
    assert repr(success(1)) == "Success(result: 1, title: None, message: None)"


def test_fail_rendering() -> None:
    """Test Fail string format omits the stack trace."""
    result = fail("error", stack_trace="trace", title="Title", message="Message")
    assert str(result) == "Fail(error: error, title: Title, message: Message)"


# ═════════════════════════════════════════════════════════════════════════════
# Equality
# ═════════════════════════════════════════════════════════════════════════════


def test_success_equality() -> None:
    """Test Success equality covers result, title and message."""
    assert success(1, "t", "m") == success(1, "t", "m")
    assert hash(success(1, "t", "m")) == hash(success(1, "t", "m"))
    assert success(1, "t", "m") != success(2, "t", "m")
    assert success(1, "t", "m") != success(1, "x", "m")
    assert success(1, "t", "m") != success(1, "t", "x")


def test_fail_equality_ignores_stack_trace() -> None:
    """Test Fail equality covers error, title and message but not the trace."""
    left = fail("e", stack_trace="one", title="t", message="m")
    right = fail("e", stack_trace="two", title="t", message="m")

    assert left == right
    assert hash(left) == hash(right)
    assert left != fail("other", title="t", message="m")


def test_variants_never_equal() -> None:
    """Test Success and Fail are never equal, even over the same payload."""
    assert success("x") != fail("x")
    assert fail("x") != success("x")


def test_equality_with_foreign_types() -> None:
    """Test comparison with non-Result values is False."""
    assert success(1) != 1
    assert fail("e") != "e"


# ═════════════════════════════════════════════════════════════════════════════
# Immutability & Closed Hierarchy
# ═════════════════════════════════════════════════════════════════════════════


def test_results_are_immutable() -> None:
    """Test attribute assignment and deletion are rejected."""
    result = success(1, title="t")

    with pytest.raises(AttributeError):
        result.title = "changed"  # type: ignore[misc]
    with pytest.raises(AttributeError):
        result._result = 2  # type: ignore[attr-defined]
    with pytest.raises(AttributeError):
        del result._title  # type: ignore[attr-defined]

    assert result == success(1, title="t")


def test_result_hierarchy_is_closed() -> None:
    """Test no third variant can be declared."""
    with pytest.raises(TypeError, match="closed"):
        class Pending(Result[int]):  # noqa: F841
            pass

    with pytest.raises(TypeError, match="closed"):
        class Partial(Success[int]):  # noqa: F841
            pass


def test_copy_and_pickle_round_trip() -> None:
    """Test copy and pickle rebuild equal instances despite immutability."""
    ok = success([1, 2], title="t")
    err = fail("e", stack_trace="trace", title="t", message="m")

    assert copy.copy(ok) == ok
    assert copy.deepcopy(err) == err
    assert pickle.loads(pickle.dumps(err)).stack_trace == "trace"


# ═════════════════════════════════════════════════════════════════════════════
# copy_with
# ═════════════════════════════════════════════════════════════════════════════


def test_success_copy_with_updates_fields() -> None:
    """Test Success.copy_with replaces given fields."""
    original = Success("test", title="Success", message="Test message")
    updated = original.copy_with(result="updated", title="Updated", message="Updated message")

    assert updated == Success("updated", title="Updated", message="Updated message")
    assert original.result == "test"


def test_success_copy_with_clears_fields() -> None:
    """Test Success.copy_with clear flags drop optional fields."""
    updated = Success("test", title="Success", message="Msg").copy_with(clear_title=True, clear_message=True)

    assert updated.result == "test"
    assert updated.title is None
    assert updated.message is None


def test_fail_copy_with_updates_fields() -> None:
    """Test Fail.copy_with replaces given fields."""
    updated = Fail("error", title="Error", message="Msg").copy_with(error="updated", title="Updated")

    assert updated.error == "updated"
    assert updated.title == "Updated"
    assert updated.message == "Msg"


def test_fail_copy_with_clears_fields() -> None:
    """Test Fail.copy_with clear flags drop the trace, title and message."""
    updated = Fail("error", stack_trace="trace", title="Error", message="Msg").copy_with(
        clear_stack_trace=True, clear_title=True, clear_message=True,
    )

    assert updated.error == "error"
    assert updated.stack_trace is None
    assert updated.title is None
    assert updated.message is None


# ═════════════════════════════════════════════════════════════════════════════
# Structural Pattern Matching
# ═════════════════════════════════════════════════════════════════════════════


def _describe(result: Result[int]) -> str:
    match result:
        case Success(value, title):
            return f"ok {value} {title}"
        case Fail(error, _, title, message):
            return f"err {error} {title} {message}"
    return "unreachable"


def test_structural_pattern_matching() -> None:
    """Test match statements destructure both variants."""
    assert _describe(success(3, title="Count")) == "ok 3 Count"
    assert _describe(fail("bad", title="T", message="M")) == "err bad T M"
