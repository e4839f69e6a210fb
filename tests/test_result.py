from jobhist.core.result import FailureReason, ParseResult


def test_success_result():
    result = ParseResult.success([1, 2])

    assert result.ok is True
    assert result.value_or([]) == [1, 2]


def test_success_with_empty_value_is_not_a_failure():
    result = ParseResult.success([])

    assert result.ok is True
    assert result.failure is None


def test_failed_result_collapses_to_default():
    result = ParseResult.fail(FailureReason.IO_ERROR, "disk gone")

    assert result.ok is False
    assert result.detail == "disk gone"
    assert result.value_or(None) is None
