import pytest

from jobhist.core.conventions import HistoryConventions
from jobhist.core.names import (
    is_valid_hist_file_name,
    parse_hist_file_name,
    parse_in_progress_file_name,
)


def test_valid_hist_file_name():
    assert is_valid_hist_file_name("job123-1-1-user1-FAILED.jhist", r"job\d+") is True


@pytest.mark.parametrize(
    "file_name",
    [
        # job id doesn't match the job regex
        "application123-1-1-user1-FAILED.jhist",
        # user isn't supposed to be upper-cased
        "job123-1-1-USER-SUCCEEDED.jhist",
        # unknown status token
        "job123-1-1-user1-DONE.jhist",
        # too few fields
        "job123-1-user1-FAILED.jhist",
        # empty field
        "job123--1-user1-FAILED.jhist",
    ],
)
def test_invalid_hist_file_names(file_name: str):
    assert is_valid_hist_file_name(file_name, r"job\d+") is False


@pytest.mark.parametrize(
    "file_name",
    [
        "job123-1-1-user1-FAILED.json",
        "job123-1-1-user1-FAILED.jhist.inprogress",
        "job123-1-1-user1-FAILED",
        "job123-1-1-user1-FAILEDjhist",
    ],
)
def test_wrong_suffix_is_invalid(file_name: str):
    assert is_valid_hist_file_name(file_name, r".*") is False


def test_job_id_must_match_fully():
    assert is_valid_hist_file_name("job123x-1-1-user1-FAILED.jhist", r"job\d+") is False
    assert is_valid_hist_file_name("xjob123-1-1-user1-FAILED.jhist", r"job\d+") is False


def test_invalid_job_regex_does_not_raise():
    assert is_valid_hist_file_name("job123-1-1-user1-FAILED.jhist", r"job(\d+") is False


def test_parse_hist_file_name_decodes_fields():
    decoded = parse_hist_file_name(
        "application_1_0001-1559155036000-1559155099000-alice-KILLED.jhist",
        r"application_\d+_\d+",
    )

    assert decoded is not None
    assert decoded.job_id == "application_1_0001"
    assert decoded.started_ms == 1559155036000
    assert decoded.completed_ms == 1559155099000
    assert decoded.user == "alice"
    assert decoded.status == "KILLED"


def test_parse_hist_file_name_keeps_non_numeric_times_as_none():
    decoded = parse_hist_file_name("job1-a-b-user1-SUCCEEDED.jhist", r"job\d+")

    assert decoded is not None
    assert decoded.started_ms is None
    assert decoded.completed_ms is None


def test_hyphenated_job_id():
    assert is_valid_hist_file_name("tf-job-7-1-2-user1-SUCCEEDED.jhist", r"tf-job-\d+") is True


def test_custom_conventions():
    conventions = HistoryConventions(hist_suffix="hist", status_tokens=("DONE",))

    assert is_valid_hist_file_name("job1-1-1-user1-DONE.hist", r"job\d+", conventions) is True
    assert is_valid_hist_file_name("job1-1-1-user1-DONE.jhist", r"job\d+", conventions) is False


def test_parse_in_progress_file_name():
    decoded = parse_in_progress_file_name("job7-42-user1.jhist.inprogress", r"job\d+")

    assert decoded is not None
    assert decoded.job_id == "job7"
    assert decoded.started_ms == 42
    assert decoded.completed_ms is None
    assert decoded.status == "RUNNING"


def test_parse_in_progress_file_name_rejects_finished_file():
    assert parse_in_progress_file_name("job7-1-1-user1-FAILED.jhist", r"job\d+") is None
    assert parse_in_progress_file_name("job7-42-User1.jhist.inprogress", r"job\d+") is None


def test_non_ascii_digits_are_not_epoch_millis():
    file_name = "job1-²-１-user1-FAILED.jhist"

    assert is_valid_hist_file_name(file_name, r"job\d+") is True
    decoded = parse_hist_file_name(file_name, r"job\d+")
    assert decoded is not None
    assert decoded.started_ms is None
    assert decoded.completed_ms is None
