from datetime import datetime, timedelta, timezone

import pytest

from jobhist.core.partition import job_folder_path, resolve_zone, year_month_day_directory

TS = 1559155036000  # 2019-05-29T18:37:16Z


def test_year_month_day_directory_is_zone_sensitive():
    assert year_month_day_directory(TS, "UTC") == "2019/05/29"
    assert year_month_day_directory(TS, "GMT+6") == "2019/05/30"


def test_year_month_day_directory_accepts_datetimes():
    aware = datetime(2019, 5, 29, 18, 37, 16, tzinfo=timezone.utc)
    naive = datetime(2019, 5, 29, 18, 37, 16)

    assert year_month_day_directory(aware, timezone(timedelta(hours=6))) == "2019/05/30"
    assert year_month_day_directory(naive, "UTC") == "2019/05/29"


def test_year_month_day_directory_negative_offset():
    assert year_month_day_directory(datetime(2020, 1, 1, 2, tzinfo=timezone.utc), "UTC-05:00") == "2019/12/31"


def test_year_month_day_directory_iana_zone():
    assert year_month_day_directory(TS, "Asia/Dhaka") == "2019/05/30"


def test_year_month_day_directory_zero_pads():
    assert year_month_day_directory(datetime(2021, 3, 4, tzinfo=timezone.utc), "UTC") == "2021/03/04"


@pytest.mark.parametrize(
    ("name", "hours"),
    [("GMT+6", 6), ("UTC-3", -3), ("+02", 2), ("gmt+05:30", 5.5)],
)
def test_resolve_zone_fixed_offsets(name: str, hours: float):
    assert resolve_zone(name).utcoffset(None) == timedelta(hours=hours)


def test_resolve_zone_unknown_falls_back_to_utc():
    assert resolve_zone("Not/AZone") is timezone.utc
    assert resolve_zone("GMT+30") is timezone.utc


def test_job_folder_path():
    assert job_folder_path("/history", "application_1_1", TS, "GMT+6") == "/history/2019/05/30/application_1_1"


@pytest.mark.parametrize("name", ["Europe", "America", "Etc"])
def test_resolve_zone_directory_names_fall_back_to_utc(name: str):
    assert resolve_zone(name) is timezone.utc
    assert year_month_day_directory(TS, name) == "2019/05/29"
