"""Unit tests for output folder and file naming."""

from datetime import date
from pathlib import Path

import pytest

from scribe.contexts.intake.job_data_structure import JobRecord
from scribe.contexts.rendering.naming import (
    NamingScheme,
    build_basename,
    company_slug,
    dated_basename,
    dob_digits,
    identity_basename,
    job_folder_name,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "company, expected",
    [
        ("Big Company Pty Ltd", "BigCompanyPtyLtd"),
        ("AT&T", "ATT"),
        ("Rio-Tinto (WA)", "Rio-TintoWA"),
        ("", "Company"),
        (None, "Company"),
        ("!!!", "Company"),
    ],
)
def test_company_slug(company, expected):
    assert company_slug(company) == expected


@pytest.mark.unit
def test_dated_basename():
    assert (
        dated_basename("Big Company Pty Ltd", "Doe", date(2026, 2, 15))
        == "260215.Doe.CL.BigCompanyPtyLtd"
    )


@pytest.mark.unit
def test_dated_basename_blank_last_name():
    assert dated_basename("Acme", "  ", date(2026, 2, 15)) == "260215.Applicant.CL.Acme"


@pytest.mark.unit
def test_identity_basename():
    assert identity_basename("Big Company Pty Ltd", "Doe", "2003-12-10") == "031210.Doe.BigCompanyPtyLtd"


@pytest.mark.unit
def test_identity_basename_missing_dob():
    assert identity_basename("Acme", "Doe", None) == "000000.Doe.Acme"


@pytest.mark.unit
def test_last_name_whitespace_removed():
    assert identity_basename("Acme", "van der Berg", "2003-12-10") == "031210.vanderBerg.Acme"


@pytest.mark.unit
@pytest.mark.parametrize(
    "dob, expected",
    [
        ("2003-12-10", "031210"),
        ("031210", "031210"),
        ("10/12/2003", "122003"),
        ("10.12.2003", "122003"),
        ("2003 12 10", "031210"),
        ("12-10", "000000"),
        ("", "000000"),
        (None, "000000"),
    ],
)
def test_dob_digits(dob, expected):
    assert dob_digits(dob) == expected


@pytest.mark.unit
def test_build_basename_dispatch():
    when = date(2026, 2, 15)

    assert build_basename(NamingScheme.DATED, "Acme", "Doe", when=when) == "260215.Doe.CL.Acme"
    assert build_basename("identity", "Acme", "Doe", dob="2003-12-10") == "031210.Doe.Acme"


@pytest.mark.unit
def test_build_basename_unknown_scheme():
    with pytest.raises(ValueError):
        build_basename("weekly", "Acme", "Doe")


@pytest.mark.unit
def test_job_folder_prefers_id():
    job = JobRecord(id="abc", link="https://www.seek.com.au/job/81234567")
    assert job_folder_name(job, Path("entry.json")) == "abc"


@pytest.mark.unit
def test_job_folder_from_link(job):
    assert job_folder_name(job, Path("entry.json")) == "81234567"


@pytest.mark.unit
def test_job_folder_from_entry_stem():
    job = JobRecord(link="https://example.com/careers/1")
    assert job_folder_name(job, Path("/data/job-data/acme-backend.json")) == "acme-backend"


@pytest.mark.unit
def test_job_folder_fallback():
    assert job_folder_name(JobRecord()) == "job"


@pytest.mark.unit
@pytest.mark.parametrize("dob", ["10/12/2003", "10.12.2003"])
def test_identity_basename_never_contains_separators(dob):
    basename = identity_basename("Acme", "Doe", dob)

    assert "/" not in basename
    assert basename.count(".") == 2


@pytest.mark.unit
@pytest.mark.parametrize(
    "last_name, expected",
    [("Doe/Smith", "DoeSmith"), ("St. John", "StJohn"), ("..\\x", "x"), ("//", "Applicant")],
)
def test_last_name_path_characters_removed(last_name, expected):
    assert identity_basename("Acme", last_name, "2003-12-10") == f"031210.{expected}.Acme"
