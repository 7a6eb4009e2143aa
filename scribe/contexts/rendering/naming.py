"""
Output naming for cover letter artifacts.

Two basename schemes are supported:
    dated:     YYMMDD.LastName.CL.CompanySlug   e.g. 260215.Doe.CL.AcmeCorp
    identity:  DOBDigits.LastName.CompanySlug   e.g. 031210.Doe.AcmeCorp

Per-job folders are named after the job id (see job_folder_name).
"""

import re
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Optional

from scribe.contexts.intake.job_data_structure import JobRecord
from scribe.utils.timestamp import yymmdd

DEFAULT_BASENAME = "coverletter"
FALLBACK_LAST_NAME = "Applicant"
FALLBACK_COMPANY = "Company"
FALLBACK_DOB_DIGITS = "000000"
FALLBACK_FOLDER = "job"

WHITESPACE = re.compile(r"\s+")
NON_SLUG_CHARS = re.compile(r"[^\w\-]")
NON_DIGITS = re.compile(r"\D")
JOB_LINK_ID = re.compile(r"/job/(\d+)")


class NamingScheme(str, Enum):
    """Basename scheme for the three output files."""

    DATED = "dated"
    IDENTITY = "identity"


def company_slug(company: Optional[str]) -> str:
    """
    Strip whitespace and anything outside word/hyphen characters.

    Examples:
        company_slug("Big Company Pty Ltd")
        # "BigCompanyPtyLtd"
        company_slug("AT&T")
        # "ATT"
    """
    slug = NON_SLUG_CHARS.sub("", WHITESPACE.sub("", company or ""))
    return slug or FALLBACK_COMPANY


def _last_name_part(last_name: Optional[str]) -> str:
    # Dots separate basename fields; slashes would become path separators
    return NON_SLUG_CHARS.sub("", WHITESPACE.sub("", last_name or "")) or FALLBACK_LAST_NAME


def dob_digits(dob: Optional[str]) -> str:
    """
    Last six digits of a date of birth, or "000000" if it has fewer.

    Separators of any kind are dropped first: "2003-12-10" and "2003 12 10"
    give "031210"; "10/12/2003" gives "122003".
    """
    digits = NON_DIGITS.sub("", dob or "")
    return digits[-6:] if len(digits) >= 6 else FALLBACK_DOB_DIGITS


def dated_basename(company: Optional[str], last_name: Optional[str], when: Optional[date] = None) -> str:
    """YYMMDD.LastName.CL.CompanySlug"""
    return f"{yymmdd(when)}.{_last_name_part(last_name)}.CL.{company_slug(company)}"


def identity_basename(company: Optional[str], last_name: Optional[str], dob: Optional[str]) -> str:
    """DOBDigits.LastName.CompanySlug"""
    return f"{dob_digits(dob)}.{_last_name_part(last_name)}.{company_slug(company)}"


def build_basename(
    scheme: NamingScheme,
    company: Optional[str],
    last_name: Optional[str],
    dob: Optional[str] = None,
    when: Optional[date] = None,
) -> str:
    """Dispatch to the basename function for scheme."""
    scheme = NamingScheme(scheme)
    if scheme is NamingScheme.DATED:
        return dated_basename(company, last_name, when)
    return identity_basename(company, last_name, dob)


def job_folder_name(job: JobRecord, entry_path: Optional[Path] = None) -> str:
    """
    Folder name for one job's artifacts.

    Precedence: job.id, then the numeric id in a ".../job/<digits>" link,
    then the stem of the job-data file, then "job".
    """
    if job.id and job.id.strip():
        return job.id.strip()

    match = JOB_LINK_ID.search((job.link or "").strip())
    if match:
        return match.group(1)

    if entry_path is not None and Path(entry_path).stem:
        return Path(entry_path).stem

    return FALLBACK_FOLDER
