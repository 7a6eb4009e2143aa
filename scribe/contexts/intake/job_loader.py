"""
Job-data discovery for the Intake context.

A job-data path is either a single .json file or a directory of .json files,
each holding one job record.
"""

import json
from pathlib import Path
from typing import List, Union

from scribe.contexts.intake.exceptions import InputError
from scribe.contexts.intake.job_data_structure import JobEntry, JobRecord
from scribe.contexts.intake.logger import _log_debug, _log_info


def _load_job_file(path: Path) -> JobEntry:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InputError(f"Invalid JSON in job data file: {e}", source=str(path)) from e
    return JobEntry(job=JobRecord.from_dict(data, source=str(path)), path=path)


def load_job_data(job_data_path: Union[str, Path]) -> List[JobEntry]:
    """
    Load job records from a file or directory.

    Args:
        job_data_path: A .json file, or a directory of .json files (sorted by name)

    Returns:
        List of JobEntry, one per file

    Raises:
        FileNotFoundError: If the path does not exist
        InputError: If a file holds invalid JSON or a malformed job record
    """
    path = Path(job_data_path)
    if not path.exists():
        raise FileNotFoundError(f"Job data path does not exist: {path}")

    if path.is_file():
        entries = [_load_job_file(path)]
    elif path.is_dir():
        entries = [_load_job_file(p) for p in sorted(path.glob("*.json"))]
    else:
        raise InputError(f"Job data path is neither file nor directory: {path}")

    _log_info(f"Loaded {len(entries)} job file(s) from {path}")
    for entry in entries:
        _log_debug(f"  {entry.path.name}: {entry.job.position_name} at {entry.job.company}")
    return entries
