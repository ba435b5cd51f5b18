"""
FIT file decoding into plain samples and session summaries.

This is a thin adapter over fitparse; the analysis core only ever sees the
Activity it returns.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone

import fitparse

from faff_finder.models import Activity, Sample, SessionSummary


def _as_utc(value):
    """FIT timestamps decode as naive UTC datetimes; make them timezone-aware."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _record_values(values):
    r = dict(values)
    r['timestamp'] = _as_utc(r.get('timestamp'))
    return r


def _session_values(values):
    s = dict(values)
    s['start_time'] = _as_utc(s.get('start_time'))
    return s


def activity_from_fitfile(fitfile, file_name: str) -> Activity:
    """
    Build an Activity from anything exposing fitparse's ``get_messages``.

    Args:
        fitfile: fitparse.FitFile (or a compatible stand-in)
        file_name: Name reported in the analysis result

    Returns:
        Activity with samples in file order
    """
    sessions = tuple(
        SessionSummary.from_session(_session_values(msg.get_values()))
        for msg in fitfile.get_messages("session")
    )
    samples = tuple(
        Sample.from_record(_record_values(msg.get_values()))
        for msg in fitfile.get_messages("record")
    )
    return Activity(file_name=file_name, samples=samples, sessions=sessions)


def read_fit_file(filename: str) -> Activity:
    """Decode a FIT file from disk.

    Raises:
        fitparse.FitParseError: If the file is not valid FIT data.
        OSError: If the file cannot be opened.
    """
    fitfile = fitparse.FitFile(filename)
    return activity_from_fitfile(fitfile, os.path.basename(filename))
