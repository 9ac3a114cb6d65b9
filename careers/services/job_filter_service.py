"""
Public job-list filtering.

Filters are independent, default to ``All`` and are AND-combined. The
search text matches the title as a case-insensitive substring; every other
filter is an exact match on one job attribute.
"""
from typing import Dict, Iterable, List, Mapping

ALL = 'All'

# Query parameter -> job attribute, in display order
CATEGORY_FILTERS = [
    ('department', 'department'),
    ('location', 'location'),
    ('employment_type', 'employment_type'),
    ('job_type', 'job_type'),
    ('work_policy', 'work_policy'),
    ('experience_level', 'experience_level'),
]

FILTER_LABELS = {
    'department': 'Department',
    'location': 'Location',
    'employment_type': 'Employment Type',
    'job_type': 'Job Type',
    'work_policy': 'Work Policy',
    'experience_level': 'Experience Level',
}


def parse_filters(args: Mapping[str, str]) -> Dict[str, str]:
    """Read filter values from request args, defaulting to All."""
    filters = {'search': (args.get('search') or '').strip()}
    for param, _ in CATEGORY_FILTERS:
        value = (args.get(param) or '').strip()
        filters[param] = value or ALL
    return filters


def _value(job, attr):
    if isinstance(job, Mapping):
        return job.get(attr)
    return getattr(job, attr, None)


def matches(job, filters: Mapping[str, str]) -> bool:
    search = (filters.get('search') or '').strip().lower()
    if search and search not in (_value(job, 'title') or '').lower():
        return False
    for param, attr in CATEGORY_FILTERS:
        wanted = filters.get(param) or ALL
        if wanted != ALL and _value(job, attr) != wanted:
            return False
    return True


def filter_jobs(jobs: Iterable, filters: Mapping[str, str]) -> List:
    """Jobs satisfying every active filter, input order preserved."""
    return [job for job in jobs if matches(job, filters)]


def filter_options(jobs: Iterable) -> Dict[str, List[str]]:
    """Distinct values per filter across the given jobs, prefixed with All."""
    jobs = list(jobs)
    options = {}
    for param, attr in CATEGORY_FILTERS:
        values = sorted({_value(job, attr) for job in jobs if _value(job, attr)})
        options[param] = [ALL] + values
    return options


def is_filtered(filters: Mapping[str, str]) -> bool:
    """True when any filter narrows the list."""
    if filters.get('search'):
        return True
    return any((filters.get(param) or ALL) != ALL for param, _ in CATEGORY_FILTERS)
