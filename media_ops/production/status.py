# media_ops/production/status.py
"""
Canonical job card status.

The status is derived from the lifecycle timestamps. Cards created before the
timestamps existed only carry the old free-text ``status`` column; for those
(and only those) the legacy value is looked up instead.
"""
from enum import Enum
from typing import NamedTuple, Optional


class JobStatus(str, Enum):
    PENDING = 'pending'
    UPLOADED = 'uploaded'
    IN_PROGRESS = 'in_progress'
    READY_FOR_QC = 'ready_for_qc'
    IN_REVISION = 'in_revision'
    DELIVERED = 'delivered'


class StatusSource(str, Enum):
    TIMESTAMPS = 'timestamps'
    LEGACY = 'legacy'


class ResolvedStatus(NamedTuple):
    status: JobStatus
    source: StatusSource


# Most advanced stage first
TIMESTAMP_STAGES = (
    ('delivered_at', JobStatus.DELIVERED, 'Delivered'),
    ('revision_requested_at', JobStatus.IN_REVISION, 'Revision Requested'),
    ('ready_for_qc_at', JobStatus.READY_FOR_QC, 'Ready for QC'),
    ('accepted_at', JobStatus.IN_PROGRESS, 'Accepted'),
    ('uploaded_at', JobStatus.UPLOADED, 'Uploaded'),
)

LEGACY_STATUS_MAP = {
    'unassigned': JobStatus.PENDING,
    'editing': JobStatus.IN_PROGRESS,
    'ready_for_qa': JobStatus.READY_FOR_QC,
    **{s.value: s for s in JobStatus},
}

STATUS_LABELS = {
    JobStatus.PENDING: 'Pending',
    JobStatus.UPLOADED: 'Uploaded',
    JobStatus.IN_PROGRESS: 'In Progress',
    JobStatus.READY_FOR_QC: 'Ready for QC',
    JobStatus.IN_REVISION: 'In Revision',
    JobStatus.DELIVERED: 'Delivered',
}

STATUS_COLORS = {
    JobStatus.PENDING: '#e9ecef',
    JobStatus.UPLOADED: '#cfe2ff',
    JobStatus.IN_PROGRESS: '#fff3cd',
    JobStatus.READY_FOR_QC: '#cff4fc',
    JobStatus.IN_REVISION: '#f8d7da',
    JobStatus.DELIVERED: '#d1e7dd',
}


def has_timestamps(job_card) -> bool:
    return any(getattr(job_card, field, None) for field, _, _ in TIMESTAMP_STAGES)


def status_from_timestamps(job_card) -> JobStatus:
    """Returns the stage of the most advanced timestamp that is set."""
    for field, status, _ in TIMESTAMP_STAGES:
        if getattr(job_card, field, None):
            return status
    return JobStatus.PENDING


def legacy_status(job_card) -> JobStatus:
    raw = getattr(job_card, 'status', None)
    if not raw:
        return JobStatus.PENDING
    return LEGACY_STATUS_MAP.get(str(raw).strip().lower(), JobStatus.PENDING)


def resolve_status(job_card) -> ResolvedStatus:
    """
    Picks the status source once: timestamps when any is set, otherwise the
    legacy column. The two are never combined.
    """
    if has_timestamps(job_card):
        return ResolvedStatus(status_from_timestamps(job_card), StatusSource.TIMESTAMPS)
    return ResolvedStatus(legacy_status(job_card), StatusSource.LEGACY)


def job_status(job_card) -> JobStatus:
    return resolve_status(job_card).status


def latest_milestone(job_card) -> Optional[tuple]:
    """(label, timestamp) of the most advanced timestamp, or None."""
    for field, _, label in TIMESTAMP_STAGES:
        value = getattr(job_card, field, None)
        if value:
            return label, value
    return None


def status_label(status) -> str:
    return STATUS_LABELS[JobStatus(status)]


def status_color(status) -> str:
    return STATUS_COLORS[JobStatus(status)]
