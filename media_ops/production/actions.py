# media_ops/production/actions.py
"""
Which workflow actions a viewer may trigger on a job card.

The rules are a plain table keyed by canonical status and role so they can be
read and tested without going through the routes.
"""
from enum import Enum
from typing import List, NamedTuple

from .status import JobStatus, job_status


class JobAction(str, Enum):
    # Declaration order is the display order
    UPLOAD = 'upload'
    ACCEPT = 'accept'
    READY_FOR_QC = 'readyForQC'
    DELIVERED = 'delivered'
    REVISION = 'revision'


class Role:
    ADMIN = 'admin'
    LICENSEE = 'licensee'
    PHOTOGRAPHER = 'photographer'
    VA = 'va'
    EDITOR = 'editor'

    ALL = (ADMIN, LICENSEE, PHOTOGRAPHER, VA, EDITOR)
    REVIEWERS = (LICENSEE, ADMIN)


class ActionOption(NamedTuple):
    action: JobAction
    label: str
    variant: str


ACTION_LABELS = {
    JobAction.UPLOAD: ('Upload Files', 'default'),
    JobAction.ACCEPT: ('Accept Job', 'default'),
    JobAction.READY_FOR_QC: ('Mark Ready for QC', 'default'),
    JobAction.DELIVERED: ('Mark Delivered', 'default'),
    JobAction.REVISION: ('Request Revision', 'destructive'),
}

# Timestamp column each action fills in
ACTION_TIMESTAMPS = {
    JobAction.UPLOAD: 'uploaded_at',
    JobAction.ACCEPT: 'accepted_at',
    JobAction.READY_FOR_QC: 'ready_for_qc_at',
    JobAction.REVISION: 'revision_requested_at',
    JobAction.DELIVERED: 'delivered_at',
}

_UPLOADERS = (Role.PHOTOGRAPHER, Role.LICENSEE, Role.ADMIN)
_EDITORS = (Role.EDITOR, Role.ADMIN)

ACTION_RULES = {
    JobStatus.PENDING: {
        role: {JobAction.UPLOAD} for role in _UPLOADERS
    },
    JobStatus.UPLOADED: {
        role: {JobAction.ACCEPT} for role in _EDITORS
    },
    JobStatus.IN_PROGRESS: {
        role: {JobAction.READY_FOR_QC} for role in _EDITORS
    },
    JobStatus.READY_FOR_QC: {
        role: {JobAction.DELIVERED, JobAction.REVISION} for role in Role.REVIEWERS
    },
    # Back with the editor until the rework is resubmitted for QC
    JobStatus.IN_REVISION: {
        role: {JobAction.READY_FOR_QC} for role in _EDITORS
    },
    JobStatus.DELIVERED: {},
}


def parse_action(value) -> JobAction:
    """Raises ValueError for names that are not workflow actions."""
    return JobAction(value)


def requires_notes(action) -> bool:
    return JobAction(action) is JobAction.REVISION


def _entry_action(entry):
    if isinstance(entry, dict):
        return entry.get('action')
    return getattr(entry, 'action', None)


def resubmitted_for_qc(job_card) -> bool:
    """
    True when a readyForQC follows the latest revision in the history. The
    timestamps cannot show this since each is only set once.
    """
    resubmitted = False
    for entry in getattr(job_card, 'history', None) or []:
        action = _entry_action(entry)
        if action == JobAction.REVISION.value:
            resubmitted = False
        elif action == JobAction.READY_FOR_QC.value:
            resubmitted = True
    return resubmitted


def workflow_stage(job_card) -> JobStatus:
    """Row of ACTION_RULES that applies to the card."""
    status = job_status(job_card)
    if status is JobStatus.IN_REVISION and resubmitted_for_qc(job_card):
        return JobStatus.READY_FOR_QC
    return status


def allowed_actions(status, role) -> set:
    return set(ACTION_RULES.get(JobStatus(status), {}).get(role, set()))


def available_actions(job_card, role, user_id=None) -> List[ActionOption]:
    """
    Ordered options for the viewer. An empty list means there is nothing the
    viewer can do with the card right now.
    """
    allowed = allowed_actions(workflow_stage(job_card), role)
    if not allowed:
        return []

    # Once an editor is assigned, other editors only look
    editor_id = getattr(job_card, 'editor_id', None)
    if role == Role.EDITOR and user_id and editor_id and editor_id != user_id:
        return []

    options = []
    for action in JobAction:
        if action in allowed:
            label, variant = ACTION_LABELS[action]
            options.append(ActionOption(action, label, variant))
    return options
