# media_ops/production/services/job_card_service.py
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from media_ops import db
from ..actions import (
    ACTION_TIMESTAMPS, JobAction, available_actions, parse_action, requires_notes
)
from ..errors import ActionNotAllowed, ActionValidationError, JobCardNotFound
from ..models import JobCard, JobCardHistory, utcnow
from ..status import JobStatus, job_status


def get_job_card(job_card_id: int) -> JobCard:
    job_card = db.session.get(JobCard, job_card_id)
    if job_card is None:
        raise JobCardNotFound(job_card_id)
    return job_card


def list_job_cards(status=None):
    """All job cards, newest first, optionally narrowed to one canonical status."""
    job_cards = JobCard.query.order_by(JobCard.id.desc()).all()
    if status:
        wanted = JobStatus(status)
        job_cards = [card for card in job_cards if job_status(card) is wanted]
    return job_cards


def create_job_card(job_id, client_name=None, photographer_id=None, legacy_status=None):
    if not job_id:
        raise ActionValidationError("jobId is required")
    if JobCard.query.filter_by(job_id=job_id).first():
        raise ActionValidationError(f"Job card {job_id} already exists", status_code=409)

    job_card = JobCard(
        job_id=job_id,
        client_name=client_name,
        photographer_id=photographer_id,
        status=legacy_status,
    )
    try:
        db.session.add(job_card)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to create job card %s", job_id)
        raise
    return job_card


def get_history(job_card_id: int):
    return [entry.to_dict() for entry in get_job_card(job_card_id).history]


def apply_action(job_card_id: int, action, actor_id: str, role: str, notes=None) -> JobCard:
    """
    Records ``action`` on the job card for the acting user.

    The matching timestamp is only filled when still empty, so repeating an
    action (e.g. resubmitting for QC after a revision) leaves the original
    time in place and only adds to the history.
    """
    try:
        action = parse_action(action)
    except ValueError:
        raise ActionValidationError(f"Unknown action: {action}")

    notes = (notes or '').strip() or None
    if requires_notes(action) and not notes:
        raise ActionValidationError("Revision notes are required")

    job_card = get_job_card(job_card_id)
    options = available_actions(job_card, role, actor_id)
    if action not in [option.action for option in options]:
        current_app.logger.warning(
            "Rejected %s on job card %s by %s (%s), status %s",
            action.value, job_card_id, actor_id, role, job_status(job_card).value
        )
        raise ActionNotAllowed(
            f"Action '{action.value}' is not available for this job card"
        )

    now = utcnow()
    try:
        field = ACTION_TIMESTAMPS[action]
        if getattr(job_card, field) is None:
            setattr(job_card, field, now)

        if action is JobAction.ACCEPT and not job_card.editor_id:
            job_card.editor_id = actor_id
        elif action is JobAction.REVISION:
            job_card.revision_notes = notes

        db.session.add(JobCardHistory(
            job_card_id=job_card.id, action=action.value, by=actor_id, at=now, notes=notes
        ))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to apply %s on job card %s", action.value, job_card_id)
        raise

    current_app.logger.info(
        "Job card %s: %s by %s, status now %s",
        job_card_id, action.value, actor_id, job_status(job_card).value
    )
    return job_card
