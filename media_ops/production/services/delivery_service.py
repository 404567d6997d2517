# media_ops/production/services/delivery_service.py
import time

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from media_ops import db
from ..errors import DeliverySettingsConflict, DeliverySettingsError, DeliverySettingsMissing
from ..models import DeliverySettings
from ..sections import (
    DEFAULT_PAGE_FLAGS, SECTION_LABELS, SectionConfig, normalize_visibility, validate_order
)
from .job_card_service import get_job_card

_FLAG_COLUMNS = {
    'enableComments': 'enable_comments',
    'enableDownloads': 'enable_downloads',
    'isPublic': 'is_public',
    'passwordProtected': 'password_protected',
}


def get_delivery_settings(job_card_id: int):
    """The stored settings, or None when the job has none yet."""
    get_job_card(job_card_id)
    return DeliverySettings.query.filter_by(job_card_id=job_card_id).first()


def _apply_payload(settings, payload, partial):
    # Validate everything before touching the record
    for key in _FLAG_COLUMNS:
        if key in payload and not isinstance(payload[key], bool):
            raise DeliverySettingsError(f"{key} must be true or false")

    order = visibility = None
    try:
        if 'sectionOrder' in payload or not partial:
            order = validate_order(payload.get('sectionOrder') or list(SectionConfig.default().order))
        if 'sectionVisibility' in payload or not partial:
            visibility = normalize_visibility(payload.get('sectionVisibility'))
    except ValueError as e:
        raise DeliverySettingsError(str(e))

    if order is not None:
        settings.section_order = order
    if visibility is not None:
        settings.section_visibility = visibility

    for key, column in _FLAG_COLUMNS.items():
        if key in payload:
            setattr(settings, column, payload[key])
        elif not partial:
            setattr(settings, column, DEFAULT_PAGE_FLAGS[key])


def create_delivery_settings(job_card_id: int, payload: dict) -> DeliverySettings:
    if get_delivery_settings(job_card_id) is not None:
        raise DeliverySettingsConflict(f"Delivery settings for job card {job_card_id} already exist")

    delivery_url = payload.get('deliveryUrl') or f"job-{job_card_id}-{int(time.time() * 1000)}"
    settings = DeliverySettings(job_card_id=job_card_id, delivery_url=delivery_url)
    _apply_payload(settings, payload, partial=False)

    try:
        db.session.add(settings)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to create delivery settings for job card %s", job_card_id)
        raise
    current_app.logger.info("Created delivery settings for job card %s", job_card_id)
    return settings


def update_delivery_settings(job_card_id: int, payload: dict) -> DeliverySettings:
    settings = get_delivery_settings(job_card_id)
    if settings is None:
        raise DeliverySettingsMissing(f"No delivery settings for job card {job_card_id}")

    _apply_payload(settings, payload, partial=True)
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to update delivery settings for job card %s", job_card_id)
        raise
    return settings


def get_delivery_page(job_card_id: int) -> dict:
    """Data for the client-facing delivery page: visible sections in order."""
    settings = get_delivery_settings(job_card_id)
    if settings is None:
        config = SectionConfig.default()
        flags = dict(DEFAULT_PAGE_FLAGS)
    else:
        config = SectionConfig(
            order=list(settings.section_order),
            visibility=normalize_visibility(settings.section_visibility),
        )
        flags = {key: getattr(settings, column) for key, column in _FLAG_COLUMNS.items()}
        if not flags['isPublic']:
            raise DeliverySettingsMissing(f"Delivery page for job card {job_card_id} is not public")

    return {
        'jobCardId': job_card_id,
        'sections': [
            {'key': key, 'label': SECTION_LABELS[key][0], 'description': SECTION_LABELS[key][1]}
            for key in config.visible()
        ],
        **flags,
    }
