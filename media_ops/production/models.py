# media_ops/production/models.py
from datetime import datetime, timezone

from media_ops import db
from .sections import DEFAULT_SECTION_ORDER, default_visibility


def utcnow():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


class JobCard(db.Model):
    __tablename__ = 'job_cards'

    id = db.Column(db.Integer, primary_key=True)
    job_id = db.Column(db.String(50), unique=True, nullable=False)
    client_name = db.Column(db.String(255), nullable=True)
    photographer_id = db.Column(db.String(64), nullable=True)
    editor_id = db.Column(db.String(64), nullable=True)

    # Free-text status of cards that predate the timestamps
    status = db.Column(db.String(50), nullable=True)
    revision_notes = db.Column(db.Text, nullable=True)

    # Lifecycle, each set at most once
    uploaded_at = db.Column(db.DateTime, nullable=True)
    accepted_at = db.Column(db.DateTime, nullable=True)
    ready_for_qc_at = db.Column(db.DateTime, nullable=True)
    revision_requested_at = db.Column(db.DateTime, nullable=True)
    delivered_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    history = db.relationship(
        'JobCardHistory', backref='job_card', lazy=True,
        order_by='JobCardHistory.id', cascade='all, delete-orphan'
    )

    def to_dict(self):
        return {
            'id': self.id,
            'jobId': self.job_id,
            'clientName': self.client_name,
            'photographerId': self.photographer_id,
            'editorId': self.editor_id,
            'legacyStatus': self.status,
            'revisionNotes': self.revision_notes,
            'uploadedAt': _iso(self.uploaded_at),
            'acceptedAt': _iso(self.accepted_at),
            'readyForQCAt': _iso(self.ready_for_qc_at),
            'revisionRequestedAt': _iso(self.revision_requested_at),
            'deliveredAt': _iso(self.delivered_at),
            'history': [entry.to_dict() for entry in self.history],
        }


class JobCardHistory(db.Model):
    """Audit trail of actions on a job card. Rows are only ever appended."""
    __tablename__ = 'job_card_history'

    id = db.Column(db.Integer, primary_key=True)
    job_card_id = db.Column(db.Integer, db.ForeignKey('job_cards.id'), nullable=False, index=True)
    action = db.Column(db.String(20), nullable=False)
    by = db.Column(db.String(64), nullable=False)
    at = db.Column(db.DateTime, default=utcnow, nullable=False)
    notes = db.Column(db.Text, nullable=True)

    def to_dict(self):
        entry = {'action': self.action, 'by': self.by, 'at': _iso(self.at)}
        if self.notes:
            entry['notes'] = self.notes
        return entry


class DeliverySettings(db.Model):
    __tablename__ = 'delivery_settings'

    id = db.Column(db.Integer, primary_key=True)
    job_card_id = db.Column(db.Integer, db.ForeignKey('job_cards.id'), unique=True, nullable=False)
    delivery_url = db.Column(db.String(255), unique=True, nullable=False)

    section_order = db.Column(db.JSON, nullable=False, default=lambda: list(DEFAULT_SECTION_ORDER))
    section_visibility = db.Column(db.JSON, nullable=False, default=default_visibility)

    enable_comments = db.Column(db.Boolean, nullable=False, default=True)
    enable_downloads = db.Column(db.Boolean, nullable=False, default=True)
    is_public = db.Column(db.Boolean, nullable=False, default=True)
    password_protected = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def to_dict(self):
        return {
            'jobCardId': self.job_card_id,
            'deliveryUrl': self.delivery_url,
            'sectionOrder': list(self.section_order),
            'sectionVisibility': dict(self.section_visibility),
            'enableComments': self.enable_comments,
            'enableDownloads': self.enable_downloads,
            'isPublic': self.is_public,
            'passwordProtected': self.password_protected,
        }
