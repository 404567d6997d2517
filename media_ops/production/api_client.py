# media_ops/production/api_client.py
"""HTTP client for the production REST endpoints."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import requests


class ApiError(Exception):
    """A failed request. ``message`` is what the user gets to see."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _parse_ts(value):
    return datetime.fromisoformat(value) if value else None


@dataclass
class JobCardSnapshot:
    """A job card as returned by the API, with the attribute names the
    status and action helpers read."""
    id: int
    job_id: Optional[str] = None
    status: Optional[str] = None
    editor_id: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    ready_for_qc_at: Optional[datetime] = None
    revision_requested_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    history: List[dict] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict):
        return cls(
            id=data['id'],
            job_id=data.get('jobId'),
            # Only the legacy column feeds the fallback; the derived status is recomputed locally
            status=data.get('legacyStatus'),
            editor_id=data.get('editorId'),
            uploaded_at=_parse_ts(data.get('uploadedAt')),
            accepted_at=_parse_ts(data.get('acceptedAt')),
            ready_for_qc_at=_parse_ts(data.get('readyForQCAt')),
            revision_requested_at=_parse_ts(data.get('revisionRequestedAt')),
            delivered_at=_parse_ts(data.get('deliveredAt')),
            history=list(data.get('history') or []),
        )


class ProductionApiClient:
    def __init__(self, base_url, session=None, timeout=15):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_config(cls, config, session=None):
        return cls(config['MEDIA_OPS_API_URL'], session=session,
                   timeout=config.get('MEDIA_OPS_API_TIMEOUT', 15))

    def _request(self, method, path, payload=None):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(f"Could not reach the server: {e}")

        if not response.ok:
            try:
                message = response.json().get('message')
            except (ValueError, AttributeError):
                message = None
            raise ApiError(message or "Failed to perform action", status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise ApiError("Invalid response from server", status_code=response.status_code)

    def sign_in(self, user_id, role):
        return self._request('POST', '/api/session', {'userId': user_id, 'role': role})

    def list_job_cards(self, status=None):
        path = '/api/job-cards' + (f'?status={status}' if status else '')
        return [JobCardSnapshot.from_json(item) for item in self._request('GET', path)]

    def get_job_card(self, job_card_id):
        return JobCardSnapshot.from_json(self._request('GET', f'/api/job-cards/{job_card_id}'))

    def post_action(self, job_card_id, action, notes=None):
        data = self._request(
            'POST', f'/api/job-cards/{job_card_id}/actions/{action}', {'notes': notes}
        )
        try:
            return JobCardSnapshot.from_json(data)
        except (KeyError, TypeError, ValueError):
            raise ApiError("Invalid job card returned by server")

    def get_delivery_settings(self, job_card_id):
        return self._request('GET', f'/api/jobs/{job_card_id}/delivery-settings')

    def create_delivery_settings(self, job_card_id, payload):
        return self._request('POST', f'/api/jobs/{job_card_id}/delivery-settings', payload)

    def update_delivery_settings(self, job_card_id, payload):
        return self._request('PUT', f'/api/jobs/{job_card_id}/delivery-settings', payload)
