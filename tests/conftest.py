from datetime import datetime, timedelta

import pytest

from media_ops import create_app, db
from media_ops.config import TestConfig
from media_ops.production.models import JobCard

T0 = datetime(2024, 5, 1, 9, 0)


@pytest.fixture
def app(tmp_path):
    class Config(TestConfig):
        SESSION_FILE_DIR = str(tmp_path / 'sessions')

    app = create_app(Config)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    """Signs the test client in as ``user_id`` with ``role``."""
    def _login(user_id='user-1', role='admin'):
        response = client.post('/api/session', json={'userId': user_id, 'role': role})
        assert response.status_code == 200
        return response
    return _login


@pytest.fixture
def make_job_card(app):
    """Creates a job card with the given lifecycle stages already reached."""
    stages = ['uploaded_at', 'accepted_at', 'ready_for_qc_at', 'revision_requested_at', 'delivered_at']

    def _make(job_id='JOB-001', reached=(), **fields):
        with app.app_context():
            card = JobCard(job_id=job_id, **fields)
            for offset, stage in enumerate(stages):
                if stage in reached:
                    setattr(card, stage, T0 + timedelta(hours=offset))
            db.session.add(card)
            db.session.commit()
            return card.id
    return _make
