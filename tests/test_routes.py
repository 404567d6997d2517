from media_ops import db
from media_ops.production.models import JobCard


def test_requires_sign_in(client, make_job_card):
    job_card_id = make_job_card(reached=['uploaded_at'])
    response = client.post(f'/api/job-cards/{job_card_id}/actions/accept', json={})
    assert response.status_code == 401
    assert response.get_json() == {'message': 'Sign in first'}


def test_sign_in_validates_role(client):
    response = client.post('/api/session', json={'userId': 'u1', 'role': 'superuser'})
    assert response.status_code == 400
    assert client.get('/api/session').get_json() is None


def test_session_round_trip(client, login):
    login('ed-1', 'editor')
    assert client.get('/api/session').get_json() == {'userId': 'ed-1', 'role': 'editor'}
    assert client.delete('/api/session').status_code == 204
    assert client.get('/api/session').get_json() is None


def test_editor_accepts_uploaded_card(app, client, login, make_job_card):
    job_card_id = make_job_card(reached=['uploaded_at'])
    login('ed-1', 'editor')

    detail = client.get(f'/api/job-cards/{job_card_id}').get_json()
    assert detail['status'] == 'uploaded'
    assert [a['action'] for a in detail['availableActions']] == ['accept']

    response = client.post(f'/api/job-cards/{job_card_id}/actions/accept', json={})
    assert response.status_code == 200
    body = response.get_json()
    assert body['status'] == 'in_progress'
    assert body['statusLabel'] == 'In Progress'
    assert body['acceptedAt'] is not None
    assert body['editorId'] == 'ed-1'
    assert body['history'][-1]['action'] == 'accept'
    assert body['history'][-1]['by'] == 'ed-1'
    assert 'notes' not in body['history'][-1]


def test_action_not_available_for_role(client, login, make_job_card):
    job_card_id = make_job_card(reached=['uploaded_at', 'accepted_at', 'ready_for_qc_at'])
    login('ed-1', 'editor')
    response = client.post(f'/api/job-cards/{job_card_id}/actions/delivered', json={})
    assert response.status_code == 409
    assert 'not available' in response.get_json()['message']


def test_unknown_action_and_card(client, login, make_job_card):
    job_card_id = make_job_card()
    login('boss', 'admin')
    assert client.post(f'/api/job-cards/{job_card_id}/actions/archive', json={}).status_code == 400
    assert client.post('/api/job-cards/999/actions/upload', json={}).status_code == 404


def test_revision_requires_notes(app, client, login, make_job_card):
    job_card_id = make_job_card(reached=['uploaded_at', 'accepted_at', 'ready_for_qc_at'])
    login('lic-1', 'licensee')

    response = client.post(f'/api/job-cards/{job_card_id}/actions/revision', json={'notes': '  '})
    assert response.status_code == 400
    with app.app_context():
        assert db.session.get(JobCard, job_card_id).revision_requested_at is None

    response = client.post(f'/api/job-cards/{job_card_id}/actions/revision',
                           json={'notes': 'Straighten the verticals'})
    body = response.get_json()
    assert body['status'] == 'in_revision'
    assert body['revisionNotes'] == 'Straighten the verticals'
    assert body['history'][-1] == {
        'action': 'revision', 'by': 'lic-1', 'at': body['revisionRequestedAt'],
        'notes': 'Straighten the verticals',
    }


def test_full_cycle_keeps_first_timestamps(app, client, login, make_job_card):
    job_card_id = make_job_card(photographer_id='ph-1')

    login('ph-1', 'photographer')
    client.post(f'/api/job-cards/{job_card_id}/actions/upload', json={})
    login('ed-1', 'editor')
    client.post(f'/api/job-cards/{job_card_id}/actions/accept', json={})
    first_qc = client.post(f'/api/job-cards/{job_card_id}/actions/readyForQC', json={}).get_json()
    login('lic-1', 'licensee')
    client.post(f'/api/job-cards/{job_card_id}/actions/revision', json={'notes': 'Sky too blue'})

    login('ed-1', 'editor')
    resubmitted = client.post(f'/api/job-cards/{job_card_id}/actions/readyForQC', json={}).get_json()
    assert resubmitted['readyForQCAt'] == first_qc['readyForQCAt']
    assert resubmitted['status'] == 'in_revision'
    assert resubmitted['availableActions'] == []

    login('lic-1', 'licensee')
    review = client.get(f'/api/job-cards/{job_card_id}').get_json()
    assert [a['action'] for a in review['availableActions']] == ['delivered', 'revision']
    delivered = client.post(f'/api/job-cards/{job_card_id}/actions/delivered', json={}).get_json()
    assert delivered['status'] == 'delivered'
    assert delivered['availableActions'] == []

    history = client.get(f'/api/job-cards/{job_card_id}/history').get_json()
    assert [entry['action'] for entry in history] == [
        'upload', 'accept', 'readyForQC', 'revision', 'readyForQC', 'delivered'
    ]


def test_list_and_filter(client, login, make_job_card):
    make_job_card('JOB-001', reached=['uploaded_at'])
    make_job_card('JOB-002', status='editing')
    make_job_card('JOB-003')
    login('boss', 'admin')

    all_cards = client.get('/api/job-cards').get_json()
    assert [c['jobId'] for c in all_cards] == ['JOB-003', 'JOB-002', 'JOB-001']

    in_progress = client.get('/api/job-cards?status=in_progress').get_json()
    assert [c['jobId'] for c in in_progress] == ['JOB-002']
    assert in_progress[0]['statusSource'] == 'legacy'

    assert client.get('/api/job-cards?status=lost').status_code == 400


def test_create_job_card(client, login):
    login('boss', 'admin')
    response = client.post('/api/job-cards', json={'jobId': 'JOB-010', 'clientName': 'Harbour Realty'})
    assert response.status_code == 201
    body = response.get_json()
    assert body['status'] == 'pending'
    assert [a['action'] for a in body['availableActions']] == ['upload']

    assert client.post('/api/job-cards', json={'jobId': 'JOB-010'}).status_code == 409
    assert client.post('/api/job-cards', json={}).status_code == 400


def test_status_report(client, login, make_job_card):
    make_job_card('JOB-001', reached=['uploaded_at'])
    login('boss', 'admin')
    response = client.get('/api/reports/job-status.xlsx')
    assert response.status_code == 200
    assert response.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    assert response.data[:2] == b'PK'


def _card_in_qc(client, login, make_job_card):
    job_card_id = make_job_card(reached=['uploaded_at'])
    login('ed-1', 'editor')
    client.post(f'/api/job-cards/{job_card_id}/actions/accept', json={})
    client.post(f'/api/job-cards/{job_card_id}/actions/readyForQC', json={})
    return job_card_id


def test_no_delivery_straight_after_revision(client, login, make_job_card):
    job_card_id = _card_in_qc(client, login, make_job_card)
    login('lic-1', 'licensee')
    after_revision = client.post(f'/api/job-cards/{job_card_id}/actions/revision',
                                 json={'notes': 'Windows blown out'}).get_json()
    assert after_revision['status'] == 'in_revision'
    assert after_revision['availableActions'] == []

    response = client.post(f'/api/job-cards/{job_card_id}/actions/delivered', json={})
    assert response.status_code == 409

    login('boss', 'admin')
    admin_view = client.get(f'/api/job-cards/{job_card_id}').get_json()
    assert [a['action'] for a in admin_view['availableActions']] == ['readyForQC']


def test_second_revision_after_resubmission(app, client, login, make_job_card):
    job_card_id = _card_in_qc(client, login, make_job_card)
    login('lic-1', 'licensee')
    first = client.post(f'/api/job-cards/{job_card_id}/actions/revision',
                        json={'notes': 'Windows blown out'}).get_json()

    login('ed-1', 'editor')
    client.post(f'/api/job-cards/{job_card_id}/actions/readyForQC', json={})

    login('lic-1', 'licensee')
    response = client.post(f'/api/job-cards/{job_card_id}/actions/revision',
                           json={'notes': 'Still too bright'})
    assert response.status_code == 200
    second = response.get_json()
    assert second['status'] == 'in_revision'
    assert second['revisionRequestedAt'] == first['revisionRequestedAt']
    assert second['revisionNotes'] == 'Still too bright'
    assert second['availableActions'] == []
    assert [e['action'] for e in second['history']][-2:] == ['readyForQC', 'revision']

    login('ed-1', 'editor')
    again = client.get(f'/api/job-cards/{job_card_id}').get_json()
    assert [a['action'] for a in again['availableActions']] == ['readyForQC']
