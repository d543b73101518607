from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from conftest import PASSWORD, auth_header
from weddinghub.auth import verify_credentials, verify_token, generate_token
from weddinghub.errors import NotFound, InvalidCredentials
from weddinghub.models import db, VerificationStatus


def login(client, email, password=PASSWORD):
    return client.post('/api/auth/login', json={'email': email, 'password': password})


def test_verify_credentials_returns_user(make_user):
    user = make_user(email='sara@example.com')
    assert verify_credentials('  SARA@example.com ', PASSWORD).id == user.id


def test_verify_credentials_unknown_email(app):
    with pytest.raises(NotFound):
        verify_credentials('nobody@example.com', PASSWORD)


def test_verify_credentials_wrong_password(make_user):
    make_user(email='sara@example.com')
    with pytest.raises(InvalidCredentials):
        verify_credentials('sara@example.com', 'not-the-password')


def test_verify_credentials_user_without_password(make_user):
    make_user(email='legacy@example.com', password=None)
    with pytest.raises(NotFound):
        verify_credentials('legacy@example.com', PASSWORD)


def test_login_failures_are_indistinguishable(client, make_user):
    make_user(email='sara@example.com')

    unknown = login(client, 'nobody@example.com')
    wrong = login(client, 'sara@example.com', 'not-the-password')

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.get_json() == wrong.get_json() == {
        'error': 'Invalid credentials',
        'code': 'INVALID_CREDENTIALS',
    }


def test_login_missing_fields(client):
    response = client.post('/api/auth/login', json={'email': 'sara@example.com'})
    assert response.status_code == 400
    assert response.get_json()['missing_fields'] == ['password']


def test_login_sets_cookie_with_vendor_snapshot(client, make_vendor):
    vendor = make_vendor()
    response = login(client, 'vendor@example.com')

    assert response.status_code == 200
    assert 'access_token=' in response.headers['Set-Cookie']
    assert 'HttpOnly' in response.headers['Set-Cookie']

    claims = verify_token(response.get_json()['token'])
    assert claims['vendor'] == {
        'id': vendor.id,
        'businessName': 'Noor Banquets',
        'verified': False,
        'verificationStatus': 'PENDING',
    }


def test_session_requires_token(client):
    response = client.get('/api/auth/session')
    assert response.status_code == 401


def test_session_rejects_tampered_token(client, make_user):
    headers = auth_header(make_user())
    headers['Authorization'] += 'x'
    assert client.get('/api/auth/session', headers=headers).status_code == 401


def test_session_cookie_is_accepted(client, make_user):
    make_user(email='sara@example.com')
    login(client, 'sara@example.com')

    response = client.get('/api/auth/session')
    assert response.status_code == 200
    assert response.get_json()['user']['email'] == 'sara@example.com'


def test_fresh_session_is_not_reissued(client, make_user):
    response = client.get('/api/auth/session', headers=auth_header(make_user()))
    assert response.status_code == 200
    assert 'X-Refreshed-Token' not in response.headers


def test_approval_invalidates_outstanding_session(client, make_vendor, admin_headers):
    vendor = make_vendor()
    vendor_headers = auth_header(vendor.user)

    approved = client.post('/api/admin/verify-vendor', headers=admin_headers,
                           json={'vendorId': vendor.id, 'status': 'APPROVED'})
    assert approved.status_code == 200

    response = client.get('/api/auth/session', headers=vendor_headers)
    assert response.status_code == 200
    assert response.get_json()['user']['vendor']['verificationStatus'] == 'APPROVED'
    assert response.get_json()['user']['vendor']['verified'] is True

    refreshed = verify_token(response.headers['X-Refreshed-Token'])
    assert refreshed['vendor']['verificationStatus'] == VerificationStatus.APPROVED
    assert 'access_token=' in response.headers['Set-Cookie']


def test_old_token_is_renewed(client, make_user, days_ago):
    user = make_user()
    response = client.get('/api/auth/session', headers=auth_header(user, issued_at=days_ago(2)))

    assert response.status_code == 200
    assert 'X-Refreshed-Token' in response.headers


def test_expired_token_is_rejected(client, make_user, days_ago):
    response = client.get('/api/auth/session', headers=auth_header(make_user(), issued_at=days_ago(31)))
    assert response.status_code == 401


def test_deleted_user_is_rejected(client, make_user):
    user = make_user()
    headers = auth_header(user)
    db.session.delete(user)
    db.session.commit()

    assert client.get('/api/auth/session', headers=headers).status_code == 401


def test_database_outage_serves_cached_claims(client, make_vendor, monkeypatch):
    vendor = make_vendor()
    headers = auth_header(vendor.user)

    def unavailable(*args, **kwargs):
        raise OperationalError('SELECT', {}, Exception('database is down'))

    monkeypatch.setattr(db.session, 'get', unavailable)

    response = client.get('/api/auth/session', headers=headers)
    assert response.status_code == 200
    assert response.get_json()['user']['vendor']['verificationStatus'] == 'PENDING'
    assert 'X-Refreshed-Token' not in response.headers


def test_token_lifetime_is_thirty_days(app, make_user):
    claims = verify_token(generate_token(make_user()))
    assert timedelta(seconds=claims['exp'] - claims['iat']) == timedelta(days=30)


def test_logout_clears_cookie(client, make_user):
    make_user(email='sara@example.com')
    login(client, 'sara@example.com')

    response = client.post('/api/auth/logout')
    assert response.status_code == 200
    assert 'access_token=;' in response.headers['Set-Cookie']


def test_auth_log_failure_does_not_break_login(client, make_user, monkeypatch, capsys):
    from weddinghub.logger_config import auth_logger
    make_user(email='sara@example.com')

    def broken_handler(message):
        raise OSError('disk full')

    monkeypatch.setattr(auth_logger, 'info', broken_handler)

    response = login(client, 'sara@example.com')

    assert response.status_code == 200
    assert 'Failed to log auth event login: OSError: disk full' in capsys.readouterr().err
