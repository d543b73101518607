from datetime import datetime, timedelta

import pytest

from config import TestingConfig
from weddinghub import create_app
from weddinghub.auth import generate_token, hash_password
from weddinghub.models import db, User, Vendor, QuoteRequest, Roles, VerificationStatus

PASSWORD = 'correct-horse-battery'


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(email='user@example.com', name='Test User', role=Roles.USER, password=PASSWORD):
        user = User(
            email=email,
            name=name,
            role=role,
            password_hash=hash_password(password) if password else None,
        )
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def make_vendor(make_user):
    def _make_vendor(email='vendor@example.com', business_name='Noor Banquets', **overrides):
        user = make_user(email=email, name=overrides.pop('owner_name', 'Aisha Rahman'), role=Roles.VENDOR)
        fields = dict(
            business_name=business_name,
            category='VENUES',
            description='Elegant halls for nikah and walima',
            phone='+15550001111',
            email=email,
            city='Houston',
            state='TX',
            price_range='MODERATE',
            islamic_compliances=['halal', 'prayerSpace'],
            verification_status=VerificationStatus.PENDING,
            verified=False,
            subscription_active=True,
        )
        fields.update(overrides)
        vendor = Vendor(user=user, **fields)
        db.session.add(vendor)
        db.session.commit()
        return vendor
    return _make_vendor


@pytest.fixture
def make_quote():
    def _make_quote(vendor, customer_name='Omar', customer_email='omar@example.com',
                    message='Do you have availability in June?', created_at=None, **extra):
        quote = QuoteRequest(
            vendor_id=vendor.id,
            customer_name=customer_name,
            customer_email=customer_email,
            message=message,
            created_at=created_at or datetime.utcnow(),
            **extra
        )
        db.session.add(quote)
        db.session.commit()
        return quote
    return _make_quote


@pytest.fixture
def admin(make_user, app):
    return make_user(email=app.config['ADMIN_EMAIL'], name='System Administrator', role=Roles.ADMIN)


def auth_header(user, issued_at=None):
    return {'Authorization': f'Bearer {generate_token(user, issued_at=issued_at)}'}


@pytest.fixture
def admin_headers(admin):
    return auth_header(admin)


@pytest.fixture
def days_ago():
    def _days_ago(days):
        return datetime.utcnow() - timedelta(days=days)
    return _days_ago
