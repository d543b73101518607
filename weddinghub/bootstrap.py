"""
Admin Bootstrap & Seed Data
"""
from datetime import datetime
from flask import current_app

from weddinghub.auth import hash_password
from weddinghub.errors import Conflict
from weddinghub.logger_config import app_logger
from weddinghub.models import db, User, Vendor, Roles, VerificationStatus

DEMO_VENDOR = {
    'name': 'Platform Demo',
    'email': 'demo@muslimweddinghub.com',
    'business_name': 'Muslim Wedding Hub Demo',
    'category': 'VENUES',
    'description': ('This is a demonstration vendor to show how the platform works. '
                    'Real vendors will replace this when they sign up.'),
    'phone': '+1234567890',
    'whatsapp': '1234567890',
    'website': 'https://muslimweddinghub.com',
    'address': '123 Demo Street',
    'city': 'Demo City',
    'state': 'DC',
    'price_range': 'MODERATE',
    'islamic_compliances': ['halal', 'prayerSpace'],
    'rating': 4.5,
    'review_count': 10,
}


def admin_status():
    """Whether the configured admin account exists and can log in"""
    email = current_app.config['ADMIN_EMAIL']
    admin = User.query.filter_by(email=email).first()
    return {
        'email': email,
        'exists': admin is not None,
        'hasPassword': bool(admin and admin.password_hash),
        'isAdmin': bool(admin and admin.role == Roles.ADMIN),
    }


def set_admin_password(password, name='System Administrator'):
    """
    Create or complete the configured admin account

    Only allowed while the admin has no password.

    Raises:
        Conflict: the admin password is already set
    """
    email = current_app.config['ADMIN_EMAIL']
    admin = User.query.filter_by(email=email).first()

    if admin is not None and admin.password_hash:
        raise Conflict("Admin password is already set")

    if admin is None:
        admin = User(email=email, name=name, email_verified_at=datetime.utcnow())
        db.session.add(admin)

    admin.password_hash = hash_password(password)
    admin.role = Roles.ADMIN
    admin.invalidate_sessions()
    db.session.commit()

    app_logger.info(f"Admin password set for {email}")
    return admin


def seed_demo_data():
    """Create the admin user and a verified demo vendor if missing"""
    email = current_app.config['ADMIN_EMAIL']
    created = []

    if User.query.filter_by(email=email).first() is None:
        db.session.add(User(email=email, name='System Administrator', role=Roles.ADMIN,
                            email_verified_at=datetime.utcnow()))
        created.append(email)

    demo = dict(DEMO_VENDOR)
    if User.query.filter_by(email=demo['email']).first() is None:
        user = User(email=demo.pop('email'), name=demo.pop('name'), role=Roles.VENDOR,
                    email_verified_at=datetime.utcnow())
        db.session.add(Vendor(
            user=user,
            email=user.email,
            verified=True,
            verification_status=VerificationStatus.APPROVED,
            verified_at=datetime.utcnow(),
            verified_by=email,
            subscription_active=True,
            **demo
        ))
        created.append(user.email)

    db.session.commit()
    app_logger.info(f"Seed complete, created: {created or 'nothing'}")
    return created
