"""
Vendor Registration
Creates the vendor account and its business profile in one transaction
"""
from sqlalchemy.exc import IntegrityError

from weddinghub.auth import hash_password
from weddinghub.errors import Conflict
from weddinghub.logger_config import app_logger
from weddinghub.models import db, User, Vendor, Roles, VerificationStatus
from weddinghub.validation import validate_request_data, VendorRegistrationSchema

PENDING_REVIEW_NOTE = 'Application submitted - awaiting admin review'

# Validated keys copied straight onto the Vendor row
VENDOR_PROFILE_FIELDS = (
    'business_name', 'category', 'description', 'phone', 'whatsapp', 'website',
    'address', 'city', 'state', 'zip_code', 'price_range', 'islamic_compliances',
    'years_in_business', 'service_areas', 'min_capacity', 'max_capacity', 'event_types',
    'business_hours', 'payment_methods', 'work_samples',
)


def register_vendor(data):
    """
    Register a vendor account

    Args:
        data: Raw registration payload (camelCase keys)

    Returns:
        Vendor: the new vendor, status PENDING

    Raises:
        ValidationError: missing or malformed fields
        Conflict: the email is already registered
    """
    cleaned = validate_request_data(VendorRegistrationSchema, data)
    email = cleaned['email'].strip().lower()

    if User.query.filter_by(email=email).first():
        raise Conflict("User with this email already exists")

    user = User(
        email=email,
        name=cleaned['name'],
        password_hash=hash_password(cleaned['password']),
        role=Roles.VENDOR,
    )
    vendor = Vendor(
        user=user,
        email=email,
        verified=False,
        verification_status=VerificationStatus.PENDING,
        verification_notes=PENDING_REVIEW_NOTE,
        subscription_active=True,
        **{field: cleaned[field] for field in VENDOR_PROFILE_FIELDS if field in cleaned}
    )

    try:
        db.session.add(user)
        db.session.add(vendor)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        app_logger.warning(f"Registration race on email {email}")
        raise Conflict("User with this email already exists")
    except Exception:
        db.session.rollback()
        raise

    app_logger.info(f"Vendor registered: {vendor.business_name} (vendor_id={vendor.id}, user_id={user.id})")
    return vendor
