"""
Vendor Verification
Admin-driven state machine over Vendor.verification_status
"""
from datetime import datetime

from weddinghub.auth import is_admin
from weddinghub.emails import send_email, approval_email, rejection_email
from weddinghub.errors import Unauthorized, ValidationError, NotFound, Conflict
from weddinghub.logger_config import app_logger
from weddinghub.models import db, Vendor, VerificationStatus

# Allowed targets per current state; APPROVED and REJECTED are terminal
TRANSITIONS = {
    VerificationStatus.PENDING: (
        VerificationStatus.UNDER_REVIEW,
        VerificationStatus.APPROVED,
        VerificationStatus.REJECTED,
    ),
    VerificationStatus.UNDER_REVIEW: (
        VerificationStatus.APPROVED,
        VerificationStatus.REJECTED,
    ),
    VerificationStatus.APPROVED: (),
    VerificationStatus.REJECTED: (),
}


def transition_vendor(vendor_id, status, notes, acting_user):
    """
    Move a vendor application to a new verification status

    Args:
        vendor_id: Vendor primary key
        status: Target status
        notes: Admin notes stored on the vendor (may be None)
        acting_user: Session claims of the caller

    Returns:
        Vendor: the updated vendor

    Raises:
        Unauthorized: caller is not an admin
        ValidationError: unknown status
        NotFound: unknown vendor
        Conflict: transition not allowed from the current status
    """
    if not is_admin(acting_user):
        raise Unauthorized("Unauthorized - Admin access required")

    if status not in VerificationStatus.ALL:
        raise ValidationError(
            f"Invalid status. Must be one of: {', '.join(VerificationStatus.ALL)}",
            errors={'status': ['Invalid verification status']}
        )

    vendor = db.session.get(Vendor, vendor_id)
    if vendor is None:
        raise NotFound("Vendor not found")

    current = vendor.verification_status
    if status not in TRANSITIONS.get(current, ()):
        raise Conflict(f"Cannot change verification status from {current} to {status}")

    vendor.verification_status = status
    vendor.verification_notes = notes

    if status == VerificationStatus.UNDER_REVIEW:
        vendor.verified = False
    else:
        vendor.verified = status == VerificationStatus.APPROVED
        vendor.verified_at = datetime.utcnow()
        vendor.verified_by = acting_user.get('email')

    # Outstanding sessions carry the old verification snapshot
    vendor.user.invalidate_sessions()

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    app_logger.info(
        f"Vendor {vendor.business_name} (id={vendor.id}) {current} -> {status} by {acting_user.get('email')}"
    )

    if status in VerificationStatus.TERMINAL:
        notify_vendor(vendor, status, notes)

    return vendor


def notify_vendor(vendor, status, notes=None):
    """Send the approval/rejection email; failures are logged only"""
    vendor_name = vendor.user.name or vendor.business_name
    if status == VerificationStatus.APPROVED:
        subject, html = approval_email(vendor_name, vendor.business_name)
    else:
        subject, html = rejection_email(vendor_name, vendor.business_name, notes)

    if not send_email(vendor.email, subject, html):
        app_logger.warning(f"Verification email not delivered to vendor {vendor.id} ({status})")
