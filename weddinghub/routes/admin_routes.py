"""
Admin Routes Blueprint
Vendor verification, review moderation, duplicate cleanup and admin bootstrap
"""
import hmac
from flask import Blueprint, current_app, request, jsonify

from weddinghub.auth import admin_required
from weddinghub.bootstrap import admin_status, set_admin_password
from weddinghub.directory import approve_review
from weddinghub.duplicates import duplicate_report, cleanup_duplicates
from weddinghub.errors import ValidationError, NotFound, Unauthorized
from weddinghub.logger_config import app_logger
from weddinghub.models import db, Vendor, VerificationStatus
from weddinghub.schemas import admin_vendors_schema, admin_vendor_schema, review_schema
from weddinghub.validation import validate_request_data, VerifyVendorSchema, AdminPasswordSchema
from weddinghub.verification import transition_vendor

bp = Blueprint('admin', __name__)


@bp.route('/admin/verify-vendor', methods=['POST'])
@admin_required
def verify_vendor():
    """
    POST /api/admin/verify-vendor

    Request Body:
        {"vendorId": 1, "status": "APPROVED|REJECTED|UNDER_REVIEW", "notes": "..."}
    """
    data = validate_request_data(VerifyVendorSchema, request.get_json(silent=True) or {})

    vendor = transition_vendor(data['vendor_id'], data['status'], data.get('notes'), request.current_user)

    return jsonify({
        "message": f"Vendor status updated to {vendor.verification_status}",
        "vendor": {
            "id": vendor.id,
            "businessName": vendor.business_name,
            "verificationStatus": vendor.verification_status,
            "verified": vendor.verified
        }
    }), 200


@bp.route('/admin/vendors', methods=['GET'])
@admin_required
def list_vendors():
    """
    GET /api/admin/vendors?status=PENDING
    All vendor applications, grouped by status, newest first
    """
    query = Vendor.query
    status = request.args.get('status')
    if status:
        if status not in VerificationStatus.ALL:
            raise ValidationError(
                f"Invalid status. Must be one of: {', '.join(VerificationStatus.ALL)}",
                errors={'status': ['Invalid verification status']}
            )
        query = query.filter_by(verification_status=status)

    vendors = query.order_by(Vendor.verification_status.asc(), Vendor.created_at.desc()).all()
    return jsonify({
        "vendors": admin_vendors_schema.dump(vendors),
        "count": len(vendors)
    }), 200


@bp.route('/admin/vendors/<int:vendor_id>', methods=['GET'])
@admin_required
def get_vendor(vendor_id):
    """GET /api/admin/vendors/<id>"""
    vendor = db.session.get(Vendor, vendor_id)
    if vendor is None:
        raise NotFound("Vendor not found")
    return jsonify(admin_vendor_schema.dump(vendor)), 200


@bp.route('/admin/reviews/<int:review_id>/approve', methods=['POST'])
@admin_required
def approve(review_id):
    """
    POST /api/admin/reviews/<id>/approve
    Publish a review and refresh the vendor rating
    """
    review = approve_review(review_id)
    return jsonify({
        "message": "Review approved",
        "review": review_schema.dump(review),
        "vendorRating": review.vendor.rating,
        "vendorReviewCount": review.vendor.review_count
    }), 200


@bp.route('/cleanup-duplicates', methods=['GET'])
@admin_required
def duplicates_report():
    """
    GET /api/cleanup-duplicates
    Duplicate quote requests per vendor, without deleting
    """
    return jsonify(duplicate_report()), 200


@bp.route('/cleanup-duplicates', methods=['POST'])
@admin_required
def duplicates_cleanup():
    """
    POST /api/cleanup-duplicates
    Delete duplicate quote requests, keeping the newest of each
    """
    result = cleanup_duplicates()
    result['message'] = 'Duplicate cleanup completed successfully'
    return jsonify(result), 200


@bp.route('/admin/check-status', methods=['GET'])
def check_status():
    """
    GET /api/admin/check-status
    Whether the platform admin account is ready
    """
    return jsonify(admin_status()), 200


@bp.route('/admin/set-password', methods=['POST'])
def set_password():
    """
    POST /api/admin/set-password
    One-time admin password bootstrap

    Headers:
        X-Bootstrap-Token: must equal ADMIN_BOOTSTRAP_TOKEN

    Request Body:
        {"password": "...", "name": "..."}
    """
    expected = current_app.config.get('ADMIN_BOOTSTRAP_TOKEN')
    supplied = request.headers.get('X-Bootstrap-Token', '')
    if not expected or not hmac.compare_digest(supplied.encode(), expected.encode()):
        app_logger.warning(f"Rejected admin bootstrap attempt from {request.remote_addr}")
        raise Unauthorized("Invalid bootstrap token")

    data = validate_request_data(AdminPasswordSchema, request.get_json(silent=True) or {})
    admin = set_admin_password(data['password'], data['name'])
    return jsonify({
        "message": "Admin password set successfully",
        "email": admin.email
    }), 200
