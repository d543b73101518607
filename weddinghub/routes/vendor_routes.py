"""
Vendor Routes Blueprint
Vendor registration and quote management
"""
from flask import Blueprint, request, jsonify

from weddinghub.auth import vendor_required
from weddinghub.quotes import list_vendor_quotes, respond_to_quote
from weddinghub.registration import register_vendor
from weddinghub.schemas import quote_request_schema, quote_requests_schema
from weddinghub.validation import form_to_dict, REGISTRATION_LIST_FIELDS

bp = Blueprint('vendor', __name__)


@bp.route('/vendor/register', methods=['POST'])
def register():
    """
    POST /api/vendor/register
    Vendor application, as JSON or multipart form data

    Returns:
        201 {"message", "vendorId", "verificationStatus"}
    """
    if request.is_json:
        data = request.get_json(silent=True) or {}
    else:
        data = form_to_dict(request.form, REGISTRATION_LIST_FIELDS)

    vendor = register_vendor(data)

    return jsonify({
        "message": "Vendor registration successful",
        "vendorId": vendor.id,
        "verificationStatus": vendor.verification_status
    }), 201


@bp.route('/vendor/quotes', methods=['GET'])
@vendor_required
def vendor_quotes():
    """
    GET /api/vendor/quotes
    Quote requests for the signed-in vendor, newest first
    """
    quotes = list_vendor_quotes(request.vendor_id)
    return jsonify({
        "quotes": quote_requests_schema.dump(quotes),
        "vendorId": request.vendor_id
    }), 200


@bp.route('/vendor/quotes/<int:quote_id>/respond', methods=['POST'])
@vendor_required
def respond(quote_id):
    """
    POST /api/vendor/quotes/<id>/respond

    Request Body:
        {"action": "accept|decline|respond", "message": "...",
         "proposedPrice": 500, "additionalDetails": "..."}
    """
    data = request.get_json(silent=True) or {}

    quote = respond_to_quote(quote_id, data, request.current_user)

    return jsonify({
        "success": True,
        "message": f"Quote request {quote.status.lower()} successfully",
        "quoteRequest": quote_request_schema.dump(quote)
    }), 200
