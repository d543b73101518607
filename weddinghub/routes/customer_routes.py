"""
Customer Routes Blueprint
Public vendor directory, vendor profiles, reviews and quote requests
"""
from flask import Blueprint, request, jsonify, redirect

from weddinghub.directory import list_vendors, get_vendor_profile, submit_review
from weddinghub.quotes import submit_quote
from weddinghub.schemas import (
    vendor_schema,
    vendor_listing_schema,
    vendor_photos_schema,
    reviews_schema,
    review_schema,
    quote_request_schema,
)

bp = Blueprint('customer', __name__)


@bp.route('/vendors', methods=['GET'])
def vendors():
    """
    GET /api/vendors
    Query: location, category, priceRange, maxPriceRange, verified,
           halal, prayerSpace, genderSeparated, noAlcohol, femaleStaff
    """
    results = list_vendors(request.args.to_dict())
    return jsonify({
        "vendors": vendor_listing_schema.dump(results),
        "count": len(results)
    }), 200


@bp.route('/vendors/<int:vendor_id>', methods=['GET'])
def vendor_profile(vendor_id):
    """GET /api/vendors/<id>"""
    vendor, photos, reviews, review_count = get_vendor_profile(vendor_id)
    return jsonify({
        "vendor": vendor_schema.dump(vendor),
        "photos": vendor_photos_schema.dump(photos),
        "reviews": reviews_schema.dump(reviews),
        "reviewCount": review_count
    }), 200


@bp.route('/vendors/<int:vendor_id>/reviews', methods=['POST'])
def create_review(vendor_id):
    """
    POST /api/vendors/<id>/reviews
    Reviews are held for admin approval
    """
    review = submit_review(vendor_id, request.get_json(silent=True) or {})
    return jsonify({
        "message": "Thank you! Your review will appear once approved.",
        "review": review_schema.dump(review)
    }), 201


@bp.route('/quotes', methods=['POST'])
def create_quote():
    """
    POST /api/quotes
    Quote request from the vendor page form (redirects back) or as JSON
    """
    if request.is_json:
        quote = submit_quote(request.get_json(silent=True) or {})
        return jsonify({
            "message": "Quote request sent",
            "quoteRequest": quote_request_schema.dump(quote)
        }), 201

    quote = submit_quote(request.form.to_dict())
    return redirect(f"/vendor/{quote.vendor_id}?quote=sent", code=302)
