"""
Vendor Directory & Reviews
Public vendor search, vendor profiles, and review moderation
"""
from sqlalchemy import func, or_

from weddinghub.errors import NotFound
from weddinghub.logger_config import app_logger
from weddinghub.models import db, Vendor, Review, VerificationStatus, PRICE_RANGES, price_rank
from weddinghub.validation import validate_request_data, DirectoryFilterSchema, ReviewSchema

LATEST_REVIEWS_LIMIT = 10

# Query flag -> stored compliance tag
COMPLIANCE_FILTERS = {
    'halal': 'halal',
    'prayer_space': 'prayerSpace',
    'gender_separated': 'genderSeparated',
    'no_alcohol': 'noAlcohol',
    'female_staff': 'femaleStaff',
}


def list_vendors(args):
    """
    Search subscription-active vendors that have not been rejected

    Args:
        args: Query parameters (location, category, priceRange, maxPriceRange,
              verified, and one flag per compliance tag)

    Returns:
        list[Vendor]: verified first, then highest rated, then newest
    """
    filters = validate_request_data(DirectoryFilterSchema, dict(args))

    query = (Vendor.query
             .filter(Vendor.subscription_active.is_(True))
             .filter(Vendor.verification_status != VerificationStatus.REJECTED))

    location = filters.get('location')
    if location:
        pattern = f"%{location.lower()}%"
        query = query.filter(or_(func.lower(Vendor.city).like(pattern),
                                 func.lower(Vendor.state).like(pattern)))

    if filters.get('category'):
        query = query.filter(Vendor.category == filters['category'])

    if filters.get('price_range'):
        query = query.filter(Vendor.price_range == filters['price_range'])
    elif filters.get('max_price_range'):
        allowed = PRICE_RANGES[:price_rank(filters['max_price_range']) + 1]
        query = query.filter(Vendor.price_range.in_(allowed))

    if filters.get('verified'):
        query = query.filter(Vendor.verified.is_(True))

    vendors = query.order_by(Vendor.verified.desc(), Vendor.rating.desc(), Vendor.created_at.desc()).all()

    # JSON list containment is not portable across MySQL and SQLite
    required = {tag for flag, tag in COMPLIANCE_FILTERS.items() if filters.get(flag)}
    if required:
        vendors = [v for v in vendors if required.issubset(v.islamic_compliances or [])]

    return vendors


def get_public_vendor(vendor_id):
    """Vendor visible to the public; rejected vendors are hidden"""
    vendor = db.session.get(Vendor, vendor_id)
    if vendor is None or vendor.verification_status == VerificationStatus.REJECTED:
        raise NotFound("Vendor not found")
    return vendor


def get_vendor_profile(vendor_id):
    """
    Vendor with its photos (main first), latest approved reviews and review count

    Raises:
        NotFound: unknown or rejected vendor
    """
    vendor = get_public_vendor(vendor_id)

    photos = sorted(vendor.photos, key=lambda p: (not p.is_main, p.order))
    reviews = (Review.query
               .filter_by(vendor_id=vendor.id, approved=True)
               .order_by(Review.created_at.desc(), Review.id.desc())
               .limit(LATEST_REVIEWS_LIMIT)
               .all())
    review_count = Review.query.filter_by(vendor_id=vendor.id, approved=True).count()

    return vendor, photos, reviews, review_count


def submit_review(vendor_id, data):
    """
    Store a customer review, pending moderation

    Raises:
        NotFound: unknown or rejected vendor
        ValidationError: missing fields or rating outside 1-5
    """
    vendor = get_public_vendor(vendor_id)

    cleaned = validate_request_data(ReviewSchema, data)
    review = Review(vendor_id=vendor.id, approved=False, **cleaned)
    db.session.add(review)
    db.session.commit()

    app_logger.info(f"Review {review.id} submitted for vendor {vendor.id}, awaiting approval")
    return review


def approve_review(review_id):
    """
    Publish a review and refresh the vendor's cached rating

    Raises:
        NotFound: unknown review
    """
    review = db.session.get(Review, review_id)
    if review is None:
        raise NotFound("Review not found")

    review.approved = True
    db.session.flush()
    recompute_rating(review.vendor)

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    app_logger.info(f"Review {review.id} approved for vendor {review.vendor_id}")
    return review


def recompute_rating(vendor):
    """Average and count of approved reviews, cached on the vendor"""
    average, count = (db.session.query(func.avg(Review.rating), func.count(Review.id))
                      .filter(Review.vendor_id == vendor.id, Review.approved.is_(True))
                      .one())
    vendor.rating = round(float(average), 2) if average is not None else 0.0
    vendor.review_count = count
