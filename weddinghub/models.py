from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

db = SQLAlchemy()


VENDOR_CATEGORIES = (
    'VENUES',
    'CATERERS',
    'PHOTOGRAPHERS',
    'VIDEOGRAPHERS',
    'FLORISTS',
    'BRIDAL',
    'NIKAH_OFFICIANTS',
    'HAIR_MAKEUP',
    'JEWELRY',
    'DECORATIONS',
    'TRANSPORTATION',
    'ENTERTAINMENT',
)

# Ordered cheapest first
PRICE_RANGES = ('BUDGET', 'MODERATE', 'LUXURY', 'ULTRA_LUXURY')

ISLAMIC_COMPLIANCES = ('halal', 'prayerSpace', 'genderSeparated', 'noAlcohol', 'femaleStaff')


def price_rank(price_range):
    """Ordinal position of a price range (BUDGET=0)"""
    return PRICE_RANGES.index(price_range)


class Roles:
    USER = 'user'
    VENDOR = 'vendor'
    ADMIN = 'admin'


class VerificationStatus:
    PENDING = 'PENDING'
    UNDER_REVIEW = 'UNDER_REVIEW'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'

    ALL = (PENDING, UNDER_REVIEW, APPROVED, REJECTED)
    TERMINAL = (APPROVED, REJECTED)


class QuoteStatus:
    PENDING = 'PENDING'
    RESPONDED = 'RESPONDED'
    DECLINED = 'DECLINED'

    ALL = (PENDING, RESPONDED, DECLINED)


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    name = db.Column(db.String(255))
    password_hash = db.Column(db.String(255), nullable=True)  # NULL for passwordless/legacy accounts
    email_verified_at = db.Column(db.DateTime)
    role = db.Column(db.String(20), nullable=False, default=Roles.USER)

    # Bumped whenever the session projection of this user changes
    session_version = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    vendor = db.relationship('Vendor', back_populates='user', uselist=False, lazy=True)

    def invalidate_sessions(self):
        self.session_version = (self.session_version or 0) + 1

    def __repr__(self):
        return f'<User {self.email}>'


class Vendor(db.Model):
    __tablename__ = 'vendors'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), unique=True, nullable=False)

    business_name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(50), nullable=False)
    description = db.Column(db.Text)

    # Contact
    phone = db.Column(db.String(30), nullable=False)
    whatsapp = db.Column(db.String(30))
    website = db.Column(db.String(255))
    email = db.Column(db.String(255), nullable=False)

    # Address
    address = db.Column(db.String(255))
    city = db.Column(db.String(100), nullable=False)
    state = db.Column(db.String(100), nullable=False)
    zip_code = db.Column(db.String(20))

    # Business details
    price_range = db.Column(db.String(20), nullable=False)
    islamic_compliances = db.Column(db.JSON, default=list)
    years_in_business = db.Column(db.Integer)
    service_areas = db.Column(db.JSON, default=list)
    min_capacity = db.Column(db.Integer)
    max_capacity = db.Column(db.Integer)
    event_types = db.Column(db.JSON, default=list)
    business_hours = db.Column(db.String(255))
    payment_methods = db.Column(db.JSON, default=list)
    work_samples = db.Column(db.JSON, default=list)

    # Verification
    verified = db.Column(db.Boolean, default=False, nullable=False)
    verification_status = db.Column(db.String(20), default=VerificationStatus.PENDING, nullable=False)
    verification_notes = db.Column(db.Text)
    verified_at = db.Column(db.DateTime)
    verified_by = db.Column(db.String(255))

    # Cached from approved reviews
    rating = db.Column(db.Float, default=0.0)
    review_count = db.Column(db.Integer, default=0)

    subscription_active = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = db.relationship('User', back_populates='vendor')
    photos = db.relationship('VendorPhoto', backref='vendor', lazy=True, cascade='all, delete-orphan')
    reviews = db.relationship('Review', backref='vendor', lazy=True, cascade='all, delete-orphan')
    quote_requests = db.relationship('QuoteRequest', backref='vendor', lazy=True, cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Vendor {self.business_name}>'


class VendorPhoto(db.Model):
    __tablename__ = 'vendor_photos'

    id = db.Column(db.Integer, primary_key=True)
    vendor_id = db.Column(db.Integer, db.ForeignKey('vendors.id'), nullable=False)
    url = db.Column(db.String(500), nullable=False)
    alt = db.Column(db.String(255))
    is_main = db.Column(db.Boolean, default=False, nullable=False)  # at most one per vendor, by convention
    order = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<VendorPhoto {self.id} for Vendor {self.vendor_id}>'


class Review(db.Model):
    __tablename__ = 'reviews'

    id = db.Column(db.Integer, primary_key=True)
    vendor_id = db.Column(db.Integer, db.ForeignKey('vendors.id'), nullable=False)
    reviewer_name = db.Column(db.String(255), nullable=False)
    reviewer_email = db.Column(db.String(255), nullable=False)
    rating = db.Column(db.Integer, nullable=False)  # 1-5
    comment = db.Column(db.Text)
    approved = db.Column(db.Boolean, default=False, nullable=False)
    verified_muslim_wedding = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<Review {self.id} - {self.rating} stars>'


class QuoteRequest(db.Model):
    __tablename__ = 'quote_requests'

    id = db.Column(db.Integer, primary_key=True)
    vendor_id = db.Column(db.Integer, db.ForeignKey('vendors.id'), nullable=False)

    customer_name = db.Column(db.String(255), nullable=False)
    customer_email = db.Column(db.String(255), nullable=False)
    customer_phone = db.Column(db.String(30))
    event_date = db.Column(db.Date)
    message = db.Column(db.Text, nullable=False)

    status = db.Column(db.String(20), default=QuoteStatus.PENDING, nullable=False)
    vendor_response = db.Column(db.Text)
    proposed_price = db.Column(db.Float)
    additional_details = db.Column(db.Text)
    responded_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<QuoteRequest {self.id} - {self.status}>'
