"""
Input Validation and Sanitization Utilities
Provides request schemas and HTML sanitization
"""
from marshmallow import Schema, fields, validates_schema, pre_load, EXCLUDE
from marshmallow import ValidationError as SchemaValidationError
from marshmallow.validate import Length, OneOf, Range
import html
import bleach

from weddinghub.errors import ValidationError
from weddinghub.models import VENDOR_CATEGORIES, PRICE_RANGES, ISLAMIC_COMPLIANCES, VerificationStatus

MISSING_FIELD_MESSAGE = 'Missing data for required field.'


def sanitize_text(text):
    """
    Sanitize plain text by removing HTML tags

    Entities are decoded back so stored text matches what was sent;
    escaping happens when the text is rendered.

    Args:
        text: Text string to sanitize

    Returns:
        str: Sanitized text
    """
    if not text:
        return ""

    return html.unescape(bleach.clean(text, tags=[], strip=True))


class BaseInputSchema(Schema):
    """Strips strings, drops empty values so required fields report as missing"""

    # Keys that must reach the schema untouched
    raw_fields = ('password',)

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def sanitize_inputs(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str):
                if key not in self.raw_fields:
                    value = sanitize_text(value.strip())
                if value == "":
                    continue
            elif isinstance(value, list):
                value = [sanitize_text(v.strip()) if isinstance(v, str) else v for v in value]
                value = [v for v in value if v != ""]
            elif value is None:
                continue
            cleaned[key] = value
        return cleaned


class LoginSchema(BaseInputSchema):
    email = fields.Str(required=True, validate=Length(min=1, max=255))
    password = fields.Str(required=True, validate=Length(min=1, max=255))


class VendorRegistrationSchema(BaseInputSchema):
    """Account plus business fields submitted on the vendor application"""
    name = fields.Str(required=True, validate=Length(max=255))
    email = fields.Email(required=True)
    password = fields.Str(required=True, validate=Length(min=8, max=128))

    business_name = fields.Str(required=True, data_key='businessName', validate=Length(max=255))
    category = fields.Str(required=True, validate=OneOf(VENDOR_CATEGORIES))
    description = fields.Str(required=True, validate=Length(max=5000))
    phone = fields.Str(required=True, validate=Length(max=30))
    city = fields.Str(required=True, validate=Length(max=100))
    state = fields.Str(required=True, validate=Length(max=100))
    price_range = fields.Str(required=True, data_key='priceRange', validate=OneOf(PRICE_RANGES))

    whatsapp = fields.Str(validate=Length(max=30))
    website = fields.Url()
    address = fields.Str(validate=Length(max=255))
    zip_code = fields.Str(data_key='zipCode', validate=Length(max=20))
    years_in_business = fields.Int(data_key='yearsInBusiness', validate=Range(min=0, max=200))
    service_areas = fields.List(fields.Str(), data_key='serviceAreas', load_default=list)
    min_capacity = fields.Int(data_key='minCapacity', validate=Range(min=0))
    max_capacity = fields.Int(data_key='maxCapacity', validate=Range(min=0))
    event_types = fields.List(fields.Str(), data_key='eventTypes', load_default=list)
    business_hours = fields.Str(data_key='businessHours', validate=Length(max=255))
    payment_methods = fields.List(fields.Str(), data_key='paymentMethods', load_default=list)
    islamic_compliances = fields.List(
        fields.Str(validate=OneOf(ISLAMIC_COMPLIANCES)),
        data_key='islamicCompliances',
        load_default=list
    )
    work_samples = fields.List(fields.Url(), data_key='workSamples', load_default=list)

    @validates_schema
    def validate_capacity(self, data, **kwargs):
        low, high = data.get('min_capacity'), data.get('max_capacity')
        if low is not None and high is not None and low > high:
            raise SchemaValidationError('Minimum capacity cannot exceed maximum capacity', 'minCapacity')


# Multi-valued keys when the registration arrives as multipart form data
REGISTRATION_LIST_FIELDS = ('serviceAreas', 'eventTypes', 'paymentMethods', 'islamicCompliances', 'workSamples')


class QuoteRequestSchema(BaseInputSchema):
    vendor_id = fields.Int(required=True, data_key='vendorId')
    customer_name = fields.Str(required=True, data_key='customerName', validate=Length(max=255))
    customer_email = fields.Email(required=True, data_key='customerEmail')
    customer_phone = fields.Str(data_key='customerPhone', validate=Length(max=30))
    event_date = fields.Date(data_key='eventDate')
    message = fields.Str(required=True, validate=Length(max=5000))


class QuoteResponseSchema(BaseInputSchema):
    action = fields.Str(required=True, validate=OneOf(('accept', 'decline', 'respond')))
    message = fields.Str(required=True, validate=Length(max=5000))
    proposed_price = fields.Float(data_key='proposedPrice', validate=Range(min=0))
    additional_details = fields.Str(data_key='additionalDetails', validate=Length(max=5000))


class VerifyVendorSchema(BaseInputSchema):
    vendor_id = fields.Int(required=True, data_key='vendorId')
    status = fields.Str(required=True, validate=OneOf(VerificationStatus.ALL))
    notes = fields.Str(validate=Length(max=5000), load_default=None)


class ReviewSchema(BaseInputSchema):
    reviewer_name = fields.Str(required=True, data_key='reviewerName', validate=Length(max=255))
    reviewer_email = fields.Email(required=True, data_key='reviewerEmail')
    rating = fields.Int(required=True, validate=Range(min=1, max=5))
    comment = fields.Str(validate=Length(max=5000))
    verified_muslim_wedding = fields.Bool(data_key='verifiedMuslimWedding', load_default=False)


class AdminPasswordSchema(BaseInputSchema):
    password = fields.Str(required=True, validate=Length(min=8, max=128))
    name = fields.Str(validate=Length(max=255), load_default='System Administrator')


class DirectoryFilterSchema(BaseInputSchema):
    location = fields.Str(validate=Length(max=100))
    category = fields.Str(validate=OneOf(VENDOR_CATEGORIES))
    price_range = fields.Str(data_key='priceRange', validate=OneOf(PRICE_RANGES))
    max_price_range = fields.Str(data_key='maxPriceRange', validate=OneOf(PRICE_RANGES))
    verified = fields.Bool()
    halal = fields.Bool()
    prayer_space = fields.Bool(data_key='prayerSpace')
    gender_separated = fields.Bool(data_key='genderSeparated')
    no_alcohol = fields.Bool(data_key='noAlcohol')
    female_staff = fields.Bool(data_key='femaleStaff')


def validate_request_data(schema_class, data):
    """
    Validate request data against a schema

    Args:
        schema_class: Marshmallow Schema class
        data: Data dictionary to validate

    Returns:
        dict: Cleaned and validated data

    Raises:
        ValidationError: listing missing required fields and per-field messages
    """
    if not isinstance(data, dict):
        raise ValidationError("Request body must be an object")

    try:
        return schema_class().load(data)
    except SchemaValidationError as err:
        messages = err.messages if isinstance(err.messages, dict) else {'_schema': err.messages}
        missing = [
            key for key, value in messages.items()
            if isinstance(value, list) and MISSING_FIELD_MESSAGE in value
        ]
        if missing:
            summary = f"Missing required fields: {', '.join(missing)}"
        else:
            summary = "Invalid input provided"
        raise ValidationError(summary, missing_fields=missing, errors=messages)


def form_to_dict(form, list_fields=()):
    """Flatten a MultiDict, keeping multi-valued keys as lists"""
    data = {}
    for key in form.keys():
        if key in list_fields:
            data[key] = form.getlist(key)
        else:
            data[key] = form.get(key)
    return data
