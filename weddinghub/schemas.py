from flask_marshmallow import Marshmallow
from marshmallow import fields
from weddinghub.models import Vendor, VendorPhoto, Review, QuoteRequest


ma = Marshmallow()


def camelcase(name):
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


class CamelCaseSchema(ma.SQLAlchemyAutoSchema):
    """Serializes snake_case columns under camelCase keys"""

    def on_bind_field(self, field_name, field_obj):
        field_obj.data_key = camelcase(field_obj.data_key or field_name)


class VendorPhotoSchema(CamelCaseSchema):
    class Meta:
        model = VendorPhoto
        fields = ('id', 'url', 'alt', 'is_main', 'order')


class ReviewSchema(CamelCaseSchema):
    class Meta:
        model = Review
        # reviewer_email stays private
        fields = ('id', 'reviewer_name', 'rating', 'comment', 'approved',
                  'verified_muslim_wedding', 'created_at')


class VendorSchema(CamelCaseSchema):
    class Meta:
        model = Vendor
        fields = ('id', 'business_name', 'category', 'description', 'phone', 'whatsapp',
                  'website', 'email', 'address', 'city', 'state', 'zip_code', 'price_range',
                  'islamic_compliances', 'years_in_business', 'service_areas', 'min_capacity',
                  'max_capacity', 'event_types', 'business_hours', 'payment_methods',
                  'work_samples', 'verified', 'verification_status', 'rating', 'review_count',
                  'created_at')


class VendorListingSchema(VendorSchema):
    """Directory card: profile plus the main photo"""
    class Meta(VendorSchema.Meta):
        fields = VendorSchema.Meta.fields + ('main_photo',)

    main_photo = fields.Method('get_main_photo')

    def get_main_photo(self, obj):
        main = next((p for p in obj.photos if p.is_main), None)
        if main:
            return VendorPhotoSchema().dump(main)
        return None


class AdminVendorSchema(CamelCaseSchema):
    """Verification metadata shown on the admin dashboard"""
    class Meta:
        model = Vendor
        include_fk = True
        fields = ('id', 'user_id', 'business_name', 'category', 'email', 'phone', 'city', 'state',
                  'verified', 'verification_status', 'verification_notes', 'created_at',
                  'verified_at', 'verified_by', 'owner_name')

    owner_name = fields.Function(lambda obj: obj.user.name if obj.user else None, data_key='ownerName')


class QuoteRequestSchema(CamelCaseSchema):
    class Meta:
        model = QuoteRequest
        include_fk = True
        fields = ('id', 'vendor_id', 'customer_name', 'customer_email', 'customer_phone',
                  'event_date', 'message', 'status', 'vendor_response', 'proposed_price',
                  'additional_details', 'responded_at', 'created_at')


# Initialize Schemas
vendor_schema = VendorSchema()
vendor_listing_schema = VendorListingSchema(many=True)

admin_vendors_schema = AdminVendorSchema(many=True)
admin_vendor_schema = AdminVendorSchema()

vendor_photos_schema = VendorPhotoSchema(many=True)

review_schema = ReviewSchema()
reviews_schema = ReviewSchema(many=True)

quote_request_schema = QuoteRequestSchema()
quote_requests_schema = QuoteRequestSchema(many=True)
