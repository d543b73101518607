import pytest

from weddinghub.auth import project_session_claims
from weddinghub.directory import list_vendors, approve_review, submit_review
from weddinghub.errors import NotFound, ValidationError
from weddinghub.models import db, Review, VendorPhoto
from weddinghub.verification import transition_vendor


@pytest.fixture
def directory(make_vendor, days_ago):
    return {
        'hall': make_vendor(email='hall@example.com', business_name='Grand Hall', city='Houston', state='TX',
                            price_range='LUXURY', islamic_compliances=['halal', 'prayerSpace', 'noAlcohol'],
                            verified=True, verification_status='APPROVED', rating=4.2, created_at=days_ago(10)),
        'photo': make_vendor(email='photo@example.com', business_name='Sisters Photography',
                             category='PHOTOGRAPHERS', city='Austin', state='TX', price_range='BUDGET',
                             islamic_compliances=['femaleStaff'], rating=4.9, created_at=days_ago(5)),
        'cater': make_vendor(email='cater@example.com', business_name='Chicago Catering', category='CATERERS',
                             city='Chicago', state='IL', price_range='MODERATE',
                             islamic_compliances=['halal', 'noAlcohol'], rating=4.9, created_at=days_ago(1)),
        'lapsed': make_vendor(email='lapsed@example.com', business_name='Lapsed Venue', subscription_active=False),
    }


def names(vendors):
    return [v.business_name for v in vendors]


def test_lists_active_vendors_verified_first(directory):
    assert names(list_vendors({})) == ['Grand Hall', 'Chicago Catering', 'Sisters Photography']


def test_location_matches_city_or_state(directory):
    assert names(list_vendors({'location': 'tx'})) == ['Grand Hall', 'Sisters Photography']
    assert names(list_vendors({'location': 'CHICAGO'})) == ['Chicago Catering']


def test_category_filter(directory):
    assert names(list_vendors({'category': 'PHOTOGRAPHERS'})) == ['Sisters Photography']


def test_price_filters(directory):
    assert names(list_vendors({'priceRange': 'MODERATE'})) == ['Chicago Catering']
    assert names(list_vendors({'maxPriceRange': 'MODERATE'})) == ['Chicago Catering', 'Sisters Photography']


def test_compliance_flags_require_all_tags(directory):
    assert names(list_vendors({'halal': 'true', 'noAlcohol': 'true'})) == ['Grand Hall', 'Chicago Catering']
    assert names(list_vendors({'halal': 'true', 'prayerSpace': 'true'})) == ['Grand Hall']
    assert names(list_vendors({'femaleStaff': 'true'})) == ['Sisters Photography']


def test_verified_filter(directory):
    assert names(list_vendors({'verified': 'true'})) == ['Grand Hall']


def test_unknown_category_is_rejected(directory):
    with pytest.raises(ValidationError):
        list_vendors({'category': 'MAGICIANS'})


def test_directory_endpoint(client, directory):
    db.session.add(VendorPhoto(vendor_id=directory['hall'].id, url='https://img.example.com/hall.jpg',
                               alt='Main hall', is_main=True))
    db.session.commit()

    response = client.get('/api/vendors?location=Houston')

    assert response.status_code == 200
    body = response.get_json()
    assert body['count'] == 1
    assert body['vendors'][0]['businessName'] == 'Grand Hall'
    assert body['vendors'][0]['mainPhoto']['url'] == 'https://img.example.com/hall.jpg'


def test_profile_orders_photos_and_limits_reviews(client, make_vendor, days_ago):
    vendor = make_vendor()
    db.session.add_all([
        VendorPhoto(vendor_id=vendor.id, url='https://img.example.com/2.jpg', order=2),
        VendorPhoto(vendor_id=vendor.id, url='https://img.example.com/main.jpg', order=5, is_main=True),
        VendorPhoto(vendor_id=vendor.id, url='https://img.example.com/1.jpg', order=1),
    ])
    for i in range(12):
        db.session.add(Review(vendor_id=vendor.id, reviewer_name=f'Guest {i}', reviewer_email=f'g{i}@example.com',
                              rating=5, approved=True, created_at=days_ago(i + 1)))
    db.session.add(Review(vendor_id=vendor.id, reviewer_name='Pending', reviewer_email='p@example.com',
                          rating=1, approved=False))
    db.session.commit()

    body = client.get(f'/api/vendors/{vendor.id}').get_json()

    assert [p['url'].rsplit('/', 1)[1] for p in body['photos']] == ['main.jpg', '1.jpg', '2.jpg']
    assert len(body['reviews']) == 10
    assert body['reviews'][0]['reviewerName'] == 'Guest 0'
    assert 'reviewerEmail' not in body['reviews'][0]
    assert body['reviewCount'] == 12


def test_profile_unknown_vendor(client):
    assert client.get('/api/vendors/999').status_code == 404


def test_rejected_vendor_is_hidden(client, directory, admin):
    rejected = directory['photo']
    transition_vendor(rejected.id, 'REJECTED', 'Portfolio not provided', project_session_claims(admin))

    assert 'Sisters Photography' not in names(list_vendors({}))
    listed = client.get('/api/vendors').get_json()['vendors']
    assert rejected.id not in [v['id'] for v in listed]

    assert client.get(f'/api/vendors/{rejected.id}').status_code == 404
    with pytest.raises(NotFound):
        submit_review(rejected.id, {'reviewerName': 'Hana', 'reviewerEmail': 'hana@example.com', 'rating': 5})


def test_review_is_held_then_approved(client, make_vendor, admin_headers):
    vendor = make_vendor(rating=0.0, review_count=0)

    created = client.post(f'/api/vendors/{vendor.id}/reviews', json={
        'reviewerName': 'Hana', 'reviewerEmail': 'hana@example.com', 'rating': 4, 'comment': 'Lovely'})
    assert created.status_code == 201
    review_id = created.get_json()['review']['id']
    assert created.get_json()['review']['approved'] is False

    submit_review(vendor.id, {'reviewerName': 'Bilal', 'reviewerEmail': 'b@example.com', 'rating': 5})
    approve_review(Review.query.filter_by(reviewer_name='Bilal').one().id)

    response = client.post(f'/api/admin/reviews/{review_id}/approve', headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()['vendorRating'] == 4.5
    assert response.get_json()['vendorReviewCount'] == 2


def test_review_rating_out_of_range(app, make_vendor):
    vendor = make_vendor()
    with pytest.raises(ValidationError):
        submit_review(vendor.id, {'reviewerName': 'Hana', 'reviewerEmail': 'hana@example.com', 'rating': 6})


def test_review_for_unknown_vendor(app):
    with pytest.raises(NotFound):
        submit_review(999, {'reviewerName': 'Hana', 'reviewerEmail': 'hana@example.com', 'rating': 5})


def test_approve_requires_admin(client, make_vendor):
    vendor = make_vendor()
    review = submit_review(vendor.id, {'reviewerName': 'Hana', 'reviewerEmail': 'h@example.com', 'rating': 5})
    assert client.post(f'/api/admin/reviews/{review.id}/approve').status_code == 401
