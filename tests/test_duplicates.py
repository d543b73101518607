from conftest import auth_header
from weddinghub.duplicates import detect_duplicates, cleanup_duplicates, duplicate_report
from weddinghub.models import QuoteRequest


def test_newest_record_of_a_key_is_retained(app, make_vendor, make_quote, days_ago):
    vendor = make_vendor()
    first = make_quote(vendor, customer_name='A', message='hello', created_at=days_ago(3))
    make_quote(vendor, customer_name='B', message='hello', created_at=days_ago(2))
    third = make_quote(vendor, customer_name='A', message='hello', created_at=days_ago(1))

    first_id, third_id = first.id, third.id
    result = detect_duplicates(vendor.quote_requests)

    assert result == {'total': 3, 'unique': 2, 'duplicates': 1, 'duplicateIds': [first_id]}

    cleanup = cleanup_duplicates()
    assert cleanup['totalRemoved'] == 1

    remaining = {q.id for q in QuoteRequest.query.all()}
    assert third_id in remaining
    assert first_id not in remaining
    assert detect_duplicates(QuoteRequest.query.all())['unique'] == 2


def test_same_timestamp_falls_back_to_id(app, make_vendor, make_quote, days_ago):
    vendor = make_vendor()
    moment = days_ago(1)
    older = make_quote(vendor, created_at=moment)
    newer = make_quote(vendor, created_at=moment)

    assert detect_duplicates([older, newer])['duplicateIds'] == [older.id]


def test_key_includes_email_and_message(app, make_vendor, make_quote):
    vendor = make_vendor()
    make_quote(vendor, customer_email='one@example.com')
    make_quote(vendor, customer_email='two@example.com')
    make_quote(vendor, message='a different question')

    assert detect_duplicates(vendor.quote_requests)['duplicates'] == 0


def test_duplicates_are_scoped_per_vendor(app, make_vendor, make_quote):
    first = make_vendor(email='first@example.com')
    second = make_vendor(email='second@example.com', business_name='Second Hall')
    make_quote(first)
    make_quote(second)

    assert cleanup_duplicates()['totalRemoved'] == 0
    assert QuoteRequest.query.count() == 2


def test_report_does_not_delete(app, make_vendor, make_quote, days_ago):
    vendor = make_vendor()
    make_quote(vendor, created_at=days_ago(2))
    make_quote(vendor, created_at=days_ago(1))

    report = duplicate_report()

    assert report['summary'] == {'vendorsProcessed': 1, 'vendorsWithDuplicates': 1, 'totalDuplicates': 1}
    assert report['vendors'][0]['businessName'] == 'Noor Banquets'
    assert QuoteRequest.query.count() == 2


def test_cleanup_summary(app, make_vendor, make_quote, days_ago):
    busy = make_vendor(email='busy@example.com', business_name='Busy Hall')
    quiet = make_vendor(email='quiet@example.com', business_name='Quiet Hall')
    for days in (3, 2, 1):
        make_quote(busy, created_at=days_ago(days))
    make_quote(quiet)

    result = cleanup_duplicates()

    assert result['summary'] == {'vendorsProcessed': 2, 'vendorsWithDuplicates': 1, 'totalRemoved': 2}
    assert result['cleanupResults'] == [{
        'vendorId': busy.id,
        'businessName': 'Busy Hall',
        'removed': 2,
        'originalCount': 3,
        'remainingCount': 1,
    }]


def test_cleanup_endpoints_require_admin(client, make_vendor):
    vendor = make_vendor()
    headers = auth_header(vendor.user)

    assert client.get('/api/cleanup-duplicates').status_code == 401
    assert client.post('/api/cleanup-duplicates', headers=headers).status_code == 401


def test_cleanup_endpoint(client, make_vendor, make_quote, admin_headers, days_ago):
    vendor = make_vendor()
    make_quote(vendor, created_at=days_ago(2))
    make_quote(vendor, created_at=days_ago(1))

    report = client.get('/api/cleanup-duplicates', headers=admin_headers)
    assert report.status_code == 200
    assert report.get_json()['summary']['totalDuplicates'] == 1

    response = client.post('/api/cleanup-duplicates', headers=admin_headers)
    assert response.status_code == 200
    assert response.get_json()['totalRemoved'] == 1
    assert QuoteRequest.query.count() == 1
