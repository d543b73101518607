"""
Duplicate Quote Cleanup
Identical inquiries (same customer name, email and message) sent to one vendor.
Scanning is newest-first, so the most recent record of each key is retained.
"""
from weddinghub.logger_config import app_logger
from weddinghub.models import db, Vendor, QuoteRequest


def duplicate_key(quote):
    return (quote.customer_name, quote.customer_email, quote.message)


def newest_first(quotes):
    return sorted(quotes, key=lambda q: (q.created_at, q.id), reverse=True)


def detect_duplicates(quotes):
    """
    Classify one vendor's quotes

    Args:
        quotes: QuoteRequest rows of a single vendor, in any order

    Returns:
        dict: {total, unique, duplicates, duplicateIds}
    """
    seen = set()
    duplicate_ids = []
    for quote in newest_first(quotes):
        key = duplicate_key(quote)
        if key in seen:
            duplicate_ids.append(quote.id)
        else:
            seen.add(key)

    return {
        'total': len(quotes),
        'unique': len(seen),
        'duplicates': len(duplicate_ids),
        'duplicateIds': duplicate_ids,
    }


def duplicate_report():
    """Per-vendor duplicate classification without deleting anything"""
    report = []
    for vendor in Vendor.query.order_by(Vendor.id).all():
        result = detect_duplicates(vendor.quote_requests)
        result.update({'vendorId': vendor.id, 'businessName': vendor.business_name})
        report.append(result)

    return {
        'vendors': report,
        'summary': {
            'vendorsProcessed': len(report),
            'vendorsWithDuplicates': sum(1 for r in report if r['duplicates']),
            'totalDuplicates': sum(r['duplicates'] for r in report),
        }
    }


def cleanup_duplicates():
    """
    Delete every duplicate quote, one batch delete per vendor

    Returns:
        dict: {totalRemoved, cleanupResults, summary}
    """
    vendors = Vendor.query.order_by(Vendor.id).all()
    total_removed = 0
    cleanup_results = []

    try:
        for vendor in vendors:
            result = detect_duplicates(vendor.quote_requests)
            if not result['duplicateIds']:
                continue

            removed = (QuoteRequest.query
                       .filter(QuoteRequest.id.in_(result['duplicateIds']))
                       .delete(synchronize_session=False))
            total_removed += removed
            cleanup_results.append({
                'vendorId': vendor.id,
                'businessName': vendor.business_name,
                'removed': removed,
                'originalCount': result['total'],
                'remainingCount': result['total'] - removed,
            })
            app_logger.info(f"Removing {removed} duplicate quotes from vendor {vendor.business_name}")

        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    # Relationship collections loaded above still hold the deleted rows
    db.session.expire_all()

    app_logger.info(f"Duplicate cleanup completed, removed {total_removed} quote requests")
    return {
        'totalRemoved': total_removed,
        'cleanupResults': cleanup_results,
        'summary': {
            'vendorsProcessed': len(vendors),
            'vendorsWithDuplicates': len(cleanup_results),
            'totalRemoved': total_removed,
        }
    }
