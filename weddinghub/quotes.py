"""
Quote Requests
Customer inquiries and the vendor's one-time response
"""
from datetime import datetime

from weddinghub.directory import get_public_vendor
from weddinghub.emails import send_email, quote_response_email
from weddinghub.errors import Unauthorized, NotFound, Conflict
from weddinghub.logger_config import app_logger
from weddinghub.models import db, QuoteRequest, QuoteStatus
from weddinghub.validation import validate_request_data, QuoteRequestSchema, QuoteResponseSchema

ACTION_STATUS = {
    'accept': QuoteStatus.RESPONDED,
    'decline': QuoteStatus.DECLINED,
    'respond': QuoteStatus.RESPONDED,
}


def submit_quote(data):
    """
    Create a PENDING quote request for a vendor

    Raises:
        ValidationError: missing customer fields
        NotFound: unknown or rejected vendor
    """
    cleaned = validate_request_data(QuoteRequestSchema, data)

    vendor = get_public_vendor(cleaned['vendor_id'])

    quote = QuoteRequest(
        vendor_id=vendor.id,
        customer_name=cleaned['customer_name'],
        customer_email=cleaned['customer_email'],
        customer_phone=cleaned.get('customer_phone'),
        event_date=cleaned.get('event_date'),
        message=cleaned['message'],
        status=QuoteStatus.PENDING,
    )
    db.session.add(quote)
    db.session.commit()

    app_logger.info(f"Quote request {quote.id} created for vendor {vendor.id}")
    return quote


def list_vendor_quotes(vendor_id):
    """Quotes addressed to a vendor, newest first"""
    return (QuoteRequest.query
            .filter_by(vendor_id=vendor_id)
            .order_by(QuoteRequest.created_at.desc(), QuoteRequest.id.desc())
            .all())


def respond_to_quote(quote_id, data, acting_user):
    """
    Record a vendor's response to a quote request and notify the customer

    Args:
        quote_id: QuoteRequest primary key
        data: {action, message, proposedPrice?, additionalDetails?}
        acting_user: Session claims of the caller

    Returns:
        QuoteRequest: the updated quote

    Raises:
        Unauthorized: no vendor session, or the quote belongs to another vendor
        NotFound: unknown quote
        ValidationError: bad action, missing message, non-numeric price
        Conflict: the quote was already answered
    """
    session_vendor = (acting_user or {}).get('vendor')
    if not session_vendor:
        raise Unauthorized("Unauthorized - vendor access required")

    quote = db.session.get(QuoteRequest, quote_id)
    if quote is None:
        raise NotFound("Quote request not found")

    if quote.vendor_id != session_vendor.get('id'):
        app_logger.warning(
            f"Vendor {session_vendor.get('id')} attempted to respond to quote {quote_id} "
            f"owned by vendor {quote.vendor_id}"
        )
        raise Unauthorized("Unauthorized - quote belongs to another vendor")

    cleaned = validate_request_data(QuoteResponseSchema, data)

    if quote.status != QuoteStatus.PENDING:
        raise Conflict(f"Quote request has already been {quote.status.lower()}")

    action = cleaned['action']
    quote.status = ACTION_STATUS[action]
    quote.vendor_response = cleaned['message']
    quote.proposed_price = cleaned.get('proposed_price')
    quote.additional_details = cleaned.get('additional_details')
    quote.responded_at = datetime.utcnow()

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    app_logger.info(f"Vendor {quote.vendor_id} {action} quote request {quote.id} -> {quote.status}")

    notify_customer(quote, action)
    return quote


def notify_customer(quote, action):
    """Email the customer about the response; failures are logged only"""
    subject, html = quote_response_email(
        customer_name=quote.customer_name,
        vendor_name=quote.vendor.business_name,
        action=action,
        message=quote.vendor_response,
        proposed_price=quote.proposed_price,
        additional_details=quote.additional_details,
        event_date=quote.event_date,
    )
    if not send_email(quote.customer_email, subject, html):
        app_logger.warning(f"Quote response email not delivered for quote {quote.id}")
