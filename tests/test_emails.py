from datetime import date

from weddinghub import mail
from weddinghub.emails import send_email, approval_email, rejection_email, quote_response_email


def test_send_email_records_message(app):
    with mail.record_messages() as outbox:
        assert send_email('guest@example.com', 'Hello', '<p>Hi</p>') is True

    assert outbox[0].recipients == ['guest@example.com']
    assert outbox[0].sender == app.config['MAIL_DEFAULT_SENDER']


def test_send_email_swallows_transport_errors(app, monkeypatch):
    def smtp_down(message):
        raise OSError('connection refused')

    monkeypatch.setattr(mail, 'send', smtp_down)
    assert send_email('guest@example.com', 'Hello', '<p>Hi</p>') is False


def test_send_email_skips_unconfigured_transport(app):
    app.config['TESTING'] = False
    app.config['MAIL_USERNAME'] = None
    try:
        with mail.record_messages() as outbox:
            assert send_email('guest@example.com', 'Hello', '<p>Hi</p>') is False
        assert outbox == []
    finally:
        app.config['TESTING'] = True


def test_approval_template(app):
    subject, html = approval_email('Aisha', 'Noor & Sons')
    assert 'Approved' in subject
    assert 'Noor &amp; Sons' in html
    assert '/vendor/login' in html


def test_rejection_template_without_reason(app):
    subject, html = rejection_email('Aisha', 'Noor Banquets')
    assert subject == 'Update on Your Vendor Application'
    assert 'Feedback' not in html


def test_decline_template(app):
    subject, html = quote_response_email('Maryam', 'Noor Banquets', 'decline', 'Fully booked <sorry>',
                                         event_date=date(2026, 6, 14))
    assert subject == 'Quote Request Update from Noor Banquets'
    assert 'Quote Request Declined' in html
    assert 'Fully booked &lt;sorry&gt;' in html
    assert 'Proposed Price' not in html
