"""
Email Notifications
Transactional emails sent through Flask-Mail. Delivery is best-effort:
failures are logged and reported as False, never raised.
"""
from flask import current_app
from flask_mail import Message
from markupsafe import escape

from weddinghub import mail
from weddinghub.logger_config import app_logger

BRAND = 'Muslim Wedding Hub'


def send_email(to, subject, html):
    """
    Send an HTML email

    Args:
        to: Recipient address
        subject: Subject line
        html: HTML body

    Returns:
        bool: True if the message was handed to the mail transport
    """
    if not current_app.config.get('TESTING') and not current_app.config.get('MAIL_USERNAME'):
        app_logger.warning(f"Mail transport not configured, skipping email to {to}: {subject}")
        return False

    try:
        msg = Message(subject=subject, recipients=[to], html=html)
        mail.send(msg)
        app_logger.info(f"Email sent to {to}: {subject}")
        return True
    except Exception as e:
        app_logger.exception(f"Failed to send email to {to}: {e}")
        return False


def _footer(lines):
    support = escape(current_app.config.get('SUPPORT_EMAIL', 'support@muslimweddinghub.com'))
    return f"""
        <div style="text-align: center; margin-top: 30px; padding-top: 20px; border-top: 1px solid #e5e7eb;">
          <p style="color: #6b7280; font-size: 14px; margin: 0;">{lines}</p>
          <p style="color: #6b7280; font-size: 14px;">
            Questions? Contact us at <a href="mailto:{support}" style="color: #059669;">{support}</a>
          </p>
        </div>"""


def approval_email(vendor_name, business_name):
    """Returns (subject, html) for an approved vendor application"""
    login_url = escape(f"{current_app.config.get('APP_BASE_URL', '')}/vendor/login")
    html = f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h1 style="color: #059669; text-align: center;">Congratulations!</h1>
        <p>Dear {escape(vendor_name)},</p>
        <p>Great news! Your vendor application for <strong>{escape(business_name)}</strong>
           has been reviewed and approved by our team.</p>
        <h3>What's Next?</h3>
        <ul>
          <li>Your business profile is now live on our platform</li>
          <li>You can log in to your vendor dashboard to manage your profile</li>
          <li>Start receiving quote requests from potential clients</li>
        </ul>
        <a href="{login_url}"
           style="background-color: #059669; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px;">
          Login to Dashboard
        </a>
        {_footer(f"Thank you for choosing {BRAND}!")}
      </div>"""
    return 'Your Vendor Application Has Been Approved!', html


def rejection_email(vendor_name, business_name, reason=None):
    """Returns (subject, html) for a rejected vendor application"""
    feedback = ''
    if reason:
        feedback = f"""
        <div style="background-color: #f9fafb; border-radius: 8px; padding: 20px; margin: 20px 0;">
          <h3 style="margin-top: 0;">Feedback</h3>
          <p>{escape(reason)}</p>
        </div>"""

    html = f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h1 style="color: #dc2626; text-align: center;">Application Update</h1>
        <p>Dear {escape(vendor_name)},</p>
        <p>Thank you for your interest in joining {BRAND}. After careful review of your application for
           <strong>{escape(business_name)}</strong>, we are unable to approve your application at this time.</p>
        {feedback}
        <h3>What You Can Do</h3>
        <ul>
          <li>Address any concerns mentioned above</li>
          <li>Consider reapplying in the future with updated information</li>
        </ul>
        {_footer(f"Thank you for your interest in {BRAND}.")}
      </div>"""
    return 'Update on Your Vendor Application', html


def quote_response_email(customer_name, vendor_name, action, message,
                         proposed_price=None, additional_details=None, event_date=None):
    """Returns (subject, html) notifying a customer about a vendor's quote response"""
    declined = action == 'decline'
    color = '#dc2626' if declined else '#059669'

    event = f" for your event on {event_date.strftime('%B %d, %Y')}" if event_date else ''
    price = ''
    if proposed_price is not None:
        price = f"""
          <div style="margin-top: 20px; padding: 15px; background-color: #f0fdf4; border-radius: 6px;">
            <h4 style="color: #059669; margin: 0 0 10px 0;">Proposed Price:</h4>
            <p style="font-size: 18px; font-weight: bold; margin: 0;">${proposed_price:,.2f}</p>
          </div>"""
    details = ''
    if additional_details:
        details = f"""
          <h4>Additional Details:</h4>
          <p>{escape(additional_details)}</p>"""

    if declined:
        next_steps = (f"You can browse other qualified vendors on {BRAND} "
                      f"who might be a perfect fit for your special day.")
        subject = f"Quote Request Update from {vendor_name}"
    else:
        next_steps = (f"Contact {escape(vendor_name)} directly to discuss your wedding details "
                      f"further and finalize your booking.")
        subject = f"Quote Response from {vendor_name}"

    html = f"""
      <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h1 style="color: #059669; text-align: center;">{BRAND}</h1>
        <h2 style="color: {color};">{'Quote Request Declined' if declined else 'Quote Response Received'}</h2>
        <p>Dear {escape(customer_name)},</p>
        <p>{escape(vendor_name)} has {'declined' if declined else 'responded to'} your quote request{event}.</p>
        <div style="background-color: #f9fafb; border-radius: 8px; padding: 20px; margin-bottom: 20px;">
          <h3>Vendor Response:</h3>
          <p style="font-style: italic;">"{escape(message)}"</p>
          {price}
          {details}
        </div>
        <p>{next_steps}</p>
        {_footer(f"Thank you for using {BRAND}!")}
      </div>"""
    return subject, html
