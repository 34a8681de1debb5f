"""Outgoing email: password reset links, order confirmations, contact form."""
import logging
import re
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from wallmasters.config import get_settings

logger = logging.getLogger(__name__)


def send_email(
    to_email: str,
    subject: str,
    text_content: str,
    html_content: str | None = None,
    reply_to: str | None = None,
) -> bool:
    """Send an email over SMTP. Returns False when SMTP is unconfigured or fails."""
    settings = get_settings()
    if not settings.smtp_host:
        logger.warning(f"SMTP not configured, skipping email: {subject}")
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.mail_from
    msg["To"] = to_email
    if reply_to:
        msg["Reply-To"] = reply_to

    msg.attach(MIMEText(text_content, "plain"))
    if html_content:
        msg.attach(MIMEText(html_content, "html"))

    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            if settings.smtp_user and settings.smtp_password:
                server.login(settings.smtp_user, settings.smtp_password)
            server.send_message(msg)
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email '{subject}': {e}")
        return False


def _strip_tags(html: str) -> str:
    return re.sub(r"<[^>]+>", "", html)


def build_reset_link(token: str) -> str:
    settings = get_settings()
    return f"{settings.frontend_url.rstrip('/')}/reset-password/{token}"


def send_password_reset_email(to_email: str, token: str) -> bool:
    link = build_reset_link(token)
    html = (
        "<p>Please use the following link to reset your password:</p>"
        f'<p><a href="{link}">{link}</a></p>'
    )
    return send_email(to_email, "Password Reset", _strip_tags(html.replace("</p>", "\n")).strip(), html)


def _items_line(products: list[dict]) -> str:
    return ", ".join(f"{item['name']} (x{item['quantity']})" for item in products)


def send_order_confirmation(order) -> bool:
    """Mail the customer their confirmation and the shop its notification."""
    settings = get_settings()
    address = order.shipping_address
    items = _items_line(order.products)

    customer_text = (
        f"Hello {address['name']},\n\n"
        f"Thank you for your order! Your order ID is {order.order_id}. "
        "We will process your order soon.\n\n"
        "Order Details:\n"
        f"- Total Price: {order.total_price} EGP\n"
        f"- Items: {items}\n\n"
        "Regards,\nWall Masters Team"
    )
    admin_text = (
        "New Order Received:\n\n"
        f"Order ID: {order.order_id}\n"
        f"Customer Name: {address['name']}\n"
        f"Customer Email: {address['email']}\n"
        f"Total Price: {order.total_price} EGP\n\n"
        f"Order Details:\n- Items: {items}\n\n"
        "Please process this order as soon as possible."
    )

    customer_sent = send_email(address["email"], "Wall Masters Order Confirmation", customer_text)
    admin_sent = send_email(settings.admin_email, "New Order Received - Wall Masters", admin_text)
    return customer_sent and admin_sent


def send_contact_message(name: str, email: str, comment: str) -> bool:
    settings = get_settings()
    text = (
        "You have a new message from your contact form:\n\n"
        f"  Name: {name}\n"
        f"  Email: {email}\n"
        f"  Comment: {comment}"
    )
    return send_email(
        settings.admin_email,
        f"New Contact Form Submission from {name}",
        text,
        reply_to=email,
    )
