from typing import Dict, Any, Optional
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid
from urllib.parse import quote
import html
import logging
import smtplib
import time

import httpx
from storage3.utils import StorageException

from pure360.config import AppConfig
from pure360.db.database import DataAccessError, get_supabase_client

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
DEFAULT_WHATSAPP_MESSAGE = "Hello Pure360, I have an enquiry."


# --- WHATSAPP LINK ----------------------------------------------------------

def whatsapp_link(number: str, message: str = DEFAULT_WHATSAPP_MESSAGE) -> str:
    return f"https://wa.me/{number}?text={quote(message, safe='')}"


# --- STORAGE UPLOAD ---------------------------------------------------------

def upload_file(
    bucket: str,
    folder: str,
    filename: str,
    data: bytes,
    content_type: Optional[str] = None,
    client=None,
) -> str:
    """Uploads under <folder>/<timestamp>.<ext> and returns the public URL."""
    if len(data) > MAX_UPLOAD_BYTES:
        raise ValueError("Please select a file under 5MB")

    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
    path = f"{folder}/{int(time.time() * 1000)}.{ext}"
    options = {"upsert": "true"}
    if content_type:
        options["content-type"] = content_type

    supabase = client or get_supabase_client()
    try:
        supabase.storage.from_(bucket).upload(path=path, file=data, file_options=options)
        return supabase.storage.from_(bucket).get_public_url(path)
    except (StorageException, httpx.HTTPError) as e:
        logger.error("Upload to %s failed: %s", bucket, e)
        raise DataAccessError(str(e)) from e


# --- BOOKING CONFIRMATION EMAIL --------------------------------------------

def _confirmation_html(customer_name, service_name, date, time_, address, total_price, support_email) -> str:
    customer_name, service_name, date, time_, address = (
        html.escape(str(v)) for v in (customer_name, service_name, date, time_, address)
    )
    address_block = (
        f"<p style=\"color:#666;font-size:12px;margin:12px 0 4px;text-transform:uppercase;\">Address</p>"
        f"<p style=\"color:#1a1a1a;font-size:14px;margin:0;\">{address}</p>"
        if address
        else ""
    )
    return f"""<!DOCTYPE html>
<html>
<body style="font-family:Arial,sans-serif;background-color:#f5f5f5;margin:0;padding:0;">
  <div style="max-width:600px;margin:0 auto;padding:40px 20px;">
    <div style="background-color:white;border-radius:12px;padding:40px;">
      <h1 style="color:#1a1a1a;font-size:24px;text-align:center;">Booking Confirmed!</h1>
      <p style="color:#666;font-size:14px;text-align:center;">Hi {customer_name}, your cleaning service has been scheduled.</p>
      <div style="background-color:#f8fafc;border-radius:8px;padding:24px;">
        <p style="color:#666;font-size:12px;margin:0 0 4px;text-transform:uppercase;">Service</p>
        <p style="color:#1a1a1a;font-size:14px;margin:0;">{service_name}</p>
        <p style="color:#666;font-size:12px;margin:12px 0 4px;text-transform:uppercase;">Date &amp; Time</p>
        <p style="color:#1a1a1a;font-size:14px;margin:0;">{date} at {time_}</p>
        {address_block}
        <p style="color:#1a1a1a;font-size:14px;margin:16px 0 0;font-weight:600;">Total: <span style="color:#22c55e;">R{total_price}</span></p>
      </div>
      <p style="color:#92400e;font-size:14px;text-align:center;margin-top:24px;">
        Need help? Contact us via WhatsApp or email at <a href="mailto:{support_email}">{support_email}</a>
      </p>
    </div>
  </div>
</body>
</html>"""


def send_booking_confirmation(
    cfg: AppConfig,
    to_email: str,
    customer_name: str,
    service_name: str,
    date: str,
    time_: str,
    total_price: int,
    address: str = "",
) -> Dict[str, Any]:
    if not all([to_email, customer_name, service_name, date, time_]):
        return {"success": False, "message_id": None, "error": "Missing required fields"}

    if not cfg.email or not cfg.email.smtp_host:
        logger.info("Email tool skipped: No SMTP config provided.")
        return {"success": True, "message_id": None, "error": None}

    body = (
        f"Hi {customer_name}, your booking is confirmed!\n\n"
        f"Service: {service_name}\n"
        f"Date & Time: {date} at {time_}\n"
        + (f"Address: {address}\n" if address else "")
        + f"Total: R{total_price}\n"
    )

    msg = MIMEMultipart("alternative")
    msg["Subject"] = "Booking Confirmed - Pure360"
    msg["From"] = f"{cfg.email.from_name} <{cfg.email.from_email}>"
    msg["To"] = to_email
    msg["Message-ID"] = make_msgid(domain=cfg.email.from_email.split("@")[-1])
    msg.attach(MIMEText(body, "plain"))
    msg.attach(
        MIMEText(
            _confirmation_html(customer_name, service_name, date, time_, address, total_price, cfg.contact.email),
            "html",
        )
    )

    try:
        with smtplib.SMTP(cfg.email.smtp_host, cfg.email.smtp_port) as server:
            server.starttls()
            server.login(cfg.email.smtp_user, cfg.email.smtp_password)
            server.send_message(msg)
        logger.info("Booking confirmation email sent to %s", to_email)
        return {"success": True, "message_id": msg["Message-ID"], "error": None}

    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send booking confirmation: %s", e)
        return {"success": False, "message_id": None, "error": str(e)}
