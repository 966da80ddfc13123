import logging
from datetime import datetime
from html import escape

from django.core.mail import send_mail
from django.conf import settings

logger = logging.getLogger(__name__)


def _otp_email_html(otp, expiry_minutes):
    safe_otp = escape(str(otp))
    year = datetime.now().year
    return f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Your Verification Code</title>
</head>
<body style="margin:0;padding:0;background:#111827;color:#E5E7EB;font-family:Segoe UI,Arial,sans-serif;">
  <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="padding:24px 12px;">
    <tr>
      <td align="center">
        <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="max-width:400px;background:#222222;border-radius:8px;">
          <tr>
            <td style="padding:24px 20px 8px;text-align:center;">
              <div style="font-size:22px;font-weight:800;color:#00C8FF;">StackWave Verification Code</div>
            </td>
          </tr>
          <tr>
            <td style="padding:0 20px 10px;text-align:center;">
              <div style="font-size:16px;color:#BBBBBB;">Use this OTP to verify your email:</div>
            </td>
          </tr>
          <tr>
            <td style="padding:12px 20px;text-align:center;">
              <div style="display:inline-block;font-size:24px;font-weight:bold;letter-spacing:3px;padding:10px 16px;background:#333333;color:#FFCC00;border-radius:5px;">
                {safe_otp}
              </div>
            </td>
          </tr>
          <tr>
            <td style="padding:8px 20px 22px;text-align:center;color:#9CA3AF;font-size:14px;">
              This OTP expires in {expiry_minutes} minutes. If you did not sign up, ignore this email.
            </td>
          </tr>
          <tr>
            <td style="padding:12px 20px;border-top:1px solid #374151;text-align:center;color:#6B7280;font-size:12px;">
              &copy; {year} StackWave
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""


def send_otp_email(email, otp):
    """
    Send the email verification OTP.
    Delivery failures are logged, never raised: the user can ask for a new code.
    """
    subject = "StackWave Email Verification Code"
    expiry_minutes = settings.OTP_EXPIRY_MINUTES

    try:
        html_message = _otp_email_html(otp, expiry_minutes)

        plain_message = (
            f"Your StackWave verification code is {otp}.\n\n"
            f"This code expires in {expiry_minutes} minutes.\n"
            "If you didn't sign up, ignore this email."
        )

        send_mail(
            subject=subject,
            message=plain_message,
            from_email=None,  # Uses DEFAULT_FROM_EMAIL from settings
            recipient_list=[email],
            html_message=html_message,
            fail_silently=False,
        )

        logger.info("OTP email sent to %s", email)

    except Exception:
        logger.exception("Failed to send OTP email to %s", email)
