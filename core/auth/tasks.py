from celery import shared_task
from .emails import send_otp_email
import logging

logger = logging.getLogger(__name__)


@shared_task
def send_otp_email_task(email, otp):
    """
    Async task to send the verification OTP.
    Only primitives cross the broker; the user object stays in Django.
    """
    try:
        send_otp_email(email, otp)
        logger.info(f"OTP email task completed for {email}")
    except Exception as e:
        logger.exception(f"OTP email task failed: {str(e)}")
