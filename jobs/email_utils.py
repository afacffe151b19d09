# jobs/email_utils.py
import logging

from django.conf import settings
from django.core.mail import EmailMessage

from .constants import APPLICATION_STATUS_ACCEPTED

logger = logging.getLogger(__name__)


def build_decision_body(applicant_name, job_role_name, decision, reason=""):
    lines = [f"Hi {applicant_name or 'there'},", ""]
    if decision == APPLICATION_STATUS_ACCEPTED:
        lines.append(f"Good news! Your application for {job_role_name} has been accepted.")
        lines.append("A member of the hiring team will be in touch about next steps.")
    else:
        lines.append(f"Thank you for applying for {job_role_name}. We appreciate your interest.")
        lines.append("Unfortunately we will not be taking your application further.")
    lines.append("")
    if reason:
        lines.append("Message from the hiring team:")
        lines.append(reason)
        lines.append("")
    if decision != APPLICATION_STATUS_ACCEPTED:
        lines.append("We wish you all the best in your job search.")
    return "\n".join(lines)


def send_decision_email(applicant_email, applicant_name, job_role_name, decision, reason=""):
    """
    Plain-text accept/reject notification. Returns True when sent.
    """
    subject = f"[{job_role_name}] Application update"
    body = build_decision_body(applicant_name, job_role_name, decision, reason)
    email = EmailMessage(subject=subject, body=body, from_email=settings.DEFAULT_FROM_EMAIL, to=[applicant_email])
    email.send(fail_silently=False)
    return True


def notify_applicant(application, job_role_name, decision, reason=""):
    """
    Send the decision email when notifications are enabled. Mail errors are
    logged and never raised: the backend decision already stands.
    """
    if not settings.NOTIFY_APPLICANTS:
        return False
    if application is None or not application.applicant_email:
        logger.info("No applicant email returned by backend, skipping notification")
        return False
    try:
        return send_decision_email(
            applicant_email=application.applicant_email,
            applicant_name=application.applicant_name,
            job_role_name=job_role_name or application.job_role_name or "the role",
            decision=decision,
            reason=reason,
        )
    except Exception:
        logger.exception("Failed to send %s email for application %s", decision, application.application_id)
        return False
