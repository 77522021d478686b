from libs.common.emails.core import build_message, email_configured, send_email

__all__ = ["build_message", "email_configured", "send_email"]
