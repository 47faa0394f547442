"""Templated e-mails: emails/<name>.txt plus emails/<name>.html."""

import logging
from typing import Optional, Sequence

from django.conf import settings
from django.template.loader import render_to_string

from .notifications import send_email

logger = logging.getLogger(__name__)


def render_email(template: str, context: Optional[dict] = None):
    """Return (text_body, html_body) for a template name."""
    context = {
        'frontend_url': settings.FRONTEND_URL,
        **(context or {}),
    }
    text_body = render_to_string(f'emails/{template}.txt', context)
    html_body = render_to_string(f'emails/{template}.html', context)
    return text_body, html_body


def send_templated_email(
    *,
    to: Sequence[str],
    subject: str,
    template: str,
    context: Optional[dict] = None,
) -> bool:
    text_body, html_body = render_email(template, context)
    logger.debug("Rendered e-mail template %s for %d recipient(s)", template, len(to))
    return send_email(to=to, subject=subject, text_body=text_body, html_body=html_body)
