"""DRF exception handler that renders AppError as a structured payload."""

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.audit.buffer import get_audit_log
from .exceptions import AppError

logger = logging.getLogger(__name__)


def app_exception_handler(exc, context):
    """
    Render ``AppError`` instances as ``{"error": {...}}`` and record them.

    Everything else goes through DRF's default handler.
    """
    if not isinstance(exc, AppError):
        return exception_handler(exc, context)

    request = context.get('request')
    view = context.get('view')
    user = getattr(request, 'user', None)
    actor = user.email if user is not None and user.is_authenticated else None

    get_audit_log('app_error').record(
        exc.default_code,
        actor=actor,
        escalate=not exc.is_recoverable,
        error_id=exc.error_id,
        description=exc.error_description,
        view=view.__class__.__name__ if view is not None else None,
    )
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.error_id, exc.error_description)
    else:
        logger.info("%s: %s", exc.error_id, exc.error_description)

    return Response({'error': exc.to_dict()}, status=exc.status_code)
