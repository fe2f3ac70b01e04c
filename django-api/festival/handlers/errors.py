"""Mapping of domain errors to HTTP responses.

Domain errors carry codes and structured detail only; the wording shown to
users lives here.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from festival.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.HOUSE_NOT_ASSIGNED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PROGRAM_UNAVAILABLE: status.HTTP_404_NOT_FOUND,
    ErrorCode.TYPE_MISMATCH: status.HTTP_400_BAD_REQUEST,
    ErrorCode.GROUP_NAME_REQUIRED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ALREADY_REGISTERED: status.HTTP_409_CONFLICT,
    ErrorCode.NOTHING_NEW: status.HTTP_409_CONFLICT,
    ErrorCode.CROSS_HOUSE_MEMBER: status.HTTP_400_BAD_REQUEST,
    ErrorCode.TEAM_SIZE_OUT_OF_RANGE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MEMBER_ALREADY_REGISTERED: status.HTTP_409_CONFLICT,
    ErrorCode.MEMBER_ALREADY_ON_TEAM: status.HTTP_409_CONFLICT,
    ErrorCode.LIMIT_EXCEEDED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_CONSTRAINT: status.HTTP_409_CONFLICT,
    ErrorCode.NOT_OWNER: status.HTTP_403_FORBIDDEN,
    ErrorCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.NOT_FOUND: "The requested {resource} was not found.",
    ErrorCode.INVALID_ID: "Invalid {resource} ID format.",
    ErrorCode.HOUSE_NOT_ASSIGNED: "You must be assigned to a house to register.",
    ErrorCode.PROGRAM_UNAVAILABLE: "This program is not open for registration.",
    ErrorCode.TYPE_MISMATCH: "Registration type does not match a {program_type} program.",
    ErrorCode.GROUP_NAME_REQUIRED: "A group name is required for group programs.",
    ErrorCode.ALREADY_REGISTERED: "Already registered for this program.",
    ErrorCode.NOTHING_NEW: "You are already registered for every selected program.",
    ErrorCode.CROSS_HOUSE_MEMBER: "One or more selected members are invalid or belong to a different house.",
    ErrorCode.TEAM_SIZE_OUT_OF_RANGE: "Team size must be between {min} and {max} members (including yourself).",
    ErrorCode.MEMBER_ALREADY_REGISTERED: "One or more members are already registered for this program.",
    ErrorCode.MEMBER_ALREADY_ON_TEAM: "One or more members are already part of another team for this program.",
    ErrorCode.LIMIT_EXCEEDED: "Limit reached for {bucket_label} items (Max: {max}).",
    ErrorCode.DUPLICATE_CONSTRAINT: "This registration was just created by another request.",
    ErrorCode.NOT_OWNER: "Only the registrant can change this registration.",
    ErrorCode.INTERNAL: "Internal server error.",
}

BUCKET_LABELS = {
    "ON_STAGE_SOLO": "On Stage Solo",
    "ON_STAGE_GROUP": "On Stage Group",
    "OFF_STAGE_TOTAL": "Off Stage",
}


def error_message(error: DomainError) -> str:
    context = dict(error.detail)
    if "bucket" in context:
        context["bucket_label"] = BUCKET_LABELS.get(context["bucket"], context["bucket"])
    try:
        return ERROR_MESSAGES[error.code].format(**context)
    except KeyError:
        return error.code.value


def error_body(error: DomainError) -> dict:
    return {
        "code": error.code.value,
        "error": error_message(error),
        "detail": error.detail,
    }


def error_response(error: DomainError) -> Response:
    """Render a domain error returned by a service."""
    return Response(
        {"success": False, **error_body(error)},
        status=ERROR_STATUS[error.code],
    )


def festival_exception_handler(exc, context):
    """
    Wrap DRF + Django exceptions into a consistent response format.

    Success responses (2xx) are not touched.
    Only errors come through here.
    """
    response = drf_exception_handler(exc, context)

    if response is not None:
        return Response(
            {
                "success": False,
                "status_code": response.status_code,
                "errors": response.data,
            },
            status=response.status_code,
        )

    # Storage faults and other unexpected exceptions -> 500
    logger.exception("Unhandled API exception", exc_info=exc)

    return Response(
        {
            "success": False,
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "code": ErrorCode.INTERNAL.value,
            "error": ERROR_MESSAGES[ErrorCode.INTERNAL],
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
