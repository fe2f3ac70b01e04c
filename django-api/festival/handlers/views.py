"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.conf import settings
from django.core.cache import cache
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from festival.cache import LEADERBOARD_CACHE_KEY
from festival.domain import ProgramCategory, RegistrationId, UserId
from festival.domain.errors import InvalidIdError
from festival.handlers.errors import ERROR_STATUS, error_response
from festival.handlers.permissions import CanGradeResults, IsStudent
from festival.handlers.serializers import (
    BatchReportSerializer,
    BatchRequestSerializer,
    GradeSerializer,
    LeaderboardSerializer,
    MemberSerializer,
    ProgramSerializer,
    QuotaSummarySerializer,
    RegistrationRequestSerializer,
    RegistrationSerializer,
    ResultSerializer,
)
from festival.services import AdmissionService, ResultService, ScoringService
from festival.stores.django_config import DjangoConfigProvider
from festival.stores.django_store import DjangoRegistrationStore
from festival.stores.mail_notifier import MailNotifier

MAX_RECENT_RESULTS = 50


def admission_service() -> AdmissionService:
    return AdmissionService(DjangoRegistrationStore(), DjangoConfigProvider(), MailNotifier())


def _current_user(request: Request) -> UserId:
    return UserId(request.user.pk)


def _registration_id(value: str) -> RegistrationId:
    try:
        return RegistrationId.from_string(value)
    except ValueError:
        raise InvalidIdError("registration") from None


def _ok(data, status_code: int = status.HTTP_200_OK) -> Response:
    return Response({"success": True, "data": data}, status=status_code)


class ProgramListView(APIView):
    """Handler for GET /api/programs"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        category = request.query_params.get("category")
        try:
            parsed = ProgramCategory(category) if category else None
        except ValueError:
            raise serializers.ValidationError({"category": "Unknown program category."})
        programs = DjangoRegistrationStore().list_programs(parsed)
        return _ok(ProgramSerializer(programs, many=True).data)


class RegistrationListView(APIView):
    """Handler for GET and POST /api/registrations"""

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsStudent()]
        return [IsAuthenticated()]

    def get(self, request: Request) -> Response:
        registrations = admission_service().list_registrations(_current_user(request))
        return _ok(RegistrationSerializer(registrations, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = RegistrationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = admission_service().register_single(
            _current_user(request), serializer.to_domain()
        )
        if not outcome.ok:
            return error_response(outcome.error)
        return _ok(RegistrationSerializer(outcome.value).data, status.HTTP_201_CREATED)


class RegistrationBatchView(APIView):
    """Handler for POST /api/registrations/batch"""

    permission_classes = [IsAuthenticated, IsStudent]

    def post(self, request: Request) -> Response:
        serializer = BatchRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = admission_service().register_batch(
            _current_user(request), serializer.to_domain()
        )
        if not outcome.ok:
            return error_response(outcome.error)

        report = outcome.value
        data = BatchReportSerializer(report).data
        if report.created:
            return _ok(data, status.HTTP_201_CREATED)
        first = report.rejected[0].error
        return Response({"success": False, "data": data}, status=ERROR_STATUS[first.code])


class QuotaView(APIView):
    """Handler for GET /api/registrations/quota"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        outcome = admission_service().quota_summary(_current_user(request))
        if not outcome.ok:
            return error_response(outcome.error)
        return _ok(QuotaSummarySerializer(outcome.value).data)


class RegistrationDetailView(APIView):
    """Handler for DELETE /api/registrations/{registration_id}"""

    permission_classes = [IsAuthenticated]

    def delete(self, request: Request, registration_id: str) -> Response:
        try:
            parsed = _registration_id(registration_id)
        except InvalidIdError as exc:
            return error_response(exc)
        outcome = admission_service().cancel(_current_user(request), parsed)
        if not outcome.ok:
            return error_response(outcome.error)
        return _ok(RegistrationSerializer(outcome.value).data)


class GradeView(APIView):
    """Handler for PUT /api/registrations/{registration_id}/grade"""

    permission_classes = [IsAuthenticated, CanGradeResults]

    def put(self, request: Request, registration_id: str) -> Response:
        try:
            parsed = _registration_id(registration_id)
        except InvalidIdError as exc:
            return error_response(exc)
        serializer = GradeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = ResultService(DjangoRegistrationStore()).set_grade(
            parsed, serializer.to_domain()
        )
        if not outcome.ok:
            return error_response(outcome.error)
        return _ok(RegistrationSerializer(outcome.value).data)


class LeaderboardView(APIView):
    """Handler for GET /api/leaderboard

    Cached until a registration, attendance mark or house changes.
    """

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        data = cache.get(LEADERBOARD_CACHE_KEY)
        if data is None:
            leaderboard = ScoringService(DjangoRegistrationStore()).leaderboard()
            data = LeaderboardSerializer(leaderboard).data
            cache.set(
                LEADERBOARD_CACHE_KEY, data, settings.FESTIVAL_LEADERBOARD_CACHE_SECONDS
            )
        return _ok(data)


class RecentResultsView(APIView):
    """Handler for GET /api/results/recent"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        try:
            limit = int(request.query_params.get("limit", 10))
        except ValueError:
            raise serializers.ValidationError({"limit": "Must be an integer."})
        limit = max(1, min(limit, MAX_RECENT_RESULTS))
        results = ResultService(DjangoRegistrationStore()).recent_results(limit)
        return _ok(ResultSerializer(results, many=True).data)


class HouseMembersView(APIView):
    """Handler for GET /api/houses/members?q=

    Lists students of the caller's house to pick teammates from.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        outcome = admission_service().find_teammates(
            _current_user(request), request.query_params.get("q")
        )
        if not outcome.ok:
            return error_response(outcome.error)
        return _ok(MemberSerializer(outcome.value, many=True).data)
