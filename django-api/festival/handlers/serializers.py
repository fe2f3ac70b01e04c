"""Serializers for parsing requests and rendering domain models."""

from rest_framework import serializers

from festival.domain import Grade, ProgramId, RegistrationRequest, UserId
from festival.handlers.errors import error_body


class RegistrationRequestSerializer(serializers.Serializer):
    """Input for one program registration."""

    program_id = serializers.UUIDField()
    is_group = serializers.BooleanField(default=False)
    group_name = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=120
    )
    member_ids = serializers.ListField(child=serializers.UUIDField(), default=list)

    def to_domain(self) -> RegistrationRequest:
        return build_request(self.validated_data)


class BatchRequestSerializer(serializers.Serializer):
    """Input for registering several programs at once."""

    items = RegistrationRequestSerializer(many=True, allow_empty=False)

    def to_domain(self) -> list[RegistrationRequest]:
        return [build_request(item) for item in self.validated_data["items"]]


class GradeSerializer(serializers.Serializer):
    grade = serializers.ChoiceField(
        choices=[grade.value for grade in Grade], allow_null=True
    )

    def to_domain(self) -> Grade | None:
        value = self.validated_data["grade"]
        return Grade(value) if value else None


def build_request(data: dict) -> RegistrationRequest:
    return RegistrationRequest(
        program_id=ProgramId(data["program_id"]),
        is_group=data.get("is_group", False),
        group_name=data.get("group_name"),
        member_ids=tuple(UserId(value) for value in data.get("member_ids", [])),
    )


class MemberSerializer(serializers.Serializer):
    """A housemate offered as a possible teammate."""

    id = serializers.UUIDField(source="id.value")
    display_name = serializers.CharField()


class HouseSerializer(serializers.Serializer):
    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    color = serializers.CharField()


class ProgramSerializer(serializers.Serializer):
    """Serializer for Program domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    description = serializers.CharField()
    type = serializers.CharField(source="type.value")
    category = serializers.CharField(source="category.value")
    min_members = serializers.IntegerField(source="team_size.minimum")
    max_members = serializers.IntegerField(source="team_size.maximum")
    is_active = serializers.BooleanField()


class RegistrationSerializer(serializers.Serializer):
    """Serializer for Registration domain model."""

    id = serializers.UUIDField(source="id.value")
    user_id = serializers.UUIDField(source="user_id.value")
    house_id = serializers.UUIDField(source="house_id.value")
    program = ProgramSerializer()
    is_group = serializers.BooleanField()
    group_name = serializers.CharField()
    status = serializers.CharField(source="status.value")
    grade = serializers.SerializerMethodField()
    member_ids = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField()

    def get_grade(self, obj) -> str | None:
        return obj.grade.value if obj.grade else None

    def get_member_ids(self, obj) -> list[str]:
        return [str(member_id.value) for member_id in obj.member_ids]


class BatchReportSerializer(serializers.Serializer):
    created = RegistrationSerializer(many=True)
    skipped = serializers.SerializerMethodField()
    rejected = serializers.SerializerMethodField()

    def get_skipped(self, obj) -> list[str]:
        return [str(program_id.value) for program_id in obj.skipped]

    def get_rejected(self, obj) -> list[dict]:
        return [
            {"index": item.index, "program_id": str(item.program_id.value), **error_body(item.error)}
            for item in obj.rejected
        ]


class QuotaSummarySerializer(serializers.Serializer):
    counts = serializers.SerializerMethodField()
    limits = serializers.SerializerMethodField()

    def get_counts(self, obj) -> dict:
        return {
            "on_stage_solo": obj.counts.on_stage_solo,
            "on_stage_group": obj.counts.on_stage_group,
            "off_stage_total": obj.counts.off_stage_total,
        }

    def get_limits(self, obj) -> dict:
        return {
            "max_on_stage_solo": obj.limits.max_on_stage_solo,
            "max_on_stage_group": obj.limits.max_on_stage_group,
            "max_off_stage_total": obj.limits.max_off_stage_total,
        }


class HouseScoreSerializer(serializers.Serializer):
    house = HouseSerializer()
    score = serializers.IntegerField()


class RankedHouseSerializer(serializers.Serializer):
    rank = serializers.IntegerField()
    house = HouseSerializer()
    score = serializers.IntegerField()


class PodiumSerializer(serializers.Serializer):
    rank1 = HouseScoreSerializer(many=True)
    rank2 = HouseScoreSerializer(many=True)
    rank3 = HouseScoreSerializer(many=True)
    rest = RankedHouseSerializer(many=True)


class LeaderboardSerializer(serializers.Serializer):
    scores = HouseScoreSerializer(many=True)
    podium = PodiumSerializer()
    standings = RankedHouseSerializer(many=True)


class ResultSerializer(serializers.Serializer):
    """A graded registration as shown in the recent results feed."""

    registration_id = serializers.UUIDField(source="id.value")
    program = serializers.CharField(source="program.name")
    house_id = serializers.UUIDField(source="house_id.value")
    group_name = serializers.CharField()
    grade = serializers.SerializerMethodField()
    updated_at = serializers.DateTimeField()

    def get_grade(self, obj) -> str | None:
        return obj.grade.value if obj.grade else None
