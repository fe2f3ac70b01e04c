"""Tests for AdmissionService against the Django store.

These test admission rules, batch behavior and domain error mapping.
Run with: pytest tests/test_services.py -v
"""

import uuid

import pytest
from django.db import DatabaseError

from factories import RecordingNotifier, group, solo, uid
from festival.domain import (
    ProgramId,
    QuotaBucket,
    RegistrationId,
    RegistrationRequest,
    RegistrationStatus,
    UserId,
)
from festival.domain.errors import ErrorCode
from festival.models import Configuration, GroupMember, Program, Registration, User
from festival.services import AdmissionService
from festival.stores.django_config import DjangoConfigProvider
from festival.stores.django_store import DjangoRegistrationStore
from festival.stores.mail_notifier import MailNotifier


def nobody() -> UserId:
    return UserId(uuid.uuid4())


@pytest.fixture(autouse=True)
def limits(set_limits):
    set_limits(solo=5, group=5, off_stage=5)


@pytest.fixture
def group_program(make_program):
    return make_program(Program.Type.GROUP, min_members=2, max_members=4, name="Group Dance")


@pytest.mark.django_db
class TestRegisterSingle:
    """Tests for single-program admission."""

    def test_solo_registration_is_confirmed(self, service, student, make_program, notifier):
        program = make_program()

        outcome = service.register_single(uid(student), solo(program))

        assert outcome.ok
        assert outcome.value.status is RegistrationStatus.CONFIRMED
        assert outcome.value.house_id.value == student.house_id
        row = Registration.objects.get(pk=outcome.value.id.value)
        assert row.status == Registration.Status.CONFIRMED
        assert [user_id for user_id, _ in notifier.sent] == [uid(student)]

    def test_unknown_user_not_found(self, service, make_program):
        outcome = service.register_single(nobody(), solo(make_program()))
        assert outcome.error.code is ErrorCode.NOT_FOUND

    def test_user_without_house_rejected(self, service, make_user, make_program):
        homeless = make_user(house=None)

        outcome = service.register_single(uid(homeless), solo(make_program()))

        assert outcome.error.code is ErrorCode.HOUSE_NOT_ASSIGNED

    def test_missing_program_not_found(self, service, student):
        request = RegistrationRequest(program_id=ProgramId(uuid.uuid4()))

        outcome = service.register_single(uid(student), request)

        assert outcome.error.code is ErrorCode.NOT_FOUND
        assert outcome.error.detail["resource"] == "program"

    def test_inactive_program_unavailable(self, service, student, make_program):
        program = make_program(is_active=False)

        outcome = service.register_single(uid(student), solo(program))

        assert outcome.error.code is ErrorCode.PROGRAM_UNAVAILABLE

    def test_group_request_for_solo_program_mismatch(self, service, student, make_program, make_user):
        program = make_program()
        mate = make_user(house=student.house)

        outcome = service.register_single(uid(student), group(program, "Duo", mate))

        assert outcome.error.code is ErrorCode.TYPE_MISMATCH

    def test_solo_request_for_group_program_mismatch(self, service, student, group_program):
        outcome = service.register_single(uid(student), solo(group_program))

        assert outcome.error.code is ErrorCode.TYPE_MISMATCH

    def test_group_name_required(self, service, student, group_program, make_user):
        mate = make_user(house=student.house)

        outcome = service.register_single(uid(student), group(group_program, "   ", mate))

        assert outcome.error.code is ErrorCode.GROUP_NAME_REQUIRED

    def test_second_registration_for_same_program_rejected(self, service, student, make_program):
        program = make_program()
        assert service.register_single(uid(student), solo(program)).ok

        outcome = service.register_single(uid(student), solo(program))

        assert outcome.error.code is ErrorCode.ALREADY_REGISTERED
        assert outcome.error.detail["as_member"] is False
        assert Registration.objects.filter(program=program).count() == 1

    def test_group_with_quota_of_one(self, service, student, group_program, make_program, make_user, set_limits):
        set_limits(solo=5, group=1, off_stage=5)
        mate = make_user(house=student.house)
        second = make_program(Program.Type.GROUP, min_members=2, max_members=4)

        first = service.register_single(uid(student), group(group_program, "Team A", mate))
        again = service.register_single(uid(student), group(group_program, "Team A", mate))
        other = service.register_single(uid(student), group(second, "Team B", mate))

        assert first.ok
        assert first.value.member_ids == (uid(mate),)
        assert again.error.code is ErrorCode.ALREADY_REGISTERED
        assert other.error.code is ErrorCode.LIMIT_EXCEEDED
        assert other.error.bucket is QuotaBucket.ON_STAGE_GROUP
        assert other.error.maximum == 1

    def test_cross_house_member_rejected(self, service, student, group_program, make_user, other_house):
        outsider = make_user(house=other_house)

        outcome = service.register_single(uid(student), group(group_program, "Mixed", outsider))

        assert outcome.error.code is ErrorCode.CROSS_HOUSE_MEMBER
        assert outcome.error.detail["member_ids"] == [str(outsider.pk)]
        assert not Registration.objects.exists()

    def test_unknown_member_rejected_as_cross_house(self, service, student, group_program):
        request = RegistrationRequest(
            program_id=ProgramId(group_program.pk),
            is_group=True,
            group_name="Ghosts",
            member_ids=(nobody(),),
        )

        outcome = service.register_single(uid(student), request)

        assert outcome.error.code is ErrorCode.CROSS_HOUSE_MEMBER

    def test_team_too_small(self, service, student, group_program):
        outcome = service.register_single(uid(student), group(group_program, "Alone"))

        assert outcome.error.code is ErrorCode.TEAM_SIZE_OUT_OF_RANGE
        assert outcome.error.detail == {"size": 1, "min": 2, "max": 4}

    def test_team_too_large(self, service, student, group_program, make_user):
        mates = [make_user(house=student.house) for _ in range(4)]

        outcome = service.register_single(uid(student), group(group_program, "Crowd", *mates))

        assert outcome.error.code is ErrorCode.TEAM_SIZE_OUT_OF_RANGE
        assert outcome.error.detail["size"] == 5

    def test_unbounded_team_size(self, service, student, make_program):
        program = make_program(Program.Type.GROUP, min_members=0, max_members=0)

        outcome = service.register_single(uid(student), group(program, "Anyone"))

        assert outcome.ok

    def test_leader_and_duplicate_members_dropped(self, service, student, group_program, make_user):
        mate = make_user(house=student.house)

        outcome = service.register_single(
            uid(student), group(group_program, "Pair", student, mate, mate)
        )

        assert outcome.ok
        assert outcome.value.member_ids == (uid(mate),)
        assert GroupMember.objects.count() == 1

    def test_member_leading_own_registration_rejected(self, service, student, group_program, make_user):
        mate = make_user(house=student.house)
        third = make_user(house=student.house)
        assert service.register_single(uid(mate), group(group_program, "Own", third)).ok

        outcome = service.register_single(uid(student), group(group_program, "Mine", mate))

        assert outcome.error.code is ErrorCode.MEMBER_ALREADY_REGISTERED
        assert outcome.error.detail["member_ids"] == [str(mate.pk)]

    def test_member_on_another_team_rejected(self, service, student, group_program, make_user):
        leader = make_user(house=student.house)
        mate = make_user(house=student.house)
        assert service.register_single(uid(leader), group(group_program, "First", mate)).ok

        outcome = service.register_single(uid(student), group(group_program, "Second", mate))

        assert outcome.error.code is ErrorCode.MEMBER_ALREADY_ON_TEAM

    def test_member_cannot_register_program_they_joined(self, service, student, group_program, make_user):
        mate = make_user(house=student.house)
        third = make_user(house=student.house)
        assert service.register_single(uid(student), group(group_program, "Team", mate)).ok

        outcome = service.register_single(uid(mate), group(group_program, "Split", third))

        assert outcome.error.code is ErrorCode.ALREADY_REGISTERED
        assert outcome.error.detail["as_member"] is True

    def test_teammate_at_limit_rejected(self, service, student, group_program, make_program, make_user, set_limits):
        set_limits(solo=5, group=1, off_stage=5)
        other_leader = make_user(house=student.house)
        mate = make_user(house=student.house)
        second = make_program(Program.Type.GROUP, min_members=2, max_members=4)
        assert service.register_single(uid(student), group(group_program, "First", mate)).ok

        outcome = service.register_single(uid(other_leader), group(second, "Second", mate))

        assert outcome.error.code is ErrorCode.LIMIT_EXCEEDED
        assert outcome.error.bucket is QuotaBucket.ON_STAGE_GROUP
        assert outcome.error.detail["member_ids"] == [str(mate.pk)]
        assert not Registration.objects.filter(program=second).exists()
        assert service.quota_summary(uid(mate)).value.counts.on_stage_group == 1

    def test_membership_uses_members_own_quota(self, service, student, group_program, make_program, make_user, set_limits):
        set_limits(solo=5, group=1, off_stage=5)
        mate = make_user(house=student.house)
        third = make_user(house=student.house)
        second = make_program(Program.Type.GROUP, min_members=2, max_members=4)
        assert service.register_single(uid(student), group(group_program, "Joined", mate)).ok

        outcome = service.register_single(uid(mate), group(second, "Own team", third))

        assert outcome.error.code is ErrorCode.LIMIT_EXCEEDED
        assert "member_ids" not in outcome.error.detail
        assert service.quota_summary(uid(mate)).value.counts.on_stage_group == 1

    def test_non_student_teammate_rejected(self, service, student, group_program, make_user):
        coordinator = make_user(house=student.house, role=User.Role.COORDINATOR)

        outcome = service.register_single(uid(student), group(group_program, "Staffed", coordinator))

        assert outcome.error.code is ErrorCode.CROSS_HOUSE_MEMBER
        assert outcome.error.detail["member_ids"] == [str(coordinator.pk)]

    def test_failed_roster_write_leaves_no_rows(self, service, student, group_program, make_user, monkeypatch):
        mate = make_user(house=student.house)

        def broken(*args, **kwargs):
            raise DatabaseError("disk full")

        monkeypatch.setattr(GroupMember.objects, "bulk_create", broken)

        with pytest.raises(DatabaseError):
            service.register_single(uid(student), group(group_program, "Doomed", mate))

        assert not Registration.objects.exists()
        assert not GroupMember.objects.exists()

    def test_cancelled_team_frees_members(self, service, student, group_program, make_user):
        mate = make_user(house=student.house)
        other = make_user(house=student.house)
        first = service.register_single(uid(student), group(group_program, "Old", mate))
        assert service.cancel(uid(student), first.value.id).ok

        outcome = service.register_single(uid(other), group(group_program, "New", mate))

        assert outcome.ok

    def test_solo_limit_reached(self, service, student, make_program, set_limits):
        set_limits(solo=1, group=5, off_stage=5)
        assert service.register_single(uid(student), solo(make_program())).ok

        outcome = service.register_single(uid(student), solo(make_program()))

        assert outcome.error.code is ErrorCode.LIMIT_EXCEEDED
        assert outcome.error.bucket is QuotaBucket.ON_STAGE_SOLO

    def test_off_stage_total_counts_solo_and_group(self, service, student, make_program, make_user, set_limits):
        set_limits(solo=5, group=5, off_stage=1)
        essay = make_program(category=Program.Category.OFF_STAGE)
        mural = make_program(
            Program.Type.GROUP, Program.Category.OFF_STAGE, min_members=2, max_members=3
        )
        mate = make_user(house=student.house)
        assert service.register_single(uid(student), solo(essay)).ok

        outcome = service.register_single(uid(student), group(mural, "Painters", mate))

        assert outcome.error.code is ErrorCode.LIMIT_EXCEEDED
        assert outcome.error.bucket is QuotaBucket.OFF_STAGE_TOTAL

    def test_missing_limits_block_everything(self, service, student, make_program):
        Configuration.objects.all().delete()

        outcome = service.register_single(uid(student), solo(make_program()))

        assert outcome.error.code is ErrorCode.LIMIT_EXCEEDED
        assert outcome.error.maximum == 0

    def test_unparseable_limit_treated_as_zero(self, service, student, make_program):
        Configuration.objects.filter(key="maxOnStageSolo").update(value="lots")

        outcome = service.register_single(uid(student), solo(make_program()))

        assert outcome.error.code is ErrorCode.LIMIT_EXCEEDED

    def test_concurrent_duplicate_reported_as_constraint(self, service, student, make_program, monkeypatch):
        program = make_program()
        assert service.register_single(uid(student), solo(program)).ok
        # hide the committed row from the pre-check, as a racing request would
        monkeypatch.setattr(
            DjangoRegistrationStore, "active_registrations_for", lambda self, user_id: []
        )

        outcome = service.register_single(uid(student), solo(program))

        assert outcome.error.code is ErrorCode.DUPLICATE_CONSTRAINT
        assert Registration.objects.filter(program=program).count() == 1

    def test_notification_failure_does_not_block(self, student, make_program):
        failing = AdmissionService(
            DjangoRegistrationStore(), DjangoConfigProvider(), RecordingNotifier(fail=True)
        )

        outcome = failing.register_single(uid(student), solo(make_program()))

        assert outcome.ok
        assert Registration.objects.count() == 1

    def test_group_notifies_leader_and_members(self, service, student, group_program, make_user, notifier):
        mate = make_user(house=student.house)

        service.register_single(uid(student), group(group_program, "Band", mate))

        assert [user_id for user_id, _ in notifier.sent] == [uid(student), uid(mate)]
        assert notifier.sent[0][1]["event"] == "confirmed"


@pytest.mark.django_db
class TestRegisterBatch:
    """Tests for batch admission."""

    def test_creates_every_valid_item(self, service, student, make_program):
        programs = [make_program(), make_program(category=Program.Category.OFF_STAGE)]

        outcome = service.register_batch(uid(student), [solo(p) for p in programs])

        assert outcome.ok
        assert len(outcome.value.created) == 2
        assert outcome.value.rejected == ()

    def test_limit_applies_across_items(self, service, student, make_program, set_limits):
        set_limits(solo=1, group=5, off_stage=5)
        first, second = make_program(), make_program()

        outcome = service.register_batch(uid(student), [solo(first), solo(second)])

        report = outcome.value
        assert [r.program.id.value for r in report.created] == [first.pk]
        assert len(report.rejected) == 1
        rejection = report.rejected[0]
        assert rejection.index == 1
        assert rejection.error.code is ErrorCode.LIMIT_EXCEEDED
        assert Registration.objects.filter(user=student).count() == 1

    def test_existing_registrations_skipped(self, service, student, make_program):
        done, fresh = make_program(), make_program()
        service.register_single(uid(student), solo(done))

        outcome = service.register_batch(uid(student), [solo(done), solo(fresh)])

        assert [r.program.id.value for r in outcome.value.created] == [fresh.pk]
        assert outcome.value.skipped == (ProgramId(done.pk),)

    def test_repeated_item_in_batch_skipped(self, service, student, make_program):
        program = make_program()

        outcome = service.register_batch(uid(student), [solo(program), solo(program)])

        assert len(outcome.value.created) == 1
        assert outcome.value.skipped == (ProgramId(program.pk),)

    def test_off_stage_limit_applies_across_items(self, service, student, make_program, make_user, set_limits):
        set_limits(solo=5, group=5, off_stage=1)
        essay = make_program(category=Program.Category.OFF_STAGE)
        mural = make_program(
            Program.Type.GROUP, Program.Category.OFF_STAGE, min_members=2, max_members=3
        )
        mate = make_user(house=student.house)

        outcome = service.register_batch(
            uid(student), [solo(essay), group(mural, "Painters", mate)]
        )

        report = outcome.value
        assert [r.program.id.value for r in report.created] == [essay.pk]
        assert report.rejected[0].index == 1
        assert report.rejected[0].error.bucket is QuotaBucket.OFF_STAGE_TOTAL
        assert Registration.objects.filter(user=student).count() == 1

    def test_nothing_new(self, service, student, make_program):
        program = make_program()
        service.register_single(uid(student), solo(program))

        outcome = service.register_batch(uid(student), [solo(program)])

        assert outcome.error.code is ErrorCode.NOTHING_NEW

    def test_all_rejected_reports_rejections(self, service, student, make_program):
        inactive = make_program(is_active=False)

        outcome = service.register_batch(uid(student), [solo(inactive)])

        assert outcome.ok
        assert outcome.value.created == ()
        assert outcome.value.rejected[0].error.code is ErrorCode.PROGRAM_UNAVAILABLE

    def test_house_not_assigned_fails_whole_batch(self, service, make_user, make_program):
        homeless = make_user(house=None)

        outcome = service.register_batch(uid(homeless), [solo(make_program())])

        assert outcome.error.code is ErrorCode.HOUSE_NOT_ASSIGNED


@pytest.mark.django_db
class TestCancelAndQuota:
    def test_leader_cancels(self, service, student, make_program):
        program = make_program()
        created = service.register_single(uid(student), solo(program)).value

        outcome = service.cancel(uid(student), created.id)

        assert outcome.value.status is RegistrationStatus.CANCELLED
        assert Registration.objects.get(pk=created.id.value).status == "CANCELLED"
        assert service.register_single(uid(student), solo(program)).ok

    def test_cancel_is_idempotent(self, service, student, make_program):
        created = service.register_single(uid(student), solo(make_program())).value
        service.cancel(uid(student), created.id)

        outcome = service.cancel(uid(student), created.id)

        assert outcome.ok
        assert outcome.value.status is RegistrationStatus.CANCELLED

    def test_only_leader_cancels(self, service, student, make_user, make_program):
        created = service.register_single(uid(student), solo(make_program())).value
        other = make_user(house=student.house)

        outcome = service.cancel(uid(other), created.id)

        assert outcome.error.code is ErrorCode.NOT_OWNER

    def test_cancel_missing(self, service, student):
        outcome = service.cancel(uid(student), RegistrationId(uuid.uuid4()))

        assert outcome.error.code is ErrorCode.NOT_FOUND

    def test_list_includes_memberships(self, service, student, group_program, make_user):
        mate = make_user(house=student.house)
        service.register_single(uid(student), group(group_program, "Team", mate))

        listed = service.list_registrations(uid(mate))

        assert [r.group_name for r in listed] == ["Team"]

    def test_quota_summary(self, service, student, make_program, set_limits):
        set_limits(solo=3, group=2, off_stage=1)
        service.register_single(uid(student), solo(make_program()))

        outcome = service.quota_summary(uid(student))

        assert outcome.value.counts.on_stage_solo == 1
        assert outcome.value.limits.max_on_stage_solo == 3
        assert outcome.value.limits.max_off_stage_total == 1


@pytest.mark.django_db
class TestFindTeammates:
    """Tests for the housemate lookup used to build teams."""

    def test_lists_housemates_except_caller(self, service, student, make_user, other_house):
        ananya = make_user(house=student.house, first_name="Ananya")
        bilal = make_user(house=student.house, first_name="Bilal")
        make_user(house=other_house, first_name="Chitra")
        make_user(house=student.house, first_name="Dev", role=User.Role.COORDINATOR)

        outcome = service.find_teammates(uid(student))

        assert [member.id for member in outcome.value] == [uid(ananya), uid(bilal)]

    def test_search_by_name(self, service, student, make_user):
        make_user(house=student.house, first_name="Ananya")
        make_user(house=student.house, first_name="Bilal")

        outcome = service.find_teammates(uid(student), "ANAN")

        assert [member.display_name for member in outcome.value] == ["Ananya"]

    def test_search_returns_at_most_five(self, service, student, make_user):
        for _ in range(7):
            make_user(house=student.house, first_name="Meera")

        outcome = service.find_teammates(uid(student), "mee")

        assert len(outcome.value) == 5

    def test_short_query_matches_nobody(self, service, student, make_user):
        make_user(house=student.house, first_name="Ananya")

        outcome = service.find_teammates(uid(student), "a")

        assert outcome.value == []

    def test_requires_house(self, service, make_user):
        outcome = service.find_teammates(uid(make_user(house=None)))

        assert outcome.error.code is ErrorCode.HOUSE_NOT_ASSIGNED


@pytest.mark.django_db
class TestMailNotifier:
    def test_emails_user(self, student, mailoutbox, settings):
        settings.FESTIVAL_NOTIFY_FROM_EMAIL = "office@artsfest.test"

        MailNotifier().notify(uid(student), {"event": "confirmed", "program": "Kathak"})

        assert len(mailoutbox) == 1
        assert mailoutbox[0].subject == "Registration confirmed: Kathak"
        assert mailoutbox[0].to == [student.email]
        assert mailoutbox[0].from_email == "office@artsfest.test"

    def test_user_without_email_skipped(self, make_user, house, mailoutbox):
        quiet = make_user(house=house, email="")

        MailNotifier().notify(uid(quiet), {"event": "confirmed"})

        assert mailoutbox == []
