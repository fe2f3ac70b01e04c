"""Group roster validation for team registrations."""

from collections.abc import Sequence

from festival.domain import HouseId, Program, UserId
from festival.domain.errors import (
    CrossHouseMemberError,
    MemberAlreadyOnTeamError,
    MemberAlreadyRegisteredError,
    TeamSizeOutOfRangeError,
)
from festival.stores.interfaces import RegistrationStore


class GroupRosterValidator:
    """Checks that a proposed team may be registered for a program.

    Checks run in order and the first failure is raised:

    1. every teammate is an existing student of the leader's house;
    2. the team size (leader included) is within the program's bounds;
    3. no teammate leads their own registration for the program;
    4. no teammate is already on another team for the program.
    """

    def __init__(self, store: RegistrationStore) -> None:
        self._store = store

    def validate(
        self, house_id: HouseId, program: Program, member_ids: Sequence[UserId]
    ) -> None:
        if member_ids:
            found = {
                member.id
                for member in self._store.get_members(member_ids)
                if member.house_id == house_id and member.is_student
            }
            outsiders = [m for m in member_ids if m not in found]
            if outsiders:
                raise CrossHouseMemberError(_as_strings(outsiders))

        size = 1 + len(member_ids)
        if not program.team_size.allows(size):
            raise TeamSizeOutOfRangeError(
                size, program.team_size.minimum, program.team_size.maximum
            )

        if not member_ids:
            return

        leaders = self._store.leaders_for_program(program.id, member_ids)
        if leaders:
            raise MemberAlreadyRegisteredError(
                _as_strings(m for m in member_ids if m in leaders)
            )

        teammates = self._store.members_for_program(program.id, member_ids)
        if teammates:
            raise MemberAlreadyOnTeamError(
                _as_strings(m for m in member_ids if m in teammates)
            )


def _as_strings(member_ids) -> list[str]:
    return [str(member_id.value) for member_id in member_ids]
