import pytest

from core.exceptions import PermissionDeniedError
from core.permissions import (
    Capability,
    Role,
    authorize,
    authorize_roles,
    has_capability,
    parse_role,
)


@pytest.mark.parametrize("role", [Role.ADMIN, Role.SUPER_ADMIN])
def test_admins_hold_every_staff_capability(role):
    for capability in (
        Capability.MANAGE_EVENT,
        Capability.VIEW_STATS,
        Capability.REVIEW_SUBMISSIONS,
        Capability.GRADE_SUBMISSIONS,
    ):
        assert has_capability(role, capability)
    assert not has_capability(role, Capability.SUBMIT_WORK)


def test_evaluator_reviews_and_grades_only():
    assert has_capability(Role.EVALUATOR, Capability.REVIEW_SUBMISSIONS)
    assert has_capability(Role.EVALUATOR, Capability.GRADE_SUBMISSIONS)
    assert not has_capability(Role.EVALUATOR, Capability.MANAGE_EVENT)
    assert not has_capability(Role.EVALUATOR, Capability.VIEW_STATS)


@pytest.mark.parametrize("role", ["leader", "member"])
def test_participants_submit_and_view_own_work(role):
    assert has_capability(role, Capability.SUBMIT_WORK)
    assert has_capability(role, Capability.VIEW_OWN_SUBMISSIONS)
    assert not has_capability(role, Capability.GRADE_SUBMISSIONS)


def test_unknown_role_holds_nothing():
    assert not has_capability("guest", Capability.SUBMIT_WORK)
    with pytest.raises(PermissionDeniedError):
        parse_role("guest")


def test_authorize_reports_the_role():
    with pytest.raises(PermissionDeniedError) as exc_info:
        authorize("member", Capability.MANAGE_EVENT)
    assert str(exc_info.value) == "User role member is not authorized to access this route"
    authorize("admin", Capability.MANAGE_EVENT)


def test_authorize_roles_allow_list():
    authorize_roles("evaluator", [Role.EVALUATOR, Role.ADMIN])
    with pytest.raises(PermissionDeniedError):
        authorize_roles("leader", [Role.EVALUATOR, Role.ADMIN])
