import pytest
from sqlalchemy.orm import Session

from backend import models
from backend.exceptions import (
    AlreadyMember,
    IsOwner,
    LastAdministrator,
    MemberNotFound,
    NotAdministrator,
    NotAMember,
    RoleNotFound,
)
from backend.services import invites, membership, projects
from tests.factories import add_member, admin_count, make_user, role_of


def test_create_project_makes_owner_sole_administrator(db_session: Session, owner, project):
    assert project.owner_id == owner.id
    assert [(m.user_id, m.role.name) for m in project.members] == [(owner.id, "administrator")]
    assert [p.id for p in owner.projects] == [project.id]


def test_assign_role_last_administrator_cannot_demote_self(db_session: Session, owner, project):
    with pytest.raises(LastAdministrator):
        membership.assign_role(db_session, project.id, owner.id, owner.id, "developer")

    assert role_of(db_session, project.id, owner.id) == "administrator"


def test_assign_role_promote_then_demote(db_session: Session, owner, project):
    dev = make_user(db_session, "Dev")
    add_member(db_session, project.id, owner.id, dev.id)

    membership.assign_role(db_session, project.id, dev.id, owner.id, "administrator")
    updated = membership.assign_role(db_session, project.id, owner.id, owner.id, "developer")

    assert role_of(db_session, project.id, dev.id) == "administrator"
    assert role_of(db_session, project.id, owner.id) == "developer"
    assert updated.owner_id == owner.id


def test_assign_role_requires_administrator(db_session: Session, owner, project):
    viewer = make_user(db_session, "Viewer")
    outsider = make_user(db_session, "Outsider")
    add_member(db_session, project.id, owner.id, viewer.id)

    with pytest.raises(NotAdministrator):
        membership.assign_role(db_session, project.id, viewer.id, viewer.id, "administrator")
    with pytest.raises(NotAMember):
        membership.assign_role(db_session, project.id, viewer.id, outsider.id, "developer")


def test_assign_role_unknown_target_or_role(db_session: Session, owner, project):
    outsider = make_user(db_session, "Outsider")

    with pytest.raises(MemberNotFound):
        membership.assign_role(db_session, project.id, outsider.id, owner.id, "developer")
    with pytest.raises(RoleNotFound):
        membership.assign_role(db_session, project.id, owner.id, owner.id, "superuser")


def test_remove_member_by_non_administrator_fails(db_session: Session, owner, project):
    viewer = make_user(db_session, "Viewer")
    add_member(db_session, project.id, owner.id, viewer.id)

    with pytest.raises(NotAdministrator):
        membership.remove_member(db_session, project.id, viewer.id, owner.id)

    assert role_of(db_session, project.id, owner.id) == "administrator"


def test_remove_member_updates_both_sides(db_session: Session, owner, project):
    dev = make_user(db_session, "Dev")
    add_member(db_session, project.id, owner.id, dev.id, role="developer")

    membership.remove_member(db_session, project.id, owner.id, dev.id)

    assert role_of(db_session, project.id, dev.id) is None
    db_session.refresh(dev)
    assert dev.projects == []


def test_owner_cannot_be_removed(db_session: Session, owner, project):
    admin = make_user(db_session, "Admin")
    add_member(db_session, project.id, owner.id, admin.id, role="administrator")

    with pytest.raises(IsOwner):
        membership.remove_member(db_session, project.id, admin.id, owner.id)

    assert role_of(db_session, project.id, owner.id) == "administrator"


def test_remove_last_administrator_is_rejected(db_session: Session, owner, project):
    admin = make_user(db_session, "Admin")
    add_member(db_session, project.id, owner.id, admin.id, role="administrator")
    membership.assign_role(db_session, project.id, owner.id, admin.id, "developer")

    # The owner was demoted, so only the remaining administrator may remove members
    with pytest.raises(NotAdministrator):
        membership.remove_member(db_session, project.id, owner.id, admin.id)
    # and removing that administrator would leave none
    with pytest.raises(LastAdministrator):
        membership.remove_member(db_session, project.id, admin.id, admin.id)


def test_remove_unknown_member(db_session: Session, owner, project):
    outsider = make_user(db_session, "Outsider")
    with pytest.raises(MemberNotFound):
        membership.remove_member(db_session, project.id, owner.id, outsider.id)


def test_second_administrator_can_leave(db_session: Session, owner, project):
    admin = make_user(db_session, "Admin")
    add_member(db_session, project.id, owner.id, admin.id, role="administrator")

    result = membership.leave_project(db_session, project.id, admin.id)

    assert result.left is True
    assert role_of(db_session, project.id, admin.id) is None
    assert admin_count(db_session, project.id) == 1
    assert role_of(db_session, project.id, owner.id) == "administrator"


def test_owner_cannot_leave(db_session: Session, owner, project):
    with pytest.raises(IsOwner):
        membership.leave_project(db_session, project.id, owner.id)


def test_non_member_cannot_leave(db_session: Session, owner, project):
    outsider = make_user(db_session, "Outsider")
    with pytest.raises(NotAMember):
        membership.leave_project(db_session, project.id, outsider.id)


def test_last_administrator_leaving_gets_a_choice(db_session: Session, owner, project):
    admin = make_user(db_session, "Admin")
    viewer = make_user(db_session, "Viewer")
    add_member(db_session, project.id, owner.id, admin.id, role="administrator")
    add_member(db_session, project.id, owner.id, viewer.id)
    membership.assign_role(db_session, project.id, owner.id, admin.id, "developer")

    result = membership.leave_project(db_session, project.id, admin.id)

    assert result.left is False
    assert result.last_admin_choice is True
    assert sorted(member.user_id for member in result.candidates) == sorted([owner.id, viewer.id])
    assert role_of(db_session, project.id, admin.id) == "administrator"

    # Delegating first lets the leave go through
    membership.assign_role(db_session, project.id, viewer.id, admin.id, "administrator")
    assert membership.leave_project(db_session, project.id, admin.id).left is True


def test_join_via_invite_adds_viewer_on_both_sides(db_session: Session, owner, project):
    newcomer = make_user(db_session, "Newcomer")
    token = invites.issue(db_session, project.id, owner.id).token

    project_id = membership.join_via_invite(db_session, token, newcomer.id)

    assert project_id == project.id
    assert role_of(db_session, project.id, newcomer.id) == "viewer"
    db_session.refresh(newcomer)
    assert [p.id for p in newcomer.projects] == [project.id]


def test_join_twice_is_rejected(db_session: Session, owner, project):
    newcomer = make_user(db_session, "Newcomer")
    token = invites.issue(db_session, project.id, owner.id).token
    membership.join_via_invite(db_session, token, newcomer.id)

    with pytest.raises(AlreadyMember):
        membership.join_via_invite(db_session, token, newcomer.id)
    with pytest.raises(AlreadyMember):
        membership.join_via_invite(db_session, token, owner.id)

    count = (
        db_session.query(models.ProjectMember)
        .filter(models.ProjectMember.project_id == project.id, models.ProjectMember.user_id == newcomer.id)
        .count()
    )
    assert count == 1


def test_administrator_count_never_drops_to_zero(db_session: Session, owner, project):
    users = [make_user(db_session, f"User{i}") for i in range(3)]
    for user in users:
        add_member(db_session, project.id, owner.id, user.id, role="administrator")

    attempts = [
        lambda: membership.assign_role(db_session, project.id, owner.id, users[0].id, "viewer"),
        lambda: membership.remove_member(db_session, project.id, users[0].id, users[1].id),
        lambda: membership.leave_project(db_session, project.id, users[2].id),
        lambda: membership.assign_role(db_session, project.id, users[0].id, users[0].id, "developer"),
        lambda: membership.assign_role(db_session, project.id, users[2].id, users[0].id, "viewer"),
        lambda: membership.remove_member(db_session, project.id, users[0].id, users[0].id),
    ]
    for attempt in attempts:
        try:
            attempt()
        except (LastAdministrator, NotAdministrator, NotAMember, MemberNotFound):
            pass
        assert admin_count(db_session, project.id) >= 1

    assert role_of(db_session, project.id, owner.id) is not None


def test_user_project_list_matches_membership(db_session: Session, owner, project):
    other = projects.create_project(db_session, owner.id, "Gemini", "Orbit")
    dev = make_user(db_session, "Dev")
    add_member(db_session, other.id, owner.id, dev.id)

    assert {p.id for p in projects.list_user_projects(db_session, owner.id)} == {project.id, other.id}
    assert [p.id for p in projects.list_user_projects(db_session, dev.id)] == [other.id]
