from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session

from backend.exceptions import MemberNotFound, NotAMember, NotAuthorized, TaskNotFound, ValidationFailed
from backend.models import TaskProgress
from backend.services import projects, tasks
from tests.factories import add_member, future, make_user


@pytest.fixture
def dev(db_session: Session, owner, project):
    user = make_user(db_session, "Dev")
    add_member(db_session, project.id, owner.id, user.id, role="developer")
    return user


def test_create_task_defaults_to_todo(db_session: Session, project, dev):
    task = tasks.create_task(db_session, project.id, dev.id, "Design", "Draw it", future())

    assert task.progress == TaskProgress.TODO
    assert task.created_by_id == dev.id
    assert task.project_id == project.id


def test_viewers_and_outsiders_cannot_create_tasks(db_session: Session, owner, project):
    viewer = make_user(db_session, "Viewer")
    outsider = make_user(db_session, "Outsider")
    add_member(db_session, project.id, owner.id, viewer.id)

    with pytest.raises(NotAuthorized):
        tasks.create_task(db_session, project.id, viewer.id, "Nope", "", future())
    with pytest.raises(NotAMember):
        tasks.create_task(db_session, project.id, outsider.id, "Nope", "", future())


def test_deadline_in_the_past_is_rejected(db_session: Session, owner, project):
    yesterday = datetime.now(timezone.utc) - timedelta(days=1)
    with pytest.raises(ValidationFailed):
        tasks.create_task(db_session, project.id, owner.id, "Late", "", yesterday)


def test_update_task_by_creator_or_owner_only(db_session: Session, owner, project, dev):
    other = make_user(db_session, "Other")
    add_member(db_session, project.id, owner.id, other.id, role="developer")
    task = tasks.create_task(db_session, project.id, dev.id, "Design", "", future())

    updated = tasks.update_task(db_session, project.id, task.id, owner.id, {"name": "Design v2", "description": None})
    assert updated.name == "Design v2"

    with pytest.raises(NotAuthorized):
        tasks.update_task(db_session, project.id, task.id, other.id, {"name": "Mine now"})


def test_assign_task_and_progress_history(db_session: Session, owner, project, dev):
    task = tasks.create_task(db_session, project.id, owner.id, "Build", "", future())

    tasks.assign_task(db_session, project.id, task.id, dev.id, owner.id)
    tasks.update_progress(db_session, project.id, task.id, dev.id, TaskProgress.IN_PROGRESS)
    updated = tasks.update_progress(db_session, project.id, task.id, owner.id, "Completed")

    assert updated.assigned_to_id == dev.id
    assert updated.progress == TaskProgress.COMPLETED
    assert [(entry.progress, entry.updated_by_id) for entry in updated.progress_history] == [
        (TaskProgress.IN_PROGRESS, dev.id),
        (TaskProgress.COMPLETED, owner.id),
    ]


def test_only_owner_assigns_and_only_members_are_assignable(db_session: Session, owner, project, dev):
    outsider = make_user(db_session, "Outsider")
    task = tasks.create_task(db_session, project.id, dev.id, "Build", "", future())

    with pytest.raises(NotAuthorized):
        tasks.assign_task(db_session, project.id, task.id, dev.id, dev.id)
    with pytest.raises(MemberNotFound):
        tasks.assign_task(db_session, project.id, task.id, outsider.id, owner.id)


def test_progress_by_unassigned_member_is_rejected(db_session: Session, project, dev):
    task = tasks.create_task(db_session, project.id, dev.id, "Build", "", future())

    with pytest.raises(NotAuthorized):
        tasks.update_progress(db_session, project.id, task.id, dev.id, "In Progress")


def test_task_must_belong_to_project(db_session: Session, owner, project):
    other = projects.create_project(db_session, owner.id, "Gemini", "")
    task = tasks.create_task(db_session, other.id, owner.id, "Elsewhere", "", future())

    with pytest.raises(TaskNotFound):
        tasks.delete_task(db_session, project.id, task.id, owner.id)


def test_delete_task(db_session: Session, owner, project, dev):
    task = tasks.create_task(db_session, project.id, dev.id, "Build", "", future())
    task_id = task.id

    tasks.delete_task(db_session, project.id, task_id, dev.id)

    with pytest.raises(TaskNotFound):
        tasks.get_task(db_session, project.id, task_id, owner.id)


def test_naive_deadlines_are_read_as_utc(db_session: Session, project, dev):
    now = datetime.now(timezone.utc).replace(tzinfo=None)

    with pytest.raises(ValidationFailed):
        tasks.create_task(db_session, project.id, dev.id, "Late", "", now - timedelta(minutes=5))
    task = tasks.create_task(db_session, project.id, dev.id, "Soon", "", now + timedelta(hours=1))
    assert task.name == "Soon"


def test_progress_in_task_update_is_recorded_in_history(db_session: Session, owner, project, dev):
    task = tasks.create_task(db_session, project.id, dev.id, "Build", "", future())

    updated = tasks.update_task(db_session, project.id, task.id, owner.id, {"name": "Build v2", "progress": "In Progress"})

    assert updated.name == "Build v2"
    assert updated.progress == TaskProgress.IN_PROGRESS
    assert [(entry.progress, entry.updated_by_id) for entry in updated.progress_history] == [
        (TaskProgress.IN_PROGRESS, owner.id),
    ]


def test_creator_cannot_move_progress_of_task_assigned_elsewhere(db_session: Session, owner, project, dev):
    task = tasks.create_task(db_session, project.id, dev.id, "Build", "", future())
    tasks.assign_task(db_session, project.id, task.id, owner.id, owner.id)

    with pytest.raises(NotAuthorized):
        tasks.update_task(db_session, project.id, task.id, dev.id, {"name": "Renamed", "progress": "Completed"})

    db_session.refresh(task)
    assert task.name == "Build"
    assert task.progress == TaskProgress.TODO
    assert task.progress_history == []
