"""Tests for dao_mutations — pure task/team transforms, never mutating the input."""

from datetime import date, datetime, timezone
from itertools import chain

import pytest

from dao_manager.core import dao_mutations
from dao_manager.core.errors import (
    InvalidTaskListError, TaskNotFoundError, TeamMemberNotFoundError,
)
from dao_manager.schemas.dao import CloneOverrides, TeamMemberCreate
from tests.factories import make_dao, make_member, make_tasks

NOW = datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc)


# ─── Tasks ───────────────────────────────────────────────────────

def test_apply_task_update_replaces_fields_and_stamps_time():
    dao = make_dao()
    tasks = dao_mutations.apply_task_update(
        dao, 2, {"progress": 40, "last_updated_by": "u1"}, NOW,
    )
    assert tasks[1].progress == 40
    assert tasks[1].last_updated_by == "u1"
    assert tasks[1].last_updated_at == NOW
    assert tasks[1].name == dao.tasks[1].name


def test_apply_task_update_leaves_input_untouched():
    dao = make_dao()
    dao_mutations.apply_task_update(dao, 1, {"progress": 80}, NOW)
    assert dao.tasks[0].progress is None


def test_apply_task_update_cannot_change_task_id():
    dao = make_dao()
    tasks = dao_mutations.apply_task_update(dao, 3, {"id": 99}, NOW)
    assert [t.id for t in tasks] == list(range(1, 16))


def test_apply_task_update_clamps_progress():
    dao = make_dao()
    assert dao_mutations.apply_task_update(dao, 1, {"progress": 150}, NOW)[0].progress == 100
    assert dao_mutations.apply_task_update(dao, 1, {"progress": -5}, NOW)[0].progress == 0


def test_unknown_task_raises():
    with pytest.raises(TaskNotFoundError) as exc_info:
        dao_mutations.apply_task_update(make_dao(), 42, {"progress": 10}, NOW)
    assert exc_info.value.http_status == 404
    assert exc_info.value.context.task_id == 42


def test_progress_update_clamps_and_records_author():
    assert dao_mutations.progress_update(120, "u1") == {
        "progress": 100, "last_updated_by": "u1",
    }


def test_applicability_toggle_keeps_progress_and_assignee():
    dao = make_dao(tasks=make_tasks(60))
    dao = dao.model_copy(update={"tasks": dao_mutations.apply_task_update(
        dao, 1, dao_mutations.assignment_update("m1"), NOW,
    )})
    tasks = dao_mutations.apply_task_update(
        dao, 1, dao_mutations.applicability_update(False), NOW,
    )
    assert tasks[0].is_applicable is False
    assert tasks[0].progress == 60
    assert tasks[0].assigned_to == "m1"


def test_check_task_ids_accepts_reordered_full_list():
    dao = make_dao()
    dao_mutations.check_task_ids_unchanged(dao, list(reversed(dao.tasks)))


def test_check_task_ids_rejects_missing_and_unexpected():
    dao = make_dao()
    tasks = dao.tasks[1:] + [dao.tasks[0].model_copy(update={"id": 16})]
    with pytest.raises(InvalidTaskListError) as exc_info:
        dao_mutations.check_task_ids_unchanged(dao, tasks)
    assert exc_info.value.missing == [1]
    assert exc_info.value.unexpected == [16]


def test_check_task_ids_rejects_duplicates():
    dao = make_dao()
    with pytest.raises(InvalidTaskListError):
        dao_mutations.check_task_ids_unchanged(dao, dao.tasks + [dao.tasks[0]])


# ─── Team ────────────────────────────────────────────────────────

def test_generate_member_id_skips_existing_ids():
    ids = iter(["m1", "m2", "m3"])
    assert dao_mutations.generate_member_id({"m1", "m2"}, lambda: next(ids)) == "m3"


def test_default_member_ids_have_prefix():
    assert dao_mutations.generate_member_id(set()).startswith("member_")


def test_add_team_member_appends_with_generated_id():
    dao = make_dao(equipe=[make_member("m1")])
    team, member = dao_mutations.add_team_member(
        dao, TeamMemberCreate(name="Koffi Yao", role="chef_equipe"),
        id_factory=chain(["m1"], ["m2"]).__next__,
    )
    assert member.id == "m2"
    assert member.role == "chef_equipe"
    assert [m.id for m in team] == ["m1", "m2"]
    assert len(dao.equipe) == 1


def test_update_team_member_keeps_id():
    dao = make_dao(equipe=[make_member("m1", "Awa")])
    team = dao_mutations.update_team_member(dao, "m1", {"name": "Awa K.", "id": "x"})
    assert team[0].id == "m1"
    assert team[0].name == "Awa K."


def test_update_unknown_member_raises():
    with pytest.raises(TeamMemberNotFoundError):
        dao_mutations.update_team_member(make_dao(), "ghost", {"name": "x"})


def test_remove_team_member_clears_its_assignments():
    tasks = make_tasks()
    tasks[0] = tasks[0].model_copy(update={"assigned_to": "m1"})
    tasks[1] = tasks[1].model_copy(update={"assigned_to": "m2"})
    dao = make_dao(equipe=[make_member("m1"), make_member("m2", "Koffi")], tasks=tasks)

    team, new_tasks = dao_mutations.remove_team_member(dao, "m1")

    assert [m.id for m in team] == ["m2"]
    assert new_tasks[0].assigned_to is None
    assert new_tasks[1].assigned_to == "m2"
    assert all(t.assigned_to != "m1" for t in new_tasks)


def test_remove_unknown_member_raises():
    with pytest.raises(TeamMemberNotFoundError):
        dao_mutations.remove_team_member(make_dao(), "ghost")


def test_unassign_departed_clears_only_members_who_left():
    before = [make_member("m1"), make_member("m2", "Koffi")]
    tasks = make_tasks()
    tasks[0] = tasks[0].model_copy(update={"assigned_to": "m1"})
    tasks[1] = tasks[1].model_copy(update={"assigned_to": "m2"})
    tasks[2] = tasks[2].model_copy(update={"assigned_to": "external"})

    result = dao_mutations.unassign_departed(before, [before[1]], tasks)

    assert [t.assigned_to for t in result[:3]] == [None, "m2", "external"]
    assert tasks[0].assigned_to == "m1"


# ─── Clone ───────────────────────────────────────────────────────

def test_clone_fields_get_copy_suffixes():
    source = make_dao(equipe=[make_member("m1")])
    fields = dao_mutations.build_clone_fields(source, CloneOverrides())
    assert fields["numero_liste"] == "DAO-2025-001_COPIE"
    assert fields["reference"] == "AO/MIN/2025/01_COPIE"
    assert fields["objet_dossier"] == "Fourniture de matériel informatique (Copie)"
    assert fields["autorite_contractante"] == source.autorite_contractante
    assert fields["date_depot"] == source.date_depot
    assert "tasks" not in fields


def test_clone_team_is_a_copy():
    source = make_dao(equipe=[make_member("m1")])
    fields = dao_mutations.build_clone_fields(source, CloneOverrides())
    assert fields["equipe"] == source.equipe
    assert fields["equipe"][0] is not source.equipe[0]


def test_clone_overrides_win_and_empty_values_fall_back():
    source = make_dao()
    overrides = CloneOverrides(numero_liste="DAO-2025-009", reference="", date_depot=date(2025, 6, 1))
    fields = dao_mutations.build_clone_fields(source, overrides)
    assert fields["numero_liste"] == "DAO-2025-009"
    assert fields["reference"] == "AO/MIN/2025/01_COPIE"
    assert fields["date_depot"] == date(2025, 6, 1)
