"""Unit tests for task use cases: skill minutes and priority ordering."""

from datetime import datetime, timedelta

import pytest

from skilltrack.errors import InvalidInputError, NotFoundError
from skilltrack.repositories import InMemorySkillRepository
from skilltrack.services.skills import CreateSkill
from skilltrack.services.tasks import CreateTask, DeleteTask, ListTasks, UpdateTask


class FlakySkillRepository(InMemorySkillRepository):
    """Fails minute adjustments for the skill ids listed in ``fail_for``."""

    def __init__(self):
        super().__init__()
        self.fail_for = set()

    def increment_total_minutes(self, skill_id, user_id, delta):
        if skill_id in self.fail_for:
            raise RuntimeError("skill store unavailable")
        super().increment_total_minutes(skill_id, user_id, delta)


@pytest.fixture
def create_task(task_repo, task_domain, skill_repo):
    return CreateTask(task_repo, task_domain, skill_repo)


@pytest.fixture
def update_task(task_repo, task_domain, skill_repo):
    return UpdateTask(task_repo, task_domain, skill_repo)


@pytest.fixture
def delete_task(task_repo, skill_repo):
    return DeleteTask(task_repo, skill_repo)


@pytest.fixture
def new_skill(skill_repo):
    def _make(name, user_id="u1"):
        return CreateSkill(skill_repo).execute(user_id, name)
    return _make


def priorities(task_repo, user_id="u1"):
    return [t.priority for t in task_repo.find_all_by_user(user_id)]


class TestCreateTask:
    def test_requires_due_date(self, create_task):
        with pytest.raises(InvalidInputError, match="dueDate is required"):
            create_task.execute("u1", {"title": "Read"})

    def test_rejects_negative_minutes(self, create_task, future_due):
        with pytest.raises(InvalidInputError, match="cannot be negative"):
            create_task.execute("u1", {"title": "Read", "due_date": future_due, "learning_minutes": -1})

    def test_rejects_foreign_skill(self, create_task, new_skill, future_due):
        other = new_skill("Piano", user_id="u2")
        with pytest.raises(NotFoundError, match="Skill not found for this user"):
            create_task.execute("u1", {"title": "Read", "due_date": future_due, "skill_id": other.id})

    def test_defaults(self, create_task, future_due):
        task = create_task.execute("u1", {"title": "Read", "due_date": future_due})
        assert task.status == "todo"
        assert task.learning_minutes == 0
        assert task.priority == 1

    def test_past_due_date_starts_overdue(self, create_task):
        task = create_task.execute("u1", {"title": "Late", "due_date": datetime.now() - timedelta(days=1)})
        assert task.status == "overdue"

    def test_appends_to_end(self, create_task, future_due, task_repo):
        for title in ("a", "b", "c"):
            create_task.execute("u1", {"title": title, "due_date": future_due})
        assert [t.title for t in task_repo.find_all_by_user("u1")] == ["a", "b", "c"]
        assert priorities(task_repo) == [1, 2, 3]

    def test_increments_skill_minutes(self, create_task, new_skill, skill_repo, future_due):
        skill = new_skill("English")
        create_task.execute(
            "u1",
            {"title": "Podcast", "due_date": future_due, "learning_minutes": 50, "skill_id": skill.id},
        )
        assert skill_repo.find_by_id(skill.id, "u1").total_minutes == 50

    def test_failed_skill_increment_removes_task(self, task_repo, task_domain, future_due):
        skills = FlakySkillRepository()
        skill = CreateSkill(skills).execute("u1", "English")
        skills.fail_for.add(skill.id)

        with pytest.raises(RuntimeError):
            CreateTask(task_repo, task_domain, skills).execute(
                "u1",
                {"title": "Podcast", "due_date": future_due, "learning_minutes": 50, "skill_id": skill.id},
            )
        assert task_repo.find_all_by_user("u1") == []


class TestSkillMinutes:
    def test_delete_rolls_back_minutes(self, create_task, delete_task, new_skill, skill_repo, future_due):
        skill = new_skill("English")
        task = create_task.execute(
            "u1",
            {"title": "Podcast", "due_date": future_due, "learning_minutes": 50, "skill_id": skill.id},
        )

        delete_task.execute("u1", task.id)

        assert skill_repo.find_by_id(skill.id, "u1").total_minutes == 0

    def test_delete_clamps_at_zero(self, create_task, delete_task, new_skill, skill_repo, future_due):
        skill = new_skill("English")
        task = create_task.execute(
            "u1",
            {"title": "Podcast", "due_date": future_due, "learning_minutes": 50, "skill_id": skill.id},
        )
        skill_repo.increment_total_minutes(skill.id, "u1", -30)

        delete_task.execute("u1", task.id)

        assert skill_repo.find_by_id(skill.id, "u1").total_minutes == 0

    def test_changing_minutes_applies_delta(self, create_task, update_task, new_skill, skill_repo, future_due):
        skill = new_skill("English")
        task = create_task.execute(
            "u1",
            {"title": "Podcast", "due_date": future_due, "learning_minutes": 50, "skill_id": skill.id},
        )

        update_task.execute("u1", task.id, {"learning_minutes": 20})

        assert skill_repo.find_by_id(skill.id, "u1").total_minutes == 20

    def test_moving_task_between_skills(self, create_task, update_task, new_skill, skill_repo, future_due):
        a = new_skill("English")
        b = new_skill("German")
        task = create_task.execute(
            "u1",
            {"title": "Podcast", "due_date": future_due, "learning_minutes": 30, "skill_id": a.id},
        )

        update_task.execute("u1", task.id, {"skill_id": b.id, "learning_minutes": 45})

        assert skill_repo.find_by_id(a.id, "u1").total_minutes == 0
        assert skill_repo.find_by_id(b.id, "u1").total_minutes == 45

    def test_unlinking_skill_subtracts_contribution(self, create_task, update_task, new_skill, skill_repo, future_due):
        skill = new_skill("English")
        task = create_task.execute(
            "u1",
            {"title": "Podcast", "due_date": future_due, "learning_minutes": 30, "skill_id": skill.id},
        )

        update_task.execute("u1", task.id, {"skill_id": None})

        assert skill_repo.find_by_id(skill.id, "u1").total_minutes == 0

    def test_failed_reassignment_is_compensated(self, task_repo, task_domain, future_due):
        skills = FlakySkillRepository()
        a = CreateSkill(skills).execute("u1", "English")
        b = CreateSkill(skills).execute("u1", "German")
        task = CreateTask(task_repo, task_domain, skills).execute(
            "u1",
            {"title": "Podcast", "due_date": future_due, "learning_minutes": 30, "skill_id": a.id},
        )
        skills.fail_for.add(b.id)

        with pytest.raises(RuntimeError):
            UpdateTask(task_repo, task_domain, skills).execute("u1", task.id, {"skill_id": b.id})

        assert skills.find_by_id(a.id, "u1").total_minutes == 30
        assert skills.find_by_id(b.id, "u1").total_minutes == 0
        assert task_repo.find_by_id(task.id, "u1").skill_id == a.id


class TestUpdateTask:
    def test_unknown_task(self, update_task):
        with pytest.raises(NotFoundError, match="Task not found"):
            update_task.execute("u1", "missing", {"title": "x"})

    def test_other_users_task_is_not_found(self, create_task, update_task, future_due):
        task = create_task.execute("u1", {"title": "Read", "due_date": future_due})
        with pytest.raises(NotFoundError, match="Task not found"):
            update_task.execute("u2", task.id, {"title": "x"})

    def test_foreign_skill_rejected(self, create_task, update_task, new_skill, future_due):
        task = create_task.execute("u1", {"title": "Read", "due_date": future_due})
        other = new_skill("Piano", user_id="u2")
        with pytest.raises(NotFoundError, match="Skill not found for this user"):
            update_task.execute("u1", task.id, {"skill_id": other.id})

    def test_invalid_change_leaves_task_untouched(self, create_task, update_task, task_repo, future_due):
        task = create_task.execute("u1", {"title": "Read", "due_date": future_due})

        with pytest.raises(InvalidInputError):
            update_task.execute("u1", task.id, {"title": "Write", "status": "paused"})

        assert task_repo.find_by_id(task.id, "u1").title == "Read"


class TestPriorityOrdering:
    def test_priorities_stay_dense(self, create_task, update_task, delete_task, task_repo, future_due):
        ids = {}
        for title in ("t1", "t2", "t3", "t4", "t5"):
            ids[title] = create_task.execute("u1", {"title": title, "due_date": future_due}).id

        update_task.execute("u1", ids["t5"], {"priority": 1})
        assert [t.title for t in task_repo.find_all_by_user("u1")] == ["t5", "t1", "t2", "t3", "t4"]

        delete_task.execute("u1", ids["t2"])
        assert priorities(task_repo) == [1, 2, 3, 4]

        create_task.execute("u1", {"title": "t6", "due_date": future_due, "priority": 2})
        assert [t.title for t in task_repo.find_all_by_user("u1")] == ["t5", "t6", "t1", "t3", "t4"]
        assert priorities(task_repo) == [1, 2, 3, 4, 5]

    def test_moving_down_and_out_of_range(self, create_task, update_task, task_repo, future_due):
        ids = [create_task.execute("u1", {"title": f"t{i}", "due_date": future_due}).id for i in range(1, 4)]

        update_task.execute("u1", ids[0], {"priority": 99})

        assert [t.title for t in task_repo.find_all_by_user("u1")] == ["t2", "t3", "t1"]
        assert priorities(task_repo) == [1, 2, 3]

    def test_users_are_ranked_independently(self, create_task, task_repo, future_due):
        create_task.execute("u1", {"title": "a", "due_date": future_due})
        create_task.execute("u2", {"title": "b", "due_date": future_due})
        create_task.execute("u1", {"title": "c", "due_date": future_due})

        assert priorities(task_repo, "u1") == [1, 2]
        assert priorities(task_repo, "u2") == [1]

    def test_list_tasks_orders_by_priority(self, create_task, update_task, task_repo, future_due):
        first = create_task.execute("u1", {"title": "first", "due_date": future_due})
        create_task.execute("u1", {"title": "second", "due_date": future_due})
        update_task.execute("u1", first.id, {"priority": 2})

        listed = ListTasks(task_repo).execute("u1")

        assert [t.title for t in listed] == ["second", "first"]


def test_failed_minute_rollback_restores_deleted_task(task_repo, task_domain, future_due):
    skills = FlakySkillRepository()
    skill = CreateSkill(skills).execute("u1", "English")
    create = CreateTask(task_repo, task_domain, skills)
    create.execute("u1", {"title": "a", "due_date": future_due})
    task = create.execute(
        "u1",
        {"title": "b", "due_date": future_due, "learning_minutes": 30, "skill_id": skill.id},
    )
    create.execute("u1", {"title": "c", "due_date": future_due})
    skills.fail_for.add(skill.id)

    with pytest.raises(RuntimeError):
        DeleteTask(task_repo, skills).execute("u1", task.id)

    assert [t.title for t in task_repo.find_all_by_user("u1")] == ["a", "b", "c"]
    restored = task_repo.find_by_id(task.id, "u1")
    assert restored.skill_id == skill.id
    assert restored.learning_minutes == 30
    assert skills.find_by_id(skill.id, "u1").total_minutes == 30
