"""Tests for task management: validation, ownership scoping, filters."""

from datetime import date, datetime, timedelta

import pytest

from pomodorise.errors import AccountNotFound, TaskNotFound, ValidationFailed
from pomodorise.tasks.service import (
    _clean_due_date,
    create_task,
    delete_task,
    get_task,
    list_tasks,
    parse_estimated_intervals,
    update_task,
)

from helpers import make_account


class TestParseEstimatedIntervals:

    @pytest.mark.parametrize("value, expected", [
        (1, 1), (20, 20), ("4", 4), (" 7 ", 7), (3.0, 3), ("5.0", 5),
    ])
    def test_accepts(self, value, expected):
        assert parse_estimated_intervals(value) == expected

    @pytest.mark.parametrize("value", [0, 21, -1, 2.5, "2.5", "four", None, True, [3]])
    def test_rejects(self, value):
        with pytest.raises(ValidationFailed):
            parse_estimated_intervals(value)


class TestCreateTask:

    def test_defaults(self, account):
        task = create_task(account.id, "  Write report  ", 4)
        assert task.id is not None
        assert task.title == "Write report"
        assert task.status == "pending"
        assert task.priority == "medium"
        assert task.completed_intervals == 0
        assert task.estimated_intervals == 4
        assert task.progress_percent == 0

    def test_string_estimate(self, account):
        assert create_task(account.id, "Read", "3").estimated_intervals == 3

    def test_priority(self, account):
        assert create_task(account.id, "Read", 1, priority="high").priority == "high"

    def test_bad_priority(self, account):
        with pytest.raises(ValidationFailed):
            create_task(account.id, "Read", 1, priority="urgent")

    @pytest.mark.parametrize("title", ["", "   ", None, "x" * 101])
    def test_bad_title(self, account, title):
        with pytest.raises(ValidationFailed):
            create_task(account.id, title, 1)

    def test_long_description(self, account):
        with pytest.raises(ValidationFailed):
            create_task(account.id, "Read", 1, description="x" * 501)

    def test_blank_description_is_none(self, account):
        assert create_task(account.id, "Read", 1, description="  ").description is None

    def test_future_due_date(self, account):
        due = datetime.now() + timedelta(days=3)
        assert create_task(account.id, "Read", 1, due_date=due).due_date == due

    def test_string_due_date(self, account):
        with pytest.raises(ValidationFailed):
            create_task(account.id, "Read", 1, due_date="2030-01-01")
        assert list_tasks(account.id) == []

    def test_past_due_date(self, account):
        with pytest.raises(ValidationFailed):
            create_task(
                account.id, "Read", 1,
                due_date=datetime.now() - timedelta(days=1),
            )

    def test_unknown_account(self):
        with pytest.raises(AccountNotFound):
            create_task(999, "Orphan", 1)
        assert list_tasks(999) == []


class TestCleanDueDate:

    NOW = datetime(2024, 3, 10, 9, 0)

    def test_none(self):
        assert _clean_due_date(None, self.NOW) is None

    def test_plain_date_means_midnight(self):
        assert _clean_due_date(date(2024, 3, 11), self.NOW) == datetime(2024, 3, 11)

    def test_today_is_past(self):
        with pytest.raises(ValidationFailed):
            _clean_due_date(date(2024, 3, 10), self.NOW)

    def test_now_is_not_future(self):
        with pytest.raises(ValidationFailed):
            _clean_due_date(self.NOW, self.NOW)

    @pytest.mark.parametrize("value", ["2024-04-01", 1712000000, 3.5])
    def test_rejects_non_dates(self, value):
        with pytest.raises(ValidationFailed):
            _clean_due_date(value, self.NOW)


class TestReadTasks:

    def test_list_newest_first(self, account):
        first = create_task(account.id, "First", 1)
        second = create_task(account.id, "Second", 1)
        assert [t.id for t in list_tasks(account.id)] == [second.id, first.id]

    def test_list_scoped_to_account(self, account):
        other = make_account()
        create_task(other.id, "Theirs", 1)
        mine = create_task(account.id, "Mine", 1)
        assert [t.id for t in list_tasks(account.id)] == [mine.id]

    def test_filter_by_status_and_priority(self, account):
        low = create_task(account.id, "Low", 1, priority="low")
        high = create_task(account.id, "High", 1, priority="high")
        update_task(high.id, account.id, status="in_progress")
        assert [t.id for t in list_tasks(account.id, priority="low")] == [low.id]
        assert [t.id for t in list_tasks(account.id, status="in_progress")] == [high.id]

    def test_get_foreign_task_looks_missing(self, account):
        other = make_account()
        task = create_task(other.id, "Theirs", 1)
        with pytest.raises(TaskNotFound):
            get_task(task.id, account.id)

    def test_get_task(self, account):
        task = create_task(account.id, "Mine", 2)
        assert get_task(task.id, account.id).title == "Mine"


class TestUpdateDeleteTask:

    def test_update_fields(self, account):
        task = create_task(account.id, "Draft", 2)
        updated = update_task(
            task.id, account.id, title="Final", estimated_intervals="6",
            status="completed",
        )
        assert updated.title == "Final"
        assert updated.estimated_intervals == 6
        assert get_task(task.id, account.id).status == "completed"

    def test_progress_fields_not_updatable(self, account):
        task = create_task(account.id, "Draft", 2)
        with pytest.raises(ValidationFailed):
            update_task(task.id, account.id, completed_intervals=2)

    def test_update_validates(self, account):
        task = create_task(account.id, "Draft", 2)
        with pytest.raises(ValidationFailed):
            update_task(task.id, account.id, estimated_intervals=50)

    def test_update_due_date(self, account):
        task = create_task(account.id, "Draft", 2)
        due = datetime.now() + timedelta(days=1)
        assert update_task(task.id, account.id, due_date=due).due_date == due
        assert update_task(task.id, account.id, due_date=None).due_date is None

    def test_update_past_due_date(self, account):
        task = create_task(account.id, "Draft", 2)
        with pytest.raises(ValidationFailed):
            update_task(
                task.id, account.id,
                due_date=datetime.now() - timedelta(hours=1),
            )
        assert get_task(task.id, account.id).due_date is None

    def test_update_string_due_date(self, account):
        task = create_task(account.id, "Draft", 2)
        with pytest.raises(ValidationFailed):
            update_task(task.id, account.id, due_date="tomorrow")

    def test_update_foreign_task(self, account):
        task = create_task(make_account().id, "Theirs", 2)
        with pytest.raises(TaskNotFound):
            update_task(task.id, account.id, title="Mine now")

    def test_delete(self, account):
        task = create_task(account.id, "Gone", 1)
        delete_task(task.id, account.id)
        with pytest.raises(TaskNotFound):
            get_task(task.id, account.id)

    def test_delete_foreign_task(self, account):
        task = create_task(make_account().id, "Theirs", 1)
        with pytest.raises(TaskNotFound):
            delete_task(task.id, account.id)
        assert get_task(task.id, task.account_id).title == "Theirs"
