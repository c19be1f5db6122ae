# tests/test_executor.py

from __future__ import annotations

import pytest

from voice_todo.core.errors import MissingField, TaskNotFound, UnknownIntent
from voice_todo.core.executor import execute_intent
from voice_todo.intents.models import IntentRecord
from voice_todo.tasks.task_models import Priority, Task
from voice_todo.tasks.task_store import TaskStore


def _titles(tasks: list[Task] | None) -> list[str]:
    return [t.title for t in tasks or []]


# ---- create ----


def test_create_appends_and_returns_full_list(store: TaskStore) -> None:
    record = IntentRecord(
        intent="create",
        task_title="Buy milk",
        scheduled_time="2026-10-22",
        priority="high",
        category="personal",
    )
    result = execute_intent(record, store)

    assert result.task is not None
    assert result.task.title == "Buy milk"
    assert result.task.priority is Priority.HIGH
    assert result.task.scheduled_time == "2026-10-22"
    assert result.message == "Created task: Buy milk"
    assert _titles(result.tasks) == ["Fix bug", "Write docs", "Compliance review", "Buy milk"]


def test_create_defaults_priority_and_ignores_unknown(store: TaskStore) -> None:
    result = execute_intent(IntentRecord(intent="create", task_title="Stretch", priority="urgent"), store)
    assert result.task.priority is Priority.MEDIUM


def test_create_without_title_fails(store: TaskStore) -> None:
    with pytest.raises(MissingField) as exc_info:
        execute_intent(IntentRecord(intent="create", category="x"), store)
    assert exc_info.value.message == "Task title is required for create command"
    assert exc_info.value.status == 400
    assert store.count() == 3


# ---- read / list / filter ----


@pytest.mark.parametrize("intent", ["read", "list"])
def test_read_without_filters_returns_everything(store: TaskStore, intent: str) -> None:
    result = execute_intent(IntentRecord(intent=intent), store)
    assert _titles(result.tasks) == ["Fix bug", "Write docs", "Compliance review"]
    assert result.message == "Found 3 tasks"


def test_read_by_category(store: TaskStore) -> None:
    result = execute_intent(IntentRecord(intent="read", category="Development"), store)
    assert _titles(result.tasks) == ["Fix bug"]
    assert result.message == 'Found 1 tasks in category "Development"'


def test_read_category_wins_over_priority(store: TaskStore) -> None:
    result = execute_intent(IntentRecord(intent="list", category="documentation", priority="high"), store)
    assert _titles(result.tasks) == ["Write docs"]


def test_read_by_priority(store: TaskStore) -> None:
    result = execute_intent(IntentRecord(intent="read", priority="low"), store)
    assert _titles(result.tasks) == ["Write docs"]
    assert result.message == "Found 1 tasks with low priority"


def test_read_ignores_search_query(store: TaskStore) -> None:
    result = execute_intent(IntentRecord(intent="read", search_query="bug"), store)
    assert len(result.tasks) == 3


def test_filter_search_wins_over_priority(store: TaskStore) -> None:
    result = execute_intent(IntentRecord(intent="filter", search_query="docs", priority="high"), store)
    assert _titles(result.tasks) == ["Write docs"]
    assert result.message == 'Found 1 tasks matching "docs"'


def test_filter_category_wins_over_search(store: TaskStore) -> None:
    result = execute_intent(IntentRecord(intent="filter", category="admin", search_query="bug"), store)
    assert _titles(result.tasks) == ["Compliance review"]


def test_filter_by_unknown_priority_is_empty(store: TaskStore) -> None:
    result = execute_intent(IntentRecord(intent="filter", priority="urgent"), store)
    assert result.tasks == []
    assert result.message == "Found 0 tasks with urgent priority"


def test_queries_do_not_mutate(store: TaskStore) -> None:
    before = store.snapshot()
    execute_intent(IntentRecord(intent="filter", search_query="docs"), store)
    assert store.snapshot() == before


# ---- update ----


def test_update_by_index_with_resolved_date(store: TaskStore) -> None:
    record = IntentRecord(intent="update", task_index=1, scheduled_time="2026-10-22")
    result = execute_intent(record, store)

    assert result.task.title == "Fix bug"
    assert result.task.scheduled_time == "2026-10-22"
    assert result.task.priority is Priority.HIGH
    assert result.message == "Updated task: Fix bug"
    assert store.by_index(1).scheduled_time == "2026-10-22"


def test_update_by_search_renames(store: TaskStore) -> None:
    record = IntentRecord(intent="update", search_query="compliance", task_title="Compliance audit", priority="high")
    result = execute_intent(record, store)
    assert result.task.title == "Compliance audit"
    assert result.task.priority is Priority.HIGH
    assert _titles(result.tasks) == ["Fix bug", "Write docs", "Compliance audit"]


def test_update_by_id(store: TaskStore) -> None:
    target = store.by_index(2)
    result = execute_intent(IntentRecord(intent="update", task_id=target.id, category="docs"), store)
    assert result.task.id == target.id
    assert result.task.category == "docs"


def test_update_index_takes_precedence_over_search(store: TaskStore) -> None:
    result = execute_intent(IntentRecord(intent="update", task_index=2, search_query="bug", priority="high"), store)
    assert result.task.title == "Write docs"


def test_update_bad_index_does_not_fall_through(store: TaskStore) -> None:
    with pytest.raises(TaskNotFound) as exc_info:
        execute_intent(IntentRecord(intent="update", task_index=9, search_query="bug"), store)
    err = exc_info.value
    assert err.status == 404
    assert err.available_tasks == ["Fix bug", "Write docs", "Compliance review"]
    assert err.message.startswith("Task not found. Available tasks: ")
    assert '#1: "Fix bug"' in err.message


def test_update_search_miss_lists_available(store: TaskStore) -> None:
    with pytest.raises(TaskNotFound) as exc_info:
        execute_intent(IntentRecord(intent="update", search_query="groceries", priority="low"), store)
    err = exc_info.value
    assert err.message.startswith('Task not found matching "groceries". Available tasks:')
    assert err.to_payload()["availableTasks"] == ["Fix bug", "Write docs", "Compliance review"]


def test_update_without_reference_fails(store: TaskStore) -> None:
    with pytest.raises(TaskNotFound):
        execute_intent(IntentRecord(intent="update", priority="low"), store)


def test_update_several_matches_takes_earliest() -> None:
    s = TaskStore()
    s.create(title="Report draft")
    s.create(title="Report final")
    result = execute_intent(IntentRecord(intent="update", search_query="report", priority="low"), s)
    assert result.task.title == "Report draft"
    assert s.by_index(2).priority is Priority.MEDIUM


# ---- delete ----


def test_delete_by_search(store: TaskStore) -> None:
    result = execute_intent(IntentRecord(intent="delete", search_query="compliance"), store)
    assert result.deleted is True
    assert _titles(result.tasks) == ["Fix bug", "Write docs"]
    assert result.message == "Deleted task: Compliance review"


def test_delete_by_search_no_match_is_noop(store: TaskStore) -> None:
    result = execute_intent(IntentRecord(intent="delete", search_query="nonexistent"), store)
    assert result.deleted is False
    assert result.message == 'No tasks found matching "nonexistent"'
    assert len(result.tasks) == 3


def test_delete_by_index(store: TaskStore) -> None:
    result = execute_intent(IntentRecord(intent="delete", task_index=2), store)
    assert result.deleted is True
    assert result.message == "Deleted task at index 2"
    assert _titles(result.tasks) == ["Fix bug", "Compliance review"]


def test_delete_out_of_range_index(store: TaskStore) -> None:
    result = execute_intent(IntentRecord(intent="delete", task_index=7), store)
    assert result.deleted is False
    assert result.message == "Task at index 7 not found"
    assert store.count() == 3


def test_delete_needs_index_or_query(store: TaskStore) -> None:
    with pytest.raises(MissingField):
        execute_intent(IntentRecord(intent="delete", task_id=store.by_index(1).id), store)
    assert store.count() == 3


# ---- dispatch / result shape ----


@pytest.mark.parametrize("intent", ["dance", None])
def test_unknown_intent(store: TaskStore, intent: str | None) -> None:
    with pytest.raises(UnknownIntent) as exc_info:
        execute_intent(IntentRecord(intent=intent), store)
    assert exc_info.value.message == f"Unknown intent: {intent}"


def test_intent_matching_is_case_insensitive(store: TaskStore) -> None:
    assert execute_intent(IntentRecord(intent="LIST"), store).message == "Found 3 tasks"


def test_result_to_dict_shape(store: TaskStore) -> None:
    created = execute_intent(IntentRecord(intent="create", task_title="Buy milk"), store).to_dict()
    assert created["success"] is True
    assert created["intent"] == {"intent": "create", "taskTitle": "Buy milk"}
    assert created["task"]["title"] == "Buy milk"
    assert len(created["tasks"]) == 4
    assert "deleted" not in created

    deleted = execute_intent(IntentRecord(intent="delete", task_index=4), store).to_dict()
    assert deleted["deleted"] is True
    assert "task" not in deleted
    assert deleted["message"] == "Deleted task at index 4"
