import asyncio

import pytest

from models.enums import TaskStatus
from services.task_service import BulkResult, TaskService
from utils.exceptions import StoreError, TaskNotFoundError, ValidationError


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def service(store):
    return TaskService(store)


def get(store, task_id):
    return run(store.get_task(task_id))


class TestSingleUpdates:
    def test_set_status(self, service, store):
        result = run(service.set_status("a2", "concluida"))
        assert result.ok
        assert result.task.status == TaskStatus.CONCLUIDA
        assert get(store, "a2").status == TaskStatus.CONCLUIDA

    def test_set_status_rejects_unknown_status(self, service):
        with pytest.raises(ValidationError):
            run(service.set_status("a2", "done"))

    def test_unknown_task_is_reported_not_raised(self, service):
        result = run(service.set_status("nope", TaskStatus.PENDENTE))
        assert not result.ok
        assert result.error == "Task nope not found"
        assert isinstance(result.exception, TaskNotFoundError)
        assert "exception" not in result.to_dict()

    def test_assign_and_unassign(self, service, store):
        assert run(service.assign("p3", "u2")).task.assigned_to == "u2"
        assert run(service.assign("p3", None)).task.assigned_to is None
        assert get(store, "p3").assigned_to_profile is None

    def test_store_failure_is_reported(self, failing_store):
        result = run(TaskService(failing_store).set_status("a2", "concluida"))
        assert not result.ok
        assert isinstance(result.exception, StoreError)


class TestDelegate:
    def test_records_delegator_and_note(self, service, store):
        task = get(store, "p3")
        result = run(service.delegate(task, "u2", note="  cobrir férias "))
        assert result.ok
        assert result.task.assigned_to == "u2"
        assert result.task.delegated_by == "u1"
        assert result.task.comments == ["Tarefa delegada: cobrir férias"]

    def test_explicit_delegator_without_note(self, service, store):
        task = get(store, "p1")
        result = run(service.delegate(task, "u3", delegated_by="u2"))
        assert result.task.delegated_by == "u2"
        assert result.task.comments == ["Janela de manutenção aprovada"]


def test_convert_to_project_appends_comment(service, store, now):
    result = run(service.convert_to_project(get(store, "t1"), now=now))
    assert result.ok
    assert result.task.is_project
    assert result.task.comments == ["Tarefa convertida em projeto em 17/01/2024, 12:00:00"]


class TestComments:
    def test_add_comment(self, service, store):
        result = run(service.add_comment(get(store, "p1"), " pronto para revisão "))
        assert result.task.comments == ["Janela de manutenção aprovada", "pronto para revisão"]

    def test_blank_comment_is_rejected(self, service, store):
        result = run(service.add_comment(get(store, "p1"), "   "))
        assert not result.ok
        assert get(store, "p1").comments == ["Janela de manutenção aprovada"]


class TestBulk:
    def test_partial_failure_names_failed_ids(self, failing_store):
        result = run(TaskService(failing_store).bulk_set_status(["p1", "a2", "p3"], "concluida"))
        assert result.succeeded == ["p1", "p3"]
        assert result.failed_ids == ["a2"]
        assert result.partial
        assert not result.ok
        # successes are not rolled back
        assert get(failing_store, "p1").status == TaskStatus.CONCLUIDA
        assert get(failing_store, "a2").status == TaskStatus.PENDENTE

    def test_unknown_ids_fail_individually(self, service):
        result = run(service.bulk_assign(["a1", "ghost"], "u3"))
        assert result.succeeded == ["a1"]
        assert isinstance(result.failed["ghost"], TaskNotFoundError)
        assert result.to_dict() == {
            "succeeded": ["a1"],
            "failed": {"ghost": "Task ghost not found"},
            "total": 2,
        }

    def test_duplicate_ids_issue_one_request(self, service, store):
        before = store.total_operations
        result = run(service.bulk_set_status(["a1", "a1"], "pendente"))
        assert result.total == 1
        assert store.total_operations == before + 1

    def test_empty_ids(self, service):
        result = run(service.bulk_set_status([], "pendente"))
        assert result == BulkResult()
        assert result.ok
