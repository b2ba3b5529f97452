import pytest

from models.enums import TaskPriority, TaskStatus, coerce_enum
from utils.exceptions import ValidationError


def test_priority_order():
    assert TaskPriority.BAIXA < TaskPriority.MEDIA < TaskPriority.ALTA < TaskPriority.URGENTE
    assert TaskPriority.URGENTE > TaskPriority.ALTA >= TaskPriority.ALTA
    assert TaskPriority.MEDIA <= TaskPriority.MEDIA


def test_priority_sorting_uses_rank():
    shuffled = [TaskPriority.ALTA, TaskPriority.BAIXA, TaskPriority.URGENTE, TaskPriority.MEDIA]
    assert sorted(shuffled) == [TaskPriority.BAIXA, TaskPriority.MEDIA, TaskPriority.ALTA, TaskPriority.URGENTE]
    assert [p.rank for p in sorted(shuffled)] == [0, 1, 2, 3]


def test_priority_still_equals_its_value():
    assert TaskPriority.ALTA == "alta"
    assert {TaskPriority.ALTA: 1}["alta"] == 1


def test_coerce_enum():
    assert coerce_enum(TaskStatus, "concluida") is TaskStatus.CONCLUIDA
    assert coerce_enum(TaskStatus, TaskStatus.PENDENTE) is TaskStatus.PENDENTE
    with pytest.raises(ValidationError):
        coerce_enum(TaskPriority, "highest", "priority")
