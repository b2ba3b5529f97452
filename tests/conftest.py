import asyncio
import copy
from datetime import datetime

import pytest
import pytz

from models.profile import Profile, ProfileDirectory
from models.task import Task
from services import close_all_services
from services.data_service import InMemoryTaskStore
from utils.exceptions import StoreError

TZ = pytz.timezone("America/Sao_Paulo")

# Wednesday
NOW = TZ.localize(datetime(2024, 1, 17, 12, 0, 0))

CLASSIFICATIONS = [
    {"id": "c-ops", "name": "Ops", "color": "#3366ff"},
    {"id": "c-dev", "name": "Desenvolvimento", "color": "#22aa55"},
]

PROFILES = [
    {"user_id": "u1", "name": "Ana Souza", "role": "gestao", "sector": "TI"},
    {"user_id": "u2", "name": "Bruno Lima", "role": "usuario", "sector": "TI"},
    {"user_id": "u3", "name": "Élio Costa", "role": "supervisao"},
]

TASKS = [
    {
        "id": "p1",
        "title": "Migração do servidor",
        "classification_id": "c-ops",
        "priority": "alta",
        "status": "em_progresso",
        "created_by": "u1",
        "assigned_to": "u1",
        "created_at": "2024-01-01T09:00:00",
        "due_date": "2024-01-10T18:00:00",
        "is_project": True,
        "comments": ["Janela de manutenção aprovada"],
    },
    {
        "id": "a1",
        "title": "Backup completo",
        "status": "concluida",
        "assigned_to": "u2",
        "created_at": "2024-01-02T09:00:00",
        "completed_at": "2024-01-08T10:00:00",
        "project_id": "p1",
    },
    {
        "id": "a2",
        "title": "Trocar DNS",
        "status": "pendente",
        "assigned_to": "u2",
        "created_at": "2024-01-03T09:00:00",
        "due_date": "2024-01-12T18:00:00",
        "project_id": "p1",
    },
    {
        "id": "p2",
        "title": "Inventário",
        "classification_id": "c-ops",
        "priority": "media",
        "status": "concluida",
        "created_by": "u1",
        "assigned_to": "u2",
        "created_at": "2024-01-05T09:00:00",
        "is_project": True,
    },
    {
        "id": "p3",
        "title": "Auditoria de contratos",
        "description": "Revisão anual",
        "priority": "urgente",
        "status": "pendente",
        "created_by": "u1",
        "assigned_to": "u3",
        "created_at": "2024-01-15T08:00:00",
        "is_project": True,
    },
    {
        "id": "orphan",
        "title": "Atividade sem projeto",
        "status": "pendente",
        "project_id": "missing",
    },
    {
        "id": "t1",
        "title": "Relatório mensal",
        "status": "atrasada",
        "created_at": "2024-01-10T09:00:00",
        "due_date": "2024-02-01T18:00:00",
    },
]


class FailingTaskStore(InMemoryTaskStore):
    """Rejects updates for the configured ids"""

    def __init__(self, *args, fail_ids=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_ids = set(fail_ids)

    async def update_task(self, task_id, fields):
        if task_id in self.fail_ids:
            raise StoreError("connection reset", task_id=task_id)
        return await super().update_task(task_id, fields)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def task_records():
    return copy.deepcopy(TASKS)


@pytest.fixture
def store(task_records):
    return InMemoryTaskStore(task_records, PROFILES, CLASSIFICATIONS)


@pytest.fixture
def failing_store(task_records):
    return FailingTaskStore(task_records, PROFILES, CLASSIFICATIONS, fail_ids={"a2"})


@pytest.fixture
def profiles():
    return ProfileDirectory(Profile.from_dict(data) for data in PROFILES)


@pytest.fixture
def tasks(store):
    """Joined snapshot, as the store serves it"""
    return asyncio.run(store.fetch_tasks())


@pytest.fixture
def make_task():
    def factory(**fields):
        data = {"id": "x", "title": "Tarefa"}
        data.update(fields)
        return Task.from_dict(data)
    return factory


@pytest.fixture(autouse=True)
def reset_services():
    close_all_services()
    yield
    close_all_services()
