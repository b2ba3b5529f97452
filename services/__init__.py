# services/__init__.py

"""
Project Tracker services

Store access, task mutations and the project roll-up engine.
"""

import logging
from typing import Optional

from .data_service import InMemoryTaskStore, JsonTaskStore, TaskStore
from .task_service import BulkResult, MutationResult, TaskService

logger = logging.getLogger(__name__)


class ServiceManager:
    """
    Owns the task store and the services built on it

    - Initialises the store before the services that depend on it
    - Reports health for the dashboard
    - Releases everything in reverse order
    """

    def __init__(self):
        self.store: Optional[TaskStore] = None
        self.task_service: Optional[TaskService] = None
        self.initialized = False

    def initialize_services(self, store: Optional[TaskStore] = None) -> bool:
        try:
            logger.info("🔧 Initialising services...")
            self.store = store or JsonTaskStore.from_settings()
            self.task_service = TaskService(self.store)
            self.initialized = True
            logger.info("✅ Services initialised")
            return True
        except OSError as e:
            logger.error(f"❌ Service initialisation failed: {e}")
            self.close_services()
            return False

    def health_check(self) -> dict:
        health = {
            "status": "healthy" if self.initialized else "error",
            "services": {},
        }
        if isinstance(self.store, InMemoryTaskStore):
            health["services"]["store"] = {
                "status": "healthy",
                "type": type(self.store).__name__,
                "total_operations": self.store.total_operations,
                "failed_operations": self.store.failed_operations,
            }
        elif self.store is not None:
            health["services"]["store"] = {"status": "healthy", "type": type(self.store).__name__}
        if self.task_service:
            health["services"]["task_service"] = {"status": "healthy"}
        return health

    def close_services(self):
        logger.info("🛑 Closing services...")
        self.task_service = None
        self.store = None
        self.initialized = False


_service_manager: Optional[ServiceManager] = None


def get_service_manager() -> ServiceManager:
    global _service_manager
    if _service_manager is None:
        _service_manager = ServiceManager()
    return _service_manager


def close_all_services():
    global _service_manager
    if _service_manager:
        _service_manager.close_services()
        _service_manager = None


__all__ = [
    'BulkResult',
    'InMemoryTaskStore',
    'JsonTaskStore',
    'MutationResult',
    'ServiceManager',
    'TaskService',
    'TaskStore',
    'close_all_services',
    'get_service_manager',
]
