# models/enums.py

from enum import Enum

from utils.exceptions import ValidationError


class TaskPriority(str, Enum):
    """Task priorities, ordered baixa < media < alta < urgente"""
    BAIXA = "baixa"
    MEDIA = "media"
    ALTA = "alta"
    URGENTE = "urgente"

    @property
    def rank(self) -> int:
        return _PRIORITY_ORDER.index(self)

    def __lt__(self, other):
        if isinstance(other, TaskPriority):
            return self.rank < other.rank
        return NotImplemented

    def __le__(self, other):
        if isinstance(other, TaskPriority):
            return self.rank <= other.rank
        return NotImplemented

    def __gt__(self, other):
        if isinstance(other, TaskPriority):
            return self.rank > other.rank
        return NotImplemented

    def __ge__(self, other):
        if isinstance(other, TaskPriority):
            return self.rank >= other.rank
        return NotImplemented


_PRIORITY_ORDER = (TaskPriority.BAIXA, TaskPriority.MEDIA, TaskPriority.ALTA, TaskPriority.URGENTE)


class TaskStatus(str, Enum):
    """Stored task status. ATRASADA is a label, never derived from dates"""
    PENDENTE = "pendente"
    EM_PROGRESSO = "em_progresso"
    CONCLUIDA = "concluida"
    ATRASADA = "atrasada"


class UserRole(str, Enum):
    ADMIN = "admin"
    GESTAO = "gestao"
    SUPERVISAO = "supervisao"
    USUARIO = "usuario"


def coerce_enum(enum_class: type, value, field_name: str = "value"):
    """Turn a raw value into an enum member or raise ValidationError"""
    if isinstance(value, enum_class):
        return value
    try:
        return enum_class(value)
    except ValueError:
        valid_values = [e.value for e in enum_class]
        raise ValidationError(f"{field_name} must be one of: {valid_values}")
