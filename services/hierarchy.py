# services/hierarchy.py

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from config import get_settings
from models.task import Task
from utils.text_utils import collation_key

logger = logging.getLogger(__name__)


@dataclass
class ProjectNode:
    """A project and its child activities, activities in input order"""
    project: Task
    activities: List[Task] = field(default_factory=list)


@dataclass
class ProjectGroup:
    """Projects sharing a classification bucket"""
    name: str
    nodes: List[ProjectNode] = field(default_factory=list)


def classification_key(task: Task, unclassified_label: Optional[str] = None) -> str:
    name = task.classification_name
    if name:
        return name
    return unclassified_label if unclassified_label is not None else get_settings().UNCLASSIFIED_LABEL


def index_activities(all_tasks: Iterable[Task]) -> Dict[str, List[Task]]:
    """project id -> activities, preserving input order"""
    index: Dict[str, List[Task]] = {}
    for task in all_tasks:
        if task.is_activity:
            index.setdefault(task.project_id, []).append(task)
    return index


def activities_for(project_id: str, all_tasks: Iterable[Task]) -> List[Task]:
    return [task for task in all_tasks if task.project_id == project_id]


def find_orphan_activities(all_tasks: Sequence[Task]) -> List[Task]:
    """Activities whose project reference matches no task in the collection"""
    known_ids = {task.id for task in all_tasks}
    return [task for task in all_tasks if task.project_id is not None and task.project_id not in known_ids]


def build_project_nodes(projects: Iterable[Task], all_tasks: Sequence[Task]) -> List[ProjectNode]:
    """Attach activities to each candidate project.

    Activities are looked up in the unfiltered collection so a filter never
    changes a project's own progress.
    """
    index = index_activities(all_tasks)
    return [ProjectNode(project=project, activities=list(index.get(project.id, []))) for project in projects]


def group_projects(
    nodes: Iterable[ProjectNode],
    unclassified_label: Optional[str] = None,
) -> List[ProjectGroup]:
    """Bucket project nodes by classification name, buckets in ascending name order"""
    groups: Dict[str, ProjectGroup] = {}
    for node in nodes:
        key = classification_key(node.project, unclassified_label)
        if key not in groups:
            groups[key] = ProjectGroup(name=key)
        groups[key].nodes.append(node)

    ordered = sorted(groups.values(), key=lambda group: collation_key(group.name))
    logger.debug(f"Grouped {sum(len(g.nodes) for g in ordered)} projects into {len(ordered)} buckets")
    return ordered
