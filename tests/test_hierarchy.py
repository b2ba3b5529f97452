from services.hierarchy import (
    activities_for,
    build_project_nodes,
    classification_key,
    find_orphan_activities,
    group_projects,
    index_activities,
)


def projects_of(tasks):
    return [task for task in tasks if task.is_project]


def test_classification_key(tasks):
    by_id = {task.id: task for task in tasks}
    assert classification_key(by_id["p1"]) == "Ops"
    assert classification_key(by_id["p3"]) == "Sem classificação"
    assert classification_key(by_id["p3"], "Unclassified") == "Unclassified"


def test_index_keeps_input_order(tasks):
    index = index_activities(tasks)
    assert [task.id for task in index["p1"]] == ["a1", "a2"]
    assert [task.id for task in index["missing"]] == ["orphan"]


def test_activities_for(tasks):
    assert [task.id for task in activities_for("p1", tasks)] == ["a1", "a2"]
    assert activities_for("p2", tasks) == []


def test_find_orphan_activities(tasks):
    assert [task.id for task in find_orphan_activities(tasks)] == ["orphan"]


def test_nodes_take_activities_from_full_collection(tasks):
    # the activities themselves are never candidates
    nodes = build_project_nodes([t for t in tasks if t.id == "p1"], tasks)
    assert len(nodes) == 1
    assert [a.id for a in nodes[0].activities] == ["a1", "a2"]


def test_group_projects(tasks):
    groups = group_projects(build_project_nodes(projects_of(tasks), tasks))
    assert [group.name for group in groups] == ["Ops", "Sem classificação"]
    assert [node.project.id for node in groups[0].nodes] == ["p1", "p2"]
    assert [node.project.id for node in groups[1].nodes] == ["p3"]


def test_group_names_sort_ignoring_case_and_accents(make_task):
    names = ["beta", "Álamo", "alfa", "Zeta"]
    projects = [
        make_task(id=str(i), is_project=True, classification={"id": str(i), "name": name})
        for i, name in enumerate(names)
    ]
    groups = group_projects(build_project_nodes(projects, projects))
    assert [group.name for group in groups] == ["Álamo", "alfa", "beta", "Zeta"]


def test_empty_input():
    assert group_projects([]) == []
