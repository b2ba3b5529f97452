import asyncio

import pytest

from services.selection import SelectionController
from services.task_service import TaskService


class View:
    def __init__(self, ids):
        self.ids = list(ids)

    def visible_ids(self):
        return list(self.ids)


def test_toggle():
    selection = SelectionController()
    selection.toggle("a", True)
    selection.toggle("b", True)
    selection.toggle("a", False)
    selection.toggle("zzz", False)
    assert selection.selected == {"b"}
    assert "b" in selection
    assert len(selection) == 1


def test_select_all_visible_is_a_union():
    selection = SelectionController(selected={"hidden"})
    view = View(["p1", "a1", "a2"])
    selection.select_all_visible(view, True)
    assert selection.selected >= set(view.visible_ids())
    assert "hidden" in selection


def test_clear_all_visible_keeps_hidden_ids():
    selection = SelectionController(selected={"hidden", "p1", "a1"})
    selection.select_all_visible(View(["p1", "a1", "a2"]), False)
    assert selection.selected == {"hidden"}


def test_visible_count_ignores_hidden_selection():
    selection = SelectionController(selected={"hidden", "p1"})
    view = View(["p1", "a1"])
    assert selection.selected_visible(view) == ["p1"]
    assert selection.selected_visible_count(view) == 1
    assert not selection.all_visible_selected(view)
    selection.toggle("a1", True)
    assert selection.all_visible_selected(view)
    assert not selection.all_visible_selected(View([]))


def test_shares_the_given_set():
    state = set()
    selection = SelectionController(selected=state)
    selection.toggle("x", True)
    assert state == {"x"}


def test_bulk_defaults_to_whole_selection(store):
    selection = SelectionController(TaskService(store), selected={"p3", "t1"})
    result = asyncio.run(selection.bulk_set_status("concluida"))
    assert sorted(result.succeeded) == ["p3", "t1"]
    assert selection.selected == {"p3", "t1"}


def test_bulk_assign_with_explicit_ids(store):
    selection = SelectionController(TaskService(store), selected={"p3"})
    result = asyncio.run(selection.bulk_assign("u1", ids=["a1", "a2"]))
    assert result.succeeded == ["a1", "a2"]
    tasks = {task.id: task for task in asyncio.run(store.fetch_tasks())}
    assert tasks["a1"].assigned_to == tasks["a2"].assigned_to == "u1"
    assert tasks["p3"].assigned_to == "u3"


def test_bulk_without_service():
    with pytest.raises(RuntimeError):
        asyncio.run(SelectionController(selected={"x"}).bulk_set_status("concluida"))


def test_clear_and_visible_ids():
    view = View(["p1", "a1"])
    selection = SelectionController(selected={"p1", "hidden"})
    assert SelectionController.visible_ids(view) == ["p1", "a1"]
    selection.clear()
    assert len(selection) == 0
