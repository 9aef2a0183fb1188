import pytest

from vmf_scene.tasks import ParserTask, TaskRegistry


class BakeLighting(ParserTask):
    pass


class BuildNavmesh(ParserTask):
    pass


def test_add_task_instantiates_and_queues():
    reg = TaskRegistry()
    task = reg.add_task(BakeLighting)
    assert isinstance(task, BakeLighting)
    assert reg.pending == [task]
    assert not reg.task_done(BakeLighting)
    assert reg.get_task(BakeLighting) is None


def test_add_task_rejects_non_tasks():
    reg = TaskRegistry()
    with pytest.raises(TypeError):
        reg.add_task(int)
    with pytest.raises(TypeError):
        reg.add_task(BakeLighting())


def test_pop_and_complete():
    reg = TaskRegistry()
    first = reg.add_task(BakeLighting)
    second = reg.add_task(BuildNavmesh)
    assert reg.pop_task() is first
    reg.complete(first)
    assert reg.pending == [second]
    assert reg.task_done(BakeLighting)
    assert reg.task_done(first)
    assert not reg.task_done(BuildNavmesh)
    assert reg.get_task(BakeLighting) is first
    assert reg.pop_task() is second
    assert reg.pop_task() is None


def test_complete_removes_from_queue():
    reg = TaskRegistry()
    task = reg.add_task(BuildNavmesh)
    reg.complete(task)
    assert reg.pending == []
    assert reg.done == [task]


def test_get_task_returns_first_match():
    reg = TaskRegistry()
    a = reg.add_task(BakeLighting)
    b = reg.add_task(BakeLighting)
    reg.complete(b)
    reg.complete(a)
    assert reg.get_task(BakeLighting) is b


def test_exact_type_match():
    class FastBake(BakeLighting):
        pass

    reg = TaskRegistry()
    reg.complete(reg.add_task(FastBake))
    assert reg.task_done(FastBake)
    assert not reg.task_done(BakeLighting)
    assert reg.get_task(BakeLighting) is None


def test_registries_are_independent():
    a, b = TaskRegistry(), TaskRegistry()
    a.complete(a.add_task(BakeLighting))
    assert not b.task_done(BakeLighting)
