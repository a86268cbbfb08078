from datetime import timedelta

from kitolib.behavior import (
    AIState,
    Memory,
    NodeCache,
    Node,
    Selector,
    Sequence,
    Status,
    Value,
)

DELTA = timedelta(milliseconds=16)


class _Recorder(Node):
    def __init__(self, status, output=None):
        self.status = status
        self.output = output
        self.inputs = []
        self.resets = 0

    def tick(self, value, state, delta):
        self.inputs.append(value)
        return self.output, self.status

    def reset(self):
        self.resets += 1


def test_value_returns_its_value():
    assert Value("apple").tick(None, AIState(), DELTA) == ("apple", Status.SUCCESS)


def test_memory_round_trip():
    memory = Memory()
    assert memory.set("key").tick("stored", AIState(), DELTA) == ("stored", Status.SUCCESS)
    assert memory.get("key").tick(None, AIState(), DELTA) == ("stored", Status.SUCCESS)


def test_memory_get_missing_fails():
    assert Memory().get("key").tick(None, AIState(), DELTA) == (None, Status.FAILURE)


def test_memory_reset_through_node():
    memory = Memory()
    setter = memory.set("key")
    setter.tick(1, AIState(), DELTA)
    setter.reset()
    assert memory.get("key").tick(None, AIState(), DELTA)[1] == Status.FAILURE


def test_node_cache_ignores_running():
    cache = NodeCache()
    running = _Recorder(Status.RUNNING)
    done = _Recorder(Status.SUCCESS)
    cache.add(running, Status.RUNNING)
    cache.add(done, Status.FAILURE)
    assert not cache.contains(running)
    assert cache.get(running) == Status.RUNNING
    assert cache.get(done) == Status.FAILURE
    cache.reset()
    assert not cache.contains(done)


def test_sequence_feeds_outputs_forward():
    memory = Memory()
    sequence = Sequence()
    sequence.add_child(Value("carried"))
    sequence.add_child(memory.set("key"))
    assert sequence.tick(None, AIState(), DELTA) == (None, Status.SUCCESS)
    assert memory.get("key").tick(None, AIState(), DELTA)[0] == "carried"


def test_sequence_stops_at_failure():
    after = _Recorder(Status.SUCCESS)
    sequence = Sequence()
    sequence.add_child(Memory().get("missing"))
    sequence.add_child(after)
    assert sequence.tick(None, AIState(), DELTA) == (None, Status.FAILURE)
    assert after.inputs == []


def test_sequence_caches_finished_children_until_reset():
    child = _Recorder(Status.SUCCESS)
    sequence = Sequence()
    sequence.add_child(child)
    sequence.tick(None, AIState(), DELTA)
    sequence.tick(None, AIState(), DELTA)
    assert len(child.inputs) == 1
    sequence.reset()
    assert child.resets == 1
    sequence.tick(None, AIState(), DELTA)
    assert len(child.inputs) == 2


def test_sequence_reevaluates_running_children():
    child = _Recorder(Status.RUNNING)
    sequence = Sequence()
    sequence.add_child(child)
    assert sequence.tick(None, AIState(), DELTA) == (None, Status.RUNNING)
    sequence.tick(None, AIState(), DELTA)
    assert len(child.inputs) == 2


def test_selector_stops_at_first_success():
    first = _Recorder(Status.FAILURE, output="first")
    second = _Recorder(Status.SUCCESS)
    third = _Recorder(Status.SUCCESS)
    selector = Selector()
    for node in (first, second, third):
        selector.add_child(node)
    assert selector.tick("input", AIState(), DELTA) == (None, Status.SUCCESS)
    assert first.inputs == ["input"]
    assert second.inputs == ["first"]
    assert third.inputs == []


def test_selector_fails_when_no_child_succeeds():
    selector = Selector()
    running = _Recorder(Status.RUNNING)
    failing = _Recorder(Status.FAILURE)
    selector.add_child(running)
    selector.add_child(failing)
    assert selector.tick(None, AIState(), DELTA) == (None, Status.FAILURE)
    assert len(failing.inputs) == 1
    selector.reset()
    assert running.resets == 1 and failing.resets == 1