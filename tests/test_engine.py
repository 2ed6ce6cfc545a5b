from gloomdelve.world.engine import Engine, SpeedScheduler


class Recorder:
    def __init__(self, name, log, speed=1000):
        self.name = name
        self.log = log
        self.speed = speed

    def act(self):
        self.log.append(self.name)


class Waiter(Recorder):
    """Stands in for the player: locks the engine on every turn."""

    def __init__(self, name, log, engine):
        super().__init__(name, log)
        self.engine = engine

    def act(self):
        super().act()
        self.engine.lock()


def test_faster_actor_gets_more_turns_with_stable_tie_break():
    log = []
    sched = SpeedScheduler()
    sched.add(Recorder("slow", log, speed=1000))
    sched.add(Recorder("fast", log, speed=2000))

    order = [sched.next().name for _ in range(6)]
    assert order == ["fast", "slow", "fast", "fast", "slow", "fast"]


def test_removed_actor_is_skipped_and_adding_twice_is_ignored():
    log = []
    sched = SpeedScheduler()
    a = Recorder("a", log)
    b = Recorder("b", log)
    sched.add(a)
    sched.add(a)
    sched.add(b)
    assert len(sched) == 2

    assert sched.remove(a) is True
    assert sched.remove(a) is False
    assert [sched.next().name for _ in range(3)] == ["b", "b", "b"]
    assert a not in sched


def test_engine_runs_until_player_locks_and_resumes_on_unlock():
    log = []
    engine = Engine()
    engine.scheduler.add(Waiter("player", log, engine))
    engine.scheduler.add(Recorder("bat", log))

    engine.start()
    assert log == ["player"]
    assert engine.locked is True

    engine.unlock()
    assert log == ["player", "bat", "player"]
    assert engine.turns == 3


def test_engine_locks_itself_when_no_actors_remain():
    engine = Engine()
    engine.start()
    assert engine.locked is True
    assert engine.turns == 0


def test_halt_is_terminal():
    log = []
    engine = Engine()
    engine.scheduler.add(Waiter("player", log, engine))
    engine.start()
    engine.halt()

    engine.unlock()
    engine.start()
    assert engine.halted is True
    assert engine.locked is True
    assert log == ["player"]


def test_unlock_from_inside_a_turn_does_not_nest_loops():
    engine = Engine()
    depth = {"now": 0, "max": 0, "acts": 0}

    class Reentrant:
        def act(self):
            depth["now"] += 1
            depth["max"] = max(depth["max"], depth["now"])
            depth["acts"] += 1
            engine.unlock()
            if depth["acts"] >= 3:
                engine.lock()
            depth["now"] -= 1

    engine.scheduler.add(Reentrant())
    engine.start()
    assert depth["acts"] == 3
    assert depth["max"] == 1
