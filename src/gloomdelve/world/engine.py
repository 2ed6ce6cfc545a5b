from __future__ import annotations

import heapq
import logging
from itertools import count
from typing import Dict, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

DEFAULT_SPEED = 1000


class Actor(Protocol):
    """Anything the scheduler can give a turn to."""

    def act(self) -> None: ...


class SpeedScheduler:
    """Time-ordered actor queue.

    Each turn costs ``1000 / speed`` time units, so an actor with speed 2000
    acts twice for every turn of a speed-1000 actor. Ties are broken by join
    order, which keeps turn order deterministic. Removal is lazy: a removed
    actor still in the heap is skipped when popped.
    """

    def __init__(self) -> None:
        self._heap: List[Tuple[float, int, int]] = []
        self._actors: Dict[int, Actor] = {}
        self._join_order = count()
        self.time: float = 0.0

    def __len__(self) -> int:
        return len(self._actors)

    def __contains__(self, actor: object) -> bool:
        return id(actor) in self._actors

    @staticmethod
    def _duration(actor: Actor) -> float:
        speed = getattr(actor, "speed", DEFAULT_SPEED) or DEFAULT_SPEED
        return DEFAULT_SPEED / float(speed)

    def add(self, actor: Actor) -> None:
        if id(actor) in self._actors:
            return
        self._actors[id(actor)] = actor
        heapq.heappush(self._heap, (self.time + self._duration(actor), next(self._join_order), id(actor)))
        logger.debug("Scheduled %s (roster size %d)", actor, len(self._actors))

    def remove(self, actor: Actor) -> bool:
        if self._actors.pop(id(actor), None) is None:
            return False
        logger.debug("Unscheduled %s (roster size %d)", actor, len(self._actors))
        return True

    def clear(self) -> None:
        self._heap.clear()
        self._actors.clear()

    def next(self) -> Optional[Actor]:
        """Pop the next actor due and reschedule it for its following turn."""
        while self._heap:
            when, _order, key = heapq.heappop(self._heap)
            actor = self._actors.get(key)
            if actor is None:
                continue
            self.time = when
            heapq.heappush(self._heap, (when + self._duration(actor), next(self._join_order), key))
            return actor
        return None


class Engine:
    """The turn gate between the screen layer and the world simulation.

    While unlocked, the engine hands out turns until an actor (the player,
    waiting for input) locks it again. ``unlock`` called from inside an
    actor's turn does not start a nested loop; the running loop picks the
    new state up. ``halt`` is terminal: nothing runs afterwards.
    """

    def __init__(self, scheduler: Optional[SpeedScheduler] = None) -> None:
        self.scheduler = scheduler or SpeedScheduler()
        self._locked = True
        self._halted = False
        self._running = False
        self.turns: int = 0

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def halted(self) -> bool:
        return self._halted

    def start(self) -> None:
        logger.info("Engine started with %d actors", len(self.scheduler))
        self.unlock()

    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        if self._halted:
            logger.debug("unlock() ignored; engine halted")
            return
        self._locked = False
        self._run()

    def halt(self) -> None:
        if self._halted:
            return
        self._halted = True
        self._locked = True
        logger.info("Engine halted after %d turns", self.turns)

    def _run(self) -> None:
        if self._running:
            return
        self._running = True
        try:
            while not self._locked and not self._halted:
                actor = self.scheduler.next()
                if actor is None:
                    logger.debug("No actors left to schedule; locking")
                    self._locked = True
                    break
                self.turns += 1
                actor.act()
        finally:
            self._running = False
