"""Simple async pub/sub event bus"""

from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List
import asyncio
import logging

Subscriber = Callable[[Dict[str, Any]], Awaitable[None]]

class Bus:
    def __init__(self):
        self._subs: Dict[str, List[Subscriber]] = defaultdict(list)
        self._log = logging.getLogger("bus")

    def subscribe(self, topic: str, fn: Subscriber) -> None:
        self._subs[topic].append(fn)
        self._log.debug("subscribe: %s -> %s (total subscribers: %d)",
                        topic, getattr(fn, "__name__", str(fn)), len(self._subs[topic]))

    def unsubscribe(self, topic: str, fn: Subscriber) -> None:
        subs = self._subs.get(topic, [])
        if fn in subs:
            subs.remove(fn)

    def subscribers(self, topic: str) -> int:
        return len(self._subs.get(topic, []))

    async def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        subscribers = list(self._subs.get(topic, []))
        self._log.debug("publish: %s -> %d subscribers", topic, len(subscribers))
        if not subscribers:
            self._log.warning("publish: No subscribers for topic %s", topic)
            return

        # shallow copy per subscriber
        results = await asyncio.gather(*(fn(dict(payload)) for fn in subscribers), return_exceptions=True)
        for fn, result in zip(subscribers, results):
            if isinstance(result, Exception):
                self._log.error("publish: Subscriber %s raised exception: %s",
                                getattr(fn, "__name__", str(fn)), result, exc_info=result)

    def clear(self):
        self._subs.clear()
