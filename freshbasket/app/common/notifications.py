"""Toast-style messages passed from the data-fetch boundary to the pages.

Producers publish onto a channel; the page layer drains it into Flask
flash messages right before rendering.
"""

from __future__ import annotations

import queue
from dataclasses import dataclass
from typing import List

from flask import flash


@dataclass(frozen=True)
class Notification:
    level: str  # error | info | success
    message: str


class NotificationChannel:
    def __init__(self) -> None:
        self._queue: "queue.SimpleQueue[Notification]" = queue.SimpleQueue()

    def publish(self, level: str, message: str) -> None:
        self._queue.put(Notification(level=level, message=message))

    def error(self, message: str) -> None:
        self.publish("error", message)

    def info(self, message: str) -> None:
        self.publish("info", message)

    def drain(self) -> List[Notification]:
        items: List[Notification] = []
        while True:
            try:
                items.append(self._queue.get_nowait())
            except queue.Empty:
                return items


def flash_notifications(channel: NotificationChannel) -> int:
    notes = channel.drain()
    for note in notes:
        flash(note.message, note.level)
    return len(notes)
