"""Waits for events on file descriptors and runs the matching callbacks."""

from __future__ import annotations

import select
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Dict, List

from sponge.file_descriptor import FileDescriptor

Callback = Callable[[], None]
Interest = Callable[[], bool]


class Direction(IntEnum):
    """Whether a rule waits for its fd to be readable or writable."""

    IN = select.POLLIN
    OUT = select.POLLOUT


class Result(Enum):
    """The outcome of one call to EventLoop.wait_next_event."""

    SUCCESS = "success"
    TIMEOUT = "timeout"
    EXIT = "exit"


def _always() -> bool:
    return True


def _nothing() -> None:
    return None


@dataclass
class _Rule:
    fd: FileDescriptor
    direction: Direction
    callback: Callback
    interest: Interest
    cancel: Callback

    def service_count(self) -> int:
        if self.direction is Direction.IN:
            return self.fd.read_count()
        return self.fd.write_count()


class EventLoop:
    """Holds rules and polls their file descriptors, calling back the ready ones."""

    def __init__(self) -> None:
        self._rules: List[_Rule] = []

    def add_rule(
        self,
        fd: FileDescriptor,
        direction: Direction,
        callback: Callback,
        interest: Interest = _always,
        cancel: Callback = _nothing,
    ) -> None:
        """Call `callback` whenever `fd` is ready in `direction` and `interest()` is true."""
        self._rules.append(_Rule(fd.duplicate(), Direction(direction), callback, interest, cancel))

    def wait_next_event(self, timeout_ms: int) -> Result:
        """Poll once and run the callbacks of the ready rules.

        Returns Result.EXIT when nothing is left to poll or polling was
        interrupted, Result.TIMEOUT when nothing became ready in time, and
        Result.SUCCESS otherwise. Raises RuntimeError on a polling error, on an
        error reported for a descriptor, or when a callback neither reads nor
        writes its fd while remaining interested.
        """
        active: List[tuple[_Rule, int]] = []
        for rule in self._rules:
            if rule.direction is Direction.IN and rule.fd.eof():
                rule.cancel()
                continue
            if rule.fd.closed():
                rule.cancel()
                continue
            events = int(rule.direction) if rule.interest() else 0
            active.append((rule, events))
        self._rules = [rule for rule, _ in active]

        if not any(events for _, events in active):
            return Result.EXIT

        masks: Dict[int, int] = {}
        for rule, events in active:
            fd_num = rule.fd.fd_num()
            masks[fd_num] = masks.get(fd_num, 0) | events

        poller = select.poll()
        for fd_num, mask in masks.items():
            poller.register(fd_num, mask)

        try:
            ready = poller.poll(timeout_ms)
        except InterruptedError:
            return Result.EXIT
        except OSError as exc:
            raise RuntimeError(f"poll: {exc}") from exc

        if not ready:
            return Result.TIMEOUT

        revents_by_fd = dict(ready)
        kept: List[_Rule] = []
        for index, (rule, events) in enumerate(active):
            revents = revents_by_fd.get(rule.fd.fd_num(), 0)
            if revents & (select.POLLERR | select.POLLNVAL):
                self._rules = kept + [r for r, _ in active[index:]]
                raise RuntimeError("EventLoop: error on polled file descriptor")

            poll_ready = bool(revents & events)
            poll_hup = bool(revents & select.POLLHUP)
            if poll_hup and events and not poll_ready:
                rule.cancel()
                continue

            if poll_ready:
                count_before = rule.service_count()
                rule.callback()
                if count_before == rule.service_count() and rule.interest():
                    self._rules = kept + [r for r, _ in active[index:]]
                    raise RuntimeError(
                        "EventLoop: busy wait detected: callback did not read/write fd and is still interested"
                    )

            kept.append(rule)

        self._rules = kept
        return Result.SUCCESS