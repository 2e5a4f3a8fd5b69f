"""Identifier generators for new user records.

``xid`` ids are 12 raw bytes — 4-byte big-endian Unix seconds, 3-byte
machine id, 2-byte process id, 3-byte counter — rendered as 20 lowercase
base32hex characters.  Because the timestamp leads, ids sort by creation
second.  The byte layout and encoding match ``rs/xid``, so ids from both
are interchangeable.
"""

from __future__ import annotations

import base64
import hashlib
import os
import socket
import threading
import time
import uuid

from user_service.registry import register_id_generator


class BaseIdGenerator:
    """Produce a new, never-reused identifier on every call."""

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def new_id(self) -> str:
        raise NotImplementedError

    def __call__(self) -> str:
        return self.new_id()


@register_id_generator("xid")
class XidGenerator(BaseIdGenerator):
    """Globally unique, sortable 20-character ids."""

    _COUNTER_MASK = 0xFFFFFF

    def __init__(self, clock=time.time) -> None:
        self._clock = clock
        self._machine_id = self._read_machine_id()
        self._pid = os.getpid() & 0xFFFF
        self._counter = int.from_bytes(os.urandom(3), "big")
        self._lock = threading.Lock()

    def new_id(self) -> str:
        with self._lock:
            self._counter = (self._counter + 1) & self._COUNTER_MASK
            counter = self._counter

        raw = (
            int(self._clock()).to_bytes(4, "big")
            + self._machine_id
            + self._pid.to_bytes(2, "big")
            + counter.to_bytes(3, "big")
        )
        return base64.b32hexencode(raw).decode("ascii").rstrip("=").lower()

    @staticmethod
    def _read_machine_id() -> bytes:
        hostname = socket.gethostname()
        if not hostname:
            return os.urandom(3)
        return hashlib.md5(hostname.encode("utf-8"), usedforsecurity=False).digest()[:3]


@register_id_generator("uuid4")
class UUID4Generator(BaseIdGenerator):
    """Random UUID strings (not sortable)."""

    def new_id(self) -> str:
        return str(uuid.uuid4())
