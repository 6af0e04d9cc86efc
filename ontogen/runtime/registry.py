"""
ontogen.runtime.registry — Interface type -> wrapper factory registry.

Generated wrapper modules register themselves at import time. Writes are
copy-on-write under a lock, so readers never take the lock and never see
a half-updated mapping.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

Factory = Callable[[Any], Any]


class WrapperRegistry:
    def __init__(self):
        self._factories: dict[type, Factory] = {}
        self._lock = threading.Lock()

    def register(self, iface: type, factory: Factory) -> None:
        """Upsert: one entry per interface, the last registration wins."""
        with self._lock:
            factories = dict(self._factories)
            factories[iface] = factory
            self._factories = factories

    def unregister(self, iface: type) -> None:
        with self._lock:
            factories = dict(self._factories)
            factories.pop(iface, None)
            self._factories = factories

    def factory_for(self, iface: type) -> Optional[Factory]:
        return self._factories.get(iface)

    def registered_types(self) -> list[type]:
        return list(self._factories)

    def __contains__(self, iface: type) -> bool:
        return iface in self._factories

    def __len__(self) -> int:
        return len(self._factories)


# Process-wide registry used by generated code at import time.
default_registry = WrapperRegistry()
