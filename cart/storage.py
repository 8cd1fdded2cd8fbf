"""
Durable key/value storage used by the cart.

Each backend exposes ``get(key)`` / ``set(key, value)`` over string values,
scoped to an ``origin``. Several handles may point at the same origin (one
per open page); after a successful write the ``storage_changed`` signal is
sent so the other handles can reload.
"""
import logging

from django.core.cache import caches
from django.dispatch import Signal

logger = logging.getLogger(__name__)

# Sent with sender=<writing storage handle>, origin=<str>, key=<str>
storage_changed = Signal()


class StorageError(Exception):
    """Base class for storage backend failures."""


class StorageUnavailable(StorageError):
    pass


class StorageQuotaExceeded(StorageError):
    pass


class BaseStorage:
    origin = 'default'

    def get(self, key):
        raise NotImplementedError

    def set(self, key, value):
        self._write(key, value)
        storage_changed.send(sender=self, origin=self.origin, key=key)

    def _write(self, key, value):
        raise NotImplementedError

    def __repr__(self):
        return f"<{self.__class__.__name__} origin={self.origin!r}>"


class MemoryStorage(BaseStorage):
    """
    Process-local storage. Handles created with the same origin share one
    area, the way two tabs of a browser share localStorage.
    """

    _areas = {}

    def __init__(self, origin='default', quota=None, enabled=True):
        self.origin = origin
        self.quota = quota
        self.enabled = enabled

    @classmethod
    def reset(cls):
        cls._areas.clear()

    @property
    def area(self):
        return self._areas.setdefault(self.origin, {})

    def _check_enabled(self):
        if not self.enabled:
            raise StorageUnavailable(f"Storage disabled for origin {self.origin!r}")

    def get(self, key):
        self._check_enabled()
        return self.area.get(key)

    def _write(self, key, value):
        self._check_enabled()
        if self.quota is not None:
            used = sum(len(k) + len(v) for k, v in self.area.items() if k != key)
            if used + len(key) + len(value) > self.quota:
                raise StorageQuotaExceeded(
                    f"Writing {key!r} would exceed the {self.quota} byte quota"
                )
        self.area[key] = value


class CacheStorage(BaseStorage):
    """Storage on top of a Django cache alias, keys namespaced by origin."""

    def __init__(self, origin, alias='default', timeout=None):
        self.origin = origin
        self.alias = alias
        self.timeout = timeout

    def _cache_key(self, key):
        return f"{self.origin}:{key}"

    def get(self, key):
        return caches[self.alias].get(self._cache_key(key))

    def _write(self, key, value):
        caches[self.alias].set(self._cache_key(key), value, timeout=self.timeout)


class SessionStorage(BaseStorage):
    """Storage backed by the visitor's Django session."""

    def __init__(self, session):
        self.session = session

    @property
    def origin(self):
        return self.session.session_key or 'anonymous'

    def get(self, key):
        return self.session.get(key)

    def _write(self, key, value):
        self.session[key] = value
        self.session.modified = True
