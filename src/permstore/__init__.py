"""Hierarchical, permissioned key-value store.

Stores form a tree addressed by colon-separated paths. Every field carries a
permission, declared once per store class:

>>> from permstore import Store, restrict
>>> @restrict(secret="none", version="r")
... class Settings(Store):
...     pass
>>> settings = Settings()
>>> settings.write("profile:name", "Ann")
'Ann'
>>> settings.entries()
{'profile': {'name': 'Ann'}}
"""

from permstore.errors import (
    InvalidPathError,
    NotAStoreError,
    PermissionDeniedError,
    PermStoreError,
    ReservedNameError,
)
from permstore.permission import (
    Permission,
    PermissionRegistry,
    declare_permission,
    get_registry,
    resolve_permission,
    restrict,
)
from permstore.store import Store

__all__ = [
    "InvalidPathError",
    "NotAStoreError",
    "Permission",
    "PermissionDeniedError",
    "PermissionRegistry",
    "PermStoreError",
    "ReservedNameError",
    "Store",
    "declare_permission",
    "get_registry",
    "resolve_permission",
    "restrict",
]
