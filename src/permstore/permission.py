"""Field permissions and the process-wide permission registry.

Permissions are declared per store class and field name, independent of any
store instance. When a field is accessed, the permission is resolved by
walking the class ancestry of the instance: the nearest class declaring the
field wins. If no class declares it, the default policy of the instance is
used.

>>> @restrict(secret="none", version="r")
... class Config(Store):
...     pass
"""

from __future__ import annotations

import logging
import typing as t
import weakref
from enum import Enum

if t.TYPE_CHECKING:
    from permstore.store import Store

logger = logging.getLogger(__name__)

StoreT = t.TypeVar("StoreT", bound="type[Store]")


class Permission(str, Enum):
    """Access rule of a single store field."""

    READ = "r"
    WRITE = "w"
    READ_WRITE = "rw"
    NONE = "none"

    @property
    def readable(self) -> bool:
        """Whether the field may be read."""
        return self in (Permission.READ, Permission.READ_WRITE)

    @property
    def writable(self) -> bool:
        """Whether the field may be written."""
        return self in (Permission.WRITE, Permission.READ_WRITE)

    def __str__(self) -> str:
        return self.value


PermissionLike = t.Union[Permission, str]


class PermissionRegistry:
    """Type-keyed table of declared field permissions.

    Classes are held weakly, so declaring permissions on a class does not
    keep it alive.
    """

    def __init__(self) -> None:
        self._declarations: weakref.WeakKeyDictionary[
            type,
            dict[str, Permission],
        ] = weakref.WeakKeyDictionary()

    def declare(
        self,
        owner_type: type[Store],
        field_name: str,
        permission: PermissionLike | None = None,
    ) -> Permission:
        """Record the permission of a field for a store class.

        Declaring the same field twice on the same class overwrites the
        former declaration.

        Args:
            owner_type: Store class the declaration belongs to.
            field_name: Name of the field.
            permission: Permission of the field. If omitted, the default
                policy configured on `owner_type` at this moment is used.

        Returns:
            The permission that has been recorded.

        Raises:
            ValueError: If the permission is not a valid permission value.
        """
        resolved = Permission(
            owner_type.DEFAULT_POLICY if permission is None else permission,
        )
        owner_declarations = self._declarations.setdefault(owner_type, {})
        former = owner_declarations.get(field_name)
        if former is not None and former is not resolved:
            logger.debug(
                "Overwriting permission of %s.%s from '%s' to '%s'.",
                owner_type.__name__,
                field_name,
                former,
                resolved,
            )
        else:
            logger.debug(
                "Declared permission '%s' for %s.%s.",
                resolved,
                owner_type.__name__,
                field_name,
            )
        owner_declarations[field_name] = resolved
        return resolved

    def lookup(self, owner_type: type, field_name: str) -> Permission | None:
        """Permission declared on exactly this class, if any."""
        return self._declarations.get(owner_type, {}).get(field_name)

    def declarations(self, owner_type: type) -> dict[str, Permission]:
        """Own declarations of a class (without inherited ones)."""
        return dict(self._declarations.get(owner_type, {}))

    def resolve(self, instance: Store, field_name: str) -> Permission:
        """Effective permission of a field on a store instance.

        Args:
            instance: Store the field belongs to.
            field_name: Name of the field.

        Returns:
            Permission of the nearest class in the ancestry declaring the
            field, or the default policy of the instance.
        """
        for owner_type in type(instance).__mro__:
            permission = self.lookup(owner_type, field_name)
            if permission is not None:
                return permission
        return instance.default_policy


_registry = PermissionRegistry()


def get_registry() -> PermissionRegistry:
    """Process-wide permission registry."""
    return _registry


def declare_permission(
    owner_type: type[Store],
    field_name: str,
    permission: PermissionLike | None = None,
) -> Permission:
    """Declare the permission of a field in the process-wide registry.

    Args:
        owner_type: Store class the declaration belongs to.
        field_name: Name of the field.
        permission: Permission of the field. If omitted, the default policy
            configured on `owner_type` at this moment is used.

    Returns:
        The permission that has been recorded.
    """
    return _registry.declare(owner_type, field_name, permission)


def resolve_permission(instance: Store, field_name: str) -> Permission:
    """Effective permission of a field, see `PermissionRegistry.resolve`."""
    return _registry.resolve(instance, field_name)


def restrict(
    **field_permissions: PermissionLike | None,
) -> t.Callable[[StoreT], StoreT]:
    """Class decorator declaring field permissions of a store class.

    A value of `None` declares the field with the default policy the class
    has at decoration time.

    ```python
    @restrict(secret="none", name=None)
    class Profile(Store):
        DEFAULT_POLICY = Permission.READ
    ```

    Args:
        field_permissions: Mapping of field name to permission.

    Returns:
        Decorator registering the permissions and returning the class as is.
    """

    def decorator(owner_type: StoreT) -> StoreT:
        for field_name, permission in field_permissions.items():
            declare_permission(owner_type, field_name, permission)
        return owner_type

    return decorator
