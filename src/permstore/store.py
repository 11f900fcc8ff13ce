"""Hierarchical, permissioned key-value store.

A store is a node of a tree of nested stores. Fields are addressed by
colon-separated paths, where each segment enters one level of nesting and
the last segment names the field itself:

>>> store = Store()
>>> store["profile:name"] = "Ann"
>>> store.read("profile:name")
'Ann'

Permissions are only checked at the field which is actually read or written.
Intermediate stores are traversed without a permission check, since their
own fields carry their own permissions.

Fields may hold JSON primitives, nested stores, opaque lists or zero-argument
callables. The latter are lazy fields, which are evaluated on every read.
Writing a plain mapping promotes it into a nested store.
"""

from __future__ import annotations

import json
import logging
import typing as t

from permstore.errors import (
    NotAStoreError,
    PermissionDeniedError,
    ReservedNameError,
)
from permstore.helper import (
    JSONObject,
    JSONPrimitive,
    JSONValue,
    PathSegment,
    StorePath,
    is_lazy,
    is_plain_mapping,
    normalize_path_segment,
    split_path,
)
from permstore.permission import Permission, PermissionLike, resolve_permission

if t.TYPE_CHECKING:
    from typing_extensions import TypeAlias

logger = logging.getLogger(__name__)

StoreResult: TypeAlias = t.Union["Store", JSONPrimitive, t.Sequence[JSONValue]]
StoreValue: TypeAlias = t.Union[
    StoreResult,
    t.Mapping[str, t.Any],
    t.Callable[[], StoreResult],
]

INTRINSIC_ATTRIBUTES = ("default_policy",)
_RESERVED_NAMES = frozenset(normalize_path_segment(a) for a in INTRINSIC_ATTRIBUTES)


class Store:
    """Node of a permissioned store tree.

    Subclasses may provide initial field values in `FIELDS`. They are
    assigned on construction regardless of the field permissions, which
    allows seeding read-only and hidden fields:

    ```python
    @restrict(name="r", secret="none")
    class Profile(Store):
        FIELDS = {"name": "John", "secret": "hunter2"}
    ```

    Values of `FIELDS` are shared by all instances. Use a lazy field or
    `_set_field` in `__init__` for per-instance state.

    Args:
        default_policy: Permission used for fields without any declaration
            in the class ancestry. Defaults to the `DEFAULT_POLICY` of the
            class.
    """

    DEFAULT_POLICY: t.ClassVar[Permission] = Permission.READ_WRITE
    FIELDS: t.ClassVar[t.Mapping[PathSegment, StoreValue]] = {}

    def __init__(self, default_policy: PermissionLike | None = None):
        self._fields: dict[PathSegment, StoreValue] = {}
        self.default_policy = (
            type(self).DEFAULT_POLICY if default_policy is None else default_policy
        )
        # base classes first, so subclasses override inherited initial values
        for owner_type in reversed(type(self).__mro__):
            for field_name, value in vars(owner_type).get("FIELDS", {}).items():
                self._set_field(field_name, value)

    @classmethod
    def from_entries(
        cls,
        entries: t.Mapping[StorePath, StoreValue],
        *,
        default_policy: PermissionLike | None = None,
    ) -> Store:
        """Create a store and fill it with the given entries.

        Args:
            entries: Mapping of path to value, see `write_entries`.
            default_policy: Default policy of the new store.

        Returns:
            The filled store.
        """
        store = cls(default_policy=default_policy)
        store.write_entries(entries)
        return store

    @property
    def default_policy(self) -> Permission:
        """Fallback permission, also inherited by implicitly created stores."""
        return self._default_policy

    @default_policy.setter
    def default_policy(self, value: PermissionLike) -> None:
        self._default_policy = Permission(value)

    def allowed_to_read(self, field_name: PathSegment) -> bool:
        """Whether the resolved permission of a field allows reading it."""
        return resolve_permission(self, field_name).readable

    def allowed_to_write(self, field_name: PathSegment) -> bool:
        """Whether the resolved permission of a field allows writing it."""
        return resolve_permission(self, field_name).writable

    def custom_fields(self) -> list[PathSegment]:
        """Names of the fields managed by the store, in insertion order.

        Intrinsic attributes such as `default_policy` are never included.
        """
        return list(self._fields)

    def _assert_valid_field_name(self, field_name: PathSegment) -> None:
        """Reject field names colliding with an intrinsic attribute.

        Raises:
            ReservedNameError: If the name is reserved.
        """
        if normalize_path_segment(field_name) in _RESERVED_NAMES:
            msg = (
                f"Cannot access reserved property '{field_name}'. "
                f"The names {list(INTRINSIC_ATTRIBUTES)} belong to the store "
                f"itself and can not be used as field names."
            )
            raise ReservedNameError(msg)

    def _set_field(self, field_name: PathSegment, value: StoreValue) -> StoreValue:
        """Assign a field of this store without checking its permission.

        Meant for subclasses to initialize fields which are not writable
        from the outside, e.g. read-only or hidden state. Reserved names are
        still rejected and plain mappings are still promoted.

        Args:
            field_name: Name of the field on this store (no path).
            value: Value to be stored.

        Returns:
            The stored value. For mappings this is the promoted store.

        Raises:
            ReservedNameError: If the name is reserved.
        """
        self._assert_valid_field_name(field_name)
        if is_plain_mapping(value) and not isinstance(value, Store):
            logger.debug("Promoting mapping at '%s' into a store.", field_name)
            store = Store()
            store.write_entries(value)  # type: ignore[arg-type]
            value = store
        self._fields[field_name] = value
        return value

    def read(self, path: StorePath) -> StoreResult | None:
        """Read the value of a field.

        Lazy fields are evaluated and their result is returned.

        Args:
            path: Colon-separated path of the field.

        Returns:
            The value of the field or None if it holds no value.

        Raises:
            InvalidPathError: If the path contains an empty segment.
            ReservedNameError: If a segment is a reserved name.
            PermissionDeniedError: If the field may not be read.
            NotAStoreError: If an intermediate segment is no store.
        """
        return self._read_segments(split_path(path), path)

    def _read_segments(
        self,
        path_segments: list[PathSegment],
        path: StorePath,
    ) -> StoreResult | None:
        head, *rest = path_segments
        self._assert_valid_field_name(head)

        if not rest:
            if not self.allowed_to_read(head):
                raise PermissionDeniedError(path, "read")
            return self._evaluate(head)

        entry = self._evaluate(head)
        if not isinstance(entry, Store):
            msg = (
                f"Path '{path}' can not be read, because the entry '{head}' "
                f"holds {type(entry).__name__} and is not a store."
            )
            raise NotAStoreError(msg)
        return entry._read_segments(rest, path)

    def _evaluate(self, field_name: PathSegment) -> StoreResult | None:
        entry = self._fields.get(field_name)
        if is_lazy(entry):
            return entry()  # type: ignore[operator]
        return entry  # type: ignore[return-value]

    def write(self, path: StorePath, value: StoreValue) -> StoreValue:
        """Write the value of a field.

        Plain mappings are promoted into nested stores. Missing intermediate
        stores are created, inheriting the default policy of their parent.

        Args:
            path: Colon-separated path of the field.
            value: Value to be stored.

        Returns:
            The stored value. For mappings this is the promoted store.

        Raises:
            InvalidPathError: If the path contains an empty segment.
            ReservedNameError: If a segment is a reserved name.
            PermissionDeniedError: If the field may not be written.
            NotAStoreError: If an intermediate segment is no store.
        """
        return self._write_segments(split_path(path), path, value)

    def _write_segments(
        self,
        path_segments: list[PathSegment],
        path: StorePath,
        value: StoreValue,
    ) -> StoreValue:
        head, *rest = path_segments
        self._assert_valid_field_name(head)

        if not rest:
            if not self.allowed_to_write(head):
                raise PermissionDeniedError(path, "write")
            return self._set_field(head, value)

        entry = self._fields.get(head)
        if entry is None:
            logger.debug(
                "Creating store '%s' on the way to '%s' with policy '%s'.",
                head,
                path,
                self.default_policy,
            )
            entry = Store(default_policy=self.default_policy)
            self._fields[head] = entry

        if not isinstance(entry, Store):
            msg = (
                f"Path '{path}' can not be written, because the entry '{head}' "
                f"holds {type(entry).__name__} and is not a store."
            )
            raise NotAStoreError(msg)
        return entry._write_segments(rest, path, value)

    def write_entries(self, entries: t.Mapping[StorePath, StoreValue]) -> None:
        """Write multiple fields at once.

        Warning:
            This is not a transaction. If writing an entry fails, all
            entries written before remain written.

        Args:
            entries: Mapping of path to value.
        """
        for path, value in entries.items():
            self.write(path, value)

    def entries(self) -> JSONObject:
        """Readable snapshot of the store tree as plain nested dictionaries.

        Fields which may not be read are omitted. Lazy fields are evaluated
        and their current value is captured.

        Returns:
            Nested dictionary mirroring the store tree.
        """
        result: JSONObject = {}
        for field_name in self.custom_fields():
            try:
                value = self.read(field_name)
            except PermissionDeniedError as e:
                logger.debug("Omitting '%s' from entries: %s", field_name, e)
                continue
            if isinstance(value, Store):
                result[field_name] = value.entries()
            else:
                result[field_name] = value  # type: ignore[assignment]
        return result

    def to_json(self, **kwargs: t.Any) -> str:
        """Serialize the readable snapshot of the store tree to JSON.

        Args:
            kwargs: Forwarded to `json.dumps`.

        Returns:
            JSON document.
        """
        return json.dumps(self.entries(), **kwargs)

    def __getitem__(self, path: StorePath) -> StoreResult | None:
        return self.read(path)

    def __setitem__(self, path: StorePath, value: StoreValue) -> None:
        self.write(path, value)

    def __contains__(self, field_name: object) -> bool:
        """Checks if a field is set on this store (without nesting)."""
        return field_name in self._fields

    def __iter__(self) -> t.Iterator[PathSegment]:
        return iter(self.custom_fields())

    def __len__(self) -> int:
        """Number of custom fields on this store (without nesting)."""
        return len(self._fields)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(default_policy='{self.default_policy}', "
            f"fields={self.custom_fields()})"
        )
