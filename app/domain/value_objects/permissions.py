"""Permission structure value object.

A permission structure maps each protected Resource to the set of Actions a
role grants on it. Stored as JSON (resource -> list of actions); parsed and
validated into a PermissionSet at every store boundary so the rest of the
code never handles raw shapes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from app.domain.enums import Action, Resource
from app.domain.exceptions import ValidationError

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def _coerce_resource(value: Any) -> Resource | None:
    try:
        return Resource(value)
    except ValueError:
        return None


def _coerce_action(value: Any) -> Action | None:
    try:
        return Action(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class PermissionSet:
    """Immutable resource -> actions mapping. Additive only (no deny).

    Duplicate actions collapse; a resource present with an empty action list is
    kept (it grants nothing but is part of the structure).
    """

    grants: Mapping[Resource, frozenset[Action]] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> PermissionSet:
        return cls({})

    @classmethod
    def from_raw(cls, raw: Any, *, field_name: str = "permissions") -> PermissionSet:
        """Parse and validate a raw mapping of resource -> list of actions.

        Raises:
            ValidationError: raw is not a mapping, a key is not a valid resource,
                a value is not a list, or an action is not a valid action.
        """
        if isinstance(raw, PermissionSet):
            return raw
        if not isinstance(raw, Mapping):
            raise ValidationError(
                "Permissions must be an object mapping resources to action lists",
                field=field_name,
            )
        grants: dict[Resource, frozenset[Action]] = {}
        for key, actions in raw.items():
            resource = _coerce_resource(key)
            if resource is None:
                raise ValidationError(
                    f"Invalid resource '{key}'. Must be one of: {', '.join(Resource.values())}",
                    field=field_name,
                )
            if not isinstance(actions, _SEQUENCE_TYPES):
                raise ValidationError(
                    f"Actions for resource '{resource.value}' must be an array",
                    field=field_name,
                )
            parsed: set[Action] = set()
            for item in actions:
                action = _coerce_action(item)
                if action is None:
                    raise ValidationError(
                        f"Invalid action '{item}' for resource '{resource.value}'. "
                        f"Must be one of: {', '.join(Action.values())}",
                        field=field_name,
                    )
                parsed.add(action)
            grants[resource] = frozenset(parsed)
        return cls(grants)

    @classmethod
    def merge(cls, permission_sets: Iterable[PermissionSet]) -> PermissionSet:
        """Union of all given sets: per resource, the union of their actions."""
        merged: dict[Resource, set[Action]] = {}
        for permission_set in permission_sets:
            for resource, actions in permission_set.grants.items():
                merged.setdefault(resource, set()).update(actions)
        return cls({r: frozenset(a) for r, a in merged.items()})

    def union(self, other: PermissionSet) -> PermissionSet:
        return PermissionSet.merge((self, other))

    def allows(self, resource: Resource | str, action: Action | str) -> bool:
        """Return True if action is granted on resource. Unknown names fail closed."""
        r = _coerce_resource(resource)
        a = _coerce_action(action)
        if r is None or a is None:
            return False
        return a in self.grants.get(r, frozenset())

    def actions_for(self, resource: Resource | str) -> frozenset[Action]:
        r = _coerce_resource(resource)
        if r is None:
            return frozenset()
        return self.grants.get(r, frozenset())

    def to_dict(self) -> dict[str, list[str]]:
        """JSON shape: resource -> actions, both in enum declaration order."""
        return {
            resource.value: [a.value for a in Action if a in self.grants[resource]]
            for resource in Resource
            if resource in self.grants
        }

    def __bool__(self) -> bool:
        return bool(self.grants)
