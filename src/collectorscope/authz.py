"""RBAC records implied by exporter configuration.

The parsing core only forwards these; manifest generation turns them into
Role/ClusterRole objects.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class PolicyRule:
    """A single RBAC rule (apiGroups x resources x verbs)."""

    api_groups: tuple[str, ...]
    resources: tuple[str, ...]
    verbs: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class DynamicRolePolicy:
    """Rules an exporter needs, optionally scoped to namespaces.

    An empty ``namespaces`` tuple means cluster-wide.
    """

    rules: tuple[PolicyRule, ...]
    namespaces: tuple[str, ...] = field(default=())
