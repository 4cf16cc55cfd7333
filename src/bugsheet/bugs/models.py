"""Bug records and tracker queries.

``Bug`` is the immutable record the whole pipeline works on.  ``BugQuery``
is opaque to the reconciliation core: it is built from settings, handed to a
:class:`~bugsheet.sources.protocol.BugSource`, and rendered into Bugzilla
REST parameters by the HTTP source.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

UPCOMING_SPRINT = "UpcomingSprint"
LOW_SEVERITY = "low"


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value else ()
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class Bug:
    """One issue-tracker entry with the fields classification and counting use.

    ``target_release`` and ``component`` are ordered; only their first
    element is significant.
    """

    id: int
    summary: str = ""
    status: str = ""
    severity: str = ""
    target_release: tuple[str, ...] = ()
    component: tuple[str, ...] = ()
    keywords: frozenset[str] = frozenset()
    sub_components: Mapping[str, tuple[str, ...]] = field(
        default_factory=dict, compare=False, hash=False, repr=False
    )

    @property
    def primary_component(self) -> str | None:
        """The classification key, or None for an ownerless bug."""
        return self.component[0] if self.component else None

    @property
    def primary_target_release(self) -> str | None:
        return self.target_release[0] if self.target_release else None

    @property
    def is_low_severity(self) -> bool:
        return self.severity == LOW_SEVERITY

    def has_keyword(self, keyword: str) -> bool:
        return keyword in self.keywords

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> Bug:
        """Build a bug from a Bugzilla REST ``bugs[]`` entry.

        Raises:
            KeyError: ``id`` is missing.
            ValueError: ``id`` is not an integer.
        """
        sub_components = {
            str(component): _as_tuple(names)
            for component, names in (data.get("sub_components") or {}).items()
        }
        return cls(
            id=int(data["id"]),
            summary=data.get("summary") or "",
            status=data.get("status") or "",
            severity=data.get("severity") or "",
            target_release=_as_tuple(data.get("target_release")),
            component=_as_tuple(data.get("component")),
            keywords=frozenset(_as_tuple(data.get("keywords"))),
            sub_components=sub_components,
        )

    def to_dict(self) -> dict[str, Any]:
        """Inverse of :meth:`from_api`, used by the fixture source and CLI."""
        return {
            "id": self.id,
            "summary": self.summary,
            "status": self.status,
            "severity": self.severity,
            "target_release": list(self.target_release),
            "component": list(self.component),
            "keywords": sorted(self.keywords),
            "sub_components": {k: list(v) for k, v in self.sub_components.items()},
        }


@dataclass(frozen=True)
class AdvancedQuery:
    """A Bugzilla boolean-chart condition (``f1``/``o1``/``v1``/``n1``)."""

    field: str
    op: str
    value: str
    negate: bool = False


@dataclass(frozen=True)
class BugQuery:
    """Search parameters for the tracker.

    Example:
        >>> query = BugQuery(product=("OpenShift Container Platform",), status=("NEW",))
        >>> query.to_params()
        [('product', 'OpenShift Container Platform'), ('status', 'NEW')]
    """

    classification: tuple[str, ...] = ()
    product: tuple[str, ...] = ()
    status: tuple[str, ...] = ()
    include_fields: tuple[str, ...] = ()
    advanced: tuple[AdvancedQuery, ...] = ()

    def to_params(self) -> list[tuple[str, str]]:
        """Render as Bugzilla REST query parameters (repeated keys allowed)."""
        params: list[tuple[str, str]] = []
        params.extend(("classification", v) for v in self.classification)
        params.extend(("product", v) for v in self.product)
        params.extend(("status", v) for v in self.status)
        if self.include_fields:
            params.append(("include_fields", ",".join(self.include_fields)))
        for i, condition in enumerate(self.advanced, start=1):
            params.append((f"f{i}", condition.field))
            params.append((f"o{i}", condition.op))
            params.append((f"v{i}", condition.value))
            if condition.negate:
                params.append((f"n{i}", "1"))
        return params

    def excluded_values(self, field_name: str) -> frozenset[str]:
        """Values an ``equals`` condition on ``field_name`` negates away."""
        return frozenset(
            c.value
            for c in self.advanced
            if c.field == field_name and c.op == "equals" and c.negate
        )

    def matches(self, bug: Bug) -> bool:
        """Apply the status and component exclusions locally.

        Used by sources that cannot push the query to a server. Fields a
        bug does not carry (classification, product) are not checked.
        """
        if self.status and bug.status not in self.status:
            return False
        excluded = self.excluded_values("component")
        return not (excluded and bug.primary_component in excluded)


def bugs_from_api(entries: Iterable[Mapping[str, Any]]) -> list[Bug]:
    return [Bug.from_api(entry) for entry in entries]


__all__ = [
    "UPCOMING_SPRINT",
    "LOW_SEVERITY",
    "Bug",
    "AdvancedQuery",
    "BugQuery",
    "bugs_from_api",
]
