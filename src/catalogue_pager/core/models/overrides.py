"""
Module: core.models.overrides

Purpose:
    Per-item override maps keyed by item index. Each override kind has
    its own typed record and its own map, so values are coerced once on
    entry and cannot drift in type when maps are re-keyed after a reorder.

Key Classes:
    - BarcodeType: Barcode rendered on an item card
    - OverrideKind: The override families
    - LayoutOverride, BarcodeOverride, BioToggle, FooterNote, InternalsCount:
      Typed override records
    - ItemOverrides: Immutable bundle of all override maps
    - OverrideMismatchError: Override keys do not fit the item list

Dependencies:
    - core.models.layouts: LayoutTag

Used By:
    - pagination.grouper: Layout overrides
    - pagination.reorder: Re-keying after reorder
    - pagination.session: set/clear operations
    - output.renderer: Barcode, bio and footer flags
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Mapping, Sequence, Union

from .layouts import LayoutTag


class OverrideMismatchError(ValueError):
    """Override maps reference item indices that do not exist."""
    pass


class BarcodeType(str, Enum):
    EAN13 = "EAN-13"
    QR_CODE = "QR Code"
    NONE = "None"


class OverrideKind(str, Enum):
    """Override families, named after their ItemOverrides field."""

    LAYOUT = "layouts"
    BARCODE = "barcodes"
    AUTHOR_BIO = "author_bio"
    FOOTER_NOTE = "footer_notes"
    INTERNALS_COUNT = "internals_count"


@dataclass(frozen=True, slots=True)
class LayoutOverride:
    index: int
    value: LayoutTag
    kind = OverrideKind.LAYOUT


@dataclass(frozen=True, slots=True)
class BarcodeOverride:
    index: int
    value: BarcodeType
    kind = OverrideKind.BARCODE


@dataclass(frozen=True, slots=True)
class BioToggle:
    index: int
    value: bool
    kind = OverrideKind.AUTHOR_BIO


@dataclass(frozen=True, slots=True)
class FooterNote:
    index: int
    value: str
    kind = OverrideKind.FOOTER_NOTE


@dataclass(frozen=True, slots=True)
class InternalsCount:
    """Number of interior preview images on a `1L` page."""

    index: int
    value: int
    kind = OverrideKind.INTERNALS_COUNT


Override = Union[LayoutOverride, BarcodeOverride, BioToggle, FooterNote, InternalsCount]


def _coerce_internals(value: Any) -> int:
    count = int(value)
    if not 1 <= count <= 4:
        raise ValueError(f"internals count must be 1-4: {count}")
    return count


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


_COERCERS = {
    OverrideKind.LAYOUT: LayoutTag.parse,
    OverrideKind.BARCODE: BarcodeType,
    OverrideKind.AUTHOR_BIO: _coerce_bool,
    OverrideKind.FOOTER_NOTE: str,
    OverrideKind.INTERNALS_COUNT: _coerce_internals,
}


@dataclass(frozen=True)
class ItemOverrides:
    """
    All per-item override maps (immutable).

    Every map is sparse and keyed by the item's current index in the
    catalogue. Mutating operations return a new ItemOverrides.

    Attributes:
        layouts: Layout tag per item (default layout otherwise)
        barcodes: Barcode type per item (global barcode type otherwise)
        author_bio: Whether to show the author bio block
        footer_notes: Free-text note under the item card
        internals_count: Interior previews on `1L` pages

    Example:
        >>> ov = ItemOverrides().with_override(LayoutOverride(4, LayoutTag.ONE_UP))
        >>> ov.layouts
        {4: <LayoutTag.ONE_UP: '1-up'>}
    """

    layouts: Mapping[int, LayoutTag] = field(default_factory=dict)
    barcodes: Mapping[int, BarcodeType] = field(default_factory=dict)
    author_bio: Mapping[int, bool] = field(default_factory=dict)
    footer_notes: Mapping[int, str] = field(default_factory=dict)
    internals_count: Mapping[int, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Normalise keys to int and values to their typed form
        for kind in OverrideKind:
            raw = getattr(self, kind.value)
            coerce = _COERCERS[kind]
            normalised: dict[int, Any] = {}
            for key, value in raw.items():
                index = int(key)
                if index < 0:
                    raise OverrideMismatchError(
                        f"{kind.value} override has negative index {index}"
                    )
                normalised[index] = coerce(value)
            object.__setattr__(self, kind.value, normalised)

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def map_for(self, kind: OverrideKind) -> Mapping[int, Any]:
        return getattr(self, kind.value)

    def get(self, kind: OverrideKind, index: int, default: Any = None) -> Any:
        return self.map_for(kind).get(index, default)

    def max_index(self) -> int:
        """Largest index referenced by any map, or -1 when all are empty."""
        return max(
            (max(self.map_for(kind), default=-1) for kind in OverrideKind),
            default=-1,
        )

    def is_empty(self) -> bool:
        return all(not self.map_for(kind) for kind in OverrideKind)

    def validate(self, item_count: int) -> None:
        """
        Check every key addresses an existing item.

        Raises:
            OverrideMismatchError: If any key is >= item_count
        """
        for kind in OverrideKind:
            stray = sorted(i for i in self.map_for(kind) if i >= item_count)
            if stray:
                raise OverrideMismatchError(
                    f"{kind.value} overrides reference indices {stray} "
                    f"but only {item_count} items exist"
                )

    # ─────────────────────────────────────────────────────────────────────────
    # Edits
    # ─────────────────────────────────────────────────────────────────────────

    def with_override(self, override: Override) -> "ItemOverrides":
        """Return a copy with one override set."""
        updated = dict(self.map_for(override.kind))
        updated[override.index] = override.value
        return self._replace(override.kind, updated)

    def without_override(self, kind: OverrideKind, index: int) -> "ItemOverrides":
        """Return a copy with one override cleared (no-op if absent)."""
        if index not in self.map_for(kind):
            return self
        updated = dict(self.map_for(kind))
        del updated[index]
        return self._replace(kind, updated)

    def remap(self, order: Sequence[int]) -> "ItemOverrides":
        """
        Re-key all maps through a permutation.

        `order[j]` is the old index of the item now at position j, so
        the result holds `M'[j] = M[order[j]]` wherever M is defined.
        Overrides follow their item, not their old position.

        Args:
            order: New-to-old index mapping (flat old indices)

        Returns:
            New ItemOverrides keyed by new positions
        """
        remapped: dict[str, dict[int, Any]] = {}
        for kind in OverrideKind:
            old = self.map_for(kind)
            remapped[kind.value] = {
                new_index: old[old_index]
                for new_index, old_index in enumerate(order)
                if old_index in old
            }
        return ItemOverrides(**remapped)

    def _replace(self, kind: OverrideKind, mapping: dict[int, Any]) -> "ItemOverrides":
        values = {f.name: self.map_for(OverrideKind(f.name)) for f in fields(self)}
        values[kind.value] = mapping
        return ItemOverrides(**values)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """JSON form: string keys, enum values as their strings."""
        result: dict[str, dict[str, Any]] = {}
        for kind in OverrideKind:
            mapping = self.map_for(kind)
            if not mapping:
                continue
            result[kind.value] = {
                str(index): value.value if isinstance(value, Enum) else value
                for index, value in sorted(mapping.items())
            }
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[Any, Any]]) -> "ItemOverrides":
        unknown = set(data) - {kind.value for kind in OverrideKind}
        if unknown:
            raise ValueError(f"Unknown override kinds: {sorted(unknown)}")
        return cls(**{key: dict(value) for key, value in data.items()})
