"""Display records and strategy results.

Every strategy produces :class:`DisplayRecord` objects tagged with the
:class:`DetectionMethod` that found them, wrapped in a :class:`StrategyResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

UNKNOWN = "Unknown"

Dimension = Union[int, str]


class DetectionMethod(str, Enum):
    """Tag recording which strategy produced a display record."""

    SYSTEMINFO = "systeminfo"
    WMI = "wmi"
    SYSTEM_PROFILER = "system_profiler"
    XRANDR = "xrandr"
    FALLBACK = "fallback"


@dataclass
class DisplayRecord:
    """A single detected display.

    Attributes:
        id: 1-based position within one discovery call (not a hardware id).
        name: Reported name or a synthesized placeholder.
        detection_method: Strategy that produced the record.
        width: Horizontal resolution, or ``"Unknown"``.
        height: Vertical resolution, or ``"Unknown"``.
        vendor, main, builtin: Cross-platform query only.
        instance, physical_width_cm, physical_height_cm: WMI only.
        retina: system_profiler only.
        is_primary: xrandr only.
        note: Explanation attached to the fallback record.
    """

    id: int
    name: str
    detection_method: DetectionMethod
    width: Dimension = UNKNOWN
    height: Dimension = UNKNOWN
    vendor: Optional[str] = None
    main: Optional[bool] = None
    builtin: Optional[bool] = None
    instance: Optional[str] = None
    physical_width_cm: Optional[int] = None
    physical_height_cm: Optional[int] = None
    retina: Optional[bool] = None
    is_primary: Optional[bool] = None
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dict, omitting fields the strategy does not provide."""
        data: Dict[str, Any] = {"id": self.id, "name": self.name}
        if self.vendor is not None:
            data["vendor"] = self.vendor
        data["width"] = self.width
        data["height"] = self.height
        optional = (
            ("main", self.main),
            ("builtin", self.builtin),
            ("instance", self.instance),
            ("physical_width_cm", self.physical_width_cm),
            ("physical_height_cm", self.physical_height_cm),
            ("retina", self.retina),
            ("is_primary", self.is_primary),
        )
        for key, value in optional:
            if value is not None:
                data[key] = value
        data["detection_method"] = self.detection_method.value
        if self.note is not None:
            data["note"] = self.note
        return data


@dataclass(frozen=True)
class StrategyResult:
    """Outcome of one strategy attempt: records found, or empty."""

    method: DetectionMethod
    records: Tuple[DisplayRecord, ...] = field(default_factory=tuple)

    @property
    def found(self) -> bool:
        return len(self.records) > 0

    @classmethod
    def empty(cls, method: DetectionMethod) -> "StrategyResult":
        return cls(method=method)


def fallback_record() -> DisplayRecord:
    """The synthetic record returned when no strategy finds a display."""
    return DisplayRecord(
        id=1,
        name="Unknown Monitor",
        detection_method=DetectionMethod.FALLBACK,
        note="Unable to detect monitor details",
    )


__all__ = [
    "UNKNOWN",
    "DetectionMethod",
    "DisplayRecord",
    "StrategyResult",
    "fallback_record",
]
