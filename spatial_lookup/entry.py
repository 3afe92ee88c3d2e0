from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

from .index import Bounds
from .records import PolygonRecord
from .tester import ContainmentTester


@dataclass(frozen=True)
class LookupEntry:
    """The unit stored in the index: box + prepared tester + source record.

    ``bounding_box`` is always the envelope of ``record.geometry``; use
    ``from_record`` rather than building one by hand.
    """

    bounding_box: Bounds
    tester: ContainmentTester
    record: PolygonRecord

    @classmethod
    def from_record(cls, record: PolygonRecord) -> "LookupEntry":
        min_x, min_y, max_x, max_y = record.geometry.bounds
        return cls(
            bounding_box=(float(min_x), float(min_y), float(max_x), float(max_y)),
            tester=ContainmentTester(record.geometry),
            record=record,
        )

    def intersects(self, x: float, y: float) -> bool:
        return self.tester.intersects(x, y)

    def value(self, attribute_name: str) -> Optional[str]:
        """Attribute value as a string; None if missing or null.

        Non-string values (numbers, booleans, nested objects) are rendered as
        their JSON text, e.g. 42 -> "42", True -> "true".
        """
        v = self.record.attributes.get(attribute_name)
        if v is None:
            return None
        return v if isinstance(v, str) else json.dumps(v, ensure_ascii=False)
