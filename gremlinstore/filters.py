"""Dimension filters used to select observations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Dimension:
    """A dimension name with the option values selected for it."""

    name: str = ""
    options: List[str] = field(default_factory=list)


@dataclass
class DimensionFilters:
    """A list of dimension filters and an optional published flag."""

    dimensions: Optional[List[Dimension]] = None
    published: Optional[bool] = None

    def is_empty(self) -> bool:
        """True if there are no dimensions, or none has both a name and options."""
        return not any(dim.name and dim.options for dim in self.dimensions or ())