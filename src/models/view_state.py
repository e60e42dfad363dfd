"""Dashboard view state models."""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from src.models.registration import Registration, RegistrationType

OPTIONAL_COLUMNS = ("phone", "company", "date")


class TypeFilter(str, Enum):
    """Registration type filter including the catch-all option."""

    ALL = "all"
    STUDENT = "student"
    PROFESSIONAL = "professional"

    def as_registration_type(self) -> Optional[RegistrationType]:
        if self is TypeFilter.ALL:
            return None
        return RegistrationType(self.value)


class SortOrder(str, Enum):
    """Ordering by submission time."""

    NEWEST = "newest"
    OLDEST = "oldest"


@dataclass(frozen=True)
class ViewState:
    """Search, type filter and sort order chosen by the admin."""

    search_query: str = ""
    type_filter: TypeFilter = TypeFilter.ALL
    sort_order: SortOrder = SortOrder.NEWEST

    def replace(self, **changes) -> "ViewState":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def cleared(self) -> "ViewState":
        """Reset search and type filter, keeping the sort order."""
        return replace(self, search_query="", type_filter=TypeFilter.ALL)

    def is_filtered(self) -> bool:
        return bool(self.search_query) or self.type_filter is not TypeFilter.ALL


@dataclass(frozen=True)
class ColumnVisibility:
    """Which optional table columns are shown."""

    phone: bool = True
    company: bool = True
    date: bool = True

    def with_column(self, column: str, visible: bool) -> "ColumnVisibility":
        """
        Return a copy with one column shown or hidden.

        Raises:
            ValueError: If column is not an optional column
        """
        if column not in OPTIONAL_COLUMNS:
            raise ValueError(f"Unknown column: {column}")
        return replace(self, **{column: bool(visible)})

    def toggle(self, column: str) -> "ColumnVisibility":
        if column not in OPTIONAL_COLUMNS:
            raise ValueError(f"Unknown column: {column}")
        return self.with_column(column, not getattr(self, column))

    def visible_columns(self) -> FrozenSet[str]:
        return frozenset(column for column in OPTIONAL_COLUMNS if getattr(self, column))


@dataclass(frozen=True)
class DashboardStats:
    """Counts over the whole, unfiltered collection."""

    total: int = 0
    students: int = 0
    professionals: int = 0


@dataclass(frozen=True)
class DerivedView:
    """Everything the dashboard renders for one set of inputs."""

    stats: DashboardStats = field(default_factory=DashboardStats)
    visible_rows: Tuple[Registration, ...] = ()
    visible_columns: FrozenSet[str] = frozenset(OPTIONAL_COLUMNS)

    @property
    def total_count(self) -> int:
        return self.stats.total

    @property
    def student_count(self) -> int:
        return self.stats.students

    @property
    def professional_count(self) -> int:
        return self.stats.professionals

    @property
    def shown_count(self) -> int:
        return len(self.visible_rows)
