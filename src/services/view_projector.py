"""Pure derivation of the dashboard view from the loaded registrations."""
from typing import Dict, Iterable, List, Sequence

from src.models.registration import Registration
from src.models.view_state import (
    ColumnVisibility,
    DashboardStats,
    DerivedView,
    SortOrder,
    TypeFilter,
    ViewState,
)
from src.utils.date_utils import format_registration_date


def compute_stats(records: Iterable[Registration]) -> DashboardStats:
    """Count all, student and professional registrations in one pass."""
    total = students = professionals = 0
    for record in records:
        total += 1
        if record.is_student():
            students += 1
        elif record.is_professional():
            professionals += 1
    return DashboardStats(total=total, students=students, professionals=professionals)


def matches_search(record: Registration, query: str) -> bool:
    """
    Case-insensitive literal substring match on name or email.

    The query is used as typed: no trimming, no tokenization.
    """
    if not query:
        return True
    needle = query.lower()
    return needle in record.name.lower() or needle in record.email.lower()


def matches_type(record: Registration, type_filter: TypeFilter) -> bool:
    wanted = type_filter.as_registration_type()
    return wanted is None or record.registration_type is wanted


def filter_registrations(records: Iterable[Registration], state: ViewState) -> List[Registration]:
    """Keep records passing both the type filter and the search query."""
    return [
        record for record in records
        if matches_type(record, state.type_filter) and matches_search(record, state.search_query)
    ]


def sort_registrations(records: Iterable[Registration], sort_order: SortOrder) -> List[Registration]:
    """
    Stable sort by submission time.

    Records with equal timestamps keep their input order in both directions.
    """
    reverse = sort_order is SortOrder.NEWEST
    # sorted() keeps ties in input order even with reverse=True
    return sorted(records, key=lambda record: record.submitted_at, reverse=reverse)


def project_view(
    records: Sequence[Registration],
    state: ViewState,
    columns: ColumnVisibility = ColumnVisibility(),
) -> DerivedView:
    """
    Derive counts, visible rows and visible columns.

    Args:
        records: Full, unfiltered registration collection
        state: Current search, type filter and sort order
        columns: Optional column visibility

    Returns:
        DerivedView; identical inputs always give an equal result
    """
    stats = compute_stats(records)
    rows = sort_registrations(filter_registrations(records, state), state.sort_order)
    return DerivedView(
        stats=stats,
        visible_rows=tuple(rows),
        visible_columns=columns.visible_columns(),
    )


def row_cells(record: Registration, columns: ColumnVisibility) -> Dict[str, str]:
    """
    Display cells for one table row, limited to the visible columns.

    Name, email and type are always present; company, phone and date are
    included only when their column is visible.
    """
    cells = {
        "name": record.name,
        "email": record.email,
        "type": record.registration_type.label,
    }
    if columns.company:
        cells["company"] = record.display_company()
    if columns.phone:
        cells["phone"] = record.display_phone()
    if columns.date:
        cells["date"] = format_registration_date(record.submitted_at)
    return cells
