"""Aircraft utilization: flight minutes merged with manually logged hours."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from flightlog.models import AircraftKey, ManualHourEntry, UtilizationRow


def _row_sort_key(row: UtilizationRow) -> tuple:
    # Descending minutes, then name; the id separates same-named aircraft.
    aircraft_id = row.aircraft_id if row.aircraft_id is not None else -1
    return (-row.total_minutes, row.aircraft_name, aircraft_id)


def merge_utilization(
    flight_minutes: Mapping[AircraftKey, int],
    manual_entries: Iterable[ManualHourEntry],
    labels: Mapping[AircraftKey, str] | None = None,
) -> list[UtilizationRow]:
    """Combine per-aircraft flight minutes with manual hour entries.

    Every aircraft present in either source gets one row whose total is its
    flight minutes plus its manual hours * 60. Rows are sorted by total
    minutes descending, ties by aircraft name ascending.

    Minutes keyed by name (flights logged without a roster id) are credited
    to the roster aircraft carrying that name, when exactly one does.

    Args:
        flight_minutes: Minutes flown per aircraft key (roster id or name).
        manual_entries: Manual hour totals. Several entries for the same
            aircraft are summed.
        labels: Display names for id-keyed flight minutes. The roster name
            on a manual entry takes precedence.
    """
    totals: dict[AircraftKey, int] = {}
    names: dict[AircraftKey, str] = {}

    for key, minutes in flight_minutes.items():
        totals[key] = totals.get(key, 0) + minutes
        names[key] = (labels or {}).get(key, str(key))

    for entry in manual_entries:
        key = entry.aircraft_key
        totals[key] = totals.get(key, 0) + entry.total_minutes
        names[key] = entry.aircraft_name

    ids_by_name: dict[str, list[int]] = {}
    for key in totals:
        if isinstance(key, int):
            ids_by_name.setdefault(names[key], []).append(key)

    for key in [k for k in totals if isinstance(k, str)]:
        ids = ids_by_name.get(key, [])
        if len(ids) == 1:
            totals[ids[0]] += totals.pop(key)
            del names[key]

    rows = [
        UtilizationRow(
            aircraft_name=names[key],
            total_minutes=minutes,
            aircraft_id=key if isinstance(key, int) else None,
        )
        for key, minutes in totals.items()
    ]
    rows.sort(key=_row_sort_key)
    return rows


def max_utilization(rows: list[UtilizationRow]) -> int | None:
    """Largest total in a sorted utilization table, or None when it is empty."""
    return rows[0].total_minutes if rows else None


def utilization_percentages(rows: list[UtilizationRow]) -> list[tuple[UtilizationRow, float]]:
    """Pair each row with its bar width (0-100) relative to the largest row."""
    peak = max_utilization(rows)
    if not peak:
        return [(row, 0.0) for row in rows]
    return [(row, row.total_minutes / peak * 100) for row in rows]
