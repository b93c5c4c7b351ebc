"""CLI entry point: dashboard, record listing and CSV export."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv

from flightlog.config import ReportSettings, load_settings
from flightlog.db.engine import SessionLocal, get_engine, init_db
from flightlog.errors import FlightLogError
from flightlog.models import DashboardSnapshot, FlightFilter, FlightRecord
from flightlog.report.csv_export import default_export_filename, export_flights_csv
from flightlog.reporting import build_dashboard, utilization_percentages
from flightlog.storage.aircraft_hours import list_aircraft_manual_hours
from flightlog.storage.flights import list_flights
from flightlog.timeconv import epoch_to_calendar_day, format_duration, format_hours

logger = logging.getLogger(__name__)

_BAR_WIDTH = 20


def format_dashboard(snapshot: DashboardSnapshot, tz=timezone.utc) -> str:
    """Plain-text rendering of a dashboard snapshot."""
    lines = [
        f"Today:      {snapshot.daily_flight_count} flights, "
        f"{format_hours(snapshot.daily_minutes)}",
        f"This month: {snapshot.monthly_flight_count} flights, "
        f"{format_hours(snapshot.monthly_minutes)}",
        "",
        "Recent flights:",
    ]
    if not snapshot.recent_flights:
        lines.append("  (none)")
    lines.extend(f"  {format_flight(f, tz)}" for f in snapshot.recent_flights)

    lines += ["", "Aircraft utilization:"]
    if not snapshot.utilization:
        lines.append("  (none)")
    for row, pct in utilization_percentages(snapshot.utilization):
        bar = "#" * round(pct / 100 * _BAR_WIDTH)
        lines.append(
            f"  {row.aircraft_name:<12} {bar:<{_BAR_WIDTH}} {format_hours(row.total_minutes)}"
        )
    return "\n".join(lines)


def format_flight(flight: FlightRecord, tz=timezone.utc) -> str:
    return (
        f"{epoch_to_calendar_day(flight.date, tz)}  {flight.student} / "
        f"{flight.instructor}  {flight.aircraft}  {flight.flight_type.label}  "
        f"{flight.exercise}  {flight.takeoff_time}-{flight.landing_time}  "
        f"{format_duration(flight.duration)}  "
        f"{flight.landing_count} {flight.landing_type.label.lower()}"
    )


def _flight_filter(args: argparse.Namespace) -> FlightFilter:
    try:
        return FlightFilter(month=args.month, student=args.student, aircraft=args.aircraft)
    except ValueError:
        print(f"Error: --month must be YYYY-MM, got {args.month!r}")
        sys.exit(1)


def run_dashboard(settings: ReportSettings, now: datetime) -> None:
    tz = settings.tzinfo
    with SessionLocal() as session:
        flights = list_flights(session, tz=tz)
        manual = list_aircraft_manual_hours(session)
    snapshot = build_dashboard(flights, manual, now, tz=tz, recent_limit=settings.recent_limit)
    print(format_dashboard(snapshot, tz))


def run_flights(settings: ReportSettings, flight_filter: FlightFilter) -> None:
    tz = settings.tzinfo
    with SessionLocal() as session:
        flights = list_flights(session, flight_filter, tz)
    for flight in flights:
        print(format_flight(flight, tz))
    print(f"{len(flights)} flights")


def run_export(
    settings: ReportSettings,
    flight_filter: FlightFilter,
    output: Path | None,
    now: datetime,
) -> Path:
    tz = settings.tzinfo
    with SessionLocal() as session:
        flights = list_flights(session, flight_filter, tz)
    path = output or Path(default_export_filename(now.astimezone(tz).date()))
    path.write_bytes(export_flights_csv(flights, tz))
    logger.info("Exported %d flights to %s", len(flights), path)
    print(f"Exported {len(flights)} flights: {path}")
    return path


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--month", default="", help="Calendar month (YYYY-MM)")
    parser.add_argument("--student", default="", help="Exact student name")
    parser.add_argument("--aircraft", default="", help="Exact aircraft name")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="flightlog",
        description="Flight school logbook reporting",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--db-url", default=None,
        help="SQLAlchemy database URL (default: DATABASE_URL / DATA_DIR sqlite)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create database tables")
    subparsers.add_parser("dashboard", help="Show today's and this month's statistics")

    flights_parser = subparsers.add_parser("flights", help="List logged flights")
    _add_filter_arguments(flights_parser)

    export_parser = subparsers.add_parser("export", help="Export flights to CSV")
    _add_filter_arguments(export_parser)
    export_parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output file (default: flight-log-YYYY-MM-DD.csv)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    engine = get_engine(args.db_url)
    now = datetime.now(timezone.utc)

    try:
        if args.command == "init-db":
            init_db(engine)
            print("Database tables created")
        elif args.command == "dashboard":
            run_dashboard(settings, now)
        elif args.command == "flights":
            run_flights(settings, _flight_filter(args))
        elif args.command == "export":
            run_export(settings, _flight_filter(args), args.output, now)
    except FlightLogError as exc:
        print(f"Error: {exc.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
