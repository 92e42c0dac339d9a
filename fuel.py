#!/usr/bin/env python3
"""
Unified CLI for fuel economy tracking.

Commands:
  init      - Create a new fuel log file
  log       - Add a refuel entry
  edit      - Change fields of an existing entry
  delete    - Remove entries by id
  history   - View refuel history
  stats     - Show consumption and cost statistics
  series    - Show a chart series as a table
  vehicles  - List vehicle labels in the log
  import    - Merge entries from a JSON or CSV export
  export    - Write entries to a JSON or CSV file
  settings  - Show or change default vehicle, unit and currency
"""

import argparse
import logging
import math
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from fuellog import (
    EntryNotFoundError,
    EntryStore,
    FuelEntry,
    FuelLogError,
    FuelStats,
    SeriesName,
    Settings,
    create_log,
    export_csv,
    export_json,
    load_log,
    parse_import,
    reconcile,
    save_log,
    save_settings,
    select_export_entries,
)
from fuellog.calculations import MetricSummary, normalize_date

logger = logging.getLogger("fuel")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_number(value: Optional[float], decimals: int = 0) -> str:
    """Format a number for display, '-' when not computable."""
    return f"{value:,.{decimals}f}" if value is not None else "-"


def format_cost(cost: Optional[float], currency: str = "") -> str:
    """Format cost for display."""
    if cost is None:
        return "-"
    return f"{cost:,.2f} {currency}".rstrip()


def format_rate(value: Optional[float]) -> str:
    """Format a ratio with two decimals."""
    return format_number(value, 2)


def format_summary(summary: Optional[MetricSummary]) -> List[str]:
    """Avg/min/max/last cells for a metric summary."""
    if summary is None:
        return ["-", "-", "-", "-"]
    return [format_rate(v) for v in (summary.avg, summary.min, summary.max, summary.last)]


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def resolve_vehicle(args, settings: Settings) -> Optional[str]:
    """--vehicle wins, --all-vehicles clears, otherwise the default vehicle."""
    if getattr(args, "all_vehicles", False):
        return None
    if getattr(args, "vehicle", None):
        return args.vehicle
    return settings.vehicle


# =============================================================================
# Init command
# =============================================================================


def cmd_init(args):
    """Create a new fuel log file."""
    if args.log_file.exists():
        print(f"Error: File already exists: {args.log_file}")
        return 1

    settings = Settings()
    if args.vehicle:
        settings.default_vehicle = args.vehicle
    if args.unit:
        settings.fuel_unit = args.unit
    if args.currency:
        settings.currency = args.currency

    create_log(args.log_file, settings)
    print(f"Created {args.log_file}")
    return 0


# =============================================================================
# Log command
# =============================================================================


def cmd_log(args):
    """Add a refuel entry."""
    log = load_log(args.log_file)

    fields = dict(
        date=normalize_date(args.date) if args.date else date.today().isoformat(),
        odometer=args.odometer,
        fuel_amount=args.fuel,
        cost=args.cost,
        partial_fill=args.partial,
        vehicle=args.vehicle,
        fuel_type=args.fuel_type,
        location=args.location,
        notes=args.notes,
    )
    for name in ("odometer", "fuel_amount", "cost"):
        if fields[name] < 0 or not math.isfinite(fields[name]):
            label = name.replace("_", " ")
            print(f"Error: {label} must be a finite, non-negative number")
            return 1

    vehicle = args.vehicle or log.settings.vehicle
    print(f"Adding refuel entry to {args.log_file}:")
    print(f"  Date:     {fields['date']}")
    if vehicle:
        print(f"  Vehicle:  {vehicle}")
    print(f"  Odometer: {args.odometer:,.0f}")
    print(f"  Fuel:     {args.fuel:g} {log.settings.fuel_unit}")
    print(f"  Cost:     {format_cost(args.cost, log.settings.currency)}")
    print(f"  Fill:     {'partial' if args.partial else 'full'}")
    if args.location:
        print(f"  Location: {args.location}")
    if args.notes:
        print(f"  Notes:    {args.notes}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    entry = log.add_entry(**fields)
    save_log(args.log_file, log)
    print(f"Entry saved ({entry.id}).")
    return 0


# =============================================================================
# Edit / Delete commands
# =============================================================================


def cmd_edit(args):
    """Change fields of an existing entry."""
    log = load_log(args.log_file)

    changes = {}
    for attr, value in (
        ("date", normalize_date(args.date) if args.date else None),
        ("odometer", args.odometer),
        ("fuel_amount", args.fuel),
        ("cost", args.cost),
        ("vehicle", args.vehicle),
        ("fuel_type", args.fuel_type),
        ("location", args.location),
        ("notes", args.notes),
    ):
        if value is not None:
            changes[attr] = value
    if args.partial:
        changes["partial_fill"] = True
    if args.full:
        changes["partial_fill"] = False

    if not changes:
        print("Error: Nothing to change")
        return 1
    for name in ("odometer", "fuel_amount", "cost"):
        value = changes.get(name, 0)
        if value < 0 or not math.isfinite(value):
            label = name.replace("_", " ")
            print(f"Error: {label} must be a finite, non-negative number")
            return 1

    try:
        entry = log.store.update_entry(args.entry_id, **changes)
    except EntryNotFoundError as e:
        print(f"Error: {e}")
        return 1

    save_log(args.log_file, log)
    print(f"Updated {entry.id}: {', '.join(sorted(changes))}")
    return 0


def cmd_delete(args):
    """Remove entries by id."""
    log = load_log(args.log_file)

    try:
        log.store.delete_entries(args.entry_ids)
    except EntryNotFoundError as e:
        print(f"Error: {e}")
        return 1

    save_log(args.log_file, log)
    print(f"Deleted {len(args.entry_ids)} entr{'y' if len(args.entry_ids) == 1 else 'ies'}.")
    return 0


# =============================================================================
# History command
# =============================================================================


def make_history_table(
    entries: List[FuelEntry], show_ids: bool = False
) -> List[List[str]]:
    """Convert entries to table rows."""
    rows = []
    for entry in entries:
        row = [
            entry.date,
            entry.vehicle or "-",
            format_number(entry.odometer),
            format_number(entry.fuel_amount, 2),
            format_cost(entry.cost),
            format_rate(entry.price_per_unit),
            "partial" if entry.partial_fill else "full",
            truncate(entry.location, 20),
            truncate(entry.notes),
        ]
        if show_ids:
            row.insert(0, entry.id)
        rows.append(row)
    return rows


def cmd_history(args):
    """View refuel history."""
    log = load_log(args.log_file)
    vehicle = resolve_vehicle(args, log.settings)

    # Canonical order is oldest first; history reads newest first by default
    entries = log.entries(vehicle)
    if not args.asc:
        entries = list(reversed(entries))
    if args.since:
        entries = [e for e in entries if e.date >= args.since]

    total_cost = sum(e.cost for e in entries)
    total_fuel = sum(e.fuel_amount for e in entries)

    print(f"Vehicle: {vehicle or 'all'}")
    print(f"Total entries: {log.store.count}")
    if vehicle or args.since:
        print(f"Showing: {len(entries)} (filtered)")
    if entries:
        print(f"Total fuel: {total_fuel:,.2f} {log.settings.fuel_unit}")
        print(f"Total cost: {format_cost(total_cost, log.settings.currency)}")
    print()

    if not entries:
        print("No entries found.")
        return 0

    headers = [
        "Date",
        "Vehicle",
        "Odometer",
        "Fuel",
        "Cost",
        "Price/unit",
        "Fill",
        "Location",
        "Notes",
    ]
    if args.ids:
        headers.insert(0, "Id")
    print(
        tabulate(
            make_history_table(entries, show_ids=args.ids),
            headers=headers,
            tablefmt="simple",
        )
    )
    return 0


# =============================================================================
# Stats command
# =============================================================================


def make_stats_tables(stats: FuelStats, settings: Settings):
    """Return (totals rows, ratio rows, summary rows) for a stats report."""
    unit = settings.fuel_unit
    currency = settings.currency
    totals = [
        ["Fill-ups", str(stats.entry_count)],
        ["Segments", str(stats.segment_count)],
        ["Period", f"{stats.first_date} to {stats.last_date}"],
        ["Days", format_number(stats.total_days, 1)],
        ["Distance", format_number(stats.total_distance)],
        [f"Fuel ({unit})", format_number(stats.total_fuel, 2)],
        ["Cost", format_cost(stats.total_cost, currency)],
    ]
    ratios = [
        ["Cost per distance", format_rate(stats.cost_per_distance)],
        ["Cost per fill-up", format_rate(stats.cost_per_fillup)],
        ["Cost per day", format_rate(stats.cost_per_day)],
        ["Distance per day", format_rate(stats.distance_per_day)],
        ["Fuel per fill-up", format_rate(stats.fuel_per_fillup)],
        ["Days per fill-up", format_rate(stats.days_per_fillup)],
        ["Distance per fill-up", format_rate(stats.distance_per_fillup)],
        ["Fuel per day", format_rate(stats.fuel_per_day)],
        ["Distance per cost", format_rate(stats.distance_per_cost)],
    ]
    summaries = [
        [f"Consumption ({unit}/100)"] + format_summary(stats.consumption),
        [f"Price ({currency}/{unit})"] + format_summary(stats.price_per_unit),
    ]
    return totals, ratios, summaries


def cmd_stats(args):
    """Show consumption and cost statistics."""
    log = load_log(args.log_file)
    vehicle = resolve_vehicle(args, log.settings)
    stats = log.statistics(vehicle)

    print(f"Vehicle: {vehicle or 'all'}")
    print()
    if stats is None:
        print("No entries found.")
        return 0

    totals, ratios, summaries = make_stats_tables(stats, log.settings)
    print(tabulate(totals, tablefmt="simple"))
    print()
    print(
        tabulate(summaries, headers=["", "Avg", "Min", "Max", "Last"], tablefmt="simple")
    )
    print()
    print(tabulate(ratios, tablefmt="simple"))
    return 0


# =============================================================================
# Series command
# =============================================================================


def cmd_series(args):
    """Show a chart series as a table."""
    log = load_log(args.log_file)
    vehicle = resolve_vehicle(args, log.settings)
    points = log.series(args.name, vehicle)

    print(f"Vehicle: {vehicle or 'all'}")
    print(f"Series: {args.name}")
    print()
    if points is None:
        print("Insufficient data (need at least two points).")
        return 0

    rows = [[p.date, format_rate(p.value)] for p in points]
    print(tabulate(rows, headers=["Date", "Value"], tablefmt="simple"))
    return 0


# =============================================================================
# Vehicles command
# =============================================================================


def cmd_vehicles(args):
    """List vehicle labels in the log."""
    log = load_log(args.log_file)

    rows = []
    for label in log.vehicles:
        entries = log.entries(label)
        marker = "*" if label == log.settings.default_vehicle else ""
        rows.append([label + marker, len(entries), entries[-1].date])

    if not rows:
        print("No vehicles found.")
        return 0
    print(tabulate(rows, headers=["Vehicle", "Entries", "Last fill"], tablefmt="simple"))
    return 0


# =============================================================================
# Import / Export commands
# =============================================================================


def detect_format(path: Path, explicit: Optional[str]) -> Optional[str]:
    """Use --format if given, otherwise the file suffix."""
    if explicit:
        return explicit
    suffix = path.suffix.lower().lstrip(".")
    return suffix if suffix in ("json", "csv") else None


def cmd_import(args):
    """Merge entries from a JSON or CSV export."""
    fmt = detect_format(args.import_file, args.format)
    if fmt is None:
        print("Error: Cannot tell import format, use --format json|csv")
        return 1
    if not args.import_file.exists():
        print(f"Error: File not found: {args.import_file}")
        return 1

    log = load_log(args.log_file)
    batch = parse_import(args.import_file.read_text(), fmt)
    for error in batch.errors:
        print(f"Skipped invalid {error}")

    store = EntryStore(log.store.all_entries()) if args.dry_run else log.store
    result = reconcile(store, batch.entries, overwrite=args.overwrite)
    summary = (
        f"{result.added} added, {result.skipped} skipped, "
        f"{result.overwritten} overwritten"
    )
    if args.dry_run:
        print(f"Would import: {summary} (dry run - no changes made)")
        return 0

    save_log(args.log_file, log)
    print(f"Imported: {summary}")
    return 0


def cmd_export(args):
    """Write entries to a JSON or CSV file."""
    fmt = detect_format(args.output, args.format)
    if fmt is None:
        print("Error: Cannot tell export format, use --format json|csv")
        return 1

    log = load_log(args.log_file)
    entries = select_export_entries(
        log.store,
        scope=args.scope,
        vehicle=args.vehicle,
        start_date=args.start,
        end_date=args.end,
    )
    content = export_json(entries) if fmt == "json" else export_csv(entries)
    args.output.write_text(content)
    print(f"Exported {len(entries)} entries to {args.output}")
    return 0


# =============================================================================
# Settings command
# =============================================================================


def cmd_settings(args):
    """Show or change default vehicle, unit and currency."""
    log = load_log(args.log_file)
    settings = log.settings

    changed = False
    if args.vehicle is not None:
        settings.default_vehicle = args.vehicle
        changed = True
    if args.unit:
        settings.fuel_unit = args.unit
        changed = True
    if args.currency:
        settings.currency = args.currency
        changed = True

    if changed:
        save_settings(args.log_file, settings)
        print("Settings saved.")

    rows = [
        ["Default vehicle", settings.default_vehicle or "-"],
        ["Fuel unit", settings.fuel_unit],
        ["Currency", settings.currency],
    ]
    print(tabulate(rows, tablefmt="simple"))
    return 0


# =============================================================================
# Main
# =============================================================================


def add_vehicle_filter(parser):
    parser.add_argument(
        "--vehicle",
        type=str,
        help="Vehicle label (default: settings default vehicle)",
    )
    parser.add_argument(
        "--all-vehicles",
        action="store_true",
        help="Ignore the default vehicle and use every entry",
    )


def build_parser():
    parser = argparse.ArgumentParser(
        description="Fuel economy tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s fuel-log.yaml init --vehicle golf --currency EUR
  %(prog)s fuel-log.yaml log 58210 41.3 72.80 --location "Shell A7"
  %(prog)s fuel-log.yaml log 58502 12.0 21.10 --partial
  %(prog)s fuel-log.yaml history --since 2024-01-01 --ids
  %(prog)s fuel-log.yaml stats --vehicle golf
  %(prog)s fuel-log.yaml series consumption-per-100
  %(prog)s fuel-log.yaml import backup.json --overwrite
  %(prog)s fuel-log.yaml export backup.csv --scope dateRange \\
      --start 2024-01-01 --end 2024-12-31
""",
    )
    parser.add_argument(
        "log_file",
        type=Path,
        help="Path to fuel log YAML file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Init subcommand
    init_parser = subparsers.add_parser("init", help="Create a new fuel log file")
    init_parser.add_argument("--vehicle", type=str, help="Default vehicle label")
    init_parser.add_argument("--unit", type=str, help="Fuel unit (default: litres)")
    init_parser.add_argument("--currency", type=str, help="Currency (default: EUR)")

    # Log subcommand
    log_parser = subparsers.add_parser("log", help="Add a refuel entry")
    log_parser.add_argument("odometer", type=float, help="Odometer reading")
    log_parser.add_argument("fuel", type=float, help="Fuel added")
    log_parser.add_argument("cost", type=float, help="Amount paid")
    log_parser.add_argument(
        "--date",
        type=str,
        help="Refuel date in YYYY-MM-DD format (default: today)",
    )
    log_parser.add_argument(
        "--partial",
        action="store_true",
        help="Tank was not filled to capacity",
    )
    log_parser.add_argument("--vehicle", type=str, help="Vehicle label")
    log_parser.add_argument("--fuel-type", type=str, help="Fuel type (e.g. 'E10')")
    log_parser.add_argument("--location", type=str, help="Station or place")
    log_parser.add_argument("--notes", type=str, help="Notes about the fill-up")
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    # Edit subcommand
    edit_parser = subparsers.add_parser("edit", help="Change an existing entry")
    edit_parser.add_argument("entry_id", type=str, help="Entry id (see history --ids)")
    edit_parser.add_argument("--date", type=str, help="New date")
    edit_parser.add_argument("--odometer", type=float, help="New odometer reading")
    edit_parser.add_argument("--fuel", type=float, help="New fuel amount")
    edit_parser.add_argument("--cost", type=float, help="New cost")
    fill_group = edit_parser.add_mutually_exclusive_group()
    fill_group.add_argument("--partial", action="store_true", help="Mark partial")
    fill_group.add_argument("--full", action="store_true", help="Mark full")
    edit_parser.add_argument("--vehicle", type=str, help="New vehicle label")
    edit_parser.add_argument("--fuel-type", type=str, help="New fuel type")
    edit_parser.add_argument("--location", type=str, help="New location")
    edit_parser.add_argument("--notes", type=str, help="New notes")

    # Delete subcommand
    delete_parser = subparsers.add_parser("delete", help="Remove entries by id")
    delete_parser.add_argument("entry_ids", nargs="+", help="Entry ids")

    # History subcommand
    history_parser = subparsers.add_parser("history", help="View refuel history")
    add_vehicle_filter(history_parser)
    history_parser.add_argument(
        "--since",
        type=str,
        help="Show only entries since date (YYYY-MM-DD)",
    )
    history_parser.add_argument(
        "--asc",
        action="store_true",
        help="Oldest first instead of newest first",
    )
    history_parser.add_argument(
        "--ids",
        action="store_true",
        help="Show entry ids (for edit/delete)",
    )

    # Stats subcommand
    stats_parser = subparsers.add_parser(
        "stats", help="Show consumption and cost statistics"
    )
    add_vehicle_filter(stats_parser)

    # Series subcommand
    series_parser = subparsers.add_parser("series", help="Show a chart series")
    series_parser.add_argument(
        "name",
        choices=[s.value for s in SeriesName],
        help="Series name",
    )
    add_vehicle_filter(series_parser)

    # Vehicles subcommand
    subparsers.add_parser("vehicles", help="List vehicle labels")

    # Import subcommand
    import_parser = subparsers.add_parser(
        "import", help="Merge entries from a JSON or CSV export"
    )
    import_parser.add_argument("import_file", type=Path, help="File to import")
    import_parser.add_argument(
        "--format",
        choices=["json", "csv"],
        help="File format (default: from suffix)",
    )
    import_parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace existing entries with the same id",
    )
    import_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and validate without saving",
    )

    # Export subcommand
    export_parser = subparsers.add_parser(
        "export", help="Write entries to a JSON or CSV file"
    )
    export_parser.add_argument("output", type=Path, help="Output file")
    export_parser.add_argument(
        "--format",
        choices=["json", "csv"],
        help="File format (default: from suffix)",
    )
    export_parser.add_argument(
        "--scope",
        choices=["all", "vehicle", "dateRange"],
        default="all",
        help="Which entries to export (default: all)",
    )
    export_parser.add_argument("--vehicle", type=str, help="Vehicle for --scope vehicle")
    export_parser.add_argument("--start", type=str, help="Start date for dateRange")
    export_parser.add_argument("--end", type=str, help="End date for dateRange")

    # Settings subcommand
    settings_parser = subparsers.add_parser(
        "settings", help="Show or change settings"
    )
    settings_parser.add_argument(
        "--vehicle",
        type=str,
        help="Default vehicle label ('' to clear)",
    )
    settings_parser.add_argument("--unit", type=str, help="Fuel unit")
    settings_parser.add_argument("--currency", type=str, help="Currency")

    return parser


COMMANDS = {
    "init": cmd_init,
    "log": cmd_log,
    "edit": cmd_edit,
    "delete": cmd_delete,
    "history": cmd_history,
    "stats": cmd_stats,
    "series": cmd_series,
    "vehicles": cmd_vehicles,
    "import": cmd_import,
    "export": cmd_export,
    "settings": cmd_settings,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate log file exists
    if args.command != "init" and not args.log_file.exists():
        print(f"Error: File not found: {args.log_file}")
        return 1

    try:
        return COMMANDS[args.command](args)
    except FuelLogError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
