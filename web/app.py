"""Flask JSON API for fuel economy tracking."""

import os
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from flask import Flask, Response, jsonify, request

from fuellog.errors import EntryNotFoundError, InvalidInputError
from fuellog.import_export import (
    export_csv,
    export_json,
    parse_import,
    select_export_entries,
)
from fuellog.fuel_log import FuelLog
from fuellog.loader import entry_to_dict, load_log, save_log
from fuellog.reconcile import reconcile

app = Flask(__name__)

# Path to the fuel log (relative to project root by default)
LOG_FILE = Path(
    os.environ.get("FUEL_LOG_FILE", Path(__file__).parent.parent / "fuel-log.yaml")
)


def get_log() -> FuelLog:
    """Load the configured fuel log."""
    return load_log(LOG_FILE)


def requested_vehicle(log: FuelLog) -> Optional[str]:
    """?vehicle=<label>, ?vehicle= for all vehicles, else the default vehicle."""
    if "vehicle" in request.args:
        return request.args["vehicle"] or None
    return log.settings.vehicle


@app.errorhandler(EntryNotFoundError)
def handle_not_found(error):
    return jsonify({"error": str(error)}), 404


@app.errorhandler(InvalidInputError)
def handle_invalid_input(error):
    app.logger.warning("Rejected request: %s", error)
    return jsonify({"error": str(error)}), 400


@app.route("/api/entries")
def list_entries():
    """Entries for a vehicle, newest first."""
    log = get_log()
    vehicle = requested_vehicle(log)
    entries = list(reversed(log.entries(vehicle)))
    return jsonify(
        {
            "vehicle": vehicle,
            "count": len(entries),
            "entries": [entry_to_dict(e) for e in entries],
        }
    )


@app.route("/api/entries/<entry_id>")
def get_entry(entry_id: str):
    log = get_log()
    return jsonify(entry_to_dict(log.store.get_entry(entry_id)))


@app.route("/api/entries/<entry_id>", methods=["DELETE"])
def delete_entry(entry_id: str):
    log = get_log()
    log.store.delete_entry(entry_id)
    save_log(LOG_FILE, log)
    app.logger.info("Deleted entry %s", entry_id)
    return "", 204


@app.route("/api/stats")
def stats():
    """Summary statistics; "stats" is null when there are no entries."""
    log = get_log()
    vehicle = requested_vehicle(log)
    result = log.statistics(vehicle)
    return jsonify(
        {
            "vehicle": vehicle,
            "fuelUnit": log.settings.fuel_unit,
            "currency": log.settings.currency,
            "stats": asdict(result) if result is not None else None,
        }
    )


@app.route("/api/series/<name>")
def series(name: str):
    """Chart series; "points" is null when there is not enough data."""
    log = get_log()
    vehicle = requested_vehicle(log)
    points = log.series(name, vehicle)
    return jsonify(
        {
            "vehicle": vehicle,
            "series": name,
            "points": [asdict(p) for p in points] if points is not None else None,
        }
    )


@app.route("/api/import", methods=["POST"])
def import_entries():
    """
    Merge an uploaded export into the log.

    Query params: format=json|csv (default json), overwrite=true|false.
    """
    fmt = request.args.get("format", "json").lower()
    overwrite = request.args.get("overwrite", "").lower() == "true"

    batch = parse_import(request.get_data(as_text=True), fmt)
    log = get_log()
    result = reconcile(log.store, batch.entries, overwrite=overwrite)
    save_log(LOG_FILE, log)

    return jsonify(
        {
            "added": result.added,
            "skipped": result.skipped,
            "overwritten": result.overwritten,
            "rejected": batch.errors,
        }
    )


@app.route("/api/export")
def export_entries():
    """Download entries as JSON or CSV."""
    fmt = request.args.get("format", "json").lower()
    if fmt not in ("json", "csv"):
        raise InvalidInputError(f"Unsupported export format: {fmt}")

    log = get_log()
    entries = select_export_entries(
        log.store,
        scope=request.args.get("scope", "all"),
        vehicle=request.args.get("vehicle"),
        start_date=request.args.get("start"),
        end_date=request.args.get("end"),
    )
    if fmt == "csv":
        content, mimetype = export_csv(entries), "text/csv"
    else:
        content, mimetype = export_json(entries), "application/json"

    return Response(
        content,
        mimetype=mimetype,
        headers={
            "Content-Disposition": f"attachment; filename=fuel-log-export.{fmt}"
        },
    )


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
