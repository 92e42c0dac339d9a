#!/usr/bin/env python3
"""Validate fuel log YAML files against the schema."""
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError

from fuellog.errors import InvalidInputError
from fuellog.import_export import load_schema
from fuellog.loader import entry_from_dict, read_log_data


def validate_log_file(filepath: Path, schema: dict) -> list[str]:
    """
    Validate a single fuel log YAML file. Returns list of errors.

    The file is read the way load_log reads it, then checked against the
    schema and against the entry rules the loader applies.
    """
    errors = []
    try:
        data = read_log_data(filepath)
        validate(instance=data, schema=schema)
        for dct in data.get("entries") or []:
            try:
                entry_from_dict(dct)
            except InvalidInputError as e:
                errors.append(str(e))
        ids = [e["id"] for e in data.get("entries") or []]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            errors.append(f"Duplicate entry ids: {', '.join(duplicates)}")
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except InvalidInputError as e:
        errors.append(str(e))
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv=None):
    """Validate the fuel log files given on the command line."""
    paths = [Path(p) for p in (argv if argv is not None else sys.argv[1:])]
    if not paths:
        print("Usage: validate_log.py LOG_FILE [LOG_FILE ...]")
        return 1

    schema = load_schema()
    all_valid = True
    for filepath in paths:
        errors = validate_log_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
