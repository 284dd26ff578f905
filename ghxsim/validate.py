#!/usr/bin/env python3
import argparse
import json
import re
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError

SCHEMA_PATH = Path(__file__).parent / "schemas" / "ghxsim.schema.json"

# lower weights are reported first; composite validators mostly repeat what their branches say
VALIDATOR_WEIGHTS = {
    "additionalProperties": 0,
    "required": 1,
    "const": 2,
    "enum": 2,
    "type": 3,
    "exclusiveMinimum": 4,
    "minimum": 4,
    "maximum": 4,
    "minItems": 5,
    "maxItems": 5,
    "minProperties": 5,
    "oneOf": 20,
    "anyOf": 21,
}


def load_schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text())


def _format_location(path: Sequence[Any]) -> str:
    """Readable location such as input -> ground_heat_exchanger -> field1 -> pipe."""
    return " -> ".join(["input", *map(str, path)])


def _format_json_pointer(path: Sequence[Any]) -> str:
    if not path:
        return "/"
    parts = [str(p).replace("~", "~0").replace("/", "~1") for p in path]
    return "/" + "/".join(parts)


def _allowed_keys(schema: dict) -> list[str]:
    props = schema.get("properties", {})
    return sorted(props) if isinstance(props, dict) else []


def _unexpected_key(message: str) -> str | None:
    # e.g. "Additional properties are not allowed ('flowrate' was unexpected)"
    m = re.search(r"\('([^']+)' was unexpected\)", message)
    return m.group(1) if m else None


@dataclass(order=True)
class RankedError:
    rank: tuple[int, int, int]
    # ValidationError instances are not orderable
    error: ValidationError = field(compare=False)


def _rank_error(err: ValidationError) -> RankedError:
    weight = VALIDATOR_WEIGHTS.get(err.validator, 10)
    return RankedError(rank=(weight, -len(list(err.path)), len(err.message or "")), error=err)


def best_error(errors: Iterable[ValidationError]) -> ValidationError:
    return sorted(_rank_error(e) for e in errors)[0].error


def _describe_variants(err: ValidationError) -> list[str]:
    if not err.context:
        return [
            "The value matched none, or more than one, of the allowed variants.",
            "Use the keys of exactly one variant, e.g. 'g_function' or 'field' for a vertical field, not both.",
        ]
    lines = [f"Variant {sub.relative_schema_path[0] + 1}: {sub.message}" for sub in err.context]
    lines.append("Adjust the object so it matches exactly one variant.")
    return lines


def suggest_fix(err: ValidationError) -> list[str]:
    match err.validator:
        case "required":
            return [f"Add the missing field. Details: {err.message}"]
        case "additionalProperties":
            bad = _unexpected_key(err.message)
            lines = [f"Remove or rename '{bad}'." if bad else "Remove or rename the unexpected keys."]
            allowed = _allowed_keys(err.schema)
            if allowed:
                lines.append("Allowed keys here: " + ", ".join(allowed))
            return lines
        case "enum" | "const":
            allowed = err.validator_value if isinstance(err.validator_value, list) else [err.validator_value]
            return ["Use one of: " + ", ".join(map(str, allowed)), "Values are case-sensitive."]
        case "type":
            return [f"Use a value of type: {err.validator_value}"]
        case "oneOf" | "anyOf":
            return _describe_variants(err)
        case "minimum" | "exclusiveMinimum" | "maximum":
            return [f"Keep the value within bounds ({err.validator} {err.validator_value})."]
    return []


def validate_input_dict(instance: dict) -> None:
    """
    Check an input dict against the input schema.

    The most relevant error is reported on stderr and re-raised.

    :param instance: parsed input file
    :raises ValidationError: the input does not conform
    """
    errors = list(Draft7Validator(load_schema()).iter_errors(instance))
    if not errors:
        return

    err = best_error(errors)
    path = list(err.path)
    print("\nValidation Error:", file=sys.stderr)
    print(f"  Location:      {_format_location(path)}", file=sys.stderr)
    print(f"  JSON Pointer:  {_format_json_pointer(path)}", file=sys.stderr)
    print(f"  Validator:     {err.validator}", file=sys.stderr)
    print(f"  Message:       {err.message}", file=sys.stderr)

    fix_lines = suggest_fix(err)
    if fix_lines:
        print("\nSuggested Fix:", file=sys.stderr)
        for line in fix_lines:
            print(f"  - {line}", file=sys.stderr)

    if err.validator in ("oneOf", "anyOf") and len(errors) > 1:
        alt = best_error(e for e in errors if e is not err)
        print(f"\nAlso found at {_format_location(list(alt.path))}: {alt.message}", file=sys.stderr)

    print("\nSee the demos directory for example inputs.", file=sys.stderr)
    raise err


def validate_input_file(input_file_path: Path) -> None:
    validate_input_dict(json.loads(Path(input_file_path).read_text()))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate ghxsim input JSON against the schema.")
    parser.add_argument("input_json", type=Path, help="Path to input JSON file")
    args = parser.parse_args(argv)

    try:
        validate_input_file(args.input_json.resolve())
    except ValidationError:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
