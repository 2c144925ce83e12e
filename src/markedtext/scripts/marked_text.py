"""Command line front-end for decoding and rendering marked text fixtures."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Sequence

import jsonschema
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..codec.extractor import extract_offsets
from ..codec.generator import render
from ..codec.grammar import parse_marked, parse_points
from ..core.errors import MarkedTextError
from ..core.ranges import MarkedRange
from ..services.settings import Settings, SettingsStore
from ..utils.logging import setup_logging
from ..utils.offsets import OFFSET_ENCODINGS, decode_ranges, encode_ranges, to_encoded_offset

LOGGER = logging.getLogger(__name__)
MAX_SCHEMA_ERRORS = 25

_RANGE_ITEM_SCHEMA: dict[str, Any] = {
    "anyOf": [
        {
            "type": "array",
            "items": {"type": "integer", "minimum": 0},
            "minItems": 2,
            "maxItems": 2,
        },
        {
            "type": "object",
            "properties": {
                "start": {"type": "integer", "minimum": 0},
                "end": {"type": "integer", "minimum": 0},
            },
            "required": ["start", "end"],
            "additionalProperties": False,
        },
    ]
}
RENDER_PAYLOAD_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "text": {"type": "string"},
        "ranges": {"type": "array", "items": _RANGE_ITEM_SCHEMA},
        "indicate_cursors": {"type": "boolean"},
        "encoding": {"type": "string", "enum": list(OFFSET_ENCODINGS)},
    },
    "required": ["text", "ranges"],
    "additionalProperties": False,
}


class PayloadValidationError(ValueError):
    """Raised when a render payload cannot be read or fails schema validation."""

    def __init__(self, message: str, *, errors: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.errors = list(errors)

    def details(self) -> dict[str, Any]:
        return {"message": str(self), "errors": list(self.errors)}


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    store = SettingsStore(args.settings)
    try:
        settings = store.load(overrides={"indicate_cursors": getattr(args, "indicate_cursors", None)})
    except ValueError as exc:
        print(f"error: invalid settings: {exc}", file=sys.stderr)
        return 1

    level = logging.DEBUG if (args.debug or settings.debug_logging) else logging.WARNING
    setup_logging(level)

    handler: Callable[[argparse.Namespace, Settings], int] = args.handler
    try:
        return handler(args, settings)
    except MarkedTextError as exc:
        LOGGER.debug("Marked text rejected: %s", exc.details())
        print(f"error [{exc.reason}]: {exc}", file=sys.stderr)
        return 1
    except PayloadValidationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        for message in exc.errors:
            print(f"  - {message}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="markedtext",
        description="Decode and render cursor/selection fixtures written with «, » and ˇ markers.",
    )
    parser.add_argument("--settings", type=Path, help="Path to a settings JSON file.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Strip markers and print the decoded ranges.")
    _add_input_arguments(parse_cmd)
    parse_cmd.add_argument(
        "--indicate-cursors",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Require a ˇ marker inside every range.",
    )
    _add_encoding_argument(parse_cmd)
    parse_cmd.set_defaults(handler=_run_parse)

    points_cmd = subparsers.add_parser("points", help="Decode a fixture containing only ˇ markers.")
    _add_input_arguments(points_cmd)
    _add_encoding_argument(points_cmd)
    points_cmd.set_defaults(handler=_run_points)

    extract_cmd = subparsers.add_parser("extract", help="Strip arbitrary marker characters.")
    _add_input_arguments(extract_cmd)
    extract_cmd.add_argument(
        "--marker",
        dest="markers",
        action="append",
        required=True,
        help="Marker character to strip. Repeat for several markers.",
    )
    extract_cmd.set_defaults(handler=_run_extract)

    render_cmd = subparsers.add_parser("render", help="Render a JSON or YAML payload back into marked text.")
    render_cmd.add_argument(
        "--file",
        type=Path,
        help="Payload file (.json, .yaml or .yml). Reads JSON from stdin when omitted.",
    )
    render_cmd.add_argument(
        "--indicate-cursors",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Emit ˇ markers to show each range's direction.",
    )
    render_cmd.set_defaults(handler=_run_render)
    return parser


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--text", help="Inline marked text. Overrides --file when provided.")
    parser.add_argument(
        "--file",
        type=Path,
        help="File containing the marked text. Reads stdin when omitted and --text not provided.",
    )


def _add_encoding_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--encoding",
        choices=OFFSET_ENCODINGS,
        default=None,
        help="Unit for reported offsets (defaults to the configured offset encoding).",
    )


def _run_parse(args: argparse.Namespace, settings: Settings) -> int:
    marked = _load_text(args.text, args.file)
    text, ranges = parse_marked(marked, settings.indicate_cursors, grammar=settings.grammar())
    encoding = args.encoding or settings.offset_encoding
    encoded = encode_ranges(text, ranges, encoding)
    _emit({"text": text, "ranges": [marked_range.to_list() for marked_range in encoded], "encoding": encoding})
    return 0


def _run_points(args: argparse.Namespace, settings: Settings) -> int:
    marked = _load_text(args.text, args.file)
    text, offsets = parse_points(marked, grammar=settings.grammar())
    encoding = args.encoding or settings.offset_encoding
    encoded = [to_encoded_offset(text, offset, encoding) for offset in offsets]
    _emit({"text": text, "offsets": encoded, "encoding": encoding})
    return 0


def _run_extract(args: argparse.Namespace, settings: Settings) -> int:
    marked = _load_text(args.text, args.file)
    text, offsets = extract_offsets(marked, args.markers)
    _emit({"text": text, "offsets": offsets})
    return 0


def _run_render(args: argparse.Namespace, settings: Settings) -> int:
    payload = load_render_payload(args.file)
    text = payload["text"]
    ranges = [MarkedRange.from_value(value) for value in payload["ranges"]]
    encoding = payload.get("encoding", "utf-32")
    if encoding != "utf-32":
        ranges = decode_ranges(text, ranges, encoding)
    indicate = args.indicate_cursors
    if indicate is None:
        indicate = payload.get("indicate_cursors", settings.indicate_cursors)
    sys.stdout.write(render(text, ranges, indicate, grammar=settings.grammar()))
    sys.stdout.write("\n")
    return 0


def load_render_payload(path: Path | None) -> dict[str, Any]:
    """Read a render payload from ``path`` (or stdin) and validate it."""

    if path is None:
        raw = sys.stdin.read()
        payload = _parse_json(raw, source="<stdin>")
    else:
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PayloadValidationError(f"Unable to read payload {path}: {exc}") from exc
        if path.suffix.lower() in {".yaml", ".yml"}:
            payload = _parse_yaml(raw, source=str(path))
        else:
            payload = _parse_json(raw, source=str(path))
    validate_render_payload(payload)
    return payload


def validate_render_payload(payload: Any) -> None:
    """Validate ``payload`` against :data:`RENDER_PAYLOAD_SCHEMA`."""

    validator = jsonschema.Draft202012Validator(RENDER_PAYLOAD_SCHEMA)
    errors: list[str] = []
    for issue in validator.iter_errors(payload):
        path = _format_schema_path(issue.absolute_path)
        errors.append(f"{path}: {issue.message}" if path else issue.message)
        if len(errors) >= MAX_SCHEMA_ERRORS:
            errors.append("Too many validation errors; stopping early.")
            break
    if errors:
        raise PayloadValidationError("Render payload failed validation", errors=errors)


def _parse_json(raw: str, *, source: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PayloadValidationError(
            f"{source} is not valid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})"
        ) from exc


def _parse_yaml(raw: str, *, source: str) -> Any:
    parser = YAML(typ="safe")
    parser.allow_duplicate_keys = False
    try:
        return parser.load(raw)
    except YAMLError as exc:
        raise PayloadValidationError(f"{source} is not valid YAML: {exc}") from exc


def _format_schema_path(path: Sequence[Any]) -> str:
    if not path:
        return ""
    components: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            if components:
                components[-1] = f"{components[-1]}[{segment}]"
            else:
                components.append(f"[{segment}]")
        else:
            components.append(str(segment))
    return ".".join(filter(None, components))


def _load_text(inline: str | None, path: Path | None) -> str:
    if inline is not None:
        return inline
    if path:
        data = path.read_text(encoding="utf-8")
    else:
        data = sys.stdin.read()
    # the trailing newline of a file or piped input is not part of the fixture
    return data.removesuffix("\n")


def _emit(payload: dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False))
    sys.stdout.write("\n")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
