#!/usr/bin/env python3
"""Swimlane core CLI - repair, lay out and inspect process diagram JSON files."""

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from .analysis import summarize_diagram
from .config import DEFAULT_LAYOUT_CONFIG, load_layout_config
from .layout import build_layout
from .models import default_diagram
from .pipeline import accept_candidate, render_plan
from .validation import SchemaViolation, parse_diagram, validate_diagram, validation_summary


def _json_out(data, code=0):
    print(json.dumps(data))
    sys.exit(code)


def _error_out(message, **extra):
    _json_out({"status": "error", "error": message, **extra}, code=1)


def _read_document(path):
    """Read a JSON document from a file path or stdin ("-")."""
    try:
        if path == "-":
            return json.load(sys.stdin)
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        _error_out(f"Cannot read {path}: {e.strerror}")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        _error_out(f"Invalid JSON in {path}: {e}")


def _load_diagram(args):
    try:
        return parse_diagram(_read_document(args.file))
    except SchemaViolation as e:
        _error_out(str(e), details=[
            {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg", "")}
            for err in e.errors
        ])


def _load_config(args):
    if not args.config:
        return DEFAULT_LAYOUT_CONFIG
    try:
        return load_layout_config(args.config)
    except OSError as e:
        _error_out(f"Cannot read {args.config}: {e.strerror}")
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        _error_out(f"Invalid layout config: {e}")


# ── Commands ─────────────────────────────────────────────────────────────────

def cmd_new(args):
    _json_out(default_diagram().to_json_dict())


def cmd_repair(args):
    result = accept_candidate(_load_diagram(args), _load_config(args))
    _json_out({"status": "ok", **result.to_dict()})


def cmd_layout(args):
    diagram = _load_diagram(args)
    _json_out({"status": "ok", **build_layout(diagram, _load_config(args)).to_dict()})


def cmd_render_plan(args):
    diagram = _load_diagram(args)
    _json_out({"status": "ok", **render_plan(diagram, _load_config(args)).to_json_dict()})


def cmd_validate(args):
    issues = validate_diagram(_load_diagram(args))
    _json_out({
        "status": "ok",
        "issues": [i.to_dict() for i in issues],
        "summary": validation_summary(issues),
    })


def cmd_summarize(args):
    _json_out({"status": "ok", **summarize_diagram(_load_diagram(args)).to_dict()})


def build_parser():
    parser = argparse.ArgumentParser(
        prog="swimlane-core",
        description="Repair and lay out swimlane process diagrams",
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log debug output to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("new")

    for name in ("repair", "layout", "render-plan"):
        p = sub.add_parser(name)
        p.add_argument("file", help="Diagram JSON file, or - for stdin")
        p.add_argument("--config", default=None, help="JSON file with layout overrides")

    for name in ("validate", "summarize"):
        p = sub.add_parser(name)
        p.add_argument("file", help="Diagram JSON file, or - for stdin")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cmd_map = {
        "new": cmd_new,
        "repair": cmd_repair,
        "layout": cmd_layout,
        "render-plan": cmd_render_plan,
        "validate": cmd_validate,
        "summarize": cmd_summarize,
    }
    cmd_map[args.command](args)


if __name__ == "__main__":
    main()
