"""
Image Tool - local runner

Executes one operation outside the workflow host, building the host context
from command-line arguments:

    python main.py list
    python main.py run imageCompress --params params.json --binary data=photo.png --output-dir out
    python main.py run imageAnalysis --params params.json --credentials creds.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import get_settings
from core.exceptions import ImageToolError
from operations.registry import OperationRegistry, create_registry
from schemas.host import HostContext

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging from settings (level overridable)."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, (level or settings.system.log_level).upper()),
        format=settings.system.log_format,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load_json(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    if path == "-":
        return json.load(sys.stdin)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _load_binaries(items: List[str]) -> Dict[str, bytes]:
    binaries: Dict[str, bytes] = {}
    for item in items:
        field, sep, path = item.partition("=")
        if not sep or not field or not path:
            raise ValueError(f"Binary input must look like FIELD=PATH, got '{item}'")
        binaries[field] = Path(path).read_bytes()
    return binaries


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run image tool operations locally")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List available operations")

    schema_parser = subparsers.add_parser("schema", help="Print an operation's parameter schema")
    schema_parser.add_argument("operation", help="Operation id")

    run_parser = subparsers.add_parser("run", help="Execute an operation")
    run_parser.add_argument("operation", help="Operation id, e.g. colorCorrection")
    run_parser.add_argument("--params", help="JSON file with parameters ('-' for stdin)")
    run_parser.add_argument(
        "--binary",
        action="append",
        default=[],
        metavar="FIELD=PATH",
        help="Binary input field (repeatable)",
    )
    run_parser.add_argument("--credentials", help="JSON file mapping credential names to values")
    run_parser.add_argument(
        "--output-dir", default=".", help="Directory binary outputs are written to"
    )
    return parser


def run_operation(registry: OperationRegistry, args: argparse.Namespace) -> Dict[str, Any]:
    """Execute the requested operation and write binary outputs to disk."""
    context = HostContext(
        parameters=_load_json(args.params),
        binaries=_load_binaries(args.binary),
        credentials=_load_json(args.credentials),
    )
    result = registry.dispatch(args.operation, context)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    summary = result.summary()
    for field, binary in result.binary.items():
        path = output_dir / binary.file_name
        path.write_bytes(binary.data)
        summary["binary"][field]["path"] = str(path)
        logger.info(f"Wrote {binary.size} bytes to {path}")
    return summary


def main(argv: Optional[List[str]] = None, registry: Optional[OperationRegistry] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    registry = registry or create_registry()

    try:
        if args.command == "list":
            output: Any = [
                {"operationId": op["operationId"], "name": op["name"], "description": op["description"]}
                for op in registry.describe()
            ]
        elif args.command == "schema":
            output = registry.get(args.operation).describe()
        else:
            output = run_operation(registry, args)
    except ImageToolError as e:
        print(json.dumps(e.to_dict(), indent=2, default=str), file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        logger.error(f"Failed to prepare inputs: {e}")
        return 2

    print(json.dumps(output, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
