"""idpgate command-line entry point.

Usage::

    idpgate -c config.yaml --validate-only
    idpgate -c config.yaml synth [--include-secrets]
    idpgate -c config.yaml evaluate event.json
    idpgate -c config.yaml frontend --user-pool-id ID --client-id ID
    python -m idpgate -c config.yaml synth
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

log = logging.getLogger(__name__)


def _get_version() -> str:
    from idpgate import __version__

    return __version__


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idpgate",
        description="idpgate: federated sign-up admission gate and hook routing",
    )
    parser.add_argument(
        "-c",
        "--config",
        required=True,
        metavar="PATH",
        help="Path to the configuration file (YAML or JSON).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug output (full tracebacks, verbose logging).",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Validate the configuration file and the provisioning plan, then exit.",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command")

    synth = subparsers.add_parser("synth", help="Print the provisioning descriptor as JSON")
    synth.add_argument(
        "--include-secrets",
        action="store_true",
        default=False,
        help="Emit the federation client secret instead of a placeholder.",
    )

    evaluate = subparsers.add_parser("evaluate", help="Run the sign-up gate on an event file")
    evaluate.add_argument("event_file", help="Path to a JSON pre-sign-up trigger payload")

    frontend = subparsers.add_parser("frontend", help="Print the front-end auth export")
    frontend.add_argument("--user-pool-id", required=True, help="Deployed user pool id")
    frontend.add_argument("--client-id", required=True, help="Deployed client id")

    return parser


def _print_error(message: str) -> None:
    """Print a user-facing error to stderr."""
    print(f"idpgate: error: {message}", file=sys.stderr)  # noqa: T201


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=False))  # noqa: T201


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Parses arguments, loads config, runs a command."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    config_path = Path(args.config)
    if not config_path.is_file():
        _print_error(f"configuration file not found: {config_path}")
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    from idpgate.config import ConfigValidationError, GateConfig
    from idpgate.errors import IdpGateError, Unregistered

    try:
        settings = GateConfig(config_file=config_path).settings
    except ConfigValidationError as exc:
        _print_error(str(exc))
        sys.exit(1)
    except Exception as exc:
        if args.debug:
            raise
        _print_error(f"failed to load configuration: {exc}")
        sys.exit(1)

    from idpgate.provisioning import PoolBuilder, frontend_export

    try:
        descriptor = PoolBuilder.from_settings(settings).build()
    except IdpGateError as exc:
        _print_error(str(exc))
        sys.exit(1)

    if args.validate_only:
        print(f"Configuration OK: {config_path}")  # noqa: T201
        sys.exit(0)

    if args.command == "synth":
        _print_json(descriptor.to_dict(include_secrets=args.include_secrets))
    elif args.command == "frontend":
        _print_json(
            frontend_export(
                descriptor,
                region=settings.pool.region,
                user_pool_id=args.user_pool_id,
                client_id=args.client_id,
            ),
        )
    elif args.command == "evaluate":
        from idpgate.directory import build_directory
        from idpgate.gate import SignUpGate
        from idpgate.models.event import LifecycleEvent

        with open(args.event_file, encoding="utf-8") as f:  # noqa: PTH123
            payload = json.load(f)

        directory = build_directory(settings.directory)
        try:
            result = SignUpGate(directory).evaluate(LifecycleEvent(payload))
        except Unregistered as exc:
            _print_error(f"sign-up rejected: {exc.message}")
            sys.exit(2)
        finally:
            directory.close()
        _print_json(result.payload)
    else:
        parser.print_help()
        sys.exit(2)
