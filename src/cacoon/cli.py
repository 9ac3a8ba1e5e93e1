"""Command-line client for the Cacoo diagram API."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

import httpx
import yaml

from .api import DiagramApi
from .config import (
    CONFIG_ENV_PREFIX,
    DEFAULT_ENDPOINT,
    LOG_FORMATS,
    LOG_LEVELS,
    OUTPUT_FORMATS,
    ClientConfig,
    load_config,
)
from .errors import EXIT_USAGE, CliError
from .fieldpath import format_scalar, resolve
from .logging import configure_logging, get_logger
from .models import Diagram, DiagramList, decode_json

NOT_FOUND_MESSAGE = "No such Diagram ID"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cacoon",
        description=(
            "A wrapper CLI for the Cacoo diagram API. Reads "
            f"{CONFIG_ENV_PREFIX}API_KEY and {CONFIG_ENV_PREFIX}ENDPOINT "
            f"(default {DEFAULT_ENDPOINT}) from the environment or a .env file. "
            "Examples: `cacoon diagram list --ids`, `cacoon d g <id> -f owner.name`."
        ),
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        help="Read settings from this dotenv file instead of ./.env (must exist).",
    )
    parser.add_argument(
        "--output",
        choices=OUTPUT_FORMATS,
        help=f"Output format for records (env: {CONFIG_ENV_PREFIX}OUTPUT). Defaults to 'json'.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help=f"Log level for stderr diagnostics (env: {CONFIG_ENV_PREFIX}LOG_LEVEL). Defaults to WARNING.",
    )
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        help=f"Log format (env: {CONFIG_ENV_PREFIX}LOG_FORMAT). Defaults to 'plain'.",
    )

    subparsers = parser.add_subparsers(dest="command", required=False)
    _add_diagram_commands(subparsers)
    return parser


def _add_diagram_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    diagram = subparsers.add_parser(
        "diagram",
        aliases=["d"],
        help="Control diagrams (add/list/get/remove)",
        description="Create, list, inspect and delete diagrams on the account tied to the API key.",
    )
    diagram_sub = diagram.add_subparsers(dest="diagram_command", required=True)

    add = diagram_sub.add_parser(
        "add",
        aliases=["a"],
        help="Add a new diagram (GET /diagrams/create.json)",
        description="Creates an empty diagram and prints its record.",
    )
    add.set_defaults(func=_cmd_diagram_add)

    list_cmd = diagram_sub.add_parser(
        "list",
        aliases=["l"],
        help="List diagrams (GET /diagrams.json -> {items, count})",
        description="Prints every diagram record, or only their identifiers with --ids.",
    )
    list_cmd.add_argument(
        "--ids",
        "-i",
        action="store_true",
        help="List diagram ids only, in server order",
    )
    list_cmd.set_defaults(func=_cmd_diagram_list)

    get = diagram_sub.add_parser(
        "get",
        aliases=["g"],
        help="Get a diagram by ID (GET /diagrams/{id}.json)",
        description=(
            "Fetch a single diagram record. Use --filter with a dotted path such as "
            "`owner.name` or `sheets.0.name` to print one value."
        ),
    )
    get.add_argument("diagram_id", help="Diagram identifier")
    get.add_argument("--filter", "-f", dest="filter", help="Dotted field path to print")
    get.set_defaults(func=_cmd_diagram_get)

    remove = diagram_sub.add_parser(
        "remove",
        aliases=["r", "d"],
        help="Remove an existing diagram (GET /diagrams/{id}/delete.json)",
        description="Deletes a diagram by ID.",
    )
    remove.add_argument("diagram_id", help="Diagram identifier")
    remove.set_defaults(func=_cmd_diagram_remove)


def _print_output(data: Any, output: str) -> None:
    if output == "yaml":
        yaml.safe_dump(data, sys.stdout, sort_keys=False)
    else:
        json.dump(data, sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")


def _print_message(message: str) -> None:
    sys.stdout.write(f"{message}\n")


def _check_status(response: httpx.Response) -> bool:
    """Print the user-facing outcome for a non-2xx response and report success."""

    if response.is_success:
        return True
    if response.status_code == httpx.codes.NOT_FOUND:
        _print_message(NOT_FOUND_MESSAGE)
    else:
        _print_message(f"Unexpected error code {response.status_code}")
    get_logger("cacoon.cli").info(
        "Request returned error status",
        extra={"status_code": response.status_code},
    )
    return False


def _cmd_diagram_add(config: ClientConfig, api: DiagramApi, args: argparse.Namespace) -> None:
    response = api.create_diagram()
    if not _check_status(response):
        return
    _print_output(Diagram.from_response(response).to_dict(), config.output)


def _cmd_diagram_list(config: ClientConfig, api: DiagramApi, args: argparse.Namespace) -> None:
    response = api.list_diagrams()
    if not _check_status(response):
        return
    diagrams = DiagramList.from_response(response)
    if args.ids:
        _print_output(diagrams.ids(), config.output)
        return
    _print_output(diagrams.to_dict(), config.output)


def _cmd_diagram_get(config: ClientConfig, api: DiagramApi, args: argparse.Namespace) -> None:
    response = api.get_diagram(args.diagram_id)
    if not _check_status(response):
        return
    if args.filter:
        lookup = resolve(decode_json(response), args.filter)
        if not lookup.found:
            _print_message(f"No such name {args.filter} in root payload")
            return
        _print_message(format_scalar(lookup.value))
        return
    _print_output(Diagram.from_response(response).to_dict(), config.output)


def _cmd_diagram_remove(config: ClientConfig, api: DiagramApi, args: argparse.Namespace) -> None:
    response = api.delete_diagram(args.diagram_id)
    if not _check_status(response):
        return
    _print_message(f"{args.diagram_id} has successfully deleted")


def _build_api(config: ClientConfig) -> DiagramApi:
    return DiagramApi(config)


def _load_config(args: argparse.Namespace) -> ClientConfig:
    return load_config(
        env_file=args.env_file,
        overrides={
            "output": args.output,
            "log_level": args.log_level,
            "log_format": args.log_format,
        },
    )


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(args=argv)

    if not args.command:
        parser.print_help()
        sys.exit(EXIT_USAGE)

    try:
        config = _load_config(args)
        configure_logging(config)
        get_logger("cacoon.config").debug("Configuration loaded", extra=config.logging_dict())

        with _build_api(config) as api:
            func: Callable[[ClientConfig, DiagramApi, argparse.Namespace], None] = args.func
            func(config, api, args)
    except CliError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        sys.exit(exc.exit_code)


if __name__ == "__main__":
    main()
