from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from datepoll.config.settings import (
    configure_logging,
    ensure_runtime_dirs,
    load_settings,
    validate_settings,
)
from datepoll.db.gateway import StorageGateway
from datepoll.events import service
from datepoll.events.errors import EventError
from datepoll.utils.health import readiness


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="datepoll")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create tables if they do not exist")

    create = sub.add_parser("create", help="create an event with candidate dates")
    create.add_argument("name")
    create.add_argument("dates", nargs="+")

    sub.add_parser("list", help="list all events")

    show = sub.add_parser("show", help="show one event with votes")
    show.add_argument("event_id")

    vote = sub.add_parser("vote", help="vote for one or more dates of an event")
    vote.add_argument("event_id")
    vote.add_argument("voter")
    vote.add_argument("dates", nargs="+")

    delete = sub.add_parser("delete", help="delete an event with its dates and votes")
    delete.add_argument("event_id")

    sub.add_parser("health", help="check database readiness")
    return parser


def run_command(gateway: StorageGateway, args: argparse.Namespace) -> Any:
    if args.command == "init-db":
        gateway.ensure_schema()
        return {"ok": True}
    if args.command == "create":
        return service.create_event(gateway, args.name, args.dates).to_dict()
    if args.command == "list":
        return [event.to_dict() for event in service.list_events(gateway)]
    if args.command == "show":
        return service.get_event(gateway, args.event_id).to_dict()
    if args.command == "vote":
        return service.submit_votes(gateway, args.event_id, args.voter, args.dates).to_dict()
    if args.command == "delete":
        service.delete_event(gateway, args.event_id)
        return {"deleted": service.parse_event_id(args.event_id)}
    return readiness(gateway)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    settings = load_settings()
    errors = validate_settings(settings)
    if errors:
        for error in errors:
            print(f"[CONFIG] {error}", file=sys.stderr)
        return 2
    configure_logging(settings)
    ensure_runtime_dirs(settings)

    gateway = StorageGateway.from_settings(settings)
    if args.command != "health":
        gateway.ensure_schema()
    try:
        result = run_command(gateway, args)
    except EventError as exc:
        print(json.dumps(exc.to_dict()), file=sys.stderr)
        return 1
    _print_json(result)
    if args.command == "health" and not result["ok"]:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
