from __future__ import annotations

import argparse
from pathlib import Path

from alembic import command
from alembic.config import Config


def get_alembic_config() -> Config:
    here = Path(__file__).resolve().parent
    return Config(str(here / "alembic.ini"))


def cmd_upgrade(revision: str = "head") -> None:
    command.upgrade(get_alembic_config(), revision)


def cmd_downgrade(revision: str) -> None:
    command.downgrade(get_alembic_config(), revision)


def cmd_serve(host: str, port: int, reload: bool) -> None:
    import uvicorn

    uvicorn.run("archivist.main:app", host=host, port=port, reload=reload)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Archivist management commands"
    )
    subparsers = parser.add_subparsers(dest="command")

    upgrade_parser = subparsers.add_parser(
        "upgrade", help="Apply migrations (default: upgrade head)"
    )
    upgrade_parser.add_argument("revision", nargs="?", default="head")

    downgrade_parser = subparsers.add_parser(
        "downgrade", help="Downgrade to a specific revision"
    )
    downgrade_parser.add_argument("revision", help="Revision id or -1, -2, ...")

    revision_parser = subparsers.add_parser(
        "revision", help="Create new alembic revision"
    )
    revision_parser.add_argument("-m", "--message", required=True)
    revision_parser.add_argument(
        "--autogenerate",
        action="store_true",
        help="Populate revision with schema diff from models",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args()

    if args.command is None:
        cmd_upgrade()
    elif args.command == "upgrade":
        cmd_upgrade(args.revision)
    elif args.command == "downgrade":
        cmd_downgrade(args.revision)
    elif args.command == "revision":
        command.revision(
            get_alembic_config(),
            message=args.message,
            autogenerate=args.autogenerate,
        )
    elif args.command == "serve":
        cmd_serve(args.host, args.port, args.reload)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
