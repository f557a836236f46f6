"""Command-line front end: python -m pomodorise.

    python -m pomodorise register me@example.com --name Me
    python -m pomodorise start 1 work 25
    python -m pomodorise complete 1 7
    python -m pomodorise stats 1
"""

from __future__ import annotations

import argparse
import logging
import sys

from .accounts import account_progress, create_account
from .database.db import configure_engine, init_db
from .database.models import IntervalKind
from .errors import PomodoriseError
from .sessions.lifecycle import IntervalManager
from .settings import APP_DIR, Settings, load_settings
from .stats import session_stats


# ── sub-commands ──────────────────────────────────────────────────────────


def _cmd_init(args, settings: Settings) -> None:
    print(f"Pomodorise ready! ({settings.database_url})")


def _cmd_register(args, settings: Settings) -> None:
    account = create_account(args.email, args.name)
    print(f"Registered account {account.id} ({account.email})")


def _cmd_start(args, settings: Settings) -> None:
    manager = IntervalManager(settings=settings)
    minutes = args.minutes
    if minutes is None:
        minutes = settings.default_duration(args.kind)
    session = manager.start_interval(
        args.account, args.kind, minutes, args.task,
    )
    print(f"Started {session.kind} session {session.id} ({minutes} min)")


def _cmd_complete(args, settings: Settings) -> None:
    manager = IntervalManager(settings=settings)
    result = manager.complete_interval(args.session, args.account)
    summary = result["account"]
    print(
        f"+{result['points_earned']} points: level {summary['level']}, "
        f"{summary['points']} points, streak {summary['streak']}"
    )
    if result["level_up"]:
        print(f"Level up! {result['old_level']} -> {summary['level']}")
    task = result["task"]
    if task is not None:
        print(
            f"Task {task.id}: {task.completed_intervals}/"
            f"{task.estimated_intervals} ({task.status})"
        )


def _cmd_stats(args, settings: Settings) -> None:
    progress = account_progress(args.account)
    stats = session_stats(args.account)
    print(
        f"Level {progress['level']} ({progress['progress_percent']}%), "
        f"{progress['points']} points, streak {progress['streak']}"
    )
    print(f"  {progress['points_to_next_level']} points to next level")
    print(
        f"  {stats.total_sessions} sessions, {stats.total_minutes} min, "
        f"{stats.completed_intervals} work intervals"
    )
    for day in stats.sessions_per_day[-7:]:
        print(f"  {day['date']}: {day['count']}")


# ── parser ────────────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pomodorise")
    parser.add_argument(
        "--database-url",
        help="SQLAlchemy URL (defaults to the one in settings.json)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init", help="create the database tables")
    p.set_defaults(func=_cmd_init)

    p = sub.add_parser("register", help="create an account")
    p.add_argument("email")
    p.add_argument("--name")
    p.set_defaults(func=_cmd_register)

    p = sub.add_parser("start", help="start an interval")
    p.add_argument("account", type=int)
    p.add_argument("kind", choices=[k.value for k in IntervalKind])
    p.add_argument("minutes", type=int, nargs="?")
    p.add_argument("--task", type=int)
    p.set_defaults(func=_cmd_start)

    p = sub.add_parser("complete", help="complete an open interval")
    p.add_argument("account", type=int)
    p.add_argument("session", type=int)
    p.set_defaults(func=_cmd_complete)

    p = sub.add_parser("stats", help="show progress and totals")
    p.add_argument("account", type=int)
    p.set_defaults(func=_cmd_stats)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, str(settings.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.database_url:
        settings.database_url = args.database_url
    else:
        APP_DIR.mkdir(parents=True, exist_ok=True)
    configure_engine(settings.database_url)
    init_db()

    try:
        args.func(args, settings)
    except PomodoriseError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
