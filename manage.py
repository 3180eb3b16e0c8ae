#!/usr/bin/env python3
"""
Bizdesk management CLI.

Usage:
    python manage.py start       Start the API server (and reminder sweep)
    python manage.py stop        Graceful shutdown
    python manage.py restart     Stop + start
    python manage.py status      Check if server is running
    python manage.py migrate     Apply database migrations
    python manage.py sweep       Run one reminder sweep now and print the counts

The server always runs a single uvicorn worker: each worker would start its
own reminder scheduler and send duplicate notifications.
"""

import argparse
import asyncio
import os
import signal
import socket
import subprocess
import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
PID_FILE = ROOT_DIR / ".bizdesk.pid"


def _read_pid() -> int | None:
    """Read PID from .bizdesk.pid file, return None if missing or stale."""
    if not PID_FILE.exists():
        return None
    try:
        pid = int(PID_FILE.read_text().strip())
    except (ValueError, OSError):
        return None
    if _is_pid_alive(pid):
        return pid
    # Stale PID file
    PID_FILE.unlink(missing_ok=True)
    return None


def _is_pid_alive(pid: int) -> bool:
    """Check if a process with the given PID is running."""
    try:
        os.kill(pid, 0)
        return True
    except OSError:
        return False


def _write_pid(pid: int) -> None:
    PID_FILE.write_text(str(pid))


def _kill_pid(pid: int) -> bool:
    """Send SIGTERM to a process. Returns True if the signal was sent."""
    try:
        os.kill(pid, signal.SIGTERM)
        return True
    except OSError:
        return False


def _wait_for_exit(pid: int, timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if not _is_pid_alive(pid):
            return True
        time.sleep(0.1)
    return not _is_pid_alive(pid)


def _is_port_free(port: int) -> bool:
    """Check if a port is available for binding."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", port))
        return True
    except OSError:
        return False


def cmd_start(args: argparse.Namespace) -> None:
    """Start the server in the background."""
    existing_pid = _read_pid()
    if existing_pid is not None:
        print(f"Server already running (PID {existing_pid}). Use 'restart' or 'stop' first.")
        sys.exit(1)

    if not _is_port_free(args.port):
        print(f"Error: Port {args.port} is in use by another process.")
        sys.exit(1)

    uvicorn_cmd = [
        sys.executable, "-m", "uvicorn",
        "bizdesk.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]

    print(f"Starting server on {args.host}:{args.port}...")
    proc = subprocess.Popen(uvicorn_cmd, cwd=str(ROOT_DIR))

    _write_pid(proc.pid)
    print(f"Server started (PID {proc.pid}).")
    print(f"  API:       http://{args.host}:{args.port}/api")
    print(f"  Health:    http://{args.host}:{args.port}/api/health")
    print(f"  PID file:  {PID_FILE}")


def cmd_stop(args: argparse.Namespace) -> None:
    """Stop the running server."""
    pid = _read_pid()
    if pid is None:
        print("Server is not running.")
        return

    print(f"Stopping server (PID {pid})...")
    if _kill_pid(pid) and not _wait_for_exit(pid):
        print("Warning: Process did not exit within 3 seconds.")

    PID_FILE.unlink(missing_ok=True)
    if not _is_pid_alive(pid):
        print("Server stopped.")
    else:
        print("Warning: Server may still be running.")


def cmd_restart(args: argparse.Namespace) -> None:
    """Stop then start the server."""
    cmd_stop(args)
    if not _is_port_free(args.port):
        time.sleep(1.0)
    cmd_start(args)


def cmd_status(args: argparse.Namespace) -> None:
    """Check if the server is running."""
    pid = _read_pid()
    if pid is not None:
        print(f"Server is running (PID {pid}).")
    elif not _is_port_free(args.port):
        print(f"No PID file, but port {args.port} is in use.")
    else:
        print(f"Server is not running (port {args.port} is free).")


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations."""
    from bizdesk.config import configure_logging
    from bizdesk.core.exceptions import DatabaseError
    from bizdesk.infrastructure.storage.sqlite.migrations.migrator import (
        initialize_database,
    )

    configure_logging()
    try:
        applied = asyncio.run(initialize_database())
    except DatabaseError as e:
        print(f"Migration failed: {e.message}")
        sys.exit(1)
    if not applied:
        print("Database is up to date.")
    for migration in applied:
        print(f"  applied v{migration.version}_{migration.name}")


async def _sweep_once():
    from bizdesk.application.scheduler import build_reminder_scheduler
    from bizdesk.infrastructure.storage.sqlite import close_connection_pool
    from bizdesk.infrastructure.storage.sqlite.migrations.migrator import (
        initialize_database,
    )

    await initialize_database()
    try:
        return await build_reminder_scheduler().tick(trigger="cli")
    finally:
        await close_connection_pool()


def cmd_sweep(args: argparse.Namespace) -> None:
    """Run a single reminder sweep in this process."""
    from bizdesk.config import configure_logging

    configure_logging()
    result = asyncio.run(_sweep_once())
    print(
        f"scanned={result.scanned} fired={result.fired} "
        f"user_notified={result.user_notified} client_notified={result.client_notified} "
        f"notify_failures={result.notify_failures} errors={result.errors} "
        f"duration_ms={result.duration_ms:.1f}"
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Bizdesk management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, func, help_text in (
        ("start", cmd_start, "Start the server"),
        ("restart", cmd_restart, "Restart the server"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
        p.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
        p.set_defaults(func=func)

    p_stop = sub.add_parser("stop", help="Stop the server")
    p_stop.set_defaults(func=cmd_stop)

    p_status = sub.add_parser("status", help="Check if server is running")
    p_status.add_argument("--port", type=int, default=8000, help="Port to check (default: 8000)")
    p_status.set_defaults(func=cmd_status)

    p_migrate = sub.add_parser("migrate", help="Apply database migrations")
    p_migrate.set_defaults(func=cmd_migrate)

    p_sweep = sub.add_parser("sweep", help="Run one reminder sweep now")
    p_sweep.set_defaults(func=cmd_sweep)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
