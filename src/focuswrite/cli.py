"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import json
import logging as py_logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from .app import Application, build_application
from .commands import CommandSurface
from .errors import ExitCode, FocusWriteError, user_facing_error
from .logging import configure_logging, default_log_path
from .results import CommandResult
from .storage import Pickers
from .ui.console import ConsolePickers, run_console_session

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")
_VALID_DIALOGS = ("console", "qt")

SessionRunner = Callable[[Application, argparse.Namespace], int]


def _log_level_type(value: str) -> str:
    normalized = value.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def parse_config_value(raw: str) -> object:
    """Interpret a CLI value as JSON when possible, else as a plain string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="focuswrite")
    parser.add_argument("--config", type=Path, default=None, help="Path of the config file")
    parser.add_argument("--log-level", type=_log_level_type, default="WARN")
    parser.add_argument("--log-file", type=Path, default=None)
    commands = parser.add_subparsers(dest="command")

    write = commands.add_parser("write", help="Write one line at a time (default)")
    write.add_argument("path", nargs="?", default=None, help="Document to open")
    write.add_argument("--resume", action="store_true", help="Reopen the last document")
    write.add_argument("--dialogs", choices=_VALID_DIALOGS, default="console")

    config = commands.add_parser("config", help="Read or change configuration")
    config_actions = config.add_subparsers(dest="action", required=True)
    config_actions.add_parser("get")
    config_set = config_actions.add_parser("set")
    config_set.add_argument("key")
    config_set.add_argument("value")
    config_update = config_actions.add_parser("update")
    config_update.add_argument("updates", help="JSON object of top-level keys")

    workdir = commands.add_parser("workdir", help="Show or choose the work directory")
    workdir.add_argument(
        "action", nargs="?", choices=("show", "choose", "ensure", "default"), default="show"
    )

    last_file = commands.add_parser("last-file", help="Show, set or clear the last file")
    last_file_actions = last_file.add_subparsers(dest="action")
    last_file_actions.add_parser("show")
    last_file_set = last_file_actions.add_parser("set")
    last_file_set.add_argument("path")
    last_file_actions.add_parser("clear")

    recent = commands.add_parser("recent", help="Manage recently used documents")
    recent_actions = recent.add_subparsers(dest="action")
    recent_actions.add_parser("list")
    recent_add = recent_actions.add_parser("add")
    recent_add.add_argument("path")
    recent_add.add_argument("name", nargs="?", default="")
    recent_remove = recent_actions.add_parser("remove")
    recent_remove.add_argument("path")
    recent_actions.add_parser("clear")

    commands.add_parser("auto-name", help="Generate the next free untitled file name")

    read = commands.add_parser("read", help="Read a document and record it as recent")
    read.add_argument("path")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def build_pickers(namespace: argparse.Namespace) -> Pickers:
    if getattr(namespace, "dialogs", "console") == "qt":
        from focuswrite.ui.dialogs import QtPickers

        return QtPickers()
    return ConsolePickers()


def dispatch(commands: CommandSurface, namespace: argparse.Namespace) -> CommandResult:
    command = namespace.command
    action = getattr(namespace, "action", None)
    if command == "config":
        if action == "set":
            return commands.set_config(namespace.key, parse_config_value(namespace.value))
        if action == "update":
            updates = parse_config_value(namespace.updates)
            if not isinstance(updates, dict):
                raise FocusWriteError(
                    "Config updates must be a JSON object.",
                    code=ExitCode.INVALID_ARGS,
                    hint='Pass something like \'{"maxRecentFiles": 5}\'.',
                )
            return commands.update_config(updates)
        return commands.get_config()
    if command == "workdir":
        if action == "choose":
            return commands.set_work_directory()
        if action == "ensure":
            return commands.ensure_work_directory()
        if action == "default":
            return commands.default_document_root()
        return commands.get_work_directory()
    if command == "last-file":
        if action == "set":
            return commands.set_last_file(namespace.path)
        if action == "clear":
            return commands.clear_last_file()
        return commands.get_last_file()
    if command == "recent":
        if action == "add":
            return commands.add_recent_file(namespace.path, namespace.name)
        if action == "remove":
            return commands.remove_recent_file(namespace.path)
        if action == "clear":
            return commands.clear_recent_files()
        return commands.list_recent_files()
    if command == "auto-name":
        return commands.generate_auto_file_name()
    if command == "read":
        return commands.read_file_by_path(namespace.path)
    raise FocusWriteError(f"Unknown command: {command}", code=ExitCode.INVALID_ARGS)


def run_writing_session(app: Application, namespace: argparse.Namespace) -> int:
    session = app.session
    path = getattr(namespace, "path", None)
    if path:
        result = session.open_file_at_path(str(Path(path).expanduser()))
    elif getattr(namespace, "resume", False):
        result = session.resume_last_file()
    else:
        result = CommandResult.ok()
    if not result.success:
        print(user_facing_error(result.error or "could not open document"), file=sys.stderr)
    return run_console_session(session)


def _exit_code(result: CommandResult) -> int:
    if result.success:
        return int(ExitCode.SUCCESS)
    if result.canceled:
        return int(ExitCode.CANCELED)
    return int(ExitCode.RUNTIME_ERROR)


def main(
    argv: Sequence[str] | None = None,
    *,
    pickers: Pickers | None = None,
    session_runner: SessionRunner | None = None,
) -> int:
    log_path = default_log_path()
    logger = configure_logging(log_file=log_path)
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
    logger = configure_logging(level=namespace.log_level, log_file=log_path)

    try:
        app = build_application(
            pickers or build_pickers(namespace),
            config_path=namespace.config,
        )
        if namespace.command in (None, "write"):
            logger.debug("Starting writing session")
            runner = session_runner or run_writing_session
            return runner(app, namespace)

        logger.debug("Running command %s", namespace.command)
        result = dispatch(app.commands, namespace)
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return _exit_code(result)
    except FocusWriteError as exc:
        logger.error(
            "Handled FocusWriteError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        try:
            hint = f"Inspect logs: {log_path}"
            print(user_facing_error("Unexpected runtime failure", hint=hint), file=sys.stderr)
        except Exception:
            pass
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
