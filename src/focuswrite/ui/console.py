"""Terminal front end: console pickers and the line-at-a-time loop."""

from __future__ import annotations

import logging as py_logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from focuswrite.errors import user_facing_error
from focuswrite.results import CommandResult
from focuswrite.session import WritingSession

logger = py_logging.getLogger(__name__)

Prompt = Callable[[str], str]

COMMAND_PREFIX = ":"
HELP_TEXT = """Type a line and press Enter to commit it.
Commands:
  :open [PATH]    open a document (asks for a path when omitted)
  :new            create a new empty document
  :save           save the document, choosing a location if needed
  :resume         reopen the last document
  :recent         list recent documents
  :forget PATH    remove a document from the recent list
  :clear          start over with an empty, unsaved document
  :help           show this help
  :quit           leave"""


class ConsolePickers:
    """Pickers that read paths from the terminal. An empty answer cancels."""

    def __init__(self, prompt: Prompt = input) -> None:
        self._prompt = prompt

    def pick_open_file(self) -> str | None:
        return self._ask("Open file (empty to cancel): ")

    def pick_save_location(self, default_name: str) -> str | None:
        return self._ask(f"Save {default_name} as (empty to cancel): ")

    def pick_directory(self) -> str | None:
        return self._ask("Work directory (empty to cancel): ")

    def _ask(self, message: str) -> str | None:
        try:
            answer = self._prompt(message).strip()
        except EOFError:
            return None
        if not answer:
            return None
        return str(Path(answer).expanduser().resolve())


def ask_use_default_location(prompt: Prompt, work_directory: str) -> bool:
    where = work_directory or "the default documents folder"
    try:
        answer = prompt(f"Save to {where}? [Y/n] ").strip().lower()
    except EOFError:
        return True
    return answer in ("", "y", "yes")


def _report(result: CommandResult, output: TextIO) -> None:
    if result.success or result.reason == "empty":
        return
    if result.canceled:
        print("Cancelled; the document stays in memory.", file=output)
        return
    print(user_facing_error(result.error or "operation failed"), file=output)


def _print_recent(session: WritingSession, output: TextIO) -> None:
    files = session.refresh_recent_files()
    if not files:
        print("No recent documents.", file=output)
        return
    for index, item in enumerate(files, start=1):
        print(f"{index:>2}. {item['name']}  ({item['timeAgo']})  {item['path']}", file=output)


def _run_command(session: WritingSession, command: str, output: TextIO) -> bool:
    """Execute a ``:command``. Returns False when the loop should stop."""
    name, _, argument = command.partition(" ")
    argument = argument.strip()
    if name in ("quit", "q", "exit"):
        return False
    if name == "open":
        result = session.open_file_at_path(argument) if argument else session.open_file()
        _report(result, output)
        if result.success:
            print(f"Opened {session.file_name}: {session.word_count} characters", file=output)
    elif name == "new":
        _report(session.new_file(), output)
    elif name == "save":
        result = session.save_file()
        _report(result, output)
        if result.success:
            print(f"Saved {session.file_path}", file=output)
    elif name == "resume":
        _report(session.resume_last_file(), output)
    elif name == "recent":
        _print_recent(session, output)
    elif name == "forget" and argument:
        _report(session.remove_from_recent(argument), output)
    elif name == "clear":
        session.clear_file()
    elif name == "help":
        print(HELP_TEXT, file=output)
    else:
        print(f"Unknown command: {COMMAND_PREFIX}{command}", file=output)
    return True


def run_console_session(
    session: WritingSession,
    *,
    prompt: Prompt = input,
    output: TextIO | None = None,
) -> int:
    stream = output or sys.stdout
    print(HELP_TEXT, file=stream)

    def first_save() -> CommandResult:
        use_default = ask_use_default_location(prompt, session.work_directory)
        return session.negotiate_first_save(use_default=use_default)

    while True:
        if session.previous_line:
            print(f"  | {session.previous_line}", file=stream)
        try:
            raw = prompt(f"{session.display_file_name} [{session.word_count}]> ")
        except (EOFError, KeyboardInterrupt):
            print("", file=stream)
            break

        if raw.startswith(COMMAND_PREFIX):
            if not _run_command(session, raw[len(COMMAND_PREFIX) :].strip(), stream):
                break
            continue

        result = session.commit_line(raw, on_first_save=first_save)
        _report(result, stream)
        if result.success and result.get("filePath"):
            print(f"Writing to {result.get('filePath')}", file=stream)

    if session.has_unsaved_content:
        logger.warning("Leaving with unsaved content (%s characters)", session.word_count)
        print("Warning: the document was never saved.", file=stream)
    return 0
