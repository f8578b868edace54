# src/timeplanner/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import time
from collections.abc import Callable
from dataclasses import replace
from datetime import date, timedelta
from datetime import time as dtime
from typing import cast

from ..categories.category_models import MainCategory
from ..core.result import PlannerFailure
from ..core.state import AppState
from ..core.work import ActionResult, ShowError
from ..schedules.home_contract import HomeViewState
from ..schedules.schedule_models import Schedule, TimeTask
from ..schedules.schedule_work import (
    ChangeTaskDoneState,
    CreateSchedule,
    LoadScheduleByDate,
    TimeTaskShiftDown,
    TimeTaskShiftUp,
)
from ..settings.theme_store import Language, ThemeColors
from ..templates.template_models import Template
from ..templates.template_sorting import TemplatesSortedType
from ..templates.template_work import (
    AddTemplate,
    DeleteTemplate,
    EditTemplate,
    LoadTemplates,
    TemplatesWorkProcessor,
)

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /day, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing / rendering helpers ----


def parse_day(raw: str | None, today: date) -> date:
    if not raw or raw.lower() == "today":
        return today
    if raw.lower() == "tomorrow":
        return today + timedelta(days=1)
    if raw.lower() == "yesterday":
        return today - timedelta(days=1)
    return date.fromisoformat(raw)


def parse_days(raw: str) -> tuple[int, ...]:
    """'days=0,2,4' or '0,2,4' -> (0, 2, 4)."""
    value = raw.split("=", 1)[1] if "=" in raw else raw
    return tuple(int(p) for p in value.replace(" ", "").split(",") if p)


def _fmt_range(task: TimeTask) -> str:
    rng = task.time_range
    end = "24:00" if rng.end.time() == dtime.min and rng.end.date() > task.date else f"{rng.end:%H:%M}"
    return f"{rng.start:%H:%M}-{end}"


def render_schedule(schedule: Schedule) -> str:
    if not schedule.time_tasks:
        return f"Schedule {schedule.date.isoformat()}: no tasks."
    lines = [f"Schedule {schedule.date.isoformat()}{' (completed)' if schedule.is_completed else ''}:"]
    for i, task in enumerate(schedule.time_tasks, start=1):
        done = "x" if task.is_completed else " "
        flags = ""
        if task.is_important:
            flags += " !"
        if task.is_enable_notification:
            flags += " (notify)"
        lines.append(
            f"  {i}. [{done}] {_fmt_range(task)} cat={task.category_id} "
            f"{task.execution_status.value}{flags}  key={task.key}"
        )
    return "\n".join(lines)


def render_template(template: Template) -> str:
    minutes = int(template.duration.total_seconds() // 60)
    days = ",".join(str(d) for d in template.repeat_days) or "-"
    notify = " (notify)" if template.is_enable_notification else ""
    return (
        f"#{template.id} {template.start_time:%H:%M}-{template.end_time:%H:%M} "
        f"({minutes} min) cat={template.category_id} days={days}{notify}"
    )


def render_home(view: HomeViewState) -> str:
    if view.date is None:
        return "No day loaded. Use /day [YYYY-MM-DD]."
    error = f"\nLast error: {view.last_error}" if view.last_error else ""
    if view.schedule is not None:
        return render_schedule(view.schedule) + error
    lines = [f"No schedule for {view.date.isoformat()}."]
    if view.planned_templates:
        lines.append("Planned templates (use /create):")
        lines.extend(f"  {render_template(t)}" for t in view.planned_templates)
    else:
        lines.append("No repeating templates for this weekday. Use /create <template_id> ...")
    return "\n".join(lines) + error


def _failure_text(failure: PlannerFailure | None) -> str:
    return ShowError(failure).message if failure is not None else "unknown error"


def _dispatch(state: AppState, command, settle_seconds: float = 1.0) -> str:
    """Dispatch on the background loop, then wait briefly for the view to change."""
    before = state.home.state
    state.runner.dispatch(command)
    deadline = time.monotonic() + settle_seconds
    while state.home.state is before and time.monotonic() < deadline:
        time.sleep(0.02)
    return render_home(state.home.state)


def _require_runner(state: AppState) -> str | None:
    if state.runner is None or state.home is None:
        return "Schedule view is not running."
    return None


def _resolve_task(view: HomeViewState, raw: str) -> TimeTask | None:
    if view.schedule is None:
        return None
    try:
        ref = int(raw)
    except ValueError:
        return None
    tasks = view.schedule.time_tasks
    if 1 <= ref <= len(tasks):
        return tasks[ref - 1]
    return view.schedule.find_task(ref)


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    view = state.home.state if state.home is not None else HomeViewState()
    loaded = view.date.isoformat() if view.date else "-"
    refreshing = "ON" if getattr(state.home, "is_refreshing", False) else "OFF"
    return (
        "Status:\n"
        f"  Day: {loaded} (refresh loop {refreshing})\n"
        f"  Refresh interval: {getattr(settings, 'refresh_interval_seconds', '?')}s\n"
        f"  Shift step: {getattr(settings, 'shift_minutes', '?')} min\n"
        f"  Templates sort: {state.templates_sort.value}\n"
        f"  Theme: {state.theme.theme_colors.value}, language={state.theme.language.value}, "
        f"dynamic={'ON' if state.theme.is_dynamic_color_enable else 'OFF'}"
    )


def cmd_day(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /day              -> load today
    /day tomorrow     -> load tomorrow
    /day 2026-10-19   -> load that date
    """
    missing = _require_runner(state)
    if missing:
        return missing
    try:
        day = parse_day(args[0] if args else None, state.date_provider.now().date())
    except ValueError:
        return "Usage: /day [YYYY-MM-DD|today|tomorrow|yesterday]"

    if emit:
        with contextlib.suppress(Exception):
            emit(f"[DAY] Loading {day.isoformat()}...")
    return _dispatch(state, LoadScheduleByDate(day))


def cmd_show(state: AppState, args: list[str]) -> str:
    missing = _require_runner(state)
    if missing:
        return missing
    return render_home(state.home.state)


def cmd_create(state: AppState, args: list[str]) -> str:
    """
    /create                -> create the loaded day from its planned templates
    /create 3 5            -> create the loaded day from templates #3 and #5
    """
    missing = _require_runner(state)
    if missing:
        return missing
    view = state.home.state
    if view.date is None:
        return "Load a day first: /day [YYYY-MM-DD]."
    if view.schedule is not None:
        return f"Schedule {view.date.isoformat()} already exists."

    templates = list(view.planned_templates)
    if args:
        try:
            wanted = [int(a) for a in args]
        except ValueError:
            return "Usage: /create [template_id ...]"
        found = state.templates.fetch_templates()
        if not found.ok:
            return f"Error: {_failure_text(found.failure)}"
        by_id = {t.id: t for t in found.value or []}
        unknown = [i for i in wanted if i not in by_id]
        if unknown:
            return f"Unknown template id(s): {', '.join(map(str, unknown))}"
        templates = [by_id[i] for i in wanted]

    return _dispatch(state, CreateSchedule(view.date, tuple(templates)))


def cmd_done(state: AppState, args: list[str]) -> str:
    missing = _require_runner(state)
    if missing:
        return missing
    view = state.home.state
    task = _resolve_task(view, args[0]) if args else None
    if task is None:
        return "Usage: /done <n|key> (n = position in /show)."
    return _dispatch(state, ChangeTaskDoneState(task.date, task.key))


def _cmd_shift(state: AppState, args: list[str], *, up: bool) -> str:
    missing = _require_runner(state)
    if missing:
        return missing
    view = state.home.state
    task = _resolve_task(view, args[0]) if args else None
    if task is None:
        return f"Usage: /{'up' if up else 'down'} <n|key> (n = position in /show)."
    command = TimeTaskShiftUp(task) if up else TimeTaskShiftDown(task)
    return _dispatch(state, command)


def cmd_up(state: AppState, args: list[str]) -> str:
    return _cmd_shift(state, args, up=True)


def cmd_down(state: AppState, args: list[str]) -> str:
    return _cmd_shift(state, args, up=False)


def _templates_reply(state: AppState, result) -> str:
    if isinstance(result, ActionResult):
        templates = result.action.templates
        if not templates:
            return "No templates yet. Use /template add HH:MM HH:MM <category_id>."
        lines = [f"Templates (sorted by {state.templates_sort.value}):"]
        lines.extend(f"  {render_template(t)}" for t in templates)
        return "\n".join(lines)
    return f"Error: {result.effect.message}"


def cmd_templates(state: AppState, args: list[str]) -> str:
    """
    /templates                    -> list with the current sort
    /templates date|category|duration
    """
    if args:
        state.templates_sort = TemplatesSortedType.parse(args[0], state.templates_sort)
    processor = TemplatesWorkProcessor(state.templates)
    return _templates_reply(state, processor.work(LoadTemplates(state.templates_sort)))


def _parse_template(args: list[str], template_id: int) -> Template | None:
    """'HH:MM HH:MM <category_id> [notify|silent] [important] [days=..]' -> Template (None on bad options)."""
    start = dtime.fromisoformat(args[0])
    end = dtime.fromisoformat(args[1])
    category_id = int(args[2])
    notify = True
    important = False
    days: tuple[int, ...] = ()
    for opt in args[3:]:
        low = opt.lower()
        if low == "silent":
            notify = False
        elif low == "notify":
            notify = True
        elif low == "important":
            important = True
        elif low.startswith("days="):
            days = parse_days(low)
        else:
            return None
    return Template(
        id=template_id,
        start_time=start,
        end_time=end,
        category_id=category_id,
        is_important=important,
        is_enable_notification=notify,
        repeat_days=days,
    )


def cmd_template(state: AppState, args: list[str]) -> str:
    """
    /template add 09:00 10:00 <category_id> [notify|silent] [important] [days=0,1,2]
    /template edit <id> 09:00 10:00 <category_id> [...same options]
    /template del <id>
    """
    usage = (
        "Usage:\n"
        "  /template add HH:MM HH:MM <category_id> [notify|silent] [important] [days=0,1,..]\n"
        "  /template edit <id> HH:MM HH:MM <category_id> [notify|silent] [important] [days=0,1,..]\n"
        "  /template del <id>"
    )
    if not args:
        return usage

    processor = TemplatesWorkProcessor(state.templates)
    sub = args[0].lower()

    if sub in ("add", "edit"):
        fields = args[1:] if sub == "add" else args[2:]
        if len(fields) < 3:
            return usage
        try:
            template_id = 0 if sub == "add" else int(args[1])
            template = _parse_template(fields, template_id)
        except ValueError as e:
            return f"Invalid template: {e}"
        if template is None:
            return usage
        if sub == "add":
            command = AddTemplate(template, state.templates_sort)
        else:
            command = EditTemplate(template, state.templates_sort)
        return _templates_reply(state, processor.work(command))

    if sub in ("del", "delete", "rm"):
        if len(args) < 2:
            return usage
        try:
            template_id = int(args[1])
        except ValueError:
            return usage
        return _templates_reply(state, processor.work(DeleteTemplate(template_id, state.templates_sort)))

    return usage


def cmd_categories(state: AppState, args: list[str]) -> str:
    result = state.categories.fetch_categories()
    if not result.ok:
        return f"Error: {_failure_text(result.failure)}"
    categories = result.value or []
    if not categories:
        return "No categories yet. Use /category add <name>."
    lines = ["Categories:"]
    for c in categories:
        lines.append(f"  {c.main_category.id}. {c.main_category.name}")
        for s in c.sub_categories:
            lines.append(f"      {s.id}) {s.name}")
    return "\n".join(lines)


def cmd_category(state: AppState, args: list[str]) -> str:
    """
    /category add <name>
    /category rename <id> <name>
    /category del <id>
    /category sub <main_id> <name>
    /category subdel <sub_id>
    """
    usage = (
        "Usage:\n"
        "  /category add <name>\n"
        "  /category rename <id> <name>\n"
        "  /category del <id>\n"
        "  /category sub <main_id> <name>\n"
        "  /category subdel <sub_id>"
    )
    if not args:
        return usage
    sub = args[0].lower()

    try:
        if sub == "add" and len(args) >= 2:
            result = state.categories.add_main_category(" ".join(args[1:]))
            return f"Category added: {result.value}" if result.ok else f"Error: {_failure_text(result.failure)}"

        if sub == "rename" and len(args) >= 3:
            result = state.categories.update_main_category(MainCategory(id=int(args[1]), name=" ".join(args[2:])))
            return "Category renamed." if result.ok else f"Error: {_failure_text(result.failure)}"

        if sub in ("del", "delete", "rm") and len(args) == 2:
            result = state.categories.delete_main_category(int(args[1]))
            return "Category deleted." if result.ok else f"Error: {_failure_text(result.failure)}"

        if sub == "sub" and len(args) >= 3:
            result = state.categories.add_sub_category(int(args[1]), " ".join(args[2:]))
            return f"Sub-category added: {result.value}" if result.ok else f"Error: {_failure_text(result.failure)}"

        if sub == "subdel" and len(args) == 2:
            result = state.categories.delete_sub_category(int(args[1]))
            return "Sub-category deleted." if result.ok else f"Error: {_failure_text(result.failure)}"
    except ValueError:
        return usage

    return usage


def cmd_theme(state: AppState, args: list[str]) -> str:
    """
    /theme                     -> show
    /theme colors light|dark|default
    /theme language en|ru|default
    /theme dynamic on|off
    """
    theme = state.theme
    if not args:
        return (
            f"Theme: colors={theme.theme_colors.value} language={theme.language.value} "
            f"dynamic={'on' if theme.is_dynamic_color_enable else 'off'}"
        )
    if len(args) != 2:
        return "Usage: /theme [colors|language|dynamic] <value>"

    key, value = args[0].lower(), args[1].lower()
    try:
        if key == "colors":
            theme = replace(theme, theme_colors=ThemeColors(value))
        elif key == "language":
            theme = replace(theme, language=Language(value))
        elif key == "dynamic":
            theme = replace(theme, is_dynamic_color_enable=value in ("on", "1", "true", "yes"))
        else:
            return "Usage: /theme [colors|language|dynamic] <value>"
    except ValueError:
        return f"Unsupported {key} value: {value}"

    try:
        state.theme_store.update_settings(theme)
    except Exception:
        logger.exception("Failed to save theme settings")
        return "Error: failed to save theme settings."
    state.theme = theme
    return "Theme saved."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show current day, refresh loop and preferences.")
registry.register("day", cmd_day, help_text="Load a day: /day [YYYY-MM-DD|today|tomorrow].")
registry.register("show", cmd_show, help_text="Show the loaded day.", aliases=["ls"])
registry.register("create", cmd_create, help_text="Create the loaded day from templates: /create [template_id ...].")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n|key>.")
registry.register("up", cmd_up, help_text="Shift a task later: /up <n|key>.")
registry.register("down", cmd_down, help_text="Shift a task earlier: /down <n|key>.")
registry.register("templates", cmd_templates, help_text="List templates: /templates [date|category|duration].")
registry.register(
    "template",
    cmd_template,
    help_text="Manage templates: /template add ... | /template edit <id> ... | /template del <id>.",
)
registry.register("categories", cmd_categories, help_text="List categories.")
registry.register("category", cmd_category, help_text="Manage categories: /category add|rename|del|sub|subdel.")
registry.register("theme", cmd_theme, help_text="Theme settings: /theme [colors|language|dynamic] <value>.")
