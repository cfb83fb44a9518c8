# src/plant_care/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import cast

from ..care import care_api
from ..care.care_models import (
    CareInstructions,
    CareTask,
    CareType,
    FertilizingInstructions,
    TaskType,
    WateringInstructions,
)
from ..care.frequency import parse_frequency
from ..core.state import AppState

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

SHORT_ID = 8


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /tasks, ...)."""

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

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Quoted arguments keep their spaces: /add "Snake plant" watering="every 10 days".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
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
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except ValueError as e:
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting helpers ----


def _fmt_day(ts: float | None, now_ts: float) -> str:
    if ts is None:
        return "never"
    day = datetime.fromtimestamp(ts).astimezone().date()
    today = datetime.fromtimestamp(now_ts).astimezone().date()
    delta = (day - today).days
    if delta == 0:
        return "Today"
    if delta == 1:
        return "Tomorrow"
    if delta == -1:
        return "Yesterday"
    return day.isoformat()


def _fmt_task(task: CareTask, now_ts: float) -> str:
    when = _fmt_day(task.completed_at if task.is_completed else task.scheduled_at, now_ts)
    flag = " [OVERDUE]" if task.is_overdue else ""
    line = f"  {task.id[:SHORT_ID]}  {task.task_type.value:<11} {task.plant_name}  {when}{flag}"
    if task.notes:
        line += f"  ({task.notes})"
    return line


def _fmt_section(title: str, tasks: list[CareTask], now_ts: float) -> str:
    if not tasks:
        return f"{title}: none"
    return "\n".join([f"{title} ({len(tasks)}):", *(_fmt_task(t, now_ts) for t in tasks)])


def _resolve_id(kind: str, prefix: str, ids: Iterable[str]) -> str:
    """Full id from a unique prefix (ids are long; the console shows 8 chars)."""
    matches = [i for i in ids if i.startswith(prefix)]
    if not matches:
        raise ValueError(f"no {kind} matches id {prefix!r}")
    if len(matches) > 1:
        raise ValueError(f"id {prefix!r} matches {len(matches)} {kind}s; type more characters")
    return matches[0]


# ---- commands ----


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    summary = care_api.care_summary(state)
    now_ts = state.now()
    lines = [
        "Status:",
        f"  Plants: {summary.plants}",
        f"  Pending tasks: {summary.pending} (overdue: {summary.overdue}, due this week: {summary.due_this_week})",
        f"  Completed tasks: {summary.completed}",
    ]
    upcoming = care_api.upcoming(state)
    if upcoming:
        lines.append("Upcoming:")
        lines.extend(_fmt_task(t, now_ts) for t in upcoming)
    return "\n".join(lines)


def cmd_plants(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /plants [name|added|cared]
    """
    sort_by = args[0] if args else "name"
    if sort_by.lower() not in care_api.PLANT_SORTS:
        return f"Usage: /plants [{'|'.join(care_api.PLANT_SORTS)}]"
    plants = care_api.sorted_plants(state, sort_by)
    if not plants:
        return "No plants yet. Use /add <name> watering=<frequency> fertilizing=<frequency>."

    now_ts = state.now()
    lines = [f"Plants ({len(plants)}):"]
    for p in plants:
        lines.append(f"  {p.id[:SHORT_ID]}  {p.name}" + (f" ({p.scientific_name})" if p.scientific_name else ""))
        lines.append(
            "      watered: {w}, fertilized: {f}, repotted: {r}".format(
                w=_fmt_day(p.last_care_at(CareType.WATERED), now_ts),
                f=_fmt_day(p.last_care_at(CareType.FERTILIZED), now_ts),
                r=_fmt_day(p.last_care_at(CareType.REPOTTED), now_ts),
            )
        )
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <name> [watering=<frequency>] [fertilizing=<frequency>] [location=<text>]
    """
    name_parts: list[str] = []
    opts: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep and key.lower() in ("watering", "fertilizing", "location", "scientific"):
            opts[key.lower()] = value
        else:
            name_parts.append(arg)

    name = " ".join(name_parts).strip()
    if not name:
        return "Usage: /add <name> [watering=<frequency>] [fertilizing=<frequency>] [location=<text>]"

    instructions = None
    if "watering" in opts or "fertilizing" in opts:
        instructions = CareInstructions(
            watering=WateringInstructions(frequency=opts["watering"]) if "watering" in opts else None,
            fertilizing=(
                FertilizingInstructions(frequency=opts["fertilizing"]) if "fertilizing" in opts else None
            ),
        )

    plant = care_api.add_plant(
        state,
        name,
        care_instructions=instructions,
        scientific_name=opts.get("scientific") or None,
        location=opts.get("location") or None,
    )

    lines = [f"Added {plant.name} ({plant.id[:SHORT_ID]})."]
    if instructions is not None:
        for task_type, freq in instructions.schedules():
            lines.append(f"  {task_type.value}: every {parse_frequency(freq)} day(s)")
    return "\n".join(lines)


def cmd_remove(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /remove <plant_id>"
    plant_id = _resolve_id("plant", args[0], (p.id for p in state.plants.list_plants()))
    plant = state.plants.get_plant(plant_id)
    removed = care_api.remove_plant(state, plant_id)
    name = plant.name if plant else plant_id
    if removed is None:
        return f"Could not remove {name}; storage is unavailable."
    return f"Removed {name} and {removed} task(s)."


def cmd_care(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /care <plant_id> <watered|fertilized|repotted>   -> record care done now, outside any task
    """
    if len(args) < 2:
        return f"Usage: /care <plant_id> <{'|'.join(c.value for c in CareType)}>"
    plant_id = _resolve_id("plant", args[0], (p.id for p in state.plants.list_plants()))
    care_type = CareType.parse(args[1])
    if not care_api.record_plant_care(state, plant_id, care_type):
        return f"Could not record {care_type.value} for {args[0]}."
    plant = state.plants.get_plant(plant_id)
    return f"Marked {plant.name if plant else plant_id} as {care_type.value} today."



_TASK_VIEWS = {
    "pending": "pending",
    "week": "due_this_week",
    "overdue": "overdue",
    "completed": "completed",
    "done": "completed",
}


def cmd_tasks(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /tasks            -> overdue + due this week
    /tasks <view>     -> pending | week | overdue | completed
    """
    buckets = care_api.task_buckets(state)
    now_ts = state.now()

    if not args:
        return "\n".join(
            [
                _fmt_section("Overdue", buckets.overdue, now_ts),
                _fmt_section("Due this week", buckets.due_this_week, now_ts),
            ]
        )

    view = _TASK_VIEWS.get(args[0].lower())
    if view is None:
        return "Usage: /tasks [pending|week|overdue|completed]"
    title = args[0].lower().capitalize()
    return _fmt_section(title, getattr(buckets, view), now_ts)


def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /done <task_id> [notes...]"
    task_id = _resolve_id("task", args[0], (t.id for t in state.tasks.list_tasks()))
    notes = " ".join(args[1:]).strip() or None

    task = care_api.complete(state, task_id, notes)
    if task is None:
        return f"No task {args[0]}."
    return f"Completed {task.task_type.value} for {task.plant_name}."


def cmd_schedule(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if len(args) < 2:
        types = "|".join(t.value for t in TaskType)
        return f"Usage: /schedule <plant_id> <{types}> [in_days]"
    plant_id = _resolve_id("plant", args[0], (p.id for p in state.plants.list_plants()))
    try:
        in_days = float(args[2]) if len(args) > 2 else 0.0
    except ValueError:
        raise ValueError(f"in_days must be a number, got {args[2]!r}") from None

    task = care_api.schedule_task(state, plant_id, args[1], in_days=in_days)
    if task is None:
        return f"No plant {args[0]}."
    return f"Scheduled {task.task_type.value} for {task.plant_name} ({_fmt_day(task.scheduled_at, state.now())})."


def cmd_prefs(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /prefs                              -> show
    /prefs <key> <value>                -> e.g. theme dark, units.temperature F
    /prefs location <city> <country> [timezone]
    """
    if not args:
        p = state.preferences.load()
        loc = f"{p.location.city}, {p.location.country}" if p.location else "not set"
        return (
            "Preferences:\n"
            f"  theme: {p.theme}\n"
            f"  notifications.care_reminders: {p.notifications.care_reminders}\n"
            f"  notifications.plant_tips: {p.notifications.plant_tips}\n"
            f"  notifications.watering_alerts: {p.notifications.watering_alerts}\n"
            f"  units.temperature: {p.units.temperature}\n"
            f"  units.measurement: {p.units.measurement}\n"
            f"  location: {loc}"
        )

    if args[0].lower() == "location":
        if len(args) < 3:
            return "Usage: /prefs location <city> <country> [timezone]"
        p = state.preferences.set_location(args[1], args[2], args[3] if len(args) > 3 else "")
        return f"Location set to {p.location.city}, {p.location.country}."

    if len(args) < 2:
        return "Usage: /prefs <key> <value>"
    state.preferences.update(**{args[0]: args[1]})
    return f"Set {args[0]} = {args[1]}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Plant/task counts and upcoming care.")
registry.register("plants", cmd_plants, help_text="List plants with last care dates: /plants [name|added|cared].")
registry.register(
    "add",
    cmd_add,
    help_text="Add a plant: /add <name> watering=<freq> fertilizing=<freq>.",
)
registry.register("remove", cmd_remove, help_text="Remove a plant and its tasks: /remove <plant_id>.")
registry.register(
    "care",
    cmd_care,
    help_text="Record care done now: /care <plant_id> watered|fertilized|repotted.",
)
registry.register(
    "tasks", cmd_tasks, help_text="Care tasks: /tasks [pending|week|overdue|completed]."
)
registry.register("done", cmd_done, help_text="Complete a task: /done <task_id> [notes].")
registry.register(
    "schedule",
    cmd_schedule,
    help_text="One-off task: /schedule <plant_id> <type> [in_days].",
)
registry.register("prefs", cmd_prefs, help_text="Show or change preferences: /prefs [key value].")
