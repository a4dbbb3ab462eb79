"""Command-line surface for Factlet.

Provides subcommands for showing and refreshing the current factlet and
for editing topics, levels, refresh interval, text color and notifications.
"""

import argparse
import asyncio
import sys
from collections.abc import Callable
from datetime import datetime, timezone

from .config import AppConfig, load_config
from .corpus import Category, Factlet, Level
from .logging import configure_logger
from .manager import FactletManager, OnboardingChoices
from .notifications import NotificationScheduler, SQLiteNotificationCenter
from .preferences import NotificationFrequency, PreferenceStore, RefreshInterval, TextColor
from .timeline import TimelineProvider

CHECK = "\033[32m✓\033[0m"


def _mark(selected: bool) -> str:
    return CHECK if selected else " "


def _format_time(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M")


def _format_factlet(factlet: Factlet) -> str:
    return "\n".join([
        "",
        f"  {factlet.category.display_name.upper()}  ·  {factlet.level.display_name}",
        "",
        f"  {factlet.text}",
        "",
    ])


def _open_manager(config: AppConfig) -> FactletManager:
    """Wire a manager to the shared database described by config."""
    event_log = configure_logger(config.log_dir, config.log_max_size_mb)
    event_log.set_surface("cli")

    assert config.db_path is not None
    store = PreferenceStore(config.db_path)
    migration = store.init_db()
    if migration.migrated:
        event_log.log(
            "schema_migration",
            value=migration.to_version,
            from_version=migration.from_version,
            keys=migration.changed_keys,
        )

    center = SQLiteNotificationCenter(config.db_path, authorized=config.notifications_authorized)
    center.init_db()
    scheduler = NotificationScheduler(center, cap=config.notification_cap)
    return FactletManager(store, scheduler, event_log=event_log)


def _close_manager(manager: FactletManager) -> None:
    manager.store.close()
    center = manager.scheduler.center
    if isinstance(center, SQLiteNotificationCenter):
        center.close()


def cmd_show(args: argparse.Namespace, manager: FactletManager) -> int:
    """Show the current factlet, refreshing first if one is due."""
    if args.no_refresh:
        factlet = manager.get_current_factlet()
    else:
        factlet = manager.check_and_refresh_if_needed()

    print(_format_factlet(factlet))
    print(f"Next refresh: {_format_time(manager.next_refresh())}")
    return 0


def cmd_refresh(args: argparse.Namespace, manager: FactletManager) -> int:
    """Show a new factlet now."""
    print(_format_factlet(manager.refresh()))
    return 0


def cmd_topics(args: argparse.Namespace, manager: FactletManager) -> int:
    """List or toggle topics."""
    if args.action == "toggle":
        try:
            category = Category.parse(args.name or "")
        except ValueError as e:
            print(f"Error: {e}")
            return 1
        manager.toggle_category(category)

    prefs = manager.preferences
    print(f"\n{'':<3}{'Topic':<14} Factlets")
    print("-" * 30)
    for category in Category:
        count = manager.count_for_category(category)
        print(f"{_mark(prefs.is_category_selected(category))}  {category.display_name:<14} {count}")
    print(f"\nShowing {len(manager.get_filtered_factlets(prefs))} factlet(s)")
    return 0


def cmd_levels(args: argparse.Namespace, manager: FactletManager) -> int:
    """List or toggle difficulty levels."""
    category: Category | None = None
    try:
        if args.category:
            category = Category.parse(args.category)
            if category.is_wildcard:
                print("Error: choose a specific topic, or omit --category for every topic.")
                return 1
        if args.action == "toggle":
            level = Level.parse(args.level or "")
            manager.toggle_level(level, category)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    scope = category.display_name if category else "all selected topics"
    print(f"\nLevels for {scope}:")
    for level in Level:
        selected = manager.is_level_selected(level, category)
        print(f"{_mark(selected)}  {level.display_name}  ({manager.count_for_level(level)})")
    return 0


def cmd_interval(args: argparse.Namespace, manager: FactletManager) -> int:
    """Show or set the refresh interval."""
    if args.name:
        try:
            manager.set_refresh_interval(RefreshInterval.parse(args.name))
        except ValueError as e:
            print(f"Error: {e}")
            return 1

    current = manager.get_refresh_interval()
    for interval in RefreshInterval:
        print(f"{_mark(interval is current)}  {interval.display_name}")
    return 0


def cmd_color(args: argparse.Namespace, manager: FactletManager) -> int:
    """Show or set the widget text color."""
    if args.name:
        try:
            manager.set_text_color(TextColor.parse(args.name))
        except ValueError as e:
            print(f"Error: {e}")
            return 1

    current = manager.get_text_color()
    for color in TextColor:
        print(f"{_mark(color is current)}  {color.display_name}")
    return 0


def cmd_notify(args: argparse.Namespace, manager: FactletManager) -> int:
    """Manage notifications."""
    if args.action == "frequency":
        if not args.name:
            current = manager.preferences.notification_frequency
            for frequency in NotificationFrequency:
                detail = f"  ({frequency.description})" if frequency.description else ""
                print(f"{_mark(frequency is current)}  {frequency.display_name}{detail}")
            return 0

        try:
            frequency = NotificationFrequency.parse(args.name)
        except ValueError as e:
            print(f"Error: {e}")
            return 1

        count = asyncio.run(manager.set_notification_frequency(frequency))
        if count is None:
            print("Notifications are not allowed. Enable them and try again.")
            return 1

        if frequency.is_off:
            print("Notifications turned off.")
        else:
            print(f"Scheduled {count} notification(s), {frequency.display_name.lower()}.")
        return 0

    center = manager.scheduler.center

    if args.action == "deliver":
        delivered = center.deliver_due(datetime.now(timezone.utc))
        for request in delivered:
            print(f"[{_format_time(request.fire_at)}] {request.payload.title}: {request.payload.body}")
        print(f"Delivered {len(delivered)} notification(s)")
        if delivered and args.open:
            print(_format_factlet(manager.handle_notification_tap(delivered[-1].payload)))
        return 0

    pending = center.pending()
    for request in pending[: args.limit]:
        print(f"{_format_time(request.fire_at)}  {request.payload.title:<12} {request.payload.factlet_id}")
    print(f"\nPending: {len(pending)} notification(s)")
    return 0


def cmd_widget(args: argparse.Namespace, manager: FactletManager) -> int:
    """Render what the widget would show now, from its own store handle."""
    store = PreferenceStore(manager.store.db_path)
    try:
        timeline = TimelineProvider(store).timeline(datetime.now(timezone.utc))
    finally:
        store.close()

    entry = timeline.entries[0]
    print(_format_factlet(entry.factlet))
    print(f"Text color: {entry.text_color.display_name}")
    print(f"Refresh after: {_format_time(timeline.refresh_after)}")
    return 0


def cmd_onboard(args: argparse.Namespace, manager: FactletManager) -> int:
    """Apply first-run choices in one go."""
    try:
        categories = {Category.parse(name) for name in args.category or []}
        interval = RefreshInterval.parse(args.interval) if args.interval else RefreshInterval.HOURLY
        frequency = NotificationFrequency.parse(args.notify) if args.notify else NotificationFrequency.OFF
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    choices = OnboardingChoices(
        categories=categories,
        refresh_interval=interval,
        notification_frequency=frequency,
    )
    enabled = asyncio.run(manager.complete_onboarding(choices))
    if not frequency.is_off and not enabled:
        print("Notifications were not allowed; you can enable them later.")
    print("Onboarding complete.")
    print(_format_factlet(manager.refresh()))
    return 0


def cmd_status(args: argparse.Namespace, manager: FactletManager) -> int:
    """Show every stored preference."""
    prefs = manager.preferences
    topics = ", ".join(sorted(c.display_name for c in prefs.selected_categories))
    print(f"\nTopics:         {topics}")
    for category in prefs.active_categories():
        levels = ", ".join(lv.display_name for lv in Level if lv in prefs.levels_for(category))
        print(f"  {category.display_name:<12}  {levels}")
    print(f"Refresh:        {prefs.refresh_interval.display_name}")
    print(f"Text color:     {prefs.text_color.display_name}")
    print(f"Notifications:  {prefs.notification_frequency.display_name}")
    print(f"Onboarded:      {'yes' if prefs.has_completed_onboarding else 'no'}")
    if prefs.last_update is not None:
        print(f"Last update:    {_format_time(prefs.last_update)}")
    print(f"Refresh due:    {'yes' if manager.is_due() else 'no'}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the factlet CLI."""
    parser = argparse.ArgumentParser(
        prog="factlet",
        description="A small piece of knowledge, on your schedule",
    )

    subparsers = parser.add_subparsers(dest="command", help="Sub-command help")

    show_parser = subparsers.add_parser("show", help="Show the current factlet")
    show_parser.add_argument(
        "--no-refresh",
        action="store_true",
        help="Do not refresh even if a refresh is due",
    )

    subparsers.add_parser("refresh", help="Show a new factlet now")

    topics_parser = subparsers.add_parser("topics", help="List or toggle topics")
    topics_parser.add_argument("action", nargs="?", choices=["list", "toggle"], default="list")
    topics_parser.add_argument("name", nargs="?", help="Topic to toggle (e.g. Science, All)")

    levels_parser = subparsers.add_parser("levels", help="List or toggle difficulty levels")
    levels_parser.add_argument("action", nargs="?", choices=["list", "toggle"], default="list")
    levels_parser.add_argument("level", nargs="?", help="Level to toggle (e.g. 1, level2)")
    levels_parser.add_argument("-c", "--category", help="Restrict to one topic")

    interval_parser = subparsers.add_parser("interval", help="Show or set the refresh interval")
    interval_parser.add_argument("name", nargs="?", help="Hourly, Twice Daily or Daily")

    color_parser = subparsers.add_parser("color", help="Show or set the widget text color")
    color_parser.add_argument("name", nargs="?", help="Light or Dark")

    notify_parser = subparsers.add_parser("notify", help="Manage notifications")
    notify_parser.add_argument(
        "action",
        nargs="?",
        choices=["frequency", "pending", "deliver"],
        default="pending",
    )
    notify_parser.add_argument("name", nargs="?", help="Frequency (with 'frequency')")
    notify_parser.add_argument("--limit", type=int, default=10, help="Pending entries to list")
    notify_parser.add_argument(
        "--open",
        action="store_true",
        help="Open the latest delivered notification",
    )

    subparsers.add_parser("widget", help="Show what the widget would render")

    onboard_parser = subparsers.add_parser("onboard", help="Apply first-run choices")
    onboard_parser.add_argument("--category", action="append", help="Topic (repeatable)")
    onboard_parser.add_argument("--interval", help="Refresh interval")
    onboard_parser.add_argument("--notify", help="Notification frequency")

    subparsers.add_parser("status", help="Show stored preferences")

    return parser


COMMANDS: dict[str, Callable[[argparse.Namespace, FactletManager], int]] = {
    "show": cmd_show,
    "refresh": cmd_refresh,
    "topics": cmd_topics,
    "levels": cmd_levels,
    "interval": cmd_interval,
    "color": cmd_color,
    "notify": cmd_notify,
    "widget": cmd_widget,
    "onboard": cmd_onboard,
    "status": cmd_status,
}


def run_cli(argv: list[str] | None = None) -> int:
    """Run the CLI with given arguments.

    Args:
        argv: Command-line arguments. Uses sys.argv[1:] if None.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        args = parser.parse_args(["show"])

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    manager = _open_manager(load_config())
    try:
        return handler(args, manager)
    finally:
        _close_manager(manager)


if __name__ == "__main__":
    sys.exit(run_cli())
