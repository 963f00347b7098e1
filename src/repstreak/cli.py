"""Command-line interface for repstreak.

Built with Typer for commands and Rich for output.
"""

import logging
from contextlib import contextmanager
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import get_config
from .db import get_db
from .errors import RepStreakError

# Create the main app
app = typer.Typer(
    name="repstreak",
    help="Daily workout challenges with friends.",
    no_args_is_help=True,
)

# Create sub-apps for command groups
user_app = typer.Typer(help="Manage user identities.")
app.add_typer(user_app, name="user")

friends_app = typer.Typer(help="Find friends and manage friend requests.")
app.add_typer(friends_app, name="friends")

challenge_app = typer.Typer(help="Create and follow workout challenges.")
app.add_typer(challenge_app, name="challenge")

progress_app = typer.Typer(help="Log completed reps.")
app.add_typer(progress_app, name="progress")

streak_app = typer.Typer(help="Show completion streaks.")
app.add_typer(streak_app, name="streak")

notify_app = typer.Typer(help="Read and act on notifications.")
app.add_typer(notify_app, name="notify")

# Rich console for pretty output
console = Console()

# Options shared by every command, set in the app callback
state = {"user": None}


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


@contextmanager
def cli_errors():
    """Turn domain and validation errors into a printed error and exit code 1."""
    try:
        yield
    except RepStreakError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except ValidationError as e:
        print_error(e.errors()[0]["msg"])
        raise typer.Exit(1)


def current_user_id() -> str:
    """Resolve the acting user from --user or REPSTREAK_USER."""
    from .users import UserManager

    token = state["user"] or get_config().user_token
    return UserManager(get_db()).get_current_user(token).id


def parse_exercise(value: str) -> tuple[str, int]:
    """Parse ``NAME:REPS`` into a name and a target."""
    name, sep, reps = value.rpartition(":")
    if not sep or not reps.strip().lstrip("-").isdigit():
        raise typer.BadParameter(f"Expected NAME:REPS, got '{value}'")
    return name.strip(), int(reps)


def progress_bar(percentage: int, width: int = 20) -> str:
    """Render a completion percentage as a text bar."""
    filled = round(width * percentage / 100)
    return "[green]" + "█" * filled + "[/green]" + "░" * (width - filled)


def format_challenge_table(challenges: list, title: str = "Challenges") -> Table:
    """Create a rich table for displaying challenges."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", max_width=10)
    table.add_column("Date", style="cyan")
    table.add_column("Name", style="green", max_width=30)
    table.add_column("Exercises", justify="right")
    table.add_column("People", justify="right")
    table.add_column("You", style="yellow")

    for challenge in challenges:
        table.add_row(
            challenge.id[:8],
            challenge.date,
            challenge.name,
            str(len(challenge.exercises)),
            str(challenge.participant_count),
            challenge.user_status.value if challenge.user_status else "-",
        )

    return table


# ============================================================================
# Global Options
# ============================================================================


@app.callback()
def main_callback(
    user: Optional[str] = typer.Option(
        None, "--user", "-u", help="Token identifier of the acting user"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Daily workout challenges with friends."""
    state["user"] = user

    config = get_config()
    problems = config.validate()
    for problem in problems:
        print_error(problem)
    if problems:
        raise typer.Exit(1)

    level = "DEBUG" if verbose else config.log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


# ============================================================================
# User Commands
# ============================================================================


@user_app.command("register")
def user_register(
    token: str = typer.Argument(..., help="Identity token"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Display name"),
    email: Optional[str] = typer.Option(None, "--email", "-e", help="Email address"),
) -> None:
    """Create a user or refresh its name and email."""
    from .users import UserManager

    with cli_errors():
        user = UserManager(get_db()).store(token, name=name, email=email)
    print_success(f"Stored {user.name} ({user.id})")


@user_app.command("whoami")
def user_whoami() -> None:
    """Show the acting user."""
    from .users import UserManager

    with cli_errors():
        info = UserManager(get_db()).get_user_info(current_user_id())

    content = f"[bold]{info.name}[/bold]\nID: {info.id}"
    if info.email:
        content += f"\nEmail: {info.email}"
    console.print(Panel(content, title="[blue]Current User[/blue]"))


@user_app.command("list")
def user_list() -> None:
    """List all users."""
    from .users import UserManager

    users = UserManager(get_db()).list_users()
    if not users:
        print_info("No users yet")
        return

    table = Table(title="Users")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Email", style="green")
    table.add_column("Token")
    for user in users:
        table.add_row(user.id, user.name, user.email or "-", user.token_identifier)
    console.print(table)


# ============================================================================
# Friend Commands
# ============================================================================


@friends_app.command("list")
def friends_list() -> None:
    """List your friends."""
    from .friends import FriendManager

    with cli_errors():
        friends = FriendManager(get_db()).get_friends(current_user_id())

    if not friends:
        print_info("No friends yet. Try 'repstreak friends search'.")
        return

    table = Table(title="Friends")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Email", style="green")
    for friend in friends:
        table.add_row(friend.friend_id, friend.friend.name, friend.friend.email or "-")
    console.print(table)


@friends_app.command("search")
def friends_search(
    term: str = typer.Argument(..., help="Part of a name or email"),
) -> None:
    """Search for people to befriend."""
    from .friends import FriendManager

    with cli_errors():
        users = FriendManager(get_db()).search_users(current_user_id(), term)

    if not users:
        print_info(f"No users found matching '{term}'")
        return

    table = Table(title=f"Users matching '{term}'")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Email", style="green")
    for user in users:
        table.add_row(user.id, user.name, user.email or "-")
    console.print(table)


@friends_app.command("requests")
def friends_requests() -> None:
    """Show incoming and outgoing friend requests."""
    from .friends import FriendManager

    with cli_errors():
        user_id = current_user_id()
        manager = FriendManager(get_db())
        incoming = manager.get_pending_requests(user_id)
        outgoing = manager.get_sent_requests(user_id)

    if not incoming and not outgoing:
        print_info("No pending friend requests")
        return

    table = Table(title="Friend Requests")
    table.add_column("Request", style="dim")
    table.add_column("Direction")
    table.add_column("User", style="cyan")
    for request in incoming:
        table.add_row(request.id, "[green]from[/green]", request.other.name)
    for request in outgoing:
        table.add_row(request.id, "[yellow]to[/yellow]", request.other.name)
    console.print(table)


@friends_app.command("add")
def friends_add(
    friend_id: str = typer.Argument(..., help="User ID to send a request to"),
) -> None:
    """Send a friend request."""
    from .friends import FriendManager

    with cli_errors():
        FriendManager(get_db()).send_friend_request(current_user_id(), friend_id)
    print_success("Friend request sent")


@friends_app.command("accept")
def friends_accept(
    request_id: str = typer.Argument(..., help="Incoming request ID"),
) -> None:
    """Accept a friend request."""
    from .friends import FriendManager

    with cli_errors():
        FriendManager(get_db()).accept_friend_request(current_user_id(), request_id)
    print_success("Friend request accepted")


@friends_app.command("reject")
def friends_reject(
    request_id: str = typer.Argument(..., help="Incoming request ID"),
) -> None:
    """Reject a friend request."""
    from .friends import FriendManager

    with cli_errors():
        FriendManager(get_db()).reject_friend_request(current_user_id(), request_id)
    print_success("Friend request rejected")


@friends_app.command("cancel")
def friends_cancel(
    request_id: str = typer.Argument(..., help="Outgoing request ID"),
) -> None:
    """Cancel a friend request you sent."""
    from .friends import FriendManager

    with cli_errors():
        FriendManager(get_db()).cancel_friend_request(current_user_id(), request_id)
    print_success("Friend request cancelled")


@friends_app.command("remove")
def friends_remove(
    friend_id: str = typer.Argument(..., help="Friend's user ID"),
) -> None:
    """Remove a friend."""
    from .friends import FriendManager

    with cli_errors():
        removed = FriendManager(get_db()).remove_friend(current_user_id(), friend_id)

    if removed:
        print_success("Friend removed")
    else:
        print_info("You are not friends with this user")


# ============================================================================
# Challenge Commands
# ============================================================================


@challenge_app.command("create")
def challenge_create(
    name: str = typer.Argument(..., help="Challenge name"),
    date_str: Optional[str] = typer.Option(
        None, "--date", "-d", help="Day of the challenge (YYYY-MM-DD), defaults to today"
    ),
    exercises: Optional[List[str]] = typer.Option(
        None, "--exercise", "-e", help="Exercise as NAME:REPS, repeatable"
    ),
    friends: Optional[List[str]] = typer.Option(
        None, "--friend", "-f", help="Friend user ID to invite, repeatable"
    ),
) -> None:
    """Create a challenge and invite friends."""
    from .challenges import ChallengeCreate, ChallengeManager, ExerciseInput
    from .dates import today_in_timezone

    parsed = [parse_exercise(e) for e in exercises or []]

    with cli_errors():
        data = ChallengeCreate(
            name=name,
            date=date_str or today_in_timezone(get_config().timezone),
            exercises=[ExerciseInput(name=n, target_reps=r) for n, r in parsed],
            friend_ids=friends or [],
        )
        created = ChallengeManager(get_db()).create_challenge(current_user_id(), data)

    print_success(f"Created '{data.name}' on {data.date} ({created.challenge_id})")
    if data.friend_ids:
        print_info(f"Invited {len(set(data.friend_ids))} friend(s)")


@challenge_app.command("list")
def challenge_list() -> None:
    """List all your challenges."""
    from .challenges import ChallengeManager

    with cli_errors():
        challenges = ChallengeManager(get_db()).get_user_challenges(current_user_id())

    if not challenges:
        print_info("No challenges yet")
        return
    console.print(format_challenge_table(challenges))


@challenge_app.command("upcoming")
def challenge_upcoming(
    limit: int = typer.Option(3, "--limit", "-n", help="Max challenges to show"),
) -> None:
    """Show your next challenges."""
    from .challenges import ChallengeManager

    with cli_errors():
        challenges = ChallengeManager(get_db()).get_upcoming_challenges(
            current_user_id(), get_config().timezone, limit=limit
        )

    if not challenges:
        print_info("No upcoming challenges")
        return
    console.print(format_challenge_table(challenges, title="Upcoming Challenges"))


@challenge_app.command("today")
def challenge_today() -> None:
    """Show today's challenges with their leaderboards."""
    from .challenges import ChallengeManager

    with cli_errors():
        user_id = current_user_id()
        challenges = ChallengeManager(get_db()).get_todays_challenges(
            user_id, get_config().timezone
        )

    if not challenges:
        print_info("No challenges today")
        return

    for challenge in challenges:
        me = next((p for p in challenge.participants if p.user_id == user_id), None)
        if me:
            lines = [
                f"{item.exercise_name}: {item.completed_reps}/{item.target_reps}"
                f"  [dim]{item.exercise_id}[/dim]"
                for item in me.exercise_progress
            ]
            lines.append(f"\n{progress_bar(me.completion_percentage)} {me.completion_percentage}%")
            console.print(Panel("\n".join(lines), title=f"[blue]{challenge.name}[/blue]"))

        table = Table(title="Leaderboard")
        table.add_column("#", justify="right")
        table.add_column("Name", style="cyan")
        table.add_column("Reps", justify="right")
        table.add_column("Done", justify="right")
        for rank, participant in enumerate(challenge.participants, start=1):
            name = participant.user.name if participant.user else "Unknown"
            if participant.user_id == user_id:
                name = f"[bold]{name} (you)[/bold]"
            table.add_row(
                str(rank),
                name,
                f"{participant.total_completed}/{participant.total_target}",
                f"{participant.completion_percentage}%",
            )
        console.print(table)


@challenge_app.command("show")
def challenge_show(
    challenge_id: str = typer.Argument(..., help="Challenge ID"),
) -> None:
    """Show a challenge's exercises and participants."""
    from .challenges import ChallengeManager

    with cli_errors():
        detail = ChallengeManager(get_db()).get_challenge(current_user_id(), challenge_id)

    creator = detail.creator.name if detail.creator else "Unknown"
    lines = [
        f"[bold]{detail.name}[/bold] on {detail.date}",
        f"Created by {creator} - {detail.status.value}",
        "",
        "[bold]Exercises[/bold]",
    ]
    lines += [f"  {e.name}: {e.target_reps} reps  [dim]{e.id}[/dim]" for e in detail.exercises]
    lines += ["", "[bold]Participants[/bold]"]
    lines += [
        f"  {p.user.name if p.user else 'Unknown'} ({p.status.value})"
        for p in detail.participants
    ]
    console.print(Panel("\n".join(lines), title="[blue]Challenge[/blue]"))


@challenge_app.command("past")
def challenge_past(
    limit: int = typer.Option(10, "--limit", "-n", help="Max challenges to show"),
) -> None:
    """Show results of past challenges."""
    from .challenges import ChallengeManager

    with cli_errors():
        past = ChallengeManager(get_db()).get_past_challenges(
            current_user_id(), get_config().timezone
        )

    if not past:
        print_info("No past challenges")
        return

    table = Table(title="Past Challenges")
    table.add_column("Date", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Reps", justify="right")
    table.add_column("Done", justify="right")
    table.add_column("People", justify="right")
    for challenge in past[:limit]:
        done = f"{challenge.completion_percentage}%"
        if challenge.is_completed:
            done = f"[green]{done}[/green]"
        table.add_row(
            challenge.date,
            challenge.name,
            f"{challenge.user_completed_reps}/{challenge.user_total_target}",
            done,
            str(challenge.participant_count),
        )
    console.print(table)


@challenge_app.command("week")
def challenge_week() -> None:
    """Show this week's completion overview."""
    from datetime import date

    from .challenges import ChallengeManager

    with cli_errors():
        week = ChallengeManager(get_db()).get_weekly_progress(
            current_user_id(), get_config().timezone
        )

    table = Table(title="This Week")
    table.add_column("Day")
    table.add_column("Date", style="cyan")
    table.add_column("Challenges", justify="right")
    table.add_column("Status", justify="center")
    for day in week.days_with_challenges:
        if day.is_completed:
            status = "[green]Done[/green]"
        elif day.challenge_count:
            status = "[yellow]Open[/yellow]"
        else:
            status = "[dim]-[/dim]"
        table.add_row(
            date.fromisoformat(day.date).strftime("%a"),
            day.date,
            str(day.challenge_count),
            status,
        )
    console.print(table)
    console.print(
        f"Completed {week.completed_days}/{week.days_with_any_challenges} days, "
        f"{week.completed_challenges_this_week} challenge(s)"
    )


@challenge_app.command("invitations")
def challenge_invitations() -> None:
    """Show challenge invitations awaiting your answer."""
    from .challenges import ChallengeManager

    with cli_errors():
        invitations = ChallengeManager(get_db()).get_pending_invitations(current_user_id())

    if not invitations:
        print_info("No pending invitations")
        return

    table = Table(title="Invitations")
    table.add_column("Invitation", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Challenge", style="green")
    table.add_column("From")
    table.add_column("Exercises", justify="right")
    for invitation in invitations:
        table.add_row(
            invitation.participant_id,
            invitation.date,
            invitation.challenge_name,
            invitation.creator_name,
            str(invitation.exercise_count),
        )
    console.print(table)


@challenge_app.command("accept")
def challenge_accept(
    participant_id: str = typer.Argument(..., help="Invitation ID"),
) -> None:
    """Accept a challenge invitation."""
    from .challenges import ChallengeManager

    with cli_errors():
        ChallengeManager(get_db()).accept_invitation(current_user_id(), participant_id)
    print_success("Invitation accepted")


@challenge_app.command("decline")
def challenge_decline(
    participant_id: str = typer.Argument(..., help="Invitation ID"),
) -> None:
    """Decline a challenge invitation."""
    from .challenges import ChallengeManager

    with cli_errors():
        ChallengeManager(get_db()).decline_invitation(current_user_id(), participant_id)
    print_success("Invitation declined")


@challenge_app.command("delete")
def challenge_delete(
    challenge_id: str = typer.Argument(..., help="Challenge ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a challenge you created."""
    from .challenges import ChallengeManager

    if not yes and not typer.confirm("Delete this challenge and all its progress?"):
        print_info("Cancelled.")
        raise typer.Exit(0)

    with cli_errors():
        ChallengeManager(get_db()).delete_challenge(current_user_id(), challenge_id)
    print_success("Challenge deleted")


@challenge_app.command("leave")
def challenge_leave(
    challenge_id: str = typer.Argument(..., help="Challenge ID"),
) -> None:
    """Leave a challenge you were invited to."""
    from .challenges import ChallengeManager

    with cli_errors():
        ChallengeManager(get_db()).leave_challenge(current_user_id(), challenge_id)
    print_success("You left the challenge")


# ============================================================================
# Progress Commands
# ============================================================================


@progress_app.command("set")
def progress_set(
    exercise_id: str = typer.Argument(..., help="Exercise ID"),
    reps: int = typer.Argument(..., help="Completed reps"),
) -> None:
    """Set completed reps for an exercise."""
    from .progress import ProgressManager

    with cli_errors():
        ProgressManager(get_db()).update_exercise_progress(current_user_id(), exercise_id, reps)
    print_success(f"Logged {reps} reps")


@progress_app.command("add")
def progress_add(
    exercise_id: str = typer.Argument(..., help="Exercise ID"),
    delta: int = typer.Argument(..., help="Reps to add, negative to undo"),
) -> None:
    """Add reps on top of what is already logged."""
    from .progress import ProgressBuffer, ProgressManager

    with cli_errors():
        user_id = current_user_id()
        manager = ProgressManager(get_db())
        existing = manager.get_progress(user_id, exercise_id)

        buffer = ProgressBuffer(manager, user_id)
        total = buffer.increment(
            exercise_id, delta, current=existing.completed_reps if existing else 0
        )
        buffer.flush()
    print_success(f"Now at {total} reps")


@progress_app.command("show")
def progress_show(
    challenge_id: str = typer.Argument(..., help="Challenge ID"),
) -> None:
    """Show your progress on a challenge."""
    from .progress import ProgressManager

    with cli_errors():
        user_id = current_user_id()
        manager = ProgressManager(get_db())
        items = manager.get_challenge_progress(user_id, challenge_id)
        totals = manager.get_challenge_totals(user_id, challenge_id)

    if not items:
        print_info("This challenge has no exercises")
        return

    table = Table(title="Progress")
    table.add_column("Exercise", style="cyan")
    table.add_column("Reps", justify="right")
    table.add_column("ID", style="dim")
    for item in items:
        table.add_row(
            item.exercise_name, f"{item.completed_reps}/{item.target_reps}", item.exercise_id
        )
    console.print(table)
    console.print(
        f"{progress_bar(totals.completion_percentage)} {totals.completion_percentage}%"
    )


# ============================================================================
# Streak Commands
# ============================================================================


@streak_app.command("status")
def streak_status() -> None:
    """Show current and longest streak."""
    from .streaks import StreakManager

    with cli_errors():
        streak = StreakManager(get_db()).get_user_streak(
            current_user_id(), get_config().timezone
        )

    if not streak.last_completed_date:
        print_info("No completed days yet. Finish today's challenge to start a streak!")
        return

    content = (
        f"[bold]Current Streak:[/bold] {streak.current_streak} days\n"
        f"[bold]Longest Streak:[/bold] {streak.longest_streak} days\n"
        f"Last completed: {streak.last_completed_date}"
    )
    console.print(Panel(content, title="[blue]Streak Status[/blue]"))


# ============================================================================
# Notification Commands
# ============================================================================


@notify_app.command("list")
def notify_list(
    unread: bool = typer.Option(False, "--unread", help="Only unread notifications"),
) -> None:
    """List your notifications."""
    from .notifications import NotificationManager

    with cli_errors():
        notifications = NotificationManager(get_db()).get_notifications(current_user_id())

    if unread:
        notifications = [n for n in notifications if not n.is_read]
    if not notifications:
        print_info("No notifications")
        return

    table = Table(title="Notifications")
    table.add_column("ID", style="dim")
    table.add_column("", justify="center")
    table.add_column("Message")
    table.add_column("Type", style="yellow")
    for notification in notifications:
        table.add_row(
            notification.id,
            "" if notification.is_read else "[blue]●[/blue]",
            notification.message,
            notification.type.value,
        )
    console.print(table)


@notify_app.command("count")
def notify_count() -> None:
    """Show the number of unread notifications."""
    from .notifications import NotificationManager

    with cli_errors():
        count = NotificationManager(get_db()).get_unread_count(current_user_id())
    console.print(f"{count} unread")


@notify_app.command("read")
def notify_read(
    notification_id: Optional[str] = typer.Argument(None, help="Notification ID"),
    all_: bool = typer.Option(False, "--all", "-a", help="Mark everything as read"),
) -> None:
    """Mark notifications as read."""
    from .notifications import NotificationManager

    if not all_ and not notification_id:
        print_error("Give a notification ID or --all")
        raise typer.Exit(1)

    with cli_errors():
        manager = NotificationManager(get_db())
        if all_:
            count = manager.mark_all_as_read(current_user_id())
            print_success(f"Marked {count} notification(s) as read")
            return
        manager.mark_as_read(current_user_id(), notification_id)
    print_success("Marked as read")


@notify_app.command("delete")
def notify_delete(
    notification_id: str = typer.Argument(..., help="Notification ID"),
) -> None:
    """Delete a notification."""
    from .notifications import NotificationManager

    with cli_errors():
        NotificationManager(get_db()).delete_notification(current_user_id(), notification_id)
    print_success("Notification deleted")


@notify_app.command("clear")
def notify_clear() -> None:
    """Delete all your notifications."""
    from .notifications import NotificationManager

    with cli_errors():
        count = NotificationManager(get_db()).clear_all_notifications(current_user_id())
    print_success(f"Cleared {count} notification(s)")


def _act_on_notification(notification_id: str, accept: bool) -> None:
    from .db.schemas import NotificationType
    from .notifications import NotificationManager

    with cli_errors():
        user_id = current_user_id()
        manager = NotificationManager(get_db())
        notification = next(
            (n for n in manager.get_notifications(user_id) if n.id == notification_id), None
        )
        if notification is None:
            print_error("Notification not found")
            raise typer.Exit(1)

        if notification.type == NotificationType.FRIEND_REQUEST:
            if accept:
                manager.accept_friend_request_from_notification(user_id, notification_id)
            else:
                manager.decline_friend_request_from_notification(user_id, notification_id)
        elif notification.type == NotificationType.CHALLENGE_INVITATION:
            if accept:
                manager.accept_challenge_from_notification(user_id, notification_id)
            else:
                manager.decline_challenge_from_notification(user_id, notification_id)
        else:
            print_error("This notification has no action")
            raise typer.Exit(1)

    print_success("Accepted" if accept else "Declined")


@notify_app.command("accept")
def notify_accept(
    notification_id: str = typer.Argument(..., help="Notification ID"),
) -> None:
    """Accept the request or invitation behind a notification."""
    _act_on_notification(notification_id, accept=True)


@notify_app.command("decline")
def notify_decline(
    notification_id: str = typer.Argument(..., help="Notification ID"),
) -> None:
    """Decline the request or invitation behind a notification."""
    _act_on_notification(notification_id, accept=False)


# ============================================================================
# Maintenance Commands
# ============================================================================


@app.command()
def seed(
    days: int = typer.Option(30, "--days", "-d", help="Past days to fill"),
    random_seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible data"),
    clear: bool = typer.Option(False, "--clear", help="Delete all challenge data instead"),
) -> None:
    """Fill the past weeks with demo challenges for every user."""
    import random

    from .seed import clear_all_challenge_data, seed_historical_data

    if clear:
        result = clear_all_challenge_data(get_db())
    else:
        result = seed_historical_data(get_db(), days=days, rng=random.Random(random_seed))

    if not result.success:
        print_error(result.message)
        raise typer.Exit(1)

    print_success(result.message)
    table = Table(show_header=False)
    for key, value in result.stats.items():
        table.add_row(key.replace("_", " ").capitalize(), str(value))
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"repstreak version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
