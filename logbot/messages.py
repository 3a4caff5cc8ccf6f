"""
messages.py — Reply texts and the log report embed.
"""

from datetime import date

import discord

from logbot.models import LogReport, Outcome, RecordResult

EMBED_COLOR = 0x0099FF

# Discord allows 25 fields per embed; two are taken by the totals.
MAX_ENTRY_FIELDS = 23
MAX_FIELD_VALUE = 1024
MAX_EMBED_CHARS = 6000

REPORT_FOOTER = "Add a new log with `$logday`"

LOG_PROMPT = "What do you want to log for today?"
LOG_TIMEOUT = "I didn't get your log in time. Type `$logday` to try again!"
EMPTY_HISTORY = "You don't have any logged message! Start today by typing `$logday`!"
SAVE_FAILED = "Something went wrong, please try again!"
LOAD_FAILED = "Something went wrong, sorry about that!"
EMPTY_MESSAGE = "Your log can't be empty!"


def format_log_date(day: date) -> str:
    """
    US-style date without leading zeros.

    Examples:
        >>> format_log_date(date(2024, 3, 5))
        '3/5/2024'
    """
    return f"{day.month}/{day.day}/{day.year}"


def format_days(count: int) -> str:
    return f"{count} Day{'s' if count != 1 else ''}"


def _truncate(text: str, limit: int = MAX_FIELD_VALUE) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def record_reply(result: RecordResult) -> str:
    if result.outcome == Outcome.SAVED:
        return f"Success! Your log for {format_log_date(result.log_date)} has been saved!"
    if result.outcome == Outcome.ALREADY_LOGGED:
        return "You already logged your progress today. You can't log more than once per day!"
    if result.outcome == Outcome.INVALID_ARGUMENT:
        return EMPTY_MESSAGE
    return SAVE_FAILED


def build_report_embed(report: LogReport, author_name: str, avatar_url: str = "") -> discord.Embed:
    """
    Build the `$getlogs` embed for a user's report.

    Entries are added newest first while they fit in Discord's field and
    total character limits, so a report with long logs shows fewer days.
    """
    title = f"{author_name} log report"
    total_value = str(report.total)
    streak_value = f"🔥 {format_days(report.streak)}"

    # The description can only shrink once the shown count is known.
    budget = MAX_EMBED_CHARS - sum(
        len(text)
        for text in (
            title,
            f"Showing {report.total} out of {report.total} logged days",
            REPORT_FOOTER,
            "Days completed",
            total_value,
            "Current Streak",
            streak_value,
        )
    )

    fields = []
    last_day = report.first_day_number + len(report.entries) - 1
    for offset, entry in enumerate(reversed(report.entries)):
        if len(fields) == MAX_ENTRY_FIELDS:
            break
        name = f"Day {last_day - offset}   |   {format_log_date(entry.log_date)}"
        value = _truncate(entry.message)
        if len(name) + len(value) > budget:
            break
        budget -= len(name) + len(value)
        fields.append((name, value))
    fields.reverse()

    embed = discord.Embed(
        title=title,
        description=f"Showing {len(fields)} out of {report.total} logged days",
        color=EMBED_COLOR,
        timestamp=discord.utils.utcnow(),
    )
    if avatar_url:
        embed.set_thumbnail(url=avatar_url)

    for name, value in fields:
        embed.add_field(name=name, value=value, inline=False)

    embed.add_field(name="Days completed", value=total_value, inline=True)
    embed.add_field(name="Current Streak", value=streak_value, inline=True)
    embed.set_footer(text=REPORT_FOOTER)
    return embed
