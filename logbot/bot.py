"""
bot.py — Discord bot entry point for the Daily Log Bot.

Usage:
    logbot              # Normal mode
    logbot --init-db    # Create tables and exit
    logbot --test       # Send test alert and exit
"""

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime
from typing import Optional

import discord
import pytz
from discord.ext import commands
from dotenv import find_dotenv, load_dotenv

from logbot import db, messages
from logbot.alerts import send_error_alert, send_startup_message
from logbot.models import Outcome
from logbot.recorder import DEFAULT_LOG_COUNT, day_of, load_report, load_timezone, parse_count, record

# ─── Logging ────────────────────────────────────────────────────────

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
logger = logging.getLogger("logbot")


def setup_logging(level=logging.INFO):
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("discord").setLevel(logging.WARNING)


# ─── Config from ENV ────────────────────────────────────────────────

def load_config() -> dict:
    """Load config from environment variables."""
    config = {
        "discord_token": os.environ.get("DISCORD_TOKEN", ""),
        "command_prefix": os.environ.get("COMMAND_PREFIX", "$"),
        "timezone": os.environ.get("TIMEZONE", "UTC"),
        "reply_timeout": float(os.environ.get("REPLY_TIMEOUT", "30")),
        "default_log_count": int(os.environ.get("DEFAULT_LOG_COUNT", str(DEFAULT_LOG_COUNT))),
        "alert_webhook_url": os.environ.get("ALERT_WEBHOOK_URL", ""),
    }

    # Validate required
    if not config["discord_token"]:
        logger.error("DISCORD_TOKEN not set!")
        sys.exit(1)

    return config


# ─── Reply collection ───────────────────────────────────────────────

async def collect_reply(bot: commands.Bot, ctx: commands.Context, timeout: float) -> Optional[discord.Message]:
    """Wait for one message from the command author in the same channel."""

    def check(message: discord.Message) -> bool:
        return (
            not message.author.bot
            and message.author.id == ctx.author.id
            and message.channel.id == ctx.channel.id
        )

    try:
        return await bot.wait_for("message", timeout=timeout, check=check)
    except asyncio.TimeoutError:
        return None


# ─── Bot ─────────────────────────────────────────────────────────────

def create_bot(config: dict, tz, collector=collect_reply) -> commands.Bot:
    intents = discord.Intents.default()
    intents.message_content = True  # needed for wait_for("message")

    bot = commands.Bot(command_prefix=config["command_prefix"], intents=intents, help_command=None)
    webhook_url = config["alert_webhook_url"]

    async def alert(command: str, user_id: str, error_msg: str):
        await asyncio.to_thread(send_error_alert, webhook_url, command, user_id, error_msg)

    @bot.event
    async def on_ready():
        logger.info(f"Logged in as {bot.user} (ID: {bot.user.id})")
        summary = (
            f"Prefix: {config['command_prefix']}\n"
            f"Timezone: {tz}\n"
            f"Reply timeout: {config['reply_timeout']:g}s\n"
            f"Guilds: {len(bot.guilds)}"
        )
        await asyncio.to_thread(send_startup_message, webhook_url, summary)

    @bot.event
    async def on_command_error(ctx: commands.Context, error: commands.CommandError):
        if isinstance(error, commands.CommandNotFound):
            return
        logger.error(f"Command {ctx.command} failed: {error}", exc_info=error)
        await ctx.reply(messages.SAVE_FAILED)

    @bot.command(name="logday")
    async def logday(ctx: commands.Context):
        await ctx.reply(messages.LOG_PROMPT)

        reply = await collector(bot, ctx, config["reply_timeout"])
        if reply is None:
            logger.info(f"User {ctx.author.id} did not answer within {config['reply_timeout']:g}s")
            await ctx.reply(messages.LOG_TIMEOUT)
            return

        user_id = str(reply.author.id)
        today = day_of(reply.created_at, tz)
        result = await asyncio.to_thread(record, user_id, reply.content, today)
        if result.outcome == Outcome.STORE_ERROR:
            await alert("logday", user_id, "Could not save daily log, see bot logs.")
        await ctx.reply(messages.record_reply(result))

    @bot.command(name="getlogs")
    async def getlogs(ctx: commands.Context, *args: str):
        parsed = parse_count(args, default=config["default_log_count"])
        if parsed.outcome == Outcome.INVALID_ARGUMENT:
            await ctx.reply(parsed.error)
            return

        user_id = str(ctx.author.id)
        today = day_of(datetime.now(pytz.UTC), tz)
        result = await asyncio.to_thread(load_report, user_id, parsed.count, today)

        if result.outcome == Outcome.EMPTY_HISTORY:
            await ctx.reply(messages.EMPTY_HISTORY)
            return
        if result.outcome == Outcome.STORE_ERROR:
            await alert("getlogs", user_id, "Could not load log history, see bot logs.")
            await ctx.reply(messages.LOAD_FAILED)
            return

        embed = messages.build_report_embed(result.report, ctx.author.name, ctx.author.display_avatar.url)
        await ctx.reply(embed=embed)

    return bot


# ─── Test Mode ───────────────────────────────────────────────────────

def run_test(config: dict):
    """Send a test alert to verify the webhook."""
    logger.info("=== TEST MODE ===")
    if not config["alert_webhook_url"]:
        logger.error("ALERT_WEBHOOK_URL not set, nothing to test.")
        return
    send_startup_message(config["alert_webhook_url"], "🧪 Test alert — webhook works!")
    logger.info("Test alert sent! Check Discord.")


def main():
    parser = argparse.ArgumentParser(description="Daily Log Bot")
    parser.add_argument("--test", action="store_true", help="Send test alert and exit")
    parser.add_argument("--init-db", action="store_true", help="Create database tables and exit")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    load_dotenv(find_dotenv(usecwd=True))
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    logger.info("=" * 50)
    logger.info("  DAILY LOG BOT")
    logger.info("=" * 50)

    config = load_config()
    tz = load_timezone(config["timezone"])

    # Init database
    logger.info("Initializing database...")
    try:
        db.init_db()
    except db.StoreError as e:
        logger.error(f"Database unavailable: {e}")
        sys.exit(1)

    if args.init_db:
        return

    if args.test:
        run_test(config)
        return

    bot = create_bot(config, tz)
    bot.run(config["discord_token"], log_handler=None)
    logger.info("Bot stopped. Goodbye! 👋")


if __name__ == "__main__":
    main()
