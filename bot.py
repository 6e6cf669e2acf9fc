import os
import asyncio
import logging
import signal
import discord
from discord.ext import commands
from web.server import make_app
from utils.constants import COMMAND_PREFIX, LOG_LEVEL, PORT, TOKEN, WEB_ENABLED

log = logging.getLogger("bot")

intents = discord.Intents.default()
intents.message_content = True
intents.guilds = True
intents.guild_messages = True

bot = commands.Bot(command_prefix=COMMAND_PREFIX, intents=intents)
bot.remove_command("help")

COG_FOLDER = os.path.join(os.path.dirname(os.path.abspath(__file__)), "cogs")


# -------- Load Cogs --------
async def load_cogs():
    for file in sorted(os.listdir(COG_FOLDER)):
        if file.endswith(".py") and not file.startswith("__"):
            module = f"cogs.{file[:-3]}"
            try:
                await bot.load_extension(module)
                log.info("[✅] Loaded cog: %s", module)
            except Exception:
                log.exception("[❌] Failed to load %s", module)


# -------- Startup Event --------
@bot.event
async def on_ready():
    if getattr(bot, "startup_done", False):
        return  # Avoid running multiple times on reconnects
    bot.startup_done = True

    log.info("✅ Logged in as %s (%s)", bot.user, bot.user.id)
    await bot.change_presence(
        activity=discord.Activity(type=discord.ActivityType.watching, name="Sticky Messages")
    )

    try:
        log.info("🔄 Refreshing application (/) commands...")
        synced = await bot.tree.sync()
        log.info("✅ Successfully reloaded %d application (/) commands.", len(synced))
    except discord.HTTPException:
        log.exception("❌ Error refreshing commands")

    # ---- Clear stale stickies, then repost everywhere ----
    sticky_cog = bot.get_cog("Sticky")
    if sticky_cog:
        await sticky_cog.engine.startup()


# -------- Web server --------
async def run_web(store):
    import aiohttp.web
    app = make_app(store)
    runner = aiohttp.web.AppRunner(app, access_log=None)
    await runner.setup()
    site = aiohttp.web.TCPSite(runner, "0.0.0.0", PORT)
    await site.start()
    log.info("🌐 Web server running on :%d", PORT)
    return runner


# -------- Main --------
async def main():
    if not TOKEN:
        raise SystemExit("TOKEN is not set (put it in the environment or a .env file)")

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, lambda: asyncio.create_task(bot.close()))
        except NotImplementedError:
            pass  # Windows

    await load_cogs()
    runner = None
    sticky_cog = bot.get_cog("Sticky")
    if WEB_ENABLED and sticky_cog:
        runner = await run_web(sticky_cog.store)
    try:
        async with bot:
            await bot.start(TOKEN)
    finally:
        log.info("🛑 Shutting down bot...")
        if runner is not None:
            await runner.cleanup()


def run():
    discord.utils.setup_logging(level=getattr(logging, LOG_LEVEL, logging.INFO))
    asyncio.run(main())


if __name__ == "__main__":
    run()
