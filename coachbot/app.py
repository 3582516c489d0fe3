"""Process wiring: build every collaborator, run until a shutdown signal, stop."""

import logging
import signal
import threading
from dataclasses import dataclass
from typing import Optional

from .commands import CommandHandler
from .config import get_config, load_credentials
from .espn import ESPNClient
from .health import start_health_server
from .models import JobResult
from .scheduler import JobScheduler, build_report_jobs
from .schemas import Credentials, LeagueConfig
from .service import FantasyService
from .telegram import TelegramBot

logger = logging.getLogger('coachbot.app')


def log_job_result(result: JobResult) -> None:
    if result.ok:
        logger.info(f'Job {result.job_id} completed')
    else:
        logger.warning(f'Job {result.job_id} failed at {result.fired_at:%Y-%m-%d %H:%M %Z}: {result.error}')


@dataclass
class Coachbot:
    """Everything the running process owns."""
    service: FantasyService
    bot: TelegramBot
    scheduler: JobScheduler
    health_port: Optional[int] = None


def build_service(credentials: Credentials, config: LeagueConfig) -> FantasyService:
    return FantasyService(ESPNClient.from_credentials(credentials, config), config)


def build(credentials: Credentials, config: LeagueConfig) -> Coachbot:
    service = build_service(credentials, config)
    bot = TelegramBot(credentials.telegram_token, credentials.chat_id, CommandHandler(service))
    scheduler = build_report_jobs(config, service, bot.send_message, on_result=log_job_result)
    return Coachbot(service=service, bot=bot, scheduler=scheduler, health_port=credentials.health_port)


def run(credentials: Optional[Credentials] = None, config: Optional[LeagueConfig] = None,
        stop_event: Optional[threading.Event] = None) -> None:
    """
    Run the bot until SIGINT/SIGTERM (or until stop_event is set).

    Starts the scheduler, the health endpoint and the command listener, then
    blocks. A health port that cannot be bound is logged and skipped. On
    shutdown the scheduler and listener are stopped; the health server dies
    with the process.
    """
    credentials = credentials or load_credentials()
    config = config or get_config()
    stop_event = stop_event or threading.Event()

    app = build(credentials, config)

    def _shutdown(signum, frame):
        logger.info(f'Received signal {signal.Signals(signum).name}, shutting down')
        stop_event.set()

    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGINT, _shutdown)
        signal.signal(signal.SIGTERM, _shutdown)

    app.scheduler.start()
    for job_id, fire_time in sorted(app.scheduler.next_fire_times().items(), key=lambda item: item[1]):
        logger.info(f'Next run of {job_id}: {fire_time:%a %Y-%m-%d %H:%M %Z}')

    if app.health_port:
        try:
            start_health_server(app.health_port)
        except OSError:
            logger.exception(f'Health server failed to start on port {app.health_port}, continuing without it')

    listener = threading.Thread(
        target=app.bot.poll_commands,
        args=(stop_event,),
        name='command-listener',
        daemon=True,
    )
    listener.start()
    logger.info('Coachbot is running')

    stop_event.wait()

    app.scheduler.stop()
    # The listener exits after its current long-poll returns
    listener.join(timeout=5)
    logger.info('Coachbot stopped')
