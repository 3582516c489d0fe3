"""Weekly report pushes on fixed wall-clock times in one time zone."""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .constants import DEFAULT_TIMEZONE
from .errors import ReportError, SchedulerMisuse
from .formatting import format_error
from .models import JobResult
from .schemas import LeagueConfig

logger = logging.getLogger('coachbot.scheduler')

CREATED = 'created'
STARTED = 'started'
STOPPED = 'stopped'

# Fires missed while the process was busy are merged into one, and fires
# missed by more than this many seconds (e.g. process down) are dropped.
MISFIRE_GRACE_SECONDS = 60


@dataclass
class ScheduledJob:
    """A callback fired at every (weekday, time) combination, weekly."""
    id: str
    days: list[str]
    times: list[str]
    callback: Callable[[], None]
    name: str = ''


def build_trigger(days: list[str], at: str, tz: ZoneInfo) -> CronTrigger:
    """Cron trigger for HH:MM on the given weekdays ('mon', 'tue', ...) in tz."""
    hour, _, minute = at.partition(':')
    return CronTrigger(day_of_week=','.join(days), hour=int(hour), minute=int(minute), timezone=tz)


class JobScheduler:
    """
    Owns the recurring report jobs for the lifetime of the process.

    Lifecycle is created -> started -> stopped, and stopped is final. Calling
    start() twice, stop() before start(), or anything after stop() raises
    SchedulerMisuse.

    Every firing goes through _run(), which skips the callback unless the
    scheduler is running, catches and logs callback failures so they never
    reach other jobs, and reports a JobResult to on_result.
    """

    def __init__(
        self,
        timezone: str = DEFAULT_TIMEZONE,
        on_result: Optional[Callable[[JobResult], None]] = None,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        self.timezone = ZoneInfo(timezone)
        self.on_result = on_result
        self._scheduler = scheduler or BackgroundScheduler(
            timezone=self.timezone,
            job_defaults={
                'coalesce': True,
                'max_instances': 1,
                'misfire_grace_time': MISFIRE_GRACE_SECONDS,
            },
        )
        self._jobs: dict[str, ScheduledJob] = {}
        self._state = CREATED
        self._lock = threading.Lock()

    @property
    def state(self) -> str:
        return self._state

    @property
    def jobs(self) -> list[ScheduledJob]:
        return list(self._jobs.values())

    def add_job(self, job: ScheduledJob) -> None:
        """Register a job. Jobs added after start() are scheduled immediately."""
        with self._lock:
            if self._state == STOPPED:
                raise SchedulerMisuse('cannot add jobs to a stopped scheduler')
            if job.id in self._jobs:
                raise ValueError(f'Duplicate job id: {job.id}')
            self._jobs[job.id] = job
            if self._state == STARTED:
                self._register(job)

    def _register(self, job: ScheduledJob) -> None:
        for at in job.times:
            self._scheduler.add_job(
                self._run,
                trigger=build_trigger(job.days, at, self.timezone),
                args=[job.id],
                id=f'{job.id}@{at}',
                name=job.name or job.id,
                replace_existing=True,
            )

    def start(self) -> None:
        with self._lock:
            if self._state == STARTED:
                raise SchedulerMisuse('scheduler already started')
            if self._state == STOPPED:
                raise SchedulerMisuse('scheduler was stopped and cannot be restarted')
            for job in self._jobs.values():
                self._register(job)
            self._scheduler.start()
            self._state = STARTED
        logger.info(f'Scheduler started with {len(self._jobs)} jobs ({self.timezone.key})')

    def stop(self, wait: bool = False) -> None:
        """
        Stop all timers. No callback fires after this returns.

        Args:
            wait: Block until callbacks already running have finished
        """
        with self._lock:
            if self._state == CREATED:
                raise SchedulerMisuse('scheduler was never started')
            if self._state == STOPPED:
                raise SchedulerMisuse('scheduler already stopped')
            self._state = STOPPED
        self._scheduler.shutdown(wait=wait)
        logger.info('Scheduler stopped')

    def fire(self, job_id: str) -> Optional[JobResult]:
        """Run a job now through the normal wrapper (None if not running)."""
        if job_id not in self._jobs:
            raise KeyError(f'Unknown job: {job_id}')
        return self._run(job_id)

    def next_fire_times(self) -> dict[str, datetime]:
        """Next fire time per trigger ('<job id>@HH:MM'), empty unless started."""
        if self._state != STARTED:
            return {}
        return {job.id: job.next_run_time for job in self._scheduler.get_jobs()}

    def _run(self, job_id: str) -> Optional[JobResult]:
        if self._state != STARTED:
            logger.debug(f'Skipping job {job_id}: scheduler is {self._state}')
            return None

        job = self._jobs[job_id]
        fired_at = datetime.now(self.timezone)
        logger.info(f'Running job {job_id}')
        try:
            job.callback()
        except Exception as e:
            logger.exception(f'Job {job_id} failed: {e}')
            result = JobResult(job_id=job_id, ok=False, fired_at=fired_at, error=str(e))
        else:
            result = JobResult(job_id=job_id, ok=True, fired_at=fired_at)

        if self.on_result is not None:
            try:
                self.on_result(result)
            except Exception:
                logger.exception(f'Result handler failed for job {job_id}')
        return result


def make_report_job(
    service,
    kind: str,
    send: Callable[[str], None],
    notify_errors: bool = True,
) -> Callable[[], None]:
    """
    Callback that generates one report and hands it to the chat sink.

    When the report fails and notify_errors is set, the short error message
    is sent instead; the failure is still raised so the job is marked failed.
    """
    def run() -> None:
        try:
            text = service.report(kind)
        except ReportError as e:
            if notify_errors:
                send(format_error(f'generating {kind.replace("_", " ")} report', e))
            raise
        send(text)

    return run


def build_report_jobs(
    config: LeagueConfig,
    service,
    send: Callable[[str], None],
    on_result: Optional[Callable[[JobResult], None]] = None,
    notify_errors: bool = True,
) -> JobScheduler:
    """
    Scheduler loaded with every job in the league's schedule table.

    Args:
        config: League configuration holding the schedule table
        service: FantasyService generating the reports
        send: Chat sink, called with the finished text
        on_result: Optional collaborator notified after every firing
        notify_errors: Push a short error message when a report fails

    Returns:
        A JobScheduler in the created state (call start())
    """
    schedule = config.schedule
    scheduler = JobScheduler(timezone=schedule.timezone, on_result=on_result)
    for job in schedule.jobs:
        scheduler.add_job(
            ScheduledJob(
                id=job.id,
                days=job.days,
                times=job.times,
                callback=make_report_job(service, job.report, send, notify_errors),
                name=f'{job.report} push',
            )
        )
    return scheduler
