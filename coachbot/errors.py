"""Exception types raised by Coachbot."""


class CoachbotError(Exception):
    """Base class for all Coachbot errors."""


class ConfigError(CoachbotError):
    """League configuration or credentials are missing or invalid."""


class SourceUnavailable(CoachbotError):
    """The fantasy data source could not be reached or returned garbage."""


class DeliveryError(CoachbotError):
    """A message could not be handed to the chat sink."""


class SchedulerMisuse(CoachbotError):
    """Scheduler lifecycle method called in the wrong state."""


class ReportError(CoachbotError):
    """
    A report could not be generated.

    The message is user-facing ("error fetching standings: ...") and the
    underlying exception is available as __cause__.
    """

    def __init__(self, what: str, cause: BaseException):
        super().__init__(f'error fetching {what}: {cause}')
        self.what = what
