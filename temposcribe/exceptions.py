"""Exception hierarchy for temposcribe.

The recurrence engine itself raises nothing on well-formed input; these
types cover the codec and configuration layers around it.
"""


class TemposcribeError(Exception):
    """Base exception for all temposcribe errors."""


class EventDecodeError(TemposcribeError):
    """A serialized event could not be turned into a CalendarEvent.

    Raised when:
    - A date field is not a valid ISO-8601 string
    - Required event fields are missing
    - Field values fail model validation

    The underlying parsing or validation error is chained as ``__cause__``.
    """


class ConfigError(TemposcribeError):
    """Configuration file exists but cannot be used.

    Raised when the YAML config file parses to something other than a mapping.
    """
