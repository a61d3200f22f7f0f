# src/db_errors/core/logging/filters.py
"""
Logging filters.

DialectFilter
-------------
Guarantees every LogRecord has a `dialect` attribute so format strings referencing
`%(dialect)s` never KeyError. The normalizer passes `extra={"dialect": ...}` on its own
records; every other record gets the sentinel "-".

RedactFilter
------------
Native driver messages are logged under the `raw` / `raw_detail` extras at DEBUG level.
They can contain row values (a duplicate e-mail, a user name), so the filter replaces them
with "***REDACTED***" unless the handler is configured with `allow_raw=True`
(Settings.LOG_RAW_DB_MESSAGES). Credentials passed as extras are always scrubbed.

Both filters return True: they annotate records, never drop them.
"""

import logging
from logging import LogRecord

REDACTED = "***REDACTED***"


class DialectFilter(logging.Filter):
    def filter(self, record: LogRecord) -> bool:
        # Keep an explicit value (passed via extra), otherwise fall back to "-".
        record.dialect = getattr(record, "dialect", None) or "-"
        return True


class RedactFilter(logging.Filter):
    RAW_FIELDS = {"raw", "raw_detail"}
    SENSITIVE = {"password", "secret", "token", "authorization", "dsn"}

    def __init__(self, allow_raw: bool = False, name: str = ""):
        super().__init__(name)
        self.allow_raw = allow_raw

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            lowered = key.lower()
            if lowered in self.SENSITIVE or (lowered in self.RAW_FIELDS and not self.allow_raw):
                record.__dict__[key] = REDACTED
        return True
