from .models import Entry, LogLevel


class SoakTrace(Entry, kw_only=True):
    test: str
    environment: str
    level: LogLevel = LogLevel.TRACE

class SoakDebug(Entry, kw_only=True):
    test: str
    environment: str
    level: LogLevel = LogLevel.DEBUG

class SoakInfo(Entry, kw_only=True):
    test: str
    environment: str
    level: LogLevel = LogLevel.INFO

class SoakWarning(Entry, kw_only=True):
    test: str
    environment: str
    level: LogLevel = LogLevel.WARN

class SoakError(Entry, kw_only=True):
    test: str
    environment: str
    level: LogLevel = LogLevel.ERROR

class SoakFatal(Entry, kw_only=True):
    test: str
    environment: str
    level: LogLevel = LogLevel.FATAL

class JobStatusDebug(Entry, kw_only=True):
    job_name: str
    job_id: str
    status: str
    level: LogLevel = LogLevel.DEBUG

class CountDebug(Entry, kw_only=True):
    expected: int
    actual: int
    attempt: int
    level: LogLevel = LogLevel.DEBUG

class WorkloadError(Entry, kw_only=True):
    workload: str
    value: int
    level: LogLevel = LogLevel.ERROR
