from .logger import Logger as Logger
from .logger_context import LoggerContext as LoggerContext
from .logger_stream import LoggerStream as LoggerStream
from .retention_policy import (
    RetentionPolicy as RetentionPolicy,
    RetentionPolicyConfig as RetentionPolicyConfig,
)
