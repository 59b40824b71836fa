"""
Soak test configuration with every duration resolved to seconds.
"""

from dataclasses import dataclass

from soakscale.env import Env
from soakscale.logging.rotation import TimeParser


@dataclass(slots=True)
class SoakConfig:
    """Tunables for one soak run."""

    test_name: str
    duration: float
    deadline_factor: float
    platform_url: str
    stable_platform_url: str
    broker_url: str
    snapshot_interval: float
    lifecycle_pause: float
    monitor_interval: float
    status_poll_interval: float
    status_max_polls: int
    status_query_retries: int
    reconcile_max_retries: int
    reconcile_retry_delay: float
    producer_pace: float
    producer_retry_pause: float
    map_clear_threshold: int
    event_journal_capacity: int

    @property
    def deadline(self):
        return self.duration * self.deadline_factor


def create_soak_config_from_env(env: Env):
    """Create soak configuration from environment settings."""
    parser = TimeParser()

    return SoakConfig(
        test_name=env.SOAK_TEST_NAME,
        duration=parser.parse(env.SOAK_DURATION),
        deadline_factor=env.SOAK_DEADLINE_FACTOR,
        platform_url=env.SOAK_PLATFORM_URL,
        stable_platform_url=env.SOAK_STABLE_PLATFORM_URL,
        broker_url=env.SOAK_BROKER_URL,
        snapshot_interval=parser.parse(env.SOAK_SNAPSHOT_INTERVAL),
        lifecycle_pause=parser.parse(env.SOAK_LIFECYCLE_PAUSE),
        monitor_interval=parser.parse(env.SOAK_MONITOR_INTERVAL),
        status_poll_interval=parser.parse(env.SOAK_STATUS_POLL_INTERVAL),
        status_max_polls=env.SOAK_STATUS_MAX_POLLS,
        status_query_retries=env.SOAK_STATUS_QUERY_RETRIES,
        reconcile_max_retries=env.SOAK_RECONCILE_MAX_RETRIES,
        reconcile_retry_delay=parser.parse(env.SOAK_RECONCILE_RETRY_DELAY),
        producer_pace=parser.parse(env.SOAK_PRODUCER_PACE),
        producer_retry_pause=parser.parse(env.SOAK_PRODUCER_RETRY_PAUSE),
        map_clear_threshold=env.SOAK_MAP_CLEAR_THRESHOLD,
        event_journal_capacity=env.SOAK_EVENT_JOURNAL_CAPACITY,
    )
