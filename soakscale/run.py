import asyncio
import sys

from soakscale.env import Env, load_env
from soakscale.logging import LoggingConfig
from soakscale.soak_tests import SOAK_TESTS, SoakTest


async def run_soak_test(
    name: str | None = None,
    env: Env | None = None,
) -> SoakTest:
    if env is None:
        env = load_env(Env)

    if name is None:
        name = env.SOAK_TEST_NAME

    if (test_type := SOAK_TESTS.get(name)) is None:
        raise ValueError(
            f"Unknown soak test {name}, expected one of {', '.join(SOAK_TESTS)}"
        )

    test = test_type(env=env)
    await test.run()

    return test


def main():
    env = load_env(Env)

    if env.SOAK_TEST_NAME not in SOAK_TESTS:
        sys.stderr.write(
            f"Unknown soak test {env.SOAK_TEST_NAME}, expected one of {', '.join(SOAK_TESTS)}\n"
        )
        sys.exit(2)

    LoggingConfig().update(
        log_level=env.SOAK_LOG_LEVEL,
        log_output=env.SOAK_LOG_OUTPUT,
    )

    try:
        asyncio.run(run_soak_test(env=env))

    except KeyboardInterrupt:
        sys.exit(130)

    except Exception:
        # The failure has already been logged by the soak test.
        sys.exit(1)
