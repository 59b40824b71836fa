import pytest

from soakscale.env import Env, load_env


@pytest.fixture
def clean_environment(monkeypatch, tmp_path):
    for envar_name in [*Env.types_map(), "SOAK_ENV_FILE"]:
        monkeypatch.delenv(envar_name, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestLoadEnv:
    def test_defaults(self, clean_environment):
        env = load_env()

        assert env.SOAK_TEST_NAME == "relay"
        assert env.SOAK_DEADLINE_FACTOR == 1.05
        assert env.SOAK_PLATFORM_URL == "local://dynamic"

    def test_environment_variables_are_typed(self, clean_environment, monkeypatch):
        monkeypatch.setenv("SOAK_DURATION", "2h")
        monkeypatch.setenv("SOAK_STATUS_MAX_POLLS", "7")
        monkeypatch.setenv("SOAK_DEADLINE_FACTOR", "1.5")

        env = load_env()

        assert env.SOAK_DURATION == "2h"
        assert env.SOAK_STATUS_MAX_POLLS == 7
        assert env.SOAK_DEADLINE_FACTOR == 1.5

    def test_env_file_overrides_environment(self, clean_environment, monkeypatch):
        monkeypatch.setenv("SOAK_DURATION", "2h")
        (clean_environment / ".env").write_text(
            "SOAK_DURATION=10m\nSOAK_MAP_CLEAR_THRESHOLD=100\nUNRELATED=1\n"
        )

        env = load_env()

        assert env.SOAK_DURATION == "10m"
        assert env.SOAK_MAP_CLEAR_THRESHOLD == 100

    def test_explicit_override_wins(self, clean_environment, monkeypatch):
        monkeypatch.setenv("SOAK_TEST_NAME", "relay")
        monkeypatch.setenv("SOAK_DURATION", "2h")

        env = load_env(override=Env(SOAK_TEST_NAME="job-management"))

        assert env.SOAK_TEST_NAME == "job-management"
        assert env.SOAK_DURATION == "2h"

    def test_retention_policy(self):
        env = Env(SOAK_LOG_MAX_SIZE="10MB", SOAK_LOG_MAX_AGE="2h")

        assert env.get_retention_policy() == {"max_size": "10MB", "max_age": "2h"}

    def test_env_file_can_be_selected(self, clean_environment, monkeypatch):
        (clean_environment / "soak.env").write_text("SOAK_TEST_NAME=job-management\n")
        monkeypatch.setenv("SOAK_ENV_FILE", str(clean_environment / "soak.env"))

        assert load_env().SOAK_TEST_NAME == "job-management"
