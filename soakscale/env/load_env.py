import os
from typing import Callable, Dict, Mapping, TypeVar, Union

from dotenv import dotenv_values

from .env import Env

T = TypeVar("T", bound=Env)

PrimaryType = Union[str, int, bool, float, bytes]


def _typed_values(
    source: Mapping[str, str | None],
    types_map: Dict[str, Callable[[str], PrimaryType]],
) -> Dict[str, PrimaryType]:
    return {
        envar_name: envar_type(envar_value)
        for envar_name, envar_type in types_map.items()
        if (envar_value := source.get(envar_name))
    }


def load_env(
    default: type[T] = Env,
    env_file: str | None = None,
    override: T | None = None,
) -> T:
    """
    Build the soak environment. Later sources win: field defaults, process
    environment variables, the ``.env`` file (``SOAK_ENV_FILE`` names
    another one), then the fields explicitly set on ``override``.
    """
    types_map = default.types_map()

    if env_file is None:
        env_file = os.getenv("SOAK_ENV_FILE", ".env")

    values = _typed_values(os.environ, types_map)

    if os.path.exists(env_file):
        values.update(
            _typed_values(dotenv_values(dotenv_path=env_file), types_map)
        )

    if override is not None:
        values.update(override.model_dump(exclude_unset=True))
        default = type(override)

    return default(**values)
