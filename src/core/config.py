"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Resuelve la credencial efectiva una sola vez, antes de cualquier I/O.

Precedencia (de mayor a menor):
1. Valor explícito del llamador (`host`, `api_token`).
2. Variable de entorno (`INFISICAL_HOST`, `INFISICAL_API_TOKEN`), incluidos
   los `.env` del proyecto y del usuario.
3. Default embebido (solo para `host`).
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import UNKNOWN, ConfigValue, Credential
from core.errors import (
    ConfigurationError,
    MissingCredentialError,
    MissingHostError,
    UnknownValueError,
)

DEFAULT_HOST = "https://infisical.com"
HOST_ENV_VAR = "INFISICAL_HOST"
TOKEN_ENV_VAR = "INFISICAL_API_TOKEN"

logger = logging.getLogger(__name__)


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "infisical-provider"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "infisical-provider"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "infisical-provider"
    return Path.home() / ".config" / "infisical-provider"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# infisical-provider user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class ProviderSettings(BaseSettings):
    """Capa de entorno de la configuración del provider.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core.
    - Las variables vacías se ignoran: `INFISICAL_HOST=""` equivale a no
      definirla y cae al default.
    """

    model_config = SettingsConfigDict(
        env_prefix="INFISICAL_",
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    host: str = Field(
        default=DEFAULT_HOST,
        min_length=1,
        description="URI de la API de Infisical.",
    )
    api_token: SecretStr | None = Field(
        default=None,
        description="API key de Infisical (sin default utilizable).",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="infisical-provider/0.1",
        min_length=1,
        description="User-Agent de las peticiones a la API.",
    )


def resolve_credential(
    host: ConfigValue = None,
    api_token: ConfigValue = None,
    settings: ProviderSettings | None = None,
) -> Credential:
    """Resuelve host + token aplicando la precedencia explícito > entorno > default.

    Lanza `UnknownValueError` si algún valor explícito es `UNKNOWN` (antes de
    leer el entorno), `MissingCredentialError` si el token final está vacío y
    `MissingHostError` si el host explícito es vacío. Sin efectos secundarios.
    """

    errors = resolution_errors(host, api_token)
    if errors:
        raise errors[0]

    settings = settings or ProviderSettings()

    resolved_host = settings.host if host is None else host
    if api_token is None:
        resolved_token = settings.api_token.get_secret_value() if settings.api_token else ""
    else:
        resolved_token = api_token

    if not resolved_host:
        raise MissingHostError(
            "host",
            "Missing Infisical Host",
            "The provider cannot create the Infisical API client as the host value is empty. "
            f"Remove it to use the {HOST_ENV_VAR} environment variable or the default {DEFAULT_HOST}.",
        )
    if not resolved_token:
        raise MissingCredentialError(
            "api_token",
            "Missing Infisical API Token",
            "The provider cannot create the Infisical API client as there is a missing or empty value "
            f"for the Infisical API Token. Set the api_token value in the configuration or use the "
            f"{TOKEN_ENV_VAR} environment variable. If either is already set, ensure the value is not empty.",
        )

    logger.debug("Resolved Infisical host %s", resolved_host)
    return Credential(host=resolved_host, token=SecretStr(resolved_token))


def resolution_errors(host: ConfigValue, api_token: ConfigValue) -> list[ConfigurationError]:
    """Errores por valores explícitos desconocidos, uno por atributo."""

    errors: list[ConfigurationError] = []
    if host is UNKNOWN:
        errors.append(
            UnknownValueError(
                "host",
                "Unknown Infisical Host",
                "The provider cannot create the Infisical API client as there is an unknown configuration "
                "value for the Infisical host. Either apply the source of the value first, set the value "
                f"statically in the configuration, or use the {HOST_ENV_VAR} environment variable.",
            )
        )
    if api_token is UNKNOWN:
        errors.append(
            UnknownValueError(
                "api_token",
                "Unknown Infisical API Token",
                "The provider cannot create the Infisical API client as there is an unknown configuration "
                "value for the Infisical API Token. Either apply the source of the value first, set the value "
                f"statically in the configuration, or use the {TOKEN_ENV_VAR} environment variable.",
            )
        )
    return errors
