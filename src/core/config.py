"""Configuración del Core.

Qué centraliza:
- Variables de entorno (pydantic-settings) para backend remoto, locale y cuota.
- El `.env` global del usuario, para que la CLI pueda guardar la config del
  backend sin editar ficheros del proyecto.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.language import Locale


_APP_DIR_NAME = "faultcode-lookup"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / _APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / _APP_DIR_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / _APP_DIR_NAME
    return Path.home() / ".config" / _APP_DIR_NAME


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


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# faultcode-lookup user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Sin `backend_url` el catálogo se sirve desde el dataset estático y los
    datos del usuario (favoritos, cuota) se guardan en un JSON local.
    """

    model_config = SettingsConfigDict(
        env_prefix="FAULTCODE_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    backend_url: str | None = Field(
        default=None,
        description="Base URL del backend REST (estilo PostgREST), p.ej. https://<id>.supabase.co/rest/v1.",
    )
    backend_api_key: str | None = Field(
        default=None,
        description="API key del backend (se envía como `apikey` y bearer token).",
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="faultcode-lookup/0.1",
        min_length=1,
        description="User-Agent para peticiones al backend.",
    )

    default_locale: Locale = Field(
        default=Locale.ENGLISH,
        description="Idioma activo por defecto (en/tr).",
    )
    daily_quota_limit: int = Field(
        default=10,
        ge=1,
        le=10_000,
        description="Fichas de avería consultables al día en el plan free.",
    )

    data_dir: Path | None = Field(
        default=None,
        description="Directorio de datos local (catálogo alternativo, datos de usuario offline).",
    )

    log_level: str = Field(
        default="INFO",
        description="Nivel de log (DEBUG, INFO, WARNING, ERROR).",
    )
    log_json: bool = Field(
        default=False,
        description="Emitir logs en JSON en lugar del renderer de consola.",
    )

    @property
    def remote_configured(self) -> bool:
        return bool(self.backend_url)

    def resolved_data_dir(self) -> Path:
        """Directorio de datos en runtime (override explícito o dir de usuario)."""

        if self.data_dir is not None:
            return self.data_dir
        return get_user_config_dir() / "data"
