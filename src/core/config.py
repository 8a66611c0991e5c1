"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP) y servicios lean config de forma consistente.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="FORMDATA_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    default_timeout_ms: int = Field(
        default=30_000,
        gt=0,
        description="Timeout por upload (milisegundos) cuando el caller no indica uno.",
    )
    user_agent: str = Field(
        default="formdata-uploader/0.1",
        min_length=1,
        description="User-Agent por defecto (el caller puede sobrescribirlo).",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging para la CLI (DEBUG, INFO, WARNING...).",
    )
    doctor_url: str = Field(
        default="https://httpbin.org/post",
        min_length=8,
        description="Endpoint eco usado por `doctor run` para probar un upload real.",
    )
