import json
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from Usuarios.functions.errores import ConfigError

DEFAULT_REGION = "us-east-1"
DEFAULT_TIMEOUT_SECONDS = 10


@dataclass(frozen=True)
class Config:
    table_name: str
    credentials: dict
    region: str = DEFAULT_REGION
    endpoint_url: Optional[str] = None
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    logo_path: Optional[str] = None


def _parse_credentials(raw_value):
    """Parsea DB_CREDENTIALS (JSON con las llaves de la cuenta de servicio)"""
    try:
        credentials = json.loads(raw_value)
    except json.JSONDecodeError as e:
        raise ConfigError(f"DB_CREDENTIALS no es un JSON válido: {e}") from e

    if not isinstance(credentials, dict):
        raise ConfigError("DB_CREDENTIALS debe ser un objeto JSON")

    for campo in ("aws_access_key_id", "aws_secret_access_key"):
        if not credentials.get(campo):
            raise ConfigError(f"DB_CREDENTIALS no contiene '{campo}'")

    return {
        "aws_access_key_id": credentials["aws_access_key_id"],
        "aws_secret_access_key": credentials["aws_secret_access_key"],
        "aws_session_token": credentials.get("aws_session_token"),
    }


def cargar_config():
    """
    Carga la configuración desde variables de entorno (.env en local).

    Raises:
        ConfigError: si falta la tabla o las credenciales
    """
    load_dotenv()

    table_name = os.getenv("TABLE_USUARIOS")
    if not table_name:
        raise ConfigError("TABLE_USUARIOS no está configurado")

    raw_credentials = os.getenv("DB_CREDENTIALS")
    if not raw_credentials:
        raise ConfigError("DB_CREDENTIALS no está configurado")

    timeout_raw = os.getenv("DB_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
    try:
        timeout_seconds = int(timeout_raw)
    except ValueError as e:
        raise ConfigError(f"DB_TIMEOUT_SECONDS inválido: {timeout_raw}") from e

    return Config(
        table_name=table_name,
        credentials=_parse_credentials(raw_credentials),
        region=os.getenv("AWS_REGION", DEFAULT_REGION),
        endpoint_url=os.getenv("DYNAMODB_ENDPOINT_URL") or None,
        timeout_seconds=timeout_seconds,
        logo_path=os.getenv("LOGO_PATH") or None,
    )
