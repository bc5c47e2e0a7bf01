"""
Cliente de DynamoDB compartido por todo el proceso.

La tabla se crea una sola vez (perezosamente) y se reutiliza en todas las
invocaciones de la Lambda mientras el contenedor siga vivo.
"""

import logging
from threading import Lock

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from Usuarios.functions.errores import RepositorioError

logger = logging.getLogger()

_lock = Lock()
_inicializado = False
_tabla = None
_error_inicial = None


def _crear_tabla(cfg):
    """Inicializa el recurso de DynamoDB con las credenciales de la configuración"""
    session = boto3.session.Session(
        aws_access_key_id=cfg.credentials["aws_access_key_id"],
        aws_secret_access_key=cfg.credentials["aws_secret_access_key"],
        aws_session_token=cfg.credentials.get("aws_session_token"),
        region_name=cfg.region,
    )

    # Sin reintentos: un fallo del store hace fallar la petición completa
    boto_config = BotoConfig(
        connect_timeout=cfg.timeout_seconds,
        read_timeout=cfg.timeout_seconds,
        retries={"total_max_attempts": 1},
    )

    try:
        dynamodb = session.resource(
            "dynamodb",
            endpoint_url=cfg.endpoint_url,
            config=boto_config,
        )
        return dynamodb.Table(cfg.table_name)
    except (BotoCoreError, ClientError) as e:
        raise RepositorioError(f"error inicializando DynamoDB: {e}") from e


def obtener_tabla(cfg):
    """
    Obtiene o crea la tabla de usuarios.

    Si la inicialización falla, el error se recuerda y se vuelve a lanzar
    en cada llamada posterior.
    """
    global _inicializado, _tabla, _error_inicial

    if not _inicializado:
        with _lock:
            if not _inicializado:
                try:
                    _tabla = _crear_tabla(cfg)
                    logger.info("Tabla DynamoDB '%s' inicializada", cfg.table_name)
                except RepositorioError as e:
                    _error_inicial = e
                    logger.error("Error inicializando DynamoDB: %s", e)
                _inicializado = True

    if _error_inicial is not None:
        raise _error_inicial
    return _tabla


def reiniciar():
    """Descarta la tabla cacheada (usado por los tests y al rotar credenciales)"""
    global _inicializado, _tabla, _error_inicial

    with _lock:
        _inicializado = False
        _tabla = None
        _error_inicial = None
