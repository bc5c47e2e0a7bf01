"""
Utilidades comunes de los handlers HTTP de Usuarios (API Gateway proxy).
"""

import json
import logging
import os
from decimal import Decimal
from threading import Lock

from Usuarios.functions.config import cargar_config
from Usuarios.functions.database import obtener_tabla
from Usuarios.functions.errores import (
    ConfigError,
    NoEncontradoError,
    RepositorioError,
    UsuarioError,
    ValidacionError,
)
from Usuarios.functions.pdf_generator import PDFGenerator
from Usuarios.functions.repository import UsuarioRepository
from Usuarios.functions.service import UsuarioService

logger = logging.getLogger()
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

MENSAJE_CONFIG = "Error de configuración del servidor"

_lock = Lock()
_dependencias = None
_error_inicial = None


class Dependencias:
    def __init__(self, servicio, pdf_generator):
        self.servicio = servicio
        self.pdf_generator = pdf_generator


def obtener_dependencias():
    """
    Construye una sola vez config -> tabla -> repositorio -> servicio.

    El error de inicialización se recuerda igual que la instancia.
    """
    global _dependencias, _error_inicial

    if _dependencias is None and _error_inicial is None:
        with _lock:
            if _dependencias is None and _error_inicial is None:
                try:
                    cfg = cargar_config()
                    repo = UsuarioRepository(obtener_tabla(cfg))
                    _dependencias = Dependencias(
                        servicio=UsuarioService(repo),
                        pdf_generator=PDFGenerator(logo_path=cfg.logo_path),
                    )
                except (ConfigError, RepositorioError) as e:
                    logger.error("Error inicializando handler: %s", e)
                    _error_inicial = e

    if _error_inicial is not None:
        raise _error_inicial
    return _dependencias


def reiniciar_dependencias():
    global _dependencias, _error_inicial

    with _lock:
        _dependencias = None
        _error_inicial = None


def _decimal_default(obj):
    """Convierte Decimal a tipo serializable JSON"""
    if isinstance(obj, Decimal):
        return float(obj) if obj % 1 else int(obj)
    raise TypeError(f"No serializable type: {type(obj)}")


def _resp(code, body, headers=None):
    return {
        "statusCode": code,
        "headers": {**CORS_HEADERS, "Content-Type": "application/json", **(headers or {})},
        "body": json.dumps(body, ensure_ascii=False, default=_decimal_default),
    }


def _envelope(success, message=None, data=None, error=None):
    body = {"success": success}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if error:
        body["error"] = error
    return body


def success(message, data=None):
    return _resp(200, _envelope(True, message=message, data=data))


def created(message, data=None):
    return _resp(201, _envelope(True, message=message, data=data))


def error(code, message):
    return _resp(code, _envelope(False, error=message))


def bad_request(message):
    return error(400, message)


def not_found(message):
    return error(404, message)


def internal_server_error(message):
    return error(500, message)


def preflight():
    return {"statusCode": 200, "headers": dict(CORS_HEADERS), "body": ""}


def metodo(event):
    return (event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method") or "").upper()


def verificar_metodo(event, permitido):
    """
    Devuelve la respuesta para OPTIONS o métodos no permitidos, o None si
    la petición debe continuar.
    """
    actual = metodo(event)
    if actual == "OPTIONS":
        return preflight()
    if actual != permitido:
        return error(405, "Método no permitido")
    return None


def parse_body(event):
    """
    Parsea el cuerpo JSON del evento.

    Raises:
        ValidacionError: si el cuerpo no es JSON válido
    """
    body = event.get("body")
    if body is None:
        return {}
    if isinstance(body, dict):
        return body
    if not isinstance(body, str):
        raise ValidacionError("Datos inválidos: cuerpo no soportado")
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise ValidacionError(f"Datos inválidos: {e}") from e


def query_param(event, nombre):
    query_params = event.get("queryStringParameters") or {}
    path_params = event.get("pathParameters") or {}
    valor = query_params.get(nombre) or path_params.get(nombre) or ""
    return valor.strip()


def respuesta_error(e, contexto):
    """Traduce las excepciones del servicio a la respuesta HTTP"""
    if isinstance(e, ValidacionError):
        logger.warning("%s: %s", contexto, e)
        return bad_request(str(e))
    if isinstance(e, NoEncontradoError):
        logger.warning("%s: %s", contexto, e)
        return not_found("Usuario no encontrado")
    logger.error("%s: %s", contexto, e)
    return internal_server_error(contexto)


def ejecutar(event, permitido, contexto, operacion):
    """
    Flujo común de un handler: CORS/método, dependencias y manejo de errores.

    `operacion` recibe las dependencias y devuelve la respuesta HTTP.
    """
    rechazo = verificar_metodo(event, permitido)
    if rechazo is not None:
        return rechazo

    try:
        deps = obtener_dependencias()
    except UsuarioError as e:
        logger.error("Error obteniendo handler: %s", e)
        return internal_server_error(MENSAJE_CONFIG)

    try:
        return operacion(deps)
    except UsuarioError as e:
        return respuesta_error(e, contexto)
    except Exception:
        logger.exception("%s: error inesperado", contexto)
        return internal_server_error(contexto)
