"""
Excepciones del microservicio de Usuarios.

Los handlers traducen cada clase a un código HTTP en un solo lugar
(ver Usuarios/CRUD/utils.py).
"""


class UsuarioError(Exception):
    """Error base del microservicio"""


class ValidacionError(UsuarioError):
    """Datos de entrada faltantes o inválidos (400)"""


class NoEncontradoError(UsuarioError):
    """El usuario solicitado no existe (404)"""


class ConfigError(UsuarioError):
    """Configuración incompleta o inválida"""


class RepositorioError(UsuarioError):
    """Fallo al acceder a DynamoDB"""


class ServicioError(UsuarioError):
    """Fallo del servicio al delegar en el repositorio"""


class PDFError(UsuarioError):
    """Fallo al generar la ficha en PDF"""
