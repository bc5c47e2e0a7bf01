from Usuarios.functions.errores import (
    NoEncontradoError,
    RepositorioError,
    ServicioError,
    ValidacionError,
)
from Usuarios.functions.models import ahora_iso, construir_usuario, validar_usuario

LIMITE_POR_DEFECTO = 100


class UsuarioService:
    """Lógica de negocio de usuarios sobre el repositorio"""

    def __init__(self, repo):
        self.repo = repo

    def _verificar_dni_libre(self, dni, usuario_id=None):
        """El DNI no puede pertenecer a otro usuario"""
        try:
            existente = self.repo.obtener_por_dni(dni)
        except RepositorioError as e:
            raise ServicioError(f"error verificando DNI: {e}") from e

        if existente is not None and existente["id"] != usuario_id:
            raise ValidacionError(f"ya existe un usuario con DNI {dni}")

    def crear_usuario(self, datos):
        validar_usuario(datos)

        usuario = construir_usuario(datos)
        self._verificar_dni_libre(usuario["dni"])
        usuario["created_at"] = ahora_iso()

        try:
            return self.repo.crear(usuario)
        except RepositorioError as e:
            raise ServicioError(f"error creando usuario: {e}") from e

    def obtener_usuario(self, usuario_id):
        if not usuario_id:
            raise ValidacionError("id es obligatorio")

        try:
            usuario = self.repo.obtener_por_id(usuario_id)
        except RepositorioError as e:
            raise ServicioError(f"error obteniendo usuario: {e}") from e

        if usuario is None:
            raise NoEncontradoError(f"usuario {usuario_id} no encontrado")
        return usuario

    def obtener_usuario_por_dni(self, dni):
        if not dni:
            raise ValidacionError("dni es obligatorio")

        try:
            usuario = self.repo.obtener_por_dni(dni)
        except RepositorioError as e:
            raise ServicioError(f"error obteniendo usuario: {e}") from e

        if usuario is None:
            raise NoEncontradoError(f"usuario con DNI {dni} no encontrado")
        return usuario

    def listar_usuarios(self, limite=None):
        """Lista usuarios por fecha de creación descendente (100 por defecto)"""
        if limite is None or limite <= 0:
            limite = LIMITE_POR_DEFECTO

        try:
            return self.repo.listar(limite)
        except RepositorioError as e:
            raise ServicioError(f"error listando usuarios: {e}") from e

    def actualizar_usuario(self, usuario_id, datos):
        """
        Reemplaza todos los campos del usuario con los del DTO.

        Se conservan el id y la fecha de creación; updated_at se renueva.
        """
        validar_usuario(datos)

        existente = self.obtener_usuario(usuario_id)

        usuario = construir_usuario(datos)
        self._verificar_dni_libre(usuario["dni"], existente["id"])
        usuario["id"] = existente["id"]
        usuario["created_at"] = existente["created_at"]
        usuario["updated_at"] = ahora_iso()

        try:
            self.repo.actualizar(usuario_id, usuario)
        except RepositorioError as e:
            raise ServicioError(f"error actualizando usuario: {e}") from e

        return usuario

    def eliminar_usuario(self, usuario_id):
        if not usuario_id:
            raise ValidacionError("id es obligatorio")

        try:
            self.repo.eliminar(usuario_id)
        except RepositorioError as e:
            raise ServicioError(f"error eliminando usuario: {e}") from e
