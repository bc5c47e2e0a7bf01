"""
Handler único del microservicio de Usuarios.

Permite desplegar todas las rutas detrás de una sola integración proxy
de API Gateway; cada ruta delega en su Lambda de Usuarios/CRUD.
"""

from Usuarios.CRUD import (
    ActualizarUsuario,
    BuscarUsuario,
    CrearUsuario,
    EliminarUsuario,
    ExportarUsuarioPDF,
    ListarUsuarios,
)
from Usuarios.CRUD.utils import error, metodo, preflight, query_param


def _segmentos(event):
    path = event.get("path") or event.get("rawPath") or ""
    return [s for s in path.strip("/").split("/") if s]


def router(event, context):
    """
    Rutas:
        POST   /usuarios
        GET    /usuarios            (lista, o detalle con ?id= / ?dni=)
        GET    /usuarios/{id}
        PUT    /usuarios/{id}       (o ?id=)
        DELETE /usuarios/{id}       (o ?id=)
        GET    /usuarios/{dni}/pdf
    """
    segmentos = _segmentos(event)
    if not segmentos or segmentos[0] != "usuarios" or len(segmentos) > 3:
        return error(404, "Ruta no encontrada")

    if metodo(event) == "OPTIONS":
        return preflight()

    if len(segmentos) == 3:
        if segmentos[2] != "pdf":
            return error(404, "Ruta no encontrada")
        event = _con_path_param(event, "dni", segmentos[1])
        return ExportarUsuarioPDF.lambda_handler(event, context)

    if len(segmentos) == 2:
        if metodo(event) == "POST":
            return error(405, "Método no permitido")
        event = _con_path_param(event, "id", segmentos[1])

    acciones = {
        "POST": CrearUsuario.lambda_handler,
        "PUT": ActualizarUsuario.lambda_handler,
        "DELETE": EliminarUsuario.lambda_handler,
    }
    if metodo(event) == "GET":
        if query_param(event, "id") or query_param(event, "dni"):
            return BuscarUsuario.lambda_handler(event, context)
        return ListarUsuarios.lambda_handler(event, context)

    accion = acciones.get(metodo(event))
    if accion is None:
        return error(405, "Método no permitido")
    return accion(event, context)


def _con_path_param(event, nombre, valor):
    path_params = dict(event.get("pathParameters") or {})
    path_params.setdefault(nombre, valor)
    return {**event, "pathParameters": path_params}
