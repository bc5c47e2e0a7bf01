from Usuarios.CRUD.utils import bad_request, ejecutar, query_param, success


def lambda_handler(event, context):
    """GET /usuarios[?limit=] - lista los usuarios más recientes"""

    def operacion(deps):
        limit_raw = query_param(event, "limit")
        limite = None
        if limit_raw:
            try:
                limite = int(limit_raw)
            except ValueError:
                return bad_request("limit debe ser un número entero")

        usuarios = deps.servicio.listar_usuarios(limite)
        return success("Usuarios obtenidos exitosamente", usuarios)

    return ejecutar(event, "GET", "Error al listar usuarios", operacion)
