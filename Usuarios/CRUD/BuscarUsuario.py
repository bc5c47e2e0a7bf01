from Usuarios.CRUD.utils import bad_request, ejecutar, query_param, success


def lambda_handler(event, context):
    """GET /usuarios?id= | ?dni= - obtiene un usuario"""

    def operacion(deps):
        usuario_id = query_param(event, "id")
        dni = query_param(event, "dni")

        if usuario_id:
            usuario = deps.servicio.obtener_usuario(usuario_id)
        elif dni:
            usuario = deps.servicio.obtener_usuario_por_dni(dni)
        else:
            return bad_request("id o dni es obligatorio")

        return success("Usuario encontrado", usuario)

    return ejecutar(event, "GET", "Error al obtener usuario", operacion)
