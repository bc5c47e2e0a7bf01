from Usuarios.CRUD.utils import bad_request, ejecutar, parse_body, query_param, success


def lambda_handler(event, context):
    """PUT /usuarios?id= - reemplaza los datos de un usuario"""

    def operacion(deps):
        usuario_id = query_param(event, "id")
        if not usuario_id:
            return bad_request("id es obligatorio")

        body = parse_body(event)
        usuario = deps.servicio.actualizar_usuario(usuario_id, body)
        return success("Usuario actualizado correctamente", usuario)

    return ejecutar(event, "PUT", "Error al actualizar usuario", operacion)
