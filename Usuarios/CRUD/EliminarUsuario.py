from Usuarios.CRUD.utils import bad_request, ejecutar, query_param, success


def lambda_handler(event, context):
    """DELETE /usuarios?id= - elimina un usuario"""

    def operacion(deps):
        usuario_id = query_param(event, "id")
        if not usuario_id:
            return bad_request("id es obligatorio")

        deps.servicio.eliminar_usuario(usuario_id)
        return success("Usuario eliminado correctamente")

    return ejecutar(event, "DELETE", "Error al eliminar usuario", operacion)
