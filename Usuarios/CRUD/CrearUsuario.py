from Usuarios.CRUD.utils import created, ejecutar, parse_body


def lambda_handler(event, context):
    """POST /usuarios - registra la ficha de un usuario"""

    def operacion(deps):
        body = parse_body(event)
        usuario = deps.servicio.crear_usuario(body)
        return created("Usuario registrado exitosamente", usuario)

    return ejecutar(event, "POST", "Error al crear usuario", operacion)
