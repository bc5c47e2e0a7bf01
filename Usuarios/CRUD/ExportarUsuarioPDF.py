import base64
import logging

from Usuarios.CRUD.utils import CORS_HEADERS, bad_request, ejecutar, query_param
from Usuarios.functions.pdf_generator import content_disposition, nombre_archivo

logger = logging.getLogger()


def lambda_handler(event, context):
    """GET /usuarios/{dni}/pdf - descarga la ficha del usuario en PDF"""

    def operacion(deps):
        dni = query_param(event, "dni")
        if not dni:
            return bad_request("DNI de usuario requerido")

        usuario = deps.servicio.obtener_usuario_por_dni(dni)
        pdf_bytes = deps.pdf_generator.generar_usuario_pdf(usuario)
        filename = nombre_archivo(usuario)
        logger.info("PDF generado para DNI %s (%d bytes)", dni, len(pdf_bytes))

        # API Gateway entrega el binario si isBase64Encoded es True
        return {
            "statusCode": 200,
            "headers": {
                **CORS_HEADERS,
                "Content-Type": "application/pdf",
                "Content-Disposition": content_disposition(filename),
                "Content-Length": str(len(pdf_bytes)),
            },
            "body": base64.b64encode(pdf_bytes).decode("ascii"),
            "isBase64Encoded": True,
        }

    return ejecutar(event, "GET", "Error generando PDF", operacion)
