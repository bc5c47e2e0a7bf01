import uuid
from decimal import DecimalException

from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from Usuarios.functions.errores import NoEncontradoError, RepositorioError
from Usuarios.functions.models import (
    CAMPOS_META,
    ENTIDAD,
    usuario_a_item,
    usuario_desde_item,
)

DNI_INDEX = "dni-index"
CREATED_AT_INDEX = "created_at-index"


def _es_condicion_fallida(error):
    return (
        isinstance(error, ClientError)
        and error.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"
    )


class UsuarioRepository:
    """Operaciones de DynamoDB sobre la tabla de usuarios"""

    def __init__(self, table):
        self.table = table

    def crear(self, usuario):
        """Inserta el usuario con un id nuevo y lo devuelve con ese id"""
        nuevo = dict(usuario, id=str(uuid.uuid4()))
        try:
            self.table.put_item(
                Item=usuario_a_item(nuevo),
                ConditionExpression="attribute_not_exists(#pk)",
                ExpressionAttributeNames={"#pk": "id"},
            )
        except (ClientError, BotoCoreError, DecimalException) as e:
            raise RepositorioError(f"error creando usuario: {e}") from e
        return nuevo

    def obtener_por_id(self, usuario_id):
        """Devuelve el usuario o None si no existe"""
        try:
            resp = self.table.get_item(Key={"id": usuario_id})
        except (ClientError, BotoCoreError) as e:
            raise RepositorioError(f"error obteniendo usuario: {e}") from e

        if "Item" not in resp:
            return None
        return usuario_desde_item(resp["Item"])

    def obtener_por_dni(self, dni):
        """Busca por DNI en el índice secundario; None si no hay coincidencias"""
        try:
            resp = self.table.query(
                IndexName=DNI_INDEX,
                KeyConditionExpression=Key("dni").eq(dni),
                Limit=1,
            )
        except (ClientError, BotoCoreError) as e:
            raise RepositorioError(f"error buscando usuario por DNI: {e}") from e

        items = resp.get("Items", [])
        if not items:
            return None
        return usuario_desde_item(items[0])

    def listar(self, limite):
        """Lista hasta `limite` usuarios, del más reciente al más antiguo"""
        qargs = {
            "IndexName": CREATED_AT_INDEX,
            "KeyConditionExpression": Key("entidad").eq(ENTIDAD),
            "ScanIndexForward": False,
        }

        usuarios = []
        lek = None
        try:
            while len(usuarios) < limite:
                if lek:
                    qargs["ExclusiveStartKey"] = lek
                qargs["Limit"] = limite - len(usuarios)
                rpage = self.table.query(**qargs)
                usuarios.extend(usuario_desde_item(item) for item in rpage.get("Items", []))
                lek = rpage.get("LastEvaluatedKey")
                if not lek:
                    break
        except (ClientError, BotoCoreError) as e:
            raise RepositorioError(f"error listando usuarios: {e}") from e

        return usuarios[:limite]

    def actualizar(self, usuario_id, usuario):
        """
        Escritura parcial (merge) de todos los campos del usuario.

        Los campos con valor None se eliminan del item; el id no se toca.
        """
        item = usuario_a_item(usuario)
        item.pop("id", None)

        sets = []
        removes = []
        expr_attr_names = {}
        expr_attr_values = {}

        for i, campo in enumerate(sorted(usuario)):
            if campo == "id":
                continue
            nombre = f"#f{i}"
            if campo in item:
                expr_attr_names[nombre] = campo
                expr_attr_values[f":v{i}"] = item[campo]
                sets.append(f"{nombre} = :v{i}")
            elif campo not in CAMPOS_META or campo == "updated_at":
                expr_attr_names[nombre] = campo
                removes.append(nombre)

        expr_attr_names["#pk"] = "id"
        expr_attr_names["#entidad"] = "entidad"
        expr_attr_values[":entidad"] = item["entidad"]
        sets.append("#entidad = :entidad")

        update_expr = "SET " + ", ".join(sets)
        if removes:
            update_expr += " REMOVE " + ", ".join(removes)

        try:
            self.table.update_item(
                Key={"id": usuario_id},
                UpdateExpression=update_expr,
                ExpressionAttributeNames=expr_attr_names,
                ExpressionAttributeValues=expr_attr_values,
                ConditionExpression="attribute_exists(#pk)",
            )
        except (ClientError, BotoCoreError, DecimalException) as e:
            if _es_condicion_fallida(e):
                raise NoEncontradoError(f"usuario {usuario_id} no encontrado") from e
            raise RepositorioError(f"error actualizando usuario: {e}") from e

    def eliminar(self, usuario_id):
        try:
            self.table.delete_item(
                Key={"id": usuario_id},
                ConditionExpression="attribute_exists(#pk)",
                ExpressionAttributeNames={"#pk": "id"},
            )
        except (ClientError, BotoCoreError) as e:
            if _es_condicion_fallida(e):
                raise NoEncontradoError(f"usuario {usuario_id} no encontrado") from e
            raise RepositorioError(f"error eliminando usuario: {e}") from e
