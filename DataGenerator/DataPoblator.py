import json
import os

from botocore.exceptions import ClientError
from dotenv import load_dotenv

from Usuarios.functions.config import cargar_config
from Usuarios.functions.database import obtener_tabla
from Usuarios.functions.errores import UsuarioError
from Usuarios.functions.repository import CREATED_AT_INDEX, DNI_INDEX, UsuarioRepository
from Usuarios.functions.service import UsuarioService

# Carpeta con los datos JSON
DATA_DIR = os.path.join(os.path.dirname(__file__), "example-data")


def table_exists(dynamodb_client, table_name):
    """Verifica si una tabla existe"""
    try:
        dynamodb_client.describe_table(TableName=table_name)
        return True
    except ClientError as e:
        if e.response['Error']['Code'] == 'ResourceNotFoundException':
            return False
        raise


def crear_tabla_usuarios(dynamodb_client, table_name):
    """
    Crea la tabla de usuarios si no existe.

    Índices:
        dni-index         búsqueda por DNI
        created_at-index  listado por fecha de creación (partición constante 'entidad')

    Returns:
        bool: True si la tabla se creó, False si ya existía
    """
    print(f"\n📊 Verificando tabla: {table_name}")
    if table_exists(dynamodb_client, table_name):
        print(f"   ✅ La tabla '{table_name}' ya existe")
        return False

    print(f"   🔨 Creando tabla '{table_name}'...")
    dynamodb_client.create_table(
        TableName=table_name,
        KeySchema=[{'AttributeName': 'id', 'KeyType': 'HASH'}],
        AttributeDefinitions=[
            {'AttributeName': 'id', 'AttributeType': 'S'},
            {'AttributeName': 'dni', 'AttributeType': 'S'},
            {'AttributeName': 'entidad', 'AttributeType': 'S'},
            {'AttributeName': 'created_at', 'AttributeType': 'S'}
        ],
        GlobalSecondaryIndexes=[
            {
                'IndexName': DNI_INDEX,
                'KeySchema': [{'AttributeName': 'dni', 'KeyType': 'HASH'}],
                'Projection': {'ProjectionType': 'ALL'}
            },
            {
                'IndexName': CREATED_AT_INDEX,
                'KeySchema': [
                    {'AttributeName': 'entidad', 'KeyType': 'HASH'},
                    {'AttributeName': 'created_at', 'KeyType': 'RANGE'}
                ],
                'Projection': {'ProjectionType': 'ALL'}
            }
        ],
        BillingMode='PAY_PER_REQUEST'
    )

    # Esperar a que la tabla esté activa
    waiter = dynamodb_client.get_waiter('table_exists')
    waiter.wait(TableName=table_name)

    print(f"   ✅ Tabla '{table_name}' creada exitosamente")
    return True


def load_json_file(filename):
    """Carga un archivo JSON de la carpeta de datos"""
    filepath = os.path.join(DATA_DIR, filename)
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError:
        print(f"⚠️  Archivo no encontrado: {filepath}")
        return None
    except json.JSONDecodeError as e:
        print(f"⚠️  Error al decodificar JSON en {filename}: {e}")
        return None


def poblar_usuarios(servicio, registros):
    """
    Registra cada DTO a través del servicio (misma validación que la API).

    Returns:
        tuple: (insertados, errores)
    """
    success_count = 0
    error_count = 0
    total_items = len(registros)

    for registro in registros:
        try:
            servicio.crear_usuario(registro)
            success_count += 1
        except UsuarioError as e:
            error_count += 1
            print(f"   ❌ {registro.get('dni', '?')}: {e}")

        if success_count and success_count % 100 == 0:
            porcentaje = ((success_count + error_count) / total_items) * 100
            print(f"      📊 Progreso: {success_count}/{total_items} ({porcentaje:.1f}%)")

    return success_count, error_count


def main():
    """Función principal"""
    load_dotenv()

    print("=" * 60)
    print("🚀 RAINFOREST - DATA POBLATOR (usuarios)")
    print("=" * 60)

    try:
        cfg = cargar_config()
        tabla = obtener_tabla(cfg)
    except UsuarioError as e:
        print(f"❌ {e}")
        return

    crear_tabla_usuarios(tabla.meta.client, cfg.table_name)

    registros = load_json_file("usuarios.json")
    if not registros:
        print("   ⚠️  No hay datos para insertar (ejecuta DataGenerator.py primero)")
        return

    print(f"\n📤 Poblando tabla: {cfg.table_name}")
    print(f"   📊 Total de items: {len(registros)}")

    insertados, errores = poblar_usuarios(UsuarioService(UsuarioRepository(tabla)), registros)

    print(f"   ✅ Insertados: {insertados} items")
    if errores > 0:
        print(f"   ⚠️  Errores: {errores} items")

    print("\n" + "=" * 60)
    print("🎉 COMPLETADO")
    print("=" * 60)


if __name__ == "__main__":
    main()
