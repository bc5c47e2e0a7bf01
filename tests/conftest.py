"""
Fixtures compartidas: DynamoDB simulado con moto y DTOs de ejemplo.
"""

import json

import boto3
import pytest
from moto import mock_aws

from DataGenerator.DataPoblator import crear_tabla_usuarios
from Usuarios.CRUD.utils import reiniciar_dependencias
from Usuarios.functions import database
from Usuarios.functions.repository import UsuarioRepository
from Usuarios.functions.service import UsuarioService

TABLE_NAME = "usuarios-test"
REGION = "us-east-1"
CREDENTIALS = {"aws_access_key_id": "testing", "aws_secret_access_key": "testing"}

# PNG de 1x1 píxel
FOTO_PNG = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


@pytest.fixture(autouse=True)
def aws_env(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    monkeypatch.setenv("AWS_REGION", REGION)
    monkeypatch.setenv("TABLE_USUARIOS", TABLE_NAME)
    monkeypatch.setenv("DB_CREDENTIALS", json.dumps(CREDENTIALS))
    monkeypatch.delenv("DYNAMODB_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("DB_TIMEOUT_SECONDS", raising=False)
    monkeypatch.delenv("LOGO_PATH", raising=False)

    database.reiniciar()
    reiniciar_dependencias()
    yield
    database.reiniciar()
    reiniciar_dependencias()


@pytest.fixture
def tabla():
    with mock_aws():
        client = boto3.client("dynamodb", region_name=REGION)
        crear_tabla_usuarios(client, TABLE_NAME)
        yield boto3.resource("dynamodb", region_name=REGION).Table(TABLE_NAME)


@pytest.fixture
def repo(tabla):
    return UsuarioRepository(tabla)


@pytest.fixture
def servicio(repo):
    return UsuarioService(repo)


@pytest.fixture
def usuario_dto():
    return {
        "nombres": "  María  ",
        "apellido_paterno": "Quispe",
        "apellido_materno": "Huamán",
        "dni": "45879632",
        "sexo": "F",
        "email": "maria.quispe@example.com",
        "telefono": "987654321",
        "puesto_actual": "Guía de turismo",
    }


@pytest.fixture
def usuario_completo(usuario_dto):
    return {
        **usuario_dto,
        "licencia_conducir": "Q45879632",
        "categoria_licencia": "A-I",
        "fecha_nacimiento": "1990-04-12",
        "lugar_nacimiento_distrito": "Tambopata",
        "lugar_nacimiento_provincia": "Tambopata",
        "lugar_nacimiento_departamento": "Madre de Dios",
        "direccion_domicilio": "Av. León Velarde 123",
        "fecha_ingreso": "2019-03-01",
        "lugar_trabajo": "Lodge Tambopata",
        "situacion_contractual": "Indeterminado",
        "regimen_pensionario": "AFP",
        "afp_nombre": "Integra",
        "cuspp": "ABC123456789",
        "regimen_salud": "EsSalud",
        "contacto_nombre": "Rosa Huamán",
        "contacto_parentesco": "Madre",
        "contacto_celular": "912345678",
        "contacto_direccion": "Jr. Cusco 456",
        "grupo_sanguineo": "O+",
        "estado_civil": "Casada",
        "autoriza_bcp": True,
        "autoriza_otro_banco": True,
        "otro_banco_nombre": "Interbank",
        "otro_banco_cuenta": "123-456",
        "otro_banco_cci": "00312300045600",
        "autoriza_cts_bcp": False,
        "foto": FOTO_PNG,
        "datos_conyuge": {
            "apellidos_nombres": "Mamani Condori Jorge",
            "genero": "M",
            "fecha_nacimiento": "1988-01-20",
            "dni": "41236587",
        },
        "hijos": [
            {"id": "h1", "apellidos_nombres": "Mamani Quispe Lucía", "dni": "78945612", "edad": 7},
        ],
        "padres": [
            {"id": "p1", "apellidos_nombres": "Quispe Flores Juan", "ocupacion": "Agricultor", "vive": True},
        ],
        "educacion_basica": [
            {"nivel": "Secundaria", "completa": True, "centro_estudios": "IE Guillermo Billinghurst",
             "desde": "2002", "hasta": "2006"},
        ],
        "educacion_superior": [
            {"nivel": "Técnico", "especialidad": "Turismo", "centro_estudios": "IESTP Jorge Basadre",
             "desde": "2007", "hasta": "2010", "completa": True, "grado_academico": "Titulado"},
        ],
        "capacitaciones": [
            {"id": "c1", "nombre": "Primeros auxilios", "institucion": "Cruz Roja", "horas": 16},
        ],
        "experiencia_laboral": [
            {"id": "e1", "cargo": "Guía", "empresa": "Inkaterra", "fecha_ingreso": "2011-01-01",
             "fecha_cese": "2018-12-31", "tiempo_permanencia": "8 años", "motivo_cese": "Renuncia"},
        ],
        "idiomas": [
            {"id": "i1", "idioma": "Inglés", "lee": "Avanzado", "habla": "Avanzado", "escribe": "Intermedio"},
        ],
    }
