import base64
import json

import pytest

from Usuarios import handler
from Usuarios.CRUD import (
    ActualizarUsuario,
    BuscarUsuario,
    CrearUsuario,
    EliminarUsuario,
    ExportarUsuarioPDF,
    ListarUsuarios,
)


def _evento(method, body=None, query=None, path="/usuarios", path_params=None):
    return {
        "httpMethod": method,
        "path": path,
        "queryStringParameters": query,
        "pathParameters": path_params,
        "body": json.dumps(body) if isinstance(body, (dict, list)) else body,
    }


def _body(resp):
    return json.loads(resp["body"])


def _crear(dto):
    resp = CrearUsuario.lambda_handler(_evento("POST", dto), None)
    assert resp["statusCode"] == 201, resp["body"]
    return _body(resp)["data"]


def test_crear_usuario(tabla, usuario_completo):
    resp = CrearUsuario.lambda_handler(_evento("POST", usuario_completo), None)

    assert resp["statusCode"] == 201
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"
    body = _body(resp)
    assert body["success"] is True
    assert body["message"] == "Usuario registrado exitosamente"
    assert body["data"]["id"]
    assert body["data"]["hijos"][0]["edad"] == 7
    assert "error" not in body


def test_crear_usuario_invalido(tabla, usuario_dto):
    usuario_dto["apellido_paterno"] = ""

    resp = CrearUsuario.lambda_handler(_evento("POST", usuario_dto), None)

    assert resp["statusCode"] == 400
    body = _body(resp)
    assert body == {"success": False, "error": "apellido_paterno es obligatorio"}


def test_crear_usuario_json_malformado(tabla):
    resp = CrearUsuario.lambda_handler(_evento("POST", "{nombres: "), None)

    assert resp["statusCode"] == 400
    assert _body(resp)["error"].startswith("Datos inválidos")


@pytest.mark.parametrize("modulo, metodo", [
    (CrearUsuario, "GET"),
    (BuscarUsuario, "POST"),
    (ListarUsuarios, "DELETE"),
    (ActualizarUsuario, "POST"),
    (EliminarUsuario, "GET"),
    (ExportarUsuarioPDF, "PUT"),
])
def test_metodo_no_permitido(tabla, modulo, metodo):
    resp = modulo.lambda_handler(_evento(metodo), None)

    assert resp["statusCode"] == 405
    assert _body(resp)["error"] == "Método no permitido"


def test_preflight_cors(tabla):
    resp = CrearUsuario.lambda_handler(_evento("OPTIONS"), None)

    assert resp["statusCode"] == 200
    assert "OPTIONS" in resp["headers"]["Access-Control-Allow-Methods"]


def test_buscar_por_id_y_por_dni(tabla, usuario_dto):
    creado = _crear(usuario_dto)

    por_id = BuscarUsuario.lambda_handler(_evento("GET", query={"id": creado["id"]}), None)
    por_dni = BuscarUsuario.lambda_handler(_evento("GET", query={"dni": "45879632"}), None)

    assert por_id["statusCode"] == 200
    assert _body(por_id)["data"] == creado
    assert _body(por_dni)["data"] == creado
    assert _body(por_dni)["message"] == "Usuario encontrado"


def test_buscar_sin_parametros(tabla):
    resp = BuscarUsuario.lambda_handler(_evento("GET"), None)

    assert resp["statusCode"] == 400


def test_buscar_inexistente(tabla):
    resp = BuscarUsuario.lambda_handler(_evento("GET", query={"dni": "00000000"}), None)

    assert resp["statusCode"] == 404
    assert _body(resp) == {"success": False, "error": "Usuario no encontrado"}


def test_listar_usuarios(tabla, usuario_dto):
    for dni in ("10000001", "10000002", "10000003"):
        _crear({**usuario_dto, "dni": dni})

    todos = ListarUsuarios.lambda_handler(_evento("GET"), None)
    dos = ListarUsuarios.lambda_handler(_evento("GET", query={"limit": "2"}), None)

    assert todos["statusCode"] == 200
    assert [u["dni"] for u in _body(todos)["data"]] == ["10000003", "10000002", "10000001"]
    assert len(_body(dos)["data"]) == 2


def test_listar_limite_invalido(tabla):
    resp = ListarUsuarios.lambda_handler(_evento("GET", query={"limit": "cien"}), None)

    assert resp["statusCode"] == 400


def test_actualizar_usuario(tabla, usuario_dto):
    creado = _crear(usuario_dto)
    cambios = {**usuario_dto, "nombres": "Rosa"}

    resp = ActualizarUsuario.lambda_handler(
        _evento("PUT", cambios, path_params={"id": creado["id"]}), None
    )

    assert resp["statusCode"] == 200
    data = _body(resp)["data"]
    assert data["nombres"] == "Rosa"
    assert data["id"] == creado["id"]
    assert data["created_at"] == creado["created_at"]


def test_actualizar_sin_id_e_inexistente(tabla, usuario_dto):
    sin_id = ActualizarUsuario.lambda_handler(_evento("PUT", usuario_dto), None)
    inexistente = ActualizarUsuario.lambda_handler(_evento("PUT", usuario_dto, query={"id": "nope"}), None)

    assert sin_id["statusCode"] == 400
    assert inexistente["statusCode"] == 404


def test_eliminar_usuario(tabla, usuario_dto):
    creado = _crear(usuario_dto)

    resp = EliminarUsuario.lambda_handler(_evento("DELETE", query={"id": creado["id"]}), None)
    otra_vez = EliminarUsuario.lambda_handler(_evento("DELETE", query={"id": creado["id"]}), None)
    buscar = BuscarUsuario.lambda_handler(_evento("GET", query={"id": creado["id"]}), None)

    assert resp["statusCode"] == 200
    assert _body(resp) == {"success": True, "message": "Usuario eliminado correctamente"}
    assert otra_vez["statusCode"] == 404
    assert buscar["statusCode"] == 404


def test_exportar_pdf(tabla, usuario_completo):
    _crear(usuario_completo)

    resp = ExportarUsuarioPDF.lambda_handler(
        _evento("GET", path="/usuarios/45879632/pdf", path_params={"dni": "45879632"}), None
    )

    assert resp["statusCode"] == 200
    assert resp["isBase64Encoded"] is True
    assert resp["headers"]["Content-Type"] == "application/pdf"
    disposicion = resp["headers"]["Content-Disposition"]
    assert disposicion.startswith('attachment; filename="usuario_Maria_Quispe_')
    assert "filename*=UTF-8''usuario_Mar%C3%ADa_Quispe_" in disposicion
    contenido = base64.b64decode(resp["body"])
    assert contenido.startswith(b"%PDF")
    assert resp["headers"]["Content-Length"] == str(len(contenido))


def test_exportar_pdf_errores(tabla):
    sin_dni = ExportarUsuarioPDF.lambda_handler(_evento("GET"), None)
    inexistente = ExportarUsuarioPDF.lambda_handler(_evento("GET", query={"dni": "00000000"}), None)

    assert sin_dni["statusCode"] == 400
    assert inexistente["statusCode"] == 404


def test_configuracion_faltante_responde_500(tabla, monkeypatch, usuario_dto):
    monkeypatch.delenv("DB_CREDENTIALS")

    resp = CrearUsuario.lambda_handler(_evento("POST", usuario_dto), None)

    assert resp["statusCode"] == 500
    assert _body(resp)["error"] == "Error de configuración del servidor"


def test_error_del_store_responde_500_generico(tabla, monkeypatch, usuario_dto):
    from Usuarios.CRUD.utils import obtener_dependencias
    from Usuarios.functions.errores import RepositorioError

    deps = obtener_dependencias()

    def falla(limite):
        raise RepositorioError("timeout leyendo DynamoDB")

    monkeypatch.setattr(deps.servicio.repo, "listar", falla)

    resp = ListarUsuarios.lambda_handler(_evento("GET"), None)

    assert resp["statusCode"] == 500
    assert _body(resp)["error"] == "Error al listar usuarios"


# -- router --

def test_router_crud_completo(tabla, usuario_dto):
    creado = _body(handler.router(_evento("POST", usuario_dto), None))["data"]
    usuario_id = creado["id"]

    detalle = handler.router(_evento("GET", path=f"/usuarios/{usuario_id}"), None)
    assert _body(detalle)["data"]["id"] == usuario_id

    lista = handler.router(_evento("GET"), None)
    assert len(_body(lista)["data"]) == 1

    actualizado = handler.router(
        _evento("PUT", {**usuario_dto, "nombres": "Rosa"}, path=f"/usuarios/{usuario_id}"), None
    )
    assert _body(actualizado)["data"]["nombres"] == "Rosa"

    pdf = handler.router(_evento("GET", path="/usuarios/45879632/pdf"), None)
    assert pdf["headers"]["Content-Type"] == "application/pdf"

    eliminado = handler.router(_evento("DELETE", path=f"/usuarios/{usuario_id}"), None)
    assert eliminado["statusCode"] == 200
    assert handler.router(_evento("GET", path=f"/usuarios/{usuario_id}"), None)["statusCode"] == 404


@pytest.mark.parametrize("path", ["/", "/empleados", "/usuarios/1/foto", "/usuarios/1/pdf/extra"])
def test_router_ruta_desconocida(tabla, path):
    assert handler.router(_evento("GET", path=path), None)["statusCode"] == 404


def test_router_metodo_no_permitido(tabla):
    assert handler.router(_evento("PATCH"), None)["statusCode"] == 405
    assert handler.router(_evento("OPTIONS"), None)["statusCode"] == 200


def test_router_post_con_id_no_permitido(tabla, usuario_dto):
    resp = handler.router(_evento("POST", usuario_dto, path="/usuarios/abc"), None)

    assert resp["statusCode"] == 405
    assert _body(ListarUsuarios.lambda_handler(_evento("GET"), None))["data"] == []


@pytest.mark.parametrize("extra", [
    {"hijos": [{"apellidos_nombres": "Lucía", "edad": float("inf")}]},
    {"capacitaciones": [{"nombre": "Primeros auxilios", "horas": 10 ** 40}]},
])
def test_crear_con_numero_fuera_de_rango_responde_400(tabla, usuario_dto, extra):
    resp = CrearUsuario.lambda_handler(_evento("POST", {**usuario_dto, **extra}), None)

    assert resp["statusCode"] == 400
    assert "está fuera de rango" in _body(resp)["error"]


def test_crear_dni_duplicado_responde_400(tabla, usuario_dto):
    _crear(usuario_dto)

    resp = CrearUsuario.lambda_handler(_evento("POST", usuario_dto), None)

    assert resp["statusCode"] == 400
    assert _body(resp)["error"] == "ya existe un usuario con DNI 45879632"
