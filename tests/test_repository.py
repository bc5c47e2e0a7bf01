import pytest
from botocore.exceptions import ClientError

from Usuarios.functions.errores import NoEncontradoError, RepositorioError
from Usuarios.functions.models import ahora_iso, construir_usuario


def _nuevo(dto):
    usuario = construir_usuario(dto)
    usuario["created_at"] = ahora_iso()
    return usuario


def test_crear_asigna_id_y_obtener_por_id(repo, usuario_dto):
    creado = repo.crear(_nuevo(usuario_dto))

    assert creado["id"]
    assert repo.obtener_por_id(creado["id"]) == creado


def test_obtener_por_id_inexistente_devuelve_none(repo):
    assert repo.obtener_por_id("no-existe") is None


def test_obtener_por_dni(repo, usuario_dto):
    creado = repo.crear(_nuevo(usuario_dto))
    repo.crear(_nuevo({**usuario_dto, "dni": "11111111"}))

    assert repo.obtener_por_dni("45879632") == creado
    assert repo.obtener_por_dni("99999999") is None


def test_listar_ordena_por_fecha_descendente_y_respeta_limite(repo, usuario_dto):
    creados = [repo.crear(_nuevo({**usuario_dto, "dni": f"1000000{i}"})) for i in range(5)]

    usuarios = repo.listar(3)

    assert [u["id"] for u in usuarios] == [u["id"] for u in reversed(creados)][:3]


def test_actualizar_reemplaza_campos_y_elimina_nulos(repo, usuario_completo):
    creado = repo.crear(_nuevo(usuario_completo))

    cambios = construir_usuario({"nombres": "Rosa", "apellido_paterno": "Quispe", "dni": "45879632"})
    cambios["id"] = creado["id"]
    cambios["created_at"] = creado["created_at"]
    cambios["updated_at"] = ahora_iso()
    repo.actualizar(creado["id"], cambios)

    guardado = repo.obtener_por_id(creado["id"])
    assert guardado == cambios
    assert guardado["datos_conyuge"] is None
    assert guardado["hijos"] == []


def test_actualizar_inexistente(repo, usuario_dto):
    with pytest.raises(NoEncontradoError):
        repo.actualizar("no-existe", _nuevo(usuario_dto))


def test_eliminar(repo, usuario_dto):
    creado = repo.crear(_nuevo(usuario_dto))

    repo.eliminar(creado["id"])

    assert repo.obtener_por_id(creado["id"]) is None
    with pytest.raises(NoEncontradoError):
        repo.eliminar(creado["id"])


def test_errores_de_dynamodb_se_envuelven(repo, monkeypatch):
    def falla(**kwargs):
        raise ClientError({"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "lento"}}, "GetItem")

    monkeypatch.setattr(repo.table, "get_item", falla)

    with pytest.raises(RepositorioError, match="error obteniendo usuario"):
        repo.obtener_por_id("x")


def test_numero_fuera_de_rango_se_envuelve(repo, usuario_dto):
    usuario = _nuevo({**usuario_dto, "capacitaciones": [{"nombre": "Primeros auxilios", "horas": 10 ** 40}]})

    with pytest.raises(RepositorioError, match="error creando usuario"):
        repo.crear(usuario)
