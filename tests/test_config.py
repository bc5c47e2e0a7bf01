import pytest

from Usuarios.functions.config import DEFAULT_TIMEOUT_SECONDS, cargar_config
from Usuarios.functions.errores import ConfigError


def test_cargar_config_desde_entorno(monkeypatch):
    monkeypatch.setenv("DYNAMODB_ENDPOINT_URL", "http://localhost:8000")

    cfg = cargar_config()

    assert cfg.table_name == "usuarios-test"
    assert cfg.credentials["aws_access_key_id"] == "testing"
    assert cfg.credentials["aws_session_token"] is None
    assert cfg.region == "us-east-1"
    assert cfg.endpoint_url == "http://localhost:8000"
    assert cfg.timeout_seconds == DEFAULT_TIMEOUT_SECONDS


def test_faltan_credenciales(monkeypatch):
    monkeypatch.delenv("DB_CREDENTIALS")
    with pytest.raises(ConfigError, match="DB_CREDENTIALS"):
        cargar_config()


def test_falta_tabla(monkeypatch):
    monkeypatch.delenv("TABLE_USUARIOS")
    with pytest.raises(ConfigError, match="TABLE_USUARIOS"):
        cargar_config()


@pytest.mark.parametrize("valor", ["no es json", "[]", '{"aws_access_key_id": "x"}'])
def test_credenciales_invalidas(monkeypatch, valor):
    monkeypatch.setenv("DB_CREDENTIALS", valor)
    with pytest.raises(ConfigError):
        cargar_config()


def test_timeout_invalido(monkeypatch):
    monkeypatch.setenv("DB_TIMEOUT_SECONDS", "diez")
    with pytest.raises(ConfigError, match="DB_TIMEOUT_SECONDS"):
        cargar_config()
