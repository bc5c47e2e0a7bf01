"""
Esquema de la ficha de personal (Usuario) y su mapeo a DynamoDB.

Los usuarios se manejan como dicts normalizados: siempre contienen todas
las llaves del esquema, con "" / False / [] / None como valores vacíos.
"""

from datetime import datetime, timezone
from decimal import Decimal

from Usuarios.functions.errores import ValidacionError

# Atributo constante usado como partición del índice por fecha de creación
ENTIDAD = "usuario"

CAMPOS_TEXTO = [
    # Datos personales
    "apellido_paterno",
    "apellido_materno",
    "nombres",
    "sexo",
    "dni",
    "licencia_conducir",
    "categoria_licencia",
    "fecha_nacimiento",
    # Lugar de nacimiento
    "lugar_nacimiento_distrito",
    "lugar_nacimiento_provincia",
    "lugar_nacimiento_departamento",
    "direccion_domicilio",
    # Datos laborales
    "fecha_ingreso",
    "lugar_trabajo",
    "puesto_actual",
    "telefono",
    "email",
    "situacion_contractual",
    # Régimen
    "regimen_pensionario",
    "afp_nombre",
    "cuspp",
    "regimen_salud",
    # Emergencia
    "contacto_nombre",
    "contacto_parentesco",
    "contacto_celular",
    "contacto_telefono_fijo",
    "contacto_direccion",
    "grupo_sanguineo",
    "estado_civil",
    "constancia_estado_civil",
    # Cuenta sueldo
    "otro_banco_nombre",
    "otro_banco_cuenta",
    "otro_banco_cci",
    "foto",
]

CAMPOS_BOOL = ["autoriza_bcp", "autoriza_otro_banco", "autoriza_cts_bcp"]

# Sub-esquemas: campo -> tipo ("str", "bool", "int")
ESQUEMA_CONYUGE = {
    "apellidos_nombres": "str",
    "genero": "str",
    "fecha_nacimiento": "str",
    "dni": "str",
    "direccion": "str",
    "copia_dni": "str",
}

ESQUEMAS_LISTAS = {
    "hijos": {
        "id": "str",
        "apellidos_nombres": "str",
        "fecha_nacimiento": "str",
        "direccion": "str",
        "dni": "str",
        "edad": "int",
        "copia_dni": "str",
    },
    "padres": {
        "id": "str",
        "apellidos_nombres": "str",
        "fecha_nacimiento": "str",
        "ocupacion": "str",
        "estado_civil": "str",
        "vive": "bool",
    },
    "educacion_basica": {
        "nivel": "str",
        "completa": "bool",
        "centro_estudios": "str",
        "desde": "str",
        "hasta": "str",
    },
    "educacion_superior": {
        "nivel": "str",
        "especialidad": "str",
        "centro_estudios": "str",
        "desde": "str",
        "hasta": "str",
        "completa": "bool",
        "grado_academico": "str",
    },
    "capacitaciones": {
        "id": "str",
        "nombre": "str",
        "institucion": "str",
        "horas": "int",
    },
    "experiencia_laboral": {
        "id": "str",
        "cargo": "str",
        "empresa": "str",
        "fecha_ingreso": "str",
        "fecha_cese": "str",
        "tiempo_permanencia": "str",
        "motivo_cese": "str",
    },
    "idiomas": {
        "id": "str",
        "idioma": "str",
        "lee": "str",
        "habla": "str",
        "escribe": "str",
    },
}

CAMPOS_META = ["id", "created_at", "updated_at"]

CAMPOS_REQUERIDOS = ["nombres", "apellido_paterno", "dni"]
LONGITUD_MINIMA = 2

# DynamoDB admite números de hasta 38 dígitos
MAXIMO_NUMERICO = 10 ** 38


def ahora_iso():
    """Marca de tiempo UTC con precisión fija, ordenable lexicográficamente"""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _texto(valor):
    if valor is None:
        return ""
    if isinstance(valor, Decimal):
        valor = int(valor) if valor % 1 == 0 else float(valor)
    return str(valor).strip()


def _booleano(valor):
    if isinstance(valor, str):
        return valor.strip().lower() in ("true", "1", "si", "sí")
    return bool(valor)


def _entero(valor):
    if isinstance(valor, bool):
        return int(valor)
    try:
        return int(valor)
    except (TypeError, ValueError):
        try:
            return int(float(valor))
        except (TypeError, ValueError, OverflowError):
            return 0


def _fuera_de_rango(valor):
    if valor is None or isinstance(valor, bool):
        return False
    if isinstance(valor, int):
        return abs(valor) >= MAXIMO_NUMERICO
    try:
        numero = Decimal(str(valor).strip())
    except (ArithmeticError, ValueError):
        # No numérico: se normaliza a 0
        return False
    return not numero.is_finite() or abs(numero) >= MAXIMO_NUMERICO


def _validar_numeros(datos):
    for campo, esquema in ESQUEMAS_LISTAS.items():
        enteros = [k for k, tipo in esquema.items() if tipo == "int"]
        elementos = datos.get(campo)
        if not enteros or not isinstance(elementos, list):
            continue
        for i, elemento in enumerate(elementos):
            if not isinstance(elemento, dict):
                continue
            for k in enteros:
                if _fuera_de_rango(elemento.get(k)):
                    raise ValidacionError(f"{campo}[{i}].{k} está fuera de rango")


_CONVERSORES = {"str": _texto, "bool": _booleano, "int": _entero}


def _normalizar_objeto(datos, esquema):
    if not isinstance(datos, dict):
        datos = {}
    return {campo: _CONVERSORES[tipo](datos.get(campo)) for campo, tipo in esquema.items()}


def _normalizar_lista(valores, esquema):
    if not isinstance(valores, list):
        return []
    return [_normalizar_objeto(v, esquema) for v in valores if isinstance(v, dict)]


def validar_usuario(datos):
    """
    Valida los campos obligatorios del DTO de creación/actualización.

    Raises:
        ValidacionError: con el primer campo faltante o demasiado corto, o
            con un número que no cabe en DynamoDB
    """
    if not isinstance(datos, dict):
        raise ValidacionError("el cuerpo debe ser un objeto JSON")

    for campo in CAMPOS_REQUERIDOS:
        texto = _texto(datos.get(campo))
        if not texto:
            raise ValidacionError(f"{campo} es obligatorio")
        if len(texto) < LONGITUD_MINIMA:
            raise ValidacionError(f"{campo} debe tener al menos {LONGITUD_MINIMA} caracteres")

    _validar_numeros(datos)


def construir_usuario(datos):
    """Convierte el DTO en un usuario normalizado (sin metadatos)"""
    usuario = {campo: _texto(datos.get(campo)) for campo in CAMPOS_TEXTO}
    usuario.update({campo: _booleano(datos.get(campo)) for campo in CAMPOS_BOOL})

    conyuge = datos.get("datos_conyuge")
    usuario["datos_conyuge"] = _normalizar_objeto(conyuge, ESQUEMA_CONYUGE) if isinstance(conyuge, dict) else None

    for campo, esquema in ESQUEMAS_LISTAS.items():
        usuario[campo] = _normalizar_lista(datos.get(campo), esquema)

    usuario["id"] = None
    usuario["created_at"] = None
    usuario["updated_at"] = None
    return usuario


def _to_dynamodb_numbers(obj):
    """
    Convierte recursivamente int/float -> Decimal.
    Deja bool, None, str, Decimal, etc. tal cual.
    """
    if isinstance(obj, dict):
        return {k: _to_dynamodb_numbers(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_dynamodb_numbers(x) for x in obj]
    if isinstance(obj, bool) or obj is None:
        return obj
    if isinstance(obj, Decimal):
        return obj
    if isinstance(obj, (int, float)):
        return Decimal(str(obj))
    return obj


def usuario_a_item(usuario):
    """Mapea el usuario a un item de DynamoDB (omite los valores nulos)"""
    item = {k: _to_dynamodb_numbers(v) for k, v in usuario.items() if v is not None}
    item["entidad"] = ENTIDAD
    return item


def usuario_desde_item(item):
    """Reconstruye un usuario normalizado desde un item almacenado"""
    usuario = construir_usuario(item)
    for campo in CAMPOS_META:
        valor = item.get(campo)
        usuario[campo] = str(valor) if valor is not None else None
    return usuario


def nombre_completo(usuario):
    partes = [usuario.get("apellido_paterno"), usuario.get("apellido_materno"), usuario.get("nombres")]
    return " ".join(p for p in partes if p)
