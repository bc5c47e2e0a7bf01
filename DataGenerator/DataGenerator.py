import json
import os
import random
import uuid
from datetime import date, timedelta
from pathlib import Path

# Configuración
OUTPUT_DIR = Path(__file__).parent / "example-data"
USUARIOS_TOTAL = int(os.getenv("USUARIOS_TOTAL", "30"))

# Datos base para generar ejemplos realistas
NOMBRES = [
    "Juan", "María", "Carlos", "Ana", "Luis", "Carmen", "José", "Laura",
    "Miguel", "Isabel", "Pedro", "Sofía", "Diego", "Valentina", "Andrés", "Camila"
]

APELLIDOS = [
    "Pérez", "García", "López", "Martínez", "Rodríguez", "Fernández", "González",
    "Sánchez", "Torres", "Ramírez", "Flores", "Castro", "Morales", "Ortiz", "Silva", "Rojas"
]

DEPARTAMENTOS = {
    "Madre de Dios": ("Tambopata", ["Tambopata", "Inambari", "Las Piedras"]),
    "Cusco": ("Cusco", ["Cusco", "Santiago", "Wanchaq"]),
    "Lima": ("Lima", ["Miraflores", "Surco", "San Isidro"]),
}

PUESTOS = ["Guía de turismo", "Cocinero", "Recepcionista", "Motorista", "Administrador", "Mantenimiento"]
LUGARES_TRABAJO = ["Lodge Tambopata", "Oficina Puerto Maldonado", "Oficina Cusco"]
SITUACIONES = ["Plazo fijo", "Indeterminado", "Por temporada"]
AFPS = ["Integra", "Prima", "Profuturo", "Habitat"]
GRUPOS_SANGUINEOS = ["O+", "O-", "A+", "A-", "B+", "AB+"]
ESTADOS_CIVILES = ["Soltero", "Casado", "Conviviente", "Divorciado"]
PARENTESCOS = ["Madre", "Padre", "Esposa", "Esposo", "Hermano", "Hermana"]
IDIOMAS = ["Inglés", "Portugués", "Francés", "Quechua"]
NIVELES_IDIOMA = ["Básico", "Intermedio", "Avanzado"]
CAPACITACIONES = [
    ("Primeros auxilios", "Cruz Roja"),
    ("Manipulación de alimentos", "DIGESA"),
    ("Interpretación ambiental", "SERNANP"),
]


def generar_dni():
    """Genera un DNI peruano (8 dígitos)"""
    return f"{random.randint(10000000, 99999999)}"


def generar_telefono():
    """Genera un número de celular peruano"""
    return f"9{random.randint(10000000, 99999999)}"


def generar_fecha(desde_anios, hasta_anios):
    dias = random.randint(desde_anios * 365, hasta_anios * 365)
    return (date.today() - timedelta(days=dias)).isoformat()


def nombre_aleatorio():
    return f"{random.choice(APELLIDOS)} {random.choice(APELLIDOS)} {random.choice(NOMBRES)}"


def generar_usuario():
    """Genera un DTO de creación de usuario con datos de ejemplo"""
    nombres = random.choice(NOMBRES)
    apellido_paterno = random.choice(APELLIDOS)
    departamento = random.choice(list(DEPARTAMENTOS))
    provincia, distritos = DEPARTAMENTOS[departamento]
    regimen = random.choice(["AFP", "ONP"])
    estado_civil = random.choice(ESTADOS_CIVILES)

    usuario = {
        "apellido_paterno": apellido_paterno,
        "apellido_materno": random.choice(APELLIDOS),
        "nombres": nombres,
        "sexo": random.choice(["M", "F"]),
        "dni": generar_dni(),
        "fecha_nacimiento": generar_fecha(20, 60),
        "lugar_nacimiento_distrito": random.choice(distritos),
        "lugar_nacimiento_provincia": provincia,
        "lugar_nacimiento_departamento": departamento,
        "direccion_domicilio": f"Av. {random.choice(APELLIDOS)} {random.randint(100, 999)}",
        "fecha_ingreso": generar_fecha(0, 10),
        "lugar_trabajo": random.choice(LUGARES_TRABAJO),
        "puesto_actual": random.choice(PUESTOS),
        "telefono": generar_telefono(),
        "email": f"{nombres.lower()}.{apellido_paterno.lower()}{random.randint(1, 99)}@example.com",
        "situacion_contractual": random.choice(SITUACIONES),
        "regimen_pensionario": regimen,
        "afp_nombre": random.choice(AFPS) if regimen == "AFP" else "",
        "cuspp": uuid.uuid4().hex[:12].upper() if regimen == "AFP" else "",
        "regimen_salud": "EsSalud",
        "contacto_nombre": nombre_aleatorio(),
        "contacto_parentesco": random.choice(PARENTESCOS),
        "contacto_celular": generar_telefono(),
        "contacto_direccion": f"Jr. {random.choice(APELLIDOS)} {random.randint(100, 999)}",
        "grupo_sanguineo": random.choice(GRUPOS_SANGUINEOS),
        "estado_civil": estado_civil,
        "autoriza_bcp": random.choice([True, False]),
        "autoriza_otro_banco": False,
        "autoriza_cts_bcp": random.choice([True, False]),
        "hijos": [
            {
                "id": str(uuid.uuid4()),
                "apellidos_nombres": f"{apellido_paterno} {random.choice(APELLIDOS)} {random.choice(NOMBRES)}",
                "fecha_nacimiento": generar_fecha(1, 18),
                "dni": generar_dni(),
                "edad": random.randint(1, 18),
            }
            for _ in range(random.randint(0, 3))
        ],
        "idiomas": [
            {
                "id": str(uuid.uuid4()),
                "idioma": idioma,
                "lee": random.choice(NIVELES_IDIOMA),
                "habla": random.choice(NIVELES_IDIOMA),
                "escribe": random.choice(NIVELES_IDIOMA),
            }
            for idioma in random.sample(IDIOMAS, random.randint(0, 2))
        ],
        "capacitaciones": [
            {"id": str(uuid.uuid4()), "nombre": nombre, "institucion": institucion, "horas": random.choice([8, 16, 40])}
            for nombre, institucion in random.sample(CAPACITACIONES, random.randint(0, 2))
        ],
    }

    if estado_civil in ("Casado", "Conviviente"):
        usuario["datos_conyuge"] = {
            "apellidos_nombres": nombre_aleatorio(),
            "genero": random.choice(["M", "F"]),
            "fecha_nacimiento": generar_fecha(20, 60),
            "dni": generar_dni(),
        }

    return usuario


def generar_usuarios(cantidad=None):
    """Genera `cantidad` DTOs con DNI únicos"""
    objetivo = max(1, cantidad or USUARIOS_TOTAL)
    usuarios = []
    dnis_usados = set()

    while len(usuarios) < objetivo:
        usuario = generar_usuario()
        if usuario["dni"] in dnis_usados:
            continue
        dnis_usados.add(usuario["dni"])
        usuarios.append(usuario)

    return usuarios


def guardar_json(nombre_archivo, datos):
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    ruta = OUTPUT_DIR / nombre_archivo
    ruta.write_text(json.dumps(datos, ensure_ascii=False, indent=2), encoding="utf-8")
    return ruta


def main():
    usuarios = generar_usuarios()
    ruta = guardar_json("usuarios.json", usuarios)
    print(f"✅ {len(usuarios)} usuarios generados en {ruta}")


if __name__ == "__main__":
    main()
