"""
Generador de la ficha de datos del personal en PDF (fpdf2).

La ficha se arma con filas de una grilla de 12 columnas, sección por
sección. Los saltos de página se hacen por fila completa.
"""

import base64
import binascii
import io
import logging
import re
import unicodedata
from datetime import datetime
from pathlib import Path
from urllib.parse import quote

from fpdf import FPDF
from fpdf.errors import FPDFException

from Usuarios.functions.errores import PDFError
from Usuarios.functions.models import nombre_completo

logger = logging.getLogger()

COLOR_ENCABEZADO = (34, 139, 34)
COLOR_TEXTO = (55, 55, 55)
COLOR_SIN_FOTO = (150, 150, 150)
NEGRO = (0, 0, 0)

MARGEN = 15
COLUMNAS = 12
FUENTE = "Helvetica"

LOGO_PATHS = [
    "rainforest.png",
    "./rainforest.png",
    "../../rainforest.png",
    "../rainforest.png",
    str(Path(__file__).resolve().parent.parent / "rainforest.png"),
]

FOTOS_VACIAS = {"", "null", "undefined"}


def decodificar_imagen_base64(valor):
    """Decodifica una imagen en base64, con o sin prefijo data:image/...;base64,"""
    if "base64," in valor:
        valor = valor.split("base64,", 1)[1]
    try:
        return base64.b64decode(valor, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"error decodificando base64: {e}") from e


def si_no(valor):
    return "Si" if valor else "No"


def _limpiar_nombre(texto):
    texto = "".join(c for c in str(texto or "") if not unicodedata.category(c).startswith("C"))
    texto = re.sub(r'["\\/;:*?<>|]', "", texto)
    return re.sub(r"\s+", "_", texto.strip())


def nombre_archivo(usuario, fecha=None):
    fecha = fecha or datetime.now()
    nombres = _limpiar_nombre(usuario.get("nombres"))
    apellido = _limpiar_nombre(usuario.get("apellido_paterno"))
    return f"usuario_{nombres}_{apellido}_{fecha.strftime('%Y%m%d')}.pdf"


def content_disposition(filename):
    """
    Cabecera de descarga según RFC 6266: filename en ASCII como respaldo y
    filename* con el nombre completo en UTF-8.
    """
    ascii_name = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    ascii_name = ascii_name.replace('"', "").replace("\\", "")
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename, safe='')}"


def _latin1(texto):
    # Las fuentes estándar de PDF solo cubren Latin-1
    return str(texto).encode("latin-1", "replace").decode("latin-1")


class PDFGenerator:
    def __init__(self, logo_path=None):
        self.logo_paths = ([logo_path] if logo_path else []) + LOGO_PATHS

    def generar_usuario_pdf(self, usuario):
        """
        Genera la ficha del usuario.

        Returns:
            bytes: documento PDF

        Raises:
            PDFError: si fpdf2 no puede armar el documento
        """
        try:
            pdf = FPDF(orientation="portrait", unit="mm", format="A4")
            pdf.set_margins(MARGEN, MARGEN, MARGEN)
            pdf.set_auto_page_break(auto=True, margin=MARGEN)
            pdf.add_page()

            self._encabezado(pdf, usuario)
            self._datos_personales(pdf, usuario)
            self._contacto(pdf, usuario)
            self._datos_laborales(pdf, usuario)
            self._educacion(pdf, usuario)
            self._capacitaciones(pdf, usuario)
            self._experiencia(pdf, usuario)
            self._idiomas(pdf, usuario)
            self._familia(pdf, usuario)
            self._pie(pdf)

            return bytes(pdf.output())
        except (FPDFException, ValueError, TypeError, KeyError) as e:
            raise PDFError(f"error generando PDF: {e}") from e

    # -- grilla --

    def _ancho(self, pdf, span):
        return pdf.epw * span / COLUMNAS

    def _nueva_fila(self, pdf, alto):
        if pdf.will_page_break(alto):
            pdf.add_page()
        return pdf.y

    def _ajustar(self, pdf, texto, ancho):
        """Recorta el texto con '...' para que entre en la celda"""
        texto = _latin1(texto)
        limite = ancho - 2
        # Lo que pase de este largo nunca entra en la celda
        maximo = 2 * int(limite / pdf.get_string_width(".")) + 1
        if len(texto) <= maximo and pdf.get_string_width(texto) <= limite:
            return texto

        texto = texto[:maximo]
        inicio, fin = 0, len(texto)
        while inicio < fin:
            medio = (inicio + fin + 1) // 2
            if pdf.get_string_width(texto[:medio] + "...") <= limite:
                inicio = medio
            else:
                fin = medio - 1
        return texto[:inicio] + "..."

    def _fila(self, pdf, alto, columnas, size=9, style="", color=NEGRO):
        """Dibuja una fila; columnas es una lista de (span, texto)"""
        y = self._nueva_fila(pdf, alto)
        x = pdf.l_margin
        pdf.set_font(FUENTE, style=style, size=size)
        pdf.set_text_color(*color)
        for span, texto in columnas:
            ancho = self._ancho(pdf, span)
            pdf.set_xy(x, y)
            pdf.cell(ancho, alto, self._ajustar(pdf, texto, ancho), align="L")
            x += ancho
        pdf.set_xy(pdf.l_margin, y + alto)

    def _espacio(self, pdf, alto=5):
        self._nueva_fila(pdf, alto)
        pdf.set_y(pdf.y + alto)

    def _linea(self, pdf, grosor, alto=2):
        y = self._nueva_fila(pdf, alto)
        pdf.set_draw_color(*COLOR_ENCABEZADO)
        pdf.set_line_width(grosor * 0.35)
        pdf.line(pdf.l_margin, y + alto / 2, pdf.l_margin + pdf.epw, y + alto / 2)
        pdf.set_xy(pdf.l_margin, y + alto)

    def _titulo_seccion(self, pdf, texto):
        self._fila(pdf, 10, [(12, texto)], size=11, style="B", color=COLOR_ENCABEZADO)

    def _subtitulo(self, pdf, texto):
        self._fila(pdf, 6, [(12, texto)], size=9, style="B")

    def _item(self, pdf, texto):
        self._fila(pdf, 5, [(12, texto)], size=8)

    @staticmethod
    def _prop(etiqueta, valor):
        return f"{etiqueta}: {valor or '-'}"

    # -- encabezado --

    def _cargar_logo(self):
        for path in self.logo_paths:
            try:
                return Path(path).read_bytes()
            except OSError:
                continue
        return None

    def _imagen(self, pdf, datos, x, y, ancho, alto):
        """Inserta una imagen centrada en la celda; False si no se pudo"""
        try:
            pdf.image(io.BytesIO(datos), x=x, y=y, w=ancho, h=alto, keep_aspect_ratio=True)
            return True
        except (OSError, ValueError, FPDFException) as e:
            logger.warning("No se pudo insertar la imagen en el PDF: %s", e)
            return False

    def _texto_centrado(self, pdf, x, y, ancho, texto, size, style="B", color=NEGRO):
        pdf.set_font(FUENTE, style=style, size=size)
        pdf.set_text_color(*color)
        pdf.set_xy(x, y)
        pdf.cell(ancho, 6, self._ajustar(pdf, texto, ancho), align="C")

    def _encabezado(self, pdf, usuario):
        alto = 30
        y = self._nueva_fila(pdf, alto)
        ancho_lateral = self._ancho(pdf, 3)
        ancho_centro = self._ancho(pdf, 6)
        x_centro = pdf.l_margin + ancho_lateral
        x_foto = x_centro + ancho_centro

        # Logo (izquierda)
        logo = self._cargar_logo()
        if not logo or not self._imagen(pdf, logo, pdf.l_margin, y, ancho_lateral * 0.9, alto * 0.9):
            self._texto_centrado(pdf, pdf.l_margin, y + 10, ancho_lateral, "LOGO", 10)

        # Título (centro)
        self._texto_centrado(pdf, x_centro, y + 5, ancho_centro, "RAINFOREST ENTERPRISE", 16, color=COLOR_ENCABEZADO)
        self._texto_centrado(pdf, x_centro, y + 15, ancho_centro, "FICHA DE DATOS DEL PERSONAL", 12)

        # Foto (derecha)
        foto = (usuario.get("foto") or "").strip()
        insertada = False
        if foto not in FOTOS_VACIAS:
            try:
                insertada = self._imagen(
                    pdf, decodificar_imagen_base64(foto), x_foto, y, ancho_lateral * 0.95, alto * 0.95
                )
            except ValueError as e:
                logger.warning("Foto inválida para el usuario %s: %s", usuario.get("id"), e)
        if not insertada:
            self._texto_centrado(pdf, x_foto, y + 10, ancho_lateral, "[ SIN FOTO ]", 10, style="BI", color=COLOR_SIN_FOTO)

        pdf.set_xy(pdf.l_margin, y + alto)
        self._espacio(pdf)
        self._linea(pdf, 2)
        self._espacio(pdf)

    # -- secciones --

    def _datos_personales(self, pdf, u):
        self._titulo_seccion(pdf, "I. DATOS PERSONALES")
        self._fila(pdf, 6, [
            (4, self._prop("DNI", u["dni"])),
            (8, self._prop("Apellidos y Nombres", nombre_completo(u))),
        ])
        self._fila(pdf, 6, [
            (4, self._prop("Fecha Nacimiento", u["fecha_nacimiento"])),
            (4, self._prop("Sexo", u["sexo"])),
            (4, self._prop("Estado Civil", u["estado_civil"])),
        ])
        self._fila(pdf, 6, [
            (4, self._prop("Licencia Conducir", u["licencia_conducir"])),
            (4, self._prop("Categoría Licencia", u["categoria_licencia"])),
            (4, self._prop("Grupo Sanguíneo", u["grupo_sanguineo"])),
        ])
        self._fila(pdf, 6, [(12, self._prop("Dirección", u["direccion_domicilio"]))])
        lugar = " - ".join([
            u["lugar_nacimiento_departamento"],
            u["lugar_nacimiento_provincia"],
            u["lugar_nacimiento_distrito"],
        ])
        self._fila(pdf, 6, [(12, self._prop("Lugar Nacimiento", lugar))])
        self._espacio(pdf)

    def _contacto(self, pdf, u):
        self._titulo_seccion(pdf, "II. CONTACTO Y EMERGENCIA")
        self._fila(pdf, 6, [
            (6, self._prop("Teléfono", u["telefono"])),
            (6, self._prop("Email", u["email"])),
        ])
        self._fila(pdf, 6, [
            (6, self._prop("Contacto Emergencia", u["contacto_nombre"])),
            (3, self._prop("Parentesco", u["contacto_parentesco"])),
            (3, self._prop("Celular", u["contacto_celular"])),
        ])
        self._fila(pdf, 6, [(12, self._prop("Dirección Emergencia", u["contacto_direccion"]))])
        self._espacio(pdf)

    def _datos_laborales(self, pdf, u):
        self._titulo_seccion(pdf, "III. DATOS LABORALES")
        self._fila(pdf, 6, [
            (4, self._prop("Puesto Actual", u["puesto_actual"])),
            (4, self._prop("Lugar Trabajo", u["lugar_trabajo"])),
            (4, self._prop("Fecha Ingreso", u["fecha_ingreso"])),
        ])
        self._fila(pdf, 6, [
            (4, self._prop("Régimen Pensionario", u["regimen_pensionario"])),
            (4, self._prop("AFP/ONP", f"{u['afp_nombre']} {u['cuspp']}".strip())),
            (4, self._prop("Regimen Salud", u["regimen_salud"])),
        ])
        self._fila(pdf, 6, [
            (4, self._prop("Situación Contractual", u["situacion_contractual"])),
            (4, self._prop("Autoriza BCP", si_no(u["autoriza_bcp"]))),
            (4, self._prop("Autoriza CTS BCP", si_no(u["autoriza_cts_bcp"]))),
        ])
        otro_banco = f"{u['otro_banco_nombre']} ({u['otro_banco_cuenta']} - CCI: {u['otro_banco_cci']})"
        self._fila(pdf, 6, [(12, self._prop("Otro Banco", otro_banco))])
        self._espacio(pdf)

    def _educacion(self, pdf, u):
        self._titulo_seccion(pdf, "IV. EDUCACIÓN")
        if u["educacion_basica"]:
            self._subtitulo(pdf, "Educación Básica:")
            for edu in u["educacion_basica"]:
                self._item(pdf, (
                    f"{edu['nivel']} - {edu['centro_estudios']} ({edu['desde']} - {edu['hasta']}) "
                    f"Completa: {si_no(edu['completa'])}"
                ))
        if u["educacion_superior"]:
            self._subtitulo(pdf, "Educación Superior:")
            for edu in u["educacion_superior"]:
                self._item(pdf, (
                    f"{edu['nivel']} en {edu['centro_estudios']} ({edu['desde']} - {edu['hasta']}) - "
                    f"{edu['especialidad']}. Grado: {edu['grado_academico']}"
                ))
        self._espacio(pdf)

    def _capacitaciones(self, pdf, u):
        if not u["capacitaciones"]:
            return
        self._titulo_seccion(pdf, "V. CAPACITACIONES")
        for cap in u["capacitaciones"]:
            self._item(pdf, f"- {cap['nombre']} ({cap['institucion']}) - {cap['horas']} Horas")
        self._espacio(pdf)

    def _experiencia(self, pdf, u):
        if not u["experiencia_laboral"]:
            return
        self._titulo_seccion(pdf, "VI. EXPERIENCIA LABORAL")
        for exp in u["experiencia_laboral"]:
            self._item(pdf, (
                f"- {exp['cargo']} en {exp['empresa']} ({exp['fecha_ingreso']} al {exp['fecha_cese']}) - "
                f"{exp['tiempo_permanencia']}. Motivo: {exp['motivo_cese']}"
            ))
        self._espacio(pdf)

    def _idiomas(self, pdf, u):
        if not u["idiomas"]:
            return
        self._titulo_seccion(pdf, "VII. IDIOMAS")
        for idi in u["idiomas"]:
            self._item(pdf, f"- {idi['idioma']}: Lee({idi['lee']}), Habla({idi['habla']}), Escribe({idi['escribe']})")
        self._espacio(pdf)

    def _familia(self, pdf, u):
        conyuge = u.get("datos_conyuge")
        if not (conyuge or u["hijos"] or u["padres"]):
            return
        self._titulo_seccion(pdf, "VIII. INFORMACIÓN FAMILIAR")

        if conyuge and conyuge.get("apellidos_nombres"):
            self._subtitulo(pdf, "Cónyuge / Conviviente:")
            self._fila(pdf, 6, [
                (6, self._prop("Nombre", conyuge["apellidos_nombres"])),
                (3, self._prop("DNI", conyuge.get("dni"))),
                (3, self._prop("F. Nacimiento", conyuge.get("fecha_nacimiento"))),
            ])

        if u["hijos"]:
            self._subtitulo(pdf, "Hijos:")
            for i, hijo in enumerate(u["hijos"], 1):
                self._item(pdf, f"{i}. {hijo['apellidos_nombres']} (DNI: {hijo['dni']}) - F. Nac: {hijo['fecha_nacimiento']}")

        if u["padres"]:
            self._subtitulo(pdf, "Padres:")
            for i, padre in enumerate(u["padres"], 1):
                self._item(pdf, (
                    f"{i}. {padre['apellidos_nombres']} - F. Nac: {padre['fecha_nacimiento']} - "
                    f"Ocupación: {padre['ocupacion']} - Vive: {si_no(padre['vive'])}"
                ))

    def _pie(self, pdf):
        self._linea(pdf, 1, alto=15)
        generado = datetime.now().strftime("%d/%m/%Y %H:%M:%S")
        y = self._nueva_fila(pdf, 5)
        pdf.set_font(FUENTE, size=8)
        pdf.set_text_color(*COLOR_TEXTO)
        pdf.set_xy(pdf.l_margin, y)
        pdf.cell(pdf.epw, 5, f"Generado el: {generado}", align="R")
