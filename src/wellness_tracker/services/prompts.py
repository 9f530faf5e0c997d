"""Prompt construction for the weekly wellness report.

The prompt embeds the profile, every logged day and the free-form metrics,
then fixes the HTML structure the generator must answer with. The numbered
``<h4>`` headings delimit the user data, the daily analysis and the
recommendations; :func:`split_report_sections` locates them so the PDF
exporter can flow each section as its own block.
"""

import re
from dataclasses import dataclass

from wellness_tracker.domain.models import (
    DAY_NAMES,
    DailyLog,
    Metrics,
    UserProfile,
    WeeklyLog,
)

NOT_SPECIFIED = "No especificado"
NOT_RECORDED = "No registrado"

REPORT_TITLE = "¡Tu Informe Semanal de Bienestar y Progreso!"
USER_DATA_HEADING = "1. Datos del Usuario"
DAILY_ANALYSIS_HEADING = "2. Análisis Diario"
RECOMMENDATIONS_HEADING = "3. Resumen General y Recomendaciones"

REPORT_INSTRUCTIONS = f"""INSTRUCCIONES PARA EL INFORME:
Actúa como un coach de bienestar profesional. Genera un informe semanal \
detallado en formato HTML.
El informe DEBE tener la siguiente estructura:
1. Un título principal: "<h3>{REPORT_TITLE}</h3>".
2. Un párrafo de introducción motivador.
3. Una sección "<h4>{USER_DATA_HEADING}</h4>" seguida de una tabla HTML \
(<table>) que resuma los "DATOS DEL USUARIO" de arriba. La tabla debe tener \
dos columnas: "Dato" y "Valor".
4. Si los datos del perfil no están completos, añade un "Consejo del Experto" \
en un párrafo para animar a completarlos.
5. Una sección "<h4>{DAILY_ANALYSIS_HEADING}</h4>". Para CADA DÍA que tenga \
datos, crea un subtítulo "<h5>[Nombre del Día]</h5>" y debajo, en un párrafo \
o lista, un breve análisis que integre el peso, las comidas, las sensaciones \
y la actividad de ese día. Sé conciso y extrae conclusiones.
6. Una sección "<h4>{RECOMMENDATIONS_HEADING}</h4>". Aquí, escribe un análisis \
holístico de la semana, conectando los datos diarios, las métricas y los \
objetivos del usuario. Ofrece conclusiones y 2-3 recomendaciones claras y \
prácticas para la próxima semana.
7. Utiliza etiquetas <strong> para resaltar datos numéricos clave. Utiliza \
<ul> y <li> para las recomendaciones.
8. El tono debe ser de apoyo, profesional y motivador.
9. NO incluyas ninguna parte de estas instrucciones en tu respuesta. Solo el \
HTML del informe."""


@dataclass(frozen=True)
class ReportSections:
    """Generated report split at its numbered headings."""

    intro: str
    user_data: str
    daily_analysis: str
    recommendations: str

    def blocks(self) -> tuple[tuple[str, str], ...]:
        """Return (name, html) pairs in document order."""
        return (
            ("intro", self.intro),
            ("user_data", self.user_data),
            ("daily_analysis", self.daily_analysis),
            ("recommendations", self.recommendations),
        )


def has_logged_data(week: WeeklyLog, metrics: Metrics) -> bool:
    """Return True when a report has anything to describe."""
    return week.has_data or metrics.has_data


def format_number(value: float) -> str:
    """Render a number the way it was typed, without a trailing ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_day_line(index: int, day: DailyLog) -> str | None:
    """Summarize one day, or return None when nothing was logged."""
    if not day.has_data:
        return None
    parts: list[str] = []
    if day.weight > 0:
        parts.append(f"Peso: {format_number(day.weight)} kg")
    if day.food.has_entries:
        food = day.food
        parts.append(
            f"Comidas: Desayuno({food.breakfast}), Almuerzo({food.lunch}), "
            f"Merienda({food.snack}), Cena({food.dinner}), Otros({food.other})"
        )
    if day.mood:
        parts.append(f"Sensaciones: {day.mood}")
    parts.append(f"Nivel de Actividad: {day.activity_level.value}")
    return f"- {DAY_NAMES[index]}: {'; '.join(parts)}"


def build_report_prompt(
    profile: UserProfile | None, week: WeeklyLog, metrics: Metrics
) -> str:
    """Build the full generation brief for the current week."""
    day_lines = [
        line
        for index, day in enumerate(week.days)
        if (line := format_day_line(index, day)) is not None
    ]
    sections = [
        "DATOS DEL USUARIO:",
        *_profile_lines(profile),
        "",
        "DATOS DE LA SEMANA:",
        *day_lines,
        "",
        "DATOS DE MÉTRICAS Y ACTIVIDAD FÍSICA:",
        f"- Fuerza: {metrics.strength or NOT_RECORDED}",
        f"- Medidas: {metrics.measurements or NOT_RECORDED}",
        f"- BMI: {metrics.bmi or NOT_RECORDED}",
        f"- Actividad Física Detallada: {metrics.daily_activity or NOT_RECORDED}",
        "",
        REPORT_INSTRUCTIONS,
    ]
    return "\n".join(sections)


def split_report_sections(content: str) -> ReportSections:
    """Split generated HTML at the numbered ``<h4>`` headings.

    Missing headings yield empty sections; text before the first heading is
    the intro.
    """
    starts: dict[str, int] = {}
    for number, name in (
        ("1", "user_data"),
        ("2", "daily_analysis"),
        ("3", "recommendations"),
    ):
        match = re.search(rf"<h4[^>]*>\s*{number}\.", content, re.IGNORECASE)
        if match:
            starts[name] = match.start()

    ordered = sorted(starts.items(), key=lambda item: item[1])
    blocks = {"intro": content[: ordered[0][1]] if ordered else content}
    for position, (name, start) in enumerate(ordered):
        end = ordered[position + 1][1] if position + 1 < len(ordered) else None
        blocks[name] = content[start:end]
    return ReportSections(
        intro=blocks["intro"].strip(),
        user_data=blocks.get("user_data", "").strip(),
        daily_analysis=blocks.get("daily_analysis", "").strip(),
        recommendations=blocks.get("recommendations", "").strip(),
    )


def _profile_lines(profile: UserProfile | None) -> list[str]:
    if profile is None:
        return [
            f"- Nombre: {NOT_SPECIFIED}",
            f"- Edad: {NOT_SPECIFIED}",
            f"- Objetivo Principal: {NOT_SPECIFIED}",
            f"- Peso Inicial: {NOT_SPECIFIED} kg",
            f"- Peso Meta: {NOT_SPECIFIED} kg",
        ]
    return [
        f"- Nombre: {profile.name or NOT_SPECIFIED}",
        f"- Edad: {profile.age or NOT_SPECIFIED}",
        f"- Objetivo Principal: {profile.objective or NOT_SPECIFIED}",
        f"- Peso Inicial: {format_number(profile.initial_weight)} kg",
        f"- Peso Meta: {format_number(profile.weight_goal)} kg",
    ]
