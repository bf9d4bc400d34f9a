"""Language tables for every user-facing Jale message.

All text goes through :func:`render`, which fills a template from a fixed set
of named slots.  Each language must define the same keys with the same slots.
"""

from __future__ import annotations

from datetime import datetime
from string import Formatter

from .models import Language

SUPPORTED_LANGUAGES: tuple[Language, ...] = ("en", "es")

SLOTS = frozenset(
    {
        "name",
        "title",
        "location",
        "pay",
        "availability",
        "skills",
        "score",
        "datetime",
        "date",
        "time",
        "duration",
        "requester",
        "tomorrow",
        "tomorrow_times",
        "day_after",
        "day_after_times",
    }
)

TEMPLATES: dict[str, dict[str, str]] = {
    "en": {
        "greeting": "I'm here to help! How can I assist you today?",
        "outreach_greeting": (
            "Hi {name}! I'm Jale's AI assistant. I found a great opportunity that matches your skills!"
        ),
        "outreach_details": (
            "📍 Location: {location}\n💰 Pay: {pay}\n🕐 Hours: {availability}\n📋 Skills needed: {skills}"
        ),
        "outreach_score": "Based on your profile, you're a {score}% match for this role!",
        "outreach_questions": (
            "Would you like to know more about this position? I can also help you schedule an interview!"
        ),
        "answer_pay": (
            "The pay rate for this position is {pay}. This is competitive for your skill level in the {location} area."
        ),
        "answer_location": (
            "The job is located at {location}. The worksite is easily accessible by public transportation."
        ),
        "answer_schedule": (
            "The work schedule is {availability}. We can discuss flexible arrangements during the interview."
        ),
        "answer_benefits": (
            "Benefits include competitive pay, flexible scheduling, and opportunities for skill development."
        ),
        "answer_default": (
            "I'd be happy to help! You can ask me about pay, location, schedule, or benefits. "
            "Would you like to schedule an interview?"
        ),
        "interview_invite": (
            "Great! I can help you schedule an interview. When would work best for you? You can suggest:\n"
            "• A specific date (e.g., 'tomorrow at 2pm', 'Friday afternoon')\n"
            "• Or I can show you available time slots"
        ),
        "interview_confirmation": (
            "Perfect! I'm scheduling your interview for {datetime}. The employer will be notified and "
            "you'll receive a confirmation with the video meeting link."
        ),
        "scheduling_cancelled": (
            "Okay, I've cancelled the interview scheduling. Is there anything else I can help you with?"
        ),
        "scheduling_error": (
            "Sorry, there was an error scheduling the interview. "
            "Please try again or contact the employer directly."
        ),
        "scheduling_past_time": (
            "That time has already passed. Please pick a time later today or another day,\n"
            "or say 'show options' to see suggested times."
        ),
        "scheduling_reprompt": (
            "I couldn't understand the date/time. Please try again with a format like:\n"
            "• 'Tomorrow at 2pm'\n• 'Friday at 10am'\n• 'Next week at 3pm'\n\n"
            "Or say 'show options' to see suggested times."
        ),
        "suggestions": (
            "Here are some suggested time slots:\n\n"
            "📅 {tomorrow}:\n{tomorrow_times}\n\n"
            "📅 {day_after}:\n{day_after_times}\n\n"
            "Just let me know which one works for you, or suggest your own time!"
        ),
        "booking_message": (
            "🎉 Interview scheduled!\n\n📅 Date: {date}\n⏰ Time: {time}\n⏱️ Duration: {duration} minutes\n\n"
            "You'll receive a video meeting link before the interview. Make sure to test your camera and microphone!"
        ),
        "worker_notification_title": "Interview Scheduled!",
        "worker_notification": "Your interview for {title} is scheduled for {datetime}",
        "employer_notification_title": "Interview Scheduled",
        "employer_notification": "{requester} scheduled an interview for {title} on {datetime}",
        "reminder": (
            "📅 Reminder: You have an interview scheduled for {date} at {time}. Don't forget to join on time!"
        ),
        "default_name": "there",
        "default_location": "TBD",
        "default_area": "your area",
        "default_pay": "Competitive",
        "default_availability": "Flexible",
    },
    "es": {
        "greeting": "¡Estoy aquí para ayudarte! ¿En qué puedo ayudarte hoy?",
        "outreach_greeting": (
            "¡Hola {name}! Soy el asistente de IA de Jale. ¡Encontré una gran oportunidad que coincide con tus "
            "habilidades!"
        ),
        "outreach_details": (
            "📍 Ubicación: {location}\n💰 Pago: {pay}\n🕐 Horario: {availability}\n📋 Habilidades necesarias: {skills}"
        ),
        "outreach_score": "¡Según tu perfil, eres un {score}% compatible para este trabajo!",
        "outreach_questions": (
            "¿Te gustaría saber más sobre este puesto? ¡También puedo ayudarte a programar una entrevista!"
        ),
        "answer_pay": (
            "La tarifa de pago para este puesto es {pay}. Esto es competitivo para tu nivel de habilidad en el "
            "área de {location}."
        ),
        "answer_location": (
            "El trabajo está ubicado en {location}. El sitio de trabajo es fácilmente accesible en transporte público."
        ),
        "answer_schedule": (
            "El horario de trabajo es {availability}. Podemos discutir arreglos flexibles durante la entrevista."
        ),
        "answer_benefits": (
            "Los beneficios incluyen pago competitivo, horarios flexibles y oportunidades de desarrollo de "
            "habilidades."
        ),
        "answer_default": (
            "¡Con gusto te ayudo! Puedes preguntarme sobre pago, ubicación, horario o beneficios. "
            "¿Te gustaría programar una entrevista?"
        ),
        "interview_invite": (
            "¡Genial! Puedo ayudarte a programar una entrevista. ¿Cuándo te vendría mejor? Puedes sugerir:\n"
            "• Una fecha específica (ej: 'mañana a las 2pm', 'viernes por la tarde')\n"
            "• O puedo mostrarte horarios disponibles"
        ),
        "interview_confirmation": (
            "¡Perfecto! Estoy programando tu entrevista para {datetime}. El empleador será notificado y "
            "recibirás una confirmación con el enlace de videollamada."
        ),
        "scheduling_cancelled": (
            "Está bien, cancelé la programación de la entrevista. ¿Hay algo más en lo que pueda ayudarte?"
        ),
        "scheduling_error": (
            "Lo siento, hubo un error al programar la entrevista. "
            "Por favor, inténtalo de nuevo o contacta al empleador directamente."
        ),
        "scheduling_past_time": (
            "Esa hora ya pasó. Por favor, elige una hora más tarde hoy u otro día,\n"
            "o di 'mostrar opciones' para ver horarios sugeridos."
        ),
        "scheduling_reprompt": (
            "No pude entender la fecha/hora. Por favor, intenta de nuevo con un formato como:\n"
            "• 'Mañana a las 2pm'\n• 'Viernes a las 10am'\n• 'Próxima semana a las 3pm'\n\n"
            "O di 'mostrar opciones' para ver horarios sugeridos."
        ),
        "suggestions": (
            "Aquí hay algunos horarios sugeridos:\n\n"
            "📅 {tomorrow}:\n{tomorrow_times}\n\n"
            "📅 {day_after}:\n{day_after_times}\n\n"
            "¡Solo dime cuál prefieres, o sugiere tu propio horario!"
        ),
        "booking_message": (
            "🎉 ¡Entrevista programada!\n\n📅 Fecha: {date}\n⏰ Hora: {time}\n⏱️ Duración: {duration} minutos\n\n"
            "Recibirás un enlace de videollamada antes de la entrevista. ¡Prueba tu cámara y micrófono!"
        ),
        "worker_notification_title": "¡Entrevista programada!",
        "worker_notification": "Tu entrevista para {title} está programada para {datetime}",
        "employer_notification_title": "Entrevista programada",
        "employer_notification": "{requester} programó una entrevista para {title} el {datetime}",
        "reminder": (
            "📅 Recordatorio: Tienes una entrevista programada para {date} a las {time}. ¡No olvides unirte a tiempo!"
        ),
        "default_name": "amigo",
        "default_location": "Por definir",
        "default_area": "tu área",
        "default_pay": "Competitivo",
        "default_availability": "Flexible",
    },
}

_WEEKDAY_NAMES = {
    "en": ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
    "es": ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"),
}
_MONTH_NAMES = {
    "en": (
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
    "es": (
        "enero", "febrero", "marzo", "abril", "mayo", "junio",
        "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
    ),
}


def resolve_language(language: str | None) -> Language:
    """Map any requested language onto a supported one (English by default)."""
    lang = (language or "").strip().lower()[:2]
    return "es" if lang == "es" else "en"


def template_slots(language: str, key: str) -> set[str]:
    """Names of the slots used by one template."""
    return {field for _, field, _, _ in Formatter().parse(TEMPLATES[resolve_language(language)][key]) if field}


def render(language: str, key: str, **slots: object) -> str:
    """Fill template *key* for *language*.

    Raises:
        KeyError: Unknown template key or a slot missing from *slots*.
        ValueError: A slot name outside the known slot set.
    """
    unknown = set(slots) - SLOTS
    if unknown:
        raise ValueError(f"Unknown template slots: {', '.join(sorted(unknown))}")
    template = TEMPLATES[resolve_language(language)][key]
    return template.format(**slots)


def format_time(moment: datetime, language: str) -> str:
    if resolve_language(language) == "es":
        return f"{moment.hour:02d}:{moment.minute:02d}"
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {meridiem}"


def format_date(moment: datetime, language: str) -> str:
    """Long date, e.g. ``Tuesday, March 3, 2026`` / ``martes, 3 de marzo de 2026``."""
    lang = resolve_language(language)
    weekday = _WEEKDAY_NAMES[lang][moment.weekday()]
    month = _MONTH_NAMES[lang][moment.month - 1]
    if lang == "es":
        return f"{weekday}, {moment.day} de {month} de {moment.year}"
    return f"{weekday}, {month} {moment.day}, {moment.year}"


def format_short_date(moment: datetime, language: str) -> str:
    """Weekday and day of month, e.g. ``Tuesday, Mar 3`` / ``martes, 3 mar``."""
    lang = resolve_language(language)
    weekday = _WEEKDAY_NAMES[lang][moment.weekday()]
    month = _MONTH_NAMES[lang][moment.month - 1][:3]
    if lang == "es":
        return f"{weekday}, {moment.day} {month}"
    return f"{weekday}, {month} {moment.day}"


def format_datetime(moment: datetime, language: str) -> str:
    connector = "a las" if resolve_language(language) == "es" else "at"
    return f"{format_date(moment, language)} {connector} {format_time(moment, language)}"
