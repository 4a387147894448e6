"""User-facing copy for every dialogue step.

Kept separate from the engine so wording changes never touch flow logic.
Placeholders use ``str.format`` field names.
"""

# --- Flow entry prompts ---
BOOKING_ASK_CI = (
    "🗓️ *Agendar Cita*\n\n"
    "¡Claro! Para agendar tu cita, por favor, ingresa tu número de documento de identidad (CI): 🆔"
)
LOOKUP_ASK_CI = "📋 *Mis Citas*\n\nPara consultar tus citas pendientes, ingresa tu CI: 🆔"
REGISTER_ASK_CI = "📝 *Registrarme*\n\n¡Bienvenido/a! Para iniciar tu registro, por favor, ingresa tu CI: 🆔"
DIAGNOSIS_ASK_SYMPTOM = (
    "🧠 *Diagnóstico IA*\n\n"
    "Cuéntame, ¿qué molestias tienes? (ej. me duele una muela, tengo sarro...): 🗣️"
)

# --- Booking ---
PATIENT_NOT_FOUND_BOOKING = (
    "No encontré un paciente con ese CI. ❌\n\n"
    "Por favor selecciona opción 3 en el menú principal para registrarte."
)
SERVICES_UNAVAILABLE = (
    "Lo siento, no pude obtener la lista de servicios en este momento. Intenta más tarde."
)
SERVICES_GREETING = "Hola *{first_name}* 👋. ¡Que gusto verte!"
SERVICES_TITLE = "Servicios Disponibles"
SERVICES_ACTION = "Ver Servicios"
SERVICES_SECTION = "Servicios"
INVALID_SERVICE = "Opción inválida. Escribe el número o el nombre del servicio."

SERVICE_CHOSEN = "Has elegido: *{service_name}*."
DENTISTS_TITLE = "Nuestros Odontólogos"
DENTISTS_ACTION = "Ver Odontólogos"
DENTISTS_SECTION = "Odontólogos"
INVALID_DENTIST = "Opción inválida. Por favor selecciona un odontólogo de la lista."

ASK_DATE = (
    "👨‍⚕️ Con el Dr. *{dentist_name}*.\n\n"
    "📅 Por favor ingresa la fecha deseada (AAAA-MM-DD)\nEjemplo: *2026-02-01*"
)
INVALID_DATE = "Formato incorrecto. Usa AAAA-MM-DD, ejemplo: 2026-02-01"
NO_SLOTS = (
    "No hay turnos disponibles para esa fecha (o no pude consultar la agenda). 😔\n"
    "Por favor ingresa otra fecha (AAAA-MM-DD):"
)
SLOTS_INTRO = "Horarios disponibles para el {date}:"
SLOTS_TITLE = "Turnos Disponibles"
SLOTS_ACTION = "Ver Turnos"
SLOTS_SECTION = "Horarios"
SLOT_SUBTITLE = "Disponible"
INVALID_SLOT = "Hora no válida. Selecciona una de la lista."

BOOKING_CONFIRMED = (
    "✅ *Cita Reservada*\n\n"
    "📌 Servicio: {service_name}\n"
    "👨‍⚕️ Dr.: {dentist_name}\n"
    "📅 Fecha: {date} a las {time}\n\n"
    "¡Te esperamos, {first_name}!"
)
BOOKING_FAILED = "❌ Error al reservar la cita. Por favor intenta de nuevo."

# --- Registration ---
INVALID_CI = "❌ El CI debe contener solo números. Por favor ingresa un CI válido:"
ALREADY_REGISTERED = (
    "✅ Ya estás registrado/a como *{full_name}*.\n\n"
    "Puedes agendar una cita seleccionando la opción 1 del menú principal."
)
ASK_FIRST_NAME = "Ingresa tu NOMBRE:"
ASK_LAST_NAME = "Ingresa tu APELLIDO:"
ASK_EMAIL = "Ingresa tu EMAIL (o escribe 'no' para omitir):"
EMAIL_OPT_OUT = "no"
REGISTRATION_OK = (
    "✅ Registro exitoso. Bienvenido/a {first_name}.\n\n"
    "Ahora puedes agendar tu cita seleccionando la opción 1 del menú principal."
)
REGISTRATION_FAILED = "❌ Error al registrar. Intenta más tarde."

# --- Lookup ---
PATIENT_NOT_FOUND_LOOKUP = (
    "🚫 No se encontró ningún paciente registrado con ese CI.\n\n"
    "Usa la opción 3 para registrarte."
)
NO_APPOINTMENTS = (
    "Hola {first_name}. No tienes citas futuras agendadas (o ocurrió un error al consultar)."
)
APPOINTMENTS_HEADER = "📋 *Tus Próximas Citas* ({first_name}):\n"
APPOINTMENT_BLOCK = "\n🔹 {date} {time}\n   {service} con {dentist}\n   Estado: {status}\n"
APPOINTMENT_STATUS = {
    "reserved": "Reservada",
    "confirmed": "Confirmada",
    "cancelled": "Cancelada",
    "completed": "Completada",
}

# --- Diagnosis ---
DIAGNOSIS_DEFAULT = "Resultado:"
DIAGNOSIS_NO_MATCH_MARKER = "No se encontraron"
DIAGNOSIS_GENERAL_SUGGESTION = (
    "No encontré un servicio exacto para eso, pero te sugiero una evaluación general:"
)
DIAGNOSIS_PRICE_UNKNOWN = "Precio a consultar"
DIAGNOSIS_BOOKING_HINT = "Puedes agendar estos servicios en el menú principal."

# --- Shared ---
CANCEL_BUTTON_LABEL = "Cancelar"
UNEXPECTED_ERROR = "Ocurrió un error inesperado 😔. Escribe 'menu' para volver al inicio."
LIST_FALLBACK_HEADER = "📋 *Selecciona una opción:*\n(Escribe el número correspondiente)\n"

MENU_OPTIONS = (
    "1️⃣ *Agendar Cita* 🗓️\n"
    "2️⃣ *Mis Citas* 📋\n"
    "3️⃣ *Registrarme* 📝\n"
    "4️⃣ *Diagnóstico IA* 🤖\n\n"
    "👇 *Responde con el número de la opción deseada.*"
)
MENU_WELCOME = "🦷 *Bienvenido a {clinic_name}* 🦷\n¡Tu sonrisa es nuestra prioridad! ✨\n\n"
