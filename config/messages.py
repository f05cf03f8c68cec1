# Mensajes de error
ERROR_PROCESANDO = "Lo siento, hubo un error procesando tu mensaje. Inténtalo de nuevo."
ERROR_CUOTA = (
    "⚠️ He alcanzado el límite de consultas diarias de Gemini. "
    "Usando respuestas predefinidas por ahora. Inténtalo de nuevo mañana."
)

# Resultado de acciones (se agregan al final de la respuesta)
ACCION_OK = "\n\n✅ {mensaje}"
ACCION_ERROR = "\n\n❌ Error: {mensaje}"

ACCION_NO_RECONOCIDA = "Acción no reconocida"
ERROR_ACCION = "Error ejecutando la acción"

# Rutinas
RUTINA_CREAR = 'Perfecto, voy a crear la rutina "{titulo}"'
RUTINA_CREAR_DESCRIPCION = ' con la descripción: "{descripcion}"'
RUTINA_CREADA = '¡Rutina "{titulo}" creada exitosamente!'
RUTINA_INICIADA = "¡Rutina iniciada exitosamente!"
RUTINA_TITULO_REQUERIDO = "El título de la rutina es requerido"
RUTINA_ID_REQUERIDO = "No se indicó qué rutina iniciar"
RUTINA_ERROR_CREAR = "Error creando la rutina"
RUTINA_ERROR_INICIAR = "Error iniciando la rutina"
SIN_RUTINAS = "No tienes rutinas creadas. ¿Te gustaría crear tu primera rutina?"
RUTINAS_INACTIVAS = (
    'Tienes {total} rutinas, pero ninguna está activa. '
    '¿Te gustaría activar "{titulo}" o crear una nueva?'
)
RUTINA_INICIAR = '¡Perfecto! Iniciando la rutina "{titulo}". {historial} ¿Estás listo para comenzar?'
RUTINA_COMPLETADA_VECES = "Esta rutina la has completado {veces} veces."
RUTINA_PRIMERA_VEZ = "Es la primera vez que la ejecutas."
PRIMERA_RUTINA_TITULO = "Mi Primera Rutina"
PRIMERA_RUTINA_DESCRIPCION = "Una rutina para comenzar tu día con energía y productividad"

# Horarios
HORARIO_CREAR = "Voy a ayudarte a crear un nuevo horario. ¿Qué tipo de horario necesitas?"
HORARIO_CREADO = "¡Horario creado exitosamente para {cantidad} días! ({dias}, {inicio} - {fin})"
HORARIO_ERROR = "Error creando los horarios"
HORARIOS_ERROR_ELIMINAR = "Error eliminando los horarios"
HORARIOS_ELIMINAR = "¿Estás seguro de que quieres eliminar los horarios de {dias}?"
HORARIOS_ELIMINADOS = "¡Horarios eliminados exitosamente para: {dias}!"
HORARIOS_ELIMINACION_CANCELADA = "De acuerdo, no eliminé ningún horario."

# Jornadas
JORNADA_ACTIVA = "Ya tienes una sesión de trabajo activa. ¿Quieres pausarla o continuar?"
JORNADA_INICIAR = "Perfecto, voy a iniciar tu jornada de trabajo. ¿En qué proyecto vas a trabajar?"
JORNADA_INICIADA = "¡Jornada iniciada exitosamente!"
JORNADA_ERROR = "Error iniciando la jornada"

# Información
SIN_DATOS = "No tienes datos aún. ¿Te gustaría crear tu primera rutina o horario?"

# Respuestas generales
AYUDA = (
    "¡Hola! Soy tu asistente de TimeTrack. Puedo ayudarte con:\n\n"
    "• Iniciar rutinas\n"
    "• Crear horarios\n"
    "• Iniciar jornadas de trabajo\n"
    "• Responder preguntas sobre tu actividad\n\n"
    "¿En qué puedo ayudarte?"
)
NO_ENTENDI = (
    "Entiendo que quieres ayuda. ¿Podrías ser más específico? Por ejemplo:\n\n"
    '• "Inicia mi última rutina"\n'
    '• "Crea un horario de trabajo"\n'
    '• "Inicia mi jornada"'
)
