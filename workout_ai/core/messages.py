"""Error messages produced by the AI engine and user-facing text for the API."""

# Engine / provider messages (matched by callers, keep stable)
AI_DISABLED = "AI is disabled"
AI_REMOTE_NOT_CONFIGURED = "RemoteProvider not configured. Please set API key."
AI_REQUEST_TIMED_OUT = "Request timed out. Please try again."
AI_EMPTY_RESPONSE = "Empty response from API"
AI_UNKNOWN_ERROR = "Unknown error"
AI_QUOTA_FALLBACK = "Quota exceeded, falling back to mock provider"

# User-facing messages (Spanish)
FEATURE_TEMPLATE_GENERATION_DISABLED = "La generación de plantillas con IA está desactivada"
FEATURE_LOAD_PREDICTION_DISABLED = "La predicción de cargas con IA está desactivada"
FEATURE_AI_DISABLED = "La IA está desactivada"
TEMPLATE_DESCRIPTION_REQUIRED = "Por favor, describe la plantilla que quieres generar"
TEMPLATE_GENERATION_FAILED = "Error desconocido al generar plantilla"
LOAD_PREDICTION_FAILED = "Error en predicción"
EXERCISE_SUGGESTIONS_FAILED = "Error al obtener sugerencias"
ANALYSIS_FAILED = "Error al analizar los datos"
SELF_TEST_FAILED = "Error desconocido"
AI_QUOTA_EXCEEDED = "Se ha superado la cuota del proveedor de IA. Inténtalo de nuevo más tarde."
