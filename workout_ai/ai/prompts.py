from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Sequence, Tuple

from workout_ai.ai.types import RequestType


BASE_PROMPT = "You are a professional sports training assistant. Always respond in valid JSON."

SYSTEM_PROMPTS: dict[RequestType, str] = {
    RequestType.GENERATION: (
        "You are a professional personal trainer with extensive experience in training program design.\n"
        "Your task is to generate high-quality workout templates based on user descriptions.\n\n"
        "IMPORTANT RULES:\n"
        "1. Respond ONLY with a valid JSON object, no additional text.\n"
        "2. Use standard exercise names in SPANISH.\n"
        "3. Rest times must be realistic (60-180 seconds).\n"
        "4. Sets and reps should match the goal.\n"
        "5. Include 4-8 exercises per template.\n\n"
        "EXACT JSON FORMAT:\n"
        "{\n"
        '  "name": "string",\n'
        '  "description": "string",\n'
        '  "exercises": [{"name": "string", "sets": number, "reps": number, "restSeconds": number}],\n'
        '  "difficulty": "beginner" | "intermediate" | "advanced",\n'
        '  "estimatedDuration": number,\n'
        '  "tags": ["string"]\n'
        "}"
    ),
    RequestType.PREDICTION: (
        "You are an expert coach in sports science and training periodization.\n"
        "Your task is to predict optimal load and reps for the next set.\n\n"
        "RULES:\n"
        "1. Respond ONLY with valid JSON.\n"
        "2. Base prediction on history and progression principles.\n"
        "3. Round suggested weight to 2.5kg increments.\n\n"
        "EXACT JSON FORMAT:\n"
        "{\n"
        '  "suggestedWeight": number,\n'
        '  "suggestedReps": number,\n'
        '  "confidence": number,\n'
        '  "reasoning": "string"\n'
        "}"
    ),
    RequestType.SUGGESTION: (
        "You are an expert coach in training programming.\n"
        "Your task is to suggest complementary exercises.\n\n"
        "RULES:\n"
        "1. Respond ONLY with a JSON array.\n"
        "2. Suggest 3-5 exercises that complement those already added.\n"
        "3. Prioritize uncovered muscle groups.\n\n"
        "EXACT JSON FORMAT:\n"
        '[{"name": "string", "muscleGroup": "string", "category": "string", "reasoning": "string"}]'
    ),
    RequestType.ANALYSIS: (
        "You are a sports performance analyst specialized in strength training.\n"
        "Your task is to analyze training data and provide actionable insights.\n\n"
        "RULES:\n"
        "1. Respond ONLY with valid JSON.\n"
        "2. Summary should be concise but informative.\n"
        "3. Recommendations should be practical.\n\n"
        "EXACT JSON FORMAT:\n"
        "{\n"
        '  "summary": "string",\n'
        '  "insights": [{"type": "positive" | "warning" | "info", "title": "string", "description": "string"}],\n'
        '  "recommendations": ["string"],\n'
        '  "metrics": {"volumeTrend": "increasing" | "stable" | "decreasing", "consistencyScore": number}\n'
        "}"
    ),
}


def get_system_prompt(request_type: RequestType | str) -> str:
    try:
        return SYSTEM_PROMPTS[RequestType(request_type)]
    except ValueError:
        return f"{BASE_PROMPT}\nRespond with a valid JSON object."


def _format_context_value(value: Any) -> str:
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_user_prompt(prompt: str, context: Optional[Mapping[str, Any]] = None) -> str:
    """Append non-null context entries to the prompt, one ``key: value`` per line."""
    if not context:
        return prompt

    lines = [
        f"{key}: {_format_context_value(value)}"
        for key, value in context.items()
        if value is not None
    ]
    if not lines:
        return prompt
    return f"{prompt}\n\nCONTEXT:\n" + "\n".join(lines)


def build_prompts(
    request_type: RequestType | str,
    prompt: str,
    context: Optional[Mapping[str, Any]] = None,
) -> Tuple[str, str]:
    """Return ``(system_prompt, user_prompt)`` for a request."""
    return get_system_prompt(request_type), build_user_prompt(prompt, context)


def template_generation_prompt(description: str) -> str:
    return f"Genera una plantilla de entrenamiento basada en esta descripción: {description}"


def load_prediction_prompt(
    *,
    exercise_name: str,
    previous_weight: Optional[float],
    previous_reps: Optional[int],
    target_reps: Optional[int],
    recent_history: Sequence[Mapping[str, Any]] = (),
) -> str:
    if recent_history:
        history_text = "Historial reciente: " + ", ".join(
            f"{_format_number(entry['weight'])}kg x {entry['reps']}" for entry in recent_history
        )
    else:
        history_text = "Sin historial previo"

    weight_text = _format_number(previous_weight) if previous_weight is not None else "N/A"
    reps_text = previous_reps if previous_reps is not None else "N/A"
    return (
        f"Ejercicio: {exercise_name}\n"
        f"Peso anterior: {weight_text}kg\n"
        f"Reps anteriores: {reps_text}\n"
        f"Reps objetivo: {target_reps if target_reps is not None else 10}\n"
        f"{history_text}\n"
        "Sugiere peso y repeticiones para la siguiente serie."
    )


def exercise_suggestion_prompt(
    *,
    current_exercise_names: Sequence[str],
    session_type: Optional[str] = None,
    session_goal: Optional[str] = None,
) -> str:
    if current_exercise_names:
        current_text = f"Ejercicios ya en la sesión: {', '.join(current_exercise_names)}"
    else:
        current_text = "La sesión está vacía"

    lines = ["Sugiere ejercicios complementarios para esta sesión de entrenamiento.", current_text]
    if session_type:
        lines.append(f"Tipo de sesión: {session_type}")
    if session_goal:
        lines.append(f"Objetivo: {session_goal}")
    lines.append("Devuelve ejercicios que complementen los ya añadidos.")
    return "\n".join(lines)


def session_analysis_prompt(session_data: str) -> str:
    return f"Analyze training data: {session_data}"


SELF_TEST_PROMPT = "Genera una rutina de prueba simple para verificar que el sistema funciona"
CONNECTION_TEST_PROMPT = 'Respond only with: {"status": "ok"}'


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
