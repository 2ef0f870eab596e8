from workout_ai.ai import prompts
from workout_ai.ai.types import RequestType


def test_each_request_type_has_a_system_prompt():
    for request_type in RequestType:
        assert prompts.get_system_prompt(request_type) == prompts.SYSTEM_PROMPTS[request_type]
    assert "JSON array" in prompts.get_system_prompt("suggestion")


def test_unknown_type_gets_base_prompt():
    assert prompts.get_system_prompt("other").startswith(prompts.BASE_PROMPT)


def test_user_prompt_without_context():
    assert prompts.build_user_prompt("Hola") == "Hola"
    assert prompts.build_user_prompt("Hola", {"a": None}) == "Hola"


def test_user_prompt_renders_context_lines():
    user = prompts.build_user_prompt(
        "Analiza",
        {"weeks": 4, "deload": False, "days": ["lun", "jue"], "meta": {"nivel": "intermedio"}, "skip": None},
    )

    assert user == (
        "Analiza\n\nCONTEXT:\n"
        "weeks: 4\n"
        "deload: false\n"
        'days: ["lun","jue"]\n'
        'meta: {"nivel":"intermedio"}'
    )


def test_build_prompts_pairs_system_and_user():
    system, user = prompts.build_prompts(RequestType.PREDICTION, "x", {"previousWeight": 60})

    assert "predict optimal load" in system
    assert user == "x\n\nCONTEXT:\npreviousWeight: 60"


def test_load_prediction_prompt_with_history():
    text = prompts.load_prediction_prompt(
        exercise_name="Sentadilla",
        previous_weight=100.0,
        previous_reps=8,
        target_reps=None,
        recent_history=[{"weight": 97.5, "reps": 8}, {"weight": 100.0, "reps": 6}],
    )

    assert text == (
        "Ejercicio: Sentadilla\n"
        "Peso anterior: 100kg\n"
        "Reps anteriores: 8\n"
        "Reps objetivo: 10\n"
        "Historial reciente: 97.5kg x 8, 100kg x 6\n"
        "Sugiere peso y repeticiones para la siguiente serie."
    )


def test_load_prediction_prompt_without_data():
    text = prompts.load_prediction_prompt(
        exercise_name="Dominadas",
        previous_weight=None,
        previous_reps=None,
        target_reps=5,
    )

    assert "Peso anterior: N/Akg" in text
    assert "Reps anteriores: N/A" in text
    assert "Reps objetivo: 5" in text
    assert "Sin historial previo" in text


def test_exercise_suggestion_prompt():
    text = prompts.exercise_suggestion_prompt(
        current_exercise_names=["Press de Banca", "Remo con Barra"],
        session_type="upper",
    )

    assert text.splitlines() == [
        "Sugiere ejercicios complementarios para esta sesión de entrenamiento.",
        "Ejercicios ya en la sesión: Press de Banca, Remo con Barra",
        "Tipo de sesión: upper",
        "Devuelve ejercicios que complementen los ya añadidos.",
    ]
    assert "La sesión está vacía" in prompts.exercise_suggestion_prompt(current_exercise_names=[])
