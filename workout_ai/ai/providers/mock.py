"""Deterministic offline provider for development and tests."""

from __future__ import annotations

import asyncio
import json
import logging
import math
from typing import Any, Dict, List

from workout_ai.ai.types import AIRequest, AIResponse, RequestType, TokenUsage


logger = logging.getLogger("workout_ai.ai.mock")


EXERCISE_POOL: List[Dict[str, str]] = [
    {"name": "Press de Banca", "muscleGroup": "chest", "category": "strength", "reasoning": "Ejercicio fundamental para pecho"},
    {"name": "Sentadilla", "muscleGroup": "quads", "category": "strength", "reasoning": "Base del entrenamiento de piernas"},
    {"name": "Peso Muerto", "muscleGroup": "back", "category": "strength", "reasoning": "Ejercicio compuesto para espalda y piernas"},
    {"name": "Press Militar", "muscleGroup": "shoulders", "category": "strength", "reasoning": "Desarrollo de hombros"},
    {"name": "Remo con Barra", "muscleGroup": "back", "category": "hypertrophy", "reasoning": "Espalda y dorsales"},
    {"name": "Dominadas", "muscleGroup": "back", "category": "strength", "reasoning": "Ejercicio de tracción fundamental"},
    {"name": "Curl de Bíceps", "muscleGroup": "biceps", "category": "hypertrophy", "reasoning": "Aislamiento de bíceps"},
    {"name": "Extensión de Tríceps", "muscleGroup": "triceps", "category": "hypertrophy", "reasoning": "Aislamiento de tríceps"},
    {"name": "Prensa de Piernas", "muscleGroup": "quads", "category": "hypertrophy", "reasoning": "Volumen para cuádriceps"},
    {"name": "Elevaciones Laterales", "muscleGroup": "shoulders", "category": "hypertrophy", "reasoning": "Aislamiento de deltoides laterales"},
    {"name": "Zancadas", "muscleGroup": "glutes", "category": "strength", "reasoning": "Unilateral para glúteos y piernas"},
    {"name": "Hip Thrust", "muscleGroup": "glutes", "category": "hypertrophy", "reasoning": "Mejor ejercicio para glúteos"},
    {"name": "Plancha", "muscleGroup": "core", "category": "endurance", "reasoning": "Estabilidad de core"},
    {"name": "Aperturas con Mancuernas", "muscleGroup": "chest", "category": "hypertrophy", "reasoning": "Aislamiento de pecho"},
]

MUSCLE_KEYWORDS: Dict[str, List[str]] = {
    "pecho": ["chest"],
    "espalda": ["back"],
    "pierna": ["quads", "hamstrings", "glutes", "calves"],
    "hombro": ["shoulders"],
    "brazo": ["biceps", "triceps"],
    "core": ["core"],
    "glúteo": ["glutes"],
}

UPPER_EXERCISES = [
    {"name": "Press de Banca", "sets": 4, "reps": 8, "restSeconds": 120, "notes": "Controlar la bajada"},
    {"name": "Remo con Barra", "sets": 4, "reps": 10, "restSeconds": 90},
    {"name": "Press Militar", "sets": 3, "reps": 10, "restSeconds": 90},
]

LOWER_EXERCISES = [
    {"name": "Sentadilla", "sets": 4, "reps": 8, "restSeconds": 150, "notes": "Profundidad completa"},
    {"name": "Peso Muerto Rumano", "sets": 3, "reps": 10, "restSeconds": 120},
    {"name": "Prensa de Piernas", "sets": 3, "reps": 12, "restSeconds": 90},
]

DEFAULT_EXERCISES = [
    {"name": "Sentadilla", "sets": 3, "reps": 10, "restSeconds": 90},
    {"name": "Press de Banca", "sets": 3, "reps": 10, "restSeconds": 90},
    {"name": "Remo con Barra", "sets": 3, "reps": 10, "restSeconds": 90},
    {"name": "Press Militar", "sets": 3, "reps": 10, "restSeconds": 60},
]


def _has_any(text: str, *keywords: str) -> bool:
    return any(keyword in text for keyword in keywords)


def _round_to_plate(weight: float) -> float:
    return math.floor(weight / 2.5 + 0.5) * 2.5


class MockProvider:
    name = "mock"

    def __init__(self, latency_ms: int = 800) -> None:
        self.latency_ms = latency_ms

    @property
    def is_available(self) -> bool:
        return True

    async def initialize(self, config: Any = None) -> None:
        logger.info("MockProvider initialized")

    async def _simulate_latency(self, ms: int) -> None:
        if ms > 0:
            await asyncio.sleep(ms / 1000.0)

    async def complete(self, request: AIRequest) -> AIResponse[Any]:
        await self._simulate_latency(self.latency_ms)

        try:
            request_type = RequestType(request.type)
        except ValueError:
            return AIResponse.fail(f"Unknown request type: {request.type}", "unknown")

        if request_type == RequestType.GENERATION:
            data: Any = self.generate_template(request)
        elif request_type == RequestType.PREDICTION:
            data = self.predict_load(request)
        elif request_type == RequestType.SUGGESTION:
            data = self.suggest_exercises(request)
        else:
            data = {"summary": "Mock analysis result", "insights": []}

        usage = TokenUsage(
            prompt_tokens=len(request.prompt) // 4,
            completion_tokens=len(json.dumps(data, ensure_ascii=False)) // 4,
        )
        return AIResponse.ok(data, usage=usage)

    async def test_connection(self) -> bool:
        await self._simulate_latency(min(self.latency_ms, 200))
        return True

    def generate_template(self, request: AIRequest) -> Dict[str, Any]:
        prompt = request.prompt.lower()
        is_upper = _has_any(prompt, "upper", "pecho", "espalda", "brazos")
        is_lower = _has_any(prompt, "lower", "pierna", "glúteo")
        is_full = _has_any(prompt, "full", "completo", "cuerpo")
        is_strength = _has_any(prompt, "fuerza", "strength")
        is_hypertrophy = _has_any(prompt, "hipertrofia", "volumen")

        exercises: List[Dict[str, Any]] = []
        if is_upper or is_full:
            exercises.extend(dict(e) for e in UPPER_EXERCISES)
        if is_lower or is_full:
            exercises.extend(dict(e) for e in LOWER_EXERCISES)
        if not exercises:
            exercises = [dict(e) for e in DEFAULT_EXERCISES]

        if is_strength:
            exercises = [
                {**e, "sets": e["sets"] + 1, "reps": max(5, e["reps"] - 3), "restSeconds": e["restSeconds"] + 30}
                for e in exercises
            ]
        elif is_hypertrophy:
            exercises = [
                {**e, "reps": e["reps"] + 2, "restSeconds": max(60, e["restSeconds"] - 30)}
                for e in exercises
            ]

        return {
            "name": self._template_name(request.prompt),
            "description": self._description(is_upper, is_lower, is_full, is_strength, is_hypertrophy),
            "exercises": exercises,
            "difficulty": "advanced" if is_strength else "intermediate",
            "estimatedDuration": len(exercises) * 10 + 15,
            "tags": self._tags(prompt),
        }

    def predict_load(self, request: AIRequest) -> Dict[str, Any]:
        context = request.context or {}
        previous_weight = context.get("previousWeight") or 0
        previous_reps = context.get("previousReps") or 0
        target_reps = context.get("targetReps") or 10

        suggested = float(previous_weight)
        trend = "stable"
        if previous_reps >= target_reps + 2:
            suggested = previous_weight * 1.025
            trend = "increasing"
        elif previous_reps < target_reps - 2:
            suggested = previous_weight * 0.95
            trend = "decreasing"

        if previous_weight > 0:
            reasoning = f"Basado en {previous_weight}kg x {previous_reps} reps anteriores"
        else:
            reasoning = "Sin datos previos, sugerencia inicial"

        return {
            "suggestedWeight": max(0.0, _round_to_plate(suggested)),
            "suggestedReps": target_reps,
            "confidence": 0.75 if previous_weight > 0 else 0.3,
            "reasoning": reasoning,
            "basedOn": {
                "previousSets": context.get("previousSets") or 0,
                "trend": trend,
            },
        }

    def suggest_exercises(self, request: AIRequest) -> List[Dict[str, str]]:
        context = request.context or {}
        current = [name.lower() for name in context.get("currentExercises") or []]
        prompt = request.prompt.lower()

        available = [
            exercise
            for exercise in EXERCISE_POOL
            if not any(c in exercise["name"].lower() or exercise["name"].lower() in c for c in current)
        ]

        for keyword, groups in MUSCLE_KEYWORDS.items():
            if keyword in prompt:
                prioritized = [e for e in available if e["muscleGroup"] in groups]
                if prioritized:
                    available = prioritized + [e for e in available if e["muscleGroup"] not in groups]

        return [dict(e) for e in available[: min(5, max(3, len(available)))]]

    @staticmethod
    def _template_name(prompt: str) -> str:
        words = prompt.split(" ")[:4]
        return " ".join(word[:1].upper() + word[1:].lower() for word in words)

    @staticmethod
    def _tags(prompt: str) -> List[str]:
        tags = []
        if _has_any(prompt, "fuerza", "strength"):
            tags.append("fuerza")
        if _has_any(prompt, "hipertrofia", "volumen"):
            tags.append("hipertrofia")
        if _has_any(prompt, "upper", "pecho"):
            tags.append("upper-body")
        if _has_any(prompt, "lower", "pierna"):
            tags.append("lower-body")
        if _has_any(prompt, "full", "completo"):
            tags.append("full-body")
        return tags or ["general"]

    @staticmethod
    def _description(is_upper: bool, is_lower: bool, is_full: bool, is_strength: bool, is_hypertrophy: bool) -> str:
        body_part = "cuerpo completo"
        if is_upper and not is_lower and not is_full:
            body_part = "tren superior"
        elif is_lower and not is_upper and not is_full:
            body_part = "tren inferior"

        goal = "equilibrado"
        if is_strength:
            goal = "fuerza"
        elif is_hypertrophy:
            goal = "hipertrofia"

        if is_strength or is_hypertrophy:
            return (
                f"Rutina de {goal} enfocada en {body_part}. "
                "Diseñada para maximizar el rendimiento con ejercicios compuestos y accesorios."
            )
        return f"Entrenamiento {goal} para {body_part}. Incluye ejercicios variados para un desarrollo muscular completo."
