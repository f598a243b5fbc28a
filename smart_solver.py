"""
Smart Solver for SmartCalc
Sends word problems to Gemini and reads back a result and an explanation
"""
import json
import logging
from dataclasses import dataclass

from google import genai
from google.genai import types

import config

logger = logging.getLogger(__name__)


class SolverError(Exception):
    """The word problem could not be solved or the reply could not be read."""


@dataclass(frozen=True)
class Solution:
    result: str
    explanation: str

    def to_dict(self):
        return {'result': self.result, 'explanation': self.explanation}


SOLUTION_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        'result': types.Schema(
            type=types.Type.STRING,
            description="The final numerical result of the calculation.",
        ),
        'explanation': types.Schema(
            type=types.Type.STRING,
            description="Short step-by-step explanation.",
        ),
    },
    required=['result', 'explanation'],
)


def parse_solution(text):
    """Parse a model reply into a Solution, checking both fields are strings"""
    if not text:
        raise SolverError("Empty response from model")
    try:
        data = json.loads(text)
    except ValueError as e:
        raise SolverError(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SolverError("Response is not a JSON object")
    result = data.get('result')
    explanation = data.get('explanation')
    if not isinstance(result, str) or not isinstance(explanation, str):
        raise SolverError("Response must contain string 'result' and 'explanation' fields")
    if not result.strip():
        raise SolverError("Response 'result' is empty")
    return Solution(result=result, explanation=explanation)


class GeminiSolver:
    def __init__(self, client=None, api_key=None,
                 model=config.SOLVER_MODEL, explain_model=config.EXPLAIN_MODEL):
        self._client = client
        self.api_key = api_key
        self.model = model
        self.explain_model = explain_model

    @property
    def client(self):
        """Gemini client, created on first use so a missing key only fails a solve"""
        if self._client is None:
            api_key = self.api_key or config.get_api_key()
            if not api_key:
                raise SolverError("No Gemini API key configured (set GEMINI_API_KEY)")
            self._client = genai.Client(api_key=api_key)
        return self._client

    def solve_word_problem(self, prompt):
        """Solve a natural-language problem; raises SolverError on any failure"""
        logger.debug("Solving word problem with %s", self.model)
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=config.SOLVER_SYSTEM_INSTRUCTION,
                    response_mime_type="application/json",
                    response_schema=SOLUTION_SCHEMA,
                ),
            )
            return parse_solution(response.text)
        except SolverError:
            logger.exception("Gemini word problem failed")
            raise
        except Exception as e:
            logger.exception("Gemini word problem error")
            raise SolverError(str(e)) from e

    def explain_calculation(self, expression, result):
        """Step-by-step explanation of a finished calculation, or fallback text"""
        try:
            response = self.client.models.generate_content(
                model=self.explain_model,
                contents=config.EXPLAIN_PROMPT.format(expression=expression, result=result),
                config=types.GenerateContentConfig(
                    temperature=config.SOLVER_TEMPERATURE,
                    top_p=config.SOLVER_TOP_P,
                ),
            )
            return response.text or config.EXPLANATION_FALLBACK
        except Exception:
            logger.exception("Gemini explanation error")
            return config.EXPLANATION_FALLBACK
