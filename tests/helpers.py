"""Test doubles and key-driving helpers shared by the test modules."""

from types import SimpleNamespace

from smart_solver import Solution


class FakeSolver:
    """Solver double that records prompts and replays a canned outcome."""

    def __init__(self, solution=None, error=None, explanation="Add the numbers."):
        self.solution = solution or Solution(result="42", explanation="6 times 7.")
        self.error = error
        self.explanation = explanation
        self.prompts = []
        self.explained = []

    def solve_word_problem(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.solution

    def explain_calculation(self, expression, result):
        self.explained.append((expression, result))
        return self.explanation


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, model, contents, config=None):
        self.calls.append({'model': model, 'contents': contents, 'config': config})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeGenaiClient:
    """Stands in for google.genai.Client; only ``models.generate_content`` is used."""

    def __init__(self, text=None, error=None):
        self.models = FakeModels(text=text, error=error)


def press(target, keys):
    """Drive a Calculator or CalculatorSession with a key string like '12+3='."""
    from calculator import Operation
    for key in keys:
        if key in "0123456789.":
            target.press_digit(key)
        elif key == "=":
            target.press_equal()
        else:
            target.press_operation(Operation.from_symbol(key))
    return target.display
