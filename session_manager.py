"""
Session Manager for SmartCalc
Owns the calculator, history and smart-mode state for one user session
"""
import logging
import threading
from datetime import datetime
from enum import Enum

from calculator import Calculator, Operation
from history_manager import HistoryManager, HistoryRecord
from smart_solver import GeminiSolver, SolverError

logger = logging.getLogger(__name__)


class CalculatorMode(Enum):
    STANDARD = "STANDARD"
    SMART = "SMART"


class SolveInProgressError(Exception):
    """A word problem was submitted while another one is still being solved."""


class SolveRequest:
    """One outstanding word-problem solve.

    ``run()`` only talks to the solver and stores the outcome, so it can be
    called from a worker thread; the session applies the outcome in
    ``finish_solve()``.
    """

    def __init__(self, solver, prompt):
        self.solver = solver
        self.prompt = prompt
        self.solution = None
        self.error = None
        self.done = False

    def run(self):
        try:
            solution = self.solver.solve_word_problem(self.prompt)
            if not solution.result.strip():
                raise SolverError("Solver returned an empty result")
            self.solution = solution
        except SolverError as e:
            self.error = e
        except Exception as e:
            self.error = SolverError(str(e))
            self.error.__cause__ = e
        finally:
            self.done = True
        return self


class ExplainRequest:
    """Explanation lookup for one history record; safe to run off the UI thread."""

    def __init__(self, solver, record):
        self.solver = solver
        self.record = record
        self.explanation = record.explanation
        self.done = bool(record.explanation)

    def run(self):
        if not self.done:
            try:
                self.explanation = self.solver.explain_calculation(
                    self.record.expression, self.record.result)
            finally:
                self.done = True
        return self


class CalculatorSession:
    def __init__(self, solver=None, history=None):
        self.calculator = Calculator()
        self.history = history if history is not None else HistoryManager()
        self.solver = solver if solver is not None else GeminiSolver()
        self.mode = CalculatorMode.STANDARD
        self.show_history = False
        self.explanation = None
        self._active_request = None
        # The web portal serves requests on several threads against one session
        self._lock = threading.RLock()

    # ── Keypad ────────────────────────────────────────────────────────────
    @property
    def display(self):
        return self.calculator.display

    def press_digit(self, token):
        with self._lock:
            return self.calculator.press_digit(token)

    def press_operation(self, op):
        if not isinstance(op, Operation):
            op = Operation.from_symbol(op)
        with self._lock:
            return self.calculator.press_operation(op)

    def press_equal(self):
        """Finish the pending calculation and log it; None if nothing was pending"""
        with self._lock:
            record = self.calculator.press_equal()
            if record is not None:
                self.history.append(record)
                logger.debug("Calculated %s = %s", record.expression, record.result)
            return record

    def toggle_sign(self):
        with self._lock:
            return self.calculator.toggle_sign()

    def clear_all(self):
        with self._lock:
            self.explanation = None
            return self.calculator.clear_all()

    # ── Mode / panels ─────────────────────────────────────────────────────
    def toggle_mode(self):
        """Switch between standard and smart mode, starting from a clean display.

        Ignored while a word problem is being solved, so the answer always
        lands in the mode it was asked from.
        """
        with self._lock:
            if self.is_solving:
                logger.debug("Mode toggle ignored while solving")
                return self.mode
            if self.mode is CalculatorMode.STANDARD:
                self.mode = CalculatorMode.SMART
            else:
                self.mode = CalculatorMode.STANDARD
            self.clear_all()
            return self.mode

    def toggle_history_panel(self):
        with self._lock:
            self.show_history = not self.show_history
            return self.show_history

    def clear_history(self):
        with self._lock:
            self.history.clear()

    # ── Smart mode ────────────────────────────────────────────────────────
    @property
    def is_solving(self):
        return self._active_request is not None

    def start_solve(self, prompt):
        """Claim the solve slot for ``prompt``.

        Returns None for a blank prompt and raises SolveInProgressError when a
        request is already outstanding.
        """
        prompt = (prompt or "").strip()
        if not prompt:
            return None
        with self._lock:
            if self._active_request is not None:
                raise SolveInProgressError("A word problem is already being solved")
            self._active_request = SolveRequest(self.solver, prompt)
            logger.info("Solving word problem (%d chars)", len(prompt))
            return self._active_request

    def finish_solve(self, request):
        """Apply a finished request: update display and history, or raise its SolverError"""
        with self._lock:
            if request is not self._active_request:
                raise ValueError("Request does not belong to this session")
            self._active_request = None

            if request.error is not None:
                raise request.error
            if not request.done:
                raise SolverError("Solve request finished without running")

            solution = request.solution
            self.calculator.clear_all()
            self.calculator.state.display = solution.result
            self.explanation = solution.explanation
            self.history.append(HistoryRecord(
                expression=request.prompt,
                result=solution.result,
                created_at=datetime.now(),
                explanation=solution.explanation,
            ))
            return solution

    def solve(self, prompt):
        """Solve on the calling thread; None for a blank prompt"""
        request = self.start_solve(prompt)
        if request is None:
            return None
        request.run()
        return self.finish_solve(request)

    def start_explain(self):
        """ExplainRequest for the most recent calculation, or None with no history"""
        with self._lock:
            records = self.history.list()
        if not records:
            return None
        return ExplainRequest(self.solver, records[0])

    def finish_explain(self, request):
        with self._lock:
            self.explanation = request.explanation
            return self.explanation

    def explain_last(self):
        """Ask for a step-by-step explanation of the most recent calculation"""
        request = self.start_explain()
        if request is None:
            return None
        request.run()
        return self.finish_explain(request)

    def snapshot(self):
        with self._lock:
            state = self.calculator.state.to_dict()
            state.update({
                'mode': self.mode.value,
                'show_history': self.show_history,
                'explanation': self.explanation,
                'is_solving': self.is_solving,
                'history_count': len(self.history),
            })
            return state
