"""
Flask REST API for the SmartCalc Web Portal
Exposes the calculator session as JSON endpoints
"""
import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

import config
from session_manager import CalculatorSession, SolveInProgressError
from smart_solver import SolverError

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes

# One shared session for the portal
session = CalculatorSession()


def _state_response(**extra):
    payload = {'success': True, 'data': session.snapshot()}
    payload.update(extra)
    return jsonify(payload)


def _error(e, status):
    return jsonify({'success': False, 'error': str(e)}), status


@app.route('/api')
def api_info():
    """API information page"""
    return f"""
    <html>
    <head><title>{config.APP_NAME} API</title></head>
    <body style="font-family: Arial; padding: 40px; background: #000000; color: white;">
        <h1>{config.APP_NAME} API Server</h1>
        <h2>Available Endpoints:</h2>
        <ul>
            <li><a href="/api/state" style="color: #FF9F0A;">GET /api/state</a> - Display and pending operation</li>
            <li>POST /api/digit - Press a digit or '.' (<code>{{"key": "7"}}</code>)</li>
            <li>POST /api/operation - Press an operator (<code>{{"op": "+"}}</code>)</li>
            <li>POST /api/equal - Finish the calculation</li>
            <li>POST /api/sign - Toggle the sign</li>
            <li>POST /api/clear - Clear all</li>
            <li>POST /api/mode - Toggle standard / smart mode</li>
            <li>POST /api/solve - Solve a word problem (<code>{{"prompt": "..."}}</code>)</li>
            <li>POST /api/explain - Explain the latest calculation</li>
            <li><a href="/api/history" style="color: #FF9F0A;">GET /api/history</a> - Calculation history</li>
            <li>DELETE /api/history - Clear calculation history</li>
        </ul>
    </body>
    </html>
    """


@app.route('/api/state')
def get_state():
    """Get the current session state"""
    try:
        return _state_response()
    except Exception as e:
        return _error(e, 500)


@app.route('/api/digit', methods=['POST'])
def press_digit():
    """Press a digit or decimal point"""
    try:
        data = request.get_json(silent=True) or {}
        session.press_digit(str(data.get('key', '')))
        return _state_response()
    except ValueError as e:
        return _error(e, 400)
    except Exception as e:
        return _error(e, 500)


@app.route('/api/operation', methods=['POST'])
def press_operation():
    """Press an operator key"""
    try:
        data = request.get_json(silent=True) or {}
        session.press_operation(str(data.get('op', '')))
        return _state_response()
    except ValueError as e:
        return _error(e, 400)
    except Exception as e:
        return _error(e, 500)


@app.route('/api/equal', methods=['POST'])
def press_equal():
    """Finish the pending calculation"""
    try:
        record = session.press_equal()
        return _state_response(record=record.to_dict() if record else None)
    except Exception as e:
        return _error(e, 500)


@app.route('/api/sign', methods=['POST'])
def toggle_sign():
    try:
        session.toggle_sign()
        return _state_response()
    except Exception as e:
        return _error(e, 500)


@app.route('/api/clear', methods=['POST'])
def clear_all():
    try:
        session.clear_all()
        return _state_response()
    except Exception as e:
        return _error(e, 500)


@app.route('/api/mode', methods=['POST'])
def toggle_mode():
    try:
        session.toggle_mode()
        return _state_response()
    except Exception as e:
        return _error(e, 500)


@app.route('/api/solve', methods=['POST'])
def solve():
    """Solve a word problem with the smart solver"""
    try:
        data = request.get_json(silent=True) or {}
        prompt = str(data.get('prompt', ''))
        if not prompt.strip():
            return _error("No prompt provided", 400)
        solution = session.solve(prompt)
        return _state_response(solution=solution.to_dict())
    except SolveInProgressError as e:
        return _error(e, 409)
    except SolverError as e:
        logger.warning("Solve failed: %s", e)
        return _error(config.SOLVE_FAILED_MESSAGE, 502)
    except Exception as e:
        return _error(e, 500)


@app.route('/api/explain', methods=['POST'])
def explain():
    """Explain the most recent calculation"""
    try:
        explanation = session.explain_last()
        if explanation is None:
            return _error("No calculation to explain", 404)
        return _state_response()
    except Exception as e:
        return _error(e, 500)


@app.route('/api/history', methods=['GET'])
def get_history():
    """Get calculation history"""
    try:
        limit = int(request.args.get('limit', config.MAX_HISTORY_ITEMS))
        if limit < 0:
            return _error("limit must not be negative", 400)
        records = session.history.list()[:limit]
        formatted = [record.to_dict() for record in records]
        return jsonify({
            'success': True,
            'data': formatted,
            'count': len(formatted)
        })
    except ValueError as e:
        return _error(e, 400)
    except Exception as e:
        return _error(e, 500)


@app.route('/api/history', methods=['DELETE'])
def clear_history():
    """Clear calculation history"""
    try:
        session.clear_history()
        return jsonify({'success': True, 'count': 0})
    except Exception as e:
        return _error(e, 500)


if __name__ == '__main__':
    logging.basicConfig(level=config.LOG_LEVEL)
    print("\n" + "="*60)
    print(f"{config.APP_NAME} Web Portal API Server")
    print("="*60)
    print(f"Server starting on http://{config.WEB_HOST}:{config.WEB_PORT}")
    print(f"Access from this device: http://localhost:{config.WEB_PORT}/api")
    if config.WEB_HOST == '0.0.0.0':
        print(f"Access from network: http://<your-ip>:{config.WEB_PORT}/api")
    print("="*60 + "\n")

    app.run(host=config.WEB_HOST, port=config.WEB_PORT, debug=False)
