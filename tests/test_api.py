"""
Tests for the Flask web portal API.
"""

import pytest

import config
from smart_solver import SolverError


def post(client, path, **payload):
    return client.post(path, json=payload)


class TestKeypadEndpoints:

    def test_state(self, api_client):
        response = api_client.get('/api/state')
        assert response.status_code == 200
        body = response.get_json()
        assert body['success'] is True
        assert body['data']['display'] == "0"
        assert body['data']['clear_label'] == "AC"

    def test_calculation_round(self, api_client):
        for key in "12":
            post(api_client, '/api/digit', key=key)
        post(api_client, '/api/operation', op="+")
        for key in "30":
            post(api_client, '/api/digit', key=key)

        response = api_client.post('/api/equal')
        body = response.get_json()
        assert body['data']['display'] == "42"
        assert body['record']['expression'] == "12 + 30"
        assert body['record']['result'] == "42"

    def test_equal_without_pending(self, api_client):
        body = api_client.post('/api/equal').get_json()
        assert body['success'] is True
        assert body['record'] is None

    def test_bad_digit(self, api_client):
        response = post(api_client, '/api/digit', key="x")
        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_bad_operation(self, api_client):
        response = post(api_client, '/api/operation', op="^")
        assert response.status_code == 400

    def test_sign_and_clear(self, api_client):
        post(api_client, '/api/digit', key="9")
        assert api_client.post('/api/sign').get_json()['data']['display'] == "-9"
        assert api_client.post('/api/clear').get_json()['data']['display'] == "0"

    def test_mode_toggle(self, api_client):
        body = api_client.post('/api/mode').get_json()
        assert body['data']['mode'] == "SMART"


class TestSolveEndpoints:

    def test_solve(self, api_client):
        response = post(api_client, '/api/solve', prompt="six sevens")
        body = response.get_json()
        assert response.status_code == 200
        assert body['solution'] == {'result': "42", 'explanation': "6 times 7."}
        assert body['data']['display'] == "42"

    def test_solve_requires_prompt(self, api_client):
        response = post(api_client, '/api/solve', prompt="   ")
        assert response.status_code == 400

    def test_solve_failure(self, api_client, session, fake_solver):
        fake_solver.error = SolverError("bad key")
        post(api_client, '/api/digit', key="5")

        response = post(api_client, '/api/solve', prompt="anything")

        assert response.status_code == 502
        assert response.get_json()['error'] == config.SOLVE_FAILED_MESSAGE
        assert session.display == "5"
        assert len(session.history) == 0

    def test_solve_while_busy(self, api_client, session):
        session.start_solve("outstanding")
        response = post(api_client, '/api/solve', prompt="another")
        assert response.status_code == 409

    def test_explain(self, api_client):
        for key in "2+2=":
            if key.isdigit():
                post(api_client, '/api/digit', key=key)
            elif key == "=":
                api_client.post('/api/equal')
            else:
                post(api_client, '/api/operation', op=key)
        body = api_client.post('/api/explain').get_json()
        assert body['data']['explanation'] == "Add the numbers."

    def test_explain_without_history(self, api_client):
        assert api_client.post('/api/explain').status_code == 404


class TestHistoryEndpoints:

    @pytest.fixture
    def filled(self, api_client, session):
        for _ in range(3):
            session.press_digit("1")
            session.press_operation("+")
            session.press_digit("1")
            session.press_equal()
        return api_client

    def test_history(self, filled):
        body = filled.get('/api/history').get_json()
        assert body['count'] == 3
        assert body['data'][0]['expression'] == "1 + 1"
        assert body['data'][0]['explanation'] is None

    def test_history_limit(self, filled):
        body = filled.get('/api/history?limit=2').get_json()
        assert body['count'] == 2

    def test_history_bad_limit(self, filled):
        assert filled.get('/api/history?limit=abc').status_code == 400

    def test_history_negative_limit(self, filled):
        response = filled.get('/api/history?limit=-1')
        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_clear_history(self, filled, session):
        response = filled.delete('/api/history')
        assert response.get_json() == {'success': True, 'count': 0}
        assert len(session.history) == 0


def test_api_index(api_client):
    response = api_client.get('/api')
    assert response.status_code == 200
    assert b"/api/solve" in response.data
