import pytest
from approvals.errors import ValidationError
from approvals.services.transactions import TX_FSM
from approvals.utils.fsm import TransitionValidator


def test_transition_validator_allows_valid():
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    assert fsm.assert_can_transition('A', 'B') is True


def test_transition_validator_blocks_invalid():
    fsm = TransitionValidator({'A': {'B'}, 'B': set()})
    with pytest.raises(ValidationError) as exc:
        fsm.assert_can_transition('A', 'C')
    assert exc.value.description == 'Invalid status transition A -> C'


def test_unknown_current_state_has_no_transitions():
    fsm = TransitionValidator({'A': {'B'}})
    assert not fsm.can_transition('Z', 'A')


def test_transaction_lifecycle_graph():
    assert TX_FSM.states() == ['pending', 'approved']
    assert TX_FSM.transitions() == {'pending': ['approved'], 'approved': []}
    assert TX_FSM.can_transition('pending', 'approved')
    assert not TX_FSM.can_transition('approved', 'approved')
    assert not TX_FSM.can_transition('approved', 'pending')


def test_openapi_exposes_transitions(client):
    body = client.get('/openapi.json').get_json()
    assert body['components']['schemas']['Transaction']['x-transitions'] == {'pending': ['approved'], 'approved': []}
