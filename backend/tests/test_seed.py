import importlib.util
import json
import pathlib
import pytest
from approvals import get_db
from approvals.constants.permissions import ROLE_PRESETS, DEMO_USERS, APPROVE_TRANSACTIONS, VIEW_TRANSACTIONS
from approvals.models.authz import Permission, Role, User
from approvals.services.seed import seed_all, build_role_permission_map, ensure_roles
from tests.test_utils_seed import count_rows

SCRIPT = pathlib.Path(__file__).resolve().parents[1] / 'scripts' / 'seed_authz.py'


@pytest.fixture()
def seed_script(app_instance, monkeypatch):
    spec = importlib.util.spec_from_file_location('seed_authz', SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    # reuse the test app/database instead of building one from the environment
    monkeypatch.setattr(module, 'create_app', lambda: app_instance)
    return module


def test_seed_all_creates_presets_and_demo_users():
    session = get_db()
    counts = seed_all(session, user_password='password123')
    session.commit()
    assert counts == {'permissions': 3, 'roles': 3, 'users': 3}
    assert build_role_permission_map(session) == {name: sorted(codes) for name, codes in ROLE_PRESETS.items()}
    assert {u.email for u in session.query(User)} == set(DEMO_USERS)


def test_seed_all_is_idempotent():
    session = get_db()
    seed_all(session, user_password='password123'); session.commit()
    again = seed_all(session, user_password='password123'); session.commit()
    assert again == {'permissions': 0, 'roles': 0, 'users': 0}
    assert count_rows(Permission) == 3
    assert count_rows(Role) == 3


def test_ensure_roles_adds_missing_grant_without_removing():
    session = get_db()
    ensure_roles(session, {'Approver': [VIEW_TRANSACTIONS]}); session.commit()
    ensure_roles(session, {'Approver': [APPROVE_TRANSACTIONS]}); session.commit()
    assert build_role_permission_map(session)['Approver'] == sorted([VIEW_TRANSACTIONS, APPROVE_TRANSACTIONS])


def test_seeded_approver_can_log_in(client):
    session = get_db()
    seed_all(session, user_password='password123'); session.commit()
    resp = client.post('/auth/login', json={'email': 'approver@example.com', 'password': 'password123'})
    assert resp.status_code == 200
    assert resp.get_json()['user']['permissions'] == sorted(ROLE_PRESETS['Approver'])


def test_script_dry_run_rolls_back(seed_script, capsys):
    seed_script.main(['--dry-run'])
    out = capsys.readouterr().out
    assert '[DRY-RUN]' in out
    assert count_rows(Role) == 0


def test_script_seeds_and_exports(seed_script, capsys, tmp_path):
    target = tmp_path / 'roles.json'
    seed_script.main(['--no-users', '--export-json', str(target)])
    out = capsys.readouterr().out
    assert '[DONE]' in out
    assert count_rows(User) == 0
    exported = json.loads(target.read_text())
    assert set(exported['roles']) == set(ROLE_PRESETS)
