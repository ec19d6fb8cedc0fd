"""Central definitions of permission names and role presets to avoid typos in route guards.
Permission names are flat capability tokens; never rename one silently, add a new name and migrate.
"""
from __future__ import annotations
from typing import List, Dict

VIEW_TRANSACTIONS = 'can_view_transactions'
INPUT_TRANSACTIONS = 'can_input_transactions'
APPROVE_TRANSACTIONS = 'can_approve_transactions'

ALL_PERMISSIONS: List[str] = [VIEW_TRANSACTIONS, INPUT_TRANSACTIONS, APPROVE_TRANSACTIONS]

ROLE_PRESETS: Dict[str, List[str]] = {
    'Auditor': [VIEW_TRANSACTIONS],
    'Inputter': [VIEW_TRANSACTIONS, INPUT_TRANSACTIONS],
    'Approver': [VIEW_TRANSACTIONS, APPROVE_TRANSACTIONS],
}

# Demo accounts created by the seed script, one per preset role
DEMO_USERS: Dict[str, str] = {
    'auditor@example.com': 'Auditor',
    'inputter@example.com': 'Inputter',
    'approver@example.com': 'Approver',
}
