from flask import Blueprint, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from approvals.services import auth as auth_service
from approvals.utils.validation import validate_credentials, MIN_PASSWORD_LENGTH

auth_bp = Blueprint('auth', __name__)


@auth_bp.post('/login')
def login():
    email, password = validate_credentials(request.get_json(silent=True))
    return auth_service.login(email, password)


@auth_bp.post('/register')
def register():
    email, password = validate_credentials(request.get_json(silent=True), min_password_length=MIN_PASSWORD_LENGTH)
    return auth_service.register(email, password), 201


@auth_bp.get('/me')
@jwt_required()
def me():
    # Identity stored as string, cast back to int for DB lookup
    return auth_service.profile(int(get_jwt_identity()))
