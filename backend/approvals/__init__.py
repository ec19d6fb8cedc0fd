from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import logging

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()


def error_body(status: int, title: str, detail: str):
    return {
        'error': {
            'status': status,
            'title': title,
            'detail': detail,
        }
    }


@jwt.unauthorized_loader
def _missing_token(reason: str):
    return error_body(401, 'Unauthorized', reason), 401


@jwt.invalid_token_loader
def _invalid_token(reason: str):
    return error_body(401, 'Unauthorized', reason), 401


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    return error_body(401, 'Unauthorized', 'Token has expired'), 401


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    from .config.settings import load_settings

    app = Flask(__name__)
    app.config.update(load_settings(config))
    # no-op if the root logger already has handlers
    logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    logging.getLogger(__name__).setLevel(app.config['LOG_LEVEL'])

    # Database
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        db_engine = create_engine(
            db_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_engine = create_engine(db_url, echo=False)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    jwt.init_app(app)
    CORS(app, resources={r"/*": {"origins": app.config['FRONTEND_URL']}}, supports_credentials=True)

    from .routes.auth import auth_bp
    from .routes.transactions import tx_bp
    prefix = app.config['API_PREFIX']
    app.register_blueprint(auth_bp, url_prefix=f'{prefix}/auth')
    app.register_blueprint(tx_bp, url_prefix=f'{prefix}/transactions')

    @app.teardown_appcontext
    def remove_session(exc):  # type: ignore
        if exc is not None:
            SessionLocal.rollback()
        SessionLocal.remove()

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            return error_body(e.code, e.name, e.description), e.code
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return error_body(500, 'Internal Server Error', 'Unexpected error'), 500

    from .openapi import build_openapi_spec, REDOC_PAGE

    @app.route('/openapi.json')
    def openapi_spec():
        return build_openapi_spec()

    @app.route('/docs')
    def docs_index():
        return REDOC_PAGE

    return app


def get_db():
    return SessionLocal()
