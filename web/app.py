"""Flask application factory for the booth API."""

from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify
from flask_wtf.csrf import CSRFError
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from core.exceptions import (
    InvalidTransitionError,
    SessionNotFoundError,
    SpinAlreadyStartedError,
    StoreUnavailableError,
    ValidationError,
)
from services.participant_ledger import ParticipantLedger
from services.rewards import RewardTable
from services.session_registry import SessionRegistry
from web.config_middleware import (
    configure_app,
    setup_extensions,
    setup_security_headers,
    setup_metrics,
)
from web.routes import register_routes


def create_app(
    config,
    testing: bool = False,
    reward_table: Optional[RewardTable] = None,
    sessions: Optional[SessionRegistry] = None,
    ledger: Optional[ParticipantLedger] = None,
) -> Flask:
    """Create and configure Flask application.
    
    Args:
        config: Application configuration
        testing: Whether running in testing mode
        reward_table: Wheel rewards, the default table when omitted
        sessions: Registry holding booth sessions
        ledger: Participant ledger, used for stats
        
    Returns:
        Configured Flask application
    """
    app = Flask(__name__)
    
    configure_app(app, config, testing)
    setup_extensions(app, testing)
    setup_security_headers(app)
    setup_metrics(app)
    
    app.config["REWARD_TABLE"] = reward_table or RewardTable()
    app.config["SESSION_REGISTRY"] = sessions
    app.config["PARTICIPANT_LEDGER"] = ledger
    
    register_routes(app)
    _setup_routes(app)
    _setup_error_handlers(app)
    
    return app


def _setup_routes(app: Flask) -> None:
    """Setup basic application routes.
    
    Args:
        app: Flask application instance
    """
    @app.route('/metrics')
    def metrics():
        """Expose Prometheus metrics."""
        data = generate_latest()
        return data, 200, {'Content-Type': CONTENT_TYPE_LATEST}


def _error(error: str, status: int, **extra):
    body = {"error": error}
    body.update(extra)
    return jsonify(body), status


def _setup_error_handlers(app: Flask) -> None:
    """Map application errors to JSON responses.
    
    Args:
        app: Flask application instance
    """
    @app.errorhandler(ValidationError)
    def validation_failed(error):
        return _error("validation_failed", 422, fields=error.errors)
    
    @app.errorhandler(SessionNotFoundError)
    def session_not_found(error):
        return _error("session_not_found", 404, message=str(error))
    
    @app.errorhandler(InvalidTransitionError)
    @app.errorhandler(SpinAlreadyStartedError)
    def out_of_order(error):
        return _error("invalid_step", 409, message=str(error))
    
    @app.errorhandler(StoreUnavailableError)
    def store_unavailable(error):
        app.logger.warning(f"Ledger store unavailable: {error}")
        return _error("store_unavailable", 503, message="Something went wrong. Please try again.", retry=True)
    
    @app.errorhandler(CSRFError)
    def csrf_failed(error):
        return _error("csrf_failed", 400, message=error.description)
    
    @app.errorhandler(404)
    def not_found(error):
        return _error("not_found", 404)
    
    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f"Internal server error: {error}")
        return _error("internal_error", 500)
