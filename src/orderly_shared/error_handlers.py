"""
Centralized error handlers for Flask applications.
"""

from http import HTTPStatus

from flask import Flask, jsonify
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from orderly_shared.errors import BackendError, NotFoundError
from orderly_shared.logging_config import get_logger
from orderly_shared.serializers import error_response
from orderly_shared.services.order_state_machine import InvalidTransitionError
from orderly_shared.validation import ValidationError

logger = get_logger(__name__)


def register_error_handlers(app: Flask) -> None:
    """
    Register centralized error handlers for the Flask app.

    Every error leaves as the JSON envelope built by ``error_response``.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        """Handle custom validation errors."""
        logger.warning(f"Validation error: {e}")
        return jsonify(error_response(str(e))), HTTPStatus.BAD_REQUEST

    @app.errorhandler(PydanticValidationError)
    def handle_pydantic_validation_error(e: PydanticValidationError):
        """Handle Pydantic validation errors."""
        logger.warning(f"Pydantic validation error: {e}")
        details = e.errors(include_url=False, include_context=False)
        return jsonify(
            error_response("Invalid data", {"details": details})
        ), HTTPStatus.BAD_REQUEST

    @app.errorhandler(NotFoundError)
    def handle_not_found_error(e: NotFoundError):
        logger.info(f"Not found: {e}")
        return jsonify(error_response(str(e))), HTTPStatus.NOT_FOUND

    @app.errorhandler(InvalidTransitionError)
    def handle_invalid_transition(e: InvalidTransitionError):
        logger.warning(f"Rejected status change: {e}")
        details = {
            "current_status": e.current_status.value if e.current_status else None,
            "target_status": e.target_status.value if e.target_status else None,
        }
        return jsonify(error_response(str(e), details)), HTTPStatus.CONFLICT

    @app.errorhandler(BackendError)
    def handle_backend_error(e: BackendError):
        logger.error(f"Backend error: {e}")
        return jsonify(error_response(str(e))), HTTPStatus.SERVICE_UNAVAILABLE

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e: SQLAlchemyError):
        """Handle database errors."""
        logger.error(f"Database error: {e}", exc_info=True)
        return jsonify(error_response("Database error")), HTTPStatus.SERVICE_UNAVAILABLE

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        """Handle HTTP exceptions from Werkzeug."""
        logger.warning(f"HTTP exception {e.code}: {e.description}")
        return jsonify(error_response(e.description or str(e))), e.code

    @app.errorhandler(Exception)
    def handle_generic_exception(e: Exception):
        """Handle any unhandled exceptions."""
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        return jsonify(error_response("Internal server error")), HTTPStatus.INTERNAL_SERVER_ERROR
