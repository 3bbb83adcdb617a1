from flask import jsonify
from werkzeug.exceptions import HTTPException
from pagecms.domain.invariants.exceptions import InvariantViolation


class PersistenceError(Exception):
    """Raised when the page store cannot be reached or rejects a save."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


def register_error_handlers(app):
    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        response = jsonify({
            "success": False,
            "error": "InvariantViolation",
            "message": str(error)
        })
        response.status_code = 400
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({
            "success": False,
            "error": error.description or error.name
        })
        response.status_code = error.code
        return response
