from flask import Blueprint, request, jsonify, current_app
from werkzeug.exceptions import HTTPException
from datetime import datetime, timezone
import time

from pwapi.errors import ValidationError
from pwapi.password_utils import (
    generate_password, generate_batch, analyze_password_strength,
    validate_generate_options, validate_batch_count
)

main = Blueprint('main', __name__)


def _json_body():
    """Parsed JSON object from the request; an absent body counts as {}."""
    data = request.get_json(silent=True)
    if data is None:
        if request.get_data():
            raise ValidationError('Request body must be valid JSON')
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


# ── API description ───────────────────────────────────────────────────────────
@main.route('/')
def index():
    return jsonify({
        'name':        'Password API',
        'version':     current_app.config['VERSION'],
        'description': 'Secure password generation and strength analysis API',
        'endpoints': {
            'GET /health':    'Health check',
            'POST /generate': 'Generate a single password',
            'POST /batch':    'Generate multiple passwords',
            'POST /strength': 'Analyze password strength',
        },
    })


# ── Health ────────────────────────────────────────────────────────────────────
@main.route('/health')
def health():
    return jsonify({
        'status':    'healthy',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'version':   current_app.config['VERSION'],
        'uptime':    round(time.monotonic() - current_app.config['STARTED_AT'], 3),
    })


# ── Generate Password API ─────────────────────────────────────────────────────
@main.route('/generate', methods=['POST'])
def generate_password_api():
    options = validate_generate_options(_json_body())
    pwd     = generate_password(**options.to_dict())
    return jsonify({'success': True, 'password': pwd, 'options': options.to_dict()})


# ── Batch API ─────────────────────────────────────────────────────────────────
@main.route('/batch', methods=['POST'])
def generate_batch_api():
    data    = dict(_json_body())
    count   = validate_batch_count(data.pop('count', current_app.config['DEFAULT_BATCH_COUNT']))
    options = validate_generate_options(data)
    pwds    = generate_batch(count, **options.to_dict())
    return jsonify({
        'success':   True,
        'count':     len(pwds),
        'passwords': pwds,
        'options':   options.to_dict(),
    })


# ── Password Strength API ─────────────────────────────────────────────────────
@main.route('/strength', methods=['POST'])
def password_strength():
    password = _json_body().get('password')
    if not password or not isinstance(password, str):
        raise ValidationError('Password is required')

    max_len = current_app.config['MAX_ANALYZE_LENGTH']
    if len(password) > max_len:
        raise ValidationError(f'Password too long (max {max_len} characters)')

    result = analyze_password_strength(password)
    return jsonify({'success': True, **result.to_dict()})


# ── Error handlers ────────────────────────────────────────────────────────────
def register_error_handlers(app):

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({'success': False, 'error': str(e)}), 400

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({'success': False, 'error': 'Not found'}), 404

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'success': False, 'error': e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        # includes EntropySourceFailure
        current_app.logger.exception(f"Unhandled error on {request.method} {request.path}: {e}")
        return jsonify({'success': False, 'error': 'Internal server error'}), 500
