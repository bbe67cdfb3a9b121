from flask import Flask, request, current_app
from flask_cors import CORS
import logging
import time

cors = CORS()


def cors_origins(value):
    """'*' or a list of origins from the comma separated CORS_ORIGINS setting."""
    origins = [o.strip() for o in value.split(',') if o.strip()]
    return '*' if not origins or '*' in origins else origins


def log_request():
    current_app.logger.info('%s %s', request.method, request.path)


def add_security_headers(response):
    response.headers.setdefault('X-Content-Type-Options', 'nosniff')
    response.headers.setdefault('X-Frame-Options', 'DENY')
    response.headers.setdefault('Referrer-Policy', 'no-referrer')
    response.headers.setdefault('Cache-Control', 'no-store')

    # Allowed and rejected origins get different CORS headers
    if cors_origins(current_app.config.get('CORS_ORIGINS', '*')) != '*':
        response.vary.add('Origin')
    return response


def create_app(config_object='config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.config['STARTED_AT'] = time.monotonic()
    app.json.sort_keys = app.config.get('JSON_SORT_KEYS', False)

    app.logger.setLevel(getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO))

    # Initialize extensions
    origins = cors_origins(app.config.get('CORS_ORIGINS', '*'))
    cors.init_app(app,
                  origins=origins,
                  send_wildcard=origins == '*',
                  methods=['GET', 'POST', 'OPTIONS'],
                  allow_headers=['Content-Type'])

    app.before_request(log_request)
    app.after_request(add_security_headers)

    # Register blueprints
    from .routes import main as main_blueprint, register_error_handlers
    app.register_blueprint(main_blueprint)
    register_error_handlers(app)

    return app
