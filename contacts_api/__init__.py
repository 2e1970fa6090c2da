from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()


def create_app(config_name=None):
    app = Flask(__name__)

    # Config
    from contacts_api.config import config_by_name
    config_name = config_name or os.getenv('FLASK_ENV', 'development')
    config_class = config_by_name.get(config_name, config_by_name['development'])
    config_class.validate()
    app.config.from_object(config_class)

    logging.basicConfig(level=app.config['LOG_LEVEL'])
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    CORS(app, origins=app.config['CORS_ORIGINS'], supports_credentials=True)

    # Session signing and phone verification are built once per app
    from contacts_api.services.session import init_session_issuer
    from contacts_api.services.verification import init_verification_gateway
    init_session_issuer(app)
    init_verification_gateway(app)

    from contacts_api.errors import register_error_handlers
    register_error_handlers(app)

    # Create tables with error handling
    with app.app_context():
        from contacts_api import models  # noqa: F401
        try:
            db.create_all()
        except Exception as e:
            app.logger.warning(f"Could not create database tables: {e}")

    # Register routes
    from contacts_api.routes import register_routes
    register_routes(app)

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200

    return app
