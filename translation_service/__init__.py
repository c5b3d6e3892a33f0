from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()
limiter = Limiter(key_func=get_remote_address)
migrate = Migrate()


def create_app(config_name='development'):
    from translation_service.config import get_config
    from translation_service.logging_config import configure_logging

    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    configure_logging(
        level_value=app.config['LOG_LEVEL'],
        json_enabled=app.config['LOG_JSON'],
    )

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    CORS(app, origins=app.config['CORS_ORIGINS'])

    from translation_service.services.cache import init_cache
    init_cache(app)

    from translation_service.errors import register_error_handlers
    register_error_handlers(app)

    with app.app_context():
        from translation_service import models  # noqa: F401
        if app.config['AUTO_CREATE_TABLES']:
            db.create_all()

    # Register routes
    from translation_service.routes import register_routes
    register_routes(app)

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok'}), 200

    return app
