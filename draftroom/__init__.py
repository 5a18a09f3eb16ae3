from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_socketio import SocketIO

db = SQLAlchemy()
socketio = SocketIO()


def create_app(config_name: str = 'default'):
    """Application factory pattern"""
    from config import config

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Initialize extensions
    from draftroom.extensions import limiter
    db.init_app(app)
    socketio.init_app(app, cors_allowed_origins="*")
    limiter.init_app(app)

    # Register blueprints
    from draftroom.routes import api_bp
    app.register_blueprint(api_bp, url_prefix='/api')

    from draftroom.errors import register_error_handlers
    register_error_handlers(app)

    # Socket event handlers register themselves on import
    from draftroom import realtime  # noqa: F401

    # Create database tables
    with app.app_context():
        db.create_all()

    if app.config.get('AUTOMATION_ENABLED'):
        from draftroom.automation import start_automation
        start_automation(app)

    return app
