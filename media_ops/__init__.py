# media_ops/__init__.py
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_session import Session
from .config import Config

db = SQLAlchemy()
sess = Session()


def create_app(config_class=Config):
    """Application factory function."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    sess.init_app(app)
    db.init_app(app)

    from .database_setup import init_database, register_commands
    register_commands(app)

    if app.config.get("RESET_DB_ON_START"):
        init_database(app)
    elif app.config.get("CREATE_DB_ON_START"):
        with app.app_context():
            from .production import models  # noqa: F401
            db.create_all()

    from .production import production_bp
    app.register_blueprint(production_bp)

    return app
