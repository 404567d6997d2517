# media_ops/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'a-very-secret-key'

    # Server-side sessions hold the acting user (id + role)
    SESSION_TYPE = 'filesystem'
    SESSION_FILE_DIR = os.environ.get('SESSION_FILE_DIR') or 'flask_session'
    SESSION_PERMANENT = False

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///media_ops.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    RESET_DB_ON_START = _env_flag('RESET_DB_ON_START')
    CREATE_DB_ON_START = _env_flag('CREATE_DB_ON_START', default=True)

    # Used by the client layer (ProductionApiClient)
    MEDIA_OPS_API_URL = os.environ.get('MEDIA_OPS_API_URL') or 'http://localhost:5000'
    MEDIA_OPS_API_TIMEOUT = float(os.environ.get('MEDIA_OPS_API_TIMEOUT') or 15)


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    RESET_DB_ON_START = True
