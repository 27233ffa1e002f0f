# File: triviastack_app/config.py
# Application configuration, read from the environment (.env supported).

import os

from dotenv import load_dotenv

load_dotenv()

# The project root sits one level above the package directory.
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

DATABASE_PATH = os.path.join(BASE_DIR, "database", "triviastack.db")


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Cấu hình ứng dụng TriviaStack."""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # Fallback for development, though env is preferred
        SECRET_KEY = 'dev-secret-key-replace-in-production'

    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI') or f'sqlite:///{DATABASE_PATH}'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Grading transactions
    GRADING_ISOLATION_LEVEL = os.environ.get('GRADING_ISOLATION_LEVEL') or None
    GRADING_VERIFY_AGGREGATES = _env_flag('GRADING_VERIFY_AGGREGATES', True)

    # Answer matching: (max candidate length, allowed edits) pairs, ascending.
    # Longer candidates fall through to ANSWER_MATCH_MAX_EDITS.
    ANSWER_MATCH_TOLERANCE = ((3, 0), (7, 1))
    ANSWER_MATCH_MAX_EDITS = int(os.environ.get('ANSWER_MATCH_MAX_EDITS', 2))

    # Disputes
    DISPUTE_MATCH_WINDOW_SECONDS = int(os.environ.get('DISPUTE_MATCH_WINDOW_SECONDS', 60))
    DISPUTES_PER_PAGE = 20

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR') or os.path.join(BASE_DIR, 'logs')
    LOG_TO_FILE = _env_flag('LOG_TO_FILE', False)
    LOG_JSON = _env_flag('LOG_JSON', False)

    @classmethod
    def init_app(cls, app):
        """Khởi tạo các thư mục cần thiết."""
        if app.config['SQLALCHEMY_DATABASE_URI'] == f'sqlite:///{DATABASE_PATH}':
            os.makedirs(os.path.dirname(DATABASE_PATH), exist_ok=True)
