import os
import sys

import pytest
from flask import g

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from triviastack_app import create_app, db
from triviastack_app.config import Config
from triviastack_app.models import Category, Game, Question, User


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    GRADING_ISOLATION_LEVEL = None
    GRADING_VERIFY_AGGREGATES = True
    DISPUTE_MATCH_WINDOW_SECONDS = 60
    DISPUTES_PER_PAGE = 20
    LOG_TO_FILE = False


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _seed():
    """Users, two categories, a handful of questions and one live game owned by alice."""
    admin = User(username='admin', email='admin@example.com', user_role=User.ROLE_ADMIN)
    alice = User(username='alice', email='alice@example.com', user_role=User.ROLE_USER)
    bob = User(username='bob', email='bob@example.com', user_role=User.ROLE_USER)
    db.session.add_all([admin, alice, bob])

    history = Category(name='World History')
    geography = Category(name='Geography')
    db.session.add_all([history, geography])
    db.session.flush()

    everest = Question(category_id=geography.category_id, clue='Highest peak on Earth',
                       answer='Mount (Mt.) Everest', value=400, round='SINGLE')
    nile = Question(category_id=geography.category_id, clue='Longest river in Africa',
                    answer='the Nile', value=200, round='SINGLE')
    revolution = Question(category_id=history.category_id, clue='It began with the storming of the Bastille',
                          answer='French Revolution', value=800, round='DOUBLE')
    emperor = Question(category_id=history.category_id, clue='He crowned himself in 1804',
                       answer='Emperor Napoleon I', value=600, round='SINGLE')
    hamilton = Question(category_id=history.category_id, clue='First Secretary of the Treasury',
                        answer='Alexander Hamilton', value=None, round='FINAL')
    db.session.add_all([everest, nile, revolution, emperor, hamilton])
    db.session.flush()

    game = Game(user_id=alice.user_id)
    db.session.add(game)
    db.session.commit()

    return {
        'admin_id': admin.user_id,
        'alice_id': alice.user_id,
        'bob_id': bob.user_id,
        'history_id': history.category_id,
        'geography_id': geography.category_id,
        'everest_id': everest.question_id,
        'nile_id': nile.question_id,
        'revolution_id': revolution.question_id,
        'emperor_id': emperor.question_id,
        'hamilton_id': hamilton.question_id,
        'game_id': game.game_id,
    }


@pytest.fixture
def seeded(app):
    return _seed()


@pytest.fixture
def file_app(tmp_path):
    """App on a temporary SQLite file, so several threads get real connections."""
    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'triviastack.db'}"

    app = create_app(FileConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def file_seeded(file_app):
    ids = _seed()
    # Release the seeding connection before other threads write.
    db.session.remove()
    return ids


@pytest.fixture
def login(client):
    """Log the test client in as the given user id."""
    def _login(user_id):
        with client.session_transaction() as sess:
            sess['_user_id'] = str(user_id)
            sess['_fresh'] = True
        # The app context outlives requests in tests; drop the cached user.
        g.pop('_login_user', None)
    return _login
