"""
Pytest configuration and fixtures for the asset tracker tests
"""
import os
import tempfile

# Keep test runs from writing into the project's logs/ directory
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='asset_tracker_logs_'))

import pytest  # noqa: E402
from flask import g  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402
from asset_tracker import create_app  # noqa: E402
from asset_tracker import db as _db  # noqa: E402


@pytest.fixture(scope='session')
def app():
    """Create Flask application for testing, backed by in-memory SQLite"""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    })
    app.test_client_class = FreshPrincipalClient
    return app


class FreshPrincipalClient(FlaskClient):
    """
    Test client that resolves X-User-Id anew on every request.

    Requests reuse the test's app context, so Flask-Login's cached user in
    ``g`` would otherwise carry over to the next request.
    """

    def open(self, *args, **kwargs):
        g.pop('_login_user', None)
        return super().open(*args, **kwargs)


@pytest.fixture(scope='function', autouse=True)
def db(app):
    """Fresh app context and tables for every test"""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture
def make_user(db):
    """Factory for users; usernames default to user1, user2, ..."""
    from asset_tracker.data.core.user_info.user import User
    counter = {'n': 0}

    def _make_user(**fields):
        counter['n'] += 1
        fields.setdefault('username', f"user{counter['n']}")
        user = User(**fields)
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def make_asset(db):
    """
    Factory for assets in any state, written straight to the table so tests
    can set up situations (such as orphan Knox IDs) the managers never create.
    """
    from asset_tracker.data.core.asset_info.asset import Asset
    counter = {'n': 0}

    def _make_asset(**fields):
        counter['n'] += 1
        fields.setdefault('asset_tag', f"TAG-{counter['n']:04d}")
        fields.setdefault('name', f"Laptop {counter['n']}")
        asset = Asset(**fields)
        db.session.add(asset)
        db.session.commit()
        return asset

    return _make_asset


@pytest.fixture
def make_license(db):
    """Factory for licenses written straight to the table"""
    from asset_tracker.data.core.license_info.license import License
    counter = {'n': 0}

    def _make_license(**fields):
        counter['n'] += 1
        fields.setdefault('name', f"License {counter['n']}")
        license = License(**fields)
        db.session.add(license)
        db.session.commit()
        return license

    return _make_license

