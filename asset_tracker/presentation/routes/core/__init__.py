from flask import Blueprint

api = Blueprint('api', __name__)

# Import all route modules
from . import (  # noqa: E402,F401
    assets,
    licenses,
    activities,
    users,
    dashboard
)
