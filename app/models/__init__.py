# Parking Schedule Core — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.user import User              # noqa
from app.models.schedule import Schedule      # noqa
