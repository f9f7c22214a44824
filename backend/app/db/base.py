# backend/app/db/base.py

# Import all models so Base.metadata knows every table.
# Alembic's env.py and create_all() import `Base` from here.
from app.db.base_class import Base  # noqa: F401
from app.db.models.analytics_event import AnalyticsEvent  # noqa: F401
from app.db.models.board_settings import BoardSettingsRow  # noqa: F401
from app.db.models.photo import BoardPhoto  # noqa: F401
from app.db.models.reminder import TileReminder  # noqa: F401
from app.db.models.shared_link import SharedLink  # noqa: F401
from app.db.models.tile import BoardTile  # noqa: F401
from app.db.models.tile_version import TileVersion  # noqa: F401
