"""
IdeaBox – SQLAlchemy ORM models package.

Imports all model classes so the metadata and the app can discover them
through a single ``import ideabox.models`` import.
"""

from ideabox.models.user import User, Role                          # noqa: F401
from ideabox.models.idea import Idea, Category, IdeaStatus          # noqa: F401
from ideabox.models.attachment import Attachment                    # noqa: F401
from ideabox.models.evaluation import Evaluation, Decision           # noqa: F401
from ideabox.models.vote import Vote                                # noqa: F401
from ideabox.models.notification import Notification, NotificationType  # noqa: F401
from ideabox.models.status_history import StatusHistoryEntry        # noqa: F401
from ideabox.models.activity import Activity, ActivityType          # noqa: F401
