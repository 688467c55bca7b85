"""
ORM model package. Import all models here so Alembic autogenerate
can discover every table through the shared Base metadata.
"""
from teamhub.models.user import User  # noqa: F401
from teamhub.models.organization import Organization  # noqa: F401
from teamhub.models.project import Person, PersonRole, Project  # noqa: F401
from teamhub.models.task_list import TaskList  # noqa: F401
from teamhub.models.watcher import Watcher  # noqa: F401
from teamhub.models.task import Task  # noqa: F401
from teamhub.models.conversation import Conversation  # noqa: F401
from teamhub.models.comment import Comment  # noqa: F401
from teamhub.models.page import Note, Page, PageSlot, Upload  # noqa: F401
from teamhub.models.oauth_token import OAuthToken  # noqa: F401
