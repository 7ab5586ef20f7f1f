"""Import all models so Base.metadata knows every table."""
from teamchat.infrastructure.db.models.channel import ChannelModel, ChannelRoleVisibilityModel
from teamchat.infrastructure.db.models.message import MessageModel
from teamchat.infrastructure.db.models.read_receipt import MessageReadModel
from teamchat.infrastructure.db.models.refresh_token import RefreshTokenModel
from teamchat.infrastructure.db.models.user import RoleModel, UserModel, UserRoleModel
from teamchat.infrastructure.db.models.webhook import WebhookSubscriptionModel

__all__ = [
    "ChannelModel",
    "ChannelRoleVisibilityModel",
    "MessageModel",
    "MessageReadModel",
    "RefreshTokenModel",
    "RoleModel",
    "UserModel",
    "UserRoleModel",
    "WebhookSubscriptionModel",
]
