from rentverse.models.user import User
from rentverse.models.listing import Listing
from rentverse.models.tag import Tag, listing_tags
from rentverse.models.booking import Booking
from rentverse.models.notification import Notification
from rentverse.models.conversation import Conversation, ConversationParticipant, ConversationMessage
from rentverse.models.setting import PlatformSetting
from rentverse.models.audit import AuditLog
from rentverse.models.moderation import ModerationItem
from rentverse.models.engagement import HostFollow, RecentlyViewed, WishlistCollection, WishlistItem

__all__ = [
    "User", "Listing", "Tag", "listing_tags", "Booking", "Notification",
    "Conversation", "ConversationParticipant", "ConversationMessage",
    "PlatformSetting", "AuditLog", "ModerationItem",
    "WishlistCollection", "WishlistItem", "RecentlyViewed", "HostFollow",
]
