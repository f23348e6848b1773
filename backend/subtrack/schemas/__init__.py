from subtrack.schemas.subscription import (
    RenewRequest,
    SubscriptionCreate,
    SubscriptionRecord,
    SubscriptionResponse,
    SubscriptionUpdate,
)

__all__ = [
    "RenewRequest",
    "SubscriptionCreate",
    "SubscriptionRecord",
    "SubscriptionResponse",
    "SubscriptionUpdate",
]
