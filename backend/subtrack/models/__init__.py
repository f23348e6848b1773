from subtrack.models.subscription import CycleKind, Subscription

__all__ = [
    "CycleKind",
    "Subscription",
]
