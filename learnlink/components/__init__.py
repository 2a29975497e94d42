from learnlink.components.cards import (
    dispute_card,
    review_actions,
    review_card,
    tutor_card,
    user_card,
)

__all__ = ["dispute_card", "review_actions", "review_card", "tutor_card", "user_card"]
