"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Derived values (round status, tallies, synthetic badges) are never columns

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from kontekst.models.discussion import Discussion  # noqa: F401
from kontekst.models.discussion_post import DiscussionPost  # noqa: F401
from kontekst.models.content_vote import ContentVote  # noqa: F401
from kontekst.models.content_vote_ballot import ContentVoteBallot  # noqa: F401
from kontekst.models.hall_of_fame import HallOfFameEntry  # noqa: F401
from kontekst.models.profile import Profile  # noqa: F401
from kontekst.models.user_badge import UserBadge  # noqa: F401
from kontekst.models.notification import Notification  # noqa: F401
from kontekst.models.article import Article  # noqa: F401
from kontekst.models.processed_payment_event import ProcessedPaymentEvent  # noqa: F401
