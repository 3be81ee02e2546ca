"""
Spotify Ranker – SQLAlchemy ORM models package.

Imports all model classes so the app can discover them through a single
``import ranker.models`` before ``Base.metadata.create_all``.
"""

from ranker.models.user import User                          # noqa: F401
from ranker.models.album import Album, Track                  # noqa: F401
from ranker.models.rating import Rating                       # noqa: F401
from ranker.models.comment import Comment, CommentStatus      # noqa: F401
from ranker.models.user_rating import UserRating              # noqa: F401
from ranker.models.user_comment import UserComment, UserCommentVote  # noqa: F401
