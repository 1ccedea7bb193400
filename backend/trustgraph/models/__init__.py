"""ORM Models — SQLAlchemy declarative models for all persisted trust-graph entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - community_graph is a derived snapshot; seeders and follows cache are its inputs

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from trustgraph.models.seeder import CommunitySeeder  # noqa: F401
from trustgraph.models.follows_cache import FollowsCacheEntry, FollowsFetch  # noqa: F401
from trustgraph.models.graph_node import GraphNode  # noqa: F401
from trustgraph.models.graph_build_log import GraphBuildLog  # noqa: F401
from trustgraph.models.build_lock import GraphBuildLock  # noqa: F401
from trustgraph.models.review import Review, ReviewReply  # noqa: F401
