"""
UniNexus caching policy: what gets cached, for how long, and what a mutation
invalidates.
"""

# ────────────────────────────────────────────────────────────────────────────
# Cache Policy Table
# ────────────────────────────────────────────────────────────────────────────
#
# Data             | Key Pattern                 | TTL     | Config field
# -----------------+-----------------------------+---------+--------------
# Event list page  | events:list:{hash}          | 5 min   | ttl_list
# Event detail     | events:detail:{event_id}    | 10 min  | ttl_detail
# Club list page   | clubs:list:{hash}           | 5 min   | ttl_list
# Club detail      | clubs:detail:{club_id}      | 10 min  | ttl_detail
# User profile     | users:profile:{user_id}     | 10 min  | ttl_profile
# Discover search  | discover:search:{hash}      | 5 min   | ttl_search
# Trending         | trending:ranked:all         | 10 min  | ttl_trending
#
# Lists aggregate many entities whose counters change often, so they get the
# short TTL. Detail views change less per unit time and get the longer one.
#
# ────────────────────────────────────────────────────────────────────────────
# Invalidation
# ────────────────────────────────────────────────────────────────────────────
#
# There is no index of which cached list contains which entity. A mutation
# deletes every key of the affected namespaces with one pattern delete.
# Discover and trending aggregate events and clubs, so mutating either one
# also drops those namespaces. TTL expiry heals any failed invalidation.

EVENTS = "events"
CLUBS = "clubs"
USERS = "users"
DISCOVER = "discover"
TRENDING = "trending"


# Operations
OP_LIST = "list"
OP_DETAIL = "detail"
OP_PROFILE = "profile"
OP_SEARCH = "search"
OP_RANKED = "ranked"

TRENDING_IDENTIFIER = "all"

# TTL defaults (seconds), mirrored by UniNexusConfig
DEFAULT_TTL_LIST = 300
DEFAULT_TTL_DETAIL = 600
DEFAULT_TTL_SEARCH = 300
DEFAULT_TTL_TRENDING = 600
DEFAULT_TTL_PROFILE = 600

# Namespaces to drop when a resource type is mutated
DEPENDENT_NAMESPACES = {
    EVENTS: (EVENTS, DISCOVER, TRENDING),
    CLUBS: (CLUBS, DISCOVER, TRENDING),
    USERS: (USERS,),
}


def namespaces_for_mutation(resource_type: str):
    """Namespaces invalidated by a successful mutation of ``resource_type``."""
    return DEPENDENT_NAMESPACES.get(resource_type, (resource_type,))
