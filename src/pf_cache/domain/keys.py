"""Cache key layout.

  generation   user:{u}:{scope}:version
  page         user:{u}:{scope}:v:{generation}:p:{page}
  aggregate    user:{u}:{scope}:{aggregate}
  single item  user:{u}:{kind}:{item_id}

Page keys embed the generation, so bumping the counter makes every older
page unreachable. Aggregate and single-item keys have no generation and
must be deleted explicitly.
"""

from src.pf_cache.domain.models import CacheScope


def generation_key(user_id: str, scope: CacheScope) -> str:
    return f"user:{user_id}:{scope.segment}:version"


def page_key(user_id: str, scope: CacheScope, generation: str, page: int) -> str:
    return f"user:{user_id}:{scope.segment}:v:{generation}:p:{page}"


def aggregate_key(user_id: str, scope: CacheScope, aggregate: str) -> str:
    return f"user:{user_id}:{scope.segment}:{aggregate}"


def item_key(user_id: str, kind: str, item_id: str) -> str:
    return f"user:{user_id}:{kind}:{item_id}"
