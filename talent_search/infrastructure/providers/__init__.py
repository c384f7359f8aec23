"""Infrastructure provider accessors package."""

from .ai_provider import (  # noqa: F401
    get_analysis_cache,
    get_analysis_generator,
    get_embedding_service,
    get_openai_client,
    get_prompt_manager,
    reset_ai_services,
)
from .repository_provider import (  # noqa: F401
    get_analysis_repository,
    get_embedding_repository,
    get_entitlement_service,
    get_favorite_repository,
    get_player_repository,
    get_recruiter_repository,
    reset_repositories,
)
from .search_provider import (  # noqa: F401
    get_analysis_service,
    get_embedding_refresh_service,
    get_favorite_service,
    get_talent_search_service,
    get_vector_search_service,
    reset_search_services,
)
from .task_manager_provider import get_task_manager, reset_task_manager  # noqa: F401
