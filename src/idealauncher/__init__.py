"""idealauncher - Async IdeaLauncher client with an optimistic state cache."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("idealauncher")
except PackageNotFoundError:
    __version__ = "0+local"
from idealauncher.client import IdeaLauncherClient
from idealauncher.config import IdeaLauncherConfig
from idealauncher.exceptions import (
    ApiError,
    CacheTypeError,
    CommitFailure,
    ErrorType,
    IdeaLauncherConfigError,
    IdeaLauncherError,
)
from idealauncher.models import (
    ChatMessage,
    ChatRole,
    DocumentVersion,
    DomainStatus,
    Feature,
    Idea,
    IdeaPhase,
    ResearchType,
    Score,
    ScoreFramework,
    ScoreInput,
    SpecExport,
    TitleAvailability,
    VersionChangeType,
)
from idealauncher.state import (
    Optimistic,
    OptimisticIdeas,
    OptimisticState,
    SharedCache,
    optimistic_document,
    optimistic_score,
)

__all__ = [
    "__version__",
    "ApiError",
    "CacheTypeError",
    "ChatMessage",
    "ChatRole",
    "CommitFailure",
    "DocumentVersion",
    "DomainStatus",
    "ErrorType",
    "Feature",
    "Idea",
    "IdeaLauncherClient",
    "IdeaLauncherConfig",
    "IdeaLauncherConfigError",
    "IdeaLauncherError",
    "IdeaPhase",
    "Optimistic",
    "OptimisticIdeas",
    "OptimisticState",
    "ResearchType",
    "Score",
    "ScoreFramework",
    "ScoreInput",
    "SharedCache",
    "SpecExport",
    "TitleAvailability",
    "VersionChangeType",
    "optimistic_document",
    "optimistic_score",
]
