"""Core data models shared across gitinspect components."""

from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class RepositoryMetadata:
    """Normalized view of a GitHub repository used to build the prompt."""

    name: str
    owner: str
    description: Optional[str]
    url: str
    stars: int
    forks: int
    open_issues: int
    language: Optional[str]
    license_id: Optional[str]
    created_at: date
    updated_at: date
    size_kib: float
    topics: Tuple[str, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def created_display(self) -> str:
        return self.created_at.strftime("%x")

    @property
    def updated_display(self) -> str:
        return self.updated_at.strftime("%x")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        data["updated_at"] = self.updated_at.isoformat()
        data["topics"] = list(self.topics)
        return data


@dataclass
class CompletionRequest:
    """A single chat-completion call as sent over the wire."""

    prompt: str
    model: str
    temperature: float
    url: str
    api_key: str
    timeout: float


class FailureKind(str, Enum):
    """Reasons a completion sequence can end without model text."""

    CONFIGURATION = "configuration"
    NETWORK_EXHAUSTED = "network_exhausted"
    MALFORMED_RESPONSE = "malformed_response"


@dataclass(frozen=True)
class CompletionSuccess:
    """Model text returned by a successful attempt."""

    raw_text: str
    attempts: int = 1


@dataclass(frozen=True)
class CompletionFailure:
    """Terminal failure of a completion sequence."""

    kind: FailureKind
    message: str
    attempts: int = 0


CompletionOutcome = Union[CompletionSuccess, CompletionFailure]


@dataclass
class ExtractedContent:
    """Fields parsed out of the raw model text."""

    diagram_html: Optional[str]
    summary_text: str
    recommendations: List[str] = field(default_factory=list)


@dataclass
class AnalysisResult:
    """Renderable analysis handed to the presentation layer."""

    summary: str
    html_schema: str
    recommendations: List[str]
    diagram_source: bool
    raw_analysis: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Inspection:
    """Outcome of one owner/repo request: metadata (when fetched) plus analysis."""

    repository: Optional[RepositoryMetadata]
    analysis: AnalysisResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "repository": self.repository.to_dict() if self.repository else None,
            "analysis": self.analysis.to_dict(),
        }
