from .file_gateway import FileGateway
from .interfaces import AssistantProvider, RemoteGateway
from .memory import InMemoryGateway
from .records import AssistantReply, AssistantRequest, ProjectDraft, SummaryRequest, SummaryResponse

__all__ = [
    "AssistantProvider",
    "AssistantReply",
    "AssistantRequest",
    "FileGateway",
    "InMemoryGateway",
    "ProjectDraft",
    "RemoteGateway",
    "SummaryRequest",
    "SummaryResponse",
]
