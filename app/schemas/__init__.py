# re-export common schemas for simpler imports
from .LinkCreateRequest import LinkCreateRequest
from .LinkUpdateRequest import LinkUpdateRequest
from .LinkResponse import LinkResponse
from .PaginatedLinkList import PaginatedLinkList
from .QRCodeCreateRequest import QRCodeCreateRequest, EncodeRequest, EncodeResponse
from .QRStyle import QRStyleConfig, QRStyleUpdate
from .AnalyticsSummary import AnalyticsSummary

__all__ = [
    "LinkCreateRequest",
    "LinkUpdateRequest",
    "LinkResponse",
    "PaginatedLinkList",
    "QRCodeCreateRequest",
    "EncodeRequest",
    "EncodeResponse",
    "QRStyleConfig",
    "QRStyleUpdate",
    "AnalyticsSummary",
]
