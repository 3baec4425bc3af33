from app.schemas.LinkResponse import LinkResponse
from pydantic import BaseModel
from typing import List

class PaginatedLinkList(BaseModel):
    total: int
    skip: int
    limit: int
    links: List[LinkResponse]
