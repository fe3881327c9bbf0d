"""
TechNotes Backend — Index Route
=================================

GET / is the one public, unauthenticated listing: it tells a client which
service it reached and where the API docs live.
"""

from fastapi import APIRouter

from technotes import __version__
from technotes.schemas.common import IndexResponse

router = APIRouter(tags=["Index"])


@router.get("/", response_model=IndexResponse, summary="Service banner")
async def index() -> IndexResponse:
    return IndexResponse(name="TechNotes API", version=__version__, docs_url="/docs")
