"""Thumbnail route factory."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from ..common.schemas import ThumbnailResult, is_sentinel
from .handler import ThumbnailHandler


def create_router(handler: ThumbnailHandler) -> APIRouter:
    """Create router with injected dependencies."""
    router = APIRouter()

    @router.get("/thumbnails", response_model=ThumbnailResult)
    async def get_thumbnail(
        url: Annotated[str, Query(description="Source image URL")],
        # Sizes stay loose; empty, zero or non-numeric values mean "absent"
        width: Annotated[str | None, Query(description="Target width in pixels")] = None,
        height: Annotated[str | None, Query(description="Target height in pixels")] = None,
        watermark: Annotated[bool, Query(description="Overlay the watermark")] = False,
        redirect: Annotated[bool, Query(description="Redirect to the asset instead of returning JSON")] = False,
    ) -> ThumbnailResult | RedirectResponse:
        result: str = await run_in_threadpool(handler.thumb, url, width, height, watermark)

        if is_sentinel(result):
            raise HTTPException(status_code=404, detail=result)
        if redirect:
            return RedirectResponse(result, status_code=307)
        return ThumbnailResult(url=result, found=True)

    _ = get_thumbnail
    return router
