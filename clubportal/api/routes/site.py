"""
Serves the generated static site (club pages and their assets) from OUTPUT_DIR.

The worker swaps the whole output directory on every build, so paths are resolved per request.
"""
from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse, RedirectResponse

from clubportal.api.deps import get_settings
from clubportal.core.constants import ASSET_TARGET_DIR

router = APIRouter()


def _site_file(request: Request, *parts: str) -> Path:
    root = Path(get_settings(request).output_dir).resolve()
    path = root.joinpath(*parts).resolve()
    if root not in path.parents or not path.is_file():
        raise HTTPException(status_code=404, detail="Not Found")
    return path


@router.get("/clubs/{slug}")
def club_page_redirect(slug: str):
    return RedirectResponse(f"/clubs/{slug}/", status_code=307)


@router.get("/clubs/{slug}/")
@router.get("/clubs/{slug}/index.html")
def club_page(slug: str, request: Request):
    return FileResponse(_site_file(request, "clubs", slug, "index.html"), media_type="text/html")


@router.get("/assets/{asset_path:path}")
def site_asset(asset_path: str, request: Request):
    return FileResponse(_site_file(request, ASSET_TARGET_DIR, asset_path))
