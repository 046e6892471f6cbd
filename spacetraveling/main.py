import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from spacetraveling.db.prismic import get_prismic_client
from spacetraveling.repos.posts_repo import PrismicPostsRepo
from spacetraveling.routers import posts, preview
from spacetraveling.services.page_cache import page_cache
from spacetraveling.services.post_service import PostService, prerender
from spacetraveling.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

app = FastAPI(title="spacetraveling", description="Blog front-end for Prismic posts")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.prismic = get_prismic_client()
    logger.info(f"Prismic client ready for {settings.PRISMIC_API_ENDPOINT}")

    if settings.PRERENDER_ON_STARTUP:
        service = PostService(
            PrismicPostsRepo(app.state.prismic), locale=settings.DATE_LOCALE
        )
        try:
            prerender(service, page_cache, settings.POSTS_PAGE_SIZE)
        except Exception as e:
            logger.error(f"Prerendering posts failed: {e}")

    try:
        yield
    finally:
        app.state.prismic.close()
        logger.info("Prismic client closed")


app.router.lifespan_context = lifespan

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
app.include_router(posts.router)
app.include_router(preview.router)


@app.get("/health")
async def health():
    return {"message": "spacetraveling is running"}
