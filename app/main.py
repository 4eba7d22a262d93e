from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from app.config import Settings, load_settings
from app.db import Base, engine
from app.geocoding import MapboxGeocoder
from app.storage import LocalImageStore
from app.utils import logger
from app.web import LoginRequired, redirect
import app.models  # noqa: F401 ensure models are imported so tables are known


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    application = FastAPI()
    application.state.settings = settings
    # built once per process and handed to the routes through dependencies
    application.state.geocoder = MapboxGeocoder(settings.map_token, base_url=settings.mapbox_base_url)
    application.state.image_store = LocalImageStore(settings.media_root, base_url=settings.media_url)

    application.add_middleware(SessionMiddleware, secret_key=settings.session_secret)
    application.mount(settings.media_url, StaticFiles(directory=settings.media_root), name="media")

    from app.api.routes import router as api_router
    application.include_router(api_router)

    @application.exception_handler(LoginRequired)
    def on_login_required(request: Request, exc: LoginRequired):
        return redirect(request, "/listings", "error", "You must be logged in to do that!")

    @application.on_event("startup")
    def on_startup_create_tables():
        # Ensure database tables are created on startup
        Base.metadata.create_all(bind=engine)
        if not settings.map_token:
            logger.warning("MAP_TOKEN not set; listings will use default coordinates")

    @application.on_event("shutdown")
    def on_shutdown_close_clients():
        application.state.geocoder.close()

    return application


# create FastAPI instance
app = create_app()
