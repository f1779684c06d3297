from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from plant_identifier.services import api
from plant_identifier.services.api import app as api_app

root = Path(__file__).resolve().parent


# lifespan of a mounted sub-app is not run, so camera teardown is hooked here
@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    await api.shutdown()


app = FastAPI(title="plant-identifier web", lifespan=lifespan)


# routes match in registration order; the page route has to precede the empty-prefix API mount
@app.get("/", response_class=HTMLResponse)
def index():
    return (root / "templates" / "index.html").read_text(encoding="utf-8")


app.mount("/static", StaticFiles(directory=str(root / "static")), name="static")

# empty prefix: every path not matched above falls through to the API
app.mount("", api_app)
