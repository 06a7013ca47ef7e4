import os
from contextlib import asynccontextmanager
from typing import List
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from database import Database, StorageError, settings
from logger import get_logger
from page import INDEX_HTML
from schemas import OrderIn, OrderPlaced, Product

_logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = Database(settings.DATABASE_URL)
    await db.connect()
    app.state.db = db
    try:
        yield
    finally:
        await db.close()
        app.state.db = None


app = FastAPI(title="Storefront API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_db(request: Request) -> Database:
    return request.app.state.db


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    _logger.exception(f"Storage operation failed on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Storage operation failed"})


@app.get("/", response_class=HTMLResponse)
async def index():
    return INDEX_HTML


@app.get("/test")
async def test(db: Database = Depends(get_db)):
    ok = db is not None and db.connected
    return {
        "backend": "✅ Running",
        "database": "✅ Available" if ok else "❌ Not Available",
        "database_url": db.path if ok else None,
        "tables": await db.count_rows() if ok else {},
    }


@app.get("/products", response_model=List[Product])
async def get_products(db: Database = Depends(get_db)):
    return await db.list_products()


@app.post("/place-order", response_model=OrderPlaced)
async def place_order(order: OrderIn, db: Database = Depends(get_db)):
    await db.place_order(order)
    return OrderPlaced()


STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), settings.STATIC_DIR)

# Mounted last so the routes above take precedence over files in the public dir
if os.path.isdir(STATIC_DIR):
    app.mount("/", StaticFiles(directory=STATIC_DIR), name="public")


if __name__ == "__main__":
    import uvicorn
    _logger.info(f"Server is running at http://localhost:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
