import logging
from typing import Optional

from fastapi import FastAPI, Depends, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from config import CONTENT_ROOT, CORS_ORIGINS, LOG_FILE, LOG_LEVEL, STAGING_DIR, UPLOAD_DIR
from database import get_db, init_db
from schemas import ErrorResponse, ImageList, ImageOut, UploadResponse
from storage import ensure_dir, save_upload
import crud
import views

# ------------------------------------------------------
# LOGGING
# ------------------------------------------------------
handlers = [logging.StreamHandler()]
if LOG_FILE:
    handlers.append(logging.FileHandler(LOG_FILE))

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(message)s",
    handlers=handlers
)
logger = logging.getLogger(__name__)

# Create DB tables
init_db()

app = FastAPI(title="Image Gallery API", version="1.0")

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for folder in [UPLOAD_DIR, STAGING_DIR]:
    ensure_dir(folder)

# Serve stored images
app.mount(CONTENT_ROOT, StaticFiles(directory=UPLOAD_DIR), name="saved_images")

app.include_router(views.router)


# ------------------------------------------------------
# RESPONSE HELPERS
# ------------------------------------------------------
def error_response(message):
    return {"error": message}


def upload_response(message, img):
    body = UploadResponse(message=message, image=ImageOut.model_validate(img))
    return body.model_dump(by_alias=True, mode="json")


def list_response(images):
    body = ImageList(images=[ImageOut.model_validate(img) for img in images])
    return body.model_dump(by_alias=True, mode="json")


# ------------------------------------------------------
# GLOBAL EXCEPTION HANDLERS
# ------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Client Error on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content=error_response("Invalid request"))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled Error: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content=error_response("Internal Server Error. Please try again later.")
    )


# ------------------------------------------------------
# API ROUTES
# ------------------------------------------------------
ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@app.post("/api/images", responses=ERROR_RESPONSES)
async def upload_image(
    title: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    if not title or image is None or not image.filename:
        logger.warning("Client Error: upload without title or image")
        return JSONResponse(status_code=400, content=error_response("Title and image are required"))

    try:
        data = await image.read()
        img = await run_in_threadpool(
            save_upload,
            db,
            title,
            image.filename,
            data,
            UPLOAD_DIR,
            STAGING_DIR,
            CONTENT_ROOT,
        )
    except Exception:
        logger.exception("Unexpected server error in POST /api/images")
        return JSONResponse(status_code=500, content=error_response("Failed to upload image"))

    logger.info(f"Image uploaded successfully: ID={img.id}")
    return upload_response("Image uploaded successfully", img)


@app.get("/api/images", responses={500: {"model": ErrorResponse}})
def get_images(db: Session = Depends(get_db)):
    try:
        images = crud.list_images(db)
    except Exception:
        logger.exception("Unexpected server error in GET /api/images")
        return JSONResponse(status_code=500, content=error_response("Failed to fetch images"))

    return list_response(images)


@app.get("/")
def home():
    return {"status": "ok", "message": "Image Gallery API is running"}
