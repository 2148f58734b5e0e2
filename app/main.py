from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from dotenv import load_dotenv
import logging

from app.core.config import settings
from app.api.v1.api import api_router
from app.core.database import Base, SessionLocal, engine
from app.core.exceptions import BaseAppException, status_code_for
from app.core.first_admin import create_first_admin
from app.services.consultant_service import ConsultantService
from app.utils.audit import configure_audit_logger
from app import models  # noqa: F401  registers every table on Base.metadata

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
configure_audit_logger()
logger = logging.getLogger(__name__)

api_description = """
## Fintar - AI-Powered Personal Finance Planning

### Quick Start

1. **Authentication**: Register, verify your email, then login to get a JWT pair
2. **Onboarding**: Submit personal info (`POST /users/onboarding/profile`) and a
   financial snapshot (`POST /users/onboarding/financial`)
3. **Status**: `GET /users/onboarding/status` reports which stages are complete
4. **AI**: Chat with the financial assistant or request insights on your snapshot
5. **Consultants**: Browse the directory and book a session
"""

app = FastAPI(
    title="Fintar API",
    description=api_description,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# GZip compression for large JSON responses
app.add_middleware(GZipMiddleware, minimum_size=500)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(BaseAppException)
async def app_exception_handler(request: Request, exc: BaseAppException):
    code = status_code_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=code, content={"detail": exc.message}, headers=headers)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database operation failed"},
    )


# Include API router
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def prepare_database():
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")

    db = SessionLocal()
    try:
        added = ConsultantService(db).seed_consultants()
        logger.info(f"Seeding complete: consultants +{added}")
    except SQLAlchemyError as e:
        # Do not block startup if seeding fails; just log
        logger.error(f"Seeding error: {e}")
        db.rollback()
    finally:
        db.close()

    create_first_admin(settings.FIRST_ADMIN_EMAIL, settings.FIRST_ADMIN_PASSWORD)


@app.get("/")
async def root():
    return {"message": "Fintar API is running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
