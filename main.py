"""
Whiteboard AI - Diagram Generation Service (FastAPI)
====================================================

Async web service that turns whiteboard chat messages into canvas content:
mind maps, sticky notes and flow diagrams.

Version: See VERSION file (centralized version management)

Features:
- FastAPI with Pydantic models for type safety
- Uvicorn ASGI server
- Auto-generated OpenAPI documentation at /docs (DEBUG only)
- Unified console and rotating file logging
"""

import os
import sys
import time
import logging
from logging.handlers import TimedRotatingFileHandler
from contextlib import asynccontextmanager
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Create logs directory
os.makedirs("logs", exist_ok=True)

# Import config early (needed for logging setup)
from config.settings import config

# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================


class UnifiedFormatter(logging.Formatter):
    """Unified logging formatter with ANSI color support."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARN': '\033[33m',     # Yellow
        'ERROR': '\033[31m',    # Red
        'CRIT': '\033[35m',     # Magenta
        'RESET': '\033[0m',     # Reset
        'BOLD': '\033[1m',      # Bold
    }

    LEVEL_MAP = {
        'DEBUG': 'DEBUG',
        'INFO': 'INFO',
        'WARNING': 'WARN',
        'ERROR': 'ERROR',
        'CRITICAL': 'CRIT'
    }

    SOURCE_PREFIXES = (
        ('routers', 'API'),
        ('uvicorn', 'SRVR'),
        ('clients', 'CLIE'),
        ('services', 'SERV'),
        ('agents', 'AGNT'),
        ('prompts', 'PRMT'),
        ('config', 'CONF'),
    )

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def source_tag(self, name: str) -> str:
        """Four-letter tag for a logger name."""
        if name == '__main__' or name == 'main':
            return 'MAIN'
        if name == 'asyncio':
            return 'ASYN'
        for prefix, tag in self.SOURCE_PREFIXES:
            if name.startswith(prefix):
                return tag
        return name[:4].upper()

    def format(self, record):
        timestamp = self.formatTime(record, '%H:%M:%S')
        level_name = self.LEVEL_MAP.get(record.levelname, record.levelname)

        if self.use_color:
            color = self.COLORS.get(level_name, '')
            reset = self.COLORS['RESET']
            if level_name == 'CRIT':
                level = f"{self.COLORS['BOLD']}{color}{level_name.ljust(5)}{reset}"
            else:
                level = f"{color}{level_name.ljust(5)}{reset}"
        else:
            level = level_name.ljust(5)

        source = self.source_tag(record.name).ljust(4)
        message = f"[{timestamp}] {level} | {source} | {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(UnifiedFormatter())

# New log file every 72 hours, 10 kept
file_handler = TimedRotatingFileHandler(
    os.path.join("logs", "app.log"),
    when="h",
    interval=72,
    backupCount=10,
    encoding="utf-8"
)
file_handler.setFormatter(UnifiedFormatter(use_color=False))

# Determine log level (override with DEBUG if VERBOSE_LOGGING is enabled)
if config.VERBOSE_LOGGING:
    log_level = logging.DEBUG
else:
    log_level = getattr(logging, config.LOG_LEVEL, logging.INFO)

logging.basicConfig(
    level=log_level,
    handlers=[console_handler, file_handler],
    force=True
)

# Route Uvicorn's loggers through the same handlers
for uvicorn_logger_name in ['uvicorn', 'uvicorn.error']:
    uvicorn_logger = logging.getLogger(uvicorn_logger_name)
    uvicorn_logger.handlers = []
    uvicorn_logger.addHandler(console_handler)
    uvicorn_logger.addHandler(file_handler)
    uvicorn_logger.propagate = False

# Quiet HTTP client internals
logging.getLogger('aiohttp').setLevel(logging.WARNING)
logging.getLogger('httpx').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)
logger.debug(f"Logging initialized: {logging.getLevelName(log_level)}")

# ============================================================================
# FASTAPI APPLICATION
# ============================================================================

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from models import HealthResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    app.state.start_time = time.time()

    logger.info("=" * 80)
    logger.info("Whiteboard AI Starting")
    logger.info("=" * 80)
    config.print_config_summary()
    if not config.validate_llm_config():
        logger.warning("Completion service not configured: generation will report retryable errors")

    yield

    logger.info("Whiteboard AI stopped")


app = FastAPI(
    title="Whiteboard AI API",
    description="AI-generated mind maps, sticky notes and flow diagrams for an infinite canvas",
    version=config.VERSION,
    docs_url="/docs" if config.DEBUG else None,
    redoc_url="/redoc" if config.DEBUG else None,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if config.DEBUG else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# GLOBAL EXCEPTION HANDLERS
# ============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Handle HTTP exceptions.

    Returns FastAPI-standard format: {"detail": "error message"}
    """
    logger.warning(f"HTTP {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    logger.error(f"Unhandled exception: {type(exc).__name__}: {exc}", exc_info=True)

    error_response = {"error": "An unexpected error occurred. Please try again later."}
    if config.DEBUG:
        error_response["debug"] = str(exc)

    return JSONResponse(
        status_code=500,
        content=error_response
    )

# ============================================================================
# HEALTH CHECK
# ============================================================================


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint"""
    return HealthResponse(status="ok", version=config.VERSION)

# ============================================================================
# ROUTER REGISTRATION
# ============================================================================

from routers import whiteboard

app.include_router(whiteboard.router)
