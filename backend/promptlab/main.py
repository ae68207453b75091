import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from promptlab.api.react_routes import router as react_router
from promptlab.config import get_settings
from promptlab.services.react_agent import get_tool_registry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)

# Set DEBUG level for our app modules
logging.getLogger("promptlab").setLevel(logging.DEBUG)

logger = logging.getLogger(__name__)
settings = get_settings()

app = FastAPI(
    title="Prompt Lab API",
    description="Prompt engineering techniques exposed as API endpoints - ReAct agent",
    version="0.1.0"
)

# CORS middleware for the frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routes
app.include_router(react_router, prefix="/api/v1/react", tags=["react-agent"])


@app.on_event("startup")
async def startup_event():
    registry = get_tool_registry()
    logger.info("Starting Prompt Lab API")
    logger.info(f"LLM Base URL: {settings.llm_base_url}")
    logger.info(f"ReAct model: {settings.model_react}, default max steps: {settings.react_default_max_steps}")
    logger.info(f"Tools: {', '.join(registry.names())}")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "models": {
            "react": settings.model_react
        },
        "tools": list(get_tool_registry().names())
    }
