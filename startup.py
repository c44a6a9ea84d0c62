import logging
import os
import sys
import traceback

import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

# Add the src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(current_dir, 'src'))


def _say(msg: str, level: int = logging.INFO) -> None:
    print(msg, flush=True)
    logger.log(level, msg)


def _report_environment() -> None:
    """Log the environment variables the service depends on (never their secrets)."""
    _say("\nEnvironment Configuration:")
    _say(f"  PORT: {os.environ.get('PORT', '8000')}")
    _say(f"  APP_ENV: {os.environ.get('APP_ENV', 'not set')}")
    _say(f"  MONGO_BACKEND: {os.environ.get('MONGO_BACKEND', 'memory')}")
    _say(f"  MONGO_URI: {'✅ set' if os.environ.get('MONGO_URI') else '❌ not set'}")
    _say(f"  AZURE_OPENAI_ENDPOINT: {'✅ set' if os.environ.get('AZURE_OPENAI_ENDPOINT') else '❌ not set'}")
    _say(f"  AZURE_OPENAI_API_KEY: {'✅ set' if os.environ.get('AZURE_OPENAI_API_KEY') else '❌ not set'}")
    _say(f"  AZURE_OPENAI_DEPLOYMENT_NAME: {os.environ.get('AZURE_OPENAI_DEPLOYMENT_NAME', 'not set')}")
    _say(f"  RAG_BASE_URL: {os.environ.get('RAG_BASE_URL', 'not set')}")


if __name__ == "__main__":
    try:
        sep = "=" * 60
        _say(sep)
        _say("SundAI Backend Startup")
        _say(sep)
        _say(f"Python version: {sys.version.split()[0]}")
        _report_environment()

        try:
            from sundai.core.config import get_settings
            settings = get_settings()
        except ValueError as ve:
            _say(f"❌ Configuration validation failed: {ve}", logging.ERROR)
            _say(traceback.format_exc(), logging.ERROR)
            _say("\n⚠️  Common configuration issues:", logging.ERROR)
            _say("  1. MONGO_URI must start with mongodb:// or mongodb+srv://", logging.ERROR)
            _say("  2. AZURE_OPENAI_ENDPOINT must look like https://xxx.openai.azure.com/", logging.ERROR)
            sys.exit(1)

        port = int(os.environ.get("PORT", settings.port))
        host = os.environ.get("HOST", settings.host)
        _say(f"\n{sep}\nStarting uvicorn server on {host}:{port}...\n{sep}\n")
        uvicorn.run(
            "sundai.app:app",
            host=host,
            port=port,
            workers=1,
            log_level="info",
            access_log=True,
            timeout_keep_alive=75,
            timeout_graceful_shutdown=30,
        )
    except KeyboardInterrupt:
        _say("\n⚠️  Shutting down due to keyboard interrupt")
        sys.exit(0)
    except Exception as e:
        _say(f"❌ CRITICAL: Failed to start application: {e}", logging.ERROR)
        _say(traceback.format_exc(), logging.ERROR)
        sys.exit(1)
