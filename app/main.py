# app/main.py
import uvicorn

from app.api import create_app
from app.data.database import Base, engine
from app.utils.logging import get_logger

# IMPORT WSZYSTKICH MODELI NA POCZĄTKU (PRZED JAKIMKOLWIEK CREATE_ALL)
import app.data.models  # noqa: F401

logger = get_logger(__name__)

logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")

try:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
