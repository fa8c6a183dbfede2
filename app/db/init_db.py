import logging
from app.core.config import settings
from app.core.database import engine, async_session_maker
from app.models import *  # Import all models
from app.models.base import Base
from app.services.auth.auth_service import AuthService
from app.services.system.settings_service import SettingsService

logger = logging.getLogger(__name__)

async def create_tables():
    """Create all database tables"""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        
        logger.info("✅ Database tables created successfully")
        
    except Exception as e:
        logger.error(f"❌ Error creating tables: {str(e)}")
        raise

async def create_initial_data():
    """Default settings document and, when configured, the bootstrap admin"""
    async with async_session_maker() as session:
        await SettingsService(session).ensure_defaults()
        
        if settings.INITIAL_ADMIN_EMAIL and settings.INITIAL_ADMIN_PASSWORD:
            await AuthService(session).ensure_admin(
                settings.INITIAL_ADMIN_EMAIL,
                settings.INITIAL_ADMIN_PASSWORD,
                settings.INITIAL_ADMIN_NAME,
            )
            logger.info(f"👤 Admin account ready: {settings.INITIAL_ADMIN_EMAIL}")

async def init_db():
    """Initialize the database"""
    try:
        logger.info(f"🗄️  Initializing database for {settings.ENVIRONMENT} environment...")
        
        await create_tables()
        await create_initial_data()
        
        logger.info("✅ Database initialized successfully")
        
    except Exception as e:
        logger.error(f"❌ Database initialization failed: {str(e)}")
        raise
