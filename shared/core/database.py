from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from shared.core.config import ASSET_DATABASE_URL, settings

Base = declarative_base()

if ASSET_DATABASE_URL.startswith("sqlite"):
    asset_engine = create_engine(
        ASSET_DATABASE_URL, connect_args={"check_same_thread": False}
    )
else:
    asset_engine = create_engine(
        ASSET_DATABASE_URL,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=settings.DB_POOL_SIZE,          # max idle connections
        max_overflow=settings.DB_MAX_OVERFLOW,    # max temporary extra connections
        pool_timeout=30       # wait time before failing
    )

AssetSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=asset_engine)


# Dependency
def get_asset_db():
    db = AssetSessionLocal()
    try:
        yield db
    finally:
        db.close()
