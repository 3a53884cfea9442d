from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from paintball.config import DATABASE_URL


engine = create_engine(DATABASE_URL, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
