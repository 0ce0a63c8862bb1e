from sqlalchemy.orm import declarative_base

# Base class for all models
Base = declarative_base()
