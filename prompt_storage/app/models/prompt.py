from sqlalchemy import Boolean, Column, Integer, String, Text
from sqlalchemy.types import TypeDecorator

from .base import Base

TAG_SEPARATOR = ","


class CommaSeparatedList(TypeDecorator):
    """Ordered list of strings stored as a single comma-joined TEXT value.

    ``None`` is stored as NULL and an empty list as an empty string, so both
    survive a round trip. Items must be non-empty and must not contain the separator.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return TAG_SEPARATOR.join(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value == "":
            return []
        return value.split(TAG_SEPARATOR)


class Prompt(Base):
    __tablename__ = "prompts"

    id = Column(String, primary_key=True)
    version = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)
    parent = Column(String, index=True)
    branched = Column(Boolean, nullable=True)
    archived = Column(Boolean, nullable=True)
    created_at = Column(Integer, nullable=False)


class PromptMetadata(Base):
    __tablename__ = "metadata"

    id = Column(String, primary_key=True)
    name = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    category = Column(Text, nullable=True, index=True)
    tags = Column(CommaSeparatedList, nullable=True)
    updated_at = Column(Integer, nullable=False)
