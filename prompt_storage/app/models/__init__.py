from .base import Base
from .prompt import Prompt, PromptMetadata, CommaSeparatedList, TAG_SEPARATOR

__all__ = ["Base", "Prompt", "PromptMetadata", "CommaSeparatedList", "TAG_SEPARATOR"]
