# src/loader/model.py (Loader Layer)
from typing import List, Optional

from pydantic import BaseModel, Field


class LoaderSettings(BaseModel):
    concurrency: int = Field(default=25)
    timeout: int = Field(default=30)
    max_redirects: int = Field(default=10)
    user_agent: str = Field(default="importscope/0.1")
    noop_patterns: List[str] = Field(default_factory=list, description="URL regexes answered with empty text.")
    root: Optional[str] = Field(default=None, description="Local directory served instead of the network.")
    host: Optional[str] = Field(default=None, description="Host name mapped onto `root`.")
