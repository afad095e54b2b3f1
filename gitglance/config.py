import os
from typing import Optional
from pydantic import BaseModel
from dotenv import load_dotenv

GITHUB_API_URL = "https://api.github.com"

class Settings(BaseModel):
    """
    Runtime configuration. The token is the only knob; without it requests
    go out unauthenticated (60 requests/hour).
    """
    github_token: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return bool(self.github_token)

    @classmethod
    def from_env(cls, token: Optional[str] = None) -> "Settings":
        # An explicit token (e.g. --token) wins over .env / environment
        load_dotenv()
        return cls(github_token=token or os.getenv("GITHUB_TOKEN") or None)
