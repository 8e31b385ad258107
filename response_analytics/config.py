from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5002
    RELOAD: bool = True
    LOG_LEVEL: str = "info"
    
    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5000"]
    
    # Store
    STORE_MAX_RESPONSES: Optional[int] = None
    
    # Reports
    INCORRECT_QUESTIONS_LIMIT: int = 10

settings = Settings()
