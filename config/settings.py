"""
Configuration management for the timetable API.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings."""
    
    # Application
    app_name: str = "Timetable Generation API"
    app_version: str = "1.0.0"
    debug: bool = False
    ping_message: str = "ping"
    
    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    reload: bool = False
    
    # Allocator
    slot_granularity_minutes: int = 15
    default_classrooms: int = 5
    default_labs: int = 2
    
    # Export
    institute_name: str = "ClassCanvas"
    
    # Logging
    log_level: str = "INFO"
    
    # CORS
    cors_origins: List[str] = ["http://localhost:3000"]
    
    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
