"""
System configuration: report service endpoint, pagination, uploads, logging.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

class LLMProvider(Enum):
    """LLM providers the report service can route a generation to."""
    GEMINI = "gemini"
    OPENAI = "openai"

PAGE_SIZE_OPTIONS = [5, 10, 20, 50, 100]

@dataclass
class ApiConfig:
    """Report service connection settings."""
    base_url: str = "http://localhost:8080/api/v1"
    timeout: int = 30
    generate_timeout: int = 300

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(
            base_url=os.getenv("API_BASE_URL", "http://localhost:8080/api/v1").rstrip("/"),
            timeout=int(os.getenv("API_TIMEOUT", "30")),
            generate_timeout=int(os.getenv("GENERATE_TIMEOUT", "300")),
        )

@dataclass
class PaginationConfig:
    """Listing defaults."""
    default_page_size: int = 10
    max_page_size: int = 100

    @classmethod
    def from_env(cls):
        return cls(
            default_page_size=int(os.getenv("DEFAULT_PAGE_SIZE", "10")),
            max_page_size=int(os.getenv("MAX_PAGE_SIZE", "100")),
        )

@dataclass
class UploadConfig:
    """Client-side upload checks. The report service has the final say."""
    accepted_mime_types: list = field(
        default_factory=lambda: [
            "application/pdf",
            "text/csv",
            "application/vnd.ms-excel",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        ]
    )
    accepted_extensions: list = field(default_factory=lambda: [".pdf", ".csv", ".xls", ".xlsx"])
    max_file_size_mb: int = 10

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

@dataclass
class GenerationConfig:
    """Defaults for the generation form."""
    provider: str = ""
    model_name: str = ""
    download_file_name: str = "report.html"

@dataclass
class SystemConfig:
    """Master system configuration."""
    api: ApiConfig = field(default_factory=ApiConfig.from_env)
    pagination: PaginationConfig = field(default_factory=PaginationConfig.from_env)
    upload: UploadConfig = field(default_factory=UploadConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)

    # Paths
    log_dir: str = "logs"
    output_dir: str = "outputs"

    # Runtime
    debug_mode: bool = bool(os.getenv("DEBUG", "False").lower() == "true")

    @classmethod
    def from_env(cls):
        """Load complete config from environment."""
        return cls(
            api=ApiConfig.from_env(),
            pagination=PaginationConfig.from_env(),
            upload=UploadConfig(max_file_size_mb=int(os.getenv("MAX_UPLOAD_SIZE_MB", "10"))),
            generation=GenerationConfig(
                provider=os.getenv("LLM_PROVIDER", "").strip().lower(),
                model_name=os.getenv("LLM_MODEL", "").strip(),
            ),
            log_dir=os.getenv("LOG_DIR", "logs"),
            output_dir=os.getenv("OUTPUT_DIR", "outputs"),
            debug_mode=os.getenv("DEBUG", "False").lower() == "true",
        )

def configure_logging(debug: bool = None) -> None:
    """Console plus file logging, shared by the CLI and the Streamlit app."""
    if logging.getLogger().handlers:
        # Already configured (Streamlit reruns the script on every interaction)
        return
    debug = CONFIG.debug_mode if debug is None else debug
    log_dir = Path(CONFIG.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_dir / 'app.log'),
            logging.StreamHandler()
        ]
    )

# Global config instance
CONFIG = SystemConfig.from_env()
