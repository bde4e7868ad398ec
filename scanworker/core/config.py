import os

from pydantic import BaseModel


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    # Container runtime
    DOCKER_BIN: str = os.getenv("DOCKER_BIN", "docker")
    NUCLEI_IMAGE: str = os.getenv("NUCLEI_IMAGE", "projectdiscovery/nuclei:latest")
    ZAP_IMAGE: str = os.getenv("ZAP_IMAGE", "zaproxy/zap-stable")
    NIKTO_IMAGE: str = os.getenv("NIKTO_IMAGE", "alpine/nikto")

    # Process limits
    SCAN_TOOL_TIMEOUT_SEC: int = int(os.getenv("SCAN_TOOL_TIMEOUT_SEC", "3600"))
    MAX_CONCURRENT_PROCESSES: int = int(os.getenv("MAX_CONCURRENT_PROCESSES", "4"))
    MAX_PARALLEL_TOOLS: int = int(os.getenv("MAX_PARALLEL_TOOLS", "1"))

    # Callback
    CALLBACK_TIMEOUT_SEC: float = float(os.getenv("CALLBACK_TIMEOUT_SEC", "10"))

    # Request handling
    REJECT_UNSUPPORTED_TOOLS: bool = _env_bool("REJECT_UNSUPPORTED_TOOLS")
    SCAN_EXECUTION_MODE: str = os.getenv("SCAN_EXECUTION_MODE", "background")


settings = Settings()
