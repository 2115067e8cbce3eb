#!/usr/bin/env python3
"""
FastAPIサーバーを起動するエントリポイント
"""
import sys
from pathlib import Path

# プロジェクトルートをPYTHONPATHに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import uvicorn

from infrastructure.config.app_settings import AppSettings

if __name__ == "__main__":
    settings = AppSettings.from_env()
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
