import sys
import os
from pathlib import Path

# 确保项目根目录在Python路径中
current_dir = Path(__file__).resolve().parent
project_root = current_dir.parent
sys.path.insert(0, str(project_root))

os.environ.setdefault("LOG_LEVEL", "INFO")

from omni_relay.main import app

__all__ = ["app"]
