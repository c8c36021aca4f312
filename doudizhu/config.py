"""运行配置 - 从环境变量读取"""

import os

HOST = os.getenv("DOUDIZHU_HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("DOUDIZHU_LOG_LEVEL", "INFO").upper()

# 房间号长度
ROOM_ID_LENGTH = int(os.getenv("DOUDIZHU_ROOM_ID_LENGTH", "6"))
