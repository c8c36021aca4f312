"""斗地主房间服务 - 主入口"""

import argparse
import logging

import uvicorn

from doudizhu import config


def main():
    """命令行入口"""
    parser = argparse.ArgumentParser(description="斗地主房间服务")
    parser.add_argument("--host", default=config.HOST, help=f"监听地址 (默认{config.HOST})")
    parser.add_argument("--port", type=int, default=config.PORT, help=f"监听端口 (默认{config.PORT})")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="日志级别 (默认INFO)")
    args = parser.parse_args()

    level = args.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("斗地主服务运行在 http://%s:%d", args.host, args.port)

    uvicorn.run("doudizhu.web.server:app", host=args.host, port=args.port, log_level=level.lower())


if __name__ == "__main__":
    main()
