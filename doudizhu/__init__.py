"""斗地主规则引擎与房间服务"""

__version__ = "0.1.0"
