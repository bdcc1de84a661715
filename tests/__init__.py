import nonebot

# 插件模块在导入时会读取 driver 配置，这里先用空驱动初始化
nonebot.init(driver="~none")
