import nonebot

nonebot.init()

# WhatsApp 连接由外部桥接层建立，连上后调用 require("anti_delete").bind_client(client)
nonebot.load_plugins("plugin")

if __name__ == "__main__":
    nonebot.run()
