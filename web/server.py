import aiohttp.web

STORE_KEY = aiohttp.web.AppKey("store", object)


async def handle_root(_):
    return aiohttp.web.Response(text="✅ Sticky bot is alive")


async def handle_stickies(request: aiohttp.web.Request):
    store = request.app[STORE_KEY]
    channels = {
        channel_id: {
            "lastMessageId": config.last_message_id,
            "renderAsRichCard": config.render_as_rich_card,
        }
        for channel_id, config in store.items()
    }
    return aiohttp.web.json_response({"count": len(channels), "channels": channels})


def make_app(store):
    app = aiohttp.web.Application()
    app[STORE_KEY] = store
    app.router.add_get("/", handle_root)
    app.router.add_get("/stickies", handle_stickies)
    return app
