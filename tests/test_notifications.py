import json

import httpx

from storefront.services.notifications import SlackNotifier


async def test_send_posts_text_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, text="ok")

    notifier = SlackNotifier("https://hooks.test/T000", transport=httpx.MockTransport(handler))

    assert await notifier.send("NEW ORDER") is True
    assert seen == {"url": "https://hooks.test/T000", "body": {"text": "NEW ORDER"}}
    await notifier.close()


async def test_unconfigured_webhook_is_skipped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    notifier = SlackNotifier(None, transport=httpx.MockTransport(handler))

    assert await notifier.send("NEW ORDER") is False


async def test_webhook_failure_does_not_raise():
    notifier = SlackNotifier(
        "https://hooks.test/T000",
        transport=httpx.MockTransport(lambda request: httpx.Response(500, text="boom")),
    )

    assert await notifier.send("NEW ORDER") is False
