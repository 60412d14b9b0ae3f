"""Fakes shared by the test modules."""
import asyncio
import inspect


def call_tool(tool, **kwargs):
    """Invoke an MCP tool's underlying function, whether or not the decorator wrapped it."""
    fn = getattr(tool, "fn", tool)
    result = fn(**kwargs)
    if inspect.iscoroutine(result):
        return asyncio.run(result)
    return result


class FakeResponse:
    def __init__(self, status_code=200, payload=None, links=None, text="", reason="OK"):
        self.status_code = status_code
        self._payload = payload if payload is not None else {}
        self.links = links or {}
        self.text = text
        self.reason = reason

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        return self._payload


class FakeExecutor:
    """Stands in for execute_gaql: records every query and replies with canned rows.

    Responses are consumed in order; the last one repeats.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, customer_id, query, manager_id=""):
        self.calls.append({"customer_id": customer_id, "query": query, "manager_id": manager_id})
        rows = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        return {"results": rows, "totalRows": len(rows), "query": query}


def campaign_row(cid, name, cost_micros, clicks, impressions, conversions, value, status="ENABLED"):
    return {
        "campaign": {"id": str(cid), "name": name, "status": status, "advertisingChannelType": "SEARCH"},
        "metrics": {
            "costMicros": str(cost_micros),
            "clicks": str(clicks),
            "impressions": str(impressions),
            "conversions": conversions,
            "conversionsValue": value,
        },
    }


def product_row(item_id, title, cost_micros, clicks, impressions, conversions, value):
    return {
        "segments": {"productItemId": item_id, "productTitle": title},
        "metrics": {
            "costMicros": str(cost_micros),
            "clicks": str(clicks),
            "impressions": str(impressions),
            "conversions": conversions,
            "conversionsValue": value,
        },
    }


class FakeContext:
    """Collects the progress and error messages a tool sends to the MCP client."""

    def __init__(self):
        self.infos = []
        self.errors = []

    async def info(self, message):
        self.infos.append(message)

    async def error(self, message):
        self.errors.append(message)
