import json
import unittest

from fake_wix import FakeWixApi
from wix_mcp.client import WixClient, stringify_query_value
from wix_mcp.config import WixConfig
from wix_mcp.exceptions import InvalidRequestError, TransportError
from wix_mcp.models import HTTPMethod, RawText, RequestSpec, StructuredValue


class TestWixClient(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.api = FakeWixApi()
        base_url = await self.api.start()
        self.config = WixConfig(access_token="secret-token", default_site_id="default-site", base_url=base_url)
        self.client = WixClient(self.config)

    async def asyncTearDown(self):
        await self.api.close()

    async def test_get_site_properties(self):
        """A plain GET returns the parsed JSON body."""
        self.api.respond(200, '{"id":"abc"}')
        spec = RequestSpec(method=HTTPMethod.GET, path="/site-properties/v4/sites/abc")

        envelope = await self.client.request(spec)

        self.assertEqual(len(self.api.requests), 1)
        self.assertEqual(self.api.last.method, "GET")
        self.assertEqual(self.api.last.path, "/site-properties/v4/sites/abc")
        self.assertEqual(envelope.status, 200)
        self.assertEqual(envelope.data, StructuredValue({"id": "abc"}))
        self.assertTrue(envelope.ok)

    async def test_query_parameters_are_string_coerced(self):
        spec = RequestSpec(
            method=HTTPMethod.GET,
            path="/stores/v1/products",
            query={"limit": 10, "name": "blue shirt", "visible": True, "cursor": None},
        )

        await self.client.request(spec)

        query = self.api.last.query
        self.assertEqual(list(query.keys()), ["limit", "name", "visible", "cursor"])
        self.assertEqual(query["limit"], "10")
        self.assertEqual(query["name"], "blue shirt")
        self.assertEqual(query["visible"], "true")
        self.assertEqual(query["cursor"], "null")

    async def test_query_replaces_parameter_already_in_path(self):
        spec = RequestSpec(method=HTTPMethod.GET, path="/items?limit=5&offset=2", query={"limit": 50})

        await self.client.request(spec)

        self.assertEqual(self.api.last.query.getall("limit"), ["50"])
        self.assertEqual(self.api.last.query["offset"], "2")

    async def test_default_headers(self):
        await self.client.request(RequestSpec(method=HTTPMethod.GET, path="/x"))

        headers = self.api.last.headers
        self.assertEqual(headers["Authorization"], "Bearer secret-token")
        self.assertEqual(headers["Content-Type"], "application/json")
        self.assertEqual(headers["wix-site-id"], "default-site")

    async def test_site_id_argument_beats_default(self):
        spec = RequestSpec(method=HTTPMethod.GET, path="/x", site_id="other-site")

        await self.client.request(spec)

        self.assertEqual(self.api.last.headers.getall("wix-site-id"), ["other-site"])

    async def test_no_tenant_header_without_any_site_id(self):
        client = WixClient(WixConfig(access_token="t", base_url=self.config.base_url))

        await client.request(RequestSpec(method=HTTPMethod.GET, path="/x"))

        self.assertNotIn("wix-site-id", self.api.last.headers)

    async def test_caller_headers_override_defaults_case_insensitively(self):
        spec = RequestSpec(
            method=HTTPMethod.GET,
            path="/x",
            headers={"authorization": "Bearer caller", "X-Extra": "1"},
        )

        await self.client.request(spec)

        headers = self.api.last.headers
        self.assertEqual(headers.getall("Authorization"), ["Bearer caller"])
        self.assertEqual(headers["X-Extra"], "1")

    async def test_caller_tenant_header_suppresses_injection(self):
        spec = RequestSpec(
            method=HTTPMethod.GET,
            path="/x",
            headers={"WIX-SITE-ID": "from-header"},
            site_id="from-argument",
        )

        await self.client.request(spec)

        self.assertEqual(self.api.last.headers.getall("wix-site-id"), ["from-header"])

    async def test_get_and_delete_never_send_body(self):
        for method in (HTTPMethod.GET, HTTPMethod.DELETE):
            with self.subTest(method=method):
                await self.client.request(RequestSpec(method=method, path="/x", body={"ignored": True}))
                self.assertEqual(self.api.last.method, method.value)
                self.assertEqual(self.api.last.body, b"")

    async def test_post_put_patch_send_json_body(self):
        body = {"item": {"title": "Hello", "tags": ["a", "b"]}, "count": 2}
        for method in (HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH):
            with self.subTest(method=method):
                await self.client.request(RequestSpec(method=method, path="/x", body=body))
                self.assertEqual(self.api.last.method, method.value)
                self.assertEqual(json.loads(self.api.last.body), body)

    async def test_empty_object_body_is_sent(self):
        await self.client.request(RequestSpec(method=HTTPMethod.POST, path="/x", body={}))

        self.assertEqual(self.api.last.body, b"{}")

    async def test_non_json_error_body_is_kept_verbatim(self):
        self.api.respond(404, "Not Found")

        envelope = await self.client.request(RequestSpec(method=HTTPMethod.GET, path="/missing"))

        self.assertEqual(envelope.status, 404)
        self.assertEqual(envelope.data, RawText("Not Found"))
        self.assertFalse(envelope.ok)

    async def test_empty_body_is_raw_text(self):
        self.api.respond(204, "")

        envelope = await self.client.request(RequestSpec(method=HTTPMethod.DELETE, path="/x"))

        self.assertEqual(envelope.data, RawText(""))
        self.assertTrue(envelope.ok)

    async def test_patch_item_data_wraps_patch(self):
        await self.client.patch_item_data("/content/v4/collections/C/items/1", {"title": "t"})

        self.assertEqual(self.api.last.method, "PATCH")
        self.assertEqual(json.loads(self.api.last.body), {"data": {"title": "t"}})
        self.assertEqual(self.api.last.headers["wix-site-id"], "default-site")

    async def test_timeout_raises_transport_error(self):
        self.api.delay = 0.5
        client = WixClient(WixConfig(access_token="t", base_url=self.config.base_url, timeout=0.05))

        with self.assertRaises(TransportError) as ctx:
            await client.request(RequestSpec(method=HTTPMethod.GET, path="/slow"))
        self.assertEqual(ctx.exception.method, "GET")
        self.assertEqual(ctx.exception.timeout, 0.05)


class TestWixClientTransport(unittest.IsolatedAsyncioTestCase):

    async def test_connection_refused_raises_transport_error(self):
        client = WixClient(WixConfig(access_token="t", base_url="http://127.0.0.1:1", timeout=5))

        with self.assertRaises(TransportError) as ctx:
            await client.request(RequestSpec(method=HTTPMethod.GET, path="/x"))
        self.assertIn("http://127.0.0.1:1/x", ctx.exception.url)


class TestRequestBuilding(unittest.TestCase):

    def setUp(self):
        self.client = WixClient(WixConfig(access_token="t"))

    def test_path_without_leading_slash_is_rejected(self):
        with self.assertRaises(InvalidRequestError):
            RequestSpec(method=HTTPMethod.GET, path="site-properties")

    def test_url_is_base_plus_path(self):
        url = self.client.build_url("/site-properties/v4/sites/abc", {})
        self.assertEqual(str(url), "https://www.wixapis.com/site-properties/v4/sites/abc")

    def test_stringify_query_value(self):
        self.assertEqual(stringify_query_value(False), "false")
        self.assertEqual(stringify_query_value(3), "3")
        self.assertEqual(stringify_query_value("x"), "x")


if __name__ == '__main__':
    unittest.main()
