from __future__ import annotations

import unittest

from ovhterm.commands import CommandFacade, default_registry
from ovhterm.commands.account import format_account, show_account
from ovhterm.commands.api_info import fetch_api_info, format_api_info, group_by_application, show_api_info
from ovhterm.commands.resources import (
    DEDICATED_SERVERS,
    DOMAINS,
    VPS,
    list_resources,
    lookup,
    show_resource,
)
from ovhterm.menu import MenuTreeModel, default_menu_nodes
from ovhterm.remote import ApiError

from fakes import ACCOUNT, FakeSource, account_routes


class AccountCommandTest(unittest.TestCase):
    def test_profile_sections_and_fields(self) -> None:
        text = format_account(ACCOUNT)
        self.assertIn("Account Details\n===============\n", text)
        self.assertIn("NIC Handle:       xx1234-ovh\n", text)
        self.assertIn("KYC Validated:    yes", text)
        self.assertIn("Currency:        EUR (EURO)", text)
        self.assertIn("Ada Lovelace", text)
        self.assertIn("+33.123456789 (FR)", text)
        self.assertLess(text.index("Company Information"), text.index("Personal Information"))
        self.assertLess(text.index("Personal Information"), text.index("Address"))

    def test_empty_fields_and_sections_are_skipped(self) -> None:
        text = format_account({"nichandle": "ab1-ovh"})
        self.assertIn("NIC Handle:", text)
        self.assertNotIn("Company Information", text)
        self.assertNotIn("Customer Code", text)

    def test_show_account_fetches_me(self) -> None:
        source = FakeSource(account_routes())
        output = show_account(source)
        self.assertEqual(source.calls, [("GET", "/me")])
        self.assertEqual(output.payload["nichandle"], "xx1234-ovh")


class ApiInfoCommandTest(unittest.TestCase):
    def test_credentials_grouped_under_applications(self) -> None:
        data = fetch_api_info(FakeSource(account_routes()))
        grouped = group_by_application(data["applications"], data["credentials"])
        self.assertEqual(sorted(grouped), [7, 115])
        self.assertEqual(grouped[115][0]["name"], "OVH Website")
        self.assertEqual([c["credentialId"] for c in grouped[7][1]], [70])

    def test_unknown_application_placeholder(self) -> None:
        grouped = group_by_application({}, {1: {"credentialId": 1, "applicationId": 999}})
        self.assertEqual(grouped[999][0]["name"], "Unknown Application")

    def test_report_lists_applications_and_rules(self) -> None:
        output = show_api_info(FakeSource(account_routes()))
        self.assertIn("Application: dashboard", output.text)
        self.assertIn("Application: OVH Website", output.text)
        self.assertIn("• GET /*", output.text)
        self.assertIn("OVH Support access enabled", output.text)
        self.assertEqual(len(output.payload["credentials"]), 2)

    def test_unreadable_detail_is_skipped(self) -> None:
        routes = account_routes()
        routes["/me/api/credential/71"] = ApiError("gone", status=404)
        data = fetch_api_info(FakeSource(routes))
        self.assertEqual(sorted(data["credentials"]), [70])
        self.assertNotIn("OVH Website", format_api_info(data))

    def test_no_applications(self) -> None:
        source = FakeSource({"/me/api/application": [], "/me/api/credential": []})
        self.assertEqual(show_api_info(source).text, "No API applications found.\n")


class ResourceCommandTest(unittest.TestCase):
    def test_lookup_walks_dotted_paths(self) -> None:
        data = {"iam": {"displayName": "web"}, "name": "n"}
        self.assertEqual(lookup(data, "iam.displayName"), "web")
        self.assertIsNone(lookup(data, "iam.missing"))
        self.assertIsNone(lookup(data, "name.deeper"))

    def test_servers_are_labeled_from_details(self) -> None:
        entries = list_resources(DEDICATED_SERVERS, FakeSource(account_routes()))
        by_id = {entry.resource_id: entry for entry in entries}
        self.assertEqual(by_id["ns1.ip-1-2-3.eu"].display_name, "web-front")
        self.assertEqual(by_id["ns1.ip-1-2-3.eu"].description, "gra3 / ok")
        self.assertEqual(by_id["ns2.ip-1-2-3.eu"].display_name, "db.example.com")
        self.assertEqual(by_id["ns2.ip-1-2-3.eu"].binding, "dedicated_servers:detail")

    def test_label_falls_back_to_identifier(self) -> None:
        routes = account_routes()
        routes["/dedicated/server/ns2.ip-1-2-3.eu"] = ApiError("denied", status=403)
        entries = list_resources(DEDICATED_SERVERS, FakeSource(routes))
        labels = {entry.resource_id: entry.display_name for entry in entries}
        self.assertEqual(labels["ns2.ip-1-2-3.eu"], "ns2.ip-1-2-3.eu")

    def test_kinds_without_labels_skip_detail_fetch(self) -> None:
        source = FakeSource(account_routes())
        entries = list_resources(DOMAINS, source)
        self.assertEqual([entry.display_name for entry in entries], ["example.com", "example.org"])
        self.assertEqual(source.calls, [("GET", "/domain")])
        self.assertEqual(list_resources(VPS, source), [])

    def test_detail_report(self) -> None:
        output = show_resource(DOMAINS, FakeSource(account_routes()), "example.com")
        self.assertIn("Domain: example.com", output.text)
        self.assertIn("Transfer Lock:", output.text)
        self.assertEqual(output.payload["offer"], "gold")

    def test_detail_requires_identifier(self) -> None:
        with self.assertRaises(ValueError):
            show_resource(DOMAINS, FakeSource(), None)


class DefaultRegistryTest(unittest.TestCase):
    def test_every_menu_leaf_and_loader_is_bound(self) -> None:
        registry = default_registry()
        for key in ("My information", "API information", "domains:detail", "vps:detail"):
            self.assertIn(key, registry)
        for loader in ("dedicated_servers", "vps", "domains", "hosting"):
            self.assertIsNotNone(registry.resolve_list(loader))
        self.assertNotIn("Exit", registry)

    def test_menu_children_come_from_list_operations(self) -> None:
        facade = CommandFacade(FakeSource(account_routes()), default_registry())
        menu = MenuTreeModel(default_menu_nodes(), facade.list_resources)
        menu.toggle_expanded(1)
        menu.rebuild()
        menu.toggle_expanded([item.title for item in menu.items].index("Dedicated Servers"))
        menu.rebuild()
        titles = [item.title for item in menu.items]
        start = titles.index("Dedicated Servers") + 1
        self.assertEqual(titles[start : start + 2], ["db.example.com", "web-front"])
        result = facade.execute(menu.items[start])
        self.assertTrue(result.ok)
        self.assertIn("Dedicated server: ns2.ip-1-2-3.eu", result.output)


if __name__ == "__main__":
    unittest.main()
