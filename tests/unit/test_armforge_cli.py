"""Unit tests for armforge.py CLI commands."""

import json
import sys
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

from click.testing import CliRunner

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from armforge import cli
from modules.exceptions import ConflictingInputError

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
CLEAN_ENV = {
    "AZURE_SUBSCRIPTION_ID": None,
    "AZURE_ACCESS_TOKEN": None,
    "ARMFORGE_ARM_ENDPOINT": None,
    "ARMFORGE_TIMEOUT": None,
}


class CliTestCase(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()
        self.tmp = TemporaryDirectory()
        self.outfile = str(Path(self.tmp.name) / "record.json")

    def tearDown(self):
        self.tmp.cleanup()

    def invoke(self, *args):
        return self.runner.invoke(cli, list(args), env=CLEAN_ENV)

    def written(self):
        with open(self.outfile) as f:
            return json.load(f)


class TestVmssConfigCommand(CliTestCase):
    """Test the vmss-config command."""

    def test_no_options(self):
        result = self.invoke("vmss-config", "--outfile", self.outfile)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.written(), {"upgradePolicy": {"automaticOSUpgrade": False}})

    def test_options_map_to_record(self):
        result = self.invoke(
            "vmss-config",
            "--location", "westeurope",
            "--sku-name", "Standard_D2s_v3",
            "--sku-capacity", "2",
            "--tag", "env=prod",
            "--zone", "1",
            "--zone", "2",
            "--upgrade-policy-mode", "rolling",
            "--auto-os-upgrade",
            "--no-overprovision",
            "--health-probe-id", "/probes/p1",
            "--os-profile", str(FIXTURES_DIR / "os_profile.yaml"),
            "--network-interface-configuration", str(FIXTURES_DIR / "nic_configs.yaml"),
            "--outfile", self.outfile,
        )
        self.assertEqual(result.exit_code, 0, result.output)
        record = self.written()
        self.assertEqual(record["location"], "westeurope")
        self.assertEqual(record["sku"], {"name": "Standard_D2s_v3", "capacity": 2})
        self.assertEqual(record["tags"], {"env": "prod"})
        self.assertEqual(record["zones"], ["1", "2"])
        self.assertIs(record["overprovision"], False)
        self.assertEqual(
            record["upgradePolicy"], {"mode": "Rolling", "automaticOSUpgrade": True}
        )
        profile = record["virtualMachineProfile"]
        self.assertEqual(profile["osProfile"]["computerNamePrefix"], "web")
        self.assertEqual(profile["networkProfile"]["healthProbe"], {"id": "/probes/p1"})
        self.assertEqual(len(profile["networkProfile"]["networkInterfaceConfigurations"]), 2)
        self.assertNotIn("plan", record)
        self.assertNotIn("identity", record)

    def test_rolling_upgrade_policy_document(self):
        result = self.invoke(
            "vmss-config",
            "--rolling-upgrade-policy", str(FIXTURES_DIR / "rolling_upgrade_policy.json"),
            "--disable-auto-rollback",
            "--outfile", self.outfile,
        )
        self.assertEqual(result.exit_code, 0, result.output)
        policy = self.written()["upgradePolicy"]
        self.assertEqual(policy["rollingUpgradePolicy"]["maxBatchInstancePercent"], 20)
        self.assertEqual(policy["autoOSUpgradePolicy"], {"disableAutoRollback": True})
        self.assertIs(policy["automaticOSUpgrade"], False)

    def test_account_type_alias(self):
        result = self.invoke("vmss-config", "--account-type", "Standard_B1s", "--outfile", self.outfile)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(self.written()["sku"], {"name": "Standard_B1s"})

    def test_bad_tag(self):
        result = self.invoke("vmss-config", "--tag", "novalue")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("ERROR", result.output)
        self.assertIn("novalue", result.output)

    def test_missing_document(self):
        result = self.invoke("vmss-config", "--os-profile", "/does/not/exist.yaml")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("OsProfile", result.output)

    def test_invalid_choice(self):
        result = self.invoke("vmss-config", "--eviction-policy", "Hibernate")
        self.assertEqual(result.exit_code, 2)

    def test_submit_requires_subscription(self):
        result = self.invoke("vmss-config", "--submit", "--resource-group", "rg1", "--name", "ss1")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("SubscriptionId", result.output)

    @patch("armforge.ArmClient")
    def test_submit(self, client_cls):
        client_cls.return_value.put_resource.return_value = {"id": "ss1"}
        result = self.invoke(
            "vmss-config",
            "--location", "eastus",
            "--overprovision",
            "--submit",
            "--subscription-id", "0000",
            "--resource-group", "rg1",
            "--name", "ss1",
            "--access-token", "token",
        )
        self.assertEqual(result.exit_code, 0, result.output)
        client_cls.assert_called_once_with(
            "token", endpoint="https://management.azure.com", timeout=60
        )
        target, body, api_version = client_cls.return_value.put_resource.call_args[0]
        self.assertEqual(
            target,
            "/subscriptions/0000/resourceGroups/rg1/providers/Microsoft.Compute/virtualMachineScaleSets/ss1",
        )
        self.assertEqual(body["location"], "eastus")
        self.assertTrue(body["properties"]["overprovision"])
        self.assertEqual(api_version, "2018-04-01")


class TestFirewallAppRuleCommand(CliTestCase):
    """Test the firewall-app-rule command."""

    def test_target_fqdn_rule(self):
        result = self.invoke(
            "firewall-app-rule",
            "--name", "rule1",
            "--source-address", "10.0.0.0/24",
            "--target-fqdn", "a.com",
            "--protocol", "HtTpS:8443",
            "--protocol", "http",
            "--outfile", self.outfile,
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(
            self.written(),
            {
                "name": "rule1",
                "sourceAddresses": ["10.0.0.0/24"],
                "targetFqdns": ["a.com"],
                "protocols": [
                    {"protocolType": "Https", "port": 8443},
                    {"protocolType": "Http", "port": 80},
                ],
            },
        )

    def test_fqdn_tag_rule(self):
        result = self.invoke(
            "firewall-app-rule", "--name", "rule1", "--fqdn-tag", "windowsupdate",
            "--outfile", self.outfile,
        )
        self.assertEqual(result.exit_code, 0, result.output)
        record = self.written()
        self.assertEqual(record["fqdnTags"], ["WindowsUpdate"])
        self.assertNotIn("targetFqdns", record)
        self.assertEqual([p["port"] for p in record["protocols"]], [80, 443])

    def test_conflicting_inputs(self):
        result = self.invoke(
            "firewall-app-rule", "--name", "rule1", "--fqdn-tag", "AzureBackup",
            "--target-fqdn", "a.com",
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("cannot be specified in the same rule", result.output)

    def test_tag_with_protocol(self):
        result = self.invoke(
            "firewall-app-rule", "--name", "rule1", "--fqdn-tag", "AzureBackup",
            "--protocol", "http",
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Protocol parameter is not allowed", result.output)

    def test_unsupported_protocol(self):
        result = self.invoke(
            "firewall-app-rule", "--name", "rule1", "--target-fqdn", "a.com",
            "--protocol", "ftp",
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("http, https", result.output)

    def test_port_zero_rejected(self):
        result = self.invoke(
            "firewall-app-rule", "--name", "rule1", "--target-fqdn", "a.com",
            "--protocol", "http:0",
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Invalid port http:0", result.output)

    def test_name_required(self):
        result = self.invoke("firewall-app-rule", "--target-fqdn", "a.com")
        self.assertEqual(result.exit_code, 2)

    def test_debug_reraises(self):
        result = self.invoke(
            "firewall-app-rule", "--debug", "--name", "rule1", "--fqdn-tag", "AzureBackup",
            "--target-fqdn", "a.com",
        )
        self.assertIsInstance(result.exception, ConflictingInputError)


class TestFqdnTagsCommand(CliTestCase):
    def test_lists_tags(self):
        result = self.invoke("fqdn-tags")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("WindowsUpdate", result.output)
        self.assertIn("AzureKubernetesService", result.output)


if __name__ == "__main__":
    unittest.main()
