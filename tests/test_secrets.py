import base64
import copy
import unittest

import yaml

from src.intent import DeploymentIntent
from src.middleware import ParseError, process
from src.middleware.secrets import flatten_secret


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _config_bundle(data, name="registry-quay-config-secret-7k9f2"):
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {"name": name},
        "data": {key: _b64(value) for key, value in data.items()},
    }


def _config(secret):
    return yaml.safe_load(base64.b64decode(secret["data"]["config.yaml"]))


class FlattenSecretTests(unittest.TestCase):
    def test_fragment_is_merged_and_removed(self) -> None:
        secret = _config_bundle({"config.yaml": "a: 1\n", "x.config.yaml": "b: 2\n"})
        result = process(DeploymentIntent(), secret)
        self.assertEqual(_config(result), {"a": 1, "b": 2})
        self.assertEqual(set(result["data"]), {"config.yaml"})

    def test_raw_bytes_values_are_accepted(self) -> None:
        secret = _config_bundle({})
        secret["data"] = {"config.yaml": b"a: 1\n", "x.config.yaml": b"b: 2\n"}
        result = process(DeploymentIntent(), secret)
        self.assertEqual(set(result["data"]), {"config.yaml"})
        self.assertIsInstance(result["data"]["config.yaml"], str)
        self.assertEqual(_config(result), {"a": 1, "b": 2})

    def test_input_secret_is_not_modified(self) -> None:
        secret = _config_bundle({"config.yaml": "a: 1\n", "x.config.yaml": "b: 2\n", "ssl.key": "k"})
        snapshot = copy.deepcopy(secret)
        process(DeploymentIntent(), secret)
        self.assertEqual(secret, snapshot)

    def test_collisions_resolve_in_key_order(self) -> None:
        secret = _config_bundle(
            {
                "config.yaml": "SERVER_HOSTNAME: base\nKEEP: kept\n",
                "redis.config.yaml": "SERVER_HOSTNAME: redis\n",
                "clair.config.yaml": "SERVER_HOSTNAME: clair\nFEATURE_SECURITY_SCANNER: true\n",
            }
        )
        config = _config(flatten_secret(secret))
        self.assertEqual(config["SERVER_HOSTNAME"], "redis")
        self.assertEqual(config["KEEP"], "kept")
        self.assertIs(config["FEATURE_SECURITY_SCANNER"], True)

    def test_tls_and_ca_keys_are_stripped(self) -> None:
        secret = _config_bundle(
            {
                "config.yaml": "a: 1\n",
                "ssl.cert": "cert",
                "ssl.key": "key",
                "clair-ssl.key": "key",
                "clair-ssl.crt": "cert",
                "extra_ca_cert_internal.crt": "ca",
                "extra_ca_cert_other": "ca",
                "route.config.yaml": "b: 2\n",
                "custom.txt": "kept",
            }
        )
        result = flatten_secret(secret)
        self.assertEqual(set(result["data"]), {"config.yaml", "custom.txt"})
        self.assertEqual(_config(result), {"a": 1, "b": 2})

    def test_missing_base_payload_starts_empty(self) -> None:
        secret = _config_bundle({"mirror.config.yaml": "FEATURE_REPO_MIRROR: true\n"})
        self.assertEqual(_config(flatten_secret(secret)), {"FEATURE_REPO_MIRROR": True})

    def test_malformed_payloads_raise_parse_error(self) -> None:
        cases = [
            _config_bundle({"config.yaml": "a: [1, 2\n"}),
            _config_bundle({"config.yaml": "- 1\n- 2\n"}),
            _config_bundle({"config.yaml": "a: 1\n", "x.config.yaml": "b: {\n"}),
        ]
        invalid_base64 = _config_bundle({"config.yaml": "a: 1\n"})
        invalid_base64["data"]["config.yaml"] = "not base64!"
        cases.append(invalid_base64)
        for secret in cases:
            with self.subTest(data=secret["data"]):
                with self.assertRaises(ParseError):
                    process(DeploymentIntent(), secret)

    def test_unrelated_secret_is_returned_as_is(self) -> None:
        secret = _config_bundle({"config.yaml": "a: 1\n", "ssl.key": "k"}, name="registry-quay-postgres-secret")
        self.assertIs(process(DeploymentIntent(), secret), secret)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
