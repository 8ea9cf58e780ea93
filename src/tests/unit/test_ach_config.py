import json
import os
import unittest
from datetime import date, datetime
from unittest.mock import MagicMock, patch

from botocore.exceptions import ClientError

from ach_config import OriginatorConfig
from nacha_records import BatchConfig, InvalidBatchConfig

SETTINGS = {
    "company_name": "PAY IT FORWARD HS",
    "company_id": "1234567890",
    "destination_routing": "123456789",
    "destination_name": "DEST BANK NAME",
    "origin_id": "987654321",
    "origin_name": "PAY IT FORWARD HS",
    "originating_dfi_id": "12345678",
    "entry_description": "PAYMENT",
}


class TestOriginatorConfig(unittest.TestCase):
    def test_from_dict(self) -> None:
        config = OriginatorConfig.from_dict(SETTINGS)
        self.assertEqual(config.company_name, "PAY IT FORWARD HS")
        self.assertEqual(config.as_dict(), SETTINGS)

    def test_missing_fields_raise(self) -> None:
        settings = dict(SETTINGS)
        del settings["company_id"]
        settings["origin_id"] = ""
        with self.assertRaises(InvalidBatchConfig) as ctx:
            OriginatorConfig.from_dict(settings)
        self.assertIn("company_id", str(ctx.exception))
        self.assertIn("origin_id", str(ctx.exception))

    def test_batch_config(self) -> None:
        config = OriginatorConfig.from_dict(SETTINGS).batch_config(
            date(2024, 1, 16), datetime(2024, 1, 15, 10, 0), batch_number=3
        )
        self.assertIsInstance(config, BatchConfig)
        self.assertEqual(config.batch_number, 3)
        self.assertEqual(config.originating_dfi_id, "12345678")

    def test_batch_config_validates_settings(self) -> None:
        settings = dict(SETTINGS, destination_routing="12-3456789")
        with self.assertRaises(InvalidBatchConfig):
            OriginatorConfig.from_dict(settings).batch_config(
                date(2024, 1, 16), datetime(2024, 1, 15, 10, 0)
            )

    def test_from_env(self) -> None:
        environ = {f"ACH_{name.upper()}": value for name, value in SETTINGS.items()}
        config = OriginatorConfig.from_env(environ)
        self.assertEqual(config.destination_name, "DEST BANK NAME")

    def test_load_from_ssm(self) -> None:
        ssm = MagicMock()
        ssm.get_parameter.return_value = {"Parameter": {"Value": json.dumps(SETTINGS)}}

        config = OriginatorConfig.load(prefix="/prod", ssm_client=ssm)

        ssm.get_parameter.assert_called_once_with(
            Name="/prod/ach/originator", WithDecryption=True
        )
        self.assertEqual(config.origin_id, "987654321")

    @patch("ach_config.load_dotenv")
    def test_load_falls_back_to_environment(self, mock_load_dotenv: MagicMock) -> None:
        ssm = MagicMock()
        ssm.get_parameter.side_effect = ClientError(
            {"Error": {"Code": "ParameterNotFound", "Message": "not found"}},
            "GetParameter",
        )
        environ = {f"ACH_{name.upper()}": value for name, value in SETTINGS.items()}

        with patch.dict(os.environ, environ):
            config = OriginatorConfig.load(ssm_client=ssm)

        mock_load_dotenv.assert_called_once()
        self.assertEqual(config.company_id, "1234567890")

    def test_unknown_attribute(self) -> None:
        config = OriginatorConfig.from_dict(SETTINGS)
        with self.assertRaises(AttributeError):
            config.not_a_setting


if __name__ == "__main__":
    unittest.main()
