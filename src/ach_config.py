import json
import logging
import os
from datetime import date, datetime
from typing import Any, Mapping

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from dotenv import load_dotenv

from nacha_records import BatchConfig, InvalidBatchConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "ACH_"
SSM_PARAMETER = "ach/originator"


class OriginatorConfig:
    """Per-organization settings written into every exported file."""

    FIELDS = (
        "company_name",
        "company_id",
        "destination_routing",
        "destination_name",
        "origin_id",
        "origin_name",
        "originating_dfi_id",
        "entry_description",
    )

    def __init__(self, settings: Mapping[str, Any]):
        missing = [name for name in self.FIELDS if not settings.get(name)]
        if missing:
            raise InvalidBatchConfig(
                f"Missing originator settings: {', '.join(missing)}"
            )
        self._settings = {name: str(settings[name]).strip() for name in self.FIELDS}

    def __getattr__(self, name: str) -> str:
        if name in OriginatorConfig.FIELDS:
            return self._settings[name]
        raise AttributeError(name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OriginatorConfig":
        return cls(data)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "OriginatorConfig":
        """Read ACH_COMPANY_NAME, ACH_COMPANY_ID, ... (a .env file is honored)."""
        if environ is None:
            load_dotenv()
            environ = os.environ
        return cls(
            {name: environ.get(ENV_PREFIX + name.upper()) for name in cls.FIELDS}
        )

    @classmethod
    def load(cls, prefix: str = "/prod", ssm_client: Any = None) -> "OriginatorConfig":
        """Load settings from SSM Parameter Store, falling back to the environment."""
        name = f"{prefix.rstrip('/')}/{SSM_PARAMETER}"
        try:
            client = ssm_client or boto3.client("ssm")
            response = client.get_parameter(Name=name, WithDecryption=True)
            return cls(json.loads(response["Parameter"]["Value"]))
        except (BotoCoreError, ClientError, KeyError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load originator configuration {name}: {str(e)}")
            logger.warning("Using environment originator configuration")
            return cls.from_env()

    def batch_config(
        self, effective_date: date, created_at: datetime, batch_number: int = 1
    ) -> BatchConfig:
        return BatchConfig(
            effective_date=effective_date,
            created_at=created_at,
            batch_number=batch_number,
            **self._settings,
        )

    def as_dict(self) -> dict[str, str]:
        return dict(self._settings)
