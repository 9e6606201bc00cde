import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

TRUE_VALUES = ("true", "1", "yes", "on")


class ConfigurationError(RuntimeError):
    """Webhook URL が解決できないときに投げる"""


@dataclass(frozen=True)
class NotifierConfig:
    webhook_url: Optional[str] = None
    webhook_ssm_param_name: Optional[str] = None
    environment: Optional[str] = None
    debug: bool = False
    enrichment_enabled: bool = True
    thread_hint_enabled: bool = True


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in TRUE_VALUES


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def load_config(environ: Optional[Mapping[str, str]] = None) -> NotifierConfig:
    """
    環境変数から NotifierConfig を組み立てる。
    テストでは dict を渡せば os.environ を触らずに済む。
    """
    env = os.environ if environ is None else environ

    return NotifierConfig(
        webhook_url=_blank_to_none(env.get("SLACK_WEBHOOK_URL")),
        webhook_ssm_param_name=_blank_to_none(env.get("SLACK_WEBHOOK_SSM_PARAM_NAME")),
        environment=_blank_to_none(env.get("ENVIRONMENT")),
        debug=_flag(env.get("DEBUG"), False),
        enrichment_enabled=_flag(env.get("ENABLE_ENRICHMENT"), True),
        thread_hint_enabled=_flag(env.get("SLACK_THREAD_HINT"), True),
    )


def resolve_webhook_url(config: NotifierConfig, ssm_client: Any = None) -> Optional[str]:
    """
    Webhook URL を決める。
    SLACK_WEBHOOK_URL が最優先。無ければ SSM パラメータを見る。
    どちらも無ければ None (呼び出し側で 500 にする)。
    """
    if config.webhook_url:
        return config.webhook_url

    param_name = config.webhook_ssm_param_name
    if not param_name:
        return None

    try:
        # リージョン未設定 (NoRegionError) もここで拾う
        ssm = ssm_client or boto3.client("ssm")
        res = ssm.get_parameter(
            Name=param_name,
            WithDecryption=True,
        )
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "Unknown")
        message = e.response.get("Error", {}).get("Message", "")
        logger.error(
            "Failed to get SSM parameter: name=%s region=%s code=%s message=%s",
            param_name,
            ssm.meta.region_name,
            code,
            message,
        )
        raise ConfigurationError(f"Failed to read SSM parameter {param_name}") from e
    except BotoCoreError as e:
        logger.error("Failed to get SSM parameter: name=%s error=%s", param_name, e)
        raise ConfigurationError(f"Failed to read SSM parameter {param_name}") from e

    webhook = res.get("Parameter", {}).get("Value", "").strip()

    if not webhook:
        logger.error(
            "SSM parameter is empty: name=%s region=%s",
            param_name,
            ssm.meta.region_name,
        )
        raise ConfigurationError("Webhook URL from SSM is empty")

    return webhook
